"""
Loyalty API endpoints for Brewline.

Handles:
- Points balance, tier progress and history
- Earning, redeeming and bonus point adjustments
- Voucher catalog and claiming vouchers with points
"""
from flask import Blueprint, request, jsonify

from ..extensions import db
from ..middleware.session_auth import require_session
from ..services.loyalty_service import LoyaltyService, tier_progress
from ..services.voucher_service import VoucherService
from ..utils.errors import ErrorCode, bad_request, internal_error, not_found
from ..utils.exceptions import InsufficientPointsError, NotFoundError, ValidationError

loyalty_bp = Blueprint('loyalty', __name__)

POINTS_ACTIONS = ('earn', 'redeem', 'bonus')

# field -> (accepted types, required)
POINTS_FIELDS = {
    'customerId': (str, True),
    'cafeId': (str, True),
    'points': (int, True),
    'description': (str, True),
    'orderId': (str, False),
}

VOUCHER_FIELDS = {
    'customerId': (str, True),
    'cafeId': (str, True),
    'type': (str, True),
    'value': ((int, float), True),
    'pointsCost': (int, True),
}


def validate_payload(data: dict, fields: dict) -> dict:
    """
    Check required fields and types.

    Returns:
        Dict of field -> problem; empty when the payload is valid
    """
    problems = {}
    for name, (types, required) in fields.items():
        value = data.get(name)
        if value is None:
            if required:
                problems[name] = 'Required'
            continue
        if isinstance(value, bool) or not isinstance(value, types):
            problems[name] = 'Invalid type'
        elif isinstance(value, str) and required and not value.strip():
            problems[name] = 'Required'
    return problems


# ==============================================================================
# POINTS
# ==============================================================================

@loyalty_bp.route('/points', methods=['GET'])
@require_session
def get_points():
    """
    Get a customer's points balance, tier and recent transactions.

    Query params:
        customerId: Customer ID (required)
    """
    customer_id = request.args.get('customerId')
    if not customer_id:
        return bad_request('customerId is required', ErrorCode.MISSING_FIELD)

    service = LoyaltyService()
    try:
        customer = service.get_customer(customer_id)
        transactions = service.get_history(customer_id)
    except NotFoundError:
        return not_found('Customer not found', ErrorCode.CUSTOMER_NOT_FOUND)
    except Exception as e:
        return internal_error('Failed to fetch points', details={'customer_id': customer_id, 'error': str(e)})

    return jsonify({
        'balance': customer.points_balance,
        'lifetimePoints': customer.lifetime_points,
        'tier': customer.tier,
        'tierProgress': tier_progress(customer.lifetime_points),
        'transactions': [t.to_dict() for t in transactions],
    })


@loyalty_bp.route('/points', methods=['POST'])
@require_session
def update_points():
    """
    Earn, redeem or adjust points.

    Request body:
        action: earn | redeem | bonus
        customerId, cafeId, points, description (required)
        orderId: Order the points came from (earn only)

    Returns:
        success, newBalance and the ledger row written
    """
    data = request.get_json(silent=True) or {}
    action = data.get('action')

    if action not in POINTS_ACTIONS:
        return bad_request('Invalid action')

    problems = validate_payload(data, POINTS_FIELDS)
    if problems:
        return bad_request('Invalid request', ErrorCode.VALIDATION_ERROR, details=problems)

    service = LoyaltyService()
    try:
        if action == 'earn':
            transaction = service.earn_points(
                data['customerId'], data['cafeId'], data['points'], data['description'],
                order_id=data.get('orderId')
            )
        elif action == 'redeem':
            transaction = service.redeem_points(
                data['customerId'], data['cafeId'], data['points'], data['description']
            )
        else:
            transaction = service.award_bonus(
                data['customerId'], data['cafeId'], data['points'], data['description']
            )
    except InsufficientPointsError as e:
        db.session.rollback()
        return bad_request(e.message, ErrorCode.INSUFFICIENT_POINTS)
    except ValidationError as e:
        db.session.rollback()
        return bad_request(e.message, ErrorCode.VALIDATION_ERROR)
    except NotFoundError as e:
        db.session.rollback()
        return not_found(e.message)
    except Exception as e:
        db.session.rollback()
        return internal_error('Failed to process points', details={'action': action, 'error': str(e)})

    return jsonify({
        'success': True,
        'newBalance': transaction.balance_after,
        'transaction': transaction.to_dict(),
    })


# ==============================================================================
# VOUCHERS
# ==============================================================================

@loyalty_bp.route('/vouchers', methods=['GET'])
@require_session
def get_vouchers():
    """
    Get the voucher catalog, plus a customer's active vouchers.

    Query params:
        customerId: Customer ID (optional; catalog only when omitted)
    """
    service = VoucherService()
    customer_id = request.args.get('customerId')

    if not customer_id:
        return jsonify({'catalog': service.get_catalog()})

    try:
        vouchers = service.get_active_vouchers(customer_id)
    except Exception as e:
        return internal_error('Failed to fetch vouchers', details={'customer_id': customer_id, 'error': str(e)})

    return jsonify({
        'vouchers': [v.to_dict() for v in vouchers],
        'catalog': service.get_catalog(),
    })


@loyalty_bp.route('/vouchers', methods=['POST'])
@require_session
def claim_voucher():
    """
    Claim a voucher with points.

    Request body:
        customerId, cafeId, type, value, pointsCost (required)

    Returns:
        The new voucher and the customer's remaining balance
    """
    data = request.get_json(silent=True) or {}

    problems = validate_payload(data, VOUCHER_FIELDS)
    if problems:
        return bad_request('Invalid request', ErrorCode.VALIDATION_ERROR, details=problems)

    service = VoucherService()
    try:
        voucher, transaction = service.claim_voucher(
            customer_id=data['customerId'],
            cafe_id=data['cafeId'],
            voucher_type=data['type'],
            value=data['value'],
            points_cost=data['pointsCost'],
        )
    except InsufficientPointsError as e:
        db.session.rollback()
        return bad_request(e.message, ErrorCode.INSUFFICIENT_POINTS)
    except ValidationError as e:
        db.session.rollback()
        return bad_request(e.message, ErrorCode.VALIDATION_ERROR)
    except NotFoundError as e:
        db.session.rollback()
        return not_found(e.message)
    except Exception as e:
        db.session.rollback()
        return internal_error('Failed to claim voucher', details={'error': str(e)})

    return jsonify({
        'voucher': voucher.to_dict(),
        'newBalance': transaction.balance_after,
    })
