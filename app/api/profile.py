"""
Coffee profile API endpoints.

Handles:
- Generating a customer's taste profile from their order history
- Fetching a stored profile with product recommendations
"""
from flask import Blueprint, request, jsonify, current_app

from ..extensions import db
from ..middleware.session_auth import require_session
from ..services.coffee_profile_service import CoffeeProfileService
from ..services.recommendation_service import get_recommendations
from ..utils.errors import ErrorCode, bad_request, internal_error, not_found
from ..utils.exceptions import CustomerNotFoundError, InsufficientOrdersError, ProfileNotFoundError

profile_bp = Blueprint('profile', __name__)


@profile_bp.route('/generate', methods=['POST'])
@require_session
def generate_profile():
    """
    Generate (or regenerate) a customer's coffee profile.

    Request body:
        customerId: Customer ID (required)

    Returns:
        The stored profile plus a summary of the analyzed orders
    """
    data = request.get_json(silent=True) or {}
    customer_id = data.get('customerId')

    if customer_id is None or (isinstance(customer_id, str) and not customer_id.strip()):
        return bad_request('customerId is required', ErrorCode.MISSING_FIELD)
    customer_id = str(customer_id)

    try:
        service = CoffeeProfileService()
        profile, analysis = service.generate_profile(customer_id)
    except CustomerNotFoundError:
        return not_found('Customer not found', ErrorCode.CUSTOMER_NOT_FOUND)
    except InsufficientOrdersError as e:
        return bad_request(e.message, ErrorCode.INSUFFICIENT_ORDERS)
    except Exception as e:
        db.session.rollback()
        return internal_error('Failed to generate profile', details={'customer_id': customer_id, 'error': str(e)})

    top_n = current_app.config.get('PROFILE_TOP_PRODUCTS', 5)
    return jsonify({
        'profile': profile.to_dict(),
        'analysis': {
            'ordersAnalyzed': analysis.total_orders,
            'topProducts': analysis.top_products_summary(top_n),
        }
    })


@profile_bp.route('/<customer_id>', methods=['GET'])
@require_session
def get_profile(customer_id):
    """
    Get a customer's stored coffee profile with recommendations.

    Returns:
        profile: Stored profile (with customer name/email)
        recommendations: Groups of suggested products
    """
    try:
        profile = CoffeeProfileService().get_profile(customer_id)
        recommendations = get_recommendations(profile)
    except ProfileNotFoundError:
        return not_found('Profile not found', ErrorCode.PROFILE_NOT_FOUND)
    except Exception as e:
        return internal_error('Failed to fetch profile', details={'customer_id': customer_id, 'error': str(e)})

    return jsonify({
        'profile': profile.to_dict(include_customer=True),
        'recommendations': recommendations,
    })
