"""
Voucher Service: trade points for reward vouchers.

Claiming a voucher is one commit: the voucher row, the REDEEM ledger row
and the customer's new balance succeed or fail together.
"""
import secrets
import string
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any, Dict, List, Tuple

from flask import current_app

from ..extensions import db
from ..models import PointTransactionType, Voucher, VoucherStatus, VoucherType
from ..utils.exceptions import ValidationError
from .loyalty_service import LoyaltyService

# Reward catalog shown to customers
VOUCHER_CATALOG = [
    {'type': VoucherType.FREE_DRINK.value, 'name': 'Free Coffee', 'value': 5.50, 'pointsCost': 500,
     'description': 'Any coffee up to $5.50'},
    {'type': VoucherType.FIXED_AMOUNT.value, 'name': '$5 Off', 'value': 5, 'pointsCost': 400,
     'description': '$5 off any order'},
    {'type': VoucherType.FIXED_AMOUNT.value, 'name': '$10 Off', 'value': 10, 'pointsCost': 750,
     'description': '$10 off any order'},
    {'type': VoucherType.PERCENTAGE_OFF.value, 'name': '15% Off', 'value': 15, 'pointsCost': 600,
     'description': '15% off entire order'},
    {'type': VoucherType.FREE_UPGRADE.value, 'name': 'Free Size Upgrade', 'value': 1, 'pointsCost': 200,
     'description': 'Free upgrade to large'},
]

CODE_ALPHABET = string.ascii_uppercase + string.digits
CODE_LENGTH = 8


def find_catalog_entry(voucher_type: str, value, points_cost: int):
    """Catalog entry with this exact type, value and cost, or None."""
    for entry in VOUCHER_CATALOG:
        if (entry['type'] == voucher_type
                and entry['pointsCost'] == points_cost
                and float(entry['value']) == float(value)):
            return entry
    return None


def generate_voucher_code() -> str:
    """Random code like BRW-7K2Q9XZA."""
    return 'BRW-' + ''.join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))


class VoucherService:
    """
    Usage:
        service = VoucherService()
        voucher, txn = service.claim_voucher(customer_id, cafe_id, 'FREE_DRINK', 5.50, 500)
    """

    def __init__(self, loyalty_service: LoyaltyService = None):
        self.loyalty = loyalty_service or LoyaltyService()

    def get_catalog(self) -> List[Dict[str, Any]]:
        return [dict(entry) for entry in VOUCHER_CATALOG]

    def get_active_vouchers(self, customer_id: str) -> List[Voucher]:
        """Active, unexpired vouchers, soonest expiry first."""
        return (
            Voucher.query
            .filter(
                Voucher.customer_id == customer_id,
                Voucher.status == VoucherStatus.ACTIVE.value,
                Voucher.expires_at > datetime.utcnow()
            )
            .order_by(Voucher.expires_at.asc())
            .all()
        )

    def claim_voucher(
        self,
        customer_id: str,
        cafe_id: str,
        voucher_type: str,
        value,
        points_cost: int
    ) -> Tuple[Voucher, Any]:
        """
        Deduct points_cost and issue a voucher.

        Raises:
            ValidationError: unknown voucher type, bad cost/value, or a
                type/value/cost combination the catalog does not offer
            InsufficientPointsError: balance lower than points_cost
        """
        try:
            voucher_type = VoucherType(voucher_type)
        except ValueError:
            raise ValidationError(f'Invalid voucher type: {voucher_type}', field='type')

        if isinstance(points_cost, bool) or not isinstance(points_cost, int) or points_cost <= 0:
            raise ValidationError('pointsCost must be a positive whole number', field='pointsCost')
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
            raise ValidationError('value must be a non-negative number', field='value')
        if find_catalog_entry(voucher_type.value, value, points_cost) is None:
            raise ValidationError('Voucher is not in the catalog', field='type')

        customer = self.loyalty.lock_customer(customer_id)
        self.loyalty.require_cafe(cafe_id)

        transaction = self.loyalty.record_transaction(
            customer,
            cafe_id=cafe_id,
            points=-points_cost,
            transaction_type=PointTransactionType.REDEEM,
            description=f'Redeemed voucher: {voucher_type.value}',
        )

        expiry_days = current_app.config.get('VOUCHER_EXPIRY_DAYS', 90)
        voucher = Voucher(
            customer_id=customer.id,
            code=generate_voucher_code(),
            type=voucher_type.value,
            value=Decimal(str(value)),
            points_cost=points_cost,
            status=VoucherStatus.ACTIVE.value,
            expires_at=datetime.utcnow() + timedelta(days=expiry_days),
        )
        db.session.add(voucher)

        try:
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(f"Voucher claim failed for customer {customer_id}: {e}")
            raise

        current_app.logger.info(
            f"Voucher claimed: customer {customer_id} {voucher.code} ({voucher_type.value}) "
            f"for {points_cost} pts. New balance: {customer.points_balance}"
        )
        return voucher, transaction
