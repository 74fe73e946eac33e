"""
Loyalty Service: points ledger and tiers.

ARCHITECTURE:
- PointTransaction is the append-only ledger. Every balance change writes
  exactly one row whose balance_after is the running total.
- Customer.points_balance is a cached copy of the newest balance_after and
  is updated in the same commit as the ledger row.
- Customer.lifetime_points only grows (earned points and positive bonuses).
  Redemptions and negative bonuses lower the balance but never the
  lifetime total, so they never demote a tier.
- Tier is a pure function of lifetime points.
"""
from typing import Any, Dict, List

from flask import current_app

from ..extensions import db
from ..models import Cafe, Customer, LoyaltyTier, PointTransaction, PointTransactionType
from ..utils.exceptions import (
    CustomerNotFoundError,
    InsufficientPointsError,
    NotFoundError,
    ValidationError,
)


# ==================== Tiers ====================

# (tier, min lifetime points, max lifetime points)
# PLATINUM has no upper bound; its max only scales the progress bar.
TIER_THRESHOLDS = [
    (LoyaltyTier.BRONZE, 0, 1000),
    (LoyaltyTier.SILVER, 1000, 5000),
    (LoyaltyTier.GOLD, 5000, 15000),
    (LoyaltyTier.PLATINUM, 15000, 50000),
]


def tier_for_points(lifetime_points: int) -> LoyaltyTier:
    """Tier reached with the given lifetime points."""
    points = max(0, lifetime_points or 0)
    tier = LoyaltyTier.BRONZE
    for candidate, minimum, _ in TIER_THRESHOLDS:
        if points >= minimum:
            tier = candidate
    return tier


def tier_progress(lifetime_points: int) -> Dict[str, Any]:
    """
    Progress towards the next tier, for display.

    Returns:
        Dict with tier, nextTier (None at the top), tier bounds,
        pointsToNextTier (never negative) and progressPercent (0-100)
    """
    points = max(0, lifetime_points or 0)
    tier = tier_for_points(points)

    index = next(i for i, (t, _, _) in enumerate(TIER_THRESHOLDS) if t == tier)
    _, tier_min, tier_max = TIER_THRESHOLDS[index]
    next_tier = TIER_THRESHOLDS[index + 1][0] if index + 1 < len(TIER_THRESHOLDS) else None

    span = tier_max - tier_min
    percent = min(100.0, max(0.0, (points - tier_min) / span * 100))

    return {
        'tier': tier.value,
        'nextTier': next_tier.value if next_tier else None,
        'tierMin': tier_min,
        'tierMax': tier_max,
        'pointsToNextTier': max(0, tier_max - points),
        'progressPercent': round(percent, 1),
    }


class LoyaltyService:
    """
    Central service for points ledger operations.

    Usage:
        service = LoyaltyService()

        txn = service.earn_points(customer_id, cafe_id, 42, 'Purchase at The Daily Grind')
        txn = service.redeem_points(customer_id, cafe_id, 500, 'Free Flat White')
        report = service.verify_ledger(customer_id)
    """

    # ==================== Core Points Operations ====================

    def earn_points(
        self,
        customer_id: str,
        cafe_id: str,
        points: int,
        description: str,
        order_id: str = None
    ) -> PointTransaction:
        """
        Award purchase points.

        Raises:
            ValidationError: points is not a positive integer
            CustomerNotFoundError / NotFoundError: unknown customer or cafe
        """
        points = self._require_points(points, allow_negative=False)
        customer = self.lock_customer(customer_id)
        self.require_cafe(cafe_id)

        transaction = self.record_transaction(
            customer,
            cafe_id=cafe_id,
            points=points,
            transaction_type=PointTransactionType.EARN,
            description=description,
            order_id=order_id,
        )
        return self._commit(transaction, 'earn')

    def redeem_points(
        self,
        customer_id: str,
        cafe_id: str,
        points: int,
        description: str
    ) -> PointTransaction:
        """
        Spend points from the balance.

        Raises:
            ValidationError: points is not a positive integer
            InsufficientPointsError: balance is lower than points
        """
        points = self._require_points(points, allow_negative=False)
        customer = self.lock_customer(customer_id)
        self.require_cafe(cafe_id)

        transaction = self.record_transaction(
            customer,
            cafe_id=cafe_id,
            points=-points,
            transaction_type=PointTransactionType.REDEEM,
            description=description,
        )
        return self._commit(transaction, 'redeem')

    def award_bonus(
        self,
        customer_id: str,
        cafe_id: str,
        points: int,
        description: str
    ) -> PointTransaction:
        """
        Apply a promotional or manual bonus.

        Positive bonuses count towards lifetime points; negative ones only
        lower the balance and cannot overdraw it.
        """
        points = self._require_points(points, allow_negative=True)
        customer = self.lock_customer(customer_id)
        self.require_cafe(cafe_id)

        transaction = self.record_transaction(
            customer,
            cafe_id=cafe_id,
            points=points,
            transaction_type=PointTransactionType.BONUS,
            description=description,
        )
        return self._commit(transaction, 'bonus')

    def record_transaction(
        self,
        customer: Customer,
        cafe_id: str,
        points: int,
        transaction_type: PointTransactionType,
        description: str = None,
        order_id: str = None
    ) -> PointTransaction:
        """
        Apply a signed delta to a locked customer and stage its ledger row.

        Does not commit, so callers can bundle it with other writes
        (e.g. voucher creation).

        Raises:
            InsufficientPointsError: delta would take the balance below zero
        """
        current = customer.points_balance or 0
        new_balance = current + points
        if new_balance < 0:
            raise InsufficientPointsError(current, -points)

        customer.points_balance = new_balance
        if points > 0:
            customer.lifetime_points = (customer.lifetime_points or 0) + points
            customer.tier = tier_for_points(customer.lifetime_points).value

        transaction = PointTransaction(
            customer_id=customer.id,
            cafe_id=cafe_id,
            order_id=order_id,
            type=transaction_type.value,
            points=points,
            balance_after=new_balance,
            description=description or f'{transaction_type.value.title()} {abs(points)} points',
        )
        db.session.add(transaction)
        return transaction

    # ==================== Queries ====================

    def get_customer(self, customer_id: str) -> Customer:
        customer = db.session.get(Customer, customer_id)
        if not customer:
            raise CustomerNotFoundError(customer_id)
        return customer

    def get_history(self, customer_id: str, limit: int = None) -> List[PointTransaction]:
        """Newest first."""
        limit = limit or current_app.config.get('LOYALTY_HISTORY_LIMIT', 50)
        return (
            PointTransaction.query
            .filter_by(customer_id=customer_id)
            .order_by(PointTransaction.created_at.desc(), PointTransaction.id.desc())
            .limit(limit)
            .all()
        )

    def verify_ledger(self, customer_id: str) -> Dict[str, Any]:
        """
        Replay a customer's ledger and check it against the cached balance.

        Returns:
            Dict with valid flag, computed balance, cached balance and a list
            of transaction ids whose balance_after disagrees with the running sum
        """
        customer = self.get_customer(customer_id)
        transactions = (
            PointTransaction.query
            .filter_by(customer_id=customer_id)
            .order_by(PointTransaction.created_at, PointTransaction.id)
            .all()
        )

        running = 0
        mismatches = []
        for txn in transactions:
            running += txn.points
            if txn.balance_after != running:
                mismatches.append(txn.id)

        latest = transactions[-1].balance_after if transactions else 0
        cached = customer.points_balance or 0

        return {
            'customer_id': customer_id,
            'valid': not mismatches and cached == running and cached == latest,
            'transaction_count': len(transactions),
            'computed_balance': running,
            'cached_balance': cached,
            'mismatched_transactions': mismatches,
        }

    def recompute_tiers(self, dry_run: bool = False) -> Dict[str, Any]:
        """Re-derive every customer's tier from lifetime points."""
        changes = []
        for customer in Customer.query.order_by(Customer.created_at).all():
            expected = tier_for_points(customer.lifetime_points).value
            if customer.tier != expected:
                changes.append({
                    'customer_id': customer.id,
                    'from': customer.tier,
                    'to': expected,
                })
                if not dry_run:
                    customer.tier = expected

        if changes and not dry_run:
            try:
                db.session.commit()
            except Exception as e:
                db.session.rollback()
                current_app.logger.error(f"Tier recompute failed: {e}")
                raise

        return {'changed': len(changes), 'changes': changes, 'dry_run': dry_run}

    # ==================== Helpers ====================

    def lock_customer(self, customer_id: str) -> Customer:
        customer = (
            db.session.query(Customer)
            .filter_by(id=customer_id)
            .with_for_update()
            .first()
        )
        if not customer:
            raise CustomerNotFoundError(customer_id)
        return customer

    def require_cafe(self, cafe_id: str) -> None:
        if not cafe_id or not db.session.get(Cafe, cafe_id):
            raise NotFoundError('Cafe', cafe_id)

    def _require_points(self, points, allow_negative: bool) -> int:
        if isinstance(points, bool) or not isinstance(points, int):
            raise ValidationError('points must be a whole number', field='points')
        if points == 0 or (points < 0 and not allow_negative):
            raise ValidationError(
                'points must be non-zero' if allow_negative else 'points must be positive',
                field='points'
            )
        return points

    def _commit(self, transaction: PointTransaction, action: str) -> PointTransaction:
        try:
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(f"Points {action} failed for customer {transaction.customer_id}: {e}")
            raise

        current_app.logger.info(
            f"Points {action}: customer {transaction.customer_id} {transaction.points:+d} pts. "
            f"New balance: {transaction.balance_after}"
        )
        return transaction
