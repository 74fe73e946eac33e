"""
Tests for the Loyalty Service.

This test module covers:
- Tier thresholds and tier progress
- Earning, redeeming and bonus points
- The ledger invariant (balance_after is the running sum)
- Ledger verification and tier recomputation
"""
import pytest

from app.extensions import db
from app.models import LoyaltyTier, PointTransaction, PointTransactionType
from app.services.loyalty_service import LoyaltyService, tier_for_points, tier_progress
from app.utils.exceptions import (
    CustomerNotFoundError,
    InsufficientPointsError,
    NotFoundError,
    ValidationError,
)


class TestTierForPoints:

    @pytest.mark.parametrize('points,tier', [
        (0, LoyaltyTier.BRONZE),
        (999, LoyaltyTier.BRONZE),
        (1000, LoyaltyTier.SILVER),
        (4999, LoyaltyTier.SILVER),
        (5000, LoyaltyTier.GOLD),
        (14999, LoyaltyTier.GOLD),
        (15000, LoyaltyTier.PLATINUM),
        (250000, LoyaltyTier.PLATINUM),
    ])
    def test_boundaries(self, points, tier):
        assert tier_for_points(points) == tier

    def test_missing_points_is_bronze(self):
        assert tier_for_points(None) == LoyaltyTier.BRONZE


class TestTierProgress:

    def test_halfway_through_bronze(self):
        progress = tier_progress(500)

        assert progress['tier'] == 'BRONZE'
        assert progress['nextTier'] == 'SILVER'
        assert progress['pointsToNextTier'] == 500
        assert progress['progressPercent'] == 50.0

    def test_start_of_gold(self):
        progress = tier_progress(5000)

        assert progress['tier'] == 'GOLD'
        assert progress['nextTier'] == 'PLATINUM'
        assert progress['tierMin'] == 5000
        assert progress['tierMax'] == 15000
        assert progress['progressPercent'] == 0.0

    def test_beyond_platinum_scale(self):
        progress = tier_progress(60000)

        assert progress['tier'] == 'PLATINUM'
        assert progress['nextTier'] is None
        assert progress['pointsToNextTier'] == 0
        assert progress['progressPercent'] == 100.0


class TestEarnPoints:

    def test_earn_updates_balance_and_lifetime(self, app, sample_customer, sample_cafe):
        txn = LoyaltyService().earn_points(sample_customer.id, sample_cafe.id, 120, 'Flat White x2')

        assert txn.type == PointTransactionType.EARN.value
        assert txn.points == 120
        assert txn.balance_after == 120
        assert sample_customer.points_balance == 120
        assert sample_customer.lifetime_points == 120
        assert sample_customer.tier == 'BRONZE'

    def test_earn_promotes_tier(self, app, sample_customer, sample_cafe):
        LoyaltyService().earn_points(sample_customer.id, sample_cafe.id, 1200, 'Catering order')
        assert sample_customer.tier == 'SILVER'

    def test_earn_links_order(self, app, sample_customer, sample_cafe, sample_products, make_orders):
        order = make_orders(sample_customer, [(sample_products['flat_white'], 1)])[0]

        txn = LoyaltyService().earn_points(
            sample_customer.id, sample_cafe.id, 5, 'Purchase', order_id=order.id
        )

        assert txn.order_id == order.id

    @pytest.mark.parametrize('points', [0, -10, 1.5, '10', True])
    def test_rejects_non_positive_or_non_integer(self, app, sample_customer, sample_cafe, points):
        with pytest.raises(ValidationError):
            LoyaltyService().earn_points(sample_customer.id, sample_cafe.id, points, 'Bad')

        assert PointTransaction.query.count() == 0

    def test_unknown_customer(self, app, sample_cafe):
        with pytest.raises(CustomerNotFoundError):
            LoyaltyService().earn_points('missing', sample_cafe.id, 10, 'Purchase')

    def test_unknown_cafe(self, app, sample_customer):
        with pytest.raises(NotFoundError) as exc_info:
            LoyaltyService().earn_points(sample_customer.id, 'missing', 10, 'Purchase')
        assert exc_info.value.message == 'Cafe not found'


class TestRedeemPoints:

    def test_redeem_lowers_balance_not_lifetime(self, app, funded_customer, sample_cafe):
        txn = LoyaltyService().redeem_points(funded_customer.id, sample_cafe.id, 400, 'Free Coffee')

        assert txn.type == PointTransactionType.REDEEM.value
        assert txn.points == -400
        assert txn.balance_after == 600
        assert funded_customer.points_balance == 600
        assert funded_customer.lifetime_points == 1000
        assert funded_customer.tier == 'SILVER'

    def test_insufficient_points(self, app, funded_customer, sample_cafe):
        with pytest.raises(InsufficientPointsError) as exc_info:
            LoyaltyService().redeem_points(funded_customer.id, sample_cafe.id, 1001, 'Too much')

        db.session.rollback()
        assert exc_info.value.message == 'Insufficient points'
        assert funded_customer.points_balance == 1000
        assert PointTransaction.query.filter_by(customer_id=funded_customer.id).count() == 1

    def test_redeem_entire_balance(self, app, funded_customer, sample_cafe):
        txn = LoyaltyService().redeem_points(funded_customer.id, sample_cafe.id, 1000, 'Everything')
        assert txn.balance_after == 0


class TestAwardBonus:

    def test_positive_bonus_counts_towards_lifetime(self, app, sample_customer, sample_cafe):
        LoyaltyService().award_bonus(sample_customer.id, sample_cafe.id, 50, 'Birthday')

        assert sample_customer.points_balance == 50
        assert sample_customer.lifetime_points == 50

    def test_negative_bonus_only_lowers_balance(self, app, funded_customer, sample_cafe):
        txn = LoyaltyService().award_bonus(funded_customer.id, sample_cafe.id, -30, 'Correction')

        assert txn.type == PointTransactionType.BONUS.value
        assert txn.points == -30
        assert funded_customer.points_balance == 970
        assert funded_customer.lifetime_points == 1000

    def test_negative_bonus_cannot_overdraw(self, app, funded_customer, sample_cafe):
        with pytest.raises(InsufficientPointsError):
            LoyaltyService().award_bonus(funded_customer.id, sample_cafe.id, -1500, 'Correction')

    def test_zero_bonus_rejected(self, app, sample_customer, sample_cafe):
        with pytest.raises(ValidationError):
            LoyaltyService().award_bonus(sample_customer.id, sample_cafe.id, 0, 'Nothing')


class TestLedger:

    def test_balance_after_is_running_sum(self, app, sample_customer, sample_cafe):
        service = LoyaltyService()
        service.earn_points(sample_customer.id, sample_cafe.id, 300, 'Purchase')
        service.award_bonus(sample_customer.id, sample_cafe.id, 100, 'Double points day')
        service.redeem_points(sample_customer.id, sample_cafe.id, 250, 'Reward')
        service.award_bonus(sample_customer.id, sample_cafe.id, -50, 'Correction')

        rows = (
            PointTransaction.query
            .filter_by(customer_id=sample_customer.id)
            .order_by(PointTransaction.id)
            .all()
        )
        running = 0
        for row in rows:
            running += row.points
            assert row.balance_after == running

        assert sample_customer.points_balance == rows[-1].balance_after == 100
        assert sample_customer.lifetime_points == 400

    def test_history_newest_first(self, app, sample_customer, sample_cafe):
        service = LoyaltyService()
        service.earn_points(sample_customer.id, sample_cafe.id, 10, 'First')
        service.earn_points(sample_customer.id, sample_cafe.id, 20, 'Second')

        history = service.get_history(sample_customer.id)

        assert [t.description for t in history] == ['Second', 'First']

    def test_history_limit(self, app, sample_customer, sample_cafe):
        service = LoyaltyService()
        for _ in range(5):
            service.earn_points(sample_customer.id, sample_cafe.id, 1, 'Purchase')

        assert len(service.get_history(sample_customer.id, limit=3)) == 3


class TestVerifyLedger:

    def test_clean_ledger(self, app, funded_customer, sample_cafe):
        service = LoyaltyService()
        service.redeem_points(funded_customer.id, sample_cafe.id, 200, 'Reward')

        report = service.verify_ledger(funded_customer.id)

        assert report['valid'] is True
        assert report['transaction_count'] == 2
        assert report['computed_balance'] == 800
        assert report['cached_balance'] == 800
        assert report['mismatched_transactions'] == []

    def test_empty_ledger_is_valid(self, app, sample_customer):
        report = LoyaltyService().verify_ledger(sample_customer.id)

        assert report['valid'] is True
        assert report['transaction_count'] == 0

    def test_detects_tampered_balance(self, app, funded_customer):
        funded_customer.points_balance = 5000
        db.session.commit()

        report = LoyaltyService().verify_ledger(funded_customer.id)

        assert report['valid'] is False
        assert report['cached_balance'] == 5000
        assert report['computed_balance'] == 1000

    def test_detects_bad_balance_after(self, app, funded_customer):
        row = PointTransaction.query.filter_by(customer_id=funded_customer.id).first()
        row.balance_after = 999
        db.session.commit()

        report = LoyaltyService().verify_ledger(funded_customer.id)

        assert report['valid'] is False
        assert report['mismatched_transactions'] == [row.id]


class TestRecomputeTiers:

    def test_dry_run_reports_without_saving(self, app, sample_customer):
        sample_customer.lifetime_points = 6000
        db.session.commit()

        result = LoyaltyService().recompute_tiers(dry_run=True)

        assert result['changed'] == 1
        assert result['changes'][0]['to'] == 'GOLD'
        assert sample_customer.tier == 'BRONZE'

    def test_applies_changes(self, app, sample_customer):
        sample_customer.lifetime_points = 6000
        db.session.commit()

        result = LoyaltyService().recompute_tiers()

        assert result['changed'] == 1
        assert sample_customer.tier == 'GOLD'
