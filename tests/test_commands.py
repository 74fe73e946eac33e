"""
Tests for the flask CLI commands.
"""
from app.extensions import db
from app.models import CoffeeProfile


class TestVerifyLedgerCommand:

    def test_all_clean(self, app, funded_customer):
        result = app.test_cli_runner().invoke(args=['loyalty', 'verify-ledger'])

        assert result.exit_code == 0
        assert 'Checked 1 customers, 0 with ledger problems' in result.output

    def test_reports_broken_ledger(self, app, funded_customer):
        funded_customer.points_balance = 42
        db.session.commit()

        result = app.test_cli_runner().invoke(
            args=['loyalty', 'verify-ledger', '--customer-id', funded_customer.id]
        )

        assert result.exit_code == 1
        assert 'cached 42, ledger 1000' in result.output

    def test_unknown_customer(self, app):
        result = app.test_cli_runner().invoke(
            args=['loyalty', 'verify-ledger', '--customer-id', 'missing']
        )

        assert result.exit_code == 1
        assert 'Customer not found' in result.output


class TestRecomputeTiersCommand:

    def test_dry_run(self, app, sample_customer):
        sample_customer.lifetime_points = 20000
        db.session.commit()

        result = app.test_cli_runner().invoke(args=['loyalty', 'recompute-tiers', '--dry-run'])

        assert result.exit_code == 0
        assert 'BRONZE -> PLATINUM' in result.output
        assert '[DRY RUN] 1 customers changed tier' in result.output
        assert sample_customer.tier == 'BRONZE'


class TestGenerateProfileCommand:

    def test_generates(self, app, sample_customer, sample_products, make_orders):
        make_orders(sample_customer, [(sample_products['long_black'], 1)], count=6)

        result = app.test_cli_runner().invoke(
            args=['profiles', 'generate', '--customer-id', sample_customer.id]
        )

        assert result.exit_code == 0
        assert 'Profile: Bold Explorer (confidence 0.53)' in result.output
        assert CoffeeProfile.query.count() == 1

    def test_not_enough_orders(self, app, sample_customer):
        result = app.test_cli_runner().invoke(
            args=['profiles', 'generate', '--customer-id', sample_customer.id]
        )

        assert result.exit_code == 1
        assert 'Need at least 5 orders' in result.output
