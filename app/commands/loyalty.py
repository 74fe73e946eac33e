"""
CLI Commands for the loyalty ledger.

# Nightly ledger audit
0 2 * * * cd /app && flask loyalty verify-ledger

# After changing tier thresholds
flask loyalty recompute-tiers --dry-run
"""
import click
from flask.cli import with_appcontext

from ..models import Customer
from ..services.loyalty_service import LoyaltyService
from ..utils.exceptions import BrewlineError


@click.group('loyalty')
def loyalty_cli():
    """Loyalty ledger commands."""
    pass


@loyalty_cli.command('verify-ledger')
@click.option('--customer-id', help='Specific customer ID (or all if not specified)')
@with_appcontext
def verify_ledger(customer_id):
    """
    Check that every balance_after matches the running sum of deltas and
    that each cached balance matches its newest ledger row.
    """
    service = LoyaltyService()

    if customer_id:
        customer_ids = [customer_id]
    else:
        customer_ids = [c.id for c in Customer.query.order_by(Customer.created_at).all()]

    broken = 0
    for cid in customer_ids:
        try:
            report = service.verify_ledger(cid)
        except BrewlineError as e:
            raise click.ClickException(e.message)
        if report['valid']:
            continue
        broken += 1
        click.echo(
            f"Customer {cid}: cached {report['cached_balance']}, "
            f"ledger {report['computed_balance']}, "
            f"mismatched rows {report['mismatched_transactions'][:5]}"
        )

    click.echo(f"\nChecked {len(customer_ids)} customers, {broken} with ledger problems")
    if broken:
        raise SystemExit(1)


@loyalty_cli.command('recompute-tiers')
@click.option('--dry-run', is_flag=True, help='Preview without saving')
@with_appcontext
def recompute_tiers(dry_run):
    """Re-derive every customer's tier from lifetime points."""
    result = LoyaltyService().recompute_tiers(dry_run=dry_run)

    for change in result['changes'][:20]:
        click.echo(f"  {change['customer_id']}: {change['from']} -> {change['to']}")

    click.echo(f"\n{'[DRY RUN] ' if dry_run else ''}{result['changed']} customers changed tier")


def init_app(app):
    app.cli.add_command(loyalty_cli)
