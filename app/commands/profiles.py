"""
CLI Commands for coffee profiles.
"""
import click
from flask.cli import with_appcontext

from ..services.coffee_profile_service import CoffeeProfileService
from ..utils.exceptions import BrewlineError


@click.group('profiles')
def profiles_cli():
    """Coffee profile commands."""
    pass


@profiles_cli.command('generate')
@click.option('--customer-id', required=True, help='Customer to profile')
@with_appcontext
def generate(customer_id):
    """Generate a customer's coffee profile from their order history."""
    try:
        profile, analysis = CoffeeProfileService().generate_profile(customer_id)
    except BrewlineError as e:
        raise click.ClickException(e.message)

    click.echo(f"Profile: {profile.profile_type} (confidence {profile.confidence})")
    click.echo(f"  Orders analyzed: {analysis.total_orders}")
    click.echo(
        f"  Roast {profile.roast_preference}  Strength {profile.strength}  "
        f"Temperature {profile.temperature}  Sweetness {profile.sweetness}  "
        f"Adventure {profile.adventure_score}"
    )
    click.echo(f"  Milk: {profile.milk_preference}")
    click.echo(f"  Flavor notes: {', '.join(profile.flavor_notes or [])}")


def init_app(app):
    app.cli.add_command(profiles_cli)
