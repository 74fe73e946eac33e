"""
CLI Commands for Brewline.

Usage:
    flask loyalty verify-ledger                    # Audit every customer's ledger
    flask loyalty verify-ledger --customer-id abc  # Audit one customer
    flask loyalty recompute-tiers --dry-run        # Preview tier corrections

    flask profiles generate --customer-id abc      # Build a coffee profile offline
"""
from .loyalty import init_app as init_loyalty_commands
from .profiles import init_app as init_profile_commands


def init_app(app):
    """Register all CLI commands with the Flask app."""
    init_loyalty_commands(app)
    init_profile_commands(app)
