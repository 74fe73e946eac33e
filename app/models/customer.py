"""
Customer model with loyalty running totals.
"""
from datetime import datetime
from decimal import Decimal
from enum import Enum
from ..extensions import db, generate_id


class LoyaltyTier(str, Enum):
    """Loyalty tiers, derived from lifetime points."""
    BRONZE = 'BRONZE'
    SILVER = 'SILVER'
    GOLD = 'GOLD'
    PLATINUM = 'PLATINUM'


class Customer(db.Model):
    """
    A customer of one or more cafes.

    points_balance is the spendable total and always equals the
    balance_after of the newest PointTransaction. lifetime_points only
    ever grows; the tier follows it, not the balance.
    """
    __tablename__ = 'customers'

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    name = db.Column(db.String(255))
    email = db.Column(db.String(255), unique=True)

    # Loyalty
    points_balance = db.Column(db.Integer, nullable=False, default=0)
    lifetime_points = db.Column(db.Integer, nullable=False, default=0)
    tier = db.Column(db.String(20), nullable=False, default=LoyaltyTier.BRONZE.value)

    # Running totals (maintained by checkout)
    lifetime_spend = db.Column(db.Numeric(12, 2), default=Decimal('0'))
    total_orders = db.Column(db.Integer, default=0)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    orders = db.relationship('Order', backref='customer', lazy='dynamic')
    coffee_profile = db.relationship('CoffeeProfile', backref='customer', uselist=False)

    def __repr__(self):
        return f'<Customer {self.id}>'
