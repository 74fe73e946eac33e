"""
Points ledger and voucher models.

PointTransaction is append-only: each row stores the signed delta and
the customer's balance right after it, so the balance history can be
replayed and audited without touching the customer row.
"""
from datetime import datetime
from enum import Enum
from ..extensions import db, generate_id


class PointTransactionType(str, Enum):
    """Types of ledger rows."""
    EARN = 'EARN'       # Purchase points (positive)
    REDEEM = 'REDEEM'   # Spent on a reward or voucher (negative)
    BONUS = 'BONUS'     # Promotional or manual (+/-)


class VoucherType(str, Enum):
    FREE_DRINK = 'FREE_DRINK'
    PERCENTAGE_OFF = 'PERCENTAGE_OFF'
    FIXED_AMOUNT = 'FIXED_AMOUNT'
    FREE_UPGRADE = 'FREE_UPGRADE'


class VoucherStatus(str, Enum):
    ACTIVE = 'ACTIVE'
    USED = 'USED'
    EXPIRED = 'EXPIRED'


class PointTransaction(db.Model):
    """
    Tracks every change to a customer's points balance.

    Invariant: balance_after equals the sum of all deltas for the customer
    up to and including this row.
    """
    __tablename__ = 'point_transactions'

    id = db.Column(db.Integer, primary_key=True)
    customer_id = db.Column(db.String(32), db.ForeignKey('customers.id'), nullable=False, index=True)
    cafe_id = db.Column(db.String(32), db.ForeignKey('cafes.id'), nullable=False)
    order_id = db.Column(db.String(32), db.ForeignKey('orders.id'))

    type = db.Column(db.String(20), nullable=False)  # PointTransactionType value
    points = db.Column(db.Integer, nullable=False)   # Positive for earn, negative for spend
    balance_after = db.Column(db.Integer, nullable=False)
    description = db.Column(db.String(500))

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    customer = db.relationship('Customer', backref=db.backref('point_transactions', lazy='dynamic'))
    cafe = db.relationship('Cafe')

    def __repr__(self):
        return f'<PointTransaction {self.id}: {self.points} pts for customer {self.customer_id}>'

    def to_dict(self):
        return {
            'id': self.id,
            'customerId': self.customer_id,
            'cafeId': self.cafe_id,
            'orderId': self.order_id,
            'type': self.type,
            'points': self.points,
            'balanceAfter': self.balance_after,
            'description': self.description,
            'cafe': {'name': self.cafe.name, 'slug': self.cafe.slug} if self.cafe else None,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }


class Voucher(db.Model):
    """A reward claimed with points, redeemable at checkout until it expires."""
    __tablename__ = 'vouchers'

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    customer_id = db.Column(db.String(32), db.ForeignKey('customers.id'), nullable=False, index=True)

    code = db.Column(db.String(20), nullable=False, unique=True)
    type = db.Column(db.String(20), nullable=False)  # VoucherType value
    value = db.Column(db.Numeric(10, 2), nullable=False)
    points_cost = db.Column(db.Integer, nullable=False)
    status = db.Column(db.String(20), nullable=False, default=VoucherStatus.ACTIVE.value)

    expires_at = db.Column(db.DateTime, nullable=False)
    used_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    customer = db.relationship('Customer', backref=db.backref('vouchers', lazy='dynamic'))

    def __repr__(self):
        return f'<Voucher {self.code} {self.status}>'

    @property
    def is_redeemable(self) -> bool:
        return self.status == VoucherStatus.ACTIVE.value and self.expires_at > datetime.utcnow()

    def to_dict(self):
        return {
            'id': self.id,
            'customerId': self.customer_id,
            'code': self.code,
            'type': self.type,
            'value': float(self.value),
            'pointsCost': self.points_cost,
            'status': self.status,
            'isRedeemable': self.is_redeemable,
            'expiresAt': self.expires_at.isoformat() if self.expires_at else None,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }
