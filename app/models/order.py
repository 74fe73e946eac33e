"""
Order and OrderItem models.

Orders are written by checkout and are immutable afterwards apart from
status and completed_at.
"""
from datetime import datetime
from decimal import Decimal
from enum import Enum
from ..extensions import db, generate_id


class OrderStatus(str, Enum):
    """Order lifecycle. COMPLETED and CANCELLED are final."""
    PENDING = 'PENDING'
    PREPARING = 'PREPARING'
    READY = 'READY'
    COMPLETED = 'COMPLETED'
    CANCELLED = 'CANCELLED'


class Order(db.Model):
    """A checkout at a cafe."""
    __tablename__ = 'orders'

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    order_number = db.Column(db.String(20))
    cafe_id = db.Column(db.String(32), db.ForeignKey('cafes.id'), nullable=False)
    customer_id = db.Column(db.String(32), db.ForeignKey('customers.id'), index=True)

    status = db.Column(db.String(20), nullable=False, default=OrderStatus.PENDING.value)
    subtotal = db.Column(db.Numeric(10, 2), default=Decimal('0'))
    total = db.Column(db.Numeric(10, 2), default=Decimal('0'))

    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    completed_at = db.Column(db.DateTime)

    # Relationships
    cafe = db.relationship('Cafe')
    items = db.relationship(
        'OrderItem',
        backref='order',
        cascade='all, delete-orphan',
        order_by='OrderItem.id'
    )

    def __repr__(self):
        return f'<Order {self.order_number or self.id} {self.status}>'


class OrderItem(db.Model):
    """
    One line of an order.

    product_id may be NULL once the product is deleted; name keeps the
    label the customer saw. total is quantity x unit_price; modifier
    prices are not folded in.
    """
    __tablename__ = 'order_items'

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.String(32), db.ForeignKey('orders.id'), nullable=False)
    product_id = db.Column(db.String(32), db.ForeignKey('products.id', ondelete='SET NULL'))

    name = db.Column(db.String(200), nullable=False)
    quantity = db.Column(db.Integer, nullable=False, default=1)
    unit_price = db.Column(db.Numeric(10, 2), nullable=False, default=Decimal('0'))
    modifiers = db.Column(db.JSON)  # {"Milk": "Oat Milk", "Syrup": "Vanilla Syrup"}
    total = db.Column(db.Numeric(10, 2), nullable=False, default=Decimal('0'))

    product = db.relationship('Product')

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        if kwargs.get('total') is None:
            self.total = Decimal(str(self.unit_price or 0)) * (self.quantity or 1)

    def __repr__(self):
        return f'<OrderItem {self.name} x{self.quantity}>'
