"""
Cafe, menu Category and Product models.
"""
from datetime import datetime
from enum import Enum
from ..extensions import db, generate_id


class RoastLevel(str, Enum):
    """Roast levels, lightest first. Order matters for scoring."""
    LIGHT = 'LIGHT'
    MEDIUM_LIGHT = 'MEDIUM_LIGHT'
    MEDIUM = 'MEDIUM'
    MEDIUM_DARK = 'MEDIUM_DARK'
    DARK = 'DARK'


class Cafe(db.Model):
    """
    A tenant of the platform. Products, orders and point transactions
    all belong to a cafe.
    """
    __tablename__ = 'cafes'

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    name = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(100), nullable=False, unique=True)
    is_active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    categories = db.relationship('Category', backref='cafe', lazy='dynamic')
    products = db.relationship('Product', backref='cafe', lazy='dynamic')

    def __repr__(self):
        return f'<Cafe {self.slug}>'


class Category(db.Model):
    """Menu category (Coffee, Tea, Food, ...)."""
    __tablename__ = 'categories'

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    cafe_id = db.Column(db.String(32), db.ForeignKey('cafes.id'), nullable=False)
    name = db.Column(db.String(100), nullable=False)
    display_order = db.Column(db.Integer, default=0)

    def __repr__(self):
        return f'<Category {self.name}>'

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
        }


class Product(db.Model):
    """Menu item. Coffee products carry a roast level."""
    __tablename__ = 'products'

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    cafe_id = db.Column(db.String(32), db.ForeignKey('cafes.id'), nullable=False)
    category_id = db.Column(db.String(32), db.ForeignKey('categories.id'))

    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.String(500))
    price = db.Column(db.Numeric(10, 2), nullable=False)
    roast_level = db.Column(db.String(20))  # RoastLevel value, NULL for non-coffee

    is_active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    category = db.relationship('Category', backref=db.backref('products', lazy='dynamic'))

    def __repr__(self):
        return f'<Product {self.name}>'

    def to_dict(self):
        return {
            'id': self.id,
            'cafeId': self.cafe_id,
            'name': self.name,
            'description': self.description,
            'price': float(self.price) if self.price is not None else None,
            'roastLevel': self.roast_level,
            'isActive': self.is_active,
            'category': self.category.to_dict() if self.category else None,
        }
