"""
Shared fixtures for the Brewline test suite.

Each test gets a fresh app bound to an in-memory SQLite database. The app
context stays pushed for the whole test, so fixtures, services and test
client requests share one session.
"""
from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from app import create_app
from app.extensions import db
from app.middleware.session_auth import SessionUser, issue_session_token
from app.models import (
    Cafe,
    Category,
    CoffeeProfile,
    Customer,
    Order,
    OrderItem,
    OrderStatus,
    Product,
    RoastLevel,
)
from app.services.coffee_profile_service import CoffeeProfileService


@pytest.fixture
def app():
    app = create_app('testing')
    ctx = app.app_context()
    ctx.push()
    db.create_all()

    yield app

    db.session.remove()
    db.drop_all()
    ctx.pop()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(app):
    token = issue_session_token(SessionUser(id='user_1', email='barista@example.com', name='Test User'))
    return {
        'Authorization': f'Bearer {token}',
        'Content-Type': 'application/json',
    }


@pytest.fixture
def sample_cafe(app):
    cafe = Cafe(name='The Daily Grind', slug='daily-grind')
    db.session.add(cafe)
    db.session.commit()
    return cafe


@pytest.fixture
def sample_category(sample_cafe):
    category = Category(cafe_id=sample_cafe.id, name='Coffee')
    db.session.add(category)
    db.session.commit()
    return category


@pytest.fixture
def sample_products(sample_cafe, sample_category):
    """Menu keyed by a short handle."""
    menu = {
        'long_black': ('Long Black', RoastLevel.MEDIUM_DARK, '4.50'),
        'espresso': ('Espresso', RoastLevel.DARK, '3.80'),
        'flat_white': ('Flat White', RoastLevel.MEDIUM, '5.00'),
        'oat_latte': ('Oat Latte', RoastLevel.MEDIUM, '5.50'),
        'cold_brew': ('Cold Brew', RoastLevel.MEDIUM_LIGHT, '5.80'),
        'pour_over': ('Ethiopian Pour Over', RoastLevel.LIGHT, '6.50'),
    }
    products = {}
    for key, (name, roast, price) in menu.items():
        product = Product(
            cafe_id=sample_cafe.id,
            category_id=sample_category.id,
            name=name,
            price=Decimal(price),
            roast_level=roast.value,
        )
        db.session.add(product)
        products[key] = product
    db.session.commit()
    return products


@pytest.fixture
def sample_customer(app):
    customer = Customer(name='Alex Rivera', email='alex@example.com')
    db.session.add(customer)
    db.session.commit()
    return customer


@pytest.fixture
def make_orders(sample_cafe):
    """
    Factory for orders.

    Each line is (product, quantity) or (product, quantity, modifiers);
    the same lines are used for every order created.
    """
    def _make_orders(customer, lines, count=1, status=OrderStatus.COMPLETED):
        base = datetime.utcnow() - timedelta(days=count)
        orders = []
        for i in range(count):
            order = Order(
                cafe_id=sample_cafe.id,
                customer_id=customer.id,
                status=status.value,
                created_at=base + timedelta(hours=i),
            )
            for line in lines:
                product, quantity = line[0], line[1]
                modifiers = line[2] if len(line) > 2 else None
                order.items.append(OrderItem(
                    product_id=product.id,
                    name=product.name,
                    quantity=quantity,
                    unit_price=product.price,
                    modifiers=modifiers,
                ))
            db.session.add(order)
            orders.append(order)
        db.session.commit()
        return orders

    return _make_orders


@pytest.fixture
def funded_customer(sample_customer, sample_cafe):
    """Customer holding 1,000 earned points."""
    from app.services.loyalty_service import LoyaltyService

    LoyaltyService().earn_points(sample_customer.id, sample_cafe.id, 1000, 'Opening balance')
    return sample_customer


@pytest.fixture
def competing_insert():
    """
    Factory for a find_profile replacement whose first call commits a
    profile for the customer, as a parallel request would, and still
    reports that none exists.
    """
    real_find = CoffeeProfileService.find_profile

    def _competing_insert(customer_id):
        calls = []

        def find_profile(service, cid):
            calls.append(cid)
            if len(calls) == 1:
                db.session.add(CoffeeProfile(
                    customer_id=customer_id,
                    profile_type='Classic Lover',
                    roast_preference=3.0,
                    strength=3.0,
                    milk_preference='dairy',
                    temperature=3.5,
                    sweetness=1.0,
                    adventure_score=1.0,
                    flavor_notes=[],
                    confidence=0.5,
                ))
                db.session.commit()
                return None
            return real_find(service, cid)

        return find_profile

    return _competing_insert
