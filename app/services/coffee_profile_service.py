"""
Coffee Profile Service.

Turns a customer's completed order history into a CoffeeProfile:

    orders -> analyze_orders() -> score_preferences() -> classify_profile()
           -> upsert CoffeeProfile

The analysis and scoring steps are pure; this service owns the database
reads and the single upsert. Regenerating replaces the stored profile
entirely, so running it twice on an unchanged history yields the same
scores and differs only in generated_at.

The customer row is locked while the profile is written. If a concurrent
first insert still wins the unique customer_id, the save is retried once as
an update.
"""
from datetime import datetime
from typing import Any, Dict, List, Tuple

from flask import current_app
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload

from ..extensions import db
from ..models import CoffeeProfile, Customer, Order, OrderItem, OrderStatus, Product
from ..utils.exceptions import CustomerNotFoundError, InsufficientOrdersError, ProfileNotFoundError
from .order_analysis import OrderAnalysis, analyze_orders
from .preference_scoring import round_score, score_preferences
from .profile_classifier import classify_profile, profile_confidence, select_flavor_notes

DEFAULT_MIN_ORDERS = 5
DEFAULT_ORDER_WINDOW = 100


def build_profile(analysis: OrderAnalysis) -> Dict[str, Any]:
    """
    Derive the stored profile fields from an analysis.

    Classification runs on unrounded scores; the stored scores are
    rounded to one decimal.
    """
    prefs = score_preferences(analysis)

    profile_type = classify_profile(prefs, analysis.category_breakdown)

    return {
        'profile_type': profile_type,
        'roast_preference': round_score(prefs.roast),
        'strength': round_score(prefs.strength),
        'milk_preference': prefs.milk,
        'temperature': round_score(prefs.temperature),
        'sweetness': round_score(prefs.sweetness),
        'adventure_score': round_score(prefs.adventure),
        'flavor_notes': select_flavor_notes(prefs.roast, prefs.sweetness),
        'confidence': profile_confidence(analysis.total_orders, analysis.product_variety),
    }


class CoffeeProfileService:
    """
    Generates and reads coffee profiles.

    Usage:
        service = CoffeeProfileService()
        profile, analysis = service.generate_profile(customer_id)
    """

    def __init__(self, min_orders: int = None, order_window: int = None):
        config = current_app.config
        self.min_orders = min_orders or config.get('PROFILE_MIN_ORDERS', DEFAULT_MIN_ORDERS)
        self.order_window = order_window or config.get('PROFILE_ORDER_WINDOW', DEFAULT_ORDER_WINDOW)

    def get_completed_orders(self, customer_id: str) -> List[Order]:
        """Most recent completed orders, newest first, with items and products loaded."""
        return (
            Order.query
            .filter_by(customer_id=customer_id, status=OrderStatus.COMPLETED.value)
            .options(
                selectinload(Order.items)
                .selectinload(OrderItem.product)
                .selectinload(Product.category)
            )
            .order_by(Order.created_at.desc())
            .limit(self.order_window)
            .all()
        )

    def generate_profile(self, customer_id: str) -> Tuple[CoffeeProfile, OrderAnalysis]:
        """
        Analyze a customer's orders and upsert their coffee profile.

        Args:
            customer_id: Customer to profile

        Returns:
            Tuple of (stored CoffeeProfile, OrderAnalysis)

        Raises:
            CustomerNotFoundError: Unknown customer
            InsufficientOrdersError: Fewer than min_orders completed orders
        """
        customer = (
            db.session.query(Customer)
            .filter_by(id=customer_id)
            .with_for_update()
            .first()
        )
        if not customer:
            raise CustomerNotFoundError(customer_id)

        orders = self.get_completed_orders(customer_id)
        if len(orders) < self.min_orders:
            raise InsufficientOrdersError(len(orders), self.min_orders)

        analysis = analyze_orders(orders)
        fields = build_profile(analysis)

        try:
            profile = self._save_profile(customer_id, fields)
        except IntegrityError:
            # Another request inserted the first profile; overwrite it instead
            db.session.rollback()
            current_app.logger.info(f"Coffee profile for customer {customer_id} created concurrently, updating")
            profile = self._save_profile_or_rollback(customer_id, fields)
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(f"Coffee profile save failed for customer {customer_id}: {e}")
            raise

        current_app.logger.info(
            f"Coffee profile generated: customer {customer_id} -> {profile.profile_type} "
            f"({analysis.total_orders} orders, confidence {profile.confidence})"
        )
        return profile, analysis

    def get_profile(self, customer_id: str) -> CoffeeProfile:
        profile = self.find_profile(customer_id)
        if not profile:
            raise ProfileNotFoundError(customer_id)
        return profile

    def find_profile(self, customer_id: str):
        return CoffeeProfile.query.filter_by(customer_id=customer_id).first()

    def _save_profile(self, customer_id: str, fields: Dict[str, Any]) -> CoffeeProfile:
        """Insert or overwrite the customer's profile and commit."""
        profile = self.find_profile(customer_id)
        if profile is None:
            profile = CoffeeProfile(customer_id=customer_id)
            db.session.add(profile)

        for key, value in fields.items():
            setattr(profile, key, value)
        profile.generated_at = datetime.utcnow()

        db.session.commit()
        return profile

    def _save_profile_or_rollback(self, customer_id: str, fields: Dict[str, Any]) -> CoffeeProfile:
        try:
            return self._save_profile(customer_id, fields)
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(f"Coffee profile save failed for customer {customer_id}: {e}")
            raise
