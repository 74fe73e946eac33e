"""
Product recommendations for a stored coffee profile.
"""
from typing import Any, Dict, List

from ..models import CoffeeProfile, Product, RoastLevel

DARK_ROASTS = (RoastLevel.DARK.value, RoastLevel.MEDIUM_DARK.value)
LIGHT_ROASTS = (RoastLevel.LIGHT.value, RoastLevel.MEDIUM_LIGHT.value)

CANDIDATE_LIMIT = 5
PER_GROUP = 3


def get_recommendations(profile: CoffeeProfile) -> List[Dict[str, Any]]:
    """
    Recommendation groups for a profile.

    Always includes a "based_on_profile" group matched on roast; adds a
    "temperature" group of cold drinks for customers who mostly order iced.
    """
    query = Product.query.filter(Product.is_active.is_(True))
    if profile.roast_preference >= 4:
        query = query.filter(Product.roast_level.in_(DARK_ROASTS))
    elif profile.roast_preference <= 2:
        query = query.filter(Product.roast_level.in_(LIGHT_ROASTS))

    products = query.order_by(Product.created_at).limit(CANDIDATE_LIMIT).all()

    recommendations = [{
        'type': 'based_on_profile',
        'title': f'Perfect for a {profile.profile_type}',
        'products': [p.to_dict() for p in products[:PER_GROUP]],
    }]

    if profile.temperature <= 2.5:
        cold_drinks = (
            Product.query
            .filter(Product.is_active.is_(True), Product.name.ilike('%cold%'))
            .order_by(Product.created_at)
            .limit(PER_GROUP)
            .all()
        )
        if cold_drinks:
            recommendations.append({
                'type': 'temperature',
                'title': 'Cold drinks you might love',
                'products': [p.to_dict() for p in cold_drinks],
            })

    return recommendations
