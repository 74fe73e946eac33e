"""
Preference scores derived from an OrderAnalysis.

Every score is on a 1-5 scale. Scores are kept unrounded for
classification; round_score() is applied only when persisting.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict

from .order_analysis import OrderAnalysis

ROAST_WEIGHTS = {
    'LIGHT': 1,
    'MEDIUM_LIGHT': 2,
    'MEDIUM': 3,
    'MEDIUM_DARK': 4,
    'DARK': 5,
}

DEFAULT_ROAST = 3.0
DEFAULT_STRENGTH = 3.0
DEFAULT_TEMPERATURE = 3.5
DEFAULT_MILK = 'dairy'
MAX_SCORE = 5.0

# Only name-derived categories compete for the milk preference
NAME_MILK_TYPES = ('oat', 'none', 'dairy')


@dataclass
class Preferences:
    """Unrounded preference scores plus the dominant milk type."""
    roast: float
    strength: float
    milk: str
    temperature: float
    sweetness: float
    adventure: float


def round_half_up(value: float, places: int) -> float:
    """
    Round half up at the given decimal places.

    Float noise is discarded first so that e.g. 0.5255 rounds to 0.53
    regardless of how the sum was accumulated.
    """
    cleaned = Decimal(repr(value)).quantize(Decimal('1e-9'), rounding=ROUND_HALF_UP)
    return float(cleaned.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP))


def round_score(value: float) -> float:
    return round_half_up(value, 1)


def roast_score(roast_levels: Dict[str, int]) -> float:
    """Quantity-weighted mean roast (LIGHT=1 .. DARK=5); medium when unknown."""
    total_weight = 0
    total_count = 0
    for level, count in roast_levels.items():
        weight = ROAST_WEIGHTS.get(level)
        if weight:
            total_weight += weight * count
            total_count += count
    return total_weight / total_count if total_count > 0 else DEFAULT_ROAST


def strength_score(analysis: OrderAnalysis) -> float:
    # Normalized by orders, not items
    black = analysis.milk_types.get('none', 0)
    if not black:
        return DEFAULT_STRENGTH
    return min(MAX_SCORE, 3 + (black / analysis.total_orders) * 2)


def milk_preference(milk_types: Dict[str, int]) -> str:
    """Most frequent name-derived milk type; first seen wins a tie."""
    best = None
    best_count = None
    for milk, count in milk_types.items():
        if milk not in NAME_MILK_TYPES:
            continue
        if best_count is None or count > best_count:
            best, best_count = milk, count
    return best or DEFAULT_MILK


def temperature_score(temperatures: Dict[str, int]) -> float:
    """1 = always iced, 5 = always hot."""
    hot = temperatures.get('hot', 0)
    total = hot + temperatures.get('iced', 0)
    if total <= 0:
        return DEFAULT_TEMPERATURE
    return 1 + (hot / total) * 4


def sweetness_score(analysis: OrderAnalysis) -> float:
    total_items = analysis.total_items
    if total_items <= 0:
        return 1.0
    return min(MAX_SCORE, 1 + (analysis.modifier_usage.get('sweeteners', 0) / total_items) * 8)


def adventure_score(analysis: OrderAnalysis) -> float:
    variety_ratio = analysis.product_variety / max(1, analysis.total_orders)
    return min(MAX_SCORE, 1 + variety_ratio * 8)


def score_preferences(analysis: OrderAnalysis) -> Preferences:
    """Compute all preference scores for an analysis."""
    return Preferences(
        roast=roast_score(analysis.roast_levels),
        strength=strength_score(analysis),
        milk=milk_preference(analysis.milk_types),
        temperature=temperature_score(analysis.temperatures),
        sweetness=sweetness_score(analysis),
        adventure=adventure_score(analysis),
    )
