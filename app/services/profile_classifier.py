"""
Coffee profile archetypes, flavor notes and confidence.
"""
from typing import Dict, List, Optional

from .preference_scoring import Preferences, round_half_up

BOLD_EXPLORER = 'Bold Explorer'
COLD_BREW_ENTHUSIAST = 'Cold Brew Enthusiast'
HEALTH_CONSCIOUS = 'Health Conscious'
SWEET_TOOTH = 'Sweet Tooth'
ADVENTUROUS_TASTER = 'Adventurous Taster'
MINIMALIST = 'Minimalist'
SMOOTH_SIPPER = 'Smooth Sipper'
CLASSIC_LOVER = 'Classic Lover'

PROFILE_TYPES = {
    BOLD_EXPLORER: 'Loves dark roasts and strong flavors',
    SMOOTH_SIPPER: 'Prefers balanced, mellow drinks',
    CLASSIC_LOVER: 'Sticks to traditional favorites',
    ADVENTUROUS_TASTER: 'Always trying new things',
    HEALTH_CONSCIOUS: 'Favors plant-based and wellness options',
    SWEET_TOOTH: 'Enjoys flavored and sweetened drinks',
    MINIMALIST: 'Appreciates simplicity and quality',
    COLD_BREW_ENTHUSIAST: 'Loves iced and cold beverages',
}

MAX_FLAVOR_NOTES = 4
MAX_CONFIDENCE = 0.95


def classify_profile(prefs: Preferences, categories: Optional[Dict[str, int]] = None) -> str:
    """
    Pick the archetype for a set of preferences.

    Rules are checked in order and the first match wins; Classic Lover
    catches everything else. ``categories`` is accepted for future
    category-driven rules and does not affect the result today.
    """
    if prefs.roast >= 4 and prefs.strength >= 4:
        return BOLD_EXPLORER

    if prefs.temperature <= 2.5:
        return COLD_BREW_ENTHUSIAST

    if prefs.milk in ('plant-based', 'oat'):
        return HEALTH_CONSCIOUS

    if prefs.sweetness >= 3.5:
        return SWEET_TOOTH

    if prefs.adventure >= 4:
        return ADVENTUROUS_TASTER

    if prefs.milk == 'none' and prefs.roast <= 3:
        return MINIMALIST

    if 2 <= prefs.roast <= 3.5 and prefs.strength <= 3.5:
        return SMOOTH_SIPPER

    return CLASSIC_LOVER


def select_flavor_notes(roast: float, sweetness: float) -> List[str]:
    """Flavor notes suggested by roast and sweetness, at most four."""
    notes = []

    if roast >= 4:
        notes.extend(['chocolate', 'nutty'])
        if roast >= 4.5:
            notes.append('earthy')
    elif roast >= 2.5:
        notes.append('caramel')
        if sweetness >= 3:
            notes.append('vanilla')
    else:
        notes.extend(['fruity', 'floral'])
        if roast <= 1.5:
            notes.append('citrus')

    if sweetness >= 4:
        notes.append('berry')

    return notes[:MAX_FLAVOR_NOTES]


def profile_confidence(orders_analyzed: int, product_variety: int) -> float:
    """More orders and more variety mean a more trustworthy profile."""
    confidence = min(
        MAX_CONFIDENCE,
        0.5 + (orders_analyzed / 100) * 0.3 + (product_variety / 20) * 0.15
    )
    return round_half_up(confidence, 2)
