"""
Order history aggregation for coffee profiling.

Walks a customer's completed orders once and tallies what they drink:
products, roast levels, milk, hot vs iced, sweeteners and categories.
Pure functions; the caller is responsible for fetching the orders.
"""
import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Tuple

PLANT_MILK_KEYWORDS = ('oat', 'almond', 'soy', 'coconut')
SWEETENER_KEYWORDS = ('syrup', 'sugar')
ICED_KEYWORDS = ('iced', 'cold')
DEFAULT_CATEGORY = 'Other'


@dataclass
class OrderAnalysis:
    """Tallies extracted from an order history."""
    total_orders: int
    top_products: List[Tuple[str, int]] = field(default_factory=list)
    roast_levels: Dict[str, int] = field(default_factory=dict)
    milk_types: Dict[str, int] = field(default_factory=dict)
    temperatures: Dict[str, int] = field(default_factory=lambda: {'hot': 0, 'iced': 0})
    modifier_usage: Dict[str, int] = field(default_factory=lambda: {'sweeteners': 0, 'extra_shots': 0})
    category_breakdown: Dict[str, int] = field(default_factory=dict)
    product_variety: int = 0

    @property
    def total_items(self) -> int:
        """Sum of quantities across every product."""
        return sum(count for _, count in self.top_products)

    def top_products_summary(self, limit: int = 5) -> List[Dict[str, Any]]:
        return [{'name': name, 'count': count} for name, count in self.top_products[:limit]]


def _modifier_values(item) -> List[str]:
    """Selected option labels of a line item, whatever shape they were stored in."""
    mods = getattr(item, 'modifiers', None)
    if not mods:
        return []
    if isinstance(mods, str):
        mods = json.loads(mods)
    if not isinstance(mods, dict):
        return []
    return [str(value) for value in mods.values() if value is not None]


def _item_name(item) -> str:
    product = getattr(item, 'product', None)
    if product is not None and product.name:
        return product.name
    return item.name


def _milk_from_name(name: str) -> str:
    lowered = name.lower()
    if 'oat' in lowered:
        return 'oat'
    if 'black' in lowered or lowered == 'espresso':
        return 'none'
    return 'dairy'


def _bump(tally: Dict[str, int], key: str, amount: int = 1) -> None:
    tally[key] = tally.get(key, 0) + amount


def analyze_orders(orders: Iterable) -> OrderAnalysis:
    """
    Aggregate a customer's orders into an OrderAnalysis.

    Quantity-weighted: products, roast levels, categories, hot/iced and the
    name-derived milk tally (oat / none / dairy). Counted once per modifier
    entry regardless of quantity: plant-based milk, sweeteners, extra shots.

    Args:
        orders: Orders with ``items``; each item exposes ``name``,
            ``quantity``, ``modifiers`` and an optional ``product`` (with
            ``name``, ``roast_level`` and ``category``).

    Returns:
        OrderAnalysis with top_products sorted by quantity, descending
    """
    orders = list(orders)
    analysis = OrderAnalysis(total_orders=len(orders))

    product_counts: Dict[str, int] = {}

    for order in orders:
        for item in order.items:
            name = _item_name(item)
            quantity = item.quantity or 0
            lowered = name.lower()

            _bump(product_counts, name, quantity)

            product = getattr(item, 'product', None)
            roast_level = getattr(product, 'roast_level', None) if product is not None else None
            if roast_level:
                _bump(analysis.roast_levels, getattr(roast_level, 'value', roast_level), quantity)

            category = getattr(product, 'category', None) if product is not None else None
            category_name = category.name if category is not None and category.name else DEFAULT_CATEGORY
            _bump(analysis.category_breakdown, category_name, quantity)

            if any(word in lowered for word in ICED_KEYWORDS):
                analysis.temperatures['iced'] += quantity
            else:
                analysis.temperatures['hot'] += quantity

            for value in _modifier_values(item):
                mod = value.lower()
                if any(word in mod for word in PLANT_MILK_KEYWORDS):
                    _bump(analysis.milk_types, 'plant-based')
                if any(word in mod for word in SWEETENER_KEYWORDS):
                    analysis.modifier_usage['sweeteners'] += 1
                if 'extra shot' in mod:
                    analysis.modifier_usage['extra_shots'] += 1

            _bump(analysis.milk_types, _milk_from_name(name), quantity)

    # sorted() is stable, so ties keep first-seen order
    analysis.top_products = sorted(product_counts.items(), key=lambda pair: pair[1], reverse=True)
    analysis.product_variety = len(product_counts)
    return analysis
