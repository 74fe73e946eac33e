"""
Database models for the Brewline platform.
Cafes, menu, orders, coffee profiles and the loyalty ledger.
"""
from .cafe import Cafe, Category, Product, RoastLevel
from .customer import Customer, LoyaltyTier
from .order import Order, OrderItem, OrderStatus
from .coffee_profile import CoffeeProfile
from .loyalty import (
    PointTransaction,
    PointTransactionType,
    Voucher,
    VoucherType,
    VoucherStatus,
)

__all__ = [
    'Cafe',
    'Category',
    'Product',
    'RoastLevel',
    'Customer',
    'LoyaltyTier',
    'Order',
    'OrderItem',
    'OrderStatus',
    'CoffeeProfile',
    # Loyalty
    'PointTransaction',
    'PointTransactionType',
    'Voucher',
    'VoucherType',
    'VoucherStatus',
]
