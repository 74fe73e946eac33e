"""
Business logic services for the Brewline platform.
"""
from .coffee_profile_service import CoffeeProfileService
from .loyalty_service import LoyaltyService
from .voucher_service import VoucherService

__all__ = [
    'CoffeeProfileService',
    'LoyaltyService',
    'VoucherService',
]
