"""
Subscription discount engine
"""

from .cart import Cart
from .cart_item import CartItem, SubscriptionInfo
from .errors import DiscountError, ErrorKind
from .phases import DiscountApplication, DiscountPhase, DiscountType, PhaseResult, evaluate_phase
from .time_units import TimeUnit, normalize_duration

__all__ = [
    'Cart',
    'CartItem',
    'SubscriptionInfo',
    'DiscountError',
    'ErrorKind',
    'DiscountApplication',
    'DiscountPhase',
    'DiscountType',
    'PhaseResult',
    'evaluate_phase',
    'TimeUnit',
    'normalize_duration',
]
