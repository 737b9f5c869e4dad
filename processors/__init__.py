"""
Processors Package - Subscription record processing modules
"""

from .currency import convert_currency
from .calculations import get_monthly_value, calculate_next_payment_date
from .duplicate_detector import DuplicateDetector
from .subscription_builder import SubscriptionBuilder

__all__ = ['convert_currency', 'get_monthly_value', 'calculate_next_payment_date',
           'DuplicateDetector', 'SubscriptionBuilder']
