"""
Classifiers Package - Transaction naming, categorisation and recurrence
"""

from .category_classifier import CategoryClassifier
from .merchant_matcher import MerchantMatcher
from .transaction_normalizer import TransactionNormalizer
from .recurrence_detector import RecurrenceDetector

__all__ = [
    'CategoryClassifier',
    'MerchantMatcher',
    'TransactionNormalizer',
    'RecurrenceDetector'
]
