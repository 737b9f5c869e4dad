"""
Transaction Normalizer - Give parsed transactions a display name and category
"""

from typing import Dict, List, Optional

from .category_classifier import CategoryClassifier
from .merchant_matcher import MerchantMatcher


class TransactionNormalizer:
    """Combine merchant matching and category classification"""

    def __init__(self, category_classifier: Optional[CategoryClassifier] = None,
                 merchant_matcher: Optional[MerchantMatcher] = None):
        self.category_classifier = category_classifier or CategoryClassifier()
        self.merchant_matcher = merchant_matcher or MerchantMatcher()

    def normalize(self, transaction: Dict) -> Dict:
        """
        Normalize a single transaction

        Args:
            transaction: Parser output (needs 'description'; 'raw_category' optional)

        Returns:
            New dict with 'name' and 'category' filled in
        """
        description = transaction.get('description', '')
        normalized = dict(transaction)
        normalized['name'] = self.merchant_matcher.display_name(description)
        normalized['category'] = self.category_classifier.classify(
            description, transaction.get('raw_category')
        )
        return normalized

    def normalize_batch(self, transactions: List[Dict]) -> List[Dict]:
        return [self.normalize(txn) for txn in transactions]
