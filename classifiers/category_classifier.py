"""
Category Classifier Module - Assign a spending category to a transaction

Two sources, in order:
1. A raw category hint printed by the bank (merchant-type column)
2. Keyword matching on the description, first matching category wins
"""

import json
import os
from collections import OrderedDict
from typing import Dict, List, Optional, Tuple

from config import DATA_DIR

DEFAULT_CATEGORY = 'Other'


class CategoryClassifier:
    """
    Classify transactions into display categories
    Keyword table order matters: earlier categories win ties
    """

    def __init__(self, keywords: Optional[Dict[str, List[str]]] = None):
        self.keywords = keywords if keywords is not None else self._load_keywords()
        self.hint_rules = self._get_hint_rules()

    def _load_keywords(self) -> Dict[str, List[str]]:
        """Load category keywords from JSON file, defaults otherwise"""
        keywords_file = os.path.join(DATA_DIR, 'category_keywords.json')

        if os.path.exists(keywords_file):
            with open(keywords_file, 'r', encoding='utf-8') as f:
                return json.load(f, object_pairs_hook=OrderedDict)

        return self._get_default_keywords()

    def _get_default_keywords(self) -> Dict[str, List[str]]:
        return OrderedDict([
            ('Entertainment', [
                'netflix', 'spotify', 'disney', 'hulu', 'hbo', 'youtube', 'prime video',
                'apple music', 'apple tv', 'twitch', 'playstation', 'xbox', 'nintendo',
                'steam', 'cinema', 'movie', 'audible', 'crunchyroll', 'paramount',
                'peacock', 'tidal', 'deezer', 'joox', 'mytv super', 'now tv'
            ]),
            ('Groceries', [
                'supermarket', 'grocery', 'parknshop', 'park n shop', 'wellcome', 'aeon',
                'ztore', 'whole foods', 'trader joe', 'safeway', 'kroger', 'costco',
                'instacart', 'market place', 'fresh market'
            ]),
            ('Dining', [
                'restaurant', 'cafe', 'coffee', 'starbucks', 'mcdonald', 'kfc', 'pizza',
                'burger', 'sushi', 'deliveroo', 'foodpanda', 'doordash', 'uber eats',
                'grubhub', 'bakery', 'noodle', 'dim sum'
            ]),
            ('Health & Beauty', [
                'pharmacy', 'watsons', 'mannings', 'cvs', 'walgreens', 'clinic', 'dental',
                'hospital', 'medical', 'sasa', 'sephora', 'salon', 'beauty', 'optical'
            ]),
            ('Shopping', [
                'amazon', 'amzn', 'ebay', 'taobao', 'hktvmall', 'ikea', 'uniqlo', 'zara',
                'h&m', 'walmart', 'target', 'best buy', 'etsy', 'shein', 'department store'
            ]),
            ('Travel', [
                'airline', 'airways', 'cathay', 'hk express', 'uber', 'lyft', 'taxi', 'mtr',
                'octopus', 'hotel', 'airbnb', 'booking.com', 'expedia', 'agoda', 'trip.com',
                'klook'
            ]),
            ('Telecom', [
                'pccw', 'hkt', 'smartone', 'china mobile', '3hk', 'verizon', 'at&t',
                't-mobile', 'comcast', 'xfinity', 'broadband', 'netvigator', 'hkbn'
            ]),
            ('Software', [
                'adobe', 'microsoft', 'office 365', 'github', 'dropbox', 'icloud',
                'google one', 'google storage', 'notion', 'slack', 'zoom', 'canva', 'figma',
                'openai', 'chatgpt', 'jetbrains', '1password', 'digitalocean'
            ]),
            ('Sports & Fitness', [
                'gym', 'fitness', 'peloton', 'strava', 'yoga', 'decathlon', 'nike',
                'adidas', 'classpass', 'golf', 'swimming'
            ]),
            ('Finance', [
                'insurance', 'bank', 'interest', 'annual fee', 'service fee', 'paypal',
                'prudential', 'manulife', 'brokerage', 'loan'
            ]),
        ])

    def _get_hint_rules(self) -> List[Tuple[str, str]]:
        """Substring of the bank's merchant-type label -> category"""
        return [
            ('SUPERMARKET', 'Groceries'),
            ('GROCERY', 'Groceries'),
            ('RESTAURANT', 'Dining'),
            ('FASTFOOD', 'Dining'),
            ('BAKERY', 'Dining'),
            ('CAFE', 'Dining'),
            ('HOTEL', 'Travel'),
            ('AIRLINE', 'Travel'),
            ('TRANSPORT', 'Travel'),
            ('PHARMACY', 'Health & Beauty'),
            ('BEAUTY', 'Health & Beauty'),
            ('TELECOM', 'Telecom'),
            ('DEPARTMENT', 'Shopping'),
            ('ELECTRONICS', 'Shopping'),
            ('CINEMA', 'Entertainment'),
            ('ENTERTAINMENT', 'Entertainment'),
            ('INSURANCE', 'Finance'),
            ('FITNESS', 'Sports & Fitness'),
            ('SOFTWARE', 'Software'),
        ]

    def classify(self, description: str, raw_category: Optional[str] = None) -> str:
        """
        Classify a transaction

        Args:
            description: Transaction description
            raw_category: Optional merchant-type label from the statement

        Returns:
            Category name, 'Other' when nothing matches
        """
        if raw_category:
            hinted = self.classify_hint(raw_category)
            if hinted:
                return hinted

        return self.classify_description(description)

    def classify_hint(self, raw_category: str) -> Optional[str]:
        hint = raw_category.upper()
        for fragment, category in self.hint_rules:
            if fragment in hint:
                return category
        return None

    def classify_description(self, description: str) -> str:
        description_lower = (description or '').casefold()
        for category, keywords in self.keywords.items():
            if any(keyword in description_lower for keyword in keywords):
                return category
        return DEFAULT_CATEGORY
