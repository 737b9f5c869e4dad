"""
Duplicate Detector - Find probable duplicate subscription records

Two records are reported as duplicates when all of these hold:
- monthly-equivalent amounts, in the display currency, within 0.01
- the same next payment date (or neither has one)
- name similarity (1 - editDistance / maxLen) strictly above 0.9

Records the user marked as "not a duplicate" are never reported. Every pair
is compared, which is fine for personal-scale record counts.
"""

from datetime import date
from typing import Callable, Dict, List, Optional, Set

from config import DUPLICATE_NAME_SIMILARITY, DUPLICATE_AMOUNT_TOLERANCE, DEFAULT_DISPLAY_CURRENCY

from .calculations import get_monthly_value, calculate_next_payment_date
from .currency import convert_currency


def edit_distance(first: str, second: str) -> int:
    """Levenshtein distance; insert, delete and substitute each cost 1"""
    rows = len(first) + 1
    cols = len(second) + 1
    table = [[0] * cols for _ in range(rows)]

    for i in range(rows):
        table[i][0] = i
    for j in range(cols):
        table[0][j] = j

    for i in range(1, rows):
        for j in range(1, cols):
            if first[i - 1] == second[j - 1]:
                table[i][j] = table[i - 1][j - 1]
            else:
                table[i][j] = 1 + min(
                    table[i - 1][j - 1],
                    table[i][j - 1],
                    table[i - 1][j]
                )

    return table[-1][-1]


def name_similarity(first: str, second: str) -> float:
    """Similarity ratio in [0, 1]; two empty names are identical"""
    first = (first or '').strip().lower()
    second = (second or '').strip().lower()
    longest = max(len(first), len(second))
    if longest == 0:
        return 1.0
    return (longest - edit_distance(first, second)) / longest


class DuplicateDetector:
    """Fuzzy duplicate detection over a user's subscriptions"""

    def __init__(self, convert: Callable = convert_currency, today: Optional[date] = None,
                 name_threshold: float = DUPLICATE_NAME_SIMILARITY,
                 amount_tolerance: float = DUPLICATE_AMOUNT_TOLERANCE):
        self.convert = convert
        self.today = today
        self.name_threshold = name_threshold
        self.amount_tolerance = amount_tolerance

    def detect(self, subscriptions: List[Dict],
               display_currency: str = DEFAULT_DISPLAY_CURRENCY) -> Set[str]:
        """
        Find duplicate subscriptions

        Args:
            subscriptions: Persisted subscription records (need 'id')
            display_currency: Currency amounts are compared in

        Returns:
            Set of ids that have at least one duplicate partner
        """
        candidates = [sub for sub in subscriptions if not sub.get('marked_as_not_duplicate')]
        prepared = [
            (
                sub,
                get_monthly_value(sub, display_currency, self.convert),
                calculate_next_payment_date(sub.get('start_date'), sub.get('frequency', 'monthly'), self.today)
            )
            for sub in candidates
        ]

        duplicate_ids = set()
        for i in range(len(prepared)):
            first, first_amount, first_next = prepared[i]
            for j in range(i + 1, len(prepared)):
                second, second_amount, second_next = prepared[j]

                if abs(first_amount - second_amount) > self.amount_tolerance:
                    continue
                if first_next != second_next:
                    continue
                if name_similarity(first.get('name'), second.get('name')) <= self.name_threshold:
                    continue

                duplicate_ids.add(first['id'])
                duplicate_ids.add(second['id'])

        return duplicate_ids
