"""
Recurrence Detector Module - Flag charges that repeat within a statement

Grouping is greedy and single-pass: each transaction not yet grouped claims
every later ungrouped transaction with a similar description and amount.
Earlier transactions claim members first, so the result depends on input
order. A group of two or more is treated as a recurring charge.
"""

import re
from datetime import date
from typing import Dict, List

from config import (RECURRENCE_SIMILARITY_THRESHOLD, RECURRENCE_AMOUNT_TOLERANCE,
                    RECURRENCE_MIN_WORD_LENGTH, YEARLY_GAP_DAYS,
                    CONFIDENCE_HIGH, CONFIDENCE_MEDIUM, CONFIDENCE_KEYWORD, CONFIDENCE_LOW)

SUBSCRIPTION_KEYWORDS = [
    'netflix', 'spotify', 'apple', 'amazon', 'prime', 'hulu', 'disney',
    'youtube', 'premium', 'subscription', 'membership', 'monthly', 'annual',
    'adobe', 'microsoft', 'office', 'dropbox', 'icloud', 'google', 'gym',
    'fitness', 'streaming', 'music', 'video', 'cloud', 'storage'
]


def normalize_description(description: str) -> str:
    """Lowercase alphanumerics and single spaces only"""
    normalized = re.sub(r'[^a-z0-9\s]', '', (description or '').lower())
    return re.sub(r'\s+', ' ', normalized).strip()


def description_similarity(first: str, second: str) -> float:
    """
    Share of the first description's words (3+ chars) that also appear in the second

    Not symmetric: the first description sets the denominator.
    """
    first_words = [w for w in normalize_description(first).split()
                   if len(w) >= RECURRENCE_MIN_WORD_LENGTH]
    if not first_words:
        return 0.0

    second_words = set(normalize_description(second).split())
    matches = sum(1 for word in first_words if word in second_words)
    return matches / len(first_words)


def amount_difference(reference: float, other: float) -> float:
    """Relative difference of `other` from the (positive) reference amount"""
    if reference <= 0:
        return float('inf')
    return abs(reference - other) / reference


def has_subscription_keywords(description: str) -> bool:
    normalized = normalize_description(description)
    return any(keyword in normalized for keyword in SUBSCRIPTION_KEYWORDS)


class RecurrenceDetector:
    """Group similar transactions and annotate them for import"""

    def __init__(self, similarity_threshold: float = RECURRENCE_SIMILARITY_THRESHOLD,
                 amount_tolerance: float = RECURRENCE_AMOUNT_TOLERANCE):
        self.similarity_threshold = similarity_threshold
        self.amount_tolerance = amount_tolerance

    def group(self, transactions: List[Dict]) -> List[List[int]]:
        """
        Group transactions by description and amount

        Returns:
            Groups of indexes into `transactions`; every index appears once
        """
        groups = []
        used = set()

        for i, first in enumerate(transactions):
            if i in used:
                continue
            group = [i]
            used.add(i)

            for j in range(i + 1, len(transactions)):
                if j in used:
                    continue
                second = transactions[j]
                similarity = description_similarity(first['description'], second['description'])
                difference = amount_difference(first['amount'], second['amount'])
                if similarity > self.similarity_threshold and difference < self.amount_tolerance:
                    group.append(j)
                    used.add(j)

            groups.append(group)

        return groups

    def detect(self, transactions: List[Dict]) -> List[Dict]:
        """
        Annotate every transaction with recurrence information

        Args:
            transactions: Normalized transactions from one statement

        Returns:
            One detected-subscription dict per transaction, highest confidence first
        """
        detected = []

        for group_id, group in enumerate(self.group(transactions)):
            members = [transactions[index] for index in group]
            is_recurring = len(members) >= 2
            frequency = self._frequency(members) if is_recurring else 'one-off'
            confidence = self._confidence(members)

            for member in members:
                entry = dict(member)
                entry['name'] = member.get('name') or member['description']
                entry['frequency'] = frequency
                entry['confidence'] = confidence
                entry['is_recurring'] = is_recurring
                entry['group_id'] = group_id
                entry['transactions'] = members
                detected.append(entry)

        # Stable: equal confidence keeps statement order
        return sorted(detected, key=lambda entry: entry['confidence'], reverse=True)

    def _frequency(self, members: List[Dict]) -> str:
        dates = sorted(date.fromisoformat(member['date']) for member in members)
        gaps = [(later - earlier).days for earlier, later in zip(dates, dates[1:])]
        average_gap = sum(gaps) / len(gaps)
        return 'yearly' if average_gap > YEARLY_GAP_DAYS else 'monthly'

    def _confidence(self, members: List[Dict]) -> float:
        if len(members) >= 3:
            return CONFIDENCE_HIGH
        if len(members) == 2:
            return CONFIDENCE_MEDIUM
        if has_subscription_keywords(members[0]['description']):
            return CONFIDENCE_KEYWORD
        return CONFIDENCE_LOW
