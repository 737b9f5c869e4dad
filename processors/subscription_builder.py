"""
Subscription Builder - Turn selected detected subscriptions into records

Records are ready for the store's insert-many; nothing is written here.
"""

import uuid
from datetime import datetime
from typing import Dict, List, Optional

from config import DEFAULT_TAGS, FREQUENCIES, IMPORT_NOTE, SUPPORTED_CURRENCIES


class SubscriptionBuilder:
    """
    Build persisted subscription records for one user
    """

    def __init__(self, user_id: str, tags: Optional[List[str]] = None):
        """
        Args:
            user_id: Owner of the created records
            tags: Tags applied to every record (default: first default tag)
        """
        if not user_id:
            raise ValueError("user_id is required")
        self.user_id = user_id
        self.tags = list(tags) if tags else [DEFAULT_TAGS[0]]

    def build(self, detected: Dict) -> Dict:
        """
        Build one record from a detected subscription

        The start date is the earliest charge in the detected group and the
        amount is the group's average, rounded to cents.
        """
        name = (detected.get('name') or detected.get('description') or '').strip()
        if not name:
            raise ValueError("Detected subscription has no name")

        group = detected.get('transactions') or [detected]

        amounts = [float(txn.get('amount') or 0) for txn in group]
        if len(amounts) > 1:
            raw_amount = sum(amounts) / len(amounts)
        else:
            raw_amount = float(detected.get('amount') or 0)
        amount = round(raw_amount, 2)
        if amount <= 0:
            raise ValueError(f"Invalid amount for {name}: {detected.get('amount')}")

        currency = detected.get('currency') or 'USD'
        if currency not in SUPPORTED_CURRENCIES:
            raise ValueError(f"Unsupported currency for {name}: {currency}")

        frequency = detected.get('frequency') or 'one-off'
        if frequency not in FREQUENCIES:
            raise ValueError(f"Unsupported frequency for {name}: {frequency}")

        dates = [txn['date'] for txn in group if txn.get('date')]
        start_date = min(dates) if dates else detected.get('date')

        return {
            'id': str(uuid.uuid4()),
            'user_id': self.user_id,
            'name': name,
            'amount': amount,
            'currency': currency,
            'start_date': start_date,
            'frequency': frequency,
            'category': detected.get('category') or 'Other',
            'tags': list(self.tags),
            'cancelled': False,
            'notes': IMPORT_NOTE,
            'created_at': datetime.now().isoformat()
        }

    def build_batch(self, selected: List[Dict]) -> List[Dict]:
        """
        Build records for every selected subscription

        Recurring charges from the same group produce one record.
        """
        records = []
        seen_groups = set()

        for detected in selected:
            group_id = detected.get('group_id')
            if group_id is not None and detected.get('is_recurring'):
                if group_id in seen_groups:
                    continue
                seen_groups.add(group_id)
            records.append(self.build(detected))

        return records
