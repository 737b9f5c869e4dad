"""
Row Parser Module - Shared row scan for statement-specific parsers

Every supported layout puts a date near the start of a transaction line and
the amount at the end, with the merchant description in between. Subclasses
describe their layout through class attributes and a date hook; the scan is
the same for all of them:

1. skip boilerplate rows (headers, totals, disclaimers)
2. find a date in the first few tokens (leftmost wins)
3. take the rightmost amount token after the date
4. drop credits, payments and too-short descriptions
"""

import re
from datetime import date
from typing import Dict, List, Optional, Tuple

from config import DEBUG


class RowParser:
    """Base class for statement row parsers (strategy configured per format)"""

    FORMAT = None
    CURRENCY = None

    MIN_TOKENS = 2
    DATE_WINDOW = 3          # date must start within this many leading tokens
    MAX_DATE_TOKENS = 3      # a date may span up to this many tokens
    HAS_POSTING_DATE = False

    DATE_PATTERN = None
    AMOUNT_PATTERN = None
    CREDIT_MARKERS = ('CR',)
    SKIP_PATTERNS: List = []
    DESCRIPTION_DISALLOWED = re.compile(r"[^\w\s\-&*.']")
    PAYMENT_PREFIXES: Tuple[str, ...] = ('payment', 'autopay', 'credit', 'direct debit')

    def __init__(self, today: Optional[date] = None):
        self.today = today or date.today()
        self.debug = DEBUG
        self.rows_seen = 0
        self.rows_skipped = 0

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def prepare(self, rows: List[Dict]):
        """Called once per statement before rows are scanned"""

    def parse_date(self, match) -> str:
        """Turn a DATE_PATTERN match into an ISO date string"""
        raise NotImplementedError

    def _refine_description(self, tokens: List[str], extras: Dict) -> List[str]:
        """Layout-specific trimming of the description tokens"""
        return tokens

    # ------------------------------------------------------------------
    # Scan
    # ------------------------------------------------------------------

    def parse_rows(self, rows: List[Dict]) -> List[Dict]:
        """
        Parse every row of a statement

        Args:
            rows: Output of PositionedTextExtractor.extract_rows()

        Returns:
            List of transaction dicts, in statement order
        """
        self.prepare(rows)
        self.rows_seen = len(rows)

        transactions = []
        for row in rows:
            txn = self.parse_row(row)
            if txn is not None:
                transactions.append(txn)

        self.rows_skipped = self.rows_seen - len(transactions)
        if self.debug:
            print(f"[DEBUG] {self.__class__.__name__}: {len(transactions)} transactions, "
                  f"{self.rows_skipped} rows skipped", flush=True)
        return transactions

    def parse_row(self, row: Dict) -> Optional[Dict]:
        """Parse one row; None when the row is not a transaction line"""
        tokens = self._tokens(row)
        if len(tokens) < self.MIN_TOKENS:
            return None

        text = ' '.join(tokens)
        if self._is_skipped(text):
            return None

        found = self._find_date(tokens)
        if found is None:
            return None
        date_end, date_match = found

        try:
            txn_date = self.parse_date(date_match)
        except ValueError:
            return None

        extras = {}
        description_start = date_end
        if self.HAS_POSTING_DATE:
            posting = self._match_date_at(tokens, date_end)
            if posting is not None:
                description_start, posting_match = posting
                try:
                    extras['posting_date'] = self.parse_date(posting_match)
                except ValueError:
                    pass

        found_amount = self._find_amount(tokens, description_start)
        if found_amount is None:
            return None
        amount_index, amount, is_credit = found_amount

        if is_credit or amount <= 0:
            return None

        description_tokens = self._refine_description(tokens[description_start:amount_index], extras)
        description = self.clean_description(' '.join(description_tokens))
        if len(description) < 2:
            return None

        if self._is_payment(description):
            return None

        txn = {
            'date': txn_date,
            'description': description,
            'amount': amount,
            'currency': self.CURRENCY,
            'category': None,
            'raw_text': text,
            'format': self.FORMAT
        }
        txn.update(extras)
        return txn

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _tokens(self, row: Dict) -> List[str]:
        """Word tokens of a row; text runs containing spaces are split"""
        tokens = []
        for item in row.get('items', []):
            tokens.extend((item.get('text') or '').split())
        return tokens

    def _is_skipped(self, text: str) -> bool:
        return any(pattern.search(text) for pattern in self.SKIP_PATTERNS)

    def _match_date_at(self, tokens: List[str], start: int):
        """Date spanning tokens[start:end]; returns (end, match) or None"""
        for span in range(1, self.MAX_DATE_TOKENS + 1):
            end = start + span
            if end > len(tokens):
                break
            match = self.DATE_PATTERN.fullmatch(' '.join(tokens[start:end]))
            if match:
                return end, match
        return None

    def _find_date(self, tokens: List[str]):
        """First (leftmost) date starting inside the prefix window"""
        for start in range(min(self.DATE_WINDOW, len(tokens))):
            found = self._match_date_at(tokens, start)
            if found is not None:
                return found
        return None

    def _find_amount(self, tokens: List[str], lower: int):
        """
        Rightmost amount token at or after index `lower`

        Returns:
            (index, amount, is_credit) or None
        """
        for index in range(len(tokens) - 1, lower - 1, -1):
            match = self.AMOUNT_PATTERN.fullmatch(tokens[index])
            if not match:
                continue

            amount = float(match.group('value').replace(',', ''))
            groups = match.groupdict()
            is_credit = bool(groups.get('credit') or groups.get('sign'))

            # Marker printed as its own token: "15.99 CR"
            if index + 1 < len(tokens) and tokens[index + 1].upper() in self.CREDIT_MARKERS:
                is_credit = True

            return index, amount, is_credit
        return None

    def clean_description(self, text: str) -> str:
        """Collapse whitespace and drop characters outside the allow-list"""
        text = re.sub(r'\s+', ' ', text or '')
        text = self.DESCRIPTION_DISALLOWED.sub('', text)
        return re.sub(r'\s+', ' ', text).strip()

    def _is_payment(self, description: str) -> bool:
        """Description opens with a whole payment keyword ('PAYMENTUS' is a merchant)"""
        prefixes = '|'.join(re.escape(prefix) for prefix in self.PAYMENT_PREFIXES)
        return re.match(r'(?:' + prefixes + r')\b', description.casefold()) is not None
