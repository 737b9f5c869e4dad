"""
Format Detector Module - Choose a row parser for an extracted statement

Bank names and characteristic phrases are checked first; without one, a
long-month date ("January 15") points to the US card layout. Anything else is
'unknown' and the caller tries both parsers.
"""

import re
from typing import Dict, List

from .pdf_extractor import row_text

FORMAT_A = 'us_card'
FORMAT_B = 'hk_bank'
FORMAT_UNKNOWN = 'unknown'

# Checked in order; first hit wins
FORMAT_IDENTIFIERS = [
    (FORMAT_A, [
        'chase', 'jpmorgan', 'capital one', 'american express', 'amex',
        'discover card', 'citi cards', 'bank of america',
        'wells fargo', 'synchrony', 'purchases and adjustments',
        'payments and other credits'
    ]),
    (FORMAT_B, [
        'hang seng', 'hsbc', 'standard chartered', 'bank of china (hong kong)',
        'bochk', 'bank of east asia', 'dbs bank (hong kong)', 'citibank (hong kong)',
        'hong kong dollar', 'trans date', 'post date'
    ]),
]

LONG_MONTH_DATE_RE = re.compile(
    r'\b(january|february|march|april|may|june|july|august|september|'
    r'october|november|december)\s+\d{1,2}\b'
)


class BankFormatDetector:
    """Detect which statement layout a set of rows came from"""

    def __init__(self):
        self.matched_identifier = None

    def detect(self, rows: List[Dict]) -> str:
        """
        Detect statement format

        Args:
            rows: Output of PositionedTextExtractor.extract_rows()

        Returns:
            FORMAT_A, FORMAT_B or FORMAT_UNKNOWN
        """
        self.matched_identifier = None
        text = ' '.join(row_text(row) for row in rows).casefold()

        for statement_format, identifiers in FORMAT_IDENTIFIERS:
            for identifier in identifiers:
                # Whole words only: 'chase' must not fire on 'purchase'
                if re.search(r'(?<!\w)' + re.escape(identifier) + r'(?!\w)', text):
                    self.matched_identifier = identifier
                    return statement_format

        if LONG_MONTH_DATE_RE.search(text):
            self.matched_identifier = 'long month date'
            return FORMAT_A

        return FORMAT_UNKNOWN
