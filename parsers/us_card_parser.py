"""
US Card Parser - Format A statements

Transaction lines look like:

    March 14   NETFLIX.COM 866-579-7172 CA          15.99
    March 18   PAYMENT THANK YOU                   500.00-

Lines carry no year. The statement year is read once from the header area
and billing-cycle rollover is handled by placing Oct/Nov/Dec in the prior
year.
"""

import re
from datetime import date
from typing import Dict, List, Optional

from config import YEAR_SCAN_ROWS, STATEMENT_YEAR_MIN, STATEMENT_YEAR_MAX

from .format_detector import FORMAT_A
from .row_parser import RowParser

MONTHS_FULL = {
    'january': 1, 'february': 2, 'march': 3, 'april': 4, 'may': 5, 'june': 6,
    'july': 7, 'august': 8, 'september': 9, 'october': 10, 'november': 11, 'december': 12,
}

# Months that belong to the year before the statement year
ROLLOVER_FIRST_MONTH = 10

DATE_RE = re.compile(
    r'(?P<month>January|February|March|April|May|June|July|August|September|'
    r'October|November|December)\s+(?P<day>\d{1,2}),?',
    re.IGNORECASE
)

# Trailing 'CR' or '-' marks a credit; so does a leading minus
AMOUNT_RE = re.compile(
    r'(?P<sign>-)?\$?(?P<value>\d{1,3}(?:,\d{3})+\.\d{2}|\d+\.\d{2})(?P<credit>CR|-)?',
    re.IGNORECASE
)

YEAR_TOKEN_RE = re.compile(r'\(?(?P<year>\d{4})[),.:]?')


def parse_us_card_date(text: str, statement_year: int) -> str:
    """
    Parse a '<Month> <Day>' token into an ISO date

    Args:
        text: e.g. 'March 14'
        statement_year: Year detected for the statement

    Returns:
        'YYYY-MM-DD'; Oct-Dec dates are placed in statement_year - 1
    """
    match = DATE_RE.fullmatch((text or '').strip())
    if not match:
        raise ValueError(f"Not a month-day date: {text!r}")

    month = MONTHS_FULL[match.group('month').lower()]
    day = int(match.group('day'))
    year = statement_year - 1 if month >= ROLLOVER_FIRST_MONTH else statement_year
    return date(year, month, day).isoformat()


class USCardParser(RowParser):
    """Row parser for US-card-style statements"""

    FORMAT = FORMAT_A
    CURRENCY = 'USD'

    MIN_TOKENS = 2
    DATE_WINDOW = 3

    DATE_PATTERN = DATE_RE
    AMOUNT_PATTERN = AMOUNT_RE
    CREDIT_MARKERS = ('CR', '-')

    SKIP_PATTERNS = [re.compile(p, re.IGNORECASE) for p in [
        r'payment\s+received',
        r'thank\s+you',
        r'^total\b',
        r'\btotal\s+(fees|interest|purchases|balance|amount|payments?|credits?|charges|due)\b',
        r'new\s+balance',
        r'previous\s+balance',
        r'minimum\s+payment',
        r'payment\s+due',
        r'interest\s+charge',
        r'annual\s+percentage\s+rate',
        r'fees?\s+charged',
        r'late\s+payment',
        r'credit\s+(access\s+)?line',
        r'available\s+credit',
        r'closing\s+date',
        r'account\s+summary',
        r'year-to-date',
    ]]

    DESCRIPTION_DISALLOWED = re.compile(r"[^\w\s\-&*.']")
    PAYMENT_PREFIXES = (
        'payment', 'autopay', 'auto pay', 'automatic payment', 'online payment',
        'credit', 'direct debit', 'refund'
    )

    def __init__(self, today: Optional[date] = None, statement_year: Optional[int] = None):
        super().__init__(today=today)
        self.fixed_year = statement_year
        self.statement_year = statement_year or self.today.year

    def prepare(self, rows: List[Dict]):
        if self.fixed_year is None:
            self.statement_year = self.detect_statement_year(rows)

    def detect_statement_year(self, rows: List[Dict]) -> int:
        """First standalone 20xx token near the top of the statement"""
        for row in rows[:YEAR_SCAN_ROWS]:
            for token in self._tokens(row):
                match = YEAR_TOKEN_RE.fullmatch(token)
                if not match:
                    continue
                year = int(match.group('year'))
                if STATEMENT_YEAR_MIN <= year <= STATEMENT_YEAR_MAX:
                    return year
        return self.today.year

    def parse_date(self, match) -> str:
        return parse_us_card_date(match.group(0).rstrip(','), self.statement_year)
