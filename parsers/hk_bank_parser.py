"""
HK Bank Parser - Format B statements

Transaction lines carry both the transaction date and the posting date,
each with an explicit year:

    03 JAN 2025  04 JAN 2025  PARKNSHOP TAI KOO HK  SUPERMARKET      256.40
    05 JAN 2025  05 JAN 2025  NETFLIX.COM LOS GATOS US  USD 15.49     121.30
    10 JAN 2025  10 JAN 2025  PAYMENT - THANK YOU                   3,000.00CR
"""

import re
from datetime import date
from typing import Dict, List

from .format_detector import FORMAT_B
from .row_parser import RowParser

MONTHS_3 = {
    'jan': 1, 'feb': 2, 'mar': 3, 'apr': 4, 'may': 5, 'jun': 6,
    'jul': 7, 'aug': 8, 'sep': 9, 'oct': 10, 'nov': 11, 'dec': 12,
}

DATE_RE = re.compile(
    r'(?P<day>\d{1,2})\s*(?P<month>Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)[a-z]*\s*'
    r'(?P<year>\d{4}|\d{2})',
    re.IGNORECASE
)

AMOUNT_RE = re.compile(
    r'(?:HK)?\$?(?P<value>\d{1,3}(?:,\d{3})+\.\d{2}|\d+\.\d{2})(?P<credit>CR)?',
    re.IGNORECASE
)

# Original-currency column printed before the HKD amount
FOREIGN_CURRENCIES = {'USD', 'GBP', 'EUR', 'JPY', 'CNY', 'RMB', 'SGD', 'AUD', 'CAD', 'TWD', 'MOP', 'KRW', 'THB'}
FOREIGN_AMOUNT_RE = re.compile(r'\d{1,3}(?:,\d{3})*\.\d{2}|\d+\.\d{2}')

# Merchant-type column some issuers print after the merchant name
MERCHANT_TYPE_LABELS = {
    'SUPERMARKET', 'SUPERMARKETS', 'GROCERY', 'RESTAURANT', 'RESTAURANTS', 'FASTFOOD',
    'BAKERY', 'CAFE', 'HOTEL', 'HOTELS', 'AIRLINE', 'AIRLINES', 'TRANSPORT',
    'PHARMACY', 'BEAUTY', 'TELECOM', 'DEPARTMENT', 'ELECTRONICS', 'CINEMA',
    'ENTERTAINMENT', 'INSURANCE', 'FITNESS', 'SOFTWARE'
}


def parse_hk_bank_date(text: str) -> str:
    """Parse a '<Day> <MonAbbr> <Year>' token into an ISO date"""
    match = DATE_RE.fullmatch((text or '').strip())
    if not match:
        raise ValueError(f"Not a day-month-year date: {text!r}")
    return _date_from_match(match)


def _date_from_match(match) -> str:
    year = int(match.group('year'))
    if year < 100:
        year += 2000
    month = MONTHS_3[match.group('month')[:3].lower()]
    return date(year, month, int(match.group('day'))).isoformat()


class HKBankParser(RowParser):
    """Row parser for HK-bank-style statements"""

    FORMAT = FORMAT_B
    CURRENCY = 'HKD'

    MIN_TOKENS = 3
    DATE_WINDOW = 5
    HAS_POSTING_DATE = True

    DATE_PATTERN = DATE_RE
    AMOUNT_PATTERN = AMOUNT_RE
    CREDIT_MARKERS = ('CR',)

    SKIP_PATTERNS = [re.compile(p, re.IGNORECASE) for p in [
        r'previous\s+(statement\s+)?balance',
        r'statement\s+balance',
        r'new\s+balance',
        r'minimum\s+payment',
        r'payment\s+due\s+date',
        r'credit\s+limit',
        r'^total\b',
        r'\btotal\s+(fees|interest|purchases|balance|amount|payments?|credits?|charges|due)\b',
        r'trans(action)?\s+date',
        r'post(ing)?\s+date',
        r'page\s+\d+\s+of\s+\d+',
        r'finance\s+charge',
        r'thank\s+you',
        r'statement\s+date',
        r'late\s+charge',
    ]]

    DESCRIPTION_DISALLOWED = re.compile(r'[^\w\s\-&*.]')
    PAYMENT_PREFIXES = (
        'payment', 'autopay', 'auto-pay', 'auto pay', 'credit', 'direct debit',
        'refund', 'rebate'
    )

    def parse_date(self, match) -> str:
        return _date_from_match(match)

    def _refine_description(self, tokens: List[str], extras: Dict) -> List[str]:
        tokens = list(tokens)

        # "... USD 15.49" before the HKD amount
        if len(tokens) >= 2 and tokens[-2].upper() in FOREIGN_CURRENCIES \
                and FOREIGN_AMOUNT_RE.fullmatch(tokens[-1]):
            extras['original_currency'] = tokens[-2].upper()
            extras['original_amount'] = float(tokens[-1].replace(',', ''))
            tokens = tokens[:-2]

        if len(tokens) >= 2 and tokens[-1].upper().strip('.') in MERCHANT_TYPE_LABELS:
            extras['raw_category'] = tokens[-1].upper().strip('.')
            tokens = tokens[:-1]

        return tokens
