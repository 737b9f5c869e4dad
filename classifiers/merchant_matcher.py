"""
Merchant Matcher Module - Turn raw statement descriptions into merchant names

'SPOTIFY P1234 STOCKHOLM SE' -> 'Spotify'
'SQ *BLUE BOTTLE 00423871' -> 'Sq Blue Bottle'
"""

import re
from typing import List, Optional, Tuple

REFERENCE_NUMBER_RE = re.compile(r'\d{5,}')
# Codes like 866-579-7172 or AB12-99X: every dash-separated part has a digit
DASH_CODE_RE = re.compile(r'\b[A-Za-z]*\d[A-Za-z0-9]*(?:-[A-Za-z]*\d[A-Za-z0-9]*)+\b')
NUMERIC_TOKEN_RE = re.compile(r'#?\d[\d.,/]*')

COUNTRY_CODES = {
    'HK', 'HKG', 'HKSAR', 'SG', 'SGP', 'GB', 'GBR', 'CN', 'CHN', 'MO', 'MAC',
    'TW', 'TWN', 'JP', 'JPN', 'US', 'USA', 'CA', 'CAN', 'IE', 'IRL', 'NL', 'NLD',
    'LU', 'LUX', 'SE', 'AU'
}

FALLBACK_NAME_LENGTH = 30
DISPLAY_WORDS = 3


class MerchantMatcher:
    """Clean descriptions and map known merchants to display names"""

    def __init__(self, aliases: Optional[List[Tuple[str, str]]] = None):
        aliases = aliases if aliases is not None else self._get_default_aliases()
        # Longest key first so 'amazon prime' beats 'amazon'
        self.aliases = sorted(aliases, key=lambda pair: len(pair[0]), reverse=True)

    def _get_default_aliases(self) -> List[Tuple[str, str]]:
        return [
            ('amazon prime', 'Amazon Prime'),
            ('prime video', 'Prime Video'),
            ('amazon', 'Amazon'),
            ('amzn', 'Amazon'),
            ('apple.com', 'Apple'),
            ('apple music', 'Apple Music'),
            ('icloud', 'iCloud'),
            ('spotify', 'Spotify'),
            ('netflix', 'Netflix'),
            ('disney', 'Disney+'),
            ('hulu', 'Hulu'),
            ('youtube', 'YouTube'),
            ('hbo', 'HBO Max'),
            ('audible', 'Audible'),
            ('adobe', 'Adobe'),
            ('microsoft', 'Microsoft'),
            ('dropbox', 'Dropbox'),
            ('google', 'Google'),
            ('openai', 'OpenAI'),
            ('chatgpt', 'OpenAI'),
            ('github', 'GitHub'),
            ('notion', 'Notion'),
            ('canva', 'Canva'),
            ('figma', 'Figma'),
            ('slack', 'Slack'),
            ('peloton', 'Peloton'),
            ('uber eats', 'Uber Eats'),
            ('uber', 'Uber'),
            ('deliveroo', 'Deliveroo'),
            ('foodpanda', 'foodpanda'),
            ('starbucks', 'Starbucks'),
            ('mcdonald', "McDonald's"),
            ('parknshop', 'PARKnSHOP'),
            ('wellcome', 'Wellcome'),
            ('7-eleven', '7-Eleven'),
            ('watsons', 'Watsons'),
            ('pccw', 'PCCW'),
            ('smartone', 'SmarTone'),
            ('cathay', 'Cathay Pacific'),
            ('mytv super', 'myTV SUPER'),
        ]

    def clean(self, description: str) -> str:
        """
        Strip reference numbers, codes and trailing noise from a description

        Args:
            description: Raw transaction description

        Returns:
            Cleaned description (case preserved), may be empty
        """
        text = REFERENCE_NUMBER_RE.sub(' ', description or '')
        text = text.replace('*', ' ')
        text = DASH_CODE_RE.sub(' ', text)

        words = text.split()
        while len(words) > 1 and (NUMERIC_TOKEN_RE.fullmatch(words[-1])
                                  or words[-1].upper() in COUNTRY_CODES):
            words.pop()
        if len(words) == 1 and NUMERIC_TOKEN_RE.fullmatch(words[0]):
            words = []

        return ' '.join(words)

    def match(self, description: str) -> Optional[str]:
        """Known merchant display name for a description, if any"""
        cleaned = self.clean(description).casefold()
        for key, name in self.aliases:
            if key in cleaned:
                return name
        return None

    def display_name(self, description: str) -> str:
        """Alias when known, else the first few words title-cased"""
        alias = self.match(description)
        if alias:
            return alias

        words = self.clean(description).split()[:DISPLAY_WORDS]
        name = ' '.join(word.capitalize() for word in words)
        if not name:
            name = (description or '')[:FALLBACK_NAME_LENGTH].strip()
        return name
