import pytest

from parsers.format_detector import BankFormatDetector, FORMAT_A, FORMAT_B, FORMAT_UNKNOWN


@pytest.mark.parametrize('lines, expected', [
    (['JPMorgan Chase Bank, N.A.', 'Sapphire Preferred'], FORMAT_A),
    (['Capital One Quicksilver', 'Account ending 1234'], FORMAT_A),
    (['PAYMENTS AND OTHER CREDITS'], FORMAT_A),
    (['The Hongkong and Shanghai Banking Corporation', 'HSBC Visa Platinum'], FORMAT_B),
    (['Citibank (Hong Kong) Limited'], FORMAT_B),
    (['Trans Date  Post Date  Description  Amount'], FORMAT_B),
])
def test_identifiers(make_rows, lines, expected):
    assert BankFormatDetector().detect(make_rows(lines)) == expected


def test_identifier_matches_whole_words_only(make_rows):
    rows = make_rows(['Purchase at corner store 12.00'])

    assert BankFormatDetector().detect(rows) == FORMAT_UNKNOWN


def test_long_month_date_falls_back_to_us_card(make_rows):
    detector = BankFormatDetector()

    assert detector.detect(make_rows(['March 14 NETFLIX.COM 15.99'])) == FORMAT_A
    assert detector.matched_identifier == 'long month date'


def test_day_month_year_lines_without_bank_are_unknown(make_rows):
    rows = make_rows(['03 JAN 2025 04 JAN 2025 PARKNSHOP 256.40'])

    assert BankFormatDetector().detect(rows) == FORMAT_UNKNOWN


def test_no_rows_is_unknown():
    detector = BankFormatDetector()

    assert detector.detect([]) == FORMAT_UNKNOWN
    assert detector.matched_identifier is None
