import copy

import pytest

from classifiers import CategoryClassifier, MerchantMatcher, TransactionNormalizer


@pytest.fixture
def normalizer():
    return TransactionNormalizer(category_classifier=CategoryClassifier(keywords=None))


def txn(description, **extra):
    record = {'date': '2025-03-01', 'description': description, 'amount': 9.99,
              'currency': 'USD', 'category': None, 'raw_text': description, 'format': 'us_card'}
    record.update(extra)
    return record


@pytest.mark.parametrize('description, name', [
    ('SPOTIFY P1234', 'Spotify'),
    ('NETFLIX.COM 866-579-7172 CA', 'Netflix'),
    ('AMAZON PRIME*2K4LM0ZX2', 'Amazon Prime'),
    ('SQ *BLUE BOTTLE 00423871', 'Sq Blue Bottle'),
    ('CORNER HARDWARE STORE HONG KONG HK', 'Corner Hardware Store'),
])
def test_display_names(normalizer, description, name):
    assert normalizer.normalize(txn(description))['name'] == name


def test_spotify_is_entertainment(normalizer):
    normalized = normalizer.normalize(txn('SPOTIFY P1234'))

    assert normalized['category'] == 'Entertainment'


def test_bank_hint_takes_precedence(normalizer):
    normalized = normalizer.normalize(txn('PARKNSHOP TAI KOO HK', raw_category='SUPERMARKET'))

    assert normalized['name'] == 'PARKnSHOP'
    assert normalized['category'] == 'Groceries'


def test_unknown_hint_falls_back_to_description(normalizer):
    normalized = normalizer.normalize(txn('NETFLIX.COM', raw_category='MISCELLANEOUS'))

    assert normalized['category'] == 'Entertainment'


def test_unmatched_description_is_other(normalizer):
    assert normalizer.normalize(txn('ZZ QUIET PLACE'))['category'] == 'Other'


def test_numeric_only_description_keeps_raw_text():
    assert MerchantMatcher().display_name('12345678') == '12345678'


def test_input_not_mutated(normalizer):
    original = txn('SPOTIFY P1234')
    snapshot = copy.deepcopy(original)

    normalizer.normalize_batch([original])

    assert original == snapshot


def test_custom_keyword_table_order_wins():
    classifier = CategoryClassifier(keywords={'Work': ['zoom'], 'Software': ['zoom']})

    assert classifier.classify('ZOOM.US 888-799-9666') == 'Work'


@pytest.mark.parametrize('description, name', [
    ('STEAMGAMES 425 US', 'Steamgames'),
    ('PATREON MEMBERSHIP USA', 'Patreon Membership'),
    ('SHOPIFY 8001 CA', 'Shopify'),
])
def test_trailing_north_american_country_codes_dropped(description, name):
    assert MerchantMatcher().display_name(description) == name
