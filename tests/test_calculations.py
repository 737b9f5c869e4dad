from datetime import date

import pytest

from processors.calculations import add_months, calculate_next_payment_date, get_monthly_value
from processors.currency import convert_currency

TODAY = date(2025, 3, 1)


@pytest.mark.parametrize('frequency, amount, monthly', [
    ('daily', 1.0, 30.0),
    ('weekly', 10.0, 40.0),
    ('monthly', 15.99, 15.99),
    ('yearly', 120.0, 10.0),
    ('one-off', 50.0, 50.0),
])
def test_monthly_value(frequency, amount, monthly):
    subscription = {'amount': amount, 'currency': 'USD', 'frequency': frequency}

    assert get_monthly_value(subscription, 'USD') == pytest.approx(monthly)


def test_monthly_value_converted():
    subscription = {'amount': 10.0, 'currency': 'USD', 'frequency': 'monthly'}

    assert get_monthly_value(subscription, 'HKD') == pytest.approx(78.0)


def test_convert_currency_round_trip_through_usd():
    assert convert_currency(78.0, 'HKD', 'SGD') == pytest.approx(13.5)


def test_convert_unknown_currency():
    with pytest.raises(ValueError):
        convert_currency(10.0, 'USD', 'XYZ')


def test_add_months_clamps_to_month_end():
    assert add_months(date(2025, 1, 31), 1) == date(2025, 2, 28)
    assert add_months(date(2024, 11, 30), 3) == date(2025, 2, 28)


@pytest.mark.parametrize('start, frequency, expected', [
    ('2025-01-31', 'monthly', date(2025, 3, 31)),
    ('2025-01-15', 'monthly', date(2025, 3, 15)),
    ('2025-03-01', 'monthly', date(2025, 3, 1)),
    ('2024-02-29', 'yearly', date(2026, 2, 28)),
    ('2025-02-19', 'weekly', date(2025, 3, 5)),
    ('2025-02-22', 'weekly', date(2025, 3, 1)),
    ('2025-01-10', 'daily', TODAY),
    ('2024-06-01', 'one-off', date(2024, 6, 1)),
    ('2025-04-10', 'monthly', date(2025, 4, 10)),
])
def test_next_payment_date(start, frequency, expected):
    assert calculate_next_payment_date(start, frequency, TODAY) == expected


def test_next_payment_date_without_start():
    assert calculate_next_payment_date(None, 'monthly', TODAY) is None
    assert calculate_next_payment_date('', 'yearly', TODAY) is None


def test_next_payment_date_accepts_date_objects():
    assert calculate_next_payment_date(date(2025, 2, 10), 'monthly', TODAY) == date(2025, 3, 10)
