"""
Calculations Module - Monthly-equivalent values and payment schedules
"""

import calendar
from datetime import date, datetime
from typing import Callable, Dict, Optional, Union

from .currency import convert_currency


def get_monthly_value(subscription: Dict, display_currency: str,
                      convert: Callable = convert_currency) -> float:
    """
    Monthly equivalent of a subscription's amount in the display currency

    One-off charges count at their full amount.
    """
    amount = float(subscription.get('amount') or 0)
    frequency = subscription.get('frequency', 'monthly')

    if frequency == 'daily':
        monthly_amount = amount * 30
    elif frequency == 'weekly':
        monthly_amount = amount * 4
    elif frequency == 'yearly':
        monthly_amount = amount / 12
    else:
        monthly_amount = amount

    return convert(monthly_amount, subscription.get('currency', display_currency), display_currency)


def _as_date(value: Union[str, date, datetime, None]) -> Optional[date]:
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def add_months(start: date, months: int) -> date:
    """Same day N months later, clamped to the end of shorter months"""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def calculate_next_payment_date(start_date, frequency: str,
                                today: Optional[date] = None) -> Optional[date]:
    """
    First payment date on or after today

    Returns:
        The date, the start date itself for one-off charges, or None when
        the record has no usable start date
    """
    start = _as_date(start_date)
    if start is None:
        return None

    if frequency == 'one-off':
        return start

    today = today or date.today()
    if start >= today:
        return start

    if frequency == 'daily':
        return today
    if frequency == 'weekly':
        weeks = -(-(today - start).days // 7)
        return date.fromordinal(start.toordinal() + weeks * 7)

    step = 12 if frequency == 'yearly' else 1
    periods = 0
    candidate = start
    while candidate < today:
        periods += 1
        # Always step from the original start so month-end days are not lost
        candidate = add_months(start, periods * step)
    return candidate
