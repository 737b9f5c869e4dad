import pytest

from config import IMPORT_NOTE
from processors.subscription_builder import SubscriptionBuilder


def detected(name='Netflix', amount=15.99, frequency='monthly', group_id=0,
             is_recurring=True, dates=('2025-04-01', '2025-03-01'), **extra):
    members = [{'date': day, 'description': name.upper(), 'amount': amount} for day in dates]
    entry = {'date': dates[0], 'description': name.upper(), 'name': name, 'amount': amount,
             'currency': 'USD', 'category': 'Entertainment', 'frequency': frequency,
             'confidence': 0.7, 'is_recurring': is_recurring, 'group_id': group_id,
             'transactions': members}
    entry.update(extra)
    return entry


def test_user_id_required():
    with pytest.raises(ValueError):
        SubscriptionBuilder('')


def test_build_record():
    record = SubscriptionBuilder('user-1').build(detected())

    assert record['user_id'] == 'user-1'
    assert record['name'] == 'Netflix'
    assert record['amount'] == 15.99
    assert record['currency'] == 'USD'
    assert record['frequency'] == 'monthly'
    assert record['category'] == 'Entertainment'
    assert record['start_date'] == '2025-03-01'
    assert record['tags'] == ['Personal']
    assert record['cancelled'] is False
    assert record['notes'] == IMPORT_NOTE
    assert record['id']


def test_records_get_unique_ids():
    builder = SubscriptionBuilder('user-1', tags=['Business'])

    first = builder.build(detected())
    second = builder.build(detected())

    assert first['id'] != second['id']
    assert first['tags'] == ['Business']


@pytest.mark.parametrize('overrides', [
    {'amount': 0, 'transactions': []},
    {'amount': -4.0, 'transactions': []},
    {'name': '', 'description': ''},
    {'frequency': 'fortnightly'},
    {'currency': 'XYZ'},
])
def test_invalid_detections_rejected(overrides):
    entry = detected()
    entry.update(overrides)

    with pytest.raises(ValueError):
        SubscriptionBuilder('user-1').build(entry)


def test_batch_keeps_one_record_per_recurring_group():
    selected = [
        detected(group_id=0),
        detected(group_id=0),
        detected(name='Random Shop', amount=42.0, frequency='one-off', group_id=1,
                 is_recurring=False, dates=('2025-03-02',)),
    ]

    records = SubscriptionBuilder('user-1').build_batch(selected)

    assert [record['name'] for record in records] == ['Netflix', 'Random Shop']
    assert records[1]['frequency'] == 'one-off'
    assert records[1]['start_date'] == '2025-03-02'


def test_recurring_group_recorded_at_average_amount():
    entry = detected(amount=15.99)
    entry['transactions'][1]['amount'] = 16.49

    record = SubscriptionBuilder('user-1').build(entry)

    assert record['amount'] == 16.24


def test_group_with_non_positive_average_rejected():
    with pytest.raises(ValueError):
        SubscriptionBuilder('user-1').build(detected(amount=0))
