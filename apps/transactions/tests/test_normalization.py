import pytest
from datetime import date
from decimal import Decimal

from apps.transactions.services import (
    normalize_transaction,
    is_restaurant_transaction,
    filter_restaurant_transactions,
    InvalidTransactionRecordError,
)


class TestNormalizeTransaction:
    """Tests for normalize_transaction()."""

    def test_valid_record(self, raw_transaction):
        record = normalize_transaction(raw_transaction)

        assert record.external_id == 't1'
        assert record.amount == Decimal('25.50')
        assert record.merchant == 'Starbucks'
        assert record.date == date(2024, 1, 15)
        assert record.category == 'Food and Drink'
        assert record.restaurant_id is None

    def test_amount_is_rounded_to_cents(self, raw_transaction):
        raw_transaction['amount'] = '12.345'
        assert normalize_transaction(raw_transaction).amount == Decimal('12.34')

    def test_trims_text_fields(self, raw_transaction):
        raw_transaction['merchant'] = '  Starbucks  '
        raw_transaction['id'] = ' t1 '

        record = normalize_transaction(raw_transaction)

        assert record.merchant == 'Starbucks'
        assert record.external_id == 't1'

    def test_accepts_timestamp_dates(self, raw_transaction):
        raw_transaction['date'] = '2024-01-15T09:30:00Z'
        assert normalize_transaction(raw_transaction).date == date(2024, 1, 15)

    def test_ignores_upstream_restaurant_id(self, raw_transaction):
        raw_transaction['restaurant_id'] = 'abc'
        assert normalize_transaction(raw_transaction).restaurant_id is None

    @pytest.mark.parametrize('field', ['id', 'amount', 'merchant', 'date', 'category'])
    def test_missing_field(self, raw_transaction, field):
        del raw_transaction[field]

        with pytest.raises(InvalidTransactionRecordError) as exc_info:
            normalize_transaction(raw_transaction)

        assert exc_info.value.field == field

    @pytest.mark.parametrize('field', ['id', 'merchant', 'date', 'category'])
    def test_blank_field(self, raw_transaction, field):
        raw_transaction[field] = '   '

        with pytest.raises(InvalidTransactionRecordError):
            normalize_transaction(raw_transaction)

    def test_zero_amount_is_missing(self, raw_transaction):
        raw_transaction['amount'] = 0

        with pytest.raises(InvalidTransactionRecordError) as exc_info:
            normalize_transaction(raw_transaction)

        assert exc_info.value.field == 'amount'

    @pytest.mark.parametrize('amount', ['abc', 'NaN', 'Infinity'])
    def test_malformed_amount(self, raw_transaction, amount):
        raw_transaction['amount'] = amount

        with pytest.raises(InvalidTransactionRecordError):
            normalize_transaction(raw_transaction)

    def test_malformed_date(self, raw_transaction):
        raw_transaction['date'] = '15/01/2024'

        with pytest.raises(InvalidTransactionRecordError) as exc_info:
            normalize_transaction(raw_transaction)

        assert exc_info.value.field == 'date'

    def test_not_a_mapping(self):
        with pytest.raises(InvalidTransactionRecordError):
            normalize_transaction(['t1', 25.50])


class TestRestaurantFilter:
    """Tests for is_restaurant_transaction() and filter_restaurant_transactions()."""

    def test_food_category(self):
        assert is_restaurant_transaction({'category': 'Food and Drink', 'merchant': 'Shell'})

    def test_category_is_case_insensitive(self):
        assert is_restaurant_transaction({'category': 'food and drink', 'merchant': 'X'})

    @pytest.mark.parametrize('merchant', ["Joe's Diner", 'Corner CAFE', 'Thai Restaurant'])
    def test_merchant_keyword(self, merchant):
        assert is_restaurant_transaction({'category': 'Shopping', 'merchant': merchant})

    def test_other_spending(self):
        assert not is_restaurant_transaction({'category': 'Travel', 'merchant': 'Shell Gas'})

    def test_missing_fields(self):
        assert not is_restaurant_transaction({})

    def test_keywords_from_settings(self, settings):
        settings.RESTAURANT_MERCHANT_KEYWORDS = ['taqueria']

        assert is_restaurant_transaction({'category': 'Shopping', 'merchant': 'La Taqueria'})
        assert not is_restaurant_transaction({'category': 'Shopping', 'merchant': 'Corner Cafe'})

    def test_filter_keeps_order(self):
        records = [
            {'id': '1', 'category': 'Food and Drink', 'merchant': 'Chipotle'},
            {'id': '2', 'category': 'Travel', 'merchant': 'Uber'},
            {'id': '3', 'category': 'Shopping', 'merchant': 'Blue Cafe'},
        ]

        assert [r['id'] for r in filter_restaurant_transactions(records)] == ['1', '3']
