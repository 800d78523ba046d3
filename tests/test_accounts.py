"""
Test suite for accounts module

Tests the read-only Account view, the ledger-owned record behind it and
account number sequences.
"""

import pytest
from decimal import Decimal
from datetime import datetime, timezone

from bank_ledger.accounts import Account, AccountRecord, AccountNumberSequence, ProductType


OPENED = datetime(2024, 1, 2, 9, 30, tzinfo=timezone.utc)


def make_record(**overrides) -> AccountRecord:
    fields = dict(
        account_number="SV-000001",
        customer_name="Alice Smith",
        opened_date=OPENED,
        product_type=ProductType.SAVINGS,
    )
    fields.update(overrides)
    return AccountRecord(**fields)


class TestAccountRecord:
    """Test AccountRecord validation"""

    def test_valid_record(self):
        """Test creating a valid record"""
        record = make_record()

        assert record.balance == Decimal('0.00')
        assert record.product_type == ProductType.SAVINGS

    def test_blank_name_rejected(self):
        """Test records require a customer name"""
        with pytest.raises(ValueError, match="Customer name must not be empty"):
            make_record(customer_name="  ")

    def test_naive_date_rejected(self):
        """Test records require a timezone-aware opening date"""
        with pytest.raises(ValueError, match="timezone-aware"):
            make_record(opened_date=datetime(2024, 1, 2))


class TestAccount:
    """Test Account view functionality"""

    def test_view_reads_through(self):
        """Test the view reflects changes made to the record"""
        record = make_record()
        account = Account(record)

        assert account.account_number == "SV-000001"
        assert account.customer_name == "Alice Smith"
        assert account.opened_date == OPENED
        assert account.balance == Decimal('0.00')

        record.balance = Decimal('12.34')
        assert account.balance == Decimal('12.34')

    def test_view_is_read_only(self):
        """Test attributes of the view cannot be assigned or deleted"""
        account = Account(make_record())

        with pytest.raises(AttributeError):
            account.balance = Decimal('100')
        with pytest.raises(AttributeError):
            account.account_number = "SV-999999"
        with pytest.raises(AttributeError):
            del account.customer_name

    def test_product_flags(self):
        """Test product type helpers"""
        savings = Account(make_record())
        loan = Account(make_record(account_number="LN-000001", product_type=ProductType.HOME_LOAN))

        assert savings.is_savings_account
        assert not savings.is_home_loan_account
        assert loan.is_home_loan_account
        assert not loan.is_savings_account

    def test_equality_is_by_record(self):
        """Test views are equal only when they share a record"""
        record = make_record()
        same_record = Account(record)
        lookalike = Account(make_record())

        assert Account(record) == same_record
        assert Account(record) != lookalike
        assert hash(same_record) == hash(lookalike)
        assert Account(record) != "SV-000001"

    def test_repr_includes_number(self):
        """Test repr shows identifying fields"""
        assert "SV-000001" in repr(Account(make_record()))


class TestAccountNumberSequence:
    """Test account number generation"""

    def test_numbers_are_zero_padded(self):
        """Test the counter starts at 1 and is padded to the width"""
        sequence = AccountNumberSequence("SV-")

        assert sequence.allocate() == "SV-000001"
        assert sequence.allocate() == "SV-000002"
        assert sequence.next_value == 3

    def test_peek_does_not_consume(self):
        """Test peeking leaves the counter alone"""
        sequence = AccountNumberSequence("LN-")

        assert sequence.peek() == "LN-000001"
        assert sequence.allocate() == "LN-000001"

    def test_exhaustion(self):
        """Test the sequence reports exhaustion only past the maximum"""
        sequence = AccountNumberSequence("LN-", width=6, maximum=999999)
        assert not sequence.is_exhausted

        sequence.next_value = 999999
        assert not sequence.is_exhausted
        assert sequence.allocate() == "LN-999999"

        assert sequence.is_exhausted
        with pytest.raises(ValueError, match="exhausted"):
            sequence.allocate()
