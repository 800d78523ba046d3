"""
Test suite for statements module

Tests StatementRow and the statement slicing helpers.
"""

import pytest
from dataclasses import FrozenInstanceError
from decimal import Decimal
from datetime import datetime, timezone, timedelta

from bank_ledger.accounts import Account, AccountRecord, ProductType
from bank_ledger.statements import (
    StatementRow, chronological, most_recent, net_amount, rows_for_account
)


DAY = datetime(2024, 5, 1, tzinfo=timezone.utc)


def make_account(number: str) -> Account:
    return Account(AccountRecord(
        account_number=number,
        customer_name="Alice",
        opened_date=DAY,
        product_type=ProductType.SAVINGS,
    ))


class TestStatementRow:
    """Test StatementRow"""

    def test_row_is_frozen(self):
        """Test rows cannot be modified"""
        row = StatementRow(make_account("SV-000001"), Decimal('5'), Decimal('5'), DAY, "Deposit")

        with pytest.raises(FrozenInstanceError):
            row.amount = Decimal('500')

    def test_credit_and_debit(self):
        """Test sign helpers"""
        account = make_account("SV-000001")
        credit = StatementRow(account, Decimal('5'), Decimal('5'), DAY, "Deposit")
        debit = StatementRow(account, Decimal('-5'), Decimal('0'), DAY, "Withdrawal")

        assert credit.is_credit and not credit.is_debit
        assert debit.is_debit and not debit.is_credit


class TestStatementHelpers:
    """Test statement slicing"""

    def setup_method(self):
        """Set up test fixtures"""
        self.first = make_account("SV-000001")
        self.second = make_account("SV-000002")
        self.rows = [
            StatementRow(self.first, Decimal('10'), Decimal('10'), DAY + timedelta(days=3), "a"),
            StatementRow(self.second, Decimal('20'), Decimal('20'), DAY, "b"),
            StatementRow(self.first, Decimal('-4'), Decimal('6'), DAY + timedelta(days=1), "c"),
            StatementRow(self.first, Decimal('1'), Decimal('7'), DAY + timedelta(days=1), "d"),
        ]

    def test_rows_for_account(self):
        """Test filtering keeps recording order"""
        rows = rows_for_account(self.rows, "SV-000001")

        assert [row.description for row in rows] == ["a", "c", "d"]

    def test_most_recent(self):
        """Test newest-first slicing"""
        rows = rows_for_account(self.rows, "SV-000001")

        assert [row.description for row in most_recent(rows, 2)] == ["d", "c"]
        assert [row.description for row in most_recent(rows, 10)] == ["d", "c", "a"]
        assert most_recent(rows, 0) == []

    def test_chronological_is_stable(self):
        """Test date ordering keeps recording order for equal dates"""
        rows = chronological(rows_for_account(self.rows, "SV-000001"))

        assert [row.description for row in rows] == ["c", "d", "a"]

    def test_net_amount(self):
        """Test signed totals"""
        assert net_amount(rows_for_account(self.rows, "SV-000001")) == Decimal('7')
        assert net_amount([]) == Decimal('0')
