"""
Statement Module

Immutable statement rows recorded by the ledger for every balance-affecting
event, and helpers for slicing them into statements.
"""

from decimal import Decimal
from datetime import datetime
from dataclasses import dataclass
from typing import Iterable, List

from .accounts import Account


@dataclass(frozen=True)
class StatementRow:
    """
    One recorded balance change.
    Positive amounts are credits, negative amounts are debits.
    """
    account: Account
    amount: Decimal
    balance_after: Decimal
    date: datetime
    description: str

    @property
    def is_credit(self) -> bool:
        return self.amount > Decimal('0')

    @property
    def is_debit(self) -> bool:
        return self.amount < Decimal('0')


def rows_for_account(rows: Iterable[StatementRow], account_number: str) -> List[StatementRow]:
    """Rows for one account, in recording order"""
    return [row for row in rows if row.account.account_number == account_number]


def most_recent(rows: List[StatementRow], limit: int) -> List[StatementRow]:
    """Up to `limit` of the most recently recorded rows, newest first"""
    if limit <= 0:
        return []
    return list(reversed(rows[-limit:]))


def chronological(rows: Iterable[StatementRow]) -> List[StatementRow]:
    """Rows ordered by event date; rows sharing a date keep recording order"""
    return sorted(rows, key=lambda row: row.date)


def net_amount(rows: Iterable[StatementRow]) -> Decimal:
    """Sum of the signed amounts of the given rows"""
    return sum((row.amount for row in rows), Decimal('0.00'))
