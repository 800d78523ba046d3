"""
Account Module

Account identity and balance. The ledger owns a private, mutable record for
every open account and hands callers a read-only Account view over it, so
balances can only change through ledger operations.
"""

from decimal import Decimal
from datetime import datetime
from dataclasses import dataclass
from enum import Enum


class ProductType(Enum):
    """Banking product types"""
    SAVINGS = "savings"
    HOME_LOAN = "home_loan"


@dataclass
class AccountRecord:
    """Mutable account state, owned by the ledger"""
    account_number: str
    customer_name: str
    opened_date: datetime
    product_type: ProductType
    balance: Decimal = Decimal('0.00')

    def __post_init__(self):
        if not self.customer_name or not self.customer_name.strip():
            raise ValueError("Customer name must not be empty")
        if self.opened_date.tzinfo is None:
            raise ValueError("Opened date must be timezone-aware")


class Account:
    """
    Read-only view of an account held by a ledger.

    Every attribute reads through to the ledger's record, so a handle kept by
    the caller always reflects the current balance.
    """

    __slots__ = ('_record',)

    def __init__(self, record: AccountRecord):
        object.__setattr__(self, '_record', record)

    def __setattr__(self, name, value):
        raise AttributeError(f"Account is read-only; cannot set {name!r}")

    def __delattr__(self, name):
        raise AttributeError(f"Account is read-only; cannot delete {name!r}")

    @property
    def account_number(self) -> str:
        return self._record.account_number

    @property
    def customer_name(self) -> str:
        return self._record.customer_name

    @property
    def opened_date(self) -> datetime:
        return self._record.opened_date

    @property
    def product_type(self) -> ProductType:
        return self._record.product_type

    @property
    def balance(self) -> Decimal:
        return self._record.balance

    @property
    def is_savings_account(self) -> bool:
        """Check if this is a savings account"""
        return self.product_type == ProductType.SAVINGS

    @property
    def is_home_loan_account(self) -> bool:
        """Check if this is a home loan account"""
        return self.product_type == ProductType.HOME_LOAN

    def __eq__(self, other) -> bool:
        if not isinstance(other, Account):
            return NotImplemented
        return self._record is other._record

    def __hash__(self) -> int:
        return hash(self.account_number)

    def __repr__(self) -> str:
        return (
            f"Account(account_number={self.account_number!r}, "
            f"customer_name={self.customer_name!r}, balance={self.balance})"
        )


class AccountNumberSequence:
    """
    Account number generator for one product type.

    Numbers are the product prefix followed by a zero-padded counter starting
    at 1. Numbers are never reused, even after the account is closed.
    """

    def __init__(self, prefix: str, width: int = 6, maximum: int = 999999):
        self.prefix = prefix
        self.width = width
        self.maximum = maximum
        self.next_value = 1

    @property
    def is_exhausted(self) -> bool:
        """Check if the next number would exceed the maximum"""
        return self.next_value > self.maximum

    def peek(self) -> str:
        """Account number the next allocation will return"""
        return f"{self.prefix}{self.next_value:0{self.width}d}"

    def allocate(self) -> str:
        """Consume and return the next account number"""
        if self.is_exhausted:
            raise ValueError(f"Account number sequence {self.prefix!r} is exhausted")
        account_number = self.peek()
        self.next_value += 1
        return account_number
