"""
Operation Outcome Module

Ledger operations report rejections as values instead of raising, so callers
and tests can assert on why an operation was not applied.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

from .exceptions import OperationRejectedError

T = TypeVar('T')


class RejectionReason(Enum):
    """Reasons a ledger operation was not applied"""
    ACCOUNT_NOT_FOUND = "account_not_found"
    INVALID_CUSTOMER_NAME = "invalid_customer_name"
    INVALID_AMOUNT = "invalid_amount"
    INVALID_DATE = "invalid_date"
    FUTURE_DATE = "future_date"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    SEQUENCE_EXHAUSTED = "sequence_exhausted"
    SELF_TRANSFER = "self_transfer"

    @property
    def is_not_found(self) -> bool:
        return self == RejectionReason.ACCOUNT_NOT_FOUND


@dataclass(frozen=True)
class LedgerResult(Generic[T]):
    """
    Outcome of a ledger operation.

    Attributes:
        success: Whether the operation was applied.
        value: The operation's return value when applied.
        reason: Why the operation was rejected, None on success.
        message: Human-readable detail for a rejection.

    Usage:
        result = ledger.perform_withdrawal(account, Decimal('100'), "ATM", when)
        if not result:
            print(result.reason)
    """
    success: bool
    value: Optional[T] = None
    reason: Optional[RejectionReason] = None
    message: Optional[str] = None

    @classmethod
    def ok(cls, value: T = None) -> 'LedgerResult[T]':
        """Create a successful result"""
        return cls(success=True, value=value)

    @classmethod
    def rejected(cls, reason: RejectionReason, message: str = None) -> 'LedgerResult[T]':
        """Create a rejected result"""
        return cls(success=False, reason=reason, message=message or reason.value)

    def __bool__(self) -> bool:
        return self.success

    @property
    def is_not_found(self) -> bool:
        """Check if the operation was rejected because the account is unknown"""
        return self.reason is not None and self.reason.is_not_found

    def unwrap(self) -> T:
        """
        Get the value, raising if the operation was rejected.

        Raises:
            OperationRejectedError: If the operation was rejected.
        """
        if not self.success:
            raise OperationRejectedError(self.reason, self.message)
        return self.value

    def unwrap_or(self, default: T) -> T:
        """Get the value or a default if the operation was rejected"""
        return self.value if self.success else default
