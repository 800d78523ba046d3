"""
Ledger Module

The bank ledger: owns every open account and the transaction log, and is the
only component allowed to change a balance. Every mutating operation either
applies completely or is rejected with a reason; validation failures are
returned as LedgerResult values, never raised.
"""

from decimal import Decimal
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Tuple

from .accounts import Account, AccountNumberSequence, AccountRecord, ProductType
from .amounts import AmountLike, fits_precision, quantize_amount, to_amount
from .config import LedgerConfig, ProductConfig, build_product_table, get_config, validate_product_table
from .exceptions import ConfigurationError
from .interest import InterestEngine
from .logging_config import get_logger, log_action
from .outcomes import LedgerResult, RejectionReason
from .statements import StatementRow, chronological, most_recent, net_amount, rows_for_account


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Ledger:
    """
    In-memory ledger for savings and home loan accounts.

    Not thread-safe: callers sharing a ledger between threads must serialize
    access themselves.
    """

    def __init__(
        self,
        products: Optional[Dict[ProductType, ProductConfig]] = None,
        config: Optional[LedgerConfig] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.config = config or get_config()
        self.products = dict(products) if products is not None else build_product_table(self.config)
        validate_product_table(self.products)

        width = self.config.account_number_width
        maximum = self.config.max_account_sequence
        if maximum < 1 or maximum > 10 ** width - 1:
            raise ConfigurationError(
                f"max_account_sequence {maximum} does not fit in {width} digits"
            )

        self.precision = self.config.amount_precision
        self._clock = clock or _utc_now

        # Insertion order is opening order
        self._accounts: Dict[str, Account] = {}
        self._transaction_log: List[StatementRow] = []
        self._sequences: Dict[ProductType, AccountNumberSequence] = {
            product_type: AccountNumberSequence(product.prefix, width, maximum)
            for product_type, product in self.products.items()
        }

        self.interest_engine = InterestEngine(
            self.products,
            day_basis=self.config.interest_day_basis,
            precision=self.precision
        )
        self.logger = get_logger("bank_ledger.ledger")

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def accounts(self) -> Tuple[Account, ...]:
        """Open accounts in opening order"""
        return tuple(self._accounts.values())

    @property
    def transaction_log(self) -> Tuple[StatementRow, ...]:
        """Live transaction log in recording order"""
        return tuple(self._transaction_log)

    def get_account(self, account_number: str) -> Optional[Account]:
        """Get open account by account number"""
        return self._accounts.get(account_number)

    def is_open(self, account: Account) -> bool:
        """Check if the account is currently open in this ledger"""
        return self._resolve(account) is not None

    # ------------------------------------------------------------------
    # Account opening
    # ------------------------------------------------------------------

    def open_savings_account(self, customer_name: str, open_date: datetime) -> LedgerResult[Account]:
        """Open a savings account"""
        return self.open_account(ProductType.SAVINGS, customer_name, open_date)

    def open_home_loan_account(self, customer_name: str, open_date: datetime) -> LedgerResult[Account]:
        """Open a home loan account"""
        return self.open_account(ProductType.HOME_LOAN, customer_name, open_date)

    def open_account(
        self,
        product_type: ProductType,
        customer_name: str,
        open_date: datetime
    ) -> LedgerResult[Account]:
        """
        Open an account of the given product type

        Args:
            product_type: Product to open
            customer_name: Account holder's name, must not be blank
            open_date: Timezone-aware opening date

        Returns:
            LedgerResult carrying the new Account

        Raises:
            ConfigurationError: If the product type has no configuration
        """
        sequence = self._sequences.get(product_type)
        if sequence is None:
            raise ConfigurationError(f"No product configuration for {product_type.value}")

        if not isinstance(customer_name, str) or not customer_name.strip():
            return self._reject("open_account", RejectionReason.INVALID_CUSTOMER_NAME,
                                message="Customer name must not be empty")

        if not self._is_aware_datetime(open_date):
            return self._reject("open_account", RejectionReason.INVALID_DATE,
                                message="Open date must be a timezone-aware datetime")

        if sequence.is_exhausted:
            return self._reject("open_account", RejectionReason.SEQUENCE_EXHAUSTED,
                                message=f"No {product_type.value} account numbers left")

        record = AccountRecord(
            account_number=sequence.allocate(),
            customer_name=customer_name,
            opened_date=open_date,
            product_type=product_type,
            balance=quantize_amount(Decimal('0'), self.precision)
        )
        account = Account(record)
        self._accounts[account.account_number] = account

        log_action(
            self.logger, "info", f"Account opened: {account.account_number}",
            action="open_account", account=account.account_number,
            extra={
                "product_type": product_type.value,
                "opened_date": open_date.isoformat()
            }
        )
        return LedgerResult.ok(account)

    # ------------------------------------------------------------------
    # Money movement
    # ------------------------------------------------------------------

    def perform_deposit(
        self,
        account: Account,
        amount: AmountLike,
        description: str,
        deposit_date: datetime
    ) -> LedgerResult[StatementRow]:
        """
        Deposit into an account

        Returns:
            LedgerResult carrying the recorded StatementRow
        """
        record = self._resolve(account)
        if record is None:
            return self._reject_unknown("deposit", account)

        value = self._valid_amount(amount)
        if value is None:
            return self._reject("deposit", RejectionReason.INVALID_AMOUNT, record.account_number,
                                message="Deposit amount must be a positive amount")

        date_reason = self._check_date(deposit_date)
        if date_reason:
            return self._reject("deposit", date_reason, record.account_number)

        if not self._can_credit(record, value):
            return self._reject("deposit", RejectionReason.INVALID_AMOUNT, record.account_number,
                                message="Deposit would exceed the supported balance size")

        row = self._post(account, value, deposit_date, description)
        self._log_posted("deposit", row)
        return LedgerResult.ok(row)

    def perform_withdrawal(
        self,
        account: Account,
        amount: AmountLike,
        description: str,
        withdrawal_date: datetime
    ) -> LedgerResult[StatementRow]:
        """
        Withdraw from an account. Overdrafts are not allowed.

        Returns:
            LedgerResult carrying the recorded StatementRow
        """
        record = self._resolve(account)
        if record is None:
            return self._reject_unknown("withdrawal", account)

        value = self._valid_amount(amount)
        if value is None:
            return self._reject("withdrawal", RejectionReason.INVALID_AMOUNT, record.account_number,
                                message="Withdrawal amount must be a positive amount")

        date_reason = self._check_date(withdrawal_date)
        if date_reason:
            return self._reject("withdrawal", date_reason, record.account_number)

        if value > record.balance:
            return self._reject("withdrawal", RejectionReason.INSUFFICIENT_FUNDS, record.account_number,
                                message=f"Balance {record.balance} is less than {value}")

        row = self._post(account, -value, withdrawal_date, description)
        self._log_posted("withdrawal", row)
        return LedgerResult.ok(row)

    def perform_transfer(
        self,
        from_account: Account,
        to_account: Account,
        amount: AmountLike,
        description: str,
        transfer_date: datetime
    ) -> LedgerResult[Tuple[StatementRow, StatementRow]]:
        """
        Move funds between two open accounts.

        Either both sides are recorded (debit row first, then credit row)
        or neither is.

        Returns:
            LedgerResult carrying the (debit, credit) rows
        """
        source = self._resolve(from_account)
        if source is None:
            return self._reject_unknown("transfer", from_account)

        destination = self._resolve(to_account)
        if destination is None:
            return self._reject_unknown("transfer", to_account)

        if source is destination and not self.config.allow_self_transfer:
            return self._reject("transfer", RejectionReason.SELF_TRANSFER, source.account_number,
                                message="Source and destination accounts are the same")

        value = self._valid_amount(amount)
        if value is None:
            return self._reject("transfer", RejectionReason.INVALID_AMOUNT, source.account_number,
                                message="Transfer amount must be a positive amount")

        date_reason = self._check_date(transfer_date)
        if date_reason:
            return self._reject("transfer", date_reason, source.account_number)

        if value > source.balance:
            return self._reject("transfer", RejectionReason.INSUFFICIENT_FUNDS, source.account_number,
                                message=f"Balance {source.balance} is less than {value}")

        if source is not destination and not self._can_credit(destination, value):
            return self._reject("transfer", RejectionReason.INVALID_AMOUNT, destination.account_number,
                                message="Transfer would exceed the supported balance size")

        debit = self._post(from_account, -value, transfer_date, description)
        credit = self._post(to_account, value, transfer_date, description)

        log_action(
            self.logger, "info", f"Transfer recorded: {source.account_number} -> {destination.account_number}",
            action="transfer", account=source.account_number,
            extra={
                "to_account": destination.account_number,
                "amount": str(value),
                "from_balance_after": str(debit.balance_after),
                "to_balance_after": str(credit.balance_after)
            }
        )
        return LedgerResult.ok((debit, credit))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_balance(self, account: Account) -> Decimal:
        """
        Current balance of an open account.

        Unknown and closed accounts report zero; use is_open() to tell them
        apart from an empty account.
        """
        record = self._resolve(account)
        if record is None:
            return quantize_amount(Decimal('0'), self.precision)
        return record.balance

    def get_mini_statement(self, account: Account) -> List[StatementRow]:
        """Most recent rows for an account, newest first; empty if unknown"""
        record = self._resolve(account)
        if record is None:
            return []
        rows = rows_for_account(self._transaction_log, record.account_number)
        return most_recent(rows, self.config.mini_statement_size)

    def get_statement(self, account: Account) -> List[StatementRow]:
        """All rows for an account in recording order; empty if unknown"""
        record = self._resolve(account)
        if record is None:
            return []
        return rows_for_account(self._transaction_log, record.account_number)

    def calculate_interest_to_date(self, account: Account, to_date: datetime) -> Decimal:
        """
        Interest accrued on the current balance since the last activity.

        Advisory only: nothing is posted. Returns zero for unknown accounts,
        invalid or future dates, and when no whole day has elapsed.
        """
        zero = quantize_amount(Decimal('0'), self.precision)

        record = self._resolve(account)
        if record is None:
            return zero

        if self._check_date(to_date):
            return zero

        rows = rows_for_account(self._transaction_log, record.account_number)
        return self.interest_engine.calculate(account, rows, to_date)

    def post_interest(
        self,
        account: Account,
        to_date: datetime,
        description: Optional[str] = None
    ) -> LedgerResult[StatementRow]:
        """Calculate interest to a date and deposit it into the account"""
        record = self._resolve(account)
        if record is None:
            return self._reject_unknown("post_interest", account)

        date_reason = self._check_date(to_date)
        if date_reason:
            return self._reject("post_interest", date_reason, record.account_number)

        interest = self.calculate_interest_to_date(account, to_date)
        if interest <= Decimal('0'):
            return self._reject("post_interest", RejectionReason.INVALID_AMOUNT, record.account_number,
                                message="No interest due")

        return self.perform_deposit(
            account, interest,
            description or self.config.interest_posting_description,
            to_date
        )

    # ------------------------------------------------------------------
    # Closure
    # ------------------------------------------------------------------

    def close_account(self, account: Account, close_date: datetime) -> LedgerResult[List[StatementRow]]:
        """
        Close an account

        Withdraws the remaining balance, removes the account from the open set
        and purges its rows from the live log.

        Returns:
            LedgerResult carrying every row of the account in date order,
            including the closing withdrawal
        """
        record = self._resolve(account)
        if record is None:
            return self._reject_unknown("close_account", account)

        if self.config.closure_uses_processing_time:
            stamp = self._clock()
        else:
            date_reason = self._check_date(close_date)
            if date_reason:
                return self._reject("close_account", date_reason, record.account_number)
            stamp = close_date

        if record.balance > Decimal('0'):
            row = self._post(account, -record.balance, stamp, self.config.closure_description)
            self._log_posted("withdrawal", row)

        account_number = record.account_number
        del self._accounts[account_number]

        closed_rows = rows_for_account(self._transaction_log, account_number)
        self._transaction_log = [
            row for row in self._transaction_log
            if row.account.account_number != account_number
        ]

        log_action(
            self.logger, "info", f"Account closed: {account_number}",
            action="close_account", account=account_number,
            extra={
                "rows_returned": len(closed_rows),
                "close_date": close_date.isoformat() if isinstance(close_date, datetime) else None
            }
        )
        return LedgerResult.ok(chronological(closed_rows))

    # ------------------------------------------------------------------
    # Consistency
    # ------------------------------------------------------------------

    def verify_consistency(self) -> List[str]:
        """
        Check that every open account's balance equals the net of its rows
        and that no row references a closed account.

        Returns:
            Account numbers violating either rule, empty when consistent
        """
        violations = []
        for account_number, account in self._accounts.items():
            rows = rows_for_account(self._transaction_log, account_number)
            if net_amount(rows) != account.balance:
                violations.append(account_number)

        for row in self._transaction_log:
            account_number = row.account.account_number
            if account_number not in self._accounts and account_number not in violations:
                violations.append(account_number)

        return violations

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _resolve(self, account: Account) -> Optional[AccountRecord]:
        """The ledger-owned record behind a view, if the account is open here"""
        if not isinstance(account, Account):
            return None
        held = self._accounts.get(account.account_number)
        if held is None or held != account:
            return None
        return held._record

    def _post(self, account: Account, amount: Decimal, date: datetime, description: str) -> StatementRow:
        """Apply a signed amount to an account and record the row"""
        record = account._record
        record.balance = quantize_amount(record.balance + amount, self.precision)
        row = StatementRow(
            account=account,
            amount=amount,
            balance_after=record.balance,
            date=date,
            description=description or ""
        )
        self._transaction_log.append(row)
        return row

    def _can_credit(self, record: AccountRecord, value: Decimal) -> bool:
        return fits_precision(record.balance + value, self.precision)

    def _valid_amount(self, amount: AmountLike) -> Optional[Decimal]:
        value = to_amount(amount, self.precision)
        if value is None or value <= Decimal('0'):
            return None
        return value

    @staticmethod
    def _is_aware_datetime(value) -> bool:
        return isinstance(value, datetime) and value.tzinfo is not None and value.utcoffset() is not None

    def _check_date(self, when: datetime) -> Optional[RejectionReason]:
        """
        Reason a transaction date is unusable, or None.
        Only the calendar date matters when comparing with now.
        """
        if not self._is_aware_datetime(when):
            return RejectionReason.INVALID_DATE
        today = self._clock().astimezone(when.tzinfo).date()
        if when.date() > today:
            return RejectionReason.FUTURE_DATE
        return None

    def _log_posted(self, action: str, row: StatementRow) -> None:
        log_action(
            self.logger, "info", f"{action.capitalize()} recorded: {row.account.account_number}",
            action=action, account=row.account.account_number,
            extra={
                "amount": str(row.amount),
                "balance_after": str(row.balance_after),
                "date": row.date.isoformat(),
                "description": row.description
            }
        )

    def _reject_unknown(self, action: str, account) -> LedgerResult:
        account_number = account.account_number if isinstance(account, Account) else None
        return self._reject(action, RejectionReason.ACCOUNT_NOT_FOUND, account_number,
                            message="Account is not open in this ledger")

    def _reject(
        self,
        action: str,
        reason: RejectionReason,
        account_number: Optional[str] = None,
        message: Optional[str] = None
    ) -> LedgerResult:
        log_action(
            self.logger, "warning", f"{action} rejected: {message or reason.value}",
            action=action, account=account_number, reason=reason.value
        )
        return LedgerResult.rejected(reason, message)
