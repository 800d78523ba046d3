"""
Interest Engine Module

Simple-interest accrual on the current balance from the account's anchor date
(opening date or last activity) up to a requested date. Rates come from the
per-product table injected into the ledger.
"""

from decimal import Decimal
from datetime import datetime
from typing import Dict, Iterable, Optional

from .accounts import Account, ProductType
from .amounts import DEFAULT_PRECISION, fits_precision, quantize_amount
from .config import ProductConfig
from .statements import StatementRow


class InterestEngine:
    """
    Calculates advisory interest for ledger accounts.

    interest = balance x annual_rate_percent / 100 x days / day_basis
    """

    def __init__(
        self,
        products: Dict[ProductType, ProductConfig],
        day_basis: int = 365,
        precision: int = DEFAULT_PRECISION
    ):
        self.products = products
        self.day_basis = day_basis
        self.precision = precision

    def annual_rate_for(self, account: Account) -> Decimal:
        """Annual rate in percent for the account's product"""
        return self.products[account.product_type].annual_rate_percent

    @staticmethod
    def anchor_date(account: Account, rows: Iterable[StatementRow]) -> datetime:
        """
        Date interest is counted from: the latest event date among the
        account's rows, or the opening date if it has none.
        """
        latest: Optional[datetime] = None
        for row in rows:
            if latest is None or row.date > latest:
                latest = row.date
        return latest if latest is not None else account.opened_date

    @staticmethod
    def days_between(start: datetime, end: datetime) -> int:
        """Whole calendar days from start to end, counted in end's timezone"""
        return (end.date() - start.astimezone(end.tzinfo).date()).days

    def calculate(self, account: Account, rows: Iterable[StatementRow], to_date: datetime) -> Decimal:
        """
        Interest accrued on the current balance up to to_date

        Args:
            account: Account to calculate for
            rows: The account's statement rows
            to_date: Date to accrue interest to

        Returns:
            Interest rounded to currency precision; zero when no whole day
            has elapsed since the anchor date or the figure is too large
            to hold as an amount
        """
        anchor = self.anchor_date(account, rows)
        days = self.days_between(anchor, to_date)
        if days <= 0:
            return quantize_amount(Decimal('0'), self.precision)

        rate = self.annual_rate_for(account)
        interest = (
            account.balance * rate / Decimal('100')
            * Decimal(days) / Decimal(self.day_basis)
        )
        if not fits_precision(interest, self.precision):
            return quantize_amount(Decimal('0'), self.precision)
        return quantize_amount(interest, self.precision)
