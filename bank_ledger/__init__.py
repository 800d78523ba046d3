"""
Retail Bank Ledger

An in-memory ledger for savings and home-loan accounts with
Decimal-precise balances, statement rows and advisory interest.
"""

__version__ = "1.0.0"

from .accounts import Account, ProductType
from .config import LedgerConfig, ProductConfig, build_product_table, get_config
from .exceptions import ConfigurationError, LedgerError, OperationRejectedError
from .ledger import Ledger
from .outcomes import LedgerResult, RejectionReason
from .statements import StatementRow

__all__ = [
    "Account",
    "ConfigurationError",
    "Ledger",
    "LedgerConfig",
    "LedgerError",
    "LedgerResult",
    "OperationRejectedError",
    "ProductConfig",
    "ProductType",
    "RejectionReason",
    "StatementRow",
    "build_product_table",
    "get_config",
]
