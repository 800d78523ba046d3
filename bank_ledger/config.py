"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based
configuration, plus the per-product prefix and interest rate table injected
into the ledger.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Dict, Optional

from pydantic_settings import BaseSettings

from .accounts import ProductType
from .exceptions import ConfigurationError


class LedgerConfig(BaseSettings):
    """Retail bank ledger configuration"""

    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"  # json or text
    logger_name: str = "bank_ledger"

    # Amount handling
    amount_precision: int = 2

    # Account numbering
    account_number_width: int = 6
    max_account_sequence: int = 999999

    # Statements
    mini_statement_size: int = 5

    # Products: prefix and annual interest rate in percent
    savings_prefix: str = "SV-"
    savings_annual_rate: str = "72"  # 6% monthly expressed annually
    home_loan_prefix: str = "LN-"
    home_loan_annual_rate: str = "3.99"
    interest_day_basis: int = 365

    # Business rules configuration
    allow_self_transfer: bool = False
    closure_description: str = "Withdraw available balance on event of account closure"
    closure_uses_processing_time: bool = True  # False stamps with the caller's close date
    interest_posting_description: str = "Interest posted"

    class Config:
        env_prefix = "LEDGER_"
        env_file = ".env"
        case_sensitive = False


@dataclass(frozen=True)
class ProductConfig:
    """Account number prefix and annual interest rate for one product"""
    prefix: str
    annual_rate_percent: Decimal


# Global configuration instance
config = LedgerConfig()


def get_config() -> LedgerConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> LedgerConfig:
    """Reload configuration from environment"""
    global config
    config = LedgerConfig()
    return config


def _parse_rate(name: str, value: str) -> Decimal:
    try:
        rate = Decimal(value)
    except InvalidOperation:
        raise ConfigurationError(f"{name} is not a valid decimal: {value!r}")
    if not rate.is_finite() or rate < Decimal('0'):
        raise ConfigurationError(f"{name} must be a non-negative number, got {value!r}")
    return rate


def build_product_table(settings: Optional[LedgerConfig] = None) -> Dict[ProductType, ProductConfig]:
    """
    Build the product table from settings

    Args:
        settings: Configuration to read (global configuration if omitted)

    Returns:
        Mapping of product type to its prefix and annual rate

    Raises:
        ConfigurationError: If a prefix is empty, prefixes collide or a rate is invalid
    """
    settings = settings or get_config()

    table = {
        ProductType.SAVINGS: ProductConfig(
            prefix=settings.savings_prefix,
            annual_rate_percent=_parse_rate("savings_annual_rate", settings.savings_annual_rate)
        ),
        ProductType.HOME_LOAN: ProductConfig(
            prefix=settings.home_loan_prefix,
            annual_rate_percent=_parse_rate("home_loan_annual_rate", settings.home_loan_annual_rate)
        ),
    }
    validate_product_table(table)
    return table


def validate_product_table(table: Dict[ProductType, ProductConfig]) -> None:
    """Check that every product has a distinct, non-empty prefix and a usable rate"""
    prefixes = set()
    for product_type, product in table.items():
        if not product.prefix or not product.prefix.strip():
            raise ConfigurationError(f"Prefix for {product_type.value} must not be empty")
        if product.prefix in prefixes:
            raise ConfigurationError(f"Prefix {product.prefix!r} is used by more than one product")
        if product.annual_rate_percent < Decimal('0'):
            raise ConfigurationError(f"Rate for {product_type.value} must not be negative")
        prefixes.add(product.prefix)
