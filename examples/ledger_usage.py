#!/usr/bin/env python3
"""
Example: Day-to-day ledger operations

Opens a savings and a home loan account, moves money between them, prints a
mini statement and the interest accrued so far, then closes the savings
account.
"""

import os
import sys
from decimal import Decimal
from datetime import datetime, timezone, timedelta

# Add the ledger package to the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from bank_ledger.amounts import format_amount
from bank_ledger.config import get_config
from bank_ledger.ledger import Ledger
from bank_ledger.logging_config import setup_logging


def main():
    config = get_config()
    setup_logging(config.log_level, config.logger_name, config.log_format)

    print("🏦 Retail Bank Ledger - Example")
    print("=" * 60)

    ledger = Ledger(config=config)
    now = datetime.now(timezone.utc)

    savings = ledger.open_savings_account("Alice Smith", now - timedelta(days=60)).unwrap()
    loan = ledger.open_home_loan_account("Alice Smith", now - timedelta(days=60)).unwrap()
    print(f"\n1. Opened {savings.account_number} and {loan.account_number}")

    ledger.perform_deposit(savings, Decimal('2500.00'), "Salary", now - timedelta(days=45))
    ledger.perform_withdrawal(savings, Decimal('120.00'), "Groceries", now - timedelta(days=40))
    ledger.perform_transfer(savings, loan, Decimal('800.00'), "Loan repayment", now - timedelta(days=30))

    rejected = ledger.perform_withdrawal(savings, Decimal('1000000'), "Yacht", now)
    print(f"\n2. Oversized withdrawal rejected: {rejected.reason.value}")

    print(f"\n3. Mini statement for {savings.account_number}")
    for row in ledger.get_mini_statement(savings):
        print(f"   {row.date:%Y-%m-%d}  {row.description:<20} {format_amount(row.amount):>12}  {format_amount(row.balance_after):>12}")

    interest = ledger.calculate_interest_to_date(savings, now)
    print(f"\n4. Interest accrued on savings to date: {format_amount(interest)}")

    closed = ledger.close_account(savings, now).unwrap()
    print(f"\n5. Closed {savings.account_number}; {len(closed)} rows returned")
    print(f"   Open accounts: {[account.account_number for account in ledger.accounts]}")


if __name__ == "__main__":
    main()
