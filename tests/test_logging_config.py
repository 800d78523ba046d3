"""
Test suite for logging_config module

Tests the JSON formatter and structured action logging, including the
records the ledger emits for applied and rejected operations.
"""

import json
import logging
from decimal import Decimal
from datetime import datetime, timezone

from bank_ledger.config import LedgerConfig
from bank_ledger.ledger import Ledger
from bank_ledger.logging_config import JSONFormatter, get_logger, log_action, setup_logging


NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


class TestJSONFormatter:
    """Test JSON log formatting"""

    def test_structured_fields(self):
        """Test custom fields appear and empty ones are dropped"""
        logger = logging.getLogger("bank_ledger.test.formatter")
        record = logger.makeRecord(logger.name, logging.INFO, __name__, 0, "Deposit recorded", (), None)
        record.action = "deposit"
        record.account = "SV-000001"
        record.extra = {"amount": Decimal('10.00')}

        payload = json.loads(JSONFormatter().format(record))

        assert payload["level"] == "INFO"
        assert payload["message"] == "Deposit recorded"
        assert payload["action"] == "deposit"
        assert payload["account"] == "SV-000001"
        assert payload["extra"] == {"amount": "10.00"}
        assert "reason" not in payload


class TestSetupLogging:
    """Test logger configuration"""

    def test_setup_replaces_handlers(self):
        """Test repeated setup leaves a single handler"""
        logger = setup_logging("DEBUG", logger_name="bank_ledger.test.setup")
        logger = setup_logging("WARNING", logger_name="bank_ledger.test.setup", log_format="text")

        assert len(logger.handlers) == 1
        assert logger.level == logging.WARNING
        assert not logger.propagate
        assert not isinstance(logger.handlers[0].formatter, JSONFormatter)

    def test_get_logger(self):
        """Test named loggers"""
        assert get_logger("bank_ledger.ledger").name == "bank_ledger.ledger"


class TestLogAction:
    """Test structured action logging"""

    def test_log_action_attaches_fields(self, caplog):
        """Test log_action sets the structured attributes"""
        logger = get_logger("bank_ledger.test.actions")

        with caplog.at_level(logging.INFO, logger="bank_ledger.test.actions"):
            log_action(logger, "warning", "withdrawal rejected", action="withdrawal",
                       account="SV-000001", reason="insufficient_funds")

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert record.action == "withdrawal"
        assert record.account == "SV-000001"
        assert record.reason == "insufficient_funds"

    def test_ledger_logs_operations(self, caplog):
        """Test the ledger logs applied operations and rejections"""
        ledger = Ledger(config=LedgerConfig(), clock=lambda: NOW)

        with caplog.at_level(logging.INFO, logger="bank_ledger.ledger"):
            account = ledger.open_savings_account("Alice", NOW).unwrap()
            ledger.perform_deposit(account, Decimal('10'), "Deposit", NOW)
            ledger.perform_withdrawal(account, Decimal('50'), "Too much", NOW)

        actions = [(record.levelname, record.action) for record in caplog.records]
        assert ("INFO", "open_account") in actions
        assert ("INFO", "deposit") in actions
        assert ("WARNING", "withdrawal") in actions

        rejection = [record for record in caplog.records if record.levelname == "WARNING"][-1]
        assert rejection.reason == "insufficient_funds"
        assert rejection.account == "SV-000001"
