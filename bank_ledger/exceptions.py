"""Exception hierarchy for the ledger package."""


class LedgerError(Exception):
    """Base exception for all ledger errors."""


class OperationRejectedError(LedgerError):
    """Raised when a rejected outcome is unwrapped."""

    def __init__(self, reason, message: str = ""):
        self.reason = reason
        self.message = message or f"Operation rejected: {reason.value}"
        super().__init__(self.message)


class ConfigurationError(LedgerError):
    """Raised when ledger configuration is invalid."""
