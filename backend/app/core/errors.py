"""Error Hierarchy: typed, categorized exceptions raised by this service itself.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Driver, SQL and signing errors are never wrapped; they reach the route
      boundary as raised by the underlying library
    - No internal details leave the process: routes answer a generic 500

Design Decisions:
    - Single hierarchy with BridgeError base so log lines can carry error_code
      and severity uniformly
"""

from enum import Enum


class ErrorSeverity(str, Enum):
    """Error severity for observability."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories."""
    CONFIGURATION = "configuration"
    CONNECTION = "connection"
    INTERNAL = "internal"


class BridgeError(Exception):
    """Base exception for all service-raised errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity

    def log_extra(self) -> dict:
        """Fields merged into the ``extra`` of log records about this error."""
        return {"error_code": self.code, "severity": self.severity.value}


class ConfigurationError(BridgeError):
    """Required configuration is missing or malformed."""
    def __init__(self, variables: list[str], section: str):
        names = ", ".join(variables) or "<unknown>"
        super().__init__(
            f"Invalid or missing configuration for '{section}': {names}",
            "CONFIGURATION_ERROR", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL,
        )
        self.variables = variables
        self.section = section


class PoolClosedError(BridgeError):
    """Connection requested from a pool that has been shut down."""
    def __init__(self, backend: str):
        super().__init__(
            f"Connection pool '{backend}' is closed",
            "POOL_CLOSED", ErrorCategory.CONNECTION,
        )
        self.backend = backend
