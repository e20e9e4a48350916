"""Error hierarchy: codes, categories, log extras."""

from app.core.errors import (
    BridgeError,
    ConfigurationError,
    ErrorCategory,
    ErrorSeverity,
    PoolClosedError,
)


def test_configuration_error_names_variables():
    err = ConfigurationError(["SQL_HOST", "SQL_PORT"], section="sql")
    assert isinstance(err, BridgeError)
    assert err.code == "CONFIGURATION_ERROR"
    assert err.severity is ErrorSeverity.CRITICAL
    assert str(err) == "Invalid or missing configuration for 'sql': SQL_HOST, SQL_PORT"


def test_pool_closed_error_is_connection_category():
    err = PoolClosedError("analytics")
    assert err.category is ErrorCategory.CONNECTION
    assert err.backend == "analytics"
    assert "analytics" in err.message


def test_log_extra():
    assert PoolClosedError("sql").log_extra() == {
        "error_code": "POOL_CLOSED", "severity": "error",
    }
