"""SquidMarket exception hierarchy.

This module defines the base exception class and specialized exceptions
for different error categories across the application.
"""


class SquidMarketError(Exception):
    """Base exception for all SquidMarket errors.

    All custom exceptions in SquidMarket should inherit from this class
    to enable consistent error handling and logging.
    """

    pass


class DatabaseConnectionError(SquidMarketError):
    """Raised when database connection fails.

    Example:
        raise DatabaseConnectionError("Supabase: Connection refused")
    """

    pass


class ConfigurationError(SquidMarketError):
    """Raised when configuration is invalid or missing.

    Example:
        raise ConfigurationError("Marketplace address is not configured")
    """

    pass


class ValidationError(SquidMarketError):
    """Raised when request data fails validation.

    Use this for invalid addresses, malformed prices and other bad input.

    Example:
        raise ValidationError("Invalid collection address: 0x123")
    """

    pass


class ExternalServiceError(SquidMarketError):
    """Raised when an external service call fails.

    Use this for transport errors from the RPC endpoint or metadata hosts.

    Attributes:
        service: Name of the external service that failed.
        status_code: HTTP status code if available, None otherwise.

    Example:
        raise ExternalServiceError(service="rpc", message="Timeout", status_code=None)
    """

    def __init__(
        self,
        service: str,
        message: str,
        status_code: int | None = None,
    ) -> None:
        self.service = service
        self.status_code = status_code
        super().__init__(f"{service}: {message}")


class CircuitBreakerOpenError(SquidMarketError):
    """Raised when circuit breaker is open.

    Example:
        raise CircuitBreakerOpenError("Circuit is open for the RPC endpoint")
    """

    pass


class ContractCallError(SquidMarketError):
    """Raised when the RPC node returns an error for a contract read.

    Attributes:
        address: Contract address that was called.
        function: Function signature that was called.
    """

    def __init__(self, address: str, function: str, message: str) -> None:
        self.address = address
        self.function = function
        super().__init__(f"{function} on {address}: {message}")


class ContractRevertError(ContractCallError):
    """Raised when a contract read reverts.

    A revert is the contract answering "no" (nonexistent token, missing
    accessor), as opposed to the node or network failing.
    """

    pass


class DuplicateEntryError(SquidMarketError):
    """Raised when an insert violates a unique constraint.

    Attributes:
        table: Table that rejected the row.
        key: Value of the conflicting unique key.

    Example:
        raise DuplicateEntryError(table="waitlist", key="a@b.co")
    """

    def __init__(self, table: str, key: str) -> None:
        self.table = table
        self.key = key
        super().__init__(f"{table}: duplicate entry for {key}")
