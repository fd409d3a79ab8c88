"""
Domain-specific exceptions for the Team Balance API.

These exceptions represent business logic violations and store failures.
They are mapped to HTTP status codes in the API layer and rendered as the
``{"success": false, "error": ...}`` envelope.
"""

from typing import Any

STORE_PERMISSION_NOTE = (
    "The API requires read access to the teams and transactions tables, "
    "or a reachable database with valid credentials"
)


class BalanceApiError(Exception):
    """Base exception for all Team Balance API domain errors.

    ``details`` is merged into the error envelope next to ``error``.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(BalanceApiError):
    """
    Raised when input data fails validation.

    Examples:
    - Required field missing
    - Amount is not a positive number
    - Unsupported target status
    - Insufficient website balance

    HTTP Status: 400 Bad Request
    """

    pass


class UnauthorizedError(BalanceApiError):
    """
    Raised when the caller lacks a valid team credential.

    Examples:
    - Missing Authorization header
    - Header not in ``Bearer <team_api_key>`` form
    - API key matches no team

    HTTP Status: 401 Unauthorized
    """

    pass


class NotFoundError(BalanceApiError):
    """
    Raised when a requested resource does not exist for the calling team.

    Examples:
    - Transaction document ID not found
    - Website belongs to another team

    HTTP Status: 404 Not Found
    """

    pass


class ConflictError(BalanceApiError):
    """
    Raised when operation conflicts with current state.

    Examples:
    - Duplicate customerUsername + transactionId pair
    - Transaction status changed by a concurrent request

    HTTP Status: 409 Conflict
    """

    pass


class UpstreamUnavailableError(BalanceApiError):
    """
    Raised when the backing store cannot be reached or a query fails.

    Examples:
    - Connection refused or pool exhausted
    - Store call exceeded the configured deadline
    - Permission denied on a table

    HTTP Status: 503 Service Unavailable
    """

    def __init__(
        self,
        message: str = "Database connection failed",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)


class ClaimContentionError(UpstreamUnavailableError):
    """
    Raised when every claim attempt lost its conditional write to another caller.

    The caller should retry; nothing was claimed by this request.

    HTTP Status: 503 Service Unavailable
    """

    pass


ERROR_STATUS_MAP = {
    ValidationError: 400,
    UnauthorizedError: 401,
    NotFoundError: 404,
    ConflictError: 409,
    UpstreamUnavailableError: 503,
    ClaimContentionError: 503,
}


def get_status_code(error: Exception) -> int:
    """
    Get the HTTP status code for a given exception.

    Args:
        error: The exception instance

    Returns:
        HTTP status code (defaults to 500 for unknown errors)
    """
    return ERROR_STATUS_MAP.get(type(error), 500)


def error_envelope(message: str, details: dict[str, Any] | None = None) -> dict[str, Any]:
    """Build the JSON error body shared by every failing route."""
    return {"success": False, "error": message, **(details or {})}
