"""Library exceptions."""

from __future__ import annotations


class PyNearbyParkingError(Exception):
    """Base exception for the library."""

    error_type = "unknown"
    default_error_code: str | None = None
    client_error = False

    def __init__(
        self,
        message: str | None = None,
        *,
        error_code: str | None = None,
        detail: str | None = None,
        user_message: str | None = None,
    ) -> None:
        text = message if message is not None else detail
        super().__init__(text or "")
        self.error_code = error_code if error_code is not None else self.default_error_code
        self.detail = detail if detail is not None else text
        self.user_message = user_message


class ValidationError(PyNearbyParkingError):
    """Raised when inputs fail validation."""

    error_type = "validation"
    default_error_code = "validation_error"
    client_error = True


class NotFoundError(PyNearbyParkingError):
    """Raised when a requested record does not exist."""

    error_type = "not_found"
    default_error_code = "not_found"
    client_error = True


class ConfigError(PyNearbyParkingError):
    """Raised when a store is missing or misconfigured."""

    error_type = "config"
    default_error_code = "config_error"


class StoreError(PyNearbyParkingError):
    """Raised when a store query fails or returns unusable data."""

    error_type = "store"
    default_error_code = "store_error"


class NetworkError(StoreError):
    """Raised when network communication with a store fails."""

    error_type = "network"
    default_error_code = "network_error"


class StoreTimeoutError(StoreError):
    """Raised when a store query exceeds its time budget."""

    error_type = "timeout"
    default_error_code = "timeout"


class AuthError(StoreError):
    """Raised when a store rejects our credentials."""

    error_type = "auth"
    default_error_code = "auth_error"
