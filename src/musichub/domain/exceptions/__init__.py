"""Domain exceptions."""

from typing import Any


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    # Hey future me, message is stored as an attribute so handlers can inspect it without
    # parsing str(exception). Don't raise this directly - use a specific subclass so callers
    # can catch precisely.
    def __init__(self, message: str, *args: Any) -> None:
        super().__init__(message, *args)
        self.message = message


class InvalidStateException(DomainException):
    """Raised when an object is in an invalid state for the requested operation."""

    pass


class ConfigurationError(DomainException):
    """Application misconfiguration.

    Raised when required configuration is missing or invalid, e.g. an
    unwritable SQLite directory at startup.
    """

    pass


# Listen up, this is the "no registered counterpart" error for the service registry!
# Dropbox has a ServiceType but no client, a legacy record might point at a type we removed.
# Callers MUST turn this into a "not implemented" notice for the user and carry on.
# It is never allowed to bubble up and kill startup.
class UnsupportedServiceError(DomainException):
    """No client or provider implementation is registered for a service."""

    def __init__(self, service: Any, kind: str = "client") -> None:
        service_name = getattr(service, "value", service)
        super().__init__(f"No {kind} implementation registered for service '{service_name}'")
        self.service = service
        self.kind = kind


class AuthenticationAbandoned(DomainException):
    """User cancelled an interactive authentication step.

    Treated exactly like an authentication that returned no account.
    """

    def __init__(self, message: str = "Authentication was cancelled by the user") -> None:
        super().__init__(message)


# Yo, this is NOT a bug signal! Tunez can't rate tracks, cloud drives can't search.
# Raise this from catalog operations a provider structurally cannot do. Log it at debug
# level at most - the caller decides how to show it.
class CapabilityNotSupportedError(DomainException):
    """Provider variant cannot perform the requested catalog operation."""

    def __init__(self, operation: str, service: Any) -> None:
        service_name = getattr(service, "value", service)
        super().__init__(f"'{operation}' is not supported by {service_name}")
        self.operation = operation
        self.service = service


class ProviderOperationError(DomainException):
    """Network or parsing failure during a provider operation (sync, search, ...).

    Caught at the orchestrator boundary; the operation reports non-success
    without touching the provider collection.
    """

    def __init__(
        self,
        message: str,
        service: Any = None,
        provider_id: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.service = service
        self.provider_id = provider_id
        self.original_error = original_error

    def __str__(self) -> str:
        """Return human-readable error message."""
        if self.service is None:
            return self.message
        return f"[{getattr(self.service, 'value', self.service)}] {self.message}"


# Hey future me - cancel_sync() is a COOPERATIVE stop, not task cancellation! Never raise
# asyncio.CancelledError for it, the awaiting task must keep running.
class SyncCancelled(DomainException):
    """A sync pass stopped early because cancel_sync() was requested."""

    def __init__(self, message: str = "Sync was cancelled") -> None:
        super().__init__(message)


__all__ = [
    "AuthenticationAbandoned",
    "CapabilityNotSupportedError",
    "ConfigurationError",
    "DomainException",
    "InvalidStateException",
    "ProviderOperationError",
    "SyncCancelled",
    "UnsupportedServiceError",
]
