"""
Error types for ark_sdk.

Construction-time failures (tenant resolution, registration, missing
authenticators) are raised immediately. Verb calls raise
ArkTransportError for network failures and leave non-2xx handling to
raise_for_status(). Pagination failures end the page sequence and are
reported through the iterator outcome.
"""
from typing import Any, Iterable, Optional


class ArkError(Exception):
    """Base class for all ark_sdk errors."""


class ArkTenantResolutionError(ArkError):
    """No tenant subdomain could be derived from any available source."""


class ArkTransportError(ArkError):
    """Network-level failure on a verb call."""

    def __init__(self, method: str, url: str, cause: Exception):
        self.method = method
        self.url = url
        self.cause = cause
        super().__init__(f"{method} {url} failed: {cause}")


class ArkServerStatusError(ArkError):
    """Non-2xx HTTP status returned by a backend."""

    def __init__(self, action: str, status: int, body: Any = None):
        self.action = action
        self.status = status
        self.body = body
        super().__init__(f"Failed to {action} - [{status}] - [{body}]")


class ArkRegistrationConflictError(ArkError):
    """A service name was registered twice."""

    def __init__(self, service_name: str):
        self.service_name = service_name
        super().__init__(f"Service [{service_name}] is already registered")


class ArkServiceNotFoundError(ArkError, KeyError):
    """Lookup of an unregistered service name."""

    def __init__(self, service_name: str):
        self.service_name = service_name
        super().__init__(f"Service [{service_name}] is not registered")

    def __str__(self) -> str:
        return self.args[0]


class ArkMissingAuthenticatorError(ArkError):
    """A service was constructed without one of its required authenticators."""

    def __init__(self, service_name: str, missing: Iterable[str]):
        self.service_name = service_name
        self.missing = list(missing)
        super().__init__(
            f"{service_name} missing required authenticators for service: "
            f"{', '.join(self.missing)}"
        )


class ArkAuthenticatorNotFoundError(ArkError):
    """A named authenticator is not held by a service or API object."""

    def __init__(self, authenticator_name: str, owner: Optional[str] = None):
        self.authenticator_name = authenticator_name
        self.owner = owner
        if owner:
            message = f"{owner} failed to find authenticator {authenticator_name}"
        else:
            message = f"{authenticator_name} is not supported or not found"
        super().__init__(message)


class ArkPaginationError(ArkError):
    """A page request failed and the page sequence ended early."""

    def __init__(self, name: str, cause: Exception):
        self.name = name
        self.cause = cause
        super().__init__(f"Failed to list {name}: {cause}")
