"""Domain exceptions shared by the store, services and API layer.

Each exception carries the HTTP status the API layer answers with, so
services never import FastAPI.
"""
from typing import Any, Optional


class CampusError(Exception):
    """Base class for errors surfaced to API callers."""

    http_status = 500

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class StoreUnavailable(CampusError):
    """The document store could not be reached or timed out. Retryable."""

    http_status = 503


class AllocationExhausted(StoreUnavailable):
    """Every identifier candidate collided with a concurrent insert."""


class UniquenessViolation(CampusError):
    """An insert collided with an identifier already present."""

    http_status = 409

    def __init__(self, collection: str, identifier: int):
        super().__init__(f"{collection} identifier {identifier} is already in use")
        self.collection = collection
        self.identifier = identifier


class NotFound(CampusError):
    http_status = 404


class InvalidStatus(CampusError):
    """Requested status is outside the workflow's allowed set."""

    http_status = 400

    def __init__(self, status: Any, allowed):
        allowed = list(allowed)
        super().__init__(
            f"Invalid status. Must be one of: {', '.join(allowed)}",
            details={"status": status, "allowed": allowed},
        )
        self.status = status
        self.allowed = allowed


class ValidationFailed(CampusError):
    http_status = 400


class Conflict(CampusError):
    http_status = 409


class AuthenticationFailed(CampusError):
    http_status = 401


class NotificationSideEffectFailed(CampusError):
    """Email or notification persistence failed after a status transition.

    Logged and reported as a warning, never raised to the caller.
    """

    def __init__(self, channel: str, cause: Exception):
        super().__init__(f"{channel} side effect failed: {cause}")
        self.channel = channel
        self.cause = cause


class EmailDeliveryError(Exception):
    """The email collaborator could not deliver a message."""


class EmailNotConfigured(EmailDeliveryError):
    pass


class EmailRateLimited(EmailDeliveryError):
    """The provider refused the message because a sending limit was hit."""
