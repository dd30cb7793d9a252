"""Shared FastAPI dependencies and response helpers.

Tests override ``get_store`` and ``get_email_sender`` through
``app.dependency_overrides``.
"""
from typing import Any, Dict, Optional

from fastapi import HTTPException, status

from campus_suite.core.logging import get_logger
from campus_suite.domain.user import User
from campus_suite.infrastructure.email import EmailSender
from campus_suite.infrastructure.email import get_email_sender as _shared_email_sender
from campus_suite.infrastructure.redis import RedisDocumentStore
from campus_suite.services.workflow import TransitionResult
from campus_suite.utils.text import normalize_email

logger = get_logger(__name__)


def get_store() -> RedisDocumentStore:
    return RedisDocumentStore()


def get_email_sender() -> EmailSender:
    return _shared_email_sender()


def ensure_owner_or_admin(user: User, email: Optional[str]) -> None:
    """Allow administrators, or the user whose email owns the record."""
    if user.is_admin or normalize_email(email or "") == normalize_email(user.email):
        return
    logger.warning(
        f"Access denied for {user.email}",
        extra={"user_id": user.user_id},
    )
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="You don't have access to this record",
    )


def ok(data: Any = None, message: Optional[str] = None, **extra: Any) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": True}
    if message:
        body["message"] = message
    if data is not None:
        body["data"] = data
    body.update(extra)
    return body


def transition_response(result: TransitionResult, label: str) -> Dict[str, Any]:
    message = f"{label} updated to {result.status}"
    if result.email_sent:
        message += " and email sent"
    return ok(
        result.entity,
        message=message,
        email_sent=result.email_sent,
        notification_id=result.notification_id,
        warnings=result.warnings,
    )
