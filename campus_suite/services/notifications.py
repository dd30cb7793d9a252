"""In-app notification feed.

Notifications are either administrator announcements or records written by
status workflows. A user sees a record when it is broadcast to everyone,
addressed to their user id, or addressed to their email.
"""
from typing import Any, Dict, List, Optional

from campus_suite.core.logging import get_logger
from campus_suite.domain.content import (
    NotificationCategory,
    NotificationCreate,
    NotificationUpdate,
    TargetType,
)
from campus_suite.domain.user import User
from campus_suite.services.entities import EntityRepository
from campus_suite.utils.text import normalize_email, sanitize_text

logger = get_logger(__name__)


def _newest_first(notifications: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return sorted(notifications, key=lambda n: n.get("created_at", ""), reverse=True)


def is_visible_to(notification: Dict[str, Any], user: User) -> bool:
    if notification.get("target_type") == TargetType.ALL.value:
        return True
    if user.user_id in notification.get("target_users", []):
        return True
    target_user = notification.get("target_user")
    return bool(target_user) and normalize_email(target_user) == normalize_email(user.email)


class NotificationService:
    """Create, target and read notifications."""

    def __init__(self, store):
        self.repository = EntityRepository(store, "notifications")

    def create(
        self,
        message: str,
        category: NotificationCategory,
        target_type: TargetType = TargetType.ALL,
        target_users: Optional[List[int]] = None,
        target_user: Optional[str] = None,
        pdf_url: Optional[str] = None,
        file_name: Optional[str] = None,
        **payload: Any,
    ) -> Dict[str, Any]:
        """Persist a notification.

        Args:
            message: Feed text
            category: Feed category used for filtering
            target_type: Broadcast (ALL) or addressed (USERS, APPROVED_STUDENTS)
            target_users: User ids for addressed notifications
            target_user: Recipient email for per-user workflow notifications
            payload: One structured payload (order_details, loan_info or
                scholarship_info)
        """
        document = {
            "message": sanitize_text(message),
            "category": NotificationCategory(category).value,
            "target_type": TargetType(target_type).value,
            "target_users": list(target_users or []),
            "target_user": normalize_email(target_user) if target_user else None,
            "read_by": [],
            "pdf_url": pdf_url,
            "file_name": file_name,
        }
        document.update(payload)
        notification = self.repository.create(document)
        logger.info(
            f"{document['category']} notification {notification['notification_id']} created",
            extra={"collection": "notifications", "identifier": notification["notification_id"]},
        )
        return notification

    def announce(self, request: NotificationCreate) -> Dict[str, Any]:
        """Create an administrator notification from a request body."""
        addressed = request.type in (TargetType.USERS, TargetType.APPROVED_STUDENTS)
        return self.create(
            message=request.message,
            category=request.category,
            target_type=request.type,
            target_users=request.recipients if addressed else [],
            pdf_url=request.pdf_url,
            file_name=request.file_name,
        )

    def list_for_user(self, user: User, category: Optional[NotificationCategory] = None) -> List[Dict[str, Any]]:
        """Notifications visible to ``user``, newest first, optionally by category."""
        visible = [
            n for n in self.repository.list()
            if is_visible_to(n, user) and (category is None or n.get("category") == NotificationCategory(category).value)
        ]
        return _newest_first(visible)

    def unread_count(self, user: User) -> int:
        return sum(
            1 for n in self.repository.list()
            if is_visible_to(n, user) and user.user_id not in n.get("read_by", [])
        )

    def mark_read(self, identifier: int, user: User) -> Dict[str, Any]:
        """Record that ``user`` has read a notification.

        Raises:
            NotFound: no such notification, or it is not addressed to ``user``
        """
        def add_reader(document):
            if not is_visible_to(document, user):
                raise self.repository._not_found(identifier)
            readers = document.setdefault("read_by", [])
            if user.user_id not in readers:
                readers.append(user.user_id)

        return self.repository.modify(identifier, add_reader)

    def update(self, identifier: int, request: NotificationUpdate) -> Dict[str, Any]:
        """Apply only the fields present (and non-empty) in ``request``."""
        fields = {key: value for key, value in request.model_dump().items() if value}
        if "message" in fields:
            fields["message"] = sanitize_text(fields["message"])
        if not fields:
            return self.repository.get(identifier)
        return self.repository.update(identifier, fields)

    def list_all(self) -> List[Dict[str, Any]]:
        return _newest_first(self.repository.list())

    def delete(self, identifier: int) -> Dict[str, Any]:
        return self.repository.delete(identifier)
