"""Status workflows for applications and orders.

A transition validates the requested status, persists it, then informs the
owner by email and by an in-app notification. Persistence is the only part
that can fail the transition; the two side effects are best-effort and any
failure is reported back as a warning.
"""
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, Field

from campus_suite.core.errors import InvalidStatus, NotificationSideEffectFailed
from campus_suite.core.logging import LogTimer, get_logger
from campus_suite.domain.content import NotificationCategory, TargetType
from campus_suite.domain.loan import ApplicationStatus
from campus_suite.domain.shop import OrderStatus
from campus_suite.services.entities import EntityRepository
from campus_suite.services.messages import (
    StatusMessage,
    loan_application_message,
    scholarship_application_message,
    user_order_message,
)
from campus_suite.services.notifications import NotificationService
from campus_suite.utils.text import normalize_email

logger = get_logger(__name__)


class TransitionResult(BaseModel):
    """Outcome of a status transition."""
    entity: Dict[str, Any]
    status: str
    email_sent: bool = False
    notification_id: Optional[int] = None
    warnings: List[str] = Field(default_factory=list)


class StatusWorkflow(ABC):
    """Base status machine. Subclasses name the collection and templates."""

    collection: str = ""
    statuses: Type[Enum] = ApplicationStatus
    category: NotificationCategory = NotificationCategory.ANNOUNCEMENT
    contact_field: str = "email"

    def __init__(self, store, email_sender, notifications: Optional[NotificationService] = None):
        self.store = store
        self.repository = EntityRepository(store, self.collection)
        self.email_sender = email_sender
        self.notifications = notifications or NotificationService(store)

    @property
    def allowed(self) -> List[str]:
        return [status.value for status in self.statuses]

    def parse_status(self, value: Any) -> Enum:
        try:
            return self.statuses(value)
        except ValueError:
            raise InvalidStatus(value, self.allowed)

    def apply_status(self, document: Dict[str, Any], status: Enum) -> None:
        """Mutate ``document`` in place for ``status``. Runs inside the store's update."""
        document["status"] = status.value

    @abstractmethod
    def render(self, document: Dict[str, Any], status: Enum) -> StatusMessage:
        ...

    @abstractmethod
    def notification_payload(self, document: Dict[str, Any], status: Enum, message: StatusMessage) -> Dict[str, Any]:
        ...

    def transition(self, identifier: int, status: Any) -> TransitionResult:
        """Move entity ``identifier`` to ``status``.

        Raises:
            InvalidStatus: ``status`` is outside the workflow (nothing is written)
            NotFound: no entity with ``identifier``
            StoreUnavailable: the status could not be persisted
        """
        target = self.parse_status(status)

        with LogTimer(logger, f"{self.collection} {identifier} -> {target.value}"):
            document = self.repository.modify(identifier, lambda doc: self.apply_status(doc, target))

        logger.info(
            f"{self.repository.label} {identifier} moved to {target.value}",
            extra={"collection": self.collection, "identifier": identifier, "status": target.value},
        )

        result = TransitionResult(entity=document, status=target.value)
        message = self.render(document, target)
        self._send_email(document, message, result)
        self._notify(document, target, message, result)
        return result

    def _send_email(self, document: Dict[str, Any], message: StatusMessage, result: TransitionResult) -> None:
        recipient = document.get(self.contact_field)
        if not recipient:
            result.warnings.append("email side effect skipped: no contact address")
            return
        try:
            self.email_sender.send(recipient, message.subject, message.body)
            result.email_sent = True
        except Exception as e:
            self._side_effect_failed("email", e, document, result)

    def _notify(self, document: Dict[str, Any], status: Enum, message: StatusMessage, result: TransitionResult) -> None:
        try:
            notification = self.notifications.create(
                message=message.summary,
                category=self.category,
                target_type=TargetType.USERS,
                target_user=document.get(self.contact_field),
                **self.notification_payload(document, status, message),
            )
            result.notification_id = notification["notification_id"]
        except Exception as e:
            self._side_effect_failed("notification", e, document, result)

    def _side_effect_failed(self, channel: str, cause: Exception, document: Dict[str, Any], result: TransitionResult) -> None:
        failure = NotificationSideEffectFailed(channel, cause)
        logger.warning(
            failure.message,
            extra={
                "collection": self.collection,
                "identifier": document.get(self.repository.id_field),
                "status": result.status,
            },
            exc_info=True,
        )
        result.warnings.append(failure.message)


class LoanApplicationWorkflow(StatusWorkflow):
    collection = "loan_applications"
    statuses = ApplicationStatus
    category = NotificationCategory.LOAN

    def render(self, document, status):
        return loan_application_message(document, status)

    def notification_payload(self, document, status, message):
        return {
            "loan_info": {
                "application_id": document.get("application_id"),
                "applicant_name": document.get("full_name"),
                "applicant_email": document.get("email"),
                "loan_title": document.get("loan_title"),
                "amount": document.get("amount"),
                "status": status.value,
                "message": message.body,
            }
        }


class ScholarshipApplicationWorkflow(StatusWorkflow):
    collection = "scholarship_applications"
    statuses = ApplicationStatus
    category = NotificationCategory.SCHOLARSHIP

    def apply_status(self, document, status):
        super().apply_status(document, status)
        if status == ApplicationStatus.APPROVED:
            # Link the applicant's account so approved-student notifications reach it
            email = normalize_email(document.get("email") or "")
            user = EntityRepository(self.store, "users").find_one_by(email=email) if email else None
            document["approved_user"] = user["user_id"] if user else None

    def render(self, document, status):
        return scholarship_application_message(document, status)

    def notification_payload(self, document, status, message):
        return {
            "scholarship_info": {
                "application_id": document.get("application_id"),
                "scholarship_id": document.get("scholarship_id"),
                "scholarship_title": document.get("scholarship_title"),
                "applicant_name": document.get("full_name"),
                "applicant_email": document.get("email"),
                "status": status.value,
            }
        }


class UserOrderWorkflow(StatusWorkflow):
    collection = "user_orders"
    statuses = OrderStatus
    category = NotificationCategory.SHOP

    def render(self, document, status):
        return user_order_message(document, status)

    def notification_payload(self, document, status, message):
        return {
            "order_details": {
                "order_id": document.get("order_id"),
                "name": document.get("name"),
                "email": document.get("email"),
                "items": document.get("items", []),
                "total_amount": document.get("total_amount"),
                "status": status.value,
            }
        }
