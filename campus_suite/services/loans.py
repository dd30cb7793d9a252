"""Loan products and loan applications."""
from datetime import datetime, timezone
from typing import Any, Dict, List

from campus_suite.core.errors import ValidationFailed
from campus_suite.core.logging import get_logger
from campus_suite.domain.loan import ApplicationStatus, LoanApplicationCreate, LoanCreate, LoanUpdate
from campus_suite.services.entities import EntityRepository
from campus_suite.utils.text import normalize_email

logger = get_logger(__name__)


class LoanService:
    def __init__(self, store):
        self.repository = EntityRepository(store, "loans")

    def create(self, request: LoanCreate) -> Dict[str, Any]:
        return self.repository.create(request.model_dump(mode="json"))

    def list(self) -> List[Dict[str, Any]]:
        return self.repository.list()

    def get(self, loan_id: int) -> Dict[str, Any]:
        return self.repository.get(loan_id)

    def update(self, loan_id: int, request: LoanUpdate) -> Dict[str, Any]:
        """Apply the provided fields, keeping min_amount <= max_amount."""
        fields = request.model_dump(mode="json", exclude_unset=True, exclude_none=True)

        def apply(document):
            merged = {**document, **fields}
            if float(merged["min_amount"]) > float(merged["max_amount"]):
                raise ValidationFailed(
                    "min_amount cannot exceed max_amount",
                    details={"min_amount": merged["min_amount"], "max_amount": merged["max_amount"]},
                )
            document.update(fields)

        return self.repository.modify(loan_id, apply)

    def delete(self, loan_id: int) -> Dict[str, Any]:
        return self.repository.delete(loan_id)


class LoanApplicationService:
    """Submission and administration of loan applications.

    Status changes go through ``LoanApplicationWorkflow``.
    """

    def __init__(self, store):
        self.repository = EntityRepository(store, "loan_applications")

    def submit(self, request: LoanApplicationCreate) -> Dict[str, Any]:
        payload = request.model_dump(mode="json")
        payload["email"] = normalize_email(payload["email"])
        payload["status"] = ApplicationStatus.PENDING.value
        payload["submission_date"] = datetime.now(timezone.utc).isoformat()

        application = self.repository.create(payload)
        logger.info(
            f"Loan application {application['application_id']} submitted for {application['loan_title']}",
            extra={"collection": "loan_applications", "identifier": application["application_id"]},
        )
        return application

    def list(self) -> List[Dict[str, Any]]:
        return self.repository.list()

    def list_for_email(self, email: str) -> List[Dict[str, Any]]:
        return self.repository.find_by(email=normalize_email(email))

    def get(self, application_id: int) -> Dict[str, Any]:
        return self.repository.get(application_id)

    def delete(self, application_id: int) -> Dict[str, Any]:
        return self.repository.delete(application_id)
