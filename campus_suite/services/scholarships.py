"""Scholarship programs and scholarship applications."""
from typing import Any, Dict, List

from campus_suite.core.logging import get_logger
from campus_suite.domain.loan import ApplicationStatus
from campus_suite.domain.scholarship import ScholarshipApplicationCreate, ScholarshipCreate, ScholarshipUpdate
from campus_suite.services.entities import EntityRepository
from campus_suite.utils.text import normalize_email

logger = get_logger(__name__)


def _newest_first(documents: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return sorted(documents, key=lambda d: d.get("created_at", ""), reverse=True)


class ScholarshipService:
    def __init__(self, store):
        self.repository = EntityRepository(store, "scholarships")

    def create(self, request: ScholarshipCreate) -> Dict[str, Any]:
        scholarship = self.repository.create(request.model_dump(mode="json"))
        if not scholarship.get("course_file_url"):
            logger.info(
                f"Scholarship {scholarship['scholarship_id']} published without a course file",
                extra={"collection": "scholarships", "identifier": scholarship["scholarship_id"]},
            )
        return scholarship

    def list(self) -> List[Dict[str, Any]]:
        return self.repository.list()

    def get(self, scholarship_id: int) -> Dict[str, Any]:
        return self.repository.get(scholarship_id)

    def update(self, scholarship_id: int, request: ScholarshipUpdate) -> Dict[str, Any]:
        fields = request.model_dump(mode="json", exclude_unset=True, exclude_none=True)
        if not fields:
            return self.repository.get(scholarship_id)
        return self.repository.update(scholarship_id, fields)

    def delete(self, scholarship_id: int) -> Dict[str, Any]:
        return self.repository.delete(scholarship_id)


class ScholarshipApplicationService:
    """Submission and administration of scholarship applications.

    Status changes go through ``ScholarshipApplicationWorkflow``.
    """

    def __init__(self, store):
        self.repository = EntityRepository(store, "scholarship_applications")

    def submit(self, request: ScholarshipApplicationCreate) -> Dict[str, Any]:
        payload = request.model_dump(mode="json")
        payload["email"] = normalize_email(payload["email"])
        payload["status"] = ApplicationStatus.PENDING.value
        payload["approved_user"] = None

        application = self.repository.create(payload)
        logger.info(
            f"Scholarship application {application['application_id']} submitted "
            f"with {request.documents.count()} document(s)",
            extra={"collection": "scholarship_applications", "identifier": application["application_id"]},
        )
        return application

    def list(self) -> List[Dict[str, Any]]:
        return _newest_first(self.repository.list())

    def list_for_email(self, email: str) -> List[Dict[str, Any]]:
        return _newest_first(self.repository.find_by(email=normalize_email(email)))

    def get(self, application_id: int) -> Dict[str, Any]:
        return self.repository.get(application_id)

    def delete(self, application_id: int) -> Dict[str, Any]:
        return self.repository.delete(application_id)
