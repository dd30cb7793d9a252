"""Scholarship program and scholarship application routes."""
from fastapi import APIRouter, Depends

from campus_suite.api.deps import ensure_owner_or_admin, get_email_sender, get_store, ok, transition_response
from campus_suite.core.auth import get_current_user, require_admin
from campus_suite.domain.content import StatusUpdate
from campus_suite.domain.scholarship import ScholarshipApplicationCreate, ScholarshipCreate, ScholarshipUpdate
from campus_suite.domain.user import User
from campus_suite.services.scholarships import ScholarshipApplicationService, ScholarshipService
from campus_suite.services.workflow import ScholarshipApplicationWorkflow

router = APIRouter(tags=["scholarships"])


# -----------------
# SCHOLARSHIPS
# -----------------

@router.post("/scholarships", status_code=201)
def create_scholarship(req: ScholarshipCreate, store=Depends(get_store), admin: User = Depends(require_admin)):
    return ok(ScholarshipService(store).create(req), message="Scholarship added successfully")


@router.get("/scholarships")
def list_scholarships(store=Depends(get_store)):
    return ok(ScholarshipService(store).list())


@router.get("/scholarships/{scholarship_id}")
def get_scholarship(scholarship_id: int, store=Depends(get_store)):
    return ok(ScholarshipService(store).get(scholarship_id))


@router.put("/scholarships/{scholarship_id}")
def update_scholarship(
    scholarship_id: int,
    req: ScholarshipUpdate,
    store=Depends(get_store),
    admin: User = Depends(require_admin),
):
    return ok(ScholarshipService(store).update(scholarship_id, req), message="Scholarship updated successfully")


@router.delete("/scholarships/{scholarship_id}")
def delete_scholarship(scholarship_id: int, store=Depends(get_store), admin: User = Depends(require_admin)):
    ScholarshipService(store).delete(scholarship_id)
    return ok(message="Scholarship deleted successfully")


# -----------------
# SCHOLARSHIP APPLICATIONS
# -----------------

@router.post("/scholarship-applications", status_code=201)
def submit_scholarship_application(
    req: ScholarshipApplicationCreate,
    store=Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    application = ScholarshipApplicationService(store).submit(req)
    return ok(application, message="Application submitted successfully")


@router.get("/scholarship-applications")
def list_scholarship_applications(store=Depends(get_store), admin: User = Depends(require_admin)):
    """All applications, newest first."""
    return ok(ScholarshipApplicationService(store).list())


@router.get("/scholarship-applications/mine")
def list_my_scholarship_applications(store=Depends(get_store), current_user: User = Depends(get_current_user)):
    return ok(ScholarshipApplicationService(store).list_for_email(current_user.email))


@router.get("/scholarship-applications/{application_id}")
def get_scholarship_application(
    application_id: int,
    store=Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    application = ScholarshipApplicationService(store).get(application_id)
    ensure_owner_or_admin(current_user, application.get("email"))
    return ok(application)


@router.patch("/scholarship-applications/{application_id}/status")
def update_scholarship_application_status(
    application_id: int,
    req: StatusUpdate,
    store=Depends(get_store),
    email_sender=Depends(get_email_sender),
    admin: User = Depends(require_admin),
):
    """Approving links the applicant's account in ``approved_user``."""
    result = ScholarshipApplicationWorkflow(store, email_sender).transition(application_id, req.status)
    return transition_response(result, "Scholarship application")


@router.delete("/scholarship-applications/{application_id}")
def delete_scholarship_application(
    application_id: int,
    store=Depends(get_store),
    admin: User = Depends(require_admin),
):
    ScholarshipApplicationService(store).delete(application_id)
    return ok(message="Application deleted successfully")
