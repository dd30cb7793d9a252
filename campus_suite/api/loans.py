"""Loan product and loan application routes."""
from fastapi import APIRouter, Depends

from campus_suite.api.deps import ensure_owner_or_admin, get_email_sender, get_store, ok, transition_response
from campus_suite.core.auth import get_current_user, require_admin
from campus_suite.domain.content import StatusUpdate
from campus_suite.domain.loan import LoanApplicationCreate, LoanCreate, LoanUpdate
from campus_suite.domain.user import User
from campus_suite.services.loans import LoanApplicationService, LoanService
from campus_suite.services.workflow import LoanApplicationWorkflow

router = APIRouter(tags=["loans"])


# -----------------
# LOAN PRODUCTS
# -----------------

@router.post("/loans", status_code=201)
def create_loan(req: LoanCreate, store=Depends(get_store), admin: User = Depends(require_admin)):
    return ok(LoanService(store).create(req), message="Loan created successfully")


@router.get("/loans")
def list_loans(store=Depends(get_store)):
    """All loan products, by loan id."""
    return ok(LoanService(store).list())


@router.get("/loans/{loan_id}")
def get_loan(loan_id: int, store=Depends(get_store)):
    return ok(LoanService(store).get(loan_id))


@router.put("/loans/{loan_id}")
def update_loan(loan_id: int, req: LoanUpdate, store=Depends(get_store), admin: User = Depends(require_admin)):
    return ok(LoanService(store).update(loan_id, req), message="Loan updated successfully")


@router.delete("/loans/{loan_id}")
def delete_loan(loan_id: int, store=Depends(get_store), admin: User = Depends(require_admin)):
    LoanService(store).delete(loan_id)
    return ok(message="Loan deleted successfully")


# -----------------
# LOAN APPLICATIONS
# -----------------

@router.post("/loan-applications", status_code=201)
def submit_loan_application(
    req: LoanApplicationCreate,
    store=Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    application = LoanApplicationService(store).submit(req)
    return ok(application, message="Loan application submitted successfully")


@router.get("/loan-applications")
def list_loan_applications(store=Depends(get_store), admin: User = Depends(require_admin)):
    return ok(LoanApplicationService(store).list())


@router.get("/loan-applications/mine")
def list_my_loan_applications(store=Depends(get_store), current_user: User = Depends(get_current_user)):
    return ok(LoanApplicationService(store).list_for_email(current_user.email))


@router.get("/loan-applications/{application_id}")
def get_loan_application(
    application_id: int,
    store=Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    application = LoanApplicationService(store).get(application_id)
    ensure_owner_or_admin(current_user, application.get("email"))
    return ok(application)


@router.patch("/loan-applications/{application_id}/status")
def update_loan_application_status(
    application_id: int,
    req: StatusUpdate,
    store=Depends(get_store),
    email_sender=Depends(get_email_sender),
    admin: User = Depends(require_admin),
):
    """Move an application to pending, approved or rejected.

    The applicant is emailed and notified; delivery problems come back in
    ``warnings`` without failing the request.
    """
    result = LoanApplicationWorkflow(store, email_sender).transition(application_id, req.status)
    return transition_response(result, "Loan application")


@router.delete("/loan-applications/{application_id}")
def delete_loan_application(application_id: int, store=Depends(get_store), admin: User = Depends(require_admin)):
    LoanApplicationService(store).delete(application_id)
    return ok(message="Loan application deleted successfully")
