"""Account routes: signup, login, admin login and the current user."""
from fastapi import APIRouter, Depends

from campus_suite.api.deps import get_store, ok
from campus_suite.core.auth import get_current_user
from campus_suite.core.logging import LogTimer, get_logger
from campus_suite.domain.user import LoginRequest, SignupRequest, TokenResponse, User
from campus_suite.services.users import UserService

logger = get_logger(__name__)
router = APIRouter(tags=["auth"])


@router.post("/auth/signup", status_code=201)
def signup(req: SignupRequest, store=Depends(get_store)):
    """Register a new account.

    Example:
        POST /api/auth/signup
        {"name": "Ama Mensah", "email": "ama@campus.edu", "password": "secret"}
    """
    user = UserService(store).signup(req)
    return ok(user.model_dump(mode="json"), message="User created successfully")


@router.post("/auth/login", response_model=TokenResponse)
def login(req: LoginRequest, store=Depends(get_store)):
    """Authenticate a user and return a JWT token."""
    with LogTimer(logger, "user_authentication"):
        return UserService(store).login(req)


@router.get("/auth/me", response_model=User)
def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Requires: Authentication"""
    return current_user


@router.post("/admin/login", response_model=TokenResponse)
def admin_login(req: LoginRequest, store=Depends(get_store)):
    """Authenticate an administrator. Non-admin accounts are refused."""
    with LogTimer(logger, "admin_authentication"):
        return UserService(store).admin_login(req)
