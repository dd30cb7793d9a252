"""User accounts: signup and credential checks."""
from typing import Any, Dict, Optional

from campus_suite.core.auth import create_access_token, hash_password, verify_password
from campus_suite.core.config import settings
from campus_suite.core.errors import AuthenticationFailed, ValidationFailed
from campus_suite.core.logging import LogTimer, get_logger
from campus_suite.domain.user import LoginRequest, SignupRequest, TokenResponse, User, UserRole
from campus_suite.services.entities import EntityRepository
from campus_suite.utils.text import normalize_email

logger = get_logger(__name__)


def to_user(document: Dict[str, Any]) -> User:
    return User(
        user_id=document["user_id"],
        email=document["email"],
        name=document.get("name", ""),
        role=document.get("role", UserRole.USER.value),
    )


class UserService:
    def __init__(self, store):
        self.store = store
        self.repository = EntityRepository(store, "users")

    def find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        return self.repository.find_one_by(email=normalize_email(email))

    def signup(self, request: SignupRequest) -> User:
        """Register an account. Emails listed in ADMIN_EMAILS get the admin role.

        Raises:
            ValidationFailed: the email is already registered
        """
        email = normalize_email(request.email)
        if not self.store.reserve_unique("users", "email", email):
            logger.warning(f"Signup attempt for existing account: {email}")
            raise ValidationFailed("User already exists")

        admins = {normalize_email(address) for address in settings.admin_emails}
        role = UserRole.ADMIN if email in admins else UserRole.USER

        try:
            with LogTimer(logger, "signup"):
                document = self.repository.create({
                    "name": request.name,
                    "email": email,
                    "password_hash": hash_password(request.password),
                    "country": request.country,
                    "phone_code": request.phone_code,
                    "phone_number": request.phone_number,
                    "role": role.value,
                })
        except Exception:
            # The account was never stored, so the email is free again
            self.store.release_unique("users", "email", email)
            raise
        self.store.assign_unique("users", "email", email, str(document["user_id"]))

        logger.info(f"User registered: {email}", extra={"user_id": document["user_id"]})
        return to_user(document)

    def authenticate(self, email: str, password: str) -> Optional[User]:
        """Return the user for valid credentials, None otherwise."""
        document = self.find_by_email(email)
        if document is None:
            logger.warning(f"Login attempt for non-existent user: {email}")
            return None

        if not verify_password(password, document.get("password_hash", "")):
            logger.warning(f"Invalid password for user: {email}")
            return None

        logger.info(f"User authenticated successfully: {email}")
        return to_user(document)

    def login(self, request: LoginRequest) -> TokenResponse:
        user = self.authenticate(request.email, request.password)
        if user is None:
            raise AuthenticationFailed("Invalid credentials")
        return self._token_response(user)

    def admin_login(self, request: LoginRequest) -> TokenResponse:
        user = self.authenticate(request.email, request.password)
        if user is None:
            raise AuthenticationFailed("Invalid admin credentials")
        if not user.is_admin:
            logger.warning(f"Admin login refused for non-admin account: {user.email}")
            raise AuthenticationFailed("Not an admin account")
        return self._token_response(user)

    def _token_response(self, user: User) -> TokenResponse:
        return TokenResponse(
            access_token=create_access_token(user),
            expires_in=settings.access_token_expire_minutes * 60,
            role=user.role,
            user=user,
        )
