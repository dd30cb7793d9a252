"""Unit tests for authentication and authorization."""
import pytest
import jwt
from datetime import timedelta
from unittest.mock import patch
from pydantic import ValidationError as PydanticValidationError

from campus_suite.core.auth import create_access_token, decode_token, hash_password, verify_password
from campus_suite.core.config import settings
from campus_suite.core.errors import AuthenticationFailed, StoreUnavailable, ValidationFailed
from campus_suite.domain.user import LoginRequest, SignupRequest, UserRole
from campus_suite.services.users import UserService


class TestJWTTokens:
    """Test JWT token creation and validation."""

    def test_create_access_token(self, student_user):
        token = create_access_token(student_user)

        assert isinstance(token, str)
        assert len(token) > 50  # JWT tokens are long

    def test_decode_valid_token(self, student_user):
        token_data = decode_token(create_access_token(student_user))

        assert token_data.sub == str(student_user.user_id)
        assert token_data.email == student_user.email
        assert token_data.role == "user"

    def test_decode_expired_token(self, student_user):
        expired_token = create_access_token(student_user, expires_delta=timedelta(hours=-1))

        with pytest.raises(Exception) as exc_info:
            decode_token(expired_token)

        assert exc_info.value.status_code == 401

    def test_decode_invalid_token(self):
        with pytest.raises(Exception) as exc_info:
            decode_token("not.a.valid.jwt.token")

        assert exc_info.value.status_code == 401

    def test_token_contains_required_claims(self, admin_user):
        token = create_access_token(admin_user)
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])

        assert payload["sub"] == "1"
        assert payload["role"] == "admin"
        assert "email" in payload
        assert "exp" in payload  # Expiration
        assert "iat" in payload  # Issued at


class TestPasswords:
    """Test bcrypt hashing."""

    def test_hash_and_verify(self):
        password_hash = hash_password("secure_password123")

        assert password_hash != "secure_password123"
        assert verify_password("secure_password123", password_hash)
        assert not verify_password("wrong", password_hash)

    def test_malformed_hash_does_not_verify(self):
        assert verify_password("anything", "not-a-bcrypt-hash") is False


class TestUserService:
    """Test signup and login against the store."""

    def test_signup_creates_user(self, store):
        user = UserService(store).signup(SignupRequest(name="Ama", email="Ama@Campus.edu", password="pw"))

        assert user.user_id == 1
        assert user.email == "ama@campus.edu"
        assert user.role == UserRole.USER
        stored = store.find("users", 1)
        assert stored["password_hash"] != "pw"

    def test_signup_admin_email_gets_admin_role(self, store):
        user = UserService(store).signup(SignupRequest(name="Admin", email="admin@campus.edu", password="pw"))

        assert user.role == UserRole.ADMIN

    def test_duplicate_signup_rejected(self, store):
        service = UserService(store)
        service.signup(SignupRequest(name="Ama", email="ama@campus.edu", password="pw"))

        with pytest.raises(ValidationFailed):
            service.signup(SignupRequest(name="Ama", email="AMA@campus.edu", password="other"))

    def test_failed_signup_frees_email(self, store):
        service = UserService(store)

        with patch.object(service.repository, "create", side_effect=StoreUnavailable("store down")):
            with pytest.raises(StoreUnavailable):
                service.signup(SignupRequest(name="Ama", email="ama@campus.edu", password="pw"))

        user = service.signup(SignupRequest(name="Ama", email="ama@campus.edu", password="pw"))
        assert user.user_id == 1

    def test_signup_strips_name(self, store):
        user = UserService(store).signup(SignupRequest(name="  Ama Mensah  ", email="ama@campus.edu", password="pw"))

        assert user.name == "Ama Mensah"

    def test_blank_name_rejected(self):
        with pytest.raises(PydanticValidationError):
            SignupRequest(name="   ", email="ama@campus.edu", password="pw")

    def test_login_with_valid_credentials(self, store):
        service = UserService(store)
        service.signup(SignupRequest(name="Ama", email="ama@campus.edu", password="pw"))

        response = service.login(LoginRequest(email="ama@campus.edu", password="pw"))

        assert response.role == UserRole.USER
        assert decode_token(response.access_token).email == "ama@campus.edu"

    def test_login_with_wrong_password(self, store):
        service = UserService(store)
        service.signup(SignupRequest(name="Ama", email="ama@campus.edu", password="pw"))

        with pytest.raises(AuthenticationFailed):
            service.login(LoginRequest(email="ama@campus.edu", password="nope"))

    def test_admin_login_refuses_regular_users(self, store):
        service = UserService(store)
        service.signup(SignupRequest(name="Ama", email="ama@campus.edu", password="pw"))

        with pytest.raises(AuthenticationFailed) as exc_info:
            service.admin_login(LoginRequest(email="ama@campus.edu", password="pw"))

        assert exc_info.value.message == "Not an admin account"
