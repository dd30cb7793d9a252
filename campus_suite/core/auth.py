"""Authentication and authorization for the Campus Support Suite API.

Implements bcrypt password hashing, JWT bearer tokens and role-based
access control. Administrators manage the catalogue and review workflows;
users submit applications, place orders and read their notifications.
"""
from datetime import datetime, timedelta, timezone
from typing import List, Optional

import bcrypt
import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from campus_suite.core.config import settings
from campus_suite.core.logging import get_logger
from campus_suite.domain.user import TokenData, User, UserRole

logger = get_logger(__name__)

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72

# Security scheme
security = HTTPBearer()


def hash_password(password: str) -> str:
    """Hash a password with bcrypt using the configured cost factor."""
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8")[:BCRYPT_MAX_BYTES], salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(
            password.encode("utf-8")[:BCRYPT_MAX_BYTES],
            password_hash.encode("utf-8"),
        )
    except ValueError:
        logger.warning("Stored password hash is malformed")
        return False


def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token for user.

    Args:
        user: User object
        expires_delta: Token expiration time (default: access_token_expire_minutes)

    Returns:
        Encoded JWT token

    Example:
        >>> user = User(user_id=1, email="ama@campus.edu", name="Ama")
        >>> token = create_access_token(user)
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)

    now = datetime.now(timezone.utc)
    expire = now + expires_delta

    payload = {
        "sub": str(user.user_id),
        "email": user.email,
        "name": user.name,
        "role": UserRole(user.role).value,
        "exp": expire,
        "iat": now,
    }

    token = jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)

    logger.info(
        f"Access token created for user {user.email}",
        extra={"user_id": user.user_id, "expires_at": expire.isoformat()},
    )

    return token


def decode_token(token: str) -> TokenData:
    """Decode and validate JWT token.

    Raises:
        HTTPException: If token is invalid or expired
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])

        return TokenData(
            sub=payload.get("sub"),
            email=payload.get("email"),
            name=payload.get("name") or "",
            role=payload.get("role"),
            exp=datetime.fromtimestamp(payload.get("exp"), tz=timezone.utc),
            iat=datetime.fromtimestamp(payload["iat"], tz=timezone.utc) if payload.get("iat") else None,
        )

    except jwt.ExpiredSignatureError:
        logger.warning("Expired token attempted")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
            headers={"WWW-Authenticate": "Bearer"},
        )

    except (jwt.InvalidTokenError, TypeError, ValueError) as e:
        logger.warning(f"Invalid token attempted: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication token",
            headers={"WWW-Authenticate": "Bearer"},
        )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> User:
    """FastAPI dependency returning the authenticated user.

    The user is reconstructed from the token claims; no store round-trip.

    Example:
        >>> @router.get("/protected")
        >>> def protected_route(user: User = Depends(get_current_user)):
        ...     return {"user": user.email}
    """
    token_data = decode_token(credentials.credentials)

    try:
        user = User(
            user_id=int(token_data.sub),
            email=token_data.email,
            name=token_data.name,
            role=token_data.role,
        )
    except ValueError:
        logger.warning("Token claims do not describe a user")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    logger.debug(f"User authenticated: {user.email}", extra={"user_id": user.user_id})

    return user


def require_role(allowed_roles: List[str]):
    """Dependency factory for role-based access control.

    Example:
        >>> @router.post("/loans")
        >>> def create_loan(user: User = Depends(require_role(["admin"]))):
        ...     ...
    """
    async def role_checker(user: User = Depends(get_current_user)) -> User:
        if user.role.value not in allowed_roles:
            logger.warning(
                f"Insufficient permissions for {user.email}",
                extra={"user_id": user.user_id, "user_role": user.role.value, "required_roles": allowed_roles},
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Insufficient permissions. Required role: {', '.join(allowed_roles)}",
            )
        return user

    return role_checker


require_admin = require_role([UserRole.ADMIN.value])
