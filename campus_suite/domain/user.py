"""Domain models for users and authentication."""
from datetime import datetime
from enum import Enum
from typing import Annotated, Optional
from pydantic import BaseModel, EmailStr, Field, StringConstraints


class UserRole(str, Enum):
    USER = "user"
    ADMIN = "admin"


class User(BaseModel):
    """Authenticated principal reconstructed from a JWT.

    Attributes:
        user_id: Allocated user identifier
        email: Account email (lower-cased)
        name: Display name
        role: ``user`` or ``admin``
    """
    user_id: int
    email: EmailStr
    name: str = ""
    role: UserRole = UserRole.USER

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class SignupRequest(BaseModel):
    """Account registration body."""
    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
    email: EmailStr
    password: str = Field(min_length=1)
    country: str = ""
    phone_code: str = ""
    phone_number: str = ""

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Ama Mensah",
                "email": "ama@campus.edu",
                "password": "secure_password123",
                "country": "Ghana",
                "phone_code": "+233",
                "phone_number": "201234567"
            }
        }


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenData(BaseModel):
    """JWT token payload data."""
    sub: str  # User ID
    email: str
    name: str = ""
    role: str
    exp: datetime
    iat: Optional[datetime] = None


class TokenResponse(BaseModel):
    """Authentication token response."""
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    role: UserRole
    user: User
