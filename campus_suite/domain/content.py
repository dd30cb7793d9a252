"""Domain models for banners, notifications and status changes."""
from enum import Enum
from typing import Annotated, List, Optional
from pydantic import BaseModel, BeforeValidator, Field


class Screen(str, Enum):
    HOME = "HOME"
    LOAN_DETAIL = "LOAN_DETAIL"
    CHECKOUT = "CHECKOUT"


class Position(str, Enum):
    CAROUSEL = "CAROUSEL"      # Home top slider
    HERO = "HERO"              # Loan detail hero
    QR_PAYMENT = "QR_PAYMENT"  # Checkout QR


def _upper(value):
    return value.upper() if isinstance(value, str) else value


ScreenName = Annotated[Screen, BeforeValidator(_upper)]
PositionName = Annotated[Position, BeforeValidator(_upper)]


class BannerCreate(BaseModel):
    title: str = ""
    image_url: str = Field(min_length=1)
    public_id: Optional[str] = None
    screen: ScreenName
    position: PositionName
    is_active: bool = True
    priority: int = 1


class BannerUpdate(BaseModel):
    title: Optional[str] = None
    image_url: Optional[str] = None
    public_id: Optional[str] = None
    screen: Optional[ScreenName] = None
    position: Optional[PositionName] = None
    is_active: Optional[bool] = None
    priority: Optional[int] = None


class NotificationCategory(str, Enum):
    ANNOUNCEMENT = "ANNOUNCEMENT"
    SCHOLARSHIP = "SCHOLARSHIP"
    SHOP = "SHOP"
    LOAN = "LOAN"


class TargetType(str, Enum):
    ALL = "ALL"
    USERS = "USERS"
    APPROVED_STUDENTS = "APPROVED_STUDENTS"


class NotificationCreate(BaseModel):
    """Administrator announcement."""
    message: str = Field(min_length=1)
    category: NotificationCategory
    type: TargetType = TargetType.ALL
    recipients: List[int] = Field(default_factory=list)
    pdf_url: Optional[str] = None
    file_name: Optional[str] = None


class NotificationUpdate(BaseModel):
    message: Optional[str] = None
    pdf_url: Optional[str] = None
    file_name: Optional[str] = None


class StatusUpdate(BaseModel):
    """Requested workflow status; validated by the workflow, not here."""
    status: str
