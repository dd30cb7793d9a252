"""Domain models for the campus shop: products and orders."""
from enum import Enum
from typing import Annotated, List, Optional
from pydantic import BaseModel, EmailStr, Field, StringConstraints

# Surrounding whitespace is stripped before the length check, so "   " is rejected
NonBlankStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class ProductCreate(BaseModel):
    name: str = Field(min_length=1)
    product_type: str = Field(min_length=1)
    product_brand: str = Field(min_length=1)
    description: str = Field(min_length=1)
    image_url: str = Field(min_length=1)
    new_price: float = Field(gt=0)
    old_price: Optional[float] = Field(default=None, gt=0)


class ProductUpdate(BaseModel):
    name: Optional[str] = None
    product_type: Optional[str] = None
    product_brand: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    new_price: Optional[float] = Field(default=None, gt=0)
    old_price: Optional[float] = Field(default=None, gt=0)


class OrderCreate(BaseModel):
    """Single-product order with an attached payment proof."""
    product_name: Optional[str] = None
    product_image: Optional[str] = None
    quantity: int = Field(default=1, ge=1)
    total_price: Optional[float] = None
    email: EmailStr
    phone_number: NonBlankStr
    address: NonBlankStr
    payment_image: Optional[str] = None


class OrderItem(BaseModel):
    product_name: str = Field(min_length=1)
    product_image: str = Field(min_length=1)
    quantity: int = Field(ge=1)
    price: float = Field(gt=0)


class UserOrderCreate(BaseModel):
    """Cart checkout: several products, one payment proof."""
    items: List[OrderItem] = Field(min_length=1)
    subtotal: float = Field(ge=0)
    total_amount: float = Field(ge=0)
    name: NonBlankStr
    email: EmailStr
    phone_number: NonBlankStr
    address: NonBlankStr
    payment_document_url: str = Field(min_length=1)

    class Config:
        json_schema_extra = {
            "example": {
                "items": [
                    {"product_name": "Campus Hoodie", "product_image": "https://img/hoodie.png", "quantity": 2, "price": 25.0}
                ],
                "subtotal": 50.0,
                "total_amount": 50.0,
                "name": "Ama Mensah",
                "email": "ama@campus.edu",
                "phone_number": "+233201234567",
                "address": "Hall 3, Room 12",
                "payment_document_url": "https://img/proof.png"
            }
        }
