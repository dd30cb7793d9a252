"""Domain models for loan products and loan applications."""
from datetime import date
from enum import Enum
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, model_validator


class LoanStatus(str, Enum):
    ACTIVE = "active"
    CLOSED = "closed"


class ApplicationStatus(str, Enum):
    """Review states shared by loan and scholarship applications."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class LoanCreate(BaseModel):
    """Loan product published by an administrator."""
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    min_amount: float = Field(gt=0)
    max_amount: float = Field(gt=0)
    interest_rate: float = Field(ge=0)
    repayment_period: str = Field(min_length=1)
    eligibility: str = ""
    required_documents: str = ""
    application_deadline: str = ""
    processing_time: str = ""
    benefits: str = ""
    status: LoanStatus = LoanStatus.ACTIVE
    document_url: str = ""
    document_public_id: str = ""

    @model_validator(mode="after")
    def check_amount_range(self):
        if self.min_amount > self.max_amount:
            raise ValueError("min_amount cannot exceed max_amount")
        return self

    class Config:
        json_schema_extra = {
            "example": {
                "title": "Laptop Loan",
                "description": "Interest-free loan for study laptops",
                "min_amount": 200,
                "max_amount": 1500,
                "interest_rate": 0,
                "repayment_period": "12 months"
            }
        }


class LoanUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    min_amount: Optional[float] = Field(default=None, gt=0)
    max_amount: Optional[float] = Field(default=None, gt=0)
    interest_rate: Optional[float] = Field(default=None, ge=0)
    repayment_period: Optional[str] = None
    eligibility: Optional[str] = None
    required_documents: Optional[str] = None
    application_deadline: Optional[str] = None
    processing_time: Optional[str] = None
    benefits: Optional[str] = None
    status: Optional[LoanStatus] = None
    document_url: Optional[str] = None
    document_public_id: Optional[str] = None


class LoanApplicationCreate(BaseModel):
    """Student loan application form."""
    # Personal information
    full_name: str = Field(min_length=1)
    dob: date
    gender: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    email: EmailStr
    student_id: Optional[str] = None
    home_address: str = Field(min_length=1)

    # Academic information
    program: str = Field(min_length=1)
    year_of_study: str = Field(min_length=1)

    # Loan details
    loan_title: str = Field(min_length=1)
    amount: float = Field(gt=0)
    purpose: str = Field(min_length=1)

    # Uploaded document URLs
    id_document_url: Optional[str] = None
    school_id_document_url: Optional[str] = None
    agreement_document_url: Optional[str] = None

    signature: Optional[str] = None
    confirm_accurate: bool = False
    agree_terms: bool = False
    understand_risk: bool = False
