"""Domain models for scholarship programs and applications."""
from typing import Optional
from pydantic import BaseModel, EmailStr, Field


class ScholarshipCreate(BaseModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    deadline: str = Field(min_length=1)
    amount: float = Field(gt=0)
    percentage: float = Field(gt=0, le=100)
    course_file_url: str = ""
    course_file_public_id: str = ""


class ScholarshipUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    deadline: Optional[str] = None
    amount: Optional[float] = Field(default=None, gt=0)
    percentage: Optional[float] = Field(default=None, gt=0, le=100)
    course_file_url: Optional[str] = None
    course_file_public_id: Optional[str] = None


class ScholarshipDocuments(BaseModel):
    """Hosted document URLs and their image-host public ids."""
    national_id_url: str = ""
    national_id_public_id: str = ""
    transcript_url: str = ""
    transcript_public_id: str = ""
    recommendation_url: str = ""
    recommendation_public_id: str = ""
    enrollment_proof_url: str = ""
    enrollment_proof_public_id: str = ""
    other_url: str = ""
    other_public_id: str = ""

    def count(self) -> int:
        return sum(
            1 for url in (
                self.national_id_url, self.transcript_url, self.recommendation_url,
                self.enrollment_proof_url, self.other_url,
            ) if url
        )


class ScholarshipApplicationCreate(BaseModel):
    """Scholarship application form."""
    scholarship_id: Optional[int] = None
    scholarship_title: str = Field(min_length=1)

    # Applicant information
    full_name: str = Field(min_length=1)
    dob: str = ""
    country: str = ""
    country_code: str = ""
    phone_local: str = ""
    gender: str = ""
    email: EmailStr
    address: str = ""

    # Academic information
    student_id: str = ""
    institution: str = ""
    program: str = ""
    year_of_study: str = ""
    expected_graduation: str = ""
    gpa: str = ""

    # Scholarship details
    applied_before: str = ""
    reason: str = ""
    financial_need: str = ""

    documents: ScholarshipDocuments = Field(default_factory=ScholarshipDocuments)
