"""
Admission Applications Schemas

Pydantic schemas for request validation and response serialization.
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

# Re-use enums from models (they work with Pydantic too!)
from app.modules.applications.models import ApplicationStatus, DocumentType, Program


class EducationDetailsInput(BaseModel):
    """Education section. Replaces any previous education details."""

    last_school_attended: str | None = Field(None, max_length=200)
    highest_qualification: str | None = Field(None, max_length=100)
    graduation_year: int | None = Field(None, ge=1900, le=2100)
    field_of_study: str | None = Field(None, max_length=100)
    grade_average: str | None = Field(None, max_length=20)


class FamilyDetailsInput(BaseModel):
    """Family section. Replaces any previous family details."""

    father_name: str | None = Field(None, max_length=200)
    father_occupation: str | None = Field(None, max_length=100)
    mother_name: str | None = Field(None, max_length=200)
    mother_occupation: str | None = Field(None, max_length=100)
    guardian_name: str | None = Field(None, max_length=200)
    guardian_phone: str | None = Field(None, max_length=20)
    guardian_email: EmailStr | None = None
    emergency_contact: str | None = Field(None, max_length=20)


class ApplicationCreate(BaseModel):
    """
    Request body for POST /applications.

    Only the program is required to start an application; the remaining
    candidate fields can be completed before submission. Program presence
    is checked by the service so the error carries the service error code.
    """

    matricule: str | None = Field(None, max_length=32)
    program: Program | None = None

    first_name: str | None = Field(None, min_length=1, max_length=100)
    last_name: str | None = Field(None, min_length=1, max_length=100)
    nationality: str | None = Field(None, max_length=100)
    region_of_origin: str | None = Field(None, max_length=100)
    address: str | None = Field(None, max_length=500)
    date_of_birth: date | None = None

    email: EmailStr | None = None
    phone_number: str | None = Field(None, min_length=1, max_length=20)
    whatsapp_number: str | None = Field(None, max_length=20)


class CompleteApplicationCreate(ApplicationCreate):
    """
    Application payload of POST /applications/complete.

    Everything needed for submission arrives at once, so the required
    candidate fields and both detail sections are mandatory here.
    """

    program: Program
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone_number: str = Field(..., min_length=1, max_length=20)

    education_details: EducationDetailsInput
    family_details: FamilyDetailsInput


class StatusUpdateRequest(BaseModel):
    """Request body for PATCH /admin/applications/{id}/status."""

    status: ApplicationStatus


class EducationDetailsResponse(EducationDetailsInput):
    model_config = ConfigDict(from_attributes=True)

    id: int


class FamilyDetailsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    father_name: str | None = None
    father_occupation: str | None = None
    mother_name: str | None = None
    mother_occupation: str | None = None
    guardian_name: str | None = None
    guardian_phone: str | None = None
    guardian_email: str | None = None
    emergency_contact: str | None = None


class DocumentSummary(BaseModel):
    """Document metadata. Content is served by the download endpoint."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    document_type: str
    filename: str | None = None
    content_type: str | None = None
    created_at: datetime | None = None


class ApplicationResponse(BaseModel):
    """Full application view returned by the candidate and admin endpoints."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    matricule: str | None = None
    program: Program
    status: ApplicationStatus

    first_name: str | None = None
    last_name: str | None = None
    nationality: str | None = None
    region_of_origin: str | None = None
    address: str | None = None
    date_of_birth: date | None = None
    email: str | None = None
    phone_number: str | None = None
    whatsapp_number: str | None = None

    submission_date: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    education_details: EducationDetailsResponse | None = None
    family_details: FamilyDetailsResponse | None = None
    documents: list[DocumentSummary] = Field(default_factory=list)


class ApplicationListResponse(BaseModel):
    """Response for GET /admin/applications."""

    applications: list[ApplicationResponse]
    total: int


class DocumentTypeListResponse(BaseModel):
    """Ordered catalog of required documents for a full bundle upload."""

    document_types: list[DocumentType]
    required_count: int
