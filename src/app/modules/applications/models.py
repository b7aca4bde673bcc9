"""
Admission Applications Models

Database models for candidate applications and the records they own:
education details, family details and uploaded documents.
"""

import enum
from datetime import UTC, date, datetime

from sqlalchemy import (
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    LargeBinary,
    String,
    UniqueConstraint,
    func,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Program(str, enum.Enum):
    """Academic tracks a candidate can apply to."""

    ENGINEERING = "ENGINEERING"
    MANAGEMENT = "MANAGEMENT"
    LICENSE = "LICENSE"


class ApplicationStatus(str, enum.Enum):
    """Status of an admission application."""

    PENDING = "PENDING"  # pre-submission
    SUBMITTED = "SUBMITTED"
    APPLICATION_ACCEPTED = "APPLICATION_ACCEPTED"
    APPLICATION_REJECTED = "APPLICATION_REJECTED"
    EXAM_REGISTERED = "EXAM_REGISTERED"
    ADMISSION_OFFERED = "ADMISSION_OFFERED"
    ADMISSION_REJECTED = "ADMISSION_REJECTED"
    STUDENT = "STUDENT"


class DocumentType(str, enum.Enum):
    """
    Required supporting documents.

    Declaration order is significant: a full bundle upload is matched to
    these types by position.
    """

    BIRTH_CERTIFICATE = "BIRTH_CERTIFICATE"
    NATIONAL_ID = "NATIONAL_ID"
    PASSPORT_PHOTO = "PASSPORT_PHOTO"
    ACADEMIC_TRANSCRIPT = "ACADEMIC_TRANSCRIPT"
    DIPLOMA = "DIPLOMA"


class Application(Base):
    """
    Candidate admission application.

    Owns its education details, family details and documents; all three
    are deleted together with the application.
    """

    __tablename__ = "applications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    matricule: Mapped[str | None] = mapped_column(String(32), nullable=True)

    # Candidate information
    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    nationality: Mapped[str | None] = mapped_column(String(100), nullable=True)
    region_of_origin: Mapped[str | None] = mapped_column(String(100), nullable=True)
    address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Contact
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone_number: Mapped[str | None] = mapped_column(String(20), nullable=True)
    whatsapp_number: Mapped[str | None] = mapped_column(String(20), nullable=True)

    program: Mapped[Program] = mapped_column(Enum(Program, name="program"), nullable=False)

    # Status tracking
    status: Mapped[ApplicationStatus] = mapped_column(
        Enum(ApplicationStatus, name="application_status"),
        nullable=False,
        default=ApplicationStatus.PENDING,
    )
    submission_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # Optimistic locking counter
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    # Audit timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        server_default=func.now(),
        onupdate=_utcnow,
        nullable=False,
    )

    # Relationships
    education_details: Mapped["EducationDetails | None"] = relationship(
        "EducationDetails",
        back_populates="application",
        uselist=False,
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    family_details: Mapped["FamilyDetails | None"] = relationship(
        "FamilyDetails",
        back_populates="application",
        uselist=False,
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    documents: Mapped[list["Document"]] = relationship(
        "Document",
        back_populates="application",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="Document.id",
    )

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        UniqueConstraint("matricule", "program", name="uq_applications_matricule_program"),
        # A finalized (student) matricule is unique across all applications
        Index(
            "uq_applications_student_matricule",
            "matricule",
            unique=True,
            postgresql_where=text("status = 'STUDENT'"),
            sqlite_where=text("status = 'STUDENT'"),
        ),
        Index("ix_applications_status", "status"),
        Index("ix_applications_matricule", "matricule"),
    )


class EducationDetails(Base):
    """Candidate education history, replaced wholesale on update."""

    __tablename__ = "education_details"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    application_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("applications.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )

    last_school_attended: Mapped[str | None] = mapped_column(String(200), nullable=True)
    highest_qualification: Mapped[str | None] = mapped_column(String(100), nullable=True)
    graduation_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    field_of_study: Mapped[str | None] = mapped_column(String(100), nullable=True)
    grade_average: Mapped[str | None] = mapped_column(String(20), nullable=True)

    application: Mapped["Application"] = relationship(
        "Application", back_populates="education_details"
    )


class FamilyDetails(Base):
    """Candidate family and guardian contacts, replaced wholesale on update."""

    __tablename__ = "family_details"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    application_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("applications.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )

    father_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    father_occupation: Mapped[str | None] = mapped_column(String(100), nullable=True)
    mother_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    mother_occupation: Mapped[str | None] = mapped_column(String(100), nullable=True)
    guardian_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    guardian_phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    guardian_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    emergency_contact: Mapped[str | None] = mapped_column(String(20), nullable=True)

    application: Mapped["Application"] = relationship(
        "Application", back_populates="family_details"
    )


class Document(Base):
    """Uploaded supporting document. Never mutated after creation."""

    __tablename__ = "application_documents"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    application_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("applications.id", ondelete="CASCADE"),
        nullable=False,
    )

    document_type: Mapped[str] = mapped_column(String(50), nullable=False)
    filename: Mapped[str | None] = mapped_column(String(255), nullable=True)
    content_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    content: Mapped[bytes] = mapped_column(LargeBinary, nullable=False, deferred=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        server_default=func.now(),
        nullable=False,
    )

    application: Mapped["Application"] = relationship("Application", back_populates="documents")

    __table_args__ = (Index("ix_application_documents_application_id", "application_id"),)
