"""
Admission Applications Repository

Database operations for applications and the records they own.
All operations are async and follow the repository pattern for clean
separation of concerns between data access and business logic.

Design Principles:
- Single responsibility - only database operations, no business logic
- Owned records (education, family, documents) are written through the
  application so one commit persists the whole aggregate
- Status changes read the row with SELECT ... FOR UPDATE; the version
  column adds optimistic locking on top
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import undefer

from .models import (
    Application,
    ApplicationStatus,
    Document,
    EducationDetails,
    FamilyDetails,
    Program,
)
from .schemas import ApplicationCreate, EducationDetailsInput, FamilyDetailsInput


def build_application(
    data: ApplicationCreate,
    status: ApplicationStatus = ApplicationStatus.PENDING,
) -> Application:
    """Map request data onto a new, unsaved application."""
    return Application(
        matricule=data.matricule,
        program=data.program,
        status=status,
        # Candidate
        first_name=data.first_name,
        last_name=data.last_name,
        nationality=data.nationality,
        region_of_origin=data.region_of_origin,
        address=data.address,
        date_of_birth=data.date_of_birth,
        # Contact
        email=data.email,
        phone_number=data.phone_number,
        whatsapp_number=data.whatsapp_number,
    )


def build_education_details(data: EducationDetailsInput) -> EducationDetails:
    return EducationDetails(**data.model_dump())


def build_family_details(data: FamilyDetailsInput) -> FamilyDetails:
    return FamilyDetails(**data.model_dump())


async def add(db: AsyncSession, application: Application) -> Application:
    """
    Stage a new application and flush it so storage assigns its id.

    Nothing is committed; call ``save`` to finish the unit of work.
    """
    db.add(application)
    await db.flush()
    return application


async def save(db: AsyncSession, application: Application) -> Application:
    """Commit the application together with its owned records."""
    db.add(application)
    await db.commit()
    await db.refresh(application)
    return application


async def get_by_id(db: AsyncSession, id: int) -> Application | None:
    """Get application by ID."""
    return await db.get(Application, id)


async def get_by_id_for_update(db: AsyncSession, id: int) -> Application | None:
    """Get application by ID, locking the row until the transaction ends."""
    return await db.get(Application, id, with_for_update=True, populate_existing=True)


async def get_by_matricule_and_program(
    db: AsyncSession, matricule: str, program: Program
) -> Application | None:
    """Get the application a candidate filed for a given program."""
    result = await db.execute(
        select(Application).where(
            Application.matricule == matricule,
            Application.program == program,
        )
    )
    return result.scalars().first()


async def get_by_matricule(db: AsyncSession, matricule: str) -> Application | None:
    """Get the most recent application carrying a matricule."""
    result = await db.execute(
        select(Application)
        .where(Application.matricule == matricule)
        .order_by(Application.id.desc())
    )
    return result.scalars().first()


async def get_all(db: AsyncSession) -> list[Application]:
    """Get all applications, oldest first."""
    result = await db.execute(select(Application).order_by(Application.id))
    return list(result.scalars().all())


async def update_status(
    db: AsyncSession,
    application: Application,
    status: ApplicationStatus,
    **kwargs,
) -> Application:
    """
    Set the status and optional fields, then commit.

    Args:
        db: Database session
        application: Application loaded in this session
        status: New status to set
        **kwargs: Additional fields to update (e.g., matricule, submission_date)

    Returns:
        Updated Application
    """
    application.status = status

    for key, value in kwargs.items():
        if hasattr(application, key):
            setattr(application, key, value)

    return await save(db, application)


async def replace_education_details(
    db: AsyncSession,
    application: Application,
    data: EducationDetailsInput,
) -> Application:
    """Replace the application's education details wholesale."""
    if application.education_details is not None:
        # Orphan the old row and flush: application_id is unique on the child table
        application.education_details = None
        await db.flush()

    application.education_details = build_education_details(data)
    return await save(db, application)


async def replace_family_details(
    db: AsyncSession,
    application: Application,
    data: FamilyDetailsInput,
) -> Application:
    """Replace the application's family details wholesale."""
    if application.family_details is not None:
        application.family_details = None
        await db.flush()

    application.family_details = build_family_details(data)
    return await save(db, application)


async def add_documents(
    db: AsyncSession,
    application: Application,
    documents: list[Document],
) -> Application:
    """Append documents to the application."""
    application.documents.extend(documents)
    return await save(db, application)


async def get_document(
    db: AsyncSession,
    application_id: int,
    document_id: int,
) -> Document | None:
    """Get a document with its content, scoped to its owning application."""
    result = await db.execute(
        select(Document)
        .where(
            Document.id == document_id,
            Document.application_id == application_id,
        )
        .options(undefer(Document.content))
    )
    return result.scalar_one_or_none()
