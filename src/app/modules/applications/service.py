"""
Admission Applications Service Layer

Business logic for candidate applications. Orchestrates repository
operations, document validation, status notifications and directory sync.

This module implements:
1. Intake:
   - Initialize an application (program required, one per matricule + program)
   - Assign a matricule from the new application id when none is supplied
   - One-shot complete submission with the full document bundle

2. Completion:
   - Replace education / family details wholesale
   - Submit once every required section is present

3. Status lifecycle:
   - Any non-terminal status may move to any status except PENDING
   - STUDENT is terminal; reaching it regenerates the matricule
   - Notification and directory sync run after the commit and never fail
     the status change

4. Documents:
   - Incremental upload with explicit document types
   - Scoped document download
"""

import logging
from datetime import UTC, datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.directory import DirectoryServiceClient
from app.modules.applications import documents as document_bundle
from app.modules.applications import repository
from app.modules.applications.documents import UploadedFile
from app.modules.applications.exceptions import (
    ApplicationNotFoundError,
    ApplicationServiceError,
    ApplicationValidationError,
    DocumentCountMismatchError,
    DocumentNotFoundError,
    DocumentReadError,
    DuplicateApplicationError,
    IncompleteApplicationError,
    TerminalStatusError,
)
from app.modules.applications.helpers import generate_matricule, get_missing_required_fields
from app.modules.applications.models import Application, ApplicationStatus, Document
from app.modules.applications.notifications import notify_status_change
from app.modules.applications.schemas import (
    ApplicationCreate,
    CompleteApplicationCreate,
    EducationDetailsInput,
    FamilyDetailsInput,
)

logger = logging.getLogger(__name__)

__all__ = [
    "ApplicationNotFoundError",
    "ApplicationServiceError",
    "ApplicationValidationError",
    "DocumentCountMismatchError",
    "DocumentNotFoundError",
    "DocumentReadError",
    "DuplicateApplicationError",
    "IncompleteApplicationError",
    "TerminalStatusError",
    "add_documents",
    "get_application_by_id",
    "get_application_by_matricule",
    "get_document",
    "initialize_application",
    "list_applications",
    "submit_application",
    "submit_complete_application",
    "update_application_status",
    "update_education_details",
    "update_family_details",
]

TERMINAL_STATUS = ApplicationStatus.STUDENT
INITIAL_STATUS = ApplicationStatus.PENDING


async def _check_duplicate(db: AsyncSession, data: ApplicationCreate) -> None:
    """
    Reject a second application for the same matricule and program.

    Without a supplied matricule there is nothing to compare: the
    generated one is derived from a fresh id.

    Raises:
        DuplicateApplicationError: If such an application already exists
    """
    if not data.matricule:
        return

    existing = await repository.get_by_matricule_and_program(db, data.matricule, data.program)
    if existing:
        logger.warning(
            f"Duplicate application attempt: matricule={data.matricule}, program={data.program}"
        )
        raise DuplicateApplicationError(data.program)


async def _persist_new_application(db: AsyncSession, application: Application) -> Application:
    """
    Insert a new application, derive its matricule from the assigned id
    when none was supplied, and commit.

    Raises:
        DuplicateApplicationError: If a concurrent request stored the same
            matricule and program first
    """
    program = application.program
    try:
        await repository.add(db, application)
        if not application.matricule:
            application.matricule = generate_matricule(application.program, application.id)
            logger.info(
                f"Assigned matricule {application.matricule} to application {application.id}"
            )
        return await repository.save(db, application)
    except IntegrityError as e:
        logger.warning(f"Concurrent duplicate application for program {program}: {e.orig}")
        await db.rollback()
        raise DuplicateApplicationError(program) from e


async def initialize_application(
    db: AsyncSession,
    data: ApplicationCreate,
) -> Application:
    """
    Start a new application in PENDING status.

    Args:
        db: Database session
        data: Candidate data; only the program is mandatory

    Returns:
        The persisted Application with its matricule

    Raises:
        ApplicationValidationError: If no program was selected
        DuplicateApplicationError: If the candidate already applied for this program
    """
    if data.program is None:
        raise ApplicationValidationError("Program selection is required")

    logger.info(f"Initializing application for program {data.program.value}")

    await _check_duplicate(db, data)

    application = repository.build_application(data, status=INITIAL_STATUS)
    application = await _persist_new_application(db, application)

    logger.info(f"Created application {application.id} ({application.matricule})")
    return application


async def submit_complete_application(
    db: AsyncSession,
    data: CompleteApplicationCreate,
    files: list[UploadedFile],
) -> Application:
    """
    Create and submit an application with all sections and documents at once.

    The application, its education and family details and the full
    document bundle are written in a single commit. The SUBMITTED email is
    sent afterwards.

    Raises:
        DuplicateApplicationError: If the candidate already applied for this program
        DocumentCountMismatchError: If the bundle is not complete
        DocumentReadError: If a file cannot be read
    """
    logger.info(f"Processing complete application for program {data.program.value}")

    await _check_duplicate(db, data)

    # Validate the bundle before touching the database
    bundle = await document_bundle.validate_and_build(None, files)

    application = repository.build_application(data, status=ApplicationStatus.SUBMITTED)
    application.submission_date = datetime.now(UTC)
    application.education_details = repository.build_education_details(data.education_details)
    application.family_details = repository.build_family_details(data.family_details)
    application.documents = bundle

    application = await _persist_new_application(db, application)

    logger.info(
        f"Application {application.id} submitted with {len(bundle)} documents "
        f"({application.matricule})"
    )

    await notify_status_change(application, ApplicationStatus.SUBMITTED)
    return application


async def get_application_by_id(
    db: AsyncSession,
    application_id: int,
) -> Application:
    """
    Get an application by ID.

    Raises:
        ApplicationNotFoundError: If the application doesn't exist
    """
    application = await repository.get_by_id(db, application_id)

    if not application:
        raise ApplicationNotFoundError(application_id)

    return application


async def get_application_by_matricule(
    db: AsyncSession,
    matricule: str,
) -> Application | None:
    """Get an application by matricule, or None."""
    return await repository.get_by_matricule(db, matricule)


async def list_applications(db: AsyncSession) -> list[Application]:
    """Get every application."""
    return await repository.get_all(db)


async def update_education_details(
    db: AsyncSession,
    application_id: int,
    details: EducationDetailsInput,
) -> Application:
    """
    Replace the education details of an application.

    Raises:
        ApplicationNotFoundError: If the application doesn't exist
    """
    application = await get_application_by_id(db, application_id)
    application = await repository.replace_education_details(db, application, details)
    logger.info(f"Updated education details for application {application_id}")
    return application


async def update_family_details(
    db: AsyncSession,
    application_id: int,
    details: FamilyDetailsInput,
) -> Application:
    """
    Replace the family details of an application.

    Raises:
        ApplicationNotFoundError: If the application doesn't exist
    """
    application = await get_application_by_id(db, application_id)
    application = await repository.replace_family_details(db, application, details)
    logger.info(f"Updated family details for application {application_id}")
    return application


async def submit_application(
    db: AsyncSession,
    application_id: int,
) -> Application:
    """
    Submit an application for review.

    Completeness is checked on every call, so an already submitted
    application can be submitted again. The submission date is only set
    the first time.

    Args:
        db: Database session
        application_id: ID of the application

    Returns:
        The SUBMITTED Application

    Raises:
        ApplicationNotFoundError: If the application doesn't exist
        TerminalStatusError: If the candidate is already a student
        IncompleteApplicationError: If a required section is missing
    """
    logger.info(f"Processing submission of application {application_id}")

    application = await repository.get_by_id_for_update(db, application_id)

    if not application:
        logger.warning(f"Application not found for submission: {application_id}")
        raise ApplicationNotFoundError(application_id)

    if application.status == TERMINAL_STATUS:
        raise TerminalStatusError()

    missing = get_missing_required_fields(application)
    if missing:
        logger.warning(f"Incomplete application {application_id}: missing {missing}")
        raise IncompleteApplicationError(missing)

    application = await repository.update_status(
        db,
        application,
        ApplicationStatus.SUBMITTED,
        submission_date=application.submission_date or datetime.now(UTC),
    )
    logger.info(f"Application {application_id} moved to SUBMITTED")

    await notify_status_change(application, ApplicationStatus.SUBMITTED)
    return application


async def _sync_directory(
    directory: DirectoryServiceClient | None,
    old_matricule: str | None,
    new_matricule: str,
) -> None:
    """Run directory sync, logging instead of raising on any failure."""
    if directory is None:
        logger.info(f"No directory client configured, matricule {new_matricule} not synced")
        return

    try:
        await directory.sync_matricule(old_matricule, new_matricule)
    except Exception as e:
        logger.error(f"Directory sync failed for matricule {new_matricule}: {e}", exc_info=True)


async def update_application_status(
    db: AsyncSession,
    application_id: int,
    new_status: ApplicationStatus,
    directory: DirectoryServiceClient | None = None,
) -> Application:
    """
    Move an application to a new status.

    Review order is not enforced: any status other than the initial one
    can be set, as long as the candidate is not already a student.
    Reaching STUDENT regenerates the matricule from program and id.

    Args:
        db: Database session
        application_id: ID of the application
        new_status: Target status
        directory: Directory client for matricule sync (optional)

    Returns:
        Updated Application

    Raises:
        ApplicationNotFoundError: If the application doesn't exist
        TerminalStatusError: If the application is already STUDENT
        ApplicationValidationError: If the target is the initial PENDING status
    """
    logger.info(f"Updating application {application_id} status to {new_status.value}")

    application = await repository.get_by_id_for_update(db, application_id)

    if not application:
        logger.warning(f"Application not found: {application_id}")
        raise ApplicationNotFoundError(application_id)

    if application.status == TERMINAL_STATUS:
        logger.warning(
            f"Rejected status change {application.status.value} -> {new_status.value} "
            f"for application {application_id}"
        )
        raise TerminalStatusError()

    if new_status == INITIAL_STATUS:
        raise ApplicationValidationError(
            f"Status cannot be set back to {INITIAL_STATUS.value}."
        )

    old_matricule = application.matricule
    updates = {}
    if new_status == TERMINAL_STATUS:
        updates["matricule"] = generate_matricule(application.program, application.id)

    application = await repository.update_status(db, application, new_status, **updates)
    logger.info(f"Application {application_id} moved to {new_status.value}")

    # Committed; nothing below may fail the status change
    await notify_status_change(application, new_status)

    if new_status == TERMINAL_STATUS:
        logger.info(
            f"Application {application_id} enrolled as {application.matricule} "
            f"(was {old_matricule})"
        )
        await _sync_directory(directory, old_matricule, application.matricule)

    return application


async def add_documents(
    db: AsyncSession,
    application_id: int,
    files: list[UploadedFile],
    document_types: list[str],
) -> Application:
    """
    Append documents with explicit types to an application.

    Raises:
        ApplicationNotFoundError: If the application doesn't exist
        ApplicationValidationError: If files and types don't line up
        DocumentReadError: If a file cannot be read
    """
    application = await get_application_by_id(db, application_id)

    new_documents = await document_bundle.build_documents(application.id, files, document_types)
    application = await repository.add_documents(db, application, new_documents)

    logger.info(f"Added {len(new_documents)} documents to application {application_id}")
    return application


async def get_document(
    db: AsyncSession,
    application_id: int,
    document_id: int,
) -> Document:
    """
    Get a document of an application, including its content.

    Raises:
        DocumentNotFoundError: If the document doesn't exist on this application
    """
    document = await repository.get_document(db, application_id, document_id)

    if not document:
        logger.warning(f"Document {document_id} not found on application {application_id}")
        raise DocumentNotFoundError(document_id)

    return document
