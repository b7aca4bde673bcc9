"""
Admission Applications Router

Candidate-facing endpoints for building and submitting an application.

Endpoints:
- POST /applications - Start an application
- POST /applications/complete - Submit everything at once (multipart)
- GET /applications/document-types - Ordered document catalog
- GET /applications/matricule/{matricule} - Find an application by matricule
- GET /applications/{id} - Get an application
- PUT /applications/{id}/education - Replace education details
- PUT /applications/{id}/family - Replace family details
- POST /applications/{id}/submit - Submit for review
- POST /applications/{id}/documents - Add documents with explicit types
- GET /applications/{id}/documents/{document_id} - Download a document
"""

import logging
from typing import NoReturn

from fastapi import APIRouter, Depends, File, Form, HTTPException, Response, UploadFile, status
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.modules.applications import service
from app.modules.applications.documents import DOCUMENT_CATALOG, REQUIRED_DOCUMENT_COUNT
from app.modules.applications.schemas import (
    ApplicationCreate,
    ApplicationResponse,
    CompleteApplicationCreate,
    DocumentTypeListResponse,
    EducationDetailsInput,
    FamilyDetailsInput,
)
from app.modules.applications.service import ApplicationServiceError

logger = logging.getLogger(__name__)

router = APIRouter()


def _handle_service_error(e: ApplicationServiceError) -> NoReturn:
    """Convert service errors to HTTPExceptions."""
    raise HTTPException(
        status_code=e.status_code,
        detail={
            "error": e.error_code,
            "message": e.message,
        },
    ) from e


def _internal_error(e: Exception, action: str) -> NoReturn:
    logger.exception(f"Unexpected error {action}: {e}")
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={
            "error": "INTERNAL_ERROR",
            "message": "An unexpected error occurred. Please try again later.",
        },
    ) from e


@router.post(
    "",
    response_model=ApplicationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Start an Application",
    description="""
Start a new admission application in `PENDING` status.

Only `program` is required. When no `matricule` is supplied, one is generated
from the new application id (`YYYY` + program code + 4-digit id).

A candidate can file only one application per program for a given matricule.
""",
    responses={
        400: {"description": "Program missing"},
        409: {"description": "Already applied for this program"},
    },
)
async def initialize_application(
    data: ApplicationCreate,
    db: AsyncSession = Depends(get_db),
) -> ApplicationResponse:
    try:
        application = await service.initialize_application(db, data)
        return ApplicationResponse.model_validate(application)
    except ApplicationServiceError as e:
        logger.warning(f"Application initialization rejected: {e.message}")
        _handle_service_error(e)
    except Exception as e:
        _internal_error(e, "initializing application")


@router.post(
    "/complete",
    response_model=ApplicationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a Complete Application",
    description="""
Create and submit an application in one request.

Multipart form:
- `application`: JSON document with candidate, education and family details
- `files`: the full document bundle, one file per document type, in the order
  returned by `GET /applications/document-types`

Files are matched to document types by position, not by filename.
""",
    responses={
        400: {"description": "Bundle incomplete or unreadable"},
        409: {"description": "Already applied for this program"},
        422: {"description": "Application JSON invalid"},
    },
)
async def submit_complete_application(
    application: str = Form(...),
    files: list[UploadFile] = File(...),
    db: AsyncSession = Depends(get_db),
) -> ApplicationResponse:
    try:
        data = CompleteApplicationCreate.model_validate_json(application)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=e.errors(include_url=False, include_context=False),
        ) from e

    try:
        created = await service.submit_complete_application(db, data, files)
        return ApplicationResponse.model_validate(created)
    except ApplicationServiceError as e:
        logger.warning(f"Complete application rejected: {e.message}")
        _handle_service_error(e)
    except Exception as e:
        _internal_error(e, "submitting complete application")


@router.get(
    "/document-types",
    response_model=DocumentTypeListResponse,
    summary="List Required Document Types",
)
async def list_document_types() -> DocumentTypeListResponse:
    """Ordered catalog used to match a bundle upload to document types."""
    return DocumentTypeListResponse(
        document_types=DOCUMENT_CATALOG,
        required_count=REQUIRED_DOCUMENT_COUNT,
    )


@router.get(
    "/matricule/{matricule}",
    response_model=ApplicationResponse,
    summary="Get Application by Matricule",
    responses={404: {"description": "No application with this matricule"}},
)
async def get_application_by_matricule(
    matricule: str,
    db: AsyncSession = Depends(get_db),
) -> ApplicationResponse:
    application = await service.get_application_by_matricule(db, matricule)
    if application is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "error": "APPLICATION_NOT_FOUND",
                "message": f"No application with matricule {matricule}",
            },
        )
    return ApplicationResponse.model_validate(application)


@router.get(
    "/{application_id}",
    response_model=ApplicationResponse,
    summary="Get Application",
    responses={404: {"description": "Application not found"}},
)
async def get_application(
    application_id: int,
    db: AsyncSession = Depends(get_db),
) -> ApplicationResponse:
    try:
        application = await service.get_application_by_id(db, application_id)
        return ApplicationResponse.model_validate(application)
    except ApplicationServiceError as e:
        _handle_service_error(e)
    except Exception as e:
        _internal_error(e, "fetching application")


@router.put(
    "/{application_id}/education",
    response_model=ApplicationResponse,
    summary="Replace Education Details",
    responses={404: {"description": "Application not found"}},
)
async def update_education_details(
    application_id: int,
    data: EducationDetailsInput,
    db: AsyncSession = Depends(get_db),
) -> ApplicationResponse:
    try:
        application = await service.update_education_details(db, application_id, data)
        return ApplicationResponse.model_validate(application)
    except ApplicationServiceError as e:
        _handle_service_error(e)
    except Exception as e:
        _internal_error(e, "updating education details")


@router.put(
    "/{application_id}/family",
    response_model=ApplicationResponse,
    summary="Replace Family Details",
    responses={404: {"description": "Application not found"}},
)
async def update_family_details(
    application_id: int,
    data: FamilyDetailsInput,
    db: AsyncSession = Depends(get_db),
) -> ApplicationResponse:
    try:
        application = await service.update_family_details(db, application_id, data)
        return ApplicationResponse.model_validate(application)
    except ApplicationServiceError as e:
        _handle_service_error(e)
    except Exception as e:
        _internal_error(e, "updating family details")


@router.post(
    "/{application_id}/submit",
    response_model=ApplicationResponse,
    summary="Submit Application",
    description="""
Submit the application for review.

Requires first name, last name, email, phone number, education details and
family details. The candidate receives a confirmation email.
""",
    responses={
        404: {"description": "Application not found"},
        409: {"description": "Candidate is already a student"},
        422: {"description": "Required sections missing"},
    },
)
async def submit_application(
    application_id: int,
    db: AsyncSession = Depends(get_db),
) -> ApplicationResponse:
    try:
        application = await service.submit_application(db, application_id)
        return ApplicationResponse.model_validate(application)
    except ApplicationServiceError as e:
        logger.warning(f"Submission of application {application_id} rejected: {e.message}")
        _handle_service_error(e)
    except Exception as e:
        _internal_error(e, "submitting application")


@router.post(
    "/{application_id}/documents",
    response_model=ApplicationResponse,
    summary="Add Documents",
    description="""
Append documents to an application.

Send `files` and a parallel list of `document_types`; `document_types[i]`
labels `files[i]`. Any number of files is accepted.
""",
    responses={
        400: {"description": "Files and types don't line up, or a file is unreadable"},
        404: {"description": "Application not found"},
    },
)
async def add_documents(
    application_id: int,
    files: list[UploadFile] = File(...),
    document_types: list[str] = Form(...),
    db: AsyncSession = Depends(get_db),
) -> ApplicationResponse:
    try:
        application = await service.add_documents(db, application_id, files, document_types)
        return ApplicationResponse.model_validate(application)
    except ApplicationServiceError as e:
        logger.warning(f"Document upload for application {application_id} rejected: {e.message}")
        _handle_service_error(e)
    except Exception as e:
        _internal_error(e, "adding documents")


@router.get(
    "/{application_id}/documents/{document_id}",
    summary="Download Document",
    response_class=Response,
    responses={404: {"description": "Document not found"}},
)
async def download_document(
    application_id: int,
    document_id: int,
    db: AsyncSession = Depends(get_db),
) -> Response:
    try:
        document = await service.get_document(db, application_id, document_id)
    except ApplicationServiceError as e:
        _handle_service_error(e)

    filename = document.filename or f"{document.document_type.lower()}-{document.id}"
    return Response(
        content=document.content,
        media_type=document.content_type or "application/octet-stream",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
