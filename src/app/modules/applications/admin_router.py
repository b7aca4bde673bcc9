"""
Admission Applications Admin Router

Endpoints for the admissions office to review applications.

Endpoints:
- GET /admin/applications - List all applications
- PATCH /admin/applications/{id}/status - Move an application to a new status

Status changes:
- Any status except the initial `PENDING` can be set, in any order
- `STUDENT` is final: it assigns the definitive matricule and no later
  change is accepted
- Email and directory failures are logged and do not fail the request
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.directory import DirectoryServiceClient, get_directory_client
from app.modules.applications import service
from app.modules.applications.schemas import (
    ApplicationListResponse,
    ApplicationResponse,
    StatusUpdateRequest,
)
from app.modules.applications.service import (
    ApplicationNotFoundError,
    ApplicationServiceError,
    TerminalStatusError,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "",
    response_model=ApplicationListResponse,
    summary="List Applications",
)
async def list_applications(
    db: AsyncSession = Depends(get_db),
) -> ApplicationListResponse:
    applications = await service.list_applications(db)
    return ApplicationListResponse(
        applications=[ApplicationResponse.model_validate(app) for app in applications],
        total=len(applications),
    )


@router.patch(
    "/{application_id}/status",
    response_model=ApplicationResponse,
    summary="Update Application Status",
    description="""
Move an application to a new status.

**Effects:**
- The candidate is emailed about the new status
- On `STUDENT`, the matricule is regenerated and pushed to the candidate directory

**Restrictions:**
- No change is accepted once the candidate is a `STUDENT`
- `PENDING` cannot be set
""",
    responses={
        400: {"description": "Target status not allowed"},
        404: {"description": "Application not found"},
        409: {"description": "Candidate is already a student"},
    },
)
async def update_application_status(
    application_id: int,
    data: StatusUpdateRequest,
    db: AsyncSession = Depends(get_db),
    directory: DirectoryServiceClient | None = Depends(get_directory_client),
) -> ApplicationResponse:
    try:
        application = await service.update_application_status(
            db, application_id, data.status, directory=directory
        )

        logger.info(f"Application {application_id} status updated to {data.status.value}")

        return ApplicationResponse.model_validate(application)

    except ApplicationNotFoundError as e:
        logger.warning(f"Application not found: {application_id}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "error": e.error_code,
                "message": e.message,
            },
        ) from e
    except TerminalStatusError as e:
        logger.warning(f"Status change refused for application {application_id}: {e.message}")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "error": e.error_code,
                "message": e.message,
            },
        ) from e
    except ApplicationServiceError as e:
        raise HTTPException(
            status_code=e.status_code,
            detail={
                "error": e.error_code,
                "message": e.message,
            },
        ) from e
    except Exception as e:
        logger.exception(f"Error updating status of application {application_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "INTERNAL_ERROR",
                "message": "An unexpected error occurred.",
            },
        ) from e
