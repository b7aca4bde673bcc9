"""
Admission Applications Errors

Every error raised by the lifecycle and the document validator carries a
machine-readable code and the HTTP status the routers answer with.
"""

from app.modules.applications.models import ApplicationStatus, Program


class ApplicationServiceError(Exception):
    """Base exception for application service errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class ApplicationValidationError(ApplicationServiceError):
    """Raised when required input is missing or malformed."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            status_code=400,
        )


class DuplicateApplicationError(ApplicationServiceError):
    """Raised when the candidate already applied for the same program."""

    def __init__(self, program: Program):
        self.program = program
        super().__init__(
            message=f"You have already applied for the {program.value} program.",
            error_code="DUPLICATE_APPLICATION",
            status_code=409,
        )


class ApplicationNotFoundError(ApplicationServiceError):
    """Raised when an application is not found."""

    def __init__(self, application_id: int | None = None):
        message = (
            f"Application {application_id} not found"
            if application_id is not None
            else "Application not found"
        )
        super().__init__(
            message=message,
            error_code="APPLICATION_NOT_FOUND",
            status_code=404,
        )


class DocumentNotFoundError(ApplicationServiceError):
    """Raised when a document is not found on the given application."""

    def __init__(self, document_id: int):
        super().__init__(
            message=f"Document {document_id} not found",
            error_code="DOCUMENT_NOT_FOUND",
            status_code=404,
        )


class IncompleteApplicationError(ApplicationServiceError):
    """Raised when submitting before all required sections are filled in."""

    def __init__(self, missing_fields: list[str]):
        self.missing_fields = missing_fields
        super().__init__(
            message="All details must be completed before submitting the application. "
            f"Missing: {', '.join(missing_fields)}",
            error_code="INCOMPLETE_APPLICATION",
            status_code=422,
        )


class TerminalStatusError(ApplicationServiceError):
    """Raised when changing the status of an application that reached STUDENT."""

    def __init__(self):
        super().__init__(
            message="Status cannot be updated once the candidate is a student.",
            error_code="STATUS_LOCKED",
            status_code=409,
        )
        self.current_status = ApplicationStatus.STUDENT


class DocumentCountMismatchError(ApplicationServiceError):
    """Raised when a document bundle does not hold exactly one file per type."""

    def __init__(self, required: int, received: int):
        self.required = required
        self.received = received
        super().__init__(
            message=f"You must upload all required documents ({required} files). "
            f"Received {received}.",
            error_code="DOCUMENT_COUNT_MISMATCH",
            status_code=400,
        )


class DocumentReadError(ApplicationServiceError):
    """Raised when an uploaded file cannot be read."""

    def __init__(self, filename: str | None):
        self.filename = filename
        super().__init__(
            message=f"Failed to process document: {filename or '<unnamed>'}",
            error_code="DOCUMENT_READ_FAILED",
            status_code=400,
        )
