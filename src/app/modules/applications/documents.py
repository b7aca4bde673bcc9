"""
Document Bundle Validation

Turns uploaded files into Document records.

A full bundle must hold exactly one file per DocumentType and is matched
to types by position, in the enum's declaration order; filenames are not
consulted. Files are read before any record is built, so one unreadable
file rejects the whole bundle.
"""

import logging
from typing import Protocol

from app.modules.applications.exceptions import (
    ApplicationValidationError,
    DocumentCountMismatchError,
    DocumentReadError,
)
from app.modules.applications.models import Document, DocumentType

logger = logging.getLogger(__name__)

DOCUMENT_CATALOG: list[DocumentType] = list(DocumentType)
REQUIRED_DOCUMENT_COUNT = len(DOCUMENT_CATALOG)


class UploadedFile(Protocol):
    """The subset of ``fastapi.UploadFile`` the validator relies on."""

    filename: str | None
    content_type: str | None

    async def read(self, size: int = -1) -> bytes: ...


async def _read_all(files: list[UploadedFile]) -> list[bytes]:
    contents = []
    for file in files:
        try:
            contents.append(await file.read())
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to read uploaded document {file.filename!r}: {e}")
            raise DocumentReadError(file.filename) from e
    return contents


def _make_document(
    application_id: int | None,
    document_type: DocumentType,
    file: UploadedFile,
    content: bytes,
) -> Document:
    return Document(
        application_id=application_id,
        document_type=document_type.value,
        filename=file.filename,
        content_type=file.content_type,
        content=content,
    )


async def validate_and_build(
    application_id: int | None,
    files: list[UploadedFile],
) -> list[Document]:
    """
    Validate a complete document bundle and build its records.

    Args:
        application_id: Owning application, None when the application is
            created in the same unit of work
        files: Exactly one file per catalog entry, in catalog order

    Returns:
        One unsaved Document per file, tagged in catalog order

    Raises:
        DocumentCountMismatchError: If the bundle size differs from the catalog size
        DocumentReadError: If any file cannot be read
    """
    if len(files) != REQUIRED_DOCUMENT_COUNT:
        logger.warning(
            f"Rejected document bundle for application {application_id}: "
            f"{len(files)} files, {REQUIRED_DOCUMENT_COUNT} required"
        )
        raise DocumentCountMismatchError(REQUIRED_DOCUMENT_COUNT, len(files))

    contents = await _read_all(files)

    return [
        _make_document(application_id, document_type, file, content)
        for document_type, file, content in zip(DOCUMENT_CATALOG, files, contents, strict=True)
    ]


def parse_document_types(document_types: list[str]) -> list[DocumentType]:
    """Convert caller-supplied labels to catalog entries."""
    parsed = []
    for label in document_types:
        try:
            parsed.append(DocumentType(label))
        except ValueError as e:
            raise ApplicationValidationError(
                f"Unknown document type '{label}'. "
                f"Allowed types: {', '.join(t.value for t in DOCUMENT_CATALOG)}"
            ) from e
    return parsed


async def build_documents(
    application_id: int,
    files: list[UploadedFile],
    document_types: list[str],
) -> list[Document]:
    """
    Build records for an incremental upload with explicit types.

    No bundle-size rule applies; ``document_types[i]`` labels ``files[i]``.

    Raises:
        ApplicationValidationError: If there are no files, the lists differ
            in length, or a label is not in the catalog
        DocumentReadError: If any file cannot be read
    """
    if not files:
        raise ApplicationValidationError("At least one document is required.")
    if len(files) != len(document_types):
        raise ApplicationValidationError(
            f"Received {len(files)} files but {len(document_types)} document types."
        )

    types = parse_document_types(document_types)
    contents = await _read_all(files)

    return [
        _make_document(application_id, document_type, file, content)
        for document_type, file, content in zip(types, files, contents, strict=True)
    ]
