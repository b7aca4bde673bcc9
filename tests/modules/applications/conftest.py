"""
Fixtures for admission applications tests.
"""

from datetime import UTC, date, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.database import Base
from app.modules.applications.models import (
    Application,
    ApplicationStatus,
    EducationDetails,
    FamilyDetails,
    Program,
)
from app.modules.applications.schemas import (
    ApplicationCreate,
    CompleteApplicationCreate,
    EducationDetailsInput,
    FamilyDetailsInput,
)


class FakeUploadFile:
    """Stand-in for fastapi.UploadFile."""

    def __init__(
        self,
        filename: str,
        content: bytes = b"%PDF-1.4 test",
        content_type: str = "application/pdf",
        error: Exception | None = None,
    ):
        self.filename = filename
        self.content_type = content_type
        self._content = content
        self._error = error

    async def read(self, size: int = -1) -> bytes:
        if self._error is not None:
            raise self._error
        return self._content


@pytest.fixture
def upload_file():
    """Factory for a single fake upload."""
    return FakeUploadFile


@pytest.fixture
def make_files():
    """Factory for a list of readable fake uploads."""

    def _make(count: int) -> list[FakeUploadFile]:
        return [
            FakeUploadFile(f"upload_{i}.pdf", content=f"file {i}".encode())
            for i in range(count)
        ]

    return _make


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.commit = AsyncMock()
    db.refresh = AsyncMock()
    db.get = AsyncMock()
    db.execute = AsyncMock()
    db.flush = AsyncMock()
    db.delete = AsyncMock()
    db.add = MagicMock()
    return db


@pytest_asyncio.fixture
async def db_session():
    """Real async session on an in-memory SQLite database."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        yield session

    await engine.dispose()


@pytest.fixture
def education_input():
    return EducationDetailsInput(
        last_school_attended="Lycee Bilingue de Buea",
        highest_qualification="GCE Advanced Level",
        graduation_year=2025,
        field_of_study="Sciences",
        grade_average="B",
    )


@pytest.fixture
def family_input():
    return FamilyDetailsInput(
        father_name="Paul Ngu",
        father_occupation="Teacher",
        mother_name="Marie Ngu",
        mother_occupation="Nurse",
        emergency_contact="+237670000001",
    )


@pytest.fixture
def sample_application_create():
    """Create a sample application create request without a matricule."""
    return ApplicationCreate(
        program=Program.ENGINEERING,
        first_name="Alice",
        last_name="Ngu",
        email="alice@test.com",
        phone_number="+237670000000",
    )


@pytest.fixture
def sample_complete_create(education_input, family_input):
    """Create a sample one-shot application payload."""
    return CompleteApplicationCreate(
        program=Program.MANAGEMENT,
        first_name="Alice",
        last_name="Ngu",
        nationality="Cameroonian",
        date_of_birth=date(2006, 3, 14),
        email="alice@test.com",
        phone_number="+237670000000",
        education_details=education_input,
        family_details=family_input,
    )


@pytest.fixture
def sample_application_model():
    """Create a complete, submitted application model."""
    app = MagicMock(spec=Application)
    app.id = 7
    app.matricule = "2026ENG0007"
    app.program = Program.ENGINEERING
    app.status = ApplicationStatus.SUBMITTED
    app.first_name = "Alice"
    app.last_name = "Ngu"
    app.email = "alice@test.com"
    app.phone_number = "+237670000000"
    app.education_details = MagicMock(spec=EducationDetails)
    app.family_details = MagicMock(spec=FamilyDetails)
    app.documents = []
    app.submission_date = datetime(2026, 9, 1, tzinfo=UTC)
    return app


@pytest.fixture
def pending_application_model(sample_application_model):
    """Create an application that was started but never submitted."""
    sample_application_model.status = ApplicationStatus.PENDING
    sample_application_model.submission_date = None
    return sample_application_model


@pytest.fixture
def student_application_model(sample_application_model):
    """Create an application whose candidate is already enrolled."""
    sample_application_model.status = ApplicationStatus.STUDENT
    return sample_application_model
