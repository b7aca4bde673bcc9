"""
Admission Applications Shared Helpers

Program codes, matricule generation and the completeness check used by
the service layer.
"""

from datetime import UTC, datetime

from app.modules.applications.models import Application, Program

PROGRAM_CODES: dict[Program, str] = {
    Program.ENGINEERING: "ENG",
    Program.MANAGEMENT: "MGT",
    Program.LICENSE: "LIC",
}

DEFAULT_PROGRAM_CODE = "GEN"


def get_program_code(program: Program | str | None) -> str:
    """
    Get the short code used in matricules for a program.

    Accepts the enum or its string value. Unknown or missing programs map
    to the default code instead of failing.

    Args:
        program: The program to look up

    Returns:
        Three-letter program code
    """
    if program is None:
        return DEFAULT_PROGRAM_CODE
    try:
        program = Program(program)
    except ValueError:
        return DEFAULT_PROGRAM_CODE
    return PROGRAM_CODES.get(program, DEFAULT_PROGRAM_CODE)


def generate_matricule(
    program: Program | str | None,
    sequence_number: int,
    year: int | None = None,
) -> str:
    """
    Build a matricule: 4-digit year + program code + 4-digit sequence.

    Example: (ENGINEERING, 7, 2026) -> "2026ENG0007"

    Args:
        program: Program the candidate applied to
        sequence_number: Stable per-application number (the application id)
        year: Enrollment year, defaults to the current UTC year

    Returns:
        The matricule string
    """
    if year is None:
        year = datetime.now(UTC).year
    return f"{year:04d}{get_program_code(program)}{sequence_number:04d}"


def get_missing_required_fields(application: Application) -> list[str]:
    """
    List the sections that must be filled in before submission.

    Args:
        application: The application to check

    Returns:
        Names of missing fields, empty when the application is complete
    """
    required = {
        "first_name": application.first_name,
        "last_name": application.last_name,
        "email": application.email,
        "phone_number": application.phone_number,
        "education_details": application.education_details,
        "family_details": application.family_details,
    }
    return [name for name, value in required.items() if value is None]
