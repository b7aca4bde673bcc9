"""
Unit tests for admission applications helpers module.
"""

from datetime import UTC, datetime

import pytest

from app.modules.applications.helpers import (
    DEFAULT_PROGRAM_CODE,
    generate_matricule,
    get_missing_required_fields,
    get_program_code,
)
from app.modules.applications.models import Program


class TestGetProgramCode:
    """Tests for get_program_code."""

    @pytest.mark.parametrize(
        ("program", "expected"),
        [
            (Program.ENGINEERING, "ENG"),
            (Program.MANAGEMENT, "MGT"),
            (Program.LICENSE, "LIC"),
        ],
    )
    def test_known_programs(self, program, expected):
        assert get_program_code(program) == expected

    def test_accepts_string_value(self):
        assert get_program_code(Program.MANAGEMENT.value) == "MGT"

    def test_unknown_program_falls_back_to_default(self):
        """An unrecognized program maps to the default code instead of failing."""
        assert get_program_code("ARCHITECTURE") == DEFAULT_PROGRAM_CODE

    def test_missing_program_falls_back_to_default(self):
        assert get_program_code(None) == DEFAULT_PROGRAM_CODE

    def test_every_program_has_its_own_code(self):
        codes = [get_program_code(program) for program in Program]
        assert len(set(codes)) == len(codes)
        assert DEFAULT_PROGRAM_CODE not in codes


class TestGenerateMatricule:
    """Tests for generate_matricule."""

    def test_format(self):
        assert generate_matricule(Program.ENGINEERING, 7, year=2026) == "2026ENG0007"

    def test_is_deterministic(self):
        first = generate_matricule(Program.LICENSE, 42, year=2026)
        second = generate_matricule(Program.LICENSE, 42, year=2026)
        assert first == second

    def test_distinct_sequence_numbers_give_distinct_matricules(self):
        matricules = {generate_matricule(Program.MANAGEMENT, n, year=2026) for n in range(1, 501)}
        assert len(matricules) == 500

    def test_sequence_wider_than_padding_is_kept_whole(self):
        assert generate_matricule(Program.ENGINEERING, 12345, year=2026) == "2026ENG12345"

    def test_defaults_to_current_year(self):
        year = datetime.now(UTC).year
        assert generate_matricule(Program.ENGINEERING, 1).startswith(f"{year}ENG")

    def test_unknown_program_uses_default_code(self):
        assert generate_matricule(None, 3, year=2026) == f"2026{DEFAULT_PROGRAM_CODE}0003"


class TestGetMissingRequiredFields:
    """Tests for get_missing_required_fields."""

    def test_complete_application_has_no_missing_fields(self, sample_application_model):
        assert get_missing_required_fields(sample_application_model) == []

    def test_reports_missing_sections(self, sample_application_model):
        sample_application_model.education_details = None
        sample_application_model.family_details = None

        assert get_missing_required_fields(sample_application_model) == [
            "education_details",
            "family_details",
        ]

    def test_reports_missing_candidate_fields(self, sample_application_model):
        sample_application_model.first_name = None
        sample_application_model.phone_number = None

        missing = get_missing_required_fields(sample_application_model)
        assert missing == ["first_name", "phone_number"]
