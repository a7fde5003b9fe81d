"""
Tests for schema validation.
"""

import pytest
from jobboard.models import Role
from jobboard.schema import validate_job, validate_skill_request, validate_user


class TestValidateJob:
    """Test job payload validation."""

    def test_valid_job(self, valid_job):
        assert validate_job(valid_job) == []

    def test_missing_required_fields(self, invalid_job):
        errors = validate_job(invalid_job)
        for field in ("title", "url", "seniority_level", "field"):
            assert any(field in err for err in errors)
        assert not any("company" in err for err in errors)

    def test_blank_string_field(self, valid_job):
        errors = validate_job({**valid_job, "company": "   "})
        assert errors == ["Field 'company' must be a non-empty string"]

    def test_blank_url(self, valid_job):
        assert validate_job({**valid_job, "url": " "}) == ["Field 'url' must be a non-empty string"]

    def test_url_shape_is_not_checked(self, valid_job):
        valid_urls = [
            "https://boards.greenhouse.io/acme/jobs/123",
            "boards.greenhouse.io/acme/jobs/1",
            "/jobs/1",
        ]
        for url in valid_urls:
            assert validate_job({**valid_job, "url": url}) == []

    def test_optional_field_wrong_type(self, valid_job):
        errors = validate_job({**valid_job, "employment_type": 40})
        assert errors == ["Field 'employment_type' must be a string if provided"]

    def test_friendly_flag_shape(self, valid_job):
        errors = validate_job({**valid_job, "is_brazilian_friendly": {"is_friendly": "yes"}})
        assert any("is_friendly" in err for err in errors)

        errors = validate_job({**valid_job, "is_brazilian_friendly": "yes"})
        assert any("must be an object" in err for err in errors)


class TestValidateUser:

    def test_valid_user(self):
        assert validate_user("alice", "secret", "FREE") == []

    @pytest.mark.parametrize("role", ["FREE", "PREMIUM", Role.PREMIUM])
    def test_accepted_roles(self, role):
        assert validate_user("alice", "secret", role) == []

    @pytest.mark.parametrize("role", ["ADMIN", "free", "Premium", " FREE ", "", None, 1])
    def test_rejected_roles(self, role):
        assert validate_user("alice", "secret", role) == ["invalid role: must be FREE or PREMIUM"]

    def test_blank_password_allowed_on_update(self):
        assert validate_user("alice", "", "FREE", require_password=False) == []
        assert validate_user("alice", "", "FREE") == ["password cannot be empty"]

    def test_reports_every_problem(self):
        assert len(validate_user("", "", "GOLD")) == 3


class TestValidateSkillRequest:

    def test_valid(self):
        assert validate_skill_request("alice", "python") == []

    def test_missing_fields(self):
        assert validate_skill_request("", " ") == ["username is required", "skill is required"]
