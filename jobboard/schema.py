from typing import Any, Dict, List

from .models import Role

JOB_REQUIRED_FIELDS = ["title", "company", "url", "seniority_level", "field"]
JOB_OPTIONAL_FIELDS = [
    "updated_at",
    "employment_type",
    "published_date",
    "application_deadline",
    "compensation_tier_summary",
    "workplace_type",
    "office_location",
]


def _is_non_empty_str(v: Any) -> bool:
    return isinstance(v, str) and v.strip() != ""


def validate_job(data: Dict[str, Any]) -> List[str]:
    """
    Returns a list of validation error messages. Empty list means valid.
    Keys are the snake_case job fields.
    """
    errors: List[str] = []

    for f in JOB_REQUIRED_FIELDS:
        if f not in data:
            errors.append(f"Missing required field: {f}")
        elif not _is_non_empty_str(data[f]):
            errors.append(f"Field '{f}' must be a non-empty string")

    for f in JOB_OPTIONAL_FIELDS:
        if data.get(f) is not None and not isinstance(data[f], str):
            errors.append(f"Field '{f}' must be a string if provided")

    friendly = data.get("is_brazilian_friendly")
    if friendly is not None:
        if not isinstance(friendly, dict):
            errors.append("Field 'is_brazilian_friendly' must be an object")
        else:
            if not isinstance(friendly.get("is_friendly", False), bool):
                errors.append("Field 'is_brazilian_friendly.is_friendly' must be a boolean")
            if not isinstance(friendly.get("reason", ""), str):
                errors.append("Field 'is_brazilian_friendly.reason' must be a string")

    return errors


def validate_user(username: Any, password: Any, role: Any, require_password: bool = True) -> List[str]:
    """Checks for user create/update. A blank password is allowed on update."""
    errors: List[str] = []
    if not _is_non_empty_str(username):
        errors.append("username cannot be empty")
    if require_password and not _is_non_empty_str(password):
        errors.append("password cannot be empty")
    if Role.parse(role) is None:
        errors.append("invalid role: must be FREE or PREMIUM")
    return errors


def validate_skill_request(username: Any, skill: Any) -> List[str]:
    errors: List[str] = []
    if not _is_non_empty_str(username):
        errors.append("username is required")
    if not _is_non_empty_str(skill):
        errors.append("skill is required")
    return errors
