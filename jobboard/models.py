"""
Wire models for the HTTP API.

JSON bodies use camelCase keys; Python attributes stay snake_case.
Every request field has a default so that missing values reach the
service-layer validation (400) instead of failing request parsing.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Role(str, Enum):
    FREE = "FREE"
    PREMIUM = "PREMIUM"

    @classmethod
    def parse(cls, value: Any) -> Optional["Role"]:
        """Return the role whose value matches exactly, or None."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value)
        except ValueError:
            return None


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class FriendlyFlag(ApiModel):
    is_friendly: bool = False
    reason: str = ""


class JobPayload(ApiModel):
    title: str = ""
    company: str = ""
    url: str = ""
    seniority_level: str = ""
    field: str = ""
    updated_at: str = ""
    employment_type: str = ""
    published_date: str = ""
    application_deadline: str = ""
    compensation_tier_summary: str = ""
    workplace_type: str = ""
    office_location: str = ""
    is_brazilian_friendly: FriendlyFlag = Field(default_factory=FriendlyFlag)

    def to_fields(self) -> Dict[str, Any]:
        """Snake-case dict as consumed by the job service."""
        return self.model_dump()


class JobOut(JobPayload):
    id: str
    expires_at: datetime


class JobUrlRequest(ApiModel):
    url: str = ""


class UserRequest(ApiModel):
    username: str = ""
    password: str = ""
    role: str = ""


class UserOut(ApiModel):
    """User as returned to clients; the password never leaves the service."""

    id: str
    username: str
    role: Role


class SkillRequest(ApiModel):
    username: str = ""
    skill: str = ""


class SkillOut(ApiModel):
    id: str
    username: str
    skills: List[str] = Field(default_factory=list)
