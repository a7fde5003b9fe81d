"""
Job service: validation and create-or-update by url.

A job is identified by its url. Re-posting a job either creates it,
replaces it (which also extends its expiry), or leaves it alone when
nothing changed.
"""

from enum import Enum
from typing import Any, Dict, List

from storage.repositories import JobRepository

from .database import JOB_FIELDS, Job
from .errors import NotFoundError, ValidationError
from .logger import get_logger
from .schema import validate_job

logger = get_logger()

_STRING_DEFAULT = ""


class Outcome(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"


def normalize_job(data: Dict[str, Any]) -> Dict[str, Any]:
    """Fill absent fields with their empty defaults so stored rows compare field for field."""
    fields = {}
    for key in JOB_FIELDS:
        if key == "is_brazilian_friendly":
            friendly = data.get(key) or {}
            fields[key] = {
                "is_friendly": bool(friendly.get("is_friendly", False)),
                "reason": friendly.get("reason") or "",
            }
        else:
            value = data.get(key)
            fields[key] = _STRING_DEFAULT if value is None else value
    return fields


def diff_dict(old: Dict[str, Any], new: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    changed = {}
    keys = set(old.keys()) | set(new.keys())
    for k in keys:
        ov = old.get(k)
        nv = new.get(k)
        if ov != nv:
            changed[k] = {"old": ov, "new": nv}
    return changed


def job_fields(job: Job) -> Dict[str, Any]:
    """Client fields of a stored job; id and expiry are left out."""
    return normalize_job({key: getattr(job, key) for key in JOB_FIELDS})


class JobService:
    def __init__(self, repository: JobRepository):
        self.repo = repository

    def _validated(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        errors = validate_job(payload)
        if errors:
            raise ValidationError("invalid job: " + "; ".join(errors), errors)
        return normalize_job(payload)

    def create_or_update(self, payload: Dict[str, Any]) -> Outcome:
        """
        Upsert a job keyed by url.

        Returns:
            CREATED for a new url, UPDATED when any field differs from the
            stored job, UNCHANGED when the payload matches it exactly.

        Raises:
            ValidationError: before any database access if the payload is invalid
        """
        fields = self._validated(payload)
        url = fields["url"]

        existing = self.repo.find_by_url(url)
        if existing is None:
            job = self.repo.create(fields)
            logger.info("Job created", url=url, id=job.id, expires_at=job.expires_at)
            return Outcome.CREATED

        changed = diff_dict(job_fields(existing), fields)
        if not changed:
            logger.debug("Job unchanged", url=url)
            return Outcome.UNCHANGED

        self.repo.update_by_url(url, fields)
        logger.info("Job updated", url=url, changed=sorted(changed))
        return Outcome.UPDATED

    def find_all(self) -> List[Job]:
        return self.repo.find_all()

    def update_only_if_url_exists(self, payload: Dict[str, Any]) -> Job:
        fields = self._validated(payload)
        job = self.repo.update_by_url(fields["url"], fields)
        if job is None:
            raise NotFoundError("job not found")
        logger.info("Job replaced", url=fields["url"])
        return job

    def delete_only_if_url_exists(self, url: str) -> None:
        if not isinstance(url, str) or not url.strip():
            raise ValidationError("url is required")
        if self.repo.find_by_url(url) is None:
            raise NotFoundError("job not found")
        self.repo.delete_by_url(url)
        logger.info("Job deleted", url=url)
