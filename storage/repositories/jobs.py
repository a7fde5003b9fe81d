"""
Jobs Repository.

Responsibilities:
- Single-row CRUD for the jobs table, keyed by url.
- Index setup (unique url, expiry).
- Expiry: rows past expires_at are purged before every operation.

Non-Responsibilities:
- No validation.
- No create-vs-update decisions.

Invariant:
Repositories must not encode domain decisions.
"""

from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from jobboard.database import JOB_FIELDS, JOB_TTL, Base, Job, utcnow
from jobboard.errors import ConflictError
from jobboard.logger import get_logger

logger = get_logger()


class JobRepository:
    def __init__(self, sessions: sessionmaker, clock: Callable[[], datetime] = utcnow):
        self._sessions = sessions
        self._clock = clock

    def ensure_indexes(self) -> None:
        with self._sessions.begin() as session:
            Base.metadata.create_all(session.connection(), tables=[Job.__table__])
        logger.debug("Job indexes ensured", indexes=["uniq_url", "ix_jobs_expires_at"])

    def _purge(self, session: Session) -> int:
        result = session.execute(delete(Job).where(Job.expires_at <= self._clock()))
        if result.rowcount:
            logger.info("Expired jobs purged", count=result.rowcount)
        return result.rowcount

    def purge_expired(self) -> int:
        """Delete every job whose expiry has passed. Returns rows removed."""
        with self._sessions.begin() as session:
            return self._purge(session)

    def count(self) -> int:
        with self._sessions() as session:
            return session.scalar(select(func.count()).select_from(Job))

    def create(self, fields: Dict[str, Any]) -> Job:
        job = Job(**{k: fields[k] for k in JOB_FIELDS if k in fields})
        job.expires_at = self._clock() + JOB_TTL
        try:
            with self._sessions.begin() as session:
                self._purge(session)
                session.add(job)
        except IntegrityError as e:
            raise ConflictError(f"job with url {job.url} already exists") from e
        return job

    def find_all(self) -> List[Job]:
        with self._sessions.begin() as session:
            self._purge(session)
            return list(session.scalars(select(Job).order_by(Job.expires_at)))

    def find_by_url(self, url: str) -> Optional[Job]:
        with self._sessions.begin() as session:
            self._purge(session)
            return session.scalars(select(Job).where(Job.url == url)).first()

    def update_by_url(self, url: str, fields: Dict[str, Any]) -> Optional[Job]:
        """Replace every client field of the job and push its expiry out again."""
        with self._sessions.begin() as session:
            self._purge(session)
            job = session.scalars(select(Job).where(Job.url == url)).first()
            if job is None:
                return None
            for key in JOB_FIELDS:
                if key in fields:
                    setattr(job, key, fields[key])
            job.expires_at = self._clock() + JOB_TTL
        return job

    def delete_by_url(self, url: str) -> int:
        with self._sessions.begin() as session:
            self._purge(session)
            result = session.execute(delete(Job).where(Job.url == url))
            return result.rowcount
