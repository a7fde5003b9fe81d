"""
Database schema and connection management.

Uses SQLAlchemy; SQLite by default. One table per entity, each with a
unique index on its natural key (job url, username).
"""

import uuid
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

from sqlalchemy import JSON, Column, DateTime, Enum, Index, String, create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from .logger import get_logger
from .models import Role
from .retry import exponential_backoff

Base = declarative_base()
logger = get_logger()

# Jobs disappear this long after their last create/replace.
JOB_TTL = timedelta(hours=12, minutes=1)

# Client-supplied job fields, in storage order.
JOB_FIELDS = (
    "title",
    "company",
    "url",
    "seniority_level",
    "field",
    "updated_at",
    "employment_type",
    "published_date",
    "application_deadline",
    "compensation_tier_summary",
    "workplace_type",
    "office_location",
    "is_brazilian_friendly",
)


def new_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    """Naive UTC timestamp; SQLite drops tzinfo anyway."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Job(Base):
    """Job posting, keyed by url."""

    __tablename__ = "jobs"
    __table_args__ = (
        Index("uniq_url", "url", unique=True),
        Index("ix_jobs_expires_at", "expires_at"),
    )

    id = Column(String(32), primary_key=True, default=new_id)
    title = Column(String, nullable=False)
    company = Column(String, nullable=False)
    url = Column(String, nullable=False)
    seniority_level = Column(String, nullable=False)
    field = Column(String, nullable=False)
    updated_at = Column(String, nullable=False, default="")  # free text from the client
    employment_type = Column(String, nullable=False, default="")
    published_date = Column(String, nullable=False, default="")
    application_deadline = Column(String, nullable=False, default="")
    compensation_tier_summary = Column(String, nullable=False, default="")
    workplace_type = Column(String, nullable=False, default="")
    office_location = Column(String, nullable=False, default="")
    is_brazilian_friendly = Column(JSON, nullable=False, default=dict)
    expires_at = Column(DateTime, nullable=False)


class User(Base):
    """Account; password is stored as given."""

    __tablename__ = "users"
    __table_args__ = (Index("uniq_username", "username", unique=True),)

    id = Column(String(32), primary_key=True, default=new_id)
    username = Column(String, nullable=False)
    password = Column(String, nullable=False)
    role = Column(Enum(Role, name="user_role"), nullable=False)


class Skill(Base):
    """Skill set of one user. `skills` is a JSON list without duplicates."""

    __tablename__ = "skills"
    __table_args__ = (Index("uniq_skill_username", "username", unique=True),)

    id = Column(String(32), primary_key=True, default=new_id)
    username = Column(String, nullable=False)
    skills = Column(JSON, nullable=False, default=list)


def create_db_engine(database_url: str, timeout: float = 30) -> Engine:
    """
    Build an engine for the given URL.

    For file-backed SQLite the parent directory is created and the
    connection is shared across request threads.
    """
    url = make_url(database_url)
    connect_args = {}
    if url.get_backend_name() == "sqlite":
        connect_args = {"check_same_thread": False, "timeout": timeout}
        if url.database and url.database != ":memory:":
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(database_url, connect_args=connect_args, pool_pre_ping=True)


def ping(engine: Engine) -> None:
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))


def init_database(
    database_url: str,
    timeout: float = 30,
    retries: int = 3,
    retry_delay: float = 1.0,
) -> Engine:
    """
    Connect, verify the database answers, and create tables and indexes.

    Args:
        database_url: SQLAlchemy database URL
        timeout: Driver connect timeout in seconds
        retries: Extra ping attempts before giving up
        retry_delay: Initial backoff delay in seconds

    Returns:
        Engine bound to the database

    Raises:
        RetryError: If the database never answered
    """
    engine = create_db_engine(database_url, timeout=timeout)

    def _on_retry(attempt, exc, delay):
        logger.warning("Database ping failed, retrying",
                       attempt=attempt, delay=delay, error=str(exc))

    exponential_backoff(
        max_retries=retries,
        base_delay=retry_delay,
        exceptions=(OperationalError,),
        on_retry=_on_retry,
    )(ping)(engine)

    Base.metadata.create_all(engine)
    logger.info("Database ready", url=engine.url.render_as_string(hide_password=True))
    return engine


def get_session_factory(engine: Engine) -> sessionmaker:
    """Sessions keep loaded attributes after commit so rows can leave the session."""
    return sessionmaker(bind=engine, expire_on_commit=False)


def get_session(engine: Engine) -> Session:
    return get_session_factory(engine)()
