"""SQLAlchemy-backed repositories, one per entity."""

from .jobs import JobRepository
from .skills import SkillRepository
from .users import UserRepository

__all__ = ["JobRepository", "SkillRepository", "UserRepository"]
