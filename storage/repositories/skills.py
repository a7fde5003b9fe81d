"""
Skills Repository.

Responsibilities:
- One row per username holding that user's skill list.
- Set-style updates: add is a union, remove drops the member.

Non-Responsibilities:
- No validation.
- No existence checks beyond the row being updated.

Invariant:
Repositories must not encode domain decisions.
"""

from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from jobboard.database import Base, Skill
from jobboard.errors import ConflictError


class SkillRepository:
    def __init__(self, sessions: sessionmaker):
        self._sessions = sessions

    def ensure_indexes(self) -> None:
        with self._sessions.begin() as session:
            Base.metadata.create_all(session.connection(), tables=[Skill.__table__])

    @staticmethod
    def _load(session: Session, username: str) -> Optional[Skill]:
        return session.scalars(select(Skill).where(Skill.username == username)).first()

    def find_all(self) -> List[Skill]:
        with self._sessions() as session:
            return list(session.scalars(select(Skill).order_by(Skill.username)))

    def find_by_username(self, username: str) -> Optional[Skill]:
        with self._sessions() as session:
            return self._load(session, username)

    def create(self, username: str, skill: str) -> Skill:
        doc = Skill(username=username, skills=[skill])
        try:
            with self._sessions.begin() as session:
                session.add(doc)
        except IntegrityError as e:
            raise ConflictError(f"skills for {username} already exist") from e
        return doc

    def add_skill(self, username: str, skill: str) -> bool:
        """Union the skill into the user's set. Returns True if the set changed."""
        with self._sessions.begin() as session:
            doc = self._load(session, username)
            if doc is None or skill in doc.skills:
                return False
            # JSON columns only track reassignment
            doc.skills = list(doc.skills) + [skill]
            return True

    def remove_skill(self, username: str, skill: str) -> bool:
        """Drop the skill from the user's set. Returns True if the set changed."""
        with self._sessions.begin() as session:
            doc = self._load(session, username)
            if doc is None or skill not in doc.skills:
                return False
            doc.skills = [s for s in doc.skills if s != skill]
            return True

    def delete_by_username(self, username: str) -> int:
        with self._sessions.begin() as session:
            return session.execute(delete(Skill).where(Skill.username == username)).rowcount
