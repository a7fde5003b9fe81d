"""
Users Repository.

Responsibilities:
- Single-row CRUD for the users table.
- Unique index on username.

Non-Responsibilities:
- No validation.
- No password handling beyond storing what it is given.

Invariant:
Repositories must not encode domain decisions.
"""

from typing import Any, Dict, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from jobboard.database import Base, User
from jobboard.errors import ConflictError
from jobboard.models import Role


class UserRepository:
    def __init__(self, sessions: sessionmaker):
        self._sessions = sessions

    def ensure_indexes(self) -> None:
        with self._sessions.begin() as session:
            Base.metadata.create_all(session.connection(), tables=[User.__table__])

    def create(self, username: str, password: str, role: Role) -> User:
        user = User(username=username, password=password, role=role)
        try:
            with self._sessions.begin() as session:
                session.add(user)
        except IntegrityError as e:
            raise ConflictError("username already exists") from e
        return user

    def find_by_id(self, user_id: str) -> Optional[User]:
        with self._sessions() as session:
            return session.get(User, user_id)

    def find_by_username(self, username: str) -> Optional[User]:
        with self._sessions() as session:
            return session.scalars(select(User).where(User.username == username)).first()

    def update_by_id(self, user_id: str, fields: Dict[str, Any]) -> Optional[User]:
        try:
            with self._sessions.begin() as session:
                user = session.get(User, user_id)
                if user is None:
                    return None
                for key in ("username", "password", "role"):
                    if key in fields:
                        setattr(user, key, fields[key])
        except IntegrityError as e:
            raise ConflictError("username already exists") from e
        return user

    def delete_by_id(self, user_id: str) -> int:
        with self._sessions.begin() as session:
            return session.execute(delete(User).where(User.id == user_id)).rowcount
