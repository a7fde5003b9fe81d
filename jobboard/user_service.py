"""User service: validation and existence checks around the users repository."""

from storage.repositories import UserRepository

from .database import User
from .errors import ConflictError, NotFoundError, ValidationError
from .logger import get_logger
from .models import Role
from .schema import validate_user

logger = get_logger()


def _check(errors):
    if errors:
        raise ValidationError("; ".join(errors), errors)


class UserService:
    def __init__(self, repository: UserRepository):
        self.repo = repository

    def create_user(self, username: str, password: str, role) -> User:
        _check(validate_user(username, password, role))

        if self.repo.find_by_username(username) is not None:
            raise ConflictError("username already exists")

        user = self.repo.create(username, password, Role.parse(role))
        logger.info("User created", username=username, role=user.role.value)
        return user

    def get_user_by_id(self, user_id: str) -> User:
        if not isinstance(user_id, str) or not user_id.strip():
            raise ValidationError("user ID cannot be empty")
        user = self.repo.find_by_id(user_id)
        if user is None:
            raise NotFoundError("user not found")
        return user

    def get_user_by_username(self, username: str) -> User:
        if not isinstance(username, str) or not username.strip():
            raise ValidationError("username cannot be empty")
        user = self.repo.find_by_username(username)
        if user is None:
            raise NotFoundError("user not found")
        return user

    def update_user(self, username: str, password: str, role) -> User:
        """
        Replace the role, and the password when a non-blank one is given.

        The stored password is kept when the incoming one is blank.
        """
        _check(validate_user(username, password, role, require_password=False))

        existing = self.repo.find_by_username(username)
        if existing is None:
            raise NotFoundError("user not found")

        fields = {"username": username, "role": Role.parse(role)}
        if password and password.strip():
            fields["password"] = password

        user = self.repo.update_by_id(existing.id, fields)
        if user is None:
            # deleted between lookup and write
            raise NotFoundError("user not found")
        logger.info("User updated", username=username, password_changed="password" in fields)
        return user

    def delete_user(self, username: str) -> None:
        if not isinstance(username, str) or not username.strip():
            raise ValidationError("username cannot be empty")
        existing = self.repo.find_by_username(username)
        if existing is None:
            raise NotFoundError("user not found")
        self.repo.delete_by_id(existing.id)
        logger.info("User deleted", username=username)
