"""Skill service: per-user skill sets."""

from storage.repositories import SkillRepository

from .database import Skill
from .errors import ConflictError, NotFoundError, ValidationError
from .logger import get_logger
from .schema import validate_skill_request

logger = get_logger()


class SkillService:
    def __init__(self, repository: SkillRepository):
        self.repo = repository

    def _require_username(self, username: str) -> None:
        if not isinstance(username, str) or not username.strip():
            raise ValidationError("username is required")

    def _require_request(self, username: str, skill: str) -> None:
        errors = validate_skill_request(username, skill)
        if errors:
            raise ValidationError("username and skill are required", errors)

    def get_all_skills(self, username: str) -> Skill:
        self._require_username(username)
        doc = self.repo.find_by_username(username)
        if doc is None:
            raise NotFoundError("user not found")
        return doc

    def add_skill(self, username: str, skill: str) -> bool:
        """Add a skill, creating the user's set on first use. Returns True if it changed."""
        self._require_request(username, skill)

        if self.repo.find_by_username(username) is None:
            try:
                self.repo.create(username, skill)
                logger.info("Skill set created", username=username, skill=skill)
                return True
            except ConflictError:
                # another request created the set first
                pass

        changed = self.repo.add_skill(username, skill)
        logger.info("Skill added", username=username, skill=skill, changed=changed)
        return changed

    def remove_skill(self, username: str, skill: str) -> bool:
        self._require_request(username, skill)
        if self.repo.find_by_username(username) is None:
            raise NotFoundError("user not found")
        changed = self.repo.remove_skill(username, skill)
        logger.info("Skill removed", username=username, skill=skill, changed=changed)
        return changed

    def delete_user_skills(self, username: str) -> None:
        self._require_username(username)
        if self.repo.find_by_username(username) is None:
            raise NotFoundError("user not found")
        self.repo.delete_by_username(username)
        logger.info("Skill set deleted", username=username)
