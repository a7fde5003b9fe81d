"""
Tests for the skill service - set semantics per user.
"""

import pytest

from jobboard.errors import NotFoundError, ValidationError
from jobboard.skill_service import SkillService


class TestAddSkill:

    def test_first_skill_creates_set(self, skill_service):
        assert skill_service.add_skill("alice", "python") is True

        assert skill_service.get_all_skills("alice").skills == ["python"]

    def test_adding_same_skill_is_idempotent(self, skill_service):
        skill_service.add_skill("alice", "python")

        assert skill_service.add_skill("alice", "python") is False
        assert skill_service.get_all_skills("alice").skills == ["python"]

    def test_adding_new_skill_extends_set(self, skill_service):
        skill_service.add_skill("alice", "python")
        skill_service.add_skill("alice", "docker")

        assert sorted(skill_service.get_all_skills("alice").skills) == ["docker", "python"]

    @pytest.mark.parametrize("username,skill", [("", "python"), ("alice", ""), ("", "")])
    def test_missing_fields_fail_before_database(self, untouchable_repo, username, skill):
        with pytest.raises(ValidationError, match="required"):
            SkillService(untouchable_repo).add_skill(username, skill)


class TestRemoveSkill:

    def test_remove_member(self, skill_service):
        skill_service.add_skill("alice", "python")
        skill_service.add_skill("alice", "docker")

        assert skill_service.remove_skill("alice", "python") is True
        assert skill_service.get_all_skills("alice").skills == ["docker"]

    def test_remove_non_member_is_noop(self, skill_service):
        skill_service.add_skill("alice", "python")

        assert skill_service.remove_skill("alice", "rust") is False
        assert skill_service.get_all_skills("alice").skills == ["python"]

    def test_remove_for_unknown_user_is_not_found(self, skill_service):
        with pytest.raises(NotFoundError):
            skill_service.remove_skill("ghost", "python")


class TestGetAndDelete:

    def test_unknown_user_is_not_found(self, skill_service):
        with pytest.raises(NotFoundError):
            skill_service.get_all_skills("ghost")

    def test_blank_username_is_invalid(self, untouchable_repo):
        with pytest.raises(ValidationError):
            SkillService(untouchable_repo).get_all_skills("")

    def test_delete_user_skills(self, skill_service):
        skill_service.add_skill("alice", "python")
        skill_service.add_skill("bob", "go")

        skill_service.delete_user_skills("alice")

        with pytest.raises(NotFoundError):
            skill_service.get_all_skills("alice")
        assert skill_service.get_all_skills("bob").skills == ["go"]

    def test_delete_unknown_user_is_not_found(self, skill_service):
        skill_service.add_skill("alice", "python")

        with pytest.raises(NotFoundError):
            skill_service.delete_user_skills("ghost")

        assert skill_service.get_all_skills("alice").skills == ["python"]
