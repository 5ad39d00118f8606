"""Unit tests for Skill service layer."""

from uuid import UUID, uuid4

import pytest

from core.exceptions import AuthorizationError, SkillNotFoundError, ValidationError
from domain.entities.profile import FALLBACK_MEMBER_NAME, Profile
from domain.entities.skill import Skill, SkillCategory
from domain.services.skill_service import SkillService, parse_category
from tests.unit.conftest import FakeUnitOfWork


@pytest.fixture
def service(uow: FakeUnitOfWork) -> SkillService:
    return SkillService(lambda: uow, search_limit=20)


class TestParseCategory:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("teaching", SkillCategory.TEACHING),
            ("  Repairs ", SkillCategory.REPAIRS),
            ("CAREGIVING", SkillCategory.CAREGIVING),
            (None, None),
            ("", None),
        ],
    )
    def test_parses_known_values(self, raw: str | None, expected: SkillCategory | None) -> None:
        assert parse_category(raw) == expected

    def test_rejects_unknown_value(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            parse_category("astrology")

        assert exc_info.value.details["field"] == "category"


class TestSkillServiceCreate:
    @pytest.mark.asyncio
    async def test_creates_skill(
        self, service: SkillService, uow: FakeUnitOfWork, user_id: UUID
    ) -> None:
        uow.skills.create.side_effect = lambda skill: skill

        result = await service.create(user_id, "  Bike repair ", category="repairs")

        assert result.name == "Bike repair"
        assert result.category == SkillCategory.REPAIRS
        assert result.user_id == user_id
        assert uow.committed

    @pytest.mark.asyncio
    async def test_defaults_to_other(
        self, service: SkillService, uow: FakeUnitOfWork, user_id: UUID
    ) -> None:
        uow.skills.create.side_effect = lambda skill: skill

        result = await service.create(user_id, "Knitting")

        assert result.category == SkillCategory.OTHER

    @pytest.mark.asyncio
    async def test_rejects_blank_name(
        self, service: SkillService, uow: FakeUnitOfWork, user_id: UUID
    ) -> None:
        with pytest.raises(ValidationError):
            await service.create(user_id, " ")

        uow.skills.create.assert_not_called()


class TestSkillServiceSearch:
    @pytest.mark.asyncio
    async def test_passes_filters_and_limit(
        self, service: SkillService, uow: FakeUnitOfWork, user_id: UUID
    ) -> None:
        uow.skills.search.return_value = []

        await service.search(term=" guitar ", category="Teaching", exclude_user_id=user_id)

        uow.skills.search.assert_called_once_with(
            term="guitar",
            category="teaching",
            exclude_user_id=user_id,
            limit=20,
        )

    @pytest.mark.asyncio
    async def test_resolves_owner_names_in_one_lookup(
        self, service: SkillService, uow: FakeUnitOfWork, user_id: UUID
    ) -> None:
        nameless_owner = uuid4()
        skills = [
            Skill(user_id=user_id, name="Baking"),
            Skill(user_id=user_id, name="Bread making"),
            Skill(user_id=nameless_owner, name="Cake decorating"),
        ]
        uow.skills.search.return_value = skills
        uow.profiles.get_many.return_value = [
            Profile(id=user_id, display_name="Bea Baker"),
            Profile(id=nameless_owner),
        ]

        result = await service.search(term="b")

        uow.profiles.get_many.assert_called_once()
        assert set(uow.profiles.get_many.call_args.args[0]) == {user_id, nameless_owner}
        assert [item.skill for item in result] == skills
        assert [item.owner_name for item in result] == [
            "Bea Baker",
            "Bea Baker",
            FALLBACK_MEMBER_NAME,
        ]

    @pytest.mark.asyncio
    async def test_no_results_skip_owner_lookup(
        self, service: SkillService, uow: FakeUnitOfWork
    ) -> None:
        uow.skills.search.return_value = []

        assert await service.search(term="nothing") == []
        uow.profiles.get_many.assert_not_called()

    @pytest.mark.asyncio
    async def test_blank_term_matches_everything(
        self, service: SkillService, uow: FakeUnitOfWork
    ) -> None:
        uow.skills.search.return_value = []

        await service.search(term="   ")

        assert uow.skills.search.call_args.kwargs["term"] is None


class TestSkillServiceDelete:
    @pytest.mark.asyncio
    async def test_owner_can_delete(
        self, service: SkillService, uow: FakeUnitOfWork, user_id: UUID
    ) -> None:
        skill = Skill(user_id=user_id, name="Baking")
        uow.skills.get.return_value = skill
        uow.skills.delete.return_value = True

        assert await service.delete(skill.id, user_id) is True
        assert uow.committed

    @pytest.mark.asyncio
    async def test_other_user_cannot_delete(
        self, service: SkillService, uow: FakeUnitOfWork, user_id: UUID
    ) -> None:
        skill = Skill(user_id=user_id, name="Baking")
        uow.skills.get.return_value = skill

        with pytest.raises(AuthorizationError):
            await service.delete(skill.id, uuid4())

        uow.skills.delete.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_skill(self, service: SkillService, uow: FakeUnitOfWork) -> None:
        uow.skills.get.return_value = None

        with pytest.raises(SkillNotFoundError):
            await service.delete(uuid4(), uuid4())
