"""Task lifecycle service: create, accept, complete and confirm help requests."""

from collections.abc import Callable
from datetime import datetime
from uuid import UUID

import structlog

from core.config import settings
from core.exceptions import (
    AuthorizationError,
    ConflictError,
    SelfDealingError,
    SkillNotFoundError,
    StateError,
    TaskNotFoundError,
    ValidationError,
)
from domain.entities.credit import CreditEntry
from domain.entities.profile import FALLBACK_MEMBER_NAME
from domain.entities.task import (
    IncomingRequest,
    Task,
    TaskCompletion,
    TaskStatus,
    can_transition,
)
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.principal import require_principal
from domain.services.skill_service import parse_category

logger = structlog.get_logger()


class TaskService:
    """Service layer for the task lifecycle and its credit settlement.

    Lifecycle: ``open -> accepted -> completed``. The provider is credited
    when they mark the task complete; the requester is debited only when
    they confirm the completion.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        max_credits: int = settings.max_task_credits,
    ) -> None:
        self._uow_factory = uow_factory
        self._max_credits = max_credits

    async def create(
        self,
        requester_id: UUID | None,
        title: str,
        credits_value: int | None,
        description: str | None = None,
        category: str | None = None,
        skill_id: UUID | None = None,
    ) -> Task:
        """Open a new help request.

        If ``skill_id`` is given, the skill must exist and belong to someone
        else; the task inherits its category when none is provided.
        """
        requester_id = require_principal(requester_id)
        title = (title or "").strip()
        if not title:
            raise ValidationError("Title is required", details={"field": "title"})
        if credits_value is None or credits_value < 1:
            raise ValidationError(
                "Credits must be a positive whole number",
                details={"field": "credits_value"},
            )
        if credits_value > self._max_credits:
            raise ValidationError(
                f"A task may offer at most {self._max_credits} credits",
                details={"field": "credits_value", "max": self._max_credits},
            )

        parsed_category = parse_category(category)

        async with self._uow_factory() as uow:
            if skill_id:
                skill = await uow.skills.get(skill_id)
                if not skill:
                    raise SkillNotFoundError(str(skill_id))
                if skill.user_id == requester_id:
                    raise SelfDealingError("You cannot request help for your own skill")
                parsed_category = parsed_category or skill.category

            task = Task(
                requester_id=requester_id,
                title=title,
                description=description,
                category=parsed_category.value if parsed_category else None,
                credits_value=credits_value,
                skill_id=skill_id,
            )
            created = await uow.tasks.create(task)
            await uow.commit()

        logger.info(
            "task_created",
            task_id=str(created.id),
            requester_id=str(requester_id),
            credits_value=credits_value,
        )
        return created

    async def get_by_id(self, task_id: UUID, user_id: UUID | None) -> Task:
        """Get a task. Any authenticated member may view it."""
        require_principal(user_id)
        async with self._uow_factory() as uow:
            task = await uow.tasks.get(task_id)
            if not task:
                raise TaskNotFoundError(str(task_id))
            return task

    async def get_with_completion(
        self, task_id: UUID, user_id: UUID | None
    ) -> tuple[Task, TaskCompletion | None]:
        """Get a task together with its completion record, if one exists."""
        require_principal(user_id)
        async with self._uow_factory() as uow:
            task = await uow.tasks.get(task_id)
            if not task:
                raise TaskNotFoundError(str(task_id))
            completion = await uow.completions.get_for_task(task_id)
            return task, completion

    async def get_all_for_requester(self, user_id: UUID | None) -> list[Task]:
        """Get the caller's own requests, newest first."""
        user_id = require_principal(user_id)
        async with self._uow_factory() as uow:
            return await uow.tasks.get_all_for_requester(user_id)  # type: ignore[no-any-return]

    async def get_incoming_requests(self, user_id: UUID | None) -> list[IncomingRequest]:
        """Get unclaimed open tasks aimed at the caller's skills."""
        user_id = require_principal(user_id)
        async with self._uow_factory() as uow:
            skills = await uow.skills.get_all_for_user(user_id)
            if not skills:
                return []

            tasks = await uow.tasks.get_open_for_skills([s.id for s in skills])
            if not tasks:
                return []

            requester_ids = list({t.requester_id for t in tasks})
            profiles = await uow.profiles.get_many(requester_ids)
            names = {p.id: p.display_name for p in profiles}

            return [
                IncomingRequest(
                    task=task,
                    requester_name=names.get(task.requester_id) or FALLBACK_MEMBER_NAME,
                )
                for task in tasks
            ]

    async def accept(self, task_id: UUID, provider_id: UUID | None) -> Task:
        """Claim an open task (``open -> accepted``).

        The claim is a conditional write on the task still being open and
        unassigned, so of several concurrent claims exactly one wins. Losers
        get ConflictError.
        """
        provider_id = require_principal(provider_id)
        async with self._uow_factory() as uow:
            task = await uow.tasks.get(task_id)
            if not task:
                raise TaskNotFoundError(str(task_id))

            if task.requester_id == provider_id:
                raise SelfDealingError("You cannot accept your own request")
            if task.status == TaskStatus.ACCEPTED:
                raise ConflictError(str(task_id))
            if not can_transition(task.status, TaskStatus.ACCEPTED):
                raise StateError(str(task_id), task.status.value, "accept")

            now = datetime.utcnow()
            claimed = await uow.tasks.claim(task_id, provider_id, now)
            if not claimed:
                logger.info(
                    "task_accept_conflict",
                    task_id=str(task_id),
                    provider_id=str(provider_id),
                )
                raise ConflictError(str(task_id))

            task.mark_accepted(provider_id, now)
            await uow.commit()

        logger.info(
            "task_accepted",
            task_id=str(task_id),
            provider_id=str(provider_id),
        )
        return task

    async def complete(
        self, task_id: UUID, provider_id: UUID | None
    ) -> tuple[Task, TaskCompletion]:
        """Mark an accepted task done (``accepted -> completed``).

        In one transaction: moves the task to completed, opens a pending
        completion record and credits the provider with the task's value.
        """
        provider_id = require_principal(provider_id)
        async with self._uow_factory() as uow:
            task = await uow.tasks.get(task_id)
            if not task:
                raise TaskNotFoundError(str(task_id))

            if not can_transition(task.status, TaskStatus.COMPLETED):
                raise StateError(str(task_id), task.status.value, "complete")
            if task.provider_id != provider_id:
                raise AuthorizationError("Only the assigned provider can mark this task complete")

            now = datetime.utcnow()
            moved = await uow.tasks.transition(
                task_id,
                expected_status=TaskStatus.ACCEPTED,
                new_status=TaskStatus.COMPLETED,
                at=now,
                expected_provider_id=provider_id,
            )
            if not moved:
                raise StateError(
                    str(task_id),
                    None,
                    "complete",
                    message="The task changed while it was being completed",
                )

            completion = await uow.completions.create(
                TaskCompletion(
                    task_id=task_id,
                    provider_id=provider_id,
                    requester_id=task.requester_id,
                    credits_transferred=task.credits_value,
                    created_at=now,
                )
            )
            # TODO: add a reversal transition for completions the requester
            # never confirms; until then the provider keeps these credits.
            await uow.credits.append(
                CreditEntry.earned(provider_id, task.credits_value, task_id, task.title)
            )

            task.mark_completed(now)
            await uow.commit()

        logger.info(
            "task_completed",
            task_id=str(task_id),
            provider_id=str(provider_id),
            credits=task.credits_value,
        )
        return task, completion

    async def confirm(self, task_id: UUID, requester_id: UUID | None) -> TaskCompletion:
        """Approve a pending completion and debit the requester.

        Only the requester may confirm, and only once.
        """
        requester_id = require_principal(requester_id)
        async with self._uow_factory() as uow:
            task = await uow.tasks.get(task_id)
            if not task:
                raise TaskNotFoundError(str(task_id))

            if task.requester_id != requester_id:
                raise AuthorizationError("Only the requester can confirm this task")

            completion = await uow.completions.get_for_task(task_id)
            if task.status != TaskStatus.COMPLETED or not completion or not completion.is_pending:
                raise StateError(
                    str(task_id),
                    task.status.value,
                    "confirm",
                    message="There is no pending completion to confirm for this task",
                )

            now = datetime.utcnow()
            approved = await uow.completions.approve(task_id, now)
            if not approved:
                raise StateError(
                    str(task_id),
                    task.status.value,
                    "confirm",
                    message="This completion has already been confirmed",
                )

            await uow.credits.append(
                CreditEntry.spent(
                    requester_id, completion.credits_transferred, task_id, task.title
                )
            )

            completion.approve(now)
            await uow.commit()

        logger.info(
            "completion_confirmed",
            task_id=str(task_id),
            requester_id=str(requester_id),
            credits=completion.credits_transferred,
        )
        return completion
