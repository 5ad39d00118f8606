"""Task repository protocol."""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from domain.entities.task import Task, TaskStatus


class ITaskRepository(Protocol):
    """Repository interface for Task entities."""

    async def get(self, id: UUID) -> Task | None:
        """Get a task by ID."""
        ...

    async def get_all_for_requester(self, requester_id: UUID) -> list[Task]:
        """Get tasks a user asked for, newest first."""
        ...

    async def get_open_for_skills(self, skill_ids: list[UUID]) -> list[Task]:
        """Get unclaimed open tasks linked to any of the given skills, newest first."""
        ...

    async def create(self, task: Task) -> Task:
        """Create a new task."""
        ...

    async def claim(self, id: UUID, provider_id: UUID, at: datetime) -> bool:
        """Set the provider and move ``open -> accepted``.

        Conditional on the task still being open with no provider. Returns
        False when no row matched (someone else won the race).
        """
        ...

    async def transition(
        self,
        id: UUID,
        expected_status: TaskStatus,
        new_status: TaskStatus,
        at: datetime,
        expected_provider_id: UUID | None = None,
    ) -> bool:
        """Compare-and-set the status. Returns False when no row matched."""
        ...
