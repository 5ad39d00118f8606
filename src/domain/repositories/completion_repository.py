"""Task completion repository protocol."""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from domain.entities.task import TaskCompletion


class ICompletionRepository(Protocol):
    """Repository interface for TaskCompletion entities."""

    async def get_for_task(self, task_id: UUID) -> TaskCompletion | None:
        """Get the completion record of a task, if any."""
        ...

    async def create(self, completion: TaskCompletion) -> TaskCompletion:
        """Create a completion record."""
        ...

    async def approve(self, task_id: UUID, at: datetime) -> bool:
        """Move the task's completion ``pending -> approved``.

        Returns False when there was no pending completion to approve.
        """
        ...

    async def sum_approved_for_provider(self, provider_id: UUID) -> int:
        """Total credits of approved completions a user delivered."""
        ...
