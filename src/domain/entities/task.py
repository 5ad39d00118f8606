"""Task and task completion domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID, uuid4


class TaskStatus(StrEnum):
    """Lifecycle status of a help request."""

    OPEN = "open"
    ACCEPTED = "accepted"
    COMPLETED = "completed"
    # Only ever set by direct database edits; no transition produces it.
    CANCELLED = "cancelled"


# The only legal forward moves. Anything else is an invalid transition.
TRANSITIONS: dict[TaskStatus, TaskStatus] = {
    TaskStatus.OPEN: TaskStatus.ACCEPTED,
    TaskStatus.ACCEPTED: TaskStatus.COMPLETED,
}


def can_transition(current: TaskStatus, target: TaskStatus) -> bool:
    """Check whether ``current -> target`` is a legal lifecycle step."""
    return TRANSITIONS.get(current) == target


class ConfirmationStatus(StrEnum):
    """Requester sign-off state of a completion record."""

    PENDING = "pending"
    APPROVED = "approved"


@dataclass
class Task:
    """Domain entity for a help request."""

    requester_id: UUID
    title: str
    credits_value: int
    id: UUID = field(default_factory=uuid4)
    description: str | None = None
    category: str | None = None
    skill_id: UUID | None = None
    provider_id: UUID | None = None
    status: TaskStatus = TaskStatus.OPEN
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)
    completed_at: datetime | None = None

    def mark_accepted(self, provider_id: UUID, at: datetime | None = None) -> None:
        """Record a successful claim by ``provider_id``."""
        self.provider_id = provider_id
        self.status = TaskStatus.ACCEPTED
        self.updated_at = at or datetime.utcnow()

    def mark_completed(self, at: datetime | None = None) -> None:
        """Record that the provider finished the work."""
        now = at or datetime.utcnow()
        self.status = TaskStatus.COMPLETED
        self.completed_at = now
        self.updated_at = now

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at


@dataclass
class TaskCompletion:
    """Bridges a completed task and its settlement in the ledger."""

    task_id: UUID
    provider_id: UUID
    requester_id: UUID
    credits_transferred: int
    id: UUID = field(default_factory=uuid4)
    confirmation_status: ConfirmationStatus = ConfirmationStatus.PENDING
    created_at: datetime = field(default_factory=datetime.utcnow)
    confirmed_at: datetime | None = None

    @property
    def is_pending(self) -> bool:
        return self.confirmation_status == ConfirmationStatus.PENDING

    def approve(self, at: datetime | None = None) -> None:
        """Mark the completion as signed off by the requester."""
        self.confirmation_status = ConfirmationStatus.APPROVED
        self.confirmed_at = at or datetime.utcnow()


@dataclass
class IncomingRequest:
    """An open task aimed at one of the viewer's skills."""

    task: Task
    requester_name: str
