"""Credit ledger domain entities.

Ledger entries are append-only. A member's balance is never stored; it is
always the sum of their entries.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID, uuid4


class TransactionType(StrEnum):
    """Direction of a ledger movement."""

    EARNED = "earned"
    SPENT = "spent"


@dataclass(frozen=True)
class CreditEntry:
    """One immutable, signed credit movement."""

    user_id: UUID
    amount: int
    transaction_type: TransactionType
    id: UUID = field(default_factory=uuid4)
    related_task_id: UUID | None = None
    description: str | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        if self.transaction_type == TransactionType.EARNED and self.amount <= 0:
            raise ValueError("earned entries must have a positive amount")
        if self.transaction_type == TransactionType.SPENT and self.amount >= 0:
            raise ValueError("spent entries must have a negative amount")

    @classmethod
    def earned(cls, user_id: UUID, credits: int, task_id: UUID, task_title: str) -> "CreditEntry":
        return cls(
            user_id=user_id,
            amount=credits,
            transaction_type=TransactionType.EARNED,
            related_task_id=task_id,
            description=f"Earned from task: {task_title}",
        )

    @classmethod
    def spent(cls, user_id: UUID, credits: int, task_id: UUID, task_title: str) -> "CreditEntry":
        return cls(
            user_id=user_id,
            amount=-credits,
            transaction_type=TransactionType.SPENT,
            related_task_id=task_id,
            description=f"Spent on task: {task_title}",
        )


def compute_balance(entries: Iterable[CreditEntry]) -> int:
    """Sum entry amounts. Order of ``entries`` does not matter."""
    return sum(entry.amount for entry in entries)
