"""Pydantic schemas for the credit ledger API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.credit import TransactionType


class CreditEntryResponse(BaseModel):
    """Schema for one ledger entry."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    amount: int
    transaction_type: TransactionType
    related_task_id: UUID | None
    description: str | None
    created_at: datetime


class CreditStatementResponse(BaseModel):
    """A member's ledger entries, newest first."""

    data: list[CreditEntryResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class BalanceResponse(BaseModel):
    """A member's current credit balance."""

    balance: int
