"""Pydantic schemas for Task API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.task import ConfirmationStatus, TaskStatus


class TaskCreate(BaseModel):
    """Schema for opening a help request."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=2000)
    category: str | None = Field(None, max_length=20)
    credits_value: int = Field(..., ge=1, description="Credits offered; 1 credit = 1 hour")
    skill_id: UUID | None = None


class TaskResponse(BaseModel):
    """Schema for Task response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "requester_id": "223e4567-e89b-12d3-a456-426614174000",
                "provider_id": None,
                "skill_id": None,
                "title": "Help moving a sofa",
                "description": "Two flights of stairs, no lift",
                "category": "other",
                "credits_value": 2,
                "status": "open",
                "created_at": "2026-01-28T10:00:00",
                "updated_at": "2026-01-28T10:00:00",
                "completed_at": None,
            }
        },
    )

    id: UUID
    requester_id: UUID
    provider_id: UUID | None
    skill_id: UUID | None
    title: str
    description: str | None
    category: str | None
    credits_value: int
    status: TaskStatus
    created_at: datetime
    updated_at: datetime
    completed_at: datetime | None


class CompletionResponse(BaseModel):
    """Schema for a task's completion record."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    task_id: UUID
    provider_id: UUID
    requester_id: UUID
    credits_transferred: int
    confirmation_status: ConfirmationStatus
    created_at: datetime
    confirmed_at: datetime | None


class TaskDetail(TaskResponse):
    """Task with its completion record, if any."""

    completion: CompletionResponse | None = None


class IncomingRequestResponse(TaskResponse):
    """Open task aimed at one of the caller's skills."""

    requester_name: str


class TaskDetailResponse(BaseModel):
    """Schema for single Task response."""

    data: TaskDetail


class TaskListResponse(BaseModel):
    """Schema for list of Tasks response."""

    data: list[TaskResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class IncomingRequestListResponse(BaseModel):
    """Schema for the incoming requests feed."""

    data: list[IncomingRequestResponse]
    meta: dict[str, Any] = Field(default_factory=dict)

