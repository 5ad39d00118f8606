"""Task API routes: help requests and their lifecycle."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_task_service
from api.v1.schemas.task import (
    CompletionResponse,
    IncomingRequestListResponse,
    IncomingRequestResponse,
    TaskCreate,
    TaskDetail,
    TaskDetailResponse,
    TaskListResponse,
    TaskResponse,
)
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.entities.task import Task, TaskCompletion, TaskStatus
from domain.services.task_service import TaskService

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get(
    "",
    response_model=TaskListResponse,
    summary="List my requests",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_my_tasks(
    request: Request,
    user: CurrentUser,
    service: TaskService = Depends(get_task_service),
) -> TaskListResponse:
    """Get the help requests the authenticated user created, newest first."""
    tasks = await service.get_all_for_requester(user.id)
    return TaskListResponse(
        data=[_build_task_response(t) for t in tasks],
        meta={
            "total": len(tasks),
            "open_count": len([t for t in tasks if t.status == TaskStatus.OPEN]),
        },
    )


@router.get(
    "/incoming",
    response_model=IncomingRequestListResponse,
    summary="List incoming requests",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_incoming_requests(
    request: Request,
    user: CurrentUser,
    service: TaskService = Depends(get_task_service),
) -> IncomingRequestListResponse:
    """Open, unclaimed requests linked to skills the authenticated user offers."""
    incoming = await service.get_incoming_requests(user.id)
    return IncomingRequestListResponse(
        data=[
            IncomingRequestResponse(
                **_build_task_response(item.task).model_dump(),
                requester_name=item.requester_name,
            )
            for item in incoming
        ],
        meta={"total": len(incoming)},
    )


@router.post(
    "",
    response_model=TaskDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Request help",
    responses={
        201: {"description": "Task created"},
        400: {"description": "Invalid credits or own skill"},
        404: {"description": "Linked skill not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def create_task(
    request: Request,
    body: TaskCreate,
    user: CurrentUser,
    service: TaskService = Depends(get_task_service),
) -> TaskDetailResponse:
    """Open a new help request. It starts `open` with no provider."""
    task = await service.create(
        requester_id=user.id,
        title=body.title,
        description=body.description,
        category=body.category,
        credits_value=body.credits_value,
        skill_id=body.skill_id,
    )
    return TaskDetailResponse(data=_build_task_detail(task, None))


@router.get(
    "/{task_id}",
    response_model=TaskDetailResponse,
    summary="Get a task",
    responses={404: {"description": "Task not found"}},
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_task(
    request: Request,
    task_id: UUID,
    user: CurrentUser,
    service: TaskService = Depends(get_task_service),
) -> TaskDetailResponse:
    """Get a task and, once completed, its completion record."""
    task, completion = await service.get_with_completion(task_id, user.id)
    return TaskDetailResponse(data=_build_task_detail(task, completion))


@router.post(
    "/{task_id}/accept",
    response_model=TaskDetailResponse,
    summary="Accept a task",
    responses={
        400: {"description": "Requester cannot accept their own task"},
        404: {"description": "Task not found"},
        409: {"description": "Already claimed, or not open"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def accept_task(
    request: Request,
    task_id: UUID,
    user: CurrentUser,
    service: TaskService = Depends(get_task_service),
) -> TaskDetailResponse:
    """
    Claim an open task as its provider.

    If someone else claims it first the request fails with
    `TASK_ALREADY_CLAIMED`; reload the open tasks and pick another.
    """
    task = await service.accept(task_id, user.id)
    return TaskDetailResponse(data=_build_task_detail(task, None))


@router.post(
    "/{task_id}/complete",
    response_model=TaskDetailResponse,
    summary="Mark a task complete",
    responses={
        403: {"description": "Caller is not the provider"},
        404: {"description": "Task not found"},
        409: {"description": "Task is not accepted"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def complete_task(
    request: Request,
    task_id: UUID,
    user: CurrentUser,
    service: TaskService = Depends(get_task_service),
) -> TaskDetailResponse:
    """
    Mark an accepted task as done.

    Creates a pending completion record and credits the provider with the
    task's value.
    """
    task, completion = await service.complete(task_id, user.id)
    return TaskDetailResponse(data=_build_task_detail(task, completion))


@router.post(
    "/{task_id}/confirm",
    response_model=TaskDetailResponse,
    summary="Confirm completion and transfer credits",
    responses={
        403: {"description": "Caller is not the requester"},
        404: {"description": "Task not found"},
        409: {"description": "No pending completion"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def confirm_task(
    request: Request,
    task_id: UUID,
    user: CurrentUser,
    service: TaskService = Depends(get_task_service),
) -> TaskDetailResponse:
    """Approve the provider's completion and debit the requester."""
    completion = await service.confirm(task_id, user.id)
    task = await service.get_by_id(task_id, user.id)
    return TaskDetailResponse(data=_build_task_detail(task, completion))


def _build_task_response(task: Task) -> TaskResponse:
    """Convert domain entity to response schema."""
    return TaskResponse(
        id=task.id,
        requester_id=task.requester_id,
        provider_id=task.provider_id,
        skill_id=task.skill_id,
        title=task.title,
        description=task.description,
        category=task.category,
        credits_value=task.credits_value,
        status=task.status,
        created_at=task.created_at,
        updated_at=task.updated_at,
        completed_at=task.completed_at,
    )


def _build_task_detail(task: Task, completion: TaskCompletion | None) -> TaskDetail:
    return TaskDetail(
        **_build_task_response(task).model_dump(),
        completion=CompletionResponse.model_validate(completion) if completion else None,
    )
