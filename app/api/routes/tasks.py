"""Task endpoints. Every route acts on the authenticated user's tasks only."""

from typing import List, Optional

from fastapi import APIRouter, Query, status

from app.core.dependencies import DbSession, CurrentUser
from app.models.task import TaskStatus, TaskPriority
from app.schemas.task import TaskCreate, TaskUpdate, TaskResponse, TaskDeletedResponse
from app.services.task_service import TaskService

router = APIRouter()


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(data: TaskCreate, db: DbSession, current_user: CurrentUser):
    """Create a task owned by the caller."""
    return await TaskService.create(db, current_user.user_id, data)


@router.get("", response_model=List[TaskResponse])
async def list_tasks(
    db: DbSession,
    current_user: CurrentUser,
    task_status: Optional[TaskStatus] = Query(None, alias="status"),
    priority: Optional[TaskPriority] = None,
    q: Optional[str] = Query(None, max_length=200),
):
    """
    List the caller's tasks, newest first.

    Filters by status and priority, and `q` matches title or description
    case-insensitively.
    """
    return await TaskService.list_for_user(
        db, current_user.user_id, status=task_status, priority=priority, q=q
    )


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(task_id: str, db: DbSession, current_user: CurrentUser):
    return await TaskService.get_for_user(db, current_user.user_id, task_id)


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(task_id: str, data: TaskUpdate, db: DbSession, current_user: CurrentUser):
    return await TaskService.update(db, current_user.user_id, task_id, data)


@router.delete("/{task_id}", response_model=TaskDeletedResponse)
async def delete_task(task_id: str, db: DbSession, current_user: CurrentUser):
    await TaskService.delete(db, current_user.user_id, task_id)
    return TaskDeletedResponse(deleted=True)
