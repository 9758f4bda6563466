"""Task service: ownership-scoped CRUD over a user's tasks."""

import uuid
from typing import List, Optional

from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import InvalidTaskId, TaskNotFound
from app.models.task import Task, TaskStatus, TaskPriority
from app.schemas.task import TaskCreate, TaskUpdate

# Columns that cannot be cleared by an update
NON_NULLABLE_FIELDS = {"title", "status", "priority"}


class TaskService:
    """Every query is filtered by owner; another user's task looks like a missing one."""

    @staticmethod
    def _check_id(task_id: str) -> str:
        try:
            return str(uuid.UUID(task_id))
        except (ValueError, AttributeError, TypeError) as exc:
            raise InvalidTaskId() from exc

    @staticmethod
    async def create(db: AsyncSession, user_id: str, data: TaskCreate) -> Task:
        task = Task(
            user_id=user_id,
            title=data.title,
            description=data.description,
            status=data.status or TaskStatus.TODO,
            priority=data.priority or TaskPriority.MEDIUM,
        )
        db.add(task)
        await db.flush()
        await db.refresh(task)
        return task

    @staticmethod
    async def list_for_user(
        db: AsyncSession,
        user_id: str,
        status: Optional[TaskStatus] = None,
        priority: Optional[TaskPriority] = None,
        q: Optional[str] = None,
    ) -> List[Task]:
        """List a user's tasks, newest first, with optional filters."""
        query = select(Task).where(Task.user_id == user_id)

        if status:
            query = query.where(Task.status == status)
        if priority:
            query = query.where(Task.priority == priority)
        if q:
            query = query.where(
                or_(
                    Task.title.icontains(q, autoescape=True),
                    Task.description.icontains(q, autoescape=True),
                )
            )

        result = await db.execute(query.order_by(Task.created_at.desc()))
        return list(result.scalars().all())

    @staticmethod
    async def get_for_user(db: AsyncSession, user_id: str, task_id: str) -> Task:
        task_id = TaskService._check_id(task_id)
        result = await db.execute(
            select(Task).where(Task.id == task_id, Task.user_id == user_id)
        )
        task = result.scalar_one_or_none()
        if not task:
            raise TaskNotFound()
        return task

    @staticmethod
    async def update(db: AsyncSession, user_id: str, task_id: str, data: TaskUpdate) -> Task:
        task = await TaskService.get_for_user(db, user_id, task_id)

        for field, value in data.model_dump(exclude_unset=True).items():
            if value is None and field in NON_NULLABLE_FIELDS:
                continue
            setattr(task, field, value)

        await db.flush()
        await db.refresh(task)
        return task

    @staticmethod
    async def delete(db: AsyncSession, user_id: str, task_id: str) -> None:
        task = await TaskService.get_for_user(db, user_id, task_id)
        await db.delete(task)
        await db.flush()
