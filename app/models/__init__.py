"""Database models."""

from app.models.user import User
from app.models.task import Task, TaskStatus, TaskPriority

__all__ = [
    "User",
    "Task",
    "TaskStatus",
    "TaskPriority",
]
