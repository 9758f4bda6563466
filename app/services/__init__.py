"""Services for business logic."""

from app.services.auth_service import AuthService
from app.services.task_service import TaskService
from app.services.token_service import TokenService
from app.services.user_store import UserStore

__all__ = ["AuthService", "TaskService", "TokenService", "UserStore"]
