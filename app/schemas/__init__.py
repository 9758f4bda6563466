"""Pydantic schemas for API request/response validation."""

from app.schemas.auth import (
    AuthResponse,
    AuthResult,
    TokenPair,
    TokenPayload,
)
from app.schemas.task import TaskCreate, TaskUpdate, TaskResponse
from app.schemas.user import UserCreate, UserLogin, UserPublic, UserCredentials

__all__ = [
    "AuthResponse",
    "AuthResult",
    "TokenPair",
    "TokenPayload",
    "TaskCreate",
    "TaskUpdate",
    "TaskResponse",
    "UserCreate",
    "UserLogin",
    "UserPublic",
    "UserCredentials",
]
