"""Shared FastAPI dependencies: DB session, services, bearer authentication."""

from functools import lru_cache
from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.exceptions import InvalidToken
from app.db.session import get_db
from app.schemas.auth import CurrentUserInfo
from app.services.auth_service import AuthService
from app.services.token_service import TokenService
from app.services.user_store import UserStore

bearer_scheme = HTTPBearer(auto_error=False)

# Function scope: the session commits before the response is sent.
DbSession = Annotated[AsyncSession, Depends(get_db, scope="function")]


@lru_cache()
def get_token_service() -> TokenService:
    """Process-wide token service built once from settings."""
    return TokenService.from_settings(get_settings())


Tokens = Annotated[TokenService, Depends(get_token_service)]


def get_auth_service(db: DbSession, tokens: Tokens) -> AuthService:
    return AuthService(
        store=UserStore(db),
        tokens=tokens,
        persist_refresh_on_issue=get_settings().persist_refresh_on_issue,
    )


Auth = Annotated[AuthService, Depends(get_auth_service)]


async def get_current_user(
    tokens: Tokens,
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
) -> CurrentUserInfo:
    """
    Trust the access token alone: identity comes from its verified claims,
    with no store lookup.
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise InvalidToken("Not authenticated")
    payload = tokens.verify_access(credentials.credentials)
    return CurrentUserInfo(user_id=payload.sub, email=payload.email)


CurrentUser = Annotated[CurrentUserInfo, Depends(get_current_user)]
