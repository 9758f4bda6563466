"""Authentication endpoints."""

import logging

from fastapi import APIRouter, Depends, Request, Response, status

from app.core.config import get_settings
from app.core.dependencies import Auth, CurrentUser
from app.core.rate_limiter import rate_limit
from app.schemas.auth import AuthResponse, AuthResult, LogoutResponse, MeResponse
from app.schemas.user import UserCreate, UserLogin

logger = logging.getLogger(__name__)
router = APIRouter()


def set_refresh_cookie(response: Response, refresh_token: str) -> None:
    """Deliver the refresh token as an HTTP-only cookie."""
    settings = get_settings()
    response.set_cookie(
        key=settings.refresh_cookie_name,
        value=refresh_token,
        max_age=settings.refresh_cookie_max_age,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
    )


def clear_refresh_cookie(response: Response) -> None:
    """Reissue the refresh cookie with max_age=0 so the client drops it."""
    settings = get_settings()
    response.set_cookie(
        key=settings.refresh_cookie_name,
        value="",
        max_age=0,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
    )


def _respond(result: AuthResult, response: Response) -> AuthResponse:
    set_refresh_cookie(response, result.refresh_token)
    return AuthResponse(user=result.user, access_token=result.access_token)


# ─────────────────────────────────────────────
# Register
# ─────────────────────────────────────────────

@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit("auth_register"))],
)
async def register(user_data: UserCreate, response: Response, auth: Auth):
    """
    Register a new user.
    Returns the user and an access token; the refresh token is set as a cookie.
    """
    result = await auth.register(user_data.email, user_data.password)
    return _respond(result, response)


# ─────────────────────────────────────────────
# Login
# ─────────────────────────────────────────────

@router.post(
    "/login",
    response_model=AuthResponse,
    dependencies=[Depends(rate_limit("auth_login"))],
)
async def login(credentials: UserLogin, response: Response, auth: Auth):
    """Authenticate a user."""
    result = await auth.login(credentials.email, credentials.password)
    return _respond(result, response)


# ─────────────────────────────────────────────
# Refresh Token (Rotation)
# ─────────────────────────────────────────────

@router.post(
    "/refresh",
    response_model=AuthResponse,
    dependencies=[Depends(rate_limit("auth_refresh"))],
)
async def refresh_token(request: Request, response: Response, auth: Auth):
    """
    Rotate the refresh token read from the cookie and issue a new access token.
    """
    token = request.cookies.get(get_settings().refresh_cookie_name)
    result = await auth.refresh(token)
    return _respond(result, response)


# ─────────────────────────────────────────────
# Current User
# ─────────────────────────────────────────────

@router.get("/me", response_model=MeResponse)
async def get_current_user(current_user: CurrentUser):
    """Return the identity carried by the bearer access token."""
    return MeResponse(user=current_user)


# ─────────────────────────────────────────────
# Logout
# ─────────────────────────────────────────────

@router.post("/logout", response_model=LogoutResponse)
async def logout(response: Response, current_user: CurrentUser, auth: Auth):
    """Revoke the active refresh token and clear the cookie."""
    await auth.logout(current_user.user_id)
    clear_refresh_cookie(response)
    return LogoutResponse(ok=True)
