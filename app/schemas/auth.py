"""Token and authentication response schemas."""

from pydantic import BaseModel, Field

from app.schemas.user import UserPublic


class TokenPair(BaseModel):
    """Freshly signed access/refresh tokens. Never persisted."""
    access_token: str
    refresh_token: str


class TokenPayload(BaseModel):
    """Verified claims carried by both token kinds."""
    sub: str
    email: str


class AuthResult(BaseModel):
    """Outcome of register/login/refresh: identity plus a new token pair."""
    user: UserPublic
    access_token: str
    refresh_token: str


class AuthResponse(BaseModel):
    """Body returned by register/login/refresh. The refresh token travels in a cookie."""
    user: UserPublic
    access_token: str = Field(alias="accessToken")

    class Config:
        populate_by_name = True


class CurrentUserInfo(BaseModel):
    """Identity derived from a verified access token."""
    user_id: str = Field(alias="userId")
    email: str

    class Config:
        populate_by_name = True


class MeResponse(BaseModel):
    user: CurrentUserInfo


class LogoutResponse(BaseModel):
    ok: bool = True
