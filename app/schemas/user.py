"""User schemas for API validation and store projections."""

from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

# bcrypt reads only the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


def normalize_email(email: str) -> str:
    """Canonical form used for storage and lookup: trimmed, lower-cased."""
    return email.strip().lower()


def check_password_bytes(password: str) -> str:
    """Reject passwords whose UTF-8 encoding is longer than bcrypt can hash."""
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return password


class UserCreate(BaseModel):
    """Schema for user registration."""
    email: EmailStr
    password: str = Field(min_length=8, max_length=MAX_PASSWORD_BYTES)

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return check_password_bytes(value)


class UserLogin(BaseModel):
    """Schema for user login."""
    email: EmailStr
    password: str = Field(min_length=1, max_length=MAX_PASSWORD_BYTES)

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return check_password_bytes(value)


class UserPublic(BaseModel):
    """Public view of a user. The only shape returned across the auth boundary."""
    id: str
    email: str

    class Config:
        from_attributes = True
        frozen = True


class UserCredentials(UserPublic):
    """Private view carrying the credential digests. Never serialized to clients."""
    password_hash: str
    refresh_token_hash: Optional[str] = None

    def public(self) -> UserPublic:
        return UserPublic(id=self.id, email=self.email)
