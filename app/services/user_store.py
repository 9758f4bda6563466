"""Credential store: persistence of user identity and credential digests."""

import logging
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import DuplicateEmail
from app.models.user import User
from app.schemas.user import UserCredentials, UserPublic, normalize_email

logger = logging.getLogger(__name__)


class UserStore:
    """
    Owns all reads and writes of ``User`` rows for the auth subsystem.

    Callers choose the projection explicitly: the ``*_with_*`` methods return
    ``UserCredentials`` (digests included), everything else returns
    ``UserPublic``.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Lookups ─────────────────────────────────
    async def _get_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(
            select(User).where(User.email == normalize_email(email))
        )
        return result.scalar_one_or_none()

    async def _get_by_id(self, user_id: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def find_by_email(self, email: str) -> Optional[UserPublic]:
        user = await self._get_by_email(email)
        return UserPublic.model_validate(user) if user else None

    async def find_by_email_with_password(self, email: str) -> Optional[UserCredentials]:
        user = await self._get_by_email(email)
        return UserCredentials.model_validate(user) if user else None

    async def find_by_id(self, user_id: str) -> Optional[UserPublic]:
        user = await self._get_by_id(user_id)
        return UserPublic.model_validate(user) if user else None

    async def find_by_id_with_refresh_hash(self, user_id: str) -> Optional[UserCredentials]:
        """Return the user including its refresh token digest. Used only by refresh."""
        user = await self._get_by_id(user_id)
        return UserCredentials.model_validate(user) if user else None

    # ─── Writes ──────────────────────────────────
    async def create(self, email: str, password_hash: str) -> UserPublic:
        """
        Insert a new user.

        Raises DuplicateEmail if the unique constraint on email fires, which
        covers two registrations racing past the existence check.
        """
        user = User(email=normalize_email(email), password_hash=password_hash)
        self.db.add(user)
        try:
            await self.db.flush()
        except IntegrityError as exc:
            await self.db.rollback()
            raise DuplicateEmail() from exc
        await self.db.refresh(user)
        return UserPublic.model_validate(user)

    async def set_refresh_token_hash(self, user_id: str, refresh_token_hash: Optional[str]) -> None:
        """Overwrite the stored refresh digest. ``None`` revokes the session."""
        await self.db.execute(
            update(User)
            .where(User.id == user_id)
            .values(refresh_token_hash=refresh_token_hash)
        )
        await self.db.flush()
