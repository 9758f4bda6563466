"""Authentication workflows: register, login, refresh-token rotation, logout."""

import logging
from typing import Optional

from starlette.concurrency import run_in_threadpool

from app.core.exceptions import DuplicateEmail, InvalidCredentials, InvalidToken
from app.core.security import PasswordHasher, password_hasher, refresh_token_hasher
from app.schemas.auth import AuthResult, TokenPair
from app.schemas.user import UserPublic
from app.services.token_service import TokenService
from app.services.user_store import UserStore

logger = logging.getLogger(__name__)


class AuthService:
    """
    Coordinates the credential store, token service and hashers.

    Each account has at most one active session, represented by the digest
    of its latest refresh token in the store. Writing a new digest silently
    invalidates any refresh token issued before it; clearing it logs out.
    No session state is held in memory between calls.
    """

    def __init__(
        self,
        store: UserStore,
        tokens: TokenService,
        passwords: PasswordHasher = password_hasher,
        refresh_hasher: PasswordHasher = refresh_token_hasher,
        persist_refresh_on_issue: bool = False,
    ):
        self.store = store
        self.tokens = tokens
        self.passwords = passwords
        self.refresh_hasher = refresh_hasher
        self.persist_refresh_on_issue = persist_refresh_on_issue

    # ─── Helpers ─────────────────────────────────
    async def _store_refresh_hash(self, user_id: str, refresh_token: str) -> None:
        digest = await run_in_threadpool(self.refresh_hasher.hash, refresh_token)
        await self.store.set_refresh_token_hash(user_id, digest)

    async def _issue(self, user: UserPublic, persist: bool) -> AuthResult:
        pair: TokenPair = self.tokens.issue_pair(user.id, user.email)
        if persist:
            await self._store_refresh_hash(user.id, pair.refresh_token)
        return AuthResult(
            user=user,
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
        )

    # ─── Registration ───────────────────────────
    async def register(self, email: str, password: str) -> AuthResult:
        if await self.store.find_by_email(email):
            raise DuplicateEmail()

        password_hash = await run_in_threadpool(self.passwords.hash, password)
        user = await self.store.create(email, password_hash)
        logger.info(f"Registered user {user.id[:8]}...")

        return await self._issue(user, persist=self.persist_refresh_on_issue)

    # ─── Login ───────────────────────────────────
    async def login(self, email: str, password: str) -> AuthResult:
        user = await self.store.find_by_email_with_password(email)

        if user is None:
            # Same hashing cost as a real comparison so timing does not reveal the miss
            await run_in_threadpool(self.passwords.dummy_verify, password)
            logger.info("Login rejected")
            raise InvalidCredentials()

        if not await run_in_threadpool(self.passwords.verify, password, user.password_hash):
            logger.info(f"Login rejected for user {user.id[:8]}...")
            raise InvalidCredentials()

        return await self._issue(user.public(), persist=self.persist_refresh_on_issue)

    # ─── Refresh (Rotation) ──────────────────────
    async def refresh(self, refresh_token: Optional[str]) -> AuthResult:
        if not refresh_token:
            raise InvalidCredentials()

        try:
            payload = self.tokens.verify_refresh(refresh_token)
        except InvalidToken as exc:
            logger.info("Refresh rejected: token failed verification")
            raise InvalidCredentials() from exc

        user = await self.store.find_by_id_with_refresh_hash(payload.sub)
        if user is None or not user.refresh_token_hash:
            logger.info(f"Refresh rejected for user {payload.sub[:8]}...: no active session")
            raise InvalidCredentials()

        matches = await run_in_threadpool(
            self.refresh_hasher.verify, refresh_token, user.refresh_token_hash
        )
        if not matches:
            logger.warning(f"Refresh rejected for user {payload.sub[:8]}...: token does not match active session")
            raise InvalidCredentials()

        # Identity comes from the verified payload, not a fresh store read
        identity = UserPublic(id=payload.sub, email=payload.email)
        return await self._issue(identity, persist=True)

    # ─── Logout ──────────────────────────────────
    async def logout(self, user_id: str) -> None:
        """Clear the stored refresh digest. Safe to call with no active session."""
        await self.store.set_refresh_token_hash(user_id, None)
        logger.info(f"Logged out user {user_id[:8]}...")
