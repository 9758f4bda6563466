"""JWT issuance and verification for access/refresh token pairs."""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from app.core.config import Settings
from app.core.exceptions import InvalidToken
from app.schemas.auth import TokenPair, TokenPayload

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


class TokenService:
    """
    Signs and verifies access and refresh tokens.

    The two token kinds use separate secrets, so a leaked access secret cannot
    mint refresh tokens and vice versa. Secrets come from the settings object
    handed to the constructor and never change for the life of the instance.
    """

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        algorithm: str = "HS256",
        access_expires: timedelta = timedelta(minutes=15),
        refresh_expires: timedelta = timedelta(days=7),
    ):
        self._access_secret = access_secret
        self._refresh_secret = refresh_secret
        self.algorithm = algorithm
        self.access_expires = access_expires
        self.refresh_expires = refresh_expires

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            access_secret=settings.jwt_access_secret,
            refresh_secret=settings.jwt_refresh_secret,
            algorithm=settings.jwt_algorithm,
            access_expires=timedelta(minutes=settings.access_token_expire_minutes),
            refresh_expires=timedelta(days=settings.refresh_token_expire_days),
        )

    # ─── JWT Creation ───────────────────────────
    def _create_jwt(
        self,
        user_id: str,
        email: str,
        secret: str,
        expires_delta: timedelta,
        token_type: str,
    ) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "email": email,
            "jti": str(uuid.uuid4()),
            "iat": now,
            "exp": now + expires_delta,
            "type": token_type,
        }
        return jwt.encode(payload, secret, algorithm=self.algorithm)

    def create_access_token(self, user_id: str, email: str, expires_delta: Optional[timedelta] = None) -> str:
        return self._create_jwt(
            user_id,
            email,
            self._access_secret,
            expires_delta if expires_delta is not None else self.access_expires,
            ACCESS_TOKEN_TYPE,
        )

    def create_refresh_token(self, user_id: str, email: str, expires_delta: Optional[timedelta] = None) -> str:
        return self._create_jwt(
            user_id,
            email,
            self._refresh_secret,
            expires_delta if expires_delta is not None else self.refresh_expires,
            REFRESH_TOKEN_TYPE,
        )

    def issue_pair(self, user_id: str, email: str) -> TokenPair:
        """Sign a new access/refresh pair for the given identity."""
        return TokenPair(
            access_token=self.create_access_token(user_id, email),
            refresh_token=self.create_refresh_token(user_id, email),
        )

    # ─── Verification ───────────────────────────
    def _decode(self, token: str, secret: str, expected_type: str) -> TokenPayload:
        try:
            claims = jwt.decode(token, secret, algorithms=[self.algorithm])
        except JWTError as exc:
            raise InvalidToken() from exc

        if claims.get("type") != expected_type:
            raise InvalidToken()

        sub = claims.get("sub")
        email = claims.get("email")
        if not sub or not email:
            raise InvalidToken("Token payload is missing subject or email")

        return TokenPayload(sub=sub, email=email)

    def verify_access(self, token: str) -> TokenPayload:
        """Check signature, expiry and type against the access secret."""
        return self._decode(token, self._access_secret, ACCESS_TOKEN_TYPE)

    def verify_refresh(self, token: str) -> TokenPayload:
        """Check signature, expiry and type against the refresh secret."""
        return self._decode(token, self._refresh_secret, REFRESH_TOKEN_TYPE)
