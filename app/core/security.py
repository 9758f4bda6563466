"""
Salted one-way hashing for passwords and refresh tokens.

Both use bcrypt at the same work factor. Refresh tokens go through
``bcrypt_sha256`` (SHA-256 first, then bcrypt): a JWT is longer than bcrypt's
72-byte input window and every token shares the same header prefix, so plain
bcrypt would treat two different refresh tokens as equal.
"""

from passlib.context import CryptContext

from app.core.config import get_settings

settings = get_settings()


class PasswordHasher:
    """Hash and verify secrets with a passlib CryptContext."""

    def __init__(self, context: CryptContext):
        self._context = context
        # Precomputed digest used to equalize timing when there is nothing to compare
        self._dummy_hash = context.hash("this_is_a_fake_secret_that_never_matches")

    def hash(self, plaintext: str) -> str:
        return self._context.hash(plaintext)

    def verify(self, plaintext: str, digest: str) -> bool:
        """Constant-time check of ``plaintext`` against a stored digest."""
        return self._context.verify(plaintext, digest)

    def dummy_verify(self, plaintext: str) -> bool:
        """Spend one verification's worth of work. Always returns False."""
        self._context.verify(plaintext, self._dummy_hash)
        return False


password_hasher = PasswordHasher(
    CryptContext(
        schemes=["bcrypt"],
        deprecated="auto",
        bcrypt__rounds=settings.bcrypt_rounds,
    )
)

refresh_token_hasher = PasswordHasher(
    CryptContext(
        schemes=["bcrypt_sha256"],
        deprecated="auto",
        bcrypt_sha256__rounds=settings.bcrypt_rounds,
    )
)
