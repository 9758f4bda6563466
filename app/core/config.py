"""Application configuration settings."""

from functools import lru_cache
from typing import List

from pydantic import ValidationError, model_validator
from pydantic_settings import BaseSettings

from app.core.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "Taskboard API"
    debug: bool = True

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Database
    database_url: str = "sqlite+aiosqlite:///./taskboard.db"

    # JWT Authentication (both secrets are mandatory, no defaults)
    jwt_access_secret: str
    jwt_refresh_secret: str
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 15
    refresh_token_expire_days: int = 7

    # Hashing
    bcrypt_rounds: int = 10

    # Refresh cookie
    refresh_cookie_name: str = "refresh_token"
    cookie_secure: bool = False

    # Store the refresh token digest on register/login as well as on refresh
    persist_refresh_on_issue: bool = False

    # Rate limiting
    rate_limit_enabled: bool = True
    # Peers whose X-Forwarded-For / X-Real-IP headers are read (comma-separated)
    trusted_proxies: str = ""

    # CORS
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"

    # Security
    allowed_hosts: str = "*"

    @model_validator(mode="after")
    def _check_secrets(self) -> "Settings":
        if not self.jwt_access_secret.strip():
            raise ValueError("JWT_ACCESS_SECRET is not set")
        if not self.jwt_refresh_secret.strip():
            raise ValueError("JWT_REFRESH_SECRET is not set")
        if self.jwt_access_secret == self.jwt_refresh_secret:
            raise ValueError("JWT_ACCESS_SECRET and JWT_REFRESH_SECRET must differ")
        return self

    @property
    def refresh_cookie_max_age(self) -> int:
        """Refresh cookie lifetime in seconds."""
        return self.refresh_token_expire_days * 24 * 60 * 60

    @property
    def allowed_hosts_list(self) -> List[str]:
        """Get allowed hosts as a list."""
        return [host.strip() for host in self.allowed_hosts.split(",")]

    @property
    def trusted_proxies_list(self) -> List[str]:
        """Get trusted proxy addresses as a list."""
        return [proxy.strip() for proxy in self.trusted_proxies.split(",") if proxy.strip()]

    @property
    def cors_origins_list(self) -> List[str]:
        """Get CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        frozen = True


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Raises ConfigurationError when a mandatory value (such as a JWT signing
    secret) is missing or invalid, so the process fails at startup rather
    than on the first request.
    """
    try:
        return Settings()
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc
