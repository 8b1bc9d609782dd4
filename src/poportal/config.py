from typing import Self

from pydantic import model_validator
from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    host: str = "127.0.0.1"
    port: int = 3000
    forwarded_allow_ips: str = "127.0.0.1"  # Proxies trusted for X-Forwarded-For / X-Forwarded-Proto
    debug: bool = False
    database_url: str | None = None  # MongoDB URL for a shared session store; in-memory store when unset
    auth_username: str = "admin"
    auth_password: str | None = None
    auth_password_hash: str | None = None  # bcrypt hash, takes precedence over auth_password
    auth_realm: str = "NetSuite Data Access"
    session_cookie_name: str = "netsuite-session"
    cookie_secure: bool | None = None  # None means secure everywhere except debug mode
    # All durations are in seconds
    inactivity_timeout: int = 30 * 60
    max_session_duration: int = 8 * 60 * 60
    warning_time: int = 5 * 60  # Lead time before inactivity expiry when the client warns the user
    check_interval: int = 60  # How often the client polls the liveness endpoint
    cors_origins: list[str] = []

    model_config = {
        "env_file": [".env"],
        "env_prefix": "POPORTAL_",
        "extra": "ignore",
    }

    @model_validator(mode="after")
    def check_settings(self) -> Self:
        if not self.auth_password and not self.auth_password_hash:
            raise ValueError("auth_password or auth_password_hash must be set")
        for name in ("inactivity_timeout", "max_session_duration", "warning_time", "check_interval"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")
        if self.warning_time >= self.inactivity_timeout:
            raise ValueError("warning_time must be shorter than inactivity_timeout")
        return self

    @property
    def secure_cookies(self) -> bool:
        """Whether the session cookie is restricted to encrypted connections."""
        if self.cookie_secure is not None:
            return self.cookie_secure
        return not self.debug
