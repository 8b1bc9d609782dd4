"""Test doubles and builders shared across test modules."""

import base64
from datetime import UTC, datetime, timedelta

from poportal.config import Config

USERNAME = "admin"
PASSWORD = "secure123"


class FakeClock:
    """Wall clock that only moves when told to."""

    def __init__(self, start: datetime = datetime(2025, 1, 6, 9, 0, tzinfo=UTC)) -> None:
        self.start = start
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += timedelta(seconds=seconds)

    def set_elapsed(self, seconds: float) -> None:
        """Jump to `seconds` after the start."""
        self.current = self.start + timedelta(seconds=seconds)


class FakeMonotonic:
    """Monotonic seconds counter for the client-side monitor."""

    def __init__(self) -> None:
        self.value = 1000.0

    def __call__(self) -> float:
        return self.value

    def advance(self, seconds: float) -> None:
        self.value += seconds


def basic_header(username: str = USERNAME, password: str = PASSWORD) -> str:
    encoded = base64.b64encode(f"{username}:{password}".encode()).decode("ascii")
    return f"Basic {encoded}"


def make_config(**overrides: object) -> Config:
    values: dict[str, object] = {
        "auth_username": USERNAME,
        "auth_password": PASSWORD,
        "inactivity_timeout": 1800,
        "max_session_duration": 28800,
        "warning_time": 300,
        "check_interval": 60,
        "cookie_secure": False,
    }
    values.update(overrides)
    return Config(_env_file=None, **values)  # type: ignore[arg-type]
