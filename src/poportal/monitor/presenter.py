from typing import Protocol

import structlog

logger = structlog.get_logger(__name__)


def format_countdown(seconds: int) -> str:
    """Render remaining seconds as m:ss."""
    minutes, remaining_seconds = divmod(max(seconds, 0), 60)
    return f"{minutes}:{remaining_seconds:02d}"


class Presenter(Protocol):
    """User-facing side of the monitor: prompts, countdown and the final reload."""

    def show_warning(self, seconds_remaining: int) -> None: ...

    def update_countdown(self, seconds_remaining: int) -> None: ...

    def hide_warning(self) -> None: ...

    def show_expired(self) -> None: ...

    def reload(self) -> None: ...


class LoggingPresenter:
    """Presenter for headless use, reports every prompt to the log."""

    def show_warning(self, seconds_remaining: int) -> None:
        logger.warning("session_expiring_soon", remaining=format_countdown(seconds_remaining))

    def update_countdown(self, seconds_remaining: int) -> None:
        logger.debug("session_countdown", remaining=format_countdown(seconds_remaining))

    def hide_warning(self) -> None:
        logger.debug("session_warning_dismissed")

    def show_expired(self) -> None:
        logger.warning("session_expired")

    def reload(self) -> None:
        logger.info("session_reload_requested")
