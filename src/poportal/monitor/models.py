"""Client-side session monitor models."""

from enum import StrEnum

from pydantic import BaseModel, Field

from poportal.config import Config


class MonitorState(StrEnum):
    MONITORING = "monitoring"
    WARNING = "warning"
    EXPIRED = "expired"  # Terminal for this monitor instance


class ActivitySignal(StrEnum):
    """User interaction signals that count as activity."""

    POINTER_MOVE = "pointer_move"
    POINTER_DOWN = "pointer_down"
    KEY_PRESS = "key_press"
    SCROLL = "scroll"
    TOUCH_START = "touch_start"
    CLICK = "click"


class ExpiryReason(StrEnum):
    SERVER_REJECTED = "server_rejected"
    INACTIVITY = "inactivity"
    COUNTDOWN = "countdown"
    EXTEND_FAILED = "extend_failed"
    USER_ENDED = "user_ended"


class MonitorSettings(BaseModel):
    """Monitor timings in seconds. Extra fields from the server are ignored."""

    inactivity_timeout: float = Field(..., gt=0)
    warning_time: float = Field(..., gt=0)
    check_interval: float = Field(..., gt=0)
    tick_interval: float = Field(1.0, gt=0, description="Period of one countdown step")
    reload_delay: float = Field(2.0, ge=0, description="How long the expired notice stays before reload")

    @classmethod
    def from_config(cls, config: Config) -> "MonitorSettings":
        return cls(
            inactivity_timeout=config.inactivity_timeout,
            warning_time=config.warning_time,
            check_interval=config.check_interval,
        )
