"""HTTP client for the session liveness and extension endpoints."""

from types import TracebackType
from typing import Protocol, Self

import httpx
import structlog

from poportal.monitor.models import MonitorSettings

logger = structlog.get_logger(__name__)


class LivenessClient(Protocol):
    """What the monitor needs from the server. Both calls fail closed."""

    async def check(self) -> bool: ...

    async def extend(self) -> bool: ...


class SessionClient:
    """Talks to the portal's session endpoints with the browser's session cookie."""

    def __init__(
        self,
        base_url: str,
        cookies: httpx.Cookies | dict[str, str] | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(base_url=base_url, cookies=cookies, timeout=timeout, transport=transport)

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self, exc_type: type[BaseException] | None, exc: BaseException | None, tb: TracebackType | None
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def check(self) -> bool:
        """True if the server reports the session as valid."""
        try:
            response = await self._client.get("/api/session-check")
        except httpx.HTTPError as e:
            logger.warning("session_check_failed", error=str(e))
            return False
        return response.is_success

    async def extend(self) -> bool:
        """True if the server extended the session."""
        try:
            response = await self._client.post("/api/extend-session")
        except httpx.HTTPError as e:
            logger.warning("session_extend_failed", error=str(e))
            return False
        if not response.is_success:
            logger.info("session_extend_rejected", status_code=response.status_code)
        return response.is_success

    async def fetch_settings(self) -> MonitorSettings:
        """Load monitor timings from the server so both sides agree."""
        response = await self._client.get("/api/session-config")
        response.raise_for_status()
        return MonitorSettings.model_validate(response.json())
