from __future__ import annotations

import importlib
from collections.abc import AsyncGenerator, Callable
from contextlib import asynccontextmanager
from datetime import datetime
from typing import TYPE_CHECKING, Any, cast
from urllib.parse import urlparse

import structlog
from pymongo import AsyncMongoClient

from poportal.config import Config
from poportal.core.modules.session.store import InMemorySessionStore, MongoSessionStore, SessionStore
from poportal.utils import now

if TYPE_CHECKING:
    from poportal.core.modules.credential.service import CredentialService
    from poportal.core.modules.session.service import SessionService

logger = structlog.get_logger(__name__)


class Service:
    """Base class for services with direct access to the session store."""

    def __init__(self, store: SessionStore) -> None:
        self.store = store
        self._core: Core | None = None

    async def on_start(self) -> None:
        """Initialize service on application startup."""

    async def on_stop(self) -> None:
        """Cleanup service on application shutdown."""

    @property
    def core(self) -> Core:
        """Get the core application context."""
        if self._core is None:
            raise RuntimeError("Core not set for service")
        return self._core

    def set_core(self, core: Core) -> None:
        """Set the core application context."""
        self._core = core


class Services:
    """Service registry that automatically discovers and initializes services."""

    credential: CredentialService
    session: SessionService

    def __init__(self, store: SessionStore) -> None:
        """Initialize all services automatically using service configuration."""
        self._services: list[Service] = []

        # Service configuration: (attribute_name, module_path, class_name)
        # Order matters for initialization - credential checks back session creation
        service_configs = [
            ("credential", "poportal.core.modules.credential.service", "CredentialService"),
            ("session", "poportal.core.modules.session.service", "SessionService"),
        ]

        for attr_name, module_path, class_name in service_configs:
            module = importlib.import_module(module_path)
            service_class = cast(type[Service], getattr(module, class_name))
            service_instance = service_class(store)
            setattr(self, attr_name, service_instance)
            self._services.append(service_instance)

    def set_core(self, core: Core) -> None:
        """Set core reference for all services."""
        for service in self._services:
            service.set_core(core)

    async def start_all(self) -> None:
        for service in self._services:
            await service.on_start()

    async def stop_all(self) -> None:
        for service in self._services:
            await service.on_stop()


class Core:
    """Container providing config, clock, session store, and all service instances."""

    config: Config
    store: SessionStore
    services: Services
    clock: Callable[[], datetime]

    def __init__(self, config: Config, store: SessionStore | None = None, clock: Callable[[], datetime] = now) -> None:
        """Initialize core with config and a session store, and register services.

        Without an explicit store, MongoDB is used when database_url is configured,
        otherwise sessions live in process memory.
        """
        self.config = config
        self.clock = clock
        self.mongo_client: AsyncMongoClient[dict[str, Any]] | None = None
        if store is None:
            store = self._create_store(config)
        self.store = store
        self.services = Services(self.store)
        self.services.set_core(self)

    def _create_store(self, config: Config) -> SessionStore:
        if not config.database_url:
            return InMemorySessionStore()
        self.mongo_client = AsyncMongoClient(config.database_url, tz_aware=True)
        database = self.mongo_client.get_database(urlparse(config.database_url).path[1:])
        return MongoSessionStore(database, ttl_seconds=config.inactivity_timeout)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Manage application lifecycle - startup and shutdown."""
        await self.on_start()
        try:
            yield
        finally:
            await self.on_stop()

    async def on_start(self) -> None:
        await self.store.on_start()
        await self.services.start_all()
        logger.debug("core_started", store=type(self.store).__name__)

    async def on_stop(self) -> None:
        """Stop services and close the MongoDB connection if one was opened."""
        await self.services.stop_all()
        if self.mongo_client is not None:
            await self.mongo_client.aclose()
