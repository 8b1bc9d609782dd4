"""Session storage backends.

The session service only talks to the `SessionStore` interface, so the
in-memory store used by a single portal process can be swapped for the MongoDB
store when several instances share sessions.

Records are created once by `insert` and afterwards only changed by `touch`,
which never recreates a record that has been deleted.
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from datetime import datetime
from typing import Any

import structlog
from pymongo import ReturnDocument
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import OperationFailure

from poportal.core.modules.session.models import Session, SessionToken

logger = structlog.get_logger(__name__)

COLLECTION_NAME = "sessions"
TTL_INDEX_KEY = "last_activity_at"
INDEX_OPTIONS_CONFLICT = 85


class SessionStore(ABC):
    """Key-value storage for session records, keyed by token."""

    async def on_start(self) -> None:
        """Prepare the backend on application startup."""

    @abstractmethod
    async def get(self, token: SessionToken) -> Session | None: ...

    @abstractmethod
    async def insert(self, session: Session) -> None:
        """Store a newly issued session."""

    @abstractmethod
    async def touch(self, token: SessionToken, at: datetime) -> Session | None:
        """Move last activity forward to `at` (never backwards).

        Returns the updated record, or None if the token is no longer stored.
        """

    @abstractmethod
    async def delete(self, token: SessionToken) -> bool:
        """Remove a record. Returns False if it was already gone."""

    @abstractmethod
    def scan(self) -> AsyncIterator[Session]:
        """Iterate over all stored sessions."""


class InMemorySessionStore(SessionStore):
    """Process-local store. Every operation is a single dict operation."""

    def __init__(self) -> None:
        self._sessions: dict[SessionToken, Session] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, token: object) -> bool:
        return token in self._sessions

    async def get(self, token: SessionToken) -> Session | None:
        return self._sessions.get(token)

    async def insert(self, session: Session) -> None:
        self._sessions[session.token] = session

    async def touch(self, token: SessionToken, at: datetime) -> Session | None:
        session = self._sessions.get(token)
        if session is None:
            return None
        touched = session.touched(at)
        self._sessions[token] = touched
        return touched

    async def delete(self, token: SessionToken) -> bool:
        return self._sessions.pop(token, None) is not None

    async def scan(self) -> AsyncIterator[Session]:
        # Snapshot so records can be deleted while iterating
        for session in list(self._sessions.values()):
            yield session


class MongoSessionStore(SessionStore):
    """Sessions kept in a MongoDB collection, `_id` is the token.

    The TTL index on last_activity_at is only a backstop for sessions nobody
    sweeps; expiry decisions are always made by the session service.
    """

    def __init__(self, database: AsyncDatabase[dict[str, Any]], ttl_seconds: int) -> None:
        self._database = database
        self._collection: AsyncCollection[dict[str, Any]] = database.get_collection(COLLECTION_NAME)
        self._ttl_seconds = ttl_seconds

    async def on_start(self) -> None:
        """Create the TTL index, or retune it when the inactivity timeout changed."""
        try:
            await self._collection.create_index([(TTL_INDEX_KEY, 1)], expireAfterSeconds=self._ttl_seconds)
        except OperationFailure as e:
            if e.code != INDEX_OPTIONS_CONFLICT:
                raise
            await self._database.command(
                "collMod",
                COLLECTION_NAME,
                index={"keyPattern": {TTL_INDEX_KEY: 1}, "expireAfterSeconds": self._ttl_seconds},
            )
            logger.info("session_ttl_index_updated", expire_after_seconds=self._ttl_seconds)

    async def get(self, token: SessionToken) -> Session | None:
        document = await self._collection.find_one({"_id": token})
        if document is None:
            return None
        return self._from_mongo(document)

    async def insert(self, session: Session) -> None:
        await self._collection.insert_one(self._to_mongo(session))

    async def touch(self, token: SessionToken, at: datetime) -> Session | None:
        # No upsert: a token deleted meanwhile stays deleted
        document = await self._collection.find_one_and_update(
            {"_id": token},
            {"$max": {TTL_INDEX_KEY: at}},
            return_document=ReturnDocument.AFTER,
        )
        if document is None:
            return None
        return self._from_mongo(document)

    async def delete(self, token: SessionToken) -> bool:
        result = await self._collection.delete_one({"_id": token})
        return result.deleted_count > 0

    async def scan(self) -> AsyncIterator[Session]:
        async for document in self._collection.find():
            yield self._from_mongo(document)

    @staticmethod
    def _to_mongo(session: Session) -> dict[str, Any]:
        data = session.model_dump()
        data["_id"] = data.pop("token")  # Rename token → _id for MongoDB
        return data

    @staticmethod
    def _from_mongo(document: dict[str, Any]) -> Session:
        data = dict(document)
        data["token"] = data.pop("_id")
        return Session.model_validate(data)
