"""Database connection utilities for mongopaging."""

import logging
from typing import Any, Mapping, Optional

from bson.codec_options import CodecOptions
from bson.raw_bson import RawBSONDocument
from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from ..config import get_settings


logger = logging.getLogger(__name__)

RAW_CODEC_OPTIONS = CodecOptions(document_class=RawBSONDocument)


class DatabaseExecutor:
    """Runs commands against one database and returns undecoded documents."""

    def __init__(self, database: AsyncDatabase):
        self._database = database

    async def run_command(self, command: Mapping[str, Any], **kwargs: Any) -> Mapping[str, Any]:
        """Run a database command.

        Args:
            command: Command document, command name first
            **kwargs: Passed to ``AsyncDatabase.command`` (session, comment, ...)

        Returns:
            The raw response document
        """
        return await self._database.command(command, codec_options=RAW_CODEC_OPTIONS, **kwargs)


class DatabaseManager:
    """Manages the MongoDB client."""

    def __init__(self, url: Optional[str] = None, database: Optional[str] = None):
        settings = get_settings()
        self.client: Optional[AsyncMongoClient] = None
        self._url = url or settings.mongodb_url
        self._database_name = database or settings.mongodb_database
        self._timeout_ms = settings.mongodb_timeout_ms

    async def initialize(self) -> None:
        """Create the client. Connections are opened lazily by pymongo."""
        if self.client is None:
            self.client = AsyncMongoClient(
                self._url,
                serverSelectionTimeoutMS=self._timeout_ms,
                tz_aware=True
            )
            logger.info(f"MongoDB client created for database '{self._database_name}'")

    async def close(self) -> None:
        """Close the client."""
        if self.client:
            await self.client.close()
            self.client = None

    async def get_database(self) -> AsyncDatabase:
        """Get the configured database, initializing the client if needed."""
        if self.client is None:
            await self.initialize()
        return self.client[self._database_name]

    async def get_executor(self) -> DatabaseExecutor:
        """Get a command executor bound to the configured database."""
        return DatabaseExecutor(await self.get_database())

    async def ping(self) -> None:
        """Check connectivity; raises a PyMongoError when unreachable."""
        database = await self.get_database()
        await database.command("ping")


# Global database manager instance
db_manager = DatabaseManager()


async def get_executor() -> DatabaseExecutor:
    """FastAPI dependency returning the shared command executor."""
    return await db_manager.get_executor()
