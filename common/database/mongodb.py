"""
MongoDB connection manager.

Opens one Motor client per process and checks that the server answers before the
app starts serving. Services work with raw Motor collections through ``db``.

Example:
    from common.database import MongoDB

    main_db = MongoDB()
    await main_db.connect(
        uri="mongodb://localhost:27017",
        database_name="campus_connect",
        max_pool_size=10,
    )
    messages = main_db.db["messages"]
"""

from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from common.logger import get_logger

logger = get_logger(__name__)


def mask_uri(uri: str) -> str:
    """Drop the credentials part of a connection string for logging."""
    if "@" not in uri:
        return uri
    scheme, _, rest = uri.partition("://")
    return f"{scheme}://{rest.rsplit('@', 1)[-1]}"


class MongoDB:
    """Owns the Motor client and the selected database."""

    def __init__(self):
        self._client: Optional[AsyncIOMotorClient] = None
        self._database_name: Optional[str] = None
        self._connected: bool = False

    async def connect(
        self,
        uri: str,
        database_name: str,
        max_pool_size: int = 10,
        server_selection_timeout_ms: int = 5000,
        socket_timeout_ms: int = 45000,
    ) -> None:
        """
        Connect and ping the server.

        Args:
            uri: MongoDB connection string
            database_name: Name of the database to use
            max_pool_size: Connection pool size
            server_selection_timeout_ms: Fail fast when no server is reachable
            socket_timeout_ms: Close idle sockets after this long

        Raises:
            Any driver error; the app must not start without its database.
        """
        logger.info("Connecting to MongoDB", meta={"uri": mask_uri(uri), "database": database_name})

        try:
            self._client = AsyncIOMotorClient(
                uri,
                maxPoolSize=max_pool_size,
                serverSelectionTimeoutMS=server_selection_timeout_ms,
                socketTimeoutMS=socket_timeout_ms,
                tz_aware=True,
            )
            self._database_name = database_name

            await self._client.admin.command("ping")
            self._connected = True
            logger.success(f"MongoDB connected: {database_name}")
        except Exception as e:
            logger.error("MongoDB connection failed", meta={"error": str(e)})
            self._client = None
            self._database_name = None
            raise

    async def disconnect(self) -> None:
        """Close the client; safe to call when never connected."""
        if self._client is None:
            return

        logger.info(f"Closing MongoDB connection: {self._database_name}")
        self._client.close()
        self._client = None
        self._database_name = None
        self._connected = False

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def db(self) -> AsyncIOMotorDatabase:
        """The selected Motor database."""
        if self._client is None or self._database_name is None:
            raise RuntimeError("Database not connected")
        return self._client[self._database_name]
