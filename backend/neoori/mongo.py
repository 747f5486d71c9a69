"""MongoDB connection handle for the profile document store."""

import logging

from motor.motor_asyncio import AsyncIOMotorClient

logger = logging.getLogger(__name__)

PROFILE_COLLECTION = "user_profiles"


class MongoConnection:
    """Owns the motor client and exposes the collections the app uses.

    A pre-built client (e.g. an in-memory mock) can be passed in; otherwise one
    is created lazily from ``url``. Creating the client does not open a socket.
    """

    def __init__(self, url: str, database: str, client=None):
        self._owns_client = client is None
        self.client = client if client is not None else AsyncIOMotorClient(url, tz_aware=True)
        self.db = self.client[database]

    @property
    def profiles(self):
        return self.db[PROFILE_COLLECTION]

    async def ensure_indexes(self) -> None:
        await self.profiles.create_index("user_id", unique=True)
        logger.info("MongoDB indexes verified")

    def close(self) -> None:
        if self._owns_client:
            self.client.close()
