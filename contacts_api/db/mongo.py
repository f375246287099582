import logging
from typing import Optional

from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo import ASCENDING
from pymongo.errors import PyMongoError

from contacts_api.core.config import Settings

logger = logging.getLogger(__name__)


class MongoStore:
    """Process-wide MongoDB client shared by every request.

    The motor client keeps its own connection pool, so handlers borrow a
    connection per operation and never open or close the client themselves.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.client: Optional[AsyncIOMotorClient] = None

    def connect(self) -> None:
        self.client = AsyncIOMotorClient(self.settings.mongo_uri)
        logger.info(
            "MongoDB client created for %s.%s",
            self.settings.db_name,
            self.settings.collection,
        )

    def close(self) -> None:
        if self.client is not None:
            self.client.close()
            self.client = None
            logger.info("MongoDB client closed")

    def get_contacts_collection(self) -> AsyncIOMotorCollection:
        if self.client is None:
            raise RuntimeError("MongoDB client is not connected")
        db = self.client[self.settings.db_name]
        return db[self.settings.collection]

    async def ensure_indexes(self) -> None:
        if not self.settings.ensure_unique_index:
            return
        try:
            await self.get_contacts_collection().create_index(
                [("contact_name", ASCENDING)], unique=True, name="contact_name_unique"
            )
        except PyMongoError as e:
            # Existing duplicates or an unreachable server; the handlers'
            # read-before-write check still guards new inserts
            logger.warning("Could not create unique index on contact_name: %s", e)
            return
        logger.info("Unique index on contact_name ensured")


def get_contacts_collection(request: Request) -> AsyncIOMotorCollection:
    # FastAPI dependency; tests override it with an in-memory collection
    store: MongoStore = request.app.state.store
    return store.get_contacts_collection()
