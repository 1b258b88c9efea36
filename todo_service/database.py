"""Todo Service — MongoDB helpers."""

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING
from pymongo.errors import PyMongoError

from todo_service.config import MONGO_DB_NAME, MONGO_URI

logger = logging.getLogger(__name__)

TODOS = "todos"
USERS = "users"

_client: Optional[AsyncIOMotorClient] = None
_indexes_ready = False


def get_client() -> AsyncIOMotorClient:
    global _client
    if _client is None:
        _client = AsyncIOMotorClient(MONGO_URI)
    return _client


def get_db() -> AsyncIOMotorDatabase:
    return get_client()[MONGO_DB_NAME]


async def init_db(db: AsyncIOMotorDatabase) -> bool:
    """
    Create the unique indexes that back email/username uniqueness.
    A failure is logged and swallowed so the process keeps serving;
    user writes retry through ensure_indexes until this succeeds.
    """
    global _indexes_ready
    try:
        await db[USERS].create_index([("email", ASCENDING)], unique=True, name="email_unique")
        await db[USERS].create_index([("username", ASCENDING)], unique=True, name="username_unique")
    except PyMongoError as e:
        logger.error("Error connecting to MongoDB at %s: %s", MONGO_URI, e)
        _indexes_ready = False
        return False
    _indexes_ready = True
    logger.info("Connected to MongoDB (%s/%s)", MONGO_URI, db.name)
    return True


async def ensure_indexes(db: AsyncIOMotorDatabase) -> bool:
    if _indexes_ready:
        return True
    return await init_db(db)


def close_db():
    global _client, _indexes_ready
    if _client is not None:
        _client.close()
    _client = None
    _indexes_ready = False
