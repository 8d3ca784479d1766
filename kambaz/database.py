from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from kambaz.config import MONGO_URL, MONGO_DB_NAME

client = AsyncIOMotorClient(MONGO_URL)
db = client[MONGO_DB_NAME]


def get_db_instance() -> AsyncIOMotorDatabase:
    """Get the shared database handle"""
    return db


async def get_db() -> AsyncIOMotorDatabase:
    """Database dependency"""
    return get_db_instance()
