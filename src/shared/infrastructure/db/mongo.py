import logging
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from src.config.settings import get_settings

_client: AsyncIOMotorClient | None = None

logger: logging.Logger = logging.getLogger(__name__)

def get_mongo_client() -> AsyncIOMotorClient:
    """
    Get or create the process-wide MongoDB client.
    The client pools connections, so every request shares it.
    """
    global _client
    if _client is None:
        settings = get_settings()
        logger.info(f"Connecting to MongoDB database '{settings.DB_NAME}'")
        _client = AsyncIOMotorClient(settings.MONGO_URI)
    return _client

def get_db() -> AsyncIOMotorDatabase:
    """
    Get the default database instance.
    """
    client = get_mongo_client()
    settings = get_settings()
    return client[settings.DB_NAME]

def close_mongo_client() -> None:
    global _client
    if _client is not None:
        _client.close()
        _client = None
        logger.info("MongoDB client closed")
