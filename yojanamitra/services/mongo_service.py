"""
Scheme catalog backed by a MongoDB collection
"""
import logging
from typing import Any, Dict, List, Optional
from motor.motor_asyncio import AsyncIOMotorClient

from ..config import settings
from .catalog_service import CatalogUnavailableError

logger = logging.getLogger(__name__)


class MongoSchemeCatalog:
    """Reads scheme records from MongoDB in natural (insertion) order"""

    def __init__(self, collection=None):
        self.client: Optional[AsyncIOMotorClient] = None
        self.collection = collection

    async def connect(self):
        """Connect to MongoDB"""
        try:
            self.client = AsyncIOMotorClient(settings.mongodb_url)
            db = self.client[settings.mongodb_db_name]
            self.collection = db[settings.mongodb_collection]

            # Test connection
            await self.client.admin.command('ping')
            logger.info("Connected to MongoDB successfully")

        except Exception as e:
            logger.error(f"Failed to connect to MongoDB: {e}")
            raise

    async def close(self):
        """Close MongoDB connection"""
        if self.client:
            self.client.close()
            logger.info("MongoDB connection closed")

    async def health_check(self) -> bool:
        """Check MongoDB connection health"""
        try:
            await self.client.admin.command('ping')
            return True
        except Exception:
            return False

    async def load(self) -> List[Dict[str, Any]]:
        """Load all scheme records"""
        if self.collection is None:
            raise CatalogUnavailableError("Schemes database not connected")

        try:
            cursor = self.collection.find({}, {"_id": 0})
            records = await cursor.to_list(length=None)
        except Exception as e:
            logger.error(f"Failed to load schemes from MongoDB: {e}")
            raise CatalogUnavailableError(f"Failed to load schemes: {e}") from e

        logger.info(f"Loaded {len(records)} schemes from MongoDB")
        return records

    async def get(self, scheme_id: str) -> Optional[Dict[str, Any]]:
        """Find a scheme record by its id"""
        if self.collection is None:
            raise CatalogUnavailableError("Schemes database not connected")

        try:
            return await self.collection.find_one({"id": scheme_id}, {"_id": 0})
        except Exception as e:
            logger.error(f"Failed to get scheme {scheme_id}: {e}")
            raise CatalogUnavailableError(f"Failed to load scheme: {e}") from e
