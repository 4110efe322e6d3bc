import logging
from typing import Optional, Dict, Any
from pymongo import MongoClient, ASCENDING, DESCENDING
from pymongo.database import Database
from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError, OperationFailure
from pymongo.server_api import ServerApi
import time

from .core.config import settings

# Configure logging
logger = logging.getLogger(__name__)

class DatabaseManager:
    """Manages MongoDB database connections with connection pooling and retry logic"""

    def __init__(self):
        self.client: Optional[MongoClient] = None
        self.database: Optional[Database] = None
        self._connection_attempts = 0
        self._max_retries = 3
        self._retry_delay = 1  # seconds
        self._retry_cooldown = 30  # seconds between failed connection rounds
        self._last_failure: Optional[float] = None
        self._is_connected = False
        self._indexes_ready = False

    def connect(self) -> bool:
        """Establish connection to MongoDB with retry logic"""
        if self._is_connected and self.database is not None:
            logger.debug("Database already connected")
            return True

        if self._last_failure is not None and time.monotonic() - self._last_failure < self._retry_cooldown:
            logger.debug("MongoDB connection failed recently, not retrying yet")
            return False

        for attempt in range(self._max_retries):
            try:
                logger.info(f"Attempting to connect to MongoDB (attempt {attempt + 1}/{self._max_retries})")

                self.client = MongoClient(
                    settings.MONGODB_URL,
                    server_api=ServerApi('1'),
                    tz_aware=True,
                    maxPoolSize=50,
                    minPoolSize=5,
                    connectTimeoutMS=10000,
                    serverSelectionTimeoutMS=5000,
                    retryWrites=True,
                    retryReads=True
                )

                # Test connection
                self.client.admin.command('ping')

                self.database = self.client[settings.MONGODB_DATABASE]
                self._is_connected = True
                self._connection_attempts = 0
                self._last_failure = None
                logger.info(f"✅ Connected to MongoDB database: {settings.MONGODB_DATABASE}")

                ensure_indexes(self.database)
                self._indexes_ready = True
                return True

            except (ConnectionFailure, ServerSelectionTimeoutError, OperationFailure) as e:
                self._connection_attempts += 1
                logger.error(f"❌ MongoDB connection attempt {attempt + 1} failed: {e}")

                if attempt < self._max_retries - 1:
                    wait_time = self._retry_delay * (2 ** attempt)  # Exponential backoff
                    logger.info(f"Waiting {wait_time}s before retry...")
                    time.sleep(wait_time)
                else:
                    logger.error(f"❌ Failed to connect to MongoDB at {settings.masked_mongodb_url} after {self._max_retries} attempts")
                    self._is_connected = False
                    self._last_failure = time.monotonic()
                    return False

        return False

    def use_database(self, database: Database) -> None:
        """Bind an already opened database (tests, scripts)"""
        self.database = database
        self.client = None
        self._is_connected = True
        self._last_failure = None
        ensure_indexes(database)
        self._indexes_ready = True

    def disconnect(self):
        """Close MongoDB connection"""
        if self.client is not None:
            self.client.close()
            logger.info("MongoDB client connection closed")
        self._is_connected = False
        self.client = None
        self.database = None
        self._indexes_ready = False

    def get_database(self) -> Database:
        """Get database instance, connecting if necessary"""
        if not self._is_connected or self.database is None:
            if not self.connect():
                raise ConnectionError("Failed to connect to MongoDB")
        return self.database

    def check_health(self) -> Dict[str, Any]:
        """Check database health status"""
        if not self._is_connected or self.database is None:
            return {
                "status": "disconnected",
                "connection_attempts": self._connection_attempts
            }

        try:
            start_time = time.time()
            self.database.command('ping')
            ping_time = (time.time() - start_time) * 1000  # Convert to milliseconds

            return {
                "status": "healthy",
                "ping_time_ms": round(ping_time, 2),
                "rooms": self.database.rooms.estimated_document_count(),
                "indexes_ready": self._indexes_ready,
                "database_name": self.database.name
            }

        except Exception as e:
            logger.warning(f"Database health check failed: {e}")
            return {
                "status": "unhealthy",
                "error": str(e),
                "connection_attempts": self._connection_attempts
            }

def ensure_indexes(database: Database) -> None:
    """Create the indexes the room and message queries rely on"""
    database.rooms.create_index([("code", ASCENDING)], unique=True, name="code_unique")
    database.rooms.create_index([("creator", ASCENDING)], name="creator")
    database.rooms.create_index([("members.user", ASCENDING)], name="members_user")
    database.messages.create_index([("room", ASCENDING), ("created_at", DESCENDING)], name="room_created_at")
    database.messages.create_index([("sender", ASCENDING)], name="sender")
    logger.info("✅ Room and message indexes ensured")

# Global database manager instance
db_manager = DatabaseManager()

def connect_to_mongo() -> bool:
    """Connect to MongoDB"""
    return db_manager.connect()

def close_mongo_connection():
    """Close MongoDB connection"""
    db_manager.disconnect()

def get_database() -> Database:
    """Get database instance"""
    return db_manager.get_database()

def check_database_health() -> Dict[str, Any]:
    """Check database health"""
    return db_manager.check_health()
