"""
Utility functions for ids, dates, room codes and pagination
"""
import math
import secrets
import string
from datetime import datetime, timezone
from typing import Any, Optional, Tuple, Union
from bson import ObjectId
import logging

# Configure logging
logger = logging.getLogger(__name__)

ROOM_CODE_ALPHABET = string.ascii_uppercase + string.digits

class DataUtils:
    """Utility class for identifiers and codes"""

    @staticmethod
    def is_valid_object_id(id_string: Any) -> bool:
        """Check if a value is a valid ObjectId"""
        if isinstance(id_string, ObjectId):
            return True
        return isinstance(id_string, str) and ObjectId.is_valid(id_string)

    @staticmethod
    def to_object_id(value: Union[str, ObjectId]) -> ObjectId:
        """Convert a hex string to ObjectId (ObjectIds pass through)"""
        if isinstance(value, ObjectId):
            return value
        return ObjectId(value)

    @staticmethod
    def generate_room_code(length: int = 6) -> str:
        """Generate a random uppercase alphanumeric room code"""
        return ''.join(secrets.choice(ROOM_CODE_ALPHABET) for _ in range(length))

class DateTimeUtils:
    """Utility class for date and time operations"""

    @staticmethod
    def get_current_timestamp() -> datetime:
        """Get current UTC timestamp"""
        return datetime.now(timezone.utc)

    @staticmethod
    def format_datetime(dt: Optional[datetime]) -> Optional[str]:
        """Format datetime to ISO-8601; naive values are read as UTC"""
        if dt is None:
            return None
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt.isoformat()

class PaginationUtils:
    """Utility class for page/limit handling"""

    @staticmethod
    def parse_positive_int(value: Any, default: int) -> int:
        """Parse a query parameter, falling back to default when invalid or < 1"""
        try:
            parsed = int(value)
        except (TypeError, ValueError):
            return default
        return parsed if parsed >= 1 else default

    @staticmethod
    def get_skip(page: int, limit: int) -> int:
        return (page - 1) * limit

    @staticmethod
    def total_pages(total: int, limit: int) -> int:
        return math.ceil(total / limit) if limit else 0

    @staticmethod
    def page_window(page: Any, limit: Any, default_limit: int) -> Tuple[int, int]:
        """Normalize page and limit query values"""
        page = PaginationUtils.parse_positive_int(page, 1)
        limit = PaginationUtils.parse_positive_int(limit, default_limit)
        return page, limit

# Convenience functions for backward compatibility
def is_valid_object_id(id_string: Any) -> bool:
    """Check if a value is a valid ObjectId"""
    return DataUtils.is_valid_object_id(id_string)

def to_object_id(value: Union[str, ObjectId]) -> ObjectId:
    """Convert a hex string to ObjectId"""
    return DataUtils.to_object_id(value)

def generate_room_code(length: int = 6) -> str:
    """Generate a random uppercase alphanumeric room code"""
    return DataUtils.generate_room_code(length)

def get_current_timestamp() -> datetime:
    """Get current UTC timestamp"""
    return DateTimeUtils.get_current_timestamp()

def format_datetime(dt: Optional[datetime]) -> Optional[str]:
    """Format datetime to ISO-8601 string"""
    return DateTimeUtils.format_datetime(dt)

def page_window(page: Any, limit: Any, default_limit: int) -> Tuple[int, int]:
    """Normalize page and limit query values"""
    return PaginationUtils.page_window(page, limit, default_limit)

def get_skip(page: int, limit: int) -> int:
    """Number of documents to skip for a page"""
    return PaginationUtils.get_skip(page, limit)

def total_pages(total: int, limit: int) -> int:
    """Number of pages for a total count"""
    return PaginationUtils.total_pages(total, limit)
