"""
Custom validation functions for the application
"""
import re
from typing import Any, Optional

ROOM_NAME_MAX_LENGTH = 50
ROOM_CODE_MIN_LENGTH = 4
ROOM_CODE_MAX_LENGTH = 8
ROOM_DESCRIPTION_MAX_LENGTH = 200
MIN_MEMBERS = 2
MAX_MEMBERS = 100
MESSAGE_MAX_LENGTH = 1000

ROOM_CODE_PATTERN = re.compile(r"[A-Za-z0-9]{%d,%d}" % (ROOM_CODE_MIN_LENGTH, ROOM_CODE_MAX_LENGTH))

def validate_room_code(code: Optional[str]) -> bool:
    """
    Room codes are 4 to 8 ASCII letters or digits, compared case-insensitively
    """
    if not isinstance(code, str):
        return False
    return ROOM_CODE_PATTERN.fullmatch(code) is not None

def normalize_room_code(code: str) -> str:
    """Codes are stored and looked up uppercase"""
    return code.upper()

def normalize_message_content(content: Any) -> Optional[str]:
    """
    Trim message content; returns None when nothing remains
    """
    if not isinstance(content, str):
        return None
    trimmed = content.strip()
    return trimmed or None
