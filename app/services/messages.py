"""
Message service: paginated history, send, read receipts, edit and delete.
"""

import logging
from typing import Any, Dict, List, Optional

from pymongo import DESCENDING
from pymongo.database import Database

from ..core.config import settings
from ..core.exceptions import ResourceNotFoundError, AuthorizationError, ValidationError
from ..core.utils import (
    get_current_timestamp, is_valid_object_id, to_object_id,
    page_window, get_skip, total_pages,
)
from ..core.validators import normalize_message_content, MESSAGE_MAX_LENGTH
from ..models.message import MessageModel, ReadReceipt
from ..models.user import SENDER_PROFILE_FIELDS
from ..schemas.message import MessageType
from . import rooms, users

logger = logging.getLogger(__name__)

MESSAGE_NOT_FOUND = "Message non trouvé"
CONTENT_REQUIRED = "Le contenu du message est requis"
EDIT_FORBIDDEN = "Vous ne pouvez modifier que vos propres messages"
DELETE_FORBIDDEN = "Vous ne pouvez supprimer que vos propres messages"

def load_message(db: Database, message_id: str) -> MessageModel:
    """Fetch a message by id; malformed ids are reported as not found"""
    if not is_valid_object_id(message_id):
        raise ResourceNotFoundError(MESSAGE_NOT_FOUND)
    message_data = db.messages.find_one({"_id": to_object_id(message_id)})
    if message_data is None:
        raise ResourceNotFoundError(MESSAGE_NOT_FOUND)
    return MessageModel.from_dict(message_data)

def clean_content(content: Any) -> str:
    """Trimmed message content, 1 to 1000 characters"""
    trimmed = normalize_message_content(content)
    if trimmed is None:
        raise ValidationError(CONTENT_REQUIRED)
    if len(trimmed) > MESSAGE_MAX_LENGTH:
        raise ValidationError(details=f"content: Le message ne peut pas dépasser {MESSAGE_MAX_LENGTH} caractères")
    return trimmed

def serialize_messages(
    db: Database,
    messages: List[MessageModel],
    resolve_replies: bool = True
) -> List[dict]:
    """Resolve senders (and replied-to messages) with one query each"""
    profiles = users.resolve_profiles(
        db, (message.sender for message in messages), SENDER_PROFILE_FIELDS
    )

    replies: Optional[Dict[str, MessageModel]] = None
    if resolve_replies:
        reply_ids = list({message.reply_to for message in messages if message.reply_to is not None})
        replies = {}
        if reply_ids:
            for reply_data in db.messages.find({"_id": {"$in": reply_ids}}):
                replies[str(reply_data["_id"])] = MessageModel.from_dict(reply_data)

    return [message.to_response_dict(profiles, replies) for message in messages]

def list_messages(
    db: Database,
    caller_id: str,
    room_id: str,
    page: Any = 1,
    limit: Any = None
) -> dict:
    """A page of room history, newest page first, each page in chronological order"""
    room = rooms.load_room(db, room_id)
    rooms.require_member(room, caller_id)

    page, limit = page_window(page, limit, settings.DEFAULT_PAGE_LIMIT)
    skip = get_skip(page, limit)

    cursor = (
        db.messages.find({"room": room.id})
        .sort([("created_at", DESCENDING), ("_id", DESCENDING)])
        .skip(skip)
        .limit(limit)
    )
    messages = [MessageModel.from_dict(message_data) for message_data in cursor]
    total_messages = db.messages.count_documents({"room": room.id})

    # Reverse to get chronological order
    messages.reverse()

    return {
        "messages": serialize_messages(db, messages),
        "pagination": {
            "currentPage": page,
            "totalPages": total_pages(total_messages, limit),
            "totalMessages": total_messages,
            "hasMore": skip + len(messages) < total_messages
        }
    }

def send_message(
    db: Database,
    caller_id: str,
    room_id: str,
    content: Any,
    type: Optional[str] = None,
    reply_to: Optional[str] = None
) -> dict:
    trimmed = clean_content(content)
    room = rooms.load_room(db, room_id)
    rooms.require_member(room, caller_id)

    message = MessageModel(
        content=trimmed,
        sender=caller_id,
        room=room.id,
        type=MessageType(type or MessageType.TEXT.value),
        reply_to=reply_to or None
    )
    result = db.messages.insert_one(message.to_dict())
    message._id = result.inserted_id

    now = get_current_timestamp()
    db.rooms.update_one(
        {"_id": room.id},
        {"$set": {"last_activity": now, "updated_at": now}}
    )

    logger.info(f"Message {message.id} sent to room {room.id} by user {caller_id}")
    return serialize_messages(db, [message])[0]

def mark_read(db: Database, caller_id: str, message_id: str) -> None:
    """Record a read receipt; repeated calls leave a single entry"""
    message = load_message(db, message_id)
    if message.has_been_read_by(caller_id):
        return

    receipt = ReadReceipt(user=caller_id)
    result = db.messages.update_one(
        {"_id": message.id, "read_by.user": {"$ne": receipt.user}},
        {
            "$push": {"read_by": receipt.to_dict()},
            "$set": {"updated_at": receipt.read_at}
        }
    )
    if result.modified_count:
        logger.debug(f"Message {message.id} read by user {caller_id}")

def edit_message(db: Database, caller_id: str, message_id: str, content: Any) -> dict:
    trimmed = clean_content(content)

    message = load_message(db, message_id)
    if not message.is_sent_by(caller_id):
        raise AuthorizationError(EDIT_FORBIDDEN)

    now = get_current_timestamp()
    db.messages.update_one(
        {"_id": message.id},
        {"$set": {"content": trimmed, "edited": True, "edited_at": now, "updated_at": now}}
    )
    message.content = trimmed
    message.edited = True
    message.edited_at = now
    message.updated_at = now

    logger.info(f"Message {message.id} edited by user {caller_id}")
    return serialize_messages(db, [message], resolve_replies=False)[0]

def delete_message(db: Database, caller_id: str, message_id: str) -> None:
    message = load_message(db, message_id)
    if not message.is_sent_by(caller_id):
        raise AuthorizationError(DELETE_FORBIDDEN)

    db.messages.delete_one({"_id": message.id})
    logger.info(f"Message {message.id} deleted by user {caller_id}")
