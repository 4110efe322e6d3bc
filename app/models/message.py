from datetime import datetime
from typing import Optional, List, Dict, Any
from bson import ObjectId

from ..schemas.message import MessageType
from ..core.utils import get_current_timestamp, format_datetime, to_object_id

class ReadReceipt:
    def __init__(self, user: ObjectId, read_at: Optional[datetime] = None):
        self.user = to_object_id(user)
        self.read_at = read_at or get_current_timestamp()

    def to_dict(self) -> dict:
        return {"user": self.user, "read_at": self.read_at}

    @classmethod
    def from_dict(cls, data: dict) -> 'ReadReceipt':
        return cls(user=data['user'], read_at=data.get('read_at'))

    def to_response_dict(self) -> dict:
        return {"user": str(self.user), "readAt": format_datetime(self.read_at)}

class MessageModel:
    def __init__(
        self,
        content: str,
        sender: ObjectId,
        room: ObjectId,
        type: MessageType = MessageType.TEXT,
        edited: bool = False,
        edited_at: Optional[datetime] = None,
        read_by: List[ReadReceipt] = None,
        reply_to: Optional[ObjectId] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
        _id: Optional[ObjectId] = None
    ):
        now = get_current_timestamp()
        self._id = _id
        self.content = content
        self.sender = to_object_id(sender)
        self.room = to_object_id(room)
        self.type = type
        self.edited = edited
        self.edited_at = edited_at
        self.read_by = read_by or []
        self.reply_to = to_object_id(reply_to) if reply_to else None
        self.created_at = created_at or now
        self.updated_at = updated_at or now

    @property
    def id(self) -> Optional[ObjectId]:
        return self._id

    def to_dict(self) -> dict:
        data = {
            "content": self.content,
            "sender": self.sender,
            "room": self.room,
            "type": self.type.value if isinstance(self.type, MessageType) else self.type,
            "edited": self.edited,
            "edited_at": self.edited_at,
            "read_by": [receipt.to_dict() for receipt in self.read_by],
            "reply_to": self.reply_to,
            "created_at": self.created_at,
            "updated_at": self.updated_at
        }
        if self._id is not None:
            data["_id"] = self._id
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'MessageModel':
        return cls(
            _id=data.get('_id'),
            content=data.get('content', ''),
            sender=data['sender'],
            room=data['room'],
            type=MessageType(data.get('type', MessageType.TEXT.value)),
            edited=data.get('edited', False),
            edited_at=data.get('edited_at'),
            read_by=[ReadReceipt.from_dict(receipt) for receipt in data.get('read_by', [])],
            reply_to=data.get('reply_to'),
            created_at=data.get('created_at'),
            updated_at=data.get('updated_at')
        )

    def is_sent_by(self, user_id: Any) -> bool:
        return str(self.sender) == str(user_id)

    def has_been_read_by(self, user_id: Any) -> bool:
        user_id = str(user_id)
        return any(str(receipt.user) == user_id for receipt in self.read_by)

    def to_response_dict(
        self,
        profiles: Optional[Dict[str, dict]] = None,
        replies: Optional[Dict[str, 'MessageModel']] = None
    ) -> dict:
        """Convert to response format; sender and replyTo resolved when lookups are given"""
        if profiles is None:
            sender = str(self.sender)
        else:
            sender = profiles.get(str(self.sender))

        if self.reply_to is None:
            reply_to = None
        elif replies is None:
            reply_to = str(self.reply_to)
        else:
            reply = replies.get(str(self.reply_to))
            reply_to = reply.to_response_dict() if reply else None

        return {
            "_id": str(self._id),
            "content": self.content,
            "sender": sender,
            "room": str(self.room),
            "type": self.type.value,
            "edited": self.edited,
            "editedAt": format_datetime(self.edited_at),
            "readBy": [receipt.to_response_dict() for receipt in self.read_by],
            "replyTo": reply_to,
            "createdAt": format_datetime(self.created_at),
            "updatedAt": format_datetime(self.updated_at)
        }
