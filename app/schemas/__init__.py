from .base import RequestSchema
from .room import RoomCreate, RoomJoin, MemberRole
from .message import MessageCreate, MessageType

__all__ = [
    "RequestSchema",
    "RoomCreate", "RoomJoin", "MemberRole",
    "MessageCreate", "MessageType"
]
