# MongoDB document models
from .user import UserModel
from .room import RoomModel, RoomMember
from .message import MessageModel, ReadReceipt

__all__ = [
    "UserModel",
    "RoomModel", "RoomMember",
    "MessageModel", "ReadReceipt"
]
