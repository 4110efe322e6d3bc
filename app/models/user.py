from typing import Optional, List, Iterable
from bson import ObjectId

# Profile fields exposed when a user reference is resolved
ROOM_PROFILE_FIELDS = ("username", "email", "avatar", "is_online")
SENDER_PROFILE_FIELDS = ("username", "avatar")

_RESPONSE_NAMES = {"is_online": "isOnline"}

class UserModel:
    """Read-side view of a user document; accounts are managed elsewhere"""

    def __init__(
        self,
        username: str,
        email: Optional[str] = None,
        avatar: Optional[str] = None,
        is_online: bool = False,
        rooms: List[ObjectId] = None,
        _id: Optional[ObjectId] = None
    ):
        self._id = _id
        self.username = username
        self.email = email
        self.avatar = avatar
        self.is_online = is_online
        self.rooms = rooms or []

    @classmethod
    def from_dict(cls, data: dict) -> 'UserModel':
        return cls(
            _id=data.get('_id'),
            username=data.get('username', ''),
            email=data.get('email'),
            avatar=data.get('avatar'),
            is_online=data.get('is_online', False),
            rooms=list(data.get('rooms', []))
        )

    def to_summary(self, fields: Iterable[str] = ROOM_PROFILE_FIELDS) -> dict:
        """Profile summary used in place of a populated reference"""
        summary = {"_id": str(self._id)}
        for field in fields:
            summary[_RESPONSE_NAMES.get(field, field)] = getattr(self, field)
        return summary
