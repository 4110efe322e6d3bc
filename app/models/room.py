from datetime import datetime
from typing import Optional, List, Dict, Any
from bson import ObjectId

from ..schemas.room import MemberRole
from ..core.utils import get_current_timestamp, format_datetime, to_object_id

DEFAULT_MAX_MEMBERS = 50

class RoomMember:
    def __init__(
        self,
        user: ObjectId,
        role: MemberRole = MemberRole.MEMBER,
        joined_at: Optional[datetime] = None
    ):
        self.user = to_object_id(user)
        self.role = role
        self.joined_at = joined_at or get_current_timestamp()

    def to_dict(self) -> dict:
        return {
            "user": self.user,
            "joined_at": self.joined_at,
            "role": self.role.value if isinstance(self.role, MemberRole) else self.role
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'RoomMember':
        return cls(
            user=data['user'],
            role=MemberRole(data.get('role', MemberRole.MEMBER.value)),
            joined_at=data.get('joined_at')
        )

    def is_admin(self) -> bool:
        return self.role == MemberRole.ADMIN

    def to_response_dict(self, profiles: Dict[str, dict]) -> dict:
        return {
            "user": profiles.get(str(self.user)),
            "joinedAt": format_datetime(self.joined_at),
            "role": self.role.value
        }

class RoomModel:
    def __init__(
        self,
        name: str,
        code: str,
        creator: ObjectId,
        members: List[RoomMember] = None,
        description: Optional[str] = None,
        max_members: int = DEFAULT_MAX_MEMBERS,
        is_private: bool = False,
        last_activity: Optional[datetime] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
        _id: Optional[ObjectId] = None
    ):
        now = get_current_timestamp()
        self._id = _id
        self.name = name
        self.code = code.upper()
        self.creator = to_object_id(creator)
        self.members = members or []
        self.description = description
        self.max_members = max_members
        self.is_private = is_private
        self.last_activity = last_activity or now
        self.created_at = created_at or now
        self.updated_at = updated_at or now

    @property
    def id(self) -> Optional[ObjectId]:
        return self._id

    def to_dict(self) -> dict:
        data = {
            "name": self.name,
            "code": self.code,
            "description": self.description,
            "creator": self.creator,
            "members": [member.to_dict() for member in self.members],
            "max_members": self.max_members,
            "is_private": self.is_private,
            "last_activity": self.last_activity,
            "created_at": self.created_at,
            "updated_at": self.updated_at
        }
        if self._id is not None:
            data["_id"] = self._id
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'RoomModel':
        return cls(
            _id=data.get('_id'),
            name=data.get('name', ''),
            code=data.get('code', ''),
            creator=data['creator'],
            members=[RoomMember.from_dict(member) for member in data.get('members', [])],
            description=data.get('description'),
            max_members=data.get('max_members', DEFAULT_MAX_MEMBERS),
            is_private=data.get('is_private', False),
            last_activity=data.get('last_activity'),
            created_at=data.get('created_at'),
            updated_at=data.get('updated_at')
        )

    def get_member(self, user_id: Any) -> Optional[RoomMember]:
        """Membership entry for a user, if any"""
        user_id = str(user_id)
        for member in self.members:
            if str(member.user) == user_id:
                return member
        return None

    def is_member(self, user_id: Any) -> bool:
        return self.get_member(user_id) is not None

    def is_full(self) -> bool:
        return len(self.members) >= self.max_members

    def user_ids(self) -> List[ObjectId]:
        """Creator and members, for profile resolution"""
        return [self.creator] + [member.user for member in self.members]

    def to_response_dict(self, profiles: Dict[str, dict]) -> dict:
        """Convert to response format with creator and members resolved"""
        return {
            "_id": str(self._id),
            "name": self.name,
            "code": self.code,
            "description": self.description,
            "creator": profiles.get(str(self.creator)),
            "members": [member.to_response_dict(profiles) for member in self.members],
            "maxMembers": self.max_members,
            "isPrivate": self.is_private,
            "lastActivity": format_datetime(self.last_activity),
            "createdAt": format_datetime(self.created_at),
            "updatedAt": format_datetime(self.updated_at)
        }
