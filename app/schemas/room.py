from pydantic import Field, StringConstraints, field_validator
from typing import Optional, Annotated
from enum import Enum

from .base import RequestSchema
from ..core.validators import (
    validate_room_code, normalize_room_code,
    ROOM_NAME_MAX_LENGTH, ROOM_DESCRIPTION_MAX_LENGTH, MIN_MEMBERS, MAX_MEMBERS,
)

class MemberRole(str, Enum):
    ADMIN = "admin"
    MEMBER = "member"

RoomName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=ROOM_NAME_MAX_LENGTH)]

class RoomCreate(RequestSchema):
    name: RoomName
    code: Optional[str] = None
    description: Optional[str] = Field(default=None, max_length=ROOM_DESCRIPTION_MAX_LENGTH)
    max_members: Optional[int] = Field(default=None, ge=MIN_MEMBERS, le=MAX_MEMBERS, alias="maxMembers")
    is_private: Optional[bool] = Field(default=None, alias="isPrivate")

    @field_validator('code')
    @classmethod
    def validate_code_format(cls, v):
        if v is None:
            return v
        if not validate_room_code(v):
            raise ValueError('Le code doit contenir entre 4 et 8 lettres ou chiffres')
        return normalize_room_code(v)

class RoomJoin(RequestSchema):
    code: str

    @field_validator('code')
    @classmethod
    def validate_code_format(cls, v):
        if not validate_room_code(v):
            raise ValueError('Le code doit contenir entre 4 et 8 lettres ou chiffres')
        return normalize_room_code(v)
