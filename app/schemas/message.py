from pydantic import Field, StringConstraints, field_validator
from typing import Optional, Annotated, Literal
from enum import Enum

from .base import RequestSchema
from ..core.utils import is_valid_object_id
from ..core.validators import MESSAGE_MAX_LENGTH

class MessageType(str, Enum):
    TEXT = "text"
    IMAGE = "image"
    FILE = "file"
    SYSTEM = "system"

MessageContent = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=MESSAGE_MAX_LENGTH)]

class MessageCreate(RequestSchema):
    content: MessageContent
    room_id: str = Field(alias="roomId")
    # "system" messages are never sent by clients
    type: Optional[Literal["text", "image", "file"]] = None
    reply_to: Optional[str] = Field(default=None, alias="replyTo")

    @field_validator('room_id', 'reply_to')
    @classmethod
    def validate_object_id_format(cls, v):
        if v is not None and not is_valid_object_id(v):
            raise ValueError('Identifiant invalide')
        return v
