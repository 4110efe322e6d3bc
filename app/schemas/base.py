from typing import Any, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from ..core.exceptions import ValidationError

SchemaT = TypeVar("SchemaT", bound="RequestSchema")

class RequestSchema(BaseModel):
    """Base for request bodies: camelCase aliases, unknown keys rejected"""
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    @classmethod
    def from_request(cls: Type[SchemaT], data: Optional[Any]) -> SchemaT:
        """Validate a decoded JSON body, raising the API ValidationError"""
        if not isinstance(data, dict):
            raise ValidationError(details="Le corps de la requête doit être un objet JSON")
        try:
            return cls.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError(details=_first_error(e)) from e

def _first_error(error: PydanticValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "invalid value")
    return f"{location}: {message}" if location else message
