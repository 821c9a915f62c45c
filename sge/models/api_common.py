# sge/models/api_common.py

from typing import Annotated, Any, List, Optional

from bson import ObjectId
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel


def _validate_object_id(value: Any) -> ObjectId:
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    raise ValueError("Invalid ObjectId")


def _object_id_to_str(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    return value


# ObjectId no modelo interno/DB
PyObjectId = Annotated[ObjectId, BeforeValidator(_validate_object_id)]

# ObjectId renderizado como string nos modelos de API
StrObjectId = Annotated[str, BeforeValidator(_object_id_to_str)]


class MongoModel(BaseModel):
    """Base for documents as stored in MongoDB (snake_case, `_id`)."""

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )


class APIModel(BaseModel):
    """Base for request/response payloads: camelCase on the wire, snake_case accepted too."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(BaseModel):
    """Resposta genérica com mensagem."""
    message: str = Field(..., description="Mensagem descritiva.")


class ErrorResponse(BaseModel):
    """Formato de erro consumido pelo dashboard."""
    error: str = Field(..., description="Mensagem de erro.")
    message: Optional[str] = None
    details: Optional[List[Any]] = None
