"""
Base Pydantic schemas with common fields.

The wire format uses camelCase keys (``taskStatus``, ``fileUrl``) while the
Python side uses snake_case attributes.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts and emits camelCase keys; snake_case names also accepted on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Envelope(BaseModel):
    """Fields shared by every successful response body."""

    success: bool = True


class MessageResponse(Envelope):
    message: str
