"""Base schemas for the application."""

from datetime import datetime
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from uuid import UUID


class BaseSchema(BaseModel):
    """Base schema class with common configuration.

    JSON bodies use camelCase keys; Python code keeps snake_case names.
    """
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)


class BaseModelSchema(BaseSchema):
    """Base schema for database models."""
    id: UUID
    created_at: datetime
    updated_at: datetime


class MessageResponse(BaseSchema):
    """Plain acknowledgement."""
    message: str

