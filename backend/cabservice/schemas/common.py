"""
Base schema shared by all request/response models.

The front end speaks camelCase JSON; Python code uses snake_case field names.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class SuccessResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None


def strip_text(value):
    """Before-validator: trims strings so length limits apply to the visible text."""
    if isinstance(value, str):
        return value.strip()
    return value
