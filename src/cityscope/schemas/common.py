"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema rendering field names in camelCase for the web client."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ErrorResponse(BaseModel):
    """Body returned for every failed request."""

    message: str = Field(..., description="Human readable summary of the failure.")
    errors: list[str] | None = Field(
        None,
        description="Per-field validation messages, present for validation failures only.",
    )
