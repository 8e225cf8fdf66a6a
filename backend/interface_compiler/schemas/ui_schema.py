"""UI schema request/response schemas.

Request models are deliberately loose (``Any``) so that missing or mistyped
fields reach SchemaStore/GenerationService, which own the error messages.
"""
from datetime import datetime, timezone
from typing import Any

from pydantic import AliasChoices, Field, field_validator

from interface_compiler.schemas.base import CamelModel


class SchemaWrite(CamelModel):
    """Body for create and full-replace update."""
    name: Any = None
    description: Any = None
    # "schema" is the legacy key for the component array
    components: Any = Field(
        default=None, validation_alias=AliasChoices("components", "schema"),
    )


class GenerateSchemaRequest(CamelModel):
    prompt: Any = None


class SchemaSummary(CamelModel):
    id: str
    name: str
    description: str = ""
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        # SQLite hands back naive values; they are stored as UTC.
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class SchemaRecord(SchemaSummary):
    components: list[dict[str, Any]]
