"""Persistence for named UI schemas.

Each public method is one unit of work against the ``ui_schemas`` table.
Input is validated before the session is touched, so malformed ids and
payloads never reach the database.
"""
import json
import logging
import re
from typing import Any, Optional

from sqlalchemy import select, desc
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from interface_compiler.errors import Conflict, InvalidInput, NotFound
from interface_compiler.models.base import utcnow
from interface_compiler.models.ui_schema import (
    DESCRIPTION_MAX_LENGTH,
    NAME_MAX_LENGTH,
    UISchema,
)
from interface_compiler.services.validator import validate_components

logger = logging.getLogger(__name__)

LIST_LIMIT = 50

_OBJECT_ID_RE = re.compile(r"^[0-9a-fA-F]{24}$")


def normalize_schema_id(schema_id: Any) -> str:
    """Return the lowercase id, or raise InvalidInput for anything but 24 hex chars."""
    if not isinstance(schema_id, str) or not _OBJECT_ID_RE.match(schema_id):
        raise InvalidInput("Invalid schema ID format")
    return schema_id.lower()


def _clean_fields(name: Any, description: Any, components: Any) -> tuple[str, str, list]:
    if not isinstance(name, str) or not name.strip():
        raise InvalidInput("Name is required and must be a non-empty string")
    name = name.strip()
    if len(name) > NAME_MAX_LENGTH:
        raise InvalidInput(f"Name must be at most {NAME_MAX_LENGTH} characters")

    if description is None:
        description = ""
    if not isinstance(description, str):
        raise InvalidInput("Description must be a string")
    description = description.strip()
    if len(description) > DESCRIPTION_MAX_LENGTH:
        raise InvalidInput(f"Description must be at most {DESCRIPTION_MAX_LENGTH} characters")

    result = validate_components(components)
    if not result:
        raise InvalidInput(result.message)

    try:
        json.dumps(components, allow_nan=False)
    except ValueError as e:
        raise InvalidInput("Schema must contain only finite numbers") from e

    return name, description, components


class SchemaStore:
    """CRUD over UISchema rows with name-uniqueness enforcement."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_schemas(self, limit: int = LIST_LIMIT) -> list[dict]:
        """Newest-first summaries; the components payload is never selected."""
        result = await self.db.execute(
            select(
                UISchema.id,
                UISchema.name,
                UISchema.description,
                UISchema.created_at,
                UISchema.updated_at,
            )
            .order_by(desc(UISchema.created_at), desc(UISchema.id))
            .limit(limit)
        )
        return [dict(row._mapping) for row in result.all()]

    async def get_schema(self, schema_id: str) -> UISchema:
        schema_id = normalize_schema_id(schema_id)
        schema = await self.db.get(UISchema, schema_id)
        if not schema:
            raise NotFound("Schema not found")
        return schema

    async def create_schema(
        self, name: Any, description: Any, components: Any,
    ) -> UISchema:
        name, description, components = _clean_fields(name, description, components)

        await self._ensure_name_available(name)

        schema = UISchema(name=name, description=description, components=components)
        self.db.add(schema)
        await self._commit()
        await self.db.refresh(schema)
        logger.info("Created schema %s (%s, %d components)", schema.id, name, len(components))
        return schema

    async def update_schema(
        self, schema_id: str, name: Any, description: Any, components: Any,
    ) -> UISchema:
        schema_id = normalize_schema_id(schema_id)
        name, description, components = _clean_fields(name, description, components)

        await self._ensure_name_available(name, exclude_id=schema_id)

        schema = await self.db.get(UISchema, schema_id)
        if not schema:
            raise NotFound("Schema not found")

        # Full replace: no merge with the previous components.
        schema.name = name
        schema.description = description
        schema.components = list(components)
        schema.updated_at = utcnow()

        await self._commit()
        await self.db.refresh(schema)
        logger.info("Updated schema %s (%s)", schema_id, name)
        return schema

    async def delete_schema(self, schema_id: str) -> None:
        schema_id = normalize_schema_id(schema_id)
        schema = await self.db.get(UISchema, schema_id)
        if not schema:
            raise NotFound("Schema not found")

        await self.db.delete(schema)
        await self.db.commit()
        logger.info("Deleted schema %s", schema_id)

    async def _ensure_name_available(self, name: str, exclude_id: Optional[str] = None) -> None:
        query = select(UISchema.id).where(UISchema.name == name)
        if exclude_id:
            query = query.where(UISchema.id != exclude_id)
        result = await self.db.execute(query.limit(1))
        if result.scalar_one_or_none() is not None:
            raise Conflict("A schema with this name already exists")

    async def _commit(self) -> None:
        """Commit, mapping a unique-index violation on name to Conflict."""
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning("Unique constraint rejected schema write: %s", e.orig)
            raise Conflict("A schema with this name already exists") from e
