"""Schemas API routes."""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from interface_compiler.database import get_db
from interface_compiler.errors import InternalError, ServiceError
from interface_compiler.models.ui_schema import UISchema
from interface_compiler.schemas.common import MessageResponse
from interface_compiler.schemas.ui_schema import SchemaRecord, SchemaSummary, SchemaWrite
from interface_compiler.services.schema_store import SchemaStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/schemas", tags=["schemas"])


def get_schema_store(db: AsyncSession = Depends(get_db)) -> SchemaStore:
    return SchemaStore(db)


@router.get("")
async def list_schemas(store: SchemaStore = Depends(get_schema_store)):
    """List the 50 newest schemas without their component payloads."""
    try:
        rows = await store.list_schemas()
    except ServiceError:
        raise
    except Exception as e:
        logger.exception("Error fetching schemas")
        raise InternalError("Failed to fetch schemas", details=str(e)) from e

    return {
        "success": True,
        "schemas": [SchemaSummary.model_validate(row).to_json() for row in rows],
    }


@router.get("/{schema_id}")
async def get_schema(
    schema_id: str,
    store: SchemaStore = Depends(get_schema_store),
):
    """Get a single schema by ID."""
    try:
        schema = await store.get_schema(schema_id)
    except ServiceError:
        raise
    except Exception as e:
        logger.exception("Error fetching schema %s", schema_id)
        raise InternalError("Failed to fetch schema", details=str(e)) from e

    return {"success": True, "schema": _to_response(schema)}


@router.post("", status_code=201)
async def create_schema(
    body: SchemaWrite,
    store: SchemaStore = Depends(get_schema_store),
):
    """Create a new schema. Names are unique after trimming."""
    try:
        schema = await store.create_schema(body.name, body.description, body.components)
    except ServiceError:
        raise
    except Exception as e:
        logger.exception("Error creating schema")
        raise InternalError("Failed to create schema", details=str(e)) from e

    return {
        "success": True,
        "schema": _to_response(schema),
        "message": "Schema created successfully",
    }


@router.put("/{schema_id}")
async def update_schema(
    schema_id: str,
    body: SchemaWrite,
    store: SchemaStore = Depends(get_schema_store),
):
    """Replace name, description and components of a schema."""
    try:
        schema = await store.update_schema(
            schema_id, body.name, body.description, body.components,
        )
    except ServiceError:
        raise
    except Exception as e:
        logger.exception("Error updating schema %s", schema_id)
        raise InternalError("Failed to update schema", details=str(e)) from e

    return {
        "success": True,
        "schema": _to_response(schema),
        "message": "Schema updated successfully",
    }


@router.delete("/{schema_id}", response_model=MessageResponse)
async def delete_schema(
    schema_id: str,
    store: SchemaStore = Depends(get_schema_store),
):
    """Delete a schema."""
    try:
        await store.delete_schema(schema_id)
    except ServiceError:
        raise
    except Exception as e:
        logger.exception("Error deleting schema %s", schema_id)
        raise InternalError("Failed to delete schema", details=str(e)) from e

    return MessageResponse(message="Schema deleted successfully")


def _to_response(schema: UISchema) -> dict:
    """Convert SQLAlchemy model to camelCase response dict."""
    return SchemaRecord.model_validate(schema).to_json()
