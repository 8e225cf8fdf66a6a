"""Schema generation endpoint — natural language in, component array out."""
import logging

from fastapi import APIRouter, Depends

from interface_compiler.errors import InternalError, ServiceError
from interface_compiler.schemas.ui_schema import GenerateSchemaRequest
from interface_compiler.services.generation import GenerationService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["generation"])


def get_generation_service() -> GenerationService:
    return GenerationService()


@router.post("/generate-schema")
async def generate_schema(
    body: GenerateSchemaRequest,
    service: GenerationService = Depends(get_generation_service),
):
    """Ask the LLM for a schema. The result is validated but not saved."""
    try:
        schema = await service.generate(body.prompt)
    except ServiceError as e:
        if e.status_code >= 500:
            logger.error("Schema generation failed: %s (%s)", e.message, e.details)
        raise
    except Exception as e:
        logger.exception("Schema generation failed")
        raise InternalError("Failed to generate schema", details=str(e)) from e

    return {"success": True, "schema": schema, "prompt": body.prompt}
