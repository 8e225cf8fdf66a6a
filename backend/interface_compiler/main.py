"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from interface_compiler.config import settings
from interface_compiler.database import engine, init_models
from interface_compiler.errors import ServiceError
from interface_compiler.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup, release the pool on shutdown."""
    await init_models()
    yield
    await engine.dispose()


app = FastAPI(
    title="Dynamic Interface Compiler API",
    version="1.0.0",
    description="Stores UI schemas and generates them from natural language.",
    lifespan=lifespan,
)

# CORS
origins = [o.strip() for o in settings.CORS_ORIGINS.split(",")]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials="*" not in origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_response(status_code: int, error: str, details=None) -> JSONResponse:
    body = ErrorResponse(error=error, details=details)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(exclude_none=True, mode="json"),
    )


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    details = exc.details if settings.is_development else None
    return _error_response(exc.status_code, exc.message, details)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    details = [err.get("msg", "") for err in exc.errors()]
    return _error_response(400, "Validation error", details)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return _error_response(404, "Route not found")
    return _error_response(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    details = str(exc) if settings.is_development else None
    return _error_response(500, "Internal server error", details)


@app.get("/health")
async def health_check():
    """Liveness probe."""
    return {"status": "OK", "message": "Dynamic Interface Compiler API is running"}


# Register routers
from interface_compiler.routes.generate import router as generate_router
from interface_compiler.routes.schemas import router as schemas_router
app.include_router(generate_router)
app.include_router(schemas_router)


def run() -> None:
    """Serve the app with uvicorn on the configured port."""
    import uvicorn

    configure_logging()
    logger.info("Server running on port %d", settings.PORT)
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
