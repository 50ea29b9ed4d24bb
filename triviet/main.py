import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv


# .env must be loaded before settings are first read
PROJECT_DIR = Path(__file__).parent.parent
load_dotenv(PROJECT_DIR / ".env")

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from pydantic import ValidationError as PydanticValidationError

from .ai.errors import AIRuntimeError
from .config import env, get_settings
from .config.logging import setup_logging
from .exceptions import ResourceNotFoundError, StorageQuotaExceededError, ValidationError
from .exercises.router import router as exercises_router
from .learning_paths.router import router as learning_paths_router
from .library.router import router as library_router
from .middleware.error_handlers import (
    handle_ai_runtime_errors,
    handle_not_found_errors,
    handle_storage_errors,
    handle_unexpected_errors,
    handle_validation_errors,
)
from .mindmaps.router import router as mindmaps_router
from .storage.exceptions import StorageError


setup_logging(get_settings().LOG_LEVEL)
logger = logging.getLogger(__name__)


def _register_routers(app: FastAPI) -> None:
    app.include_router(mindmaps_router)
    app.include_router(library_router)
    app.include_router(learning_paths_router)
    app.include_router(exercises_router)


def _register_exception_handlers(app: FastAPI) -> None:
    """Map domain, storage and AI exceptions onto the shared error response format."""
    app.add_exception_handler(ResourceNotFoundError, handle_not_found_errors)
    for validation_error in (RequestValidationError, PydanticValidationError, ValidationError):
        app.add_exception_handler(validation_error, handle_validation_errors)
    for storage_error in (StorageQuotaExceededError, StorageError):
        app.add_exception_handler(storage_error, handle_storage_errors)
    app.add_exception_handler(AIRuntimeError, handle_ai_runtime_errors)
    app.add_exception_handler(Exception, handle_unexpected_errors)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    settings = get_settings()
    try:
        logger.info("AI generation uses %s", settings.primary_llm_model)
    except ValueError:
        # Layout and rendering work without a model; generation endpoints answer 503
        logger.warning("PRIMARY_LLM_MODEL is not set; AI endpoints will fail")

    storage_path = Path(settings.LOCAL_STORAGE_PATH).resolve()
    storage_path.mkdir(parents=True, exist_ok=True)
    logger.info("Documents are stored under %s", storage_path)
    yield
    logger.info("Shutdown complete")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Trí Việt API",
        description="Mind map layout, AI summaries, exercises, saved library and learning paths",
        version="0.1.0",
        debug=settings.DEBUG,
        lifespan=None if settings.ENVIRONMENT == "test" else lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:5173", "http://127.0.0.1:5173"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    # Rendered SVG of a large mind map compresses well
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    _register_exception_handlers(app)

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    _register_routers(app)
    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=env("API_HOST", "127.0.0.1"), port=int(env("API_PORT", 8080)))
