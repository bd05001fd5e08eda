"""
SlideCreator - AI presentation generation service

FastAPI application entry point.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from slidecreator import __version__
from slidecreator.app.api import (
    generate_router,
    generation_prompts_router,
    output_formats_router,
    pipeline_runs_router,
    pipelines_router,
    system_prompts_router,
)
from slidecreator.app.dependencies import (
    get_settings,
    get_store,
    initialize_services,
    shutdown_services,
)
from slidecreator.errors import SlideCreatorError
from slidecreator.storage import MongoContentStore

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown events.
    """
    logger.info("Starting SlideCreator services...")
    try:
        await initialize_services()
        logger.info("SlideCreator services initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize services: {e}", exc_info=True)
        raise

    yield

    logger.info("Shutting down SlideCreator services...")
    try:
        await shutdown_services()
        logger.info("SlideCreator services shut down successfully")
    except Exception as e:
        logger.error(f"Error during shutdown: {e}", exc_info=True)


settings = get_settings()

app = FastAPI(
    title="SlideCreator",
    description="Assemble presentations from source documents with single-shot or multi-step AI generation",
    version=__version__,
    lifespan=lifespan,
    debug=settings.debug,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SlideCreatorError)
async def slidecreator_error_handler(request: Request, exc: SlideCreatorError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


app.include_router(pipeline_runs_router, prefix="/api")
app.include_router(generate_router, prefix="/api")
app.include_router(generation_prompts_router, prefix="/api")
app.include_router(system_prompts_router, prefix="/api")
app.include_router(output_formats_router, prefix="/api")
app.include_router(pipelines_router, prefix="/api")


@app.get("/", tags=["root"])
async def root() -> dict[str, str]:
    """Root endpoint with service info."""
    return {
        "service": "slidecreator",
        "version": __version__,
        "status": "running",
    }


@app.get("/health", tags=["health"])
async def health_check() -> dict[str, Any]:
    """Health check endpoint with storage status."""
    try:
        store = get_store()
        if isinstance(store, MongoContentStore):
            database = "connected" if store.is_connected else "disconnected"
        else:
            database = "memory"
        return {"status": "healthy", "database": database}
    except Exception as e:
        return {"status": "unhealthy", "error": str(e)}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "slidecreator.app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
