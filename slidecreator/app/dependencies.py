"""
Dependency Injection for SlideCreator.

Provides process-wide singleton instances of the store, the output-format
cache, the generation client and the generators. Route handlers receive
them through FastAPI `Depends`, so tests can swap any of them with
`app.dependency_overrides`.
"""
from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Optional

from slidecreator.config import AppSettings
from slidecreator.generation import GenerationClient, SingleShotGenerator
from slidecreator.pipeline import PipelineRunEngine
from slidecreator.providers.llm import OpenAILLMProvider
from slidecreator.storage import ContentStore, MemoryContentStore, MongoContentStore
from slidecreator.templating import OutputFormatCache, VariableResolver

logger = logging.getLogger(__name__)


@lru_cache()
def get_settings() -> AppSettings:
    """
    Get application settings from environment.

    Uses lru_cache for singleton pattern.
    """
    return AppSettings(
        # Service
        service_name=os.getenv("SLIDECREATOR_SERVICE_NAME", "slidecreator"),
        environment=os.getenv("SLIDECREATOR_ENVIRONMENT", "development"),
        debug=os.getenv("SLIDECREATOR_DEBUG", "false").lower() == "true",
        # Storage
        storage_backend=os.getenv("SLIDECREATOR_STORAGE_BACKEND", "mongo"),
        mongodb_url=os.getenv("SLIDECREATOR_MONGODB_URL", "mongodb://localhost:27017"),
        mongodb_database=os.getenv("SLIDECREATOR_MONGODB_DATABASE", "slidecreator"),
        # Generation
        openai_api_key=os.getenv("SLIDECREATOR_OPENAI_API_KEY"),
        generation_model=os.getenv("SLIDECREATOR_GENERATION_MODEL", "gpt-4o"),
        generation_temperature=float(os.getenv("SLIDECREATOR_GENERATION_TEMPERATURE", "0.7")),
        # Templating
        format_cache_ttl=float(os.getenv("SLIDECREATOR_FORMAT_CACHE_TTL", "30")),
    )


# Global instances (initialized on first access)
_store: Optional[ContentStore] = None
_format_cache: Optional[OutputFormatCache] = None
_generation_client: Optional[GenerationClient] = None
_run_engine: Optional[PipelineRunEngine] = None
_single_shot: Optional[SingleShotGenerator] = None


def get_store() -> ContentStore:
    """
    Get the content store.

    MongoDB by default; SLIDECREATOR_STORAGE_BACKEND=memory keeps
    everything in process.
    """
    global _store
    if _store is None:
        settings = get_settings()
        if settings.storage_backend == "memory":
            logger.warning("Using in-memory content store; data is lost on restart")
            _store = MemoryContentStore()
        else:
            _store = MongoContentStore(
                mongodb_url=settings.mongodb_url.get_secret_value(),
                database_name=settings.mongodb_database,
            )
    return _store


def get_format_cache() -> OutputFormatCache:
    """Get the shared output-format cache."""
    global _format_cache
    if _format_cache is None:
        _format_cache = OutputFormatCache(
            get_store(),
            ttl_seconds=get_settings().format_cache_ttl,
        )
    return _format_cache


def get_resolver() -> VariableResolver:
    return VariableResolver(get_format_cache())


def get_generation_client() -> GenerationClient:
    """Get the generation client wrapping the OpenAI provider."""
    global _generation_client
    if _generation_client is None:
        settings = get_settings()
        if settings.openai_api_key is None:
            logger.warning("SLIDECREATOR_OPENAI_API_KEY is not set; generation calls will fail")
        api_key = settings.openai_api_key.get_secret_value() if settings.openai_api_key else ""
        _generation_client = GenerationClient(
            OpenAILLMProvider(api_key=api_key, model=settings.generation_model),
            model=settings.generation_model,
            temperature=settings.generation_temperature,
        )
    return _generation_client


def get_run_engine() -> PipelineRunEngine:
    global _run_engine
    if _run_engine is None:
        _run_engine = PipelineRunEngine(
            store=get_store(),
            resolver=get_resolver(),
            client=get_generation_client(),
        )
    return _run_engine


def get_single_shot_generator() -> SingleShotGenerator:
    global _single_shot
    if _single_shot is None:
        _single_shot = SingleShotGenerator(
            store=get_store(),
            resolver=get_resolver(),
            client=get_generation_client(),
        )
    return _single_shot


async def initialize_services() -> None:
    """
    Initialize all services on application startup.

    Called from FastAPI lifespan.
    """
    store = get_store()
    if isinstance(store, MongoContentStore):
        await store.connect()

    get_run_engine()
    get_single_shot_generator()


async def shutdown_services() -> None:
    """
    Cleanup all services on application shutdown.

    Called from FastAPI lifespan. Runs still executing are abandoned; a run
    is tied to the process that started it.
    """
    global _store, _format_cache, _generation_client, _run_engine, _single_shot

    if _run_engine is not None and _run_engine.active_runs:
        logger.warning(f"Shutting down with {_run_engine.active_runs} pipeline runs still executing")

    if isinstance(_store, MongoContentStore):
        await _store.close()

    _store = None
    _format_cache = None
    _generation_client = None
    _run_engine = None
    _single_shot = None
