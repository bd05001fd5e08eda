"""
Prompt library endpoints.

CRUD for generation prompts, system prompts, output formats and
generation pipelines. Names are unique across all four kinds; every
create and rename is checked. Writes to output formats invalidate the
output-format cache so `{{name}}` substitution picks them up.
"""

import logging
from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from slidecreator.app.dependencies import get_format_cache, get_store
from slidecreator.errors import NotFoundError
from slidecreator.models import (
    GenerationPipeline,
    NamedKind,
    PipelineDefinition,
)
from slidecreator.storage import NAMED_MODELS, ContentStore
from slidecreator.templating import OutputFormatCache, check_name_unique

logger = logging.getLogger(__name__)


class PromptCreate(BaseModel):
    name: str | None = None
    content: str | None = None


class PromptUpdate(BaseModel):
    name: str | None = None
    content: str | None = None


class PipelineCreate(BaseModel):
    name: str | None = None
    definition: PipelineDefinition | None = None


class PipelineUpdate(BaseModel):
    name: str | None = None
    definition: PipelineDefinition | None = None


def _after_write(kind: NamedKind, cache: OutputFormatCache) -> None:
    if kind is NamedKind.OUTPUT_FORMAT:
        cache.invalidate()


def build_prompt_router(kind: NamedKind, prefix: str, default_name: str) -> APIRouter:
    """Create the CRUD router for one prompt-like kind."""
    router = APIRouter(prefix=prefix, tags=[prefix.strip("/")])
    model = NAMED_MODELS[kind]

    @router.get("")
    async def list_records(store: ContentStore = Depends(get_store)) -> list[dict[str, Any]]:
        records = await store.list_named(kind)
        return [r.model_dump(mode="json") for r in records]

    @router.post("", status_code=201)
    async def create_record(
        payload: PromptCreate,
        store: ContentStore = Depends(get_store),
        cache: OutputFormatCache = Depends(get_format_cache),
    ) -> dict[str, Any]:
        name = payload.name or default_name
        await check_name_unique(store, name)
        record = await store.save_named(kind, model(name=name, content=payload.content or ""))
        _after_write(kind, cache)
        logger.info(f"Created {kind.label} '{name}' ({record.id})")
        return record.model_dump(mode="json")

    @router.get("/{record_id}")
    async def get_record(
        record_id: str,
        store: ContentStore = Depends(get_store),
    ) -> dict[str, Any]:
        record = await store.get_named(kind, record_id)
        if record is None:
            raise NotFoundError(kind.label, record_id)
        return record.model_dump(mode="json")

    @router.patch("/{record_id}")
    async def update_record(
        record_id: str,
        payload: PromptUpdate,
        store: ContentStore = Depends(get_store),
        cache: OutputFormatCache = Depends(get_format_cache),
    ) -> dict[str, Any]:
        record = await store.get_named(kind, record_id)
        if record is None:
            raise NotFoundError(kind.label, record_id)

        if payload.name is not None:
            await check_name_unique(store, payload.name, exclude_id=record_id)
            record.name = payload.name
        if payload.content is not None:
            record.content = payload.content
        record.updated_at = datetime.now(UTC)

        await store.save_named(kind, record)
        _after_write(kind, cache)
        return record.model_dump(mode="json")

    @router.delete("/{record_id}")
    async def delete_record(
        record_id: str,
        store: ContentStore = Depends(get_store),
        cache: OutputFormatCache = Depends(get_format_cache),
    ) -> dict[str, bool]:
        if not await store.delete_named(kind, record_id):
            raise NotFoundError(kind.label, record_id)
        _after_write(kind, cache)
        return {"success": True}

    return router


generation_prompts_router = build_prompt_router(
    NamedKind.GENERATION_PROMPT, "/generation-prompts", "New Generation Prompt"
)
system_prompts_router = build_prompt_router(
    NamedKind.SYSTEM_PROMPT, "/system-prompts", "New System Prompt"
)
output_formats_router = build_prompt_router(
    NamedKind.OUTPUT_FORMAT, "/output-formats", "New Format"
)


# =============================================================================
# Generation pipelines
# =============================================================================

pipelines_router = APIRouter(prefix="/generation-pipelines", tags=["generation-pipelines"])

_PIPELINE = NamedKind.GENERATION_PIPELINE


@pipelines_router.get("")
async def list_pipelines(store: ContentStore = Depends(get_store)) -> list[dict[str, Any]]:
    records = await store.list_named(_PIPELINE)
    return [r.model_dump(mode="json") for r in records]


@pipelines_router.post("", status_code=201)
async def create_pipeline(
    payload: PipelineCreate,
    store: ContentStore = Depends(get_store),
) -> dict[str, Any]:
    name = payload.name or "New Pipeline"
    await check_name_unique(store, name)
    pipeline = GenerationPipeline(
        name=name,
        definition=payload.definition or PipelineDefinition(),
    )
    await store.save_named(_PIPELINE, pipeline)
    logger.info(f"Created generation pipeline '{name}' with {len(pipeline.definition.steps)} steps")
    return pipeline.model_dump(mode="json")


@pipelines_router.get("/{pipeline_id}")
async def get_pipeline(
    pipeline_id: str,
    store: ContentStore = Depends(get_store),
) -> dict[str, Any]:
    pipeline = await store.get_named(_PIPELINE, pipeline_id)
    if pipeline is None:
        raise NotFoundError("pipeline", pipeline_id)
    return pipeline.model_dump(mode="json")


@pipelines_router.patch("/{pipeline_id}")
async def update_pipeline(
    pipeline_id: str,
    payload: PipelineUpdate,
    store: ContentStore = Depends(get_store),
) -> dict[str, Any]:
    pipeline = await store.get_named(_PIPELINE, pipeline_id)
    if pipeline is None:
        raise NotFoundError("pipeline", pipeline_id)

    if payload.name is not None:
        await check_name_unique(store, payload.name, exclude_id=pipeline_id)
        pipeline.name = payload.name
    if payload.definition is not None:
        pipeline.definition = payload.definition
    pipeline.updated_at = datetime.now(UTC)

    await store.save_named(_PIPELINE, pipeline)
    return pipeline.model_dump(mode="json")


@pipelines_router.delete("/{pipeline_id}")
async def delete_pipeline(
    pipeline_id: str,
    store: ContentStore = Depends(get_store),
) -> dict[str, bool]:
    if not await store.delete_named(_PIPELINE, pipeline_id):
        raise NotFoundError("pipeline", pipeline_id)
    return {"success": True}
