"""
Storage Protocol for SlideCreator.

Defines the collaborator interface the generators and the run engine use
to read and write projects, resources, the named prompt library and
pipeline runs.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from slidecreator.models import (
    GenerationPipeline,
    GenerationPrompt,
    NamedKind,
    OutputFormat,
    PipelineRun,
    Project,
    PromptRecord,
    Resource,
    SystemPrompt,
)

NamedRecord = PromptRecord | GenerationPipeline

NAMED_MODELS: dict[NamedKind, type[NamedRecord]] = {
    NamedKind.GENERATION_PROMPT: GenerationPrompt,
    NamedKind.SYSTEM_PROMPT: SystemPrompt,
    NamedKind.OUTPUT_FORMAT: OutputFormat,
    NamedKind.GENERATION_PIPELINE: GenerationPipeline,
}


@runtime_checkable
class ContentStore(Protocol):
    """
    Protocol for content stores.

    Implementations:
    - MemoryContentStore: in-process dictionaries (tests, development)
    - MongoContentStore: MongoDB via motor (production)

    Run saves are optimistic: `save_run` must reject a run whose `version`
    no longer matches the stored one with ConcurrentUpdateError, and return
    the run with its version incremented on success.
    """

    # ==================== Projects ====================

    async def create_project(self, project: Project) -> Project: ...

    async def get_project(self, project_id: str) -> Project | None: ...

    # ==================== Resources ====================

    async def create_resource(self, resource: Resource) -> Resource: ...

    async def get_resource(self, resource_id: str) -> Resource | None: ...

    async def get_resources(self, resource_ids: list[str]) -> list[Resource]:
        """Fetch resources by id, in the given order, skipping unknown ids."""
        ...

    async def list_resources(self, project_id: str) -> list[Resource]: ...

    # ==================== Named records ====================

    async def get_named(self, kind: NamedKind, record_id: str) -> NamedRecord | None: ...

    async def find_named(self, kind: NamedKind, name: str) -> NamedRecord | None:
        """Exact, case-sensitive lookup by unique name."""
        ...

    async def list_named(self, kind: NamedKind) -> list[NamedRecord]: ...

    async def save_named(self, kind: NamedKind, record: NamedRecord) -> NamedRecord:
        """Insert or replace a named record by id."""
        ...

    async def delete_named(self, kind: NamedKind, record_id: str) -> bool: ...

    # ==================== Pipeline runs ====================

    async def create_run(self, run: PipelineRun) -> PipelineRun: ...

    async def get_run(self, run_id: str) -> PipelineRun | None: ...

    async def save_run(self, run: PipelineRun) -> PipelineRun: ...
