"""
In-memory content store.

Stores everything in dictionaries. Useful for unit tests and for running
the service without MongoDB. Records are copied on the way in and out so
callers never share mutable state with the store.

Usage:
    store = MemoryContentStore()
    project = await store.create_project(Project(name="Q3 Review"))
    run = await store.create_run(PipelineRun.create(...))
"""

from __future__ import annotations

import asyncio

from slidecreator.errors import ConcurrentUpdateError
from slidecreator.models import NamedKind, PipelineRun, Project, Resource

from .base import NamedRecord


class MemoryContentStore:
    """In-memory ContentStore implementation."""

    def __init__(self):
        self._projects: dict[str, Project] = {}
        self._resources: dict[str, Resource] = {}
        self._named: dict[NamedKind, dict[str, NamedRecord]] = {kind: {} for kind in NamedKind}
        self._runs: dict[str, PipelineRun] = {}
        self._run_lock = asyncio.Lock()

    # ==================== Projects ====================

    async def create_project(self, project: Project) -> Project:
        self._projects[project.id] = project.model_copy(deep=True)
        return project

    async def get_project(self, project_id: str) -> Project | None:
        project = self._projects.get(project_id)
        return project.model_copy(deep=True) if project else None

    # ==================== Resources ====================

    async def create_resource(self, resource: Resource) -> Resource:
        self._resources[resource.id] = resource.model_copy(deep=True)
        return resource

    async def get_resource(self, resource_id: str) -> Resource | None:
        resource = self._resources.get(resource_id)
        return resource.model_copy(deep=True) if resource else None

    async def get_resources(self, resource_ids: list[str]) -> list[Resource]:
        return [
            self._resources[rid].model_copy(deep=True)
            for rid in resource_ids
            if rid in self._resources
        ]

    async def list_resources(self, project_id: str) -> list[Resource]:
        return [
            r.model_copy(deep=True)
            for r in self._resources.values()
            if r.project_id == project_id
        ]

    # ==================== Named records ====================

    async def get_named(self, kind: NamedKind, record_id: str) -> NamedRecord | None:
        record = self._named[kind].get(record_id)
        return record.model_copy(deep=True) if record else None

    async def find_named(self, kind: NamedKind, name: str) -> NamedRecord | None:
        for record in self._named[kind].values():
            if record.name == name:
                return record.model_copy(deep=True)
        return None

    async def list_named(self, kind: NamedKind) -> list[NamedRecord]:
        records = sorted(self._named[kind].values(), key=lambda r: r.created_at)
        return [r.model_copy(deep=True) for r in records]

    async def save_named(self, kind: NamedKind, record: NamedRecord) -> NamedRecord:
        self._named[kind][record.id] = record.model_copy(deep=True)
        return record

    async def delete_named(self, kind: NamedKind, record_id: str) -> bool:
        return self._named[kind].pop(record_id, None) is not None

    # ==================== Pipeline runs ====================

    async def create_run(self, run: PipelineRun) -> PipelineRun:
        async with self._run_lock:
            self._runs[run.id] = run.model_copy(deep=True)
        return run

    async def get_run(self, run_id: str) -> PipelineRun | None:
        run = self._runs.get(run_id)
        return run.model_copy(deep=True) if run else None

    async def save_run(self, run: PipelineRun) -> PipelineRun:
        async with self._run_lock:
            stored = self._runs.get(run.id)
            if stored is None or stored.version != run.version:
                raise ConcurrentUpdateError(run.id, run.version)
            saved = run.model_copy(update={"version": run.version + 1}, deep=True)
            self._runs[run.id] = saved
        return saved.model_copy(deep=True)

    def clear(self) -> None:
        """Clear all stored data."""
        self._projects.clear()
        self._resources.clear()
        for records in self._named.values():
            records.clear()
        self._runs.clear()
