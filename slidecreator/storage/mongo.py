"""
MongoDB content store for SlideCreator.

Collections:
- projects, resources: read-mostly collaborator data
- generation_prompts, system_prompts, output_formats, generation_pipelines:
  the named prompt library (unique index on `name` per collection)
- pipeline_runs: run records, saved with an optimistic `version` check
"""

from __future__ import annotations

import logging
from typing import Any

from pymongo.errors import DuplicateKeyError

from slidecreator.errors import ConcurrentUpdateError, NameConflictError
from slidecreator.models import NamedKind, PipelineRun, Project, Resource

from .base import NAMED_MODELS, NamedRecord

logger = logging.getLogger(__name__)

NAMED_COLLECTIONS: dict[NamedKind, str] = {
    NamedKind.GENERATION_PROMPT: "generation_prompts",
    NamedKind.SYSTEM_PROMPT: "system_prompts",
    NamedKind.OUTPUT_FORMAT: "output_formats",
    NamedKind.GENERATION_PIPELINE: "generation_pipelines",
}


def _to_doc(model: Any) -> dict[str, Any]:
    doc = model.model_dump(mode="json")
    doc["_id"] = doc["id"]
    return doc


def _from_doc(doc: dict[str, Any]) -> dict[str, Any]:
    doc = dict(doc)
    doc.setdefault("id", str(doc.get("_id")))
    doc.pop("_id", None)
    return doc


class MongoContentStore:
    """
    ContentStore backed by MongoDB via motor.

    The connection is established lazily on first use, or explicitly via
    connect() from the application lifespan.
    """

    def __init__(self, mongodb_url: str, database_name: str = "slidecreator"):
        """
        Initialize the store.

        Args:
            mongodb_url: MongoDB connection URL
            database_name: Database name
        """
        self._mongodb_url = mongodb_url
        self._database_name = database_name
        self._client = None
        self._db = None

    @property
    def is_connected(self) -> bool:
        return self._db is not None

    async def connect(self) -> None:
        """Connect to MongoDB and ensure indexes."""
        try:
            from motor.motor_asyncio import AsyncIOMotorClient
        except ImportError:
            raise ImportError(
                "motor package is required for MongoDB. Install with: pip install motor"
            )

        self._client = AsyncIOMotorClient(self._mongodb_url)
        self._db = self._client[self._database_name]
        logger.info(f"Connected to MongoDB database: {self._database_name}")

        for collection in NAMED_COLLECTIONS.values():
            await self._db[collection].create_index("name", unique=True)
        await self._db.resources.create_index("project_id")

    async def close(self) -> None:
        """Close MongoDB connection."""
        if self._client:
            self._client.close()
            self._client = None
            self._db = None

    async def _ensure_connected(self) -> None:
        if self._db is None:
            await self.connect()

    # ==================== Projects ====================

    async def create_project(self, project: Project) -> Project:
        await self._ensure_connected()
        await self._db.projects.insert_one(_to_doc(project))
        return project

    async def get_project(self, project_id: str) -> Project | None:
        await self._ensure_connected()
        doc = await self._db.projects.find_one({"_id": project_id})
        return Project(**_from_doc(doc)) if doc else None

    # ==================== Resources ====================

    async def create_resource(self, resource: Resource) -> Resource:
        await self._ensure_connected()
        await self._db.resources.insert_one(_to_doc(resource))
        return resource

    async def get_resource(self, resource_id: str) -> Resource | None:
        await self._ensure_connected()
        doc = await self._db.resources.find_one({"_id": resource_id})
        return Resource(**_from_doc(doc)) if doc else None

    async def get_resources(self, resource_ids: list[str]) -> list[Resource]:
        await self._ensure_connected()
        if not resource_ids:
            return []

        by_id: dict[str, Resource] = {}
        async for doc in self._db.resources.find({"_id": {"$in": list(resource_ids)}}):
            resource = Resource(**_from_doc(doc))
            by_id[resource.id] = resource

        return [by_id[rid] for rid in resource_ids if rid in by_id]

    async def list_resources(self, project_id: str) -> list[Resource]:
        await self._ensure_connected()
        cursor = self._db.resources.find({"project_id": project_id}).sort("created_at", 1)
        return [Resource(**_from_doc(doc)) async for doc in cursor]

    # ==================== Named records ====================

    def _named_collection(self, kind: NamedKind):
        return self._db[NAMED_COLLECTIONS[kind]]

    async def get_named(self, kind: NamedKind, record_id: str) -> NamedRecord | None:
        await self._ensure_connected()
        doc = await self._named_collection(kind).find_one({"_id": record_id})
        return NAMED_MODELS[kind](**_from_doc(doc)) if doc else None

    async def find_named(self, kind: NamedKind, name: str) -> NamedRecord | None:
        await self._ensure_connected()
        doc = await self._named_collection(kind).find_one({"name": name})
        return NAMED_MODELS[kind](**_from_doc(doc)) if doc else None

    async def list_named(self, kind: NamedKind) -> list[NamedRecord]:
        await self._ensure_connected()
        cursor = self._named_collection(kind).find({}).sort("created_at", 1)
        model = NAMED_MODELS[kind]
        return [model(**_from_doc(doc)) async for doc in cursor]

    async def save_named(self, kind: NamedKind, record: NamedRecord) -> NamedRecord:
        """
        Insert or replace a named record.

        Raises:
            NameConflictError: If another record of this kind took the name
                between the uniqueness check and this write
        """
        await self._ensure_connected()
        try:
            await self._named_collection(kind).replace_one(
                {"_id": record.id},
                _to_doc(record),
                upsert=True,
            )
        except DuplicateKeyError:
            raise NameConflictError(record.name, kind.label) from None
        return record

    async def delete_named(self, kind: NamedKind, record_id: str) -> bool:
        await self._ensure_connected()
        result = await self._named_collection(kind).delete_one({"_id": record_id})
        return result.deleted_count > 0

    # ==================== Pipeline runs ====================

    async def create_run(self, run: PipelineRun) -> PipelineRun:
        await self._ensure_connected()
        await self._db.pipeline_runs.insert_one(_to_doc(run))
        return run

    async def get_run(self, run_id: str) -> PipelineRun | None:
        await self._ensure_connected()
        doc = await self._db.pipeline_runs.find_one({"_id": run_id})
        return PipelineRun(**_from_doc(doc)) if doc else None

    async def save_run(self, run: PipelineRun) -> PipelineRun:
        """Compare-and-swap save keyed on the run's current version."""
        await self._ensure_connected()

        doc = _to_doc(run)
        doc.pop("_id")
        doc.pop("version")

        result = await self._db.pipeline_runs.update_one(
            {"_id": run.id, "version": run.version},
            {"$set": doc, "$inc": {"version": 1}},
        )
        if result.matched_count == 0:
            raise ConcurrentUpdateError(run.id, run.version)

        return run.model_copy(update={"version": run.version + 1})
