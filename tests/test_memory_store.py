"""
Tests for MemoryContentStore.
"""
import pytest

from conftest import add_generation_prompt, add_project, add_text_resource
from slidecreator.errors import ConcurrentUpdateError
from slidecreator.models import NamedKind, PipelineRun
from slidecreator.storage import ContentStore, MemoryContentStore


def _run() -> PipelineRun:
    return PipelineRun.create(
        pipeline_id="pl1",
        project_id="p1",
        step_names=["Outline", "Deck"],
        source_resource_ids=[],
    )


class TestMemoryContentStore:
    """Tests for MemoryContentStore."""

    def test_implements_protocol(self):
        assert isinstance(MemoryContentStore(), ContentStore)

    @pytest.mark.asyncio
    async def test_get_resources_preserves_order_and_skips_missing(self, store):
        project = await add_project(store)
        first = await add_text_resource(store, project, "a.md", "A")
        second = await add_text_resource(store, project, "b.md", "B")

        resources = await store.get_resources([second.id, "missing", first.id])

        assert [r.name for r in resources] == ["b.md", "a.md"]

    @pytest.mark.asyncio
    async def test_list_resources_filters_by_project(self, store):
        acme = await add_project(store, "Acme")
        other = await add_project(store, "Other")
        await add_text_resource(store, acme, "a.md", "A")
        await add_text_resource(store, other, "b.md", "B")

        resources = await store.list_resources(acme.id)

        assert [r.name for r in resources] == ["a.md"]

    @pytest.mark.asyncio
    async def test_returned_records_are_copies(self, store):
        prompt = await add_generation_prompt(store, "Outline", "original")

        loaded = await store.get_named(NamedKind.GENERATION_PROMPT, prompt.id)
        loaded.content = "mutated"

        reloaded = await store.get_named(NamedKind.GENERATION_PROMPT, prompt.id)
        assert reloaded.content == "original"

    @pytest.mark.asyncio
    async def test_find_named_is_per_kind(self, store):
        await add_generation_prompt(store, "Outline", "body")

        assert await store.find_named(NamedKind.GENERATION_PROMPT, "Outline") is not None
        assert await store.find_named(NamedKind.SYSTEM_PROMPT, "Outline") is None

    @pytest.mark.asyncio
    async def test_delete_named(self, store):
        prompt = await add_generation_prompt(store, "Outline", "body")

        assert await store.delete_named(NamedKind.GENERATION_PROMPT, prompt.id) is True
        assert await store.delete_named(NamedKind.GENERATION_PROMPT, prompt.id) is False

    @pytest.mark.asyncio
    async def test_save_run_increments_version(self, store):
        run = await store.create_run(_run())

        saved = await store.save_run(run)

        assert saved.version == 1
        assert (await store.get_run(run.id)).version == 1

    @pytest.mark.asyncio
    async def test_stale_save_is_rejected(self, store):
        run = await store.create_run(_run())
        first_writer = run.model_copy(deep=True)
        second_writer = run.model_copy(deep=True)

        first_writer.current_step = 1
        await store.save_run(first_writer)

        second_writer.error = "lost update"
        with pytest.raises(ConcurrentUpdateError):
            await store.save_run(second_writer)

        stored = await store.get_run(run.id)
        assert stored.current_step == 1
        assert stored.error is None

    @pytest.mark.asyncio
    async def test_save_unknown_run_is_rejected(self, store):
        with pytest.raises(ConcurrentUpdateError):
            await store.save_run(_run())

    @pytest.mark.asyncio
    async def test_clear(self, store):
        project = await add_project(store)
        await store.create_run(_run())

        store.clear()

        assert await store.get_project(project.id) is None
