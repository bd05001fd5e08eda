"""
Tests for prompt templating.

Tests OutputFormatCache, VariableResolver, output-name rendering and
cross-kind name uniqueness.
"""
import re
from datetime import datetime
from unittest.mock import AsyncMock

import pytest

from conftest import (
    add_generation_prompt,
    add_output_format,
    add_pipeline,
    add_system_prompt,
)
from slidecreator.errors import NameConflictError
from slidecreator.models import NamedKind, OutputFormat
from slidecreator.templating import (
    OutputFormatCache,
    VariableResolver,
    check_name_unique,
    compact_timestamp,
    render_output_name,
)


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class TestOutputFormatCache:
    """Tests for OutputFormatCache."""

    @pytest.mark.asyncio
    async def test_loads_all_formats(self, store):
        await add_output_format(store, "schema", "SCHEMA BODY")
        await add_output_format(store, "tone", "Be concise.")

        cache = OutputFormatCache(store)
        formats = await cache.get_formats()

        assert formats == {"schema": "SCHEMA BODY", "tone": "Be concise."}
        assert cache.is_loaded

    @pytest.mark.asyncio
    async def test_serves_cached_mapping_within_ttl(self, store):
        clock = FakeClock()
        cache = OutputFormatCache(store, ttl_seconds=30, clock=clock)
        await add_output_format(store, "schema", "v1")
        await cache.get_formats()

        # Written behind the cache's back: not visible until the TTL expires
        await add_output_format(store, "late", "late content")
        clock.now += 29

        formats = await cache.get_formats()
        assert "late" not in formats

    @pytest.mark.asyncio
    async def test_reloads_after_ttl(self, store):
        clock = FakeClock()
        cache = OutputFormatCache(store, ttl_seconds=30, clock=clock)
        await cache.get_formats()

        await add_output_format(store, "late", "late content")
        clock.now += 30

        formats = await cache.get_formats()
        assert formats["late"] == "late content"

    @pytest.mark.asyncio
    async def test_invalidate_forces_reload(self, store):
        clock = FakeClock()
        cache = OutputFormatCache(store, ttl_seconds=30, clock=clock)
        await cache.get_formats()

        await add_output_format(store, "fresh", "fresh content")
        cache.invalidate()

        assert not cache.is_loaded
        formats = await cache.get_formats()
        assert formats["fresh"] == "fresh content"

    @pytest.mark.asyncio
    async def test_instances_are_isolated(self, store):
        first = OutputFormatCache(store)
        second = OutputFormatCache(store)
        await first.get_formats()

        assert first.is_loaded
        assert not second.is_loaded


class TestVariableResolver:
    """Tests for VariableResolver."""

    @pytest.mark.asyncio
    async def test_substitutes_known_names(self, store, resolver):
        await add_output_format(store, "slide_schema", '{"slides": []}')

        result = await resolver.resolve("Return JSON like {{slide_schema}} please")

        assert result == 'Return JSON like {"slides": []} please'

    @pytest.mark.asyncio
    async def test_substitutes_every_occurrence(self, store, resolver):
        await add_output_format(store, "x", "X")

        assert await resolver.resolve("{{x}}-{{x}}-{{x}}") == "X-X-X"

    @pytest.mark.asyncio
    async def test_leaves_unknown_placeholders(self, resolver):
        text = "Use {{missing_format}} here"

        assert await resolver.resolve(text) == text

    @pytest.mark.asyncio
    async def test_matching_is_case_sensitive(self, store, resolver):
        await add_output_format(store, "Schema", "BODY")

        assert await resolver.resolve("{{schema}}") == "{{schema}}"
        assert await resolver.resolve("{{Schema}}") == "BODY"

    @pytest.mark.asyncio
    async def test_names_are_not_trimmed(self, store, resolver):
        await add_output_format(store, "schema", "BODY")

        assert await resolver.resolve("{{ schema }}") == "{{ schema }}"

    @pytest.mark.asyncio
    async def test_fast_path_skips_cache(self):
        cache = AsyncMock(spec=OutputFormatCache)
        resolver = VariableResolver(cache)

        result = await resolver.resolve("No placeholders at all")

        assert result == "No placeholders at all"
        cache.get_formats.assert_not_called()

    @pytest.mark.asyncio
    async def test_idempotent_on_unresolved_text(self, store, resolver):
        await add_output_format(store, "known", "K")
        text = "{{known}} and {{unknown}} and {{also missing}}"

        once = await resolver.resolve(text)
        twice = await resolver.resolve(once)

        assert once == "K and {{unknown}} and {{also missing}}"
        assert twice == once

    @pytest.mark.asyncio
    async def test_content_is_not_expanded_recursively(self, store, resolver):
        await add_output_format(store, "outer", "contains {{inner}}")
        await add_output_format(store, "inner", "INNER")

        assert await resolver.resolve("{{outer}}") == "contains {{inner}}"


class TestRenderOutputName:
    """Tests for render_output_name and compact_timestamp."""

    def test_fallback_without_template(self):
        assert render_output_name(None, "Acme - Outline", {}) == "Acme - Outline"
        assert render_output_name("", "Acme - Outline", {}) == "Acme - Outline"

    def test_substitutes_values(self):
        name = render_output_name(
            "{{project}}: {{step}} @ {{timestamp}}",
            "unused",
            {"project": "Acme", "step": "Outline", "timestamp": "250101:10:00:00"},
        )
        assert name == "Acme: Outline @ 250101:10:00:00"

    def test_unknown_keys_render_empty(self):
        assert render_output_name("{{project}}-{{nope}}", "x", {"project": "Acme"}) == "Acme-"

    def test_compact_timestamp_format(self):
        assert compact_timestamp(datetime(2025, 3, 14, 9, 5, 7)) == "250314:09:05:07"

    def test_compact_timestamp_defaults_to_now(self):
        assert re.fullmatch(r"\d{6}:\d{2}:\d{2}:\d{2}", compact_timestamp())


class TestCheckNameUnique:
    """Tests for cross-kind name uniqueness."""

    @pytest.mark.asyncio
    async def test_free_name_passes(self, store):
        await check_name_unique(store, "Unused")

    @pytest.mark.asyncio
    async def test_system_prompt_conflicts_with_generation_prompt(self, store):
        await add_generation_prompt(store, "Foo", "body")

        with pytest.raises(NameConflictError) as exc_info:
            await check_name_unique(store, "Foo")

        assert str(exc_info.value) == 'Name "Foo" is already used by a generation prompt'

    @pytest.mark.asyncio
    async def test_rename_to_pipeline_name_conflicts(self, store):
        await add_pipeline(store, "Deck Builder", [])
        fmt = await add_output_format(store, "schema", "body")

        with pytest.raises(NameConflictError, match="generation pipeline"):
            await check_name_unique(store, "Deck Builder", exclude_id=fmt.id)

    @pytest.mark.asyncio
    async def test_rename_to_own_name_passes(self, store):
        prompt = await add_system_prompt(store, "Narrator", "body")

        await check_name_unique(store, "Narrator", exclude_id=prompt.id)

    @pytest.mark.asyncio
    async def test_check_is_case_sensitive(self, store):
        await store.save_named(NamedKind.OUTPUT_FORMAT, OutputFormat(name="schema"))

        await check_name_unique(store, "Schema")
