"""
Pytest configuration and fixtures for SlideCreator tests.
"""

import json
import sys
from pathlib import Path

import pytest

# Add the repository root to path for imports
# This allows `from slidecreator.pipeline import ...` to work
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from slidecreator.generation import GenerationClient, SingleShotGenerator  # noqa: E402
from slidecreator.models import (  # noqa: E402
    GenerationPipeline,
    GenerationPrompt,
    NamedKind,
    OutputFormat,
    PipelineDefinition,
    Project,
    Resource,
    SystemPrompt,
    TextContent,
)
from slidecreator.pipeline import PipelineRunEngine  # noqa: E402
from slidecreator.providers.llm import LLMConfig, LLMResponse, Message  # noqa: E402
from slidecreator.storage import MemoryContentStore  # noqa: E402
from slidecreator.templating import OutputFormatCache, VariableResolver  # noqa: E402


class ScriptedLLMProvider:
    """
    Mock LLM provider returning queued responses in order.

    A queued Exception is raised instead of returned. Every call is recorded
    as (messages, config) for assertions.
    """

    def __init__(self, responses=None):
        self._responses = list(responses or [])
        self.calls: list[tuple[list[Message], LLMConfig | None]] = []

    @property
    def name(self) -> str:
        return "scripted"

    def queue(self, *responses) -> None:
        self._responses.extend(responses)

    async def complete(
        self,
        messages: list[Message],
        config: LLMConfig | None = None,
    ) -> LLMResponse:
        self.calls.append((messages, config))
        item = self._responses.pop(0) if self._responses else "{}"
        if isinstance(item, Exception):
            raise item
        return LLMResponse(content=item, model="mock-model", provider=self.name)

    def system_message(self, call_index: int) -> str:
        return self.calls[call_index][0][0].content

    def user_message(self, call_index: int) -> str:
        return self.calls[call_index][0][1].content


SAMPLE_PRESENTATION = {
    "title": "Quarterly Review",
    "slides": [
        {"title": "Intro", "blocks": []},
        {"title": "Numbers", "blocks": []},
    ],
}


@pytest.fixture
def sample_presentation_json():
    """Raw generation output for a two-slide presentation."""
    return json.dumps(SAMPLE_PRESENTATION)


@pytest.fixture
def store():
    return MemoryContentStore()


@pytest.fixture
def provider():
    return ScriptedLLMProvider()


@pytest.fixture
def format_cache(store):
    return OutputFormatCache(store, ttl_seconds=30)


@pytest.fixture
def resolver(format_cache):
    return VariableResolver(format_cache)


@pytest.fixture
def generation_client(provider):
    return GenerationClient(provider, model="gpt-4o", temperature=0.7)


@pytest.fixture
def engine(store, resolver, generation_client):
    return PipelineRunEngine(store=store, resolver=resolver, client=generation_client)


@pytest.fixture
def single_shot(store, resolver, generation_client):
    return SingleShotGenerator(store=store, resolver=resolver, client=generation_client)


# =============================================================================
# Seeding helpers (async, call from inside tests)
# =============================================================================


async def add_project(store, name: str = "Acme") -> Project:
    return await store.create_project(Project(name=name))


async def add_text_resource(store, project: Project, name: str, text: str) -> Resource:
    return await store.create_resource(
        Resource(name=name, project_id=project.id, content=TextContent(text=text))
    )


async def add_generation_prompt(store, name: str, content: str) -> GenerationPrompt:
    return await store.save_named(
        NamedKind.GENERATION_PROMPT, GenerationPrompt(name=name, content=content)
    )


async def add_system_prompt(store, name: str, content: str) -> SystemPrompt:
    return await store.save_named(NamedKind.SYSTEM_PROMPT, SystemPrompt(name=name, content=content))


async def add_output_format(store, name: str, content: str) -> OutputFormat:
    return await store.save_named(NamedKind.OUTPUT_FORMAT, OutputFormat(name=name, content=content))


async def add_pipeline(store, name: str, steps: list[dict]) -> GenerationPipeline:
    pipeline = GenerationPipeline(
        name=name,
        definition=PipelineDefinition.model_validate({"steps": steps}),
    )
    return await store.save_named(NamedKind.GENERATION_PIPELINE, pipeline)
