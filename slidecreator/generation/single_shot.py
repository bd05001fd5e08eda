"""
Single-shot presentation generation.

One request, one completion, one presentation resource. The caller waits
for the whole generation; there is no polling path.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import TYPE_CHECKING

from slidecreator.errors import MalformedOutputError, NotFoundError
from slidecreator.models import (
    NamedKind,
    PresentationContent,
    Resource,
    is_presentation_document,
    stamp_presentation_format,
)
from slidecreator.templating import compact_timestamp

from .sources import render_resources

if TYPE_CHECKING:
    from slidecreator.storage import ContentStore
    from slidecreator.templating import VariableResolver

    from .client import GenerationClient

logger = logging.getLogger(__name__)


class SingleShotGenerator:
    """
    Generates a presentation from source resources and a prompt pair.

    The response must be a JSON object with a `slides` array; anything else
    is rejected with MalformedOutputError carrying the raw text.
    """

    def __init__(
        self,
        store: "ContentStore",
        resolver: "VariableResolver",
        client: "GenerationClient",
    ):
        self._store = store
        self._resolver = resolver
        self._client = client

    async def generate(
        self,
        *,
        project_id: str,
        source_resource_ids: list[str],
        generation_prompt_id: str,
        system_prompt_id: str,
        output_folder_id: str | None = None,
        output_name: str | None = None,
    ) -> Resource:
        """
        Generate and persist a presentation resource.

        Raises:
            NotFoundError: If either prompt does not exist
            GenerationError: If the generation service fails or returns nothing
            MalformedOutputError: If the output is not a presentation document
        """
        sources, generation_prompt, system_prompt = await asyncio.gather(
            self._store.get_resources(source_resource_ids),
            self._store.get_named(NamedKind.GENERATION_PROMPT, generation_prompt_id),
            self._store.get_named(NamedKind.SYSTEM_PROMPT, system_prompt_id),
        )

        if generation_prompt is None:
            raise NotFoundError("generation prompt", generation_prompt_id)
        if system_prompt is None:
            raise NotFoundError("system prompt", system_prompt_id)

        user_content = render_resources(sources)
        user_content += await self._resolver.resolve(generation_prompt.content)
        system_content = await self._resolver.resolve(system_prompt.content)

        logger.info(
            f"Single-shot generation: project={project_id}, sources={len(sources)}, "
            f"prompt='{generation_prompt.name}'"
        )
        raw_text = await self._client.generate(system_content, user_content)

        try:
            document = json.loads(raw_text)
        except json.JSONDecodeError:
            raise MalformedOutputError(
                "Failed to parse generation output as JSON",
                raw_response=raw_text,
            ) from None

        if not is_presentation_document(document):
            raise MalformedOutputError(
                "Invalid presentation structure: missing slides array",
                raw_response=raw_text,
            )

        resource = Resource(
            name=output_name or f"Generated - {compact_timestamp()}",
            project_id=project_id,
            folder_id=output_folder_id or None,
            content=PresentationContent(document=stamp_presentation_format(document)),
        )
        await self._store.create_resource(resource)

        logger.info(
            f"Created presentation '{resource.name}' ({resource.id}) "
            f"with {len(document['slides'])} slides"
        )
        return resource
