"""
Variable substitution for prompt text.

`{{name}}` placeholders are replaced with the content of the output format
holding exactly that name (case-sensitive, no trimming). Placeholders with
no matching format are left untouched so pipelines can be authored before
every referenced format exists.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .cache import OutputFormatCache

PLACEHOLDER_PATTERN = re.compile(r"\{\{([^}]+)\}\}")
OUTPUT_NAME_PATTERN = re.compile(r"\{\{(\w+)\}\}")


class VariableResolver:
    """
    Expands `{{name}}` placeholders from the output-format cache.

    Example:
        resolver = VariableResolver(cache)
        text = await resolver.resolve("Respond using {{slide_schema}}")
    """

    def __init__(self, cache: "OutputFormatCache"):
        self._cache = cache

    @property
    def cache(self) -> "OutputFormatCache":
        return self._cache

    async def resolve(self, text: str) -> str:
        """Substitute every known placeholder in `text`."""
        if "{{" not in text:
            return text

        formats = await self._cache.get_formats()
        return PLACEHOLDER_PATTERN.sub(
            lambda match: formats.get(match.group(1), match.group(0)),
            text,
        )


def render_output_name(template: str | None, fallback: str, values: dict[str, str]) -> str:
    """
    Render a resource-name template such as "{{project}} - {{step}} {{timestamp}}".

    Unknown keys render as empty text. Returns `fallback` when no template
    is given.
    """
    if not template:
        return fallback
    return OUTPUT_NAME_PATTERN.sub(lambda match: values.get(match.group(1), ""), template)


def compact_timestamp(now: datetime | None = None) -> str:
    """Local-time stamp used in generated resource names, e.g. "250314:09:05:07"."""
    return (now or datetime.now()).strftime("%y%m%d:%H:%M:%S")
