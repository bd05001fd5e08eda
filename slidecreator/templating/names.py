"""
Cross-kind name uniqueness.

Pipeline steps and prompt templates reference generation prompts, system
prompts, output formats and pipelines by name, so a name may be held by
only one record across all four kinds. Checked on every create and rename.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from slidecreator.errors import NameConflictError
from slidecreator.models import NamedKind

if TYPE_CHECKING:
    from slidecreator.storage import ContentStore


async def check_name_unique(
    store: "ContentStore",
    name: str,
    exclude_id: str | None = None,
) -> None:
    """
    Raise NameConflictError if any named record other than `exclude_id` holds `name`.

    Args:
        store: Content store to query
        name: Candidate name (exact, case-sensitive)
        exclude_id: Id of the record being renamed, if any
    """
    kinds = list(NamedKind)
    matches = await asyncio.gather(*(store.find_named(kind, name) for kind in kinds))

    for kind, record in zip(kinds, matches):
        if record is not None and record.id != exclude_id:
            raise NameConflictError(name, kind.label)
