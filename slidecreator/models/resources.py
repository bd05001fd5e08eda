"""
Project and resource schemas.

Resource content is a tagged union: plain text (source files) or a
structured presentation document. The resource type is derived from the
content variant rather than stored separately.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Annotated, Any, Literal, Union
from uuid import uuid4

from pydantic import BaseModel, Field

PRESENTATION_FORMAT = "slidecreator/presentation/v1"


def _utc_now() -> datetime:
    """Get current UTC time with timezone awareness."""
    return datetime.now(UTC)


def _new_id() -> str:
    return uuid4().hex


class TextContent(BaseModel):
    """Plain-text resource content."""

    kind: Literal["text"] = "text"
    text: str = ""


class PresentationContent(BaseModel):
    """Structured presentation document with a `slides` array."""

    kind: Literal["presentation"] = "presentation"
    document: dict[str, Any] = Field(default_factory=dict)


ResourceContent = Annotated[
    Union[TextContent, PresentationContent],
    Field(discriminator="kind"),
]


class Project(BaseModel):
    """A project groups resources. Read-only from this service's side."""

    id: str = Field(default_factory=_new_id)
    name: str
    created_at: datetime = Field(default_factory=_utc_now)


class Resource(BaseModel):
    """A stored document inside a project."""

    id: str = Field(default_factory=_new_id)
    name: str
    project_id: str
    folder_id: str | None = None
    content: ResourceContent
    created_at: datetime = Field(default_factory=_utc_now)

    @property
    def resource_type(self) -> str:
        if isinstance(self.content, PresentationContent):
            return "presentation"
        return "source_file"

    @property
    def is_presentation(self) -> bool:
        return isinstance(self.content, PresentationContent)

    def render_text(self) -> str:
        """Textual form used when feeding this resource to a generation call."""
        if isinstance(self.content, TextContent):
            return self.content.text
        return json.dumps(self.content.document, indent=2)

    def to_api_dict(self) -> dict[str, Any]:
        data = self.model_dump(mode="json")
        data["resource_type"] = self.resource_type
        return data


def is_presentation_document(value: Any) -> bool:
    """Structural check: an object whose `slides` field is an array."""
    return isinstance(value, dict) and isinstance(value.get("slides"), list)


def stamp_presentation_format(document: dict[str, Any]) -> dict[str, Any]:
    """Add the format-version marker if the document does not carry one."""
    if not document.get("_format"):
        document["_format"] = PRESENTATION_FORMAT
    return document


def content_from_generation(raw_text: str) -> ResourceContent:
    """
    Classify generated text for persistence.

    Valid JSON with a `slides` array becomes presentation content (stamped
    with the format marker). Anything else, including text that is not
    JSON at all, is kept verbatim as text content.
    """
    try:
        parsed = json.loads(raw_text)
    except json.JSONDecodeError:
        return TextContent(text=raw_text)

    if is_presentation_document(parsed):
        return PresentationContent(document=stamp_presentation_format(parsed))
    return TextContent(text=raw_text)
