"""
Named prompt-library schemas.

Generation prompts, system prompts, output formats, and generation
pipelines share one namespace: pipeline steps and prompt templates refer
to them by name, so a name may be held by at most one record across all
four kinds.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, Field, model_validator


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _new_id() -> str:
    return uuid4().hex


class NamedKind(str, Enum):
    """The four kinds of records sharing the name namespace."""

    GENERATION_PROMPT = "generation_prompt"
    SYSTEM_PROMPT = "system_prompt"
    OUTPUT_FORMAT = "output_format"
    GENERATION_PIPELINE = "generation_pipeline"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")


class PromptRecord(BaseModel):
    """Common shape of generation prompts, system prompts and output formats."""

    id: str = Field(default_factory=_new_id)
    name: str
    content: str = ""
    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime = Field(default_factory=_utc_now)


class GenerationPrompt(PromptRecord):
    """User-message template sent to the generation service."""


class SystemPrompt(PromptRecord):
    """System-message template sent to the generation service."""


class OutputFormat(PromptRecord):
    """Named snippet insertable into prompts via `{{name}}`."""


# =============================================================================
# Pipelines
# =============================================================================


class StepSource(BaseModel):
    """
    What text feeds into a step's generation call.

    - project_resources: every resource the run was launched with
    - step_output: the raw output captured for step `step`
    - all_step_outputs: every prior step's raw output, in step order
    """

    type: Literal["project_resources", "step_output", "all_step_outputs"]
    step: int | None = Field(None, ge=0, description="Target step index for step_output")

    @model_validator(mode="after")
    def _require_step_index(self) -> "StepSource":
        if self.type == "step_output" and self.step is None:
            raise ValueError("step_output source requires a step index")
        return self


class PipelineStep(BaseModel):
    """
    One unit of a pipeline: a prompt pair, sources and a persistence decision.

    Each prompt is given either by name (resolved at run time) or inline.
    When both are set the inline body wins; when neither is set the step
    fails at run time.
    """

    name: str
    generation_prompt: str | None = None
    generation_prompt_inline: str | None = None
    system_prompt: str | None = None
    system_prompt_inline: str | None = None
    sources: list[StepSource] = Field(default_factory=list)
    save_to_project: bool = False
    output_name_template: str | None = None
    is_final: bool = False


class PipelineDefinition(BaseModel):
    """Ordered list of steps."""

    steps: list[PipelineStep] = Field(default_factory=list)


class GenerationPipeline(BaseModel):
    """A named pipeline definition."""

    id: str = Field(default_factory=_new_id)
    name: str
    definition: PipelineDefinition = Field(default_factory=PipelineDefinition)
    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime = Field(default_factory=_utc_now)
