"""
SlideCreator data models.

Pydantic schemas for projects, resources, the named prompt library,
pipelines and pipeline runs.
"""

from .prompts import (
    GenerationPipeline,
    GenerationPrompt,
    NamedKind,
    OutputFormat,
    PipelineDefinition,
    PipelineStep,
    PromptRecord,
    StepSource,
    SystemPrompt,
)
from .resources import (
    PRESENTATION_FORMAT,
    PresentationContent,
    Project,
    Resource,
    ResourceContent,
    TextContent,
    content_from_generation,
    is_presentation_document,
    stamp_presentation_format,
)
from .runs import PipelineRun, RunStatus, StepResult, StepStatus

__all__ = [
    # Prompt library
    "GenerationPipeline",
    "GenerationPrompt",
    "NamedKind",
    "OutputFormat",
    "PipelineDefinition",
    "PipelineStep",
    "PromptRecord",
    "StepSource",
    "SystemPrompt",
    # Resources
    "PRESENTATION_FORMAT",
    "PresentationContent",
    "Project",
    "Resource",
    "ResourceContent",
    "TextContent",
    "content_from_generation",
    "is_presentation_document",
    "stamp_presentation_format",
    # Runs
    "PipelineRun",
    "RunStatus",
    "StepResult",
    "StepStatus",
]
