"""
Presentation generation for SlideCreator.

- GenerationClient: single-call adapter over an LLM provider
- SingleShotGenerator: one prompt pair -> one presentation resource
"""

from .client import GenerationClient
from .single_shot import SingleShotGenerator
from .sources import format_resource_block, format_step_output_block, render_resources

__all__ = [
    "GenerationClient",
    "SingleShotGenerator",
    "format_resource_block",
    "format_step_output_block",
    "render_resources",
]
