"""
HTTP API routers for SlideCreator.
"""

from .generate import router as generate_router
from .library import (
    generation_prompts_router,
    output_formats_router,
    pipelines_router,
    system_prompts_router,
)
from .pipeline_runs import router as pipeline_runs_router

__all__ = [
    "generate_router",
    "generation_prompts_router",
    "output_formats_router",
    "pipeline_runs_router",
    "pipelines_router",
    "system_prompts_router",
]
