"""
Pipeline execution for SlideCreator.

- PipelineRunEngine: launches runs and executes their steps in the background
- RunContext: execution-scoped state (captured step outputs)
- RunRecorder: single writer of a run record
"""

from .context import RunContext
from .engine import PipelineRunEngine
from .recorder import RunRecorder

__all__ = [
    "PipelineRunEngine",
    "RunContext",
    "RunRecorder",
]
