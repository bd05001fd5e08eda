"""
Prompt templating for SlideCreator.

- OutputFormatCache: TTL cache of output-format contents
- VariableResolver: `{{name}}` substitution from that cache
- check_name_unique: write-time name uniqueness across named kinds
"""

from .cache import DEFAULT_FORMAT_CACHE_TTL, OutputFormatCache
from .names import check_name_unique
from .variables import VariableResolver, compact_timestamp, render_output_name

__all__ = [
    "DEFAULT_FORMAT_CACHE_TTL",
    "OutputFormatCache",
    "VariableResolver",
    "check_name_unique",
    "compact_timestamp",
    "render_output_name",
]
