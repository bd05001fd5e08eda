"""
Rendering of source material into the user message.

Every source is written under a delimiter header so the model can tell
documents and prior step outputs apart.
"""

from __future__ import annotations

from typing import Iterable

from slidecreator.models import Resource


def format_resource_block(resource: Resource) -> str:
    return f"=== SOURCE: {resource.name} ===\n{resource.render_text()}\n\n"


def format_step_output_block(step_name: str, output: str) -> str:
    return f'=== OUTPUT FROM STEP "{step_name}" ===\n{output}\n\n'


def render_resources(resources: Iterable[Resource]) -> str:
    return "".join(format_resource_block(resource) for resource in resources)
