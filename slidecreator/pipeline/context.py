"""
Run Context for pipeline execution.

Execution-scoped state for one pipeline run: the pipeline definition
snapshotted at launch, the raw output captured from every completed
generation call, and lazily loaded source material. Nothing here is
persisted or visible to pollers; rerunning a pipeline recomputes it all.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from slidecreator.models import PipelineDefinition, Resource


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class RunContext:
    """
    State carried across the steps of a single run.

    `step_outputs` maps step index to the raw text that step produced. It is
    written once per step, right after the generation call succeeds, and
    read by later steps through step_output / all_step_outputs sources.
    """

    run_id: str
    project_id: str
    definition: PipelineDefinition
    source_resource_ids: list[str] = field(default_factory=list)
    output_folder_id: str | None = None

    started_at: datetime = field(default_factory=_utc_now)
    step_outputs: dict[int, str] = field(default_factory=dict)
    final_resource_id: str | None = None
    step_timings: dict[int, float] = field(default_factory=dict)

    # Loaded on first use
    source_resources: list[Resource] | None = None
    project_name: str | None = None

    @property
    def elapsed_ms(self) -> float:
        """Milliseconds since the run started executing."""
        delta = datetime.now(timezone.utc) - self.started_at
        return delta.total_seconds() * 1000

    def step_name(self, index: int) -> str:
        """Name of step `index`, or a positional label for an unknown index."""
        steps = self.definition.steps
        if 0 <= index < len(steps):
            return steps[index].name
        return f"Step {index}"

    def record_output(self, index: int, text: str) -> None:
        self.step_outputs[index] = text

    def get_output(self, index: int) -> str | None:
        return self.step_outputs.get(index)

    def outputs_in_order(self) -> list[tuple[int, str]]:
        """Captured outputs sorted by step index."""
        return sorted(self.step_outputs.items())
