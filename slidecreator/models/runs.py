"""
Pipeline run schemas.

A PipelineRun is created once with one pending StepResult per step and is
then mutated in place by the run engine. The `version` field supports
optimistic-concurrency saves: every successful save increments it, and a
save carrying a stale version is rejected by the store.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field


def _utc_now() -> datetime:
    return datetime.now(UTC)


class RunStatus(str, Enum):
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not RunStatus.RUNNING


class StepStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (StepStatus.COMPLETED, StepStatus.FAILED)


# Allowed forward transitions; anything else would be a regression.
_STEP_TRANSITIONS: dict[StepStatus, frozenset[StepStatus]] = {
    StepStatus.PENDING: frozenset({StepStatus.RUNNING}),
    StepStatus.RUNNING: frozenset({StepStatus.COMPLETED, StepStatus.FAILED}),
    StepStatus.COMPLETED: frozenset(),
    StepStatus.FAILED: frozenset(),
}


class StepResult(BaseModel):
    """Per-step progress entry. The step name is snapshotted at run creation."""

    step_index: int
    step_name: str
    status: StepStatus = StepStatus.PENDING
    resource_id: str | None = None
    error: str | None = None

    def transition(
        self,
        status: StepStatus,
        *,
        resource_id: str | None = None,
        error: str | None = None,
    ) -> None:
        """Move to `status`, refusing any non-monotonic transition."""
        if status not in _STEP_TRANSITIONS[self.status]:
            raise ValueError(
                f"Invalid step transition {self.status.value} -> {status.value} "
                f"for step {self.step_index}"
            )
        self.status = status
        if resource_id:
            self.resource_id = resource_id
        if error:
            self.error = error


class PipelineRun(BaseModel):
    """One execution of a pipeline against a project and a fixed source list."""

    id: str = Field(default_factory=lambda: uuid4().hex)
    pipeline_id: str
    project_id: str
    status: RunStatus = RunStatus.RUNNING
    current_step: int = 0
    total_steps: int
    step_results: list[StepResult] = Field(default_factory=list)
    output_folder_id: str | None = None
    source_resource_ids: list[str] = Field(default_factory=list)
    final_resource_id: str | None = None
    error: str | None = None
    started_at: datetime = Field(default_factory=_utc_now)
    completed_at: datetime | None = None
    version: int = 0

    @classmethod
    def create(
        cls,
        *,
        pipeline_id: str,
        project_id: str,
        step_names: list[str],
        source_resource_ids: list[str],
        output_folder_id: str | None = None,
    ) -> "PipelineRun":
        """Build a fresh run with every step pending."""
        return cls(
            pipeline_id=pipeline_id,
            project_id=project_id,
            total_steps=len(step_names),
            step_results=[
                StepResult(step_index=i, step_name=name)
                for i, name in enumerate(step_names)
            ],
            source_resource_ids=list(source_resource_ids),
            output_folder_id=output_folder_id or None,
        )

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    def to_api_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")
