"""
Run Recorder: the single writer of one run record.

Every state transition of a run goes through one RunRecorder owned by the
run's execution task. Each transition is applied to a copy of the
recorder's run and saved as a whole with the store's optimistic version
check; the copy replaces the recorder's run only once the save succeeds,
so a failed write leaves the recorder in step with the stored record.
A stray second writer fails loudly with ConcurrentUpdateError instead of
silently losing updates.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Callable

from slidecreator.models import PipelineRun, RunStatus, StepStatus

if TYPE_CHECKING:
    from slidecreator.storage import ContentStore


def _mark_failed(run: PipelineRun, error: str) -> None:
    run.status = RunStatus.FAILED
    run.error = error
    run.completed_at = datetime.now(timezone.utc)


class RunRecorder:
    """Applies and persists run/step transitions for a single run."""

    def __init__(self, store: "ContentStore", run: PipelineRun):
        self._store = store
        self._run = run.model_copy(deep=True)

    @property
    def run(self) -> PipelineRun:
        return self._run

    async def _apply(self, change: Callable[[PipelineRun], None]) -> None:
        draft = self._run.model_copy(deep=True)
        change(draft)
        self._run = await self._store.save_run(draft)

    async def start_step(self, index: int) -> None:
        """Mark step `index` running and move the current-step pointer to it."""

        def change(run: PipelineRun) -> None:
            run.step_results[index].transition(StepStatus.RUNNING)
            run.current_step = index

        await self._apply(change)

    async def complete_step(self, index: int, resource_id: str | None = None) -> None:
        await self._apply(
            lambda run: run.step_results[index].transition(
                StepStatus.COMPLETED, resource_id=resource_id
            )
        )

    async def fail_step(self, index: int, step_name: str, message: str) -> None:
        """
        Mark step `index` failed and the whole run failed, in one write.

        A step whose start was never recorded passes through running first,
        keeping the transition monotonic.
        """

        def change(run: PipelineRun) -> None:
            result = run.step_results[index]
            if result.status is StepStatus.PENDING:
                result.transition(StepStatus.RUNNING)
                run.current_step = index
            result.transition(StepStatus.FAILED, error=message)
            _mark_failed(run, f'Step "{step_name}" failed: {message}')

        await self._apply(change)

    async def complete_run(self, final_resource_id: str | None) -> None:
        def change(run: PipelineRun) -> None:
            run.status = RunStatus.COMPLETED
            run.final_resource_id = final_resource_id
            run.completed_at = datetime.now(timezone.utc)

        await self._apply(change)

    async def abort(self, message: str) -> bool:
        """
        Last-resort failure write after a transition could not be recorded.

        Reloads the stored run, fails the step left running (if any) and the
        run itself. Returns False when the run is gone or already terminal.
        """
        stored = await self._store.get_run(self._run.id)
        if stored is None or stored.is_terminal:
            return False
        self._run = stored

        def change(run: PipelineRun) -> None:
            running = [r for r in run.step_results if r.status is StepStatus.RUNNING]
            if running:
                running[0].transition(StepStatus.FAILED, error=message)
                _mark_failed(run, f'Step "{running[0].step_name}" failed: {message}')
            else:
                _mark_failed(run, f"Pipeline run failed: {message}")

        await self._apply(change)
        return True
