"""
Pipeline Run Engine for SlideCreator.

Executes a generation pipeline step by step in a background task while a
persisted run record reports progress to polling clients.

Execution Model:
- launch() validates the pipeline, creates the run record with every step
  pending, spawns the execution task and returns the run immediately
- Steps execute strictly in order; a later step may consume earlier outputs
- Each step: resolve prompts -> assemble sources -> substitute variables
  -> one generation call -> capture raw output -> optionally persist
- The first failing step marks itself and the run failed; later steps stay
  pending and resources from completed steps are kept
- Step errors never propagate out of the task; they live in the run record
"""
from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING

from slidecreator.errors import NotFoundError, ValidationError
from slidecreator.generation.sources import format_resource_block, format_step_output_block
from slidecreator.models import (
    NamedKind,
    PipelineRun,
    PipelineStep,
    Resource,
    content_from_generation,
)
from slidecreator.templating import compact_timestamp, render_output_name

from .context import RunContext
from .recorder import RunRecorder

if TYPE_CHECKING:
    from slidecreator.generation import GenerationClient
    from slidecreator.storage import ContentStore
    from slidecreator.templating import VariableResolver

logger = logging.getLogger(__name__)

DEFAULT_PROJECT_NAME = "Project"


class PipelineRunEngine:
    """
    Launches and executes pipeline runs.

    Example:
        engine = PipelineRunEngine(store, resolver, client)
        run = await engine.launch(
            pipeline_id=pipeline.id,
            project_id=project.id,
            source_resource_ids=[doc.id],
        )
        # ... later, from any request:
        run = await engine.get_run(run.id)
    """

    def __init__(
        self,
        store: "ContentStore",
        resolver: "VariableResolver",
        client: "GenerationClient",
    ):
        self._store = store
        self._resolver = resolver
        self._client = client
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def active_runs(self) -> int:
        """Number of run tasks still executing in this process."""
        return len(self._tasks)

    # ==================== Run lifecycle ====================

    async def launch(
        self,
        *,
        pipeline_id: str,
        project_id: str,
        source_resource_ids: list[str],
        output_folder_id: str | None = None,
    ) -> PipelineRun:
        """
        Create a run record and start executing it in the background.

        Validation happens before the record is created, so a rejected
        launch leaves no run behind.

        Raises:
            NotFoundError: If the pipeline does not exist
            ValidationError: If the pipeline has no steps
        """
        pipeline = await self._store.get_named(NamedKind.GENERATION_PIPELINE, pipeline_id)
        if pipeline is None:
            raise NotFoundError("pipeline", pipeline_id)

        definition = pipeline.definition.model_copy(deep=True)
        if not definition.steps:
            raise ValidationError("Pipeline has no steps")

        run = PipelineRun.create(
            pipeline_id=pipeline_id,
            project_id=project_id,
            step_names=[step.name for step in definition.steps],
            source_resource_ids=source_resource_ids,
            output_folder_id=output_folder_id,
        )
        await self._store.create_run(run)

        logger.info(
            f"Pipeline run launched: run_id={run.id[:8]}..., "
            f"pipeline='{pipeline.name}', steps={run.total_steps}"
        )

        ctx = RunContext(
            run_id=run.id,
            project_id=project_id,
            definition=definition,
            source_resource_ids=list(source_resource_ids),
            output_folder_id=output_folder_id or None,
        )
        task = asyncio.create_task(
            self._execute(RunRecorder(self._store, run), ctx),
            name=f"pipeline_run_{run.id}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

        return run.model_copy(deep=True)

    async def get_run(self, run_id: str) -> PipelineRun:
        """
        Read the current run record.

        Raises:
            NotFoundError: If no run has this id
        """
        run = await self._store.get_run(run_id)
        if run is None:
            raise NotFoundError("pipeline run", run_id)
        return run

    async def wait_idle(self) -> None:
        """Wait until every run task started by this engine has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # ==================== Execution ====================

    async def _execute(self, recorder: RunRecorder, ctx: RunContext) -> None:
        """Background task body. Never raises."""
        try:
            await self._run_steps(recorder, ctx)
        except Exception as e:
            # A transition write failed, including the failure write itself
            message = str(e) or e.__class__.__name__
            logger.error(f"Pipeline run {ctx.run_id} uncaught error: {message}", exc_info=True)
            try:
                await recorder.abort(message)
            except Exception as abort_error:
                logger.error(
                    f"Pipeline run {ctx.run_id} could not be marked failed: {abort_error}",
                    exc_info=True,
                )

    async def _run_steps(self, recorder: RunRecorder, ctx: RunContext) -> None:
        for index, step in enumerate(ctx.definition.steps):
            start_time = time.perf_counter()

            try:
                await recorder.start_step(index)
                logger.info(f"Run {ctx.run_id[:8]}... step {index} ('{step.name}') started")
                resource_id = await self._execute_step(ctx, index, step)
                ctx.step_timings[index] = (time.perf_counter() - start_time) * 1000
                await recorder.complete_step(index, resource_id)
            except Exception as e:
                message = str(e) or e.__class__.__name__
                logger.error(
                    f"Pipeline step {index} ('{step.name}') of run {ctx.run_id} failed: {message}",
                    exc_info=True,
                )
                await recorder.fail_step(index, step.name, message)
                return

            logger.info(
                f"Run {ctx.run_id[:8]}... step {index} ('{step.name}') completed "
                f"in {ctx.step_timings[index]:.1f}ms"
            )

        await recorder.complete_run(ctx.final_resource_id)
        logger.info(
            f"Pipeline run complete: run_id={ctx.run_id[:8]}..., "
            f"duration={ctx.elapsed_ms:.1f}ms, final_resource={ctx.final_resource_id}"
        )

    async def _execute_step(self, ctx: RunContext, index: int, step: PipelineStep) -> str | None:
        """Run one step and return the id of the resource it persisted, if any."""
        system_content = await self._resolve_prompt(
            step,
            inline=step.system_prompt_inline,
            name=step.system_prompt,
            kind=NamedKind.SYSTEM_PROMPT,
        )
        generation_content = await self._resolve_prompt(
            step,
            inline=step.generation_prompt_inline,
            name=step.generation_prompt,
            kind=NamedKind.GENERATION_PROMPT,
        )

        user_content = await self._assemble_sources(ctx, step)
        user_content += await self._resolver.resolve(generation_content)
        system_content = await self._resolver.resolve(system_content)

        raw_text = await self._client.generate(system_content, user_content)
        ctx.record_output(index, raw_text)

        if not step.save_to_project:
            return None

        resource = await self._persist_output(ctx, step, raw_text)
        if step.is_final:
            ctx.final_resource_id = resource.id
        return resource.id

    async def _resolve_prompt(
        self,
        step: PipelineStep,
        *,
        inline: str | None,
        name: str | None,
        kind: NamedKind,
    ) -> str:
        """Inline body wins over a name reference; neither is a step error."""
        if inline:
            return inline
        if name:
            record = await self._store.find_named(kind, name)
            if record is None:
                raise NotFoundError(kind.label, name, by="name")
            return record.content
        raise ValidationError(f'Step "{step.name}" has no {kind.label}')

    async def _assemble_sources(self, ctx: RunContext, step: PipelineStep) -> str:
        """Render the step's sources, in order, into the start of the user message."""
        parts: list[str] = []

        for source in step.sources:
            if source.type == "project_resources":
                for resource in await self._load_source_resources(ctx):
                    parts.append(format_resource_block(resource))
            elif source.type == "step_output":
                output = ctx.get_output(source.step)
                # Forward references and steps that never produced output add nothing
                if output:
                    parts.append(format_step_output_block(ctx.step_name(source.step), output))
            elif source.type == "all_step_outputs":
                for step_index, output in ctx.outputs_in_order():
                    parts.append(format_step_output_block(ctx.step_name(step_index), output))

        return "".join(parts)

    async def _load_source_resources(self, ctx: RunContext) -> list[Resource]:
        if ctx.source_resources is None:
            ctx.source_resources = await self._store.get_resources(ctx.source_resource_ids)
        return ctx.source_resources

    async def _project_name(self, ctx: RunContext) -> str:
        if ctx.project_name is None:
            project = await self._store.get_project(ctx.project_id)
            ctx.project_name = project.name if project else DEFAULT_PROJECT_NAME
        return ctx.project_name

    async def _persist_output(self, ctx: RunContext, step: PipelineStep, raw_text: str) -> Resource:
        """Store the step output as a presentation or, failing that, as plain text."""
        project_name = await self._project_name(ctx)
        name = render_output_name(
            step.output_name_template,
            fallback=f"{project_name} - {step.name}",
            values={
                "project": project_name,
                "step": step.name,
                "timestamp": compact_timestamp(),
            },
        )

        resource = Resource(
            name=name,
            project_id=ctx.project_id,
            folder_id=ctx.output_folder_id,
            content=content_from_generation(raw_text),
        )
        await self._store.create_resource(resource)
        logger.debug(f"Step '{step.name}' saved {resource.resource_type} '{name}' ({resource.id})")
        return resource
