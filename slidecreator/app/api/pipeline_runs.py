"""
Pipeline run endpoints.

Creating a run returns immediately with every step pending; execution
continues in the background and clients poll the run until its status
is terminal.
"""

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from slidecreator.app.dependencies import get_run_engine
from slidecreator.pipeline import PipelineRunEngine

router = APIRouter(prefix="/pipeline-runs", tags=["pipeline-runs"])


class PipelineRunCreate(BaseModel):
    pipeline_id: str
    project_id: str
    source_resource_ids: list[str] = Field(default_factory=list)
    output_folder_id: str | None = None


@router.post(
    "",
    status_code=201,
    summary="Start a pipeline run",
    responses={
        201: {"description": "Run created; steps execute in the background"},
        400: {"description": "Pipeline has no steps"},
        404: {"description": "Pipeline not found"},
    },
)
async def create_pipeline_run(
    payload: PipelineRunCreate,
    engine: PipelineRunEngine = Depends(get_run_engine),
) -> dict[str, Any]:
    run = await engine.launch(
        pipeline_id=payload.pipeline_id,
        project_id=payload.project_id,
        source_resource_ids=payload.source_resource_ids,
        output_folder_id=payload.output_folder_id,
    )
    return run.to_api_dict()


@router.get(
    "/{run_id}",
    summary="Poll a pipeline run",
    responses={404: {"description": "Pipeline run not found"}},
)
async def get_pipeline_run(
    run_id: str,
    engine: PipelineRunEngine = Depends(get_run_engine),
) -> dict[str, Any]:
    run = await engine.get_run(run_id)
    return run.to_api_dict()
