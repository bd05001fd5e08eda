"""
Single-shot generation endpoint.

The request blocks until the presentation has been generated and stored.
"""

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from slidecreator.app.dependencies import get_single_shot_generator
from slidecreator.generation import SingleShotGenerator

router = APIRouter(prefix="/generate", tags=["generate"])


class GenerateRequest(BaseModel):
    project_id: str
    source_resource_ids: list[str] = Field(default_factory=list)
    generation_prompt_id: str
    system_prompt_id: str
    output_folder_id: str | None = None
    output_name: str | None = None


@router.post(
    "",
    status_code=201,
    summary="Generate a presentation",
    responses={
        201: {"description": "Presentation resource created"},
        404: {"description": "Generation or system prompt not found"},
        502: {"description": "Generation failed or returned a malformed document"},
    },
)
async def generate_presentation(
    payload: GenerateRequest,
    generator: SingleShotGenerator = Depends(get_single_shot_generator),
) -> dict[str, Any]:
    resource = await generator.generate(
        project_id=payload.project_id,
        source_resource_ids=payload.source_resource_ids,
        generation_prompt_id=payload.generation_prompt_id,
        system_prompt_id=payload.system_prompt_id,
        output_folder_id=payload.output_folder_id,
        output_name=payload.output_name,
    )
    return resource.to_api_dict()
