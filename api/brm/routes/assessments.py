from typing import Any

from fastapi import APIRouter

from .. import repo
from ..deps import failure_message
from ..schemas import ERROR_RESPONSES, MessageResponse

router = APIRouter(responses=ERROR_RESPONSES)


@router.get("/assessments")
def list_assessments() -> list[dict[str, Any]]:
    with failure_message("Failed to fetch assessments"):
        return repo.assessments.list_all()


@router.get("/assessments/{assessment_id}")
def get_assessment(assessment_id: str) -> dict[str, Any]:
    with failure_message("Failed to fetch assessment"):
        return repo.assessments.get(assessment_id)


@router.post("/assessments", status_code=201)
def create_assessment(payload: dict[str, Any]) -> dict[str, Any]:
    with failure_message("Failed to create assessment"):
        return repo.assessments.create(payload)


@router.put("/assessments/{assessment_id}")
def update_assessment(assessment_id: str, payload: dict[str, Any]) -> dict[str, Any]:
    with failure_message("Failed to update assessment"):
        return repo.assessments.update(assessment_id, payload)


@router.delete("/assessments/{assessment_id}", response_model=MessageResponse)
def delete_assessment(assessment_id: str) -> dict[str, str]:
    with failure_message("Failed to delete assessment"):
        repo.delete_assessment(assessment_id)
    return {"message": "Assessment deleted successfully"}
