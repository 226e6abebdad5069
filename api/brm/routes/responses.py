from typing import Any

from fastapi import APIRouter, Body

from .. import repo
from ..config import REQUIRE_COMPLETE_SUBMISSION
from ..deps import failure_message
from ..schemas import RESPONSE_ERROR_RESPONSES, QuestionAnswerInput
from ..services import responses as response_service

router = APIRouter(responses=RESPONSE_ERROR_RESPONSES)


@router.get("/responses")
def list_responses(assessmentId: str | None = None) -> list[dict[str, Any]]:
    with failure_message("Failed to fetch responses"):
        if assessmentId:
            return repo.responses.list_by_owner(assessmentId)
        return repo.responses.list_all()


@router.get("/responses/{response_id}")
def get_response(response_id: str) -> dict[str, Any]:
    with failure_message("Failed to fetch response"):
        return repo.responses.get(response_id)


@router.post("/responses", status_code=201)
def create_response(payload: dict[str, Any]) -> dict[str, Any]:
    with failure_message("Failed to create response"):
        return response_service.create_response(payload)


@router.put("/responses/{response_id}")
def update_response(response_id: str, payload: dict[str, Any]) -> dict[str, Any]:
    with failure_message("Failed to update response"):
        return response_service.update_response(response_id, payload)


@router.post("/responses/{response_id}/submit")
def submit_response(response_id: str, payload: dict[str, Any] | None = Body(default=None)) -> dict[str, Any]:
    user = (payload or {}).get("user")
    with failure_message("Failed to submit response"):
        return response_service.submit_response(
            response_id,
            require_complete=REQUIRE_COMPLETE_SUBMISSION,
            user=str(user) if user else None,
        )


@router.post("/responses/{response_id}/questions")
def save_question_answer(response_id: str, answer: QuestionAnswerInput) -> dict[str, Any]:
    with failure_message("Failed to save question response"):
        return response_service.save_question_answer(
            response_id,
            section_id=answer.sectionId,
            question_id=answer.questionId,
            value=answer.value,
        )


@router.get("/responses/{response_id}/progress")
def get_response_progress(response_id: str) -> dict[str, Any]:
    with failure_message("Failed to compute response progress"):
        return response_service.response_progress(response_id)
