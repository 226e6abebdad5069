from typing import Any

from fastapi import APIRouter

from .. import repo
from ..deps import failure_message
from ..schemas import ERROR_RESPONSES

router = APIRouter(responses=ERROR_RESPONSES)


@router.get("/templates")
def list_templates() -> list[dict[str, Any]]:
    with failure_message("Failed to fetch templates"):
        return repo.templates.list_all()


@router.get("/templates/{template_id}")
def get_template(template_id: str) -> dict[str, Any]:
    with failure_message("Failed to fetch template"):
        return repo.templates.get(template_id)


@router.post("/templates", status_code=201)
def create_template(payload: dict[str, Any]) -> dict[str, Any]:
    with failure_message("Failed to create template"):
        return repo.templates.create(payload)
