from __future__ import annotations

import logging
from typing import Any

from .. import repo
from ..errors import ConflictError, IncompleteSubmissionError, NotFoundError
from . import response_lifecycle as lifecycle

logger = logging.getLogger(__name__)


def find_response_for_assessment(assessment_id: str) -> dict[str, Any] | None:
    matches = repo.responses.list_by_owner(assessment_id)
    return matches[0] if matches else None


def create_response(payload: dict[str, Any]) -> dict[str, Any]:
    assessment_id = payload.get("assessmentId")
    if assessment_id and find_response_for_assessment(str(assessment_id)):
        raise ConflictError("A response already exists for this assessment")
    doc = lifecycle.new_response(payload, repo.now_iso())
    created = repo.responses.create(doc)
    logger.info("[RESPONSES] created response %s for assessment %s", created["id"], assessment_id)
    return created


def save_question_answer(response_id: str, section_id: str, question_id: str, value: Any) -> dict[str, Any]:
    current = repo.responses.get(response_id)
    updated = lifecycle.upsert_answer(
        current,
        section_id=section_id,
        question_id=question_id,
        value=value,
        now=repo.now_iso(after=current.get("updatedAt")),
    )
    if current.get("status") != updated.get("status"):
        logger.info("[RESPONSES] response %s moved %s -> %s", response_id, current.get("status"), updated.get("status"))
    return repo.responses.replace(updated)


def update_response(response_id: str, payload: dict[str, Any]) -> dict[str, Any]:
    current = repo.responses.get(response_id)
    updated = lifecycle.apply_update(current, payload, repo.now_iso(after=current.get("updatedAt")))
    return repo.responses.replace(updated)


def template_for_response(doc: dict[str, Any]) -> dict[str, Any]:
    assessment = repo.assessments.get(str(doc.get("assessmentId")))
    return repo.templates.get(str(assessment.get("templateId")))


def submit_response(response_id: str, require_complete: bool = False, user: str | None = None) -> dict[str, Any]:
    current = repo.responses.get(response_id)
    if require_complete:
        missing = lifecycle.missing_required(template_for_response(current), current)
        if missing:
            raise IncompleteSubmissionError(missing)
    updated = lifecycle.submit(current, repo.now_iso(after=current.get("updatedAt")), user=user)
    logger.info("[RESPONSES] response %s submitted", response_id)
    return repo.responses.replace(updated)


def response_progress(response_id: str) -> dict[str, Any]:
    doc = repo.responses.get(response_id)
    try:
        template = template_for_response(doc)
    except NotFoundError:
        template = {"sections": []}
    completion = lifecycle.section_completion(template, doc)
    return {
        "responseId": doc["id"],
        "status": doc.get("status"),
        "sections": [
            {"sectionId": section.get("id"), "title": section.get("title"), "complete": done}
            for section, done in zip(lifecycle.template_sections(template), completion)
        ],
        "missingRequired": lifecycle.missing_required(template, doc),
        "complete": all(completion),
    }
