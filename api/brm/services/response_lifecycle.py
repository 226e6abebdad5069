from __future__ import annotations

import copy
import uuid
from typing import Any

NOT_STARTED = "Not Started"
IN_PROGRESS = "In Progress"
SUBMITTED = "Submitted"
STATUS_ORDER = (NOT_STARTED, IN_PROGRESS, SUBMITTED)

STATUS_MESSAGES = {
    NOT_STARTED: "Assessment response created",
    IN_PROGRESS: "Assessment started",
    SUBMITTED: "Assessment submitted",
}


def can_transition(current: str, target: str) -> bool:
    if current not in STATUS_ORDER or target not in STATUS_ORDER:
        return False
    return STATUS_ORDER.index(target) >= STATUS_ORDER.index(current)


def timeline_event(status: str, now: str, message: str | None = None, user: str | None = None) -> dict[str, Any]:
    event = {
        "id": str(uuid.uuid4()),
        "date": now,
        "status": status,
        "message": message or STATUS_MESSAGES.get(status, f"Status changed to {status}"),
    }
    if user:
        event["user"] = user
    return event


def new_response(payload: dict[str, Any], now: str) -> dict[str, Any]:
    doc = {k: v for k, v in payload.items() if k not in {"status", "responses", "timeline", "submittedAt"}}
    doc["status"] = NOT_STARTED
    doc["responses"] = []
    doc["timeline"] = [timeline_event(NOT_STARTED, now)]
    return doc


def _answers(doc: dict[str, Any]) -> list[dict[str, Any]]:
    value = doc.get("responses")
    return value if isinstance(value, list) else []


def _timeline(doc: dict[str, Any]) -> list[dict[str, Any]]:
    value = doc.get("timeline")
    return value if isinstance(value, list) else []


def upsert_answer(doc: dict[str, Any], section_id: str, question_id: str, value: Any, now: str) -> dict[str, Any]:
    out = copy.deepcopy(doc)
    answers = _answers(out)
    for entry in answers:
        if entry.get("sectionId") == section_id and entry.get("questionId") == question_id:
            entry["value"] = value
            entry["updatedAt"] = now
            break
    else:
        answers.append({"questionId": question_id, "sectionId": section_id, "value": value, "updatedAt": now})
    out["responses"] = answers

    if out.get("status", NOT_STARTED) == NOT_STARTED:
        out["status"] = IN_PROGRESS
        out["timeline"] = _timeline(out) + [timeline_event(IN_PROGRESS, now)]
    out["updatedAt"] = now
    return out


def submit(doc: dict[str, Any], now: str, user: str | None = None) -> dict[str, Any]:
    out = copy.deepcopy(doc)
    out["status"] = SUBMITTED
    out["submittedAt"] = now
    out["updatedAt"] = now
    out["timeline"] = _timeline(out) + [timeline_event(SUBMITTED, now, user=user)]
    return out


def apply_update(doc: dict[str, Any], payload: dict[str, Any], now: str) -> dict[str, Any]:
    """Merge a generic update without editing the timeline or reverting status."""
    changes = {k: v for k, v in payload.items() if k not in {"id", "createdAt", "updatedAt", "timeline", "status"}}
    out = {**copy.deepcopy(doc), **changes, "updatedAt": now}
    target = payload.get("status")
    current = doc.get("status", NOT_STARTED)
    if target and target != current and can_transition(current, target):
        out["status"] = target
        out["timeline"] = _timeline(out) + [timeline_event(target, now)]
        if target == SUBMITTED:
            out["submittedAt"] = now
    return out


def is_answered(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str) and value == "":
        return False
    return True


def answer_map(doc: dict[str, Any]) -> dict[tuple[str, str], Any]:
    return {
        (str(entry.get("sectionId")), str(entry.get("questionId"))): entry.get("value")
        for entry in _answers(doc)
        if isinstance(entry, dict)
    }


def template_sections(template: dict[str, Any]) -> list[dict[str, Any]]:
    sections = template.get("sections") if isinstance(template, dict) else None
    return [s for s in sections if isinstance(s, dict)] if isinstance(sections, list) else []


def _questions(section: dict[str, Any]) -> list[dict[str, Any]]:
    questions = section.get("questions")
    return [q for q in questions if isinstance(q, dict)] if isinstance(questions, list) else []


def section_completion(template: dict[str, Any], doc: dict[str, Any]) -> list[bool]:
    answers = answer_map(doc)
    out: list[bool] = []
    for section in template_sections(template):
        sid = str(section.get("id"))
        out.append(all(is_answered(answers.get((sid, str(q.get("id"))))) for q in _questions(section)))
    return out


def missing_required(template: dict[str, Any], doc: dict[str, Any]) -> list[dict[str, str]]:
    answers = answer_map(doc)
    missing: list[dict[str, str]] = []
    for section in template_sections(template):
        sid = str(section.get("id"))
        for question in _questions(section):
            qid = str(question.get("id"))
            if bool(question.get("required")) and not is_answered(answers.get((sid, qid))):
                missing.append({"sectionId": sid, "questionId": qid})
    return missing
