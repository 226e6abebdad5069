from __future__ import annotations

import logging
from typing import Any

from .client import BrmClient
from .schemas import QuestionType
from .services.response_lifecycle import NOT_STARTED, SUBMITTED, is_answered

logger = logging.getLogger(__name__)


class WizardError(Exception):
    pass


class ResponseWizard:
    """Section-by-section answer flow for one assessment.

    Every answer change is saved to the server immediately. Submission is
    only allowed once every question of every section has an answer.
    """

    def __init__(self, client: BrmClient, assessment_id: str) -> None:
        self.client = client
        self.assessment_id = assessment_id
        self.assessment: dict[str, Any] = {}
        self.template: dict[str, Any] = {"sections": []}
        self.response: dict[str, Any] = {}
        self.answers: dict[tuple[str, str], Any] = {}
        self.section_completed: list[bool] = []
        self.active_section = 0

    def load(self) -> "ResponseWizard":
        self.assessment = self.client.get_assessment(self.assessment_id)
        template_id = self.assessment.get("templateId")
        if template_id:
            self.template = self.client.get_template(str(template_id))

        existing = self.client.get_responses(assessment_id=self.assessment_id)
        if existing:
            self.response = existing[0]
        else:
            self.response = self.client.create_response(
                {
                    "assessmentId": self.assessment_id,
                    "accountId": self.assessment.get("accountId"),
                    "status": NOT_STARTED,
                    "responses": [],
                }
            )

        self.answers = {
            (str(entry.get("sectionId")), str(entry.get("questionId"))): entry.get("value")
            for entry in self.response.get("responses") or []
        }
        self.section_completed = [self._section_done(section) for section in self.sections]
        self.active_section = 0
        return self

    @property
    def sections(self) -> list[dict[str, Any]]:
        return [s for s in self.template.get("sections") or [] if isinstance(s, dict)]

    @property
    def current_section(self) -> dict[str, Any] | None:
        if not self.sections:
            return None
        return self.sections[self.active_section]

    @property
    def status(self) -> str:
        return str(self.response.get("status") or NOT_STARTED)

    @property
    def is_submitted(self) -> bool:
        return self.status == SUBMITTED

    @property
    def can_submit(self) -> bool:
        return bool(self.sections) and all(self.section_completed) and not self.is_submitted

    def _section_done(self, section: dict[str, Any]) -> bool:
        sid = str(section.get("id"))
        return all(is_answered(self.answers.get((sid, str(q.get("id"))))) for q in section.get("questions") or [])

    def go_to(self, index: int) -> None:
        if not 0 <= index < len(self.sections):
            raise WizardError(f"No section at index {index}")
        self.active_section = index

    def next(self) -> bool:
        if self.active_section < len(self.sections) - 1:
            self.active_section += 1
            return True
        return False

    def previous(self) -> bool:
        if self.active_section > 0:
            self.active_section -= 1
            return True
        return False

    def answer(self, section_id: str, question_id: str, value: Any) -> dict[str, Any]:
        if self.is_submitted:
            raise WizardError("Response already submitted")
        self.answers[(section_id, question_id)] = value
        if self.response.get("id"):
            self.response = self.client.save_question_response(str(self.response["id"]), section_id, question_id, value)
        for idx, section in enumerate(self.sections):
            if str(section.get("id")) == section_id:
                self.section_completed[idx] = self._section_done(section)
        return self.response

    def submit(self) -> dict[str, Any]:
        if not self.can_submit:
            raise WizardError("Complete every section before submitting")
        response_id = str(self.response["id"])
        self.client.submit_response(response_id)
        self.response = self.client.get_response(response_id)
        logger.info("[wizard] submitted response %s for assessment %s", response_id, self.assessment_id)
        return self.response


def coerce_answer(question: dict[str, Any], raw: str) -> Any:
    """Turn typed terminal input into the stored value for a question type."""
    text = raw.strip()
    qtype = question.get("type") or QuestionType.TEXT
    options = [str(o) for o in question.get("options") or []]
    if not text:
        return [] if qtype == QuestionType.CHECKBOXES else None

    if qtype == QuestionType.NUMBER:
        try:
            number = float(text)
        except ValueError:
            raise WizardError(f"'{text}' is not a number") from None
        return int(number) if number.is_integer() else number

    if qtype == QuestionType.MULTIPLE_CHOICE:
        return _pick_option(options, text)

    if qtype == QuestionType.CHECKBOXES:
        return [_pick_option(options, part.strip()) for part in text.split(",") if part.strip()]

    return text


def _pick_option(options: list[str], choice: str) -> str:
    if choice.isdigit() and 1 <= int(choice) <= len(options):
        return options[int(choice) - 1]
    for option in options:
        if option.lower() == choice.lower():
            return option
    raise WizardError(f"'{choice}' is not one of: {', '.join(options)}")
