"""HTTP client for the BRM API.

One method per REST route. Failures are logged and re-raised as ``ApiError``
carrying the status code and the server's ``{"error": ...}`` message.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Callable

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = os.getenv("BRM_API_URL", "http://localhost:3001")


class ApiError(Exception):
    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class BrmClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        api_prefix: str = "/api",
        http: httpx.Client | None = None,
        timeout: float = 10.0,
    ) -> None:
        self.api_prefix = api_prefix.rstrip("/")
        self.http = http or httpx.Client(base_url=base_url, timeout=timeout, headers={"Content-Type": "application/json"})

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "BrmClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _request(self, method: str, path: str, payload: Any = None, params: dict[str, Any] | None = None) -> Any:
        url = f"{self.api_prefix}{path}"
        try:
            res = self.http.request(method, url, json=payload, params=params)
        except httpx.HTTPError as exc:
            logger.error("[client] %s %s failed: %s", method, url, exc)
            raise ApiError(0, str(exc)) from exc
        if res.status_code >= 400:
            try:
                message = str(res.json().get("error") or res.reason_phrase)
            except (ValueError, AttributeError):
                message = res.text or res.reason_phrase
            logger.error("[client] %s %s -> %s %s", method, url, res.status_code, message)
            raise ApiError(res.status_code, message)
        return res.json()

    # accounts
    def get_accounts(self) -> list[dict[str, Any]]:
        return self._request("GET", "/accounts")

    def get_account(self, account_id: str) -> dict[str, Any]:
        return self._request("GET", f"/accounts/{account_id}")

    def create_account(self, data: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", "/accounts", data)

    def update_account(self, account_id: str, data: dict[str, Any]) -> dict[str, Any]:
        return self._request("PUT", f"/accounts/{account_id}", data)

    def delete_account(self, account_id: str) -> dict[str, Any]:
        return self._request("DELETE", f"/accounts/{account_id}")

    # contacts
    def get_contacts(self) -> list[dict[str, Any]]:
        return self._request("GET", "/contacts")

    def get_contacts_by_account(self, account_id: str) -> list[dict[str, Any]]:
        return self._request("GET", f"/accounts/{account_id}/contacts")

    def get_contact(self, contact_id: str) -> dict[str, Any]:
        return self._request("GET", f"/contacts/{contact_id}")

    def create_contact(self, data: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", "/contacts", data)

    def update_contact(self, contact_id: str, data: dict[str, Any]) -> dict[str, Any]:
        return self._request("PUT", f"/contacts/{contact_id}", data)

    def delete_contact(self, contact_id: str) -> dict[str, Any]:
        return self._request("DELETE", f"/contacts/{contact_id}")

    # assessments
    def get_assessments(self) -> list[dict[str, Any]]:
        return self._request("GET", "/assessments")

    def get_account_assessments(self, account_id: str) -> list[dict[str, Any]]:
        return self._request("GET", f"/accounts/{account_id}/assessments")

    def get_assessment(self, assessment_id: str) -> dict[str, Any]:
        return self._request("GET", f"/assessments/{assessment_id}")

    def create_assessment(self, data: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", "/assessments", data)

    def update_assessment(self, assessment_id: str, data: dict[str, Any]) -> dict[str, Any]:
        return self._request("PUT", f"/assessments/{assessment_id}", data)

    def delete_assessment(self, assessment_id: str) -> dict[str, Any]:
        return self._request("DELETE", f"/assessments/{assessment_id}")

    # templates
    def get_templates(self) -> list[dict[str, Any]]:
        return self._request("GET", "/templates")

    def get_template(self, template_id: str) -> dict[str, Any]:
        return self._request("GET", f"/templates/{template_id}")

    def create_template(self, data: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", "/templates", data)

    # responses
    def get_responses(self, assessment_id: str | None = None) -> list[dict[str, Any]]:
        params = {"assessmentId": assessment_id} if assessment_id else None
        return self._request("GET", "/responses", params=params)

    def get_response(self, response_id: str) -> dict[str, Any]:
        return self._request("GET", f"/responses/{response_id}")

    def create_response(self, data: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", "/responses", data)

    def update_response(self, response_id: str, data: dict[str, Any]) -> dict[str, Any]:
        return self._request("PUT", f"/responses/{response_id}", data)

    def submit_response(self, response_id: str) -> dict[str, Any]:
        return self._request("POST", f"/responses/{response_id}/submit")

    def save_question_response(self, response_id: str, section_id: str, question_id: str, value: Any) -> dict[str, Any]:
        return self._request(
            "POST",
            f"/responses/{response_id}/questions",
            {"sectionId": section_id, "questionId": question_id, "value": value},
        )

    def get_response_progress(self, response_id: str) -> dict[str, Any]:
        return self._request("GET", f"/responses/{response_id}/progress")


def _field_text(record: dict[str, Any], field: str | Callable[[dict[str, Any]], Any]) -> str:
    value = field(record) if callable(field) else record.get(field)
    return str(value or "").lower()


def filter_records(records: list[dict[str, Any]], query: str, fields: tuple) -> list[dict[str, Any]]:
    """Case-insensitive substring search over the named fields, as the list pages do."""
    needle = (query or "").strip().lower()
    if not needle:
        return list(records)
    return [record for record in records if any(needle in _field_text(record, f) for f in fields)]


def contact_full_name(contact: dict[str, Any]) -> str:
    return f"{contact.get('FirstName') or ''} {contact.get('LastName') or ''}".strip()


ACCOUNT_SEARCH_FIELDS = ("Name", "Industry", "Phone")
CONTACT_SEARCH_FIELDS = ("FirstName", "LastName", contact_full_name, "Email", "Phone")


def filter_assessments(
    assessments: list[dict[str, Any]],
    query: str,
    accounts_by_id: dict[str, dict[str, Any]],
) -> list[dict[str, Any]]:
    def account_name(assessment: dict[str, Any]) -> Any:
        return (accounts_by_id.get(str(assessment.get("accountId"))) or {}).get("Name")

    return filter_records(assessments, query, ("name", account_name))
