import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

from .config import ACCOUNTS, ASSESSMENTS, CONTACTS, RESPONSES, TEMPLATES
from .errors import NotFoundError
from .store import get_store

logger = logging.getLogger(__name__)

SERVER_FIELDS = ("id", "createdAt", "updatedAt")


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_iso(value: str) -> datetime | None:
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def now_iso(after: str | None = None) -> str:
    """Current timestamp, nudged forward so it is strictly later than ``after``."""
    now = _now_utc()
    previous = parse_iso(after) if after else None
    if previous is not None and now <= previous:
        now = previous + timedelta(milliseconds=1)
    return to_iso(now)


def new_id() -> str:
    return str(uuid.uuid4())


class CollectionRepository:
    def __init__(self, collection: str, kind: str) -> None:
        self.collection = collection
        self.kind = kind

    @property
    def store(self):
        return get_store()

    def list_all(self) -> list[dict[str, Any]]:
        return self.store.load(self.collection)

    def list_by_owner(self, owner_id: str) -> list[dict[str, Any]]:
        return self.store.find_by_owner(self.collection, owner_id)

    def get(self, entity_id: str) -> dict[str, Any]:
        record = self.store.find(self.collection, entity_id)
        if record is None:
            raise NotFoundError(self.kind)
        return record

    def prepare_new(self, payload: dict[str, Any]) -> dict[str, Any]:
        return dict(payload)

    def create(self, payload: dict[str, Any]) -> dict[str, Any]:
        items = self.store.load(self.collection)
        stamp = now_iso()
        record = {
            **{k: v for k, v in self.prepare_new(payload).items() if k not in SERVER_FIELDS},
            "id": new_id(),
            "createdAt": stamp,
            "updatedAt": stamp,
        }
        items.append(record)
        self.store.save(self.collection, items)
        return record

    def replace(self, record: dict[str, Any]) -> dict[str, Any]:
        items = self.store.load(self.collection)
        for idx, item in enumerate(items):
            if item.get("id") == record.get("id"):
                items[idx] = record
                self.store.save(self.collection, items)
                return record
        raise NotFoundError(self.kind)

    def update(self, entity_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        items = self.store.load(self.collection)
        for idx, item in enumerate(items):
            if item.get("id") != entity_id:
                continue
            updated = {
                **item,
                **{k: v for k, v in payload.items() if k not in SERVER_FIELDS},
                "updatedAt": now_iso(after=item.get("updatedAt")),
            }
            items[idx] = updated
            self.store.save(self.collection, items)
            return updated
        raise NotFoundError(self.kind)

    def delete(self, entity_id: str) -> None:
        items = self.store.load(self.collection)
        kept = [item for item in items if item.get("id") != entity_id]
        if len(kept) == len(items):
            raise NotFoundError(self.kind)
        self.store.save(self.collection, kept)


class TemplateRepository(CollectionRepository):
    def prepare_new(self, payload: dict[str, Any]) -> dict[str, Any]:
        record = dict(payload)
        sections = record.get("sections")
        if not isinstance(sections, list):
            record["sections"] = []
            return record
        normalized: list[Any] = []
        for section in sections:
            if not isinstance(section, dict):
                normalized.append(section)
                continue
            section = {**section, "id": section.get("id") or new_id()}
            questions = section.get("questions") if isinstance(section.get("questions"), list) else []
            section["questions"] = [
                {**q, "id": q.get("id") or new_id()} if isinstance(q, dict) else q
                for q in questions
            ]
            normalized.append(section)
        record["sections"] = normalized
        return record


accounts = CollectionRepository(ACCOUNTS, "Account")
contacts = CollectionRepository(CONTACTS, "Contact")
templates = TemplateRepository(TEMPLATES, "Template")
assessments = CollectionRepository(ASSESSMENTS, "Assessment")
responses = CollectionRepository(RESPONSES, "Response")


def delete_account(account_id: str) -> int:
    removed = get_store().delete_with_cascade(ACCOUNTS, account_id, CONTACTS)
    if removed is None:
        raise NotFoundError("Account")
    logger.info("[CASCADE] account %s deleted with %s contact(s)", account_id, removed)
    return removed


def delete_assessment(assessment_id: str) -> int:
    removed = get_store().delete_with_cascade(ASSESSMENTS, assessment_id, RESPONSES)
    if removed is None:
        raise NotFoundError("Assessment")
    logger.info("[CASCADE] assessment %s deleted with %s response(s)", assessment_id, removed)
    return removed
