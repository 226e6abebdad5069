"""Collection persistence.

Every entity kind lives in one named collection. The default backend keeps
each collection as a JSON array in ``<DATA_DIR>/<collection>.json`` and
rewrites the whole file on every mutation. When ``DATABASE_URL`` is set the
same contract is served from a SQL table with per-record rows, indexed
lookups and transactional cascades.
"""

import json
import logging
from pathlib import Path
from typing import Any, Iterable

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError

from .config import ASSESSMENTS, COLLECTIONS, CONTACTS, DATA_DIR, DATABASE_URL, RESPONSES
from .database import session_factory
from .errors import StorageError
from .models import EntityRecord

logger = logging.getLogger(__name__)

OWNER_FIELDS = {
    CONTACTS: "AccountId",
    ASSESSMENTS: "accountId",
    RESPONSES: "assessmentId",
}


class JsonFileStore:
    def __init__(self, data_dir: Path) -> None:
        self.data_dir = Path(data_dir)

    def path_for(self, collection: str) -> Path:
        return self.data_dir / f"{collection}.json"

    def init_collections(self, names: Iterable[str] = COLLECTIONS) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        for name in names:
            path = self.path_for(name)
            if not path.exists():
                path.write_text("[]", encoding="utf-8")
                logger.info("[STORE] created empty collection file %s", str(path))

    def load(self, collection: str) -> list[dict[str, Any]]:
        path = self.path_for(collection)
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            logger.warning("[STORE] failed to read %s: %s", str(path), exc)
            return []
        if not isinstance(data, list):
            logger.warning("[STORE] %s does not hold a JSON array; treating as empty", str(path))
            return []
        records = [item for item in data if isinstance(item, dict)]
        if len(records) != len(data):
            logger.warning("[STORE] %s: skipped %d non-object entries", str(path), len(data) - len(records))
        return records

    def save(self, collection: str, items: list[dict[str, Any]]) -> None:
        path = self.path_for(collection)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(items, indent=2), encoding="utf-8")
        except (OSError, TypeError, ValueError) as exc:
            logger.error("[STORE] failed to write %s: %s", str(path), exc)
            raise StorageError(f"Failed to write collection {collection}") from exc

    def find(self, collection: str, entity_id: str) -> dict[str, Any] | None:
        for item in self.load(collection):
            if item.get("id") == entity_id:
                return item
        return None

    def find_by_owner(self, collection: str, owner_id: str) -> list[dict[str, Any]]:
        field = OWNER_FIELDS[collection]
        return [item for item in self.load(collection) if item.get(field) == owner_id]

    def delete_with_cascade(self, collection: str, entity_id: str, child_collection: str) -> int | None:
        """Remove one record and every child pointing at it.

        Returns the number of children removed, or None when the record does
        not exist. The two writes are independent: a failed child write
        leaves orphans behind.
        """
        items = self.load(collection)
        kept = [item for item in items if item.get("id") != entity_id]
        if len(kept) == len(items):
            return None
        self.save(collection, kept)

        field = OWNER_FIELDS[child_collection]
        children = self.load(child_collection)
        kept_children = [child for child in children if child.get(field) != entity_id]
        self.save(child_collection, kept_children)
        return len(children) - len(kept_children)


class SqlStore:
    def __init__(self, database_url: str) -> None:
        self.database_url = database_url
        self.SessionLocal = session_factory(database_url)

    def init_collections(self, names: Iterable[str] = COLLECTIONS) -> None:
        # Tables are created with the session factory; collections are implicit.
        return None

    @staticmethod
    def _row(collection: str, position: int, item: dict[str, Any]) -> EntityRecord:
        field = OWNER_FIELDS.get(collection)
        owner = item.get(field) if field else None
        return EntityRecord(
            collection=collection,
            id=str(item.get("id")),
            position=position,
            owner_id=str(owner) if owner else None,
            body=item,
        )

    def load(self, collection: str) -> list[dict[str, Any]]:
        try:
            with self.SessionLocal() as db:
                rows = db.execute(
                    select(EntityRecord.body)
                    .where(EntityRecord.collection == collection)
                    .order_by(EntityRecord.position)
                ).scalars().all()
        except SQLAlchemyError as exc:
            logger.warning("[STORE] failed to read collection %s: %s", collection, exc)
            return []
        return [dict(row) for row in rows]

    def save(self, collection: str, items: list[dict[str, Any]]) -> None:
        try:
            with self.SessionLocal() as db:
                db.execute(delete(EntityRecord).where(EntityRecord.collection == collection))
                db.add_all([self._row(collection, idx, item) for idx, item in enumerate(items)])
                db.commit()
        except SQLAlchemyError as exc:
            logger.error("[STORE] failed to write collection %s: %s", collection, exc)
            raise StorageError(f"Failed to write collection {collection}") from exc

    def find(self, collection: str, entity_id: str) -> dict[str, Any] | None:
        try:
            with self.SessionLocal() as db:
                body = db.execute(
                    select(EntityRecord.body).where(
                        EntityRecord.collection == collection,
                        EntityRecord.id == entity_id,
                    )
                ).scalars().first()
        except SQLAlchemyError as exc:
            logger.warning("[STORE] failed to read %s/%s: %s", collection, entity_id, exc)
            return None
        return dict(body) if body is not None else None

    def find_by_owner(self, collection: str, owner_id: str) -> list[dict[str, Any]]:
        try:
            with self.SessionLocal() as db:
                rows = db.execute(
                    select(EntityRecord.body)
                    .where(EntityRecord.collection == collection, EntityRecord.owner_id == owner_id)
                    .order_by(EntityRecord.position)
                ).scalars().all()
        except SQLAlchemyError as exc:
            logger.warning("[STORE] failed to read %s by owner %s: %s", collection, owner_id, exc)
            return []
        return [dict(row) for row in rows]

    def delete_with_cascade(self, collection: str, entity_id: str, child_collection: str) -> int | None:
        try:
            with self.SessionLocal() as db:
                removed = db.execute(
                    delete(EntityRecord).where(
                        EntityRecord.collection == collection,
                        EntityRecord.id == entity_id,
                    )
                ).rowcount
                if not removed:
                    db.rollback()
                    return None
                children = db.execute(
                    select(func.count()).select_from(EntityRecord).where(
                        EntityRecord.collection == child_collection,
                        EntityRecord.owner_id == entity_id,
                    )
                ).scalar_one()
                db.execute(
                    delete(EntityRecord).where(
                        EntityRecord.collection == child_collection,
                        EntityRecord.owner_id == entity_id,
                    )
                )
                db.commit()
        except SQLAlchemyError as exc:
            logger.error("[STORE] failed to delete %s/%s: %s", collection, entity_id, exc)
            raise StorageError(f"Failed to delete from collection {collection}") from exc
        return int(children)


_store: JsonFileStore | SqlStore | None = None


def build_store() -> JsonFileStore | SqlStore:
    if DATABASE_URL:
        return SqlStore(DATABASE_URL)
    return JsonFileStore(DATA_DIR)


def get_store() -> JsonFileStore | SqlStore:
    global _store
    if _store is None:
        _store = build_store()
    return _store


def set_store(store: JsonFileStore | SqlStore | None) -> None:
    global _store
    _store = store
