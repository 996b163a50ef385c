from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from filelock import FileLock
from tinydb import Query, TinyDB
from tinydb.table import Document

from formstash.errors import StorageError
from formstash.utils import parse_dt, to_iso

TABLE = "submissions"


class JSONSubmissionRepo:
    def __init__(self, path: Path, lock: FileLock) -> None:
        self._path = path
        self._lock = lock

    @contextmanager
    def _db(self) -> Iterator[TinyDB]:
        try:
            with self._lock:
                db = TinyDB(self._path)
                try:
                    yield db
                finally:
                    db.close()
        except (OSError, ValueError) as exc:
            raise StorageError(f"json store failure: {exc}") from exc

    def insert(self, record: dict[str, Any]) -> None:
        with self._db() as db:
            db.table(TABLE).insert(self._to_record(record))

    def count(self) -> int:
        with self._db() as db:
            return len(db.table(TABLE))

    def list_page(self, offset: int, limit: int) -> list[dict[str, Any]]:
        with self._db() as db:
            items = db.table(TABLE).all()
            return self._newest_first(items)[offset : offset + limit]

    def search(self, text: str) -> list[dict[str, Any]]:
        with self._db() as db:
            items = db.table(TABLE).search(
                Query().data_json.test(lambda value: text in value)
            )
            return self._newest_first(items)

    def get(self, submission_id: str) -> dict[str, Any] | None:
        with self._db() as db:
            item = db.table(TABLE).get(Query().id == submission_id)
            return self._from_record(item) if item else None

    def _newest_first(self, items: list[Document]) -> list[dict[str, Any]]:
        # doc_id is TinyDB's insertion sequence
        ordered = sorted(
            items,
            key=lambda doc: (parse_dt(doc["submitted_at"]), doc.doc_id),
            reverse=True,
        )
        return [self._from_record(item) for item in ordered]

    @staticmethod
    def _to_record(record: dict[str, Any]) -> dict[str, Any]:
        return {
            "id": record["id"],
            "form_type": record["form_type"],
            "data_json": record["data_json"],
            "submitted_at": to_iso(record["submitted_at"]),
        }

    @staticmethod
    def _from_record(record: dict[str, Any]) -> dict[str, Any]:
        return {
            "id": record["id"],
            "form_type": record["form_type"],
            "data_json": record["data_json"],
            "submitted_at": parse_dt(record["submitted_at"]),
        }


class JSONStorage:
    def __init__(self, path: Path) -> None:
        self._lock = FileLock(f"{path}.lock")
        self.submissions = JSONSubmissionRepo(path, self._lock)

    def close(self) -> None:
        """Nothing to release; each call opens and closes its own TinyDB handle."""
