from __future__ import annotations

import logging
from typing import Any, Protocol

from formstash.config import Settings, ensure_dirs
from formstash.repo_json import JSONStorage
from formstash.repo_sqlite import SQLiteStorage

logger = logging.getLogger(__name__)

BACKENDS = {"sqlite", "memory", "json"}


class SubmissionRepository(Protocol):
    """Text-only persistence for submissions.

    Records crossing this boundary carry ``data_json`` as serialized text;
    turning it back into structured data is the caller's job. Backend
    failures surface as ``StorageError``.
    """

    def insert(self, record: dict[str, Any]) -> None: ...

    def count(self) -> int: ...

    def list_page(self, offset: int, limit: int) -> list[dict[str, Any]]: ...

    def search(self, text: str) -> list[dict[str, Any]]: ...

    def get(self, submission_id: str) -> dict[str, Any] | None: ...


class Storage(Protocol):
    submissions: SubmissionRepository

    def close(self) -> None: ...


def init_storage(settings: Settings) -> Storage:
    backend = settings.storage_backend
    if backend not in BACKENDS:
        raise ValueError(f"unknown storage backend: {backend}")
    ensure_dirs(settings)
    if backend == "json":
        logger.info("Using TinyDB storage at %s", settings.json_path)
        return JSONStorage(settings.json_path)
    if backend == "memory":
        logger.info("Using in-memory SQLite storage")
        return SQLiteStorage(None)
    logger.info("Using SQLite storage at %s", settings.sqlite_path)
    return SQLiteStorage(settings.sqlite_path)
