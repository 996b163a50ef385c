from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
from fastapi.testclient import TestClient

from formstash.app import create_app
from formstash.config import Settings
from formstash.errors import StorageError
from formstash.repo_json import JSONStorage
from formstash.repo_sqlite import SQLiteStorage
from formstash.store import SubmissionStore


class FakeClock:
    def __init__(self, start: datetime, step: timedelta = timedelta(minutes=1)) -> None:
        self.current = start
        self.step = step

    def __call__(self) -> datetime:
        value = self.current
        self.current = self.current + self.step
        return value


class BrokenRepo:
    """Repository whose every call fails the way a dead backend would."""

    def _fail(self, *args: Any, **kwargs: Any) -> Any:
        raise StorageError("disk I/O error at /var/lib/secret.db")

    insert = count = list_page = search = get = _fail


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 1, 1, tzinfo=timezone.utc))


@pytest.fixture(params=["memory", "sqlite", "json"])
def storage(request, tmp_path):
    if request.param == "memory":
        backend = SQLiteStorage(None)
    elif request.param == "sqlite":
        backend = SQLiteStorage(tmp_path / "submissions.db")
    else:
        backend = JSONStorage(tmp_path / "submissions.json")
    yield backend
    backend.close()


@pytest.fixture
def repo(storage):
    return storage.submissions


@pytest.fixture
def store(repo, clock) -> SubmissionStore:
    return SubmissionStore(repo, clock=clock)


@pytest.fixture
def settings(monkeypatch, tmp_path) -> Settings:
    monkeypatch.setenv("STORAGE_BACKEND", "memory")
    monkeypatch.setenv("SQLITE_PATH", str(tmp_path / "app.db"))
    monkeypatch.setenv("JSON_PATH", str(tmp_path / "app.json"))
    monkeypatch.delenv("SEED_DEMO_DATA", raising=False)
    monkeypatch.delenv("DEFAULT_PAGE_SIZE", raising=False)
    monkeypatch.delenv("CORS_ORIGINS", raising=False)
    monkeypatch.delenv("DEBUG", raising=False)
    return Settings()


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client
