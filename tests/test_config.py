from __future__ import annotations

from pathlib import Path

import pytest

from formstash.config import DEFAULT_CORS_ORIGINS, Settings
from formstash.storage import init_storage


def test_defaults(monkeypatch):
    for name in [
        "STORAGE_BACKEND",
        "SQLITE_PATH",
        "DEFAULT_PAGE_SIZE",
        "SEED_DEMO_DATA",
        "CORS_ORIGINS",
        "DEBUG",
        "LOG_LEVEL",
        "PORT",
    ]:
        monkeypatch.delenv(name, raising=False)

    settings = Settings()

    assert settings.storage_backend == "sqlite"
    assert settings.sqlite_path == Path("./data/submissions.db")
    assert settings.default_page_size == 50
    assert settings.seed_demo_data is False
    assert settings.cors_origins == list(DEFAULT_CORS_ORIGINS)
    assert settings.debug is False
    assert settings.log_level == "INFO"
    assert settings.port == 8000


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("STORAGE_BACKEND", "JSON")
    monkeypatch.setenv("DEFAULT_PAGE_SIZE", "20")
    monkeypatch.setenv("SEED_DEMO_DATA", "yes")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example,")
    monkeypatch.setenv("PORT", "not-a-port")

    settings = Settings()

    assert settings.storage_backend == "json"
    assert settings.default_page_size == 20
    assert settings.seed_demo_data is True
    assert settings.cors_origins == ["https://a.example", "https://b.example"]
    assert settings.port == 8000


def test_unknown_backend_is_rejected(settings):
    settings.storage_backend = "postgres"
    with pytest.raises(ValueError):
        init_storage(settings)


@pytest.mark.parametrize("backend", ["sqlite", "json"])
def test_file_backends_create_parent_dirs(settings, tmp_path, backend):
    settings.storage_backend = backend
    settings.sqlite_path = tmp_path / "nested" / "app.db"
    settings.json_path = tmp_path / "nested" / "app.json"

    storage = init_storage(settings)
    try:
        assert (tmp_path / "nested").is_dir()
        assert storage.submissions.count() == 0
    finally:
        storage.close()
