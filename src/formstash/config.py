from __future__ import annotations

import os
from pathlib import Path

from formstash.utils import parse_bool, parse_int

DEFAULT_CORS_ORIGINS = (
    "https://localhost:52408",
    "https://localhost:7082",
    "http://localhost:52408",
    "http://localhost:7082",
)


class Settings:
    def __init__(self) -> None:
        self.storage_backend = os.getenv("STORAGE_BACKEND", "sqlite").lower()
        self.sqlite_path = Path(os.getenv("SQLITE_PATH", "./data/submissions.db"))
        self.json_path = Path(os.getenv("JSON_PATH", "./data/submissions.json"))
        self.default_page_size = parse_int(os.getenv("DEFAULT_PAGE_SIZE"), 50)
        self.seed_demo_data = parse_bool(os.getenv("SEED_DEMO_DATA", "false"))
        origins = os.getenv("CORS_ORIGINS")
        if origins is None:
            self.cors_origins = list(DEFAULT_CORS_ORIGINS)
        else:
            self.cors_origins = [o.strip() for o in origins.split(",") if o.strip()]
        self.debug = parse_bool(os.getenv("DEBUG", "false"))
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        self.host = os.getenv("HOST", "0.0.0.0")
        self.port = parse_int(os.getenv("PORT"), 8000)


def ensure_dirs(settings: Settings) -> None:
    if settings.storage_backend == "sqlite":
        settings.sqlite_path.parent.mkdir(parents=True, exist_ok=True)
    elif settings.storage_backend == "json":
        settings.json_path.parent.mkdir(parents=True, exist_ok=True)
