from __future__ import annotations

import logging
import traceback
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from formstash.config import Settings
from formstash.errors import SubmissionStoreError
from formstash.routes.api import router as api_router
from formstash.seed import seed_demo_data
from formstash.storage import init_storage
from formstash.store import SubmissionStore

logger = logging.getLogger(__name__)

GENERIC_ERROR = "An internal server error occurred. Please try again later."


def register_error_handlers(app: FastAPI, debug: bool) -> None:
    @app.exception_handler(SubmissionStoreError)
    async def store_error_handler(request: Request, exc: SubmissionStoreError) -> JSONResponse:
        return JSONResponse({"error": exc.message}, status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled exception occurred: %s", exc, exc_info=exc)
        if debug:
            body = {
                "error": str(exc) or GENERIC_ERROR,
                "details": "".join(traceback.format_exception(exc)),
            }
        else:
            body = {"error": GENERIC_ERROR, "details": None}
        return JSONResponse(body, status_code=500)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings()
    storage = init_storage(settings)
    if settings.seed_demo_data:
        seed_demo_data(storage.submissions)
    store = SubmissionStore(storage.submissions, default_page_size=settings.default_page_size)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        storage.close()

    app = FastAPI(
        lifespan=lifespan,
        openapi_tags=[
            {"name": "api/submissions", "description": "REST API: submissions"},
            {"name": "system", "description": "System"},
        ],
    )

    app.state.settings = settings
    app.state.storage = storage
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
        allow_credentials=True,
    )
    register_error_handlers(app, settings.debug)
    app.include_router(api_router)

    return app
