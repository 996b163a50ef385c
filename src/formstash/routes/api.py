from __future__ import annotations

from typing import Any

import orjson
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from formstash.errors import ValidationError
from formstash.mapping import check_integer_range, page_output, submission_output
from formstash.store import SubmissionStore
from formstash.utils import loads_json, parse_int, to_iso

router = APIRouter()


def get_store(request: Request) -> SubmissionStore:
    return request.app.state.store


async def read_payload(request: Request) -> Any:
    body = await request.body()
    if not body.strip():
        return None
    try:
        data = loads_json(body)
    except orjson.JSONDecodeError as exc:
        raise ValidationError("invalid JSON") from exc
    check_integer_range(body.decode("utf-8"))
    return data


@router.get("/healthz", tags=["system"])
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.post("/api/submissions", tags=["api/submissions"])
async def api_create_submission_without_type(
    request: Request, store: SubmissionStore = Depends(get_store)
) -> JSONResponse:
    return await api_create_submission("", request, store)


@router.post("/api/submissions/{form_type}", tags=["api/submissions"])
async def api_create_submission(
    form_type: str, request: Request, store: SubmissionStore = Depends(get_store)
) -> JSONResponse:
    receipt = store.create(form_type, await read_payload(request))
    return JSONResponse(
        {
            "id": receipt["id"],
            "message": "submitted successfully",
            "submittedAt": to_iso(receipt["submitted_at"]),
        }
    )


@router.get("/api/submissions", tags=["api/submissions"])
async def api_list_submissions(
    request: Request, store: SubmissionStore = Depends(get_store)
) -> JSONResponse:
    params = request.query_params
    page = store.list_page(
        parse_int(params.get("page"), 1),
        parse_int(params.get("pageSize"), store.default_page_size),
    )
    return JSONResponse(page_output(page))


@router.get("/api/submissions/search", tags=["api/submissions"])
async def api_search_submissions(
    request: Request, store: SubmissionStore = Depends(get_store)
) -> JSONResponse:
    result = store.search(request.query_params.get("query"))
    if result.page is not None:
        return JSONResponse(page_output(result.page))
    return JSONResponse([submission_output(item) for item in result.items])


@router.get("/api/submissions/{submission_id}", tags=["api/submissions"])
async def api_get_submission(
    submission_id: str, store: SubmissionStore = Depends(get_store)
) -> JSONResponse:
    return JSONResponse(submission_output(store.get(submission_id)))
