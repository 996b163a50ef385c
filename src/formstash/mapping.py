"""Boundary between structured payloads and the text the repositories keep.

Repositories only ever see ``data_json`` as a string. Everything that turns
a caller's JSON value into that string, or turns a stored row back into the
shape handed to callers, lives here.
"""
from __future__ import annotations

import re
from typing import Any

import orjson

from formstash.errors import StorageError, ValidationError
from formstash.utils import dumps_json, loads_json, to_iso

EMPTY_OBJECT = "{}"

# orjson reads integers outside [int64 min, uint64 max] as floats
INT_MIN = -(2**63)
UINT_MAX = 2**64 - 1
_JSON_TOKEN = re.compile(r'"(?:[^"\\]|\\.)*"|-?\d+(?:\.\d+)?(?:[eE][+-]?\d+)?')


def check_integer_range(text: str) -> None:
    """Reject JSON text whose integer literals would not survive a round trip."""
    for match in _JSON_TOKEN.finditer(text):
        token = match.group()
        if token.startswith('"') or any(c in token for c in ".eE"):
            continue
        if len(token.lstrip("-")) > 20 or not INT_MIN <= int(token) <= UINT_MAX:
            raise ValidationError("data is not serializable")


def serialize_payload(data: Any) -> str:
    if data is None:
        raise ValidationError("data is required")
    try:
        text = dumps_json(data)
    except orjson.JSONEncodeError as exc:
        raise ValidationError("data is not serializable") from exc
    if text == EMPTY_OBJECT:
        raise ValidationError("data cannot be empty")
    return text


def deserialize_payload(text: str) -> Any:
    try:
        return loads_json(text)
    except orjson.JSONDecodeError as exc:
        raise StorageError("stored payload is not valid JSON") from exc


def to_submission(record: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": record["id"],
        "form_type": record["form_type"],
        "submitted_at": record["submitted_at"],
        "data": deserialize_payload(record["data_json"]),
    }


def submission_output(submission: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": submission["id"],
        "formType": submission["form_type"],
        "submittedAt": to_iso(submission["submitted_at"]),
        "data": submission["data"],
    }


def page_output(page: dict[str, Any]) -> dict[str, Any]:
    return {
        "page": page["page"],
        "pageSize": page["page_size"],
        "totalCount": page["total_count"],
        "totalPages": page["total_pages"],
        "data": [submission_output(item) for item in page["items"]],
    }
