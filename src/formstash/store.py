from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import Any, NamedTuple

from formstash.errors import NotFoundError, StorageError, ValidationError
from formstash.mapping import serialize_payload, to_submission
from formstash.models import FORM_TYPE_MAX_LENGTH
from formstash.storage import SubmissionRepository
from formstash.utils import new_ulid, now_utc

logger = logging.getLogger(__name__)

MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 100


class SearchResult(NamedTuple):
    items: list[dict[str, Any]]
    # the ListPage envelope when a blank query fell back to the first page
    page: dict[str, Any] | None


def clamp_page_size(page_size: int) -> int:
    return max(MIN_PAGE_SIZE, min(page_size, MAX_PAGE_SIZE))


class SubmissionStore:
    """Create and query arbitrary-schema form submissions.

    Every call makes exactly one attempt against the repository. Records are
    never updated or deleted once inserted.
    """

    def __init__(
        self,
        repo: SubmissionRepository,
        default_page_size: int = 50,
        clock: Callable[[], datetime] = now_utc,
    ) -> None:
        self._repo = repo
        self.default_page_size = clamp_page_size(default_page_size)
        self._clock = clock

    @contextmanager
    def _storage_guard(self, message: str) -> Iterator[None]:
        try:
            yield
        except StorageError as exc:
            logger.exception("Storage failure (%s): %s", message, exc.message)
            raise StorageError(message) from exc

    def create(self, form_type: str | None, data: Any) -> dict[str, Any]:
        form_type = (form_type or "").strip()
        if not form_type:
            raise ValidationError("type is required")
        if len(form_type) > FORM_TYPE_MAX_LENGTH:
            raise ValidationError("type is too long")
        data_json = serialize_payload(data)

        record = {
            "id": new_ulid(),
            "form_type": form_type,
            "data_json": data_json,
            "submitted_at": self._clock(),
        }
        with self._storage_guard("server error"):
            self._repo.insert(record)
        logger.info("Stored submission %s (%s)", record["id"], form_type)
        return {
            "id": record["id"],
            "form_type": form_type,
            "submitted_at": record["submitted_at"],
        }

    def count(self) -> int:
        with self._storage_guard("Failed to retrieve"):
            return self._repo.count()

    def list_page(self, page: int = 1, page_size: int | None = None) -> dict[str, Any]:
        page = max(1, page)
        if page_size is None:
            page_size = self.default_page_size
        page_size = clamp_page_size(page_size)

        with self._storage_guard("Failed to retrieve"):
            total_count = self._repo.count()
            offset = (page - 1) * page_size
            # past the last record; also keeps huge offsets away from SQLite integers
            if offset >= total_count:
                items = []
            else:
                rows = self._repo.list_page(offset, page_size)
                items = [to_submission(row) for row in rows]
        return {
            "page": page,
            "page_size": page_size,
            "total_count": total_count,
            "total_pages": math.ceil(total_count / page_size),
            "items": items,
        }

    def search(self, query: str | None) -> SearchResult:
        """Return every submission whose stored JSON text contains ``query``.

        This is a literal, case-sensitive substring scan over the serialized
        payload, so keys and unrelated values can match too. A blank query
        falls back to the default first page, which is then set on
        ``SearchResult.page``.
        """
        if not query or not query.strip():
            page = self.list_page(1)
            return SearchResult(items=page["items"], page=page)
        with self._storage_guard("Failed to search"):
            items = [to_submission(row) for row in self._repo.search(query)]
        return SearchResult(items=items, page=None)

    def get(self, submission_id: str) -> dict[str, Any]:
        with self._storage_guard("Failed to retrieve"):
            row = self._repo.get(submission_id)
            if row is None:
                raise NotFoundError("Submission not found")
            return to_submission(row)
