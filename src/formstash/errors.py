from __future__ import annotations


class SubmissionStoreError(Exception):
    """Base class for errors surfaced by the submission store.

    ``message`` is safe to return to an external caller; anything more
    detailed travels on ``__cause__`` and is only logged.
    """

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(SubmissionStoreError):
    status_code = 400


class NotFoundError(SubmissionStoreError):
    status_code = 404


class StorageError(SubmissionStoreError):
    status_code = 500
