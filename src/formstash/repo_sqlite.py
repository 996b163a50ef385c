from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from formstash.errors import StorageError
from formstash.models import Base, SubmissionModel
from formstash.utils import ensure_aware


class SQLiteSubmissionRepo:
    def __init__(self, session_factory: sessionmaker) -> None:
        self._Session = session_factory

    @contextmanager
    def _session(self) -> Iterator[Session]:
        try:
            with self._Session() as session:
                yield session
        except SQLAlchemyError as exc:
            raise StorageError(f"sqlite failure: {exc}") from exc

    def insert(self, record: dict[str, Any]) -> None:
        with self._session() as session:
            row = SubmissionModel(
                id=record["id"],
                form_type=record["form_type"],
                data_json=record["data_json"],
                submitted_at=ensure_aware(record["submitted_at"]).replace(tzinfo=None),
            )
            session.add(row)
            session.commit()

    def count(self) -> int:
        with self._session() as session:
            return session.query(func.count(SubmissionModel.seq)).scalar() or 0

    def list_page(self, offset: int, limit: int) -> list[dict[str, Any]]:
        with self._session() as session:
            rows = (
                self._newest_first(session.query(SubmissionModel))
                .offset(offset)
                .limit(limit)
                .all()
            )
            return [self._to_dict(row) for row in rows]

    def search(self, text: str) -> list[dict[str, Any]]:
        # instr() is case-sensitive, unlike LIKE
        with self._session() as session:
            rows = self._newest_first(
                session.query(SubmissionModel).filter(
                    func.instr(SubmissionModel.data_json, text) > 0
                )
            ).all()
            return [self._to_dict(row) for row in rows]

    def get(self, submission_id: str) -> dict[str, Any] | None:
        with self._session() as session:
            row = (
                session.query(SubmissionModel)
                .filter(SubmissionModel.id == submission_id)
                .first()
            )
            return self._to_dict(row) if row else None

    @staticmethod
    def _newest_first(query):
        return query.order_by(
            SubmissionModel.submitted_at.desc(), SubmissionModel.seq.desc()
        )

    @staticmethod
    def _to_dict(row: SubmissionModel) -> dict[str, Any]:
        return {
            "id": row.id,
            "form_type": row.form_type,
            "data_json": row.data_json,
            "submitted_at": ensure_aware(row.submitted_at),
        }


class SQLiteStorage:
    def __init__(self, db_path: Path | None) -> None:
        if db_path is None:
            # one shared connection so every session sees the same memory database
            self._engine = create_engine(
                "sqlite://",
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            self._engine = create_engine(
                f"sqlite:///{db_path}",
                connect_args={"check_same_thread": False},
            )
        self._Session = sessionmaker(self._engine, expire_on_commit=False)
        Base.metadata.create_all(self._engine)
        self.submissions = SQLiteSubmissionRepo(self._Session)

    def close(self) -> None:
        self._engine.dispose()
