from __future__ import annotations

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase

FORM_TYPE_MAX_LENGTH = 100


class Base(DeclarativeBase):
    pass


class SubmissionModel(Base):
    __tablename__ = "submissions"

    # insertion sequence, used as the tie-break for equal timestamps
    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String, unique=True, index=True, nullable=False)
    form_type = Column(String(FORM_TYPE_MAX_LENGTH), nullable=False)
    data_json = Column(Text, nullable=False)
    submitted_at = Column(DateTime, index=True, nullable=False)
