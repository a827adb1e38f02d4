from __future__ import annotations

from datetime import UTC, datetime
from typing import List
from uuid import uuid4

import sqlalchemy as sa
from sqlalchemy import Boolean, DateTime, Float, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db import Base


def _new_id() -> str:
    return str(uuid4())


class ProblemSession(Base):
    __tablename__ = "math_problem_sessions"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), index=True
    )
    problem_text: Mapped[str] = mapped_column(Text)
    correct_answer: Mapped[float] = mapped_column(Float)

    submissions: Mapped[List["Submission"]] = relationship(
        back_populates="session", cascade="all, delete-orphan"
    )


class Submission(Base):
    __tablename__ = "math_problem_submissions"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC)
    )
    session_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("math_problem_sessions.id", ondelete="CASCADE"), index=True
    )
    user_answer: Mapped[float] = mapped_column(Float)
    is_correct: Mapped[bool] = mapped_column(Boolean)
    feedback_text: Mapped[str] = mapped_column(sa.Text, default="")

    session: Mapped[ProblemSession] = relationship(back_populates="submissions")
