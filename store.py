from __future__ import annotations

import logging
import math
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload, sessionmaker

from errors import NotFoundError, StorageError
from models import ProblemSession, Submission
from schemas.history import SessionHistory, SessionOut, SubmissionOut

logger = logging.getLogger("math-practice.store")


def score_percent(correct: int, total: int) -> int:
    """round(correct / total * 100), 0 when there are no attempts."""
    if total <= 0:
        return 0
    # half-up: 1 of 8 -> 13, not banker's-rounded 12
    return math.floor(correct / total * 100 + 0.5)


class ProblemStore:
    """Persistence for generated problems (sessions) and answer attempts (submissions)."""

    def __init__(self, session_factory: sessionmaker[Session]):
        self._session_factory = session_factory

    def create_session(self, problem_text: str, correct_answer: float) -> str:
        try:
            with self._session_factory() as db:
                row = ProblemSession(problem_text=problem_text, correct_answer=correct_answer)
                db.add(row)
                db.commit()
                db.refresh(row)
                return row.id
        except SQLAlchemyError as e:
            logger.error("Failed to save problem session: %s", e)
            raise StorageError("Failed to save problem to database") from e

    def get_session(self, session_id: str) -> Optional[SessionOut]:
        try:
            with self._session_factory() as db:
                row = db.get(ProblemSession, session_id)
                return SessionOut.model_validate(row) if row else None
        except SQLAlchemyError as e:
            logger.error("Failed to load problem session %s: %s", session_id, e)
            raise StorageError("Failed to load problem session") from e

    def create_submission(
        self, session_id: str, user_answer: float, is_correct: bool, feedback_text: str
    ) -> str:
        try:
            with self._session_factory() as db:
                if db.get(ProblemSession, session_id) is None:
                    raise NotFoundError("Problem session not found")
                row = Submission(
                    session_id=session_id,
                    user_answer=user_answer,
                    is_correct=is_correct,
                    feedback_text=feedback_text,
                )
                db.add(row)
                db.commit()
                db.refresh(row)
                return row.id
        except SQLAlchemyError as e:
            logger.error("Failed to save submission for session %s: %s", session_id, e)
            raise StorageError("Failed to save submission to database") from e

    def list_history(self, limit: int, offset: int) -> List[SessionHistory]:
        stmt = (
            select(ProblemSession)
            .options(selectinload(ProblemSession.submissions))
            .order_by(ProblemSession.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        try:
            with self._session_factory() as db:
                rows = db.scalars(stmt).all()
                return [self._history_item(r) for r in rows]
        except SQLAlchemyError as e:
            logger.error("Failed to fetch problem history: %s", e)
            raise StorageError("Failed to fetch problem history") from e

    @staticmethod
    def _history_item(row: ProblemSession) -> SessionHistory:
        subs = sorted(row.submissions, key=lambda s: s.created_at, reverse=True)
        correct = sum(1 for s in subs if s.is_correct)
        return SessionHistory(
            **SessionOut.model_validate(row).model_dump(),
            score=score_percent(correct, len(subs)),
            correct_attempts=correct,
            total_attempts=len(subs),
            submissions=[SubmissionOut.model_validate(s) for s in subs],
        )
