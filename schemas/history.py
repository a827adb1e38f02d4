from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, field_serializer

from schemas.problems import compact_number


class SessionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    created_at: datetime | None
    problem_text: str
    correct_answer: float

    @field_serializer("correct_answer", when_used="json")
    def _correct_answer_json(self, v: float):
        return compact_number(v)


class SubmissionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    created_at: datetime | None
    user_answer: float
    is_correct: bool
    feedback_text: str

    @field_serializer("user_answer", when_used="json")
    def _user_answer_json(self, v: float):
        return compact_number(v)


class SessionHistory(SessionOut):
    score: int
    correct_attempts: int
    total_attempts: int
    # newest first
    submissions: List[SubmissionOut]


class Pagination(BaseModel):
    limit: int
    offset: int
    has_more: bool


class HistoryResponse(BaseModel):
    success: bool = True
    sessions: List[SessionHistory]
    pagination: Pagination
