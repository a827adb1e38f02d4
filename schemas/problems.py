from __future__ import annotations

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer

AnswerType = Literal["numeric", "table", "graph"]
ANSWER_TYPES = ("numeric", "table", "graph")


def compact_number(x: float) -> int | float:
    """28.0 -> 28 in JSON output; fractional or huge values stay floats."""
    if x.is_integer() and abs(x) < 2**53:
        return int(x)
    return x


class GeneratedProblem(BaseModel):
    model_config = ConfigDict(frozen=True)
    problem_text: str
    final_answer: float
    answer_type: AnswerType = "numeric"
    hint: str
    step_by_step: List[str]

    @field_serializer("final_answer", when_used="json")
    def _final_answer_json(self, v: float):
        return compact_number(v)


# ---------- Generate ----------


class GenerateProblemRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    curriculum_topic_id: Optional[str] = Field(default=None, alias="curriculumTopicId")


class TopicSummary(BaseModel):
    name: str
    difficulty: str
    problem_type: str


class GenerateProblemResponse(BaseModel):
    success: bool = True
    problem: GeneratedProblem
    session_id: str
    curriculum_topic: Optional[TopicSummary] = None


# ---------- Submit ----------


class SubmitAnswerRequest(BaseModel):
    # Loosely typed so a missing/malformed field is a 400 from the route, not a 422.
    session_id: Optional[str] = None
    user_answer: Any = None


class SubmitAnswerResponse(BaseModel):
    success: bool = True
    is_correct: bool
    feedback: str
    submission_id: str
