from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field

Difficulty = Literal["Easy", "Medium", "Hard"]
ProblemType = Literal["addition", "subtraction", "multiplication", "division", "mixed"]


class CurriculumTopic(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)
    id: str
    name: str
    description: str
    category: str
    subcategory: str
    difficulty: Difficulty
    problem_type: ProblemType = Field(alias="problemType")


class CurriculumTopicsResponse(BaseModel):
    success: bool = True
    topics: List[CurriculumTopic]
