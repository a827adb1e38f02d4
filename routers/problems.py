from __future__ import annotations

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends

from curriculum import CurriculumCatalog
from deps.services import get_catalog, get_model_client, get_store
from errors import BadRequestError, NotFoundError
from feedback import generate_feedback
from gemini_client import TextModel
from parsing import coerce_number, parse_problem_response
from prompts import build_problem_prompt
from schemas.curriculum import CurriculumTopic
from schemas.problems import (
    GenerateProblemRequest,
    GenerateProblemResponse,
    SubmitAnswerRequest,
    SubmitAnswerResponse,
    TopicSummary,
)
from store import ProblemStore

logger = logging.getLogger("math-practice.problems")

router = APIRouter(prefix="/api/math-problem", tags=["problems"])


def _resolve_topic(catalog: CurriculumCatalog, topic_id: Optional[str]) -> Optional[CurriculumTopic]:
    if not topic_id or not topic_id.strip():
        return None
    topic = catalog.get(topic_id.strip())
    if topic is None:
        # unknown ids fall back to a generic problem
        logger.warning("Unknown curriculum topic id %r; generating a generic problem", topic_id)
    return topic


@router.post("", response_model=GenerateProblemResponse)
def generate_problem(
    catalog: Annotated[CurriculumCatalog, Depends(get_catalog)],
    model: Annotated[TextModel, Depends(get_model_client)],
    store: Annotated[ProblemStore, Depends(get_store)],
    req: Optional[GenerateProblemRequest] = None,
):
    topic = _resolve_topic(catalog, req.curriculum_topic_id if req else None)
    prompt = build_problem_prompt(topic)

    text = model.generate(prompt)
    problem = parse_problem_response(text)

    session_id = store.create_session(problem.problem_text, problem.final_answer)
    logger.info(
        "Generated problem session=%s topic=%s answer_type=%s",
        session_id,
        topic.id if topic else None,
        problem.answer_type,
    )

    summary = None
    if topic is not None:
        summary = TopicSummary(
            name=topic.name, difficulty=topic.difficulty, problem_type=topic.problem_type
        )
    return GenerateProblemResponse(problem=problem, session_id=session_id, curriculum_topic=summary)


@router.post("/submit", response_model=SubmitAnswerResponse)
def submit_answer(
    req: SubmitAnswerRequest,
    model: Annotated[TextModel, Depends(get_model_client)],
    store: Annotated[ProblemStore, Depends(get_store)],
):
    if not req.session_id or req.user_answer is None:
        raise BadRequestError("Missing session_id or user_answer")
    try:
        user_answer = coerce_number(req.user_answer)
    except ValueError:
        raise BadRequestError("user_answer must be a number")

    session = store.get_session(req.session_id)
    if session is None:
        raise NotFoundError("Problem session not found")

    # exact comparison against the stored answer; no tolerance band
    is_correct = user_answer == session.correct_answer

    feedback = generate_feedback(
        model,
        problem_text=session.problem_text,
        correct_answer=session.correct_answer,
        user_answer=user_answer,
        is_correct=is_correct,
    )
    submission_id = store.create_submission(session.id, user_answer, is_correct, feedback)
    logger.info("Recorded submission=%s session=%s correct=%s", submission_id, session.id, is_correct)

    return SubmitAnswerResponse(is_correct=is_correct, feedback=feedback, submission_id=submission_id)
