from __future__ import annotations

from errors import ModelError
from gemini_client import TextModel
from prompts import build_feedback_prompt


def generate_feedback(
    model: TextModel,
    *,
    problem_text: str,
    correct_answer: float,
    user_answer: float,
    is_correct: bool,
) -> str:
    prompt = build_feedback_prompt(problem_text, correct_answer, user_answer, is_correct)
    text = model.generate(prompt).strip()
    if not text:
        raise ModelError("AI model returned empty feedback")
    return text
