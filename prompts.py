from __future__ import annotations

import math
from typing import Optional

from schemas.curriculum import CurriculumTopic

# Topics matching any of these (subcategory or name, case-insensitive) ask for a table.
DATA_TOPIC_MARKERS = ("data representation", "table", "graph")

BASE_INSTRUCTION = (
    "Generate a Primary 5 level math word problem. The problem should be appropriate "
    "for 10-11 year old students and involve basic arithmetic operations (addition, "
    "subtraction, multiplication, or division)."
)

OUTPUT_CONTRACT = """IMPORTANT: You must respond with ONLY a valid JSON object. No additional text, explanations, or formatting.

Required JSON format:
{
  "problem_text": "The word problem text here",
  "final_answer": [numeric answer as a number, not a string],
  "answer_type": "numeric" | "table" | "graph",
  "hint": "A helpful hint for students who are stuck",
  "step_by_step": [
    "Step 1: Identify what is given in the problem",
    "Step 2: Identify what you need to find",
    "Step 3: Choose the correct operation",
    "Step 4: Perform the calculation",
    "Step 5: Check your answer"
  ]
}

Example:
{
  "problem_text": "Sarah has 24 stickers. She gives 8 stickers to her friend and buys 12 more stickers. How many stickers does Sarah have now?",
  "final_answer": 28,
  "answer_type": "numeric",
  "hint": "First subtract the stickers she gave away, then add the new stickers she bought.",
  "step_by_step": [
    "Step 1: Sarah starts with 24 stickers",
    "Step 2: She gives away 8 stickers: 24 - 8 = 16",
    "Step 3: She buys 12 more stickers: 16 + 12 = 28",
    "Step 4: Sarah has 28 stickers now"
  ]
}

Make sure:
- problem_text is a string with the math word problem
- final_answer is a number (not a string)
- answer_type is exactly one of "numeric", "table" or "graph"
- hint is a helpful hint for struggling students
- step_by_step is an array of clear solution steps
- The problem is engaging and age-appropriate for Primary 5 students
- If a curriculum topic was provided, make the problem relate to that content
- Do not wrap the JSON in code fences
- Respond with ONLY the JSON object, nothing else"""


def is_data_topic(topic: CurriculumTopic) -> bool:
    haystack = f"{topic.subcategory}\n{topic.name}".lower()
    return any(marker in haystack for marker in DATA_TOPIC_MARKERS)


def _topic_clause(topic: CurriculumTopic) -> str:
    if is_data_topic(topic):
        return (
            "Create a data interpretation word problem for this Primary 5 curriculum topic:\n\n"
            f"Topic: {topic.name}\n"
            f"Category: {topic.category}\n"
            f"Subcategory: {topic.subcategory}\n"
            f"Difficulty: {topic.difficulty}\n\n"
            "Include the data in problem_text as a markdown table (header row, separator "
            "row, then 3 to 6 data rows) with realistic figures, such as sales, "
            "attendance or rainfall. The question must be answered by reading or "
            "combining values from the table, and final_answer must still be a single "
            'number. Set answer_type to "table".'
        )
    return (
        "Create a math word problem specifically related to this Primary 5 curriculum topic:\n\n"
        f"Topic: {topic.name}\n"
        f"Category: {topic.category}\n"
        f"Subcategory: {topic.subcategory}\n"
        f"Description: {topic.description}\n"
        f"Difficulty: {topic.difficulty}\n"
        f"Problem Type: {topic.problem_type}\n\n"
        "Make the problem directly relevant to this specific mathematical concept and "
        "appropriate for Primary 5 students. The difficulty should match the "
        f"{topic.difficulty} level."
    )


def build_problem_prompt(topic: Optional[CurriculumTopic] = None) -> str:
    parts = [BASE_INSTRUCTION]
    if topic is not None:
        parts.append(_topic_clause(topic))
    parts.append(OUTPUT_CONTRACT)
    return "\n\n".join(parts)


def format_number(x: float) -> str:
    """28.0 -> "28", 2.5 -> "2.5"."""
    if math.isfinite(x) and abs(x - round(x)) < 1e-12:
        return str(int(round(x)))
    return str(x)


def build_feedback_prompt(
    problem_text: str, correct_answer: float, user_answer: float, is_correct: bool
) -> str:
    if is_correct:
        guidance = (
            "The student answered correctly. Celebrate their success warmly and, if it "
            "helps, briefly say why their method works."
        )
    else:
        guidance = (
            "The student's answer is incorrect. Gently guide them toward the right "
            "approach without giving away the answer. Do NOT state the correct answer "
            "or any number that equals it."
        )

    return f"""You are a helpful math tutor for Primary 5 students (ages 10-11).

Original Problem: "{problem_text}"
Correct Answer: {format_number(correct_answer)}
Student's Answer: {format_number(user_answer)}
Is Correct: {"true" if is_correct else "false"}

{guidance}

The feedback should:
1. Be age-appropriate and encouraging
2. Be 2-3 sentences long
3. Use a warm, supportive tone

Return only the feedback text, no additional formatting."""
