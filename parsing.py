"""
Turn raw model output into a ``GeneratedProblem``.

    raw text --extract_json_block--> "{...}" --parse_problem_json--> dict
             --validate_problem--> GeneratedProblem

Extraction is a heuristic: it bounds the region between the first "{" and the
last "}". That is right for a single object surrounded by prose or code fences,
and not guaranteed for replies holding several objects or stray braces in the
prose (e.g. "use {x} here" before the real object).
"""

from __future__ import annotations

import json
import logging
import math
import re
from typing import Any, List, Mapping

from errors import ExtractionError, ParseError, SchemaError
from schemas.problems import ANSWER_TYPES, GeneratedProblem

logger = logging.getLogger("math-practice.parsing")

_OPEN_FENCE_RE = re.compile(r"^```[\w+-]*[ \t]*\n?")
_CLOSE_FENCE_RE = re.compile(r"\n?[ \t]*```$")
_NUMBER_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")

DEFAULT_ANSWER_TYPE = "numeric"


# --- Extraction -------------------------------------------------------------------


def strip_code_fence(text: str) -> str:
    raw = text.strip()
    raw = _OPEN_FENCE_RE.sub("", raw, count=1)
    raw = _CLOSE_FENCE_RE.sub("", raw, count=1)
    return raw.strip()


def extract_json_block(text: str) -> str:
    cleaned = strip_code_fence(text or "")
    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start == -1 or end == -1 or end < start:
        raise ExtractionError("no JSON object found")
    return cleaned[start : end + 1]


def parse_problem_json(fragment: str) -> dict:
    try:
        data = json.loads(fragment)
    except json.JSONDecodeError as e:
        raise ParseError(f"invalid JSON in AI response: {e.msg}") from e
    except ValueError as e:
        # e.g. integer literals beyond the interpreter's digit limit
        raise ParseError(f"invalid JSON in AI response: {e}") from e
    if not isinstance(data, dict):
        raise ParseError("AI response is not a JSON object")
    return data


# --- Coercion ---------------------------------------------------------------------


def coerce_number(value: Any) -> float:
    """
    Accept ints, floats and plain numeric strings ("42", " -3.5 ", "1e3").
    Booleans, "nan"/"inf", thousands separators and anything non-finite raise ValueError.
    """
    if isinstance(value, bool):
        raise ValueError("booleans are not numbers")
    if isinstance(value, (int, float)):
        try:
            f = float(value)
        except OverflowError as e:
            raise ValueError("number is too large") from e
    elif isinstance(value, str):
        s = value.strip()
        if _NUMBER_RE.fullmatch(s) is None:
            raise ValueError(f"not a number: {value!r}")
        f = float(s)
    else:
        raise ValueError(f"not a number: {value!r}")
    if not math.isfinite(f):
        raise ValueError("number is not finite")
    return f


def _required_text(data: Mapping[str, Any], field: str) -> str:
    v = data.get(field)
    if not isinstance(v, str) or not v.strip():
        raise SchemaError(f"missing {field}", field=field)
    return v.strip()


def _steps(value: Any) -> List[str]:
    if not isinstance(value, (list, tuple)):
        raise SchemaError("missing step_by_step", field="step_by_step")
    steps = [str(s).strip() for s in value if s is not None]
    steps = [s for s in steps if s]
    if not steps:
        raise SchemaError("missing step_by_step", field="step_by_step")
    return steps


def _answer_type(value: Any) -> str:
    # Unknown values are clamped rather than rejected: the problem is still usable.
    if value is None:
        return DEFAULT_ANSWER_TYPE
    if isinstance(value, str) and value.strip().lower() in ANSWER_TYPES:
        return value.strip().lower()
    logger.warning("Unrecognized answer_type %r; using %r", value, DEFAULT_ANSWER_TYPE)
    return DEFAULT_ANSWER_TYPE


# --- Validation -------------------------------------------------------------------


def validate_problem(data: Any) -> GeneratedProblem:
    if not isinstance(data, Mapping):
        raise ParseError("AI response is not a JSON object")

    problem_text = _required_text(data, "problem_text")

    try:
        final_answer = coerce_number(data.get("final_answer"))
    except ValueError as e:
        raise SchemaError("invalid final_answer", field="final_answer") from e

    hint = _required_text(data, "hint")
    steps = _steps(data.get("step_by_step"))
    answer_type = _answer_type(data.get("answer_type"))

    return GeneratedProblem(
        problem_text=problem_text,
        final_answer=final_answer,
        answer_type=answer_type,
        hint=hint,
        step_by_step=steps,
    )


def parse_problem_response(text: str) -> GeneratedProblem:
    try:
        return validate_problem(parse_problem_json(extract_json_block(text)))
    except (ExtractionError, ParseError, SchemaError) as e:
        logger.error("Rejected AI response (%s: %s). Raw text: %r", e.kind, e.message, text)
        raise
