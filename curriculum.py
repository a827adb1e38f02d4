from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import List, Optional

from errors import CatalogError
from schemas.curriculum import CurriculumTopic, Difficulty, ProblemType

logger = logging.getLogger("math-practice.curriculum")

_CATEGORY_PREFIX = "## "
_SUBSTRAND_PREFIX = "### SUB-STRAND:"
_SUBTOPIC_RE = re.compile(r"^\d+\.\d+\.?\s*(.*)$")  # "1.1 reading and writing numbers"
_TOPIC_RE = re.compile(r"^\d+\.\s*(.*)$")  # "1. Numbers up to 10 million"

_EASY_KEYWORDS = ("reading", "writing", "basic", "simple", "counting", "comparing")
_HARD_KEYWORDS = (
    "percentage",
    "rate",
    "volume",
    "angles",
    "triangle",
    "parallelogram",
    "trapezium",
    "composite",
)
_OPERATION_KEYWORDS: tuple[tuple[ProblemType, tuple[str, ...]], ...] = (
    ("addition", ("adding", "addition")),
    ("subtraction", ("subtracting", "subtraction")),
    ("multiplication", ("multiplying", "multiplication")),
    ("division", ("dividing", "division")),
)


def _difficulty(name: str, subcategory: str) -> Difficulty:
    text = f"{name} {subcategory}".lower()
    if any(k in text for k in _EASY_KEYWORDS):
        return "Easy"
    if any(k in text for k in _HARD_KEYWORDS):
        return "Hard"
    return "Medium"


def _problem_type(name: str) -> ProblemType:
    lowered = name.lower()
    for problem_type, keywords in _OPERATION_KEYWORDS:
        if any(k in lowered for k in keywords):
            return problem_type
    return "mixed"


def parse_curriculum(content: str) -> List[CurriculumTopic]:
    """
    Turn the curriculum markdown into topics.

      ## NUMBER AND ALGEBRA            -> category
      ### SUB-STRAND: WHOLE NUMBERS    -> subcategory
      1. Numbers up to 10 million     -> topic-<n>
      1.1 reading and writing numbers -> subtopic-<n>

    Numbered lines outside a category/sub-strand are skipped.
    """
    topics: List[CurriculumTopic] = []
    category = ""
    subcategory = ""
    counter = 0

    for line in content.splitlines():
        s = line.strip()
        if s.startswith(_CATEGORY_PREFIX):
            category = s[len(_CATEGORY_PREFIX) :].strip()
            subcategory = ""
            continue
        if s.startswith(_SUBSTRAND_PREFIX):
            subcategory = s[len(_SUBSTRAND_PREFIX) :].strip()
            continue

        # sub-topics first: "1.1 x" would also match the topic pattern
        m = _SUBTOPIC_RE.match(s)
        prefix = "subtopic"
        if m is None:
            m = _TOPIC_RE.match(s)
            prefix = "topic"
        if m is None:
            continue

        name = m.group(1).strip()
        if not (name and category and subcategory):
            continue

        counter += 1
        topics.append(
            CurriculumTopic(
                id=f"{prefix}-{counter}",
                name=name,
                description=f"{subcategory}: {name}",
                category=category,
                subcategory=subcategory,
                difficulty=_difficulty(name, subcategory),
                problem_type=_problem_type(name),
            )
        )

    return topics


class CurriculumCatalog:
    """
    Read-through cache over the curriculum markdown file.

    Built once per process and handed to request handlers. Topics are parsed on
    first use; concurrent first calls may both parse, which is harmless because
    the file is read-only and parsing has no side effects.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self._topics: Optional[List[CurriculumTopic]] = None

    def topics(self) -> List[CurriculumTopic]:
        if self._topics is None:
            self._topics = self._load()
        return self._topics

    def get(self, topic_id: str) -> Optional[CurriculumTopic]:
        return next((t for t in self.topics() if t.id == topic_id), None)

    def by_category(self, category: str) -> List[CurriculumTopic]:
        return [t for t in self.topics() if t.category == category]

    def reload(self) -> int:
        self._topics = self._load()
        return len(self._topics)

    def _load(self) -> List[CurriculumTopic]:
        try:
            content = self.path.read_text(encoding="utf-8")
        except OSError as e:
            logger.error("Could not read curriculum file %s: %s", self.path, e)
            raise CatalogError(f"Failed to load curriculum topics: {e.strerror or e}") from e
        topics = parse_curriculum(content)
        logger.info("Loaded %d curriculum topics from %s", len(topics), self.path)
        return topics
