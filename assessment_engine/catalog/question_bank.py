"""
Question bank: read-only question catalog keyed by ``question_id``.

The scoring engine only needs ``by_id``; ``select_questions`` serves the
quiz-building side (age group, difficulty and topic filters with an
optional seed so a quiz can be rebuilt exactly).
"""

from __future__ import annotations

import json
import logging
import random
from collections.abc import Iterable, Iterator
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from assessment_engine.catalog import CatalogError
from assessment_engine.models.question import Question

logger = logging.getLogger(__name__)


class QuestionBank:
    """Immutable collection of questions indexed by ``question_id``."""

    __slots__ = ("_questions", "_by_id")

    def __init__(self, questions: Iterable[Question]) -> None:
        ordered = tuple(questions)
        by_id: dict[str, Question] = {}
        for question in ordered:
            if question.question_id in by_id:
                raise CatalogError(f"Duplicate question_id '{question.question_id}'.")
            by_id[question.question_id] = question
        self._questions: tuple[Question, ...] = ordered
        self._by_id: Mapping[str, Question] = MappingProxyType(by_id)

    def __len__(self) -> int:
        return len(self._questions)

    def __iter__(self) -> Iterator[Question]:
        return iter(self._questions)

    @property
    def by_id(self) -> Mapping[str, Question]:
        return self._by_id

    def get(self, question_id: str) -> Optional[Question]:
        return self._by_id.get(question_id)

    def select_questions(
        self,
        age_group: str,
        count: int,
        difficulty: Optional[str] = None,
        topics: Optional[list[str]] = None,
        seed: Optional[str] = None,
    ) -> list[Question]:
        """Pick up to ``count`` active questions for a quiz.

        Topic matching is case-insensitive and matches either the question
        topic (substring) or any of its skill tags (substring).  With a
        ``seed`` the selection is reproducible; without one it keeps
        bank order.

        Returns:
            At most ``count`` questions; fewer (with a warning) if the bank
            cannot satisfy the filters.
        """
        pool = [
            q for q in self._questions
            if q.is_active
            and q.age_group == age_group
            and (difficulty is None or q.difficulty == difficulty)
        ]
        if topics:
            wanted = [t.lower() for t in topics]
            pool = [
                q for q in pool
                if any(
                    t in q.topic.lower() or any(t in tag for tag in q.cognitive_skill_tags)
                    for t in wanted
                )
            ]
        if seed is not None:
            random.Random(seed).shuffle(pool)

        selected = pool[:count]
        if len(selected) < count:
            logger.warning(
                "Question bank short: requested=%d available=%d age_group=%s difficulty=%s",
                count, len(selected), age_group, difficulty,
            )
        return selected


def load_question_bank(path: Path) -> QuestionBank:
    """Load a question bank from JSON (list, or object with ``"questions"``).

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        CatalogError: On malformed JSON, invalid questions or duplicate ids.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Question bank not found: {path}")

    try:
        raw: Any = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise CatalogError(f"Question bank {path} is not valid JSON: {exc}") from exc

    records = raw.get("questions", []) if isinstance(raw, dict) else raw
    if not isinstance(records, list):
        raise CatalogError(f"Question bank {path} must contain a list of questions.")

    try:
        questions = [Question.model_validate(rec) for rec in records]
    except ValidationError as exc:
        raise CatalogError(f"Invalid question in {path}: {exc}") from exc

    bank = QuestionBank(questions)
    logger.info("Question bank loaded: %d questions from %s", len(bank), path)
    return bank
