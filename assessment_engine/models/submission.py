"""
Quiz submission models.

A ``QuizSubmission`` is produced by the presentation layer when a learner
finishes a quiz.  One submission maps to exactly one scoring run.  Answers
are not checked for correctness here; an answer may even reference a
question id the scorer cannot resolve (treated as incorrect downstream).
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from assessment_engine.taxonomy.learning_taxonomy import QuizMode


class Answer(BaseModel):
    """One answered question.

    Attributes:
        question_id: Id of the answered question.
        selected_option_id: Option chosen by the learner.
        response_time_ms: Time spent on the question in milliseconds.
    """

    model_config = ConfigDict(frozen=True)

    question_id: str
    selected_option_id: str
    response_time_ms: int

    @field_validator("response_time_ms")
    @classmethod
    def validate_response_time(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"response_time_ms must be >= 0, got {v}.")
        return v


class QuizSubmission(BaseModel):
    """A completed quiz attempt, answers in the order they were given."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    quiz_id: Optional[str] = None
    answers: list[Answer] = []
    started_at: datetime
    finished_at: datetime
    mode: QuizMode = QuizMode.DIAGNOSTIC

    @model_validator(mode="after")
    def validate_timestamps(self) -> "QuizSubmission":
        if self.finished_at < self.started_at:
            raise ValueError(
                f"finished_at ({self.finished_at}) must not precede "
                f"started_at ({self.started_at})."
            )
        return self

    @property
    def duration_seconds(self) -> float:
        return (self.finished_at - self.started_at).total_seconds()
