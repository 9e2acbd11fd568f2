"""
Question models.

``Question`` is immutable once loaded and always looked up by
``question_id``.  Correctness of an answer is never stored on the answer;
it is derived by comparing ``selected_option_id`` with
``Question.correct_option_id`` at scoring time.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from assessment_engine.taxonomy.learning_taxonomy import AgeGroup, Difficulty


class QuestionOption(BaseModel):
    """One selectable answer option."""

    model_config = ConfigDict(frozen=True)

    id: str
    text: str
    image: Optional[str] = None


class Question(BaseModel):
    """A multiple-choice diagnostic question.

    Attributes:
        question_id: Stable identifier used by answers to reference this question.
        age_group: Age band the question is written for.
        topic: Free-form topic label, e.g. ``"fractions"``.
        text: Question wording shown to the learner.
        options: Two to six selectable options with unique ids.
        correct_option_id: Id of the correct option; must be one of ``options``.
        explanation: Shown after answering.
        cognitive_skill_tags: One or more skills this question exercises.
        difficulty: ``easy``, ``medium`` or ``hard``.
        is_active: Inactive questions stay resolvable for old submissions.
    """

    model_config = ConfigDict(frozen=True)

    question_id: str
    age_group: AgeGroup
    topic: str
    text: str
    options: list[QuestionOption]
    correct_option_id: str
    explanation: str = ""
    cognitive_skill_tags: list[str]
    difficulty: Difficulty
    is_active: bool = True

    @field_validator("cognitive_skill_tags")
    @classmethod
    def validate_skill_tags(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("cognitive_skill_tags must contain at least one tag.")
        return v

    @model_validator(mode="after")
    def validate_options(self) -> "Question":
        ids = [opt.id for opt in self.options]
        if not 2 <= len(ids) <= 6:
            raise ValueError(f"A question needs 2-6 options, got {len(ids)}.")
        if len(set(ids)) != len(ids):
            raise ValueError(f"Option ids must be unique, got {ids}.")
        if self.correct_option_id not in ids:
            raise ValueError(
                f"correct_option_id '{self.correct_option_id}' is not one of {ids}."
            )
        return self
