"""
Lesson catalog entry.

Lessons are read-only once loaded into the ``LessonCatalog``; neither
scoring nor recommendation ever mutates them.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from assessment_engine.taxonomy.learning_taxonomy import AgeGroup, Difficulty, LessonFormat


class Lesson(BaseModel):
    """A follow-up lesson that can be recommended after a quiz.

    Attributes:
        lesson_id: Stable identifier, e.g. ``"L-MATH-001"``.
        title: Display title.
        description: Optional one-line summary.
        skill_tags: Cognitive skills the lesson trains.
        age_group: Intended age band.
        duration_minutes: Expected duration, 1-120.
        difficulty: ``easy``, ``medium`` or ``hard``.
        format: ``video``, ``interactive``, ``text`` or ``game``.
        content_ref: Opaque pointer to the lesson content.
        learning_objectives: What the learner should take away.
        is_active: Inactive lessons are never recommended.
    """

    model_config = ConfigDict(frozen=True)

    lesson_id: str
    title: str
    description: Optional[str] = None
    skill_tags: list[str] = []
    age_group: AgeGroup
    duration_minutes: int
    difficulty: Difficulty
    format: LessonFormat
    content_ref: Optional[str] = None
    learning_objectives: list[str] = []
    is_active: bool = True

    @field_validator("duration_minutes")
    @classmethod
    def validate_duration(cls, v: int) -> int:
        if not 1 <= v <= 120:
            raise ValueError(f"duration_minutes must be in [1, 120], got {v}.")
        return v

    @field_validator("title")
    @classmethod
    def validate_title_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("title must not be empty.")
        return v.strip()
