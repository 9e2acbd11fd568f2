"""
Lesson scoring: how well one lesson fits a recommendation request.

Score formula (plain sum, approximate range 0-110)
--------------------------------------------------
    total = (
        skill_relevance     # matching_tags / requested_tags * 40
        + duration_score    # max(0, 20 - |duration - ideal_for_age|)
        + format_score      # age-group format preference, default 10
        + difficulty_score  # max(0, 20 - 10 * |level gap|), 15 if none requested
        + objectives_score  # min(objective_count * 2, 10)
    )

Component explanations
----------------------
skill_relevance (0-40):
    Share of requested skill tags the lesson covers.  0 when the request
    names no skill tags.

duration_score (0-20):
    Closeness to the ideal lesson length for the age group
    (15 / 20 / 25 minutes by default).  Falls off one point per minute.

format_score:
    Age-group specific preference for game / interactive / video / text.
    Unmapped formats get ``default_format_score``.

difficulty_score (0-20):
    20 on an exact match, 10 one level away, 0 two levels away.
    ``neutral_difficulty_score`` (15) when the request has no difficulty.

objectives_score (0-10):
    Two points per learning objective, capped at five objectives.

Priority label
--------------
    total >= high_priority_score (80) -> high
    total <  low_priority_score  (50) -> low
    otherwise                         -> medium

The label is for display; it never changes the ranking.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Optional

from assessment_engine.config import RecommendationConfig
from assessment_engine.models.lesson import Lesson
from assessment_engine.taxonomy.learning_taxonomy import Priority, difficulty_index


@dataclass
class LessonScoreComponents:
    """All components of a lesson's recommendation score.

    Attributes:
        skill_relevance:  0-40, share of requested skills covered.
        duration_score:   0-20, closeness to the ideal duration.
        format_score:     Format preference for the age group.
        difficulty_score: 0-20, closeness to the requested difficulty.
        objectives_score: 0-10, richness of learning objectives.
        matching_skills:  Requested skill tags the lesson covers.
        ideal_duration:   Ideal duration used for ``duration_score``.
    """

    skill_relevance:  float
    duration_score:   float
    format_score:     float
    difficulty_score: float
    objectives_score: float
    matching_skills:  list[str]
    ideal_duration:   int

    @property
    def total(self) -> float:
        return (
            self.skill_relevance
            + self.duration_score
            + self.format_score
            + self.difficulty_score
            + self.objectives_score
        )


def compute_lesson_score(
    lesson:     Lesson,
    skill_tags: Sequence[str],
    age_group:  Optional[str],
    difficulty: Optional[str],
    config:     RecommendationConfig,
) -> LessonScoreComponents:
    """Compute every score component for one lesson against one request.

    Args:
        lesson:     Candidate lesson (already filtered).
        skill_tags: Requested skill tags; may be empty.
        age_group:  Requested age group; ``None`` uses the config default
                    for the duration and format tables.
        difficulty: Requested difficulty or ``None``.
        config:     Recommendation tunables.

    Returns:
        LessonScoreComponents with all fields populated.
    """
    table_age = str(age_group) if age_group is not None else config.default_age_group
    if table_age not in config.ideal_duration_minutes:
        table_age = config.default_age_group

    # ── Skill relevance ───────────────────────────────────────────────────────
    requested = list(dict.fromkeys(skill_tags))
    matching = [tag for tag in lesson.skill_tags if tag in requested]
    skill_relevance = len(matching) / len(requested) * 40.0 if requested else 0.0

    # ── Duration ──────────────────────────────────────────────────────────────
    ideal = config.ideal_duration_minutes[table_age]
    duration_score = max(0.0, 20.0 - abs(lesson.duration_minutes - ideal))

    # ── Format ────────────────────────────────────────────────────────────────
    preferences = config.format_preferences.get(table_age, {})
    format_score = float(preferences.get(str(lesson.format), config.default_format_score))

    # ── Difficulty ────────────────────────────────────────────────────────────
    if difficulty is None:
        difficulty_score = config.neutral_difficulty_score
    else:
        gap = abs(difficulty_index(lesson.difficulty) - difficulty_index(difficulty))
        difficulty_score = max(0.0, 20.0 - gap * 10.0)

    # ── Objectives ────────────────────────────────────────────────────────────
    objectives_score = float(min(len(lesson.learning_objectives) * 2, 10))

    return LessonScoreComponents(
        skill_relevance=round(skill_relevance, 2),
        duration_score=round(duration_score, 2),
        format_score=round(format_score, 2),
        difficulty_score=round(difficulty_score, 2),
        objectives_score=objectives_score,
        matching_skills=matching,
        ideal_duration=ideal,
    )


def determine_priority(total: float, config: RecommendationConfig) -> Priority:
    """Display label for a lesson score."""
    if total >= config.high_priority_score:
        return Priority.HIGH
    if total < config.low_priority_score:
        return Priority.LOW
    return Priority.MEDIUM


def build_reasons(components: LessonScoreComponents, lesson: Lesson) -> list[str]:
    """Human-readable reasons a lesson was recommended (may be empty)."""
    reasons: list[str] = []

    if components.skill_relevance > 20:
        reasons.append(f"Targets {len(components.matching_skills)} of your focus areas")

    if lesson.duration_minutes <= components.ideal_duration + 5:
        reasons.append("Perfect duration for your age group")

    if components.format_score > 15:
        reasons.append(f"{lesson.format} format matches your learning style")

    return reasons
