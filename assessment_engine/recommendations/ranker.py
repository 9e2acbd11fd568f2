"""
Lesson ranker: filters the catalog, scores survivors and returns the top-N.

Usage flow
----------
1. filter_lessons(lessons, criteria)
   -> active lessons matching age group, difficulty and >= 1 skill tag

2. rank_lessons(lessons, criteria, config)
   -> list[ScoredLesson]  (score descending, truncated to max_results)

3. recommend(lessons, criteria, config)
   -> list[Lesson]        (same order, lessons only)

Opportunity-driven variant
--------------------------
criteria_for_opportunities() turns a scoring result's opportunities into
criteria: skill tags = opportunity tags, difficulty = the configured
default for the learner's category (Builder -> easy, Explorer -> medium,
Innovator -> hard).

Ranking is deterministic: ties keep catalog order.  An empty or
fully-filtered catalog yields an empty list, never an error.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from assessment_engine.config import RecommendationConfig
from assessment_engine.models.lesson import Lesson
from assessment_engine.models.report import RecommendedLesson
from assessment_engine.models.scores import Opportunity
from assessment_engine.recommendations.scorer import (
    LessonScoreComponents,
    build_reasons,
    compute_lesson_score,
    determine_priority,
)
from assessment_engine.taxonomy.learning_taxonomy import (
    AgeGroup,
    Category,
    Difficulty,
    Priority,
)

logger = logging.getLogger(__name__)


class RecommendationCriteria(BaseModel):
    """What the caller wants recommended.

    Attributes:
        age_group:   Only lessons for this age group (``None`` = any).
        skill_tags:  Lessons must share at least one tag (empty = no filter).
        difficulty:  Only lessons at this difficulty (``None`` = any).
        max_results: Result cap, 1-20.
    """

    model_config = ConfigDict(frozen=True)

    age_group: Optional[AgeGroup] = None
    skill_tags: list[str] = []
    difficulty: Optional[Difficulty] = None
    max_results: int = 8

    @field_validator("max_results")
    @classmethod
    def validate_max_results(cls, v: int) -> int:
        if not 1 <= v <= 20:
            raise ValueError(f"max_results must be in [1, 20], got {v}.")
        return v


@dataclass
class ScoredLesson:
    """A lesson coupled with its recommendation score.

    Attributes:
        lesson:     The catalog lesson.
        score:      Total score, 2 decimals.
        components: Detailed score breakdown.
        priority:   Display label derived from ``score``.
        reasons:    Human-readable reasons.
    """

    lesson:     Lesson
    score:      float
    components: LessonScoreComponents
    priority:   Priority
    reasons:    list[str]

    def to_recommended(self) -> RecommendedLesson:
        return RecommendedLesson(
            lesson=self.lesson,
            score=self.score,
            priority=self.priority,
            reasons=list(self.reasons),
        )


def filter_lessons(
    lessons:  Iterable[Lesson],
    criteria: RecommendationCriteria,
) -> list[Lesson]:
    """Keep active lessons that satisfy every filter in ``criteria``."""
    requested = set(criteria.skill_tags)
    kept: list[Lesson] = []
    for lesson in lessons:
        if not lesson.is_active:
            continue
        if criteria.age_group is not None and lesson.age_group != criteria.age_group:
            continue
        if criteria.difficulty is not None and lesson.difficulty != criteria.difficulty:
            continue
        if requested and requested.isdisjoint(lesson.skill_tags):
            continue
        kept.append(lesson)
    return kept


def score_lessons(
    lessons:  Sequence[Lesson],
    criteria: RecommendationCriteria,
    config:   RecommendationConfig,
) -> list[ScoredLesson]:
    """Score every lesson against ``criteria`` (no filtering, no sorting)."""
    scored: list[ScoredLesson] = []
    for lesson in lessons:
        components = compute_lesson_score(
            lesson=lesson,
            skill_tags=criteria.skill_tags,
            age_group=criteria.age_group,
            difficulty=criteria.difficulty,
            config=config,
        )
        total = round(components.total, 2)
        scored.append(
            ScoredLesson(
                lesson=lesson,
                score=total,
                components=components,
                priority=determine_priority(total, config),
                reasons=build_reasons(components, lesson),
            )
        )
    return scored


def rank_lessons(
    lessons:  Iterable[Lesson],
    criteria: RecommendationCriteria,
    config:   RecommendationConfig,
) -> list[ScoredLesson]:
    """Filter, score and rank; best first, at most ``criteria.max_results``."""
    candidates = filter_lessons(lessons, criteria)
    scored = score_lessons(candidates, criteria, config)
    # sorted() is stable, so equal scores keep catalog order.
    ranked = sorted(scored, key=lambda s: -s.score)[: criteria.max_results]

    logger.info(
        "Lesson recommendations: candidates=%d returned=%d top=%s",
        len(candidates), len(ranked), [s.lesson.lesson_id for s in ranked[:3]],
    )
    return ranked


def recommend(
    lessons:  Iterable[Lesson],
    criteria: RecommendationCriteria,
    config:   RecommendationConfig,
) -> list[Lesson]:
    """Ranked lessons without score metadata."""
    return [s.lesson for s in rank_lessons(lessons, criteria, config)]


def criteria_for_opportunities(
    opportunities: Sequence[Opportunity],
    category:      Category,
    age_group:     Optional[AgeGroup],
    config:        RecommendationConfig,
    max_results:   Optional[int] = None,
) -> RecommendationCriteria:
    """Build criteria that target a learner's opportunity skills."""
    difficulty = config.category_difficulty.get(str(category))
    return RecommendationCriteria(
        age_group=age_group,
        skill_tags=[opp.skill_tag for opp in opportunities],
        difficulty=difficulty,
        max_results=config.default_max_results if max_results is None else max_results,
    )


def recommend_for_opportunities(
    lessons:       Iterable[Lesson],
    opportunities: Sequence[Opportunity],
    category:      Category,
    age_group:     Optional[AgeGroup],
    config:        RecommendationConfig,
    max_results:   Optional[int] = None,
) -> list[ScoredLesson]:
    """Rank lessons for the opportunities found by the scoring engine."""
    criteria = criteria_for_opportunities(
        opportunities, category, age_group, config, max_results
    )
    return rank_lessons(lessons, criteria, config)
