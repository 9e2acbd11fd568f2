"""
Skill-gap analysis: per cognitive-skill aggregation of a submission.

Each resolvable answer contributes one attempt (and one success if
correct) to every skill tag on its question, so one question can count
toward several skills.  Answers whose question id does not resolve are
ignored here.

Per skill::

    percentage = correct / attempts * 100

Skills are ordered by percentage descending (ties keep first-seen order),
then:

  - Strengths     : percentage >= strength_threshold, first N.
  - Opportunities : percentage <  opportunity_threshold, first N, with
                    priority high (<30), medium (<50) or low.

The two selections are independent; with the default thresholds (70/60)
they can never share a skill.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from assessment_engine.config import ScoringConfig
from assessment_engine.models.question import Question
from assessment_engine.models.scores import Opportunity, Strength
from assessment_engine.models.submission import Answer
from assessment_engine.scoring.metrics import is_correct
from assessment_engine.taxonomy.learning_taxonomy import Priority

if TYPE_CHECKING:
    from assessment_engine.catalog.lesson_catalog import LessonCatalog

logger = logging.getLogger(__name__)

# skill -> (strength description, opportunity description)
_SKILL_DESCRIPTIONS: dict[str, tuple[str, str]] = {
    "pattern-recognition": (
        "Excellent at identifying and predicting patterns in sequences and visual arrangements",
        "Could benefit from more practice with pattern identification and sequence completion",
    ),
    "numerical-reasoning": (
        "Strong mathematical thinking and problem-solving abilities",
        "Could improve mathematical reasoning and computational skills",
    ),
    "logical-thinking": (
        "Demonstrates clear logical reasoning and deductive thinking",
        "Could strengthen logical reasoning and critical thinking skills",
    ),
}

# skill -> (strength examples, practice suggestions)
_SKILL_EXAMPLES: dict[str, tuple[list[str], list[str]]] = {
    "pattern-recognition": (
        ["Quickly identified number sequences", "Recognized visual patterns"],
        ["Practice with sequence puzzles", "Work on visual pattern games"],
    ),
    "numerical-reasoning": (
        ["Solved math problems accurately", "Quick mental calculations"],
        ["Practice basic arithmetic", "Work on word problems"],
    ),
    "logical-thinking": (
        ["Clear logical deductions", "Strong reasoning skills"],
        ["Practice logic puzzles", "Work on cause-effect relationships"],
    ),
}


@dataclass
class SkillTally:
    """Attempts and successes for one skill tag."""

    skill_tag: str
    correct: int = 0
    attempts: int = 0

    @property
    def percentage(self) -> float:
        return self.correct / self.attempts * 100.0 if self.attempts else 0.0


def tally_skills(
    answers: Sequence[Answer],
    questions_by_id: Mapping[str, Question],
) -> list[SkillTally]:
    """Aggregate answers per skill tag, sorted by percentage descending."""
    tallies: dict[str, SkillTally] = {}
    for answer in answers:
        question = questions_by_id.get(answer.question_id)
        if question is None:
            continue
        correct = is_correct(answer, question)
        for tag in question.cognitive_skill_tags:
            tally = tallies.setdefault(tag, SkillTally(skill_tag=tag))
            tally.attempts += 1
            tally.correct += int(correct)

    # sorted() is stable: equal percentages keep first-seen order.
    return sorted(tallies.values(), key=lambda t: -t.percentage)


def opportunity_priority(percentage: float) -> Priority:
    if percentage < 30:
        return Priority.HIGH
    if percentage < 50:
        return Priority.MEDIUM
    return Priority.LOW


def analyze_skills(
    answers: Sequence[Answer],
    questions_by_id: Mapping[str, Question],
    config: ScoringConfig,
    catalog: Optional["LessonCatalog"] = None,
) -> tuple[list[Strength], list[Opportunity]]:
    """Split skill tallies into strengths and opportunities.

    Args:
        answers:         Submission answers.
        questions_by_id: Question lookup.
        config:          Thresholds and list caps.
        catalog:         Lesson catalog used to attach remediation lesson ids
                         to opportunities.  Without one, opportunities carry
                         no lesson ids.

    Returns:
        ``(strengths, opportunities)``, each at most ``max_skill_entries`` long.
    """
    tallies = tally_skills(answers, questions_by_id)
    limit = config.max_skill_entries

    strengths = [
        Strength(
            skill_tag=t.skill_tag,
            score=_round_half_up(t.percentage),
            description=skill_description(t.skill_tag, strong=True),
            examples=skill_examples(t.skill_tag, strong=True),
        )
        for t in tallies
        if t.percentage >= config.strength_threshold
    ][:limit]

    strong_tags = {s.skill_tag for s in strengths}
    opportunities: list[Opportunity] = []
    for t in tallies:
        if len(opportunities) >= limit:
            break
        if t.percentage >= config.opportunity_threshold or t.skill_tag in strong_tags:
            continue
        opportunities.append(
            Opportunity(
                skill_tag=t.skill_tag,
                score=_round_half_up(t.percentage),
                description=skill_description(t.skill_tag, strong=False),
                recommended_lesson_ids=_remediation_lesson_ids(
                    t.skill_tag, catalog, config.opportunity_lessons_per_skill
                ),
                priority=opportunity_priority(t.percentage),
            )
        )

    return strengths, opportunities


def skill_description(skill_tag: str, strong: bool) -> str:
    known = _SKILL_DESCRIPTIONS.get(skill_tag)
    if known is not None:
        return known[0] if strong else known[1]
    return f"Strong {skill_tag} abilities" if strong else f"Room to improve {skill_tag} skills"


def skill_examples(skill_tag: str, strong: bool) -> list[str]:
    known = _SKILL_EXAMPLES.get(skill_tag)
    if known is not None:
        return list(known[0] if strong else known[1])
    return ["Strong performance in this area" if strong else "Room for improvement in this area"]


def _remediation_lesson_ids(
    skill_tag: str,
    catalog: Optional["LessonCatalog"],
    limit: int,
) -> list[str]:
    if catalog is None:
        return []
    ids = catalog.lesson_ids_for_skill(skill_tag, limit=limit)
    if not ids:
        logger.warning("No active lessons in catalog for opportunity skill '%s'", skill_tag)
    return ids


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
