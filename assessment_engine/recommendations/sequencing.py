"""
Adaptive lesson sequencing: an ordered learning path toward target skills.

Path construction
-----------------
1. Candidate pool: active lessons for the age group that are not already
   completed and share at least one tag with the target skills.
2. Walk ``length`` slots starting at ``easy``.  Each slot offers the pool
   lessons at the current difficulty that are not yet in the path, and a
   selection strategy picks one.
3. After every ``lessons_per_difficulty_step`` slots (2 by default) the
   difficulty steps up: easy -> medium -> hard, staying at hard.

A slot with no candidates is skipped, so the path can be shorter than
``length``.  That is expected output, not an error.

Selection strategy
------------------
``greedy_set_cover`` picks the candidate covering the most target skills
not yet covered by the path; ties go to the candidate seen first.  It is
intentionally greedy and makes no claim to produce the globally best
path.  Any callable matching ``SelectionStrategy`` can replace it.
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Iterable, Sequence
from typing import Callable, Optional

from assessment_engine.config import RecommendationConfig
from assessment_engine.models.lesson import Lesson
from assessment_engine.taxonomy.learning_taxonomy import Difficulty, next_difficulty

logger = logging.getLogger(__name__)

# (candidates, target_skills, path_so_far) -> chosen lesson or None
SelectionStrategy = Callable[[Sequence[Lesson], frozenset[str], Sequence[Lesson]], Optional[Lesson]]


def greedy_set_cover(
    candidates:    Sequence[Lesson],
    target_skills: frozenset[str],
    path:          Sequence[Lesson],
) -> Optional[Lesson]:
    """Candidate covering the most still-uncovered target skills."""
    if not candidates:
        return None

    covered = {tag for lesson in path for tag in lesson.skill_tags}
    uncovered = target_skills - covered

    best = candidates[0]
    best_gain = len(uncovered.intersection(best.skill_tags))
    for lesson in candidates[1:]:
        gain = len(uncovered.intersection(lesson.skill_tags))
        if gain > best_gain:
            best, best_gain = lesson, gain
    return best


def build_learning_path(
    lessons:              Iterable[Lesson],
    target_skills:        Collection[str],
    config:               RecommendationConfig,
    age_group:            Optional[str] = None,
    completed_lesson_ids: Collection[str] = (),
    length:               Optional[int] = None,
    strategy:             SelectionStrategy = greedy_set_cover,
) -> list[Lesson]:
    """Build an ordered path of up to ``length`` lessons with rising difficulty.

    Args:
        lessons:              Catalog to draw from (catalog order is the tie-break order).
        target_skills:        Skills the path should cover.
        config:               Supplies the default length and step size.
        age_group:            Restrict to this age group (``None`` = any).
        completed_lesson_ids: Lessons the learner has already done.
        length:               Requested number of slots.
        strategy:             Picks one lesson per slot.

    Returns:
        Ordered lessons; may be shorter than ``length``.
    """
    slots = config.default_sequence_length if length is None else length
    targets = frozenset(target_skills)
    completed = set(completed_lesson_ids)

    pool = [
        lesson for lesson in lessons
        if lesson.is_active
        and (age_group is None or lesson.age_group == age_group)
        and lesson.lesson_id not in completed
        and not targets.isdisjoint(lesson.skill_tags)
    ]

    path: list[Lesson] = []
    chosen_ids: set[str] = set()
    difficulty: Difficulty = Difficulty.EASY
    skipped = 0

    for slot in range(slots):
        candidates = [
            lesson for lesson in pool
            if lesson.difficulty == difficulty and lesson.lesson_id not in chosen_ids
        ]
        choice = strategy(candidates, targets, path)
        if choice is None:
            skipped += 1
        else:
            path.append(choice)
            chosen_ids.add(choice.lesson_id)

        if (slot + 1) % config.lessons_per_difficulty_step == 0:
            difficulty = next_difficulty(difficulty)

    if skipped:
        logger.warning(
            "Learning path short: requested=%d built=%d (%d slot(s) had no candidates)",
            slots, len(path), skipped,
        )
    logger.info(
        "Learning path built: lessons=%s targets=%s",
        [lesson.lesson_id for lesson in path], sorted(targets),
    )
    return path
