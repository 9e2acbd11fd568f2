"""
Score metrics for a single quiz submission.

Every function here is pure: same answers + same questions + same config
always give the same number.  None of them raise for degenerate input.

Basic score
-----------
    raw_score        = answers whose selected option equals the question's
                       correct option (unknown question ids count as wrong)
    percentage_score = raw_score / total * 100, rounded to 2 decimals
    total == 0       -> percentage_score = 0

Speed score (0-100)
-------------------
Per answer whose question resolves::

    expected = expected_response_ms[age_group][difficulty]
    ratio    = expected / max(actual, expected * speed_floor_ratio)
    ratio    = clamp(ratio, 0, speed_ratio_cap)
    score    = min(100, ratio * 50)

Averaged over resolvable answers; 50 when there are none.  Answering in
exactly the expected time scores 50.  The floor stops near-zero times
from earning unbounded credit.

Consistency score (0-100)
-------------------------
    cv    = population_std(response_times) / mean(response_times)
    score = clamp(100 - cv * 100, 0, 100)

Fewer than two answers, or a zero mean, -> 100.

Composite score
---------------
    composite = pct * w.percentage + speed * w.speed + consistency * w.consistency

Rounded to 2 decimals.  Weights come from ``ScoringConfig.weights``.

Category
--------
    pct >= innovator_threshold -> Innovator
    pct >= explorer_threshold  -> Explorer
    otherwise                  -> Builder

Category looks at percentage_score only, never at the composite.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence

from assessment_engine.config import CompositeWeights, ScoringConfig
from assessment_engine.models.question import Question
from assessment_engine.models.submission import Answer
from assessment_engine.taxonomy.learning_taxonomy import Category

NEUTRAL_SPEED_SCORE = 50.0
MAX_CONSISTENCY_SCORE = 100.0


def is_correct(answer: Answer, question: Question | None) -> bool:
    """True when ``question`` resolves and the selected option is the correct one."""
    return question is not None and answer.selected_option_id == question.correct_option_id


def compute_basic_score(
    answers: Sequence[Answer],
    questions_by_id: Mapping[str, Question],
) -> tuple[int, int, float]:
    """Return ``(raw_score, total_questions, percentage_score)``."""
    total = len(answers)
    correct = sum(1 for a in answers if is_correct(a, questions_by_id.get(a.question_id)))
    percentage = round(correct / total * 100.0, 2) if total > 0 else 0.0
    return correct, total, percentage


def expected_response_ms(question: Question, config: ScoringConfig) -> int:
    """Expected answer time for ``question`` from the age-group x difficulty table.

    Falls back to the ``default_age_group`` row when the question's age group
    has no row of its own.
    """
    row = config.expected_response_ms.get(
        str(question.age_group),
        config.expected_response_ms[config.default_age_group],
    )
    return row[str(question.difficulty)]


def compute_speed_score(
    answers: Sequence[Answer],
    questions_by_id: Mapping[str, Question],
    config: ScoringConfig,
) -> float:
    """Average per-answer speed score; ``NEUTRAL_SPEED_SCORE`` if nothing resolves."""
    per_answer: list[float] = []
    for answer in answers:
        question = questions_by_id.get(answer.question_id)
        if question is None:
            continue
        expected = expected_response_ms(question, config)
        ratio = expected / max(answer.response_time_ms, expected * config.speed_floor_ratio)
        ratio = _clamp(ratio, 0.0, config.speed_ratio_cap)
        per_answer.append(min(100.0, ratio * 50.0))

    if not per_answer:
        return NEUTRAL_SPEED_SCORE
    return round(sum(per_answer) / len(per_answer), 2)


def compute_consistency_score(response_times_ms: Sequence[int]) -> float:
    """Inverse coefficient of variation of response times, on a 0-100 scale."""
    n = len(response_times_ms)
    if n < 2:
        return MAX_CONSISTENCY_SCORE

    mean = sum(response_times_ms) / n
    if mean <= 0:
        # All times are zero: no observable variance.
        return MAX_CONSISTENCY_SCORE

    variance = sum((t - mean) ** 2 for t in response_times_ms) / n
    cv = math.sqrt(variance) / mean
    return round(_clamp(100.0 - cv * 100.0, 0.0, 100.0), 2)


def compute_composite_score(
    percentage_score: float,
    speed_score: float,
    consistency_score: float,
    weights: CompositeWeights,
) -> float:
    """Weighted blend of the three component scores, 2 decimals."""
    composite = (
        percentage_score  * weights.percentage
        + speed_score       * weights.speed
        + consistency_score * weights.consistency
    )
    return round(_clamp(composite, 0.0, 100.0), 2)


def determine_category(percentage_score: float, config: ScoringConfig) -> Category:
    """Map percent-correct onto a learner category using the two thresholds."""
    if percentage_score >= config.innovator_threshold:
        return Category.INNOVATOR
    if percentage_score >= config.explorer_threshold:
        return Category.EXPLORER
    return Category.BUILDER


def mean_response_time_ms(answers: Sequence[Answer]) -> float | None:
    """Mean response time across all answers, or ``None`` for no answers."""
    if not answers:
        return None
    return sum(a.response_time_ms for a in answers) / len(answers)


# ── Helper ────────────────────────────────────────────────────────────────────

def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))
