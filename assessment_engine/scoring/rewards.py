"""
Gamification rewards for one submission.

XP formula (all bonuses additive)
---------------------------------
    xp  = raw_score * xp_per_correct
    xp += bonus of the highest performance tier reached (one tier at most)
    xp += speed_bonus_xp          if mean response time < speed threshold
    xp += mastery_bonus_xp        per strength scoring >= mastery_threshold

Badges: the tier badge (if any), ``"<Category> Level 1"``, the
first-completion badge, and the speed badge (if earned).  Achievements:
``"<skill> Master"`` per mastered strength.  Streaks start at 1 for a
completed quiz because this core has no attempt history.

``RewardsConfig.max_xp_per_submission`` caps the final XP when set; the
default (``None``) leaves bonus stacking unbounded.
"""

from __future__ import annotations

from collections.abc import Sequence

from assessment_engine.config import RewardsConfig
from assessment_engine.models.scores import GamificationRewards, ScoreBreakdown, Strength
from assessment_engine.models.submission import Answer
from assessment_engine.scoring.metrics import mean_response_time_ms


def calculate_rewards(
    scores: ScoreBreakdown,
    strengths: Sequence[Strength],
    answers: Sequence[Answer],
    config: RewardsConfig,
) -> GamificationRewards:
    """Compute XP, badges, achievements and streaks.

    Args:
        scores:    Score breakdown of the submission.
        strengths: Strengths from the skill analysis.
        answers:   Submission answers (for mean response time).
        config:    Reward tunables.

    Returns:
        A frozen ``GamificationRewards``.
    """
    xp = scores.raw_score * config.xp_per_correct
    badges: list[str] = []
    achievements: list[str] = []

    for tier in config.performance_tiers:
        if scores.percentage_score >= tier.min_percentage:
            xp += tier.bonus_xp
            badges.append(tier.badge)
            break

    badges.append(f"{scores.category} Level 1")
    badges.append(config.first_completion_badge)

    mean_ms = mean_response_time_ms(answers)
    if mean_ms is not None and mean_ms < config.speed_badge_threshold_ms:
        badges.append(config.speed_badge)
        xp += config.speed_bonus_xp

    for strength in strengths:
        if strength.score >= config.mastery_threshold:
            achievements.append(f"{strength.skill_tag} Master")
            xp += config.mastery_bonus_xp

    if config.max_xp_per_submission is not None:
        xp = min(xp, config.max_xp_per_submission)

    return GamificationRewards(
        xp=xp,
        badges=list(dict.fromkeys(badges)),
        achievements=achievements,
        streaks={"daily": 1, "weekly": 1},
    )
