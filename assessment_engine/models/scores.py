"""
Scoring output models.

Everything here is derived from one ``QuizSubmission`` and is frozen:
a scoring run produces these once and nothing downstream edits them.

``ScoringResult`` bundles the full output of the scoring engine:
score breakdown, strengths, opportunities, per-question breakdown and
gamification rewards.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, model_validator

from assessment_engine.taxonomy.learning_taxonomy import Category, Priority


class ScoreBreakdown(BaseModel):
    """Headline scores for a submission.

    Attributes:
        raw_score: Number of correct answers.
        total_questions: Number of answers submitted.
        percentage_score: ``raw_score / total_questions * 100``, 2 decimals.
        speed_score: 0-100, 50 means "answered at the expected pace".
        consistency_score: 0-100, 100 means identical response times.
        composite_score: Weighted blend of the three scores above, 2 decimals.
        category: Learner tier derived from ``percentage_score`` only.
    """

    model_config = ConfigDict(frozen=True)

    raw_score: int
    total_questions: int
    percentage_score: float
    speed_score: float
    consistency_score: float
    composite_score: float
    category: Category

    @model_validator(mode="after")
    def validate_ranges(self) -> "ScoreBreakdown":
        if not 0 <= self.raw_score <= self.total_questions:
            raise ValueError(
                f"raw_score ({self.raw_score}) must be in [0, total_questions "
                f"({self.total_questions})]."
            )
        for name in ("percentage_score", "speed_score", "consistency_score", "composite_score"):
            value = getattr(self, name)
            if not 0.0 <= value <= 100.0:
                raise ValueError(f"{name} must be in [0, 100], got {value}.")
        return self


class Strength(BaseModel):
    """A skill tag the learner answered well."""

    model_config = ConfigDict(frozen=True)

    skill_tag: str
    score: int
    description: str
    examples: list[str] = []


class Opportunity(BaseModel):
    """A skill tag below the opportunity threshold, with remediation lessons."""

    model_config = ConfigDict(frozen=True)

    skill_tag: str
    score: int
    description: str
    recommended_lesson_ids: list[str] = []
    priority: Priority = Priority.MEDIUM


class QuestionBreakdown(BaseModel):
    """Per-answer detail shown on the results page."""

    model_config = ConfigDict(frozen=True)

    question_id: str
    question_text: str
    selected_option_id: str
    correct_option_id: str
    is_correct: bool
    time_spent_ms: int
    explanation: str
    cognitive_skill_tags: list[str] = []


class GamificationRewards(BaseModel):
    """XP, badges, achievements and streak counters earned by one submission."""

    model_config = ConfigDict(frozen=True)

    xp: int = 0
    badges: list[str] = []
    achievements: list[str] = []
    streaks: dict[str, int] = {}

    @model_validator(mode="after")
    def validate_xp(self) -> "GamificationRewards":
        if self.xp < 0:
            raise ValueError(f"xp must be >= 0, got {self.xp}.")
        return self


class ScoringResult(BaseModel):
    """Complete output of one scoring run."""

    model_config = ConfigDict(frozen=True)

    scores: ScoreBreakdown
    strengths: list[Strength] = []
    opportunities: list[Opportunity] = []
    question_breakdown: list[QuestionBreakdown] = []
    gamification_rewards: GamificationRewards = GamificationRewards()
