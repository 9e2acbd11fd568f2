"""
Report models.

``Report`` is the single artifact handed back to the transport layer.
It is frozen: a report is created once per submission, persisted or
returned, and never recomputed in place.

``EducatorInsights`` and ``AnalyticsSummary`` are derived views built
from one or more finished reports.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator

from assessment_engine.models.lesson import Lesson
from assessment_engine.models.scores import (
    GamificationRewards,
    Opportunity,
    QuestionBreakdown,
    ScoreBreakdown,
    Strength,
)
from assessment_engine.taxonomy.learning_taxonomy import (
    AgeGroup,
    CertificateType,
    Priority,
    QuizMode,
)


class UserSummary(BaseModel):
    """Learner header shown at the top of the report."""

    model_config = ConfigDict(frozen=True)

    name: str
    age: int
    age_group: AgeGroup
    avatar: str


class RecommendedLesson(BaseModel):
    """A lesson in the report's lesson plan with its ranking metadata.

    ``priority`` is a display label only; the plan order is the ranking.
    """

    model_config = ConfigDict(frozen=True)

    lesson: Lesson
    score: float
    priority: Priority
    reasons: list[str] = []


class CertificateMetadata(BaseModel):
    """Certificate eligibility for a report.

    When ``eligible`` is ``False`` every other field is ``None``.
    """

    model_config = ConfigDict(frozen=True)

    eligible: bool
    type: Optional[CertificateType] = None
    criteria: Optional[str] = None
    certificate_id: Optional[str] = None
    valid_until: Optional[datetime] = None

    @model_validator(mode="after")
    def validate_eligibility(self) -> "CertificateMetadata":
        populated = (self.type, self.criteria, self.certificate_id, self.valid_until)
        if self.eligible and any(v is None for v in populated):
            raise ValueError("An eligible certificate needs type, criteria, id and expiry.")
        if not self.eligible and any(v is not None for v in populated):
            raise ValueError("An ineligible certificate must not carry certificate fields.")
        return self


class VisualAssetRefs(BaseModel):
    """Animation URLs the presentation layer plays on the results page."""

    model_config = ConfigDict(frozen=True)

    confetti: Optional[str] = None
    brain_gauge: Optional[str] = None
    category_animation: Optional[str] = None


class Report(BaseModel):
    """Personalised quiz report.

    Attributes:
        report_id: Digest-style identifier derived from the submission.
        user_id: Owner of the submission.
        mode: Practice or diagnostic.
        user_summary: Learner header.
        scores: Headline score breakdown.
        strengths: Up to three strong skill tags.
        opportunities: Up to three weak skill tags.
        question_breakdown: Per-answer detail.
        gamification_rewards: XP, badges, achievements, streaks.
        lesson_plan: Ranked follow-up lessons, best first.
        certificate: Certificate eligibility and metadata.
        visual_assets: Animation references resolved by category.
        generated_at: UTC timestamp of report creation.
    """

    model_config = ConfigDict(frozen=True)

    report_id: str
    user_id: str
    mode: QuizMode
    user_summary: UserSummary
    scores: ScoreBreakdown
    strengths: list[Strength] = []
    opportunities: list[Opportunity] = []
    question_breakdown: list[QuestionBreakdown] = []
    gamification_rewards: GamificationRewards
    lesson_plan: list[RecommendedLesson] = []
    certificate: CertificateMetadata
    visual_assets: VisualAssetRefs
    generated_at: datetime


class EducatorInsights(BaseModel):
    """Guidance for parents and educators derived from a report."""

    model_config = ConfigDict(frozen=True)

    learning_style: str
    recommended_activities: list[str]
    parent_guidance: list[str]
    next_steps: list[str]


class AnalyticsSummary(BaseModel):
    """Aggregate view over one or more reports."""

    model_config = ConfigDict(frozen=True)

    report_count: int
    category_distribution: dict[str, int]
    average_score: float
    common_strengths: list[str]
    common_opportunities: list[str]
    completion_time_ms: int
