"""
Report assembler: the single externally consumed artifact.

Pipeline
--------
1. ScoringEngine.score(submission, questions)           -> ScoringResult
2. recommend_for_opportunities(lessons, opportunities)  -> ranked lesson plan
3. build_certificate(percentage_score)                  -> CertificateMetadata
4. report id, visual assets, generation timestamp       -> Report (frozen)

Certificate eligibility (first match wins)
------------------------------------------
    percentage >= mastery_threshold     (90) -> "mastery"
    percentage >= achievement_threshold (80) -> "achievement"
    percentage >= completion_threshold  (60) -> "completion"
    otherwise                                -> not eligible

Identifiers
-----------
``report_id`` is ``report_`` + the first 16 hex chars of a SHA-256 over the
submission and the generation timestamp, so the same submission assembled
at the same instant always gets the same id.  Certificate ids are
``CERT_<TYPE>_<username-slug>_<12 hex chars>`` from the same digest.
"""

from __future__ import annotations

import hashlib
import logging
import re
from collections.abc import Iterable
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

from assessment_engine.catalog.lesson_catalog import LessonCatalog
from assessment_engine.config import AppConfig, ReportConfig, VisualAssetsConfig
from assessment_engine.models.lesson import Lesson
from assessment_engine.models.report import (
    CertificateMetadata,
    Report,
    UserSummary,
    VisualAssetRefs,
)
from assessment_engine.models.scores import ScoreBreakdown
from assessment_engine.models.submission import QuizSubmission
from assessment_engine.models.user import UserProfile
from assessment_engine.recommendations.ranker import recommend_for_opportunities
from assessment_engine.scoring.engine import QuestionSet, ScoringEngine
from assessment_engine.taxonomy.learning_taxonomy import Category, CertificateType

logger = logging.getLogger(__name__)

_CERTIFICATE_CRITERIA: dict[CertificateType, str] = {
    CertificateType.MASTERY:     "Achieved 90%+ mastery level",
    CertificateType.ACHIEVEMENT: "Achieved 80%+ achievement level",
    CertificateType.COMPLETION:  "Successfully completed assessment",
}


class ReportAssembler:
    """Orchestrates scoring and recommendation into a ``Report``."""

    def __init__(self, config: AppConfig) -> None:
        self.config = config

    def assemble(
        self,
        submission:   QuizSubmission,
        user:         UserProfile,
        questions:    QuestionSet,
        lessons:      Union[LessonCatalog, Iterable[Lesson]],
        generated_at: Optional[datetime] = None,
        max_lessons:  Optional[int] = None,
    ) -> Report:
        """Build the report for one submission.

        Args:
            submission:   The completed quiz.
            user:         Learner profile (name, age, avatar).
            questions:    Question set the submission was answered against.
            lessons:      Lesson catalog to recommend from.
            generated_at: Report timestamp (UTC now when omitted).
            max_lessons:  Lesson plan cap (config default when omitted).

        Returns:
            A frozen ``Report``.
        """
        generated_at = generated_at or datetime.now(tz=timezone.utc)
        catalog = as_lesson_catalog(lessons)

        engine = ScoringEngine(self.config.scoring, self.config.rewards, catalog)
        result = engine.score(submission, questions)

        ranked = recommend_for_opportunities(
            catalog,
            result.opportunities,
            result.scores.category,
            user.age_group,
            self.config.recommendations,
            max_results=max_lessons,
        )

        digest = submission_digest(submission, generated_at)
        report = Report(
            report_id=f"report_{digest[:16]}",
            user_id=submission.user_id,
            mode=submission.mode,
            user_summary=UserSummary(
                name=user.username,
                age=user.age,
                age_group=user.age_group,
                avatar=user.avatar_id,
            ),
            scores=result.scores,
            strengths=result.strengths,
            opportunities=result.opportunities,
            question_breakdown=result.question_breakdown,
            gamification_rewards=result.gamification_rewards,
            lesson_plan=[s.to_recommended() for s in ranked],
            certificate=build_certificate(
                result.scores, user, digest, generated_at, self.config.reports
            ),
            visual_assets=resolve_visual_assets(
                result.scores.category, self.config.reports.assets
            ),
            generated_at=generated_at,
        )

        logger.info(
            "Report generated: id=%s user=%s category=%s score=%.2f lessons=%d certificate=%s",
            report.report_id, submission.user_id, report.scores.category,
            report.scores.percentage_score, len(report.lesson_plan),
            report.certificate.type or "none",
        )
        return report


def assemble_report(
    submission:   QuizSubmission,
    user:         UserProfile,
    questions:    QuestionSet,
    lessons:      Union[LessonCatalog, Iterable[Lesson]],
    config:       Optional[AppConfig] = None,
    generated_at: Optional[datetime] = None,
) -> Report:
    """Convenience wrapper around ``ReportAssembler(config).assemble(...)``."""
    return ReportAssembler(config or AppConfig()).assemble(
        submission, user, questions, lessons, generated_at=generated_at
    )


def as_lesson_catalog(lessons: Union[LessonCatalog, Iterable[Lesson]]) -> LessonCatalog:
    """Wrap plain lessons in a catalog, keeping the first of any repeated ``lesson_id``."""
    if isinstance(lessons, LessonCatalog):
        return lessons

    unique: dict[str, Lesson] = {}
    for lesson in lessons:
        if lesson.lesson_id in unique:
            logger.warning("Duplicate lesson_id '%s' in lesson list; keeping the first", lesson.lesson_id)
            continue
        unique[lesson.lesson_id] = lesson
    return LessonCatalog(unique.values())


def certificate_type_for(percentage_score: float, config: ReportConfig) -> Optional[CertificateType]:
    """Best certificate the score qualifies for, or ``None``."""
    if percentage_score >= config.mastery_threshold:
        return CertificateType.MASTERY
    if percentage_score >= config.achievement_threshold:
        return CertificateType.ACHIEVEMENT
    if percentage_score >= config.completion_threshold:
        return CertificateType.COMPLETION
    return None


def build_certificate(
    scores:       ScoreBreakdown,
    user:         UserProfile,
    digest:       str,
    generated_at: datetime,
    config:       ReportConfig,
) -> CertificateMetadata:
    cert_type = certificate_type_for(scores.percentage_score, config)
    if cert_type is None:
        return CertificateMetadata(eligible=False)

    user_slug = re.sub(r"[^a-z0-9]", "", user.username.lower()) or "learner"
    return CertificateMetadata(
        eligible=True,
        type=cert_type,
        criteria=_CERTIFICATE_CRITERIA[cert_type],
        certificate_id=f"CERT_{cert_type.upper()}_{user_slug}_{digest[:12]}",
        valid_until=generated_at + timedelta(days=config.certificate_validity_days),
    )


def resolve_visual_assets(category: Category, assets: VisualAssetsConfig) -> VisualAssetRefs:
    return VisualAssetRefs(
        confetti=assets.confetti,
        brain_gauge=assets.brain_gauge,
        category_animation=assets.category_animations.get(str(category)),
    )


def submission_digest(submission: QuizSubmission, generated_at: datetime) -> str:
    """SHA-256 hex digest of the submission content plus generation time."""
    payload = submission.model_dump_json() + "|" + generated_at.isoformat()
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()
