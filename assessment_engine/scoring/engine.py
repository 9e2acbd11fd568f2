"""
Scoring engine entry point.

Usage flow
----------
1. ``engine = ScoringEngine(config.scoring, config.rewards, catalog)``
2. ``result = engine.score(submission, questions)``
   -> ScoringResult (scores, strengths, opportunities,
      question_breakdown, gamification_rewards)

``score()`` is total over its input domain: unknown question ids count as
incorrect (and are logged), an empty answer list gives 0% / 50 speed /
100 consistency.  The engine holds no mutable state, so one instance can
serve any number of threads.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Optional, Union

from assessment_engine.catalog.lesson_catalog import LessonCatalog
from assessment_engine.config import AppConfig, RewardsConfig, ScoringConfig
from assessment_engine.models.question import Question
from assessment_engine.models.scores import QuestionBreakdown, ScoreBreakdown, ScoringResult
from assessment_engine.models.submission import Answer, QuizSubmission
from assessment_engine.scoring.metrics import (
    compute_basic_score,
    compute_composite_score,
    compute_consistency_score,
    compute_speed_score,
    determine_category,
    is_correct,
)
from assessment_engine.scoring.rewards import calculate_rewards
from assessment_engine.scoring.skills import analyze_skills

logger = logging.getLogger(__name__)

QuestionSet = Union[Mapping[str, Question], Iterable[Question]]


class ScoringEngine:
    """Pure scoring pipeline bound to one scoring + rewards configuration."""

    def __init__(
        self,
        scoring: ScoringConfig,
        rewards: RewardsConfig,
        catalog: Optional[LessonCatalog] = None,
    ) -> None:
        self.scoring = scoring
        self.rewards = rewards
        self.catalog = catalog

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        catalog: Optional[LessonCatalog] = None,
    ) -> "ScoringEngine":
        return cls(config.scoring, config.rewards, catalog)

    def score(self, submission: QuizSubmission, questions: QuestionSet) -> ScoringResult:
        """Score one submission against its question set."""
        questions_by_id = index_questions(questions)
        answers = submission.answers

        missing = [a.question_id for a in answers if a.question_id not in questions_by_id]
        if missing:
            logger.warning(
                "Submission for user %s references %d unknown question id(s): %s",
                submission.user_id, len(missing), ", ".join(missing),
            )

        scores = self.score_breakdown(answers, questions_by_id)
        strengths, opportunities = analyze_skills(
            answers, questions_by_id, self.scoring, self.catalog
        )
        rewards = calculate_rewards(scores, strengths, answers, self.rewards)

        logger.info(
            "Scores calculated: user=%s category=%s percentage=%.2f composite=%.2f",
            submission.user_id, scores.category, scores.percentage_score, scores.composite_score,
        )

        return ScoringResult(
            scores=scores,
            strengths=strengths,
            opportunities=opportunities,
            question_breakdown=build_question_breakdown(answers, questions_by_id),
            gamification_rewards=rewards,
        )

    def score_breakdown(
        self,
        answers: Sequence[Answer],
        questions_by_id: Mapping[str, Question],
    ) -> ScoreBreakdown:
        raw, total, percentage = compute_basic_score(answers, questions_by_id)
        speed = compute_speed_score(answers, questions_by_id, self.scoring)
        consistency = compute_consistency_score([a.response_time_ms for a in answers])
        composite = compute_composite_score(
            percentage, speed, consistency, self.scoring.weights
        )
        return ScoreBreakdown(
            raw_score=raw,
            total_questions=total,
            percentage_score=percentage,
            speed_score=speed,
            consistency_score=consistency,
            composite_score=composite,
            category=determine_category(percentage, self.scoring),
        )


def score_submission(
    submission: QuizSubmission,
    questions: QuestionSet,
    config: Optional[AppConfig] = None,
    catalog: Optional[LessonCatalog] = None,
) -> ScoringResult:
    """Convenience wrapper: score with ``config`` (defaults when omitted)."""
    engine = ScoringEngine.from_config(config or AppConfig(), catalog)
    return engine.score(submission, questions)


def index_questions(questions: QuestionSet) -> Mapping[str, Question]:
    """Accept either an id->question mapping or any iterable of questions."""
    if isinstance(questions, Mapping):
        return questions
    return {q.question_id: q for q in questions}


def build_question_breakdown(
    answers: Sequence[Answer],
    questions_by_id: Mapping[str, Question],
) -> list[QuestionBreakdown]:
    """One row per answer, in answer order; unknown questions get placeholders."""
    rows: list[QuestionBreakdown] = []
    for answer in answers:
        question = questions_by_id.get(answer.question_id)
        rows.append(
            QuestionBreakdown(
                question_id=answer.question_id,
                question_text=question.text if question else "Question not found",
                selected_option_id=answer.selected_option_id,
                correct_option_id=question.correct_option_id if question else "",
                is_correct=is_correct(answer, question),
                time_spent_ms=answer.response_time_ms,
                explanation=question.explanation if question else "",
                cognitive_skill_tags=list(question.cognitive_skill_tags) if question else [],
            )
        )
    return rows
