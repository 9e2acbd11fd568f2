"""
Tests for assessment_engine/scoring/engine.py.

What we test
------------
ScoringEngine.score():
  - 10 answers, 7 correct, all at the expected time -> 70.00 / 50 / 100,
    composite 69.0, Explorer, "Steady Learner" badge.
  - Empty answers -> 0 / 50 / 100, Builder, no exception.
  - Unknown question ids count as incorrect and get a placeholder row.
  - Same input twice -> identical result.
  - Accepts questions as a list or as an id mapping.
  - Opportunities carry catalog lesson ids when a catalog is bound.

build_question_breakdown():
  - One row per answer, in answer order.
"""

from __future__ import annotations

import pytest

from assessment_engine.catalog.lesson_catalog import LessonCatalog
from assessment_engine.config import AppConfig
from assessment_engine.models.submission import Answer
from assessment_engine.scoring.engine import (
    ScoringEngine,
    build_question_breakdown,
    index_questions,
    score_submission,
)
from assessment_engine.taxonomy.learning_taxonomy import Category


@pytest.fixture
def engine(app_config: AppConfig) -> ScoringEngine:
    return ScoringEngine.from_config(app_config)


@pytest.fixture
def ten_questions(make_question):
    return [make_question(f"q{i}", difficulty="medium") for i in range(10)]


@pytest.fixture
def seven_of_ten(make_submission):
    answers = [
        Answer(question_id=f"q{i}", selected_option_id="a" if i < 7 else "b", response_time_ms=20000)
        for i in range(10)
    ]
    return make_submission(answers)


class TestScore:
    def test_seven_of_ten_at_expected_pace(self, engine, ten_questions, seven_of_ten):
        result = engine.score(seven_of_ten, ten_questions)
        scores = result.scores
        assert scores.raw_score == 7
        assert scores.total_questions == 10
        assert scores.percentage_score == 70.0
        assert scores.speed_score == 50.0
        assert scores.consistency_score == 100.0
        assert scores.composite_score == pytest.approx(69.0)
        assert scores.category == Category.EXPLORER
        assert "Steady Learner" in result.gamification_rewards.badges
        assert result.gamification_rewards.xp == 95

    def test_empty_answers(self, engine, ten_questions, make_submission):
        result = engine.score(make_submission([]), ten_questions)
        assert result.scores.percentage_score == 0.0
        assert result.scores.speed_score == 50.0
        assert result.scores.consistency_score == 100.0
        assert result.scores.composite_score == pytest.approx(20.0)
        assert result.scores.category == Category.BUILDER
        assert result.strengths == []
        assert result.opportunities == []
        assert result.question_breakdown == []

    def test_unknown_question_ids(self, engine, ten_questions, make_submission, caplog):
        submission = make_submission([
            Answer(question_id="q0", selected_option_id="a", response_time_ms=20000),
            Answer(question_id="ghost", selected_option_id="a", response_time_ms=20000),
        ])
        with caplog.at_level("WARNING"):
            result = engine.score(submission, ten_questions)
        assert result.scores.raw_score == 1
        assert result.scores.total_questions == 2
        assert result.scores.percentage_score == 50.0
        assert "ghost" in caplog.text

        missing_row = result.question_breakdown[1]
        assert missing_row.question_text == "Question not found"
        assert missing_row.is_correct is False

    def test_idempotent(self, engine, ten_questions, seven_of_ten):
        assert engine.score(seven_of_ten, ten_questions) == engine.score(seven_of_ten, ten_questions)

    def test_mapping_and_list_inputs_agree(self, engine, ten_questions, seven_of_ten):
        by_id = {q.question_id: q for q in ten_questions}
        assert engine.score(seven_of_ten, by_id) == engine.score(seven_of_ten, ten_questions)

    def test_opportunities_link_catalog_lessons(self, app_config, sample_questions, sample_lessons, make_submission):
        engine = ScoringEngine.from_config(app_config, LessonCatalog(sample_lessons))
        answers = [Answer(question_id=q.question_id, selected_option_id="b", response_time_ms=20000)
                   for q in sample_questions]
        result = engine.score(make_submission(answers), sample_questions)
        by_tag = {o.skill_tag: o.recommended_lesson_ids for o in result.opportunities}
        assert by_tag["numerical-reasoning"] == ["L-NUM-EASY", "L-NUM-MED"]
        assert by_tag["pattern-recognition"] == ["L-PAT-TEEN"]
        assert list(by_tag) == ["pattern-recognition", "numerical-reasoning", "logical-thinking"]

    def test_score_submission_uses_defaults(self, ten_questions, seven_of_ten):
        result = score_submission(seven_of_ten, ten_questions)
        assert result.scores.category == Category.EXPLORER


class TestQuestionBreakdown:
    def test_rows_follow_answer_order(self, ten_questions):
        by_id = index_questions(ten_questions)
        answers = [
            Answer(question_id="q3", selected_option_id="b", response_time_ms=1000),
            Answer(question_id="q1", selected_option_id="a", response_time_ms=2000),
        ]
        rows = build_question_breakdown(answers, by_id)
        assert [r.question_id for r in rows] == ["q3", "q1"]
        assert [r.is_correct for r in rows] == [False, True]
        assert rows[0].correct_option_id == "a"
        assert rows[0].explanation == "Explanation for q3."
        assert rows[1].time_spent_ms == 2000
