"""
Tests for assessment_engine/recommendations/ranker.py.

What we test
------------
filter_lessons():
  - Drops inactive lessons, other age groups, other difficulties.
  - Requires at least one skill-tag overlap when tags are requested.

rank_lessons() / recommend():
  - Only the algebra lesson comes back for skillTags=["algebra"], maxResults=1.
  - Best score first; equal scores keep catalog order.
  - Truncates to max_results; empty catalog -> empty list.
  - Deterministic across calls.

RecommendationCriteria:
  - max_results must be within 1-20.

criteria_for_opportunities() / recommend_for_opportunities():
  - Skill tags come from opportunities; difficulty from the category.
  - An explicit max_results of 0 is rejected, not replaced by the default.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from assessment_engine.config import RecommendationConfig
from assessment_engine.models.scores import Opportunity
from assessment_engine.recommendations.ranker import (
    RecommendationCriteria,
    criteria_for_opportunities,
    filter_lessons,
    rank_lessons,
    recommend,
    recommend_for_opportunities,
)
from assessment_engine.taxonomy.learning_taxonomy import Category, Difficulty, Priority


@pytest.fixture
def config() -> RecommendationConfig:
    return RecommendationConfig()


def _opportunity(tag: str) -> Opportunity:
    return Opportunity(skill_tag=tag, score=20, description="", priority=Priority.HIGH)


class TestFilterLessons:
    def test_filters(self, sample_lessons):
        criteria = RecommendationCriteria(
            age_group="10-15", skill_tags=["numerical-reasoning"], difficulty="medium"
        )
        assert [l.lesson_id for l in filter_lessons(sample_lessons, criteria)] == ["L-NUM-MED"]

    def test_no_filters_keeps_all_active(self, sample_lessons):
        kept = filter_lessons(sample_lessons, RecommendationCriteria())
        assert "L-NUM-OFF" not in [l.lesson_id for l in kept]
        assert len(kept) == 5

    def test_skill_overlap_required(self, sample_lessons):
        criteria = RecommendationCriteria(skill_tags=["logical-thinking"])
        assert [l.lesson_id for l in filter_lessons(sample_lessons, criteria)] == [
            "L-LOGIC-MED", "L-LOGIC-HARD",
        ]


class TestRankLessons:
    def test_algebra_only(self, make_lesson, config):
        lessons = [
            make_lesson("L-GEO", ["geometry"]),
            make_lesson("L-ALG", ["algebra", "variables"]),
        ]
        criteria = RecommendationCriteria(skill_tags=["algebra"], max_results=1)
        assert [l.lesson_id for l in recommend(lessons, criteria, config)] == ["L-ALG"]

    def test_best_first(self, make_lesson, config):
        lessons = [
            make_lesson("L-LONG", duration_minutes=60),
            make_lesson("L-FIT", duration_minutes=20),
        ]
        ranked = rank_lessons(lessons, RecommendationCriteria(age_group="10-15"), config)
        assert [s.lesson.lesson_id for s in ranked] == ["L-FIT", "L-LONG"]
        assert ranked[0].score > ranked[1].score

    def test_ties_keep_catalog_order(self, make_lesson, config):
        lessons = [make_lesson(f"L-{i}") for i in range(4)]
        ranked = rank_lessons(lessons, RecommendationCriteria(), config)
        assert [s.lesson.lesson_id for s in ranked] == ["L-0", "L-1", "L-2", "L-3"]

    def test_truncates(self, make_lesson, config):
        lessons = [make_lesson(f"L-{i}") for i in range(12)]
        ranked = rank_lessons(lessons, RecommendationCriteria(max_results=5), config)
        assert len(ranked) == 5

    def test_empty_catalog(self, config):
        assert rank_lessons([], RecommendationCriteria(skill_tags=["algebra"]), config) == []

    def test_deterministic(self, sample_lessons, config):
        criteria = RecommendationCriteria(skill_tags=["numerical-reasoning", "logical-thinking"])
        first = [s.lesson.lesson_id for s in rank_lessons(sample_lessons, criteria, config)]
        second = [s.lesson.lesson_id for s in rank_lessons(sample_lessons, criteria, config)]
        assert first == second

    def test_to_recommended(self, make_lesson, config):
        scored = rank_lessons([make_lesson("L-1")], RecommendationCriteria(), config)[0]
        rec = scored.to_recommended()
        assert rec.lesson.lesson_id == "L-1"
        assert rec.score == scored.score
        assert rec.priority == scored.priority


class TestCriteria:
    @pytest.mark.parametrize("value", [0, 21])
    def test_max_results_bounds(self, value):
        with pytest.raises(ValidationError):
            RecommendationCriteria(max_results=value)

    def test_rejects_unknown_age_group(self):
        with pytest.raises(ValidationError):
            RecommendationCriteria(age_group="3-4")

    @pytest.mark.parametrize(
        "category, difficulty",
        [(Category.BUILDER, Difficulty.EASY), (Category.EXPLORER, Difficulty.MEDIUM),
         (Category.INNOVATOR, Difficulty.HARD)],
    )
    def test_category_difficulty(self, config, category, difficulty):
        criteria = criteria_for_opportunities([_opportunity("x")], category, None, config)
        assert criteria.difficulty == difficulty
        assert criteria.skill_tags == ["x"]
        assert criteria.max_results == config.default_max_results

    def test_explicit_zero_is_rejected(self, config):
        with pytest.raises(ValidationError):
            criteria_for_opportunities([_opportunity("x")], Category.BUILDER, None, config, max_results=0)

    def test_recommend_for_opportunities(self, sample_lessons, config):
        ranked = recommend_for_opportunities(
            sample_lessons,
            [_opportunity("logical-thinking")],
            Category.INNOVATOR,
            "10-15",
            config,
        )
        assert [s.lesson.lesson_id for s in ranked] == ["L-LOGIC-HARD"]

    def test_no_opportunities_means_no_skill_filter(self, sample_lessons, config):
        ranked = recommend_for_opportunities(sample_lessons, [], Category.EXPLORER, "10-15", config)
        assert [s.lesson.lesson_id for s in ranked] == ["L-NUM-MED", "L-LOGIC-MED"]
