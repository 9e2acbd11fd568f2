"""
Tests for assessment_engine/catalog/question_bank.py.

What we test
------------
QuestionBank:
  - by_id lookup; duplicate ids rejected.
  - select_questions() filters by age group, difficulty, topic / skill tag
    and skips inactive questions.
  - Same seed -> same selection; no seed -> bank order.
  - Fewer matches than requested -> short list plus a warning.

load_question_bank():
  - The bundled config/catalog/questions.json loads; bad files raise.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from assessment_engine.catalog import CatalogError
from assessment_engine.catalog.question_bank import QuestionBank, load_question_bank

_BUNDLED = Path(__file__).resolve().parents[2] / "config" / "catalog" / "questions.json"


@pytest.fixture
def bank(make_question) -> QuestionBank:
    questions = [
        make_question(f"m{i}", difficulty="medium", topic="fractions" if i % 2 else "arithmetic")
        for i in range(10)
    ]
    questions += [
        make_question("e1", difficulty="easy", skill_tags=["pattern-recognition"], topic="shapes"),
        make_question("y1", age_group="5-10"),
        make_question("off", is_active=False),
    ]
    return QuestionBank(questions)


class TestQuestionBank:
    def test_lookup(self, bank):
        assert len(bank) == 13
        assert bank.get("e1").difficulty == "easy"
        assert "m3" in bank.by_id
        assert bank.get("missing") is None

    def test_duplicates_rejected(self, make_question):
        with pytest.raises(CatalogError):
            QuestionBank([make_question("q"), make_question("q")])

    def test_filters(self, bank):
        selected = bank.select_questions("10-15", count=20, difficulty="medium")
        ids = [q.question_id for q in selected]
        assert ids == [f"m{i}" for i in range(10)]

    def test_topic_and_tag_match(self, bank):
        by_topic = bank.select_questions("10-15", count=20, topics=["FRACT"])
        assert {q.question_id for q in by_topic} == {"m1", "m3", "m5", "m7", "m9"}
        by_tag = bank.select_questions("10-15", count=20, topics=["pattern"])
        assert [q.question_id for q in by_tag] == ["e1"]

    def test_seeded_selection_is_reproducible(self, bank):
        first = bank.select_questions("10-15", count=5, difficulty="medium", seed="quiz-42")
        second = bank.select_questions("10-15", count=5, difficulty="medium", seed="quiz-42")
        assert [q.question_id for q in first] == [q.question_id for q in second]
        assert len(first) == 5

    def test_short_selection_warns(self, bank, caplog):
        with caplog.at_level("WARNING"):
            selected = bank.select_questions("5-10", count=3)
        assert [q.question_id for q in selected] == ["y1"]
        assert "Question bank short" in caplog.text


class TestLoadQuestionBank:
    def test_bundled(self):
        bank = load_question_bank(_BUNDLED)
        assert len(bank) >= 10
        assert bank.get("Q-MID-001").correct_option_id == "c"

    def test_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_question_bank(tmp_path / "nope.json")

    def test_not_a_list(self, tmp_path):
        path = tmp_path / "questions.json"
        path.write_text('{"questions": {"q": 1}}', encoding="utf-8")
        with pytest.raises(CatalogError):
            load_question_bank(path)
