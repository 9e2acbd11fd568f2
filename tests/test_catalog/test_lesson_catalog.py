"""
Tests for assessment_engine/catalog/lesson_catalog.py.

What we test
------------
LessonCatalog:
  - Keeps catalog order; indexes by lesson_id; rejects duplicate ids.
  - lesson_ids_for_skill() returns active lessons only, capped.
  - skill_tags() is the sorted union of tags.

load_lesson_catalog():
  - Accepts a bare list or {"lessons": [...]}.
  - Missing file -> FileNotFoundError; bad JSON / invalid lesson -> CatalogError.
  - The bundled config/catalog/lessons.json loads.

init_lesson_catalog() / get_lesson_catalog():
  - Reading before init raises CatalogNotInitializedError.
  - Second init raises CatalogError.
  - A waiting reader sees the catalog once another thread publishes it.
"""

from __future__ import annotations

import json
import threading
from pathlib import Path

import pytest

from assessment_engine.catalog import CatalogError, CatalogNotInitializedError
from assessment_engine.catalog.lesson_catalog import (
    LessonCatalog,
    get_lesson_catalog,
    init_lesson_catalog,
    load_lesson_catalog,
)

_BUNDLED = Path(__file__).resolve().parents[2] / "config" / "catalog" / "lessons.json"


def _lesson_dict(lesson_id: str, tags: list[str], **overrides) -> dict:
    record = {
        "lesson_id": lesson_id,
        "title": f"Lesson {lesson_id}",
        "skill_tags": tags,
        "age_group": "10-15",
        "duration_minutes": 20,
        "difficulty": "medium",
        "format": "interactive",
    }
    record.update(overrides)
    return record


class TestLessonCatalog:
    def test_order_and_lookup(self, sample_lessons):
        catalog = LessonCatalog(sample_lessons)
        assert len(catalog) == 6
        assert [l.lesson_id for l in catalog] == [l.lesson_id for l in sample_lessons]
        assert catalog[0].lesson_id == "L-NUM-EASY"
        assert "L-LOGIC-MED" in catalog
        assert catalog.get("L-LOGIC-MED").difficulty == "medium"
        assert catalog.get("missing") is None

    def test_duplicate_ids_rejected(self, make_lesson):
        with pytest.raises(CatalogError, match="Duplicate"):
            LessonCatalog([make_lesson("L-1"), make_lesson("L-1")])

    def test_active(self, sample_lessons):
        assert "L-NUM-OFF" not in [l.lesson_id for l in LessonCatalog(sample_lessons).active()]

    def test_lesson_ids_for_skill(self, sample_lessons):
        catalog = LessonCatalog(sample_lessons)
        assert catalog.lesson_ids_for_skill("numerical-reasoning") == ["L-NUM-EASY", "L-NUM-MED"]
        assert catalog.lesson_ids_for_skill("numerical-reasoning", limit=1) == ["L-NUM-EASY"]
        assert catalog.lesson_ids_for_skill("empathy") == []

    def test_skill_tags(self, sample_lessons):
        assert LessonCatalog(sample_lessons).skill_tags() == [
            "logical-thinking", "numerical-reasoning", "pattern-recognition", "problem-solving",
        ]


class TestLoadLessonCatalog:
    def test_bare_list(self, tmp_path):
        path = tmp_path / "lessons.json"
        path.write_text(json.dumps([_lesson_dict("L-1", ["a"])]), encoding="utf-8")
        assert [l.lesson_id for l in load_lesson_catalog(path)] == ["L-1"]

    def test_wrapped_list(self, tmp_path):
        path = tmp_path / "lessons.json"
        payload = {"lessons": [_lesson_dict("L-1", ["a"]), _lesson_dict("L-2", ["b"])]}
        path.write_text(json.dumps(payload), encoding="utf-8")
        assert len(load_lesson_catalog(path)) == 2

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_lesson_catalog(tmp_path / "nope.json")

    def test_bad_json(self, tmp_path):
        path = tmp_path / "lessons.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(CatalogError, match="not valid JSON"):
            load_lesson_catalog(path)

    def test_invalid_lesson(self, tmp_path):
        path = tmp_path / "lessons.json"
        path.write_text(json.dumps([_lesson_dict("L-1", ["a"], duration_minutes=0)]), encoding="utf-8")
        with pytest.raises(CatalogError, match="Invalid lesson"):
            load_lesson_catalog(path)

    def test_bundled_catalog(self):
        catalog = load_lesson_catalog(_BUNDLED)
        assert len(catalog) >= 9
        assert "L-MATH-001" in catalog


class TestProcessCatalog:
    def test_get_before_init(self, reset_catalog):
        with pytest.raises(CatalogNotInitializedError):
            get_lesson_catalog()

    def test_init_once(self, reset_catalog, sample_lessons):
        catalog = init_lesson_catalog(LessonCatalog(sample_lessons))
        assert get_lesson_catalog() is catalog
        with pytest.raises(CatalogError):
            init_lesson_catalog(LessonCatalog([]))

    def test_waiting_reader(self, reset_catalog, sample_lessons):
        catalog = LessonCatalog(sample_lessons)
        seen: list[LessonCatalog] = []

        reader = threading.Thread(target=lambda: seen.append(get_lesson_catalog(timeout=5)))
        reader.start()
        init_lesson_catalog(catalog)
        reader.join(timeout=5)

        assert seen == [catalog]
