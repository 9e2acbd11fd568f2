"""
Lesson catalog: the one piece of state shared across scoring runs.

The catalog is built once at process startup and is never written to
afterwards.  Lessons live in a fixed tuple (catalog order is meaningful:
it is the tie-break order for ranking and sequencing) with a read-only
id index alongside.

Process-wide access goes through a one-shot barrier::

    init_lesson_catalog(load_lesson_catalog(Path("config/catalog/lessons.json")))
    ...
    catalog = get_lesson_catalog()   # from any thread, after init

``get_lesson_catalog()`` raises ``CatalogNotInitializedError`` if called
before ``init_lesson_catalog()``; it can also block until another thread
finishes initialisation by passing ``timeout``.  Engines themselves never
touch the global; they take a ``LessonCatalog`` (or any sequence of
lessons) as an argument.
"""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Iterable, Iterator
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from assessment_engine.catalog import CatalogError, CatalogNotInitializedError
from assessment_engine.models.lesson import Lesson

logger = logging.getLogger(__name__)


class LessonCatalog:
    """Immutable, ordered collection of lessons indexed by ``lesson_id``."""

    __slots__ = ("_lessons", "_by_id")

    def __init__(self, lessons: Iterable[Lesson]) -> None:
        ordered = tuple(lessons)
        by_id: dict[str, Lesson] = {}
        for lesson in ordered:
            if lesson.lesson_id in by_id:
                raise CatalogError(f"Duplicate lesson_id '{lesson.lesson_id}' in catalog.")
            by_id[lesson.lesson_id] = lesson
        self._lessons: tuple[Lesson, ...] = ordered
        self._by_id: Mapping[str, Lesson] = MappingProxyType(by_id)

    def __len__(self) -> int:
        return len(self._lessons)

    def __iter__(self) -> Iterator[Lesson]:
        return iter(self._lessons)

    def __getitem__(self, index: int) -> Lesson:
        return self._lessons[index]

    def __contains__(self, lesson_id: object) -> bool:
        return lesson_id in self._by_id

    @property
    def lessons(self) -> tuple[Lesson, ...]:
        return self._lessons

    def get(self, lesson_id: str) -> Optional[Lesson]:
        """Return the lesson with ``lesson_id`` or ``None``."""
        return self._by_id.get(lesson_id)

    def active(self) -> list[Lesson]:
        return [lesson for lesson in self._lessons if lesson.is_active]

    def lesson_ids_for_skill(self, skill_tag: str, limit: int = 3) -> list[str]:
        """Ids of active lessons tagged with ``skill_tag``, catalog order, at most ``limit``."""
        ids = [
            lesson.lesson_id
            for lesson in self._lessons
            if lesson.is_active and skill_tag in lesson.skill_tags
        ]
        return ids[:limit]

    def skill_tags(self) -> list[str]:
        """Sorted set of every skill tag in the catalog."""
        return sorted({tag for lesson in self._lessons for tag in lesson.skill_tags})


def load_lesson_catalog(path: Path) -> LessonCatalog:
    """Load a lesson catalog from JSON.

    Accepts either a top-level list of lesson objects or an object with a
    ``"lessons"`` key holding that list.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        CatalogError: On malformed JSON, invalid lessons or duplicate ids.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Lesson catalog not found: {path}")

    try:
        raw: Any = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise CatalogError(f"Lesson catalog {path} is not valid JSON: {exc}") from exc

    records = raw.get("lessons", []) if isinstance(raw, dict) else raw
    if not isinstance(records, list):
        raise CatalogError(f"Lesson catalog {path} must contain a list of lessons.")

    try:
        lessons = [Lesson.model_validate(rec) for rec in records]
    except ValidationError as exc:
        raise CatalogError(f"Invalid lesson in {path}: {exc}") from exc

    catalog = LessonCatalog(lessons)
    logger.info(
        "Lesson catalog loaded: %d lessons (%d active), %d skills from %s",
        len(catalog), len(catalog.active()), len(catalog.skill_tags()), path,
    )
    return catalog


# ── Process-wide catalog ──────────────────────────────────────────────────────

_init_lock = threading.Lock()
_ready = threading.Event()
_catalog: Optional[LessonCatalog] = None


def init_lesson_catalog(catalog: LessonCatalog) -> LessonCatalog:
    """Publish ``catalog`` as the process-wide catalog.  One shot.

    Raises:
        CatalogError: If a catalog has already been published.
    """
    global _catalog
    with _init_lock:
        if _ready.is_set():
            raise CatalogError("Lesson catalog is already initialised.")
        _catalog = catalog
        _ready.set()
    return catalog


def get_lesson_catalog(timeout: Optional[float] = None) -> LessonCatalog:
    """Return the process-wide catalog.

    Args:
        timeout: Seconds to wait for another thread to finish
            initialisation.  ``None`` means do not wait.

    Raises:
        CatalogNotInitializedError: If no catalog is published in time.
    """
    if timeout is not None:
        _ready.wait(timeout)
    if not _ready.is_set() or _catalog is None:
        raise CatalogNotInitializedError(
            "Lesson catalog has not been initialised; call init_lesson_catalog() at startup."
        )
    return _catalog


def reset_lesson_catalog() -> None:
    """Forget the published catalog.  Intended for tests only."""
    global _catalog
    with _init_lock:
        _catalog = None
        _ready.clear()
