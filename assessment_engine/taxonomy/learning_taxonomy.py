"""
Learning taxonomy shared by questions, lessons, scores and reports.

Orthogonal dimensions:
  - ``AgeGroup``: which learners a question or lesson is written for.
  - ``Difficulty``: ordered easy < medium < hard (see ``DIFFICULTY_ORDER``).
  - ``LessonFormat``: how a lesson is delivered.
  - ``Category``: coarse learner tier derived from percent correct.
  - ``Priority``: urgency label for opportunities and ranked lessons.

Usage example::

    from assessment_engine.taxonomy.learning_taxonomy import Category, Difficulty

    tier = Category.EXPLORER
    step = Difficulty.MEDIUM

This module has NO imports from any other ``assessment_engine`` package.
"""

from enum import StrEnum


class AgeGroup(StrEnum):
    """Learner age band."""

    YOUNG = "5-10"
    """Early readers; short, game-heavy content."""

    MIDDLE = "10-15"
    """Middle years; interactive content preferred."""

    TEEN = "15-18"
    """Older learners; tolerate longer text and video."""


class Difficulty(StrEnum):
    """Question and lesson difficulty."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


DIFFICULTY_ORDER: tuple[Difficulty, ...] = (
    Difficulty.EASY,
    Difficulty.MEDIUM,
    Difficulty.HARD,
)


def difficulty_index(difficulty: str) -> int:
    """Position of ``difficulty`` in ``DIFFICULTY_ORDER`` (0 = easiest)."""
    return DIFFICULTY_ORDER.index(Difficulty(difficulty))


def next_difficulty(difficulty: str) -> Difficulty:
    """Step one level harder, saturating at ``HARD``."""
    idx = min(difficulty_index(difficulty) + 1, len(DIFFICULTY_ORDER) - 1)
    return DIFFICULTY_ORDER[idx]


class LessonFormat(StrEnum):
    """Lesson delivery format."""

    VIDEO = "video"
    INTERACTIVE = "interactive"
    TEXT = "text"
    GAME = "game"


class QuizMode(StrEnum):
    """Why the quiz was taken."""

    PRACTICE = "practice"
    DIAGNOSTIC = "diagnostic"


class Category(StrEnum):
    """Learner category, lowest tier first."""

    BUILDER = "Builder"
    """Below the explorer threshold; needs foundations."""

    EXPLORER = "Explorer"
    """Between the two thresholds."""

    INNOVATOR = "Innovator"
    """At or above the innovator threshold."""


class Priority(StrEnum):
    """Urgency label for skill opportunities and ranked lessons."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class CertificateType(StrEnum):
    """Certificate awarded for a report, best first."""

    MASTERY = "mastery"
    ACHIEVEMENT = "achievement"
    COMPLETION = "completion"
