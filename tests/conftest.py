"""
Shared pytest fixtures for the adaptive assessment engine test suite.

Provides:
  - ``app_config``: A default ``AppConfig`` (same values as config/default.toml).
  - ``make_question`` / ``make_lesson`` / ``make_submission``:
    factories that build valid domain objects with overridable fields.
  - ``sample_questions`` / ``sample_lessons`` / ``sample_user``: a small
    fixed content set used across scoring, recommendation and report tests.
  - ``explorer_report`` / ``innovator_report``: reports assembled over the
    sample content (3 of 6 and 6 of 6 correct) at ``fixed_time``.
  - ``reset_catalog``: clears the process-wide lesson catalog around a test.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable

import pytest

from assessment_engine.catalog.lesson_catalog import reset_lesson_catalog
from assessment_engine.config import AppConfig
from assessment_engine.models.lesson import Lesson
from assessment_engine.models.question import Question, QuestionOption
from assessment_engine.models.submission import Answer, QuizSubmission
from assessment_engine.models.user import UserProfile
from assessment_engine.reports.assembler import ReportAssembler

STARTED_AT = datetime(2026, 3, 2, 9, 0, 0, tzinfo=timezone.utc)


# ── Config ────────────────────────────────────────────────────────────────────

@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig()


# ── Factories ─────────────────────────────────────────────────────────────────

def build_question(
    question_id: str = "q1",
    skill_tags: list[str] | None = None,
    difficulty: str = "medium",
    age_group: str = "10-15",
    correct_option_id: str = "a",
    topic: str = "arithmetic",
    is_active: bool = True,
) -> Question:
    return Question(
        question_id=question_id,
        age_group=age_group,
        topic=topic,
        text=f"Question {question_id}?",
        options=[
            QuestionOption(id="a", text="A"),
            QuestionOption(id="b", text="B"),
            QuestionOption(id="c", text="C"),
        ],
        correct_option_id=correct_option_id,
        explanation=f"Explanation for {question_id}.",
        cognitive_skill_tags=skill_tags or ["numerical-reasoning"],
        difficulty=difficulty,
        is_active=is_active,
    )


def build_lesson(
    lesson_id: str = "L-001",
    skill_tags: list[str] | None = None,
    age_group: str = "10-15",
    difficulty: str = "medium",
    duration_minutes: int = 20,
    format: str = "interactive",
    objectives: int = 2,
    is_active: bool = True,
    title: str | None = None,
) -> Lesson:
    return Lesson(
        lesson_id=lesson_id,
        title=title or f"Lesson {lesson_id}",
        skill_tags=skill_tags or ["numerical-reasoning"],
        age_group=age_group,
        duration_minutes=duration_minutes,
        difficulty=difficulty,
        format=format,
        learning_objectives=[f"Objective {i}" for i in range(objectives)],
        is_active=is_active,
    )


def build_submission(
    answers: list[Answer],
    user_id: str = "user-1",
    mode: str = "diagnostic",
) -> QuizSubmission:
    return QuizSubmission(
        user_id=user_id,
        quiz_id="quiz-1",
        answers=answers,
        started_at=STARTED_AT,
        finished_at=STARTED_AT + timedelta(minutes=5),
        mode=mode,
    )


@pytest.fixture
def make_question() -> Callable[..., Question]:
    return build_question


@pytest.fixture
def make_lesson() -> Callable[..., Lesson]:
    return build_lesson


@pytest.fixture
def make_submission() -> Callable[..., QuizSubmission]:
    return build_submission



# ── Sample content ────────────────────────────────────────────────────────────

@pytest.fixture
def sample_questions() -> list[Question]:
    """Six medium questions for ages 10-15, correct option ``a`` throughout.

    q1-q2: pattern-recognition
    q3-q4: numerical-reasoning
    q5-q6: logical-thinking
    """
    tags = ["pattern-recognition"] * 2 + ["numerical-reasoning"] * 2 + ["logical-thinking"] * 2
    return [build_question(f"q{i}", skill_tags=[tag]) for i, tag in enumerate(tags, start=1)]


@pytest.fixture
def sample_lessons() -> list[Lesson]:
    return [
        build_lesson("L-NUM-EASY", ["numerical-reasoning"], difficulty="easy"),
        build_lesson("L-NUM-MED", ["numerical-reasoning", "problem-solving"], difficulty="medium"),
        build_lesson("L-LOGIC-MED", ["logical-thinking"], difficulty="medium", format="game"),
        build_lesson("L-LOGIC-HARD", ["logical-thinking"], difficulty="hard"),
        build_lesson("L-PAT-TEEN", ["pattern-recognition"], age_group="15-18"),
        build_lesson("L-NUM-OFF", ["numerical-reasoning"], is_active=False),
    ]


@pytest.fixture
def sample_user() -> UserProfile:
    return UserProfile(
        user_id="user-1",
        username="Maya R.",
        age=12,
        age_group="10-15",
        avatar_id="avatar-3",
    )


@pytest.fixture
def reset_catalog():
    reset_lesson_catalog()
    yield
    reset_lesson_catalog()


# ── Assembled reports ─────────────────────────────────────────────────────────

@pytest.fixture
def fixed_time() -> datetime:
    return datetime(2026, 3, 2, 10, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def assembler(app_config) -> ReportAssembler:
    return ReportAssembler(app_config)


@pytest.fixture
def explorer_submission() -> QuizSubmission:
    """pattern-recognition 2/2, numerical-reasoning 1/2, logical-thinking 0/2."""
    picks = {"q1": "a", "q2": "a", "q3": "a", "q4": "b", "q5": "b", "q6": "c"}
    return build_submission(
        [Answer(question_id=qid, selected_option_id=opt, response_time_ms=15000)
         for qid, opt in picks.items()]
    )


@pytest.fixture
def innovator_submission() -> QuizSubmission:
    return build_submission(
        [Answer(question_id=f"q{i}", selected_option_id="a", response_time_ms=15000)
         for i in range(1, 7)],
        user_id="user-2",
    )


@pytest.fixture
def explorer_report(assembler, explorer_submission, sample_user, sample_questions, sample_lessons, fixed_time):
    return assembler.assemble(
        explorer_submission, sample_user, sample_questions, sample_lessons, generated_at=fixed_time
    )


@pytest.fixture
def innovator_report(assembler, innovator_submission, sample_user, sample_questions, sample_lessons, fixed_time):
    return assembler.assemble(
        innovator_submission, sample_user, sample_questions, sample_lessons, generated_at=fixed_time
    )
