"""
Adaptive Assessment Engine: CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Load JSON inputs and the lesson / question catalogs.
  4. Call the scoring, recommendation or report engine.
  5. Print JSON to stdout (or write it to ``--output``).

Install and run::

    pip install -e .
    assessment-engine --help
    assessment-engine validate-config
    assessment-engine score submission.json
    assessment-engine recommend --age-group 10-15 --skill numerical-reasoning
    assessment-engine learning-path --skill logical-thinking --age-group 15-18
    assessment-engine report submission.json user.json --output-dir data/reports
    assessment-engine insights data/reports/*.json
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import typer

app = typer.Typer(
    name="assessment-engine",
    help="Adaptive quiz scoring, lesson recommendation and report assembly.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from assessment_engine.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from assessment_engine.utils.logging import configure_logging
    configure_logging(config.logging)


def _read_json_or_exit(path: str) -> Any:
    file_path = Path(path)
    if not file_path.exists():
        typer.echo(f"[ERROR] File not found: {file_path}", err=True)
        raise typer.Exit(code=1)
    try:
        return json.loads(file_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        typer.echo(f"[ERROR] JSON parse error in {file_path}: {exc}", err=True)
        raise typer.Exit(code=1)


def _parse_or_exit(model, data: Any, label: str):
    """Validate ``data`` against a pydantic model, exiting on failure."""
    from pydantic import ValidationError

    try:
        return model.model_validate(data)
    except ValidationError as exc:
        typer.echo(f"[ERROR] Invalid {label}:\n{exc}", err=True)
        raise typer.Exit(code=1)


def _load_lessons_or_exit(config, lessons_path: Optional[str]):
    from assessment_engine.catalog import CatalogError
    from assessment_engine.catalog.lesson_catalog import load_lesson_catalog

    try:
        return load_lesson_catalog(Path(lessons_path or config.catalog.lessons_file))
    except (FileNotFoundError, CatalogError) as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)


def _load_questions_or_exit(config, questions_path: Optional[str]):
    from assessment_engine.catalog import CatalogError
    from assessment_engine.catalog.question_bank import load_question_bank

    try:
        return load_question_bank(Path(questions_path or config.catalog.questions_file))
    except (FileNotFoundError, CatalogError) as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)


def _emit(payload: Any, output: Optional[str]) -> None:
    """Print ``payload`` as JSON, or write it to ``output``."""
    if output:
        from assessment_engine.reporting.export import export_to_json

        path = export_to_json(payload, Path(output))
        typer.echo(f"[OK] Wrote {path}")
    else:
        typer.echo(json.dumps(payload, indent=2, default=str))


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)
    weights = config.scoring.weights
    xp_cap = config.rewards.max_xp_per_submission

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(
        f"  Category thresholds: Innovator >= {config.scoring.innovator_threshold}, "
        f"Explorer >= {config.scoring.explorer_threshold}"
    )
    typer.echo(
        f"  Composite weights:   percentage={weights.percentage} "
        f"speed={weights.speed} consistency={weights.consistency}"
    )
    typer.echo(f"  XP cap:              {'none' if xp_cap is None else xp_cap}")
    typer.echo(f"  Lessons file:        {config.catalog.lessons_file}")
    typer.echo(f"  Questions file:      {config.catalog.questions_file}")
    typer.echo(f"  Log level:           {config.logging.level}")
    typer.echo(f"  Debug mode:          {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(mode="json"), indent=2, default=str))


@app.command("score")
def score(
    submission_file: str = typer.Argument(..., help="Quiz submission JSON file."),
    questions_path: Optional[str] = typer.Option(
        None, "--questions", help="Question bank JSON (default from config)."
    ),
    lessons_path: Optional[str] = typer.Option(
        None, "--lessons", help="Lesson catalog JSON (default from config)."
    ),
    output: Optional[str] = typer.Option(None, "--output", help="Write JSON here."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Score one quiz submission and print the scoring result."""
    from assessment_engine.models.submission import QuizSubmission
    from assessment_engine.scoring.engine import ScoringEngine

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    submission = _parse_or_exit(QuizSubmission, _read_json_or_exit(submission_file), "submission")
    bank = _load_questions_or_exit(config, questions_path)
    catalog = _load_lessons_or_exit(config, lessons_path)

    result = ScoringEngine.from_config(config, catalog).score(submission, bank.by_id)
    _emit(result.model_dump(mode="json"), output)


@app.command("recommend")
def recommend(
    age_group: Optional[str] = typer.Option(None, "--age-group", help="e.g. 10-15."),
    skills: Optional[list[str]] = typer.Option(
        None, "--skill", help="Target skill tag (repeatable)."
    ),
    difficulty: Optional[str] = typer.Option(None, "--difficulty", help="easy | medium | hard."),
    max_results: Optional[int] = typer.Option(None, "--max-results", help="1-20."),
    lessons_path: Optional[str] = typer.Option(
        None, "--lessons", help="Lesson catalog JSON (default from config)."
    ),
    output: Optional[str] = typer.Option(None, "--output", help="Write JSON here."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Rank catalog lessons for the given criteria.  An empty list is a valid result."""
    from assessment_engine.recommendations.ranker import RecommendationCriteria, rank_lessons

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    criteria = _parse_or_exit(
        RecommendationCriteria,
        {
            "age_group": age_group,
            "skill_tags": skills or [],
            "difficulty": difficulty,
            "max_results": (
                config.recommendations.default_max_results if max_results is None else max_results
            ),
        },
        "recommendation criteria",
    )
    catalog = _load_lessons_or_exit(config, lessons_path)

    ranked = rank_lessons(catalog, criteria, config.recommendations)
    _emit([s.to_recommended().model_dump(mode="json") for s in ranked], output)


@app.command("learning-path")
def learning_path(
    skills: list[str] = typer.Option(..., "--skill", help="Target skill tag (repeatable)."),
    age_group: Optional[str] = typer.Option(None, "--age-group", help="e.g. 10-15."),
    completed: Optional[list[str]] = typer.Option(
        None, "--completed", help="Already completed lesson id (repeatable)."
    ),
    length: Optional[int] = typer.Option(None, "--length", help="Number of slots."),
    lessons_path: Optional[str] = typer.Option(
        None, "--lessons", help="Lesson catalog JSON (default from config)."
    ),
    output: Optional[str] = typer.Option(None, "--output", help="Write JSON here."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Build a progressive learning path toward the target skills."""
    from assessment_engine.recommendations.sequencing import build_learning_path

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    if length is not None and length < 1:
        typer.echo("[ERROR] --length must be >= 1.", err=True)
        raise typer.Exit(code=1)

    catalog = _load_lessons_or_exit(config, lessons_path)
    path = build_learning_path(
        catalog,
        target_skills=skills,
        config=config.recommendations,
        age_group=age_group,
        completed_lesson_ids=completed or [],
        length=length,
    )
    _emit([lesson.model_dump(mode="json") for lesson in path], output)


@app.command("report")
def report(
    submission_file: str = typer.Argument(..., help="Quiz submission JSON file."),
    user_file: str = typer.Argument(..., help="User profile JSON file."),
    questions_path: Optional[str] = typer.Option(
        None, "--questions", help="Question bank JSON (default from config)."
    ),
    lessons_path: Optional[str] = typer.Option(
        None, "--lessons", help="Lesson catalog JSON (default from config)."
    ),
    output_dir: Optional[str] = typer.Option(
        None, "--output-dir", help="Write <report_id>.json (and CSV) here instead of stdout."
    ),
    with_insights: bool = typer.Option(
        False, "--insights", help="Attach educator insights to the JSON output."
    ),
    with_csv: bool = typer.Option(
        False, "--csv", help="Also write the lesson plan as CSV (needs --output-dir)."
    ),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Assemble the full personalised report for one submission."""
    from assessment_engine.models.submission import QuizSubmission
    from assessment_engine.models.user import UserProfile
    from assessment_engine.reporting.export import (
        export_to_csv,
        flatten_lesson_plan_for_export,
        write_report_json,
    )
    from assessment_engine.reports.assembler import ReportAssembler
    from assessment_engine.reports.insights import build_educator_insights

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    submission = _parse_or_exit(QuizSubmission, _read_json_or_exit(submission_file), "submission")
    user = _parse_or_exit(UserProfile, _read_json_or_exit(user_file), "user profile")
    bank = _load_questions_or_exit(config, questions_path)
    catalog = _load_lessons_or_exit(config, lessons_path)

    built = ReportAssembler(config).assemble(submission, user, bank.by_id, catalog)
    insights = build_educator_insights(built) if with_insights else None

    if output_dir is None:
        payload = built.model_dump(mode="json")
        if insights is not None:
            payload["educator_insights"] = insights.model_dump(mode="json")
        typer.echo(json.dumps(payload, indent=2, default=str))
        return

    json_path = write_report_json(built, Path(output_dir), insights)
    typer.echo(f"[OK] Wrote {json_path}")
    if with_csv:
        csv_path = export_to_csv(
            flatten_lesson_plan_for_export(built),
            Path(output_dir) / f"{built.report_id}_lessons.csv",
        )
        typer.echo(f"[OK] Wrote {csv_path}")


@app.command("insights")
def insights(
    report_files: list[str] = typer.Argument(..., help="One or more report JSON files."),
    output: Optional[str] = typer.Option(None, "--output", help="Write JSON here."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Summarise reports: category distribution, average score, common skills."""
    from assessment_engine.models.report import Report
    from assessment_engine.reports.insights import summarize_reports

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    reports = [
        _parse_or_exit(Report, _read_json_or_exit(path), f"report {path}")
        for path in report_files
    ]
    _emit(summarize_reports(reports).model_dump(mode="json"), output)


# ── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    app()
