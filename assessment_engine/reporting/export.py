"""
Export helpers for finished reports.

All functions write to disk and return the written ``Path``.  The generic
writers accept plain ``dict`` / ``list[dict]`` data so they stay decoupled
from specific report shapes; ``write_report_json`` and
``flatten_lesson_plan_for_export`` adapt a ``Report`` onto them.

CSV exports are flat (no nested dicts) so they load directly in a
spreadsheet without any pre-processing step.
"""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Optional

from assessment_engine.models.report import EducatorInsights, Report


def export_to_csv(
    records: list[dict],
    path: Path,
    fieldnames: list[str] | None = None,
) -> Path:
    """Write ``records`` to a UTF-8 CSV file.

    Args:
        records:    List of row dicts.
        path:       Destination file path (parent dirs created if missing).
        fieldnames: Column order.  If None, uses the keys of the first record.

    Returns:
        ``path`` as written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    if not records:
        path.write_text("", encoding="utf-8")
        return path
    cols = fieldnames or list(records[0].keys())
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=cols, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(records)
    return path


def export_to_json(data: dict | list, path: Path) -> Path:
    """Write ``data`` to a pretty-printed JSON file (parent dirs created)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, default=str), encoding="utf-8")
    return path


def write_report_json(
    report: Report,
    output_dir: Path,
    insights: Optional[EducatorInsights] = None,
) -> Path:
    """Write ``report`` (and optional insights) to ``<output_dir>/<report_id>.json``."""
    payload = report.model_dump(mode="json")
    if insights is not None:
        payload["educator_insights"] = insights.model_dump(mode="json")
    return export_to_json(payload, Path(output_dir) / f"{report.report_id}.json")


def flatten_lesson_plan_for_export(report: Report) -> list[dict]:
    """One flat row per lesson in the report's lesson plan.

    Each row contains ``report_id``, ``user_id``, ``category``, ``rank``,
    ``lesson_id``, ``title``, ``difficulty``, ``format``,
    ``duration_minutes``, ``skill_tags`` (``;``-joined), ``score``,
    ``priority`` and ``reasons`` (``;``-joined).
    """
    rows: list[dict] = []
    for rank, rec in enumerate(report.lesson_plan, start=1):
        rows.append(
            {
                "report_id":        report.report_id,
                "user_id":          report.user_id,
                "category":         str(report.scores.category),
                "rank":             rank,
                "lesson_id":        rec.lesson.lesson_id,
                "title":            rec.lesson.title,
                "difficulty":       str(rec.lesson.difficulty),
                "format":           str(rec.lesson.format),
                "duration_minutes": rec.lesson.duration_minutes,
                "skill_tags":       ";".join(rec.lesson.skill_tags),
                "score":            rec.score,
                "priority":         str(rec.priority),
                "reasons":          "; ".join(rec.reasons),
            }
        )
    return rows
