"""
Derived views over finished reports.

``build_educator_insights(report)`` turns one report into guidance for
parents and educators.  ``summarize_reports(reports)`` aggregates any
number of reports into category counts, the average score and the most
common strengths / opportunities.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from assessment_engine.models.report import AnalyticsSummary, EducatorInsights, Report

_LEARNING_STYLES: dict[str, str] = {
    "Builder":   "Structured, step-by-step learning with clear foundations",
    "Explorer":  "Diverse, interactive learning with variety and exploration",
    "Innovator": "Challenge-based learning with creative problem-solving opportunities",
}

_CATEGORY_ACTIVITIES: dict[str, list[str]] = {
    "Builder": [
        "Practice with guided tutorials",
        "Complete structured worksheets",
        "Follow step-by-step problem solutions",
    ],
    "Explorer": [
        "Try different learning games",
        "Explore various topic areas",
        "Engage in group learning activities",
    ],
    "Innovator": [
        "Tackle complex challenges",
        "Create original projects",
        "Lead peer learning sessions",
    ],
}


def build_educator_insights(report: Report) -> EducatorInsights:
    category = str(report.scores.category)
    opportunities = [o.skill_tag for o in report.opportunities]

    activities = list(_CATEGORY_ACTIVITIES.get(category, []))
    activities.extend(f"Focus on {tag.replace('-', ' ')} practice" for tag in opportunities)

    return EducatorInsights(
        learning_style=_LEARNING_STYLES.get(category, "Adaptive learning approach"),
        recommended_activities=activities,
        parent_guidance=_parent_guidance(report.scores.percentage_score),
        next_steps=_next_steps(report),
    )


def summarize_reports(reports: Sequence[Report], top_n: int = 3) -> AnalyticsSummary:
    """Aggregate reports; an empty sequence gives an all-zero summary."""
    categories = Counter(str(r.scores.category) for r in reports)
    strengths = Counter(s.skill_tag for r in reports for s in r.strengths)
    opportunities = Counter(o.skill_tag for r in reports for o in r.opportunities)

    average = (
        round(sum(r.scores.percentage_score for r in reports) / len(reports), 2)
        if reports else 0.0
    )
    completion_ms = sum(q.time_spent_ms for r in reports for q in r.question_breakdown)

    return AnalyticsSummary(
        report_count=len(reports),
        category_distribution=dict(categories),
        average_score=average,
        common_strengths=[tag for tag, _ in strengths.most_common(top_n)],
        common_opportunities=[tag for tag, _ in opportunities.most_common(top_n)],
        completion_time_ms=completion_ms,
    )


def _parent_guidance(percentage_score: float) -> list[str]:
    guidance = [
        "Celebrate effort and progress, not just results",
        "Provide regular encouragement and support",
        "Create a positive learning environment at home",
    ]
    if percentage_score >= 80:
        guidance += ["Challenge with advanced materials", "Encourage mentoring of peers"]
    elif percentage_score >= 60:
        guidance += ["Focus on consistent practice", "Identify and build on strengths"]
    else:
        guidance += [
            "Provide extra support and patience",
            "Break learning into smaller, manageable chunks",
        ]
    return guidance


def _next_steps(report: Report) -> list[str]:
    steps = [
        "Complete recommended lesson modules",
        "Practice identified skill areas regularly",
        "Track progress through regular assessments",
    ]
    if report.opportunities:
        tags = ", ".join(o.skill_tag for o in report.opportunities)
        steps.append(f"Focus on improving: {tags}")
    if report.lesson_plan:
        steps.append(f"Start with: {report.lesson_plan[0].lesson.title}")
    return steps
