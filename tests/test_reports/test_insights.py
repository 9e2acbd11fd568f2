"""
Tests for assessment_engine/reports/insights.py.

What we test
------------
build_educator_insights():
  - Learning style and activities follow the category.
  - Each opportunity adds a focus activity and a next step.
  - Parent guidance depends on the percentage band.
  - First lesson of the plan appears as the starting point.

summarize_reports():
  - Counts, category distribution, average score, common skills, total time.
  - Empty input -> all-zero summary.
"""

from __future__ import annotations

from assessment_engine.reports.insights import build_educator_insights, summarize_reports


class TestEducatorInsights:
    def test_explorer(self, explorer_report):
        insights = build_educator_insights(explorer_report)
        assert insights.learning_style.startswith("Diverse, interactive learning")
        assert insights.recommended_activities[:3] == [
            "Try different learning games",
            "Explore various topic areas",
            "Engage in group learning activities",
        ]
        assert insights.recommended_activities[3:] == [
            "Focus on numerical reasoning practice",
            "Focus on logical thinking practice",
        ]
        assert "Provide extra support and patience" in insights.parent_guidance
        assert "Focus on improving: numerical-reasoning, logical-thinking" in insights.next_steps
        assert insights.next_steps[-1] == "Start with: Lesson L-NUM-MED"

    def test_innovator(self, innovator_report):
        insights = build_educator_insights(innovator_report)
        assert insights.learning_style.startswith("Challenge-based learning")
        assert "Challenge with advanced materials" in insights.parent_guidance
        assert not any(step.startswith("Focus on improving") for step in insights.next_steps)


class TestSummarizeReports:
    def test_summary(self, explorer_report, innovator_report):
        summary = summarize_reports([explorer_report, innovator_report])
        assert summary.report_count == 2
        assert summary.category_distribution == {"Explorer": 1, "Innovator": 1}
        assert summary.average_score == 75.0
        assert summary.common_strengths[0] == "pattern-recognition"
        assert set(summary.common_strengths) == {
            "pattern-recognition", "numerical-reasoning", "logical-thinking",
        }
        assert summary.common_opportunities == ["numerical-reasoning", "logical-thinking"]
        assert summary.completion_time_ms == 12 * 15000

    def test_top_n(self, explorer_report, innovator_report):
        summary = summarize_reports([explorer_report, innovator_report], top_n=1)
        assert summary.common_strengths == ["pattern-recognition"]

    def test_empty(self):
        summary = summarize_reports([])
        assert summary.report_count == 0
        assert summary.category_distribution == {}
        assert summary.average_score == 0.0
        assert summary.common_strengths == []
        assert summary.completion_time_ms == 0
