"""
Tests for the bounded performance history and its trend math.
"""

import pytest

from errors import ConfigurationError
from history import TrendDirection, PerformanceHistory
from scoreboard_types import AggregateMetrics, MetricScore, QualityFlags, ScoreCategory, Scoreboard


def _scoreboard(overall, doc_id="doc", metrics=None):
    return Scoreboard(
        document_id=doc_id,
        timestamp="2024-01-01T00:00:00+00:00",
        overall_score=overall,
        summarization_scores=metrics or {},
        classification_scores={},
        aggregate_metrics=AggregateMetrics(total_metrics=len(metrics or {})),
        quality_flags=QualityFlags(),
    )


def _history(*scores, capacity=10):
    history = PerformanceHistory(max_entries=capacity)
    for i, score in enumerate(scores):
        history.record(_scoreboard(score, doc_id=f"doc_{i}"))
    return history


class TestPercentChange:

    def test_first_evaluation_is_zero(self):
        assert _history().percent_change(8.0) == 0.0

    def test_second_evaluation_is_zero(self):
        # only one earlier evaluation on record
        assert _history(8.0).percent_change(9.0) == 0.0

    def test_compares_with_latest_recorded_entry(self):
        history = _history(6.0, 8.0)
        assert history.percent_change(9.0) == pytest.approx(12.5)

    def test_does_not_record(self):
        history = _history(6.0, 8.0)
        history.percent_change(9.0)
        assert history.scores() == [6.0, 8.0]

    def test_zero_previous_score_reports_no_change(self):
        assert _history(5.0, 0.0).percent_change(5.0) == 0.0


class TestTrendDirection:

    def test_stable_below_window(self):
        assert _history().trend_direction() is TrendDirection.STABLE
        assert _history(2.0, 9.0).trend_direction() is TrendDirection.STABLE
        assert _history(2.0).trend_direction(9.0) is TrendDirection.STABLE

    def test_improving(self):
        assert _history(6.0, 6.0, 7.0).trend_direction() is TrendDirection.IMPROVING

    def test_pending_score_closes_window(self):
        assert _history(6.0, 6.0).trend_direction(7.0) is TrendDirection.IMPROVING
        assert _history(8.0, 8.0).trend_direction(7.0) is TrendDirection.DECLINING

    def test_declining(self):
        assert _history(8.0, 8.0, 7.0).trend_direction() is TrendDirection.DECLINING

    def test_small_change_is_stable(self):
        assert _history(7.0, 7.0, 7.2).trend_direction() is TrendDirection.STABLE

    def test_uses_last_three_entries(self):
        # the first entry falls outside the window
        assert _history(1.0, 8.0, 8.0, 8.1).trend_direction() is TrendDirection.STABLE

    def test_zero_window_start_is_stable(self):
        assert _history(0.0, 5.0, 6.0).trend_direction() is TrendDirection.STABLE
        assert _history(0.0, 5.0).trend_direction(6.0) is TrendDirection.STABLE


class TestBoundedHistory:

    def test_oldest_entries_evicted(self):
        history = _history(1.0, 2.0, 3.0, 4.0, 5.0, capacity=3)
        assert len(history) == 3
        assert history.scores() == [3.0, 4.0, 5.0]
        assert [entry.document_id for entry in history] == ["doc_2", "doc_3", "doc_4"]

    def test_capacity_from_config(self):
        assert PerformanceHistory().capacity == 1000

    def test_capacity_below_trend_window_rejected(self):
        with pytest.raises(ConfigurationError):
            PerformanceHistory(max_entries=2)


class TestSummary:

    def test_empty_summary(self):
        summary = PerformanceHistory(max_entries=5).summary()
        assert summary.analysis_count == 0
        assert summary.average_score == 0.0
        assert summary.trend_direction is TrendDirection.STABLE
        assert summary.improvement_trend == 0.0

    def test_summary_figures(self):
        metrics = {
            "factualAccuracy": MetricScore(ScoreCategory.ACCURACY, 9.5, 0.2),
            "clarity": MetricScore(ScoreCategory.CLARITY, 3.0, 0.1),
            "completeness": MetricScore(ScoreCategory.COMPLETENESS, 6.5, 0.15),
        }
        history = PerformanceHistory(max_entries=5)
        for i, score in enumerate((6.0, 6.0, 9.0)):
            history.record(_scoreboard(score, doc_id=f"doc_{i}", metrics=metrics))

        summary = history.summary()
        assert summary.analysis_count == 3
        assert summary.average_score == 7.0
        assert summary.score_distribution["satisfactory"] == 2
        assert summary.score_distribution["excellent"] == 1
        assert summary.improvement_trend == 0.5
        assert summary.trend_direction is TrendDirection.IMPROVING
        assert summary.best_performing_areas == ["accuracy"]
        assert summary.problem_areas == ["clarity"]

        data = summary.to_dict()
        assert data["sessionId"] == history.session_id
        assert data["trendDirection"] == "improving"

    def test_zero_score_in_window(self):
        summary = _history(0.0, 8.0, 8.0).summary()
        assert summary.analysis_count == 3
        assert summary.improvement_trend == 0.0
        assert summary.trend_direction is TrendDirection.STABLE
