# ABOUTME: Trend and weak-point analytics computed from submission history.
# ABOUTME: Re-exports the aggregator, ranker, and report helpers.

from .trend import TrendSummary, compare_metric, compute_trend, format_signed_pct, trend_chart_series
from .weak_points import rank_weak_points, top_weak_points, weak_point_report

__all__ = [
    "TrendSummary",
    "compare_metric",
    "compute_trend",
    "format_signed_pct",
    "rank_weak_points",
    "top_weak_points",
    "trend_chart_series",
    "weak_point_report",
]
