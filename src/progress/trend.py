# ABOUTME: Computes recent-vs-prior window deltas for mastery and activity from daily trend points.
# ABOUTME: Also formats metric comparisons and the line-chart series for the dashboard.

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import pandas as pd

from src.common.schemas import TrendPoint

DEFAULT_WINDOW_DAYS = 7
SUPPORTED_PERIODS = (7, 30)
INSUFFICIENT_DATA_LABEL = "N/A"
CHART_COLUMNS = ["date", "mastery_pct", "accuracy_pct", "attempts"]


@dataclass(frozen=True)
class TrendSummary:
    """
    Windowed comparison of the latest points against the ones just before them.

    ``None`` in either delta means there was not enough data to compare.
    """

    mastery_delta_pct: Optional[float]
    activity_delta: Optional[int]
    recent_points: int = 0
    prior_points: int = 0

    @property
    def is_sufficient(self) -> bool:
        return self.mastery_delta_pct is not None and self.activity_delta is not None

    @property
    def mastery_delta_label(self) -> str:
        return format_signed_pct(self.mastery_delta_pct)

    @property
    def activity_delta_label(self) -> str:
        if self.activity_delta is None:
            return INSUFFICIENT_DATA_LABEL
        return f"{self.activity_delta:+d}"


def _trend_frame(series: Sequence[TrendPoint]) -> pd.DataFrame:
    frame = pd.DataFrame(
        {
            "date": [p.date for p in series],
            "mastery": [p.mastery for p in series],
            "accuracy": [p.accuracy for p in series],
            "attempts": [p.attempts for p in series],
        }
    )
    # Stable sort keeps same-day points in input order.
    return frame.sort_values("date", kind="mergesort").reset_index(drop=True)


def compute_trend(series: Sequence[TrendPoint], window_days: int = DEFAULT_WINDOW_DAYS) -> TrendSummary:
    """
    Compare the last ``window_days`` points with the ``window_days`` points before them.

    - Mastery delta: relative change of mean accuracy, in percent.
    - Activity delta: absolute difference of summed attempts.
    - Fewer than two points, or a zero prior accuracy, yields ``None``.
    - With no prior points the prior window mirrors the recent one, giving zero deltas.
    Missing days are tolerated; windows count points, not calendar days.
    """

    if window_days < 1:
        raise ValueError(f"window_days must be >= 1, got {window_days}")
    if len(series) < 2:
        return TrendSummary(mastery_delta_pct=None, activity_delta=None, recent_points=len(series))

    frame = _trend_frame(series)
    recent = frame.tail(window_days)
    prior = frame.iloc[max(len(frame) - 2 * window_days, 0) : len(frame) - len(recent)]

    recent_accuracy = float(recent["accuracy"].mean())
    recent_attempts = int(recent["attempts"].sum())
    if prior.empty:
        prior_accuracy = recent_accuracy
        prior_attempts = recent_attempts
    else:
        prior_accuracy = float(prior["accuracy"].mean())
        prior_attempts = int(prior["attempts"].sum())

    if prior_accuracy == 0.0:
        mastery_delta = 0.0 if recent_accuracy == 0.0 and prior.empty else None
    else:
        mastery_delta = round((recent_accuracy - prior_accuracy) / prior_accuracy * 100.0, 1)

    return TrendSummary(
        mastery_delta_pct=mastery_delta,
        activity_delta=recent_attempts - prior_attempts,
        recent_points=len(recent),
        prior_points=len(prior),
    )


def compare_metric(current: float, previous: Optional[float], reverse: bool = False) -> Optional[float]:
    """
    Percentage change from ``previous`` to ``current``.

    ``previous`` must be a real historical value; ``None`` or a zero baseline
    with a nonzero current value yields ``None``. ``reverse`` flips the sign for
    metrics where lower is better.
    """

    if previous is None:
        return None
    if current == 0 and previous == 0:
        return 0.0
    if previous == 0:
        return None
    change = (current - previous) / previous * 100.0
    return round(-change if reverse else change, 1)


def weak_point_count_trend(current_count: int, previous_count: Optional[int]) -> Optional[int]:
    """Change in weak-point count against an explicit historical snapshot."""

    if previous_count is None:
        return None
    return current_count - previous_count


def format_signed_pct(value: Optional[float]) -> str:
    if value is None:
        return INSUFFICIENT_DATA_LABEL
    if value == 0:
        value = 0.0  # avoid "-0.0"
    sign = "+" if value >= 0 else ""
    return f"{sign}{value:.1f}%"


def activity_level(percentage: float) -> str:
    if percentage >= 80:
        return "very_active"
    if percentage >= 60:
        return "active"
    if percentage >= 40:
        return "moderate"
    return "needs_attention"


def trend_chart_series(series: Sequence[TrendPoint]) -> pd.DataFrame:
    """Rows for the mastery/attempts line chart, one per point, sorted by date."""

    if not series:
        return pd.DataFrame(columns=CHART_COLUMNS)
    frame = _trend_frame(series)
    return pd.DataFrame(
        {
            "date": [d.isoformat() for d in frame["date"]],
            "mastery_pct": (frame["mastery"] * 100).round(1),
            "accuracy_pct": (frame["accuracy"] * 100).round(1),
            "attempts": frame["attempts"].astype(int),
        }
    )[CHART_COLUMNS]