# ABOUTME: Converts deserialized analytics payloads into canonical schema records.
# ABOUTME: Applies per-field defaults so downstream engines never see missing keys.

from __future__ import annotations

import json
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from .mastery_bands import improvement_potential, weakness_level
from .schemas import Domain, MicroConcept, Overview, TrendPoint, WeakPoint

logger = logging.getLogger(__name__)


def _first(row: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        value = row.get(key)
        if value is not None:
            return value
    return default


def _score(value: Any) -> Optional[float]:
    try:
        score = float(value)
    except (TypeError, ValueError):
        return None
    if score != score:  # NaN
        return None
    return score


def normalize_mastery(value: Any, percent: bool = False) -> float:
    """
    Coerce a mastery value into [0, 1].

    With ``percent`` the value is divided by 100 first; anything unparsable becomes 0.0.
    """

    score = _score(value)
    if score is None:
        return 0.0
    if percent:
        score = score / 100.0
    return min(max(score, 0.0), 1.0)


def is_percent_scale(values: Iterable[Any]) -> bool:
    """A payload is on the 0-100 scale when any of its mastery-like values exceeds 1."""

    for value in values:
        score = _score(value)
        if score is not None and score > 1.0:
            return True
    return False


def _count(value: Any) -> int:
    try:
        return max(int(value), 0)
    except (TypeError, ValueError):
        return 0


def _parse_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            return None
    return None


def parse_domain(row: Mapping[str, Any], percent: bool = False) -> Domain:
    return Domain(
        id=str(_first(row, "id", "domain_id")),
        name=str(_first(row, "name", default="")),
        mastery=normalize_mastery(_first(row, "mastery", default=0.0), percent),
        concept_count=_count(_first(row, "concept_count", "conceptCount", default=0)),
        wrong_count=_count(_first(row, "wrong_count", "wrongCount", "weak_count", default=0)),
        is_expanded=bool(_first(row, "is_expanded", "isExpanded", default=False)),
    )


def parse_micro_concept(
    row: Mapping[str, Any], parent_domain_id: Optional[str] = None, percent: bool = False
) -> MicroConcept:
    """
    Build a MicroConcept; ``question_count`` falls back to ``attempts``.

    The parent id recorded in the row wins over ``parent_domain_id`` so the
    graph builder can detect rows filed under the wrong domain.
    """

    parent = _first(row, "parent_domain_id", "parentDomainId", "domain_id", default=parent_domain_id)
    return MicroConcept(
        id=str(_first(row, "id", "micro_id")),
        parent_domain_id=str(parent) if parent is not None else "",
        name=str(_first(row, "name", default="")),
        mastery=normalize_mastery(_first(row, "mastery", default=0.0), percent),
        question_count=_count(_first(row, "question_count", "questionCount", "attempts", default=0)),
        wrong_count=_count(_first(row, "wrong_count", "wrongCount", default=0)),
    )


def parse_trend_point(row: Mapping[str, Any], percent: bool = False) -> Optional[TrendPoint]:
    day = _parse_date(row.get("date"))
    if day is None:
        logger.warning("Skipping trend point with unparsable date: %r", row.get("date"))
        return None
    raw_accuracy = _first(row, "accuracy", default=0.0)
    return TrendPoint(
        date=day,
        mastery=normalize_mastery(_first(row, "mastery", default=raw_accuracy), percent),
        attempts=_count(_first(row, "attempts", "questions", default=0)),
        accuracy=normalize_mastery(raw_accuracy, percent),
    )


def parse_weak_point(row: Mapping[str, Any], percent: bool = False) -> WeakPoint:
    mastery = normalize_mastery(_first(row, "mastery", default=0.0), percent)
    errors = _count(_first(row, "error_count", "wrong_count", "wrongCount", default=0))
    return WeakPoint(
        concept_id=str(_first(row, "concept_id", "micro_id", "id")),
        name=str(_first(row, "name", default="")),
        mastery=mastery,
        error_count=errors,
        improvement_potential=improvement_potential(mastery, errors),
        domain_id=_first(row, "domain_id"),
        weakness_level=weakness_level(mastery),
    )


def _overview_scores(
    payload: Mapping[str, Any],
    domain_rows: Sequence[Mapping[str, Any]],
    trend_rows: Sequence[Mapping[str, Any]],
    weak_rows: Sequence[Mapping[str, Any]],
) -> List[Any]:
    scores: List[Any] = [payload.get("overall_mastery")]
    scores.extend(row.get("mastery") for row in domain_rows)
    scores.extend(row.get("mastery") for row in weak_rows)
    for row in trend_rows:
        scores.append(row.get("accuracy"))
        scores.append(row.get("mastery"))
    return scores


def parse_overview(payload: Mapping[str, Any], percent: Optional[bool] = None) -> Overview:
    """
    Build an Overview from the fetch layer's ``overview`` payload.

    Accepts ``trend`` or ``recent_trend`` and ``weak_points`` or ``top_weak_points``.
    Every mastery and accuracy field shares one scale: ``percent`` when given,
    otherwise 0-100 if any of them exceeds 1.
    """

    domain_rows = payload.get("domains") or []
    trend_rows = _first(payload, "trend", "recent_trend", default=[])
    weak_rows = _first(payload, "weak_points", "weakPoints", "top_weak_points", default=[])
    if percent is None:
        percent = is_percent_scale(_overview_scores(payload, domain_rows, trend_rows, weak_rows))

    domains = [parse_domain(row, percent) for row in domain_rows]
    trend = [point for point in (parse_trend_point(row, percent) for row in trend_rows) if point is not None]
    weak_points = [parse_weak_point(row, percent) for row in weak_rows]

    previous_weak = _first(payload, "previous_weak_points_count")
    return Overview(
        domains=domains,
        weak_points=weak_points,
        trend=trend,
        recent_activity=_count(_first(payload, "recent_activity", "recentActivity", default=0)),
        overall_mastery=normalize_mastery(_first(payload, "overall_mastery", default=0.0), percent),
        total_attempts=_count(_first(payload, "total_attempts", default=0)),
        weak_points_count=_count(_first(payload, "weak_points_count", default=len(weak_points))),
        previous_weak_points_count=_count(previous_weak) if previous_weak is not None else None,
    )


def parse_concepts_by_domain(
    payload: Mapping[str, Sequence[Mapping[str, Any]]], percent: Optional[bool] = None
) -> Dict[str, List[MicroConcept]]:
    if percent is None:
        percent = is_percent_scale(row.get("mastery") for rows in payload.values() for row in rows or [])
    return {
        str(domain_id): [parse_micro_concept(row, str(domain_id), percent) for row in rows or []]
        for domain_id, rows in payload.items()
    }


def load_overview(path: Path) -> Overview:
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    # Fetch-layer envelopes look like {"success": true, "data": {...}}.
    if "data" in payload and isinstance(payload["data"], Mapping):
        payload = payload["data"]
    return parse_overview(payload)


def load_concepts_by_domain(path: Optional[Path]) -> Dict[str, List[MicroConcept]]:
    if path is None:
        return {}
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    return parse_concepts_by_domain(payload)
