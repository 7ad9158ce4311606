# ABOUTME: Assembles the dashboard report bundle: graph, trend card, chart series, weak points, radar.
# ABOUTME: Writes the bundle as JSON for the rendering layer or offline review.

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence

from src.common.config import DashboardConfig
from src.common.schemas import MicroConcept, Overview
from src.knowledge_graph.builder import lookup_from_mapping, valid_concepts_by_domain
from src.knowledge_graph.export import export_graph_elements
from src.knowledge_graph.interaction import GraphInteractionState

from .trend import (
    compute_trend,
    format_signed_pct,
    trend_chart_series,
    weak_point_count_trend,
)
from .weak_points import flatten_concepts, weak_point_report


def radar_data(overview: Overview) -> Dict[str, List]:
    return {
        "labels": [domain.name for domain in overview.domains],
        "data": [round(domain.mastery * 100, 1) for domain in overview.domains],
    }


def build_dashboard_report(
    overview: Overview,
    concepts_by_domain: Dict[str, Sequence[MicroConcept]],
    config: Optional[DashboardConfig] = None,
    expand: Iterable[str] = (),
    window_days: Optional[int] = None,
    weak_point_limit: Optional[int] = 10,
) -> Dict[str, Any]:
    """
    Build the full dashboard payload from an overview and its micro-concepts.

    Args:
        overview: Parsed overview payload
        concepts_by_domain: Micro-concepts keyed by parent domain id
        config: Layout/graph/trend settings; defaults when omitted
        expand: Domain ids to expand before exporting the graph
        window_days: Trend window; falls back to ``config.trend.window_days``
        weak_point_limit: Maximum ranked weak points; ``None`` keeps all

    Returns:
        Dict ready for ``json.dumps``
    """
    config = config or DashboardConfig()
    window = window_days or config.trend.window_days

    state = GraphInteractionState(overview.domains, lookup_from_mapping(dict(concepts_by_domain)), config)
    for domain_id in expand:
        if not state.is_expanded(domain_id):
            state.toggle(domain_id)

    trend = compute_trend(overview.trend, window_days=window)
    weak_delta = weak_point_count_trend(overview.weak_points_count, overview.previous_weak_points_count)
    chart = trend_chart_series(overview.trend)
    drawable = valid_concepts_by_domain(concepts_by_domain, (domain.id for domain in overview.domains))
    weak_df = weak_point_report(flatten_concepts(drawable), limit=weak_point_limit)

    return {
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "overview": {
            "overall_mastery": overview.overall_mastery,
            "total_domains": len(overview.domains),
            "total_attempts": overview.total_attempts,
            "recent_activity": overview.recent_activity,
            "weak_points_count": overview.weak_points_count,
            "weak_points_delta": weak_delta,
        },
        "graph": export_graph_elements(state.elements),
        "trend": {
            "window_days": window,
            "mastery_delta_pct": trend.mastery_delta_pct,
            "mastery_delta_label": trend.mastery_delta_label,
            "activity_delta": trend.activity_delta,
            "activity_delta_label": trend.activity_delta_label,
            "is_sufficient": trend.is_sufficient,
            "weak_points_delta_label": format_signed_pct(None) if weak_delta is None else f"{weak_delta:+d}",
        },
        "chart": chart.to_dict(orient="records"),
        "weak_points": weak_df.to_dict(orient="records"),
        "radar": radar_data(overview),
    }


def write_dashboard_report(report: Dict[str, Any], output_path: Path) -> Path:
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(report, indent=2, default=str), encoding="utf-8")
    return output_path
