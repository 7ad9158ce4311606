# ABOUTME: Loads dashboard configuration from YAML into frozen dataclasses.
# ABOUTME: Holds layout constants, graph sizing, and trend window defaults.

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml


@dataclass(frozen=True)
class LayoutConfig:
    """Fixed coordinates for the radial layout."""

    center_x: float = 400.0
    center_y: float = 300.0
    radius: float = 250.0
    child_gap: float = 120.0
    child_spacing: float = 90.0


@dataclass(frozen=True)
class GraphConfig:
    """Center selection and node sizing for the graph builder."""

    center_domain_id: Optional[str] = None
    domain_base_size: float = 80.0
    micro_base_size: float = 30.0
    size_per_item: float = 1.0
    max_size_bonus: float = 20.0


@dataclass(frozen=True)
class TrendConfig:
    window_days: int = 7

    def __post_init__(self) -> None:
        if self.window_days < 1:
            raise ValueError(f"window_days must be >= 1, got {self.window_days}")


@dataclass(frozen=True)
class DashboardConfig:
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    graph: GraphConfig = field(default_factory=GraphConfig)
    trend: TrendConfig = field(default_factory=TrendConfig)


def _section(cls, raw: Optional[Mapping[str, Any]], name: str):
    if raw is None:
        return cls()
    if not isinstance(raw, Mapping):
        raise ValueError(f"Config section '{name}' must be a mapping.")
    allowed = {f.name for f in fields(cls)}
    unknown = sorted(set(raw) - allowed)
    if unknown:
        raise ValueError(f"Unknown keys in config section '{name}': {', '.join(unknown)}")
    return cls(**raw)


def dashboard_config_from_dict(cfg: Optional[Mapping[str, Any]]) -> DashboardConfig:
    cfg = cfg or {}
    unknown = sorted(set(cfg) - {"layout", "graph", "trend"})
    if unknown:
        raise ValueError(f"Unknown config sections: {', '.join(unknown)}")
    return DashboardConfig(
        layout=_section(LayoutConfig, cfg.get("layout"), "layout"),
        graph=_section(GraphConfig, cfg.get("graph"), "graph"),
        trend=_section(TrendConfig, cfg.get("trend"), "trend"),
    )


def load_dashboard_config(config_path: Optional[Path] = None) -> DashboardConfig:
    """
    Load dashboard config from YAML; ``None`` returns the built-in defaults.
    """

    if config_path is None:
        return DashboardConfig()
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Dashboard config not found: {config_path}")
    with open(config_path) as f:
        cfg: Dict[str, Any] = yaml.safe_load(f) or {}
    return dashboard_config_from_dict(cfg)
