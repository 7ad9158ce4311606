# ABOUTME: Makes the shared common package importable across the dashboard engines.
# ABOUTME: Re-exports schema types and config loading for convenience.

from .schemas import Domain, MicroConcept, Overview, TrendPoint, WeakPoint
from .config import DashboardConfig, load_dashboard_config

__all__ = [
    "DashboardConfig",
    "Domain",
    "MicroConcept",
    "Overview",
    "TrendPoint",
    "WeakPoint",
    "load_dashboard_config",
]
