# ABOUTME: Knowledge graph construction, radial layout, and expand/collapse state.
# ABOUTME: Re-exports the builder, layout, and interaction entry points.

from .builder import build_graph, check_referential_integrity, lookup_from_mapping, valid_concepts_by_domain
from .elements import EdgeKind, GraphEdge, GraphElements, GraphNode, NodeKind, Position
from .interaction import GraphInteractionState, GraphReplacement, UnknownDomainError
from .layout import LayoutContext, apply_layout, position

__all__ = [
    "EdgeKind",
    "GraphEdge",
    "GraphElements",
    "GraphInteractionState",
    "GraphNode",
    "GraphReplacement",
    "LayoutContext",
    "NodeKind",
    "Position",
    "UnknownDomainError",
    "apply_layout",
    "build_graph",
    "check_referential_integrity",
    "lookup_from_mapping",
    "position",
    "valid_concepts_by_domain",
]
