# ABOUTME: Defines the node/edge records handed to the rendering layer.
# ABOUTME: Elements are immutable projections; layout produces replaced copies.

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

MICRO_ID_SEPARATOR = "::"


class NodeKind(str, Enum):
    DOMAIN = "domain"
    MICRO_CONCEPT = "micro_concept"


class EdgeKind(str, Enum):
    CROSS_DOMAIN = "cross_domain"
    PARENT_CHILD = "parent_child"


@dataclass(frozen=True)
class Position:
    x: float
    y: float


@dataclass(frozen=True)
class GraphNode:
    id: str
    kind: NodeKind
    label: str
    mastery: float
    size: float
    question_count: int = 0
    wrong_count: int = 0
    parent_id: Optional[str] = None
    color: str = ""
    weakness_level: str = "none"
    position: Optional[Position] = None


@dataclass(frozen=True)
class GraphEdge:
    id: str
    source_id: str
    target_id: str
    kind: EdgeKind
    strength: Optional[float] = None


@dataclass(frozen=True)
class GraphElements:
    """Complete node/edge set; always replaced wholesale, never patched."""

    nodes: Tuple[GraphNode, ...] = ()
    edges: Tuple[GraphEdge, ...] = ()
    center_id: Optional[str] = None
    _node_index: Dict[str, GraphNode] = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_node_index", {node.id: node for node in self.nodes})

    def node(self, node_id: str) -> GraphNode:
        return self._node_index[node_id]

    def edge(self, edge_id: str) -> GraphEdge:
        for edge in self.edges:
            if edge.id == edge_id:
                return edge
        raise KeyError(edge_id)

    def node_ids(self) -> List[str]:
        return [node.id for node in self.nodes]

    def edge_ids(self) -> List[str]:
        return [edge.id for edge in self.edges]

    def nodes_of_kind(self, kind: NodeKind) -> List[GraphNode]:
        return [node for node in self.nodes if node.kind == kind]

    def edges_of_kind(self, kind: EdgeKind) -> List[GraphEdge]:
        return [edge for edge in self.edges if edge.kind == kind]


def micro_node_id(domain_id: str, concept_id: str) -> str:
    """Namespace a concept id with its parent domain id."""

    return f"{domain_id}{MICRO_ID_SEPARATOR}{concept_id}"


def cross_edge_id(center_id: str, domain_id: str) -> str:
    return f"cross:{center_id}->{domain_id}"


def child_edge_id(domain_id: str, node_id: str) -> str:
    return f"child:{domain_id}->{node_id}"
