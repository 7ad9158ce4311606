# ABOUTME: Computes deterministic 2-D coordinates for knowledge graph nodes.
# ABOUTME: Domains sit on a ring around the center domain; concepts fan out in a row below their parent.

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Dict, Optional, Tuple

from src.common.config import LayoutConfig

from .elements import GraphElements, NodeKind, Position


@dataclass(frozen=True)
class LayoutContext:
    """Structural facts the layout needs; derived from a built element set."""

    config: LayoutConfig
    center_id: Optional[str]
    ring: Tuple[str, ...]
    children: Dict[str, Tuple[str, ...]]
    parent_of: Dict[str, str]

    @classmethod
    def from_elements(cls, elements: GraphElements, config: Optional[LayoutConfig] = None) -> "LayoutContext":
        children: Dict[str, Tuple[str, ...]] = {}
        parent_of: Dict[str, str] = {}
        for node in elements.nodes_of_kind(NodeKind.MICRO_CONCEPT):
            children[node.parent_id] = children.get(node.parent_id, ()) + (node.id,)
            parent_of[node.id] = node.parent_id
        ring = tuple(
            node.id for node in elements.nodes_of_kind(NodeKind.DOMAIN) if node.id != elements.center_id
        )
        return cls(
            config=config or LayoutConfig(),
            center_id=elements.center_id,
            ring=ring,
            children=children,
            parent_of=parent_of,
        )


def ring_angle(index: int, count: int) -> float:
    """Angle of the ``index``-th of ``count`` evenly spaced ring slots."""

    if count <= 0:
        return 0.0
    return 2.0 * math.pi * index / count


def position(node_id: str, context: LayoutContext) -> Position:
    """
    Return the coordinates of ``node_id``; identical inputs always give identical output.

    Raises KeyError when the node is neither the center, a ring member, nor a known child.
    """

    cfg = context.config
    if node_id == context.center_id:
        return Position(cfg.center_x, cfg.center_y)

    if node_id in context.parent_of:
        parent_id = context.parent_of[node_id]
        parent = position(parent_id, context)
        siblings = context.children[parent_id]
        i = siblings.index(node_id)
        offset = (i - (len(siblings) - 1) / 2.0) * cfg.child_spacing
        return Position(parent.x + offset, parent.y + cfg.child_gap)

    try:
        k = context.ring.index(node_id)
    except ValueError:
        raise KeyError(node_id) from None
    angle = ring_angle(k, len(context.ring))
    return Position(
        cfg.center_x + cfg.radius * math.cos(angle),
        cfg.center_y + cfg.radius * math.sin(angle),
    )


def apply_layout(elements: GraphElements, config: Optional[LayoutConfig] = None) -> GraphElements:
    """Return a new element set whose nodes carry positions; the input is left untouched."""

    context = LayoutContext.from_elements(elements, config)
    nodes = tuple(replace(node, position=position(node.id, context)) for node in elements.nodes)
    return GraphElements(nodes=nodes, edges=elements.edges, center_id=elements.center_id)
