# ABOUTME: Tracks which domains are expanded and regenerates the laid-out graph on every toggle.
# ABOUTME: Answers hover queries with read-only tooltip payloads.

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Sequence, Tuple

from src.common.config import DashboardConfig
from src.common.schemas import Domain, MicroConcept

from .builder import ConceptLookup, build_graph, unique_domains
from .elements import EdgeKind, GraphElements
from .layout import apply_layout

logger = logging.getLogger(__name__)

EDGE_KIND_LABELS = {
    EdgeKind.CROSS_DOMAIN: "Cross-domain",
    EdgeKind.PARENT_CHILD: "Parent-child",
}


class UnknownDomainError(KeyError):
    pass


@dataclass(frozen=True)
class GraphReplacement:
    """Instruction for the renderer: drop every old element, then draw ``elements``."""

    removed_node_ids: Tuple[str, ...]
    removed_edge_ids: Tuple[str, ...]
    elements: GraphElements


@dataclass(frozen=True)
class NodeTooltip:
    title: str
    mastery_pct: float
    question_count: int
    wrong_count: int


@dataclass(frozen=True)
class EdgeTooltip:
    kind_label: str
    strength_pct: Optional[float]


class GraphInteractionState:
    """
    Owns the per-domain expanded flag and the current element set.

    ``toggle`` is the only mutating entry point. Micro-concepts are fetched
    through ``concept_lookup`` the first time their domain is expanded and
    cached afterwards.
    """

    def __init__(
        self,
        domains: Sequence[Domain],
        concept_lookup: ConceptLookup,
        config: Optional[DashboardConfig] = None,
    ) -> None:
        self._config = config or DashboardConfig()
        # Every domain starts collapsed regardless of the payload.
        self._domains: List[Domain] = [replace(d, is_expanded=False) for d in unique_domains(domains)]
        self._lookup = concept_lookup
        self._concept_cache: Dict[str, List[MicroConcept]] = {}
        self._lock = threading.Lock()
        self._elements = self._rebuild()

    @property
    def elements(self) -> GraphElements:
        return self._elements

    @property
    def domains(self) -> Tuple[Domain, ...]:
        return tuple(self._domains)

    def is_expanded(self, domain_id: str) -> bool:
        return self._find(domain_id)[1].is_expanded

    def expanded_domain_ids(self) -> List[str]:
        return [domain.id for domain in self._domains if domain.is_expanded]

    def toggle(self, domain_id: str) -> GraphReplacement:
        """Flip one domain between collapsed and expanded and rebuild the whole graph."""

        with self._lock:
            index, domain = self._find(domain_id)
            self._domains[index] = replace(domain, is_expanded=not domain.is_expanded)
            previous = self._elements
            self._elements = self._rebuild()
            logger.debug(
                "Toggled domain %r to %s: %d nodes, %d edges",
                domain_id,
                "expanded" if not domain.is_expanded else "collapsed",
                len(self._elements.nodes),
                len(self._elements.edges),
            )
            return GraphReplacement(
                removed_node_ids=tuple(previous.node_ids()),
                removed_edge_ids=tuple(previous.edge_ids()),
                elements=self._elements,
            )

    def node_tooltip(self, node_id: str) -> NodeTooltip:
        node = self._elements.node(node_id)
        return NodeTooltip(
            title=node.label,
            mastery_pct=round(node.mastery * 100, 1),
            question_count=node.question_count,
            wrong_count=node.wrong_count,
        )

    def edge_tooltip(self, edge_id: str) -> EdgeTooltip:
        edge = self._elements.edge(edge_id)
        strength = round(edge.strength * 100, 1) if edge.strength is not None else None
        return EdgeTooltip(kind_label=EDGE_KIND_LABELS[edge.kind], strength_pct=strength)

    def _find(self, domain_id: str) -> Tuple[int, Domain]:
        for index, domain in enumerate(self._domains):
            if domain.id == domain_id:
                return index, domain
        raise UnknownDomainError(domain_id)

    def _cached_concepts(self, domain_id: str) -> Sequence[MicroConcept]:
        if domain_id not in self._concept_cache:
            self._concept_cache[domain_id] = list(self._lookup(domain_id) or ())
        return self._concept_cache[domain_id]

    def _rebuild(self) -> GraphElements:
        elements = build_graph(self._domains, self._cached_concepts, self._config.graph)
        return apply_layout(elements, self._config.layout)
