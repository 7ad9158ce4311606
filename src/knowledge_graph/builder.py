# ABOUTME: Builds the two-level knowledge graph (domains plus expanded micro-concepts).
# ABOUTME: Emits a star of cross-domain edges and parent-child edges in stable order.

from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Set

from src.common.config import GraphConfig
from src.common.mastery_bands import mastery_color, size_hint, weakness_level
from src.common.schemas import Domain, MicroConcept

from .elements import (
    EdgeKind,
    GraphEdge,
    GraphElements,
    GraphNode,
    NodeKind,
    child_edge_id,
    cross_edge_id,
    micro_node_id,
)

logger = logging.getLogger(__name__)

ConceptLookup = Callable[[str], Sequence[MicroConcept]]


def unique_domains(domains: Sequence[Domain]) -> List[Domain]:
    """Drop repeated domain ids, keeping the first occurrence."""

    seen: Set[str] = set()
    kept: List[Domain] = []
    for domain in domains:
        if domain.id in seen:
            logger.warning("Skipping duplicate domain id %r (%s)", domain.id, domain.name)
            continue
        seen.add(domain.id)
        kept.append(domain)
    return kept


def resolve_center_id(domains: Sequence[Domain], center_domain_id: Optional[str] = None) -> Optional[str]:
    if not domains:
        return None
    if center_domain_id is None:
        return domains[0].id
    if any(domain.id == center_domain_id for domain in domains):
        return center_domain_id
    logger.warning(
        "Center domain %r not found; falling back to first domain %r", center_domain_id, domains[0].id
    )
    return domains[0].id


def validate_concepts(
    domain_id: str,
    concepts: Sequence[MicroConcept],
    known_domain_ids: Set[str],
) -> List[MicroConcept]:
    """
    Return the concepts that can be drawn under ``domain_id``.

    Rejected records are logged and excluded:
    - parent id referencing no known domain
    - parent id pointing at a different domain than the one expanded
    - wrong_count larger than question_count
    - concept id repeated under the same parent
    """

    valid: List[MicroConcept] = []
    seen: Set[str] = set()
    for concept in concepts:
        if concept.parent_domain_id not in known_domain_ids:
            logger.warning(
                "Excluding micro-concept %r: parent domain %r does not exist",
                concept.id,
                concept.parent_domain_id,
            )
            continue
        if concept.parent_domain_id != domain_id:
            logger.warning(
                "Excluding micro-concept %r: listed under %r but parent is %r",
                concept.id,
                domain_id,
                concept.parent_domain_id,
            )
            continue
        if concept.wrong_count > concept.question_count:
            logger.warning(
                "Excluding micro-concept %r: wrong_count %d exceeds question_count %d",
                concept.id,
                concept.wrong_count,
                concept.question_count,
            )
            continue
        if concept.id in seen:
            logger.warning("Excluding micro-concept %r: duplicate id under domain %r", concept.id, domain_id)
            continue
        seen.add(concept.id)
        valid.append(concept)
    return valid


def valid_concepts_by_domain(
    concepts_by_domain: Mapping[str, Sequence[MicroConcept]],
    known_domain_ids: Optional[Iterable[str]] = None,
) -> Dict[str, List[MicroConcept]]:
    """
    Apply the builder's concept checks to a whole mapping.

    ``known_domain_ids`` defaults to the mapping's own keys.
    """

    known = set(concepts_by_domain) if known_domain_ids is None else set(known_domain_ids)
    valid: Dict[str, List[MicroConcept]] = {}
    for domain_id, concepts in concepts_by_domain.items():
        if domain_id not in known:
            logger.warning("Excluding %d micro-concept(s) filed under unknown domain %r", len(concepts or ()), domain_id)
            continue
        valid[domain_id] = validate_concepts(domain_id, list(concepts or ()), known)
    return valid


def _domain_node(domain: Domain, config: GraphConfig) -> GraphNode:
    return GraphNode(
        id=domain.id,
        kind=NodeKind.DOMAIN,
        label=domain.name,
        mastery=domain.mastery,
        size=size_hint(domain.concept_count, config.domain_base_size, config.size_per_item, config.max_size_bonus),
        question_count=domain.concept_count,
        wrong_count=domain.wrong_count,
        color=mastery_color(domain.mastery),
        weakness_level=weakness_level(domain.mastery),
    )


def _micro_node(concept: MicroConcept, config: GraphConfig) -> GraphNode:
    return GraphNode(
        id=micro_node_id(concept.parent_domain_id, concept.id),
        kind=NodeKind.MICRO_CONCEPT,
        label=concept.name,
        mastery=concept.mastery,
        size=size_hint(concept.question_count, config.micro_base_size, config.size_per_item, config.max_size_bonus),
        question_count=concept.question_count,
        wrong_count=concept.wrong_count,
        parent_id=concept.parent_domain_id,
        color=mastery_color(concept.mastery),
        weakness_level=weakness_level(concept.mastery),
    )


def build_graph(
    domains: Sequence[Domain],
    concept_lookup: ConceptLookup,
    config: Optional[GraphConfig] = None,
) -> GraphElements:
    """
    Convert domains (and the micro-concepts of expanded domains) into graph elements.

    Node order: every domain in input order, followed by the concepts of each
    expanded domain (domain order, then lookup order). Edge order: cross-domain
    star edges first, then parent-child edges. The function has no side effects.
    """

    config = config or GraphConfig()
    domains = unique_domains(domains)
    if not domains:
        return GraphElements()

    center_id = resolve_center_id(domains, config.center_domain_id)
    known_ids = {domain.id for domain in domains}
    domain_by_id: Dict[str, Domain] = {domain.id: domain for domain in domains}

    nodes: List[GraphNode] = [_domain_node(domain, config) for domain in domains]
    taken_ids: Set[str] = set(known_ids)
    edges: List[GraphEdge] = []

    center = domain_by_id[center_id]
    for domain in domains:
        if domain.id == center_id:
            continue
        edges.append(
            GraphEdge(
                id=cross_edge_id(center_id, domain.id),
                source_id=center_id,
                target_id=domain.id,
                kind=EdgeKind.CROSS_DOMAIN,
                strength=(center.mastery + domain.mastery) / 2.0,
            )
        )

    for domain in domains:
        if not domain.is_expanded:
            continue
        concepts = validate_concepts(domain.id, list(concept_lookup(domain.id) or ()), known_ids)
        for concept in concepts:
            node = _micro_node(concept, config)
            if node.id in taken_ids:
                logger.warning(
                    "Excluding micro-concept %r: node id %r is already used by another node", concept.id, node.id
                )
                continue
            taken_ids.add(node.id)
            nodes.append(node)
            edges.append(
                GraphEdge(
                    id=child_edge_id(domain.id, node.id),
                    source_id=domain.id,
                    target_id=node.id,
                    kind=EdgeKind.PARENT_CHILD,
                    strength=concept.mastery,
                )
            )

    return GraphElements(nodes=tuple(nodes), edges=tuple(edges), center_id=center_id)


def check_referential_integrity(elements: GraphElements) -> List[str]:
    """Return ids of edges whose endpoints are missing from the node set."""

    node_ids = set(elements.node_ids())
    return [
        edge.id
        for edge in elements.edges
        if edge.source_id not in node_ids or edge.target_id not in node_ids
    ]


def lookup_from_mapping(concepts_by_domain: Dict[str, Sequence[MicroConcept]]) -> ConceptLookup:
    """Wrap a pre-joined mapping as a lookup that returns an empty list for unknown ids."""

    def _lookup(domain_id: str) -> Sequence[MicroConcept]:
        return concepts_by_domain.get(domain_id, [])

    return _lookup
