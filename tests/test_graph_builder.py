# ABOUTME: Tests knowledge graph construction from domains and micro-concepts.
# ABOUTME: Covers star topology, expansion, ordering, and malformed-record exclusion.

import logging
from dataclasses import replace

from src.common.config import GraphConfig, LayoutConfig
from src.common.schemas import Domain, MicroConcept
from src.knowledge_graph.builder import build_graph, check_referential_integrity, lookup_from_mapping
from src.knowledge_graph.elements import EdgeKind, NodeKind
from src.knowledge_graph.layout import apply_layout


def _domains(expanded=()):
    return [
        Domain(id="A", name="Algorithms", mastery=0.9, concept_count=3, is_expanded="A" in expanded),
        Domain(id="B", name="Databases", mastery=0.4, concept_count=2, is_expanded="B" in expanded),
        Domain(id="C", name="Networks", mastery=0.7, concept_count=1, is_expanded="C" in expanded),
    ]


def _concepts():
    return {
        "A": [
            MicroConcept(id="sort", parent_domain_id="A", name="Sorting", mastery=0.8, question_count=10, wrong_count=2),
            MicroConcept(id="graph", parent_domain_id="A", name="Graphs", mastery=0.3, question_count=8, wrong_count=6),
        ],
        "B": [
            MicroConcept(id="sql", parent_domain_id="B", name="SQL", mastery=0.5, question_count=4, wrong_count=4),
        ],
    }


def test_two_collapsed_domains_yield_single_cross_edge():
    domains = [
        Domain(id="A", name="Algorithms", mastery=0.9),
        Domain(id="B", name="Databases", mastery=0.4),
    ]
    elements = build_graph(domains, lookup_from_mapping(_concepts()), GraphConfig(center_domain_id="A"))

    assert [n.id for n in elements.nodes] == ["A", "B"]
    assert len(elements.edges) == 1
    edge = elements.edges[0]
    assert (edge.source_id, edge.target_id, edge.kind) == ("A", "B", EdgeKind.CROSS_DOMAIN)
    assert elements.edges_of_kind(EdgeKind.PARENT_CHILD) == []


def test_center_defaults_to_first_domain_and_star_has_n_minus_one_edges():
    elements = build_graph(_domains(), lookup_from_mapping({}))

    assert elements.center_id == "A"
    cross = elements.edges_of_kind(EdgeKind.CROSS_DOMAIN)
    assert len(cross) == 2
    assert all(edge.source_id == "A" for edge in cross)
    assert {edge.target_id for edge in cross} == {"B", "C"}


def test_expanded_domain_adds_micro_nodes_and_parent_child_edges():
    elements = build_graph(_domains(expanded=("A",)), lookup_from_mapping(_concepts()))

    micro = elements.nodes_of_kind(NodeKind.MICRO_CONCEPT)
    assert [n.id for n in micro] == ["A::sort", "A::graph"]
    assert all(n.parent_id == "A" for n in micro)
    child_edges = elements.edges_of_kind(EdgeKind.PARENT_CHILD)
    assert [(e.source_id, e.target_id) for e in child_edges] == [("A", "A::sort"), ("A", "A::graph")]
    # Collapsed B contributes no micro nodes even though concepts exist for it.
    assert not any(n.parent_id == "B" for n in micro)


def test_build_is_deterministic_and_referentially_sound():
    domains = _domains(expanded=("A", "B"))
    first = build_graph(domains, lookup_from_mapping(_concepts()))
    second = build_graph(domains, lookup_from_mapping(_concepts()))

    assert first == second
    assert first.node_ids() == ["A", "B", "C", "A::sort", "A::graph", "B::sql"]
    assert check_referential_integrity(first) == []


def test_node_styling_follows_mastery_bands():
    elements = build_graph(_domains(expanded=("A",)), lookup_from_mapping(_concepts()))

    graph_node = elements.node("A::graph")
    assert graph_node.weakness_level == "medium"
    assert graph_node.color == "#dc3545"
    assert graph_node.size == 38.0  # 30 base + 8 questions
    assert elements.node("A").color == "#28a745"
    assert elements.node("A").size == 83.0


def test_malformed_concepts_are_logged_and_excluded(caplog):
    concepts = {
        "A": [
            MicroConcept(id="ok", parent_domain_id="A", name="Fine", mastery=0.5, question_count=3, wrong_count=1),
            MicroConcept(id="bad", parent_domain_id="A", name="Too many wrong", mastery=0.5, question_count=1, wrong_count=3),
            MicroConcept(id="ghost", parent_domain_id="Z", name="Orphan", mastery=0.5),
            MicroConcept(id="moved", parent_domain_id="B", name="Wrong parent", mastery=0.5),
            MicroConcept(id="ok", parent_domain_id="A", name="Duplicate", mastery=0.2),
        ]
    }
    with caplog.at_level(logging.WARNING):
        elements = build_graph(_domains(expanded=("A",)), lookup_from_mapping(concepts))

    micro_ids = [n.id for n in elements.nodes_of_kind(NodeKind.MICRO_CONCEPT)]
    assert micro_ids == ["A::ok"]
    assert len(caplog.records) == 4
    assert check_referential_integrity(elements) == []


def test_micro_id_clashing_with_a_domain_id_is_excluded(caplog):
    domains = [
        Domain(id="A", name="Algorithms", mastery=0.9, is_expanded=True),
        Domain(id="A::x", name="Odd id", mastery=0.4),
    ]
    concepts = {"A": [MicroConcept(id="x", parent_domain_id="A", name="X", mastery=0.5)]}
    with caplog.at_level(logging.WARNING):
        elements = build_graph(domains, lookup_from_mapping(concepts))

    assert elements.node_ids() == ["A", "A::x"]
    assert elements.node("A::x").kind == NodeKind.DOMAIN
    assert elements.edges_of_kind(EdgeKind.PARENT_CHILD) == []
    assert "already used" in caplog.text

    laid_out = apply_layout(elements, LayoutConfig())
    ring_node = laid_out.node("A::x")
    assert (ring_node.position.x, ring_node.position.y) == (650.0, 300.0)

def test_empty_domains_and_empty_lookup_are_valid():
    assert build_graph([], lookup_from_mapping({})).nodes == ()

    elements = build_graph(_domains(expanded=("C",)), lambda domain_id: [])
    assert len(elements.nodes) == 3
    assert elements.edges_of_kind(EdgeKind.PARENT_CHILD) == []


def test_unknown_center_and_duplicate_domains_degrade_gracefully(caplog):
    domains = _domains() + [replace(_domains()[1], name="Duplicate B")]
    with caplog.at_level(logging.WARNING):
        elements = build_graph(domains, lookup_from_mapping({}), GraphConfig(center_domain_id="missing"))

    assert elements.center_id == "A"
    assert elements.node_ids() == ["A", "B", "C"]
    assert elements.node("B").label == "Databases"
    assert len(caplog.records) == 2


def test_edge_strengths():
    elements = build_graph(_domains(expanded=("B",)), lookup_from_mapping(_concepts()), GraphConfig(center_domain_id="B"))

    assert elements.edge("cross:B->A").strength == (0.4 + 0.9) / 2
    assert elements.edge("child:B->B::sql").strength == 0.5
