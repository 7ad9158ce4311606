# ABOUTME: Tests the radial layout for domain rings and micro-concept rows.
# ABOUTME: Checks center placement, even angular spacing, and centered child rows.

import math

import pytest

from src.common.config import LayoutConfig
from src.common.schemas import Domain, MicroConcept
from src.knowledge_graph.builder import build_graph, lookup_from_mapping
from src.knowledge_graph.layout import LayoutContext, apply_layout, position, ring_angle

CONFIG = LayoutConfig(center_x=100.0, center_y=50.0, radius=10.0, child_gap=5.0, child_spacing=4.0)


def _elements(domain_count=5, expanded=()):
    domains = [
        Domain(id=f"d{i}", name=f"Domain {i}", mastery=0.5, is_expanded=f"d{i}" in expanded)
        for i in range(domain_count)
    ]
    concepts = {
        "d1": [
            MicroConcept(id=f"m{j}", parent_domain_id="d1", name=f"Micro {j}", mastery=0.5)
            for j in range(3)
        ]
    }
    return build_graph(domains, lookup_from_mapping(concepts))


def test_center_domain_sits_at_center():
    context = LayoutContext.from_elements(_elements(), CONFIG)
    pos = position("d0", context)
    assert (pos.x, pos.y) == (100.0, 50.0)


def test_ring_members_are_evenly_spaced():
    elements = _elements(domain_count=5)
    context = LayoutContext.from_elements(elements, CONFIG)

    angles = []
    for node_id in ["d1", "d2", "d3", "d4"]:
        pos = position(node_id, context)
        assert math.hypot(pos.x - 100.0, pos.y - 50.0) == pytest.approx(10.0)
        angles.append(math.atan2(pos.y - 50.0, pos.x - 100.0) % (2 * math.pi))

    assert angles == pytest.approx([0.0, math.pi / 2, math.pi, 3 * math.pi / 2], abs=1e-9)


def test_ring_angle_handles_empty_ring():
    assert ring_angle(0, 0) == 0.0
    assert ring_angle(1, 4) == pytest.approx(math.pi / 2)


def test_micro_concepts_form_centered_row_below_parent():
    elements = _elements(domain_count=5, expanded=("d1",))
    context = LayoutContext.from_elements(elements, CONFIG)
    parent = position("d1", context)

    xs = []
    for node_id in ["d1::m0", "d1::m1", "d1::m2"]:
        pos = position(node_id, context)
        assert pos.y == pytest.approx(parent.y + 5.0)
        xs.append(pos.x - parent.x)

    assert xs == pytest.approx([-4.0, 0.0, 4.0])


def test_position_is_stable_and_apply_layout_replaces_nodes():
    elements = _elements(expanded=("d1",))
    context = LayoutContext.from_elements(elements, CONFIG)
    assert position("d3", context) == position("d3", context)

    laid_out = apply_layout(elements, CONFIG)
    assert all(node.position is None for node in elements.nodes)
    assert all(node.position is not None for node in laid_out.nodes)
    assert laid_out.node("d0").position == position("d0", context)
    assert laid_out.edges == elements.edges


def test_unknown_node_raises_key_error():
    context = LayoutContext.from_elements(_elements(), CONFIG)
    with pytest.raises(KeyError):
        position("nope", context)


def test_single_domain_graph_lays_out_at_center():
    laid_out = apply_layout(_elements(domain_count=1), CONFIG)
    assert laid_out.node("d0").position.x == 100.0
