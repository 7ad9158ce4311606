# ABOUTME: Formats laid-out graph elements as JSON-ready nodes and edges.
# ABOUTME: Output feeds the rendering layer and the dashboard report bundle.

from __future__ import annotations

from typing import Any, Dict, List

from src.common.mastery_bands import mastery_label

from .elements import EdgeKind, GraphElements, NodeKind


def export_graph_elements(elements: GraphElements) -> Dict[str, Any]:
    """
    Format graph elements for visualization.

    Returns:
        Dict with nodes, edges, and summary metadata
    """
    nodes: List[Dict[str, Any]] = []
    for node in elements.nodes:
        nodes.append({
            'id': node.id,
            'kind': node.kind.value,
            'label': node.label,
            'mastery': node.mastery,
            'size': node.size,
            'question_count': node.question_count,
            'wrong_count': node.wrong_count,
            'parent_id': node.parent_id,
            'color': node.color,
            'weakness_level': node.weakness_level,
            'mastery_label': mastery_label(node.mastery),
            'x': node.position.x if node.position else None,
            'y': node.position.y if node.position else None,
        })

    edges = [
        {
            'id': edge.id,
            'source': edge.source_id,
            'target': edge.target_id,
            'kind': edge.kind.value,
            'strength': edge.strength,
        }
        for edge in elements.edges
    ]

    return {
        'nodes': nodes,
        'edges': edges,
        'metadata': {
            'center_id': elements.center_id,
            'num_domains': len(elements.nodes_of_kind(NodeKind.DOMAIN)),
            'num_micro_concepts': len(elements.nodes_of_kind(NodeKind.MICRO_CONCEPT)),
            'num_cross_domain_edges': len(elements.edges_of_kind(EdgeKind.CROSS_DOMAIN)),
            'num_parent_child_edges': len(elements.edges_of_kind(EdgeKind.PARENT_CHILD)),
        },
    }
