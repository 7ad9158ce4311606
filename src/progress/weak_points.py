# ABOUTME: Ranks micro-concepts by improvement potential to surface a student's weak points.
# ABOUTME: Provides a DataFrame report for tables and exports.

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

import pandas as pd

from src.common.mastery_bands import improvement_potential, weakness_level
from src.common.schemas import MicroConcept, WeakPoint

REPORT_COLUMNS = [
    "rank",
    "concept_id",
    "name",
    "domain_id",
    "mastery",
    "error_count",
    "improvement_potential",
    "weakness_level",
]


def rank_weak_points(concepts: Sequence[MicroConcept]) -> List[WeakPoint]:
    """
    Sort concepts by ``(1 - mastery) * wrong_count``, highest first.

    Ties go to the concept with more wrong answers, then to the name in ascending order.
    """

    weak_points = [
        WeakPoint(
            concept_id=concept.id,
            name=concept.name,
            mastery=concept.mastery,
            error_count=concept.wrong_count,
            improvement_potential=improvement_potential(concept.mastery, concept.wrong_count),
            domain_id=concept.parent_domain_id,
            weakness_level=weakness_level(concept.mastery),
        )
        for concept in concepts
    ]
    # Potentials compared at 9 decimals.
    weak_points.sort(key=lambda wp: (-round(wp.improvement_potential, 9), -wp.error_count, wp.name))
    return weak_points


def top_weak_points(concepts: Sequence[MicroConcept], limit: Optional[int] = 5) -> List[WeakPoint]:
    ranked = rank_weak_points(concepts)
    return ranked if limit is None else ranked[:limit]


def flatten_concepts(concepts_by_domain: Dict[str, Sequence[MicroConcept]]) -> List[MicroConcept]:
    return [concept for domain_id in concepts_by_domain for concept in concepts_by_domain[domain_id]]


def weak_point_report(concepts: Sequence[MicroConcept], limit: Optional[int] = None) -> pd.DataFrame:
    rows: List[Dict] = []
    for rank, wp in enumerate(top_weak_points(concepts, limit), start=1):
        rows.append(
            {
                "rank": rank,
                "concept_id": wp.concept_id,
                "name": wp.name,
                "domain_id": wp.domain_id,
                "mastery": wp.mastery,
                "error_count": wp.error_count,
                "improvement_potential": round(wp.improvement_potential, 4),
                "weakness_level": wp.weakness_level,
            }
        )
    return pd.DataFrame(rows, columns=REPORT_COLUMNS)
