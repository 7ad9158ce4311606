# ABOUTME: Tests weak-point ranking by improvement potential.
# ABOUTME: Ensures tie-breaking by wrong count then name, and the report frame layout.

import pytest

from src.common.schemas import MicroConcept
from src.progress.weak_points import rank_weak_points, top_weak_points, weak_point_report


def _concept(cid, mastery, wrong, name=None, questions=20, domain="D"):
    return MicroConcept(
        id=cid,
        parent_domain_id=domain,
        name=name or cid,
        mastery=mastery,
        question_count=questions,
        wrong_count=wrong,
    )


def test_higher_potential_ranks_first():
    ranked = rank_weak_points([_concept("b", 0.5, 4), _concept("a", 0.3, 6)])

    assert [wp.concept_id for wp in ranked] == ["a", "b"]
    assert ranked[0].improvement_potential == pytest.approx(4.2)
    assert ranked[1].improvement_potential == pytest.approx(2.0)
    assert ranked[0].weakness_level == "medium"


def test_ties_break_on_wrong_count_then_name():
    concepts = [
        _concept("x", 0.5, 4, name="Zeta"),       # 2.0
        _concept("y", 0.75, 8, name="Alpha"),     # 2.0, more errors
        _concept("z", 0.5, 4, name="Beta"),       # 2.0, same errors as x
    ]
    ranked = rank_weak_points(concepts)

    assert [wp.name for wp in ranked] == ["Alpha", "Beta", "Zeta"]


def test_empty_input_returns_empty_list():
    assert rank_weak_points([]) == []
    assert weak_point_report([]).empty


def test_top_weak_points_limits_results():
    concepts = [_concept(f"c{i}", 0.1 * i, 5) for i in range(8)]
    assert len(top_weak_points(concepts, limit=3)) == 3
    assert len(top_weak_points(concepts, limit=None)) == 8


def test_weak_point_report_columns_and_ranks():
    report = weak_point_report([_concept("b", 0.5, 4, domain="B"), _concept("a", 0.3, 6, domain="A")])

    assert list(report.columns) == [
        "rank",
        "concept_id",
        "name",
        "domain_id",
        "mastery",
        "error_count",
        "improvement_potential",
        "weakness_level",
    ]
    assert report["rank"].tolist() == [1, 2]
    assert report["domain_id"].tolist() == ["A", "B"]
