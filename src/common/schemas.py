# ABOUTME: Defines canonical records shared by the knowledge graph and progress engines.
# ABOUTME: Centralizes domain, micro-concept, trend, and weak-point schema definitions.

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional


def _check_unit_interval(name: str, value: float) -> None:
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"{name} must be within [0, 1], got {value}")


def _check_non_negative(name: str, value: int) -> None:
    if value < 0:
        raise ValueError(f"{name} must be >= 0, got {value}")


@dataclass(frozen=True)
class Domain:
    """Top-level knowledge area with an aggregate mastery score."""

    id: str
    name: str
    mastery: float
    concept_count: int = 0
    wrong_count: int = 0
    is_expanded: bool = False

    def __post_init__(self) -> None:
        _check_unit_interval("mastery", self.mastery)
        _check_non_negative("concept_count", self.concept_count)
        _check_non_negative("wrong_count", self.wrong_count)


@dataclass(frozen=True)
class MicroConcept:
    """Fine-grained topic nested under a Domain.

    ``wrong_count <= question_count`` is not enforced here; the graph builder
    rejects records that break it so one bad row cannot sink a whole payload.
    """

    id: str
    parent_domain_id: str
    name: str
    mastery: float
    question_count: int = 0
    wrong_count: int = 0

    def __post_init__(self) -> None:
        _check_unit_interval("mastery", self.mastery)
        _check_non_negative("question_count", self.question_count)
        _check_non_negative("wrong_count", self.wrong_count)


@dataclass(frozen=True)
class TrendPoint:
    """Daily accuracy/attempt sample; series may skip days."""

    date: date
    mastery: float
    attempts: int
    accuracy: float

    def __post_init__(self) -> None:
        _check_unit_interval("mastery", self.mastery)
        _check_unit_interval("accuracy", self.accuracy)
        _check_non_negative("attempts", self.attempts)


@dataclass(frozen=True)
class WeakPoint:
    """Derived ranking row; recomputed from concepts, never edited."""

    concept_id: str
    name: str
    mastery: float
    error_count: int
    improvement_potential: float
    domain_id: Optional[str] = None
    weakness_level: str = "none"


@dataclass(frozen=True)
class Overview:
    """Deserialized analytics overview as handed over by the fetch layer."""

    domains: List[Domain] = field(default_factory=list)
    weak_points: List[WeakPoint] = field(default_factory=list)
    trend: List[TrendPoint] = field(default_factory=list)
    recent_activity: int = 0
    overall_mastery: float = 0.0
    total_attempts: int = 0
    weak_points_count: int = 0
    previous_weak_points_count: Optional[int] = None
