# ABOUTME: Maps mastery scores onto the weakness levels, labels, and colors used by the dashboard.
# ABOUTME: Shared by graph node styling and weak-point ranking so both agree on thresholds.

from __future__ import annotations


class MasteryThresholds:
    WEAKNESS_HIGH = 0.30
    WEAKNESS_MEDIUM = 0.45
    WEAKNESS_LOW = 0.60
    EXCELLENT = 0.80
    GOOD = 0.60
    FAIR = 0.40


class MasteryColors:
    EXCELLENT = "#28a745"
    GOOD = "#ffc107"
    NEEDS_WORK = "#dc3545"


def weakness_level(mastery: float) -> str:
    if mastery < MasteryThresholds.WEAKNESS_HIGH:
        return "high"
    if mastery < MasteryThresholds.WEAKNESS_MEDIUM:
        return "medium"
    if mastery < MasteryThresholds.WEAKNESS_LOW:
        return "low"
    return "none"


def mastery_label(mastery: float) -> str:
    if mastery >= MasteryThresholds.EXCELLENT:
        return "excellent"
    if mastery >= MasteryThresholds.GOOD:
        return "good"
    if mastery >= MasteryThresholds.FAIR:
        return "fair"
    return "needs_work"


def mastery_color(mastery: float) -> str:
    if mastery >= MasteryThresholds.EXCELLENT:
        return MasteryColors.EXCELLENT
    if mastery >= MasteryThresholds.GOOD:
        return MasteryColors.GOOD
    return MasteryColors.NEEDS_WORK


def size_hint(count: int, base: float, per_item: float = 1.0, max_bonus: float = 20.0) -> float:
    """Node diameter hint: base size plus a capped bonus for the item count."""

    return base + min(max(count, 0) * per_item, max_bonus)


def improvement_potential(mastery: float, wrong_count: int) -> float:
    """Priority score: low mastery and many wrong answers both push it up."""

    return (1.0 - mastery) * wrong_count
