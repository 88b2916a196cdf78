"""Earnings surprise percentage and Beat/Meet/Miss classification."""

from __future__ import annotations

from enum import Enum

from eventstudy.config import ClassificationConfig

_DEFAULT_THRESHOLDS = ClassificationConfig()


class SurpriseClass(Enum):
    """Earnings surprise groups."""

    BEAT = "Beat"
    MEET = "Meet"
    MISS = "Miss"


def surprise_percentage(eps_estimate: float, actual_eps: float) -> float:
    """Relative deviation of actual EPS from the estimate, in percent.

    (actual - estimate) / |estimate| * 100, or 0.0 when the estimate is 0.
    """
    if eps_estimate != 0:
        return (actual_eps - eps_estimate) / abs(eps_estimate) * 100.0
    return 0.0


def classify(
    eps_estimate: float,
    actual_eps: float,
    thresholds: ClassificationConfig = _DEFAULT_THRESHOLDS,
) -> SurpriseClass:
    """Classify an EPS estimate/actual pair.

    Args:
        eps_estimate: Consensus EPS estimate.
        actual_eps: Reported EPS.
        thresholds: Beat/Miss cut-offs in percent (exclusive).

    Returns:
        BEAT above the beat threshold, MISS below the miss threshold,
        MEET otherwise (including a zero estimate).
    """
    surprise = surprise_percentage(eps_estimate, actual_eps)
    if surprise > thresholds.beat_threshold:
        return SurpriseClass.BEAT
    if surprise < thresholds.miss_threshold:
        return SurpriseClass.MISS
    return SurpriseClass.MEET
