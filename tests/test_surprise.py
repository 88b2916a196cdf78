"""Tests for eventstudy.metrics.surprise."""

from __future__ import annotations

import pytest

from eventstudy.config import ClassificationConfig
from eventstudy.metrics.surprise import SurpriseClass, classify, surprise_percentage


class TestSurprisePercentage:

    def test_positive_surprise(self) -> None:
        assert surprise_percentage(2.0, 2.2) == pytest.approx(10.0)

    def test_negative_estimate_uses_absolute_value(self) -> None:
        # Loss narrower than expected is a positive surprise
        assert surprise_percentage(-1.0, -0.5) == pytest.approx(50.0)

    def test_zero_estimate(self) -> None:
        assert surprise_percentage(0.0, 3.0) == 0.0


class TestClassify:

    @pytest.mark.parametrize(
        ("estimate", "actual", "expected"),
        [
            (2.0, 2.2, SurpriseClass.BEAT),
            (2.0, 1.8, SurpriseClass.MISS),
            (2.0, 2.05, SurpriseClass.MEET),
            (1.0, 1.0, SurpriseClass.MEET),
        ],
    )
    def test_examples(
        self, estimate: float, actual: float, expected: SurpriseClass,
    ) -> None:
        assert classify(estimate, actual) is expected

    def test_thresholds_are_exclusive(self) -> None:
        # Exactly +/-5% is Meet
        assert classify(100.0, 105.0) is SurpriseClass.MEET
        assert classify(100.0, 95.0) is SurpriseClass.MEET
        assert classify(100.0, 105.01) is SurpriseClass.BEAT
        assert classify(100.0, 94.99) is SurpriseClass.MISS

    @pytest.mark.parametrize("actual", [-10.0, 0.0, 0.5, 100.0])
    def test_zero_estimate_is_meet(self, actual: float) -> None:
        assert classify(0.0, actual) is SurpriseClass.MEET

    @pytest.mark.parametrize("scale", [0.01, 0.5, 3.0, 1000.0])
    def test_invariant_under_positive_scaling(self, scale: float) -> None:
        for estimate, actual in [(2.0, 2.2), (2.0, 1.8), (2.0, 2.05), (-1.0, -1.5)]:
            assert classify(estimate * scale, actual * scale) is classify(
                estimate, actual
            )

    def test_values_are_group_labels(self) -> None:
        assert [c.value for c in SurpriseClass] == ["Beat", "Meet", "Miss"]

    def test_custom_thresholds(self) -> None:
        thresholds = ClassificationConfig(beat_threshold=1.0, miss_threshold=-1.0)
        assert classify(2.0, 2.05, thresholds) is SurpriseClass.BEAT
        assert classify(2.0, 1.95, thresholds) is SurpriseClass.MISS
