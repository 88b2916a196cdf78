"""Tests for eventstudy.config."""

import pytest

from eventstudy.config import (
    AnalysisConfig,
    BootstrapConfig,
    ClassificationConfig,
    EventWindowConfig,
    ProviderConfig,
)
from eventstudy.errors import InvalidArgumentError


class TestProviderConfig:
    def test_defaults(self) -> None:
        config = ProviderConfig()
        assert config.api_key_env == "ALPHAVANTAGE_API_KEY"
        assert config.market_symbol == "SPY"
        assert config.request_delay == 1.0

    def test_negative_delay(self) -> None:
        with pytest.raises(ValueError, match="request_delay"):
            ProviderConfig(request_delay=-0.5)

    def test_zero_retries(self) -> None:
        with pytest.raises(ValueError, match="max_retries"):
            ProviderConfig(max_retries=0)


class TestEventWindowConfig:
    def test_defaults(self) -> None:
        config = EventWindowConfig()
        assert (config.days_before, config.days_after) == (30, 30)

    def test_negative_side(self) -> None:
        with pytest.raises(ValueError, match="Event window"):
            EventWindowConfig(days_before=-1)


class TestClassificationConfig:
    def test_defaults(self) -> None:
        config = ClassificationConfig()
        assert config.beat_threshold == 5.0
        assert config.miss_threshold == -5.0

    def test_inverted_thresholds(self) -> None:
        with pytest.raises(ValueError, match="must not exceed"):
            ClassificationConfig(beat_threshold=-1.0, miss_threshold=1.0)


class TestBootstrapConfig:
    def test_defaults(self) -> None:
        config = BootstrapConfig()
        assert config.sample_size == 30
        assert config.iterations == 40
        assert config.seed is None

    @pytest.mark.parametrize(
        ("kwargs", "match"),
        [
            ({"sample_size": 0}, "sample_size"),
            ({"sample_size": -5}, "sample_size"),
            ({"iterations": 0}, "iterations"),
        ],
    )
    def test_invalid_counts(self, kwargs: dict[str, int], match: str) -> None:
        with pytest.raises(InvalidArgumentError, match=match):
            BootstrapConfig(**kwargs)

    def test_invalid_percentile(self) -> None:
        with pytest.raises(ValueError, match="Invalid percentile"):
            BootstrapConfig(percentiles=(5.0, 101.0))


class TestAnalysisConfig:
    def test_nested_defaults_independent(self) -> None:
        a = AnalysisConfig()
        b = AnalysisConfig()
        a.provider.market_symbol = "QQQ"
        assert b.provider.market_symbol == "SPY"
