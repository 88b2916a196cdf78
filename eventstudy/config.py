"""Event study configuration dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from eventstudy.errors import InvalidArgumentError

# Day index 0 of every AAR/CAAR series corresponds to this relative day.
DAY_OFFSET: int = 30

GROUP_LABELS: tuple[str, ...] = ("Beat", "Meet", "Miss")


@dataclass
class ProviderConfig:
    """Market data retrieval parameters."""

    api_key_env: str = "ALPHAVANTAGE_API_KEY"
    base_url: str = "https://www.alphavantage.co/query"
    market_symbol: str = "SPY"

    # Upstream rate limit: one request at a time, paced
    request_delay: float = 1.0
    request_timeout: int = 30
    max_retries: int = 3
    backoff_factor: float = 1.0

    def __post_init__(self) -> None:
        if self.request_delay < 0:
            raise ValueError(
                f"request_delay must be >= 0, got {self.request_delay}"
            )
        if self.max_retries < 1:
            raise ValueError(f"max_retries must be >= 1, got {self.max_retries}")


@dataclass
class EventWindowConfig:
    """Trading days kept on each side of the earnings date."""

    days_before: int = DAY_OFFSET
    days_after: int = DAY_OFFSET

    def __post_init__(self) -> None:
        if self.days_before < 0 or self.days_after < 0:
            raise ValueError(
                "Event window sides must be >= 0, got "
                f"days_before={self.days_before}, days_after={self.days_after}"
            )


@dataclass
class ClassificationConfig:
    """Surprise percentage thresholds for Beat/Miss."""

    beat_threshold: float = 5.0
    miss_threshold: float = -5.0

    def __post_init__(self) -> None:
        if self.miss_threshold > self.beat_threshold:
            raise ValueError(
                f"miss_threshold ({self.miss_threshold}) must not exceed "
                f"beat_threshold ({self.beat_threshold})"
            )


@dataclass
class BootstrapConfig:
    """Bootstrap resampling parameters.

    Attributes:
        sample_size: Companies drawn per group per iteration.
        iterations: Number of independent draws.
        seed: RNG seed. None draws fresh OS entropy.
        percentiles: Percentiles reported across iteration CAARs.
    """

    sample_size: int = 30
    iterations: int = 40
    seed: int | None = None
    percentiles: tuple[float, ...] = (5.0, 25.0, 50.0, 75.0, 95.0)

    def __post_init__(self) -> None:
        if self.sample_size <= 0:
            raise InvalidArgumentError(
                f"sample_size must be > 0, got {self.sample_size}"
            )
        if self.iterations <= 0:
            raise InvalidArgumentError(
                f"iterations must be > 0, got {self.iterations}"
            )
        for p in self.percentiles:
            if not 0.0 <= p <= 100.0:
                raise ValueError(f"Invalid percentile {p}")


@dataclass
class AnalysisConfig:
    """Top-level configuration for one event study run."""

    records_path: Path = Path("data/earnings.csv")
    output_directory: Path = Path("output")
    provider: ProviderConfig = field(default_factory=ProviderConfig)
    window: EventWindowConfig = field(default_factory=EventWindowConfig)
    classification: ClassificationConfig = field(
        default_factory=ClassificationConfig
    )
    bootstrap: BootstrapConfig = field(default_factory=BootstrapConfig)
