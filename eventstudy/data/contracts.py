"""Event study data contracts.

Dataclasses defining the shape of data passed from the analysis run to
the export and presentation layers.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
import pandas as pd

from eventstudy.analysis.groups import Group
from eventstudy.config import AnalysisConfig
from eventstudy.data.models import CompanyRegistry


@dataclass
class RetrievalLog:
    """Companies that did not make it into a group, with the reason."""

    skipped: dict[str, str] = field(default_factory=dict)


@dataclass
class AnalysisResults:
    """Complete event study output.

    Attributes:
        registry: Master company collection (including skipped companies).
        groups: Label -> group, in Beat/Meet/Miss order.
        market_prices: Benchmark adjusted closes as fetched.
        market_returns: Benchmark daily returns, indexed by date.
        retrieval_log: Companies excluded during retrieval.
        config: Configuration used for the run.
    """

    registry: CompanyRegistry
    groups: dict[str, Group]
    market_prices: pd.Series
    market_returns: pd.Series
    retrieval_log: RetrievalLog
    config: AnalysisConfig

    def caar_by_label(self) -> dict[str, np.ndarray]:
        return {label: group.caar for label, group in self.groups.items()}

    def aar_by_label(self) -> dict[str, np.ndarray]:
        return {label: group.aar for label, group in self.groups.items()}

    @property
    def day_offset(self) -> int:
        """Relative day of series index 0 is minus this value."""
        return self.config.window.days_before
