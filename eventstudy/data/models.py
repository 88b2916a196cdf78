"""Data models for the event study."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field

import numpy as np

from eventstudy.config import ClassificationConfig
from eventstudy.metrics.surprise import SurpriseClass, classify, surprise_percentage


def _empty() -> np.ndarray:
    return np.empty(0, dtype=float)


@dataclass(frozen=True)
class EarningsRecord:
    """One row of earnings metadata.

    Attributes:
        symbol: Stock ticker symbol.
        eps_estimate: Consensus EPS estimate.
        actual_eps: Reported EPS.
        earnings_date: Announcement date as given in the source (ISO format).
    """

    symbol: str
    eps_estimate: float
    actual_eps: float
    earnings_date: str


@dataclass(eq=False)
class Company:
    """Per-company state consumed by group aggregation.

    Created from an EarningsRecord; prices, returns and abnormal returns
    are attached once by the retrieval step and are read-only afterwards.

    Attributes:
        symbol: Stock ticker symbol (registry key).
        eps_estimate: Consensus EPS estimate.
        actual_eps: Reported EPS.
        earnings_date: Announcement date string.
        prices: Event window adjusted closes, chronological.
        returns: Daily simple returns, len(prices) - 1.
        abnormal_returns: returns minus market returns over the overlap.
    """

    symbol: str
    eps_estimate: float
    actual_eps: float
    earnings_date: str
    prices: np.ndarray = field(default_factory=_empty)
    returns: np.ndarray = field(default_factory=_empty)
    abnormal_returns: np.ndarray = field(default_factory=_empty)
    retrieved: bool = False

    @classmethod
    def from_record(cls, record: EarningsRecord) -> Company:
        return cls(
            symbol=record.symbol,
            eps_estimate=record.eps_estimate,
            actual_eps=record.actual_eps,
            earnings_date=record.earnings_date,
        )

    def attach(
        self,
        prices: Sequence[float] | np.ndarray,
        returns: Sequence[float] | np.ndarray,
        abnormal_returns: Sequence[float] | np.ndarray,
    ) -> None:
        """Attach retrieved series. Allowed exactly once.

        Raises:
            RuntimeError: If series were already attached.
        """
        if self.retrieved:
            raise RuntimeError(f"{self.symbol}: series already attached")
        arrays = [
            np.array(a, dtype=float) for a in (prices, returns, abnormal_returns)
        ]
        for arr in arrays:
            arr.setflags(write=False)
        self.prices, self.returns, self.abnormal_returns = arrays
        self.retrieved = True

    @property
    def surprise_pct(self) -> float:
        return surprise_percentage(self.eps_estimate, self.actual_eps)

    def classification(
        self, thresholds: ClassificationConfig | None = None,
    ) -> SurpriseClass:
        if thresholds is None:
            return classify(self.eps_estimate, self.actual_eps)
        return classify(self.eps_estimate, self.actual_eps, thresholds)


class CompanyRegistry:
    """Master collection of companies keyed by symbol.

    Groups and bootstrap samples refer to companies by symbol and resolve
    them here, so every aggregate reads the same Company objects.
    """

    def __init__(self) -> None:
        self._companies: dict[str, Company] = {}

    def add(self, company: Company) -> None:
        """Insert or replace a company under its symbol."""
        self._companies[company.symbol] = company

    def get(self, symbol: str) -> Company | None:
        return self._companies.get(symbol)

    def __getitem__(self, symbol: str) -> Company:
        return self._companies[symbol]

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._companies

    def __len__(self) -> int:
        return len(self._companies)

    def __iter__(self) -> Iterator[Company]:
        # Symbol order; retrieval and reports rely on it
        for symbol in sorted(self._companies):
            yield self._companies[symbol]

    @property
    def symbols(self) -> list[str]:
        return sorted(self._companies)
