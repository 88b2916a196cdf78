"""Group aggregation: Average and Cumulative Average Abnormal Returns.

A group collects the companies that share one surprise classification.
AAR is the cross-sectional mean of abnormal returns per relative day;
CAAR is its running sum. Index d of both series is relative day
d - DAY_OFFSET.

How members of unequal length are lined up is decided by an alignment
policy. The default, ``first_member_zero_fill``, takes the first
member's length as the window, zero-fills shorter members, truncates
longer ones, and divides by the total member count.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence

import numpy as np

from eventstudy.config import DAY_OFFSET
from eventstudy.data.models import Company, CompanyRegistry

logger = logging.getLogger(__name__)

# Maps member abnormal-return series to a (kept_members, window) matrix.
# AAR is the column mean of that matrix.
AlignmentPolicy = Callable[[Sequence[np.ndarray]], np.ndarray]


def first_member_zero_fill(series: Sequence[np.ndarray]) -> np.ndarray:
    """Window = first member's length; shorter members contribute 0.

    Every member keeps a row, so the column mean divides by the total
    member count even where a member has no data.
    """
    window = len(series[0])
    matrix = np.zeros((len(series), window), dtype=float)
    for row, ar in enumerate(series):
        n = min(window, len(ar))
        matrix[row, :n] = ar[:n]
    return matrix


def exclude_short_members(series: Sequence[np.ndarray]) -> np.ndarray:
    """Window = first member's length; members shorter than it are dropped."""
    window = len(series[0])
    rows = [np.asarray(ar[:window], dtype=float) for ar in series if len(ar) >= window]
    dropped = len(series) - len(rows)
    if dropped:
        logger.debug("Excluded %d short members from window %d", dropped, window)
    return np.vstack(rows)


def compute_aar(
    members: Sequence[Company],
    policy: AlignmentPolicy = first_member_zero_fill,
) -> np.ndarray:
    """Average abnormal return per relative day.

    Args:
        members: Group members, in insertion order.
        policy: Alignment policy for unequal series lengths.

    Returns:
        AAR array; empty for an empty group.
    """
    if not members:
        return np.empty(0, dtype=float)
    matrix = policy([m.abnormal_returns for m in members])
    return matrix.sum(axis=0) / matrix.shape[0]


def compute_caar(aar: Sequence[float] | np.ndarray) -> np.ndarray:
    """Running sum of AAR, same length."""
    return np.cumsum(np.asarray(aar, dtype=float))


def relative_days(length: int, offset: int = DAY_OFFSET) -> np.ndarray:
    """Relative trading days for series index 0..length-1."""
    return np.arange(length) - offset


class Group:
    """Companies sharing one classification, referenced by symbol.

    Members are resolved through the registry on every read, so the
    group never holds copies of company state.

    Attributes:
        label: Group name ("Beat", "Meet", "Miss", or a sample label).
        aar: Last computed AAR (empty until compute()).
        caar: Last computed CAAR (empty until compute()).
    """

    def __init__(
        self,
        label: str,
        registry: CompanyRegistry,
        symbols: Iterable[str] = (),
        policy: AlignmentPolicy = first_member_zero_fill,
    ) -> None:
        self.label = label
        self.registry = registry
        self.policy = policy
        self._symbols: list[str] = []
        for symbol in symbols:
            self.add(symbol)
        self.aar: np.ndarray = np.empty(0, dtype=float)
        self.caar: np.ndarray = np.empty(0, dtype=float)

    def add(self, symbol: str) -> None:
        """Add a member by symbol. Duplicates are ignored.

        Raises:
            KeyError: If the symbol is not in the registry.
        """
        if symbol not in self.registry:
            raise KeyError(f"{symbol} is not in the company registry")
        if symbol not in self._symbols:
            self._symbols.append(symbol)

    @property
    def symbols(self) -> list[str]:
        return list(self._symbols)

    @property
    def members(self) -> list[Company]:
        return [self.registry[s] for s in self._symbols]

    def __len__(self) -> int:
        return len(self._symbols)

    def compute_aar(self) -> np.ndarray:
        return compute_aar(self.members, self.policy)

    def compute_caar(self) -> np.ndarray:
        return compute_caar(self.compute_aar())

    def compute(self) -> None:
        """Compute and store AAR and CAAR from current membership."""
        self.aar = self.compute_aar()
        self.caar = compute_caar(self.aar)
        logger.debug(
            "%s: %d members, %d-day window", self.label, len(self), len(self.aar),
        )

    def __repr__(self) -> str:
        return f"Group(label={self.label!r}, members={len(self)})"
