"""Bootstrap resampling of group CAAR curves."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

import numpy as np

from eventstudy.analysis.groups import Group
from eventstudy.config import BootstrapConfig
from eventstudy.data.models import Company
from eventstudy.errors import InvalidArgumentError

logger = logging.getLogger(__name__)


@dataclass
class BootstrapResult:
    """Averaged CAAR for one group across bootstrap iterations.

    Attributes:
        label: Source group label.
        sample_size: Requested companies per draw.
        iterations: Number of draws.
        population: Member count of the source group.
        mean_caar: Day-wise average of the iteration CAARs, each truncated
            to the shortest iteration. Empty for an empty group.
        percentile_bands: Percentile -> day-wise quantile of the truncated
            iteration CAARs. Same length as mean_caar.
    """

    label: str
    sample_size: int
    iterations: int
    population: int
    mean_caar: np.ndarray
    percentile_bands: dict[float, np.ndarray] = field(default_factory=dict)


def _validate(sample_size: int, iterations: int) -> None:
    if sample_size <= 0:
        raise InvalidArgumentError(f"sample_size must be > 0, got {sample_size}")
    if iterations <= 0:
        raise InvalidArgumentError(f"iterations must be > 0, got {iterations}")


def sample_members(
    group: Group,
    sample_size: int,
    rng: np.random.Generator,
) -> list[Company]:
    """Draw companies from a group without replacement.

    If sample_size covers the whole group, all members are returned and
    the RNG is not touched.

    Args:
        group: Source group.
        sample_size: Number of companies to draw.
        rng: Random generator.

    Returns:
        Sampled member companies (shared objects, not copies).

    Raises:
        InvalidArgumentError: If sample_size <= 0.
    """
    if sample_size <= 0:
        raise InvalidArgumentError(f"sample_size must be > 0, got {sample_size}")

    members = group.members
    if sample_size >= len(members):
        return members

    order = rng.permutation(len(members))
    return [members[i] for i in order[:sample_size]]


def run_bootstrap(
    group: Group,
    sample_size: int,
    iterations: int,
    rng: np.random.Generator | None = None,
    percentiles: tuple[float, ...] = (),
) -> BootstrapResult:
    """Average the CAAR of many random samples of a group.

    Each iteration draws independently from the full membership, builds
    an ephemeral group over the draw and computes its CAAR. All CAARs are
    truncated to the shortest one, then averaged day by day.

    Args:
        group: Source group.
        sample_size: Companies per draw.
        iterations: Number of draws.
        rng: Random generator. Defaults to fresh OS entropy.
        percentiles: Percentiles to report across iterations.

    Returns:
        BootstrapResult for the group.

    Raises:
        InvalidArgumentError: If sample_size or iterations is not positive.
    """
    _validate(sample_size, iterations)
    if rng is None:
        rng = np.random.default_rng()

    caars: list[np.ndarray] = []
    for i in range(iterations):
        sample = sample_members(group, sample_size, rng)
        temp = Group(
            f"{group.label}-sample",
            group.registry,
            (c.symbol for c in sample),
            policy=group.policy,
        )
        caars.append(temp.compute_caar())
        logger.debug(
            "%s: bootstrap iteration %d/%d, %d days",
            group.label, i + 1, iterations, len(caars[-1]),
        )

    min_len = min(len(c) for c in caars)
    stacked = np.vstack([c[:min_len] for c in caars])
    mean_caar = stacked.sum(axis=0) / iterations

    bands: dict[float, np.ndarray] = {}
    for p in percentiles:
        if min_len == 0:
            bands[p] = np.empty(0, dtype=float)
        else:
            bands[p] = np.percentile(stacked, p, axis=0)

    logger.info(
        "%s: bootstrapped %d iterations of %d/%d companies, %d days",
        group.label, iterations, min(sample_size, len(group)), len(group), min_len,
    )
    return BootstrapResult(
        label=group.label,
        sample_size=sample_size,
        iterations=iterations,
        population=len(group),
        mean_caar=mean_caar,
        percentile_bands=bands,
    )


def bootstrap_groups(
    groups: Mapping[str, Group],
    config: BootstrapConfig,
    rng: np.random.Generator | None = None,
) -> dict[str, BootstrapResult]:
    """Run the bootstrap independently for every group.

    Args:
        groups: Label -> group.
        config: Sample size, iterations, seed and percentiles.
        rng: Random generator. Defaults to one seeded from config.seed.

    Returns:
        Label -> BootstrapResult, in the order of ``groups``.
    """
    if rng is None:
        rng = np.random.default_rng(config.seed)

    return {
        label: run_bootstrap(
            group,
            config.sample_size,
            config.iterations,
            rng=rng,
            percentiles=config.percentiles,
        )
        for label, group in groups.items()
    }
