"""Tests for eventstudy.metrics.returns."""

from __future__ import annotations

import numpy as np
import pytest

from eventstudy.errors import InvalidPriceError
from eventstudy.metrics.returns import compute_abnormal_returns, compute_returns


class TestComputeReturns:

    def test_simple_returns(self) -> None:
        result = compute_returns([100.0, 101.0, 99.0])
        assert result == pytest.approx([0.01, -2.0 / 101.0])

    @pytest.mark.parametrize("n", [2, 3, 10, 62])
    def test_length_is_one_less(self, n: int) -> None:
        prices = np.linspace(10.0, 20.0, n)
        assert len(compute_returns(prices)) == n - 1

    @pytest.mark.parametrize("prices", [[], [42.0]])
    def test_short_input_is_empty(self, prices: list[float]) -> None:
        result = compute_returns(prices)
        assert isinstance(result, np.ndarray)
        assert result.size == 0

    def test_flat_prices_give_zero_returns(self) -> None:
        assert compute_returns([5.0, 5.0, 5.0]).tolist() == [0.0, 0.0]

    def test_zero_price_raises(self) -> None:
        with pytest.raises(InvalidPriceError, match="index 1"):
            compute_returns([10.0, 0.0, 10.0])

    def test_zero_last_price_raises(self) -> None:
        with pytest.raises(InvalidPriceError):
            compute_returns([10.0, 0.0])

    def test_negative_price_raises(self) -> None:
        with pytest.raises(InvalidPriceError, match="Non-positive"):
            compute_returns([-1.0, 2.0])

    def test_nan_price_raises(self) -> None:
        with pytest.raises(InvalidPriceError, match="non-finite"):
            compute_returns([1.0, float("nan"), 2.0])

    def test_invalid_price_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            compute_returns([0.0, 1.0])


class TestComputeAbnormalReturns:

    def test_elementwise_difference(self) -> None:
        result = compute_abnormal_returns([0.02, 0.0], [0.01, -0.02])
        assert result == pytest.approx([0.01, 0.02])

    @pytest.mark.parametrize(
        ("n_company", "n_market"),
        [(0, 0), (0, 5), (5, 0), (3, 5), (5, 3), (61, 61)],
    )
    def test_length_is_overlap(self, n_company: int, n_market: int) -> None:
        result = compute_abnormal_returns(np.ones(n_company), np.zeros(n_market))
        assert len(result) == min(n_company, n_market)

    def test_longer_tail_is_dropped(self) -> None:
        result = compute_abnormal_returns([0.1, 0.2, 0.3], [0.05])
        assert result == pytest.approx([0.05])

    def test_end_to_end_from_prices(self) -> None:
        market = compute_returns([100.0, 101.0, 99.0])
        company = compute_returns([50.0, 51.0, 51.0])

        assert market == pytest.approx([0.01, -0.0198019802])
        assert company == pytest.approx([0.02, 0.0])
        assert compute_abnormal_returns(company, market) == pytest.approx(
            [0.01, 0.0198019802]
        )
