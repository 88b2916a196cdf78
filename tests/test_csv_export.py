"""Tests for eventstudy.output.csv_export."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from eventstudy.bootstrap import BootstrapResult
from eventstudy.output.csv_export import (
    build_band_table,
    build_caar_table,
    export_bootstrap_csv,
    export_table_csv,
)


def _make_result(label: str, caar: list[float]) -> BootstrapResult:
    arr = np.asarray(caar, dtype=float)
    return BootstrapResult(
        label=label,
        sample_size=2,
        iterations=5,
        population=3,
        mean_caar=arr,
        percentile_bands={5.0: arr - 0.01, 95.0: arr + 0.01},
    )


class TestBuildCaarTable:

    def test_columns_and_days(self) -> None:
        table = build_caar_table(
            {"Beat": [0.01, 0.02, 0.03], "Meet": [0.0, 0.0, 0.0], "Miss": [-0.01] * 3},
            offset=1,
        )
        assert list(table.columns) == ["Day", "Beat", "Meet", "Miss"]
        assert list(table["Day"]) == [-1, 0, 1]
        assert table["Beat"].iloc[2] == pytest.approx(0.03)

    def test_shorter_group_padded_with_nan(self) -> None:
        table = build_caar_table({"Beat": [0.01, 0.02, 0.03], "Meet": [0.05]})
        assert len(table) == 3
        assert table["Meet"].iloc[0] == pytest.approx(0.05)
        assert table["Meet"].iloc[1:].isna().all()
        assert table["Miss"].isna().all()

    def test_all_empty(self) -> None:
        table = build_caar_table({})
        assert list(table.columns) == ["Day", "Beat", "Meet", "Miss"]
        assert table.empty

    def test_default_offset_is_thirty(self) -> None:
        table = build_caar_table({"Beat": np.zeros(61)})
        assert table["Day"].iloc[0] == -30
        assert table["Day"].iloc[-1] == 30


class TestBuildBandTable:

    def test_band_columns(self) -> None:
        table = build_band_table(_make_result("Beat", [0.01, 0.02]), offset=0)
        assert list(table.columns) == ["Day", "mean", "p5", "p95"]
        assert table["p95"].iloc[1] == pytest.approx(0.03)


class TestExport:

    def test_blank_cells_for_missing_values(self, tmp_path: Path) -> None:
        table = build_caar_table({"Beat": [0.01, 0.02], "Meet": [0.03]}, offset=0)
        path = export_table_csv(table, tmp_path / "out" / "caar_data.csv")

        lines = path.read_text().splitlines()
        assert lines[0] == "Day,Beat,Meet,Miss"
        assert lines[2] == "1,0.02,,"

    def test_round_trip_values(self, tmp_path: Path) -> None:
        table = build_caar_table({"Beat": [0.0125, -0.5]}, offset=0)
        path = export_table_csv(table, tmp_path / "caar_data.csv")
        loaded = pd.read_csv(path)
        assert loaded["Beat"].tolist() == pytest.approx([0.0125, -0.5])

    def test_bootstrap_writes_bands_file(self, tmp_path: Path) -> None:
        results = {
            "Beat": _make_result("Beat", [0.01, 0.02]),
            "Miss": _make_result("Miss", [-0.01]),
        }
        path = export_bootstrap_csv(results, tmp_path / "bootstrapped_caar.csv")

        main = pd.read_csv(path)
        assert list(main.columns) == ["Day", "Beat", "Meet", "Miss"]
        assert len(main) == 2

        bands = pd.read_csv(tmp_path / "bootstrapped_caar_bands.csv")
        assert list(bands.columns) == ["group", "Day", "mean", "p5", "p95"]
        assert bands["group"].tolist() == ["Beat", "Beat", "Miss"]

    def test_bootstrap_offset(self, tmp_path: Path) -> None:
        results = {"Beat": _make_result("Beat", [0.01, 0.02, 0.03])}
        path = export_bootstrap_csv(results, tmp_path / "boot.csv", offset=1)

        assert pd.read_csv(path)["Day"].tolist() == [-1, 0, 1]
        bands = pd.read_csv(tmp_path / "boot_bands.csv")
        assert bands["Day"].tolist() == [-1, 0, 1]
