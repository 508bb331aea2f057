"""Unit tests for src.data_generation.synthesizer."""

import numpy as np
import pandas as pd
import pytest

from src.data_generation.config import (
    TRAINING_PROGRAMS,
    OutlierSpec,
    PerformanceDataConfig,
    PersonnelDataConfig,
)
from src.data_generation.synthesizer import (
    generate_performance_data,
    generate_personnel_data,
    inject_outliers,
    save_dataset,
)
from src.statistical_analysis.utils import load_dataset

# ─────────────────────────────────────────────────────────────────────────────
# Tests for generate_performance_data
# ─────────────────────────────────────────────────────────────────────────────


class TestGeneratePerformanceData:
    def test_same_seed_gives_identical_data(self):
        config = PerformanceDataConfig(n_records=300, seed=7)
        first = generate_performance_data(config)
        second = generate_performance_data(config)
        pd.testing.assert_frame_equal(first, second, check_exact=True)

    def test_different_seed_gives_different_data(self):
        first = generate_performance_data(PerformanceDataConfig(n_records=100, seed=1))
        second = generate_performance_data(PerformanceDataConfig(n_records=100, seed=2))
        assert not first["response_time_ms"].equals(second["response_time_ms"])

    def test_columns_and_identifiers(self):
        df = generate_performance_data(PerformanceDataConfig(n_records=50))
        assert list(df.columns[:2]) == ["timestamp", "operation_id"]
        assert "response_time_ms" in df.columns
        assert "concurrent_users" in df.columns
        assert df["operation_id"].iloc[0] == "OP0001"
        assert df["operation_id"].iloc[-1] == "OP0050"
        assert df["timestamp"].iloc[0] == pd.Timestamp("2024-01-01 00:00:00")
        assert df["timestamp"].iloc[1] - df["timestamp"].iloc[0] == pd.Timedelta(hours=1)

    def test_metrics_are_finite(self):
        df = generate_performance_data()
        metrics = df.drop(columns=["timestamp", "operation_id"])
        assert np.isfinite(metrics.to_numpy(dtype=float)).all()
        assert len(df) == 1000

    @pytest.mark.parametrize(
        "n_records,fraction",
        [(1000, 0.10), (250, 0.05), (37, 0.25), (10, 0.0), (20, 1.0)],
    )
    def test_outlier_count_matches_fraction(self, n_records, fraction):
        """Metrics are drawn before outliers, so a zero-fraction run is the clean baseline."""
        clean = generate_performance_data(
            PerformanceDataConfig(n_records=n_records, outliers=OutlierSpec(fraction=0.0))
        )
        dirty = generate_performance_data(
            PerformanceDataConfig(n_records=n_records, outliers=OutlierSpec(fraction=fraction))
        )

        changed = dirty["response_time_ms"] != clean["response_time_ms"]
        assert changed.sum() == int(round(n_records * fraction))

        ratio = dirty.loc[changed, "response_time_ms"] / clean.loc[changed, "response_time_ms"]
        assert ((ratio >= 3.0) & (ratio <= 8.0)).all()

        shift = dirty.loc[changed, "error_rate"] - clean.loc[changed, "error_rate"]
        assert ((shift >= 0.1 - 1e-12) & (shift <= 0.3 + 1e-12)).all()

        # Untouched rows and metrics are identical
        pd.testing.assert_frame_equal(dirty.loc[~changed], clean.loc[~changed])
        pd.testing.assert_series_equal(dirty["cpu_usage"], clean["cpu_usage"])


# ─────────────────────────────────────────────────────────────────────────────
# Tests for inject_outliers
# ─────────────────────────────────────────────────────────────────────────────


class TestInjectOutliers:
    def test_returns_unique_sorted_indices(self):
        df = pd.DataFrame({"response_time_ms": np.ones(100), "error_rate": np.zeros(100)})
        rng = np.random.default_rng(0)
        indices = inject_outliers(df, OutlierSpec(fraction=0.2), rng)

        assert len(indices) == 20
        assert len(set(indices.tolist())) == 20
        assert list(indices) == sorted(indices)
        assert (df.loc[indices, "response_time_ms"] >= 3).all()
        assert (df.drop(index=indices)["response_time_ms"] == 1).all()

    def test_integer_target_is_promoted_to_float(self):
        df = pd.DataFrame({"throughput_ops": np.arange(1, 11)})
        spec = OutlierSpec(fraction=0.5, target_column="throughput_ops", shift_column=None)
        indices = inject_outliers(df, spec, np.random.default_rng(0))

        assert df["throughput_ops"].dtype == float
        assert len(indices) == 5

    def test_zero_fraction_leaves_data_untouched(self):
        df = pd.DataFrame({"response_time_ms": np.ones(10), "error_rate": np.zeros(10)})
        indices = inject_outliers(df, OutlierSpec(fraction=0.0), np.random.default_rng(0))
        assert len(indices) == 0
        assert (df["response_time_ms"] == 1).all()


# ─────────────────────────────────────────────────────────────────────────────
# Tests for generate_personnel_data
# ─────────────────────────────────────────────────────────────────────────────


class TestGeneratePersonnelData:
    def test_same_seed_gives_identical_data(self):
        first = generate_personnel_data(PersonnelDataConfig(seed=3))
        second = generate_personnel_data(PersonnelDataConfig(seed=3))
        pd.testing.assert_frame_equal(first, second, check_exact=True)

    def test_group_labels_from_fixed_set(self):
        df = generate_personnel_data()
        assert len(df) == 500
        assert set(df["training_program"]) <= set(TRAINING_PROGRAMS)

    def test_group_effects_shift_scores(self):
        df = generate_personnel_data(PersonnelDataConfig(n_records=4000))
        means = df.groupby("training_program")["performance_score"].mean()
        assert means["Advanced Tactical"] > means["Technical Skills"] > means["Basic Training"]
        assert means["Advanced Tactical"] - means["Basic Training"] == pytest.approx(10, abs=2)

    def test_no_date_column_by_default(self):
        df = generate_personnel_data(PersonnelDataConfig(n_records=20))
        assert "date" not in df.columns

    def test_dates_within_span(self):
        config = PersonnelDataConfig(n_records=200, include_dates=True, date_span_days=30)
        df = generate_personnel_data(config)
        start = pd.Timestamp(config.date_start)
        assert (df["date"] >= start).all()
        assert (df["date"] < start + pd.Timedelta(days=30)).all()


# ─────────────────────────────────────────────────────────────────────────────
# Tests for save_dataset
# ─────────────────────────────────────────────────────────────────────────────


def test_save_dataset_writes_header_and_timestamp_format(tmp_path):
    df = generate_performance_data(PerformanceDataConfig(n_records=5))
    path = save_dataset(df, tmp_path / "raw" / "data.csv")

    lines = path.read_text().splitlines()
    assert lines[0].startswith("timestamp,operation_id,response_time_ms")
    assert lines[1].startswith("2024-01-01 00:00:00,OP0001,")

    loaded = load_dataset(path, parse_dates=["timestamp"])
    assert len(loaded) == 5
    assert loaded["timestamp"].iloc[4] == pd.Timestamp("2024-01-01 04:00:00")
