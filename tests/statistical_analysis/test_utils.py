"""Unit tests for src.statistical_analysis.utils."""

import numpy as np
import pandas as pd
import pytest

from src.statistical_analysis.utils import (
    MissingColumnError,
    complete_observations,
    load_dataset,
    numeric_columns,
    require_columns,
    require_numeric,
)

# ─────────────────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def mixed_df():
    """DataFrame with identifier, label, numeric and missing values."""
    return pd.DataFrame(
        {
            "id": [1, 2, 3, 4],
            "training_program": ["Leadership", "Leadership", "Basic Training", "Basic Training"],
            "performance_score": [80.0, np.nan, 70.0, 72.0],
            "training_hours": [100.0, 110.0, np.nan, 130.0],
            "passed": [True, False, True, True],
        }
    )


# ─────────────────────────────────────────────────────────────────────────────
# Tests for load_dataset
# ─────────────────────────────────────────────────────────────────────────────


class TestLoadDataset:
    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="not found"):
            load_dataset(tmp_path / "missing.csv")

    def test_parses_listed_timestamp_columns(self, tmp_path):
        path = tmp_path / "data.csv"
        path.write_text("timestamp,value\n2024-01-01 05:00:00,1.5\n2024-01-01 06:00:00,2.5\n")

        df = load_dataset(path, parse_dates=["timestamp", "date"])
        assert pd.api.types.is_datetime64_any_dtype(df["timestamp"])
        assert df["timestamp"].dt.hour.tolist() == [5, 6]
        assert "date" not in df.columns

    def test_without_parse_dates_keeps_strings(self, tmp_path):
        path = tmp_path / "data.csv"
        path.write_text("timestamp,value\n2024-01-01 05:00:00,1.5\n")
        df = load_dataset(path)
        assert df["timestamp"].iloc[0] == "2024-01-01 05:00:00"


# ─────────────────────────────────────────────────────────────────────────────
# Tests for column checks
# ─────────────────────────────────────────────────────────────────────────────


class TestRequireColumns:
    def test_passes_when_present(self, mixed_df):
        require_columns(mixed_df, ["id", "performance_score"])

    def test_lists_every_missing_column(self, mixed_df):
        with pytest.raises(MissingColumnError, match="foo, bar"):
            require_columns(mixed_df, ["foo", "id", "bar"])

    def test_missing_column_error_is_value_error(self):
        assert issubclass(MissingColumnError, ValueError)

    def test_require_numeric_rejects_labels(self, mixed_df):
        with pytest.raises(ValueError, match="must be numeric"):
            require_numeric(mixed_df, ["training_program"])


class TestCompleteObservations:
    def test_drops_rows_with_missing_values(self, mixed_df):
        result = complete_observations(mixed_df, ["performance_score", "training_hours"])
        assert result.index.tolist() == [0, 3]
        assert list(result.columns) == ["performance_score", "training_hours"]

    def test_only_selected_columns_matter(self, mixed_df):
        result = complete_observations(mixed_df, ["training_hours"])
        assert len(result) == 3


def test_numeric_columns_skips_ids_labels_and_flags(mixed_df):
    assert numeric_columns(mixed_df) == ["performance_score", "training_hours"]
    assert numeric_columns(mixed_df, exclude=()) == ["id", "performance_score", "training_hours"]
