import logging
import pathlib

import numpy as np
import pandas as pd

from src.data_generation.config import (
    OutlierSpec,
    PerformanceDataConfig,
    PersonnelDataConfig,
)

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def inject_outliers(df: pd.DataFrame, spec: OutlierSpec, rng: np.random.Generator):
    """
    Perturb a uniformly chosen subset of rows in place.

    Exactly ``round(len(df) * spec.fraction)`` rows are drawn without
    replacement. The target column of each chosen row is multiplied by a factor
    from ``spec.multiplier_range`` and, if ``spec.shift_column`` is set, the
    shift column is increased by an amount from ``spec.shift_range``.

    Parameters
    ----------
    df : pd.DataFrame
        Dataset to modify. Must have a default RangeIndex.
    spec : OutlierSpec
        Outlier settings.
    rng : np.random.Generator
        Generator to draw rows and perturbations from.

    Returns
    -------
    np.ndarray
        Sorted positional indices of the perturbed rows.
    """
    n_outliers = spec.n_outliers(len(df))
    if n_outliers == 0:
        return np.array([], dtype=int)

    indices = np.sort(rng.choice(len(df), size=n_outliers, replace=False))

    target = spec.target_column
    if not pd.api.types.is_float_dtype(df[target]):
        df[target] = df[target].astype(float)
    factors = rng.uniform(*spec.multiplier_range, size=n_outliers)
    df.loc[indices, target] = df.loc[indices, target].to_numpy() * factors

    if spec.shift_column is not None:
        shift = spec.shift_column
        if not pd.api.types.is_float_dtype(df[shift]):
            df[shift] = df[shift].astype(float)
        shifts = rng.uniform(*spec.shift_range, size=n_outliers)
        df.loc[indices, shift] = df.loc[indices, shift].to_numpy() + shifts

    logger.debug(f"Injected {n_outliers} outliers into '{target}'")
    return indices


def generate_performance_data(config: PerformanceDataConfig | None = None) -> pd.DataFrame:
    """
    Generate a synthetic operational performance dataset.

    One row per operation at an hourly cadence, with every metric sampled
    independently from its configured distribution, followed by outlier
    injection. The same config (including seed) always yields the same data.

    Parameters
    ----------
    config : PerformanceDataConfig, optional
        Generator settings. Defaults to ``PerformanceDataConfig()``.

    Returns
    -------
    pd.DataFrame
        Columns ``timestamp``, ``operation_id`` and one column per metric.
    """
    config = config or PerformanceDataConfig()
    rng = np.random.default_rng(config.seed)
    n = config.n_records

    df = pd.DataFrame(
        {
            "timestamp": pd.date_range(start=config.start, periods=n, freq=config.freq),
            "operation_id": [f"OP{i:04d}" for i in range(1, n + 1)],
        }
    )
    for name, dist in config.metrics.items():
        df[name] = dist.sample(rng, n)

    inject_outliers(df, config.outliers, rng)

    logger.info(f"Generated {n} performance records (seed={config.seed})")
    return df


def generate_personnel_data(config: PersonnelDataConfig | None = None) -> pd.DataFrame:
    """
    Generate a synthetic personnel performance dataset.

    Group labels are sampled uniformly with replacement; the score column is
    then shifted by the configured per-group effect.
    """
    config = config or PersonnelDataConfig()
    rng = np.random.default_rng(config.seed)
    n = config.n_records

    df = pd.DataFrame(
        {
            "id": np.arange(1, n + 1),
            config.group_column: rng.choice(list(config.groups), size=n, replace=True),
        }
    )
    for name, dist in config.metrics.items():
        df[name] = dist.sample(rng, n)

    effects = df[config.group_column].map(config.group_effects).fillna(0.0)
    df[config.score_column] = df[config.score_column] + effects.to_numpy()

    if config.include_dates:
        offsets = rng.uniform(0, config.date_span_days * 86400, size=n)
        df["date"] = pd.Timestamp(config.date_start) + pd.to_timedelta(
            np.floor(offsets), unit="s"
        )

    logger.info(f"Generated {n} personnel records (seed={config.seed})")
    return df


def save_dataset(df: pd.DataFrame, out_path) -> pathlib.Path:
    """Write a dataset to CSV, creating parent directories as needed."""
    out_path = pathlib.Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(out_path, index=False, date_format=TIMESTAMP_FORMAT)
    logger.info(f"Saved {len(df)} records to {out_path}")
    return out_path
