import logging

import numpy as np
import pandas as pd

from src.statistical_analysis.utils import (
    complete_observations,
    require_columns,
    require_numeric,
)

logger = logging.getLogger(__name__)

SUMMARY_COLUMNS = ["n", "mean", "sd", "median", "min", "max"]


def summarize_by_group(df, group_col, value_col, descending=True):
    """
    Compute per-group summary statistics of a numeric column.

    Missing values in ``value_col`` are ignored within each group. The sample
    standard deviation (ddof=1) of a single-member group is NaN.

    Parameters
    ----------
    df : pd.DataFrame
        Dataset with one row per observation.
    group_col : str
        Categorical grouping column.
    value_col : str
        Numeric column to summarize.
    descending : bool, optional
        Order groups by descending mean (default) or ascending mean.

    Returns
    -------
    pd.DataFrame
        One row per group present in ``df`` with columns ``group_col``, ``n``,
        ``mean``, ``sd``, ``median``, ``min`` and ``max``.

    Raises
    ------
    MissingColumnError
        If ``group_col`` or ``value_col`` is absent.
    """
    require_columns(df, [group_col])
    require_numeric(df, [value_col])

    grouped = df.groupby(group_col, sort=False)[value_col]
    summary = grouped.agg(
        n="size",
        mean="mean",
        sd=lambda s: s.std(ddof=1),
        median="median",
        min="min",
        max="max",
    ).reset_index()

    summary = summary.sort_values("mean", ascending=not descending, kind="stable")
    return summary.reset_index(drop=True)


def describe_column(series):
    """
    Five-number summary plus mean of a numeric series, ignoring missing values.

    Returns
    -------
    dict
        Keys ``min``, ``q1``, ``median``, ``mean``, ``q3``, ``max``.
    """
    values = series.dropna()
    if values.empty:
        raise ValueError(f"Column '{series.name}' has no non-missing values")

    return {
        "min": float(values.min()),
        "q1": float(values.quantile(0.25)),
        "median": float(values.median()),
        "mean": float(values.mean()),
        "q3": float(values.quantile(0.75)),
        "max": float(values.max()),
    }


def correlation_matrix(df, columns):
    """
    Pearson correlation matrix over complete observations.

    Parameters
    ----------
    df : pd.DataFrame
        Dataset.
    columns : list of str
        Numeric columns to correlate, in output order.

    Returns
    -------
    pd.DataFrame
        Symmetric matrix indexed by ``columns`` on both axes, with a unit
        diagonal and entries clipped to [-1, 1].

    Raises
    ------
    ValueError
        If fewer than 2 complete rows remain or a column is not numeric.
    """
    columns = list(columns)
    if not columns:
        raise ValueError("At least one column is required for a correlation matrix")
    require_numeric(df, columns)

    complete = complete_observations(df, columns)
    if len(complete) < 2:
        raise ValueError(
            f"Need at least 2 complete observations to compute correlations, got {len(complete)}"
        )

    values = complete.to_numpy(dtype=float)
    corr = np.corrcoef(values, rowvar=False) if len(columns) > 1 else np.ones((1, 1))
    corr = np.atleast_2d(corr)
    corr = (corr + corr.T) / 2
    np.fill_diagonal(corr, 1.0)
    corr = np.clip(corr, -1.0, 1.0)

    logger.debug(f"Correlation matrix over {len(complete)} complete rows")
    return pd.DataFrame(corr, index=columns, columns=columns)


def find_threshold_exceedances(df, column, percentile=0.95):
    """
    Find the rows whose value strictly exceeds a percentile of ``column``.

    The percentile uses linear interpolation between order statistics
    (Hyndman & Fan type 7), ignoring missing values.

    Parameters
    ----------
    df : pd.DataFrame
        Dataset.
    column : str
        Numeric column.
    percentile : float, optional
        Quantile level in the open interval (0, 1). Defaults to 0.95.

    Returns
    -------
    threshold : float
        The quantile value.
    exceeding : pd.DataFrame
        Rows of ``df`` with ``column > threshold``.
    """
    if not 0 < percentile < 1:
        raise ValueError(f"percentile must be in (0, 1), got {percentile}")
    require_numeric(df, [column])

    values = df[column].dropna().to_numpy(dtype=float)
    if len(values) == 0:
        raise ValueError(f"Column '{column}' has no non-missing values")

    threshold = float(np.quantile(values, percentile, method="linear"))
    exceeding = df[df[column] > threshold]

    logger.debug(f"{len(exceeding)} rows with {column} > {threshold:.4f} (p={percentile})")
    return threshold, exceeding


def hourly_summary(df, timestamp_col, value_cols):
    """
    Average ``value_cols`` by hour of day.

    Returns
    -------
    pd.DataFrame
        One row per hour present, columns ``hour`` followed by ``value_cols``.
    """
    require_columns(df, [timestamp_col])
    require_numeric(df, value_cols)

    timestamps = pd.to_datetime(df[timestamp_col])
    hourly = (
        df[list(value_cols)]
        .groupby(timestamps.dt.hour.rename("hour"))
        .mean()
        .reset_index()
    )
    return hourly


def best_and_worst(summary, key_col, value_col):
    """
    Rows of ``summary`` with the lowest and highest ``value_col``.

    Returns
    -------
    dict
        ``{"best": (key, value), "worst": (key, value)}``, where best is the
        lowest value.
    """
    best = summary.loc[summary[value_col].idxmin()]
    worst = summary.loc[summary[value_col].idxmax()]
    return {
        "best": (best[key_col], float(best[value_col])),
        "worst": (worst[key_col], float(worst[value_col])),
    }


def monthly_trend(df, date_col, group_col, value_col):
    """
    Mean and count of ``value_col`` per calendar month and group.

    Returns
    -------
    pd.DataFrame
        Columns ``month`` (``YYYY-MM``), ``group_col``, ``avg_value``, ``n``,
        sorted by month then group.
    """
    require_columns(df, [date_col, group_col])
    require_numeric(df, [value_col])

    months = pd.to_datetime(df[date_col]).dt.strftime("%Y-%m").rename("month")
    trend = (
        df.groupby([months, df[group_col]])[value_col]
        .agg(avg_value="mean", n="size")
        .reset_index()
        .sort_values(["month", group_col])
        .reset_index(drop=True)
    )
    return trend
