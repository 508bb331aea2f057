import logging

from src.statistical_analysis.descriptive import (
    best_and_worst,
    correlation_matrix,
    describe_column,
    find_threshold_exceedances,
    hourly_summary,
    monthly_trend,
    summarize_by_group,
)
from src.statistical_analysis.statistical_tests import compare_groups
from src.statistical_analysis.utils import numeric_columns, require_columns

logger = logging.getLogger(__name__)

PERFORMANCE_SUMMARY_COLUMNS = ["response_time_ms", "throughput_ops", "error_rate", "cpu_usage"]
PERFORMANCE_CORRELATION_COLUMNS = [
    "response_time_ms",
    "throughput_ops",
    "error_rate",
    "cpu_usage",
    "memory_usage_mb",
    "concurrent_users",
]
HOURLY_COLUMNS = ["response_time_ms", "throughput_ops", "error_rate"]


def run_performance_pipeline(
    df,
    latency_col="response_time_ms",
    percentile=0.95,
    timestamp_col="timestamp",
    summary_columns=None,
    correlation_columns=None,
):
    """
    Run exploratory analysis on an operational performance dataset.

    Parameters
    ----------
    df : pd.DataFrame
        One row per operation.
    latency_col : str, optional
        Column used for the high-latency percentile filter and for ranking
        hours. Defaults to "response_time_ms".
    percentile : float, optional
        Quantile level for the high-latency filter. Defaults to 0.95.
    timestamp_col : str, optional
        Timestamp column for the hourly profile. If absent, the hourly step is
        skipped with a warning.
    summary_columns : list of str, optional
        Columns to describe. Defaults to PERFORMANCE_SUMMARY_COLUMNS.
    correlation_columns : list of str, optional
        Columns to correlate. Defaults to PERFORMANCE_CORRELATION_COLUMNS.

    Returns
    -------
    dict
        Dictionary containing analysis results with keys:
        - "overview": record and variable counts
        - "column_summaries": {column: describe_column(...)}
        - "correlation": correlation matrix DataFrame
        - "high_latency": threshold, percentile and exceeding rows
        - "hourly" (only if timestamp_col is present): hourly means and
          best/worst hour

    Raises
    ------
    MissingColumnError
        If a required column is absent.
    ValueError
        If there are too few complete rows to analyze.
    """
    summary_columns = summary_columns or PERFORMANCE_SUMMARY_COLUMNS
    correlation_columns = correlation_columns or PERFORMANCE_CORRELATION_COLUMNS
    require_columns(df, sorted({latency_col, *summary_columns, *correlation_columns}))

    out = {
        "overview": {
            "n_records": len(df),
            "n_variables": len(df.columns),
        }
    }

    out["column_summaries"] = {col: describe_column(df[col]) for col in summary_columns}
    logger.info(f"Summarized {len(summary_columns)} columns over {len(df)} records")

    out["correlation"] = correlation_matrix(df, correlation_columns)

    threshold, exceeding = find_threshold_exceedances(df, latency_col, percentile)
    out["high_latency"] = {
        "column": latency_col,
        "percentile": percentile,
        "threshold": threshold,
        "n_exceeding": len(exceeding),
        "rows": exceeding,
    }
    logger.info(
        f"Found {len(exceeding)} operations with {latency_col} > {threshold:.1f} "
        f"(p{percentile * 100:g})"
    )

    if timestamp_col not in df.columns:
        logger.warning(f"'{timestamp_col}' column not found. Skipping hourly analysis.")
    else:
        hourly_cols = [c for c in HOURLY_COLUMNS if c in df.columns]
        if latency_col not in hourly_cols:
            hourly_cols.insert(0, latency_col)
        hourly = hourly_summary(df, timestamp_col, hourly_cols)
        out["hourly"] = {
            "table": hourly,
            **best_and_worst(hourly, "hour", latency_col),
        }

    return out


def run_personnel_pipeline(
    df,
    group_col="training_program",
    value_col="performance_score",
    date_col="date",
    exclude_columns=("id",),
    pool_sd=True,
):
    """
    Run exploratory analysis and hypothesis tests on a personnel dataset.

    Parameters
    ----------
    df : pd.DataFrame
        One row per person.
    group_col : str, optional
        Categorical grouping column. Defaults to "training_program".
    value_col : str, optional
        Numeric outcome. Defaults to "performance_score".
    date_col : str, optional
        Date column for the monthly trend. If absent, the trend step is skipped
        with a warning.
    exclude_columns : tuple of str, optional
        Numeric identifier columns left out of the correlation matrix.
    pool_sd : bool, optional
        Use a pooled standard deviation in pairwise t-tests. Defaults to True.

    Returns
    -------
    dict
        Dictionary containing analysis results with keys:
        - "overview": record counts and overall mean/sd/range of value_col
        - "group_summary": summarize_by_group(...) DataFrame
        - "correlation": correlation matrix over all numeric columns
        - "hypothesis_tests": compare_groups(...) output
        - "monthly_trend" (only if date_col is present)
    """
    require_columns(df, [group_col, value_col])

    values = df[value_col].dropna()
    out = {
        "overview": {
            "n_records": len(df),
            "n_variables": len(df.columns),
            "n_groups": int(df[group_col].nunique()),
            "mean": float(values.mean()),
            "sd": float(values.std(ddof=1)),
            "min": float(values.min()),
            "max": float(values.max()),
            "group_column": group_col,
            "value_column": value_col,
        }
    }

    out["group_summary"] = summarize_by_group(df, group_col, value_col)

    corr_cols = numeric_columns(df, exclude=exclude_columns)
    if len(corr_cols) < 2:
        logger.warning("Fewer than 2 numeric columns found, skipping correlation matrix")
    else:
        out["correlation"] = correlation_matrix(df, corr_cols)

    out["hypothesis_tests"] = compare_groups(df, value_col, group_col, pool_sd=pool_sd)

    if date_col not in df.columns:
        logger.warning(f"'{date_col}' column not found. Skipping trend analysis.")
    else:
        out["monthly_trend"] = monthly_trend(df, date_col, group_col, value_col)

    return out
