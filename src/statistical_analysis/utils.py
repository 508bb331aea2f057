import logging
import pathlib

import pandas as pd

logger = logging.getLogger(__name__)


class MissingColumnError(ValueError):
    pass


def load_dataset(csv_path, parse_dates=None):
    """
    Load a CSV dataset with a header row.

    Parameters
    ----------
    csv_path : str or pathlib.Path
        Path to the CSV file.
    parse_dates : list of str, optional
        Columns to parse as timestamps. Columns not present in the file are
        ignored, so optional date columns may be listed unconditionally.

    Returns
    -------
    pd.DataFrame
        Loaded dataset.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    """
    csv_path = pathlib.Path(csv_path)
    if not csv_path.is_file():
        raise FileNotFoundError(f"Input file not found: {csv_path}")

    df = pd.read_csv(csv_path)
    for col in parse_dates or []:
        if col in df.columns:
            df[col] = pd.to_datetime(df[col], format="%Y-%m-%d %H:%M:%S")

    logger.info(f"Loaded {len(df)} records with {len(df.columns)} variables from {csv_path}")
    return df


def require_columns(df, columns):
    """
    Raise MissingColumnError listing every column of ``columns`` absent from ``df``.
    """
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise MissingColumnError(f"Missing required column(s): {', '.join(missing)}")


def require_numeric(df, columns):
    """Check that ``columns`` exist in ``df`` and hold numeric data."""
    require_columns(df, columns)
    non_numeric = [c for c in columns if not pd.api.types.is_numeric_dtype(df[c])]
    if non_numeric:
        raise ValueError(f"Column(s) must be numeric: {', '.join(non_numeric)}")


def complete_observations(df, columns):
    """
    Return rows of ``df`` with no missing values among ``columns``.

    Parameters
    ----------
    df : pd.DataFrame
        Dataset.
    columns : list of str
        Columns under analysis.

    Returns
    -------
    pd.DataFrame
        Subset of ``df`` restricted to ``columns`` and complete rows.
    """
    require_columns(df, columns)
    complete = df[list(columns)].dropna()
    n_dropped = len(df) - len(complete)
    if n_dropped > 0:
        logger.debug(f"Dropped {n_dropped} incomplete row(s) for columns {list(columns)}")
    return complete


def numeric_columns(df, exclude=("id",)):
    """List numeric columns of ``df`` in order, skipping identifiers in ``exclude``."""
    return [
        c
        for c in df.columns
        if pd.api.types.is_numeric_dtype(df[c])
        and not pd.api.types.is_bool_dtype(df[c])
        and c not in exclude
    ]
