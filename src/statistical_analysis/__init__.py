"""Statistical analysis module for exploring performance datasets."""

from src.statistical_analysis.descriptive import (
    correlation_matrix,
    describe_column,
    find_threshold_exceedances,
    hourly_summary,
    monthly_trend,
    summarize_by_group,
)
from src.statistical_analysis.pipeline import (
    run_performance_pipeline,
    run_personnel_pipeline,
)
from src.statistical_analysis.report import (
    ReportCollector,
    generate_html_report,
)
from src.statistical_analysis.statistical_tests import (
    classify_effect_size,
    compare_groups,
    eta_squared,
    one_way_anova,
    pairwise_t_tests,
)
from src.statistical_analysis.utils import MissingColumnError, load_dataset

__all__ = [
    # Main pipelines
    "run_performance_pipeline",
    "run_personnel_pipeline",
    # Report generation
    "ReportCollector",
    "generate_html_report",
    # Descriptive statistics
    "correlation_matrix",
    "describe_column",
    "find_threshold_exceedances",
    "hourly_summary",
    "monthly_trend",
    "summarize_by_group",
    # Statistical tests
    "classify_effect_size",
    "compare_groups",
    "eta_squared",
    "one_way_anova",
    "pairwise_t_tests",
    # Utilities
    "MissingColumnError",
    "load_dataset",
]
