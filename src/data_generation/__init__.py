"""Synthetic dataset generation for exploratory analysis."""

from src.data_generation.config import (
    DEFAULT_SEED,
    Beta,
    LogNormal,
    Normal,
    OutlierSpec,
    PerformanceDataConfig,
    PersonnelDataConfig,
    Poisson,
)
from src.data_generation.synthesizer import (
    generate_performance_data,
    generate_personnel_data,
    inject_outliers,
    save_dataset,
)

__all__ = [
    # Configuration
    "DEFAULT_SEED",
    "Beta",
    "LogNormal",
    "Normal",
    "OutlierSpec",
    "PerformanceDataConfig",
    "PersonnelDataConfig",
    "Poisson",
    # Generators
    "generate_performance_data",
    "generate_personnel_data",
    "inject_outliers",
    "save_dataset",
]
