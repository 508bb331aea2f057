import os
from typing import Annotated, Literal, Union

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, model_validator

# Default seed (can be overridden via environment variable)
DEFAULT_SEED = int(os.getenv("PERF_EDA_SEED", "42"))

TRAINING_PROGRAMS = ("Advanced Tactical", "Leadership", "Technical Skills", "Basic Training")


# ---------- Distributions ----------


class LogNormal(BaseModel):
    model_config = ConfigDict(extra="forbid")

    kind: Literal["lognormal"] = "lognormal"
    meanlog: float
    sdlog: float = Field(gt=0)

    def sample(self, rng: np.random.Generator, size: int) -> np.ndarray:
        return rng.lognormal(mean=self.meanlog, sigma=self.sdlog, size=size)


class Poisson(BaseModel):
    model_config = ConfigDict(extra="forbid")

    kind: Literal["poisson"] = "poisson"
    lam: float = Field(gt=0)

    def sample(self, rng: np.random.Generator, size: int) -> np.ndarray:
        return rng.poisson(lam=self.lam, size=size)


class Beta(BaseModel):
    model_config = ConfigDict(extra="forbid")

    kind: Literal["beta"] = "beta"
    shape1: float = Field(gt=0)
    shape2: float = Field(gt=0)

    def sample(self, rng: np.random.Generator, size: int) -> np.ndarray:
        return rng.beta(a=self.shape1, b=self.shape2, size=size)


class Normal(BaseModel):
    model_config = ConfigDict(extra="forbid")

    kind: Literal["normal"] = "normal"
    mean: float
    sd: float = Field(gt=0)

    def sample(self, rng: np.random.Generator, size: int) -> np.ndarray:
        return rng.normal(loc=self.mean, scale=self.sd, size=size)


Distribution = Annotated[Union[LogNormal, Poisson, Beta, Normal], Field(discriminator="kind")]


# ---------- Outliers ----------


class OutlierSpec(BaseModel):
    """Which rows get perturbed and by how much."""

    model_config = ConfigDict(extra="forbid")

    fraction: float = Field(default=0.10, ge=0, le=1)
    target_column: str = "response_time_ms"
    multiplier_range: tuple[float, float] = (3.0, 8.0)
    shift_column: str | None = "error_rate"
    shift_range: tuple[float, float] = (0.1, 0.3)

    @model_validator(mode="after")
    def _check_ranges(self):
        for name in ("multiplier_range", "shift_range"):
            low, high = getattr(self, name)
            if low > high:
                raise ValueError(f"{name} lower bound ({low}) exceeds upper bound ({high})")
        return self

    def n_outliers(self, n_records: int) -> int:
        return int(round(n_records * self.fraction))


# ---------- Datasets ----------


def _default_performance_metrics() -> dict:
    return {
        "response_time_ms": LogNormal(meanlog=4.5, sdlog=0.8),
        "throughput_ops": Poisson(lam=450),
        "error_rate": Beta(shape1=1, shape2=50),
        "cpu_usage": Beta(shape1=5, shape2=3),
        "memory_usage_mb": Normal(mean=2048, sd=512),
        "success_rate": Beta(shape1=95, shape2=5),
        "latency_p95_ms": LogNormal(meanlog=5.2, sdlog=0.6),
        "concurrent_users": Poisson(lam=75),
    }


class PerformanceDataConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    n_records: int = Field(default=1000, ge=1)
    seed: int = DEFAULT_SEED
    start: str = "2024-01-01 00:00:00"
    freq: str = "h"
    metrics: dict[str, Distribution] = Field(default_factory=_default_performance_metrics)
    outliers: OutlierSpec = Field(default_factory=OutlierSpec)

    @model_validator(mode="after")
    def _check_outlier_columns(self):
        if self.outliers.fraction > 0:
            missing = [
                c
                for c in (self.outliers.target_column, self.outliers.shift_column)
                if c is not None and c not in self.metrics
            ]
            if missing:
                raise ValueError(f"Outlier columns not among generated metrics: {missing}")
        return self


def _default_personnel_metrics() -> dict:
    return {
        "performance_score": Normal(mean=75, sd=15),
        "training_hours": Normal(mean=120, sd=30),
        "experience_years": Poisson(lam=3),
        "practical_hours": Normal(mean=60, sd=20),
    }


def _default_program_effects() -> dict:
    return {
        "Advanced Tactical": 10.0,
        "Leadership": 8.0,
        "Technical Skills": 5.0,
        "Basic Training": 0.0,
    }


class PersonnelDataConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    n_records: int = Field(default=500, ge=1)
    seed: int = DEFAULT_SEED
    group_column: str = "training_program"
    groups: tuple[str, ...] = Field(default=TRAINING_PROGRAMS, min_length=1)
    score_column: str = "performance_score"
    metrics: dict[str, Distribution] = Field(default_factory=_default_personnel_metrics)
    # Additive shift of the score column per group; unlisted groups get 0
    group_effects: dict[str, float] = Field(default_factory=_default_program_effects)
    include_dates: bool = False
    date_start: str = "2024-01-01 00:00:00"
    date_span_days: int = Field(default=365, ge=1)

    @model_validator(mode="after")
    def _check_columns(self):
        if self.score_column not in self.metrics:
            raise ValueError(f"Score column '{self.score_column}' is not a generated metric")
        unknown = set(self.group_effects) - set(self.groups)
        if unknown:
            raise ValueError(f"Effects given for unknown groups: {sorted(unknown)}")
        return self
