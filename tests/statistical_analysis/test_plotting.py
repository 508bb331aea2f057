"""Tests for plotting module."""

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import pytest  # noqa: E402

from src.data_generation import (  # noqa: E402
    PerformanceDataConfig,
    PersonnelDataConfig,
    generate_performance_data,
    generate_personnel_data,
)
from src.statistical_analysis.pipeline import (  # noqa: E402
    run_performance_pipeline,
    run_personnel_pipeline,
)
from src.statistical_analysis.plotting import (  # noqa: E402
    DEFAULT_THEME,
    PlotTheme,
    plot_correlation_heatmap,
    plot_pipeline_output,
)


def test_plot_correlation_heatmap_saves_figure(tmp_path):
    df = generate_personnel_data(PersonnelDataConfig(n_records=100))
    output = run_personnel_pipeline(df)

    save_path = tmp_path / "heatmap.png"
    plot_correlation_heatmap(output["correlation"], PlotTheme(dpi=50), save_path=str(save_path))

    assert save_path.exists()
    assert save_path.stat().st_size > 0


def test_theme_does_not_leak_into_global_state(tmp_path):
    before = dict(plt.rcParams)
    df = generate_personnel_data(PersonnelDataConfig(n_records=50))
    output = run_personnel_pipeline(df)
    plot_correlation_heatmap(output["correlation"], PlotTheme(dpi=50), str(tmp_path / "a.png"))
    assert plt.rcParams["axes.spines.top"] == before["axes.spines.top"]
    assert plt.rcParams["legend.frameon"] == before["legend.frameon"]


@pytest.mark.parametrize("with_dates", [False, True])
def test_plot_pipeline_output_personnel(tmp_path, with_dates):
    df = generate_personnel_data(PersonnelDataConfig(n_records=120, include_dates=with_dates))
    output = run_personnel_pipeline(df)

    paths = plot_pipeline_output(output, df, "personnel", tmp_path, PlotTheme(dpi=50))

    assert len(paths) == (4 if with_dates else 3)
    for path in paths:
        assert (tmp_path / path.split("/")[-1]).exists()


def test_plot_pipeline_output_performance(tmp_path):
    df = generate_performance_data(PerformanceDataConfig(n_records=200))
    output = run_performance_pipeline(df)

    paths = plot_pipeline_output(output, df, "performance", tmp_path, PlotTheme(dpi=50))

    assert [p.split("/")[-1] for p in paths] == [
        "performance_threshold.png",
        "performance_correlation_heatmap.png",
        "performance_hourly.png",
    ]


def test_plot_pipeline_output_unknown_kind_raises(tmp_path):
    with pytest.raises(ValueError, match="Unknown dataset kind"):
        plot_pipeline_output({}, None, "weather", tmp_path, DEFAULT_THEME)
