import logging
import pathlib
from dataclasses import dataclass

import matplotlib
import matplotlib.pyplot as plt
import numpy as np

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlotTheme:
    """Styling shared by all plots. Passed explicitly to every plotting call."""

    title_size: int = 14
    subtitle_size: int = 11
    subtitle_color: str = "0.4"
    label_weight: str = "bold"
    legend_loc: str = "lower center"
    qualitative_cmap: str = "Set2"
    diverging_cmap: str = "RdBu"
    mean_line_color: str = "red"
    width: float = 10
    height: float = 6
    dpi: int = 300

    def rc_params(self) -> dict:
        return {
            "axes.titlesize": self.subtitle_size,
            "axes.labelweight": self.label_weight,
            "axes.spines.top": False,
            "axes.spines.right": False,
            "axes.grid": True,
            "grid.alpha": 0.3,
            "legend.frameon": False,
        }

    def colors(self, n: int) -> list:
        cmap = matplotlib.colormaps[self.qualitative_cmap]
        return [cmap(i % cmap.N) for i in range(n)]


DEFAULT_THEME = PlotTheme()


def _titles(fig, ax, title, subtitle, theme):
    fig.suptitle(title, fontsize=theme.title_size, fontweight="bold")
    ax.set_title(subtitle, fontsize=theme.subtitle_size, color=theme.subtitle_color)


def _finish(fig, save_path, theme):
    """Save the figure if ``save_path`` is given, otherwise show it."""
    fig.tight_layout()
    if save_path:
        pathlib.Path(save_path).parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(save_path, dpi=theme.dpi, bbox_inches="tight")
        plt.close(fig)
        logger.info(f"Plot saved to {save_path}")
    else:
        plt.show()


def plot_performance_distribution(
    df, group_col, value_col, theme: PlotTheme = DEFAULT_THEME, save_path: str = None
):
    """
    Overlaid histograms of ``value_col`` per group with the overall mean marked.
    """
    with plt.rc_context(theme.rc_params()):
        fig, ax = plt.subplots(figsize=(theme.width, theme.height))
        groups = sorted(df[group_col].dropna().unique(), key=str)
        bins = np.histogram_bin_edges(df[value_col].dropna(), bins=30)

        for color, group in zip(theme.colors(len(groups)), groups):
            values = df.loc[df[group_col] == group, value_col].dropna()
            ax.hist(values, bins=bins, alpha=0.7, color=color, label=str(group))

        ax.axvline(
            df[value_col].mean(),
            color=theme.mean_line_color,
            linestyle="--",
            linewidth=1,
        )
        ax.set_xlabel(value_col.replace("_", " ").title())
        ax.set_ylabel("Frequency")
        ax.legend(title=group_col.replace("_", " ").title(), loc=theme.legend_loc, ncol=len(groups))
        _titles(
            fig,
            ax,
            f"{value_col.replace('_', ' ').title()} Distribution by {group_col.replace('_', ' ').title()}",
            "Dashed line indicates overall mean",
            theme,
        )
        _finish(fig, save_path, theme)


def plot_group_comparison(
    df, group_col, value_col, theme: PlotTheme = DEFAULT_THEME, save_path: str = None
):
    """
    Box plots with jittered points per group, ordered by group median.
    """
    with plt.rc_context(theme.rc_params()):
        fig, ax = plt.subplots(figsize=(theme.width, theme.height))
        medians = df.groupby(group_col)[value_col].median().sort_values()
        groups = list(medians.index)
        data = [df.loc[df[group_col] == g, value_col].dropna().to_numpy() for g in groups]
        positions = np.arange(1, len(groups) + 1)

        boxes = ax.boxplot(data, positions=positions, patch_artist=True, widths=0.6)
        for patch, color in zip(boxes["boxes"], theme.colors(len(groups))):
            patch.set_facecolor(color)
            patch.set_alpha(0.7)

        rng = np.random.default_rng(0)
        for pos, values in zip(positions, data):
            jitter = rng.uniform(-0.2, 0.2, size=len(values))
            ax.scatter(pos + jitter, values, s=4, alpha=0.3, color="black")

        ax.set_xticks(positions)
        ax.set_xticklabels([str(g) for g in groups])
        ax.set_xlabel(group_col.replace("_", " ").title())
        ax.set_ylabel(value_col.replace("_", " ").title())
        _titles(
            fig,
            ax,
            f"{group_col.replace('_', ' ').title()} Effectiveness Comparison",
            "Box plots show median, quartiles, and outliers",
            theme,
        )
        _finish(fig, save_path, theme)


def plot_correlation_heatmap(corr, theme: PlotTheme = DEFAULT_THEME, save_path: str = None):
    """
    Annotated heatmap of a correlation matrix on a fixed [-1, 1] color scale.
    """
    labels = list(corr.columns)
    with plt.rc_context({**theme.rc_params(), "axes.grid": False}):
        size = max(theme.height, 0.8 * len(labels) + 2)
        fig, ax = plt.subplots(figsize=(size + 2, size))
        image = ax.imshow(corr.to_numpy(), cmap=theme.diverging_cmap, vmin=-1, vmax=1)

        for i in range(len(labels)):
            for j in range(len(labels)):
                ax.text(j, i, f"{corr.iat[i, j]:.2f}", ha="center", va="center", fontsize=8)

        ax.set_xticks(np.arange(len(labels)))
        ax.set_yticks(np.arange(len(labels)))
        ax.set_xticklabels(labels, rotation=45, ha="right")
        ax.set_yticklabels(labels)
        fig.colorbar(image, ax=ax, label="Correlation")
        _titles(fig, ax, "Metrics Correlation Heatmap", "Identifying key performance drivers", theme)
        _finish(fig, save_path, theme)


def plot_trends(trend, group_col, theme: PlotTheme = DEFAULT_THEME, save_path: str = None):
    """
    Monthly average per group, as produced by ``monthly_trend``.
    """
    months = sorted(trend["month"].unique())
    x_of = {m: i for i, m in enumerate(months)}
    groups = sorted(trend[group_col].unique(), key=str)

    with plt.rc_context(theme.rc_params()):
        fig, ax = plt.subplots(figsize=(theme.width * 1.2, theme.height))
        for color, group in zip(theme.colors(len(groups)), groups):
            rows = trend[trend[group_col] == group]
            ax.plot(
                [x_of[m] for m in rows["month"]],
                rows["avg_value"],
                marker="o",
                linewidth=1.2,
                color=color,
                label=str(group),
            )
        ax.set_xticks(np.arange(len(months)))
        ax.set_xticklabels(months, rotation=45, ha="right")
        ax.set_xlabel("Month")
        ax.set_ylabel("Average Value")
        ax.legend(loc=theme.legend_loc, ncol=len(groups))
        _titles(
            fig,
            ax,
            "Performance Trends Over Time",
            f"Monthly average by {group_col.replace('_', ' ')}",
            theme,
        )
        _finish(fig, save_path, theme)


def plot_threshold_histogram(
    df, column, threshold, percentile, theme: PlotTheme = DEFAULT_THEME, save_path: str = None
):
    """
    Histogram of ``column`` with the percentile threshold marked.
    """
    with plt.rc_context(theme.rc_params()):
        fig, ax = plt.subplots(figsize=(theme.width, theme.height))
        ax.hist(df[column].dropna(), bins=50, alpha=0.7, color=theme.colors(1)[0])
        ax.axvline(
            threshold,
            color=theme.mean_line_color,
            linestyle="--",
            linewidth=1,
            label=f"p{percentile * 100:g} = {threshold:.1f}",
        )
        ax.set_xlabel(column.replace("_", " "))
        ax.set_ylabel("Frequency")
        ax.legend()
        _titles(
            fig,
            ax,
            f"Distribution of {column.replace('_', ' ')}",
            "Values right of the dashed line are flagged",
            theme,
        )
        _finish(fig, save_path, theme)


def plot_hourly_profile(hourly, value_col, theme: PlotTheme = DEFAULT_THEME, save_path: str = None):
    """
    Bar chart of the hourly mean of ``value_col``.
    """
    with plt.rc_context(theme.rc_params()):
        fig, ax = plt.subplots(figsize=(theme.width, theme.height))
        ax.bar(hourly["hour"], hourly[value_col], color=theme.colors(1)[0], alpha=0.8)
        ax.set_xticks(np.arange(0, 24, 2))
        ax.set_xlabel("Hour of day")
        ax.set_ylabel(f"Mean {value_col.replace('_', ' ')}")
        _titles(fig, ax, "Hourly Performance Profile", "Average by hour of day", theme)
        _finish(fig, save_path, theme)


def plot_pipeline_output(output: dict, df, kind: str, figures_dir, theme: PlotTheme = DEFAULT_THEME):
    """
    Save every plot applicable to a pipeline result.

    Parameters
    ----------
    output : dict
        Result of run_performance_pipeline or run_personnel_pipeline.
    df : pd.DataFrame
        The analyzed dataset.
    kind : str
        "performance" or "personnel".
    figures_dir : str or pathlib.Path
        Directory to save the PNG files into.
    theme : PlotTheme, optional
        Plot styling.

    Returns
    -------
    list of str
        Paths of the saved figures.

    Raises
    ------
    ValueError
        If ``kind`` is unknown.
    """
    figures_dir = pathlib.Path(figures_dir)
    saved = []

    def target(name):
        path = str(figures_dir / f"{kind}_{name}.png")
        saved.append(path)
        return path

    if kind == "performance":
        high = output["high_latency"]
        plot_threshold_histogram(
            df, high["column"], high["threshold"], high["percentile"], theme, target("threshold")
        )
        plot_correlation_heatmap(output["correlation"], theme, target("correlation_heatmap"))
        if "hourly" in output:
            plot_hourly_profile(output["hourly"]["table"], high["column"], theme, target("hourly"))
    elif kind == "personnel":
        group_col = output["overview"]["group_column"]
        value_col = output["overview"]["value_column"]
        plot_performance_distribution(df, group_col, value_col, theme, target("distribution"))
        plot_group_comparison(df, group_col, value_col, theme, target("group_comparison"))
        if "correlation" in output:
            plot_correlation_heatmap(output["correlation"], theme, target("correlation_heatmap"))
        if "monthly_trend" in output:
            plot_trends(output["monthly_trend"], group_col, theme, target("trends"))
    else:
        raise ValueError(f"Unknown dataset kind: {kind}")

    return saved
