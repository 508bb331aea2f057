"""
Report generation for exploratory analysis results.

This module provides functionality to collect pipeline results for several
datasets and render them into a single static HTML report.
"""

import html
import logging
import os
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_REPORT_PATH = "docs/index.html"
SIGNIFICANCE_LEVEL = 0.05

_STYLE = """
body { font-family: sans-serif; margin: 2em auto; max-width: 1100px; color: #222; }
h1, h2, h3 { font-weight: bold; }
table { border-collapse: collapse; margin: 1em 0; }
th, td { border: 1px solid #ccc; padding: 4px 8px; text-align: right; }
th { background: #f0f0f0; }
.error { color: #b00; }
.subtitle { color: #666; }
img { max-width: 100%; margin: 1em 0; }
"""


@dataclass
class DatasetResult:
    """Results from analyzing a single dataset."""

    dataset_id: str
    source: str
    kind: str
    title: str = None
    output: dict = None
    plot_paths: list = field(default_factory=list)
    error: str = None

    @property
    def anova_p_value(self):
        if self.output and "hypothesis_tests" in self.output:
            return self.output["hypothesis_tests"]["anova"]["p_value"]
        return None


class ReportCollector:
    """Collects analysis results from multiple datasets for report generation."""

    def __init__(self):
        self.results: list[DatasetResult] = []

    def add_result(
        self,
        dataset_id: str,
        source: str,
        kind: str,
        title: str = None,
        output: dict = None,
        plot_paths: list = None,
        error: str = None,
    ):
        """
        Add analysis result for a dataset.

        Parameters
        ----------
        dataset_id : str
            Unique identifier for the dataset.
        source : str
            Source of the dataset (e.g., CSV path).
        kind : str
            "performance" or "personnel".
        title : str, optional
            Display title.
        output : dict, optional
            Output from run_performance_pipeline() or run_personnel_pipeline().
        plot_paths : list of str, optional
            Paths to saved plot images.
        error : str, optional
            Error message if analysis failed.

        Raises
        ------
        ValueError
            If neither output nor error is given.
        """
        if not output and not error:
            raise ValueError(f"Dataset {dataset_id} needs either an output or an error")

        result = DatasetResult(
            dataset_id=dataset_id, source=source, kind=kind, title=title, error=error
        )
        if output and not error:
            result.output = output
            result.plot_paths = list(plot_paths or [])
        self.results.append(result)

    def get_summary_stats(self) -> dict:
        """
        Calculate summary statistics across all datasets.

        Returns
        -------
        dict
            Counts of analyzed, successful, failed and significant datasets.
        """
        successful = [r for r in self.results if r.error is None]
        tested = [r for r in successful if r.anova_p_value is not None]
        significant = [r for r in tested if r.anova_p_value < SIGNIFICANCE_LEVEL]

        return {
            "total_datasets": len(self.results),
            "successful_analyses": len(successful),
            "failed_analyses": len(self.results) - len(successful),
            "tested_datasets": len(tested),
            "significant_datasets": len(significant),
        }


def _fmt(value, digits=4):
    if value is None:
        return "-"
    return f"{value:.{digits}f}"


def _table(df, float_format="{:.3f}"):
    return df.to_html(
        index=False,
        float_format=float_format.format,
        na_rep="NA",
        border=0,
    )


def _performance_section(output):
    lines = []
    lines.append("<h4>Column summaries</h4>")
    lines.append("<table><tr><th>Column</th><th>Min</th><th>Q1</th><th>Median</th>"
                 "<th>Mean</th><th>Q3</th><th>Max</th></tr>")
    for col, s in output["column_summaries"].items():
        cells = "".join(
            f"<td>{s[k]:.3f}</td>" for k in ("min", "q1", "median", "mean", "q3", "max")
        )
        lines.append(f"<tr><th>{html.escape(col)}</th>{cells}</tr>")
    lines.append("</table>")

    high = output["high_latency"]
    lines.append("<h4>High latency operations</h4>")
    lines.append(
        f"<p>Found {high['n_exceeding']} operations with {html.escape(high['column'])} &gt; "
        f"{high['threshold']:.1f} (p{high['percentile'] * 100:g}).</p>"
    )

    if "hourly" in output:
        hourly = output["hourly"]
        best_hour, best_value = hourly["best"]
        worst_hour, worst_value = hourly["worst"]
        lines.append("<h4>Hourly performance</h4>")
        lines.append(
            f"<p>Best hour: {int(best_hour):02d}:00 ({best_value:.1f}). "
            f"Worst hour: {int(worst_hour):02d}:00 ({worst_value:.1f}).</p>"
        )
    return lines


def _personnel_section(output):
    lines = []
    ov = output["overview"]
    lines.append(
        f"<p>Groups: {ov['n_groups']}. Mean {html.escape(ov['value_column'])}: {ov['mean']:.2f} "
        f"(sd {ov['sd']:.2f}, range {ov['min']:.2f} - {ov['max']:.2f}).</p>"
    )
    lines.append("<h4>Group summary</h4>")
    lines.append(_table(output["group_summary"]))

    tests = output["hypothesis_tests"]
    anova = tests["anova"]
    lines.append("<h4>Hypothesis tests</h4>")
    lines.append(
        f"<p>One-way ANOVA: F({anova['df_between']}, {anova['df_within']}) = "
        f"{anova['f_statistic']:.4f}, p = {anova['p_value']:.4g}.<br>"
        f"Effect size (eta<sup>2</sup>): {tests['eta_squared']:.4f} "
        f"({tests['effect_size']} effect).</p>"
    )
    lines.append("<p>Pairwise comparisons (Bonferroni corrected):</p>")
    lines.append(_table(tests["pairwise"], float_format="{:.4g}"))
    return lines


def generate_html_report(collector: ReportCollector, output_path: str = DEFAULT_REPORT_PATH) -> str:
    """
    Generate a static HTML report from collected analysis results.

    Parameters
    ----------
    collector : ReportCollector
        Collector containing analysis results.
    output_path : str, optional
        Path to save the HTML report. Defaults to "docs/index.html".

    Returns
    -------
    str
        Path to the generated report.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    stats = collector.get_summary_stats()
    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")

    lines = []

    # Header
    lines.append("<!DOCTYPE html>")
    lines.append('<html lang="en"><head><meta charset="utf-8">')
    lines.append("<title>Performance Analysis Report</title>")
    lines.append(f"<style>{_STYLE}</style></head><body>")
    lines.append("<h1>Performance Analysis Report</h1>")
    lines.append(f'<p class="subtitle"><strong>Generated:</strong> {timestamp}</p>')

    # Summary section
    lines.append("<h2>Summary</h2>")
    lines.append("<ul>")
    lines.append(f"<li><strong>Datasets analyzed:</strong> {stats['total_datasets']}</li>")
    lines.append(f"<li><strong>Successful analyses:</strong> {stats['successful_analyses']}</li>")
    lines.append(f"<li><strong>Failed analyses:</strong> {stats['failed_analyses']}</li>")
    lines.append(
        f"<li><strong>Significant group differences (p &lt; {SIGNIFICANCE_LEVEL}):</strong> "
        f"{stats['significant_datasets']} of {stats['tested_datasets']}</li>"
    )
    lines.append("</ul>")

    # Results table
    lines.append("<h2>Results Overview</h2>")
    lines.append(
        "<table><tr><th>ID</th><th>Title</th><th>Kind</th><th>Records</th>"
        "<th>ANOVA p-value</th><th>Status</th></tr>"
    )
    for r in collector.results:
        if r.error:
            status = "Error"
            n_records = "-"
        else:
            n_records = str(r.output["overview"]["n_records"])
            status = "OK"
        title_display = r.title or r.source
        if len(title_display) > 40:
            title_display = title_display[:37] + "..."
        lines.append(
            f"<tr><td>{html.escape(r.dataset_id)}</td><td>{html.escape(title_display)}</td>"
            f"<td>{r.kind}</td><td>{n_records}</td><td>{_fmt(r.anova_p_value)}</td>"
            f"<td>{status}</td></tr>"
        )
    lines.append("</table>")

    # Detailed results section
    lines.append("<h2>Detailed Results</h2>")
    for r in collector.results:
        lines.append(f"<h3>Dataset {html.escape(r.dataset_id)}</h3>")
        if r.title:
            lines.append(f"<p><strong>Title:</strong> {html.escape(r.title)}</p>")
        lines.append(f"<p><strong>Source:</strong> {html.escape(r.source)}</p>")

        if r.error:
            lines.append(f'<p class="error"><strong>Error:</strong> {html.escape(r.error)}</p>')
            continue

        if r.kind == "performance":
            lines.extend(_performance_section(r.output))
        elif r.kind == "personnel":
            lines.extend(_personnel_section(r.output))

        if "correlation" in r.output:
            lines.append("<h4>Correlation matrix</h4>")
            lines.append(r.output["correlation"].to_html(float_format="{:.3f}".format, border=0))

        for plot_path in r.plot_paths:
            # Relative path from report location
            rel = os.path.relpath(Path(plot_path).resolve(), output_path.parent.resolve())
            rel = Path(rel).as_posix()
            lines.append(
                f'<img src="{html.escape(rel)}" alt="{html.escape(Path(plot_path).stem)}">'
            )

    lines.append("</body></html>")

    # Write report
    output_path.write_text("\n".join(lines), encoding="utf-8")

    logger.info(f"Report generated: {output_path}")
    return str(output_path)
