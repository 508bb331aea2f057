import argparse
import logging
import pathlib
import sys

from dotenv import load_dotenv
from pydantic import ValidationError

load_dotenv()

from src.data_generation import (
    DEFAULT_SEED,
    OutlierSpec,
    PerformanceDataConfig,
    PersonnelDataConfig,
    generate_performance_data,
    generate_personnel_data,
    save_dataset,
)
from src.database import add_run, get_all_runs, init_db
from src.database.config import DATA_DIR
from src.database.models import DatasetKind, RunStatus
from src.statistical_analysis.pipeline import run_performance_pipeline, run_personnel_pipeline
from src.statistical_analysis.plotting import (
    DEFAULT_THEME,
    plot_correlation_heatmap,
    plot_group_comparison,
    plot_pipeline_output,
)
from src.statistical_analysis.report import (
    DEFAULT_REPORT_PATH,
    ReportCollector,
    generate_html_report,
)
from src.statistical_analysis.utils import load_dataset

DEFAULT_PATHS = {
    "performance": DATA_DIR / "raw" / "sample_performance_data.csv",
    "personnel": DATA_DIR / "processed" / "performance_data.csv",
}
PROCESSED_DIR = DATA_DIR / "processed"
DATE_COLUMNS = ["timestamp", "date"]
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def configure_logging(log_level: str):
    """Configure logging with the specified level."""
    logging.basicConfig(
        level=getattr(logging, log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        force=True,
    )
    return logging.getLogger(__name__)


def _banner(text: str):
    print("=" * 72)
    print(text)
    print("=" * 72)


def print_performance_output(output: dict):
    """Print the console summary of a performance pipeline result."""
    _banner("PERFORMANCE SUMMARY STATISTICS")
    print(f"{'Column':<20} {'Min':>10} {'Q1':>10} {'Median':>10} {'Mean':>10} {'Q3':>10} {'Max':>10}")
    for col, s in output["column_summaries"].items():
        print(
            f"{col:<20} {s['min']:>10.3f} {s['q1']:>10.3f} {s['median']:>10.3f} "
            f"{s['mean']:>10.3f} {s['q3']:>10.3f} {s['max']:>10.3f}"
        )

    print("\nCorrelation matrix:")
    print(output["correlation"].round(3).to_string())

    high = output["high_latency"]
    print(f"\nHigh latency operations (p{high['percentile'] * 100:g}+):")
    print(
        f"Found {high['n_exceeding']} operations with {high['column']} > {high['threshold']:.1f}"
    )

    if "hourly" in output:
        best_hour, best_value = output["hourly"]["best"]
        worst_hour, worst_value = output["hourly"]["worst"]
        print(f"\nBest hour (lowest {high['column']}): {int(best_hour):02d}:00 ({best_value:.1f})")
        print(f"Worst hour (highest {high['column']}): {int(worst_hour):02d}:00 ({worst_value:.1f})")


def print_personnel_output(output: dict):
    """Print the console summary of a personnel pipeline result."""
    ov = output["overview"]
    _banner("PERSONNEL PERFORMANCE ANALYSIS")
    print(f"Total records: {ov['n_records']}")
    print(f"Variables: {ov['n_variables']}")
    print(f"Groups ({ov['group_column']}): {ov['n_groups']}")
    print(f"Mean {ov['value_column']}: {ov['mean']:.2f}")
    print(f"Std dev: {ov['sd']:.2f}")
    print(f"Range: {ov['min']:.2f} - {ov['max']:.2f}")

    print("\nGroup summary:")
    print(output["group_summary"].round(3).to_string(index=False))

    if "correlation" in output:
        print("\nCorrelation matrix:")
        print(output["correlation"].round(3).to_string())

    tests = output["hypothesis_tests"]
    anova = tests["anova"]
    print("\nANOVA:")
    print(
        f"F({anova['df_between']}, {anova['df_within']}) = {anova['f_statistic']:.4f}, "
        f"p = {anova['p_value']:.4g}"
    )
    print("\nPairwise comparisons (Bonferroni corrected):")
    print(tests["pairwise"].to_string(index=False))
    print(f"\nEffect size (eta^2): {tests['eta_squared']:.4f} ({tests['effect_size']} effect)")


def _headline(output: dict, kind: str) -> dict:
    """JSON-serializable headline numbers of a pipeline result."""
    headline = {"n_records": output["overview"]["n_records"]}
    if kind == "performance":
        high = output["high_latency"]
        headline.update(threshold=high["threshold"], n_exceeding=high["n_exceeding"])
    else:
        tests = output["hypothesis_tests"]
        headline.update(
            f_statistic=tests["anova"]["f_statistic"],
            p_value=tests["anova"]["p_value"],
            eta_squared=tests["eta_squared"],
            effect_size=tests["effect_size"],
        )
    return headline


def _save_summaries(output: dict, kind: str, out_dir: pathlib.Path, logger):
    out_dir.mkdir(parents=True, exist_ok=True)
    if kind == "performance":
        if "hourly" in output:
            path = out_dir / "hourly_performance_summary.csv"
            output["hourly"]["table"].to_csv(path, index=False)
            logger.info(f"Hourly summary saved to: {path}")
    else:
        path = out_dir / "group_summary.csv"
        output["group_summary"].to_csv(path, index=False)
        logger.info(f"Group summary saved to: {path}")
        path = out_dir / "pairwise_comparisons.csv"
        output["hypothesis_tests"]["pairwise"].to_csv(path, index=False)
        logger.info(f"Pairwise comparisons saved to: {path}")


def analyze_dataset(
    csv_path,
    kind: str,
    logger,
    figures_dir=None,
    plot=False,
    save_summary=False,
    report_collector=None,
    dataset_id="1",
    report_path=None,
):
    """
    Load, analyze, print and record one dataset.

    Raises
    ------
    SystemExit
        If the dataset cannot be loaded or analyzed.
    """
    source = str(csv_path)
    logger.info(f"Processing: {source}")

    try:
        df = load_dataset(csv_path, parse_dates=DATE_COLUMNS)
        if kind == "performance":
            output = run_performance_pipeline(df)
        else:
            output = run_personnel_pipeline(df)
    except (FileNotFoundError, ValueError) as e:
        add_run(
            dataset_path=source,
            kind=DatasetKind(kind),
            status=RunStatus.FAILED,
            error_msg=str(e),
        )
        if report_collector is not None:
            report_collector.add_result(dataset_id=dataset_id, source=source, kind=kind, error=str(e))
        raise SystemExit(f"Analysis of {source} failed: {e}")

    if kind == "performance":
        print_performance_output(output)
    else:
        print_personnel_output(output)

    if save_summary:
        _save_summaries(output, kind, PROCESSED_DIR, logger)

    plot_paths = []
    if figures_dir is not None:
        plot_paths = plot_pipeline_output(output, df, kind, figures_dir, DEFAULT_THEME)
    elif plot:
        plot_pipeline_output_interactive(output, df, kind)

    if report_collector is not None:
        report_collector.add_result(
            dataset_id=dataset_id,
            source=source,
            kind=kind,
            title=pathlib.Path(source).name,
            output=output,
            plot_paths=plot_paths,
        )

    add_run(
        dataset_path=source,
        kind=DatasetKind(kind),
        status=RunStatus.SUCCESS,
        results_json=_headline(output, kind),
        report_path=str(report_path) if report_path else None,
    )
    return output


def plot_pipeline_output_interactive(output: dict, df, kind: str):
    """Show the headline plot of a result in an interactive window."""
    if kind == "personnel":
        ov = output["overview"]
        plot_group_comparison(df, ov["group_column"], ov["value_column"], DEFAULT_THEME)
    else:
        plot_correlation_heatmap(output["correlation"], DEFAULT_THEME)


def cmd_generate(args):
    """Generate a synthetic dataset and save it as CSV."""
    logger = configure_logging(args.log_level)

    seed = DEFAULT_SEED if args.seed is None else args.seed
    settings = {} if args.n is None else {"n_records": args.n}

    try:
        if args.kind == "performance":
            if args.outlier_fraction is not None:
                settings["outliers"] = OutlierSpec(fraction=args.outlier_fraction)
            config = PerformanceDataConfig(seed=seed, **settings)
        else:
            if args.outlier_fraction is not None:
                logger.warning(
                    "--outlier-fraction only applies to performance data. Ignoring it."
                )
            config = PersonnelDataConfig(seed=seed, include_dates=args.with_dates, **settings)
    except ValidationError as e:
        raise SystemExit(f"Invalid generator settings: {e}")

    if args.kind == "performance":
        df = generate_performance_data(config)
        print(f"Generated {len(df)} performance records")
        print(f"    Average response time: {df['response_time_ms'].mean():.1f} ms")
        print(f"    Average throughput: {df['throughput_ops'].mean():.0f} ops/sec")
        print(f"    Average error rate: {df['error_rate'].mean() * 100:.2f}%")
    else:
        df = generate_personnel_data(config)
        print(f"Generated {len(df)} personnel records")
        print(f"    Mean performance score: {df['performance_score'].mean():.2f}")

    out_path = save_dataset(df, args.out or DEFAULT_PATHS[args.kind])
    logger.info(f"Data saved to: {out_path}")


def _report_paths(report_arg):
    if report_arg is True:
        return pathlib.Path(DEFAULT_REPORT_PATH)
    return pathlib.Path(report_arg)


def cmd_analyze(args):
    """Run the exploratory analysis pipeline on a CSV file."""
    logger = configure_logging(args.log_level)
    init_db()

    report_collector = ReportCollector() if args.report else None
    report_path = _report_paths(args.report) if args.report else None
    figures_dir = None
    if args.report and args.report_plots:
        figures_dir = report_path.parent / "figures"
    elif args.report_plots:
        logger.warning("--report-plots requires --report. Plots will not be saved.")

    csv_path = pathlib.Path(args.csv) if args.csv else DEFAULT_PATHS[args.kind]

    analyze_dataset(
        csv_path,
        args.kind,
        logger,
        figures_dir=figures_dir,
        plot=args.plot,
        save_summary=args.save_summary,
        report_collector=report_collector,
        report_path=report_path,
    )

    if report_collector:
        generate_html_report(report_collector, str(report_path))
        logger.info(f"Report generated: {report_path}")


def cmd_demo(args):
    """Generate both sample datasets, analyze them and render the HTML report."""
    logger = configure_logging(args.log_level)
    init_db()

    report_path = pathlib.Path(args.report)
    figures_dir = report_path.parent / "figures"
    report_collector = ReportCollector()

    performance_path = save_dataset(generate_performance_data(), DEFAULT_PATHS["performance"])
    personnel_path = save_dataset(
        generate_personnel_data(PersonnelDataConfig(include_dates=args.with_dates)),
        DEFAULT_PATHS["personnel"],
    )

    for idx, (kind, path) in enumerate(
        [("performance", performance_path), ("personnel", personnel_path)], start=1
    ):
        analyze_dataset(
            path,
            kind,
            logger,
            figures_dir=figures_dir,
            save_summary=True,
            report_collector=report_collector,
            dataset_id=str(idx),
            report_path=report_path,
        )

    generate_html_report(report_collector, str(report_path))
    print(f"\nDemo complete. Report: {report_path}")


def cmd_list(args):
    """List all analysis runs in the database."""
    init_db()

    status_filter = RunStatus(args.status) if args.status else None
    runs = get_all_runs(status=status_filter)

    if not runs:
        print("No analysis runs found in database.")
        return

    # Print header
    print(f"\n{'ID':<6} {'Status':<10} {'Kind':<13} {'Run At':<20} {'Dataset'}")
    print("-" * 100)

    for run in runs:
        source = run.dataset_path
        if len(source) > 50:
            source = "..." + source[-47:]
        run_at = run.run_at.strftime("%Y-%m-%d %H:%M") if run.run_at else "N/A"
        print(f"{run.id:<6} {run.status.value:<10} {run.kind.value:<13} {run_at:<20} {source}")

    print(f"\nTotal: {len(runs)} run(s)")


def _add_log_level(parser):
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=LOG_LEVELS,
        help="Set logging level (default: INFO)",
    )


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Performance EDA - Exploratory analysis of performance data",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Generate command
    generate_parser = subparsers.add_parser("generate", help="Generate a synthetic dataset")
    generate_parser.add_argument(
        "kind",
        choices=["performance", "personnel"],
        help="Dataset to generate",
    )
    generate_parser.add_argument("--n", type=int, help="Number of records")
    generate_parser.add_argument("--seed", type=int, help="Random seed (default: 42)")
    generate_parser.add_argument(
        "--outlier-fraction",
        type=float,
        help="Fraction of performance records turned into outliers (default: 0.10)",
    )
    generate_parser.add_argument(
        "--with-dates",
        action="store_true",
        help="Add an evaluation date column to personnel data",
    )
    generate_parser.add_argument("--out", help="Output CSV path")
    _add_log_level(generate_parser)
    generate_parser.set_defaults(func=cmd_generate)

    # Analyze command
    analyze_parser = subparsers.add_parser("analyze", help="Run exploratory analysis on a CSV file")
    analyze_parser.add_argument(
        "--csv",
        help="Path to the CSV file (default: the generated sample for --kind)",
    )
    analyze_parser.add_argument(
        "--kind",
        choices=["performance", "personnel"],
        required=True,
        help="Dataset layout",
    )
    analyze_parser.add_argument(
        "--plot",
        action="store_true",
        help="Show the headline plot interactively",
    )
    analyze_parser.add_argument(
        "--report",
        nargs="?",
        const=True,
        default=False,
        metavar="PATH",
        help=f"Generate an HTML report. Optionally specify output path (default: {DEFAULT_REPORT_PATH})",
    )
    analyze_parser.add_argument(
        "--report-plots",
        action="store_true",
        help="Include plots in the report (requires --report)",
    )
    analyze_parser.add_argument(
        "--save-summary",
        action="store_true",
        help="Save derived summary tables as CSV under data/processed",
    )
    _add_log_level(analyze_parser)
    analyze_parser.set_defaults(func=cmd_analyze)

    # Demo command
    demo_parser = subparsers.add_parser(
        "demo", help="Generate sample data, analyze it and render the HTML report"
    )
    demo_parser.add_argument(
        "--report",
        default=DEFAULT_REPORT_PATH,
        metavar="PATH",
        help=f"Report output path (default: {DEFAULT_REPORT_PATH})",
    )
    demo_parser.add_argument(
        "--with-dates",
        action="store_true",
        help="Add evaluation dates to personnel data to enable trend analysis",
    )
    _add_log_level(demo_parser)
    demo_parser.set_defaults(func=cmd_demo)

    # List command
    list_parser = subparsers.add_parser("list", help="List recorded analysis runs")
    list_parser.add_argument(
        "--status",
        choices=["success", "failed"],
        help="Filter by run status",
    )
    list_parser.set_defaults(func=cmd_list)

    args = parser.parse_args(sys.argv[1:] if argv is None else argv)

    if args.command is None:
        parser.print_help()
        return

    args.func(args)


if __name__ == "__main__":
    main()
