from datetime import datetime, timezone

from src.database.config import DATABASE_PATH
from src.database.models import AnalysisRun, Base, DatasetKind, RunStatus
from src.database.session import SessionLocal, engine


def init_db() -> None:
    """Initialize the database, creating tables if they don't exist."""
    DATABASE_PATH.parent.mkdir(parents=True, exist_ok=True)
    Base.metadata.create_all(engine)


# ─────────────────────────────────────────────────────────────────────────────
# Analysis run operations
# ─────────────────────────────────────────────────────────────────────────────


def get_run_by_id(run_id: int, session_factory=SessionLocal) -> AnalysisRun | None:
    """Look up an analysis run by its database ID."""
    with session_factory() as session:
        return session.query(AnalysisRun).filter(AnalysisRun.id == run_id).first()


def get_all_runs(
    status: RunStatus | None = None,
    kind: DatasetKind | None = None,
    session_factory=SessionLocal,
) -> list[AnalysisRun]:
    """
    Get all analysis runs, newest first, optionally filtered by status and/or kind.

    Args:
        status: Filter by run status (SUCCESS or FAILED)
        kind: Filter by dataset kind

    Returns:
        List of AnalysisRun records
    """
    with session_factory() as session:
        query = session.query(AnalysisRun)
        if status is not None:
            query = query.filter(AnalysisRun.status == status)
        if kind is not None:
            query = query.filter(AnalysisRun.kind == kind)
        return query.order_by(AnalysisRun.run_at.desc(), AnalysisRun.id.desc()).all()


def add_run(
    dataset_path: str,
    kind: DatasetKind,
    status: RunStatus,
    results_json: dict | None = None,
    report_path: str | None = None,
    error_msg: str | None = None,
    session_factory=SessionLocal,
) -> AnalysisRun:
    """
    Record an analysis run.

    Args:
        dataset_path: Path of the analyzed CSV file
        kind: DatasetKind.PERFORMANCE or DatasetKind.PERSONNEL
        status: RunStatus.SUCCESS or RunStatus.FAILED
        results_json: Headline results (if successful)
        report_path: HTML report path (if one was rendered)
        error_msg: Error message (if failed)

    Returns:
        The created AnalysisRun record
    """
    with session_factory() as session:
        run = AnalysisRun(
            dataset_path=dataset_path,
            kind=kind,
            status=status,
            run_at=datetime.now(timezone.utc),
            results_json=results_json,
            report_path=report_path,
            error_msg=error_msg,
        )
        session.add(run)
        session.commit()
        session.refresh(run)
        return run
