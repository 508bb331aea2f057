from src.database.models import AnalysisRun, Base, DatasetKind, RunStatus
from src.database.operations import (
    add_run,
    get_all_runs,
    get_run_by_id,
    init_db,
)
from src.database.session import SessionLocal, engine

__all__ = [
    # Models
    "AnalysisRun",
    "Base",
    "DatasetKind",
    "RunStatus",
    # Session
    "engine",
    "SessionLocal",
    # Run operations
    "add_run",
    "get_all_runs",
    "get_run_by_id",
    # Database init
    "init_db",
]
