import enum
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, Enum, Integer, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


class RunStatus(enum.Enum):
    SUCCESS = "success"
    FAILED = "failed"


class DatasetKind(enum.Enum):
    PERFORMANCE = "performance"
    PERSONNEL = "personnel"


class AnalysisRun(Base):
    __tablename__ = "analysis_runs"

    id = Column(Integer, primary_key=True)
    dataset_path = Column(Text, index=True, nullable=False)
    kind = Column(Enum(DatasetKind), nullable=False)
    status = Column(Enum(RunStatus), nullable=False)
    run_at = Column(DateTime(timezone=True), default=_utc_now, nullable=False)
    results_json = Column(JSON)  # Headline results (null if failed)
    report_path = Column(Text)  # HTML report the run was rendered into, if any
    error_msg = Column(Text)  # Error message if failed
