"""Unit tests for database operations."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from src.database.models import AnalysisRun, Base, DatasetKind, RunStatus
from src.database.operations import add_run, get_all_runs, get_run_by_id


@pytest.fixture
def test_db():
    """Create an in-memory SQLite database for testing."""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    TestSession = sessionmaker(bind=engine, expire_on_commit=False)
    return TestSession


@pytest.fixture
def session(test_db):
    """Provide a database session for testing."""
    session = test_db()
    yield session
    session.close()


class TestAnalysisRunModel:
    def test_create_successful_run(self, session):
        run = AnalysisRun(
            dataset_path="data/raw/sample_performance_data.csv",
            kind=DatasetKind.PERFORMANCE,
            status=RunStatus.SUCCESS,
            results_json={"n_records": 1000, "threshold": 612.4},
        )
        session.add(run)
        session.commit()

        result = session.query(AnalysisRun).first()
        assert result.dataset_path == "data/raw/sample_performance_data.csv"
        assert result.status == RunStatus.SUCCESS
        assert result.results_json["n_records"] == 1000
        assert result.run_at is not None

    def test_create_failed_run(self, session):
        run = AnalysisRun(
            dataset_path="missing.csv",
            kind=DatasetKind.PERSONNEL,
            status=RunStatus.FAILED,
            error_msg="Input file not found: missing.csv",
        )
        session.add(run)
        session.commit()

        result = session.query(AnalysisRun).first()
        assert result.status == RunStatus.FAILED
        assert "not found" in result.error_msg
        assert result.results_json is None


class TestRunOperations:
    def test_add_and_get_by_id(self, test_db):
        run = add_run(
            dataset_path="a.csv",
            kind=DatasetKind.PERSONNEL,
            status=RunStatus.SUCCESS,
            results_json={"p_value": 0.01},
            report_path="docs/index.html",
            session_factory=test_db,
        )

        fetched = get_run_by_id(run.id, session_factory=test_db)
        assert fetched.dataset_path == "a.csv"
        assert fetched.report_path == "docs/index.html"
        assert fetched.results_json == {"p_value": 0.01}

    def test_get_by_unknown_id_returns_none(self, test_db):
        assert get_run_by_id(999, session_factory=test_db) is None

    def test_filters_and_order(self, test_db):
        first = add_run("a.csv", DatasetKind.PERFORMANCE, RunStatus.SUCCESS, session_factory=test_db)
        add_run("b.csv", DatasetKind.PERSONNEL, RunStatus.FAILED, session_factory=test_db)
        last = add_run("c.csv", DatasetKind.PERSONNEL, RunStatus.SUCCESS, session_factory=test_db)

        all_runs = get_all_runs(session_factory=test_db)
        assert [r.dataset_path for r in all_runs][0] == last.dataset_path
        assert len(all_runs) == 3

        successes = get_all_runs(status=RunStatus.SUCCESS, session_factory=test_db)
        assert {r.dataset_path for r in successes} == {first.dataset_path, last.dataset_path}

        personnel_failed = get_all_runs(
            status=RunStatus.FAILED, kind=DatasetKind.PERSONNEL, session_factory=test_db
        )
        assert [r.dataset_path for r in personnel_failed] == ["b.csv"]


class TestEnums:
    def test_status_values(self):
        assert RunStatus("success") == RunStatus.SUCCESS
        assert RunStatus("failed") == RunStatus.FAILED

    def test_kind_values(self):
        assert DatasetKind("performance") == DatasetKind.PERFORMANCE
        assert DatasetKind("personnel") == DatasetKind.PERSONNEL
