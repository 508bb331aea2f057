import os
import tempfile

# Keep the run ledger and generated files out of the working tree
_TEST_DATA_DIR = tempfile.mkdtemp(prefix="perf_eda_tests_")
os.environ.setdefault("PERF_EDA_DATA_DIR", _TEST_DATA_DIR)
os.environ.setdefault("PERF_EDA_DB_PATH", os.path.join(_TEST_DATA_DIR, "analysis_runs.sqlite"))
