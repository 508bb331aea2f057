import os
import pathlib

_default_data_dir = pathlib.Path(__file__).parent.parent.parent / "data"
DATA_DIR = pathlib.Path(os.getenv("PERF_EDA_DATA_DIR", str(_default_data_dir)))
DATABASE_PATH = pathlib.Path(
    os.getenv("PERF_EDA_DB_PATH", str(DATA_DIR / "analysis_runs.sqlite"))
)
DATABASE_URL = f"sqlite:///{DATABASE_PATH}"
