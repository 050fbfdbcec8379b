from pathlib import Path
import os
import shutil
import tempfile
import pytest

# Point the app at a throwaway database and upload folder before it is imported.
_TMP = Path(tempfile.mkdtemp(prefix="portal-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP / 'test.db'}"
os.environ["UPLOAD_DIR"] = str(_TMP / "uploads")


@pytest.fixture(scope="session", autouse=True)
def cleanup_tmp():
    """Remove the temporary database and uploads after the run."""
    yield
    shutil.rmtree(_TMP, ignore_errors=True)


@pytest.fixture
def upload_dir() -> Path:
    return Path(os.environ["UPLOAD_DIR"])
