import pytest


@pytest.fixture
def write_csv(tmp_path):
    """Write CSV text (or raw bytes) to a file under tmp_path and return its path."""

    def _write(content, name="input.csv"):
        path = tmp_path / name
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    for name in (
        "CSDS_CHUNK_THRESHOLD_MB",
        "CSDS_CHUNK_SIZE",
        "CSDS_OUTPUT_LIMIT_MB",
        "CSDS_ANALYSIS_URL",
        "CSDS_ANALYSIS_TIMEOUT",
        "CSDS_API_KEY",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("TMP_ROOT", str(tmp_path / "uploads"))
