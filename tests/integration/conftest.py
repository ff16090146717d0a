import logging
from collections.abc import Generator
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def _restore_log_handlers() -> Generator[None, None, None]:
    """The CLI attaches a stdout handler bound to the captured stream; drop it afterwards."""
    logger = logging.getLogger("legallens")
    handlers = list(logger.handlers)
    level = logger.level
    yield
    logger.handlers = handlers
    logger.setLevel(level)


@pytest.fixture()
def cli_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the CLI at a fresh storage dir and the offline example provider."""
    storage_dir = tmp_path / "data"
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("STORAGE_DIR", str(storage_dir))
    monkeypatch.setenv("ANALYSIS_PROVIDER", "example")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    return storage_dir
