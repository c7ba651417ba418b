"""Shared test fixtures and configuration."""

from collections.abc import Callable
import logging
import os
from pathlib import Path

import pytest


# Complete test environment that overrides every FILESEARCH_* setting
TEST_ENV = {
    "FILESEARCH_MAX_FILE_SIZE_BYTES": str(200 * 1024 * 1024),
    "FILESEARCH_ENCODING": "utf-8",
    "FILESEARCH_DEFAULT_WORKERS": "4",
    "FILESEARCH_SHUTDOWN_GRACE_SECONDS": "60",
    "FILESEARCH_PROGRESS_INTERVAL": "50",
    "FILESEARCH_DISPLAY_LIMIT": "200",
    "FILESEARCH_LOG_LEVEL": "info",
    "FILESEARCH_LOG_JSON": "false",
    "FILESEARCH_SERVICE_NAME": "filesearch-tests",
    "FILESEARCH_TRACE_CONSOLE": "false",
}


for key, value in TEST_ENV.items():
    os.environ[key] = value

from filesearch.config import Settings
from filesearch.search.progress import StatusChannel


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Pin every setting to its test value before each test."""
    for optional in ("FILESEARCH_JOIN_TIMEOUT_SECONDS", "FILESEARCH_METRICS_FILE"):
        monkeypatch.delenv(optional, raising=False)
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)


@pytest.fixture
def settings() -> Settings:
    return Settings()  # type: ignore[call-arg]


class RecordingChannel(StatusChannel):
    """Status channel that keeps every status line in memory."""

    def __init__(self) -> None:
        self.lines: list[str] = []
        super().__init__(self.lines.append, log=logging.getLogger("filesearch.tests"))


@pytest.fixture
def channel() -> RecordingChannel:
    return RecordingChannel()


@pytest.fixture
def make_tree(tmp_path: Path) -> Callable[[dict[str, str]], Path]:
    """Write ``{relative path: content}`` under a fresh root and return it."""

    def _make(files: dict[str, str]) -> Path:
        root = tmp_path / "root"
        root.mkdir(exist_ok=True)
        for relative, content in files.items():
            target = root / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return root

    return _make
