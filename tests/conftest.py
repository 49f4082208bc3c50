"""Shared test fixtures and configuration."""

import logging
import os
from pathlib import Path
import sys

import pytest


SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))


# Pin every setting so a developer's shell or .env cannot leak into tests
TEST_ENV = {
    "INVERTED_SEARCH_CONFIG_PATH": "config.json",
    "INVERTED_SEARCH_REQUESTS_PATH": "requests.json",
    "INVERTED_SEARCH_ANSWERS_PATH": "answers.json",
    "INVERTED_SEARCH_LOG_LEVEL": "info",
    "INVERTED_SEARCH_JSON_LOGS": "false",
    "INVERTED_SEARCH_INDEX_WORKERS": "4",
}

for key, value in TEST_ENV.items():
    os.environ[key] = value


LONDON_DOCUMENTS = [
    "london is the capital of great britain",
    "big ben is in london",
]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Reset settings environment variables before each test."""
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo handler changes made by configure_logging()."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def london_documents() -> list[str]:
    return list(LONDON_DOCUMENTS)
