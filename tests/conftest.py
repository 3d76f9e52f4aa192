# tests/conftest.py

"""Shared pytest fixtures for all catalog_browser tests."""

from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest

from src.config.settings import Settings


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path: Path) -> Generator[None, None, None]:
    """Point reminder and log output at a per-test temp directory."""
    with patch.object(
        Settings, "REMINDERS_DIR", tmp_path / "reminders"
    ), patch.object(Settings, "LOGS_DIR", tmp_path / "logs"):
        yield
