"""
conftest.py – central pytest configuration and test bootstrap.

Pytest imports this module before it collects any test files, which lets us
prepare the environment so that imports of the application packages succeed:
1) Extend `sys.path` with the project root so absolute imports like `from core ...`
   and `from commands ...` resolve without an editable install.
2) Disable file logging (`LOG_FILE_PATH=""`) before `config` is imported, so tests
   never write log files into the repository.

Shared fixtures build throwaway workspaces and literal context snapshots.
"""

import os
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ.setdefault("LOG_FILE_PATH", "")

from core.context import SessionContext  # noqa: E402


@pytest.fixture
def workspace(tmp_path):
    """A project workspace with one existing block ('hero') and one knowledge document."""
    (tmp_path / "blocks" / "hero").mkdir(parents=True)
    (tmp_path / "blocks" / "hero" / "hero.js").write_text("export default function decorate(block) {}\n")
    (tmp_path / "blocks" / "cards").mkdir(parents=True)
    (tmp_path / "AGENTS.md").write_text("# Project guide\n\nBlocks live in blocks/.\n", encoding="utf-8")
    return tmp_path


@pytest.fixture
def context(workspace):
    """A fresh session context rooted at the test workspace."""
    return SessionContext.new("test-session", str(workspace))
