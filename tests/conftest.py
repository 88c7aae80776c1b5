"""
Pytest fixtures for the golden harness tests.

Test layout:
- unit/: one module per source module, isolated with tmp_path
- integration/: whole harness runs against MemoryRunner / real subprocesses
"""

import io
from collections.abc import Generator
from pathlib import Path

import pytest

from src.core.config import HarnessConfig
from src.domain.constants import (
    CI_INDICATORS,
    ENV_FILTER,
    ENV_PROJECT_NAME,
    ENV_RUN_LOG_DIR,
    ENV_SOURCE_DIR,
    ENV_STAGING_DIR,
    ENV_UPDATE_MODE,
    SELF_TEST_PROJECT_NAME,
)
from src.domain.schemas import UpdateMode
from src.runners.memory import MemoryRunner
from src.testing.golden.expectations import ExpectationStore
from src.testing.golden.message import ConsoleReporter

# =============================================================================
# Environment
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Hide harness variables and CI indicators from the host environment."""
    for name in (
        ENV_UPDATE_MODE,
        ENV_FILTER,
        ENV_STAGING_DIR,
        ENV_RUN_LOG_DIR,
        ENV_PROJECT_NAME,
        ENV_SOURCE_DIR,
        *CI_INDICATORS,
    ):
        monkeypatch.delenv(name, raising=False)


# =============================================================================
# Workspace Fixtures
# =============================================================================


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[Path, None, None]:
    """
    Project directory used as the working directory.

    Contains:
    - tests/ui/ (compile-fail cases)
    - tests/run/ (pass / output cases)
    """
    root = tmp_path / "project"
    (root / "tests" / "ui").mkdir(parents=True)
    (root / "tests" / "run").mkdir(parents=True)
    monkeypatch.chdir(root)
    yield root


@pytest.fixture
def write_case(workspace: Path):
    """Create a test source file (relative to the workspace) and return its relative path."""

    def _write(relative: str, content: str = "fn main() {}\n") -> Path:
        path = Path(relative)
        (workspace / path).parent.mkdir(parents=True, exist_ok=True)
        (workspace / path).write_text(content, encoding="utf-8")
        return path

    return _write


# =============================================================================
# Harness Collaborators
# =============================================================================


@pytest.fixture
def stream() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def reporter(stream: io.StringIO) -> ConsoleReporter:
    return ConsoleReporter(stream)


@pytest.fixture
def store(workspace: Path) -> ExpectationStore:
    return ExpectationStore(staging_dir=workspace / "wip", lock_dir=workspace / ".locks")


@pytest.fixture
def memory_runner() -> MemoryRunner:
    return MemoryRunner()


@pytest.fixture
def make_config(workspace: Path):
    """HarnessConfig factory rooted at the workspace."""

    def _make(**overrides) -> HarnessConfig:
        values = {
            "project_name": "golden-tests",
            "source_dir": workspace,
            "update_mode": UpdateMode.STAGE,
            "staging_dir": workspace / "wip",
        }
        values.update(overrides)
        return HarnessConfig(**values)

    return _make


@pytest.fixture
def self_test_config(make_config) -> HarnessConfig:
    """Config whose failures do not raise, so run() returns the summary."""
    return make_config(project_name=SELF_TEST_PROJECT_NAME)
