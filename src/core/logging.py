"""
Run logging: run log schema and per-case records.

A run log is a JSON file (logs_dir/run_<run_id>.json) with one record per
test case, written atomically after the run completes.
"""

import json
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from src.core.fs import atomic_write_json
from src.domain.constants import RUN_ID_PREFIX, RUN_LOG_GLOB
from src.domain.errors import HarnessError
from src.domain.schemas import RunSummary, TestCase, UpdateMode, Verdict

# =============================================================================
# Schemas
# =============================================================================


@dataclass
class CaseLog:
    """One test case outcome."""
    name: str
    path: str
    expected: str
    ok: bool
    reason: str | None = None
    message: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "path": self.path,
            "expected": self.expected,
            "ok": self.ok,
            "reason": self.reason,
            "message": self.message,
        }


@dataclass
class RunLog:
    """One harness run."""
    run_id: str
    project: str
    update_mode: str
    started_at: str
    finished_at: str | None = None
    result: str = "pending"  # pending, passed, failed, aborted
    total: int = 0
    failures: int = 0
    cases: list[CaseLog] = field(default_factory=list)
    error: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "run_id": self.run_id,
            "project": self.project,
            "update_mode": self.update_mode,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "result": self.result,
            "total": self.total,
            "failures": self.failures,
            "cases": [c.to_dict() for c in self.cases],
            "error": self.error,
        }


# =============================================================================
# Run Log Management
# =============================================================================


def generate_run_id() -> str:
    """RUN-{utc timestamp}-{8 hex chars}; sorts by start time."""
    return f"{RUN_ID_PREFIX}{datetime.now(UTC):%Y%m%d%H%M%S}-{uuid.uuid4().hex[:8]}"


def create_run_log(project: str, update_mode: UpdateMode) -> RunLog:
    """
    Create a new RunLog.

    Args:
        project: Project name
        update_mode: Update mode in effect for the run

    Returns:
        Initialized RunLog
    """
    return RunLog(
        run_id=generate_run_id(),
        project=project,
        update_mode=update_mode.value,
        started_at=datetime.now(UTC).isoformat(),
    )


def record_case(run_log: RunLog, test: TestCase, verdict: Verdict) -> None:
    """Append one case outcome."""
    run_log.cases.append(CaseLog(
        name=test.name,
        path=test.display_name,
        expected=test.expected.value,
        **verdict.to_dict(),
    ))


def complete_run_log(run_log: RunLog, summary: RunSummary) -> None:
    """Stamp totals and the final result."""
    run_log.finished_at = datetime.now(UTC).isoformat()
    run_log.total = summary.total
    run_log.failures = summary.failures
    run_log.result = "passed" if summary.passed else "failed"


def abort_run_log(run_log: RunLog, error: HarnessError) -> None:
    """Stamp a run that stopped before every case ran."""
    run_log.finished_at = datetime.now(UTC).isoformat()
    run_log.failures = sum(1 for c in run_log.cases if not c.ok)
    run_log.total = len(run_log.cases)
    run_log.result = "aborted"
    run_log.error = error.to_dict()


def save_run_log(run_log: RunLog, logs_dir: Path) -> Path:
    """
    Save a RunLog to disk.

    Args:
        run_log: RunLog instance
        logs_dir: Directory for run logs

    Returns:
        Path of the written file
    """
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / f"run_{run_log.run_id}.json"
    atomic_write_json(log_path, run_log.to_dict())
    return log_path


def load_run_log(log_path: Path) -> dict[str, Any]:
    """Load a run log file."""
    data: dict[str, Any] = json.loads(log_path.read_text(encoding="utf-8"))
    return data


def list_run_logs(logs_dir: Path) -> list[Path]:
    """
    All run log files in `logs_dir`.

    Returns:
        Log file paths, newest first
    """
    if not logs_dir.exists():
        return []

    logs = list(logs_dir.glob(RUN_LOG_GLOB))
    logs.sort(key=lambda p: p.stat().st_mtime, reverse=True)
    return logs
