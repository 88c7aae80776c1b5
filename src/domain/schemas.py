"""
Data schemas for the harness.

Rules:
- TestCase and CapturedOutput are immutable once constructed
- Verdict is the only per-case result; the orchestrator tallies failures
- Enum values are the strings used in suite files and the run log
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any

from .constants import CASE_NAME_PREFIX, GLOB_INDEX_WIDTH

# =============================================================================
# Enums
# =============================================================================

class Expected(str, Enum):
    """
    Declared outcome of a test case.

    pass: builds, runs and exits successfully
    compile_fail: fails to build; build stderr is checked against .stderr
    output: builds and runs; run stderr/stdout are checked against .stderr/.stdout
    """
    PASS = "pass"
    COMPILE_FAIL = "compile_fail"
    OUTPUT = "output"

    @property
    def label(self) -> str:
        """Human-readable description shown next to the test name."""
        return {
            Expected.PASS: "should pass",
            Expected.COMPILE_FAIL: "should fail to compile",
            Expected.OUTPUT: "should produce output",
        }[self]


class UpdateMode(str, Enum):
    """
    How mismatching or missing expectations are resolved.

    wip: write candidates to the staging directory, fail the test
    overwrite: write the preferred variation over the expectation file
    """
    STAGE = "wip"
    OVERWRITE = "overwrite"


class FailureReason(str, Enum):
    """Why a test case failed."""
    # Expectation errors
    MISSING = "missing"
    MISMATCH = "mismatch"
    # Classification errors
    BUILD_FAILED = "build_failed"
    RUN_FAILED = "run_failed"
    UNEXPECTED_SUCCESS = "unexpected_success"
    # User input / infrastructure errors
    PATH_NOT_FOUND = "path_not_found"
    BAD_GLOB = "bad_glob"
    IO_ERROR = "io_error"


# =============================================================================
# Core Schemas
# =============================================================================

def generate_case_name(index: int) -> str:
    """
    Generated name for the `index`-th declared case.

    Format: golden{index:03d}

    The name doubles as the built binary name, so it must not occur in
    ordinary diagnostics (it is replaced with $CRATE during normalization).
    """
    return f"{CASE_NAME_PREFIX}{index:0{GLOB_INDEX_WIDTH}d}"


@dataclass(frozen=True)
class TestCase:
    """
    A single test case.

    `name` is unique within a run; glob expansion assigns `{name}-{index:03d}`.
    """
    __test__ = False  # not a pytest class

    name: str
    path: Path
    expected: Expected

    @property
    def display_name(self) -> str:
        return self.path.as_posix()


@dataclass(frozen=True)
class CapturedOutput:
    """
    Captured result of one build or run invocation.

    Produced by a runner, consumed once by the orchestrator.
    """
    success: bool
    stdout: bytes = b""
    stderr: bytes = b""

    def with_stdout_prefix(self, prefix: bytes) -> "CapturedOutput":
        """Return a copy whose stdout is `prefix + stdout`."""
        return replace(self, stdout=prefix + self.stdout)


@dataclass(frozen=True)
class Verdict:
    """Per-case outcome."""
    ok: bool
    reason: FailureReason | None = None
    message: str = ""

    @classmethod
    def passed(cls) -> "Verdict":
        return cls(ok=True)

    @classmethod
    def failed(cls, reason: FailureReason, message: str = "") -> "Verdict":
        return cls(ok=False, reason=reason, message=message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "reason": self.reason.value if self.reason else None,
            "message": self.message,
        }


@dataclass
class RunSummary:
    """Aggregated result of one harness run."""
    total: int = 0
    failures: int = 0
    verdicts: dict[str, Verdict] = field(default_factory=dict)

    @property
    def passed(self) -> bool:
        return self.failures == 0

    def record(self, name: str, verdict: Verdict) -> None:
        self.verdicts[name] = verdict
        if not verdict.ok:
            self.failures += 1
