"""
Console reporting for harness runs.

Every user-facing line the harness prints goes through ConsoleReporter so
tests can capture it with an io.StringIO stream.
"""

import sys
from enum import Enum
from pathlib import Path
from typing import TextIO

from src.domain.errors import HarnessError
from src.domain.schemas import CapturedOutput, RunSummary, TestCase, Verdict

from .compare import diff_lines
from .normalize import trim

DOTTED_LINE = "-" * 60


class Level(str, Enum):
    """Severity of a block of captured output."""
    FAIL = "fail"
    WARN = "warn"


class ConsoleReporter:
    """
    Render progress, diagnostics and diffs.

    Usage:
        reporter = ConsoleReporter()          # sys.stdout
        reporter = ConsoleReporter(io.StringIO())
    """

    def __init__(self, stream: TextIO | None = None):
        self.stream = stream or sys.stdout

    def _print(self, text: str = "", end: str = "\n") -> None:
        print(text, end=end, file=self.stream)

    # =========================================================================
    # Run-level events
    # =========================================================================

    def prepare_fail(self, err: HarnessError) -> None:
        if err.already_printed:
            return
        self._print(f"ERROR: {err}")
        self._print()

    def no_tests_enabled(self) -> None:
        self._print("There are no tests enabled yet.")

    def summary(self, summary: RunSummary) -> None:
        self._print()
        if summary.failures:
            self._print(f"{summary.failures} of {summary.total} tests failed")
        else:
            self._print(f"{summary.total} tests passed")

    # =========================================================================
    # Per-test events
    # =========================================================================

    def begin_test(self, test: TestCase, show_expected: bool) -> None:
        """
        Start a progress line.

        When the case set mixes kinds, the file name is shown together with
        the expected outcome; otherwise the full path.
        """
        if show_expected:
            display_name = test.path.name or test.display_name
        else:
            display_name = test.display_name

        line = f"test {display_name}"
        if show_expected:
            line += f" [{test.expected.label}]"
        self._print(f"{line} ... ", end="")

    def ok(self) -> None:
        self._print("ok")

    def test_fail(self, err: HarnessError | Verdict) -> None:
        if isinstance(err, HarnessError) and err.already_printed:
            return
        message = err.message if isinstance(err, Verdict) else str(err)
        self._print("error")
        self._print(message)
        self._print()

    def failed_to_build(self, stderr: str) -> None:
        self._print("error")
        self._snippet(stderr)
        self._print()

    def should_not_have_compiled(self) -> None:
        self._print("error")
        self._print("Expected test case to fail to compile, but it succeeded.")
        self._print()

    def begin_stream_checks(self) -> None:
        self._print()

    def output_prefix(self, stream_name: str) -> None:
        self._print(f"{stream_name} ... ", end="")

    def write_wip(self, wip_path: Path, path: Path, content: str) -> None:
        self._print("wip")
        self._print()
        self._print(f"NOTE: writing the following output to `{wip_path}`.")
        self._print(f"Move this file to `{path}` to accept it as correct.")
        self._snippet(content)
        self._print()

    def overwrite(self, path: Path, content: str) -> None:
        self._print("wip")
        self._print()
        self._print(f"NOTE: writing the following output to `{path}`.")
        self._snippet(content)
        self._print()

    def mismatch(self, expected: str, actual: str) -> None:
        self._print("mismatch")
        self._print()
        self._print("EXPECTED:")
        self._snippet(expected)
        self._print()
        self._print("ACTUAL OUTPUT:")
        self._snippet(actual)
        self._print()
        self._print("DIFF: -expected +actual")
        self._print(DOTTED_LINE)
        for tag, line in diff_lines(expected, actual):
            self._print(f"{tag}{line}")
        self._print(DOTTED_LINE)
        self._print()

    def output(self, warnings: str, output: CapturedOutput) -> None:
        """Report the combined result of running a test case."""
        stdout = trim(output.stdout)
        stderr = trim(output.stderr)
        has_output = bool(stdout or stderr)

        if output.success:
            self.ok()
            if has_output or warnings:
                self._print()
        else:
            self._print("error")
            if has_output:
                self._print("Test case failed at runtime.")
            else:
                self._print("Execution of the test case was unsuccessful but there was no output.")
            self._print()

        self.warnings(warnings)

        for name, content in (("STDOUT", stdout), ("STDERR", stderr)):
            if content:
                self._print(f"{name}:")
                self._snippet(content)
                self._print()

    def fail_output(self, level: Level, stdout: bytes) -> None:
        if not stdout:
            return
        label = "STDOUT:" if level is Level.FAIL else "STDOUT (warning):"
        self._print(label)
        self._snippet(trim(stdout))
        self._print()

    def warnings(self, warnings: str) -> None:
        if not warnings:
            return
        self._print("WARNINGS:")
        self._snippet(warnings)
        self._print()

    def _snippet(self, content: str) -> None:
        self._print(DOTTED_LINE)
        for line in content.splitlines():
            self._print(line)
        self._print(DOTTED_LINE)
