"""
Subprocess runner driven by a toolchain definition.

The toolchain is declared in the suite file (golden.yaml):

    toolchain:
      prepare: ["make", "deps"]                                  # optional, once
      clean: ["rm", "-f", "{work_dir}/{name}"]                   # optional, before each build
      build: ["cc", "{path}", "-o", "{work_dir}/{name}"]
      run: ["{work_dir}/{name}"]
      env: {LC_ALL: C}
      timeout: 60

Placeholders: {path} (absolute source path), {name} (unique case name,
also the generated binary name), {stem}, {work_dir}, {source_dir}.
Commands run with `source_dir` as working directory and stdout/stderr
captured; a non-zero exit is a normal failed outcome, not an error.
"""

import logging
import os
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from src.domain.errors import ErrorCodes, HarnessError
from src.domain.schemas import CapturedOutput, TestCase

from .base import RunnerError, TestRunner

logger = logging.getLogger(__name__)


@dataclass
class Toolchain:
    """Command templates for one build tool."""
    build: list[str]
    run: list[str]
    prepare: list[str] | None = None
    clean: list[str] | None = None
    env: dict[str, str] = field(default_factory=dict)
    timeout: float | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Toolchain":
        """
        Build from a suite file mapping.

        Raises:
            HarnessError: SUITE_INVALID
        """
        if not isinstance(data, dict):
            raise HarnessError(ErrorCodes.SUITE_INVALID, field="toolchain", error="must be a mapping")

        def command(key: str, required: bool) -> list[str] | None:
            value = data.get(key)
            if value is None:
                if required:
                    raise HarnessError(ErrorCodes.SUITE_INVALID, field=f"toolchain.{key}", error="missing")
                return None
            if isinstance(value, str):
                return value.split()
            if isinstance(value, list) and all(isinstance(v, (str, int, float)) for v in value):
                return [str(v) for v in value]
            raise HarnessError(
                ErrorCodes.SUITE_INVALID,
                field=f"toolchain.{key}",
                error="must be a string or a list of strings",
            )

        timeout = data.get("timeout")
        if timeout is not None and (not isinstance(timeout, (int, float)) or timeout <= 0):
            raise HarnessError(ErrorCodes.SUITE_INVALID, field="toolchain.timeout", value=timeout)

        return cls(
            build=command("build", required=True) or [],
            run=command("run", required=True) or [],
            prepare=command("prepare", required=False),
            clean=command("clean", required=False),
            env={str(k): str(v) for k, v in (data.get("env") or {}).items()},
            timeout=float(timeout) if timeout is not None else None,
        )


class CommandRunner(TestRunner):
    """
    Run toolchain commands with subprocess.

    Usage:
        runner = CommandRunner(Toolchain.from_dict(suite["toolchain"]), source_dir)
    """

    def __init__(
        self,
        toolchain: Toolchain,
        source_dir: Path,
        work_dir: Path | None = None,
    ):
        """
        Args:
            toolchain: Command templates
            source_dir: Project directory, used as the working directory
            work_dir: Scratch directory for build products (default: source_dir/target/golden)
        """
        self.toolchain = toolchain
        self.source_dir = source_dir.resolve()
        self.work_dir = (work_dir or self.source_dir / "target" / "golden").resolve()

    # =========================================================================
    # TestRunner
    # =========================================================================

    def prepare(self, tests: list[TestCase]) -> None:
        try:
            self.work_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise RunnerError("PREPARE", f"cannot create {self.work_dir}: {e}") from e

        if not self.toolchain.prepare:
            return

        argv = self._render(self.toolchain.prepare, None)
        logger.info(f"Preparing {len(tests)} test(s): {' '.join(argv)}")
        result = self._exec(argv)
        if not result.success:
            tail = result.stderr.decode("utf-8", errors="replace").strip()[-2000:]
            raise RunnerError("PREPARE", f"prepare command failed: {' '.join(argv)}\n{tail}")

    def build(self, test: TestCase) -> CapturedOutput:
        if self.toolchain.clean:
            argv = self._render(self.toolchain.clean, test)
            try:
                subprocess.run(
                    argv,
                    cwd=self.source_dir,
                    env=self._env(),
                    stdout=subprocess.DEVNULL,
                    stderr=subprocess.DEVNULL,
                    timeout=self.toolchain.timeout,
                    check=False,
                )
            except (OSError, subprocess.TimeoutExpired) as e:
                logger.debug(f"Clean step failed for {test.name}: {e}")

        return self._exec(self._render(self.toolchain.build, test))

    def run(self, test: TestCase) -> CapturedOutput:
        return self._exec(self._render(self.toolchain.run, test))

    # =========================================================================
    # Helpers
    # =========================================================================

    def _render(self, template: list[str], test: TestCase | None) -> list[str]:
        values = {
            "work_dir": str(self.work_dir),
            "source_dir": str(self.source_dir),
        }
        if test is not None:
            path = test.path if test.path.is_absolute() else Path.cwd() / test.path
            values.update(
                path=str(path),
                name=test.name,
                stem=test.path.stem,
            )

        try:
            return [arg.format(**values) for arg in template]
        except (KeyError, IndexError, ValueError) as e:
            raise RunnerError("TEMPLATE", f"bad placeholder in {template!r}: {e}") from e

    def _env(self) -> dict[str, str]:
        env = os.environ.copy()
        env.update(self.toolchain.env)
        return env

    def _exec(self, argv: list[str]) -> CapturedOutput:
        logger.debug(f"exec: {' '.join(argv)}")
        try:
            proc = subprocess.run(
                argv,
                cwd=self.source_dir,
                env=self._env(),
                capture_output=True,
                timeout=self.toolchain.timeout,
                check=False,
            )
        except FileNotFoundError as e:
            raise RunnerError("EXEC", f"command not found: {argv[0]}", argv=argv) from e
        except subprocess.TimeoutExpired as e:
            raise RunnerError(
                "TIMEOUT",
                f"command timed out after {self.toolchain.timeout}s: {' '.join(argv)}",
                argv=argv,
            ) from e
        except OSError as e:
            raise RunnerError("EXEC", f"cannot execute {argv[0]}: {e}", argv=argv) from e

        return CapturedOutput(
            success=proc.returncode == 0,
            stdout=proc.stdout,
            stderr=proc.stderr,
        )
