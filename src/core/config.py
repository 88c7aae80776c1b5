"""
Harness configuration.

Everything environment-dependent (update mode, filters, directories) is
read once at process start into a frozen HarnessConfig and threaded
through the harness; nothing below the CLI reads os.environ.
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from src.domain.constants import (
    ARGV_FILTER_PREFIX,
    CI_INDICATORS,
    DEFAULT_STAGING_DIR,
    ENV_FILTER,
    ENV_PROJECT_NAME,
    ENV_RUN_LOG_DIR,
    ENV_SOURCE_DIR,
    ENV_STAGING_DIR,
    ENV_UPDATE_MODE,
    SELF_TEST_PROJECT_NAME,
)
from src.domain.errors import ErrorCodes, HarnessError
from src.domain.schemas import Expected, TestCase, UpdateMode, generate_case_name

logger = logging.getLogger(__name__)

DEFAULT_PROJECT_NAME = "golden-tests"


def filters_from_argv(argv: list[str]) -> list[str]:
    """
    Collect "golden=<substring>" arguments.

        $ pytest tests/test_ui.py -- golden=tuple_structs.rs
    """
    return [
        arg[len(ARGV_FILTER_PREFIX):]
        for arg in argv
        if arg.startswith(ARGV_FILTER_PREFIX) and arg != ARGV_FILTER_PREFIX
    ]


# =============================================================================
# Update Mode
# =============================================================================


def parse_update_mode(value: str | None) -> UpdateMode:
    """
    Parse the update-mode variable.

    Unset or empty means wip.

    Raises:
        HarnessError: UPDATE_VAR_INVALID
    """
    if value is None or value == "":
        return UpdateMode.STAGE
    try:
        return UpdateMode(value)
    except ValueError:
        raise HarnessError(
            ErrorCodes.UPDATE_VAR_INVALID,
            variable=ENV_UPDATE_MODE,
            value=value,
            allowed=[m.value for m in UpdateMode],
        ) from None


def detect_ci(environ: Mapping[str, str] | None = None) -> str | None:
    """Name of the first CI indicator set in the environment, if any."""
    environ = os.environ if environ is None else environ
    for indicator in CI_INDICATORS:
        if environ.get(indicator):
            return indicator
    return None


def check_ci_environment(environ: Mapping[str, str] | None = None) -> None:
    """
    Refuse to rewrite expectations in CI.

    Expectations must be produced locally and reviewed before committing.

    Raises:
        HarnessError: OVERWRITE_IN_CI
    """
    indicator = detect_ci(environ)
    if indicator:
        raise HarnessError(
            ErrorCodes.OVERWRITE_IN_CI,
            indicator=indicator,
            hint="run locally, review the written files, then commit",
        )


# =============================================================================
# HarnessConfig
# =============================================================================


@dataclass(frozen=True)
class HarnessConfig:
    """
    Run-wide settings, fixed for the duration of a run.

    Attributes:
        project_name: Name of the project under test
        source_dir: Absolute project directory, scrubbed to $DIR in output
        update_mode: wip (stage candidates) or overwrite
        filters: Path substrings; empty runs every case
        staging_dir: Flat directory for unreviewed candidates
        run_log_dir: Where to save JSON run logs (None = don't save)
    """
    project_name: str = DEFAULT_PROJECT_NAME
    source_dir: Path = field(default_factory=Path.cwd)
    update_mode: UpdateMode = UpdateMode.STAGE
    filters: tuple[str, ...] = ()
    staging_dir: Path = Path(DEFAULT_STAGING_DIR)
    run_log_dir: Path | None = None

    @property
    def is_self_test(self) -> bool:
        return self.project_name == SELF_TEST_PROJECT_NAME

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        argv: list[str] | None = None,
        **overrides: Any,
    ) -> "HarnessConfig":
        """
        Capture configuration from the environment once.

        Args:
            environ: Environment mapping (default os.environ)
            argv: Command line; "golden=<substring>" entries become filters
            **overrides: Explicit values that win over the environment

        Raises:
            HarnessError: UPDATE_VAR_INVALID, OVERWRITE_IN_CI
        """
        environ = os.environ if environ is None else environ

        filters = [f.strip() for f in environ.get(ENV_FILTER, "").split(",") if f.strip()]
        if argv:
            filters.extend(filters_from_argv(argv))

        values: dict[str, Any] = {
            "project_name": environ.get(ENV_PROJECT_NAME) or DEFAULT_PROJECT_NAME,
            "source_dir": Path(environ.get(ENV_SOURCE_DIR) or Path.cwd()).resolve(),
            "update_mode": parse_update_mode(environ.get(ENV_UPDATE_MODE)),
            "filters": tuple(filters),
            "staging_dir": Path(environ.get(ENV_STAGING_DIR) or DEFAULT_STAGING_DIR),
            "run_log_dir": Path(environ[ENV_RUN_LOG_DIR]) if environ.get(ENV_RUN_LOG_DIR) else None,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})

        config = cls(**values)
        if config.update_mode is UpdateMode.OVERWRITE:
            check_ci_environment(environ)

        logger.debug(f"Config: {config}")
        return config


# =============================================================================
# Suite Definition (golden.yaml)
# =============================================================================


@dataclass
class SuiteDefinition:
    """
    Parsed suite file.

        name: my-project
        source_dir: .
        toolchain: {...}
        tests:
          - path: tests/ui/*.rs
            expect: compile_fail
    """
    path: Path
    name: str | None
    source_dir: Path
    toolchain: dict[str, Any]
    tests: list[TestCase]


def load_suite(suite_path: Path) -> SuiteDefinition:
    """
    Load a suite file.

    Relative `source_dir` is resolved against the suite file's directory.
    Test paths are kept as declared.

    Raises:
        HarnessError: SUITE_INVALID
    """
    try:
        with open(suite_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise HarnessError(ErrorCodes.SUITE_INVALID, path=str(suite_path), error=str(e)) from e
    except yaml.YAMLError as e:
        raise HarnessError(ErrorCodes.SUITE_INVALID, path=str(suite_path), error=str(e)) from e

    if not isinstance(data, dict):
        raise HarnessError(ErrorCodes.SUITE_INVALID, path=str(suite_path), error="top level must be a mapping")

    source_dir = Path(data.get("source_dir") or ".")
    if not source_dir.is_absolute():
        source_dir = (suite_path.parent / source_dir).resolve()

    tests = [_parse_test_entry(entry, i, suite_path) for i, entry in enumerate(data.get("tests") or [])]

    return SuiteDefinition(
        path=suite_path,
        name=data.get("name"),
        source_dir=source_dir,
        toolchain=data.get("toolchain") or {},
        tests=tests,
    )


def _parse_test_entry(entry: Any, index: int, suite_path: Path) -> TestCase:
    if isinstance(entry, str):
        entry = {"path": entry}
    if not isinstance(entry, dict) or not entry.get("path"):
        raise HarnessError(
            ErrorCodes.SUITE_INVALID,
            path=str(suite_path),
            field=f"tests[{index}]",
            error="each test needs a path",
        )

    expect = entry.get("expect", Expected.PASS.value)
    try:
        expected = Expected(expect)
    except ValueError:
        raise HarnessError(
            ErrorCodes.SUITE_INVALID,
            path=str(suite_path),
            field=f"tests[{index}].expect",
            value=expect,
            allowed=[e.value for e in Expected],
        ) from None

    name = entry.get("name")
    return TestCase(
        name=str(name) if name else generate_case_name(index),
        path=Path(str(entry["path"])),
        expected=expected,
    )
