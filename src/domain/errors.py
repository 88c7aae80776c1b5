"""
Error definitions for the harness.

Rules:
- No silent failures: infrastructure problems raise HarnessError
- Test-level outcomes (mismatch, unexpected success) are Verdicts, not errors
- An error is printed once; `already_printed` suppresses a second report
"""

from typing import Any

from .schemas import FailureReason


class HarnessError(Exception):
    """
    Raised when the harness itself cannot proceed.

    Used for:
    - runner preparation / invocation failure
    - expectation or staging file I/O failure
    - missing test source, malformed glob pattern
    - invalid configuration (update mode, suite file)
    - the final "N of M tests failed" result

    Usage:
        raise HarnessError(ErrorCodes.EXPECTATION_WRITE_FAILED, path=str(path), cause=e)
    """

    def __init__(
        self,
        code: str,
        reason: FailureReason | None = None,
        already_printed: bool = False,
        **context: Any,
    ) -> None:
        self.code = code
        self.reason = reason
        self.already_printed = already_printed
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        return f"[{self.code}] {ctx_str}" if ctx_str else f"[{self.code}]"

    def to_dict(self) -> dict[str, Any]:
        """For logs and JSON serialization."""
        return {
            "code": self.code,
            "reason": self.reason.value if self.reason else None,
            **{k: str(v) for k, v in self.context.items()},
        }


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCodes:
    """Error code constants."""

    # === Infrastructure ===
    PREPARE_FAILED = "PREPARE_FAILED"
    RUNNER_FAILED = "RUNNER_FAILED"
    EXPECTATION_READ_FAILED = "EXPECTATION_READ_FAILED"
    EXPECTATION_WRITE_FAILED = "EXPECTATION_WRITE_FAILED"
    EXPECTATION_LOCK_TIMEOUT = "EXPECTATION_LOCK_TIMEOUT"

    # === Configuration ===
    SUITE_INVALID = "SUITE_INVALID"
    UPDATE_VAR_INVALID = "UPDATE_VAR_INVALID"
    OVERWRITE_IN_CI = "OVERWRITE_IN_CI"

    # === User input ===
    TEST_PATH_MISSING = "TEST_PATH_MISSING"
    GLOB_INVALID = "GLOB_INVALID"

    # === Run result ===
    TESTS_FAILED = "TESTS_FAILED"
