"""Domain layer: errors and schemas."""

from .errors import ErrorCodes, HarnessError
from .schemas import (
    CapturedOutput,
    Expected,
    FailureReason,
    RunSummary,
    TestCase,
    UpdateMode,
    Verdict,
)

__all__ = [
    "ErrorCodes",
    "HarnessError",
    "CapturedOutput",
    "Expected",
    "FailureReason",
    "RunSummary",
    "TestCase",
    "UpdateMode",
    "Verdict",
]
