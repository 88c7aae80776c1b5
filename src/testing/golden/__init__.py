"""
Golden output testing for build tools.

Builds (and optionally runs) each test case, normalizes the captured
diagnostics and compares them with reviewed expectation files.

Philosophy:
- Compare MEANING, not bytes
- Normalize machine-specific paths and environment-dependent trailer lines
- Fail on content changes; stage candidates instead of silently accepting them

Safety Features:
- Tolerant matching against several normalization variations
- Unreviewed candidates go to a git-ignored staging directory
- CI environment guard to prevent accidental baseline updates
"""

from .cases import expand_globs, filter_cases
from .compare import Decision, GoldenComparator, decide, diff_lines
from .expectations import ExpectationStore
from .harness import GoldenHarness
from .message import ConsoleReporter, Level
from .normalize import NormalizationContext, Normalizer, Variations, diagnostics, trim

__all__ = [
    # Orchestration
    "GoldenHarness",
    "expand_globs",
    "filter_cases",
    # Normalization
    "Normalizer",
    "NormalizationContext",
    "Variations",
    "diagnostics",
    "trim",
    # Expectations
    "ExpectationStore",
    # Comparison
    "Decision",
    "GoldenComparator",
    "decide",
    "diff_lines",
    # Reporting
    "ConsoleReporter",
    "Level",
]
