"""
Domain Constants: harness-wide constants.

File naming policy, placeholders and environment variable names shared
across the normalizer, the expectation store and the orchestrator.
"""

# =============================================================================
# Expectation Files
# =============================================================================
# Expectation files live beside the test source with the extension swapped:
# tests/ui/foo.rs -> tests/ui/foo.stderr, tests/ui/foo.stdout

STDERR_SUFFIX = ".stderr"
STDOUT_SUFFIX = ".stdout"

# =============================================================================
# Staging Area (work-in-progress)
# =============================================================================
# wip/
# ├── .gitignore     # "*" keeps the whole directory out of version control
# ├── foo.stderr
# └── bar.stdout

DEFAULT_STAGING_DIR = "wip"
STAGING_GITIGNORE_FILENAME = ".gitignore"
STAGING_GITIGNORE_CONTENT = "*\n"

# Base name used when an expectation path has no file name component
STAGING_FALLBACK_STEM = "test"

# =============================================================================
# Normalization Placeholders
# =============================================================================

DIR_PLACEHOLDER = "$DIR"
CRATE_PLACEHOLDER = "$CRATE"

# Diagnostic source-location marker: "  --> src/foo.rs:3:5"
LOCATION_ARROW = "--> "

# Windows extended-length path prefix after "\" -> "/" conversion
UNC_PREFIX = "//?/"

# =============================================================================
# Test Case Naming
# =============================================================================

# Unnamed cases: "golden000", "golden001", ...
CASE_NAME_PREFIX = "golden"

# Glob expansion suffix: "{name}-{index:03d}"
GLOB_INDEX_WIDTH = 3
# Only "*" makes a declared path a pattern; "?" and "[" are literal
GLOB_CHAR = "*"

# Project name under which the harness tests itself; failures are tolerated
SELF_TEST_PROJECT_NAME = "golden-harness-tests"

# =============================================================================
# Environment Variables
# =============================================================================

ENV_UPDATE_MODE = "GOLDEN_UPDATE"
ENV_FILTER = "GOLDEN_FILTER"
ENV_STAGING_DIR = "GOLDEN_STAGING_DIR"
ENV_RUN_LOG_DIR = "GOLDEN_RUN_LOG_DIR"
ENV_PROJECT_NAME = "GOLDEN_PROJECT_NAME"
ENV_SOURCE_DIR = "GOLDEN_SOURCE_DIR"

# argv filter: "golden=tuple_structs.rs"
ARGV_FILTER_PREFIX = "golden="

# Suite definition file
DEFAULT_SUITE_FILENAME = "golden.yaml"

# =============================================================================
# Run Log
# =============================================================================

RUN_ID_PREFIX = "RUN-"
RUN_LOG_GLOB = "run_*.json"

# =============================================================================
# CI Detection
# =============================================================================

CI_INDICATORS = (
    "CI",
    "GITHUB_ACTIONS",
    "GITLAB_CI",
    "JENKINS_URL",
    "CIRCLECI",
    "TRAVIS",
    "BUILDKITE",
    "TF_BUILD",  # Azure Pipelines
    "CODEBUILD_BUILD_ID",  # AWS CodeBuild
)
