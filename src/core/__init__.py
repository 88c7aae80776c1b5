"""
Core layer: configuration, file safety and run logs.

Changes here affect every expectation write; keep them conservative.

Responsibilities:
- HarnessConfig (environment, suite file), atomic writes, per-path locks, run logs
"""

from .config import HarnessConfig, SuiteDefinition, load_suite, parse_update_mode
from .fs import atomic_write_json, atomic_write_text, path_lock
from .logging import create_run_log, generate_run_id, save_run_log

__all__ = [
    # config
    "HarnessConfig",
    "SuiteDefinition",
    "load_suite",
    "parse_update_mode",
    # fs
    "atomic_write_text",
    "atomic_write_json",
    "path_lock",
    # logging
    "generate_run_id",
    "create_run_log",
    "save_run_log",
]
