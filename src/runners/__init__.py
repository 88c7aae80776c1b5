"""
Runner abstraction.

The harness talks to the build tool only through TestRunner.
"""

from .base import RunnerError, TestRunner
from .command import CommandRunner, Toolchain
from .memory import MemoryRunner, ScriptedCase

__all__ = [
    "TestRunner",
    "RunnerError",
    "CommandRunner",
    "Toolchain",
    "MemoryRunner",
    "ScriptedCase",
]
