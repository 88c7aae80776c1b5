"""
Runner interface.

A runner is the external build tool binding: it prepares a workspace once,
builds one test case at a time and runs cases that need execution. The
harness never knows how compilation works.

Implementations:
- CommandRunner: subprocess commands from a toolchain definition
- MemoryRunner: scripted outcomes, for testing the harness itself
"""

from abc import ABC, abstractmethod
from typing import Any

from src.domain.schemas import CapturedOutput, TestCase


class RunnerError(Exception):
    """
    The runner itself failed (not a compile diagnostic).

    A failing compilation is a normal CapturedOutput with success=False;
    RunnerError means the build tool could not be invoked at all.
    """

    def __init__(self, code: str, message: str, **context: Any) -> None:
        self.code = code
        self.message = message
        self.context = context
        super().__init__(f"[{code}] {message}")


class TestRunner(ABC):
    """
    Build/run capability set consumed by the harness.

    Call order: prepare() once, then build() per case, then run() for cases
    whose expectation requires execution.
    """
    __test__ = False  # not a pytest class

    @abstractmethod
    def prepare(self, tests: list[TestCase]) -> None:
        """
        One-time setup for all cases (workspace, shared dependencies).

        Raises:
            RunnerError: Fatal for the whole run
        """
        pass

    @abstractmethod
    def build(self, test: TestCase) -> CapturedOutput:
        """
        Compile/check one case without executing it.

        Raises:
            RunnerError: The build tool could not be invoked
        """
        pass

    @abstractmethod
    def run(self, test: TestCase) -> CapturedOutput:
        """
        Execute an already-built case.

        Raises:
            RunnerError: The case could not be launched
        """
        pass
