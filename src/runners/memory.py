"""
In-memory runner.

Returns scripted build/run outcomes keyed by test name (or path) and
records every call, so the harness can be exercised without a compiler.
"""

from dataclasses import dataclass, field

from src.domain.schemas import CapturedOutput, TestCase

from .base import RunnerError, TestRunner


@dataclass
class ScriptedCase:
    """Outcomes for one test case."""
    build: CapturedOutput = field(default_factory=lambda: CapturedOutput(success=True))
    run: CapturedOutput = field(default_factory=lambda: CapturedOutput(success=True))
    build_error: str | None = None  # raise RunnerError from build()
    run_error: str | None = None    # raise RunnerError from run()


class MemoryRunner(TestRunner):
    """
    Scripted runner.

    Usage:
        runner = MemoryRunner()
        runner.script("foo", build=CapturedOutput(False, stderr=b"error: ..."))
        harness = GoldenHarness(runner, config)
    """

    def __init__(self, prepare_error: str | None = None):
        self.cases: dict[str, ScriptedCase] = {}
        self.prepare_error = prepare_error
        self.calls: list[tuple[str, str]] = []
        self.prepared: list[TestCase] | None = None

    def script(
        self,
        key: str,
        build: CapturedOutput | None = None,
        run: CapturedOutput | None = None,
        build_error: str | None = None,
        run_error: str | None = None,
    ) -> ScriptedCase:
        """
        Script outcomes for the case whose name or path equals `key`.

        Unscripted cases build and run successfully with no output.
        """
        case = ScriptedCase(build_error=build_error, run_error=run_error)
        if build is not None:
            case.build = build
        if run is not None:
            case.run = run
        self.cases[key] = case
        return case

    def _lookup(self, test: TestCase) -> ScriptedCase:
        return (
            self.cases.get(test.name)
            or self.cases.get(test.path.as_posix())
            or ScriptedCase()
        )

    def prepare(self, tests: list[TestCase]) -> None:
        self.calls.append(("prepare", ""))
        if self.prepare_error:
            raise RunnerError("PREPARE", self.prepare_error)
        self.prepared = list(tests)

    def build(self, test: TestCase) -> CapturedOutput:
        self.calls.append(("build", test.name))
        case = self._lookup(test)
        if case.build_error:
            raise RunnerError("BUILD", case.build_error, test=test.name)
        return case.build

    def run(self, test: TestCase) -> CapturedOutput:
        self.calls.append(("run", test.name))
        case = self._lookup(test)
        if case.run_error:
            raise RunnerError("RUN", case.run_error, test=test.name)
        return case.run

    def calls_for(self, test_name: str) -> list[str]:
        return [action for action, name in self.calls if name == test_name]
