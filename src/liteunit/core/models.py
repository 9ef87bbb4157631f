"""Data models for assertions, faults and test results."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional


class TestState(str, Enum):
    """Lifecycle state of a single test."""

    __test__ = False

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"


class AssertionStatus(str, Enum):
    """Outcome category of a single assertion."""

    PASSED = "passed"
    FAILED = "failed"
    WARNING = "warning"


@dataclass(frozen=True)
class AssertionRecord:
    """Outcome of one assertion call made while a test was running."""

    operation: str
    operands: tuple = ()
    result: bool = False
    message: Optional[str] = None
    description: Optional[str] = None
    is_warning: bool = False
    expected_fault: Any = None

    @property
    def status(self) -> AssertionStatus:
        """Get the tally category this assertion contributes to."""
        if self.result:
            return AssertionStatus.PASSED
        if self.is_warning:
            return AssertionStatus.WARNING
        return AssertionStatus.FAILED

    @property
    def formatted(self) -> str:
        """Operands formatted for display, on a single line."""
        text = ", ".join(repr(operand) for operand in self.operands)
        return text.replace("\r", "").replace("\n", "")

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "operation": self.operation,
            "operands": self.formatted,
            "result": self.result,
            "message": self.message,
            "description": self.description,
            "is_warning": self.is_warning,
            "status": self.status.value,
        }


@dataclass
class AssertionTally:
    """Counts of assertion outcomes.

    Every record contributes to ``count`` and to exactly one of ``passed``,
    ``failed`` or ``warnings``.
    """

    count: int = 0
    passed: int = 0
    failed: int = 0
    warnings: int = 0

    def tally(self, record: AssertionRecord) -> None:
        """Add a single assertion outcome to the counts."""
        status = record.status
        if status == AssertionStatus.PASSED:
            self.passed += 1
        elif status == AssertionStatus.WARNING:
            self.warnings += 1
        else:
            self.failed += 1
        self.count += 1

    @classmethod
    def from_records(cls, records: list[AssertionRecord]) -> "AssertionTally":
        """Create a tally from a list of assertion records."""
        tally = cls()
        for record in records:
            tally.tally(record)
        return tally

    def __add__(self, other: "AssertionTally") -> "AssertionTally":
        return AssertionTally(
            count=self.count + other.count,
            passed=self.passed + other.passed,
            failed=self.failed + other.failed,
            warnings=self.warnings + other.warnings,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "count": self.count,
            "passed": self.passed,
            "failed": self.failed,
            "warnings": self.warnings,
        }


@dataclass(frozen=True)
class FaultRecord:
    """A warning or exception intercepted while a test was running."""

    code: int
    label: str
    message: str
    file: Optional[str] = None
    line: Optional[int] = None
    expected: bool = False
    backtrace: tuple[str, ...] = ()

    @property
    def location(self) -> str:
        """Short ``file#line`` form of the fault location."""
        if self.file is None:
            return "<unknown>"
        return f"{self.file}#{self.line}"

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "code": self.code,
            "label": self.label,
            "message": self.message,
            "file": self.file,
            "line": self.line,
            "location": self.location,
            "expected": self.expected,
            "backtrace": list(self.backtrace),
        }


@dataclass
class Timing:
    """Seconds spent in each phase of a test."""

    setup: float = 0.0
    run: float = 0.0
    teardown: float = 0.0
    total: float = 0.0

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "setup": self.setup,
            "run": self.run,
            "teardown": self.teardown,
            "total": self.total,
        }


@dataclass
class TestCase:
    """One discovered test and its recorded outcome."""

    __test__ = False

    name: str
    method: str
    entry: Callable[[], Any] = field(repr=False, compare=False)
    state: TestState = TestState.PENDING
    run: bool = False
    passed: bool = False
    assertions: list[AssertionRecord] = field(default_factory=list)
    faults: list[FaultRecord] = field(default_factory=list)
    timing: Timing = field(default_factory=Timing)

    @property
    def assertion_count(self) -> AssertionTally:
        """Tally of this test's assertions."""
        return AssertionTally.from_records(self.assertions)

    @property
    def unexpected_faults(self) -> list[FaultRecord]:
        """Faults that were not matched by an ``expect`` assertion."""
        return [fault for fault in self.faults if not fault.expected]

    def evaluate(self) -> bool:
        """Decide whether the recorded outcome is a pass.

        Warning-level assertion failures are informational and never fail
        the test.
        """
        if self.unexpected_faults:
            return False
        return all(record.status != AssertionStatus.FAILED for record in self.assertions)

    def reset(self) -> None:
        """Discard the outcome of a previous run."""
        self.state = TestState.PENDING
        self.run = False
        self.passed = False
        self.assertions = []
        self.faults = []
        self.timing = Timing()

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "method": self.method,
            "state": self.state.value,
            "run": self.run,
            "passed": self.passed,
            "assertion_count": self.assertion_count.to_dict(),
            "assertions": [record.to_dict() for record in self.assertions],
            "faults": [fault.to_dict() for fault in self.faults],
            "timing": self.timing.to_dict(),
        }


@dataclass
class SuiteResult:
    """Net result of running a test suite."""

    total: int = 0
    run: int = 0
    passed: int = 0

    @property
    def success(self) -> bool:
        """True if at least one test ran and every test that ran passed."""
        return self.run > 0 and self.run == self.passed

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "total": self.total,
            "run": self.run,
            "passed": self.passed,
            "success": self.success,
        }
