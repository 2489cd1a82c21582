"""Models for test execution results."""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum, IntEnum


class RequirementLevel(Enum):
    """How strongly a test's failure counts against its test set."""

    REQUIRE = "require"
    SUGGEST = "suggest"


class Severity(IntEnum):
    """Outcome severity, ordered from best to worst."""

    PASS = 0
    PARTIALLY = 1
    FAIL = 2


def aggregate_severity(statuses: Iterable[Severity]) -> Severity:
    """Return the worst severity, or PASS when there is nothing to aggregate."""
    return max(statuses, default=Severity.PASS)


@dataclass(frozen=True, kw_only=True)
class TestResult:
    """Result of a single test execution."""

    __test__ = False

    status: Severity
    message: str
    hide_on_success: bool = False

    @property
    def visible(self) -> bool:
        """Whether a reporter should show this result."""
        return self.status is not Severity.PASS or not self.hide_on_success


@dataclass(frozen=True, kw_only=True)
class NamedResult:
    """A test result together with the name it was registered under."""

    name: str
    result: TestResult


@dataclass(frozen=True, kw_only=True)
class TestSetReport:
    """Outcome of one test set within a suite run.

    Manual tests are carried through untouched; they are never evaluated and
    do not contribute to the severity.
    """

    __test__ = False

    title: str
    auto_tests: Sequence[NamedResult] = field(default_factory=tuple)
    manual_tests: Mapping[str, str] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.auto_tests

    @property
    def severity(self) -> Severity:
        return aggregate_severity(test.result.status for test in self.auto_tests)
