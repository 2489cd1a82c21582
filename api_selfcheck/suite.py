"""Suite of test sets run in registration order."""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Self, TypeAlias

from api_selfcheck.config import DEFAULT_CONFIG, HarnessConfig
from api_selfcheck.models.result import Severity, TestSetReport, aggregate_severity
from api_selfcheck.testset import ReportReadyCallback, TestSet

log = logging.getLogger(__name__)

ProgressCallback: TypeAlias = Callable[[int, int], None]


@dataclass(kw_only=True)
class Suite:
    """Top-level collection of named test sets."""

    config: HarnessConfig = DEFAULT_CONFIG
    test_sets: dict[str, TestSet] = field(default_factory=dict)
    report_ready_callbacks: list[ReportReadyCallback] = field(
        default_factory=list, init=False
    )
    last_report: Sequence[TestSetReport] | None = field(default=None, init=False)

    def add_test_set(self, name: str, test_set: TestSet) -> Self:
        """Register a test set, replacing any set with the same name."""
        self.test_sets[name] = test_set
        return self

    async def run(
        self, on_progress: ProgressCallback | None = None
    ) -> Sequence[TestSetReport]:
        """Run every test set sequentially and return the result tree.

        Args:
            on_progress: Called with (completed, total) after each test set

        Returns:
            One report per test set, in registration order

        """
        test_sets = list(self.test_sets.items())
        total = len(test_sets)
        if not test_sets:
            log.info("No test sets registered")

        callbacks: list[ReportReadyCallback] = []
        reports: list[TestSetReport] = []

        for completed, (title, test_set) in enumerate(test_sets, start=1):
            callbacks.extend(test_set.report_ready_callbacks)
            log.info("Running test set %r (%d test(s))", title, len(test_set.tests))

            set_run = await test_set.run(self.config)
            reports.append(
                TestSetReport(
                    title=title,
                    auto_tests=set_run.auto_tests,
                    manual_tests=set_run.manual_tests,
                )
            )

            log.info("Running... %d/%d", completed, total)
            if on_progress is not None:
                on_progress(completed, total)

        self.report_ready_callbacks = callbacks
        self.last_report = reports
        return reports

    @staticmethod
    def severity(report: Sequence[TestSetReport]) -> Severity:
        """Worst severity across all test sets; PASS for an empty report."""
        return aggregate_severity(test_set.severity for test_set in report)
