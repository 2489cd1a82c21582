"""Named groups of tests run one after another."""

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Self, TypeAlias

from api_selfcheck.config import DEFAULT_CONFIG, HarnessConfig
from api_selfcheck.models.result import (
    NamedResult,
    RequirementLevel,
    Severity,
    aggregate_severity,
)
from api_selfcheck.test import Check, OptionsLike, Test, coerce_options

log = logging.getLogger(__name__)

ReportReadyCallback: TypeAlias = Callable[[str], Any]


@dataclass(frozen=True, kw_only=True)
class TestSetRun:
    """Results of one run of a test set."""

    __test__ = False

    auto_tests: Sequence[NamedResult]
    manual_tests: Mapping[str, str]

    @property
    def severity(self) -> Severity:
        return aggregate_severity(test.result.status for test in self.auto_tests)


@dataclass(kw_only=True)
class TestSet:
    """Ordered registry of tests and manual checklist entries.

    Registering under an existing name replaces the earlier entry in place,
    so results keep the position of the first registration.
    """

    __test__ = False

    tests: dict[str, Test] = field(default_factory=dict)
    manual_tests: dict[str, str] = field(default_factory=dict)
    report_ready_callbacks: list[ReportReadyCallback] = field(default_factory=list)

    def require(self, name: str, fn: Check, options: OptionsLike = None) -> Self:
        """Register a test whose failure fails the set."""
        return self._register(name, fn, RequirementLevel.REQUIRE, options)

    def suggest(self, name: str, fn: Check, options: OptionsLike = None) -> Self:
        """Register a test whose failure only partially fails the set."""
        return self._register(name, fn, RequirementLevel.SUGGEST, options)

    def manual(self, test_id: str, content: str) -> Self:
        """Register an entry for a human to verify; it is never executed."""
        self.manual_tests[test_id] = content
        return self

    def on_report_ready(self, fn: ReportReadyCallback) -> Self:
        """Register a callback for the reporter to invoke once rendered."""
        self.report_ready_callbacks.append(fn)
        return self

    def _register(
        self,
        name: str,
        fn: Check,
        level: RequirementLevel,
        options: OptionsLike,
    ) -> Self:
        if name in self.tests:
            log.debug("Replacing test %r", name)
        self.tests[name] = Test(fn=fn, level=level, options=coerce_options(options))
        return self

    async def run(self, config: HarnessConfig = DEFAULT_CONFIG) -> TestSetRun:
        """Run every test in registration order, one at a time.

        A failing test does not stop the ones after it.
        """
        results: list[NamedResult] = []
        for name, test in list(self.tests.items()):
            log.debug("Running test %r", name)
            result = await test.run(config)
            results.append(NamedResult(name=name, result=result))

        return TestSetRun(auto_tests=results, manual_tests=dict(self.manual_tests))
