"""Rendering of suite results for terminals and machines."""

import logging
from collections.abc import Sequence
from typing import Any

from api_selfcheck.models.result import Severity, TestSetReport
from api_selfcheck.suite import Suite

log = logging.getLogger(__name__)

SET_LABELS = {
    Severity.PASS: "[Success]",
    Severity.PARTIALLY: "[Partially]",
    Severity.FAIL: "[Failed]",
}

STATUS_SYMBOLS = {
    Severity.PASS: "✅",
    Severity.PARTIALLY: "⚠️",
    Severity.FAIL: "❌",
}


def log_results_summary(log: logging.Logger, report: Sequence[TestSetReport]) -> None:
    """Log a formatted summary of test results."""
    log.info("=" * 80)
    log.info("Test Results Summary:")
    log.info("=" * 80)

    for test_set in report:
        for test in test_set.auto_tests:
            log.info(
                "%s %s / %s: %s",
                STATUS_SYMBOLS[test.result.status],
                test_set.title,
                test.name,
                test.result.status.name,
            )
            if test.result.message:
                log.info("  Message: %s", test.result.message)


def render_text(report: Sequence[TestSetReport], *, verbose: bool = False) -> str:
    """Render the result tree as a plain-text report.

    The test list of a passing set is collapsed unless verbose is set; tests
    flagged hide_on_success are left out when they pass.
    """
    lines: list[str] = []

    for test_set in report:
        if lines:
            lines.append("")
        lines.append(f"{test_set.title}: {SET_LABELS[test_set.severity]}")

        if test_set.is_empty:
            lines.append("  No tests")
        elif verbose or test_set.severity is not Severity.PASS:
            for test in test_set.auto_tests:
                if not test.result.visible:
                    continue
                status = "OK" if test.result.status is Severity.PASS else "Fail"
                message = f" [{test.result.message}]" if test.result.message else ""
                lines.append(f"  {test.name}: {status}{message}")

        if test_set.manual_tests:
            lines.append("  Manual Checklist")
            for content in test_set.manual_tests.values():
                lines.append(f"    {content}: Not done yet")

    return "\n".join(lines) + "\n"


def format_output(report: Sequence[TestSetReport]) -> dict[str, Any]:
    """Format suite results for JSON output."""
    test_sets: list[dict[str, Any]] = []
    statuses: list[Severity] = []

    for test_set in report:
        statuses.extend(test.result.status for test in test_set.auto_tests)
        test_sets.append(
            {
                "title": test_set.title,
                "status": test_set.severity.name,
                "empty": test_set.is_empty,
                "auto_tests": [
                    {
                        "name": test.name,
                        "status": test.result.status.name,
                        "message": test.result.message,
                        "hide_on_success": test.result.hide_on_success,
                    }
                    for test in test_set.auto_tests
                ],
                "manual_tests": dict(test_set.manual_tests),
            }
        )

    return {
        "status": Suite.severity(report).name,
        "total": len(statuses),
        "passed": statuses.count(Severity.PASS),
        "partially": statuses.count(Severity.PARTIALLY),
        "failed": statuses.count(Severity.FAIL),
        "test_sets": test_sets,
    }


def notify_report_ready(suite: Suite, rendered: str) -> None:
    """Invoke the report-ready callbacks collected by the last suite run."""
    for callback in suite.report_ready_callbacks:
        try:
            callback(rendered)
        except Exception as exc:
            log.error("Report-ready callback failed: %s", exc, exc_info=exc)
