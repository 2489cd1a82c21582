"""Tests for reporting module."""

import logging
from unittest.mock import Mock

import pytest

from api_selfcheck.models.result import NamedResult, Severity
from api_selfcheck.reporting import (
    format_output,
    log_results_summary,
    notify_report_ready,
    render_text,
)
from api_selfcheck.suite import Suite
from api_selfcheck.testing.factories import (
    NamedResultFactory,
    TestResultFactory,
    TestSetReportFactory,
)


def named(
    name: str, status: Severity, message: str = "", hide: bool = False
) -> NamedResult:
    """Build a named result."""
    return NamedResultFactory.build(
        name=name,
        result=TestResultFactory.build(
            status=status, message=message, hide_on_success=hide
        ),
    )


class TestRenderText:
    """Tests for render_text."""

    def test_passing_set_is_collapsed(self) -> None:
        """Only the header is shown for a passing set."""
        report = [
            TestSetReportFactory.build(
                title="Auth", auto_tests=[named("token-valid", Severity.PASS)]
            )
        ]

        assert render_text(report) == "Auth: [Success]\n"

    def test_verbose_lists_passing_tests(self) -> None:
        """Verbose mode lists tests of passing sets."""
        report = [
            TestSetReportFactory.build(
                title="Auth", auto_tests=[named("token-valid", Severity.PASS)]
            )
        ]

        assert render_text(report, verbose=True) == (
            "Auth: [Success]\n  token-valid: OK\n"
        )

    def test_partial_set_lists_tests_with_messages(self) -> None:
        """A partially passing set lists every visible test."""
        report = [
            TestSetReportFactory.build(
                title="Auth",
                auto_tests=[
                    named("token-valid", Severity.PASS),
                    named("rate-limit-header", Severity.PARTIALLY, "missing header"),
                ],
            )
        ]

        assert render_text(report) == (
            "Auth: [Partially]\n"
            "  token-valid: OK\n"
            "  rate-limit-header: Fail [missing header]\n"
        )

    def test_hide_on_success_rows_are_omitted(self) -> None:
        """Passing tests flagged hide_on_success are not listed."""
        report = [
            TestSetReportFactory.build(
                title="Auth",
                auto_tests=[
                    named("hidden", Severity.PASS, hide=True),
                    named("broken", Severity.FAIL, "bad", hide=True),
                ],
            )
        ]

        assert render_text(report) == "Auth: [Failed]\n  broken: Fail [bad]\n"

    def test_manual_checklist(self) -> None:
        """Manual entries are listed as not done."""
        report = [
            TestSetReportFactory.build(
                title="UI",
                auto_tests=[named("a", Severity.PASS)],
                manual_tests={"logo": "Logo is visible"},
            )
        ]

        assert render_text(report) == (
            "UI: [Success]\n  Manual Checklist\n    Logo is visible: Not done yet\n"
        )

    def test_empty_set_marker(self) -> None:
        """A set without tests is marked explicitly."""
        report = [TestSetReportFactory.build(title="Nothing")]

        assert render_text(report) == "Nothing: [Success]\n  No tests\n"

    def test_sets_separated_by_blank_line(self) -> None:
        """Multiple sets are separated by an empty line."""
        report = [
            TestSetReportFactory.build(title="A", auto_tests=[named("a", Severity.PASS)]),
            TestSetReportFactory.build(title="B", auto_tests=[named("b", Severity.PASS)]),
        ]

        assert render_text(report) == "A: [Success]\n\nB: [Success]\n"


class TestFormatOutput:
    """Tests for format_output."""

    def test_empty(self) -> None:
        """Returns empty totals when no results."""
        assert format_output([]) == {
            "status": "PASS",
            "total": 0,
            "passed": 0,
            "partially": 0,
            "failed": 0,
            "test_sets": [],
        }

    def test_mixed_results(self) -> None:
        """Counts and nests results per set."""
        report = [
            TestSetReportFactory.build(
                title="Auth",
                auto_tests=[
                    named("token-valid", Severity.PASS),
                    named("rate-limit-header", Severity.PARTIALLY, "missing header"),
                ],
                manual_tests={"logo": "Logo"},
            ),
            TestSetReportFactory.build(
                title="Billing", auto_tests=[named("plan", Severity.FAIL, "no plan")]
            ),
        ]

        output = format_output(report)

        assert output["status"] == "FAIL"
        assert output["total"] == 3
        assert output["passed"] == 1
        assert output["partially"] == 1
        assert output["failed"] == 1
        assert [s["title"] for s in output["test_sets"]] == ["Auth", "Billing"]
        auth = output["test_sets"][0]
        assert auth["status"] == "PARTIALLY"
        assert auth["empty"] is False
        assert auth["manual_tests"] == {"logo": "Logo"}
        assert auth["auto_tests"][1] == {
            "name": "rate-limit-header",
            "status": "PARTIALLY",
            "message": "missing header",
            "hide_on_success": False,
        }


def test_log_results_summary(caplog: pytest.LogCaptureFixture) -> None:
    """Logs one line per test and its message."""
    report = [
        TestSetReportFactory.build(
            title="Auth",
            auto_tests=[
                named("token-valid", Severity.PASS),
                named("rate-limit-header", Severity.PARTIALLY, "missing header"),
            ],
        )
    ]

    with caplog.at_level(logging.INFO):
        log_results_summary(logging.getLogger(), report)

    assert "Test Results Summary:" in caplog.text
    assert "✅ Auth / token-valid: PASS" in caplog.text
    assert "Auth / rate-limit-header: PARTIALLY" in caplog.text
    assert "Message: missing header" in caplog.text


class TestNotifyReportReady:
    """Tests for notify_report_ready."""

    def test_invokes_callbacks_with_rendered_report(self) -> None:
        """Every collected callback receives the rendered report."""
        first, second = Mock(), Mock()
        suite = Suite()
        suite.report_ready_callbacks = [first, second]

        notify_report_ready(suite, "rendered")

        first.assert_called_once_with("rendered")
        second.assert_called_once_with("rendered")

    def test_failing_callback_does_not_stop_others(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A raising callback is logged and the rest still run."""
        broken = Mock(side_effect=RuntimeError("boom"))
        after = Mock()
        suite = Suite()
        suite.report_ready_callbacks = [broken, after]

        with caplog.at_level(logging.ERROR):
            notify_report_ready(suite, "rendered")

        after.assert_called_once_with("rendered")
        assert "Report-ready callback failed: boom" in caplog.text
