"""Single test execution with a time limit."""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, TypeAlias

from api_selfcheck.config import DEFAULT_CONFIG, HarnessConfig
from api_selfcheck.models.options import TestOptions
from api_selfcheck.models.result import RequirementLevel, Severity, TestResult

log = logging.getLogger(__name__)

SyncCheck: TypeAlias = Callable[[], str | None]
AsyncCheck: TypeAlias = Callable[[], Awaitable[Any]]
Check: TypeAlias = SyncCheck | AsyncCheck
OptionsLike: TypeAlias = TestOptions | Mapping[str, Any] | None

# Checks still running after their time limit. Holding a reference keeps the
# task from being garbage collected before it finishes.
_abandoned_checks: set[asyncio.Future[Any]] = set()


class CheckFailed(Exception):
    """Raised by an asynchronous check to signal an explicit failure."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


def coerce_options(options: OptionsLike) -> TestOptions:
    """Build TestOptions from an instance, a mapping, or None."""
    if options is None:
        return TestOptions()
    if isinstance(options, TestOptions):
        return options
    return TestOptions.model_validate(dict(options))


def _success_message(value: object) -> str:
    return "" if value is None else str(value)


def _failure_message(exc: BaseException) -> str:
    if isinstance(exc, CheckFailed):
        return exc.message
    return str(exc) or type(exc).__name__


def _fault_message(exc: BaseException) -> str:
    return f"Exception occurred during test running: {type(exc).__name__}: {exc}"


@dataclass(frozen=True, kw_only=True)
class Test:
    """A check function together with its requirement level and options.

    Synchronous checks return an empty string on success and a message on
    failure. None also counts as success, so a check without a return
    statement passes. Asynchronous checks return an awaitable that resolves
    with a success message or raises with a failure message; CheckFailed
    carries the message explicitly. Both kinds of failure are graded by the
    requirement level. Only a check that raises when invoked, or that returns
    the wrong kind of value, is always FAIL.
    """

    __test__ = False

    fn: Check
    level: RequirementLevel
    options: TestOptions = field(default_factory=TestOptions)

    async def run(self, config: HarnessConfig = DEFAULT_CONFIG) -> TestResult:
        """Run the check against the configured time limit.

        Never raises: failures, timeouts and faults are all reported through
        the returned result.
        """
        loop = asyncio.get_running_loop()
        outcome: asyncio.Future[TestResult] = loop.create_future()

        def settle(result: TestResult) -> None:
            if not outcome.done():
                outcome.set_result(result)

        timer = loop.call_later(
            config.time_limit,
            settle,
            TestResult(
                status=Severity.FAIL,
                message=f"Time limit for test exceeded: {config.time_limit_ms}ms",
            ),
        )

        def on_signal(done: asyncio.Future[Any]) -> None:
            if not done.cancelled():
                done.exception()  # mark retrieved, the loser's outcome is dropped
            if not outcome.done():
                settle(self._classify(done))

        signal: asyncio.Future[Any] | None = None
        try:
            signal = self._start(loop)
        except Exception as exc:
            log.warning("Check raised while starting: %s", exc, exc_info=exc)
            settle(TestResult(status=Severity.FAIL, message=_fault_message(exc)))
        else:
            signal.add_done_callback(on_signal)

        try:
            result = await outcome
        finally:
            timer.cancel()
            if signal is not None and not signal.done():
                log.warning(
                    "Check still pending after %dms, ignoring its outcome",
                    config.time_limit_ms,
                )
                self._abandon(signal, cancel=config.cancel_on_timeout)

        log.debug(
            "Check finished: status=%s message=%r", result.status.name, result.message
        )
        return result

    def _start(self, loop: asyncio.AbstractEventLoop) -> asyncio.Future[Any]:
        """Invoke the check and return its outcome as a future."""
        if self.options.is_async:
            awaitable = self.fn()
            if not inspect.isawaitable(awaitable):
                raise TypeError(
                    f"asynchronous check returned {type(awaitable).__name__}, "
                    "expected an awaitable"
                )
            return asyncio.ensure_future(awaitable)

        message = self.fn()
        if inspect.isawaitable(message):
            if inspect.iscoroutine(message):
                message.close()
            raise TypeError(
                "synchronous check returned an awaitable, register it with "
                "{'async': True}"
            )
        signal: asyncio.Future[Any] = loop.create_future()
        if message is None or message == "":
            signal.set_result("")
        else:
            signal.set_exception(CheckFailed(str(message)))
        return signal

    def _classify(self, signal: asyncio.Future[Any]) -> TestResult:
        if signal.cancelled():
            return TestResult(
                status=Severity.FAIL,
                message=_fault_message(asyncio.CancelledError("check was cancelled")),
            )

        exc = signal.exception()
        if exc is None:
            return TestResult(
                status=Severity.PASS,
                message=_success_message(signal.result()),
                hide_on_success=self.options.hide_on_success,
            )

        if not isinstance(exc, CheckFailed):
            log.info("Check raised %s: %s", type(exc).__name__, exc)

        status = (
            Severity.PARTIALLY
            if self.level is RequirementLevel.SUGGEST
            else Severity.FAIL
        )
        return TestResult(
            status=status,
            message=_failure_message(exc),
            hide_on_success=self.options.hide_on_success,
        )

    @staticmethod
    def _abandon(signal: asyncio.Future[Any], *, cancel: bool) -> None:
        if cancel:
            signal.cancel()
            return
        _abandoned_checks.add(signal)
        signal.add_done_callback(_abandoned_checks.discard)
