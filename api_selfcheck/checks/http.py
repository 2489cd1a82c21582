"""Asynchronous checks against HTTP APIs.

The factories here return checks meant to be registered with
``{"async": True}``::

    TestSet().require(
        "health",
        expect_status("https://api.example.com/health"),
        {"async": True},
    )
"""

import logging
from collections.abc import AsyncGenerator, Awaitable, Callable, Mapping
from contextlib import asynccontextmanager

import aiohttp

from api_selfcheck.test import CheckFailed

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = aiohttp.ClientTimeout(total=10)


@asynccontextmanager
async def _request(
    method: str,
    url: str,
    headers: Mapping[str, str] | None,
    session: aiohttp.ClientSession | None,
) -> AsyncGenerator[aiohttp.ClientResponse, None]:
    """Issue a request, opening a short-lived session if none is given."""
    try:
        if session is not None:
            async with session.request(method, url, headers=headers) as response:
                yield response
            return

        async with (
            aiohttp.ClientSession(timeout=DEFAULT_TIMEOUT) as own_session,
            own_session.request(method, url, headers=headers) as response,
        ):
            yield response
    except aiohttp.ClientError as exc:
        log.info("%s %s failed: %s", method, url, exc)
        raise CheckFailed(f"{method} {url} failed: {exc}") from exc


def expect_status(
    url: str,
    status: int = 200,
    *,
    method: str = "GET",
    headers: Mapping[str, str] | None = None,
    session: aiohttp.ClientSession | None = None,
) -> Callable[[], Awaitable[str]]:
    """Build a check that passes when the endpoint answers with ``status``."""

    async def check() -> str:
        async with _request(method, url, headers, session) as response:
            if response.status != status:
                raise CheckFailed(
                    f"{method} {url} returned {response.status}, expected {status}"
                )
            return ""

    return check


def expect_header(
    url: str,
    header: str,
    value: str | None = None,
    *,
    method: str = "GET",
    headers: Mapping[str, str] | None = None,
    session: aiohttp.ClientSession | None = None,
) -> Callable[[], Awaitable[str]]:
    """Build a check that passes when the response carries ``header``.

    When ``value`` is given the header must also match it exactly.
    """

    async def check() -> str:
        async with _request(method, url, headers, session) as response:
            actual = response.headers.get(header)
            if actual is None:
                raise CheckFailed(f"Missing header {header}")
            if value is not None and actual != value:
                raise CheckFailed(f"Header {header} is '{actual}', expected '{value}'")
            return ""

    return check
