"""Ready-made checks for common API self-tests."""

from api_selfcheck.checks.http import expect_header, expect_status

__all__ = ["expect_header", "expect_status"]
