"""Per-test execution options."""

from pydantic import Field

from api_selfcheck.models.base import Model


class TestOptions(Model):
    """Options controlling how a check is run and displayed."""

    __test__ = False

    is_async: bool = Field(
        default=False,
        alias="async",
        description="Check returns an awaitable instead of a message string",
    )
    hide_on_success: bool = Field(
        default=False,
        alias="hideOnSuccess",
        description="Omit the test from rendered reports when it passes",
    )
