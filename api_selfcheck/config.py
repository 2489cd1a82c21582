"""Configuration for running a suite."""

from pydantic import Field, field_validator

from api_selfcheck.models.base import Model
from api_selfcheck.models.result import Severity

SINGLE_TEST_TIME_LIMIT_MS = 3000


class HarnessConfig(Model):
    """Settings shared by every test in a run."""

    time_limit_ms: int = Field(
        default=SINGLE_TEST_TIME_LIMIT_MS,
        gt=0,
        description="Time limit for a single test, measured from its start",
    )
    cancel_on_timeout: bool = Field(
        default=False,
        description="Cancel a check that is still pending when its time limit fires",
    )
    fail_on: Severity = Field(
        default=Severity.FAIL,
        description="Suite severity at which the CLI exits with a failure code",
    )

    @field_validator("fail_on", mode="before")
    @classmethod
    def _parse_severity_name(cls, value: object) -> object:
        if isinstance(value, str):
            try:
                return Severity[value.upper()]
            except KeyError:
                raise ValueError(f"Unknown severity '{value}'") from None
        return value

    @property
    def time_limit(self) -> float:
        """Time limit in seconds."""
        return self.time_limit_ms / 1000


DEFAULT_CONFIG = HarnessConfig()
