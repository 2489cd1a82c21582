"""Base model configuration for option and config structures."""

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Frozen model that accepts both field names and aliases."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")
