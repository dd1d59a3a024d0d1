"""Base model shared by discovery records."""

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Immutable, hashable record; unknown fields are rejected.

    Hashability lets discovered tests serve as identities when results
    are deduplicated within a run.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")
