"""Run models — RunSnapshot (immutable) and FeatureFailure (immutable)."""

from pydantic import Field

from dotdensity.models.common import (
    DotDensityBase,
    PlacementMethod,
    UTCTimestamp,
    UUIDv7,
    new_uuid7,
    utc_now,
)


class RunSnapshot(DotDensityBase, frozen=True):
    """Immutable record of the inputs and totals of one batch run.

    Together with the input features, method and seed reproduce the exact
    dot output of a ``regular`` run or a seeded ``random`` run.
    """

    run_id: UUIDv7 = Field(default_factory=new_uuid7)
    method: PlacementMethod
    seed: int | None = None
    feature_count: int = Field(..., ge=0)
    unit_count: int = Field(
        ...,
        ge=0,
        description="Number of (feature, category) generation units attempted.",
    )
    dot_count: int = Field(..., ge=0)
    failed_count: int = Field(default=0, ge=0)
    degenerate_count: int = Field(default=0, ge=0)
    created_at: UTCTimestamp = Field(default_factory=utc_now)


class FeatureFailure(DotDensityBase, frozen=True):
    """A (feature, category) unit that could not be generated."""

    feature_id: str
    category: str | None = None
    error_type: str = Field(..., min_length=1)
    message: str = ""
