"""
Request models for the exploration pipeline.

Records themselves stay generic dict rows (dataset schemas differ); these
models only validate what a caller asks the pipeline to do.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field, field_validator

from windfarm_explorer.reference import (
    DEFAULT_MEASUREMENT_TYPE,
    DEFAULT_RANK_FIELDS,
    OCCURRENCE_KEY_FIELD,
)


class AggregationOp(StrEnum):
    """Reductions supported by the measurement aggregator."""

    SUM = "sum"
    COUNT = "count"
    MEAN = "mean"


class Bounds(BaseModel):
    """Closed lon/lat rectangle in WGS84 degrees."""

    min_lon: float = Field(..., ge=-180, le=180)
    min_lat: float = Field(..., ge=-90, le=90)
    max_lon: float = Field(..., ge=-180, le=180)
    max_lat: float = Field(..., ge=-90, le=90)

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.min_lon, self.min_lat, self.max_lon, self.max_lat)


class ExplorationRequest(BaseModel):
    """Everything one run of the explore flow needs to know."""

    dataset_id: str = Field(..., min_length=1, description="OBIS dataset UUID")
    extension: str = "MeasurementOrFact"
    join_key: str = OCCURRENCE_KEY_FIELD
    measurement_type: str = DEFAULT_MEASUREMENT_TYPE
    group_key: str = "eventID"
    op: AggregationOp = AggregationOp.SUM
    unit: str | None = None
    rank_fields: list[str] = Field(default_factory=lambda: list(DEFAULT_RANK_FIELDS))
    bounds: Bounds | None = None
    region_name: str | None = None

    @field_validator("rank_fields")
    @classmethod
    def _non_empty_ranks(cls, value: list[str]) -> list[str]:
        if not value:
            msg = "rank_fields must name at least one field"
            raise ValueError(msg)
        return value
