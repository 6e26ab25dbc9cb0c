"""Compose the analysis steps for one dataset.

unnest -> spatial filter (bounds, region) -> region tagging ->
{aggregate measurements, summarize taxonomy}

Each step takes the previous step's table and returns a new one; region
geometry is passed in explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from windfarm_explorer.analysis.geometry_index import GeometryIndex
from windfarm_explorer.analysis.measurements import (
    AggregationResult,
    aggregate,
    list_measurement_types,
)
from windfarm_explorer.analysis.rows import Row, present_fields
from windfarm_explorer.analysis.spatial import (
    GEOMETRY_FIELD,
    SpatialResult,
    tag_regions,
    within_bounds,
    within_region,
)
from windfarm_explorer.analysis.taxonomy import summarize
from windfarm_explorer.analysis.unnest import unnest_extension
from windfarm_explorer.errors import ConfigurationError, Diagnostics
from windfarm_explorer.reference import DEFAULT_PROPAGATED_FIELDS
from windfarm_explorer.schemas import ExplorationRequest


@dataclass
class ExplorationReport:
    """The derived tables for one dataset, plus what was dropped on the way."""

    dataset_id: str
    core_count: int
    extension_count: int
    occurrences: list[Row] = field(default_factory=list)
    measurements: list[Row] = field(default_factory=list)
    measurement_types: list[Row] = field(default_factory=list)
    aggregation: AggregationResult | None = None
    taxonomy: list[Row] = field(default_factory=list)
    diagnostics: dict[str, Diagnostics] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly summary (geometry objects stripped)."""
        agg = self.aggregation
        return {
            "dataset_id": self.dataset_id,
            "core_count": self.core_count,
            "extension_count": self.extension_count,
            "occurrence_count": len(self.occurrences),
            "measurement_count": len(self.measurements),
            "occurrences": [_plain(r) for r in self.occurrences],
            "measurements": [_plain(r) for r in self.measurements],
            "measurement_types": self.measurement_types,
            "aggregation": agg.as_rows(key_field="key") if agg else [],
            "unparseable": agg.unparseable if agg else 0,
            "fully_unparseable": agg.fully_unparseable if agg else [],
            "taxonomy": self.taxonomy,
            "diagnostics": {step: d.as_dict() for step, d in self.diagnostics.items()},
        }


def _plain(row: Row) -> Row:
    return {k: v for k, v in row.items() if k != GEOMETRY_FIELD}


def _filter(
    rows: list[Row], request: ExplorationRequest, index: GeometryIndex | None
) -> SpatialResult:
    result = SpatialResult(rows=rows)
    if request.bounds is not None:
        result = within_bounds(result.rows, *request.bounds.as_tuple())
    if request.region_name is not None:
        if index is None:
            msg = f"Region {request.region_name!r} requested but no regions were loaded"
            raise ConfigurationError(msg)
        narrowed = within_region(result.rows, index.get(request.region_name))
        narrowed.diagnostics = result.diagnostics.merge(narrowed.diagnostics)
        result = narrowed
    if index is not None:
        tagged = tag_regions(result.rows, index)
        tagged.diagnostics = result.diagnostics.merge(tagged.diagnostics)
        result = tagged
    return result


def explore(
    core: list[Row],
    extension: list[Row],
    request: ExplorationRequest,
    index: GeometryIndex | None = None,
) -> ExplorationReport:
    """Run every analysis step for one dataset's core + extension tables."""
    fields = present_fields(core, DEFAULT_PROPAGATED_FIELDS)
    unnested = unnest_extension(core, extension, fields, key=request.join_key)

    occurrences = _filter(list(core), request, index)
    measurements = _filter(unnested.rows, request, index)

    aggregation = aggregate(
        measurements.rows,
        request.measurement_type,
        request.group_key,
        request.op,
        unit=request.unit,
    )
    taxonomy = summarize(occurrences.rows, request.rank_fields)

    return ExplorationReport(
        dataset_id=request.dataset_id,
        core_count=len(core),
        extension_count=len(extension),
        occurrences=occurrences.rows,
        measurements=measurements.rows,
        measurement_types=list_measurement_types(measurements.rows),
        aggregation=aggregation,
        taxonomy=taxonomy,
        diagnostics={
            "unnest": unnested.diagnostics,
            "occurrences_spatial": occurrences.diagnostics,
            "measurements_spatial": measurements.diagnostics,
            "aggregation": aggregation.diagnostics,
        },
    )
