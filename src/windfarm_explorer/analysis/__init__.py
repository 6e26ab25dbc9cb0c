"""Occurrence/extension joins, spatial filters and aggregations.

Every module here is pure: tables in, new tables out. Inputs are never
mutated, and calling a function twice on the same input gives the same
result.

Dependency rule: analysis/ never fetches data or renders output. It takes
plain ``list[dict]`` tables from datasources/ and returns dataclasses or
tables that a presentation layer can iterate.

Modules:
  - geometry_index: named region polygons, inclusive point membership
  - unnest: core + extension tables -> one row per extension record
  - spatial: point geometry, bounding-box / region filters, region tagging
  - measurements: typed numeric aggregation of measurementValue
  - taxonomy: ranked occurrence counts per taxonomic rank combination
  - pipeline: runs the steps above for one dataset

Per-record problems (missing key, no core match, unparseable value, bad
coordinates) are counted in ``errors.Diagnostics`` on each result, never
raised. ``errors.ConfigurationError`` is raised for caller mistakes.
"""

from windfarm_explorer.analysis.geometry_index import GeometryIndex, RegionPolygon
from windfarm_explorer.analysis.measurements import (
    AggregationResult,
    aggregate,
    list_measurement_types,
    parse_value,
)
from windfarm_explorer.analysis.pipeline import ExplorationReport, explore
from windfarm_explorer.analysis.spatial import (
    SpatialResult,
    attach_points,
    point_for,
    tag_regions,
    within_bounds,
    within_region,
)
from windfarm_explorer.analysis.taxonomy import summarize
from windfarm_explorer.analysis.unnest import UnnestResult, unnest_extension

__all__ = [
    "AggregationResult",
    "ExplorationReport",
    "GeometryIndex",
    "RegionPolygon",
    "SpatialResult",
    "UnnestResult",
    "aggregate",
    "attach_points",
    "explore",
    "list_measurement_types",
    "parse_value",
    "point_for",
    "summarize",
    "tag_regions",
    "unnest_extension",
    "within_bounds",
    "within_region",
]
