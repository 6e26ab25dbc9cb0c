"""Point geometry for records with Darwin Core coordinates.

Every function returns new row dicts; the source table is never modified.
Records whose ``decimalLongitude``/``decimalLatitude`` are null, non-numeric
or out of range (|lon| > 180, |lat| > 90) get no geometry, are left out of
spatial filters, and are counted as ``Fault.INVALID_COORDINATE``.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from shapely.geometry import Point

from windfarm_explorer.analysis.geometry_index import GeometryIndex, RegionPolygon
from windfarm_explorer.analysis.rows import Row
from windfarm_explorer.errors import Diagnostics, Fault
from windfarm_explorer.reference import CRS, LAT_FIELD, LON_FIELD, BoundingBox

logger = logging.getLogger(__name__)

GEOMETRY_FIELD = "geometry"
REGIONS_FIELD = "regions"


@dataclass
class SpatialResult:
    """Rows kept by a spatial operation and the records it could not place."""

    rows: list[Row] = field(default_factory=list)
    diagnostics: Diagnostics = field(default_factory=Diagnostics)
    crs: str = CRS

    @property
    def invalid_coordinates(self) -> int:
        return self.diagnostics[Fault.INVALID_COORDINATE]


def _coerce_degree(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def point_for(record: dict[str, Any]) -> Point | None:
    """WGS84 point for a record, or None if its coordinates are unusable."""
    lon = _coerce_degree(record.get(LON_FIELD))
    lat = _coerce_degree(record.get(LAT_FIELD))
    if lon is None or lat is None:
        return None
    if abs(lon) > 180 or abs(lat) > 90:
        return None
    return Point(lon, lat)


def attach_points(records: Sequence[dict[str, Any]]) -> SpatialResult:
    """Copy every record with a ``geometry`` field (None when unplaceable)."""
    result = SpatialResult()
    for record in records:
        point = point_for(record)
        if point is None:
            result.diagnostics.record(Fault.INVALID_COORDINATE)
        result.rows.append({**record, GEOMETRY_FIELD: point})
    _log_invalid(result, len(records), "attach_points")
    return result


def _located(
    records: Sequence[dict[str, Any]], diagnostics: Diagnostics
) -> list[tuple[dict[str, Any], Point]]:
    located: list[tuple[dict[str, Any], Point]] = []
    for record in records:
        point = point_for(record)
        if point is None:
            diagnostics.record(Fault.INVALID_COORDINATE)
        else:
            located.append((record, point))
    return located


def within_bounds(
    records: Sequence[dict[str, Any]],
    min_lon: float,
    min_lat: float,
    max_lon: float,
    max_lat: float,
) -> SpatialResult:
    """Keep records inside the closed rectangle; edges count as inside.

    Raises:
        ConfigurationError: the rectangle is inverted.
    """
    bbox = BoundingBox(min_lon=min_lon, min_lat=min_lat, max_lon=max_lon, max_lat=max_lat)
    result = SpatialResult()
    for record, point in _located(records, result.diagnostics):
        if bbox.contains(point.x, point.y):
            result.rows.append({**record, GEOMETRY_FIELD: point})
    _log_invalid(result, len(records), "within_bounds")
    return result


def within_region(records: Sequence[dict[str, Any]], region: RegionPolygon) -> SpatialResult:
    """Keep records covered by ``region`` (exact test, boundary inclusive, no buffer)."""
    result = SpatialResult()
    for record, point in _located(records, result.diagnostics):
        if region.covers(point):
            result.rows.append({**record, GEOMETRY_FIELD: point})
    _log_invalid(result, len(records), f"within_region({region.name})")
    return result


def tag_regions(records: Sequence[dict[str, Any]], index: GeometryIndex) -> SpatialResult:
    """Add a ``regions`` list naming every region each record falls in.

    All records are returned; unplaceable ones get an empty list.
    """
    result = SpatialResult()
    for record in records:
        point = point_for(record)
        if point is None:
            result.diagnostics.record(Fault.INVALID_COORDINATE)
            names: list[str] = []
        else:
            names = index.regions_overlapping(point)
        result.rows.append({**record, GEOMETRY_FIELD: point, REGIONS_FIELD: names})
    _log_invalid(result, len(records), "tag_regions")
    return result


def _log_invalid(result: SpatialResult, total: int, operation: str) -> None:
    if result.invalid_coordinates:
        logger.warning(
            "%s: %d of %d records have missing or out-of-range coordinates",
            operation,
            result.invalid_coordinates,
            total,
        )
