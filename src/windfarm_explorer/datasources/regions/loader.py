"""Load named region polygons (wind-farm concessions, coastlines) from GeoJSON."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from shapely.geometry import MultiPolygon, Polygon, shape

from windfarm_explorer.analysis.geometry_index import GeometryIndex, RegionPolygon
from windfarm_explorer.errors import ConfigurationError


def _feature_to_region(
    feature: dict[str, Any], name_field: str, country_field: str, source: Path
) -> RegionPolygon:
    props = feature.get("properties") or {}
    name = props.get(name_field)
    if not name:
        msg = f"{source}: feature without a {name_field!r} property"
        raise ConfigurationError(msg)

    geometry = shape(feature["geometry"])
    if not isinstance(geometry, Polygon | MultiPolygon):
        msg = f"{source}: region {name!r} is a {geometry.geom_type}, expected a polygon"
        raise ConfigurationError(msg)
    return RegionPolygon(name=str(name), country=props.get(country_field), geometry=geometry)


def load_regions(
    path: Path,
    *,
    name_field: str = "name",
    country_field: str = "country",
) -> list[RegionPolygon]:
    """
    Read a GeoJSON FeatureCollection of Polygon/MultiPolygon features.

    Coordinates are taken as WGS84 lon/lat, the GeoJSON default.

    Args:
        path: GeoJSON file.
        name_field: Feature property holding the region name.
        country_field: Feature property holding the country label.

    Returns:
        Regions in file order.
    """
    with path.open() as f:
        collection: dict[str, Any] = json.load(f)
    if collection.get("type") != "FeatureCollection":
        msg = f"{path}: expected a GeoJSON FeatureCollection"
        raise ConfigurationError(msg)
    return [
        _feature_to_region(feature, name_field, country_field, path)
        for feature in collection.get("features", [])
    ]


def load_index(path: Path, **kwargs: str) -> GeometryIndex:
    """Load regions from ``path`` straight into a GeometryIndex."""
    return GeometryIndex(load_regions(path, **kwargs))
