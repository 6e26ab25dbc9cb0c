"""Named region polygons and point membership queries.

Containment is inclusive: a point lying exactly on a polygon edge or vertex
counts as inside (shapely ``covers`` rather than ``contains``). Overlapping
regions are all reported; there is no first-match-wins.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import TypeAlias

from shapely.geometry import Point, Polygon
from shapely.geometry.base import BaseGeometry

from windfarm_explorer.errors import ConfigurationError

PointLike: TypeAlias = Point | tuple[float, float]


@dataclass(frozen=True)
class RegionPolygon:
    """A named boundary such as a wind-farm concession."""

    name: str
    country: str | None
    geometry: BaseGeometry

    @classmethod
    def from_ring(
        cls,
        name: str,
        country: str | None,
        ring: Sequence[tuple[float, float]],
    ) -> RegionPolygon:
        """Build a region from an ordered ring of (lon, lat) vertices.

        The ring may be open or closed; shapely closes it.
        """
        distinct = {tuple(v) for v in ring}
        if len(distinct) < 3:
            msg = f"Region {name!r} needs at least 3 distinct vertices, got {len(distinct)}"
            raise ConfigurationError(msg)
        return cls(name=name, country=country, geometry=Polygon(ring))

    def covers(self, point: PointLike) -> bool:
        return bool(self.geometry.covers(_as_point(point)))


def _as_point(point: PointLike) -> Point:
    if isinstance(point, Point):
        return point
    lon, lat = point
    return Point(lon, lat)


class GeometryIndex:
    """Read-only lookup over a fixed set of regions.

    Built once from the region source and never mutated afterwards, so one
    instance can be shared between callers.
    """

    def __init__(self, regions: Iterable[RegionPolygon]) -> None:
        by_name: dict[str, RegionPolygon] = {}
        for region in regions:
            if region.name in by_name:
                msg = f"Duplicate region name: {region.name!r}"
                raise ConfigurationError(msg)
            by_name[region.name] = region
        self._regions: tuple[RegionPolygon, ...] = tuple(by_name.values())
        self._by_name = by_name

    def __len__(self) -> int:
        return len(self._regions)

    def __iter__(self) -> Iterator[RegionPolygon]:
        return iter(self._regions)

    @property
    def names(self) -> list[str]:
        return [r.name for r in self._regions]

    def get(self, region_name: str) -> RegionPolygon:
        """Return a region by name; unknown names are a caller error."""
        try:
            return self._by_name[region_name]
        except KeyError:
            msg = f"Unknown region {region_name!r}; known: {', '.join(self.names) or '(none)'}"
            raise ConfigurationError(msg) from None

    def contains(self, point: PointLike, region_name: str) -> bool:
        return self.get(region_name).covers(point)

    def regions_overlapping(self, point: PointLike) -> list[str]:
        """Names of every region covering ``point``, in load order."""
        pt = _as_point(point)
        return [r.name for r in self._regions if r.geometry.covers(pt)]
