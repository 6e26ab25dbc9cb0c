"""Geographic bounds and coordinate conventions for the monitored area."""

from __future__ import annotations

from dataclasses import dataclass

from windfarm_explorer.errors import ConfigurationError

#: Every point geometry is WGS84 lon/lat.
CRS = "EPSG:4326"

LON_FIELD = "decimalLongitude"
LAT_FIELD = "decimalLatitude"


@dataclass(frozen=True)
class BoundingBox:
    """Closed lon/lat rectangle (edges count as inside)."""

    min_lon: float
    min_lat: float
    max_lon: float
    max_lat: float

    def __post_init__(self) -> None:
        if self.min_lon > self.max_lon or self.min_lat > self.max_lat:
            msg = f"Inverted bounding box: {self}"
            raise ConfigurationError(msg)

    def contains(self, lon: float, lat: float) -> bool:
        return self.min_lon <= lon <= self.max_lon and self.min_lat <= lat <= self.max_lat


# Belgian part of the North Sea, which holds the monitored wind-farm concessions
BELGIAN_NORTH_SEA_BBOX = BoundingBox(min_lon=2.2, min_lat=51.0, max_lon=3.4, max_lat=51.9)
