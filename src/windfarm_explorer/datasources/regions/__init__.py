"""Region geometry source: named polygons from static GeoJSON files."""

from windfarm_explorer.datasources.regions.loader import load_index, load_regions

__all__ = ["load_index", "load_regions"]
