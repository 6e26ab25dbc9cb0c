"""Windfarm Explorer - biodiversity measurements from offshore wind-farm monitoring.

Architecture::

    datasources/   OBIS occurrences + extensions, region polygons (GeoJSON)
    analysis/      Pure logic: extension unnesting, spatial filters,
                   measurement aggregation, taxonomic summaries
    reference/     Darwin Core field names, defaults, area bounds
    flows/         Prefect orchestration (fetch -> analyse -> report)
    services/      Shared utilities (HTTP client with retry)

Data flow: datasources -> analysis (unnest -> spatial -> aggregate/summarize)
-> report tables for a presentation layer.

Extension points - see each package's docstring:
  - New data source:   datasources/__init__.py
  - New analysis:      analysis/__init__.py
"""

__version__ = "0.1.0"

from windfarm_explorer.config import Settings
from windfarm_explorer.errors import ConfigurationError, Diagnostics, Fault

__all__ = ["ConfigurationError", "Diagnostics", "Fault", "Settings", "__version__"]
