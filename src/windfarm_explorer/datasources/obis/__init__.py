"""OBIS occurrence data source.

Retrieves occurrence records and their extension rows (MeasurementOrFact by
default) for one dataset from the Ocean Biodiversity Information System.

Public API:
  - client: Low-level HTTP (cursor pagination)
  - occurrences: fetch, split_records
"""

from windfarm_explorer.datasources.obis.client import API_BASE
from windfarm_explorer.datasources.obis.occurrences import (
    MEASUREMENT_OR_FACT,
    fetch,
    split_records,
)

__all__ = ["API_BASE", "MEASUREMENT_OR_FACT", "fetch", "split_records"]
