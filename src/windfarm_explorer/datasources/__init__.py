"""External data source integrations.

Each subdirectory is one data source with a consistent structure:

    datasources/{name}/
    ├── __init__.py       # Public API re-exports
    ├── client.py         # API URLs, constants, pagination (HTTP sources)
    └── {feature}.py      # Fetch/load functions (one per concept)

Current sources:
  - obis/     Occurrence Data Source: core occurrences + extension rows
  - regions/  Region Geometry Source: named polygons from GeoJSON files

Sources return fully materialized ``list[dict]`` tables (or dataclasses);
analysis/ never talks to the network or the filesystem.

Adding a new datasource
-----------------------
1. Create ``datasources/{name}/`` with files above.
2. Write fetch functions that return plain tables::

       from windfarm_explorer.services.http import get_json

       def fetch_something(dataset_id) -> list[dict[str, Any]]:
           return get_json(API_URL, {"datasetid": dataset_id})["results"]

3. Re-export public API in ``__init__.py`` with ``__all__``.
4. Wire into ``flows/explore.py`` as a ``@task``.
5. Add tests in ``tests/test_{name}.py``.
"""
