"""Occurrence + extension retrieval for one OBIS dataset.

OBIS returns extension records nested inside each occurrence
(``record["mof"]`` for MeasurementOrFact, ``record["extensions"][name]``
for the others). ``fetch`` splits them into two flat tables, the shape
analysis/unnest.py consumes.

Both tables carry ``occurrenceKey``, copied from the occurrence's OBIS
``id`` (or its ``occurrenceID`` when ``id`` is absent). A sampling event
usually holds many occurrences, so only this key ties a measurement to the
single occurrence it was nested under; ``eventID`` stays available for
grouping.
"""

from __future__ import annotations

from typing import Any

from windfarm_explorer.datasources.obis import client
from windfarm_explorer.reference import OCCURRENCE_KEY_FIELD

MEASUREMENT_OR_FACT = "MeasurementOrFact"

# Nested keys that are pulled out of the core record
_NESTED_KEYS = ("mof", "extensions")

# Parent identifiers, in order of preference
_RECORD_ID_FIELDS = ("id", "occurrenceID")


def _extension_params(extension_name: str) -> dict[str, str]:
    if extension_name == MEASUREMENT_OR_FACT:
        return {"mof": "true"}
    return {"extensions": extension_name}


def _nested_rows(record: dict[str, Any], extension_name: str) -> list[dict[str, Any]]:
    if extension_name == MEASUREMENT_OR_FACT:
        rows = record.get("mof")
    else:
        rows = (record.get("extensions") or {}).get(extension_name)
    return list(rows or [])


def _occurrence_key(record: dict[str, Any]) -> Any:
    """The record's OBIS ``id``, else its ``occurrenceID``, else None."""
    for name in _RECORD_ID_FIELDS:
        value = record.get(name)
        if value not in (None, ""):
            return value
    return None


def split_records(
    records: list[dict[str, Any]],
    extension_name: str = MEASUREMENT_OR_FACT,
    *,
    join_key: str = OCCURRENCE_KEY_FIELD,
) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
    """Separate raw OBIS results into (core, extension) tables.

    Every core and extension row gets ``occurrenceKey`` from its occurrence.
    With another ``join_key`` (e.g. ``eventID``), extension rows that lack
    it inherit the parent's value; rows carrying their own keep it.
    """
    core: list[dict[str, Any]] = []
    extension: list[dict[str, Any]] = []
    for record in records:
        key = _occurrence_key(record)
        parent = {k: v for k, v in record.items() if k not in _NESTED_KEYS}
        parent[OCCURRENCE_KEY_FIELD] = key
        core.append(parent)
        for nested in _nested_rows(record, extension_name):
            row = dict(nested)
            row[OCCURRENCE_KEY_FIELD] = key
            if join_key not in row and join_key in record:
                row[join_key] = record[join_key]
            extension.append(row)
    return core, extension


def fetch(
    dataset_id: str,
    extension_name: str = MEASUREMENT_OR_FACT,
    *,
    join_key: str = OCCURRENCE_KEY_FIELD,
    api_url: str = client.API_BASE,
    page_size: int = client.DEFAULT_PAGE_SIZE,
    max_pages: int = 20,
) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
    """
    Fetch a dataset's occurrences and one of its extensions.

    Args:
        dataset_id: OBIS dataset UUID.
        extension_name: ``MeasurementOrFact`` or another OBIS extension name.
        join_key: Field linking extension rows to their occurrence
            (``occurrenceKey`` unless overridden).
        api_url: API root.
        page_size: Records per request.
        max_pages: Maximum requests.

    Returns:
        ``(core_rows, extension_rows)``. A dataset without the extension
        gives an empty extension table.
    """
    params: dict[str, Any] = {"datasetid": dataset_id, **_extension_params(extension_name)}
    raw = client.get_occurrences_paginated(
        params, api_url=api_url, page_size=page_size, max_pages=max_pages
    )
    return split_records(raw, extension_name, join_key=join_key)
