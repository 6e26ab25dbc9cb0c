"""OBIS API v3 client: URLs, page sizes, cursor pagination."""

from __future__ import annotations

import logging
from typing import Any

from windfarm_explorer.services.http import get_json

logger = logging.getLogger(__name__)

API_BASE = "https://api.obis.org/v3"

MAX_PAGE_SIZE = 10000  # hard limit of the occurrence endpoint
DEFAULT_PAGE_SIZE = 5000


def get_occurrences_paginated(
    params: dict[str, Any],
    *,
    api_url: str = API_BASE,
    page_size: int = DEFAULT_PAGE_SIZE,
    max_pages: int = 20,
) -> list[dict[str, Any]]:
    """
    Fetch occurrence records, following the ``after`` cursor.

    OBIS orders results by record ``id``; each request asks for records
    after the last id seen. Stops on a short page or after ``max_pages``.

    Args:
        params: Query parameters (``datasetid``, ``mof``, ``extensions`` ...).
        api_url: API root, without trailing slash.
        page_size: Records per request (capped at 10000).
        max_pages: Safety limit on requests.

    Returns:
        Raw result dicts in API order.
    """
    size = min(page_size, MAX_PAGE_SIZE)
    url = f"{api_url.rstrip('/')}/occurrence"
    records: list[dict[str, Any]] = []
    after: str | None = None

    for page in range(max_pages):
        query = {**params, "size": size}
        if after is not None:
            query["after"] = after
        results: list[dict[str, Any]] = get_json(url, query).get("results", [])
        records.extend(results)
        logger.debug("OBIS page %d: %d records", page + 1, len(results))

        if len(results) < size:
            return records
        after = results[-1].get("id")
        if after is None:
            return records

    logger.warning(
        "Stopped after %d pages (%d records); dataset may be truncated", max_pages, len(records)
    )
    return records
