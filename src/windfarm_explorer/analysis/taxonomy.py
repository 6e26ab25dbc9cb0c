"""Occurrence counts per taxonomic rank combination."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from windfarm_explorer.analysis.rows import Row, group_value, require_fields
from windfarm_explorer.errors import ConfigurationError


def summarize(
    records: Sequence[dict[str, Any]],
    rank_fields: Sequence[str],
    *,
    count_field: str = "count",
) -> list[Row]:
    """Count records per ordered combination of rank values.

    Records missing a rank value are grouped under None rather than dropped;
    list values such as ``regions`` tags are counted as tuples.
    Output is sorted by count descending; equal counts keep first-seen order.

    Example::

        summarize(occurrences, ["class", "order"])
        # [{"class": "Polychaeta", "order": "Phyllodocida", "count": 41}, ...]

    Raises:
        ConfigurationError: ``rank_fields`` is empty or names a field absent
            from every record.
    """
    if not rank_fields:
        msg = "rank_fields must name at least one field"
        raise ConfigurationError(msg)
    require_fields(records, rank_fields, "rank_fields")

    counts: dict[tuple[Any, ...], int] = {}
    for record in records:
        group = tuple(group_value(record.get(f), f) for f in rank_fields)
        counts[group] = counts.get(group, 0) + 1

    ordered = sorted(counts.items(), key=lambda kv: -kv[1])
    return [{**dict(zip(rank_fields, group, strict=True)), count_field: n} for group, n in ordered]
