"""Aggregate MeasurementOrFact values per event, taxon, or any other field.

``measurementValue`` is kept as text until ``aggregate`` is asked for a
numeric reduction of one ``measurementType``. Values that do not parse as a
finite float are excluded from the reduction and counted per group, so one
bad cell never sinks the batch.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Hashable, Sequence
from dataclasses import dataclass, field
from typing import Any

from windfarm_explorer.analysis.rows import Row, group_value, null_to_none, require_fields
from windfarm_explorer.errors import ConfigurationError, Diagnostics, Fault
from windfarm_explorer.reference import (
    MEASUREMENT_TYPE_FIELD,
    MEASUREMENT_UNIT_FIELD,
    MEASUREMENT_VALUE_FIELD,
)
from windfarm_explorer.schemas import AggregationOp

logger = logging.getLogger(__name__)


@dataclass
class AggregationResult:
    """Group key -> reduced value, with per-group parse diagnostics.

    ``values`` has no meaningful order; use ``as_rows`` to sort explicitly.
    """

    measurement_type: str
    op: AggregationOp
    values: dict[Hashable, float | int] = field(default_factory=dict)
    unparseable_by_group: dict[Hashable, int] = field(default_factory=dict)
    units: set[str] = field(default_factory=set)
    parsed_by_group: dict[Hashable, int] = field(default_factory=dict)
    matched: int = 0
    diagnostics: Diagnostics = field(default_factory=Diagnostics)

    @property
    def unparseable(self) -> int:
        return self.diagnostics[Fault.COERCION]

    @property
    def fully_unparseable(self) -> list[Hashable]:
        """Groups where no value could be parsed."""
        return [
            key
            for key, bad in self.unparseable_by_group.items()
            if bad and self.parsed_by_group.get(key, 0) == 0
        ]

    def as_rows(
        self,
        key_field: str = "key",
        value_field: str | None = None,
        sort_by: str = "value",
    ) -> list[Row]:
        """Ordered table for presentation.

        Args:
            key_field: Column name for the group key.
            value_field: Column name for the value (defaults to the op name).
            sort_by: ``"value"`` (descending, ties by key) or ``"key"`` (ascending).
        """
        value_field = value_field or self.op.value
        if sort_by == "value":
            items = sorted(self.values.items(), key=lambda kv: (-kv[1], str(kv[0])))
        elif sort_by == "key":
            items = sorted(self.values.items(), key=lambda kv: (kv[0] is None, str(kv[0])))
        else:
            msg = f"sort_by must be 'value' or 'key', got {sort_by!r}"
            raise ConfigurationError(msg)
        return [{key_field: key, value_field: value} for key, value in items]


def parse_value(value: Any) -> float | None:
    """Parse a measurement value as a finite float, or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        number = float(value)
    else:
        try:
            number = float(str(value).strip())
        except ValueError:
            return None
    return number if math.isfinite(number) else None


def _resolve_op(op: str | AggregationOp) -> AggregationOp:
    try:
        return AggregationOp(op)
    except ValueError:
        allowed = ", ".join(o.value for o in AggregationOp)
        msg = f"Unknown aggregation op {op!r}; expected one of: {allowed}"
        raise ConfigurationError(msg) from None


def aggregate(
    unnested: Sequence[dict[str, Any]],
    measurement_type: str,
    group_key: str,
    op: str | AggregationOp = AggregationOp.SUM,
    *,
    unit: str | None = None,
) -> AggregationResult:
    """Reduce numeric values of one measurement type per group.

    Args:
        unnested: Rows from ``unnest_extension``.
        measurement_type: Exact, case-sensitive ``measurementType`` to keep.
        group_key: Field to group by (e.g. ``eventID``, ``class``,
            ``regions``). Null values group under None; list values group
            as tuples.
        op: ``sum``, ``count`` (parseable values) or ``mean``.
        unit: When given, also require an exact ``measurementUnit`` match.

    Returns:
        AggregationResult. A group whose values all fail to parse reports
        0 for ``sum`` and ``count``; for ``mean`` it is left out of
        ``values``. Either way it is listed in ``fully_unparseable``.

    Raises:
        ConfigurationError: unknown ``op``, ``group_key`` absent from every
            row, or ``group_key`` holding mappings.
    """
    resolved = _resolve_op(op)
    require_fields(unnested, [group_key], "group_key")

    result = AggregationResult(measurement_type=measurement_type, op=resolved)
    sums: dict[Hashable, float] = {}

    for row in unnested:
        if row.get(MEASUREMENT_TYPE_FIELD) != measurement_type:
            continue
        if unit is not None and row.get(MEASUREMENT_UNIT_FIELD) != unit:
            continue
        result.matched += 1
        group = group_value(row.get(group_key), group_key)
        sums.setdefault(group, 0.0)
        result.parsed_by_group.setdefault(group, 0)

        number = parse_value(row.get(MEASUREMENT_VALUE_FIELD))
        if number is None:
            result.diagnostics.record(Fault.COERCION)
            result.unparseable_by_group[group] = result.unparseable_by_group.get(group, 0) + 1
            logger.debug(
                "Unparseable %s value %r in group %r",
                measurement_type,
                row.get(MEASUREMENT_VALUE_FIELD),
                group,
            )
            continue

        sums[group] += number
        result.parsed_by_group[group] += 1
        row_unit = row.get(MEASUREMENT_UNIT_FIELD)
        if row_unit is not None:
            result.units.add(row_unit)

    for group, total in sums.items():
        n = result.parsed_by_group[group]
        if resolved is AggregationOp.SUM:
            result.values[group] = total
        elif resolved is AggregationOp.COUNT:
            result.values[group] = n
        elif n:
            result.values[group] = total / n

    if len(result.units) > 1:
        logger.warning(
            "Aggregating %r across mixed units: %s", measurement_type, sorted(result.units)
        )
    if result.unparseable:
        logger.warning(
            "%d of %d %r values could not be parsed as numbers",
            result.unparseable,
            result.matched,
            measurement_type,
        )
    return result


def list_measurement_types(rows: Sequence[dict[str, Any]]) -> list[Row]:
    """Distinct (measurementType, measurementUnit) pairs with row counts.

    Sorted by count descending, ties in first-seen order.
    """
    counts: dict[tuple[Any, Any], int] = {}
    for row in rows:
        pair = (
            null_to_none(row.get(MEASUREMENT_TYPE_FIELD)),
            null_to_none(row.get(MEASUREMENT_UNIT_FIELD)),
        )
        counts[pair] = counts.get(pair, 0) + 1
    ordered = sorted(counts.items(), key=lambda kv: -kv[1])
    return [
        {MEASUREMENT_TYPE_FIELD: mtype, MEASUREMENT_UNIT_FIELD: munit, "count": n}
        for (mtype, munit), n in ordered
    ]
