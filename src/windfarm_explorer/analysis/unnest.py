"""Join a core occurrence table with one of its extension tables.

Produces one row per extension record (e.g. MeasurementOrFact) with the
requested core fields copied onto it, so each measurement carries its
occurrence's coordinates, taxonomy and event identifiers.

Join policy is an inner join on ``key``:
  - extension rows with a null key are dropped (``Fault.MISSING_KEY``)
  - extension rows whose key is not in the core table are dropped
    (``Fault.UNMATCHED_JOIN``); their propagated fields would be empty
  - a key that occurs more than once in the core table fans out to one row
    per core match and is counted as ``Fault.DUPLICATE_KEY``, not suppressed

Core rows with a null key can never match and are counted as
``Fault.MISSING_KEY`` too.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from windfarm_explorer.analysis.rows import Row, is_null, require_fields
from windfarm_explorer.errors import Diagnostics, Fault
from windfarm_explorer.reference import DEFAULT_JOIN_KEY

logger = logging.getLogger(__name__)


@dataclass
class UnnestResult:
    """Unnested rows plus counts of extension rows that could not be joined."""

    rows: list[Row] = field(default_factory=list)
    diagnostics: Diagnostics = field(default_factory=Diagnostics)

    @property
    def missing_key(self) -> int:
        return self.diagnostics[Fault.MISSING_KEY]

    @property
    def unmatched(self) -> int:
        return self.diagnostics[Fault.UNMATCHED_JOIN]

    @property
    def duplicated(self) -> int:
        return self.diagnostics[Fault.DUPLICATE_KEY]


def _index_core(
    core: Sequence[dict[str, Any]], key: str, diagnostics: Diagnostics
) -> dict[Any, list[dict[str, Any]]]:
    index: dict[Any, list[dict[str, Any]]] = {}
    for row in core:
        value = row.get(key)
        if is_null(value):
            diagnostics.record(Fault.MISSING_KEY)
            continue
        index.setdefault(value, []).append(row)
    return index


def unnest_extension(
    core: Sequence[dict[str, Any]],
    extension: Sequence[dict[str, Any]],
    fields: Sequence[str],
    key: str = DEFAULT_JOIN_KEY,
) -> UnnestResult:
    """Flatten an extension table against its core table.

    Args:
        core: Core rows (one per occurrence), keyed by ``key``.
        extension: Extension rows referencing ``key``.
        fields: Core field names copied onto every output row. Copied values
            replace any same-named field of the extension row, so coordinates
            always come from the parent occurrence.
        key: Join field present in both tables.

    Returns:
        UnnestResult with rows in extension order. Neither input is mutated.

    Core or extension rows without a usable ``key`` (absent, None, NaN,
    blank) are dropped and counted as ``MISSING_KEY``, even when no row has
    the key at all.

    Raises:
        ConfigurationError: a name in ``fields`` is absent from every core row.
    """
    require_fields(core, [f for f in fields if f != key], "unnest fields")

    diagnostics = Diagnostics()
    index = _index_core(core, key, diagnostics)

    rows: list[Row] = []
    for ext in extension:
        value = ext.get(key)
        if is_null(value):
            diagnostics.record(Fault.MISSING_KEY)
            continue
        parents = index.get(value)
        if not parents:
            diagnostics.record(Fault.UNMATCHED_JOIN)
            logger.debug("Extension row with %s=%r has no core match", key, value)
            continue
        if len(parents) > 1:
            diagnostics.record(Fault.DUPLICATE_KEY)
        for parent in parents:
            rows.append({**ext, **{f: parent.get(f) for f in fields}})

    if diagnostics.total:
        logger.warning(
            "Unnested %d of %d extension rows (%s)",
            len(rows),
            len(extension),
            ", ".join(f"{k}={v}" for k, v in diagnostics.as_dict().items() if v),
        )
    return UnnestResult(rows=rows, diagnostics=diagnostics)
