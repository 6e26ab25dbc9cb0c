"""Generic row helpers shared by the analysis modules.

A table is a ``list[dict[str, Any]]``; dataset schemas vary, so fields are
looked up by name rather than through fixed dataclasses.
"""

from __future__ import annotations

import math
from collections.abc import Hashable, Iterable, Mapping, Sequence
from typing import Any, TypeAlias

from windfarm_explorer.errors import ConfigurationError

Row: TypeAlias = dict[str, Any]


def is_null(value: Any) -> bool:
    """True for None, NaN and blank strings."""
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and not value.strip()


def null_to_none(value: Any) -> Any:
    return None if is_null(value) else value


def group_value(value: Any, field: str) -> Hashable:
    """Hashable grouping key for a field value.

    Nulls and empty lists group under None. Lists and tuples (e.g. the
    ``regions`` tags) become tuples, sets become sorted tuples.

    Raises:
        ConfigurationError: the value is a mapping or otherwise unhashable.
    """
    if is_null(value):
        return None
    if isinstance(value, list | tuple | set | frozenset):
        if not value:
            return None
        items = sorted(value, key=str) if isinstance(value, set | frozenset) else value
        return tuple(items)
    if isinstance(value, Hashable):
        return value
    msg = f"{field!r} holds {type(value).__name__} values, which cannot be grouped"
    raise ConfigurationError(msg)


def require_fields(rows: Sequence[Mapping[str, Any]], fields: Iterable[str], what: str) -> None:
    """Raise if a field is absent from every row.

    An empty table has no schema to check against, so it always passes.
    """
    if not rows:
        return
    seen: set[str] = set()
    for row in rows:
        seen.update(row.keys())
    missing = [f for f in fields if f not in seen]
    if missing:
        msg = f"{what} names nonexistent field(s): {', '.join(missing)}"
        raise ConfigurationError(msg)


def present_fields(rows: Sequence[Mapping[str, Any]], candidates: Iterable[str]) -> list[str]:
    """Subset of ``candidates`` that appear in at least one row, in candidate order."""
    seen: set[str] = set()
    for row in rows:
        seen.update(row.keys())
    return [f for f in candidates if f in seen]
