"""Fault taxonomy and diagnostic counters.

Per-record faults never abort a call: the analysis functions drop the record
and count it in a ``Diagnostics`` object returned alongside the result.
Caller programming errors raise ``ConfigurationError`` immediately.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class ConfigurationError(ValueError):
    """Raised for invalid caller input: unknown op, nonexistent field, bad bounds."""


class Fault(StrEnum):
    """Per-record data faults recovered locally and counted."""

    MISSING_KEY = "missing_key"
    UNMATCHED_JOIN = "unmatched_join"
    DUPLICATE_KEY = "duplicate_key"
    COERCION = "coercion"
    INVALID_COORDINATE = "invalid_coordinate"


@dataclass
class Diagnostics:
    """Counts of records dropped or flagged, keyed by fault."""

    counts: dict[Fault, int] = field(default_factory=dict)

    def record(self, fault: Fault, n: int = 1) -> None:
        self.counts[fault] = self.counts.get(fault, 0) + n

    def __getitem__(self, fault: Fault) -> int:
        return self.counts.get(fault, 0)

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def merge(self, other: Diagnostics) -> Diagnostics:
        """Return a new Diagnostics summing both sides."""
        merged = Diagnostics(dict(self.counts))
        for fault, n in other.counts.items():
            merged.record(fault, n)
        return merged

    def as_dict(self) -> dict[str, int]:
        """Plain ``{fault: count}`` dict with every fault present."""
        return {fault.value: self[fault] for fault in Fault}
