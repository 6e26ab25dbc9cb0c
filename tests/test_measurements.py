"""Tests for the measurement aggregation module."""

from __future__ import annotations

from typing import Any

import pytest

from windfarm_explorer.analysis.geometry_index import GeometryIndex, RegionPolygon
from windfarm_explorer.analysis.measurements import (
    aggregate,
    list_measurement_types,
    parse_value,
)
from windfarm_explorer.analysis.spatial import tag_regions
from windfarm_explorer.errors import ConfigurationError, Fault
from windfarm_explorer.schemas import AggregationOp


def _row(
    event_id: str | None,
    value: Any,
    mtype: str = "Biomass",
    unit: str | None = "mg/m2",
    cls: str | None = "Polychaeta",
) -> dict[str, Any]:
    return {
        "eventID": event_id,
        "class": cls,
        "measurementType": mtype,
        "measurementValue": value,
        "measurementUnit": unit,
    }


class TestParseValue:
    """Test numeric coercion of measurementValue."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("12.5", 12.5), (" 3 ", 3.0), ("-1e2", -100.0), (7, 7.0), (2.25, 2.25)],
    )
    def test_parses(self, raw: Any, expected: float) -> None:
        assert parse_value(raw) == expected

    @pytest.mark.parametrize("raw", ["not_a_number", "", None, "nan", "inf", True, "12,5"])
    def test_rejects(self, raw: Any) -> None:
        assert parse_value(raw) is None


class TestAggregate:
    """Test filter / coerce / group / reduce."""

    def test_sum_scenario(self) -> None:
        result = aggregate([_row("E1", "12.5")], "Biomass", "eventID", "sum")
        assert result.values == {"E1": 12.5}
        assert result.unparseable == 0

    def test_sum_per_group(self) -> None:
        rows = [_row("E1", "1.5"), _row("E2", "4"), _row("E1", "2.5")]
        result = aggregate(rows, "Biomass", "eventID", AggregationOp.SUM)
        assert result.values == {"E1": 4.0, "E2": 4.0}

    def test_count(self) -> None:
        rows = [_row("E1", "1"), _row("E1", "2"), _row("E2", "x")]
        result = aggregate(rows, "Biomass", "eventID", "count")
        assert result.values == {"E1": 2, "E2": 0}

    def test_mean(self) -> None:
        rows = [_row("E1", "1"), _row("E1", "2"), _row("E1", "bad")]
        result = aggregate(rows, "Biomass", "eventID", "mean")
        assert result.values == {"E1": pytest.approx(1.5)}

    def test_unparseable_excluded_and_counted(self) -> None:
        rows = [_row("E1", "10"), _row("E1", "not_a_number"), _row("E1", "2.5")]
        result = aggregate(rows, "Biomass", "eventID", "sum")
        assert result.values == {"E1": 12.5}
        assert result.unparseable == 1
        assert result.diagnostics[Fault.COERCION] == 1
        assert result.unparseable_by_group == {"E1": 1}

    def test_sum_matches_individual_values(self) -> None:
        values = ["0.1", "0.2", "0.3", "1e-3", "42"]
        rows = [_row("E1", v) for v in values]
        result = aggregate(rows, "Biomass", "eventID", "sum")
        assert result.values["E1"] == sum(float(v) for v in values)

    def test_fully_unparseable_group(self) -> None:
        rows = [_row("E1", "1"), _row("E2", "n/a"), _row("E2", "?")]
        summed = aggregate(rows, "Biomass", "eventID", "sum")
        counted = aggregate(rows, "Biomass", "eventID", "count")
        averaged = aggregate(rows, "Biomass", "eventID", "mean")

        assert summed.values["E2"] == 0
        assert counted.values["E2"] == 0
        assert "E2" not in averaged.values
        assert summed.fully_unparseable == ["E2"]
        assert averaged.fully_unparseable == ["E2"]

    def test_type_filter_is_exact(self) -> None:
        rows = [
            _row("E1", "1", mtype="Biomass"),
            _row("E1", "10", mtype="biomass"),
            _row("E1", "100", mtype="Biomass "),
            _row("E1", "1000", mtype="Abundance"),
        ]
        result = aggregate(rows, "Biomass", "eventID", "sum")
        assert result.values == {"E1": 1.0}
        assert result.matched == 1

    def test_empty_filtered_set(self) -> None:
        result = aggregate([_row("E1", "1", mtype="Abundance")], "Biomass", "eventID", "sum")
        assert result.values == {}
        assert result.matched == 0

    def test_empty_input(self) -> None:
        result = aggregate([], "Biomass", "anything", "sum")
        assert result.values == {}

    def test_group_by_taxon(self) -> None:
        rows = [_row("E1", "1", cls="A"), _row("E2", "2", cls="A"), _row("E3", "5", cls=None)]
        result = aggregate(rows, "Biomass", "class", "sum")
        assert result.values == {"A": 3.0, None: 5.0}

    def test_unit_filter(self) -> None:
        rows = [_row("E1", "1", unit="mg/m2"), _row("E1", "1000", unit="g/m2")]
        result = aggregate(rows, "Biomass", "eventID", "sum", unit="mg/m2")
        assert result.values == {"E1": 1.0}
        assert result.units == {"mg/m2"}

    def test_mixed_units_recorded(self) -> None:
        rows = [_row("E1", "1", unit="mg/m2"), _row("E1", "2", unit="g/m2")]
        result = aggregate(rows, "Biomass", "eventID", "sum")
        assert result.units == {"mg/m2", "g/m2"}

    def test_unknown_op_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="median"):
            aggregate([_row("E1", "1")], "Biomass", "eventID", "median")

    def test_unknown_group_key_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="station"):
            aggregate([_row("E1", "1")], "Biomass", "station", "sum")

    def test_group_by_region_tags(self) -> None:
        index = GeometryIndex(
            [
                RegionPolygon.from_ring("C-Power", "BE", [(2.9, 51.5), (3.0, 51.5), (3.0, 51.6)]),
                RegionPolygon.from_ring("Belwind", "BE", [(2.7, 51.6), (2.9, 51.6), (2.9, 51.7)]),
            ]
        )
        rows = [
            {**_row("E1", "2"), "decimalLongitude": 2.98, "decimalLatitude": 51.52},
            {**_row("E2", "3"), "decimalLongitude": 2.98, "decimalLatitude": 51.52},
            {**_row("E3", "5"), "decimalLongitude": 2.88, "decimalLatitude": 51.65},
            {**_row("E4", "7"), "decimalLongitude": 4.5, "decimalLatitude": 53.0},
        ]
        tagged = tag_regions(rows, index).rows

        result = aggregate(tagged, "Biomass", "regions", "sum")

        assert result.values == {("C-Power",): 5.0, ("Belwind",): 5.0, None: 7.0}

    def test_list_values_group_as_tuples(self) -> None:
        rows = [
            {**_row("E1", "1"), "regions": ["A", "B"]},
            {**_row("E2", "2"), "regions": ["A", "B"]},
            {**_row("E3", "4"), "regions": []},
        ]
        result = aggregate(rows, "Biomass", "regions", "sum")
        assert result.values == {("A", "B"): 3.0, None: 4.0}

    def test_mapping_group_values_raise(self) -> None:
        rows = [{**_row("E1", "1"), "station": {"name": "ZG02"}}]
        with pytest.raises(ConfigurationError, match="station"):
            aggregate(rows, "Biomass", "station", "sum")

    def test_idempotent(self) -> None:
        rows = [_row("E1", "1"), _row("E2", "bad")]
        first = aggregate(rows, "Biomass", "eventID", "sum")
        second = aggregate(rows, "Biomass", "eventID", "sum")
        assert first == second

    def test_partitioned_sum_merges_to_whole(self) -> None:
        rows = [_row(f"E{i % 3}", str(i)) for i in range(12)]
        whole = aggregate(rows, "Biomass", "eventID", "sum").values
        left = aggregate(rows[:5], "Biomass", "eventID", "sum").values
        right = aggregate(rows[5:], "Biomass", "eventID", "sum").values
        merged = {k: left.get(k, 0) + right.get(k, 0) for k in left.keys() | right.keys()}
        assert merged == whole


class TestAsRows:
    """Test explicit ordering for presentation."""

    def test_sort_by_value(self) -> None:
        rows = [_row("E1", "1"), _row("E2", "5"), _row("E3", "3")]
        result = aggregate(rows, "Biomass", "eventID", "sum")
        table = result.as_rows(key_field="eventID")
        assert table == [
            {"eventID": "E2", "sum": 5.0},
            {"eventID": "E3", "sum": 3.0},
            {"eventID": "E1", "sum": 1.0},
        ]

    def test_sort_by_key(self) -> None:
        rows = [_row("E2", "1"), _row("E1", "5")]
        result = aggregate(rows, "Biomass", "eventID", "count")
        table = result.as_rows(key_field="eventID", value_field="n", sort_by="key")
        assert table == [{"eventID": "E1", "n": 1}, {"eventID": "E2", "n": 1}]

    def test_bad_sort_raises(self) -> None:
        result = aggregate([_row("E1", "1")], "Biomass", "eventID", "sum")
        with pytest.raises(ConfigurationError):
            result.as_rows(sort_by="random")


class TestListMeasurementTypes:
    """Test discovery of measurement types and units."""

    def test_counts_pairs(self) -> None:
        rows = [
            _row("E1", "1", mtype="Abundance", unit="ind/m2"),
            _row("E1", "1"),
            _row("E2", "2"),
        ]
        assert list_measurement_types(rows) == [
            {"measurementType": "Biomass", "measurementUnit": "mg/m2", "count": 2},
            {"measurementType": "Abundance", "measurementUnit": "ind/m2", "count": 1},
        ]

    def test_empty(self) -> None:
        assert list_measurement_types([]) == []
