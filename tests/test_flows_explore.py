"""
Tests for the explore flow module.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any
from unittest.mock import Mock, patch

from windfarm_explorer.flows import explore
from windfarm_explorer.schemas import ExplorationRequest

if TYPE_CHECKING:
    from pathlib import Path


def _obis_results() -> list[dict[str, Any]]:
    return [
        {
            "id": "a",
            "eventID": "E1",
            "decimalLongitude": 2.9,
            "decimalLatitude": 51.6,
            "class": "Polychaeta",
            "order": "Phyllodocida",
            "mof": [
                {
                    "measurementType": "Biomass",
                    "measurementValue": "12.5",
                    "measurementUnit": "mg AFDW/m2",
                },
                {
                    "measurementType": "Biomass",
                    "measurementValue": "not_a_number",
                    "measurementUnit": "mg AFDW/m2",
                },
            ],
        },
        {
            "id": "b",
            "eventID": "E3",
            "decimalLongitude": 3.3,
            "decimalLatitude": 51.6,
            "class": "Bivalvia",
            "order": "Venerida",
        },
    ]


def _mock_response(results: list[dict[str, Any]]) -> Mock:
    resp = Mock()
    resp.json.return_value = {"total": len(results), "results": results}
    resp.raise_for_status = Mock()
    return resp


class TestFetchDataset:
    """Test the fetch task."""

    @patch("windfarm_explorer.services.http.ObisSession.get")
    def test_fetch_dataset(self, mock_get: Mock) -> None:
        mock_get.return_value = _mock_response(_obis_results())

        core, extension = explore.fetch_dataset("ds-uuid", "MeasurementOrFact", "eventID")

        assert len(core) == 2
        assert len(extension) == 2
        assert mock_get.call_args.kwargs["params"]["datasetid"] == "ds-uuid"


class TestExploreDatasetFlow:
    """Test the explore flow end to end with a mocked OBIS API."""

    @patch("windfarm_explorer.services.http.ObisSession.get")
    def test_explore_dataset(self, mock_get: Mock) -> None:
        mock_get.return_value = _mock_response(_obis_results())

        result = explore.explore_dataset(ExplorationRequest(dataset_id="ds-uuid"))

        assert result["core_count"] == 2
        assert result["extension_count"] == 2
        assert result["measurement_count"] == 2
        assert result["aggregation"] == [{"key": "E1", "sum": 12.5}]
        assert result["unparseable"] == 1
        assert result["taxonomy"][0]["count"] == 1

    @patch("windfarm_explorer.services.http.ObisSession.get")
    def test_shared_event_joins_each_occurrence_once(self, mock_get: Mock) -> None:
        """Occurrences sharing an event keep their own measurements and taxonomy."""
        results = _obis_results()
        results[1]["eventID"] = "E1"
        results[1]["mof"] = [
            {
                "measurementType": "Biomass",
                "measurementValue": "1.0",
                "measurementUnit": "mg AFDW/m2",
            }
        ]
        mock_get.return_value = _mock_response(results)

        result = explore.explore_dataset(
            ExplorationRequest(dataset_id="ds-uuid", group_key="class")
        )

        assert result["extension_count"] == 3
        assert result["measurement_count"] == 3
        assert [(r["class"], r["measurementValue"]) for r in result["measurements"]] == [
            ("Polychaeta", "12.5"),
            ("Polychaeta", "not_a_number"),
            ("Bivalvia", "1.0"),
        ]
        assert result["aggregation"] == [
            {"key": "Polychaeta", "sum": 12.5},
            {"key": "Bivalvia", "sum": 1.0},
        ]
        assert result["diagnostics"]["unnest"]["duplicate_key"] == 0

    @patch("windfarm_explorer.services.http.ObisSession.get")
    def test_explore_with_regions(self, mock_get: Mock, tmp_path: Path) -> None:
        mock_get.return_value = _mock_response(_obis_results())
        regions_path = tmp_path / "farms.geojson"
        regions_path.write_text(
            json.dumps(
                {
                    "type": "FeatureCollection",
                    "features": [
                        {
                            "type": "Feature",
                            "properties": {"name": "Concession", "country": "BE"},
                            "geometry": {
                                "type": "Polygon",
                                "coordinates": [
                                    [
                                        [2.8, 51.5],
                                        [3.0, 51.5],
                                        [3.0, 51.7],
                                        [2.8, 51.7],
                                        [2.8, 51.5],
                                    ]
                                ],
                            },
                        }
                    ],
                }
            )
        )

        result = explore.explore_dataset(
            ExplorationRequest(dataset_id="ds-uuid", region_name="Concession"),
            regions_path=regions_path,
        )

        assert [r["eventID"] for r in result["occurrences"]] == ["E1"]
        assert result["occurrences"][0]["regions"] == ["Concession"]
