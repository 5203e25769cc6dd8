"""Tests for GeoJSON export.

Covers: FeatureCollection shape, dot order, properties, file output.
"""

import json
from pathlib import Path

from dotdensity.engine.generator import Dot, DotSet
from dotdensity.export.geojson import dot_sets_to_geojson, write_geojson
from dotdensity.models.common import PlacementMethod


def _make_dot_sets() -> list[DotSet]:
    return [
        DotSet(
            dots=(Dot(0.25, 0.5, "jobs"), Dot(0.75, 0.5, "jobs")),
            method=PlacementMethod.REGULAR,
            feature_id="f1",
            category="jobs",
        ),
        DotSet(
            dots=(Dot(3.0, 4.0, "homes"),),
            method=PlacementMethod.REGULAR,
            feature_id="f2",
            category="homes",
        ),
    ]


class TestDotSetsToGeoJSON:
    """One Point feature per dot."""

    def test_collection(self) -> None:
        collection = dot_sets_to_geojson(_make_dot_sets())
        assert collection["type"] == "FeatureCollection"
        assert len(collection["features"]) == 3

    def test_point_features_in_order(self) -> None:
        features = dot_sets_to_geojson(_make_dot_sets())["features"]
        assert [f["geometry"]["coordinates"] for f in features] == [
            [0.25, 0.5], [0.75, 0.5], [3.0, 4.0],
        ]
        assert all(f["geometry"]["type"] == "Point" for f in features)

    def test_properties(self) -> None:
        features = dot_sets_to_geojson(_make_dot_sets())["features"]
        assert features[0]["properties"] == {"feature_id": "f1", "category": "jobs"}
        assert features[2]["properties"] == {"feature_id": "f2", "category": "homes"}

    def test_empty(self) -> None:
        assert dot_sets_to_geojson([]) == {"type": "FeatureCollection", "features": []}


class TestWriteGeoJSON:
    """File output."""

    def test_writes_file(self, tmp_path: Path) -> None:
        path = write_geojson(tmp_path / "out" / "dots.geojson", _make_dot_sets())
        assert path.exists()
        data = json.loads(path.read_text(encoding="utf-8"))
        assert len(data["features"]) == 3

    def test_accepts_str_path(self, tmp_path: Path) -> None:
        path = write_geojson(str(tmp_path / "dots.geojson"), [])
        assert isinstance(path, Path)
        assert json.loads(path.read_text(encoding="utf-8"))["features"] == []
