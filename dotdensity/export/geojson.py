"""GeoJSON export of generated dots for the rendering collaborator.

One Point feature per dot, properties ``feature_id`` and ``category``.
Coordinates are written as generated; no reprojection happens here.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path

from dotdensity.engine.generator import DotSet


def dot_sets_to_geojson(dot_sets: Iterable[DotSet]) -> dict:
    """Build a GeoJSON FeatureCollection, preserving dot order."""
    features = [
        {
            "type": "Feature",
            "geometry": {"type": "Point", "coordinates": [dot.x, dot.y]},
            "properties": {"feature_id": ds.feature_id, "category": dot.category},
        }
        for ds in dot_sets
        for dot in ds.dots
    ]
    return {"type": "FeatureCollection", "features": features}


def write_geojson(path: str | Path, dot_sets: Iterable[DotSet]) -> Path:
    """Write dots as a GeoJSON file and return its path."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(dot_sets_to_geojson(dot_sets)), encoding="utf-8")
    return path
