"""Geometry and feature models — the read-only inputs of a dot-density run.

Rings are plain vertex lists. A ring may repeat its first vertex at the end
or leave the closing edge implicit; the engine treats both the same way.
Ring validity (vertex count, finite coordinates) is checked by the engine at
generation time so that one malformed feature fails alone instead of at load.
"""

from typing import Annotated, Literal

from pydantic import Field

from dotdensity.models.common import DotDensityBase, Vertex


class PolygonGeometry(DotDensityBase, frozen=True):
    """One polygon: an exterior ring with zero or more hole rings."""

    type: Literal["Polygon"] = "Polygon"
    exterior: list[Vertex]
    holes: list[list[Vertex]] = Field(default_factory=list)


class MultiPolygonGeometry(DotDensityBase, frozen=True):
    """Disjoint polygons sharing one attribute record."""

    type: Literal["MultiPolygon"] = "MultiPolygon"
    polygons: list[PolygonGeometry]


Geometry = Annotated[
    PolygonGeometry | MultiPolygonGeometry,
    Field(discriminator="type"),
]


class Feature(DotDensityBase, frozen=True):
    """A geographic unit plus the values to visualise over it.

    ``dot_counts`` holds per-category dot counts already scaled by the
    units-per-dot divisor; its insertion order is the category order used
    when the feature is rendered. ``attributes`` keeps the raw values the
    counts were derived from, with ``None`` for missing values.
    """

    feature_id: str = Field(..., min_length=1)
    geometry: Geometry
    dot_counts: dict[str, int] = Field(default_factory=dict)
    attributes: dict[str, float | None] = Field(default_factory=dict)

    @property
    def total_dots(self) -> int:
        """Sum of dot counts across categories."""
        return sum(self.dot_counts.values())
