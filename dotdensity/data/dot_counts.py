"""Dot-count preparation — raw attribute values to per-category dot counts.

One dot stands for ``unit_per_dot`` raw units (e.g. 100 jobs). Counts are
``floor(raw / unit_per_dot)``; a missing value (None or NaN) counts as zero,
and so does an infinite one, with a warning.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence

from dotdensity.models.geometry import Feature, MultiPolygonGeometry, PolygonGeometry

logger = logging.getLogger(__name__)


def dot_count(raw_value: float | None, unit_per_dot: float) -> int:
    """Scale one raw value to a dot count.

    Negative raw values give negative counts; the generator rejects those,
    so a bad record fails alone rather than being silently zeroed.

    Raises:
        ValueError: unit_per_dot is not positive.
    """
    if not unit_per_dot > 0:
        msg = f"unit_per_dot must be positive, got {unit_per_dot}."
        raise ValueError(msg)
    if raw_value is None or math.isnan(raw_value):
        return 0
    scaled = raw_value / unit_per_dot
    if not math.isfinite(scaled):
        logger.warning(
            "Raw value %s over %s units per dot is not finite; counted as missing",
            raw_value, unit_per_dot,
        )
        return 0
    return math.floor(scaled)


def dot_counts_from_attributes(
    attributes: Mapping[str, float | None],
    unit_per_dot: float,
    categories: Sequence[str] | None = None,
) -> dict[str, int]:
    """Per-category dot counts, in ``categories`` order (default: attribute order).

    A category absent from ``attributes`` counts as missing, i.e. zero.
    """
    names = list(categories) if categories is not None else list(attributes)
    return {name: dot_count(attributes.get(name), unit_per_dot) for name in names}


def build_feature(
    feature_id: str,
    geometry: PolygonGeometry | MultiPolygonGeometry,
    attributes: Mapping[str, float | None],
    unit_per_dot: float,
    categories: Sequence[str] | None = None,
) -> Feature:
    """Feature with dot counts derived from its raw attributes."""
    return Feature(
        feature_id=feature_id,
        geometry=geometry,
        dot_counts=dot_counts_from_attributes(attributes, unit_per_dot, categories),
        attributes=dict(attributes),
    )
