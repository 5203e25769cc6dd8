"""Dot generator — turns a polygon and a dot count into a labelled point set.

Contract:
    generate(geometry, count, method) -> DotSet with len == count

Validation, in order:
1. count must be a non-negative integer (InvalidArgumentError).
2. every ring needs 3+ distinct finite vertices (InvalidArgumentError).
3. count == 0 -> empty DotSet.
4. zero-area geometry -> empty DotSet flagged degenerate, logged, not raised.

Multi-polygons split the count across parts by area (largest remainder),
generate each part with its own child seed, and concatenate in part order.

Pure and synchronous with no shared state, so safe to call from worker threads.
"""

import logging
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass

import numpy as np

from dotdensity.config.settings import Settings, get_settings
from dotdensity.engine.allocation import allocate_by_area
from dotdensity.engine.errors import InvalidArgumentError
from dotdensity.engine.geometry import PreparedPolygon, prepare_polygon
from dotdensity.engine.placement import random_points, regular_points
from dotdensity.models.common import PlacementMethod
from dotdensity.models.geometry import MultiPolygonGeometry, PolygonGeometry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Dot:
    """One point of a dot-density map."""

    x: float
    y: float
    category: str | None = None


@dataclass(frozen=True)
class DotSet:
    """Immutable output of one generation call."""

    dots: tuple[Dot, ...]
    method: PlacementMethod
    feature_id: str | None = None
    category: str | None = None
    degenerate: bool = False

    def __len__(self) -> int:
        return len(self.dots)

    def __iter__(self) -> Iterator[Dot]:
        return iter(self.dots)

    def coordinates(self) -> np.ndarray:
        """Dot positions as an ``(n, 2)`` array."""
        if not self.dots:
            return np.empty((0, 2), dtype=np.float64)
        return np.array([(d.x, d.y) for d in self.dots], dtype=np.float64)

    def categories(self) -> list[str | None]:
        """Category label of each dot, in order."""
        return [d.category for d in self.dots]

    @classmethod
    def concat(
        cls,
        dot_sets: Iterable["DotSet"],
        *,
        method: PlacementMethod,
        feature_id: str | None = None,
        category: str | None = None,
    ) -> "DotSet":
        """Join several DotSets, keeping each one's dots and labels in order."""
        dot_sets = list(dot_sets)
        dots = tuple(d for ds in dot_sets for d in ds.dots)
        return cls(
            dots=dots,
            method=method,
            feature_id=feature_id,
            category=category,
            degenerate=any(ds.degenerate for ds in dot_sets),
        )


def _check_count(count: object) -> int:
    if isinstance(count, bool) or not isinstance(count, int | np.integer):
        msg = f"count must be an integer, got {type(count).__name__}."
        raise InvalidArgumentError(msg)
    if count < 0:
        msg = f"count must be non-negative, got {count}."
        raise InvalidArgumentError(msg)
    return int(count)


def _check_seed(seed: object) -> int | None:
    if seed is None:
        return None
    if isinstance(seed, bool) or not isinstance(seed, int | np.integer) or seed < 0:
        msg = f"seed must be a non-negative integer or None, got {seed!r}."
        raise InvalidArgumentError(msg)
    return int(seed)


def _polygon_parts(
    geometry: PolygonGeometry | MultiPolygonGeometry,
) -> Sequence[PolygonGeometry]:
    if isinstance(geometry, MultiPolygonGeometry):
        if not geometry.polygons:
            msg = "multi-polygon has no parts."
            raise InvalidArgumentError(msg)
        return geometry.polygons
    if isinstance(geometry, PolygonGeometry):
        return [geometry]
    msg = f"unsupported geometry type {type(geometry).__name__}."
    raise InvalidArgumentError(msg)


class DotGenerator:
    """Places dots inside polygons using a regular grid or random sampling.

    Tuning (refinement and draw budgets, default method) comes from
    ``Settings``; the generator holds no other state.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()

    def resolve_method(self, method: PlacementMethod | str | None) -> PlacementMethod:
        """Map None to the configured default and strings to the enum."""
        if method is None:
            return self._settings.DEFAULT_METHOD
        try:
            return PlacementMethod(method)
        except ValueError as exc:
            msg = f"unknown placement method {method!r}."
            raise InvalidArgumentError(msg) from exc

    def generate(
        self,
        geometry: PolygonGeometry | MultiPolygonGeometry,
        count: int,
        method: PlacementMethod | str | None = None,
        *,
        seed: int | None = None,
        category: str | None = None,
        feature_id: str | None = None,
    ) -> DotSet:
        """Generate exactly ``count`` dots inside ``geometry``.

        Args:
            geometry: Polygon (with optional holes) or multi-polygon.
            count: Number of dots to place.
            method: ``regular`` or ``random``; None uses the configured default.
            seed: Seed for ``random`` placement. None = not reproducible.
            category: Label attached to every dot.
            feature_id: Source feature identifier, carried on the DotSet.

        Returns:
            DotSet of length ``count``, or empty and ``degenerate`` when the
            geometry has zero area.

        Raises:
            InvalidArgumentError: Negative or non-integer count, malformed
                ring, unknown method, or invalid seed.
            PlacementError: Placement budget exhausted.
        """
        count = _check_count(count)
        method = self.resolve_method(method)
        seed = _check_seed(seed)
        parts = [prepare_polygon(p.exterior, p.holes) for p in _polygon_parts(geometry)]

        if count == 0:
            return DotSet(dots=(), method=method, feature_id=feature_id, category=category)

        areas = [0.0 if p.is_degenerate else p.area for p in parts]
        if sum(areas) <= 0:
            logger.warning(
                "Degenerate geometry for feature %s (category %s): zero area, "
                "%d dots skipped",
                feature_id, category, count,
            )
            return DotSet(
                dots=(),
                method=method,
                feature_id=feature_id,
                category=category,
                degenerate=True,
            )

        shares = allocate_by_area(count, areas)
        child_seeds = np.random.SeedSequence(seed).spawn(len(parts))

        chunks: list[np.ndarray] = []
        for part, share, child_seed in zip(parts, shares, child_seeds):
            if share == 0:
                continue
            chunks.append(self._place(part, share, method, child_seed))

        points = np.concatenate(chunks)
        dots = tuple(Dot(float(x), float(y), category) for x, y in points)
        return DotSet(dots=dots, method=method, feature_id=feature_id, category=category)

    def _place(
        self,
        polygon: PreparedPolygon,
        count: int,
        method: PlacementMethod,
        seed_seq: np.random.SeedSequence,
    ) -> np.ndarray:
        s = self._settings
        if method == PlacementMethod.REGULAR:
            return regular_points(
                polygon,
                count,
                max_refinements=s.GRID_MAX_REFINEMENTS,
                max_grid_points=s.GRID_MAX_POINTS,
            )
        return random_points(
            polygon,
            count,
            np.random.default_rng(seed_seq),
            max_draw_factor=s.SAMPLING_MAX_DRAW_FACTOR,
            batch_limit=s.SAMPLING_BATCH_LIMIT,
        )
