"""Placement strategies — regular grid filtering and uniform rejection sampling.

Both return an ``(count, 2)`` array of coordinates inside a prepared,
non-degenerate polygon.

Regular placement reconciles the grid to the exact count in two ways:
shrinking the step and resampling while too few grid points survive, then
truncating the surplus from the tail of the raster-scan order (rows by
ascending y, each row by ascending x). It is fully deterministic.
"""

import logging
import math

import numpy as np

from dotdensity.engine.errors import PlacementError
from dotdensity.engine.geometry import PreparedPolygon, ring_row_spans, ring_tolerance

logger = logging.getLogger(__name__)

# Upper bound on the per-pass step shrink factor; guarantees progress.
_MAX_SHRINK = 0.9
# Oversampling margin applied to each random candidate batch.
_BATCH_MARGIN = 1.2


def _empty() -> np.ndarray:
    return np.empty((0, 2), dtype=np.float64)


def _grid_axis(lo: float, hi: float, step: float) -> np.ndarray:
    """Evenly spaced positions ``step`` apart, centred on ``[lo, hi]``.

    One position per whole step that fits, at least one.
    """
    n = max(1, int(math.floor((hi - lo) / step + 1e-9)))
    start = lo + ((hi - lo) - (n - 1) * step) / 2.0
    return start + step * np.arange(n, dtype=np.float64)


def grid_points(polygon: PreparedPolygon, step: float, *, max_points: int) -> np.ndarray:
    """Grid positions inside the polygon, in raster-scan order.

    Only grid positions within each row's span of the exterior ring are
    tested, so thin polygons with large bounding boxes stay cheap.

    Raises:
        PlacementError: More than ``max_points`` candidates would have to
            be tested.
    """
    min_x, min_y, max_x, max_y = polygon.bounds
    xs_axis = _grid_axis(min_x, max_x, step)
    ys_axis = _grid_axis(min_y, max_y, step)

    tol = ring_tolerance(polygon.exterior)
    lo, hi = ring_row_spans(polygon.exterior, ys_axis, tol)
    first = np.searchsorted(xs_axis, lo - tol, side="left")
    per_row = np.maximum(np.searchsorted(xs_axis, hi + tol, side="right") - first, 0)

    candidates = int(per_row.sum())
    if candidates > max_points:
        msg = (
            f"grid step {step:.6g} needs {candidates} candidates, "
            f"more than the limit of {max_points}."
        )
        raise PlacementError(msg)
    if candidates == 0:
        return _empty()

    rows = np.repeat(np.arange(len(ys_axis)), per_row)
    row_start = np.repeat(np.cumsum(per_row) - per_row, per_row)
    cols = np.repeat(first, per_row) + (np.arange(candidates) - row_start)
    xs = xs_axis[cols]
    ys = ys_axis[rows]
    mask = polygon.contains(xs, ys)
    return np.column_stack([xs[mask], ys[mask]])


def regular_points(
    polygon: PreparedPolygon,
    count: int,
    *,
    max_refinements: int,
    max_grid_points: int,
) -> np.ndarray:
    """Place exactly ``count`` points on a grid filtered to the polygon.

    The initial step is ``sqrt(area / count)``, so the expected number of
    surviving grid points is close to ``count``.

    Raises:
        PlacementError: Still short of ``count`` after ``max_refinements``
            passes, or one pass would test more than
            ``max_grid_points`` candidates.
    """
    if count == 0:
        return _empty()

    step = math.sqrt(polygon.area / count)
    survivors = 0
    for attempt in range(1, max_refinements + 1):
        points = grid_points(polygon, step, max_points=max_grid_points)
        survivors = len(points)
        if survivors >= count:
            if attempt > 1:
                logger.debug(
                    "Regular placement: %d points after %d passes (step %.6g)",
                    survivors, attempt, step,
                )
            return points[:count]

        if survivors == 0:
            step *= 0.5
        else:
            step *= min(_MAX_SHRINK, math.sqrt(survivors / count))

    msg = (
        f"regular placement reached {survivors} of {count} points "
        f"after {max_refinements} passes."
    )
    raise PlacementError(msg)


def random_points(
    polygon: PreparedPolygon,
    count: int,
    rng: np.random.Generator,
    *,
    max_draw_factor: float,
    batch_limit: int,
) -> np.ndarray:
    """Place exactly ``count`` uniformly random points by rejection sampling.

    Candidates are drawn uniformly over the bounding box in batches sized
    from the expected acceptance rate; accepted points are kept in draw
    order. The same generator state always yields the same points.

    Raises:
        PlacementError: More than ``max_draw_factor`` times the expected
            number of draws were needed.
    """
    if count == 0:
        return _empty()

    min_x, min_y, max_x, max_y = polygon.bounds
    bbox_area = (max_x - min_x) * (max_y - min_y)
    acceptance = min(1.0, polygon.area / bbox_area) if bbox_area > 0 else 1.0
    budget = int(math.ceil(count / acceptance * max_draw_factor))

    accepted: list[np.ndarray] = []
    n_accepted = 0
    drawn = 0
    while n_accepted < count:
        if drawn >= budget:
            msg = (
                f"random placement accepted {n_accepted} of {count} points "
                f"within a budget of {budget} draws."
            )
            raise PlacementError(msg)

        remaining = count - n_accepted
        size = int(math.ceil(remaining / acceptance * _BATCH_MARGIN)) + 8
        size = max(1, min(size, batch_limit, budget - drawn))

        xs = rng.uniform(min_x, max_x, size)
        ys = rng.uniform(min_y, max_y, size)
        drawn += size

        mask = polygon.contains(xs, ys)
        hits = np.column_stack([xs[mask], ys[mask]])[:remaining]
        accepted.append(hits)
        n_accepted += len(hits)

    return np.concatenate(accepted)
