"""Planar ring and polygon primitives for dot placement.

Point-in-polygon uses a crossing-number test with a half-open edge rule
(an edge counts when exactly one endpoint lies strictly above the query
row), vectorised over many query points. Points on any edge, exterior or
hole, are inside: the polygon is the closed region exterior-minus-hole
interiors, so results never depend on floating tie-breaks between calls.

All functions take plain vertex sequences or ``(n, 2)`` arrays. Rings may be
explicitly closed (first vertex repeated last) or implicitly closed.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from dotdensity.engine.errors import InvalidArgumentError

# Relative tolerances, scaled by the ring's bounding-box extent.
_BOUNDARY_EPS = 1e-9
_AREA_EPS = 1e-12

Bounds = tuple[float, float, float, float]


def open_ring(vertices: Sequence[Sequence[float]] | np.ndarray) -> np.ndarray:
    """Return the ring as an ``(n, 2)`` float array without a closing vertex."""
    ring = np.asarray(vertices, dtype=np.float64)
    if ring.size == 0:
        return ring.reshape(0, 2)
    if ring.ndim != 2 or ring.shape[1] != 2:
        msg = f"ring vertices must be (x, y) pairs, got array of shape {ring.shape}."
        raise InvalidArgumentError(msg)
    if len(ring) > 1 and np.array_equal(ring[0], ring[-1]):
        ring = ring[:-1]
    return ring


def close_ring(vertices: Sequence[Sequence[float]] | np.ndarray) -> np.ndarray:
    """Return the ring with its first vertex repeated at the end."""
    ring = open_ring(vertices)
    if len(ring) == 0:
        return ring
    return np.vstack([ring, ring[:1]])


def validate_ring(
    vertices: Sequence[Sequence[float]] | np.ndarray,
    *,
    label: str = "ring",
) -> np.ndarray:
    """Open the ring and check it can bound an area.

    Raises:
        InvalidArgumentError: Fewer than 3 distinct vertices, or a
            non-finite coordinate.
    """
    ring = open_ring(vertices)
    if not np.all(np.isfinite(ring)):
        msg = f"{label} has non-finite coordinates."
        raise InvalidArgumentError(msg)
    distinct = len(np.unique(ring, axis=0)) if len(ring) else 0
    if distinct < 3:
        msg = f"{label} has {distinct} distinct vertices; at least 3 are required."
        raise InvalidArgumentError(msg)
    return ring


def ring_signed_area(ring: np.ndarray) -> float:
    """Shoelace area; positive for counter-clockwise rings."""
    if len(ring) < 3:
        return 0.0
    # Shift to the first vertex to keep precision on large coordinates.
    local = ring - ring[0]
    x = local[:, 0]
    y = local[:, 1]
    return 0.5 * float(np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1)))


def ring_bounds(ring: np.ndarray) -> Bounds:
    """Bounding box ``(min_x, min_y, max_x, max_y)``."""
    min_x, min_y = ring.min(axis=0)
    max_x, max_y = ring.max(axis=0)
    return float(min_x), float(min_y), float(max_x), float(max_y)


def polygon_area(exterior: np.ndarray, holes: Sequence[np.ndarray] = ()) -> float:
    """Area of exterior minus holes, never negative."""
    area = abs(ring_signed_area(exterior))
    area -= sum(abs(ring_signed_area(h)) for h in holes)
    return max(area, 0.0)


def ring_tolerance(ring: np.ndarray) -> float:
    """Distance within which a point counts as lying on the ring."""
    min_x, min_y, max_x, max_y = ring_bounds(ring)
    return _BOUNDARY_EPS * max(max_x - min_x, max_y - min_y)


def ring_row_spans(
    ring: np.ndarray,
    ys: np.ndarray,
    tol: float = 0.0,
) -> tuple[np.ndarray, np.ndarray]:
    """Leftmost and rightmost x where each horizontal row meets the ring.

    Every point of the closed ring region on row ``ys[k]`` lies within
    ``[lo[k], hi[k]]``. Rows that miss the ring get ``lo = inf`` and
    ``hi = -inf``.
    """
    lo = np.full(ys.shape, np.inf)
    hi = np.full(ys.shape, -np.inf)
    n = len(ring)
    for i in range(n):
        ax, ay = ring[i]
        bx, by = ring[(i + 1) % n]
        hit = (ys >= min(ay, by) - tol) & (ys <= max(ay, by) + tol)
        if not hit.any():
            continue
        if ay == by:
            x_lo = np.full(int(hit.sum()), min(ax, bx))
            x_hi = np.full(int(hit.sum()), max(ax, bx))
        else:
            t = np.clip((ys[hit] - ay) / (by - ay), 0.0, 1.0)
            x_lo = x_hi = ax + t * (bx - ax)
        lo[hit] = np.minimum(lo[hit], x_lo)
        hi[hit] = np.maximum(hi[hit], x_hi)
    return lo, hi


def _on_boundary(xs: np.ndarray, ys: np.ndarray, ring: np.ndarray, tol: float) -> np.ndarray:
    """True where a point lies on any edge of the ring (within tol)."""
    on = np.zeros(xs.shape, dtype=bool)
    n = len(ring)
    for i in range(n):
        ax, ay = ring[i]
        bx, by = ring[(i + 1) % n]
        dx = bx - ax
        dy = by - ay
        seg_len = math.hypot(dx, dy)
        px = xs - ax
        py = ys - ay
        if seg_len == 0.0:
            on |= (np.abs(px) <= tol) & (np.abs(py) <= tol)
            continue
        cross = dx * py - dy * px
        along = dx * px + dy * py
        slack = tol * seg_len
        on |= (
            (np.abs(cross) <= slack)
            & (along >= -slack)
            & (along <= seg_len * seg_len + slack)
        )
    return on


def _crossing_parity(xs: np.ndarray, ys: np.ndarray, ring: np.ndarray) -> np.ndarray:
    """Odd number of edge crossings to the right of each point."""
    inside = np.zeros(xs.shape, dtype=bool)
    xj, yj = ring[-1]
    for xi, yi in ring:
        straddles = (yi > ys) != (yj > ys)
        with np.errstate(divide="ignore", invalid="ignore"):
            x_cross = (xj - xi) * (ys - yi) / (yj - yi) + xi
        inside ^= straddles & (xs < x_cross)
        xj, yj = xi, yi
    return inside


def points_in_ring(
    xs: np.ndarray,
    ys: np.ndarray,
    ring: np.ndarray,
    *,
    include_boundary: bool = True,
) -> np.ndarray:
    """Vectorised ring membership test.

    Args:
        xs, ys: Query coordinates (same shape).
        ring: Open ring as returned by :func:`open_ring`.
        include_boundary: Whether points on an edge count as inside.
    """
    if len(ring) < 3:
        return np.zeros(xs.shape, dtype=bool)
    parity = _crossing_parity(xs, ys, ring)
    on = _on_boundary(xs, ys, ring, ring_tolerance(ring))
    if include_boundary:
        return parity | on
    return parity & ~on


def points_in_polygon(
    xs: Sequence[float] | np.ndarray,
    ys: Sequence[float] | np.ndarray,
    exterior: Sequence[Sequence[float]] | np.ndarray,
    holes: Sequence[Sequence[Sequence[float]] | np.ndarray] = (),
) -> np.ndarray:
    """Boolean mask: point is in-or-on the exterior and not strictly inside a hole."""
    xs = np.asarray(xs, dtype=np.float64)
    ys = np.asarray(ys, dtype=np.float64)
    inside = points_in_ring(xs, ys, open_ring(exterior), include_boundary=True)
    for hole in holes:
        if not inside.any():
            break
        inside &= ~points_in_ring(xs, ys, open_ring(hole), include_boundary=False)
    return inside


def point_in_polygon(
    x: float,
    y: float,
    exterior: Sequence[Sequence[float]] | np.ndarray,
    holes: Sequence[Sequence[Sequence[float]] | np.ndarray] = (),
) -> bool:
    """Scalar form of :func:`points_in_polygon`."""
    mask = points_in_polygon(np.array([x]), np.array([y]), exterior, holes)
    return bool(mask[0])


@dataclass(frozen=True)
class PreparedPolygon:
    """A validated polygon with cached area and bounds."""

    exterior: np.ndarray
    holes: tuple[np.ndarray, ...]
    area: float
    bounds: Bounds

    @property
    def is_degenerate(self) -> bool:
        """Zero area, or area negligible relative to the bounding box."""
        min_x, min_y, max_x, max_y = self.bounds
        extent = max(max_x - min_x, max_y - min_y)
        return self.area <= _AREA_EPS * extent * extent

    def contains(self, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        """Vectorised point-in-polygon mask against this polygon."""
        return points_in_polygon(xs, ys, self.exterior, self.holes)


def prepare_polygon(
    exterior: Sequence[Sequence[float]] | np.ndarray,
    holes: Sequence[Sequence[Sequence[float]] | np.ndarray] = (),
) -> PreparedPolygon:
    """Validate every ring and cache the derived area and bounds.

    Raises:
        InvalidArgumentError: Any ring is malformed (see :func:`validate_ring`).
    """
    ext = validate_ring(exterior, label="exterior ring")
    hole_rings = tuple(
        validate_ring(h, label=f"hole ring {i}") for i, h in enumerate(holes)
    )
    return PreparedPolygon(
        exterior=ext,
        holes=hole_rings,
        area=polygon_area(ext, hole_rings),
        bounds=ring_bounds(ext),
    )
