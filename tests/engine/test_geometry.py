"""Tests for ring and polygon primitives.

Covers: ring normalisation and validation, shoelace area, point-in-polygon
(interior, exterior, boundary inclusion, holes, concave rings, rays through
vertices), vectorised/scalar agreement, degeneracy detection, row spans.
"""

import numpy as np
import pytest

from dotdensity.engine.errors import InvalidArgumentError
from dotdensity.engine.geometry import (
    close_ring,
    open_ring,
    point_in_polygon,
    points_in_polygon,
    polygon_area,
    prepare_polygon,
    ring_bounds,
    ring_row_spans,
    ring_signed_area,
    validate_ring,
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

UNIT_SQUARE = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)]
DONUT_OUTER = [(0.0, 0.0), (4.0, 0.0), (4.0, 4.0), (0.0, 4.0)]
DONUT_HOLE = [(1.0, 1.0), (3.0, 1.0), (3.0, 3.0), (1.0, 3.0)]
L_SHAPE = [(0.0, 0.0), (2.0, 0.0), (2.0, 1.0), (1.0, 1.0), (1.0, 2.0), (0.0, 2.0)]
DIAMOND = [(1.0, 0.0), (2.0, 1.0), (1.0, 2.0), (0.0, 1.0)]


# ===================================================================
# Ring normalisation
# ===================================================================


class TestRingNormalisation:
    """Explicitly and implicitly closed rings are interchangeable."""

    def test_open_ring_drops_closing_vertex(self) -> None:
        ring = open_ring(UNIT_SQUARE + [UNIT_SQUARE[0]])
        assert ring.shape == (4, 2)

    def test_open_ring_keeps_implicit_ring(self) -> None:
        ring = open_ring(UNIT_SQUARE)
        assert ring.shape == (4, 2)

    def test_close_ring_repeats_first_vertex(self) -> None:
        ring = close_ring(UNIT_SQUARE)
        assert ring.shape == (5, 2)
        np.testing.assert_array_equal(ring[0], ring[-1])

    def test_empty_ring(self) -> None:
        assert open_ring([]).shape == (0, 2)

    def test_bad_shape_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError):
            open_ring([(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (1.0, 1.0, 0.0)])


# ===================================================================
# Ring validation
# ===================================================================


class TestValidateRing:
    """Rings need three distinct finite vertices."""

    def test_triangle_is_valid(self) -> None:
        ring = validate_ring([(0, 0), (1, 0), (0, 1)])
        assert len(ring) == 3

    def test_two_vertices_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError, match="at least 3"):
            validate_ring([(0, 0), (1, 0)])

    def test_closed_two_vertex_ring_rejected(self) -> None:
        """Three entries but only two distinct vertices."""
        with pytest.raises(InvalidArgumentError):
            validate_ring([(0, 0), (1, 0), (0, 0)])

    def test_repeated_vertices_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError):
            validate_ring([(0, 0), (1, 1), (1, 1), (0, 0), (1, 1)])

    def test_nan_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError, match="non-finite"):
            validate_ring([(0, 0), (1, 0), (float("nan"), 1)])

    def test_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            validate_ring([(0, 0)])

    def test_label_in_message(self) -> None:
        with pytest.raises(InvalidArgumentError, match="hole ring 0"):
            prepare_polygon(DONUT_OUTER, [[(1, 1), (2, 2)]])


# ===================================================================
# Area and bounds
# ===================================================================


class TestArea:
    """Shoelace area, orientation and holes."""

    def test_ccw_square_positive(self) -> None:
        assert ring_signed_area(open_ring(UNIT_SQUARE)) == pytest.approx(1.0)

    def test_cw_square_negative(self) -> None:
        ring = open_ring(list(reversed(UNIT_SQUARE)))
        assert ring_signed_area(ring) == pytest.approx(-1.0)

    def test_large_coordinates_keep_precision(self) -> None:
        offset = 1e7
        ring = open_ring([(x + offset, y + offset) for x, y in UNIT_SQUARE])
        assert ring_signed_area(ring) == pytest.approx(1.0, abs=1e-6)

    def test_polygon_area_subtracts_holes(self) -> None:
        area = polygon_area(open_ring(DONUT_OUTER), [open_ring(DONUT_HOLE)])
        assert area == pytest.approx(12.0)

    def test_l_shape_area(self) -> None:
        assert polygon_area(open_ring(L_SHAPE)) == pytest.approx(3.0)

    def test_bounds(self) -> None:
        assert ring_bounds(open_ring(L_SHAPE)) == (0.0, 0.0, 2.0, 2.0)


# ===================================================================
# Point-in-polygon
# ===================================================================


class TestPointInPolygon:
    """Crossing-number test with boundary-inclusive edges."""

    def test_interior_point(self) -> None:
        assert point_in_polygon(0.5, 0.5, UNIT_SQUARE)

    def test_exterior_point(self) -> None:
        assert not point_in_polygon(1.5, 0.5, UNIT_SQUARE)

    @pytest.mark.parametrize(
        ("x", "y"),
        [(0.0, 0.5), (1.0, 0.5), (0.5, 0.0), (0.5, 1.0)],
    )
    def test_edge_points_are_inside(self, x: float, y: float) -> None:
        assert point_in_polygon(x, y, UNIT_SQUARE)

    @pytest.mark.parametrize("vertex", UNIT_SQUARE)
    def test_vertices_are_inside(self, vertex: tuple[float, float]) -> None:
        assert point_in_polygon(vertex[0], vertex[1], UNIT_SQUARE)

    def test_closed_and_open_rings_agree(self) -> None:
        closed = UNIT_SQUARE + [UNIT_SQUARE[0]]
        for x, y in [(0.5, 0.5), (1.0, 0.5), (2.0, 2.0)]:
            assert point_in_polygon(x, y, closed) == point_in_polygon(x, y, UNIT_SQUARE)

    def test_orientation_does_not_matter(self) -> None:
        cw = list(reversed(L_SHAPE))
        for x, y in [(0.5, 1.5), (1.5, 1.5), (1.5, 0.5)]:
            assert point_in_polygon(x, y, cw) == point_in_polygon(x, y, L_SHAPE)

    def test_concave_notch_is_outside(self) -> None:
        assert not point_in_polygon(1.5, 1.5, L_SHAPE)
        assert point_in_polygon(0.5, 1.5, L_SHAPE)
        assert point_in_polygon(1.5, 0.5, L_SHAPE)

    def test_ray_through_vertices(self) -> None:
        """Query rows that pass exactly through ring vertices."""
        assert point_in_polygon(0.5, 1.0, DIAMOND)
        assert point_in_polygon(1.5, 1.0, DIAMOND)
        assert not point_in_polygon(2.5, 1.0, DIAMOND)
        assert not point_in_polygon(-0.5, 1.0, DIAMOND)

    def test_hole_interior_is_outside(self) -> None:
        assert not point_in_polygon(2.0, 2.0, DONUT_OUTER, [DONUT_HOLE])

    def test_between_rings_is_inside(self) -> None:
        assert point_in_polygon(0.5, 0.5, DONUT_OUTER, [DONUT_HOLE])

    def test_hole_boundary_is_inside(self) -> None:
        assert point_in_polygon(1.0, 2.0, DONUT_OUTER, [DONUT_HOLE])
        assert point_in_polygon(3.0, 3.0, DONUT_OUTER, [DONUT_HOLE])

    def test_repeated_calls_agree(self) -> None:
        results = {point_in_polygon(1.0, 0.3, UNIT_SQUARE) for _ in range(20)}
        assert results == {True}


class TestPointsInPolygonVectorised:
    """Vectorised mask matches the scalar test."""

    def test_matches_scalar(self) -> None:
        rng = np.random.default_rng(7)
        xs = rng.uniform(-0.5, 4.5, 500)
        ys = rng.uniform(-0.5, 4.5, 500)
        mask = points_in_polygon(xs, ys, DONUT_OUTER, [DONUT_HOLE])
        expected = [
            point_in_polygon(x, y, DONUT_OUTER, [DONUT_HOLE])
            for x, y in zip(xs, ys)
        ]
        assert mask.tolist() == expected

    def test_returns_bool_mask(self) -> None:
        mask = points_in_polygon([0.5, 2.0], [0.5, 2.0], UNIT_SQUARE)
        assert mask.dtype == bool
        assert mask.tolist() == [True, False]


# ===================================================================
# Prepared polygons
# ===================================================================


class TestPreparePolygon:
    """Validation plus cached area, bounds and degeneracy."""

    def test_caches_area_and_bounds(self) -> None:
        poly = prepare_polygon(DONUT_OUTER, [DONUT_HOLE])
        assert poly.area == pytest.approx(12.0)
        assert poly.bounds == (0.0, 0.0, 4.0, 4.0)
        assert len(poly.holes) == 1

    def test_collinear_ring_is_degenerate(self) -> None:
        poly = prepare_polygon([(0, 0), (1, 0), (2, 0)])
        assert poly.area == 0.0
        assert poly.is_degenerate

    def test_hole_filling_exterior_is_degenerate(self) -> None:
        poly = prepare_polygon(UNIT_SQUARE, [UNIT_SQUARE])
        assert poly.is_degenerate

    def test_square_is_not_degenerate(self) -> None:
        assert not prepare_polygon(UNIT_SQUARE).is_degenerate

    def test_contains(self) -> None:
        poly = prepare_polygon(DONUT_OUTER, [DONUT_HOLE])
        mask = poly.contains(np.array([0.5, 2.0]), np.array([0.5, 2.0]))
        assert mask.tolist() == [True, False]


class TestRingRowSpans:
    """Per-row x-extent of a ring, used to limit grid candidates."""

    def test_l_shape_rows(self) -> None:
        lo, hi = ring_row_spans(open_ring(L_SHAPE), np.array([0.5, 1.5, 3.0]))
        np.testing.assert_array_almost_equal(lo[:2], [0.0, 0.0])
        np.testing.assert_array_almost_equal(hi[:2], [2.0, 1.0])
        assert lo[2] == np.inf
        assert hi[2] == -np.inf

    def test_horizontal_edge_row(self) -> None:
        lo, hi = ring_row_spans(open_ring(UNIT_SQUARE), np.array([1.0]))
        assert (lo[0], hi[0]) == (0.0, 1.0)

    def test_diagonal_strip_row_is_narrow(self) -> None:
        strip = open_ring([(0.0, 0.0), (1000.0, 1000.0), (1000.0, 1000.01), (0.0, 0.01)])
        lo, hi = ring_row_spans(strip, np.array([500.0]))
        assert lo[0] == pytest.approx(499.99)
        assert hi[0] == pytest.approx(500.0)
