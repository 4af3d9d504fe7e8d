"""
Unit tests for polygon module.

Tests cast-line intersections and convex slicing, including the degenerate
vertex and edge cases.
"""

import pytest
import math
import random
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from geometry import Point
from polygon import Polygon, Intersection, ConvexityError


def random_convex_polygon(rng: random.Random, n: int) -> Polygon:
    """Vertices on a circle at sorted random angles."""
    cx, cy = rng.uniform(0, 100), rng.uniform(0, 100)
    radius = rng.uniform(5, 50)
    angles = sorted(rng.uniform(0, 2 * math.pi) for _ in range(n))
    return Polygon([(cx + radius * math.cos(a), cy + radius * math.sin(a)) for a in angles])


def interior_side(piece: Polygon, vertex: Point, tolerance: float = 1e-6) -> bool:
    """True if vertex is on the interior side of every edge of piece."""
    return piece.contains(vertex, tolerance)


class TestPolygonBasics:
    """Tests for construction and measurements."""

    def test_create_from_tuples(self):
        poly = Polygon([(0, 0), (10, 0), (10, 10)])
        assert len(poly) == 3
        assert poly[1] == Point(10, 0)
        assert all(isinstance(v, Point) for v in poly)

    def test_too_few_vertices(self):
        with pytest.raises(ValueError):
            Polygon([(0, 0), (1, 1)])

    def test_rectangle(self):
        rect = Polygon.rectangle(1, 2, 5, 8)
        assert list(rect) == [Point(1, 2), Point(5, 2), Point(5, 8), Point(1, 8)]

    def test_edges(self):
        poly = Polygon([(0, 0), (10, 0), (10, 10)])
        edges = poly.edges()
        assert len(edges) == 3
        assert edges[2] == (Point(10, 10), Point(0, 0))

    def test_area_either_winding(self, square):
        assert square.area == pytest.approx(16.0)
        reversed_square = Polygon(tuple(reversed(square.vertices)))
        assert reversed_square.area == pytest.approx(16.0)
        assert reversed_square.signed_area == pytest.approx(-16.0)

    def test_average_vertex(self, square):
        assert square.average_vertex() == Point(2, 2)

    def test_average_vertex_is_not_area_centroid(self):
        """Extra vertices pull the average towards them."""
        poly = Polygon([(0, 0), (4, 0), (4, 4), (3, 4), (2, 4), (1, 4), (0, 4)])
        assert poly.average_vertex().y > 2

    def test_bounding_rect(self):
        triangle = Polygon([(1, 5), (6, 2), (3, 9)])
        rect = triangle.bounding_rect()
        assert rect.bounds() == (1, 2, 6, 9)
        assert len(rect) == 4

    def test_contains(self, square):
        assert square.contains(Point(2, 2))
        assert square.contains(Point(0, 0))
        assert square.contains(Point(4, 2))
        assert not square.contains(Point(5, 2))
        assert not square.contains(Point(-0.1, 2))

    def test_contains_clockwise(self, square):
        cw = Polygon(tuple(reversed(square.vertices)))
        assert cw.contains(Point(1, 3))
        assert not cw.contains(Point(1, 5))

    def test_is_convex(self, square, u_shape):
        assert square.is_convex()
        assert not u_shape.is_convex()

    def test_immutable(self, square):
        with pytest.raises(AttributeError):
            square.vertices = ()


class TestIntersectsFromLine:
    """Tests for cast-line intersections."""

    def test_line_through_interior(self, square):
        hits = square.intersects_from_line(Point(2, -1), Point(2, 5))
        assert hits == [Intersection(Point(2, 0), 0), Intersection(Point(2, 4), 2)]

    def test_line_misses(self, square):
        assert square.intersects_from_line(Point(10, 0), Point(10, 1)) == []

    def test_tangent_vertex_reported_once(self, square):
        """A line touching only the corner (4, 0) yields a single hit."""
        hits = square.intersects_from_line(Point(4, 0), Point(5, 1))
        assert len(hits) == 1
        assert hits[0].point == Point(4, 0)
        assert hits[0].edge_index == 1

    def test_line_along_edge(self, square):
        """An edge on the cast line is parallel and ignored."""
        hits = square.intersects_from_line(Point(0, 0), Point(1, 0))
        assert len(hits) == 1

    def test_diagonal_through_two_vertices(self, square):
        hits = square.intersects_from_line(Point(0, 0), Point(4, 4))
        assert hits == [Intersection(Point(0, 0), 0), Intersection(Point(4, 4), 2)]

    def test_non_convex_gives_more_hits(self, u_shape):
        hits = u_shape.intersects_from_line(Point(-1, 3), Point(7, 3))
        assert len(hits) == 4


class TestPolygonSlice:
    """Tests for splitting a polygon along a line."""

    def test_vertical_cut(self, square):
        pieces = square.slice(Point(2, -1), Point(2, 5))
        assert len(pieces) == 2
        right, left = pieces
        assert list(right) == [Point(4, 0), Point(4, 4), Point(2, 4), Point(2, 0)]
        assert list(left) == [Point(0, 0), Point(2, 0), Point(2, 4), Point(0, 4)]

    def test_diagonal_cut_through_vertices(self, square):
        pieces = square.slice(Point(0, 0), Point(4, 4))
        assert len(pieces) == 2
        assert [len(p) for p in pieces] == [3, 3]
        assert pieces[0].area == pytest.approx(8.0)
        assert pieces[1].area == pytest.approx(8.0)

    def test_tangent_line_returns_original(self, square):
        pieces = square.slice(Point(4, 0), Point(5, 1))
        assert pieces == [square]
        assert pieces[0].vertices == square.vertices

    def test_missing_line_returns_original(self, square):
        pieces = square.slice(Point(10, 0), Point(10, 1))
        assert len(pieces) == 1
        assert pieces[0] is square

    def test_cut_along_edge_returns_original(self, square):
        assert square.slice(Point(0, 4), Point(3, 4)) == [square]

    def test_non_convex_is_fatal(self, u_shape):
        with pytest.raises(ConvexityError):
            u_shape.slice(Point(-1, 3), Point(7, 3))

    def test_slice_does_not_mutate(self, square):
        before = square.vertices
        square.slice(Point(2, -1), Point(2, 5))
        assert square.vertices == before

    def test_corner_cut(self, board_8x8):
        """Cut off a triangle at the origin corner."""
        pieces = board_8x8.slice(Point(3.5, 3.5), Point(0, 7))
        assert len(pieces) == 2
        pentagon, triangle = pieces
        assert len(pentagon) == 5
        assert len(triangle) == 3
        assert triangle.area == pytest.approx(24.5)
        assert pentagon.contains(Point(7, 7))
        assert triangle.contains(Point(0, 0))


class TestSliceProperties:
    """Properties that hold for every two-piece slice of a convex polygon."""

    @pytest.fixture
    def slices(self):
        rng = random.Random(1234)
        results = []
        for _ in range(300):
            poly = random_convex_polygon(rng, rng.randint(3, 9))
            centre = poly.average_vertex()
            a = centre + Point(rng.uniform(-0.5, 0.5), rng.uniform(-0.5, 0.5))
            angle = rng.uniform(0, 2 * math.pi)
            b = a + Point(math.cos(angle), math.sin(angle))
            results.append((poly, poly.slice(a, b)))
        return results

    def test_most_cuts_split(self, slices):
        split = [pieces for _, pieces in slices if len(pieces) == 2]
        assert len(split) > 200

    def test_area_conservation(self, slices):
        for poly, pieces in slices:
            if len(pieces) == 2:
                total = pieces[0].area + pieces[1].area
                assert total == pytest.approx(poly.area, rel=1e-9, abs=1e-9)

    def test_pieces_are_convex(self, slices):
        for _, pieces in slices:
            for piece in pieces:
                assert piece.is_convex(tolerance=1e-7)

    def test_pieces_stay_inside_original(self, slices):
        for poly, pieces in slices:
            for piece in pieces:
                for vertex in piece:
                    assert interior_side(poly, vertex)

    def test_pieces_do_not_overlap(self, slices):
        """Each piece's average vertex is outside the other piece."""
        for _, pieces in slices:
            if len(pieces) == 2:
                first, second = pieces
                assert not second.contains(first.average_vertex(), -1e-9)
                assert not first.contains(second.average_vertex(), -1e-9)

    def test_no_split_is_identity(self, slices):
        for poly, pieces in slices:
            if len(pieces) == 1:
                assert pieces[0].vertices == poly.vertices
