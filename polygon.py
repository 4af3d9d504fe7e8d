"""
Convex polygon splitting.

The candidate region of the search is a convex polygon. Each round it is cut
along a line crossing exactly two of its edges, producing two convex pieces.

Algorithm (slice):
1. Cast the line against every edge, skipping parallel edges
2. Drop hits on an edge's second endpoint so a vertex hit is reported once
3. With exactly two hits, walk the vertex ring between the two hit edges to
   build one piece and the complementary arc to build the other
"""

from dataclasses import dataclass
from typing import NamedTuple
import logging

from geometry import Point, Line, points_equal, signed_area

logger = logging.getLogger(__name__)

# Perpendicular distance below which a point counts as on an edge
COLLINEAR_TOLERANCE = 1e-7
# Distance below which two vertices are treated as the same vertex.
# Kept above COLLINEAR_TOLERANCE so a vertex hit is never accepted twice.
VERTEX_TOLERANCE = 1e-6
# Pieces smaller than this are treated as a failed cut
MIN_PIECE_AREA = 1e-9


class ConvexityError(RuntimeError):
    """A cast line crossed a polygon more than twice; the region is not convex."""


class Intersection(NamedTuple):
    """Where a cast line crosses the polygon, and which edge it crossed."""
    point: Point
    edge_index: int


@dataclass(frozen=True)
class Polygon:
    """
    A convex polygon defined by an ordered ring of vertices.

    Either winding order is accepted. Instances are immutable; slicing
    returns new polygons.
    """
    vertices: tuple[Point, ...]

    def __post_init__(self):
        vertices = tuple(v if isinstance(v, Point) else Point(float(v[0]), float(v[1]))
                         for v in self.vertices)
        if len(vertices) < 3:
            raise ValueError(f"A polygon needs at least 3 vertices, got {len(vertices)}")
        object.__setattr__(self, 'vertices', vertices)

    @classmethod
    def rectangle(cls, left: float, top: float, right: float, bottom: float) -> 'Polygon':
        return cls((
            Point(left, top),
            Point(right, top),
            Point(right, bottom),
            Point(left, bottom),
        ))

    def __len__(self):
        return len(self.vertices)

    def __getitem__(self, index):
        return self.vertices[index]

    def __iter__(self):
        return iter(self.vertices)

    def __str__(self):
        return "poly[" + ", ".join(str(v) for v in self.vertices) + "]"

    def edges(self) -> list[tuple[Point, Point]]:
        """Return list of edges as (start, end) point pairs."""
        n = len(self.vertices)
        return [(self.vertices[i], self.vertices[(i + 1) % n]) for i in range(n)]

    @property
    def signed_area(self) -> float:
        return signed_area(self.vertices)

    @property
    def area(self) -> float:
        return abs(self.signed_area)

    def bounds(self) -> tuple[float, float, float, float]:
        """Return (left, top, right, bottom) of the axis-aligned envelope."""
        xs = [v.x for v in self.vertices]
        ys = [v.y for v in self.vertices]
        return (min(xs), min(ys), max(xs), max(ys))

    def bounding_rect(self) -> 'Polygon':
        """A rectangle which contains all the area this polygon does."""
        return Polygon.rectangle(*self.bounds())

    def average_vertex(self) -> Point:
        """
        Arithmetic mean of the vertices.

        A cheap stand-in for the area centroid. Close enough for
        near-rectangular regions, biased on long thin slivers.
        """
        sx = sum(v.x for v in self.vertices)
        sy = sum(v.y for v in self.vertices)
        n = len(self.vertices)
        return Point(sx / n, sy / n)

    def is_convex(self, tolerance: float = 1e-9) -> bool:
        """Check that every turn along the ring bends the same way."""
        n = len(self.vertices)
        sign = 0
        for i in range(n):
            a = self.vertices[i]
            b = self.vertices[(i + 1) % n]
            c = self.vertices[(i + 2) % n]
            turn = (b - a).cross_z(c - b)
            if abs(turn) <= tolerance:
                continue
            current = 1 if turn > 0 else -1
            if sign == 0:
                sign = current
            elif current != sign:
                return False
        return True

    def contains(self, point: Point, tolerance: float = 1e-9) -> bool:
        """
        Check if point is inside the polygon or on its boundary.

        Only valid for convex polygons: the point has to be on the inner side
        of every edge.
        """
        orientation = 1.0 if self.signed_area >= 0 else -1.0
        for start, end in self.edges():
            if start == end:
                continue
            side = (end - start).cross_z(point - start) * orientation
            if side < -tolerance * (end - start).magnitude:
                return False
        return True

    def intersects_from_line(self, a: Point, b: Point,
                             collinear_tolerance: float = COLLINEAR_TOLERANCE,
                             vertex_tolerance: float = VERTEX_TOLERANCE) -> list[Intersection]:
        """
        Find where the infinite line a -> b crosses the sides of this polygon.

        Edge i is the segment V[i] -> V[i+1]. A hit on an edge's second
        endpoint is dropped, so a line through a vertex is reported once by
        the edge that starts there. Edges parallel to the line (including
        edges lying on it) never intersect.

        Returns:
            Intersections in edge order. For a convex polygon the list holds
            0 entries if the line misses, 1 if it only touches a vertex, and
            2 if it crosses the interior.
        """
        line_cast = Line(a, b)
        intersects = []
        n = len(self.vertices)

        for i in range(n):
            start = self.vertices[i]
            end = self.vertices[(i + 1) % n]
            if start == end:
                continue

            side = Line(start, end)
            hit = side.intersection(line_cast)
            if hit is None:
                continue

            if points_equal(hit, end, vertex_tolerance):
                continue

            if side.point_in_segment(hit, collinear_tolerance):
                intersects.append(Intersection(hit, i))

        logger.debug("Found %d intersections for line %s", len(intersects), line_cast)
        return intersects

    def slice(self, a: Point, b: Point,
              collinear_tolerance: float = COLLINEAR_TOLERANCE,
              vertex_tolerance: float = VERTEX_TOLERANCE) -> list['Polygon']:
        """
        Split this polygon about the line a -> b.

        Returns:
            The two pieces on either side of the line, or [self] if the line
            does not cross the interior.

        Raises:
            ConvexityError: if the line crosses more than two edges.
        """
        intersects = self.intersects_from_line(a, b, collinear_tolerance, vertex_tolerance)

        if len(intersects) < 2:
            return [self]

        if len(intersects) > 2:
            hits = ", ".join(str(hit.point) for hit in intersects)
            raise ConvexityError(
                f"Line through {a} and {b} crossed {len(intersects)} edges of {self}: {hits}"
            )

        first, second = sorted(intersects, key=lambda hit: hit.edge_index)
        p_a, idx_a = first
        p_b, idx_b = second
        vertices = list(self.vertices)

        def same(p, q):
            return points_equal(p, q, vertex_tolerance)

        # Arc pA -> V[idxA+1] .. V[idxB] -> pB
        shape_a = vertices[idx_a + 1:idx_b + 1]
        if not same(shape_a[-1], p_b):
            shape_a.append(p_b)
        shape_a.append(p_a)

        # Arc pB -> V[idxB+1] .. V[0] .. V[idxA] -> pA
        shape_b = vertices[:idx_a + 1]
        if not same(shape_b[-1], p_a):
            shape_b.append(p_a)
        shape_b.append(p_b)
        shape_b.extend(vertices[idx_b + 1:])

        pieces = []
        for shape in (shape_a, shape_b):
            if len(shape) < 3 or abs(signed_area(shape)) < MIN_PIECE_AREA:
                logger.debug("Degenerate piece %s; treating cut as no split", shape)
                return [self]
            pieces.append(Polygon(tuple(shape)))

        return pieces
