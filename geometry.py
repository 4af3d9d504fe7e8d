"""
Geometry primitives for the knight search.

Provides an immutable 2D point/vector type and an infinite line type with
exact intersection and segment membership tests.
"""

from dataclasses import dataclass
from typing import Callable, Optional
import math


def within(n: float, lo: float, hi: float) -> bool:
    """Check if n lies in the closed interval between lo and hi (either order)."""
    if lo > hi:
        lo, hi = hi, lo
    return lo <= n <= hi


def clamp(n: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, n))


def points_equal(p1, p2, eps: float = 1e-9) -> bool:
    """Check if two points are equal within epsilon tolerance."""
    return abs(p1[0] - p2[0]) < eps and abs(p1[1] - p2[1]) < eps


def signed_area(vertices) -> float:
    """
    Calculate signed area of a vertex ring using the shoelace formula.

    Returns:
        Positive for CCW winding, negative for CW winding.
    """
    n = len(vertices)
    if n < 3:
        return 0.0
    area = 0.0
    for i in range(n):
        j = (i + 1) % n
        area += vertices[i][0] * vertices[j][1]
        area -= vertices[j][0] * vertices[i][1]
    return area / 2.0


@dataclass(frozen=True)
class Point:
    """A 2D point, also used as a vector."""
    x: float
    y: float

    def __iter__(self):
        yield self.x
        yield self.y

    def __getitem__(self, index):
        return (self.x, self.y)[index]

    def __len__(self):
        return 2

    def __str__(self):
        return f"{self.x:.2f} {self.y:.2f}"

    def to_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)

    def __add__(self, other: 'Point') -> 'Point':
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: 'Point') -> 'Point':
        return Point(self.x - other.x, self.y - other.y)

    def __neg__(self) -> 'Point':
        return Point(-self.x, -self.y)

    def __mul__(self, n: float) -> 'Point':
        return Point(self.x * n, self.y * n)

    __rmul__ = __mul__

    def __truediv__(self, n: float) -> 'Point':
        return Point(self.x / n, self.y / n)

    def apply(self, f: Callable[[float], float]) -> 'Point':
        """Apply f to both coordinates."""
        return Point(f(self.x), f(self.y))

    def floor(self) -> 'Point':
        return self.apply(lambda v: float(math.floor(v)))

    @property
    def slope(self) -> float:
        return self.y / self.x if self.x != 0 else 0.0

    @property
    def magnitude(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y)

    @property
    def manhattan_magnitude(self) -> float:
        return abs(self.x) + abs(self.y)

    def dot(self, other: 'Point') -> float:
        return self.x * other.x + self.y * other.y

    def cross_z(self, other: 'Point') -> float:
        """Z component of the 3D cross product of two planar vectors."""
        return self.x * other.y - self.y * other.x

    def distance_to(self, other: 'Point') -> float:
        return (other - self).magnitude

    def unit_vector(self) -> 'Point':
        length = self.magnitude
        if length == 0.0:
            raise ValueError("Cannot normalize a zero-length vector")
        return self / length

    def fast_unit_vector(self) -> 'Point':
        """
        Fast approximation of the unit vector.

        The shape traced by all results is an octagon inscribed in the unit
        circle, so the direction is exact on the axes and diagonals and the
        length is off by at most ~8% in between.
        """
        ax = abs(self.x)
        ay = abs(self.y)
        largest = max(ax, ay)
        if largest == 0.0:
            raise ValueError("Cannot normalize a zero-length vector")
        # 1.29289 ~= 2 - 1/sqrt(2), 0.29289 ~= 1 - 1/sqrt(2)
        ratio = 1.0 / largest
        ratio = ratio * (1.29289 - (ax + ay) * ratio * 0.29289)
        return Point(self.x * ratio, self.y * ratio)

    def rotate_by_complex(self, vec: 'Point') -> 'Point':
        """
        Rotate this vector by the angle of vec measured from the +x axis.

        This is complex multiplication with vec normalized first, so
        rotate_by_complex(Point(0, 1)) turns a vector 90 degrees.
        """
        vec = vec.unit_vector()
        return Point(
            self.x * vec.x - self.y * vec.y,
            self.x * vec.y + self.y * vec.x
        )


QUARTER_TURN = Point(0.0, 1.0)


@dataclass(frozen=True)
class Line:
    """
    An infinite line through two distinct points a and b.

    Raises:
        ValueError: if a == b, since the direction would be undefined.
    """
    a: Point
    b: Point

    def __post_init__(self):
        if self.vec.manhattan_magnitude == 0.0:
            raise ValueError(f"The points given do not describe a valid line: a == b == {self.a}")

    @property
    def vec(self) -> Point:
        return self.b - self.a

    @property
    def slope(self) -> float:
        return self.vec.slope

    @property
    def lift(self) -> float:
        """Y intercept in slope-intercept form."""
        return -self.slope * self.a.x + self.a.y

    def __str__(self):
        return f"[y = {self.slope:.3f}x + {self.lift:.3f}]"

    def parallel(self, other: 'Line') -> bool:
        return self.vec.cross_z(other.vec) == 0.0

    def intersection(self, other: 'Line') -> Optional[Point]:
        """
        Find where this line crosses another.

        Solves for the ratio t along this line's direction vector using
        cross products, so the result is a + vec * t.

        Returns:
            The intersection point, or None if the lines are parallel.
        """
        vec_a = self.vec
        vec_b = other.vec
        vec_c = self.a - other.a

        denom = vec_a.cross_z(vec_b)
        if denom == 0.0:
            return None

        t = vec_b.cross_z(vec_c) / denom
        return self.a + vec_a * t

    def distance_to_point(self, p: Point) -> float:
        """Perpendicular distance from p to the infinite line."""
        vec = self.vec
        return abs(vec.cross_z(p - self.a)) / vec.magnitude

    def side_of(self, p: Point) -> float:
        """
        Which side of the line p lies on.

        Returns:
            > 0: left of the a -> b direction
            < 0: right
            = 0: on the line
        """
        return self.vec.cross_z(p - self.a)

    def point_in_segment(self, p: Point, tolerance: float = 1e-7) -> bool:
        """
        Check if p lies on the segment a -> b, endpoints included.

        The point must be within tolerance of the infinite line and its
        projection onto the direction vector must fall in [0, |vec|].
        """
        if p == self.a:
            return True
        if self.distance_to_point(p) > tolerance:
            return False
        length = self.vec.magnitude
        projection = self.vec.dot(p - self.a) / length
        return -tolerance <= projection <= length + tolerance
