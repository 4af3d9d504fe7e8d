"""
Search-space controller for the knight search.

Keeps the candidate region believed to contain the hidden cell and narrows it
after every probe using the WARMER / COLDER / SAME clue.

Two probing strategies are available:
- "bisection": the region is a convex polygon. The next probe is the last
  probe reflected through the region's average vertex, and the region is cut
  along the perpendicular bisector of the two probes.
- "axis": the region is a rectangle of cells. Columns are resolved first,
  then rows, each by reflecting about the centre of the remaining interval.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional
import logging
import math

from config import SearchConfig
from geometry import Point, Line, QUARTER_TURN, clamp, within
from polygon import Polygon

logger = logging.getLogger(__name__)


class Clue(Enum):
    """Distance feedback received after a probe."""
    UNKNOWN = "UNKNOWN"
    WARMER = "WARMER"
    COLDER = "COLDER"
    SAME = "SAME"

    @classmethod
    def parse(cls, token: str) -> Clue:
        try:
            return cls(token.strip().upper())
        except ValueError:
            raise ValueError(f"Unknown clue: {token!r}") from None


@dataclass(frozen=True)
class SearchState:
    """
    Everything the search knows between rounds.

    Attributes:
        region: Candidate region believed to contain the target
        last_probe: Position the previous clue was measured from
        probe: Probe emitted this round and awaiting its clue (None between rounds)
        turn: Number of clues applied so far
    """
    region: Polygon
    last_probe: Point
    probe: Optional[Point] = None
    turn: int = 0


class ProbingStrategy:
    """Base class for probing strategies on a width x height board."""

    name = ""

    def __init__(self, width: int, height: int, config: Optional[SearchConfig] = None):
        if width < 1 or height < 1:
            raise ValueError(f"Board must be at least 1x1, got {width}x{height}")
        self.width = width
        self.height = height
        self.config = config or SearchConfig()

    def initial_region(self) -> Polygon:
        raise NotImplementedError

    def initial_state(self, start: Point) -> SearchState:
        return SearchState(region=self.initial_region(), last_probe=start)

    def choose_probe(self, state: SearchState) -> SearchState:
        """Return state with the next probe filled in."""
        raise NotImplementedError

    def narrow(self, region: Polygon, last: Point, probe: Point, clue: Clue) -> Polygon:
        """Return the part of region consistent with clue for the move last -> probe."""
        raise NotImplementedError

    def apply_clue(self, state: SearchState, clue: Clue) -> SearchState:
        """Narrow the region with the clue for the pending probe and advance a turn."""
        if state.probe is None:
            raise RuntimeError("No probe is awaiting a clue")
        region = self.narrow(state.region, state.last_probe, state.probe, clue)
        return SearchState(region=region, last_probe=state.probe, probe=None, turn=state.turn + 1)

    def clamp_to_board(self, p: Point) -> Point:
        return Point(
            clamp(p.x, 0, self.width - 1),
            clamp(p.y, 0, self.height - 1)
        )


class PolygonBisectionStrategy(ProbingStrategy):
    """Halve a convex candidate polygon along the bisector of consecutive probes."""

    name = "bisection"

    def initial_region(self) -> Polygon:
        return Polygon.rectangle(0.0, 0.0, float(self.width), float(self.height))

    def choose_probe(self, state: SearchState) -> SearchState:
        pivot = state.region.average_vertex()
        probe = (pivot - (state.last_probe - pivot)).floor()
        probe = self.clamp_to_board(probe)

        logger.debug("search: %s", state.region)
        logger.debug("search pivot: %s", pivot)
        logger.debug("move: %s -> %s", state.last_probe, probe)
        return replace(state, probe=probe)

    def bisector(self, last: Point, probe: Point) -> tuple[Point, Point]:
        """
        Two points on the line equidistant from last and probe.

        Raises:
            ValueError: if last == probe.
        """
        if last == probe:
            raise ValueError(f"No bisector between identical probes at {probe}")

        mid = (probe + last) / 2.0
        if self.config.quantize_midpoint:
            mid = mid.floor()

        direction = probe - mid
        if direction.manhattan_magnitude == 0.0:
            # Flooring can land the midpoint on the probe itself
            direction = probe - last

        mid_b = mid + direction.fast_unit_vector().rotate_by_complex(QUARTER_TURN)
        return mid, mid_b

    def classify(self, shapes: list[Polygon], probe: Point, cut: Line) -> tuple[Polygon, Polygon]:
        """
        Order the two halves of a cut as (warm, cold).

        The warm half is the one whose average vertex lies on the probe's
        side of the cut. If neither does (probe on the cut), the half whose
        average vertex sorts first is warm.
        """
        first, second = shapes
        centre_first = first.average_vertex()
        centre_second = second.average_vertex()

        probe_side = cut.side_of(probe)
        side_first = cut.side_of(centre_first) * probe_side
        side_second = cut.side_of(centre_second) * probe_side
        if side_first > side_second:
            return first, second
        if side_second > side_first:
            return second, first

        if centre_first.to_tuple() <= centre_second.to_tuple():
            return first, second
        return second, first

    def narrow(self, region: Polygon, last: Point, probe: Point, clue: Clue) -> Polygon:
        if clue is Clue.SAME:
            # The target lies on the bisector, but a line has no area to keep.
            logger.info("Clue was SAME; region left unchanged")
            return region

        if clue is Clue.UNKNOWN:
            logger.info("Clue was UNKNOWN; region left unchanged")
            return region

        if probe == last:
            logger.info("Probe did not move from %s; no bisector this round", probe)
            return region

        mid, mid_b = self.bisector(last, probe)
        cut = Line(mid, mid_b)
        logger.debug("midpoint = %s ( & %s )", mid, mid_b)
        logger.debug("midline = %s", cut)

        shapes = region.slice(
            mid, mid_b,
            collinear_tolerance=self.config.collinear_tolerance,
            vertex_tolerance=self.config.vertex_tolerance
        )

        if len(shapes) < 2:
            logger.info("Midline %s did not cross the search region", cut)
            return region

        warm, cold = self.classify(shapes, probe, cut)
        logger.debug("warm = %s", warm)
        logger.debug("cold = %s", cold)

        if clue is Clue.WARMER:
            logger.debug("chose warm")
            return warm
        logger.debug("chose cold")
        return cold


class AxisAlignedStrategy(ProbingStrategy):
    """
    Resolve the target column, then the target row.

    The region is an inclusive rectangle of cell indices. Each move changes
    only one coordinate, so the bisector is axis-aligned and the clue trims
    the interval of the axis being resolved.
    """

    name = "axis"

    def initial_region(self) -> Polygon:
        return Polygon.rectangle(0.0, 0.0, float(self.width - 1), float(self.height - 1))

    @staticmethod
    def cell_bounds(region: Polygon) -> tuple[int, int, int, int]:
        left, top, right, bottom = region.bounds()
        return int(left), int(top), int(right), int(bottom)

    @staticmethod
    def reflect(last: int, lo: int, hi: int, size: int) -> int:
        """Reflect last about the centre of [lo, hi], staying on the board and moving."""
        if lo == hi:
            return lo
        target = int(clamp(lo + hi - last, 0, size - 1))
        if target == last:
            target = last + 1 if last < size - 1 else last - 1
        return target

    def choose_probe(self, state: SearchState) -> SearchState:
        left, top, right, bottom = self.cell_bounds(state.region)
        last_x, last_y = int(state.last_probe.x), int(state.last_probe.y)

        if left < right:
            probe = Point(float(self.reflect(last_x, left, right, self.width)), float(last_y))
        elif last_x != left:
            # Column solved; step onto it before working on rows
            probe = Point(float(left), float(last_y))
        else:
            probe = Point(float(left), float(self.reflect(last_y, top, bottom, self.height)))

        logger.debug("search: [%d,%d %d,%d]", left, top, right, bottom)
        logger.debug("move: %s -> %s", state.last_probe, probe)
        return replace(state, probe=probe)

    @staticmethod
    def trim(lo: int, hi: int, last: float, probe: float, clue: Clue) -> tuple[int, int]:
        """New [lo, hi] for one axis after moving last -> probe along it."""
        mid = (last + probe) / 2.0

        if clue is Clue.SAME:
            if mid == math.floor(mid) and within(mid, lo, hi):
                return int(mid), int(mid)
            logger.warning("SAME clue with midpoint %.1f outside [%d, %d]; ignored", mid, lo, hi)
            return lo, hi

        if (probe > last) == (clue is Clue.WARMER):
            new_lo, new_hi = max(lo, math.floor(mid) + 1), hi
        else:
            new_lo, new_hi = lo, min(hi, math.ceil(mid) - 1)

        if new_lo > new_hi:
            logger.warning("Clue %s emptied interval [%d, %d]; ignored", clue.value, lo, hi)
            return lo, hi
        return new_lo, new_hi

    def narrow(self, region: Polygon, last: Point, probe: Point, clue: Clue) -> Polygon:
        if clue is Clue.UNKNOWN or probe == last:
            return region

        left, top, right, bottom = self.cell_bounds(region)

        if left < right and probe.y == last.y:
            left, right = self.trim(left, right, last.x, probe.x, clue)
            if left == right:
                logger.info("solved: x = %d", left)
        elif left == right and probe.x == last.x:
            top, bottom = self.trim(top, bottom, last.y, probe.y, clue)
            if top == bottom:
                logger.info("solved: y = %d", top)
        else:
            logger.debug("Move %s -> %s carries no information for the open axis", last, probe)
            return region

        return Polygon.rectangle(float(left), float(top), float(right), float(bottom))


STRATEGIES = {
    PolygonBisectionStrategy.name: PolygonBisectionStrategy,
    AxisAlignedStrategy.name: AxisAlignedStrategy,
}


def create_strategy(name: str, width: int, height: int,
                    config: Optional[SearchConfig] = None) -> ProbingStrategy:
    """
    Create a probing strategy by name.

    Raises:
        ValueError: if name is not a known strategy.
    """
    try:
        strategy_cls = STRATEGIES[name]
    except KeyError:
        raise ValueError(f"Unknown strategy {name!r}; expected one of {', '.join(STRATEGIES)}") from None
    return strategy_cls(width, height, config)


class SearchController:
    """
    Owns the search state and drives one probe/clue round at a time.

    Usage:
        controller = SearchController(10, 10, (2, 5), turns=6)
        x, y = controller.next_probe()
        controller.receive_clue("WARMER")
    """

    def __init__(self, width: int, height: int, start: tuple[int, int],
                 turns: Optional[int] = None,
                 config: Optional[SearchConfig] = None,
                 strategy: Optional[ProbingStrategy] = None):
        self.config = config or SearchConfig()
        self.strategy = strategy or create_strategy(self.config.strategy, width, height, self.config)
        self.width = width
        self.height = height
        self.turns = turns
        self.state = self.strategy.initial_state(Point(float(start[0]), float(start[1])))
        self.history: list[SearchState] = [self.state]

    @property
    def region(self) -> Polygon:
        return self.state.region

    @property
    def remaining_turns(self) -> Optional[int]:
        if self.turns is None:
            return None
        return max(0, self.turns - self.state.turn)

    @property
    def exhausted(self) -> bool:
        return self.turns is not None and self.state.turn >= self.turns

    def next_probe(self) -> tuple[int, int]:
        """Choose the next probe; the matching clue must be passed to receive_clue."""
        if self.state.probe is not None:
            raise RuntimeError(f"Probe {self.state.probe} is still awaiting its clue")
        self.state = self.strategy.choose_probe(self.state)
        probe = self.state.probe
        return int(probe.x), int(probe.y)

    def receive_clue(self, clue: Clue | str) -> Polygon:
        """Apply the clue for the pending probe and return the new candidate region."""
        if isinstance(clue, str):
            clue = Clue.parse(clue)
        self.state = self.strategy.apply_clue(self.state, clue)
        self.history.append(self.state)
        return self.state.region
