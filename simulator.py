"""
Local stand-in for the game harness.

Hides a target cell on the board, answers each probe with the clue the real
game would give, and stops when the target is probed or the turn budget runs
out.
"""

from dataclasses import dataclass, field
from typing import Optional
import logging

from config import SearchConfig
from protocol import GameSetup
from search import Clue, SearchController, SearchState

logger = logging.getLogger(__name__)


class BombSimulator:
    """Clue oracle for a target hidden on a width x height board."""

    def __init__(self, width: int, height: int, target: tuple[int, int]):
        if not (0 <= target[0] < width and 0 <= target[1] < height):
            raise ValueError(f"Target {target} is outside the {width}x{height} board")
        self.width = width
        self.height = height
        self.target = target

    def squared_distance(self, cell: tuple[int, int]) -> int:
        dx = cell[0] - self.target[0]
        dy = cell[1] - self.target[1]
        return dx * dx + dy * dy

    def clue(self, previous: tuple[int, int], current: tuple[int, int]) -> Clue:
        """Compare distances to the target before and after a move."""
        before = self.squared_distance(previous)
        after = self.squared_distance(current)
        if after < before:
            return Clue.WARMER
        if after > before:
            return Clue.COLDER
        return Clue.SAME

    def is_target(self, cell: tuple[int, int]) -> bool:
        return tuple(cell) == tuple(self.target)


@dataclass
class SimulationResult:
    """Outcome of a simulated game."""
    found: bool
    turns_used: int
    probes: list[tuple[int, int]] = field(default_factory=list)
    states: list[SearchState] = field(default_factory=list)

    @property
    def final_region(self):
        return self.states[-1].region if self.states else None


def simulate(setup: GameSetup, target: tuple[int, int],
             config: Optional[SearchConfig] = None) -> SimulationResult:
    """
    Play a game against a hidden target.

    Args:
        setup: Board size, turn budget and starting position
        target: Hidden cell
        config: Search configuration (defaults if None)

    Returns:
        SimulationResult with every probe and every search state.
    """
    oracle = BombSimulator(setup.width, setup.height, target)
    controller = SearchController(setup.width, setup.height, setup.start,
                                  turns=setup.turns, config=config)

    position = tuple(setup.start)
    probes = []
    found = oracle.is_target(position)

    while not found and not controller.exhausted:
        probe = controller.next_probe()
        probes.append(probe)

        if oracle.is_target(probe):
            found = True
            break

        clue = oracle.clue(position, probe)
        logger.debug("turn %d: %s -> %s = %s", len(probes), position, probe, clue.value)
        controller.receive_clue(clue)
        position = probe

    logger.info("Simulation %s after %d probe(s)", "found target" if found else "failed", len(probes))
    return SimulationResult(
        found=found,
        turns_used=len(probes),
        probes=probes,
        states=list(controller.history),
    )
