"""
Line protocol between the search and the game harness.

Startup (one message per line):
    width height
    turns
    x0 y0
    UNKNOWN            first clue, discarded

Each round the search writes "x y" and reads one clue token
(WARMER, COLDER or SAME). The harness ends the session by closing input.
"""

from dataclasses import dataclass
from typing import Optional, TextIO
import logging

from config import SearchConfig
from search import Clue, SearchController

logger = logging.getLogger(__name__)


class ProtocolError(ValueError):
    """A line from the harness could not be parsed."""


@dataclass
class GameSetup:
    """Board size, turn budget and starting position sent at startup."""
    width: int
    height: int
    turns: int
    start: tuple[int, int]


def _read_line(stream: TextIO, what: str) -> Optional[str]:
    line = stream.readline()
    if not line:
        return None
    line = line.strip()
    if not line:
        raise ProtocolError(f"Empty line where {what} was expected")
    return line


def _parse_ints(line: str, count: int, what: str) -> list[int]:
    tokens = line.split()
    if len(tokens) != count:
        raise ProtocolError(f"Expected {count} integer(s) for {what}, got {line!r}")
    try:
        return [int(t) for t in tokens]
    except ValueError:
        raise ProtocolError(f"Expected integers for {what}, got {line!r}") from None


def read_setup(stream: TextIO) -> GameSetup:
    """
    Read the startup block, including the discarded first clue.

    Raises:
        ProtocolError: on missing or malformed lines.
    """
    fields = []
    for what, count in (("board size", 2), ("turn budget", 1), ("start position", 2)):
        line = _read_line(stream, what)
        if line is None:
            raise ProtocolError(f"Input ended before {what}")
        fields.append(_parse_ints(line, count, what))

    (width, height), (turns,), (x0, y0) = fields
    if width < 1 or height < 1:
        raise ProtocolError(f"Board must be at least 1x1, got {width}x{height}")
    if not (0 <= x0 < width and 0 <= y0 < height):
        raise ProtocolError(f"Start position {x0} {y0} is outside the {width}x{height} board")

    first_clue = read_clue(stream)
    if first_clue is None:
        raise ProtocolError("Input ended before the first clue")
    if first_clue is not Clue.UNKNOWN:
        logger.warning("First clue was %s, expected UNKNOWN; discarding it", first_clue.value)

    return GameSetup(width=width, height=height, turns=turns, start=(x0, y0))


def read_clue(stream: TextIO) -> Optional[Clue]:
    """
    Read one clue line.

    Returns:
        The clue, or None if the input has ended.

    Raises:
        ProtocolError: if the line is not a known clue.
    """
    line = _read_line(stream, "a clue")
    if line is None:
        return None
    try:
        return Clue.parse(line)
    except ValueError as e:
        raise ProtocolError(str(e)) from None


def write_probe(stream: TextIO, probe: tuple[int, int]) -> None:
    stream.write(f"{probe[0]} {probe[1]}\n")
    stream.flush()


def run_protocol(input_stream: TextIO, output_stream: TextIO,
                 config: Optional[SearchConfig] = None) -> SearchController:
    """
    Play a full session against the harness.

    Returns when the harness closes input, with the controller holding the
    final state and history.
    """
    setup = read_setup(input_stream)
    logger.info("board = %dx%d, max turns = %d, starting pos = %s",
                setup.width, setup.height, setup.turns, setup.start)

    controller = SearchController(setup.width, setup.height, setup.start,
                                  turns=setup.turns, config=config)

    while True:
        probe = controller.next_probe()
        write_probe(output_stream, probe)

        clue = read_clue(input_stream)
        if clue is None:
            logger.info("Input closed after %d turn(s)", controller.state.turn)
            return controller

        controller.receive_clue(clue)
