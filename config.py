"""
Configuration for the knight search.

Defines the probing strategy, the geometric tolerances used when slicing the
candidate region, and diagnostic output settings.
"""

from dataclasses import dataclass, fields
import json
from pathlib import Path


# Probing strategies accepted by search.create_strategy
STRATEGY_NAMES = ("bisection", "axis")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class SearchConfig:
    """
    Configuration for a search session.

    Attributes:
        strategy: Probing strategy name ("bisection" or "axis")
        collinear_tolerance: Max distance of a cast-line hit from an edge
        vertex_tolerance: Distance under which a hit counts as a vertex hit
        quantize_midpoint: Floor the probe midpoint before building the cut
        log_level: Level for diagnostics written to stderr
        plot_path: Where to save a PNG of the search history (empty = none)
    """
    strategy: str = "bisection"

    # Slicing tolerances
    collinear_tolerance: float = 1e-7
    vertex_tolerance: float = 1e-6

    # Floors the midpoint of the last two probes; the cut is then no longer
    # the exact equidistance line
    quantize_midpoint: bool = False

    # Diagnostics
    log_level: str = "WARNING"
    plot_path: str = ""

    def validate(self) -> list[str]:
        """
        Validate configuration values.

        Returns:
            List of error messages (empty if valid)
        """
        errors = []

        if self.strategy not in STRATEGY_NAMES:
            errors.append(f"strategy must be one of {', '.join(STRATEGY_NAMES)}, got {self.strategy!r}")

        if self.collinear_tolerance <= 0:
            errors.append(f"collinear_tolerance must be positive, got {self.collinear_tolerance}")

        if self.vertex_tolerance <= 0:
            errors.append(f"vertex_tolerance must be positive, got {self.vertex_tolerance}")
        elif self.vertex_tolerance < self.collinear_tolerance:
            errors.append(
                f"vertex_tolerance ({self.vertex_tolerance}) must not be smaller than "
                f"collinear_tolerance ({self.collinear_tolerance})"
            )

        if self.log_level.upper() not in LOG_LEVELS:
            errors.append(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {self.log_level!r}")

        return errors

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "strategy": self.strategy,
            "collinear_tolerance": self.collinear_tolerance,
            "vertex_tolerance": self.vertex_tolerance,
            "quantize_midpoint": self.quantize_midpoint,
            "log_level": self.log_level,
            "plot_path": self.plot_path,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SearchConfig":
        """
        Create from dictionary. Missing keys take their defaults.

        Raises:
            ValueError: on keys that are not configuration fields
        """
        unknown = sorted(set(data) - {f.name for f in fields(cls)})
        if unknown:
            raise ValueError(f"Unknown config key(s): {', '.join(unknown)}")
        return cls(**data)

    def save(self, filepath: Path | str) -> None:
        Path(filepath).write_text(json.dumps(self.to_dict(), indent=2) + "\n")

    @classmethod
    def load(cls, filepath: Path | str) -> "SearchConfig":
        """Read a JSON config file; a missing file gives the defaults."""
        filepath = Path(filepath)
        if not filepath.exists():
            return cls()

        data = json.loads(filepath.read_text())
        if not isinstance(data, dict):
            raise ValueError(f"{filepath} does not hold a JSON object")
        return cls.from_dict(data)
