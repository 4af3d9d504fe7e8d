"""
Plot the history of a search.

Draws the board, every candidate region (older regions fainter), the probe
path and, when known, the hidden target.
"""

from pathlib import Path
from typing import Optional, Sequence

import numpy as np
import matplotlib
matplotlib.use('Agg')  # Non-interactive backend
import matplotlib.pyplot as plt

from search import SearchState

# Largest height:width (or width:height) ratio of the saved figure
MAX_ASPECT = 4.0


def plot_polygon(ax, polygon, color='blue', alpha=0.3, edgecolor='black', linewidth=1):
    """Plot a polygon."""
    vertices = np.array([v.to_tuple() for v in polygon])
    patch = plt.Polygon(vertices, facecolor=color, alpha=alpha, edgecolor=edgecolor, linewidth=linewidth)
    ax.add_patch(patch)


def plot_search(states: Sequence[SearchState], width: int, height: int,
                path: Path | str, target: Optional[tuple[int, int]] = None) -> Path:
    """
    Render a search history to a PNG file.

    Args:
        states: Search states in turn order (SearchController.history)
        width: Board width in cells
        height: Board height in cells
        path: Output image path
        target: Hidden cell, if known

    Returns:
        The path the image was written to.
    """
    path = Path(path)
    # Figure follows the board shape up to MAX_ASPECT
    aspect = float(np.clip(height / max(width, 1), 1 / MAX_ASPECT, MAX_ASPECT))
    fig, ax = plt.subplots(figsize=(8, 8 * aspect))

    ax.set_title(f'Search over {len(states)} state(s)')
    board = plt.Rectangle((0, 0), width, height, fill=False, edgecolor='gray', linestyle='--')
    ax.add_patch(board)

    n = len(states)
    for i, state in enumerate(states):
        fade = (i + 1) / n
        final = i == n - 1
        plot_polygon(ax, state.region,
                     color='orange' if final else 'lightblue',
                     alpha=0.5 if final else 0.15 * fade,
                     edgecolor='red' if final else 'black',
                     linewidth=2 if final else 0.5)

    # Each state's last_probe is the position its clue was measured from
    probes = [s.last_probe.to_tuple() for s in states]
    if states and states[-1].probe is not None:
        probes.append(states[-1].probe.to_tuple())
    if probes:
        xy = np.array(probes, dtype=float)
        ax.plot(xy[:, 0], xy[:, 1], '-o', color='navy', markersize=4, linewidth=1, label='Probes')
        ax.plot(xy[0, 0], xy[0, 1], 's', color='green', markersize=8, label='Start')

    if target is not None:
        ax.plot(target[0], target[1], '*', color='red', markersize=14, label='Target')

    ax.set_xlim(-1, width + 1)
    # Board origin is the top-left corner
    ax.set_ylim(height + 1, -1)
    ax.set_aspect('equal')
    ax.grid(True, alpha=0.3)
    ax.legend(loc='upper right')

    plt.tight_layout()
    fig.savefig(path, dpi=100)
    plt.close(fig)
    return path
