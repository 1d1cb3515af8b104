"""Breadth-first shortest route from a maze's entrance to its exit."""

from __future__ import annotations

import argparse
import json
import logging
from collections import deque
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .grid import Coordinate, Grid
from .records import MazeStore

logger = logging.getLogger(__name__)


def solve(grid: Grid) -> Optional[List[Coordinate]]:
    """Return the shortest entrance-to-exit route through ``grid``.

    Neighbours are expanded in canonical direction order, so among routes of
    equal length the one preferring top, right, bottom, left at each branch
    wins. ``None`` means the exit cannot be reached; that is an ordinary
    outcome, not an error. The grid may contain cycles or disconnected
    regions.
    """

    start = grid.entrance
    goal = grid.exit
    queue: deque[Coordinate] = deque([start])
    parents: Dict[Coordinate, Optional[Coordinate]] = {start: None}
    while queue:
        current = queue.popleft()
        if current == goal:
            break
        for _, target in grid.open_neighbors(*current):
            if target not in parents:
                parents[target] = current
                queue.append(target)

    if goal not in parents:
        logger.debug("No route from %s to %s in %r", start, goal, grid)
        return None
    node: Optional[Coordinate] = goal
    path: List[Coordinate] = []
    while node is not None:
        path.append(node)
        node = parents[node]
    path.reverse()
    logger.debug("Solved %r in %d steps", grid, path_length(path))
    return path


def path_length(path: Sequence[Coordinate]) -> int:
    """Number of moves along ``path``."""

    return max(len(path) - 1, 0)


__all__ = ["solve", "path_length"]


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Solve a stored maze")
    parser.add_argument("metadata", type=Path, help="Path to the mazes metadata JSON")
    parser.add_argument("puzzle_id", type=str, help="Identifier of the maze to solve")
    parser.add_argument("--log-level", type=str, default="WARNING")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(level=args.log_level.upper())
    grid = MazeStore(args.metadata).get(args.puzzle_id).grid
    path = solve(grid)
    print(json.dumps([list(cell) for cell in path] if path is not None else None))


if __name__ == "__main__":
    main()
