"""Check candidate routes against stored mazes."""

from __future__ import annotations

import argparse
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from .grid import DIRECTIONS, Coordinate, Grid, parse_coordinate
from .records import MazeRecord, MazeStore, PathLike
from .solver import path_length, solve

logger = logging.getLogger(__name__)

Step = Tuple[Coordinate, Coordinate]


@dataclass
class MazeEvaluationResult:
    puzzle_id: str
    starts_at_entrance: bool
    reaches_exit: bool
    connected: bool
    is_shortest: bool
    message: str
    blocked_steps: List[Step] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return (
            self.starts_at_entrance
            and self.reaches_exit
            and self.connected
            and not self.blocked_steps
        )

    def to_dict(self) -> dict:
        return {
            "puzzle_id": self.puzzle_id,
            "starts_at_entrance": self.starts_at_entrance,
            "reaches_exit": self.reaches_exit,
            "connected": self.connected,
            "is_shortest": self.is_shortest,
            "is_valid": self.is_valid,
            "blocked_steps": [[list(a), list(b)] for a, b in self.blocked_steps],
            "message": self.message,
        }


class MazeEvaluator:
    """Evaluate a route by walking it through the stored maze walls."""

    def __init__(self, metadata_path: PathLike, *, base_dir: Optional[PathLike] = None) -> None:
        self.store = MazeStore(metadata_path, base_dir=base_dir)

    def get_maze(self, puzzle_id: str) -> MazeRecord:
        return self.store.get(puzzle_id)

    def evaluate(
        self,
        puzzle_id: str,
        candidate: Union[Sequence[Sequence[int]], PathLike],
    ) -> MazeEvaluationResult:
        grid = self.get_maze(puzzle_id).grid
        route = self._load_candidate(candidate)

        starts = bool(route) and route[0] == grid.entrance
        reaches = bool(route) and route[-1] == grid.exit
        connected = bool(route) and all(grid.in_bounds(x, y) for x, y in route)
        blocked: List[Step] = []
        for current, following in zip(route, route[1:]):
            direction = self._step_direction(current, following)
            if direction is None or not grid.in_bounds(*following):
                connected = False
            elif grid.in_bounds(*current) and grid.has_wall(*current, direction):
                blocked.append((current, following))

        valid = starts and reaches and connected and not blocked
        is_shortest = valid and self._is_shortest(grid, route)

        if not route:
            message = "Route is empty."
        elif not connected:
            message = "Route leaves the grid or jumps between non-adjacent cells."
        elif blocked:
            message = f"Route crosses {len(blocked)} wall(s)."
        elif not starts:
            message = "Route does not start at the entrance."
        elif not reaches:
            message = "Route does not reach the exit."
        elif not is_shortest:
            message = "Route reaches the exit but is longer than the shortest route."
        else:
            message = "Route is a shortest path from entrance to exit."

        logger.debug("Evaluated maze %s: %s", puzzle_id, message)
        return MazeEvaluationResult(
            puzzle_id=puzzle_id,
            starts_at_entrance=starts,
            reaches_exit=reaches,
            connected=connected,
            is_shortest=is_shortest,
            message=message,
            blocked_steps=blocked,
        )

    # ------------------------------------------------------------------

    def _load_candidate(self, candidate: Union[Sequence[Sequence[int]], PathLike]) -> List[Coordinate]:
        if isinstance(candidate, (str, Path)):
            path = Path(candidate)
            if not path.exists():
                path = self.store.resolve_path(candidate)
            if not path.exists():
                raise FileNotFoundError(f"Candidate route not found: {path}")
            candidate = json.loads(path.read_text(encoding="utf-8"))
        if isinstance(candidate, (str, bytes)) or not isinstance(candidate, Sequence):
            raise ValueError("Candidate route must be a list of [x, y] pairs")
        return [parse_coordinate(cell) for cell in candidate]

    @staticmethod
    def _step_direction(current: Coordinate, following: Coordinate):
        dx = following[0] - current[0]
        dy = following[1] - current[1]
        for direction in DIRECTIONS:
            if (direction.dx, direction.dy) == (dx, dy):
                return direction
        return None

    @staticmethod
    def _is_shortest(grid: Grid, route: Sequence[Coordinate]) -> bool:
        best = solve(grid)
        return best is not None and path_length(route) == path_length(best)


__all__ = ["MazeEvaluator", "MazeEvaluationResult"]


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Evaluate a route through a stored maze")
    parser.add_argument("metadata", type=Path, help="Path to the mazes metadata JSON")
    parser.add_argument("puzzle_id", type=str, help="Identifier of the maze to evaluate")
    parser.add_argument("candidate", type=Path, help="JSON file holding the route as [[x, y], ...]")
    parser.add_argument("--base-dir", type=Path, default=None)
    parser.add_argument("--log-level", type=str, default="WARNING")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(level=args.log_level.upper())
    evaluator = MazeEvaluator(args.metadata, base_dir=args.base_dir)
    result = evaluator.evaluate(args.puzzle_id, args.candidate)
    print(json.dumps(result.to_dict(), indent=2))


if __name__ == "__main__":
    main()
