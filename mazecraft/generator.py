"""Perfect-maze generation by randomized depth-first backtracking."""

from __future__ import annotations

import argparse
import logging
import math
import random
import uuid
from pathlib import Path
from typing import Any, List, Optional, Tuple

import numpy as np

from .errors import InvalidDimensions
from .grid import BOTTOM, DIRECTIONS, TOP, Coordinate, Direction, Grid, validate_dimensions
from .records import MazeRecord, PathLike, write_records
from .solver import solve

MIN_SIZE = 5
MAX_SIZE = 80

logger = logging.getLogger(__name__)


def generate(width: int, height: int, rng: Optional[random.Random] = None) -> Grid:
    """Carve a perfect maze into a fresh ``width`` by ``height`` grid.

    The backtracker keeps an explicit stack so large grids never hit the
    recursion limit. ``rng`` only needs a ``choice`` method; pass a seeded
    ``random.Random`` for reproducible mazes. The entrance's top wall and
    the exit's bottom wall are opened after carving. The returned grid is
    frozen.
    """

    validate_dimensions(width, height)
    if rng is None:
        rng = random.Random()

    grid = Grid(width, height)
    visited = np.zeros((grid.height, grid.width), dtype=bool)
    visited[0, 0] = True
    stack: List[Coordinate] = [(0, 0)]

    while stack:
        x, y = stack[-1]
        candidates: List[Tuple[Direction, Coordinate]] = []
        for direction in DIRECTIONS:
            target = grid.neighbor(x, y, direction)
            if target is not None and not visited[target[1], target[0]]:
                candidates.append((direction, target))

        if not candidates:
            stack.pop()
            continue

        direction, (nx, ny) = rng.choice(candidates)
        grid.remove_wall(x, y, direction)
        visited[ny, nx] = True
        stack.append((nx, ny))

    entrance_x, entrance_y = grid.entrance
    exit_x, exit_y = grid.exit
    grid.remove_wall(entrance_x, entrance_y, TOP)
    grid.remove_wall(exit_x, exit_y, BOTTOM)

    logger.debug("Generated %dx%d maze with %d passages", grid.width, grid.height, grid.open_passages())
    return grid.freeze()


def validate_dimension(value: Any, minimum: int = MIN_SIZE, maximum: int = MAX_SIZE) -> int:
    """Coerce a user-supplied size to an int within ``[minimum, maximum]``.

    Fractional values are floored after the range check.
    """

    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidDimensions(f"Size must be a number, got {value!r}") from exc
    if not math.isfinite(number) or number < minimum or number > maximum:
        raise InvalidDimensions(f"Size must be between {minimum} and {maximum}, got {value!r}")
    return int(math.floor(number))


class MazeGenerator:
    """Build datasets of solved perfect mazes."""

    def __init__(
        self,
        output_dir: PathLike = "data/maze",
        *,
        width: Any = 15,
        height: Any = 15,
        seed: Optional[int] = None,
    ) -> None:
        self.width = validate_dimension(width)
        self.height = validate_dimension(height)
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self._rng = random.Random(seed)

    def create_puzzle(self, *, puzzle_id: Optional[str] = None) -> MazeRecord:
        puzzle_uuid = puzzle_id or str(uuid.uuid4())
        grid = generate(self.width, self.height, self._rng)
        path = solve(grid)
        if path is None:
            raise RuntimeError("Generated maze has no route from entrance to exit")
        logger.debug("Maze %s: %d cells on the solution route", puzzle_uuid, len(path))
        return MazeRecord(id=puzzle_uuid, grid=grid, solution=path)

    def create_random_puzzle(self) -> MazeRecord:
        return self.create_puzzle()

    def generate_dataset(
        self,
        count: int,
        *,
        metadata_path: Optional[PathLike] = None,
        append: bool = True,
    ) -> List[MazeRecord]:
        """Generate ``count`` mazes and optionally write them to ``metadata_path``."""

        records = [self.create_random_puzzle() for _ in range(count)]
        if metadata_path is not None:
            write_records(records, metadata_path, append=append)
        return records


__all__ = [
    "MAX_SIZE",
    "MIN_SIZE",
    "MazeGenerator",
    "MazeRecord",
    "generate",
    "validate_dimension",
]


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate solved perfect mazes")
    parser.add_argument("count", type=int, help="Number of mazes to generate")
    parser.add_argument("--output-dir", type=Path, default=Path("data/maze"), help="Where to write mazes.json")
    parser.add_argument("--width", type=float, default=15, help=f"Cells per row ({MIN_SIZE}-{MAX_SIZE})")
    parser.add_argument("--height", type=float, default=15, help=f"Cells per column ({MIN_SIZE}-{MAX_SIZE})")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--log-level", type=str, default="INFO")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(level=args.log_level.upper())
    generator = MazeGenerator(
        output_dir=args.output_dir,
        width=args.width,
        height=args.height,
        seed=args.seed,
    )
    metadata_path = generator.output_dir / "mazes.json"
    generator.generate_dataset(args.count, metadata_path=metadata_path)


if __name__ == "__main__":
    main()
