"""Perfect-maze generation and shortest-route solving."""

__all__ = [
    "Cell",
    "Direction",
    "DIRECTIONS",
    "Grid",
    "GridFrozenError",
    "InvalidDimensions",
    "MazeError",
    "MazeEvaluationResult",
    "MazeEvaluator",
    "MazeGenerator",
    "MazeRecord",
    "MazeStore",
    "generate",
    "solve",
    "write_records",
]

from .errors import GridFrozenError, InvalidDimensions, MazeError
from .grid import DIRECTIONS, Cell, Direction, Grid
from .records import MazeRecord, MazeStore, write_records
from .generator import MazeGenerator, generate
from .solver import solve
from .evaluator import MazeEvaluationResult, MazeEvaluator
