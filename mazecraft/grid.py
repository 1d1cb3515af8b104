"""Rectangular wall grid shared by the maze generator and solver."""

from __future__ import annotations

import numbers
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from .errors import GridFrozenError, InvalidDimensions

Coordinate = Tuple[int, int]
Segment = Tuple[int, int, int, int]


class Direction(NamedTuple):
    name: str
    dx: int
    dy: int
    opposite: str


TOP = Direction("top", 0, -1, "bottom")
RIGHT = Direction("right", 1, 0, "left")
BOTTOM = Direction("bottom", 0, 1, "top")
LEFT = Direction("left", -1, 0, "right")

# Canonical order. Generation and solving both enumerate neighbours this way.
DIRECTIONS: Tuple[Direction, ...] = (TOP, RIGHT, BOTTOM, LEFT)

_INDEX = {direction.name: index for index, direction in enumerate(DIRECTIONS)}
_BY_NAME = {direction.name: direction for direction in DIRECTIONS}


def direction_by_name(name: str) -> Direction:
    try:
        return _BY_NAME[name]
    except KeyError as exc:
        raise KeyError(f"Unknown direction '{name}'") from exc


def validate_dimensions(width: Any, height: Any) -> None:
    """Reject non-integral or non-positive grid dimensions."""

    for label, value in (("width", width), ("height", height)):
        if isinstance(value, bool) or not isinstance(value, numbers.Integral):
            raise InvalidDimensions(f"{label} must be an integer, got {value!r}")
        if value < 1:
            raise InvalidDimensions(f"{label} must be at least 1, got {value}")


def parse_coordinate(value: Any) -> Coordinate:
    """Read an ``[x, y]`` pair, rejecting anything but two plain integers."""

    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence) or len(value) != 2:
        raise ValueError(f"Coordinate must be an [x, y] pair, got {value!r}")
    for part in value:
        if isinstance(part, bool) or not isinstance(part, numbers.Integral):
            raise ValueError(f"Coordinate parts must be integers, got {value!r}")
    return (int(value[0]), int(value[1]))


@dataclass(frozen=True)
class Cell:
    x: int
    y: int
    top: bool
    right: bool
    bottom: bool
    left: bool

    @property
    def walls(self) -> Dict[str, bool]:
        return {
            "top": self.top,
            "right": self.right,
            "bottom": self.bottom,
            "left": self.left,
        }

    def is_open(self, direction: Direction) -> bool:
        return not getattr(self, direction.name)


class Grid:
    """A ``height`` by ``width`` grid of cells with four wall flags each.

    Flags live in a boolean array of shape ``(height, width, 4)`` whose last
    axis follows :data:`DIRECTIONS`. ``True`` means the wall is present.
    Removing or adding a wall updates the neighbouring cell as well, so the
    two flags on every shared edge always agree.
    """

    def __init__(self, width: int, height: int) -> None:
        validate_dimensions(width, height)
        self._width = int(width)
        self._height = int(height)
        self._walls = np.ones((self._height, self._width, len(DIRECTIONS)), dtype=bool)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def entrance(self) -> Coordinate:
        return (0, 0)

    @property
    def exit(self) -> Coordinate:
        return (self._width - 1, self._height - 1)

    @property
    def frozen(self) -> bool:
        return not self._walls.flags.writeable

    def freeze(self) -> "Grid":
        self._walls.flags.writeable = False
        return self

    def copy(self) -> "Grid":
        clone = Grid(self._width, self._height)
        clone._walls = self._walls.copy()
        return clone

    # ------------------------------------------------------------------

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self._width and 0 <= y < self._height

    def _check_bounds(self, x: int, y: int) -> None:
        if not self.in_bounds(x, y):
            raise IndexError(
                f"Cell ({x}, {y}) is outside a {self._width}x{self._height} grid"
            )

    def cell(self, x: int, y: int) -> Cell:
        self._check_bounds(x, y)
        top, right, bottom, left = (bool(flag) for flag in self._walls[y, x])
        return Cell(x=x, y=y, top=top, right=right, bottom=bottom, left=left)

    def cells(self) -> Iterator[Cell]:
        for y in range(self._height):
            for x in range(self._width):
                yield self.cell(x, y)

    def has_wall(self, x: int, y: int, direction: Direction) -> bool:
        self._check_bounds(x, y)
        return bool(self._walls[y, x, _INDEX[direction.name]])

    def neighbor(self, x: int, y: int, direction: Direction) -> Optional[Coordinate]:
        nx, ny = x + direction.dx, y + direction.dy
        if self.in_bounds(nx, ny):
            return (nx, ny)
        return None

    def open_neighbors(self, x: int, y: int) -> Iterator[Tuple[Direction, Coordinate]]:
        """Yield in-bounds neighbours reachable through an open wall, in canonical order."""

        self._check_bounds(x, y)
        flags = self._walls[y, x]
        for index, direction in enumerate(DIRECTIONS):
            if flags[index]:
                continue
            target = self.neighbor(x, y, direction)
            if target is not None:
                yield direction, target

    def remove_wall(self, x: int, y: int, direction: Direction) -> None:
        self._set_wall(x, y, direction, False)

    def add_wall(self, x: int, y: int, direction: Direction) -> None:
        self._set_wall(x, y, direction, True)

    def _set_wall(self, x: int, y: int, direction: Direction, present: bool) -> None:
        if self.frozen:
            raise GridFrozenError("Cannot change walls on a frozen grid")
        self._check_bounds(x, y)
        self._walls[y, x, _INDEX[direction.name]] = present
        target = self.neighbor(x, y, direction)
        if target is not None:
            nx, ny = target
            self._walls[ny, nx, _INDEX[direction.opposite]] = present

    # ------------------------------------------------------------------

    def open_passages(self) -> int:
        """Count open walls between pairs of cells, ignoring the outer border."""

        right = _INDEX["right"]
        bottom = _INDEX["bottom"]
        horizontal = np.count_nonzero(~self._walls[:, :-1, right])
        vertical = np.count_nonzero(~self._walls[:-1, :, bottom])
        return int(horizontal + vertical)

    def is_symmetric(self) -> bool:
        right, left = _INDEX["right"], _INDEX["left"]
        bottom, top = _INDEX["bottom"], _INDEX["top"]
        horizontal = np.array_equal(self._walls[:, :-1, right], self._walls[:, 1:, left])
        vertical = np.array_equal(self._walls[:-1, :, bottom], self._walls[1:, :, top])
        return bool(horizontal and vertical)

    def wall_segments(self) -> List[Segment]:
        """Line segments ``(x1, y1, x2, y2)`` outlining every present wall.

        Each cell contributes its top and left walls. The bottom and right
        borders are emitted afterwards, leaving a gap for the exit when its
        bottom wall is open.
        """

        segments: List[Segment] = []
        top, left = _INDEX["top"], _INDEX["left"]
        for y in range(self._height):
            for x in range(self._width):
                if self._walls[y, x, top]:
                    segments.append((x, y, x + 1, y))
                if self._walls[y, x, left]:
                    segments.append((x, y, x, y + 1))

        exit_x, exit_y = self.exit
        exit_open = not self._walls[exit_y, exit_x, _INDEX["bottom"]]
        for x in range(self._width):
            if x == exit_x and exit_open:
                continue
            segments.append((x, self._height, x + 1, self._height))
        for y in range(self._height):
            segments.append((self._width, y, self._width, y + 1))
        return segments

    # ------------------------------------------------------------------

    def to_dict(self) -> dict:
        weights = 1 << np.arange(len(DIRECTIONS))
        masks = (self._walls.astype(np.int64) * weights).sum(axis=2)
        return {
            "width": self._width,
            "height": self._height,
            "walls": masks.tolist(),
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Grid":
        try:
            width = payload["width"]
            height = payload["height"]
            rows = payload["walls"]
        except (KeyError, TypeError) as exc:
            raise ValueError("Grid payload needs 'width', 'height' and 'walls'") from exc
        grid = cls(width, height)
        masks = np.asarray(rows, dtype=np.int64)
        if masks.shape != (grid.height, grid.width):
            raise ValueError(
                f"Wall rows have shape {masks.shape}, expected {(grid.height, grid.width)}"
            )
        if np.any((masks < 0) | (masks > 0b1111)):
            raise ValueError("Wall masks must be between 0 and 15")
        bits = (masks[:, :, None] >> np.arange(len(DIRECTIONS))) & 1
        grid._walls = bits.astype(bool)
        if not grid.is_symmetric():
            raise ValueError("Wall flags disagree across a shared edge")
        return grid

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return (
            self._width == other._width
            and self._height == other._height
            and np.array_equal(self._walls, other._walls)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        state = ", frozen" if self.frozen else ""
        return f"Grid(width={self._width}, height={self._height}{state})"


__all__ = [
    "BOTTOM",
    "Cell",
    "Coordinate",
    "DIRECTIONS",
    "Direction",
    "Grid",
    "LEFT",
    "RIGHT",
    "Segment",
    "TOP",
    "direction_by_name",
    "parse_coordinate",
    "validate_dimensions",
]
