"""Stored maze records and the JSON metadata file that holds them."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from .grid import Coordinate, Grid, parse_coordinate

PathLike = Union[str, Path]

logger = logging.getLogger(__name__)


@dataclass
class MazeRecord:
    id: str
    grid: Grid
    solution: List[Coordinate]

    def to_dict(self) -> dict:
        payload = self.grid.to_dict()
        return {
            "id": self.id,
            "width": payload["width"],
            "height": payload["height"],
            "entrance": list(self.grid.entrance),
            "exit": list(self.grid.exit),
            "walls": payload["walls"],
            "solution": [list(cell) for cell in self.solution],
            "wall_segments": [list(segment) for segment in self.grid.wall_segments()],
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "MazeRecord":
        """Rebuild a record, rejecting payloads that do not describe a maze."""

        if not isinstance(payload, dict):
            raise ValueError(f"Maze record must be an object, got {type(payload).__name__}")
        puzzle_id = payload.get("id")
        if not puzzle_id:
            raise ValueError("Each maze record must include an 'id'")
        try:
            grid = Grid.from_dict(payload).freeze()
            solution = [parse_coordinate(cell) for cell in payload.get("solution", [])]
        except ValueError as exc:
            raise ValueError(f"Maze record '{puzzle_id}' is malformed: {exc}") from exc
        for x, y in solution:
            if not grid.in_bounds(x, y):
                raise ValueError(f"Maze record '{puzzle_id}' has solution cell ({x}, {y}) outside the grid")
        return cls(id=str(puzzle_id), grid=grid, solution=solution)


def _read_payload(path: Path) -> List[Dict[str, Any]]:
    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        raise ValueError(f"Maze metadata in {path} must be a list of records")
    return raw


def write_records(
    records: Iterable[MazeRecord],
    metadata_path: PathLike,
    *,
    append: bool = True,
) -> Path:
    """Serialize records to JSON, appending to an existing file if requested."""

    path = Path(metadata_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    existing: List[Dict[str, Any]] = []
    if append and path.exists():
        existing = _read_payload(path)
    payload = [record.to_dict() for record in records]
    path.write_text(json.dumps(existing + payload, indent=2), encoding="utf-8")
    logger.info("Wrote %d mazes to %s (%d total)", len(payload), path, len(existing) + len(payload))
    return path


class MazeStore:
    """Mazes loaded from a metadata file, keyed by id."""

    def __init__(self, metadata_path: PathLike, *, base_dir: Optional[PathLike] = None) -> None:
        self.metadata_path = Path(metadata_path)
        if not self.metadata_path.exists():
            raise FileNotFoundError(f"Metadata file not found: {self.metadata_path}")
        self.base_dir = Path(base_dir) if base_dir is not None else self.metadata_path.parent
        self._records: Dict[str, MazeRecord] = {}
        for payload in _read_payload(self.metadata_path):
            record = MazeRecord.from_dict(payload)
            self._records[record.id] = record
        logger.debug("Loaded %d mazes from %s", len(self._records), self.metadata_path)

    @property
    def records(self) -> Dict[str, MazeRecord]:
        return self._records

    def get(self, puzzle_id: str) -> MazeRecord:
        try:
            return self._records[puzzle_id]
        except KeyError as exc:
            raise KeyError(f"Maze id '{puzzle_id}' not found in metadata") from exc

    def resolve_path(self, path_value: PathLike) -> Path:
        candidate = Path(path_value)
        if not candidate.is_absolute():
            candidate = self.base_dir / candidate
        return candidate


__all__ = ["MazeRecord", "MazeStore", "PathLike", "write_records"]
