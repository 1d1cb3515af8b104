"""Exceptions raised by the maze toolkit."""

from __future__ import annotations


class MazeError(Exception):
    """Base class for maze toolkit errors."""


class InvalidDimensions(MazeError, ValueError):
    """Raised when a grid is requested with unusable width or height."""


class GridFrozenError(MazeError, RuntimeError):
    """Raised when walls are changed on a grid that has been frozen."""


__all__ = ["MazeError", "InvalidDimensions", "GridFrozenError"]
