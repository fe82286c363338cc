"""
Generic 2D grid primitives.

A grid is a list of rows, indexed grid[y][x]. Sizes are anything with x and
y attributes (MapSize or Position).
"""

from typing import Any, Callable, List, Optional, TypeVar

import numpy as np

from ..utils.geometry import Position, map_center, max_distance_from_center

T = TypeVar("T")
U = TypeVar("U")

Grid = List[List[T]]


def create_empty(size, default_value: T) -> Grid:
    """Grid filled uniformly with default_value."""
    return [[default_value for _ in range(size.x)] for _ in range(size.y)]


def create_with(size, initializer: Callable[[int, int], T]) -> Grid:
    """Grid filled by initializer(x, y) in row-major order."""
    return [[initializer(x, y) for x in range(size.x)] for y in range(size.y)]


def normalized_distance_field(size) -> np.ndarray:
    """
    Distance of every cell from the map centre, scaled to [0, 1].

    Returns an array of shape (size.y, size.x). 0 is the centre cell, 1 the
    farthest corner.
    """
    cx, cy = map_center(size.x, size.y)
    max_distance = max_distance_from_center(size.x, size.y)
    ys, xs = np.mgrid[0:size.y, 0:size.x]
    distances = np.hypot(xs - cx, ys - cy)
    if max_distance == 0:
        return np.zeros_like(distances)
    return np.clip(distances / max_distance, 0.0, 1.0)


def create_distance_based(size, distance_function: Callable[[float, int, int], T]) -> Grid:
    """Grid filled by distance_function(normalized_distance, x, y)."""
    field = normalized_distance_field(size)
    return create_with(size, lambda x, y: distance_function(float(field[y, x]), x, y))


def create_noise_based(
    size,
    noise_function: Callable[[int, int], float],
    value_mapper: Callable[[float, int, int], T],
) -> Grid:
    """Grid filled by value_mapper(noise_function(x, y), x, y)."""
    return create_with(size, lambda x, y: value_mapper(noise_function(x, y), x, y))


def clone(grid: Grid) -> Grid:
    return [list(row) for row in grid]


def get_size(grid: Grid) -> Position:
    return Position(len(grid[0]) if grid else 0, len(grid))


def is_valid_position(grid: Grid, position) -> bool:
    x, y = position
    return 0 <= y < len(grid) and 0 <= x < len(grid[y])


def get_value(grid: Grid, position, default: Optional[Any] = None) -> Any:
    """Cell value, or default when position lies outside the grid."""
    if not is_valid_position(grid, position):
        return default
    x, y = position
    return grid[y][x]


def set_value(grid: Grid, position, value: Any) -> bool:
    """Write a cell. Out-of-bounds writes are ignored and return False."""
    if not is_valid_position(grid, position):
        return False
    x, y = position
    grid[y][x] = value
    return True


def transform(grid: Grid, transformer: Callable[[T, int, int], U]) -> Grid:
    """New grid of transformer(value, x, y); the input is left untouched."""
    return [
        [transformer(value, x, y) for x, value in enumerate(row)]
        for y, row in enumerate(grid)
    ]


def filter_positions(grid: Grid, predicate: Callable[[T, int, int], bool]) -> List[Position]:
    """Positions whose value satisfies predicate(value, x, y), row-major."""
    return [
        Position(x, y)
        for y, row in enumerate(grid)
        for x, value in enumerate(row)
        if predicate(value, x, y)
    ]
