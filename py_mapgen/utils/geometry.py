"""
Geometry helpers for integer grid maps.

Coordinates are (x, y) with x the column and y the row. Anything that maps
a continuous point back onto the grid floors it.
"""

import math
from typing import List, NamedTuple, Optional, Sequence, Tuple


class Position(NamedTuple):
    """A grid coordinate."""

    x: int
    y: int


# Neighbour offsets
DIRECTIONS_4: Tuple[Position, ...] = (
    Position(-1, 0),
    Position(1, 0),
    Position(0, -1),
    Position(0, 1),
)

DIRECTIONS_8: Tuple[Position, ...] = DIRECTIONS_4 + (
    Position(-1, -1),
    Position(1, -1),
    Position(-1, 1),
    Position(1, 1),
)


def euclidean_distance(x1: float, y1: float, x2: float, y2: float) -> float:
    return math.hypot(x1 - x2, y1 - y2)


def distance_between(a: Sequence[float], b: Sequence[float]) -> float:
    """Euclidean distance between two (x, y) pairs."""
    return math.hypot(a[0] - b[0], a[1] - b[1])


def manhattan_distance(a: Sequence[int], b: Sequence[int]) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def chebyshev_distance(a: Sequence[int], b: Sequence[int]) -> int:
    return max(abs(a[0] - b[0]), abs(a[1] - b[1]))


def is_within_bounds(x: int, y: int, width: int, height: int) -> bool:
    return 0 <= x < width and 0 <= y < height


def is_within_circle(x: float, y: float, cx: float, cy: float, radius: float) -> bool:
    return euclidean_distance(x, y, cx, cy) <= radius


def map_center(width: int, height: int) -> Position:
    """Centre cell of a width x height map (floored)."""
    return Position(width // 2, height // 2)


def max_distance_from_center(width: int, height: int) -> float:
    """
    Distance from the map centre to its farthest corner cell.

    All four corners are measured because the floored centre sits closer to
    the bottom-right corner on even-sized maps.
    """
    cx, cy = map_center(width, height)
    corners = ((0, 0), (width - 1, 0), (0, height - 1), (width - 1, height - 1))
    return max(euclidean_distance(cx, cy, x, y) for x, y in corners)


def normalized_distance(distance: float, max_distance: float) -> float:
    """Scale a distance into [0, 1]."""
    if max_distance == 0:
        return 0.0
    return clamp(distance / max_distance)


def polar_to_cartesian(cx: float, cy: float, radius: float, angle: float) -> Position:
    return Position(
        math.floor(cx + math.cos(angle) * radius),
        math.floor(cy + math.sin(angle) * radius),
    )


def angle_between(x1: float, y1: float, x2: float, y2: float) -> float:
    return math.atan2(y2 - y1, x2 - x1)


def rotate_point(x: float, y: float, cx: float, cy: float, angle: float) -> Position:
    """Rotate (x, y) around (cx, cy) by angle radians."""
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    dx = x - cx
    dy = y - cy
    return Position(
        math.floor(cx + dx * cos_a - dy * sin_a),
        math.floor(cy + dx * sin_a + dy * cos_a),
    )


def neighbors(x: int, y: int, directions: Sequence[Position] = DIRECTIONS_8) -> List[Position]:
    return [Position(x + dx, y + dy) for dx, dy in directions]


def valid_neighbors(
    x: int,
    y: int,
    width: int,
    height: int,
    directions: Sequence[Position] = DIRECTIONS_8,
) -> List[Position]:
    return [p for p in neighbors(x, y, directions) if is_within_bounds(p.x, p.y, width, height)]


def line_points(start: Sequence[int], end: Sequence[int]) -> List[Position]:
    """
    Rasterize the segment start -> end with Bresenham's algorithm.

    Both endpoints are included.
    """
    x0, y0 = int(start[0]), int(start[1])
    x1, y1 = int(end[0]), int(end[1])

    dx = abs(x1 - x0)
    dy = abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx - dy

    points = []
    while True:
        points.append(Position(x0, y0))
        if x0 == x1 and y0 == y1:
            break
        e2 = 2 * err
        if e2 > -dy:
            err -= dy
            x0 += sx
        if e2 < dx:
            err += dx
            y0 += sy

    return points


def find_nearest(target: Sequence[int], positions: Sequence[Sequence[int]]) -> Optional[Sequence[int]]:
    if not positions:
        return None
    return min(positions, key=lambda p: distance_between(target, p))


def find_farthest(target: Sequence[int], positions: Sequence[Sequence[int]]) -> Optional[Sequence[int]]:
    if not positions:
        return None
    return max(positions, key=lambda p: distance_between(target, p))


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def lerp(a: float, b: float, t: float) -> float:
    return a + t * (b - a)


def smoothstep(edge0: float, edge1: float, x: float) -> float:
    t = clamp((x - edge0) / (edge1 - edge0))
    return t * t * (3 - 2 * t)
