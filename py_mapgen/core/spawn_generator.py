"""
Spawn point layout.

Two strategies:
- corners: symmetric corner placement, then edge midpoints beyond four
  players
- ring: equal angular steps around the centre with a little jitter
"""

import math
from typing import List, Optional

import structlog

from ..config.generation import SpawnConfig
from ..utils.random import RandomSource
from .types import MapCapacityError, MapSize, SpawnPoint

logger = structlog.get_logger()

# Four corners plus four edge midpoints
MAX_LAYOUT_POSITIONS = 8


def effective_margin(size: MapSize, margin: int) -> int:
    """Shrink the margin on small maps so every layout position stays inside."""
    return max(1, min(margin, min(size.x, size.y) // 4))


def max_players_for_size(size: MapSize) -> int:
    """How many distinct spawns the layouts can fit on a map of this size."""
    if min(size.x, size.y) < 4:
        return 1
    return MAX_LAYOUT_POSITIONS


def check_player_capacity(size: MapSize, players_count: int) -> None:
    capacity = max_players_for_size(size)
    if players_count > capacity:
        raise MapCapacityError(
            f"A {size.x}x{size.y} map fits at most {capacity} players, got {players_count}"
        )


def corner_positions(size: MapSize, margin: int) -> List[SpawnPoint]:
    return [
        SpawnPoint(margin, margin),
        SpawnPoint(size.x - margin, margin),
        SpawnPoint(margin, size.y - margin),
        SpawnPoint(size.x - margin, size.y - margin),
    ]


def edge_positions(size: MapSize, margin: int) -> List[SpawnPoint]:
    """Edge midpoints: top, bottom, left, right."""
    return [
        SpawnPoint(size.x // 2, margin),
        SpawnPoint(size.x // 2, size.y - margin),
        SpawnPoint(margin, size.y // 2),
        SpawnPoint(size.x - margin, size.y // 2),
    ]


def corner_spawn_points(size: MapSize, players_count: int, margin: int) -> List[SpawnPoint]:
    corners = corner_positions(size, margin)

    if players_count == 2:
        positions = [corners[0], corners[3]]
    elif players_count <= 4:
        positions = corners[:players_count]
    else:
        positions = corners + edge_positions(size, margin)[: players_count - 4]

    return positions[:players_count]


def ring_spawn_points(
    size: MapSize,
    players_count: int,
    margin: int,
    config: SpawnConfig,
    rng: RandomSource,
) -> List[SpawnPoint]:
    """
    Spawns on a jittered ring around the centre.

    A jittered point that lands on an earlier spawn moves to the nearest free
    cell inside the margin. When the margin leaves too few cells for every
    player the corner layout is used instead.
    """
    cx, cy = size.x // 2, size.y // 2
    radius = config.ring_radius_percent * min(size.x, size.y) / 2
    step = 2 * math.pi / players_count

    points: List[SpawnPoint] = []
    for i in range(players_count):
        angle = i * step
        base_x = cx + math.cos(angle) * radius
        base_y = cy + math.sin(angle) * radius
        jitter_x = rng.randint(-config.ring_jitter, config.ring_jitter)
        jitter_y = rng.randint(-config.ring_jitter, config.ring_jitter)

        point = _clamped_point(base_x + jitter_x, base_y + jitter_y, size, margin)
        if point in points:
            point = _nearest_free_point(point, points, size, margin)
        if point is None:
            logger.warning(
                "Ring layout has no room, using corners",
                width=size.x,
                height=size.y,
                players=players_count,
            )
            return corner_spawn_points(size, players_count, margin)
        points.append(point)

    return points


def _clamped_point(x: float, y: float, size: MapSize, margin: int) -> SpawnPoint:
    return SpawnPoint(
        int(min(max(math.floor(x), margin), size.x - 1 - margin)),
        int(min(max(math.floor(y), margin), size.y - 1 - margin)),
    )


def _nearest_free_point(
    point: SpawnPoint, taken: List[SpawnPoint], size: MapSize, margin: int
) -> Optional[SpawnPoint]:
    """Closest cell inside the margin not in taken, searched in growing squares."""
    min_x, max_x = margin, size.x - 1 - margin
    min_y, max_y = margin, size.y - 1 - margin
    max_ring = max(max_x - min_x, max_y - min_y)

    for ring in range(1, max_ring + 1):
        candidates = [
            SpawnPoint(x, y)
            for y in range(max(min_y, point.y - ring), min(max_y, point.y + ring) + 1)
            for x in range(max(min_x, point.x - ring), min(max_x, point.x + ring) + 1)
            if max(abs(x - point.x), abs(y - point.y)) == ring
        ]
        free = [c for c in candidates if c not in taken]
        if free:
            return min(free, key=lambda c: ((c.x - point.x) ** 2 + (c.y - point.y) ** 2, c.y, c.x))
    return None


def calculate_spawn_points(
    size: MapSize,
    players_count: int,
    config: Optional[SpawnConfig] = None,
    rng: Optional[RandomSource] = None,
) -> List[SpawnPoint]:
    """
    Starting positions in player order.

    One player always starts at the map centre. The ring strategy needs a
    random source for its jitter.
    """
    config = config or SpawnConfig()

    if players_count <= 0:
        return []
    if players_count == 1:
        return [SpawnPoint(size.x // 2, size.y // 2)]

    margin = effective_margin(size, config.margin)

    if config.strategy == "corners":
        points = corner_spawn_points(size, players_count, margin)
    elif config.strategy == "ring":
        if rng is None:
            raise ValueError("The ring spawn strategy needs a random source")
        points = ring_spawn_points(size, players_count, margin, config, rng)
    else:
        raise ValueError(f"Unknown spawn strategy: {config.strategy}")

    logger.info(
        "Spawn points calculated",
        strategy=config.strategy,
        players=players_count,
        margin=margin,
    )
    return points
