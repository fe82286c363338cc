"""
Random-retry placement inside an annular zone.

Used to position resource clusters: candidates are sampled in a ring around
a centre and rejected when they crowd the map edge, fall in an exclusion
zone, or sit too close to something already placed.
"""

import math
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from ..utils.geometry import Position, euclidean_distance
from ..utils.random import RandomSource


@dataclass(frozen=True)
class PlacementZone:
    """Ring [min_radius, max_radius) around center."""

    center: Position
    min_radius: float
    max_radius: float


@dataclass(frozen=True)
class PlacementObject:
    position: Position
    type: str
    radius: float = 0


@dataclass(frozen=True)
class ExclusionZone:
    center: Position
    radius: float


@dataclass
class PlacementConfig:
    zone: PlacementZone
    object_type: str
    existing_objects: Sequence[PlacementObject]
    min_distance: float
    exclusion_zones: Sequence[ExclusionZone] = field(default_factory=list)
    different_type_distance_multiplier: float = 1.5
    edge_margin: int = 5
    max_attempts: int = 200


@dataclass
class PlacementCallbacks:
    is_in_bounds: Callable[[Position], bool]
    custom_validation: Optional[Callable[[Position], bool]] = None


@dataclass
class PlacementResult:
    position: Optional[Position]
    attempts: int
    success: bool


def create_exclusion_zones(points: Sequence[Sequence[int]], radius: float) -> List[ExclusionZone]:
    return [ExclusionZone(Position(int(p[0]), int(p[1])), radius) for p in points]


def _in_exclusion_zone(position: Position, zones: Sequence[ExclusionZone]) -> bool:
    return any(
        euclidean_distance(position.x, position.y, zone.center.x, zone.center.y) < zone.radius
        for zone in zones
    )


def _conflicts(position: Position, config: PlacementConfig) -> bool:
    for obj in config.existing_objects:
        required = config.min_distance
        if obj.type != config.object_type:
            required *= config.different_type_distance_multiplier
        if euclidean_distance(position.x, position.y, obj.position.x, obj.position.y) < required:
            return True
    return False


def find_valid_position(
    config: PlacementConfig,
    callbacks: PlacementCallbacks,
    rng: RandomSource,
) -> PlacementResult:
    """
    Sample up to config.max_attempts candidates and return the first valid one.

    Exhausting the attempts is not an error: the result carries
    success=False and the caller decides what to do without the object.
    """
    zone = config.zone
    margin = config.edge_margin

    for attempt in range(config.max_attempts):
        angle = rng.angle()
        distance = zone.min_radius + rng.random() * (zone.max_radius - zone.min_radius)
        position = Position(
            math.floor(zone.center.x + math.cos(angle) * distance),
            math.floor(zone.center.y + math.sin(angle) * distance),
        )

        if not callbacks.is_in_bounds(position):
            continue
        if not callbacks.is_in_bounds(Position(position.x - margin, position.y - margin)):
            continue
        if not callbacks.is_in_bounds(Position(position.x + margin, position.y + margin)):
            continue
        if _in_exclusion_zone(position, config.exclusion_zones):
            continue
        if _conflicts(position, config):
            continue
        if callbacks.custom_validation and not callbacks.custom_validation(position):
            continue

        return PlacementResult(position=position, attempts=attempt + 1, success=True)

    return PlacementResult(position=None, attempts=config.max_attempts, success=False)
