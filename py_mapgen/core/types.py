"""
Domain value types for map generation.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List

from ..utils.geometry import Position


class MapGenerationError(Exception):
    """Base class for map generation errors."""


class MapValidationError(MapGenerationError, ValueError):
    """Raised when a value object is constructed with invalid data."""


class MapCapacityError(MapGenerationError, ValueError):
    """Raised when a map cannot fit the requested number of players."""


class TerrainType(str, Enum):
    """Terrain of a single map cell."""

    DIRT = "Dirt"
    ROCK = "Rock"
    BEDROCK = "Bedrock"
    EMPTY = "Empty"
    GOLD_CLUSTER = "GoldCluster"
    CRYSTAL_CLUSTER = "CrystalCluster"
    IRON_CLUSTER = "IronCluster"

    @property
    def is_resource(self) -> bool:
        return self in RESOURCE_TERRAIN


RESOURCE_TERRAIN = frozenset(
    {TerrainType.GOLD_CLUSTER, TerrainType.CRYSTAL_CLUSTER, TerrainType.IRON_CLUSTER}
)

TerrainGrid = List[List[TerrainType]]


def _require_int(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise MapValidationError(f"{name} must be an integer, got {value!r}")
    return value


@dataclass(frozen=True)
class MapSize:
    """Map dimensions: x is the width, y the height."""

    x: int
    y: int

    def __post_init__(self):
        _require_int("MapSize.x", self.x)
        _require_int("MapSize.y", self.y)
        if self.x <= 0 or self.y <= 0:
            raise MapValidationError("MapSize: width and height must be positive")

    @property
    def width(self) -> int:
        return self.x

    @property
    def height(self) -> int:
        return self.y

    @property
    def area(self) -> int:
        return self.x * self.y

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.x and 0 <= y < self.y

    def to_dict(self) -> Dict[str, int]:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: Any) -> "MapSize":
        if not isinstance(data, dict) or "x" not in data or "y" not in data:
            raise MapValidationError(f"Failed to create MapSize from {data!r}")
        return cls(int(data["x"]), int(data["y"]))


@dataclass(frozen=True)
class SpawnPoint:
    """Starting cell of one player."""

    x: int
    y: int

    def __post_init__(self):
        _require_int("SpawnPoint.x", self.x)
        _require_int("SpawnPoint.y", self.y)
        if self.x < 0 or self.y < 0:
            raise MapValidationError("SpawnPoint: x and y must be non-negative")

    @property
    def position(self) -> Position:
        return Position(self.x, self.y)

    def to_dict(self) -> Dict[str, int]:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: Any) -> "SpawnPoint":
        if not isinstance(data, dict) or "x" not in data or "y" not in data:
            raise MapValidationError(f"Failed to create SpawnPoint from {data!r}")
        return cls(int(data["x"]), int(data["y"]))


__all__ = [
    "MapGenerationError",
    "MapValidationError",
    "MapCapacityError",
    "TerrainType",
    "RESOURCE_TERRAIN",
    "TerrainGrid",
    "MapSize",
    "SpawnPoint",
    "Position",
]
