"""
Game map aggregate and the generation pipeline.

Generation runs in a fixed order:
    spawn points -> base terrain -> zoned resources -> spawn resources
    -> spawn accessibility
Carving the spawn areas last guarantees every spawn sits on open ground no
matter what the earlier stages put there.
"""

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import structlog

from ..config.generation import MapGenerationConfig
from ..utils.random import RandomSource
from .resource_generator import generate_zoned_resource_deposits, place_guaranteed_spawn_resources
from .spawn_generator import calculate_spawn_points, check_player_capacity
from .terrain_generator import ensure_spawn_accessibility, generate_base_terrain
from .types import MapSize, MapValidationError, SpawnPoint, TerrainGrid, TerrainType

logger = structlog.get_logger()


@dataclass
class GenerationResult:
    """Output of one generation run."""

    terrain_data: TerrainGrid
    spawn_points: List[SpawnPoint]
    seed: str


@dataclass
class GameMap:
    size: MapSize
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    terrain_data: TerrainGrid = field(default_factory=list)
    spawn_points: List[SpawnPoint] = field(default_factory=list)
    seed: Optional[str] = None

    @property
    def is_generated(self) -> bool:
        return bool(self.terrain_data)

    def generate_spawn_points(
        self,
        players_count: int,
        config: Optional[MapGenerationConfig] = None,
        rng: Optional[RandomSource] = None,
    ) -> List[SpawnPoint]:
        config = config or MapGenerationConfig()
        check_player_capacity(self.size, players_count)
        self.spawn_points = calculate_spawn_points(self.size, players_count, config.spawns, rng)
        return self.spawn_points

    def generate(
        self,
        players_count: int,
        config: Optional[MapGenerationConfig] = None,
        rng: Optional[RandomSource] = None,
    ) -> None:
        config = config or MapGenerationConfig()
        rng = rng or RandomSource(self.seed)
        self.seed = rng.seed

        self.generate_spawn_points(players_count, config, rng)

        terrain = generate_base_terrain(self.size, config.terrain, rng)
        if config.place_resources:
            generate_zoned_resource_deposits(
                terrain, self.spawn_points, self.size, players_count, config.resources, rng
            )
            place_guaranteed_spawn_resources(
                terrain,
                self.spawn_points,
                config.resources,
                rng,
                clear_radius=config.terrain.spawn_clearance.clear_radius,
            )
        ensure_spawn_accessibility(
            terrain, self.spawn_points, self.size, config.terrain.spawn_clearance
        )

        self.terrain_data = terrain
        self.validate()

    def validate(self) -> None:
        """Check grid shape and spawn placement."""
        if len(self.terrain_data) != self.size.y:
            raise MapValidationError(
                f"Terrain has {len(self.terrain_data)} rows, expected {self.size.y}"
            )
        for y, row in enumerate(self.terrain_data):
            if len(row) != self.size.x:
                raise MapValidationError(f"Row {y} has {len(row)} cells, expected {self.size.x}")
        for spawn in self.spawn_points:
            if not self.size.contains(spawn.x, spawn.y):
                raise MapValidationError(f"Spawn point {spawn} lies outside the map")
        if len(set(self.spawn_points)) != len(self.spawn_points):
            raise MapValidationError("Spawn points must be distinct")

    def get_terrain(self, x: int, y: int) -> Optional[TerrainType]:
        if not self.size.contains(x, y) or not self.is_generated:
            return None
        return self.terrain_data[y][x]

    def dig_terrain(self, x: int, y: int) -> bool:
        """
        Dig out one cell.

        Returns False when the cell is outside the map, Bedrock, or already
        Empty; otherwise the cell becomes Empty.
        """
        terrain = self.get_terrain(x, y)
        if terrain is None or terrain in (TerrainType.BEDROCK, TerrainType.EMPTY):
            return False
        self.terrain_data[y][x] = TerrainType.EMPTY
        return True

    def is_terrain_passable(self, x: int, y: int) -> bool:
        return self.get_terrain(x, y) == TerrainType.EMPTY

    def can_build_at(self, x: int, y: int) -> bool:
        return self.is_terrain_passable(x, y)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": str(self.id),
            "size": self.size.to_dict(),
            "seed": self.seed,
            "terrain_data": [[cell.value for cell in row] for row in self.terrain_data],
            "spawn_points": [spawn.to_dict() for spawn in self.spawn_points],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameMap":
        try:
            terrain = [[TerrainType(cell) for cell in row] for row in data.get("terrain_data") or []]
        except ValueError as e:
            raise MapValidationError(f"Unknown terrain in map data: {e}") from e

        game_map = cls(
            size=MapSize.from_dict(data.get("size")),
            id=uuid.UUID(str(data["id"])) if data.get("id") else uuid.uuid4(),
            terrain_data=terrain,
            spawn_points=[SpawnPoint.from_dict(s) for s in data.get("spawn_points") or []],
            seed=data.get("seed"),
        )
        if game_map.is_generated:
            game_map.validate()
        return game_map


def generate_map(
    size: MapSize,
    players_count: int,
    config: Optional[MapGenerationConfig] = None,
    rng: Optional[RandomSource] = None,
) -> GenerationResult:
    """Run the whole pipeline for one map. Safe to call from a worker process."""
    game_map = GameMap(size=size)
    game_map.generate(players_count, config, rng)

    logger.info(
        "Map terrain generated",
        width=size.x,
        height=size.y,
        players=players_count,
        seed=game_map.seed,
    )
    return GenerationResult(
        terrain_data=game_map.terrain_data,
        spawn_points=game_map.spawn_points,
        seed=game_map.seed,
    )
