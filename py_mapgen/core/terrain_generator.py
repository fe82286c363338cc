"""
Base terrain generation.

Stages, each mutating the same grid in place:
- Dirt base fill
- radial layering: rock grows denser towards the rim, bedrock towards the
  centre
- scattered bedrock blobs
- rock veins over remaining dirt
- spawn accessibility carving (run after everything else has been placed)
"""

import math
from dataclasses import dataclass
from typing import List, Sequence

import structlog

from ..config.generation import (
    BedrockFormationConfig,
    SpawnClearanceConfig,
    TerrainGenerationConfig,
    TerrainLayerConfig,
)
from ..utils.geometry import euclidean_distance
from ..utils.random import RandomSource
from .formations import FormationResult, generate_linear_formations_on_grid
from .grid import create_empty, normalized_distance_field
from .types import MapSize, SpawnPoint, TerrainGrid, TerrainType

logger = structlog.get_logger()

# What the outer spawn ring turns each terrain into. Anything missing is kept.
SPAWN_DOWNGRADE = {
    TerrainType.BEDROCK: TerrainType.ROCK,
    TerrainType.GOLD_CLUSTER: TerrainType.DIRT,
    TerrainType.CRYSTAL_CLUSTER: TerrainType.DIRT,
    TerrainType.IRON_CLUSTER: TerrainType.DIRT,
}


@dataclass
class BedrockFormation:
    center_x: int
    center_y: int
    radius: int


def layer_probability(normalized_distance: float, layer: TerrainLayerConfig) -> float:
    """Probability contributed by one radial layer, capped at 1."""
    distance = 1 - normalized_distance if layer.invert_distance else normalized_distance
    return min(1.0, max(layer.threshold, distance * layer.multiplier))


def radial_probability(distance: float, radius: float, base_strength: float = 0.8) -> float:
    """Linear falloff from base_strength at the centre to 0 at radius."""
    if radius == 0:
        return 0.0
    return max(0.0, 1 - distance / radius) * base_strength


def generate_terrain_layers(
    terrain: TerrainGrid,
    size: MapSize,
    config: TerrainGenerationConfig,
    rng: RandomSource,
) -> None:
    """
    Assign Bedrock, Rock or keep the current cell by radial probability.

    One draw per cell; bedrock is tested first so the two layers partition
    the unit interval.
    """
    field = normalized_distance_field(size)

    for y in range(size.y):
        for x in range(size.x):
            distance = float(field[y, x])
            rock = layer_probability(distance, config.rock_layer)
            bedrock = layer_probability(distance, config.bedrock_layer)

            roll = rng.random()
            if roll < bedrock:
                terrain[y][x] = TerrainType.BEDROCK
            elif roll < bedrock + rock:
                terrain[y][x] = TerrainType.ROCK


def bedrock_formation_count(size: MapSize, config: BedrockFormationConfig) -> int:
    return size.area // config.density_divisor


def random_bedrock_formation(
    size: MapSize, config: BedrockFormationConfig, rng: RandomSource
) -> BedrockFormation:
    center_x = math.floor(rng.random() * size.x)
    center_y = math.floor(rng.random() * size.y)
    radius = config.min_radius + math.floor(rng.random() * (config.max_radius - config.min_radius))
    return BedrockFormation(center_x, center_y, radius)


def apply_bedrock_formation(
    terrain: TerrainGrid,
    size: MapSize,
    formation: BedrockFormation,
    config: BedrockFormationConfig,
    rng: RandomSource,
) -> int:
    """Stamp one bedrock blob; returns the number of cells set."""
    placed = 0
    r = formation.radius
    for dy in range(-r, r + 1):
        for dx in range(-r, r + 1):
            x = formation.center_x + dx
            y = formation.center_y + dy
            if not size.contains(x, y):
                continue
            probability = radial_probability(
                euclidean_distance(0, 0, dx, dy), r, config.base_strength
            )
            if rng.chance(probability):
                terrain[y][x] = TerrainType.BEDROCK
                placed += 1
    return placed


def generate_bedrock_formations(
    terrain: TerrainGrid,
    size: MapSize,
    config: BedrockFormationConfig,
    rng: RandomSource,
) -> List[BedrockFormation]:
    formations = []
    for _ in range(bedrock_formation_count(size, config)):
        formation = random_bedrock_formation(size, config, rng)
        apply_bedrock_formation(terrain, size, formation, config, rng)
        formations.append(formation)
    return formations


def add_rock_variations(
    terrain: TerrainGrid, config: TerrainGenerationConfig, rng: RandomSource
) -> FormationResult:
    """Rock veins; they only ever replace Dirt."""
    return generate_linear_formations_on_grid(
        terrain,
        config.rock_veins,
        TerrainType.ROCK,
        lambda x, y, current, new: current == TerrainType.DIRT,
        rng,
    )


def generate_base_terrain(
    size: MapSize,
    config: TerrainGenerationConfig,
    rng: RandomSource,
) -> TerrainGrid:
    """Build the terrain grid before resources and spawn carving."""
    terrain = create_empty(size, TerrainType.DIRT)

    generate_terrain_layers(terrain, size, config, rng)
    formations = generate_bedrock_formations(terrain, size, config.bedrock_formations, rng)
    veins = add_rock_variations(terrain, config, rng)

    logger.info(
        "Base terrain generated",
        width=size.x,
        height=size.y,
        bedrock_formations=len(formations),
        rock_veins=veins.formations_generated,
        rock_vein_cells=veins.elements_placed,
    )
    return terrain


def clear_spawn_area(
    terrain: TerrainGrid,
    size: MapSize,
    spawn_x: int,
    spawn_y: int,
    config: SpawnClearanceConfig,
) -> None:
    """
    Make one spawn reachable.

    Inside immediate_radius every cell becomes Empty. Between that and
    clear_radius cells are only downgraded: Bedrock to Rock, resources to
    Dirt.
    """
    r = config.clear_radius
    for dy in range(-r, r + 1):
        for dx in range(-r, r + 1):
            x = spawn_x + dx
            y = spawn_y + dy
            if not size.contains(x, y):
                continue

            distance = euclidean_distance(0, 0, dx, dy)
            if distance <= config.immediate_radius:
                terrain[y][x] = TerrainType.EMPTY
            elif distance <= config.clear_radius:
                terrain[y][x] = SPAWN_DOWNGRADE.get(terrain[y][x], terrain[y][x])


def ensure_spawn_accessibility(
    terrain: TerrainGrid,
    spawn_points: Sequence[SpawnPoint],
    size: MapSize,
    config: SpawnClearanceConfig,
) -> None:
    for spawn in spawn_points:
        clear_spawn_area(terrain, size, spawn.x, spawn.y, config)
    logger.info("Spawn areas cleared", spawns=len(spawn_points))
