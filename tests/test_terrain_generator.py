"""
Tests for base terrain generation and spawn clearing.
"""

import pytest

from py_mapgen.config.generation import (
    BedrockFormationConfig,
    SpawnClearanceConfig,
    TerrainGenerationConfig,
    TerrainLayerConfig,
)
from py_mapgen.core.grid import create_empty
from py_mapgen.core.terrain_generator import (
    BedrockFormation,
    apply_bedrock_formation,
    bedrock_formation_count,
    clear_spawn_area,
    ensure_spawn_accessibility,
    generate_base_terrain,
    generate_terrain_layers,
    layer_probability,
    radial_probability,
    random_bedrock_formation,
)
from py_mapgen.core.types import MapSize, SpawnPoint, TerrainType
from py_mapgen.utils.geometry import euclidean_distance
from py_mapgen.utils.random import RandomSource


class TestProbabilities:

    def test_layer_probability(self):
        rock = TerrainLayerConfig(multiplier=0.4)
        bedrock = TerrainLayerConfig(multiplier=0.15, invert_distance=True)
        assert layer_probability(1.0, rock) == pytest.approx(0.4)
        assert layer_probability(0.0, rock) == 0
        assert layer_probability(0.0, bedrock) == pytest.approx(0.15)
        assert layer_probability(1.0, bedrock) == 0

    def test_layer_probability_threshold_and_cap(self):
        assert layer_probability(0.0, TerrainLayerConfig(multiplier=0.4, threshold=0.2)) == 0.2
        assert layer_probability(1.0, TerrainLayerConfig(multiplier=5)) == 1.0

    def test_radial_probability(self):
        assert radial_probability(0, 4) == pytest.approx(0.8)
        assert radial_probability(2, 4) == pytest.approx(0.4)
        assert radial_probability(5, 4) == 0
        assert radial_probability(1, 0) == 0


class TestLayers:

    def test_all_bedrock_when_forced(self):
        size = MapSize(8, 8)
        terrain = create_empty(size, TerrainType.DIRT)
        config = TerrainGenerationConfig(
            bedrock_layer=TerrainLayerConfig(multiplier=0, threshold=1.0),
        )
        generate_terrain_layers(terrain, size, config, RandomSource("all"))
        assert all(cell == TerrainType.BEDROCK for row in terrain for cell in row)

    def test_rock_grows_towards_rim(self):
        size = MapSize(80, 80)
        terrain = create_empty(size, TerrainType.DIRT)
        generate_terrain_layers(terrain, size, TerrainGenerationConfig(), RandomSource("rim"))

        centre_rock = sum(
            terrain[y][x] == TerrainType.ROCK for y in range(30, 50) for x in range(30, 50)
        )
        rim_rock = sum(
            terrain[y][x] == TerrainType.ROCK
            for y in list(range(0, 10)) + list(range(70, 80))
            for x in list(range(0, 10)) + list(range(70, 80))
        )
        # Same number of cells (400) in both samples
        assert rim_rock > centre_rock


class TestBedrockFormations:

    def test_formation_count(self):
        assert bedrock_formation_count(MapSize(100, 100), BedrockFormationConfig()) == 12
        assert bedrock_formation_count(MapSize(20, 20), BedrockFormationConfig()) == 0

    def test_radius_range(self):
        rng = RandomSource("radius")
        config = BedrockFormationConfig()
        radii = {random_bedrock_formation(MapSize(50, 50), config, rng).radius for _ in range(300)}
        assert radii <= {2, 3, 4, 5}
        assert min(radii) == 2

    def test_apply_stays_within_radius(self):
        size = MapSize(20, 20)
        terrain = create_empty(size, TerrainType.DIRT)
        placed = apply_bedrock_formation(
            terrain, size, BedrockFormation(10, 10, 3), BedrockFormationConfig(), RandomSource("blob")
        )
        cells = [
            (x, y) for y in range(20) for x in range(20) if terrain[y][x] == TerrainType.BEDROCK
        ]
        assert len(cells) == placed
        assert all(euclidean_distance(x, y, 10, 10) < 3 for x, y in cells)

    def test_apply_clips_at_edges(self):
        size = MapSize(5, 5)
        terrain = create_empty(size, TerrainType.DIRT)
        apply_bedrock_formation(
            terrain, size, BedrockFormation(0, 0, 4), BedrockFormationConfig(), RandomSource("edge")
        )
        assert len(terrain) == 5


class TestBaseTerrain:

    def test_shape_and_values(self):
        size = MapSize(40, 30)
        terrain = generate_base_terrain(size, TerrainGenerationConfig(), RandomSource("base"))
        assert len(terrain) == 30
        assert all(len(row) == 40 for row in terrain)
        allowed = {TerrainType.DIRT, TerrainType.ROCK, TerrainType.BEDROCK}
        assert {cell for row in terrain for cell in row} <= allowed

    def test_deterministic(self):
        size = MapSize(40, 40)
        a = generate_base_terrain(size, TerrainGenerationConfig(), RandomSource("det"))
        b = generate_base_terrain(size, TerrainGenerationConfig(), RandomSource("det"))
        assert a == b


class TestSpawnClearance:

    @pytest.fixture
    def terrain(self):
        size = MapSize(15, 15)
        terrain = create_empty(size, TerrainType.BEDROCK)
        terrain[7][11] = TerrainType.GOLD_CLUSTER
        terrain[7][3] = TerrainType.DIRT
        return size, terrain

    def test_clear_spawn_area(self, terrain):
        size, grid = terrain
        clear_spawn_area(grid, size, 7, 7, SpawnClearanceConfig())

        for y in range(15):
            for x in range(15):
                distance = euclidean_distance(x, y, 7, 7)
                if distance <= 2:
                    assert grid[y][x] == TerrainType.EMPTY
                elif distance <= 4 and (x, y) not in ((11, 7), (3, 7)):
                    assert grid[y][x] == TerrainType.ROCK
                elif distance > 4:
                    assert grid[y][x] == TerrainType.BEDROCK

        assert grid[7][11] == TerrainType.DIRT
        assert grid[7][3] == TerrainType.DIRT

    def test_spawn_on_edge(self):
        size = MapSize(6, 6)
        grid = create_empty(size, TerrainType.ROCK)
        ensure_spawn_accessibility(grid, [SpawnPoint(0, 0)], size, SpawnClearanceConfig())
        assert grid[0][0] == TerrainType.EMPTY
        assert grid[2][0] == TerrainType.EMPTY
        assert grid[5][5] == TerrainType.ROCK
