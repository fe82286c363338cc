"""
Tests for resource quotas, zones and deposit placement.
"""

import pytest

from py_mapgen.config.generation import (
    ResourceGenerationConfig,
    SpawnClearanceConfig,
    TerrainGenerationConfig,
)
from py_mapgen.core.grid import create_empty
from py_mapgen.core.resource_generator import (
    ResourceType,
    ZoneType,
    calculate_resource_needs,
    calculate_resource_zones,
    cluster_config_for,
    generate_zoned_resource_deposits,
    place_guaranteed_spawn_resources,
    spawn_keep_out,
)
from py_mapgen.core.spawn_generator import calculate_spawn_points
from py_mapgen.core.terrain_generator import ensure_spawn_accessibility, generate_base_terrain
from py_mapgen.core.types import MapSize, SpawnPoint, TerrainType
from py_mapgen.utils.geometry import euclidean_distance, max_distance_from_center
from py_mapgen.utils.random import RandomSource


class TestResourceNeeds:

    def test_two_player_quota(self):
        needs = calculate_resource_needs(MapSize(100, 100), 2, ResourceGenerationConfig())
        assert needs.total_gold == 250
        assert needs.gold_in_central_zone == 100
        assert needs.gold_in_middle_zone == 150
        assert needs.iron_in_outer_zone == 200
        assert needs.crystals_in_central_zone == 75
        assert needs.guaranteed_per_spawn == {"iron": 1, "gold": 1}

    def test_single_player_uses_base_quota(self):
        one = calculate_resource_needs(MapSize(100, 100), 1, ResourceGenerationConfig())
        two = calculate_resource_needs(MapSize(100, 100), 2, ResourceGenerationConfig())
        assert one == two

    def test_scales_with_players(self):
        config = ResourceGenerationConfig()
        totals = [calculate_resource_needs(MapSize(100, 100), p, config).total_gold for p in range(2, 9)]
        assert totals == sorted(totals)
        assert totals[2] == 422  # floor(250 * 1.3 ** 2)

    def test_scales_with_area(self):
        config = ResourceGenerationConfig()
        small = calculate_resource_needs(MapSize(50, 50), 2, config)
        large = calculate_resource_needs(MapSize(100, 100), 2, config)
        assert large.total_gold > small.total_gold


class TestResourceZones:

    def test_zone_radii(self):
        size = MapSize(100, 100)
        zones = calculate_resource_zones(size, ResourceGenerationConfig())
        d = max_distance_from_center(100, 100)

        assert zones.central.center == (50, 50)
        assert zones.central.min_radius == 0
        assert zones.central.max_radius == pytest.approx(0.4 * d)
        assert zones.middle.min_radius == pytest.approx(0.4 * d)
        assert zones.middle.max_radius == pytest.approx(0.7 * d)
        # Outer zone starts where the central zone ends by default
        assert zones.outer.min_radius == pytest.approx(0.4 * d)
        assert zones.outer.max_radius == pytest.approx(d)

    def test_outer_zone_override(self):
        zones = calculate_resource_zones(
            MapSize(100, 100), ResourceGenerationConfig(outer_zone_min_percent=0.7)
        )
        assert zones.outer.min_radius == pytest.approx(zones.middle.max_radius)

    def test_get_zone(self):
        zones = calculate_resource_zones(MapSize(60, 60), ResourceGenerationConfig())
        assert zones.get_zone(ZoneType.MIDDLE) is zones.middle

    def test_cluster_configs(self):
        config = ResourceGenerationConfig()
        assert cluster_config_for(ResourceType.CRYSTAL, ZoneType.CENTRAL, config).density == 0.95
        assert cluster_config_for(ResourceType.GOLD, ZoneType.CENTRAL, config).max_radius == 7
        assert cluster_config_for(ResourceType.GOLD, ZoneType.MIDDLE, config).max_radius == 5
        assert cluster_config_for(ResourceType.IRON, ZoneType.OUTER, config).density == 0.70


class TestZonedDeposits:

    @pytest.fixture
    def setup(self):
        size = MapSize(80, 80)
        rng = RandomSource("deposits")
        terrain = generate_base_terrain(size, TerrainGenerationConfig(), rng)
        spawns = calculate_spawn_points(size, 2)
        return size, terrain, spawns, rng

    def test_places_all_resource_types(self, setup):
        size, terrain, spawns, rng = setup
        report = generate_zoned_resource_deposits(
            terrain, spawns, size, 2, ResourceGenerationConfig(), rng
        )
        counts = report.counts_by_type()
        assert counts.get("CrystalCluster", 0) > 0
        assert counts.get("GoldCluster", 0) > 0
        assert counts.get("IronCluster", 0) > 0

        cells = {cell for row in terrain for cell in row}
        assert TerrainType.GOLD_CLUSTER in cells

    def test_bedrock_untouched(self, setup):
        size, terrain, spawns, rng = setup
        bedrock = {
            (x, y) for y, row in enumerate(terrain) for x, cell in enumerate(row)
            if cell == TerrainType.BEDROCK
        }
        config = ResourceGenerationConfig()
        generate_zoned_resource_deposits(terrain, spawns, size, 2, config, rng)
        place_guaranteed_spawn_resources(terrain, spawns, config, rng)

        assert all(terrain[y][x] == TerrainType.BEDROCK for x, y in bedrock)

    def test_cluster_centres_respect_constraints(self, setup):
        size, terrain, spawns, rng = setup
        config = ResourceGenerationConfig()
        report = generate_zoned_resource_deposits(terrain, spawns, size, 2, config, rng)

        for cluster in report.clusters:
            for spawn in spawns:
                assert euclidean_distance(cluster.position.x, cluster.position.y, spawn.x, spawn.y) >= 12
            assert 5 <= cluster.position.x < size.x - 5
            assert 5 <= cluster.position.y < size.y - 5

        for i, a in enumerate(report.clusters):
            for b in report.clusters[i + 1:]:
                required = 8 if a.type == b.type else 15
                assert euclidean_distance(a.position.x, a.position.y, b.position.x, b.position.y) >= required

    def test_saturated_zone_stops_early(self):
        size = MapSize(30, 30)
        terrain = create_empty(size, TerrainType.BEDROCK)
        config = ResourceGenerationConfig()
        report = generate_zoned_resource_deposits(terrain, [], size, 2, config, RandomSource("full"))

        assert report.clusters == []
        needs = calculate_resource_needs(size, 2, config)
        expected = (
            needs.crystals_in_central_zone + needs.total_gold + needs.iron_in_outer_zone
        )
        assert report.skipped == expected
        # Each quota gives up after max_consecutive_failures placements
        assert report.total_attempts <= 4 * config.max_consecutive_failures * config.constraints.max_attempts


class TestSpawnResources:

    def test_each_spawn_gets_iron_and_gold(self):
        size = MapSize(60, 60)
        terrain = create_empty(size, TerrainType.DIRT)
        spawns = [SpawnPoint(15, 15), SpawnPoint(45, 45)]
        report = place_guaranteed_spawn_resources(
            terrain, spawns, ResourceGenerationConfig(), RandomSource("near")
        )

        assert report.counts_by_type() == {"IronCluster": 2, "GoldCluster": 2}
        for cluster in report.clusters:
            nearest = min(
                euclidean_distance(cluster.position.x, cluster.position.y, s.x, s.y) for s in spawns
            )
            assert 4 - 1.5 <= nearest <= 8 + 1.5

    def test_deposits_survive_spawn_clearing(self):
        size = MapSize(60, 60)
        clearance = SpawnClearanceConfig()
        config = ResourceGenerationConfig()
        spawns = [SpawnPoint(15, 15), SpawnPoint(45, 45)]
        keep_out = spawn_keep_out(config, clearance.clear_radius)

        for seed in range(20):
            terrain = create_empty(size, TerrainType.DIRT)
            report = place_guaranteed_spawn_resources(
                terrain, spawns, config, RandomSource(str(seed)),
                clear_radius=clearance.clear_radius,
            )
            ensure_spawn_accessibility(terrain, spawns, size, clearance)

            assert report.counts_by_type() == {"IronCluster": 2, "GoldCluster": 2}
            for cluster in report.clusters:
                x, y = cluster.position
                nearest = min(euclidean_distance(x, y, s.x, s.y) for s in spawns)
                assert keep_out < nearest <= 8 + 1.5
                assert terrain[y][x] == cluster.type

    def test_keep_out_disabled_without_clearing(self):
        assert spawn_keep_out(ResourceGenerationConfig(), 0) == 0.0
        assert spawn_keep_out(ResourceGenerationConfig(), 4) == pytest.approx(4 + 2 * 2 ** 0.5)

    def test_no_room_is_skipped(self):
        size = MapSize(20, 20)
        terrain = create_empty(size, TerrainType.BEDROCK)
        report = place_guaranteed_spawn_resources(
            terrain, [SpawnPoint(10, 10)], ResourceGenerationConfig(), RandomSource("none")
        )
        assert report.clusters == []
        assert report.skipped == 2
        assert report.total_attempts == 100
