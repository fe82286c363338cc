"""
Resource deposit generation.

Quotas scale with map area and player count. Deposits are grown with the
flood fill engine at positions chosen by the placement engine, inside
concentric zones around the map centre:

    central  [0, 0.4 D)     crystal, rich gold
    middle   [0.4 D, 0.7 D) gold
    outer    [0.4 D, D)     iron

where D is the distance from the centre to the farthest corner. Every spawn
also gets a small iron and gold deposit within reach.
"""

import math
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

import structlog

from ..config.generation import ClusterConfig, ResourceGenerationConfig
from ..utils.geometry import Position, euclidean_distance, map_center, max_distance_from_center
from ..utils.random import RandomSource
from .flood_fill import FloodFillConfig, flood_fill
from .placement import (
    PlacementCallbacks,
    PlacementConfig,
    PlacementObject,
    PlacementZone,
    create_exclusion_zones,
    find_valid_position,
)
from .terrain_grid import TerrainAccessor, TerrainGridAdapter
from .types import MapSize, SpawnPoint, TerrainGrid, TerrainType

logger = structlog.get_logger()


class ResourceType(str, Enum):
    GOLD = "gold"
    IRON = "iron"
    CRYSTAL = "crystal"


class ZoneType(str, Enum):
    CENTRAL = "central"
    MIDDLE = "middle"
    OUTER = "outer"


RESOURCE_TERRAIN = {
    ResourceType.GOLD: TerrainType.GOLD_CLUSTER,
    ResourceType.IRON: TerrainType.IRON_CLUSTER,
    ResourceType.CRYSTAL: TerrainType.CRYSTAL_CLUSTER,
}


@dataclass(frozen=True)
class ResourceNeeds:
    crystals_in_central_zone: int
    gold_in_central_zone: int
    gold_in_middle_zone: int
    iron_in_outer_zone: int
    guaranteed_per_spawn: Dict[str, int] = field(
        default_factory=lambda: {ResourceType.IRON.value: 1, ResourceType.GOLD.value: 1}
    )

    @property
    def total_gold(self) -> int:
        return self.gold_in_central_zone + self.gold_in_middle_zone


@dataclass(frozen=True)
class ResourceZones:
    central: PlacementZone
    middle: PlacementZone
    outer: PlacementZone

    def get_zone(self, zone_type: ZoneType) -> PlacementZone:
        return {
            ZoneType.CENTRAL: self.central,
            ZoneType.MIDDLE: self.middle,
            ZoneType.OUTER: self.outer,
        }[zone_type]


@dataclass
class ResourceCluster:
    position: Position
    type: TerrainType
    radius: int
    cells: int = 0


@dataclass
class ResourcePlacementReport:
    clusters: List[ResourceCluster] = field(default_factory=list)
    total_attempts: int = 0
    skipped: int = 0

    def counts_by_type(self) -> Dict[str, int]:
        return dict(Counter(cluster.type.value for cluster in self.clusters))

    def merge(self, other: "ResourcePlacementReport") -> None:
        self.clusters.extend(other.clusters)
        self.total_attempts += other.total_attempts
        self.skipped += other.skipped


def calculate_resource_needs(
    size: MapSize, players_count: int, config: ResourceGenerationConfig
) -> ResourceNeeds:
    gold_total = math.floor(
        size.area
        * config.base_resource_density
        * config.player_multiplier ** max(0, players_count - 2)
    )
    gold_central = math.floor(gold_total * config.gold_central_ratio)

    return ResourceNeeds(
        crystals_in_central_zone=math.floor(gold_total * config.crystal_ratio),
        gold_in_central_zone=gold_central,
        gold_in_middle_zone=gold_total - gold_central,
        iron_in_outer_zone=math.floor(gold_total * config.iron_ratio),
    )


def calculate_resource_zones(size: MapSize, config: ResourceGenerationConfig) -> ResourceZones:
    center = Position(*map_center(size.x, size.y))
    max_distance = max_distance_from_center(size.x, size.y)

    central_radius = max_distance * config.central_zone_radius_percent
    middle_radius = max_distance * config.middle_zone_radius_percent
    outer_min_percent = config.outer_zone_min_percent
    if outer_min_percent is None:
        outer_min_percent = config.central_zone_radius_percent

    return ResourceZones(
        central=PlacementZone(center, 0, central_radius),
        middle=PlacementZone(center, central_radius, middle_radius),
        outer=PlacementZone(center, max_distance * outer_min_percent, max_distance),
    )


def cluster_config_for(
    resource_type: ResourceType, zone: ZoneType, config: ResourceGenerationConfig
) -> ClusterConfig:
    if resource_type == ResourceType.CRYSTAL:
        return config.crystal_cluster
    if resource_type == ResourceType.GOLD:
        if zone == ZoneType.CENTRAL:
            return config.gold_central_cluster
        return config.gold_middle_cluster
    return config.iron_cluster


def zone_quotas(needs: ResourceNeeds) -> List[tuple]:
    """(resource, zone, count) in placement order: crystal, gold, iron."""
    return [
        (ResourceType.CRYSTAL, ZoneType.CENTRAL, needs.crystals_in_central_zone),
        (ResourceType.GOLD, ZoneType.CENTRAL, needs.gold_in_central_zone),
        (ResourceType.GOLD, ZoneType.MIDDLE, needs.gold_in_middle_zone),
        (ResourceType.IRON, ZoneType.OUTER, needs.iron_in_outer_zone),
    ]


def apply_cluster(
    terrain: TerrainAccessor,
    cluster: ResourceCluster,
    density: float,
    rng: RandomSource,
) -> int:
    """Grow a cluster with flood fill; returns the number of cells written."""
    result = flood_fill(
        cluster.position,
        cluster.type,
        FloodFillConfig(radius=cluster.radius, density=density),
        terrain,
        rng,
    )
    cluster.cells = result.cells_modified
    return result.cells_modified


def place_resource_clusters(
    terrain: TerrainAccessor,
    zone: PlacementZone,
    terrain_type: TerrainType,
    cluster_config: ClusterConfig,
    count: int,
    spawn_positions: Sequence[Position],
    existing: List[ResourceCluster],
    config: ResourceGenerationConfig,
    rng: RandomSource,
) -> ResourcePlacementReport:
    """
    Place up to count clusters of one type inside one zone.

    Each cluster is attempted on its own; a failed placement is skipped.
    After config.max_consecutive_failures misses in a row the zone is
    treated as full and the rest of the quota is dropped.
    """
    report = ResourcePlacementReport()
    constraints = config.constraints
    exclusion_zones = create_exclusion_zones(spawn_positions, constraints.exclusion_radius_from_spawns)
    callbacks = PlacementCallbacks(
        is_in_bounds=terrain.is_in_bounds,
        custom_validation=terrain.can_modify,
    )
    consecutive_failures = 0

    for index in range(count):
        placed_objects = [
            PlacementObject(c.position, c.type.value, c.radius) for c in existing
        ]
        result = find_valid_position(
            PlacementConfig(
                zone=zone,
                object_type=terrain_type.value,
                existing_objects=placed_objects,
                exclusion_zones=exclusion_zones,
                min_distance=constraints.min_distance_from_same_type,
                different_type_distance_multiplier=constraints.other_type_multiplier,
                edge_margin=constraints.edge_margin,
                max_attempts=constraints.max_attempts,
            ),
            callbacks,
            rng,
        )
        report.total_attempts += result.attempts

        if not result.success:
            report.skipped += 1
            consecutive_failures += 1
            if consecutive_failures >= config.max_consecutive_failures:
                report.skipped += count - index - 1
                break
            continue

        consecutive_failures = 0
        radius = rng.randint(cluster_config.min_radius, cluster_config.max_radius)
        cluster = ResourceCluster(result.position, terrain_type, radius)
        apply_cluster(terrain, cluster, cluster_config.density, rng)
        existing.append(cluster)
        report.clusters.append(cluster)

    return report


def generate_zoned_resource_deposits(
    terrain_data: TerrainGrid,
    spawn_points: Sequence[SpawnPoint],
    size: MapSize,
    players_count: int,
    config: ResourceGenerationConfig,
    rng: RandomSource,
) -> ResourcePlacementReport:
    needs = calculate_resource_needs(size, players_count, config)
    zones = calculate_resource_zones(size, config)
    terrain = TerrainGridAdapter(terrain_data)
    spawn_positions = [spawn.position for spawn in spawn_points]

    placed: List[ResourceCluster] = []
    report = ResourcePlacementReport()

    for resource_type, zone_type, count in zone_quotas(needs):
        if count <= 0:
            continue
        zone_report = place_resource_clusters(
            terrain,
            zones.get_zone(zone_type),
            RESOURCE_TERRAIN[resource_type],
            cluster_config_for(resource_type, zone_type, config),
            count,
            spawn_positions,
            placed,
            config,
            rng,
        )
        if zone_report.skipped:
            logger.warning(
                "Resource quota not fully placed",
                resource=resource_type.value,
                zone=zone_type.value,
                requested=count,
                placed=len(zone_report.clusters),
            )
        report.merge(zone_report)

    logger.info(
        "Zoned resources generated",
        players=players_count,
        clusters=report.counts_by_type(),
        attempts=report.total_attempts,
        skipped=report.skipped,
    )
    return report


def place_resource_near(
    terrain: TerrainAccessor,
    origin: Position,
    terrain_type: TerrainType,
    config: ResourceGenerationConfig,
    rng: RandomSource,
    base_angle: Optional[float] = None,
    keep_out: float = 0.0,
) -> Tuple[ResourcePlacementReport, Optional[float]]:
    """
    One small deposit at [min_distance, max_distance] from origin.

    Without base_angle every attempt picks a fresh direction; with it the
    direction stays within angle_jitter of base_angle. Targets no farther
    than keep_out from origin are rejected and the distance band is pushed
    out past it. Returns the report and the angle the deposit was placed at
    (None when it was not).
    """
    spawn_config = config.spawn_resources
    min_distance = max(spawn_config.min_distance, keep_out)
    max_distance = max(spawn_config.max_distance, min_distance + 1)
    report = ResourcePlacementReport()

    for attempt in range(spawn_config.max_attempts):
        if base_angle is None:
            angle = rng.angle()
        else:
            angle = base_angle + rng.uniform(-spawn_config.angle_jitter, spawn_config.angle_jitter)
        distance = rng.uniform(min_distance, max_distance)
        target = Position(
            math.floor(origin.x + math.cos(angle) * distance),
            math.floor(origin.y + math.sin(angle) * distance),
        )
        if euclidean_distance(target.x, target.y, origin.x, origin.y) <= keep_out:
            continue
        if not (terrain.is_in_bounds(target) and terrain.can_modify(target)):
            continue

        cluster_config = spawn_config.cluster
        radius = rng.randint(cluster_config.min_radius, cluster_config.max_radius)
        cluster = ResourceCluster(target, terrain_type, radius)
        apply_cluster(terrain, cluster, cluster_config.density, rng)
        report.clusters.append(cluster)
        report.total_attempts = attempt + 1
        return report, angle

    report.total_attempts = spawn_config.max_attempts
    report.skipped = 1
    return report, None


def spawn_keep_out(config: ResourceGenerationConfig, clear_radius: float) -> float:
    """
    Closest a spawn deposit centre may sit to its spawn.

    A cluster of radius r reaches r BFS steps, up to r * sqrt(2) cells
    diagonally, so centres beyond clear_radius plus that reach are never
    touched by spawn clearing.
    """
    if clear_radius <= 0:
        return 0.0
    return clear_radius + config.spawn_resources.cluster.max_radius * math.sqrt(2)


def place_guaranteed_spawn_resources(
    terrain_data: TerrainGrid,
    spawn_points: Sequence[SpawnPoint],
    config: ResourceGenerationConfig,
    rng: RandomSource,
    clear_radius: float = 0,
) -> ResourcePlacementReport:
    """
    Give every spawn one iron and one gold deposit close by.

    Gold is aimed roughly opposite the iron so the two do not overlap.
    Deposits stay clear of the clear_radius area that spawn clearing later
    resets, so they survive it.
    """
    terrain = TerrainGridAdapter(terrain_data)
    report = ResourcePlacementReport()
    keep_out = spawn_keep_out(config, clear_radius)

    for spawn in spawn_points:
        iron_report, iron_angle = place_resource_near(
            terrain, spawn.position, TerrainType.IRON_CLUSTER, config, rng, keep_out=keep_out
        )
        if iron_angle is None:
            iron_angle = rng.angle()
        gold_report, _ = place_resource_near(
            terrain, spawn.position, TerrainType.GOLD_CLUSTER, config, rng,
            base_angle=iron_angle + math.pi, keep_out=keep_out,
        )
        report.merge(iron_report)
        report.merge(gold_report)

    logger.info(
        "Spawn resources placed",
        spawns=len(spawn_points),
        clusters=report.counts_by_type(),
        skipped=report.skipped,
    )
    return report
