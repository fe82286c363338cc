"""
Map generation parameters.

Plain dataclasses with the tuned defaults; the generators hold no state of
their own and read everything they need from these.
"""

from dataclasses import asdict, dataclass, field, fields, is_dataclass
from typing import Any, Dict, Optional


@dataclass
class LinearFormationConfig:
    """
    Parameters of a family of linear formations (veins).

    density is in formations per 1000 cells.
    """

    density: float = 2.5
    min_length: int = 5
    max_length: int = 15
    min_thickness: int = 1
    max_thickness: int = 3
    noise_amount: float = 1.0
    placement_probability: float = 0.7


@dataclass
class TerrainLayerConfig:
    """One radial probability layer."""

    multiplier: float
    invert_distance: bool = False
    threshold: float = 0.0


@dataclass
class BedrockFormationConfig:
    density_divisor: int = 800  # one formation per this many cells
    min_radius: int = 2
    max_radius: int = 6
    base_strength: float = 0.8


@dataclass
class SpawnClearanceConfig:
    immediate_radius: float = 2
    clear_radius: int = 4


@dataclass
class TerrainGenerationConfig:
    rock_layer: TerrainLayerConfig = field(
        default_factory=lambda: TerrainLayerConfig(multiplier=0.4, invert_distance=False)
    )
    bedrock_layer: TerrainLayerConfig = field(
        default_factory=lambda: TerrainLayerConfig(multiplier=0.15, invert_distance=True)
    )
    bedrock_formations: BedrockFormationConfig = field(default_factory=BedrockFormationConfig)
    rock_veins: LinearFormationConfig = field(default_factory=LinearFormationConfig)
    spawn_clearance: SpawnClearanceConfig = field(default_factory=SpawnClearanceConfig)


@dataclass
class ClusterConfig:
    """Radius range (inclusive) and fill density of a resource cluster."""

    min_radius: int
    max_radius: int
    density: float


@dataclass
class PlacementConstraints:
    min_distance_from_same_type: float = 8
    min_distance_from_other_types: float = 15
    exclusion_radius_from_spawns: float = 12
    edge_margin: int = 5
    max_attempts: int = 200

    @property
    def other_type_multiplier(self) -> float:
        return self.min_distance_from_other_types / self.min_distance_from_same_type


@dataclass
class SpawnResourceConfig:
    """Small deposits guaranteed next to every spawn."""

    min_distance: float = 4
    max_distance: float = 8
    cluster: ClusterConfig = field(
        default_factory=lambda: ClusterConfig(min_radius=2, max_radius=2, density=0.8)
    )
    max_attempts: int = 50
    angle_jitter: float = 0.7853981633974483  # pi / 4


@dataclass
class ResourceGenerationConfig:
    base_resource_density: float = 0.025
    player_multiplier: float = 1.3
    iron_ratio: float = 0.8
    crystal_ratio: float = 0.3
    gold_central_ratio: float = 0.4
    central_zone_radius_percent: float = 0.4
    middle_zone_radius_percent: float = 0.7
    # Inner edge of the outer zone. Defaults to the central radius, so the
    # outer zone also covers the middle ring.
    outer_zone_min_percent: Optional[float] = None
    # Consecutive failed placements after which a zone counts as full.
    max_consecutive_failures: int = 5

    constraints: PlacementConstraints = field(default_factory=PlacementConstraints)
    crystal_cluster: ClusterConfig = field(
        default_factory=lambda: ClusterConfig(min_radius=3, max_radius=6, density=0.95)
    )
    gold_central_cluster: ClusterConfig = field(
        default_factory=lambda: ClusterConfig(min_radius=4, max_radius=7, density=0.85)
    )
    gold_middle_cluster: ClusterConfig = field(
        default_factory=lambda: ClusterConfig(min_radius=2, max_radius=5, density=0.75)
    )
    iron_cluster: ClusterConfig = field(
        default_factory=lambda: ClusterConfig(min_radius=3, max_radius=7, density=0.70)
    )
    spawn_resources: SpawnResourceConfig = field(default_factory=SpawnResourceConfig)


@dataclass
class SpawnConfig:
    strategy: str = "corners"  # corners | ring
    margin: int = 10
    ring_radius_percent: float = 0.7
    ring_jitter: int = 2


@dataclass
class MapGenerationConfig:
    terrain: TerrainGenerationConfig = field(default_factory=TerrainGenerationConfig)
    resources: ResourceGenerationConfig = field(default_factory=ResourceGenerationConfig)
    spawns: SpawnConfig = field(default_factory=SpawnConfig)
    place_resources: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "MapGenerationConfig":
        """Build a config from a (possibly partial) nested dict of overrides."""
        config = cls()
        if data:
            _apply_overrides(config, data)
        return config


def _apply_overrides(target: Any, overrides: Dict[str, Any]) -> None:
    known = {f.name for f in fields(target)}
    for key, value in overrides.items():
        if key not in known:
            raise ValueError(f"Unknown generation option: {key}")
        current = getattr(target, key)
        if is_dataclass(current):
            if not isinstance(value, dict):
                raise ValueError(f"Generation option {key} expects a mapping, got {value!r}")
            _apply_overrides(current, value)
        else:
            setattr(target, key, value)
