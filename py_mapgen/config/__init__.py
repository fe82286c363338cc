"""
Configuration: service settings and map generation parameters.
"""

from .config import Settings, settings
from .generation import (
    BedrockFormationConfig,
    ClusterConfig,
    LinearFormationConfig,
    MapGenerationConfig,
    PlacementConstraints,
    ResourceGenerationConfig,
    SpawnClearanceConfig,
    SpawnConfig,
    SpawnResourceConfig,
    TerrainGenerationConfig,
    TerrainLayerConfig,
)

__all__ = [
    "Settings",
    "settings",
    "BedrockFormationConfig",
    "ClusterConfig",
    "LinearFormationConfig",
    "MapGenerationConfig",
    "PlacementConstraints",
    "ResourceGenerationConfig",
    "SpawnClearanceConfig",
    "SpawnConfig",
    "SpawnResourceConfig",
    "TerrainGenerationConfig",
    "TerrainLayerConfig",
]
