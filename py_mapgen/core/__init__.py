"""
Core map generation functionality.
"""

from .types import (
    MapCapacityError,
    MapGenerationError,
    MapSize,
    MapValidationError,
    SpawnPoint,
    TerrainType,
)
from .game_map import GameMap, GenerationResult, generate_map
from .render import render_ascii, terrain_statistics, to_ascii
from .spawn_generator import calculate_spawn_points, check_player_capacity, max_players_for_size

__all__ = ['MapCapacityError', 'MapGenerationError', 'MapSize', 'MapValidationError',
           'SpawnPoint', 'TerrainType', 'GameMap', 'GenerationResult', 'generate_map',
           'render_ascii', 'terrain_statistics', 'to_ascii',
           'calculate_spawn_points', 'check_player_capacity', 'max_players_for_size']
