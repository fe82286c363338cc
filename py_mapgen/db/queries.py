"""
Map persistence queries.

Terrain grids are stored as JSON: a list of rows of terrain names, so a row
read back from the database converts straight into a GameMap.
"""

from __future__ import annotations

import uuid
from typing import Any, Dict, List, Optional

import structlog
from sqlalchemy.orm import Session

from ..core.game_map import GameMap, GenerationResult
from ..core.render import terrain_statistics
from ..core.types import MapSize
from .models import Map

logger = structlog.get_logger()


def _as_uuid(map_id) -> Optional[uuid.UUID]:
    if isinstance(map_id, uuid.UUID):
        return map_id
    try:
        return uuid.UUID(str(map_id))
    except ValueError:
        return None


class MapQueries:
    """Read and write generated maps."""

    def __init__(self, session: Session):
        """Initialize with database session."""
        self.session = session

    def get_map_by_id(self, map_id) -> Optional[Map]:
        """Get map record by ID. Malformed IDs simply match nothing."""
        key = _as_uuid(map_id)
        if key is None:
            return None
        return self.session.query(Map).filter(Map.id == key).first()

    def list_maps(self, limit: int = 50, session_id: Optional[str] = None) -> List[Map]:
        """List maps, newest first, optionally for one game session."""
        query = self.session.query(Map)
        if session_id is not None:
            query = query.filter(Map.session_id == session_id)
        return query.order_by(Map.created_at.desc()).limit(limit).all()

    def save_generated_map(
        self,
        result: GenerationResult,
        size: MapSize,
        players_count: int,
        session_id: Optional[str] = None,
        name: Optional[str] = None,
        config: Optional[Dict[str, Any]] = None,
        generation_time_seconds: Optional[float] = None,
    ) -> Map:
        """Insert a map row for a finished generation and flush to get its ID."""
        map_obj = Map(
            session_id=session_id,
            name=name or f"Map {result.seed}",
            seed=result.seed,
            width=size.x,
            height=size.y,
            players_count=players_count,
            terrain_data=[[cell.value for cell in row] for row in result.terrain_data],
            spawn_points=[spawn.to_dict() for spawn in result.spawn_points],
            config_json=config,
            generation_time_seconds=generation_time_seconds,
        )
        self.session.add(map_obj)
        self.session.flush()

        logger.info("Map saved", map_id=str(map_obj.id), session_id=session_id)
        return map_obj

    def load_game_map(self, map_id) -> Optional[GameMap]:
        """Rebuild the GameMap aggregate for a stored map."""
        map_obj = self.get_map_by_id(map_id)
        if map_obj is None:
            return None
        return GameMap.from_dict(
            {
                "id": str(map_obj.id),
                "size": {"x": map_obj.width, "y": map_obj.height},
                "seed": map_obj.seed,
                "terrain_data": map_obj.terrain_data,
                "spawn_points": map_obj.spawn_points,
            }
        )

    def update_terrain(self, game_map: GameMap) -> bool:
        """Write a modified terrain grid back. Returns False if the map is gone."""
        map_obj = self.get_map_by_id(game_map.id)
        if map_obj is None:
            return False
        # JSON columns only notice reassignment
        map_obj.terrain_data = game_map.to_dict()["terrain_data"]
        self.session.flush()
        return True

    def terrain_summary(self, map_id) -> Optional[Dict[str, Any]]:
        """Terrain counts per type plus basic map metadata."""
        game_map = self.load_game_map(map_id)
        if game_map is None:
            return None
        return {
            "map_id": str(game_map.id),
            "width": game_map.size.x,
            "height": game_map.size.y,
            "total_cells": game_map.size.area,
            "spawn_points": [spawn.to_dict() for spawn in game_map.spawn_points],
            "terrain": terrain_statistics(game_map.terrain_data),
        }


def create_query_helper(session: Session) -> MapQueries:
    """Create a map query helper instance."""
    return MapQueries(session)
