"""
Terrain API endpoints.

Read and dig the terrain grid of a stored map.
"""

from fastapi import APIRouter, HTTPException
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field
from typing import Dict, List, Optional
import structlog

from ..core.game_map import GameMap
from ..core.render import render_ascii
from ..db.connection import db
from ..db.queries import MapQueries

logger = structlog.get_logger()

router = APIRouter(prefix="/maps/{map_id}", tags=["terrain"])


class DigRequest(BaseModel):
    """Cell to dig out."""

    x: int = Field(ge=0, description="Cell column")
    y: int = Field(ge=0, description="Cell row")


class DigResponse(BaseModel):
    success: bool = Field(description="Whether the cell was dug out")
    message: str = Field(description="Human-readable message")
    terrain: Optional[str] = Field(default=None, description="Terrain at the cell after the dig")


class CellInfo(BaseModel):
    x: int
    y: int
    terrain: str
    passable: bool
    buildable: bool


class TerrainCount(BaseModel):
    count: int
    percentage: float


class TerrainStatistics(BaseModel):
    map_id: str
    width: int
    height: int
    total_cells: int
    spawn_points: List[Dict[str, int]]
    terrain: Dict[str, TerrainCount]


def load_map_or_404(queries: MapQueries, map_id: str) -> GameMap:
    """Load the map aggregate or raise 404 if not found."""
    game_map = queries.load_game_map(map_id)
    if game_map is None:
        raise HTTPException(status_code=404, detail="Map not found")
    return game_map


@router.get("/ascii", response_class=PlainTextResponse)
async def get_map_ascii(map_id: str):
    """Terrain as text, one line per row."""
    with db.get_session() as session:
        game_map = load_map_or_404(MapQueries(session), map_id)
        return "\n".join(render_ascii(game_map.terrain_data))


@router.get("/statistics", response_model=TerrainStatistics)
async def get_terrain_statistics(map_id: str):
    """Cell counts per terrain type."""
    with db.get_session() as session:
        summary = MapQueries(session).terrain_summary(map_id)
        if summary is None:
            raise HTTPException(status_code=404, detail="Map not found")
        return TerrainStatistics(**summary)


@router.get("/cells/{x}/{y}", response_model=CellInfo)
async def get_cell(map_id: str, x: int, y: int):
    with db.get_session() as session:
        game_map = load_map_or_404(MapQueries(session), map_id)

    terrain = game_map.get_terrain(x, y)
    if terrain is None:
        raise HTTPException(status_code=400, detail="Cell outside the map")

    return CellInfo(
        x=x,
        y=y,
        terrain=terrain.value,
        passable=game_map.is_terrain_passable(x, y),
        buildable=game_map.can_build_at(x, y),
    )


@router.post("/dig", response_model=DigResponse)
async def dig_cell(map_id: str, request: DigRequest):
    """
    Dig out one cell.

    Bedrock, open ground and cells outside the map cannot be dug; those
    requests succeed with success=False and leave the map untouched.
    """
    logger.info("Dig requested", map_id=map_id, x=request.x, y=request.y)

    with db.get_session() as session:
        queries = MapQueries(session)
        game_map = load_map_or_404(queries, map_id)

        dug = game_map.dig_terrain(request.x, request.y)
        if dug:
            queries.update_terrain(game_map)

    terrain = game_map.get_terrain(request.x, request.y)
    return DigResponse(
        success=dug,
        message="Cell dug out" if dug else "Cell cannot be dug",
        terrain=terrain.value if terrain else None,
    )
