"""FastAPI main application."""

from fastapi import FastAPI, BackgroundTasks, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
from concurrent.futures import Executor, ProcessPoolExecutor, TimeoutError as FutureTimeoutError
from sqlalchemy import text
import logging
import structlog
import time
import uuid
from datetime import datetime

from ..config import settings
from ..config.generation import MapGenerationConfig
from ..core.game_map import GenerationResult, generate_map
from ..core.spawn_generator import check_player_capacity
from ..core.types import MapGenerationError, MapSize
from ..db.connection import db
from ..db.models import GenerationJob, Map
from ..db.queries import MapQueries
from ..utils.random import RandomSource, new_seed
from .terrain import router as terrain_router

# Configure logging
logging.basicConfig(format="%(message)s", level=settings.log_level.upper())

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer()
        if settings.log_format == "json"
        else structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()

# Initialize FastAPI app
app = FastAPI(
    title="Map Generator API",
    description="Procedural tile map generation for real-time strategy sessions",
    version="0.1.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in settings.allowed_origins.split(",")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(terrain_router)


# Request/Response models
class MapSizeModel(BaseModel):
    x: int = Field(description="Map width in cells")
    y: int = Field(description="Map height in cells")


class MapGenerationRequest(BaseModel):
    """Request to generate a new map."""

    size: MapSizeModel
    players_count: int = Field(2, ge=1, description="Number of players")
    session_id: Optional[str] = Field(None, description="Game session the map belongs to")
    seed: Optional[str] = Field(None, description="Random seed for reproducible generation")
    map_name: Optional[str] = Field(None, description="Custom map name")
    config: Optional[Dict[str, Any]] = Field(None, description="Generation parameter overrides")


class JobResponse(BaseModel):
    """Response with job information."""

    job_id: str
    status: str
    progress_percent: int
    message: str
    map_id: Optional[str] = None
    error_message: Optional[str] = None


class MapSummary(BaseModel):
    """Summary information about a generated map."""

    id: str
    session_id: Optional[str]
    name: str
    seed: str
    width: int
    height: int
    players_count: int
    created_at: datetime
    generation_time_seconds: Optional[float]


class MapDetail(MapSummary):
    """A map with its full terrain grid and spawn points."""

    terrain_data: List[List[str]]
    spawn_points: List[Dict[str, int]]


def _summary_fields(map_obj: Map) -> Dict[str, Any]:
    return dict(
        id=str(map_obj.id),
        session_id=map_obj.session_id,
        name=map_obj.name,
        seed=map_obj.seed,
        width=map_obj.width,
        height=map_obj.height,
        players_count=map_obj.players_count,
        created_at=map_obj.created_at,
        generation_time_seconds=map_obj.generation_time_seconds,
    )


def validate_generation_request(request: MapGenerationRequest) -> MapGenerationConfig:
    """
    Check size and player bounds and build the generation config.

    Raises HTTPException 422 for anything the generator would reject.
    """
    x, y = request.size.x, request.size.y
    if not (settings.min_map_size <= x <= settings.max_map_width):
        raise HTTPException(
            status_code=422,
            detail=f"Map width must be between {settings.min_map_size} and {settings.max_map_width}",
        )
    if not (settings.min_map_size <= y <= settings.max_map_height):
        raise HTTPException(
            status_code=422,
            detail=f"Map height must be between {settings.min_map_size} and {settings.max_map_height}",
        )
    if request.players_count > settings.max_players:
        raise HTTPException(
            status_code=422, detail=f"At most {settings.max_players} players are supported"
        )

    try:
        check_player_capacity(MapSize(x, y), request.players_count)
        return MapGenerationConfig.from_dict(request.config)
    except (MapGenerationError, ValueError) as e:
        raise HTTPException(status_code=422, detail=str(e))


# Event handlers
@app.on_event("startup")
async def startup_event():
    """Initialize database on startup."""
    logger.info("Starting Map Generator API")
    db.initialize()
    logger.info("API startup complete")


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown."""
    logger.info("Shutting down Map Generator API")
    global _executor
    if _executor is not None:
        _executor.shutdown(wait=False)
        _executor = None


# API endpoints
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Map Generator API",
        "version": "0.1.0",
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    try:
        with db.get_session() as session:
            session.execute(text("SELECT 1"))

        return {"status": "healthy", "database": "connected"}
    except Exception as e:
        logger.error("Health check failed", error=str(e))
        raise HTTPException(status_code=503, detail="Service unhealthy")


@app.post("/maps/generate", response_model=JobResponse)
async def create_generation_job(request: MapGenerationRequest, background_tasks: BackgroundTasks):
    """
    Start map generation job.

    Returns immediately with job ID. Use /jobs/{job_id} to check status.
    """
    logger.info("Map generation requested", request=request.model_dump())

    config = validate_generation_request(request)

    job_id = uuid.uuid4()
    seed = request.seed or new_seed()

    with db.get_session() as session:
        job = GenerationJob(
            id=job_id,
            session_id=request.session_id,
            seed=seed,
            width=request.size.x,
            height=request.size.y,
            players_count=request.players_count,
            map_name=request.map_name,
            status="pending"
        )
        session.add(job)
        session.commit()

    background_tasks.add_task(
        run_map_generation,
        str(job_id),
        request.size.x,
        request.size.y,
        request.players_count,
        seed,
        config.to_dict(),
    )

    return JobResponse(
        job_id=str(job_id),
        status="pending",
        progress_percent=0,
        message="Map generation job started"
    )


@app.get("/jobs/{job_id}", response_model=JobResponse)
async def get_job_status(job_id: str):
    """Get status of a map generation job."""
    try:
        key = uuid.UUID(job_id)
    except ValueError:
        raise HTTPException(status_code=404, detail="Job not found")

    with db.get_session() as session:
        job = session.query(GenerationJob).filter(GenerationJob.id == key).first()

        if not job:
            raise HTTPException(status_code=404, detail="Job not found")

        return JobResponse(
            job_id=str(job.id),
            status=job.status,
            progress_percent=job.progress_percent,
            message=f"Job {job.status}",
            map_id=str(job.map_id) if job.map_id else None,
            error_message=job.error_message
        )


@app.get("/maps", response_model=List[MapSummary])
async def list_maps(session_id: Optional[str] = None, limit: int = 50):
    """List generated maps, newest first."""
    with db.get_session() as session:
        maps = MapQueries(session).list_maps(limit=limit, session_id=session_id)
        return [MapSummary(**_summary_fields(map_obj)) for map_obj in maps]


@app.get("/maps/{map_id}", response_model=MapDetail)
async def get_map(map_id: str):
    """Get a map with its terrain and spawn points."""
    with db.get_session() as session:
        map_obj = MapQueries(session).get_map_by_id(map_id)

        if not map_obj:
            raise HTTPException(status_code=404, detail="Map not found")

        return MapDetail(
            **_summary_fields(map_obj),
            terrain_data=map_obj.terrain_data,
            spawn_points=map_obj.spawn_points,
        )


# Generation runs in worker processes so it never blocks the event loop
_executor: Optional[Executor] = None


def get_executor() -> Executor:
    global _executor
    if _executor is None:
        _executor = ProcessPoolExecutor(max_workers=settings.max_concurrent_jobs)
    return _executor


def generate_in_worker(
    width: int, height: int, players_count: int, seed: str, config_data: Dict[str, Any]
) -> GenerationResult:
    """Worker entry point; takes only picklable arguments."""
    return generate_map(
        MapSize(width, height),
        players_count,
        MapGenerationConfig.from_dict(config_data),
        RandomSource(seed),
    )


def _update_job(job_id: uuid.UUID, **values) -> None:
    with db.get_session() as session:
        job = session.query(GenerationJob).filter(GenerationJob.id == job_id).first()
        for key, value in values.items():
            setattr(job, key, value)
        session.commit()


# Background task functions
def run_map_generation(
    job_id: str,
    width: int,
    height: int,
    players_count: int,
    seed: str,
    config_data: Dict[str, Any],
):
    """
    Background task to generate and store a map.
    """
    logger.info("Starting map generation", job_id=job_id, seed=seed)
    key = uuid.UUID(job_id)

    try:
        _update_job(key, status="running", started_at=datetime.utcnow(), progress_percent=10)

        start = time.perf_counter()
        future = get_executor().submit(
            generate_in_worker, width, height, players_count, seed, config_data
        )
        try:
            result = future.result(timeout=settings.generation_timeout)
        except FutureTimeoutError:
            future.cancel()
            raise MapGenerationError(
                f"Generation timed out after {settings.generation_timeout} seconds"
            )
        elapsed = time.perf_counter() - start

        _update_job(key, progress_percent=90)

        logger.info("Saving map", job_id=job_id)
        with db.get_session() as session:
            job = session.query(GenerationJob).filter(GenerationJob.id == key).first()
            map_obj = MapQueries(session).save_generated_map(
                result,
                MapSize(width, height),
                players_count,
                session_id=job.session_id,
                name=job.map_name,
                config=config_data,
                generation_time_seconds=elapsed,
            )
            map_id = map_obj.id
            job.map_id = map_obj.id
            job.status = "completed"
            job.progress_percent = 100
            job.completed_at = datetime.utcnow()
            session_id = job.session_id
            session.commit()

        logger.info(
            "Map generated",
            job_id=job_id,
            map_id=str(map_id),
            session_id=session_id,
            seconds=round(elapsed, 3),
        )

    except Exception as e:
        logger.error("Map generation failed", job_id=job_id, error=str(e))
        _update_job(
            key, status="failed", error_message=str(e), completed_at=datetime.utcnow()
        )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
