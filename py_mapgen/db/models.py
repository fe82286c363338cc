"""Database models for generated maps."""

from sqlalchemy import Column, Integer, String, Float, Text, ForeignKey, DateTime, JSON
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.dialects.postgresql import UUID
import uuid
from datetime import datetime

Base = declarative_base()


class Map(Base):
    """A generated map: its terrain grid, spawn points and generation metadata."""

    __tablename__ = "maps"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    session_id = Column(String(100), index=True)  # Game session that requested the map
    name = Column(String(255), nullable=False)
    seed = Column(String(50), nullable=False)
    width = Column(Integer, nullable=False)
    height = Column(Integer, nullable=False)
    players_count = Column(Integer, nullable=False)

    # terrain_data[y][x] holds TerrainType values, spawn_points a list of {x, y}
    terrain_data = Column(JSON, nullable=False)
    spawn_points = Column(JSON, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    generation_time_seconds = Column(Float)

    # Generation parameters
    config_json = Column(JSON)


class GenerationJob(Base):
    """Track map generation jobs for async processing."""

    __tablename__ = "generation_jobs"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    map_id = Column(UUID(as_uuid=True), ForeignKey("maps.id"), nullable=True)

    status = Column(String(20), default="pending")  # pending, running, completed, failed
    progress_percent = Column(Integer, default=0)
    error_message = Column(Text)

    # Request parameters
    session_id = Column(String(100))
    seed = Column(String(50))
    width = Column(Integer)
    height = Column(Integer)
    players_count = Column(Integer)
    map_name = Column(String(255))

    created_at = Column(DateTime, default=datetime.utcnow)
    started_at = Column(DateTime)
    completed_at = Column(DateTime)
