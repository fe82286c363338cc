"""
Database utilities and models.

This package provides:
- SQLAlchemy models for maps and generation jobs
- Database connection management
- Map persistence queries
"""

from .connection import Database, db
from .queries import MapQueries, create_query_helper
from .models import Base, Map, GenerationJob

__all__ = [
    # Connection management
    'Database', 'db',

    # Query functionality
    'MapQueries', 'create_query_helper',

    # Models
    'Base', 'Map', 'GenerationJob'
]
