"""Database connection utilities."""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
import structlog
from contextlib import contextmanager

from ..config.config import settings
from .models import Base

logger = structlog.get_logger()


class Database:
    """Database connection manager."""

    def __init__(self, url=None):
        self.url = url
        self.engine = None
        self.SessionLocal = None

    def initialize(self):
        """Initialize database connection."""
        url = self.url or settings.database_url
        logger.info("Initializing database connection", host=settings.db_host, name=settings.db_name)

        self.engine = create_engine(url, pool_pre_ping=True, echo=False)

        self.SessionLocal = sessionmaker(
            autocommit=False, autoflush=False, bind=self.engine
        )

        self.create_tables()

        logger.info("Database connection initialized")

    def create_tables(self):
        """Create all tables."""
        try:
            Base.metadata.create_all(bind=self.engine)
            logger.info("Database tables created")

        except Exception as e:
            logger.error("Failed to create tables", error=str(e))
            raise

    @contextmanager
    def get_session(self):
        """Get database session with automatic cleanup."""
        if not self.SessionLocal:
            raise RuntimeError("Database not initialized. Call initialize() first.")

        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


# Global database instance
db = Database()
