#!/usr/bin/env python3
"""Initialize the database for py-mapgen."""

import sys

import structlog

from .connection import db

logger = structlog.get_logger()


def main() -> int:
    """Create the connection and all tables; returns the process exit code."""
    try:
        db.initialize()
    except Exception as e:
        logger.error("Database initialization failed", error=str(e))
        return 1

    logger.info("Database initialized")
    return 0


if __name__ == "__main__":
    sys.exit(main())
