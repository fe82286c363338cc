"""
py-mapgen: procedural map generation for a multiplayer strategy game.

Builds a terrain grid, geological formations, zoned resource deposits and
fair spawn points, and serves them through a small FastAPI service.
"""

__version__ = "0.1.0"
