"""HTTP API for map generation and terrain access."""
