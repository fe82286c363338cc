"""
Shared utilities: seeded randomness, geometry and noise helpers.
"""

from .random import RandomSource, new_seed

__all__ = ["RandomSource", "new_seed"]
