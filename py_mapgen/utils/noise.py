"""
Noise functions for grid synthesis.

PerlinNoise builds its permutation table from a RandomSource, so noise
fields are reproducible from the same seed as the rest of the map.
"""

import math
from typing import List

from .geometry import lerp
from .random import RandomSource


def random_in_range(rng: RandomSource, low: float, high: float) -> float:
    """Float in [low, high)."""
    return rng.uniform(low, high)


def random_int_in_range(rng: RandomSource, low: int, high: int) -> int:
    """Integer in [low, high), floored like the float variant."""
    return int(math.floor(rng.uniform(low, high)))


def white_noise(rng: RandomSource) -> float:
    """Value in [-1, 1)."""
    return rng.random() * 2 - 1


def value_noise(x: float, y: float, scale: float = 1.0) -> float:
    """
    Stateless hash noise in [0, 1).

    Cheap and deterministic; has no gradient continuity.
    """
    n = math.sin(x * scale * 12.9898 + y * scale * 78.233) * 43758.5453
    return n - math.floor(n)


def _fade(t: float) -> float:
    return t * t * t * (t * (t * 6 - 15) + 10)


def _grad(hash_value: int, x: float, y: float) -> float:
    h = hash_value & 15
    u = x if h < 8 else y
    if h < 4:
        v = y
    elif h in (12, 14):
        v = x
    else:
        v = 0.0
    return (u if h & 1 == 0 else -u) + (v if h & 2 == 0 else -v)


class PerlinNoise:
    """2D gradient noise with values roughly in [-1, 1]."""

    def __init__(self, rng: RandomSource):
        table: List[int] = list(range(256))
        rng.shuffle(table)
        self.permutation = table + table

    def noise(self, x: float, y: float) -> float:
        p = self.permutation
        xi = math.floor(x) & 255
        yi = math.floor(y) & 255
        xf = x - math.floor(x)
        yf = y - math.floor(y)

        u = _fade(xf)
        v = _fade(yf)

        a = p[xi] + yi
        b = p[xi + 1] + yi
        aa, ab = p[a], p[a + 1]
        ba, bb = p[b], p[b + 1]

        return lerp(
            lerp(_grad(p[aa], xf, yf), _grad(p[ba], xf - 1, yf), u),
            lerp(_grad(p[ab], xf, yf - 1), _grad(p[bb], xf - 1, yf - 1), u),
            v,
        )

    def octave(
        self,
        x: float,
        y: float,
        octaves: int = 4,
        persistence: float = 0.5,
        scale: float = 0.05,
    ) -> float:
        """Fractal sum of several octaves, normalised by total amplitude."""
        total = 0.0
        amplitude = 1.0
        frequency = scale
        max_value = 0.0

        for _ in range(octaves):
            total += self.noise(x * frequency, y * frequency) * amplitude
            max_value += amplitude
            amplitude *= persistence
            frequency *= 2

        return total / max_value if max_value else 0.0
