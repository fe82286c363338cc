"""
Tests for geometry and noise helpers.
"""

import math

import pytest

from py_mapgen.utils.geometry import (
    DIRECTIONS_4,
    DIRECTIONS_8,
    Position,
    chebyshev_distance,
    clamp,
    euclidean_distance,
    find_farthest,
    find_nearest,
    line_points,
    manhattan_distance,
    map_center,
    max_distance_from_center,
    neighbors,
    normalized_distance,
    polar_to_cartesian,
    valid_neighbors,
)
from py_mapgen.utils.noise import PerlinNoise, random_int_in_range, value_noise, white_noise
from py_mapgen.utils.random import RandomSource


class TestDistances:

    def test_euclidean(self):
        assert euclidean_distance(0, 0, 3, 4) == 5

    def test_manhattan_and_chebyshev(self):
        assert manhattan_distance((0, 0), (3, -4)) == 7
        assert chebyshev_distance((0, 0), (3, -4)) == 4

    def test_normalized_distance(self):
        assert normalized_distance(5, 10) == 0.5
        assert normalized_distance(20, 10) == 1.0
        assert normalized_distance(3, 0) == 0.0


class TestMapGeometry:

    def test_map_center_floors(self):
        assert map_center(10, 10) == Position(5, 5)
        assert map_center(7, 4) == Position(3, 2)

    def test_max_distance_reaches_farthest_corner(self):
        # Centre (5, 5); corner (0, 0) is the farthest
        assert max_distance_from_center(10, 10) == pytest.approx(math.hypot(5, 5))

    def test_polar_to_cartesian(self):
        assert polar_to_cartesian(10, 10, 5, 0) == Position(15, 10)


class TestNeighbours:

    def test_direction_sets(self):
        assert len(DIRECTIONS_4) == 4
        assert len(DIRECTIONS_8) == 8
        assert set(DIRECTIONS_4) < set(DIRECTIONS_8)

    def test_neighbors(self):
        assert set(neighbors(1, 1, DIRECTIONS_4)) == {(0, 1), (2, 1), (1, 0), (1, 2)}

    def test_valid_neighbors_at_corner(self):
        assert set(valid_neighbors(0, 0, 5, 5)) == {(1, 0), (0, 1), (1, 1)}


class TestLines:

    def test_horizontal_line(self):
        assert line_points((0, 0), (3, 0)) == [(0, 0), (1, 0), (2, 0), (3, 0)]

    def test_diagonal_line(self):
        assert line_points((0, 0), (2, 2)) == [(0, 0), (1, 1), (2, 2)]

    def test_single_point(self):
        assert line_points((4, 4), (4, 4)) == [(4, 4)]


class TestLookups:

    def test_nearest_and_farthest(self):
        points = [(0, 0), (5, 5), (9, 9)]
        assert find_nearest((6, 6), points) == (5, 5)
        assert find_farthest((6, 6), points) == (0, 0)

    def test_empty(self):
        assert find_nearest((0, 0), []) is None
        assert find_farthest((0, 0), []) is None

    def test_clamp(self):
        assert clamp(-1) == 0
        assert clamp(2) == 1
        assert clamp(5, 0, 10) == 5


class TestNoise:

    def test_white_noise_range(self):
        rng = RandomSource("white")
        assert all(-1 <= white_noise(rng) < 1 for _ in range(200))

    def test_random_int_in_range_is_half_open(self):
        rng = RandomSource("ints")
        values = {random_int_in_range(rng, 0, 3) for _ in range(300)}
        assert values == {0, 1, 2}

    def test_value_noise_is_deterministic(self):
        assert value_noise(3.5, 7.25) == value_noise(3.5, 7.25)
        assert 0 <= value_noise(3.5, 7.25) < 1

    def test_perlin_zero_at_lattice_points(self):
        perlin = PerlinNoise(RandomSource("perlin"))
        assert perlin.noise(3, 4) == 0

    def test_perlin_reproducible(self):
        a = PerlinNoise(RandomSource("seed"))
        b = PerlinNoise(RandomSource("seed"))
        assert a.octave(12.3, 45.6) == b.octave(12.3, 45.6)

    def test_perlin_octave_range(self):
        perlin = PerlinNoise(RandomSource("octave"))
        values = [perlin.octave(x, y) for x in range(20) for y in range(20)]
        assert all(-1.5 <= v <= 1.5 for v in values)
