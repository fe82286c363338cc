"""
Linear formation generator.

Draws thick, jittered random line segments onto a grid. Used for rock
veins, but nothing here knows about terrain: the caller decides what may be
overwritten through can_place.
"""

import math
from dataclasses import dataclass
from typing import Any, Callable

from ..config.generation import LinearFormationConfig
from ..utils.geometry import Position
from ..utils.random import RandomSource
from .terrain_grid import GridAccessor


@dataclass
class FormationCallbacks:
    is_in_bounds: Callable[[Position], bool]
    can_place: Callable[[Position, Any], bool]
    place_element: Callable[[Position, Any], None]


@dataclass
class FormationResult:
    formations_generated: int = 0
    elements_placed: int = 0
    attempted_placements: int = 0


def _generate_single_formation(
    area_size,
    config: LinearFormationConfig,
    element_value: Any,
    callbacks: FormationCallbacks,
    rng: RandomSource,
) -> FormationResult:
    start_x = math.floor(rng.random() * area_size.x)
    start_y = math.floor(rng.random() * area_size.y)
    direction = rng.angle()
    length = rng.randint(config.min_length, config.max_length)

    result = FormationResult()

    for step in range(length):
        line_x = math.floor(start_x + math.cos(direction) * step)
        line_y = math.floor(start_y + math.sin(direction) * step)
        if not callbacks.is_in_bounds(Position(line_x, line_y)):
            continue

        thickness = rng.randint(config.min_thickness, config.max_thickness)
        noise_x = math.floor((rng.random() - 0.5) * 2 * config.noise_amount)
        noise_y = math.floor((rng.random() - 0.5) * 2 * config.noise_amount)

        for dy in range(-thickness, thickness + 1):
            for dx in range(-thickness, thickness + 1):
                position = Position(line_x + dx + noise_x, line_y + dy + noise_y)
                result.attempted_placements += 1

                if not callbacks.is_in_bounds(position):
                    continue
                if not callbacks.can_place(position, element_value):
                    continue
                if rng.random() > config.placement_probability:
                    continue

                callbacks.place_element(position, element_value)
                result.elements_placed += 1

    result.formations_generated = 1 if result.elements_placed > 0 else 0
    return result


def generate_linear_formations(
    area_size,
    formation_config: LinearFormationConfig,
    element_value: Any,
    callbacks: FormationCallbacks,
    rng: RandomSource,
) -> FormationResult:
    """
    Generate floor(area * density / 1000) formations.

    A formation that placed nothing does not count as generated.
    """
    formation_count = math.floor(area_size.x * area_size.y * formation_config.density / 1000)
    total = FormationResult()

    for _ in range(formation_count):
        single = _generate_single_formation(
            area_size, formation_config, element_value, callbacks, rng
        )
        total.formations_generated += single.formations_generated
        total.elements_placed += single.elements_placed
        total.attempted_placements += single.attempted_placements

    return total


def generate_linear_formations_on_grid(
    grid: list,
    formation_config: LinearFormationConfig,
    element_value: Any,
    can_place: Callable[[int, int, Any, Any], bool],
    rng: RandomSource,
) -> FormationResult:
    """Formations over a plain grid; can_place(x, y, current, new) gates writes."""
    accessor = GridAccessor(grid)
    callbacks = FormationCallbacks(
        is_in_bounds=accessor.is_in_bounds,
        can_place=lambda pos, value: can_place(pos.x, pos.y, accessor.get_cell(pos), value),
        place_element=accessor.set_cell,
    )
    return generate_linear_formations(
        Position(accessor.width, accessor.height),
        formation_config,
        element_value,
        callbacks,
        rng,
    )
