"""Text rendering and summary statistics for terrain grids."""

from typing import Dict, List

import numpy as np

from .types import TerrainGrid, TerrainType

TERRAIN_CHARS = {
    TerrainType.DIRT: ".",
    TerrainType.ROCK: "#",
    TerrainType.BEDROCK: "X",
    TerrainType.EMPTY: " ",
    TerrainType.GOLD_CLUSTER: "G",
    TerrainType.CRYSTAL_CLUSTER: "C",
    TerrainType.IRON_CLUSTER: "I",
}


def render_ascii(terrain: TerrainGrid) -> List[str]:
    """One string per row, one character per cell."""
    return ["".join(TERRAIN_CHARS[TerrainType(cell)] for cell in row) for row in terrain]


def to_ascii(terrain: TerrainGrid) -> str:
    return "\n".join(render_ascii(terrain))


def terrain_statistics(terrain: TerrainGrid) -> Dict[str, Dict[str, float]]:
    """
    Cell count and share of the map for every terrain type.

    Types that do not occur are reported with zero counts.
    """
    cells = np.array([[TerrainType(cell).value for cell in row] for row in terrain], dtype=object)
    total = int(cells.size)

    stats = {}
    for terrain_type in TerrainType:
        count = int(np.count_nonzero(cells == terrain_type.value)) if total else 0
        stats[terrain_type.value] = {
            "count": count,
            "percentage": round(count / total * 100, 2) if total else 0.0,
        }
    return stats
