"""
Terrain accessor capability.

Flood fill, placement and formation engines only ever touch a grid through
this interface, so they work over any concrete representation.
"""

from typing import Any, Callable, Optional, Protocol

from .types import TerrainGrid, TerrainType


class TerrainAccessor(Protocol):
    """What the generation engines need from a grid."""

    width: int
    height: int

    def is_in_bounds(self, position) -> bool: ...

    def can_modify(self, position) -> bool: ...

    def set_cell(self, position, value) -> None: ...

    def get_cell(self, position) -> Any: ...


class GridAccessor:
    """
    Accessor over a plain list-of-rows grid.

    can_modify is delegated to predicate(x, y, current_value); with no
    predicate every in-bounds cell is modifiable.
    """

    def __init__(self, grid: list, predicate: Optional[Callable[[int, int, Any], bool]] = None):
        self.grid = grid
        self.height = len(grid)
        self.width = len(grid[0]) if grid else 0
        self._predicate = predicate

    def is_in_bounds(self, position) -> bool:
        x, y = position
        return 0 <= x < self.width and 0 <= y < self.height

    def can_modify(self, position) -> bool:
        if not self.is_in_bounds(position):
            return False
        if self._predicate is None:
            return True
        x, y = position
        return self._predicate(x, y, self.grid[y][x])

    def set_cell(self, position, value) -> None:
        if not self.is_in_bounds(position):
            return
        x, y = position
        self.grid[y][x] = value

    def get_cell(self, position) -> Any:
        if not self.is_in_bounds(position):
            return None
        x, y = position
        return self.grid[y][x]


class TerrainGridAdapter(GridAccessor):
    """Accessor over a terrain grid where Bedrock is never modifiable."""

    def __init__(self, terrain: TerrainGrid):
        super().__init__(terrain, lambda x, y, value: value != TerrainType.BEDROCK)
