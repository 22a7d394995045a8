"""Combat grid: tile terrain plus single-occupant bookkeeping."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterator

from tactics.core.enums import TileType
from tactics.core.models import GridPosition

if TYPE_CHECKING:
    from tactics.core.models import Combatant


class CombatGrid:
    """2D tile grid with a parallel occupant arena.

    Both layers are flat lists addressed by ``x + y * width``.  A cell holds
    at most one combatant, and occupant mutation is the only state change
    besides terrain edits.
    """

    __slots__ = ("width", "height", "_tiles", "_occupants")

    def __init__(self, width: int, height: int, default: TileType = TileType.EMPTY) -> None:
        if width <= 0:
            raise ValueError(f"Grid width must be positive, got {width}")
        if height <= 0:
            raise ValueError(f"Grid height must be positive, got {height}")
        self.width = width
        self.height = height
        self._tiles: list[TileType] = [default] * (width * height)
        self._occupants: list[Combatant | None] = [None] * (width * height)

    # -- access --

    def _idx(self, pos: GridPosition) -> int:
        return pos.x + pos.y * self.width

    def _ensure_in_bounds(self, pos: GridPosition) -> None:
        if not self.in_bounds(pos):
            raise IndexError(f"Position {pos} outside of {self.width}x{self.height} grid")

    def in_bounds(self, pos: GridPosition) -> bool:
        return 0 <= pos.x < self.width and 0 <= pos.y < self.height

    def get_tile(self, pos: GridPosition) -> TileType:
        self._ensure_in_bounds(pos)
        return self._tiles[self._idx(pos)]

    def set_tile(self, pos: GridPosition, tile: TileType) -> None:
        self._ensure_in_bounds(pos)
        self._tiles[self._idx(pos)] = tile

    def fill(self, tile: TileType) -> None:
        self._tiles = [tile] * (self.width * self.height)

    def is_passable(self, pos: GridPosition) -> bool:
        return self.in_bounds(pos) and self._tiles[self._idx(pos)] != TileType.OBSTACLE

    def is_obstacle(self, pos: GridPosition) -> bool:
        return self.in_bounds(pos) and self._tiles[self._idx(pos)] == TileType.OBSTACLE

    def movement_cost(self, pos: GridPosition) -> int:
        """Cost of stepping onto *pos*.  Only meaningful for passable tiles."""
        return 2 if self.get_tile(pos) == TileType.DIFFICULT else 1

    def positions(self) -> Iterator[GridPosition]:
        for y in range(self.height):
            for x in range(self.width):
                yield GridPosition(x, y)

    # -- occupancy --

    def get_occupant(self, pos: GridPosition) -> Combatant | None:
        if not self.in_bounds(pos):
            return None
        return self._occupants[self._idx(pos)]

    def can_occupy(self, pos: GridPosition, who: Combatant | None) -> bool:
        if not self.is_passable(pos):
            return False
        existing = self._occupants[self._idx(pos)]
        return existing is None or existing is who

    def try_occupy(self, pos: GridPosition, who: Combatant) -> bool:
        if not self.can_occupy(pos, who):
            return False
        self._occupants[self._idx(pos)] = who
        return True

    def vacate(self, pos: GridPosition, who: Combatant) -> None:
        """Clear *pos* if (and only if) *who* holds it."""
        if self.in_bounds(pos) and self._occupants[self._idx(pos)] is who:
            self._occupants[self._idx(pos)] = None

    def try_transition_occupant(self, src: GridPosition, dst: GridPosition, who: Combatant) -> bool:
        """Atomically move *who* from *src* to *dst*."""
        if not self.in_bounds(src) or not self.in_bounds(dst):
            return False
        if self._occupants[self._idx(src)] is not who:
            return False
        if not self.can_occupy(dst, who):
            return False
        self._occupants[self._idx(src)] = None
        self._occupants[self._idx(dst)] = who
        return True

    def clear_occupants(self) -> None:
        self._occupants = [None] * (self.width * self.height)

    def occupants(self) -> Iterator[tuple[GridPosition, Combatant]]:
        for i, who in enumerate(self._occupants):
            if who is not None:
                yield GridPosition(i % self.width, i // self.width), who

    # -- line tracing (Bresenham) --

    @staticmethod
    def trace_line(start: GridPosition, end: GridPosition) -> list[GridPosition]:
        """Cells on the integer line from *start* to *end*, both inclusive."""
        x0, y0, x1, y1 = start.x, start.y, end.x, end.y
        dx = abs(x1 - x0)
        dy = abs(y1 - y0)
        sx = 1 if x0 < x1 else -1
        sy = 1 if y0 < y1 else -1
        err = dx - dy
        cells = [GridPosition(x0, y0)]
        cx, cy = x0, y0
        while cx != x1 or cy != y1:
            e2 = 2 * err
            if e2 > -dy:
                err -= dy
                cx += sx
            if e2 < dx:
                err += dx
                cy += sy
            cells.append(GridPosition(cx, cy))
        return cells
