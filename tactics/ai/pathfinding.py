"""Uniform-cost pathfinding over the combat grid.

Provides a ``Pathfinder`` that computes least-cost routes, respecting
obstacles, terrain movement cost and occupancy.

Usage:
    pf = Pathfinder(grid)
    path = pf.find_path(mover, start, goal)   # list[GridPosition] or None
"""

from __future__ import annotations

import heapq
from typing import TYPE_CHECKING

from tactics.core.models import GridPosition

if TYPE_CHECKING:
    from tactics.core.grid import CombatGrid
    from tactics.core.models import Combatant

# Cardinal directions (no diagonals), in expansion order
_DIRS = ((0, -1), (0, 1), (-1, 0), (1, 0))


class Pathfinder:
    """Dijkstra search on the combat grid.

    Pure: reads the grid, never mutates it.  Equal-cost frontier entries are
    expanded in insertion order, which with the fixed direction order makes
    results deterministic for a given grid.
    """

    __slots__ = ("_grid",)

    def __init__(self, grid: CombatGrid) -> None:
        self._grid = grid

    def find_path(
        self,
        mover: Combatant | None,
        start: GridPosition,
        goal: GridPosition,
    ) -> list[GridPosition] | None:
        """Compute the cheapest path from *start* to *goal*.

        Returns the cells including both endpoints, ``[start]`` when they
        coincide, or None if *goal* cannot be reached.

        Intermediate cells must be free or held by *mover*.  The *goal* cell
        is expanded even when another combatant stands on it, so callers can
        tell "blocked at the last step" apart from "unreachable".
        """
        grid = self._grid
        if not grid.in_bounds(start) or not grid.in_bounds(goal):
            return None
        if start == goal:
            return [start]
        if not grid.is_passable(goal):
            return None

        counter = 0
        frontier: list[tuple[int, int, int, int]] = [(0, counter, start.x, start.y)]
        cost_so_far: dict[tuple[int, int], int] = {(start.x, start.y): 0}
        came_from: dict[tuple[int, int], tuple[int, int]] = {}
        gx, gy = goal.x, goal.y

        while frontier:
            cost, _, cx, cy = heapq.heappop(frontier)
            if cx == gx and cy == gy:
                return self._reconstruct(came_from, (gx, gy))
            if cost > cost_so_far[(cx, cy)]:
                continue  # stale entry

            for dx, dy in _DIRS:
                npos = GridPosition(cx + dx, cy + dy)
                nkey = (npos.x, npos.y)
                is_goal = npos.x == gx and npos.y == gy
                if is_goal:
                    if not grid.is_passable(npos):
                        continue
                elif not grid.can_occupy(npos, mover):
                    continue

                new_cost = cost + grid.movement_cost(npos)
                if new_cost >= cost_so_far.get(nkey, 1 << 30):
                    continue
                cost_so_far[nkey] = new_cost
                came_from[nkey] = (cx, cy)
                counter += 1
                heapq.heappush(frontier, (new_cost, counter, npos.x, npos.y))

        return None

    def path_cost(self, path: list[GridPosition]) -> int:
        """Total movement cost of walking *path* (the start cell is free)."""
        return sum(self._grid.movement_cost(p) for p in path[1:])

    @staticmethod
    def _reconstruct(
        came_from: dict[tuple[int, int], tuple[int, int]],
        current: tuple[int, int],
    ) -> list[GridPosition]:
        path = [GridPosition(*current)]
        while current in came_from:
            current = came_from[current]
            path.append(GridPosition(*current))
        path.reverse()
        return path
