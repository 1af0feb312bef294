"""A* path oracle over the walkable-cell graph of a ``MazeGrid``."""

from __future__ import annotations

import networkx as nx

from maze_visitors.config.constants import MIN_MOVE_COST
from maze_visitors.domain.grid import MazeGrid
from maze_visitors.domain.oracles import Cell


def manhattan(a: Cell, b: Cell) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def _floor_heuristic(a: Cell, b: Cell) -> float:
    # lower bound: every step costs at least MIN_MOVE_COST
    return manhattan(a, b) * MIN_MOVE_COST


class GridPathfinder:
    """Shortest paths with attraction-adjusted tile costs.

    Entering a cell costs ``grid.move_cost(cell, attraction_multiplier)``,
    so a positive multiplier pulls routes through attractive tiles and a
    negative one pushes them away.
    """

    def __init__(self, grid: MazeGrid) -> None:
        self.grid = grid

    def try_find_path(
        self, start: Cell, destination: Cell, attraction_multiplier: float = 1.0
    ) -> list[Cell] | None:
        """Return ``[start, ..., destination]`` or ``None`` when unreachable."""
        if not (self.grid.is_walkable(start) and self.grid.is_walkable(destination)):
            return None
        if start == destination:
            return [start]
        grid = self.grid

        def weight(_u: Cell, v: Cell, _data: dict[str, object]) -> float:
            return grid.move_cost(v, attraction_multiplier)

        try:
            path = nx.astar_path(
                grid.to_graph(), start, destination, heuristic=_floor_heuristic, weight=weight
            )
        except (nx.NetworkXNoPath, nx.NodeNotFound):
            return None
        return list(path)
