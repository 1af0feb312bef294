"""Shared fixtures: small grids and scripted path oracles."""

from __future__ import annotations

import pytest

from maze_visitors.domain.grid import MazeGrid
from maze_visitors.domain.oracles import Cell


class AxisOracle:
    """Deterministic router: walk along y first, then along x.

    Ignores tile costs, which makes recovery routes predictable in tests.
    """

    def __init__(self, grid: MazeGrid) -> None:
        self.grid = grid
        self.calls: list[tuple[Cell, Cell, float]] = []

    def try_find_path(
        self, start: Cell, destination: Cell, attraction_multiplier: float = 1.0
    ) -> list[Cell] | None:
        self.calls.append((start, destination, attraction_multiplier))
        if not (self.grid.is_walkable(start) and self.grid.is_walkable(destination)):
            return None
        x, y = start
        path = [start]
        while y != destination[1]:
            y += 1 if destination[1] > y else -1
            path.append((x, y))
        while x != destination[0]:
            x += 1 if destination[0] > x else -1
            path.append((x, y))
        return path


class NoPathOracle:
    """Oracle that never finds a route."""

    def __init__(self) -> None:
        self.calls = 0

    def try_find_path(
        self, start: Cell, destination: Cell, attraction_multiplier: float = 1.0
    ) -> list[Cell] | None:
        self.calls += 1
        return None


@pytest.fixture
def open_grid() -> MazeGrid:
    return MazeGrid.open_field(10, 10)


@pytest.fixture
def axis_oracle(open_grid: MazeGrid) -> AxisOracle:
    return AxisOracle(open_grid)


@pytest.fixture
def no_path_oracle() -> NoPathOracle:
    return NoPathOracle()


@pytest.fixture
def axis_oracle_for() -> type[AxisOracle]:
    """Factory for axis oracles over arbitrary grids."""
    return AxisOracle
