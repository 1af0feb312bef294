"""Collaborator interfaces consumed by visitors.

Visitors only ever talk to the grid, the path finder, spawn points and
attractors through these protocols, so tests can substitute scripted fakes.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

Cell = tuple[int, int]


class TerrainKind(Enum):
    """Tile terrain with its text glyph."""

    PATH = "."
    UNDERGROWTH = ";"
    TREES = "#"
    WATER = "~"


@dataclass(frozen=True)
class Node:
    """Read-only snapshot of one grid tile."""

    walkable: bool
    terrain: TerrainKind
    attraction: float
    base_cost: float


class GridOracle(Protocol):
    """Walkability, terrain and attraction queries."""

    width: int
    height: int

    def get_node(self, x: int, y: int) -> Node | None: ...

    def speed_multiplier(self, x: int, y: int) -> float: ...

    def is_walkable(self, cell: Cell) -> bool: ...

    def neighbors(self, cell: Cell) -> list[Cell]: ...


class PathOracle(Protocol):
    """Shortest-path service. ``None`` is an ordinary outcome."""

    def try_find_path(
        self, start: Cell, destination: Cell, attraction_multiplier: float = 1.0
    ) -> list[Cell] | None: ...


class SpawnRegistry(Protocol):
    """Entrance/exit lookup."""

    def is_spawn_point(self, cell: Cell) -> bool: ...

    def spawn_points(self) -> Mapping[str, Cell]: ...


class Attractor(Protocol):
    """Lantern-like stimulus polled once per tick by mobile visitors."""

    attractor_id: int
    grid_position: Cell
    proc_chance: float
    cooldown_sec: float
    fascination_duration_seconds: float

    def is_cell_in_influence(self, cell: Cell) -> bool: ...
