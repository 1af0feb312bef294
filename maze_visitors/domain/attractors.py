"""Minimal lantern attractor used to drive fascination in simulation runs."""

from __future__ import annotations

from dataclasses import dataclass, field

from maze_visitors.config.constants import (
    DEFAULT_COOLDOWN_SEC,
    DEFAULT_FASCINATION_DURATION,
    DEFAULT_INFLUENCE_RADIUS,
    DEFAULT_PROC_CHANCE,
)
from maze_visitors.domain.grid import MazeGrid
from maze_visitors.domain.oracles import Cell


@dataclass
class Lantern:
    """Static attractor whose influence is a walkable flood fill around it."""

    attractor_id: int
    grid_position: Cell
    influence_radius: int = DEFAULT_INFLUENCE_RADIUS
    proc_chance: float = DEFAULT_PROC_CHANCE
    cooldown_sec: float = DEFAULT_COOLDOWN_SEC
    fascination_duration_seconds: float = DEFAULT_FASCINATION_DURATION
    influence: frozenset[Cell] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if self.influence_radius < 0:
            raise ValueError("influence_radius must be >= 0")
        if not 0.0 <= self.proc_chance <= 1.0:
            raise ValueError("proc_chance must be in [0.0, 1.0]")
        if self.fascination_duration_seconds < 0:
            raise ValueError("fascination_duration_seconds must be >= 0")

    def bind(self, grid: MazeGrid) -> Lantern:
        """Recompute the influence set against the grid's current walkability."""
        self.influence = frozenset(grid.flood_fill(self.grid_position, self.influence_radius))
        return self

    def is_cell_in_influence(self, cell: Cell) -> bool:
        return cell in self.influence
