"""Attractor fascination: pause bookkeeping and the live depth-first wander.

Once a fascinated visitor has reached its attractor and finished pausing,
it explores with ``FascinatedWalk``: an explicit stack of frames, each a
position plus its shuffled unexplored neighbours. Every ``step`` yields the
next cell to append to the visitor's path, either a newly discovered cell
or, when the top frame is spent, its parent as a physical backtrack.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from random import Random

from maze_visitors.domain.oracles import Cell, GridOracle


@dataclass
class WalkFrame:
    """One stack entry of the fascinated walk."""

    position: Cell
    unexplored: list[Cell]


class FascinatedWalk:
    """Incremental depth-first spanning walk with full backtracking.

    Each walkable cell is pushed at most once, so the walk is exhausted
    after at most ``2 * walkable_count`` steps.
    """

    def __init__(self, grid: GridOracle, start: Cell, rng: Random) -> None:
        self.grid = grid
        self.rng = rng
        self.visited: set[Cell] = {start}
        self.stack: list[WalkFrame] = [WalkFrame(start, self._shuffled_children(start))]
        self.pushes = 1
        self.steps = 0

    @property
    def exhausted(self) -> bool:
        return not self.stack

    @property
    def position(self) -> Cell | None:
        return self.stack[-1].position if self.stack else None

    def _shuffled_children(self, cell: Cell) -> list[Cell]:
        children = [n for n in self.grid.neighbors(cell) if n not in self.visited]
        self.rng.shuffle(children)
        return children

    def step(self) -> Cell | None:
        """Next cell to walk to, or ``None`` once the stack has emptied."""
        while self.stack:
            top = self.stack[-1]
            while top.unexplored:
                candidate = top.unexplored.pop()
                if candidate in self.visited or not self.grid.is_walkable(candidate):
                    continue
                self.visited.add(candidate)
                self.stack.append(WalkFrame(candidate, self._shuffled_children(candidate)))
                self.pushes += 1
                self.steps += 1
                return candidate
            self.stack.pop()
            if self.stack:
                self.steps += 1
                return self.stack[-1].position
        return None


@dataclass
class Fascination:
    """Per-visitor fascination episode."""

    attractor_cell: Cell
    attractor_id: int | None = None
    pause_duration: float = 0.0
    pause_remaining: float = 0.0
    reached: bool = False
    wander_budget: int = 0
    walk: FascinatedWalk | None = None

    @property
    def pausing(self) -> bool:
        return self.reached and self.walk is None and self.pause_remaining > 0

    @property
    def wandering(self) -> bool:
        return self.walk is not None

    def budget_spent(self) -> bool:
        """True once a bounded wander has taken its allotted steps."""
        return self.walk is not None and 0 < self.wander_budget <= self.walk.steps


@dataclass
class AttractorCooldowns:
    """Retrigger cooldowns keyed by stable attractor id."""

    remaining: dict[int, float] = field(default_factory=dict)

    def ready(self, attractor_id: int) -> bool:
        return self.remaining.get(attractor_id, 0.0) <= 0.0

    def arm(self, attractor_id: int, seconds: float) -> None:
        self.remaining[attractor_id] = seconds

    def tick(self, dt: float) -> None:
        for key in [k for k, left in self.remaining.items() if left - dt <= 0.0]:
            del self.remaining[key]
        for key in self.remaining:
            self.remaining[key] -= dt

    def clear(self) -> None:
        self.remaining.clear()
