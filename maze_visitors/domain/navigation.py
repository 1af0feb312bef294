"""Path invariants, decision-point detection and detour segment builders.

Every path a visitor commits is a chain of 4-adjacent walkable cells;
``validate_path`` is the gate. The segment builders produce the wrong-turn
part of a detour only; splicing in the recovery route happens in
``maze_visitors.domain.detours``.
"""

from __future__ import annotations

from collections.abc import Container, Sequence
from random import Random

from maze_visitors.config.constants import (
    CONFUSION_SAFETY_LIMIT,
    LOST_SAFETY_LIMIT,
    MISSTEP_SAFETY_LIMIT,
)
from maze_visitors.domain.oracles import Cell, GridOracle


def is_adjacent(a: Cell, b: Cell) -> bool:
    return abs(a[0] - b[0]) + abs(a[1] - b[1]) == 1


def heading(a: Cell, b: Cell) -> Cell:
    return (b[0] - a[0], b[1] - a[1])


def ahead(cell: Cell, direction: Cell) -> Cell:
    return (cell[0] + direction[0], cell[1] + direction[1])


def validate_path(grid: GridOracle, path: Sequence[Cell]) -> bool:
    """True when *path* is non-empty, walkable and 4-adjacent throughout."""
    if not path:
        return False
    if not all(grid.is_walkable(cell) for cell in path):
        return False
    return all(is_adjacent(a, b) for a, b in zip(path, path[1:]))


def exits(grid: GridOracle, cell: Cell, came_from: Cell | None) -> list[Cell]:
    """Walkable neighbours of *cell* other than the one it was entered from."""
    return [n for n in grid.neighbors(cell) if n != came_from]


def is_decision_point(grid: GridOracle, cell: Cell, came_from: Cell | None) -> bool:
    """A branch: two or more exits besides the entry direction."""
    return len(exits(grid, cell, came_from)) >= 2


def dead_end_visible(grid: GridOracle, origin: Cell, direction: Cell) -> bool:
    """Look straight down the corridor starting one step from *origin*.

    True only when the corridor runs straight and stops with no exit. A
    branch or a corner ends the lookahead with False.
    """
    previous = origin
    current = ahead(origin, direction)
    while grid.is_walkable(current):
        onward = exits(grid, current, previous)
        if not onward:
            return True
        if len(onward) > 1 or heading(current, onward[0]) != direction:
            return False
        previous, current = current, onward[0]
    return False


def splice_detour(current: Cell, segment: Sequence[Cell], recovery: Sequence[Cell]) -> list[Cell]:
    """``[current] + segment + recovery`` without repeating the segment's end cell."""
    tail = list(recovery)
    if segment and tail and tail[0] == segment[-1]:
        tail = tail[1:]
    return [current, *segment, *tail]


# ---------------------------------------------------------------------------
# Segment builders
# ---------------------------------------------------------------------------


def build_confusion_segment(
    grid: GridOracle,
    current: Cell,
    first: Cell,
    length: int,
    forbidden: Container[Cell],
    rng: Random,
) -> list[Cell]:
    """Walk away from *current* through *first*, keeping straight when possible.

    Stops at *length* cells, before a visible dead end, or when every way on
    would re-enter a forbidden or already-used cell.
    """
    if not grid.is_walkable(first) or first in forbidden or first == current:
        return []
    segment = [first]
    used = {current, first}
    previous, cell = current, first
    direction = heading(current, first)
    for _ in range(CONFUSION_SAFETY_LIMIT):
        if len(segment) >= length or dead_end_visible(grid, cell, direction):
            break
        options = [
            n for n in exits(grid, cell, previous) if n not in used and n not in forbidden
        ]
        if not options:
            break
        straight = ahead(cell, direction)
        nxt = straight if straight in options else rng.choice(options)
        direction = heading(cell, nxt)
        previous, cell = cell, nxt
        segment.append(cell)
        used.add(cell)
    return segment


def build_misstep_segment(
    grid: GridOracle, current: Cell, first: Cell, walked: Container[Cell]
) -> list[Cell]:
    """Follow a single-exit corridor of unwalked cells from *first*.

    Stops on the first cell offering two or more unwalked ways on (the next
    real branch) or none at all (a dead end or a walked junction).
    """
    if not grid.is_walkable(first) or first in walked:
        return []
    segment = [first]
    used = {current, first}
    previous, cell = current, first
    direction = heading(current, first)
    for _ in range(MISSTEP_SAFETY_LIMIT):
        unwalked = [
            n for n in exits(grid, cell, previous) if n not in walked and n not in used
        ]
        if len(unwalked) != 1:
            break
        straight = ahead(cell, direction)
        nxt = straight if straight in unwalked else unwalked[0]
        direction = heading(cell, nxt)
        previous, cell = cell, nxt
        segment.append(cell)
        used.add(cell)
    return segment


def build_lost_segment(
    grid: GridOracle,
    current: Cell,
    first: Cell,
    length: int,
    forbidden: Container[Cell],
    rng: Random,
) -> list[Cell]:
    """Wander from *first* for up to *length* cells, steering clear of dead ends.

    Each step picks at random among exits that are neither forbidden, already
    used, nor the mouth of a visibly dead-ended straight corridor.
    """
    if not grid.is_walkable(first) or first in forbidden or first == current:
        return []
    segment = [first]
    used = {current, first}
    previous, cell = current, first
    for _ in range(LOST_SAFETY_LIMIT):
        if len(segment) >= length:
            break
        options = [
            n
            for n in exits(grid, cell, previous)
            if n not in used
            and n not in forbidden
            and not dead_end_visible(grid, cell, heading(cell, n))
        ]
        if not options:
            break
        previous, cell = cell, rng.choice(options)
        segment.append(cell)
        used.add(cell)
    return segment
