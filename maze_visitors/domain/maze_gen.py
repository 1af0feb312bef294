"""Randomized Kruskal maze generation in the grid text format.

Logical cells sit on odd coordinates; walls between them are knocked down
in shuffled order whenever the two sides are not yet connected, which
yields a perfect maze (exactly one route between any two logical cells).
"""

from __future__ import annotations

from random import Random

from networkx.utils import UnionFind

from maze_visitors.config.types import MazeConfig
from maze_visitors.domain.grid import HEART_GLYPH, LANTERN_GLYPH, SPAWN_GLYPH
from maze_visitors.domain.oracles import Cell, TerrainKind

_WALL = TerrainKind.TREES.value
_PATH = TerrainKind.PATH.value


def _border_slots(width: int, height: int) -> list[Cell]:
    """Border cells that touch a logical cell, in a fixed order."""
    slots: list[Cell] = []
    for x in range(1, width, 2):
        slots.append((x, 0))
        slots.append((x, height - 1))
    for y in range(1, height, 2):
        slots.append((0, y))
        slots.append((width - 1, y))
    return slots


def generate_maze(config: MazeConfig, rng: Random) -> str:
    """Carve a perfect maze and return it as text."""
    width, height = config.width, config.height
    glyphs = [[_WALL] * width for _ in range(height)]
    cells = [(x, y) for y in range(1, height, 2) for x in range(1, width, 2)]
    for x, y in cells:
        glyphs[y][x] = _PATH

    # (cell, neighbour cell, wall between them)
    walls: list[tuple[Cell, Cell, Cell]] = []
    for x, y in cells:
        if x + 2 < width:
            walls.append(((x, y), (x + 2, y), (x + 1, y)))
        if y + 2 < height:
            walls.append(((x, y), (x, y + 2), (x, y + 1)))
    rng.shuffle(walls)

    sets = UnionFind(cells)
    for a, b, (wx, wy) in walls:
        if sets[a] != sets[b]:
            sets.union(a, b)
            glyphs[wy][wx] = _PATH

    cx, cy = width // 2, height // 2
    hx, hy = min(cells, key=lambda c: (abs(c[0] - cx) + abs(c[1] - cy), c[1], c[0]))
    glyphs[hy][hx] = HEART_GLYPH

    for ex, ey in rng.sample(_border_slots(width, height), config.entrances):
        glyphs[ey][ex] = SPAWN_GLYPH

    open_cells = [(x, y) for y in range(height) for x in range(width) if glyphs[y][x] == _PATH]
    for lx, ly in rng.sample(open_cells, min(config.lanterns, len(open_cells))):
        glyphs[ly][lx] = LANTERN_GLYPH

    return "\n".join("".join(row) for row in glyphs)
