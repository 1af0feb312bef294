"""Numpy-backed maze grid: walkability, terrain, attraction and spawn points.

``MazeGrid`` satisfies both the grid-oracle and spawn-registry protocols.
Arrays are indexed ``[y, x]``; cells are ``(x, y)`` tuples with ``y``
growing downward, matching the row order of the text format.

Text format: ``.`` path, ``;`` undergrowth, ``#`` trees, ``~`` water,
``E`` spawn point, ``H`` heart, ``L`` lantern. Unknown glyphs are walls and
short rows are padded with walls.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import networkx as nx
import numpy as np

from maze_visitors.config.constants import DIRECTIONS, MIN_MOVE_COST
from maze_visitors.domain.oracles import Cell, Node, TerrainKind

SPAWN_GLYPH = "E"
HEART_GLYPH = "H"
LANTERN_GLYPH = "L"

TERRAIN_KINDS: tuple[TerrainKind, ...] = tuple(TerrainKind)
"""Terrain code -> kind; the code is the index into this tuple."""

# kind -> (walkable, base move cost, speed multiplier)
TERRAIN_TRAITS: dict[TerrainKind, tuple[bool, float, float]] = {
    TerrainKind.PATH: (True, 1.0, 1.0),
    TerrainKind.UNDERGROWTH: (True, 1.5, 0.6),
    TerrainKind.TREES: (False, 1.0, 1.0),
    TerrainKind.WATER: (False, 1.0, 1.0),
}

_GLYPH_TO_TERRAIN: dict[str, TerrainKind] = {kind.value: kind for kind in TerrainKind}
_MARKER_GLYPHS = frozenset({SPAWN_GLYPH, HEART_GLYPH, LANTERN_GLYPH})


@dataclass
class MazeGrid:
    """Mutable tile state shared by every visitor in a run.

    Mutations bump ``version`` so cached graph views are rebuilt lazily.
    """

    width: int
    height: int
    terrain: np.ndarray
    walkable: np.ndarray
    base_cost: np.ndarray
    attraction: np.ndarray
    spawns: dict[str, Cell] = field(default_factory=dict)
    heart: Cell | None = None
    lantern_cells: list[Cell] = field(default_factory=list)
    version: int = 0
    _graph: nx.Graph | None = field(default=None, init=False, repr=False)
    _graph_version: int = field(default=-1, init=False, repr=False)

    @classmethod
    def from_terrain(cls, rows: list[list[TerrainKind]]) -> MazeGrid:
        """Build a grid from a rectangular terrain matrix (row = y)."""
        height = len(rows)
        width = len(rows[0]) if rows else 0
        if width == 0 or height == 0:
            raise ValueError("grid must have at least one row and one column")
        terrain = np.zeros((height, width), dtype=np.int8)
        walkable = np.zeros((height, width), dtype=bool)
        base_cost = np.ones((height, width), dtype=np.float64)
        for y, row in enumerate(rows):
            if len(row) != width:
                raise ValueError("terrain rows must all have the same length")
            for x, kind in enumerate(row):
                is_walkable, cost, _speed = TERRAIN_TRAITS[kind]
                terrain[y, x] = TERRAIN_KINDS.index(kind)
                walkable[y, x] = is_walkable
                base_cost[y, x] = cost
        return cls(
            width=width,
            height=height,
            terrain=terrain,
            walkable=walkable,
            base_cost=base_cost,
            attraction=np.zeros((height, width), dtype=np.float64),
        )

    @classmethod
    def open_field(cls, width: int, height: int) -> MazeGrid:
        """All-path grid without spawn points; the heart defaults to the centre."""
        grid = cls.from_terrain([[TerrainKind.PATH] * width for _ in range(height)])
        grid.heart = grid.nearest_walkable_to_center()
        return grid

    @classmethod
    def from_file(cls, path: Path) -> MazeGrid:
        """Parse a maze text file."""
        return parse_maze(Path(path).read_text(encoding="utf-8"))

    # -- grid oracle ---------------------------------------------------------

    def in_bounds(self, cell: Cell) -> bool:
        x, y = cell
        return 0 <= x < self.width and 0 <= y < self.height

    def get_node(self, x: int, y: int) -> Node | None:
        """Tile snapshot, or ``None`` outside the grid."""
        if not self.in_bounds((x, y)):
            return None
        return Node(
            walkable=bool(self.walkable[y, x]),
            terrain=TERRAIN_KINDS[int(self.terrain[y, x])],
            attraction=float(self.attraction[y, x]),
            base_cost=float(self.base_cost[y, x]),
        )

    def terrain_at(self, cell: Cell) -> TerrainKind:
        x, y = cell
        return TERRAIN_KINDS[int(self.terrain[y, x])]

    def speed_multiplier(self, x: int, y: int) -> float:
        """Terrain speed factor; 1.0 outside the grid."""
        if not self.in_bounds((x, y)):
            return 1.0
        return TERRAIN_TRAITS[self.terrain_at((x, y))][2]

    def is_walkable(self, cell: Cell) -> bool:
        return self.in_bounds(cell) and bool(self.walkable[cell[1], cell[0]])

    def neighbors(self, cell: Cell) -> list[Cell]:
        """Walkable 4-neighbours in ``DIRECTIONS`` order."""
        x, y = cell
        result: list[Cell] = []
        for dx, dy in DIRECTIONS:
            candidate = (x + dx, y + dy)
            if self.is_walkable(candidate):
                result.append(candidate)
        return result

    def move_cost(self, cell: Cell, attraction_multiplier: float = 1.0) -> float:
        """Cost of entering *cell*; attraction lowers it, scaled by the multiplier."""
        if not self.is_walkable(cell):
            return float("inf")
        x, y = cell
        adjusted = self.base_cost[y, x] - self.attraction[y, x] * attraction_multiplier
        return float(max(adjusted, MIN_MOVE_COST))

    def walkable_count(self) -> int:
        return int(np.count_nonzero(self.walkable))

    # -- mutation (between ticks only) ---------------------------------------

    def set_walkable(self, cell: Cell, walkable: bool) -> None:
        x, y = cell
        self.walkable[y, x] = walkable
        self.version += 1

    def add_attraction(self, cell: Cell, amount: float) -> None:
        x, y = cell
        self.attraction[y, x] += amount
        self.version += 1

    def clear_attraction(self) -> None:
        self.attraction.fill(0.0)
        self.version += 1

    # -- graph views ---------------------------------------------------------

    def to_graph(self) -> nx.Graph:
        """Undirected graph of walkable cells, cached per ``version``."""
        if self._graph is not None and self._graph_version == self.version:
            return self._graph
        graph = nx.Graph()
        ys, xs = np.nonzero(self.walkable)
        for x, y in zip(xs.tolist(), ys.tolist(), strict=True):
            graph.add_node((x, y))
            for neighbor in ((x + 1, y), (x, y + 1)):
                if self.is_walkable(neighbor):
                    graph.add_edge((x, y), neighbor)
        self._graph = graph
        self._graph_version = self.version
        return graph

    def flood_fill(self, cell: Cell, radius: int) -> set[Cell]:
        """Walkable cells reachable from *cell* within *radius* steps."""
        if not self.is_walkable(cell):
            return set()
        lengths = nx.single_source_shortest_path_length(self.to_graph(), cell, cutoff=radius)
        return set(lengths)

    def nearest_walkable_to_center(self) -> Cell | None:
        """Walkable cell closest to the centre by ring distance, scan order on ties."""
        ys, xs = np.nonzero(self.walkable)
        if xs.size == 0:
            return None
        cx, cy = self.width // 2, self.height // 2
        ring = np.maximum(np.abs(xs - cx), np.abs(ys - cy))
        order = np.lexsort((xs, ys, ring))
        best = int(order[0])
        return (int(xs[best]), int(ys[best]))

    # -- spawn registry ------------------------------------------------------

    def is_spawn_point(self, cell: Cell) -> bool:
        return cell in self.spawns.values()

    def spawn_points(self) -> dict[str, Cell]:
        return dict(self.spawns)


def parse_maze(text: str) -> MazeGrid:
    """Parse the maze text format into a ``MazeGrid``.

    Raises ``ValueError`` when the text holds no rows.
    """
    lines = [line.rstrip("\r") for line in text.splitlines()]
    while lines and not lines[-1].strip():
        lines.pop()
    while lines and not lines[0].strip():
        lines.pop(0)
    if not lines:
        raise ValueError("maze text must contain at least one row")
    width = max(len(line) for line in lines)

    rows: list[list[TerrainKind]] = []
    spawns: dict[str, Cell] = {}
    heart: Cell | None = None
    lanterns: list[Cell] = []
    for y, line in enumerate(lines):
        row: list[TerrainKind] = []
        for x, glyph in enumerate(line.ljust(width, TerrainKind.TREES.value)):
            if glyph in _MARKER_GLYPHS:
                row.append(TerrainKind.PATH)
                if glyph == SPAWN_GLYPH:
                    spawns[f"E{len(spawns)}"] = (x, y)
                elif glyph == HEART_GLYPH and heart is None:
                    heart = (x, y)
                elif glyph == LANTERN_GLYPH:
                    lanterns.append((x, y))
            else:
                row.append(_GLYPH_TO_TERRAIN.get(glyph, TerrainKind.TREES))
        rows.append(row)

    grid = MazeGrid.from_terrain(rows)
    grid.spawns = spawns
    grid.heart = heart if heart is not None else grid.nearest_walkable_to_center()
    grid.lantern_cells = lanterns
    return grid
