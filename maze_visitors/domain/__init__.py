"""Domain layer: grid, path oracle, visitor state machine and detour strategies."""

from maze_visitors.domain.attractors import Lantern
from maze_visitors.domain.detours import (
    ConfusionDetour,
    DetourStrategy,
    DirectRouting,
    LostDetour,
    MisstepDetour,
    strategy_for,
)
from maze_visitors.domain.fascination import FascinatedWalk, WalkFrame
from maze_visitors.domain.grid import MazeGrid, parse_maze
from maze_visitors.domain.maze_gen import generate_maze
from maze_visitors.domain.oracles import Cell, Node, TerrainKind
from maze_visitors.domain.pathfinding import GridPathfinder
from maze_visitors.domain.registry import VisitorRegistry
from maze_visitors.domain.state import (
    ATTRACTION_MULTIPLIERS,
    TERMINAL_STATES,
    AfflictionFlags,
    AfflictionTimer,
    VisitorState,
    resolve_state,
)
from maze_visitors.domain.visitor import Visitor

__all__ = [
    "ATTRACTION_MULTIPLIERS",
    "AfflictionFlags",
    "AfflictionTimer",
    "Cell",
    "ConfusionDetour",
    "DetourStrategy",
    "DirectRouting",
    "FascinatedWalk",
    "GridPathfinder",
    "Lantern",
    "LostDetour",
    "MazeGrid",
    "MisstepDetour",
    "Node",
    "TERMINAL_STATES",
    "TerrainKind",
    "Visitor",
    "VisitorRegistry",
    "VisitorState",
    "WalkFrame",
    "generate_maze",
    "parse_maze",
    "resolve_state",
    "strategy_for",
]
