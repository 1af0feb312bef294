"""Tests for maze_visitors.domain.fascination module."""

from __future__ import annotations

from random import Random

import pytest

from maze_visitors.config.types import ArchetypeConfig, DetourKind
from maze_visitors.domain.fascination import AttractorCooldowns, FascinatedWalk
from maze_visitors.domain.grid import MazeGrid, parse_maze
from maze_visitors.domain.navigation import is_adjacent
from maze_visitors.domain.oracles import PathOracle
from maze_visitors.domain.pathfinding import GridPathfinder
from maze_visitors.domain.state import VisitorState
from maze_visitors.domain.visitor import Visitor

CORRIDOR_WITH_EXIT = "\n".join(
    [
        "#E.L.E#",
        "#######",
        "#H#####",
    ]
)


class TestFascinatedWalk:
    @pytest.mark.parametrize("seed", [0, 1, 2, 3])
    def test_terminates_after_covering_component(self, seed: int) -> None:
        grid = MazeGrid.open_field(4, 4)
        walk = FascinatedWalk(grid, (0, 0), Random(seed))
        n = grid.walkable_count()
        previous = (0, 0)
        steps = 0
        while (cell := walk.step()) is not None:
            assert is_adjacent(previous, cell)
            previous = cell
            steps += 1
            assert steps <= 2 * n
        assert walk.exhausted
        assert walk.pushes == n
        assert walk.steps == steps <= 2 * (n - 1)
        assert walk.visited == {(x, y) for x in range(4) for y in range(4)}

    def test_ends_back_at_start(self) -> None:
        grid = MazeGrid.open_field(3, 3)
        walk = FascinatedWalk(grid, (1, 1), Random(5))
        last = None
        while (cell := walk.step()) is not None:
            last = cell
        assert last == (1, 1)
        assert walk.position is None

    def test_isolated_start_is_exhausted_immediately(self) -> None:
        grid = parse_maze("\n".join(["###", "#.#", "###"]))
        walk = FascinatedWalk(grid, (1, 1), Random(0))
        assert walk.step() is None
        assert walk.steps == 0

    def test_skips_cells_blocked_after_discovery(self) -> None:
        grid = MazeGrid.open_field(3, 1)
        walk = FascinatedWalk(grid, (0, 0), Random(0))
        grid.set_walkable((1, 0), False)
        assert walk.step() is None


class TestAttractorCooldowns:
    def test_ready_after_expiry(self) -> None:
        cooldowns = AttractorCooldowns()
        assert cooldowns.ready(7)
        cooldowns.arm(7, 1.0)
        assert not cooldowns.ready(7)
        cooldowns.tick(0.5)
        assert not cooldowns.ready(7)
        cooldowns.tick(0.5)
        assert cooldowns.ready(7)
        assert cooldowns.remaining == {}

    def test_keyed_independently(self) -> None:
        cooldowns = AttractorCooldowns()
        cooldowns.arm(1, 2.0)
        cooldowns.arm(2, 0.5)
        cooldowns.tick(1.0)
        assert cooldowns.ready(2)
        assert not cooldowns.ready(1)


class TestVisitorFascination:
    def _visitor(self, grid: MazeGrid, oracle: PathOracle, **overrides: object) -> Visitor:
        archetype = ArchetypeConfig(detour_kind=DetourKind.NONE, **overrides)
        return Visitor(grid, oracle, archetype, Random(3))

    def test_pause_then_wander_then_resume(
        self, open_grid: MazeGrid, axis_oracle: PathOracle
    ) -> None:
        visitor = self._visitor(
            open_grid, axis_oracle, lantern_wander_min=3, lantern_wander_max=3
        )
        visitor.set_path(axis_oracle.try_find_path((0, 0), (9, 9)))
        assert visitor.become_fascinated((0, 2), pause_duration=1.0)
        assert visitor.state is VisitorState.FASCINATED
        assert visitor.path == [(0, 0), (0, 1), (0, 2)]

        visitor.advance(1.0)
        visitor.advance(1.0)
        assert visitor.cell == (0, 2)
        assert visitor.fascination is not None
        assert visitor.fascination.pausing
        assert not visitor.is_mobile

        visitor.advance(1.0)
        assert visitor.cell == (0, 2)
        assert visitor.fascination.wandering
        assert visitor.path[0] == (0, 2)
        assert visitor.is_mobile

        for _ in range(3):
            visitor.advance(1.0)
        assert visitor.fascination is None
        assert visitor.state is VisitorState.WALKING
        assert visitor.path[-1] == (9, 9)

    def test_wander_steps_are_adjacent(
        self, open_grid: MazeGrid, axis_oracle: PathOracle
    ) -> None:
        visitor = self._visitor(
            open_grid, axis_oracle, lantern_wander_min=0, lantern_wander_max=0
        )
        visitor.set_path(axis_oracle.try_find_path((4, 4), (9, 9)))
        visitor.become_fascinated((4, 5), pause_duration=0.0)
        cells = [visitor.cell]
        for _ in range(40):
            visitor.advance(1.0)
            if visitor.cell != cells[-1]:
                cells.append(visitor.cell)
        assert all(is_adjacent(a, b) for a, b in zip(cells, cells[1:]))
        assert visitor.is_fascinated or visitor.state is VisitorState.ESCAPING

    def test_exit_reached_while_wandering_completes(self) -> None:
        grid = parse_maze(CORRIDOR_WITH_EXIT)
        visitor = self._visitor(
            grid, GridPathfinder(grid), lantern_wander_min=0, lantern_wander_max=0
        )
        assert visitor.set_path([(1, 0), (2, 0)], destination=grid.heart)
        assert visitor.become_fascinated((3, 0), pause_duration=0.0)
        for _ in range(50):
            visitor.advance(1.0)
            if visitor.is_terminal:
                break
        assert visitor.state is VisitorState.ESCAPING
        assert visitor.cell == (5, 0)
        assert not visitor.is_fascinated

    def test_lost_expiry_keeps_heading_for_attractor(
        self, open_grid: MazeGrid, axis_oracle: PathOracle
    ) -> None:
        visitor = self._visitor(open_grid, axis_oracle)
        visitor.set_path(axis_oracle.try_find_path((0, 0), (9, 0)))
        visitor.set_lost(0.5)
        assert visitor.become_fascinated((0, 9), pause_duration=1.0, attractor_id=7)
        for _ in range(10):
            visitor.advance(0.1)
        assert not visitor.flags.lost
        assert visitor.state is VisitorState.FASCINATED
        assert visitor.path[-1] == (0, 9)

        for _ in range(200):
            visitor.advance(0.1)
            if visitor.fascination is not None and visitor.fascination.reached:
                break
        assert visitor.fascination is not None
        assert visitor.fascination.reached
        assert visitor.cell == (0, 9)

    def test_lure_change_keeps_heading_for_attractor(
        self, open_grid: MazeGrid, axis_oracle: PathOracle
    ) -> None:
        visitor = self._visitor(open_grid, axis_oracle)
        visitor.set_path(axis_oracle.try_find_path((0, 0), (9, 0)))
        assert visitor.become_fascinated((0, 4))
        visitor.set_lured(True)
        assert visitor.is_fascinated
        assert visitor.path[-1] == (0, 4)
        visitor.set_lured(False)
        assert visitor.path[-1] == (0, 4)

    def test_attractor_cut_off_after_state_change_ends_fascination(
        self, open_grid: MazeGrid, axis_oracle: PathOracle
    ) -> None:
        visitor = self._visitor(open_grid, axis_oracle)
        visitor.set_path(axis_oracle.try_find_path((0, 0), (9, 0)))
        assert visitor.become_fascinated((0, 4))
        open_grid.set_walkable((0, 4), False)
        visitor.set_lured(True)
        assert visitor.fascination is None
        assert not visitor.is_fascinated
        assert visitor.path[-1] == (9, 0)

    def test_blocked_wander_step_ends_fascination(self, open_grid: MazeGrid) -> None:
        oracle = GridPathfinder(open_grid)
        visitor = self._visitor(open_grid, oracle)
        assert visitor.set_path(oracle.try_find_path((0, 0), (9, 9)))
        assert visitor.become_fascinated((0, 1), pause_duration=0.0)
        visitor.advance(1.0)
        assert visitor.fascination is not None
        assert visitor.fascination.wandering

        open_grid.set_walkable(visitor.path[visitor.path_index], False)
        visitor.advance(0.1)
        assert visitor.fascination is None
        assert not visitor.is_fascinated
        assert visitor.path[-1] == (9, 9)

    def test_unreachable_attractor_cancels(
        self, open_grid: MazeGrid, no_path_oracle: PathOracle
    ) -> None:
        visitor = self._visitor(open_grid, no_path_oracle)
        visitor.position = (1.0, 1.0)
        assert not visitor.become_fascinated((4, 4))
        assert visitor.fascination is None
        assert not visitor.is_fascinated

    def test_frightened_cancels_fascination(
        self, open_grid: MazeGrid, axis_oracle: PathOracle
    ) -> None:
        visitor = self._visitor(open_grid, axis_oracle)
        visitor.set_path(axis_oracle.try_find_path((0, 0), (9, 9)))
        visitor.become_fascinated((0, 3))
        visitor.set_frightened(2.0)
        assert visitor.fascination is None
        assert visitor.state is VisitorState.FRIGHTENED
