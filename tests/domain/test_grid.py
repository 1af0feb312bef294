"""Tests for maze_visitors.domain.grid module."""

from __future__ import annotations

from pathlib import Path

import pytest

from maze_visitors.domain.grid import MazeGrid, parse_maze
from maze_visitors.domain.oracles import TerrainKind

SMALL_MAZE = "\n".join(
    [
        "#E###",
        "#.;.#",
        "#.#.#",
        "#..H#",
        "###E#",
    ]
)


class TestParseMaze:
    def test_dimensions_and_walkable_count(self) -> None:
        grid = parse_maze(SMALL_MAZE)
        assert (grid.width, grid.height) == (5, 5)
        assert grid.walkable_count() == 10

    def test_spawn_points_named_in_scan_order(self) -> None:
        grid = parse_maze(SMALL_MAZE)
        assert grid.spawn_points() == {"E0": (1, 0), "E1": (3, 4)}
        assert grid.is_spawn_point((3, 4))
        assert not grid.is_spawn_point((3, 3))

    def test_heart_marker(self) -> None:
        grid = parse_maze(SMALL_MAZE)
        assert grid.heart == (3, 3)
        assert grid.is_walkable((3, 3))

    def test_lantern_markers(self) -> None:
        grid = parse_maze("L.E\n###")
        assert grid.lantern_cells == [(0, 0)]
        assert grid.is_walkable((0, 0))

    def test_terrain_kinds(self) -> None:
        grid = parse_maze(SMALL_MAZE)
        assert grid.terrain_at((2, 1)) is TerrainKind.UNDERGROWTH
        assert grid.terrain_at((0, 0)) is TerrainKind.TREES
        node = grid.get_node(2, 1)
        assert node is not None
        assert node.walkable
        assert node.base_cost == 1.5

    def test_water_is_not_walkable(self) -> None:
        grid = parse_maze(".~.")
        assert not grid.is_walkable((1, 0))
        assert grid.terrain_at((1, 0)) is TerrainKind.WATER

    def test_unknown_glyph_is_wall(self) -> None:
        grid = parse_maze(".?.")
        assert not grid.is_walkable((1, 0))

    def test_short_rows_are_padded_with_walls(self) -> None:
        grid = parse_maze("..\n.")
        assert grid.width == 2
        assert not grid.is_walkable((1, 1))

    def test_blank_outer_lines_ignored(self) -> None:
        grid = parse_maze("\n\n...\n\n")
        assert (grid.width, grid.height) == (3, 1)

    def test_empty_text_raises(self) -> None:
        with pytest.raises(ValueError, match="at least one row"):
            parse_maze("\n  \n")

    def test_heart_defaults_to_nearest_walkable_centre(self) -> None:
        grid = parse_maze("#.#\n###\n#.#")
        assert grid.heart == (1, 0)

    def test_from_file(self, tmp_path: Path) -> None:
        maze_file = tmp_path / "maze.txt"
        maze_file.write_text(SMALL_MAZE, encoding="utf-8")
        assert MazeGrid.from_file(maze_file).spawn_points() == {"E0": (1, 0), "E1": (3, 4)}


class TestGridQueries:
    def test_neighbors_in_fixed_order(self) -> None:
        grid = parse_maze(SMALL_MAZE)
        assert grid.neighbors((1, 1)) == [(1, 0), (2, 1), (1, 2)]

    def test_open_field_neighbors(self) -> None:
        grid = MazeGrid.open_field(3, 3)
        assert grid.neighbors((1, 1)) == [(1, 0), (2, 1), (1, 2), (0, 1)]
        assert grid.neighbors((0, 0)) == [(1, 0), (0, 1)]

    def test_get_node_out_of_bounds(self) -> None:
        grid = MazeGrid.open_field(3, 3)
        assert grid.get_node(-1, 0) is None
        assert grid.get_node(3, 0) is None

    def test_speed_multiplier(self) -> None:
        grid = parse_maze(SMALL_MAZE)
        assert grid.speed_multiplier(1, 1) == 1.0
        assert grid.speed_multiplier(2, 1) == 0.6
        assert grid.speed_multiplier(99, 99) == 1.0

    def test_move_cost_with_attraction(self) -> None:
        grid = MazeGrid.open_field(3, 3)
        grid.add_attraction((1, 1), 0.5)
        assert grid.move_cost((1, 1)) == pytest.approx(0.5)
        assert grid.move_cost((1, 1), -1.0) == pytest.approx(1.5)
        assert grid.move_cost((1, 1), 0.0) == pytest.approx(1.0)

    def test_move_cost_floor(self) -> None:
        grid = MazeGrid.open_field(3, 3)
        grid.add_attraction((1, 1), 5.0)
        assert grid.move_cost((1, 1)) == pytest.approx(0.1)

    def test_move_cost_of_wall_is_infinite(self) -> None:
        grid = parse_maze(SMALL_MAZE)
        assert grid.move_cost((0, 0)) == float("inf")

    def test_clear_attraction(self) -> None:
        grid = MazeGrid.open_field(3, 3)
        grid.add_attraction((1, 1), 0.5)
        grid.clear_attraction()
        assert grid.get_node(1, 1).attraction == 0.0  # type: ignore[union-attr]


class TestGridGraph:
    def test_graph_covers_walkable_cells(self) -> None:
        grid = parse_maze(SMALL_MAZE)
        graph = grid.to_graph()
        assert graph.number_of_nodes() == 10
        assert graph.has_edge((1, 0), (1, 1))
        assert not graph.has_edge((1, 2), (3, 2))

    def test_graph_cached_until_mutation(self) -> None:
        grid = MazeGrid.open_field(4, 4)
        first = grid.to_graph()
        assert grid.to_graph() is first
        version = grid.version
        grid.set_walkable((1, 1), False)
        assert grid.version == version + 1
        rebuilt = grid.to_graph()
        assert rebuilt is not first
        assert (1, 1) not in rebuilt

    def test_flood_fill_radius(self) -> None:
        grid = parse_maze(SMALL_MAZE)
        assert grid.flood_fill((1, 0), 2) == {(1, 0), (1, 1), (2, 1), (1, 2)}
        assert grid.flood_fill((1, 0), 0) == {(1, 0)}

    def test_flood_fill_from_wall_is_empty(self) -> None:
        grid = parse_maze(SMALL_MAZE)
        assert grid.flood_fill((0, 0), 3) == set()
