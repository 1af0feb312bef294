"""Tick-driven simulation engine: spawn visitors, advance them, log trajectories."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from random import Random

import pyarrow as pa
import pyarrow.parquet as pq

from maze_visitors.config.constants import FLUSH_THRESHOLD
from maze_visitors.config.types import (
    ARCHETYPE_PRESETS,
    DestinationMode,
    MazeConfig,
    SimulationConfig,
    SimulationResult,
    VisitorOutcome,
)
from maze_visitors.domain.attractors import Lantern
from maze_visitors.domain.grid import MazeGrid, parse_maze
from maze_visitors.domain.maze_gen import generate_maze
from maze_visitors.domain.oracles import Cell
from maze_visitors.domain.pathfinding import GridPathfinder, manhattan
from maze_visitors.domain.registry import VisitorRegistry
from maze_visitors.domain.visitor import Visitor
from maze_visitors.io.paths import (
    logs_dir,
    outcomes_path,
    run_summary_path,
    trajectory_log_path,
)
from maze_visitors.io.schemas import OUTCOME_SCHEMA, RUN_PAYLOAD_SCHEMA_VERSION
from maze_visitors.simulation.persistence import (
    flush_trajectory_columns,
    new_trajectory_columns,
)

logger = logging.getLogger(__name__)


def _destination_for(grid: MazeGrid, entrance: Cell, mode: DestinationMode) -> Cell:
    """Heart, or the exit farthest from *entrance* (falling back to the heart)."""
    if mode is DestinationMode.EXIT:
        exits = [cell for cell in grid.spawn_points().values() if cell != entrance]
        if exits:
            return max(exits, key=lambda cell: (manhattan(entrance, cell), cell))
    if grid.heart is None:
        raise ValueError("maze has no walkable cell to use as the heart")
    return grid.heart


def spawn_visitors(
    grid: MazeGrid,
    pathfinder: GridPathfinder,
    config: SimulationConfig,
    rng: Random,
) -> VisitorRegistry:
    """Register ``config.n_visitors`` visitors, round-robin over entrances and archetypes."""
    entrances = list(grid.spawn_points().values())
    if not entrances:
        raise ValueError("maze must contain at least one spawn point 'E'")
    registry = VisitorRegistry()
    for visitor_id in range(config.n_visitors):
        archetype = ARCHETYPE_PRESETS[config.archetypes[visitor_id % len(config.archetypes)]]
        entrance = entrances[visitor_id % len(entrances)]
        visitor = Visitor(
            grid,
            pathfinder,
            archetype=archetype,
            rng=Random(rng.randrange(2**32)),
            visitor_id=visitor_id,
        )
        visitor.spawn(entrance, _destination_for(grid, entrance, config.destination))
        registry.register(visitor)
    return registry


def _append_row(
    columns: dict[str, list[int | float | str]], run_id: str, tick: int, visitor: Visitor
) -> None:
    cell_x, cell_y = visitor.cell
    columns["run_id"].append(run_id)
    columns["tick"].append(tick)
    columns["visitor_id"].append(visitor.visitor_id)
    columns["archetype"].append(visitor.archetype.name)
    columns["x"].append(visitor.position[0])
    columns["y"].append(visitor.position[1])
    columns["cell_x"].append(cell_x)
    columns["cell_y"].append(cell_y)
    columns["state"].append(visitor.state.value)
    columns["path_index"].append(visitor.path_index)
    columns["path_length"].append(len(visitor.path))


def _outcome(visitor: Visitor) -> VisitorOutcome:
    return VisitorOutcome(
        visitor_id=visitor.visitor_id,
        archetype=visitor.archetype.name,
        outcome=visitor.state.value if visitor.is_terminal else "active",
        ticks_alive=visitor.ticks_alive,
        waypoints_traversed=visitor.waypoints_traversed,
        detours_taken=visitor.detours_taken,
    )


def _write_outcomes(path: Path, run_id: str, outcomes: list[VisitorOutcome]) -> None:
    table = pa.Table.from_pydict(
        {
            "run_id": [run_id] * len(outcomes),
            "visitor_id": [o.visitor_id for o in outcomes],
            "archetype": [o.archetype for o in outcomes],
            "outcome": [o.outcome for o in outcomes],
            "ticks_alive": [o.ticks_alive for o in outcomes],
            "waypoints_traversed": [o.waypoints_traversed for o in outcomes],
            "detours_taken": [o.detours_taken for o in outcomes],
        },
        schema=OUTCOME_SCHEMA,
    )
    pq.write_table(table, path)


def run_simulation(
    config: SimulationConfig,
    out_dir: Path,
    maze_text: str | None = None,
    maze_config: MazeConfig | None = None,
) -> SimulationResult:
    """Run one seeded simulation and persist its artifacts under *out_dir*.

    Writes ``logs/trajectory.parquet`` (one row per visitor per tick while
    registered), ``logs/outcomes.parquet`` and ``run.json``. When
    *maze_text* is omitted a maze is generated from *maze_config*.
    """
    if maze_text is None:
        maze_config = maze_config if maze_config is not None else MazeConfig()
        maze_text = generate_maze(maze_config, Random(maze_config.seed))
        run_id = f"sim_ms{maze_config.seed}_ss{config.sim_seed}"
    else:
        run_id = f"sim_custom_ss{config.sim_seed}"

    grid = parse_maze(maze_text)
    pathfinder = GridPathfinder(grid)
    lanterns = [
        Lantern(attractor_id=i, grid_position=cell).bind(grid)
        for i, cell in enumerate(grid.lantern_cells)
    ]
    registry = spawn_visitors(grid, pathfinder, config, Random(config.sim_seed))

    logs_dir(out_dir).mkdir(parents=True, exist_ok=True)
    trajectory_path = trajectory_log_path(out_dir)
    columns = new_trajectory_columns()
    writer: pq.ParquetWriter | None = None
    outcomes: list[VisitorOutcome] = []
    ticks_run = 0
    logger.info(
        "run %s: %d visitors on %dx%d maze", run_id, len(registry), grid.width, grid.height
    )

    try:
        for tick in range(config.max_ticks):
            if not registry:
                break
            ticks_run = tick + 1
            for handle, visitor in registry.items():
                visitor.advance(config.tick_seconds, lanterns)
                _append_row(columns, run_id, tick, visitor)
                if visitor.is_terminal:
                    outcomes.append(_outcome(visitor))
                    registry.unregister(handle)
            if len(columns["run_id"]) >= FLUSH_THRESHOLD:
                writer = flush_trajectory_columns(columns, trajectory_path, writer)
        writer = flush_trajectory_columns(columns, trajectory_path, writer)
    finally:
        if writer is not None:
            writer.close()

    outcomes.extend(_outcome(visitor) for _handle, visitor in registry.items())
    outcomes.sort(key=lambda o: o.visitor_id)
    _write_outcomes(outcomes_path(out_dir), run_id, outcomes)

    result = SimulationResult(run_id=run_id, ticks_run=ticks_run, outcomes=tuple(outcomes))
    payload = {
        "schema_version": RUN_PAYLOAD_SCHEMA_VERSION,
        "run_id": run_id,
        "ticks_run": ticks_run,
        "config": {
            "n_visitors": config.n_visitors,
            "archetypes": [a.value for a in config.archetypes],
            "max_ticks": config.max_ticks,
            "tick_seconds": config.tick_seconds,
            "sim_seed": config.sim_seed,
            "destination": config.destination.value,
        },
        "maze": {
            "width": grid.width,
            "height": grid.height,
            "spawn_points": {name: list(cell) for name, cell in grid.spawn_points().items()},
            "heart": list(grid.heart) if grid.heart is not None else None,
            "lanterns": [list(cell) for cell in grid.lantern_cells],
        },
        "outcomes": {
            "consumed": result.count("consumed"),
            "escaping": result.count("escaping"),
            "active": result.count("active"),
        },
    }
    run_summary_path(out_dir).write_text(
        json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8"
    )
    logger.info("run %s finished after %d ticks", run_id, ticks_run)
    return result
