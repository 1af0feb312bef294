"""Simulation engine: tick loop, visitor spawning, and Parquet persistence."""

from maze_visitors.simulation.engine import run_simulation, spawn_visitors
from maze_visitors.simulation.persistence import flush_trajectory_columns

__all__ = [
    "flush_trajectory_columns",
    "run_simulation",
    "spawn_visitors",
]
