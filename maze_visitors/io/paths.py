"""Path construction helpers for simulation output directories."""

from __future__ import annotations

from pathlib import Path


def logs_dir(out_dir: Path) -> Path:
    """Return path to the logs subdirectory within an output directory."""
    return out_dir / "logs"


def trajectory_log_path(out_dir: Path) -> Path:
    """Return path to the per-tick trajectory Parquet file."""
    return logs_dir(out_dir) / "trajectory.parquet"


def outcomes_path(out_dir: Path) -> Path:
    """Return path to the per-visitor outcome Parquet file."""
    return logs_dir(out_dir) / "outcomes.parquet"


def run_summary_path(out_dir: Path) -> Path:
    """Return path to the JSON run summary."""
    return out_dir / "run.json"
