"""Parquet persistence helpers for trajectory streams."""

from __future__ import annotations

from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq

from maze_visitors.io.schemas import TRAJECTORY_SCHEMA


def new_trajectory_columns() -> dict[str, list[int | float | str]]:
    """Empty in-memory column buffers matching ``TRAJECTORY_SCHEMA``."""
    return {name: [] for name in TRAJECTORY_SCHEMA.names}


def flush_trajectory_columns(
    columns: dict[str, list[int | float | str]],
    trajectory_path: Path,
    writer: pq.ParquetWriter | None,
) -> pq.ParquetWriter | None:
    """Write accumulated trajectory rows to Parquet and clear in-memory buffers."""
    if not columns["run_id"]:
        return writer
    table = pa.Table.from_pydict(columns, schema=TRAJECTORY_SCHEMA)
    if writer is None:
        writer = pq.ParquetWriter(trajectory_path, TRAJECTORY_SCHEMA)
    writer.write_table(table)
    for values in columns.values():
        values.clear()
    return writer
