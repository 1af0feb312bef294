"""Parquet schema definitions for simulation artifacts.

Every module that writes or reads run output works against these column
contracts.
"""

from __future__ import annotations

import pyarrow as pa

RUN_PAYLOAD_SCHEMA_VERSION = 1

TRAJECTORY_SCHEMA = pa.schema(
    [
        ("run_id", pa.string()),
        ("tick", pa.int64()),
        ("visitor_id", pa.int64()),
        ("archetype", pa.string()),
        ("x", pa.float64()),
        ("y", pa.float64()),
        ("cell_x", pa.int64()),
        ("cell_y", pa.int64()),
        ("state", pa.string()),
        ("path_index", pa.int64()),
        ("path_length", pa.int64()),
    ]
)

OUTCOME_SCHEMA = pa.schema(
    [
        ("run_id", pa.string()),
        ("visitor_id", pa.int64()),
        ("archetype", pa.string()),
        ("outcome", pa.string()),
        ("ticks_alive", pa.int64()),
        ("waypoints_traversed", pa.int64()),
        ("detours_taken", pa.int64()),
    ]
)
