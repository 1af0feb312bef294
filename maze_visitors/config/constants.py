"""Centralized constants for visitor navigation and simulation runs.

All magic numbers that appear across multiple modules are defined here.
Consuming modules should import from this module rather than defining
their own inline literals.
"""

from __future__ import annotations

DIRECTIONS: tuple[tuple[int, int], ...] = ((0, -1), (1, 0), (0, 1), (-1, 0))
"""Four-neighbour offsets in fixed N, E, S, W order (y grows downward)."""

RECENT_CELLS_SIZE = 10
"""Length of the per-visitor ring buffer of recently visited cells."""

WAYPOINT_EPSILON = 0.05
"""Distance (in cells) at which a waypoint counts as reached."""

CONFUSION_SAFETY_LIMIT = 250
"""Iteration cap when building a confusion segment."""

MISSTEP_SAFETY_LIMIT = 200
"""Iteration cap when building a misstep segment."""

LOST_SAFETY_LIMIT = 250
"""Iteration cap when building a lost segment."""

MIN_SPEED_MULTIPLIER = 0.1
"""Lower clamp for the settable runtime speed multiplier."""

MAX_SPEED_MULTIPLIER = 2.0
"""Upper clamp for the settable runtime speed multiplier."""

MIN_MOVE_COST = 0.1
"""Floor for attraction-adjusted tile move cost."""

CONFUSION_RECOVERY_CHANCE = 0.5
"""Probability that a visitor stops being confused once a confusion segment ends."""

TRANCE_EXTENSION_FACTOR = 0.5
"""Fraction of the initial trance added when a trance disturbance fails."""

DEFAULT_MESMERIZED_DURATION = 4.0
"""Fallback mesmerize duration in seconds."""

DEFAULT_FRIGHTENED_DURATION = 3.0
"""Fallback frighten duration in seconds."""

DEFAULT_INFLUENCE_RADIUS = 8
"""Default attractor influence radius in walkable steps."""

DEFAULT_FASCINATION_DURATION = 2.0
"""Default pause at an attractor in seconds."""

DEFAULT_PROC_CHANCE = 0.5
"""Default attractor fascination chance."""

DEFAULT_COOLDOWN_SEC = 3.0
"""Default per-attractor retrigger cooldown in seconds."""

DEFAULT_TICK_SECONDS = 0.1
"""Default simulated seconds per tick."""

DEFAULT_MAX_TICKS = 2_000
"""Default tick cap for one simulation run."""

FLUSH_THRESHOLD = 8_192
"""Flush trajectory rows to Parquet once this in-memory row count is reached."""
