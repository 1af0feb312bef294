"""Configuration layer: constants and typed config dataclasses."""

from maze_visitors.config.constants import (
    CONFUSION_RECOVERY_CHANCE,
    DEFAULT_MAX_TICKS,
    DEFAULT_TICK_SECONDS,
    DIRECTIONS,
    FLUSH_THRESHOLD,
    RECENT_CELLS_SIZE,
    WAYPOINT_EPSILON,
)
from maze_visitors.config.types import (
    ARCHETYPE_PRESETS,
    Archetype,
    ArchetypeConfig,
    DestinationMode,
    DetourKind,
    MazeConfig,
    SimulationConfig,
    SimulationResult,
    VisitorOutcome,
    archetype_config,
)

__all__ = [
    "ARCHETYPE_PRESETS",
    "Archetype",
    "ArchetypeConfig",
    "CONFUSION_RECOVERY_CHANCE",
    "DEFAULT_MAX_TICKS",
    "DEFAULT_TICK_SECONDS",
    "DIRECTIONS",
    "DestinationMode",
    "DetourKind",
    "FLUSH_THRESHOLD",
    "MazeConfig",
    "RECENT_CELLS_SIZE",
    "SimulationConfig",
    "SimulationResult",
    "VisitorOutcome",
    "WAYPOINT_EPSILON",
    "archetype_config",
]
