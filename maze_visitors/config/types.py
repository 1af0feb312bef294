"""Configuration dataclasses for visitor archetypes, mazes, and simulation runs.

All frozen dataclasses that parameterise visitor behaviour and simulation
runs live here, alongside the result containers written by the engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from maze_visitors.config.constants import (
    DEFAULT_FRIGHTENED_DURATION,
    DEFAULT_MAX_TICKS,
    DEFAULT_MESMERIZED_DURATION,
    DEFAULT_TICK_SECONDS,
)

__all__ = [
    "ARCHETYPE_PRESETS",
    "Archetype",
    "ArchetypeConfig",
    "DestinationMode",
    "DetourKind",
    "MazeConfig",
    "SimulationConfig",
    "SimulationResult",
    "VisitorOutcome",
    "archetype_config",
]

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class Archetype(Enum):
    """Named visitor temperaments with preset tuning."""

    LANTERN_DRUNK = "lantern_drunk"
    WARY_WAYFARER = "wary_wayfarer"
    SLEEPWALKING_DEVOTEE = "sleepwalking_devotee"


class DetourKind(Enum):
    """Per-branch wrong-turn strategy a visitor carries from spawn."""

    CONFUSION = "confusion"
    MISSTEP = "misstep"
    NONE = "none"


class DestinationMode(Enum):
    """Where spawned visitors are sent."""

    HEART = "heart"
    EXIT = "exit"


def _check_chance(value: float, name: str) -> None:
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"{name} must be in [0.0, 1.0]")


def _check_range(low: float, high: float, name: str) -> None:
    if low < 0:
        raise ValueError(f"{name}_min must be >= 0")
    if high < low:
        raise ValueError(f"{name}_max must be >= {name}_min")


# ---------------------------------------------------------------------------
# Archetype tuning
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ArchetypeConfig:
    """Immutable, shared tuning for one visitor temperament.

    Defaults are the neutral baseline; ``ARCHETYPE_PRESETS`` holds the
    named variants.
    """

    archetype: Archetype | None = None
    base_speed: float = 1.0
    detour_kind: DetourKind = DetourKind.CONFUSION
    confusion_chance: float = 0.25
    confusion_detour_min: int = 15
    confusion_detour_max: int = 20
    detour_grace_waypoints: int = 0
    misstep_chance: float = 0.2
    fascination_chance: float = 0.5
    fascination_cooldown: float = 3.0
    lantern_wander_min: int = 4
    lantern_wander_max: int = 8
    lost_detour_min: int = 5
    lost_detour_max: int = 10
    lost_duration_min: float = 5.0
    lost_duration_max: float = 10.0
    frightened_duration: float = DEFAULT_FRIGHTENED_DURATION
    frightened_speed_multiplier: float = 1.2
    frightened_prefers_exit: bool = False
    mesmerized_duration: float = DEFAULT_MESMERIZED_DURATION
    mesmerized_speed_multiplier: float = 0.5
    starts_mesmerized: bool = False
    initial_mesmerized_duration: float = 0.0
    mesmerized_expiry_lost_chance: float = 0.0

    def __post_init__(self) -> None:
        if self.base_speed <= 0:
            raise ValueError("base_speed must be > 0")
        _check_chance(self.confusion_chance, "confusion_chance")
        _check_chance(self.misstep_chance, "misstep_chance")
        _check_chance(self.fascination_chance, "fascination_chance")
        _check_chance(self.mesmerized_expiry_lost_chance, "mesmerized_expiry_lost_chance")
        if self.confusion_detour_min < 1:
            raise ValueError("confusion_detour_min must be >= 1")
        _check_range(self.confusion_detour_min, self.confusion_detour_max, "confusion_detour")
        if self.lost_detour_min < 1:
            raise ValueError("lost_detour_min must be >= 1")
        _check_range(self.lost_detour_min, self.lost_detour_max, "lost_detour")
        _check_range(self.lost_duration_min, self.lost_duration_max, "lost_duration")
        _check_range(self.lantern_wander_min, self.lantern_wander_max, "lantern_wander")
        if self.detour_grace_waypoints < 0:
            raise ValueError("detour_grace_waypoints must be >= 0")
        if self.fascination_cooldown < 0:
            raise ValueError("fascination_cooldown must be >= 0")
        if self.frightened_duration <= 0:
            raise ValueError("frightened_duration must be > 0")
        if self.mesmerized_duration <= 0:
            raise ValueError("mesmerized_duration must be > 0")
        if self.frightened_speed_multiplier <= 0:
            raise ValueError("frightened_speed_multiplier must be > 0")
        if self.mesmerized_speed_multiplier <= 0:
            raise ValueError("mesmerized_speed_multiplier must be > 0")
        if self.initial_mesmerized_duration < 0:
            raise ValueError("initial_mesmerized_duration must be >= 0")
        if self.starts_mesmerized and self.initial_mesmerized_duration <= 0:
            raise ValueError("initial_mesmerized_duration must be > 0 when starts_mesmerized")

    @property
    def name(self) -> str:
        """Archetype value, or ``"default"`` for the unnamed baseline."""
        return self.archetype.value if self.archetype is not None else "default"


ARCHETYPE_PRESETS: dict[Archetype, ArchetypeConfig] = {
    Archetype.LANTERN_DRUNK: ArchetypeConfig(
        archetype=Archetype.LANTERN_DRUNK,
        base_speed=0.85,
        detour_kind=DetourKind.CONFUSION,
        confusion_chance=0.4,
        confusion_detour_min=4,
        confusion_detour_max=8,
        detour_grace_waypoints=10,
        fascination_chance=0.8,
        fascination_cooldown=3.0,
        lantern_wander_min=6,
        lantern_wander_max=12,
        lost_detour_min=6,
        lost_detour_max=12,
    ),
    Archetype.WARY_WAYFARER: ArchetypeConfig(
        archetype=Archetype.WARY_WAYFARER,
        base_speed=1.1,
        detour_kind=DetourKind.MISSTEP,
        misstep_chance=0.2,
        fascination_chance=0.2,
        fascination_cooldown=5.0,
        lantern_wander_min=2,
        lantern_wander_max=4,
        frightened_duration=4.0,
        frightened_speed_multiplier=1.4,
        frightened_prefers_exit=True,
    ),
    Archetype.SLEEPWALKING_DEVOTEE: ArchetypeConfig(
        archetype=Archetype.SLEEPWALKING_DEVOTEE,
        base_speed=0.9,
        detour_kind=DetourKind.NONE,
        fascination_chance=0.35,
        lantern_wander_min=3,
        lantern_wander_max=6,
        mesmerized_speed_multiplier=0.6,
        starts_mesmerized=True,
        initial_mesmerized_duration=8.0,
        mesmerized_expiry_lost_chance=0.5,
    ),
}


def archetype_config(name: str) -> ArchetypeConfig:
    """Resolve a preset by its enum value (e.g. ``"lantern_drunk"``)."""
    try:
        return ARCHETYPE_PRESETS[Archetype(name)]
    except ValueError as exc:
        valid = ", ".join(a.value for a in Archetype)
        raise ValueError(f"archetype must be one of {valid}") from exc


# ---------------------------------------------------------------------------
# Run configuration
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MazeConfig:
    """Parameters for a generated maze."""

    width: int = 21
    height: int = 21
    entrances: int = 2
    lanterns: int = 2
    seed: int = 0

    def __post_init__(self) -> None:
        if self.width < 5 or self.width % 2 == 0:
            raise ValueError("width must be odd and >= 5")
        if self.height < 5 or self.height % 2 == 0:
            raise ValueError("height must be odd and >= 5")
        if self.entrances < 1:
            raise ValueError("entrances must be >= 1")
        border_slots = (self.width // 2 + self.height // 2) * 2
        if self.entrances > border_slots:
            raise ValueError(f"entrances must be <= {border_slots}")
        if self.lanterns < 0:
            raise ValueError("lanterns must be >= 0")


@dataclass(frozen=True)
class SimulationConfig:
    """Runtime knobs for one tick-driven simulation run."""

    n_visitors: int = 6
    archetypes: tuple[Archetype, ...] = tuple(Archetype)
    max_ticks: int = DEFAULT_MAX_TICKS
    tick_seconds: float = DEFAULT_TICK_SECONDS
    sim_seed: int = 0
    destination: DestinationMode = DestinationMode.HEART

    def __post_init__(self) -> None:
        if self.n_visitors < 1:
            raise ValueError("n_visitors must be >= 1")
        if not self.archetypes:
            raise ValueError("archetypes must not be empty")
        if self.max_ticks < 1:
            raise ValueError("max_ticks must be >= 1")
        if self.tick_seconds <= 0:
            raise ValueError("tick_seconds must be > 0")


# ---------------------------------------------------------------------------
# Result containers
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class VisitorOutcome:
    """Final record for one spawned visitor."""

    visitor_id: int
    archetype: str
    outcome: str
    ticks_alive: int
    waypoints_traversed: int
    detours_taken: int


@dataclass(frozen=True)
class SimulationResult:
    """Top-level result for one simulation run."""

    run_id: str
    ticks_run: int
    outcomes: tuple[VisitorOutcome, ...] = field(default_factory=tuple)

    def count(self, outcome: str) -> int:
        """Number of visitors that finished with *outcome*."""
        return sum(1 for o in self.outcomes if o.outcome == outcome)
