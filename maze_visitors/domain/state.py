"""Visitor behavioural states, affliction flags and the shared affliction timer.

The effective state is never stored independently of the flags: it is
recomputed by ``resolve_state`` whenever a flag changes, using the fixed
precedence ``mesmerized > frightened > lost > fascinated > lured``.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum


class VisitorState(Enum):
    """Enumerated behavioural mode exposed to collaborators."""

    IDLE = "idle"
    WALKING = "walking"
    FASCINATED = "fascinated"
    CONFUSED = "confused"
    FRIGHTENED = "frightened"
    MESMERIZED = "mesmerized"
    LOST = "lost"
    LURED = "lured"
    CONSUMED = "consumed"
    ESCAPING = "escaping"


TERMINAL_STATES: frozenset[VisitorState] = frozenset(
    {VisitorState.CONSUMED, VisitorState.ESCAPING}
)

AFFLICTION_PRECEDENCE: tuple[tuple[str, VisitorState], ...] = (
    ("mesmerized", VisitorState.MESMERIZED),
    ("frightened", VisitorState.FRIGHTENED),
    ("lost", VisitorState.LOST),
    ("fascinated", VisitorState.FASCINATED),
    ("lured", VisitorState.LURED),
)
"""Flag name -> state, strongest first."""

TIMED_AFFLICTIONS: tuple[str, ...] = ("mesmerized", "frightened", "lost")

ATTRACTION_MULTIPLIERS: dict[VisitorState, float] = {
    VisitorState.FRIGHTENED: -1.0,
    VisitorState.CONFUSED: 0.5,
    VisitorState.LOST: 0.3,
    VisitorState.LURED: 1.0,
}
"""Per-state scale applied to tile attraction by the path oracle (default 1.0)."""


def attraction_multiplier(state: VisitorState) -> float:
    return ATTRACTION_MULTIPLIERS.get(state, 1.0)


@dataclass
class AfflictionFlags:
    """Boolean affliction flags; any combination may be set at once."""

    mesmerized: bool = False
    frightened: bool = False
    lost: bool = False
    fascinated: bool = False
    lured: bool = False

    def any(self) -> bool:
        return any(getattr(self, f.name) for f in fields(self))

    def clear(self) -> None:
        for f in fields(self):
            setattr(self, f.name, False)


def resolve_state(
    current: VisitorState,
    flags: AfflictionFlags,
    *,
    mid_detour: bool = False,
    stopped: bool = False,
) -> VisitorState:
    """Compute the authoritative state from flags.

    Terminal states are sticky. A stopped visitor reads as idle. Otherwise
    the strongest set flag wins; with no flag set the visitor is confused
    while a wrong-turn segment is still being walked and walking otherwise.
    """
    if current in TERMINAL_STATES:
        return current
    if stopped:
        return VisitorState.IDLE
    for name, state in AFFLICTION_PRECEDENCE:
        if getattr(flags, name):
            return state
    if mid_detour:
        return VisitorState.CONFUSED
    return VisitorState.WALKING


@dataclass
class AfflictionTimer:
    """Single countdown shared by every timed affliction.

    Arming replaces the remaining time (last write wins); on expiry every
    affliction armed since the countdown started is reported at once.
    """

    remaining: float = 0.0
    armed: set[str] = field(default_factory=set)

    @property
    def active(self) -> bool:
        return bool(self.armed)

    def arm(self, name: str, duration: float) -> None:
        self.armed.add(name)
        self.remaining = duration

    def extend(self, seconds: float) -> None:
        if self.armed:
            self.remaining += seconds

    def disarm(self, name: str) -> None:
        self.armed.discard(name)
        if not self.armed:
            self.remaining = 0.0

    def reset(self) -> None:
        self.armed.clear()
        self.remaining = 0.0

    def tick(self, dt: float) -> frozenset[str]:
        """Count down by *dt*; return the afflictions that expired this tick."""
        if not self.armed:
            return frozenset()
        self.remaining -= dt
        if self.remaining > 0:
            return frozenset()
        expired = frozenset(self.armed)
        self.reset()
        return expired
