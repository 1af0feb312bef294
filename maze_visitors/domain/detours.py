"""Wrong-turn detour strategies: confusion, misstep and lost wandering.

All strategies share one template. At each reached waypoint the active
strategy first checks whether the detour it installed earlier has been
walked to its end, then, at a decision point, may build a segment, ask the
path oracle for a recovery route from the segment's end to the visitor's
destination, and splice ``[current] + segment + recovery[1:]`` into the
visitor. A failed recovery query or an invalid splice falls back to a
direct recalculation.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from random import Random
from typing import TYPE_CHECKING

from maze_visitors.config.constants import CONFUSION_RECOVERY_CHANCE
from maze_visitors.config.types import ArchetypeConfig, DetourKind
from maze_visitors.domain.navigation import (
    build_confusion_segment,
    build_lost_segment,
    build_misstep_segment,
    dead_end_visible,
    exits,
    heading,
    splice_detour,
    validate_path,
)
from maze_visitors.domain.oracles import Cell

if TYPE_CHECKING:
    from maze_visitors.domain.visitor import Visitor

logger = logging.getLogger(__name__)


class DetourStrategy(ABC):
    """Template for per-waypoint detour decisions."""

    kind: str = "base"

    def __init__(self, archetype: ArchetypeConfig, rng: Random) -> None:
        self.archetype = archetype
        self.rng = rng
        self.segment_active = False
        self.segment_end_index = -1

    @property
    def mid_detour(self) -> bool:
        """True while the visitor is still walking a wrong-turn segment."""
        return self.segment_active

    def reset(self) -> None:
        """Forget any installed segment (the path was replaced elsewhere)."""
        self.segment_active = False
        self.segment_end_index = -1

    def rearm(self) -> None:
        """Reset for a freshly assigned journey."""
        self.reset()

    def on_waypoint(self, visitor: Visitor, cell: Cell) -> bool:
        """Run the hook for *cell*; True when a detour path was installed."""
        if self.segment_active:
            if visitor.path_index < self.segment_end_index:
                return False
            self.reset()
            self._on_segment_end()
        if visitor.next_cell() is None:
            return False
        return self._try_detour(visitor, cell)

    def _on_segment_end(self) -> None:
        return None

    @abstractmethod
    def _try_detour(self, visitor: Visitor, cell: Cell) -> bool: ...

    def _commit(self, visitor: Visitor, cell: Cell, segment: list[Cell]) -> bool:
        if not segment:
            return False
        recovery = visitor.pathfinder.try_find_path(
            segment[-1], visitor.destination, visitor.attraction_multiplier
        )
        if recovery is None:
            logger.debug("%s detour at %s has no recovery route", self.kind, cell)
            visitor.recalculate_path()
            return False
        candidate = splice_detour(cell, segment, recovery)
        if not validate_path(visitor.grid, candidate):
            logger.warning("discarded invalid %s detour at %s", self.kind, cell)
            visitor.recalculate_path()
            return False
        visitor.install_detour(candidate)
        self.segment_active = True
        self.segment_end_index = len(segment)
        logger.debug("%s detour of %d cells from %s", self.kind, len(segment), cell)
        return True


class DirectRouting(DetourStrategy):
    """Never deviates from the oracle's route."""

    kind = "none"

    def _try_detour(self, visitor: Visitor, cell: Cell) -> bool:
        return False


class ConfusionDetour(DetourStrategy):
    """Fixed-length wrong turns at intersections.

    After each segment a coin flip decides whether the visitor stays prone
    to confusion for the rest of its journey.
    """

    kind = "confusion"

    def __init__(self, archetype: ArchetypeConfig, rng: Random) -> None:
        super().__init__(archetype, rng)
        self.confused = True

    def rearm(self) -> None:
        super().rearm()
        self.confused = True

    def _on_segment_end(self) -> None:
        self.confused = self.rng.random() > CONFUSION_RECOVERY_CHANCE

    def _try_detour(self, visitor: Visitor, cell: Cell) -> bool:
        if not self.confused:
            return False
        if visitor.waypoints_traversed <= self.archetype.detour_grace_waypoints:
            return False
        upcoming = visitor.next_cell()
        if upcoming == visitor.destination:
            return False
        options = exits(visitor.grid, cell, visitor.previous_cell())
        if len(options) < 2:
            return False
        if self.rng.random() >= self.archetype.confusion_chance:
            return False
        recent = visitor.recent_cells
        candidates = [n for n in options if n != upcoming and n not in recent]
        if not candidates:
            return False
        first = self.rng.choice(candidates)
        length = self.rng.randint(
            self.archetype.confusion_detour_min, self.archetype.confusion_detour_max
        )
        segment = build_confusion_segment(visitor.grid, cell, first, length, recent, self.rng)
        return self._commit(visitor, cell, segment)


class MisstepDetour(DetourStrategy):
    """Wrong branch taken at unexplored forks, followed to the next fork."""

    kind = "misstep"

    def _try_detour(self, visitor: Visitor, cell: Cell) -> bool:
        walked = visitor.visited_cells
        unwalked = [n for n in visitor.grid.neighbors(cell) if n not in walked]
        if len(unwalked) < 2:
            return False
        if self.rng.random() >= self.archetype.misstep_chance:
            return False
        optimal = visitor.pathfinder.try_find_path(
            cell, visitor.destination, visitor.attraction_multiplier
        )
        if optimal is None or len(optimal) < 2:
            return False
        wrong = [n for n in unwalked if n != optimal[1]]
        if not wrong:
            return False
        first = self.rng.choice(wrong)
        segment = build_misstep_segment(visitor.grid, cell, first, walked)
        return self._commit(visitor, cell, segment)


class LostDetour(DetourStrategy):
    """Long exploratory segments at every branch while the lost timer runs."""

    kind = "lost"

    def _try_detour(self, visitor: Visitor, cell: Cell) -> bool:
        grid = visitor.grid
        options = exits(grid, cell, visitor.previous_cell())
        if len(options) < 2:
            return False
        upcoming = visitor.next_cell()
        recent = visitor.recent_cells
        candidates = [
            n
            for n in options
            if n != upcoming
            and n not in recent
            and not dead_end_visible(grid, cell, heading(cell, n))
        ]
        if not candidates:
            return False
        first = self.rng.choice(candidates)
        length = self.rng.randint(self.archetype.lost_detour_min, self.archetype.lost_detour_max)
        segment = build_lost_segment(grid, cell, first, length, recent, self.rng)
        return self._commit(visitor, cell, segment)


_STRATEGIES: dict[DetourKind, type[DetourStrategy]] = {
    DetourKind.CONFUSION: ConfusionDetour,
    DetourKind.MISSTEP: MisstepDetour,
    DetourKind.NONE: DirectRouting,
}


def strategy_for(archetype: ArchetypeConfig, rng: Random) -> DetourStrategy:
    """Build the per-branch strategy an archetype carries from spawn."""
    return _STRATEGIES[archetype.detour_kind](archetype, rng)
