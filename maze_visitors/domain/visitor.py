"""The visitor agent: waypoint follower, affliction state machine and detour host.

A visitor walks a path of grid cells one waypoint at a time. Arrival at a
waypoint is handled in a fixed order:

1. a fascinated visitor that has just reached its attractor starts pausing;
2. a fascinated visitor wandering after its pause extends its path by one
   step of the depth-first walk whenever it stands on the last waypoint;
3. the destination or any exit other than the entry cell completes the
   journey;
4. otherwise the active detour strategy may splice in a detour.

Every path is validated before it is installed; expected failures (no
route, no candidates) fall back to a direct recalculation and never raise.
"""

from __future__ import annotations

import logging
import math
from collections import deque
from collections.abc import Iterable, Sequence
from random import Random

from maze_visitors.config.constants import (
    DEFAULT_FASCINATION_DURATION,
    MAX_SPEED_MULTIPLIER,
    MIN_SPEED_MULTIPLIER,
    RECENT_CELLS_SIZE,
    TRANCE_EXTENSION_FACTOR,
    WAYPOINT_EPSILON,
)
from maze_visitors.config.types import ArchetypeConfig
from maze_visitors.domain.detours import DetourStrategy, LostDetour, strategy_for
from maze_visitors.domain.fascination import AttractorCooldowns, Fascination, FascinatedWalk
from maze_visitors.domain.grid import MazeGrid
from maze_visitors.domain.navigation import validate_path
from maze_visitors.domain.oracles import Attractor, Cell, PathOracle
from maze_visitors.domain.state import (
    TERMINAL_STATES,
    AfflictionFlags,
    AfflictionTimer,
    VisitorState,
    attraction_multiplier,
    resolve_state,
)

logger = logging.getLogger(__name__)


class Visitor:
    """One autonomous maze visitor."""

    def __init__(
        self,
        grid: MazeGrid,
        pathfinder: PathOracle,
        archetype: ArchetypeConfig | None = None,
        rng: Random | None = None,
        visitor_id: int = 0,
    ) -> None:
        self.visitor_id = visitor_id
        self.grid = grid
        self.pathfinder = pathfinder
        self.archetype = archetype if archetype is not None else ArchetypeConfig()
        self.rng = rng if rng is not None else Random()

        self.position: tuple[float, float] = (0.0, 0.0)
        self.path: list[Cell] = []
        self.path_index = 0
        self.entry_cell: Cell | None = None
        self.original_destination: Cell | None = None

        self.flags = AfflictionFlags()
        self.timer = AfflictionTimer()
        self.stopped = False
        self.entranced = False
        self._state = VisitorState.IDLE
        self._speed_multiplier = 1.0

        self.recent_cells: deque[Cell] = deque(maxlen=RECENT_CELLS_SIZE)
        self.visited_cells: set[Cell] = set()
        self.waypoints_traversed = 0
        self.detours_taken = 0
        self.ticks_alive = 0

        self.strategy: DetourStrategy = strategy_for(self.archetype, self.rng)
        self.lost_strategy = LostDetour(self.archetype, self.rng)
        self.fascination: Fascination | None = None
        self.cooldowns = AttractorCooldowns()
        self._path_replaced = False

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def state(self) -> VisitorState:
        return self._state

    @property
    def cell(self) -> Cell:
        """Grid cell containing the continuous position."""
        x, y = self.position
        return (math.floor(x + 0.5), math.floor(y + 0.5))

    @property
    def is_terminal(self) -> bool:
        return self._state in TERMINAL_STATES

    @property
    def is_fascinated(self) -> bool:
        return self.flags.fascinated

    @property
    def is_entranced(self) -> bool:
        return self.entranced

    @property
    def is_mobile(self) -> bool:
        """Able to move this tick: alive, not stopped, not pausing at an attractor."""
        if self.is_terminal or self.stopped:
            return False
        return self.fascination is None or not self.fascination.pausing

    @property
    def speed_multiplier(self) -> float:
        return self._speed_multiplier

    @speed_multiplier.setter
    def speed_multiplier(self, value: float) -> None:
        self._speed_multiplier = min(max(value, MIN_SPEED_MULTIPLIER), MAX_SPEED_MULTIPLIER)

    @property
    def move_speed(self) -> float:
        """Cells per second before terrain is applied."""
        factor = 1.0
        if self._state is VisitorState.FRIGHTENED:
            factor = self.archetype.frightened_speed_multiplier
        elif self._state is VisitorState.MESMERIZED:
            factor = self.archetype.mesmerized_speed_multiplier
        return self.archetype.base_speed * self._speed_multiplier * factor

    @property
    def attraction_multiplier(self) -> float:
        return attraction_multiplier(self._state)

    @property
    def destination(self) -> Cell | None:
        """Where the visitor is currently heading, given its afflictions."""
        if self.flags.mesmerized and self.grid.heart is not None:
            return self.grid.heart
        if self.flags.frightened and self.archetype.frightened_prefers_exit:
            exit_cell = self._nearest_exit()
            if exit_cell is not None:
                return exit_cell
        return self.original_destination

    def previous_cell(self) -> Cell | None:
        """Cell walked immediately before the current waypoint."""
        if 0 < self.path_index < len(self.path):
            return self.path[self.path_index - 1]
        if len(self.recent_cells) >= 2:
            return self.recent_cells[-2]
        return None

    def next_cell(self) -> Cell | None:
        """Waypoint after the current one, or ``None`` at the end of the path."""
        if self.path_index + 1 < len(self.path):
            return self.path[self.path_index + 1]
        return None

    def _route_origin(self) -> Cell:
        """Cell new routes start from.

        Past the midpoint toward a waypoint the rounded position already
        names that waypoint; once it is blocked, routes start from the last
        cell actually reached instead.
        """
        here = self.cell
        if self.grid.is_walkable(here) or not self.recent_cells:
            return here
        return self.recent_cells[-1]

    def _nearest_exit(self) -> Cell | None:
        here = self.cell
        candidates = [
            (abs(cell[0] - here[0]) + abs(cell[1] - here[1]), name, cell)
            for name, cell in self.grid.spawn_points().items()
            if cell != self.entry_cell
        ]
        return min(candidates)[2] if candidates else None

    def _is_exit(self, cell: Cell) -> bool:
        return cell != self.entry_cell and self.grid.is_spawn_point(cell)

    # ------------------------------------------------------------------
    # Path assignment
    # ------------------------------------------------------------------

    def spawn(self, cell: Cell, destination: Cell) -> bool:
        """Place the visitor at *cell* and route it toward *destination*.

        Returns False when no route exists yet; the visitor then waits in
        place and retries every tick.
        """
        self.position = (float(cell[0]), float(cell[1]))
        self.entry_cell = cell
        self.original_destination = destination
        self._note_cell(cell)
        if self.archetype.starts_mesmerized:
            self.flags.mesmerized = True
            self.timer.arm("mesmerized", self.archetype.initial_mesmerized_duration)
        target = self.destination
        path = self.pathfinder.try_find_path(cell, target, self.attraction_multiplier)
        if path is None:
            logger.debug("visitor %d: no route from %s to %s", self.visitor_id, cell, target)
            return False
        return self.set_path(path, destination)

    def set_path(self, path: Sequence[Cell] | None, destination: Cell | None = None) -> bool:
        """Assign a fresh journey. Empty, invalid or detached paths are ignored."""
        if not path:
            logger.debug("visitor %d: ignored empty path", self.visitor_id)
            return False
        cells = list(path)
        if not validate_path(self.grid, cells):
            logger.warning("visitor %d: rejected invalid path", self.visitor_id)
            return False
        if self.entry_cell is None:
            self.entry_cell = cells[0]
            self.position = (float(cells[0][0]), float(cells[0][1]))
        elif cells[0] != self.cell:
            logger.warning(
                "visitor %d: rejected path not starting at %s", self.visitor_id, self.cell
            )
            return False
        self.original_destination = destination if destination is not None else cells[-1]
        self.strategy.rearm()
        self.lost_strategy.reset()
        self._install(cells)
        self.refresh_state()
        return True

    def recalculate_path(self) -> bool:
        """Replace the path with a direct oracle route to the current destination.

        On failure the existing path is kept untouched.
        """
        target = self.destination
        if target is None:
            return False
        start = self._route_origin()
        path = self.pathfinder.try_find_path(start, target, self.attraction_multiplier)
        if path is None:
            logger.debug("visitor %d: no route from %s to %s", self.visitor_id, start, target)
            return False
        if path[0] != start or not validate_path(self.grid, path):
            logger.warning("visitor %d: discarded invalid route from oracle", self.visitor_id)
            return False
        self._reset_detours()
        self._install(path)
        return True

    def install_detour(self, path: list[Cell]) -> None:
        """Install a validated detour built by a strategy at the current cell."""
        self._install(path)
        self.detours_taken += 1

    def _install(self, path: list[Cell]) -> None:
        self.path = list(path)
        start = path[0]
        at_start = math.dist(self.position, start) <= WAYPOINT_EPSILON
        if at_start:
            self._note_cell(start)
        self.path_index = 1 if at_start and len(path) > 1 else 0
        self._path_replaced = True

    def _note_cell(self, cell: Cell) -> None:
        if not self.recent_cells or self.recent_cells[-1] != cell:
            self.recent_cells.append(cell)
        self.visited_cells.add(cell)

    def _reset_detours(self) -> None:
        self.strategy.reset()
        self.lost_strategy.reset()

    # ------------------------------------------------------------------
    # Per-tick update
    # ------------------------------------------------------------------

    def advance(self, dt: float, attractors: Iterable[Attractor] = ()) -> None:
        """Run one tick: timers, attractor polling, then movement."""
        if self.is_terminal:
            return
        self.ticks_alive += 1
        if self.stopped:
            return
        self.cooldowns.tick(dt)
        expired = self.timer.tick(dt)
        if expired:
            self._on_afflictions_expired(expired)

        fascination = self.fascination
        if fascination is not None and fascination.pausing:
            fascination.pause_remaining -= dt
            if fascination.pause_remaining <= 0:
                self._begin_wander()
            return

        self._poll_attractors(attractors)
        if not self.path:
            self.recalculate_path()
            if not self.path:
                return
        self._move(dt)

    def _move(self, dt: float) -> None:
        target = self.path[self.path_index]
        if not self.grid.is_walkable(target):
            logger.debug("visitor %d: waypoint %s blocked", self.visitor_id, target)
            if self.fascination is not None and self.fascination.wandering:
                self._end_fascination()
            else:
                self._reroute()
            return
        tx, ty = float(target[0]), float(target[1])
        x, y = self.position
        distance = math.dist((x, y), (tx, ty))
        step = self.move_speed * self.grid.speed_multiplier(target[0], target[1]) * dt
        if distance <= step:
            self.position = (tx, ty)
        else:
            self.position = (x + (tx - x) / distance * step, y + (ty - y) / distance * step)
        if math.dist(self.position, (tx, ty)) <= WAYPOINT_EPSILON:
            self.position = (tx, ty)
            self._on_waypoint_reached()

    def _on_waypoint_reached(self) -> None:
        cell = self.path[self.path_index]
        self.waypoints_traversed += 1
        self._note_cell(cell)
        self._path_replaced = False

        fascination = self.fascination
        if (
            fascination is not None
            and not fascination.reached
            and cell == fascination.attractor_cell
        ):
            self._arrive_at_attractor(fascination)
            return
        if (
            fascination is not None
            and fascination.walk is not None
            and self.path_index >= len(self.path) - 1
        ):
            if fascination.budget_spent():
                self._end_fascination()
            else:
                step = fascination.walk.step()
                if step is None:
                    logger.info("visitor %d: fascinated walk exhausted", self.visitor_id)
                    self._complete(cell)
                    return
                self.path.append(step)
        if cell == self.destination or self._is_exit(cell):
            self._complete(cell)
            return
        if self.fascination is None and not (self.flags.mesmerized or self.flags.frightened):
            strategy = self.lost_strategy if self.flags.lost else self.strategy
            strategy.on_waypoint(self, cell)
            self.refresh_state()
        if not self._path_replaced:
            self._advance_index()

    def _advance_index(self) -> None:
        if self.path_index + 1 < len(self.path):
            self.path_index += 1
            return
        self.path = []
        self.path_index = 0
        self.recalculate_path()

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------

    def refresh_state(self) -> VisitorState:
        self._state = resolve_state(
            self._state, self.flags, mid_detour=self.strategy.mid_detour, stopped=self.stopped
        )
        return self._state

    def set_mesmerized(self, duration: float | None = None) -> None:
        self._apply_timed(
            "mesmerized", self.archetype.mesmerized_duration if duration is None else duration
        )

    def set_frightened(self, duration: float | None = None) -> None:
        self._apply_timed(
            "frightened", self.archetype.frightened_duration if duration is None else duration
        )

    def set_lost(self, duration: float | None = None) -> None:
        if duration is None:
            duration = self.rng.uniform(
                self.archetype.lost_duration_min, self.archetype.lost_duration_max
            )
        self._apply_timed("lost", duration)

    def _apply_timed(self, name: str, duration: float) -> None:
        if self.is_terminal:
            return
        if duration <= 0:
            logger.debug("visitor %d: ignored %s with duration %s", self.visitor_id, name, duration)
            return
        setattr(self.flags, name, True)
        self.timer.arm(name, duration)
        if name == "lost":
            self.lost_strategy.reset()
        self._cancel_fascination()
        self.refresh_state()
        self.recalculate_path()

    def _on_afflictions_expired(self, expired: frozenset[str]) -> None:
        for name in expired:
            setattr(self.flags, name, False)
        logger.debug("visitor %d: %s expired", self.visitor_id, ", ".join(sorted(expired)))
        if (
            "mesmerized" in expired
            and self.rng.random() < self.archetype.mesmerized_expiry_lost_chance
        ):
            self.set_lost()
            return
        self.refresh_state()
        self._reroute()

    def set_lured(self, lured: bool) -> None:
        if self.is_terminal or self.flags.lured == lured:
            return
        self.flags.lured = lured
        self.refresh_state()
        self._reroute()

    def _reroute(self) -> bool:
        """Re-path after a state change, keeping an attractor approach alive."""
        fascination = self.fascination
        if fascination is None:
            return self.recalculate_path()
        if fascination.reached:
            # pause and wander paths stay local to the attractor
            return False
        path = self._attractor_route(fascination.attractor_cell)
        if path is None:
            logger.debug(
                "visitor %d: attractor %s unreachable", self.visitor_id, fascination.attractor_cell
            )
            self._end_fascination()
            return False
        self._reset_detours()
        self._install(path)
        return True

    def set_entranced(self, entranced: bool) -> None:
        self.entranced = entranced

    def disturb_trance(self, strength: float) -> None:
        """Shake a mesmerized visitor: it either snaps out lost or sinks deeper."""
        if self.is_terminal or not self.flags.mesmerized:
            return
        if self.rng.random() < min(max(strength, 0.0), 1.0):
            self.flags.mesmerized = False
            self.timer.disarm("mesmerized")
            self.set_lost()
            return
        base = self.archetype.initial_mesmerized_duration or self.archetype.mesmerized_duration
        self.timer.extend(base * TRANCE_EXTENSION_FACTOR)

    def clear_afflictions(self) -> None:
        """Drop every affliction, the shared timer and attractor cooldowns."""
        if self.is_terminal:
            return
        self.flags.clear()
        self.timer.reset()
        self.cooldowns.clear()
        self.fascination = None
        self.lost_strategy.reset()
        self.refresh_state()
        self.recalculate_path()

    def stop(self) -> None:
        if self.is_terminal:
            return
        self.stopped = True
        self.refresh_state()

    def resume(self) -> None:
        if self.is_terminal or not self.stopped:
            return
        self.stopped = False
        self.refresh_state()

    def force_escape(self) -> None:
        if self.is_terminal:
            return
        self._finalize(VisitorState.ESCAPING)

    def _complete(self, cell: Cell) -> None:
        consumed = self.grid.heart is not None and cell == self.grid.heart
        self._finalize(VisitorState.CONSUMED if consumed else VisitorState.ESCAPING)

    def _finalize(self, state: VisitorState) -> None:
        self._state = state
        self.fascination = None
        self.flags.fascinated = False
        logger.info("visitor %d: %s at %s", self.visitor_id, state.value, self.cell)

    # ------------------------------------------------------------------
    # Fascination
    # ------------------------------------------------------------------

    def become_fascinated(
        self,
        attractor_cell: Cell,
        pause_duration: float | None = None,
        attractor_id: int | None = None,
    ) -> bool:
        """Retarget toward *attractor_cell*; cancelled when it cannot be reached."""
        if self.is_terminal or not self.grid.is_walkable(attractor_cell):
            return False
        path = self._attractor_route(attractor_cell)
        if path is None:
            logger.debug("visitor %d: attractor %s unreachable", self.visitor_id, attractor_cell)
            self._cancel_fascination()
            self.refresh_state()
            return False
        if pause_duration is None:
            pause_duration = DEFAULT_FASCINATION_DURATION
        self.fascination = Fascination(
            attractor_cell=attractor_cell,
            attractor_id=attractor_id,
            pause_duration=pause_duration,
        )
        self.flags.fascinated = True
        self._reset_detours()
        self._install(path)
        self.refresh_state()
        logger.debug("visitor %d: fascinated by %s", self.visitor_id, attractor_cell)
        return True

    def _attractor_route(self, attractor_cell: Cell) -> list[Cell] | None:
        start = self._route_origin()
        path = self.pathfinder.try_find_path(start, attractor_cell, 1.0)
        if path is None or path[0] != start or not validate_path(self.grid, path):
            return None
        return list(path)

    def _poll_attractors(self, attractors: Iterable[Attractor]) -> None:
        if self.flags.mesmerized or self.flags.frightened:
            return
        here = self.cell
        current_id = self.fascination.attractor_id if self.fascination is not None else None
        named = self.archetype.archetype is not None
        for attractor in attractors:
            key = attractor.attractor_id
            if key == current_id or not attractor.is_cell_in_influence(here):
                continue
            if not self.cooldowns.ready(key):
                continue
            cooldown = self.archetype.fascination_cooldown if named else attractor.cooldown_sec
            chance = self.archetype.fascination_chance if named else attractor.proc_chance
            self.cooldowns.arm(key, cooldown)
            if self.rng.random() >= chance:
                continue
            if self.become_fascinated(
                attractor.grid_position, attractor.fascination_duration_seconds, key
            ):
                return

    def _arrive_at_attractor(self, fascination: Fascination) -> None:
        fascination.reached = True
        fascination.pause_remaining = fascination.pause_duration
        if fascination.pause_remaining <= 0:
            self._begin_wander()

    def _begin_wander(self) -> None:
        fascination = self.fascination
        if fascination is None:
            return
        fascination.pause_remaining = 0.0
        walk = FascinatedWalk(self.grid, fascination.attractor_cell, self.rng)
        fascination.walk = walk
        if self.archetype.lantern_wander_max > 0:
            fascination.wander_budget = self.rng.randint(
                self.archetype.lantern_wander_min, self.archetype.lantern_wander_max
            )
        first = walk.step()
        if first is None:
            self._complete(fascination.attractor_cell)
            return
        self._install([fascination.attractor_cell, first])

    def _end_fascination(self) -> None:
        self._cancel_fascination()
        self.refresh_state()
        self.recalculate_path()

    def _cancel_fascination(self) -> None:
        self.fascination = None
        self.flags.fascinated = False
