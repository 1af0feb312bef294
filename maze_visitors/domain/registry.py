"""Handle-keyed registry of live visitors with capability filters."""

from __future__ import annotations

from collections.abc import Callable, Iterator

from maze_visitors.domain.state import VisitorState
from maze_visitors.domain.visitor import Visitor


class VisitorRegistry:
    """Visitors keyed by integer handles issued in registration order.

    Handles are never reused within one registry, so a stale handle held by
    a collaborator simply stops resolving once its visitor is removed.
    """

    def __init__(self) -> None:
        self._visitors: dict[int, Visitor] = {}
        self._next_handle = 0

    def register(self, visitor: Visitor) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self._visitors[handle] = visitor
        return handle

    def unregister(self, handle: int) -> Visitor | None:
        return self._visitors.pop(handle, None)

    def get(self, handle: int) -> Visitor | None:
        return self._visitors.get(handle)

    def clear(self) -> None:
        self._visitors.clear()

    def __len__(self) -> int:
        return len(self._visitors)

    def __contains__(self, handle: object) -> bool:
        return handle in self._visitors

    def handles(self) -> list[int]:
        return sorted(self._visitors)

    def items(self) -> Iterator[tuple[int, Visitor]]:
        """Snapshot iteration in handle order; safe to unregister while looping."""
        for handle in self.handles():
            yield handle, self._visitors[handle]

    def query(self, predicate: Callable[[Visitor], bool]) -> list[tuple[int, Visitor]]:
        return [(h, v) for h, v in self.items() if predicate(v)]

    def in_states(self, *states: VisitorState) -> list[tuple[int, Visitor]]:
        wanted = frozenset(states)
        return self.query(lambda v: v.state in wanted)

    def mobile(self) -> list[tuple[int, Visitor]]:
        """Visitors currently able to move (what hazards scan for)."""
        return self.query(lambda v: v.is_mobile)
