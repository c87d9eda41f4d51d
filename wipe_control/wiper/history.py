"""Distance-bounded history of printing moves with single-level undo.

The history keeps just enough of the most recent extrusion path to wipe
over::

    starting_position -> positions[0] -> positions[1] -> ... -> positions[-1]
    |<------------------------- total_distance ------------------------->|

``starting_position`` is the anchor one step before the oldest kept
entry; ``total_distance`` is the XY length of the path from the anchor
through every kept entry.

Undo
----
:meth:`PositionHistory.save_undo_data` snapshots the whole state (anchor,
distance and the position sequence) and :meth:`undo` restores it.  Only
one snapshot exists; saving again replaces it.  Positions are immutable,
so a snapshot is a shallow tuple copy and never aliases live state.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Iterator

from wipe_control.wipe_ir.positions import Position
from wipe_control.wiper.utilities import (
    get_cartesian_distance,
    greater_than,
    less_than,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _UndoSnapshot:
    positions: tuple[Position, ...]
    starting_position: Position | None
    total_distance: float


def _distance(a: Position, b: Position) -> float:
    return get_cartesian_distance(a.x, a.y, b.x, b.y)


def trim_path(
    starting_position: Position | None,
    positions: tuple[Position, ...],
    total_distance: float,
    required_distance: float,
) -> tuple[Position | None, tuple[Position, ...], float]:
    """Drop leading segments that are not needed to cover a distance.

    Pure counterpart of :meth:`PositionHistory.prune`: the anchor walks
    forward over the oldest entries while the remaining path stays at
    least ``required_distance`` long.

    Returns
    -------
    tuple
        ``(starting_position, kept_positions, total_distance)``.
    """
    start = 0
    while (
        start < len(positions)
        and starting_position is not None
        and greater_than(total_distance, required_distance)
    ):
        front = positions[start]
        new_total_distance = total_distance - _distance(starting_position, front)
        if less_than(new_total_distance, required_distance):
            break
        starting_position = front
        total_distance = max(new_total_distance, 0.0)
        start += 1
    return starting_position, positions[start:], total_distance


class PositionHistory:
    """Ordered, distance-pruned buffer of printing moves (oldest first)."""

    def __init__(self) -> None:
        self._positions: deque[Position] = deque()
        self._starting_position: Position | None = None
        self._total_distance: float = 0.0
        self._undo: _UndoSnapshot | None = None

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._positions)

    def __iter__(self) -> Iterator[Position]:
        return iter(self._positions)

    @property
    def positions(self) -> tuple[Position, ...]:
        """Kept positions, oldest first."""
        return tuple(self._positions)

    @property
    def starting_position(self) -> Position | None:
        return self._starting_position

    @property
    def total_distance(self) -> float:
        return self._total_distance

    @property
    def has_undo(self) -> bool:
        return self._undo is not None

    def peek(self) -> Position:
        """Return the oldest kept position.

        Raises
        ------
        IndexError
            If the history is empty.
        """
        if not self._positions:
            raise IndexError("peek from an empty position history")
        return self._positions[0]

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def clear(self) -> None:
        """Drop every kept position and reset the distance to zero."""
        self._positions.clear()
        self._total_distance = 0.0

    def append(self, current: Position, previous: Position) -> None:
        """Record the printing move ``previous -> current``.

        When the history is empty, ``previous`` becomes the new anchor.
        """
        if not self._positions:
            self._starting_position = previous
        self._positions.append(current)
        self._total_distance += _distance(previous, current)

    def prune(self, required_distance: float) -> int:
        """Drop the oldest entries while more than ``required_distance`` remains.

        An entry is only removed if the remaining path would still be at
        least ``required_distance`` long; keeping a little extra is
        preferred over falling short.

        Parameters
        ----------
        required_distance : float
            Wipe distance the history must still be able to cover (mm).

        Returns
        -------
        int
            Number of entries removed.
        """
        starting_position, kept, total_distance = trim_path(
            self._starting_position,
            tuple(self._positions),
            self._total_distance,
            required_distance,
        )
        removed = len(self._positions) - len(kept)
        for _ in range(removed):
            self._positions.popleft()
        self._starting_position = starting_position
        self._total_distance = total_distance

        if removed:
            logger.debug(
                "Pruned %d position(s); %d kept, total distance %.4f",
                removed, len(self._positions), self._total_distance,
            )
        return removed

    # ------------------------------------------------------------------
    # Undo
    # ------------------------------------------------------------------

    def save_undo_data(self) -> None:
        """Snapshot the current state, replacing any previous snapshot."""
        self._undo = _UndoSnapshot(
            positions=tuple(self._positions),
            starting_position=self._starting_position,
            total_distance=self._total_distance,
        )

    def undo(self) -> bool:
        """Restore the last snapshot and discard it.

        Returns
        -------
        bool
            ``False`` if there was no snapshot to restore.
        """
        snapshot = self._undo
        if snapshot is None:
            return False
        self._positions = deque(snapshot.positions)
        self._starting_position = snapshot.starting_position
        self._total_distance = snapshot.total_distance
        self._undo = None
        return True
