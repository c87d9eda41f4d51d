"""Shorten the oldest history segment to the exact wipe length.

When the history covers more path than the wipe needs, the anchor end of
the oldest segment is pulled toward the oldest kept position::

    anchor ------------x------> positions[0]
           |<- clip ->|
                      new anchor

Positions are immutable; the clipped anchor is a new copy and the
history itself is never touched.
"""

from __future__ import annotations

from dataclasses import replace

from wipe_control.wipe_ir.positions import Position
from wipe_control.wiper.utilities import get_cartesian_distance, is_zero


def clip_wipe_path(
    distance_to_clip: float,
    from_position: Position,
    to_position: Position,
) -> tuple[Position, Position]:
    """Move ``to_position`` toward ``from_position`` by ``distance_to_clip``.

    Parameters
    ----------
    distance_to_clip : float
        Length to remove from the segment (mm).  Values larger than the
        segment collapse ``to_position`` onto ``from_position``.
    from_position : Position
        Fixed end of the segment (oldest kept history entry).
    to_position : Position
        End that moves (the anchor).

    Returns
    -------
    tuple[Position, Position]
        ``(from_position, clipped_to_position)``.  The offset coordinates
        of the clipped position move by the same XY delta as ``x``/``y``.
    """
    distance = get_cartesian_distance(
        from_position.x, from_position.y, to_position.x, to_position.y
    )
    if is_zero(distance):
        return from_position, to_position

    kept_distance_ratio = (distance - distance_to_clip) / distance
    kept_distance_ratio = min(1.0, max(0.0, kept_distance_ratio))

    x = from_position.x + (to_position.x - from_position.x) * kept_distance_ratio
    y = from_position.y + (to_position.y - from_position.y) * kept_distance_ratio
    clipped = replace(
        to_position,
        x=x,
        y=y,
        offset_x=to_position.offset_x + (x - to_position.x),
        offset_y=to_position.offset_y + (y - to_position.y),
    )
    return from_position, clipped
