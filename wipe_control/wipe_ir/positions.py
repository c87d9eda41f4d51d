"""Observed extruder positions -- the input vocabulary of the wiper.

A ``Position`` is the state of the print head *after* one motion command
has been applied.  An external command translator builds them; the wiper
only reads them.

Coordinates
-----------
``x``/``y`` are absolute machine coordinates and drive all distance
accounting.  ``offset_x``/``offset_y``/``offset_e`` are the same values
adjusted for the active coordinate-system offset (``G92`` and friends)
and are what must be written back when emitting absolute-mode moves.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Position:
    """Print-head state after one motion command.

    Parameters
    ----------
    x, y : float
        Absolute machine coordinates in mm.
    offset_x, offset_y : float | None
        Offset-adjusted coordinates.  ``None`` copies ``x``/``y``
        (no active offset).
    offset_e : float
        Cumulative, offset-adjusted extrusion coordinate in mm.
    is_extruder_relative : bool
        Extrusion axis in relative mode (``M83``).
    is_relative : bool
        X/Y axes in relative mode (``G91``).
    is_extruding : bool
        This move deposits material.
    has_xy_position_changed : bool
        This move changed X or Y.
    is_layer_change : bool
        This move starts a new layer.
    """

    x: float
    y: float
    offset_x: float | None = None
    offset_y: float | None = None
    offset_e: float = 0.0
    is_extruder_relative: bool = False
    is_relative: bool = False
    is_extruding: bool = False
    has_xy_position_changed: bool = False
    is_layer_change: bool = False

    def __post_init__(self) -> None:
        if self.offset_x is None:
            object.__setattr__(self, "offset_x", self.x)
        if self.offset_y is None:
            object.__setattr__(self, "offset_y", self.y)

    @property
    def is_printing_move(self) -> bool:
        """``True`` for an XY move that deposits material."""
        return self.has_xy_position_changed and self.is_extruding
