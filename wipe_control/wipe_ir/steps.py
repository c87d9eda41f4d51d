"""Wipe steps -- the output vocabulary of the wiper.

Every step is an immutable, slotted dataclass.  A serializer outside this
package turns them into motion commands; nothing here knows about text.

Axis modes
----------
Step values follow the axis mode of the position they move *to*:

* ``x``/``y`` are deltas when that position is in relative XY mode,
  otherwise absolute offset coordinates.
* ``e`` is a delta when that position is extruder-relative, otherwise
  the cumulative absolute extrusion coordinate.

Feed rates are in mm/min.  ``feedrate=None`` means "keep the modal feed
rate" so consecutive steps do not repeat the same ``F`` word.
"""

from __future__ import annotations

from abc import ABC
from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Base class
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class WipeStep(ABC):
    """Base class for all wipe steps."""

    pass


# ---------------------------------------------------------------------------
# Variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class MotionStep(WipeStep):
    """XY move, retracting while it travels unless ``e`` is ``None``.

    Parameters
    ----------
    x, y : float
        Target (absolute offset coordinates) or delta (relative mode).
    e : float | None
        Extrusion value; ``None`` for a pure travel move.
    feedrate : float | None
        Feed rate override in mm/min.
    """

    x: float
    y: float
    e: float | None = None
    feedrate: float | None = None

    @property
    def is_travel(self) -> bool:
        return self.e is None


@dataclass(frozen=True, slots=True)
class RetractStep(WipeStep):
    """Extrusion-only retraction.

    Parameters
    ----------
    e : float
        Extrusion value (negative delta, or lowered absolute coordinate).
    feedrate : float | None
        Feed rate override in mm/min.
    """

    e: float
    feedrate: float | None = None
