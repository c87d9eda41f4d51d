"""Wipe engine -- history accounting and wipe step generation.

The engine is fed every observed move and, on request, produces the wipe
that should replace a plain retraction at the current position.

Wipe shape
----------
The wipe retraces the most recent printing path backward and then
returns along it::

    newest -> ... -> oldest -> anchor      outbound, retracting
    anchor -> oldest -> ... -> newest      return

Full wipe (``use_full_wipe=True``) covers ``wipe_distance`` outbound and
travels back without retracting.  Half wipe covers ``half_wipe_distance``
outbound and keeps retracting on the way back.  Either way the filament
withdrawn over the whole wipe is ``wipe_retraction_length``; any part
the history is too short to cover is added to the post-wipe retract.

Step order::

    [pre-wipe retract]  outbound...  turn-around pair  return...  [post-wipe retract]

Calling protocol
----------------
``update()`` once per observed move, ``undo()`` right after an
``update()`` the caller rejects, ``get_wipe_steps()`` whenever a
retraction is about to happen.  Single-threaded; one engine per print
job stream.
"""

from __future__ import annotations

import logging

from wipe_control.configs.loader import WipeSettings, WiperConfig
from wipe_control.wipe_ir.positions import Position
from wipe_control.wipe_ir.steps import MotionStep, RetractStep, WipeStep
from wipe_control.wiper.clipping import clip_wipe_path
from wipe_control.wiper.history import PositionHistory, trim_path
from wipe_control.wiper.normalizer import WipeGeometry, compute_wipe_geometry
from wipe_control.wiper.utilities import (
    get_cartesian_distance,
    greater_than,
    greater_than_or_equal,
    is_equal,
    is_zero,
    wipe_distance_to_retraction,
)

logger = logging.getLogger(__name__)


class GCodeWiper:
    """Track printing moves and generate wipe steps.

    Parameters
    ----------
    settings : WipeSettings | None
        When given, the engine is initialized immediately.
    use_full_wipe : bool
        Full round-trip wipe with a non-retracting return (default) or
        half wipe retracting in both directions.

    Notes
    -----
    ``update`` and ``get_wipe_steps`` are no-ops until :meth:`initialize`
    has run; the first such call logs a warning.
    """

    def __init__(
        self,
        settings: WipeSettings | None = None,
        use_full_wipe: bool = True,
    ) -> None:
        self._use_full_wipe = use_full_wipe
        self._settings: WipeSettings | None = None
        self._geometry: WipeGeometry | None = None
        self._history = PositionHistory()
        self._warned_uninitialized = False
        if settings is not None:
            self.initialize(settings)

    @classmethod
    def from_config(cls, config: WiperConfig) -> "GCodeWiper":
        """Build an initialized engine from a loaded ``wiper.yaml``.

        Logging is left to the host, which applies the same config with
        ``setup_logging(**config.logging.setup_kwargs())``.
        """
        return cls(config.settings, use_full_wipe=config.use_full_wipe)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def use_full_wipe(self) -> bool:
        """Wipe mode, fixed at construction."""
        return self._use_full_wipe

    @property
    def is_initialized(self) -> bool:
        return self._geometry is not None

    @property
    def settings(self) -> WipeSettings | None:
        return self._settings

    @property
    def geometry(self) -> WipeGeometry | None:
        return self._geometry

    @property
    def history(self) -> PositionHistory:
        return self._history

    @property
    def total_distance(self) -> float:
        return self._history.total_distance

    @property
    def starting_position(self) -> Position | None:
        return self._history.starting_position

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def initialize(self, settings: WipeSettings | None = None) -> None:
        """Derive the wipe geometry from ``settings``.

        Safe to call again to reconfigure; the history is kept.  Passing
        ``None`` re-derives from the current settings.

        Raises
        ------
        ValueError
            If ``settings`` is ``None`` and none were given before.
        """
        if settings is None:
            settings = self._settings
        if settings is None:
            raise ValueError("initialize() needs settings on first call")

        self._settings = settings
        self._geometry = compute_wipe_geometry(settings)
        g = self._geometry
        logger.info(
            "Wiper initialized: pre=%.4f post=%.4f wipe_retraction=%.4f "
            "wipe_distance=%.4f ratio=%.4f full_wipe=%s",
            g.pre_wipe_retract_length,
            g.post_wipe_retract_length,
            g.wipe_retraction_length,
            g.wipe_distance,
            g.distance_to_retraction_ratio,
            self.use_full_wipe,
        )

    def update(self, current: Position, previous: Position) -> None:
        """Feed the move ``previous -> current`` into the history.

        Layer changes and anything other than an extruding XY move clear
        the history: a wipe never crosses a layer or a travel.
        """
        if not self._check_initialized("update"):
            return

        self._history.save_undo_data()

        if current.is_layer_change or not current.is_printing_move:
            if len(self._history):
                logger.debug(
                    "History reset (layer_change=%s, printing=%s)",
                    current.is_layer_change,
                    current.is_printing_move,
                )
            self._history.clear()
            return

        self._history.append(current, previous)
        self._history.prune(self.get_wipe_distance())

    def undo(self) -> None:
        """Revert the last :meth:`update` (one level only)."""
        if not self._history.undo():
            logger.debug("undo() without a saved snapshot ignored")

    def get_wipe_distance(self) -> float:
        """Path length the wipe needs from the history (mm)."""
        if self._geometry is None:
            return 0.0
        if self.use_full_wipe:
            return self._geometry.wipe_distance
        return self._geometry.half_wipe_distance

    def get_missing_retraction(self) -> float:
        """Retraction the history is too short to perform while wiping.

        Negative when the history is longer than needed.
        """
        return self._missing_retraction(self._history.total_distance)

    def get_extra_retraction(self) -> float:
        """Path length in the history beyond what the wipe needs (mm)."""
        return self._history.total_distance - self.get_wipe_distance()

    def get_wipe_steps(self) -> list[WipeStep]:
        """Build the wipe for the current history.

        Returns
        -------
        list[WipeStep]
            Ordered steps; empty when uninitialized, when wiping is
            disabled, or when there is no printing path to wipe over.
        """
        steps: list[WipeStep] = []
        if not self._check_initialized("get_wipe_steps"):
            return steps

        settings = self._settings
        g = self._geometry
        history = self._history
        if (
            not g.is_enabled
            or is_zero(history.total_distance)
            or history.starting_position is None
            or not history.positions
        ):
            return steps

        # History may predate the current settings; wipe over a trimmed view.
        wipe_distance = self.get_wipe_distance()
        start_position, positions, total_distance = trim_path(
            history.starting_position,
            history.positions,
            history.total_distance,
            wipe_distance,
        )

        post_wipe_retract_length = g.post_wipe_retract_length
        missing_retraction = self._missing_retraction(total_distance)
        if greater_than_or_equal(missing_retraction, 0.0):
            post_wipe_retract_length += missing_retraction

        first_position = positions[0]
        extra_distance = total_distance - wipe_distance
        if greater_than(extra_distance, 0.0):
            first_position, start_position = clip_wipe_path(
                extra_distance, first_position, start_position
            )

        newest = positions[-1]
        current_offset_e = newest.offset_e

        if greater_than(g.pre_wipe_retract_length, 0.0):
            if newest.is_extruder_relative:
                e = -g.pre_wipe_retract_length
            else:
                e = newest.offset_e - g.pre_wipe_retract_length
            steps.append(RetractStep(e=e, feedrate=settings.retraction_feedrate))
            current_offset_e -= g.pre_wipe_retract_length

        # Outbound: newest back to the oldest kept entry.
        outbound = [*reversed(positions[1:]), first_position]
        feedrate: float | None = settings.wipe_feedrate
        previous = outbound[0]
        for current in outbound[1:]:
            step, current_offset_e = self._get_wipe_step(
                previous, current, current_offset_e, feedrate, is_return=False
            )
            steps.append(step)
            previous = current
            feedrate = None

        # Turn around at the anchor.
        step, current_offset_e = self._get_wipe_step(
            previous, start_position, current_offset_e, feedrate, is_return=False
        )
        steps.append(step)
        return_feedrate = settings.x_y_travel_speed if self.use_full_wipe else None
        step, current_offset_e = self._get_wipe_step(
            start_position, previous, current_offset_e, return_feedrate, is_return=True
        )
        steps.append(step)

        # Return: oldest kept entry forward to newest.
        for current in positions[1:]:
            step, current_offset_e = self._get_wipe_step(
                previous, current, current_offset_e, None, is_return=True
            )
            steps.append(step)
            previous = current

        if greater_than(post_wipe_retract_length, 0.0):
            feedrate = None
            if not is_equal(settings.retraction_feedrate, settings.wipe_feedrate):
                feedrate = settings.retraction_feedrate
            if newest.is_extruder_relative:
                e = -post_wipe_retract_length
            else:
                e = current_offset_e - post_wipe_retract_length
            steps.append(RetractStep(e=e, feedrate=feedrate))

        return steps

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _check_initialized(self, operation: str) -> bool:
        if self._geometry is not None:
            return True
        if not self._warned_uninitialized:
            logger.warning("%s() called before initialize(); ignoring", operation)
            self._warned_uninitialized = True
        return False

    def _missing_retraction(self, total_distance: float) -> float:
        g = self._geometry
        if g is None:
            return 0.0
        if self.use_full_wipe:
            return wipe_distance_to_retraction(
                g.wipe_distance - total_distance, g.distance_to_retraction_ratio
            )
        return wipe_distance_to_retraction(
            (g.half_wipe_distance - total_distance) * 2, g.distance_to_retraction_ratio
        )

    def _get_wipe_step(
        self,
        start: Position,
        end: Position,
        current_offset_e: float,
        feedrate: float | None,
        is_return: bool,
    ) -> tuple[MotionStep, float]:
        """Build the step ``start -> end`` and the updated running offset E."""
        if end.is_relative:
            x = end.x - start.x
            y = end.y - start.y
        else:
            x = end.offset_x
            y = end.offset_y

        if self.use_full_wipe and is_return:
            return MotionStep(x=x, y=y, feedrate=feedrate), current_offset_e

        retraction = wipe_distance_to_retraction(
            get_cartesian_distance(start.x, start.y, end.x, end.y),
            self._geometry.distance_to_retraction_ratio,
        )
        current_offset_e -= retraction
        e = -retraction if end.is_extruder_relative else current_offset_e
        return MotionStep(x=x, y=y, e=e, feedrate=feedrate), current_offset_e
