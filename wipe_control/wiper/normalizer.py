"""Derive wipe geometry from user settings.

The retraction configured in the slicer is split three ways::

    retraction_length = pre_wipe + wipe + post_wipe

``pre_wipe`` and ``post_wipe`` are stationary retractions before and
after the wipe.  The ``wipe`` share is spread over the wipe travel, and
the length of that travel is chosen so the extruder retracts at the same
rate it would during a stationary retraction::

    wipe_distance = wipe_retraction_length * wipe_feedrate / retraction_feedrate

A zero ``wipe_distance`` (no retraction configured, or all of it
assigned to pre/post) disables wiping; it is reported, not corrected.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from wipe_control.configs.loader import WipeSettings
from wipe_control.wiper.utilities import greater_than, is_zero, less_than

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WipeGeometry:
    """Constants derived once per :meth:`GCodeWiper.initialize`."""

    retract_before_wipe_percent: float
    retract_after_wipe_percent: float
    pre_wipe_retract_length: float
    post_wipe_retract_length: float
    wipe_retraction_length: float
    wipe_distance: float
    half_wipe_distance: float
    distance_to_retraction_ratio: float

    @property
    def is_enabled(self) -> bool:
        """``False`` when there is no distance to wipe over."""
        return not is_zero(self.wipe_distance)


def normalize_retraction_percents(before: float, after: float) -> tuple[float, float]:
    """Clamp both fractions to >= 0 and rescale them if they sum above 1.

    Rescaling keeps the before/after ratio, so ``(0.9, 0.3)`` becomes
    ``(0.75, 0.25)``.
    """
    if less_than(before, 0.0):
        before = 0.0
    if less_than(after, 0.0):
        after = 0.0

    total = before + after
    if greater_than(total, 1.0) and not is_zero(total):
        reduction_ratio = 1.0 / total
        before *= reduction_ratio
        after *= reduction_ratio
    return before, after


def compute_wipe_geometry(settings: WipeSettings) -> WipeGeometry:
    """Normalize ``settings`` and derive the wipe constants.

    Parameters
    ----------
    settings : WipeSettings
        Validated user settings.

    Returns
    -------
    WipeGeometry
        Derived constants.  ``distance_to_retraction_ratio`` is 0.0 when
        wiping is disabled.
    """
    before, after = normalize_retraction_percents(
        settings.retract_before_wipe_percent,
        settings.retract_after_wipe_percent,
    )
    if (before, after) != (
        settings.retract_before_wipe_percent,
        settings.retract_after_wipe_percent,
    ):
        logger.info(
            "Normalized retract percents: before %.4f -> %.4f, after %.4f -> %.4f",
            settings.retract_before_wipe_percent, before,
            settings.retract_after_wipe_percent, after,
        )

    pre_wipe_retract_length = settings.retraction_length * before
    post_wipe_retract_length = settings.retraction_length * after
    wipe_retraction_length = (
        settings.retraction_length - pre_wipe_retract_length - post_wipe_retract_length
    )
    wipe_retraction_speed_ratio = settings.wipe_feedrate / settings.retraction_feedrate
    wipe_distance = wipe_retraction_length * wipe_retraction_speed_ratio

    if is_zero(wipe_distance):
        logger.warning(
            "Wipe distance is zero (retraction_length=%.4f, wipe_feedrate=%.1f); "
            "wiping disabled",
            settings.retraction_length,
            settings.wipe_feedrate,
        )
        distance_to_retraction_ratio = 0.0
    else:
        distance_to_retraction_ratio = wipe_retraction_length / wipe_distance

    return WipeGeometry(
        retract_before_wipe_percent=before,
        retract_after_wipe_percent=after,
        pre_wipe_retract_length=pre_wipe_retract_length,
        post_wipe_retract_length=post_wipe_retract_length,
        wipe_retraction_length=wipe_retraction_length,
        wipe_distance=wipe_distance,
        half_wipe_distance=wipe_distance * 0.5,
        distance_to_retraction_ratio=distance_to_retraction_ratio,
    )
