"""
Wipe engine module.

Tracks recent printing moves and turns them into wipe steps around a
retraction.

Layers (leaves first):
    utilities: tolerance comparisons and distances
    normalizer: settings -> derived wipe geometry
    history: distance-bounded move history with undo
    clipping: exact-length trimming of the oldest segment
    engine: GCodeWiper, the public entry point
"""

from wipe_control.wiper.clipping import clip_wipe_path
from wipe_control.wiper.engine import GCodeWiper
from wipe_control.wiper.history import PositionHistory
from wipe_control.wiper.normalizer import (
    WipeGeometry,
    compute_wipe_geometry,
    normalize_retraction_percents,
)

__all__ = [
    "GCodeWiper",
    "PositionHistory",
    "WipeGeometry",
    "clip_wipe_path",
    "compute_wipe_geometry",
    "normalize_retraction_percents",
]
