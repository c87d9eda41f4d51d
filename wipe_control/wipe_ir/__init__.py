"""
Wipe Intermediate Representation module.

Defines the positions the wiper consumes and the steps it produces as
immutable dataclasses.  This vocabulary is the contract between the
motion-command translator and the wiper.

All coordinates are in millimetres, feed rates in mm/min.
"""

from wipe_control.wipe_ir.positions import Position
from wipe_control.wipe_ir.steps import MotionStep, RetractStep, WipeStep

__all__ = [
    "Position",
    "WipeStep",
    "MotionStep",
    "RetractStep",
]
