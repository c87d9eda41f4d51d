"""Tests for wipe IR value types.

Validates defaults, immutability and the step variants.
"""

from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from wipe_control.wipe_ir import MotionStep, Position, RetractStep, WipeStep


class TestPosition:
    def test_offsets_default_to_coordinates(self) -> None:
        p = Position(x=3.0, y=4.0)
        assert p.offset_x == 3.0
        assert p.offset_y == 4.0

    def test_explicit_offsets_kept(self) -> None:
        p = Position(x=3.0, y=4.0, offset_x=1.0, offset_y=2.0)
        assert (p.offset_x, p.offset_y) == (1.0, 2.0)

    def test_printing_move(self) -> None:
        assert Position(x=0, y=0, is_extruding=True, has_xy_position_changed=True).is_printing_move
        assert not Position(x=0, y=0, is_extruding=True).is_printing_move
        assert not Position(x=0, y=0, has_xy_position_changed=True).is_printing_move

    def test_immutable(self) -> None:
        p = Position(x=1.0, y=1.0)
        with pytest.raises(FrozenInstanceError):
            p.x = 2.0

    def test_value_equality(self) -> None:
        assert Position(x=1.0, y=2.0) == Position(x=1.0, y=2.0, offset_x=1.0, offset_y=2.0)


class TestSteps:
    def test_motion_step(self) -> None:
        step = MotionStep(x=1.0, y=2.0, e=-0.5, feedrate=3600.0)
        assert isinstance(step, WipeStep)
        assert not step.is_travel

    def test_travel_step(self) -> None:
        step = MotionStep(x=1.0, y=2.0)
        assert step.is_travel
        assert step.feedrate is None

    def test_retract_step(self) -> None:
        step = RetractStep(e=-0.4, feedrate=1800.0)
        assert isinstance(step, WipeStep)
        assert step.e == -0.4

    def test_steps_immutable(self) -> None:
        with pytest.raises(FrozenInstanceError):
            RetractStep(e=-0.4).e = 0.0
