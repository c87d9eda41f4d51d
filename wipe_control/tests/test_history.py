"""Tests for the distance-bounded position history.

Validates append/anchor handling, pruning bounds, non-negative distance
and single-level undo exactness.
"""

from __future__ import annotations

import random

import pytest

from wipe_control.wipe_ir.positions import Position
from wipe_control.wiper.history import PositionHistory, trim_path


def _p(x: float, y: float = 0.0) -> Position:
    return Position(x=x, y=y, is_extruding=True, has_xy_position_changed=True)


@pytest.fixture()
def history() -> PositionHistory:
    return PositionHistory()


def _feed_line(history: PositionHistory, count: int, required: float) -> None:
    """Append ``count`` unit moves along X, pruning after each."""
    for i in range(count):
        history.append(_p(i + 1.0), _p(float(i)))
        history.prune(required)


# ---------------------------------------------------------------------------
# Append / anchor
# ---------------------------------------------------------------------------


class TestAppend:
    def test_starts_empty(self, history: PositionHistory) -> None:
        assert len(history) == 0
        assert history.starting_position is None
        assert history.total_distance == 0.0

    def test_first_append_sets_anchor(self, history: PositionHistory) -> None:
        history.append(_p(1.0), _p(0.0))
        assert history.starting_position == _p(0.0)
        assert history.positions == (_p(1.0),)
        assert history.total_distance == pytest.approx(1.0)

    def test_anchor_kept_on_later_appends(self, history: PositionHistory) -> None:
        history.append(_p(1.0), _p(0.0))
        history.append(_p(1.0, 2.0), _p(1.0))
        assert history.starting_position == _p(0.0)
        assert history.total_distance == pytest.approx(3.0)
        assert history.peek() == _p(1.0)

    def test_peek_empty_raises(self, history: PositionHistory) -> None:
        with pytest.raises(IndexError):
            history.peek()

    def test_clear_resets_distance(self, history: PositionHistory) -> None:
        history.append(_p(1.0), _p(0.0))
        history.clear()
        assert len(history) == 0
        assert history.total_distance == 0.0


# ---------------------------------------------------------------------------
# Pruning
# ---------------------------------------------------------------------------


class TestPrune:
    def test_keeps_extra_rather_than_fall_short(self, history: PositionHistory) -> None:
        _feed_line(history, 3, required=2.4)
        # Removing the oldest unit segment would leave 2.0 < 2.4.
        assert history.total_distance == pytest.approx(3.0)
        assert len(history) == 3

    def test_fourth_move_prunes_oldest(self, history: PositionHistory) -> None:
        _feed_line(history, 3, required=2.4)
        history.append(_p(4.0), _p(3.0))
        removed = history.prune(2.4)
        assert removed == 1
        assert history.total_distance == pytest.approx(3.0)
        assert history.starting_position == _p(1.0)
        assert history.positions == (_p(2.0), _p(3.0), _p(4.0))

    def test_prunes_several_entries_at_once(self, history: PositionHistory) -> None:
        _feed_line(history, 6, required=10.0)
        assert history.prune(2.0) == 4
        assert history.total_distance == pytest.approx(2.0)
        assert history.starting_position == _p(4.0)

    def test_below_required_untouched(self, history: PositionHistory) -> None:
        history.append(_p(1.0), _p(0.0))
        assert history.prune(2.4) == 0
        assert len(history) == 1

    def test_trim_path_leaves_history_alone(self, history: PositionHistory) -> None:
        _feed_line(history, 5, required=10.0)
        start, kept, total = trim_path(
            history.starting_position, history.positions, history.total_distance, 1.2,
        )
        assert start == _p(3.0)
        assert kept == (_p(4.0), _p(5.0))
        assert total == pytest.approx(2.0)
        assert len(history) == 5
        assert history.total_distance == pytest.approx(5.0)

    def test_zero_required_empties_history(self, history: PositionHistory) -> None:
        _feed_line(history, 3, required=10.0)
        history.prune(0.0)
        assert len(history) == 0
        assert history.total_distance == pytest.approx(0.0)

    def test_lower_bound_after_prune(self, history: PositionHistory) -> None:
        rng = random.Random(1234)
        required = 2.4
        prev = Position(x=0.0, y=0.0)
        for _ in range(200):
            cur = _p(prev.x + rng.uniform(-2.0, 2.0), prev.y + rng.uniform(-2.0, 2.0))
            before = len(history)
            history.append(cur, prev)
            history.prune(required)
            assert history.total_distance >= 0.0
            if before and len(history):
                # Pruning only happens while enough path remains.
                assert history.total_distance >= required - 1e-9 or len(history) == before + 1
            prev = cur


# ---------------------------------------------------------------------------
# Undo
# ---------------------------------------------------------------------------


class TestUndo:
    def test_undo_restores_exact_state(self, history: PositionHistory) -> None:
        _feed_line(history, 5, required=2.4)
        anchor = history.starting_position
        total = history.total_distance
        positions = history.positions

        history.save_undo_data()
        history.append(_p(5.7, 0.3), _p(5.0))
        history.prune(2.4)
        assert history.undo()

        assert history.starting_position == anchor
        assert history.total_distance == total
        assert history.positions == positions

    def test_undo_after_clear(self, history: PositionHistory) -> None:
        _feed_line(history, 2, required=2.4)
        total = history.total_distance
        history.save_undo_data()
        history.clear()
        history.undo()
        assert history.total_distance == total
        assert len(history) == 2

    def test_undo_is_single_level(self, history: PositionHistory) -> None:
        history.save_undo_data()
        history.append(_p(1.0), _p(0.0))
        history.save_undo_data()
        history.append(_p(2.0), _p(1.0))

        assert history.undo()
        assert history.positions == (_p(1.0),)
        assert not history.has_undo
        assert not history.undo()
        assert history.positions == (_p(1.0),)
