from __future__ import annotations

import math

import numpy as np
import pytest

from engine.motion.animation import (
    AdvanceResult,
    AnimationPhase,
    MotionAnimation,
    shortest_hue_diff,
)

DUR = 0.125


def _anim(motions, **kwargs) -> MotionAnimation:
    params = dict(position_scale=1000.0, color_scale=0.03, keyframe_duration=DUR, history_capacity=100)
    params.update(kwargs)
    return MotionAnimation(motions, **params)


def _circular_distance(a: float, b: float) -> float:
    d = abs(a - b) % 1.0
    return min(d, 1.0 - d)


def test_empty_sequence_is_rejected() -> None:
    with pytest.raises(ValueError):
        MotionAnimation([])


def test_wrong_shape_is_rejected() -> None:
    with pytest.raises(ValueError):
        MotionAnimation([[1, 2, 3]])


def test_initial_state_from_first_vector() -> None:
    a = _anim([[10, 1, 2, 3], [0, 0, 0, 0]])
    np.testing.assert_allclose(a.current_position, [0.0, 0.0, 0.0])
    np.testing.assert_allclose(a.target_position, [10.0, 20.0, 30.0])
    assert a.current_hue == pytest.approx(0.3)
    assert a.target_hue == a.current_hue
    assert a.current_index == 0
    assert a.progress == 0.0
    assert a.phase is AnimationPhase.INITIALIZED
    assert a.history == []


def test_hue_uses_absolute_total_motion_mod_one() -> None:
    assert _anim([[-10, 0, 0, 0]]).target_hue == pytest.approx(0.3)
    assert _anim([[40, 0, 0, 0]]).target_hue == pytest.approx(0.2)


def test_defaults_come_from_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    from common import settings

    monkeypatch.setenv("VMV_POSITION_SCALE", "100")
    monkeypatch.setenv("VMV_HISTORY_CAPACITY", "3")
    settings.reload_from_env()
    a = MotionAnimation([[0, 1, 0, 0]])
    np.testing.assert_allclose(a.target_position, [1.0, 0.0, 0.0])
    assert a.history_capacity == 3
    assert a.keyframe_duration == pytest.approx(0.125)


def test_zero_dt_never_changes_state() -> None:
    a = _anim([[10, 1, 2, 3], [5, 5, 5, 5]])
    for _ in range(50):
        assert a.advance(0.0) is AdvanceResult.CONTINUE
    assert a.progress == 0.0
    assert a.current_index == 0
    assert a.phase is AnimationPhase.INITIALIZED
    np.testing.assert_allclose(a.interpolated_position(), [0.0, 0.0, 0.0])
    assert a.history == []


def test_negative_dt_is_rejected() -> None:
    with pytest.raises(ValueError):
        _anim([[0, 0, 0, 0]]).advance(-0.01)


def test_progress_and_interpolated_position_mid_keyframe() -> None:
    a = _anim([[0, 1, 2, 3], [0, 0, 0, 0]])
    assert a.advance(DUR / 2) is AdvanceResult.CONTINUE
    assert a.progress == pytest.approx(0.5)
    assert a.phase is AnimationPhase.PLAYING
    np.testing.assert_allclose(a.interpolated_position(), [5.0, 10.0, 15.0])
    assert a.elapsed == pytest.approx(DUR / 2)


def test_boundary_crossing_moves_to_next_keyframe() -> None:
    a = _anim([[10, 1, 2, 3], [20, -1, 0, 1]])
    first_target_hue = a.target_hue
    assert a.advance(DUR) is AdvanceResult.CONTINUE
    assert a.progress == 0.0
    assert a.current_index == 1
    np.testing.assert_allclose(a.current_position, [10.0, 20.0, 30.0])
    np.testing.assert_allclose(a.target_position, [0.0, 20.0, 40.0])
    assert a.history == [(10.0, 20.0, 30.0)]
    assert a.current_hue == first_target_hue
    assert a.target_hue == pytest.approx(0.6)


def test_large_dt_crosses_at_most_one_boundary() -> None:
    a = _anim([[0, 1, 0, 0]] * 10)
    assert a.advance(100.0) is AdvanceResult.CONTINUE
    assert a.current_index == 1
    assert a.progress == 0.0
    assert len(a.history) == 1


def test_stop_is_returned_exactly_once_at_exhaustion() -> None:
    a = _anim([[0, 1, 0, 0]] * 3)
    results = []
    while True:
        r = a.advance(DUR)
        results.append(r)
        if r is AdvanceResult.STOP:
            break
    assert results == [AdvanceResult.CONTINUE, AdvanceResult.CONTINUE, AdvanceResult.STOP]
    assert a.current_index == 3
    assert a.finished
    assert a.phase is AnimationPhase.COMPLETED


def test_advance_after_stop_is_a_no_op() -> None:
    a = _anim([[0, 1, 0, 0]])
    assert a.advance(DUR) is AdvanceResult.STOP
    snapshot = (a.current_index, a.progress, a.elapsed, a.history, a.current_position.tolist())
    assert a.advance(DUR) is AdvanceResult.STOP
    assert a.advance(10.0) is AdvanceResult.STOP
    assert (a.current_index, a.progress, a.elapsed, a.history, a.current_position.tolist()) == snapshot


def test_index_increments_by_one_per_boundary() -> None:
    a = _anim([[0, 0, 1, 0]] * 20)
    seen = [a.current_index]
    for _ in range(200):
        if a.advance(0.05) is AdvanceResult.STOP:
            break
        seen.append(a.current_index)
    steps = np.diff(seen)
    assert set(steps.tolist()) <= {0, 1}


def test_history_is_bounded_and_evicts_oldest() -> None:
    n = 150
    a = _anim([[0, 1, 0, 0]] * n)
    for _ in range(n):
        a.advance(DUR)
    hist = a.history
    assert len(hist) == 100
    assert hist[0] == pytest.approx((510.0, 0.0, 0.0))
    assert hist[-1] == pytest.approx((1500.0, 0.0, 0.0))


def test_history_respects_custom_capacity() -> None:
    a = _anim([[0, 1, 0, 0]] * 10, history_capacity=4)
    for _ in range(10):
        a.advance(DUR)
    assert [h[0] for h in a.history] == [70.0, 80.0, 90.0, 100.0]


def test_hue_takes_shorter_arc_through_zero() -> None:
    a = _anim([[0, 0, 0, 0], [0, 0, 0, 0]])
    a.current_hue = 0.9
    a.target_hue = 0.1
    a.progress = 0.5
    assert _circular_distance(a.interpolated_hue(), 0.0) < 1e-9
    assert 0.0 <= a.interpolated_hue() < 1.0


def test_hue_without_wrap_is_linear() -> None:
    a = _anim([[0, 0, 0, 0]])
    a.current_hue = 0.2
    a.target_hue = 0.4
    a.progress = 0.5
    assert a.interpolated_hue() == pytest.approx(0.3)


@pytest.mark.parametrize(
    "current, target, expected",
    [(0.9, 0.1, 0.2), (0.1, 0.9, -0.2), (0.2, 0.6, 0.4), (0.6, 0.2, -0.4), (0.0, 0.5, 0.5)],
)
def test_shortest_hue_diff(current: float, target: float, expected: float) -> None:
    assert shortest_hue_diff(current, target) == pytest.approx(expected)


def test_interpolated_color_is_hsv_full_saturation() -> None:
    a = _anim([[0, 0, 0, 0]])
    assert a.interpolated_color() == pytest.approx((1.0, 0.0, 0.0))
    a.current_hue = a.target_hue = 1.0 / 3.0
    r, g, b = a.interpolated_color()
    assert g == pytest.approx(1.0)
    assert r == pytest.approx(0.0, abs=1e-9) and b == pytest.approx(0.0, abs=1e-9)


def test_motions_are_copied_and_read_only() -> None:
    src = np.array([[1, 2, 3, 4]], dtype=np.int64)
    a = _anim(src)
    src[0, 0] = 100
    assert a.motions[0, 0] == 1
    with pytest.raises(ValueError):
        a.motions[0, 0] = 5


def test_full_playback_visits_every_keyframe_in_order() -> None:
    motions = [[0, 1, 0, 0], [0, 0, 1, 0], [0, 0, 0, 1]]
    a = _anim(motions)
    while a.advance(DUR) is AdvanceResult.CONTINUE:
        pass
    assert a.history == [(10.0, 0.0, 0.0), (10.0, 10.0, 0.0), (10.0, 10.0, 10.0)]
    assert math.isclose(a.elapsed, 3 * DUR)
