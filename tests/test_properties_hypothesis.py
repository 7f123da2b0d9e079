import numpy as np
import pytest

hypothesis = pytest.importorskip("hypothesis", reason="hypothesis is a dev optional dependency")
from hypothesis import given, strategies as st  # type: ignore

from engine.io.timeline import align_timelines, backfill_leading_silence
from engine.motion.animation import AdvanceResult, MotionAnimation
from engine.motion.transform import MOTION_MATRIX, convert

pitch = st.integers(0, 127)
frame = st.lists(pitch, min_size=4, max_size=4)
frames_st = st.lists(frame, min_size=2, max_size=30)


@given(frames=frames_st)
def test_total_component_equals_delta_sum(frames):
    arr = np.array(frames, dtype=np.int64)
    motions = convert(arr)
    np.testing.assert_array_equal(motions[:, 0], np.diff(arr, axis=0).sum(axis=1))


@given(frames=frames_st)
def test_motion_sum_telescopes_to_end_points(frames):
    arr = np.array(frames, dtype=np.int64)
    motions = convert(arr)
    np.testing.assert_array_equal(motions.sum(axis=0), MOTION_MATRIX @ (arr[-1] - arr[0]))


@given(frames=frames_st, data=st.data())
def test_motion_is_local_to_adjacent_pair(frames, data):
    arr = np.array(frames, dtype=np.int64)
    i = data.draw(st.integers(0, len(arr) - 2))
    others = [k for k in range(len(arr)) if k not in (i, i + 1)]
    if not others:
        return
    j = data.draw(st.sampled_from(others))
    changed = arr.copy()
    changed[j] = data.draw(frame)
    np.testing.assert_array_equal(convert(arr)[i], convert(changed)[i])


@given(timeline=st.lists(pitch, max_size=40))
def test_backfill_fills_leading_zeros_only(timeline):
    out = backfill_leading_silence(timeline)
    assert len(out) == len(timeline)
    nonzero = [k for k, p in enumerate(timeline) if p != 0]
    if not nonzero:
        assert out == timeline
        return
    k = nonzero[0]
    assert out[:k] == [timeline[k]] * k
    assert out[k:] == timeline[k:]


@given(timelines=st.lists(st.lists(pitch, max_size=20), max_size=4))
def test_aligned_length_is_longest_timeline(timelines):
    frames = align_timelines(timelines)
    assert frames.shape == (max((len(t) for t in timelines), default=0), 4)


@given(
    n=st.integers(1, 8),
    dts=st.lists(st.floats(0.0, 0.3, allow_nan=False, allow_infinity=False), max_size=80),
)
def test_progress_and_index_are_monotonic(n, dts):
    a = MotionAnimation([[3, 1, -1, 2]] * n, keyframe_duration=0.125, history_capacity=100)
    stops = 0
    for dt in dts:
        index, progress = a.current_index, a.progress
        result = a.advance(dt)
        if result is AdvanceResult.STOP:
            stops += 1
            break
        if a.current_index == index:
            assert a.progress >= progress
        else:
            assert a.current_index == index + 1
            assert a.progress == 0.0
        assert len(a.history) == a.current_index
    assert stops <= 1
