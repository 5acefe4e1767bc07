"""Unit tests for voice-activity tracks."""
import pytest
from vadsync.audio.activity import ActivityTrack
from vadsync.sync.intervals import IntervalSet, TimeInterval

T, F = True, False


def test_to_intervals_edges():
    """Each voice run becomes one interval from its first frame to the frame after it."""
    track = ActivityTrack(frames=(F, T, T, F, F, T), chunk_duration_ms=30)
    intervals = track.to_intervals()
    assert list(intervals) == [TimeInterval(30, 90), TimeInterval(150, 180)]


def test_to_intervals_all_voice_and_silence():
    assert list(ActivityTrack(frames=(T, T, T), chunk_duration_ms=10).to_intervals()) == [TimeInterval(0, 30)]
    assert len(ActivityTrack(frames=(F, F), chunk_duration_ms=10).to_intervals()) == 0
    assert len(ActivityTrack(frames=(), chunk_duration_ms=10).to_intervals()) == 0


def test_frames_coerced_to_bools():
    track = ActivityTrack(frames=[1, 0, 1], chunk_duration_ms=20)
    assert track.frames == (True, False, True)
    assert len(track) == 3
    assert track.duration_ms == 60
    assert track.voice_ratio == pytest.approx(2 / 3)


def test_voice_ratio_empty():
    assert ActivityTrack(frames=(), chunk_duration_ms=30).voice_ratio == 0.0


def test_clean_opening_treats_edges_as_silence():
    """Opening drops a lone voice frame, even at the very start of the track."""
    track = ActivityTrack(frames=(T, F, F, F, T, T, T, F), chunk_duration_ms=30)
    cleaned = track.clean(1, 0)
    assert cleaned.frames == (F, F, F, F, T, T, T, F)
    assert cleaned.chunk_duration_ms == 30


def test_clean_closing_fills_gap():
    track = ActivityTrack(frames=(F, F, T, T, F, T, T, F, F), chunk_duration_ms=30)
    assert track.clean(0, 1).frames == (F, F, T, T, T, T, T, F, F)


def test_clean_zero_radii_is_identity():
    track = ActivityTrack(frames=(T, F, T, F), chunk_duration_ms=30)
    assert track.clean(0, 0) == track


def test_clean_leaves_original_untouched():
    track = ActivityTrack(frames=(F, T, F, F), chunk_duration_ms=30)
    track.clean(1, 1)
    assert track.frames == (F, T, F, F)


def test_clean_then_intervals():
    """A noisy track yields one interval after cleaning."""
    frames = (F, T, F, F, F, T, T, T, F, T, T, T, F, F)
    cleaned = ActivityTrack(frames=frames, chunk_duration_ms=10).clean(1, 1)
    assert cleaned.to_intervals() == IntervalSet([(50, 120)])


def test_edge_detection_example():
    track = ActivityTrack(frames=(F, F, T, T, F, T, F), chunk_duration_ms=30)
    assert track.to_intervals() == IntervalSet([(60, 120), (150, 180)])
