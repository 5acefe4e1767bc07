"""Unit tests for subtitle synchronization against reference intervals."""
import logging

import pytest
from conftest import BruteForceEngine, FakeDocument
from vadsync.core.errors import (
    DoesNotExistError,
    ErrorKind,
    InternalSyncError,
    ParseError,
    UnsupportedFormatError,
)
from vadsync.sync.engine import EngineSpan, Scoring
from vadsync.sync.intervals import IntervalSet, TimeInterval
from vadsync.sync.options import SyncOptions
from vadsync.sync.orchestrator import (
    FRAMERATES,
    apply_shifts,
    guess_framerate_ratio,
    sync,
    synchronize_document,
    synchronize_intervals,
)

REFERENCE = IntervalSet([(600, 1200), (3000, 3600), (6000, 7200)])
SHIFTED = IntervalSet([(900, 1500), (3300, 3900), (6300, 7500)])


class ConstantEngine:
    """Returns fixed scores per call, in order."""

    def __init__(self, scores):
        self.scores = list(scores)

    def align_nosplit(self, reference, incoming, scoring):
        return 0, self.scores.pop(0)

    def align(self, reference, incoming, split_penalty, speed_optimization, scoring):
        return [0] * len(incoming)


def test_nosplit_constant_shift(engine):
    """A constant offset is found and removed."""
    options = SyncOptions(split_mode=False)
    corrected = synchronize_intervals(SHIFTED, REFERENCE, 25.0, options, engine)
    assert corrected == REFERENCE
    assert engine.nosplit_calls[0][1] is Scoring.STANDARD
    assert engine.align_calls == []


def test_split_mode_passes_options(engine):
    options = SyncOptions(split_mode=True, split_penalty=3.5, speed_optimization=None)
    corrected = synchronize_intervals(SHIFTED, REFERENCE, 25.0, options, engine)
    assert corrected == REFERENCE

    call = engine.align_calls[0]
    assert call["split_penalty"] == 3.5
    assert call["speed_optimization"] is None
    assert call["scoring"] is Scoring.STANDARD
    assert call["incoming"] == [EngineSpan(15, 25), EngineSpan(55, 65), EngineSpan(105, 125)]


def test_empty_incoming(engine):
    corrected = synchronize_intervals(IntervalSet(), REFERENCE, 25.0, SyncOptions(), engine)
    assert len(corrected) == 0


def test_framerate_correction_detects_25fps(engine, caplog):
    """Subtitles timed for 25fps are stretched onto a 24fps reference."""
    reference = IntervalSet((200 * k * 60, (200 * k + 40) * 60) for k in range(1, 21))
    # Same spans compressed by 24/25
    incoming = IntervalSet((11520 * k, 11520 * k + 2304) for k in range(1, 21))
    options = SyncOptions(split_mode=False, framerate_correction=True)

    _, ratio = guess_framerate_ratio(
        reference.to_engine_spans(60), incoming.to_engine_spans(60), 24.0, engine
    )
    assert ratio.fps == 25.0
    assert ratio.ratio == pytest.approx(25.0 / 24.0)

    caplog.set_level(logging.INFO, logger="vadsync")
    corrected = synchronize_intervals(incoming, reference, 24.0, options, engine)
    assert "detected framerate = 25.000" in caplog.text

    overlap_calls = [scoring for _, scoring in engine.nosplit_calls if scoring is Scoring.OVERLAP]
    assert len(overlap_calls) == 2 * len(FRAMERATES)
    for got, want in zip(corrected, reference):
        assert abs(got.start - want.start) <= 60
        assert abs(got.end - want.end) <= 60


def test_framerate_tie_prefers_first_candidate():
    """Equal scores (down to float noise) keep the earliest framerate."""
    spans = [EngineSpan(0, 10)]
    scores = [0.5, 0.5 + 1e-12] + [0.25] * (len(FRAMERATES) - 2)
    score, ratio = guess_framerate_ratio(spans, spans, 24.0, ConstantEngine(scores))
    assert ratio.fps == FRAMERATES[0]
    assert score == 0.5


def test_framerate_best_score_wins():
    spans = [EngineSpan(0, 10)]
    scores = [0.1] * len(FRAMERATES)
    scores[3] = 0.9
    _, ratio = guess_framerate_ratio(spans, spans, 30.0, ConstantEngine(scores))
    assert ratio.fps == FRAMERATES[3]
    assert ratio.ratio == pytest.approx(FRAMERATES[3] / 30.0)


def test_apply_shifts():
    intervals = IntervalSet([(100, 200), (1000, 1100)])
    shifted = apply_shifts(intervals, [1, -2], 1.0, 60)
    assert list(shifted) == [TimeInterval(160, 260), TimeInterval(880, 980)]
    assert list(apply_shifts(intervals, [0, 0], 2.0, 60)) == [TimeInterval(200, 400), TimeInterval(2000, 2200)]


def test_apply_shifts_count_mismatch():
    with pytest.raises(InternalSyncError) as excinfo:
        apply_shifts(IntervalSet([(0, 1)]), [1, 2], 1.0, 60)
    assert excinfo.value.code == ErrorKind.INTERNAL_ERROR


def test_synchronize_document_updates_entries(engine):
    document = FakeDocument([(1500, 900), (3300, 3900), (6300, 7500)])
    corrected = synchronize_document(document, REFERENCE, 25.0, SyncOptions(split_mode=False), engine)
    assert corrected == REFERENCE
    assert document.updated == list(REFERENCE)


def test_synchronize_document_update_failure(engine):
    document = FakeDocument([(900, 1500)], fail_update=True)
    with pytest.raises(InternalSyncError):
        synchronize_document(document, REFERENCE, 25.0, SyncOptions(split_mode=False), engine)


def test_sync_file_round_trip(tmp_path, engine, handler):
    source = tmp_path / "movie.toy"
    target = tmp_path / "movie.synced.toy"
    source.write_text("900 1500\n3300 3900\n6300 7500\n")

    sync(str(source), str(target), REFERENCE, 25.0, SyncOptions(split_mode=False), engine, handler)
    assert target.read_text() == "600 1200\n3000 3600\n6000 7200"


def test_sync_missing_input(tmp_path, engine, handler):
    with pytest.raises(DoesNotExistError) as excinfo:
        sync(str(tmp_path / "gone.toy"), str(tmp_path / "out.toy"), REFERENCE, 25.0, SyncOptions(), engine, handler)
    assert excinfo.value.code == ErrorKind.FILE_DOES_NOT_EXIST


def test_sync_undetectable_format(tmp_path, engine, handler):
    source = tmp_path / "movie.bin"
    source.write_bytes(b"\x00\x01")
    with pytest.raises(UnsupportedFormatError):
        sync(str(source), str(tmp_path / "out.bin"), REFERENCE, 25.0, SyncOptions(), engine, handler)


def test_sync_parse_error(tmp_path, engine, handler):
    source = tmp_path / "movie.toy"
    source.write_text("not a subtitle\n")
    with pytest.raises(ParseError) as excinfo:
        sync(str(source), str(tmp_path / "out.toy"), REFERENCE, 25.0, SyncOptions(), engine, handler)
    assert excinfo.value.code == ErrorKind.PARSE_ERROR


def test_sync_format_without_updates(tmp_path, engine, handler):
    source = tmp_path / "movie.idx"
    source.write_text("900 1500\n")
    with pytest.raises(UnsupportedFormatError) as excinfo:
        sync(str(source), str(tmp_path / "out.idx"), REFERENCE, 25.0, SyncOptions(), engine, handler)
    assert excinfo.value.format == "idx"
    assert not (tmp_path / "out.idx").exists()
