"""Subtitle synchronization against reference intervals.

The alignment itself is delegated to an external AlignmentEngine. This module
prepares its input (quantization, optional framerate correction), requests the
shifts, and applies them back to the original subtitle timings.
"""
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from vadsync.core.errors import InternalSyncError
from vadsync.core.logging import logger
from vadsync.sync.engine import AlignmentEngine, EngineSpan, Scoring, delta_str, to_msecs
from vadsync.sync.intervals import IntervalSet
from vadsync.sync.options import SyncOptions
from vadsync.sync.subtitles import SubtitleDocument, SubtitleHandler, open_subtitle, save_subtitle, update_entries

# Standard framerates for framerate correction
FRAMERATES = (23.976023976024, 24.0, 25.0, 29.97002997003, 30.0, 50.0, 59.9400599400599, 60.0)

# Scores are compared at this resolution so float noise cannot pick a winner
_SCORE_RESOLUTION = 1_000_000_000.0


@dataclass(frozen=True)
class FramerateRatio:
    """A candidate framerate and its ratio to the reference framerate."""
    fps: float
    ratio: float


def guess_framerate_ratio(
    reference: Sequence[EngineSpan],
    incoming: Sequence[EngineSpan],
    reference_fps: float,
    engine: AlignmentEngine
) -> Tuple[float, FramerateRatio]:
    """
    Align the incoming spans at every standard framerate and keep the best.

    Each candidate scales the incoming spans by `candidate / reference_fps`
    and is scored with overlap scoring in no-split mode. The first candidate
    reaching the maximum score wins.

    Returns:
        (score, FramerateRatio) of the winning candidate
    """
    best: Optional[Tuple[int, float, FramerateRatio]] = None
    for fps in FRAMERATES:
        candidate = FramerateRatio(fps=fps, ratio=fps / reference_fps)
        scaled = [span.scaled(candidate.ratio) for span in incoming]
        delta, score = engine.align_nosplit(reference, scaled, Scoring.OVERLAP)
        logger.debug(f"checking framerate {fps:.4f}fps (score: {score:.4f}, delta: {delta})")

        key = int(score * _SCORE_RESOLUTION)
        if best is None or key > best[0]:
            best = (key, score, candidate)

    _, score, winner = best
    return score, winner


def compute_shifts(
    reference: Sequence[EngineSpan],
    incoming: Sequence[EngineSpan],
    options: SyncOptions,
    engine: AlignmentEngine
) -> List[int]:
    """Request one shift per incoming span (in engine timepoints)."""
    if not options.split_mode:
        delta, _ = engine.align_nosplit(reference, incoming, Scoring.STANDARD)
        logger.info(f"no split mode: shifting subtitles by {to_msecs(delta, options.interval)}ms")
        return [delta] * len(incoming)

    deltas = list(engine.align(
        reference,
        incoming,
        options.split_penalty,
        options.speed_optimization,
        Scoring.STANDARD
    ))
    logger.info(
        f"split mode: shifting first subtitle by {delta_str(deltas[0] if deltas else None, options.interval)}ms "
        f"and last by {delta_str(deltas[-1] if deltas else None, options.interval)}ms"
    )
    return deltas


def apply_shifts(
    intervals: IntervalSet,
    deltas: Sequence[int],
    ratio: float,
    interval: int
) -> IntervalSet:
    """Scale every original interval by `ratio` and move it by its shift."""
    if len(deltas) != len(intervals):
        raise InternalSyncError(f"alignment returned {len(deltas)} shifts for {len(intervals)} entries")
    return IntervalSet(
        span.scaled(ratio).shifted(to_msecs(delta, interval))
        for span, delta in zip(intervals, deltas)
    )


def synchronize_intervals(
    incoming: IntervalSet,
    reference: IntervalSet,
    reference_fps: float,
    options: SyncOptions,
    engine: AlignmentEngine
) -> IntervalSet:
    """
    Compute corrected timings for `incoming` so they line up with `reference`.

    Args:
        incoming: Intervals of the subtitle track to correct (ms)
        reference: Reference intervals, e.g. from voice activity (ms)
        reference_fps: Framerate of the reference video
        options: Alignment options
        engine: Alignment engine

    Returns:
        Corrected intervals, one per incoming interval, in the same order
    """
    logger.debug(options.describe())
    incoming_spans = incoming.to_engine_spans(options.interval)
    reference_spans = reference.to_engine_spans(options.interval)

    ratio = 1.0
    if options.framerate_correction:
        _, framerate = guess_framerate_ratio(reference_spans, incoming_spans, reference_fps, engine)
        ratio = framerate.ratio
        note = "" if ratio == 1.0 else " (differs from reference)"
        logger.info(
            f"detected framerate = {framerate.fps:.3f} (reference_framerate = {reference_fps:.3f}){note}"
        )
        incoming_spans = [span.scaled(ratio) for span in incoming_spans]

    deltas = compute_shifts(reference_spans, incoming_spans, options, engine)
    return apply_shifts(incoming, deltas, ratio, options.interval)


def synchronize_document(
    document: SubtitleDocument,
    reference: IntervalSet,
    reference_fps: float,
    options: SyncOptions,
    engine: AlignmentEngine,
    path: str = "<memory>"
) -> IntervalSet:
    """Correct the entries of a parsed subtitle document in place."""
    incoming = IntervalSet.from_subtitle_entries(document.entries())
    corrected = synchronize_intervals(incoming, reference, reference_fps, options, engine)
    update_entries(path, document, list(corrected))
    return corrected


def sync(
    sub_path_in: str,
    sub_path_out: str,
    reference: IntervalSet,
    reference_fps: float,
    options: SyncOptions,
    engine: AlignmentEngine,
    handler: SubtitleHandler,
    sub_encoding: Optional[str] = None
) -> IntervalSet:
    """
    Read a subtitle file, synchronize it with the reference, and write it out.

    Args:
        sub_path_in: Path to the incorrectly timed subtitle file
        sub_path_out: Path to write the synchronized file to
        reference: Reference intervals to align against
        reference_fps: Framerate of the reference video (framerate correction)
        options: Alignment options
        engine: Alignment engine
        handler: Subtitle format handler
        sub_encoding: Character encoding of the input, or None to detect

    Returns:
        The corrected intervals written to `sub_path_out`
    """
    document = open_subtitle(sub_path_in, handler, sub_encoding)
    corrected = synchronize_document(document, reference, reference_fps, options, engine, sub_path_in)
    save_subtitle(sub_path_out, document)
    logger.info(f"Wrote synchronized subtitles to {sub_path_out} ({len(corrected)} entries)")
    return corrected
