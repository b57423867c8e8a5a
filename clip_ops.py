"""
Pure clip operations. Every function returns new TimelineClip values and never
mutates its inputs, so the owning collection can swap results in atomically.
"""
import logging
from model import TimelineClip
from errors import NoActiveClipError
import constants

TRIM_START = "start"
TRIM_END = "end"
logger = logging.getLogger(constants.LOGGER_NAME)

def place_on_track(source, track_index, start_time):
    return TimelineClip(
        source_id=source.id,
        track_index=track_index,
        start_time=max(0.0, start_time),
        trimmed_duration=source.intrinsic_duration,
        source_trim_start=0.0,
        name=source.name,
        media_ref=source.media_ref,
    )

def trim(clip, edge, delta, source, original=None, min_duration=constants.MIN_CLIP_DURATION):
    """
    Recomputes a trim from the pre-drag snapshot plus the total accumulated delta.
    Returns the trimmed clip, or the current clip unchanged when the start edge
    would leave the source bounds.
    """
    orig = original or clip
    intrinsic = source.intrinsic_duration
    if edge == TRIM_END:
        max_duration = intrinsic - orig.source_trim_start
        # a sub-second source caps the floor at what is left of it
        low = min(min_duration, max_duration)
        new_duration = max(low, min(orig.trimmed_duration + delta, max_duration))
        return clip.copy(
            start_time=orig.start_time,
            source_trim_start=orig.source_trim_start,
            trimmed_duration=new_duration,
        )
    if edge != TRIM_START:
        raise ValueError(f"Unknown trim edge: {edge!r}")
    new_start = orig.start_time + delta
    new_trim_start = orig.source_trim_start + delta
    new_duration = orig.trimmed_duration - delta
    if (new_duration < min_duration
            or new_trim_start < 0
            or new_trim_start > intrinsic - min_duration
            or new_start < 0):
        logger.debug(f"[TRIM] Rejected start trim of {delta:+.3f}s on {clip.timeline_id}")
        return clip
    return clip.copy(
        start_time=new_start,
        source_trim_start=new_trim_start,
        trimmed_duration=new_duration,
    )

def split(clip, local_offset, margin=constants.MIN_SPLIT_MARGIN):
    """Returns (left, right) with fresh ids, or None when either half would be degenerate."""
    if not (margin < local_offset < clip.trimmed_duration - margin):
        logger.debug(f"[SPLIT] Offset {local_offset:.3f}s outside ({margin}, {clip.trimmed_duration - margin:.3f})")
        return None
    left = clip.with_new_id(trimmed_duration=local_offset)
    right = clip.with_new_id(
        start_time=clip.start_time + local_offset,
        source_trim_start=clip.source_trim_start + local_offset,
        trimmed_duration=clip.trimmed_duration - local_offset,
    )
    return left, right

def topmost_at(clips, time):
    """Highest track wins; among equals the clip latest in collection order wins."""
    best = None
    for clip in clips:
        if clip.contains(time) and (best is None or clip.track_index >= best.track_index):
            best = clip
    return best

def split_at_time(clips, time, margin=constants.MIN_SPLIT_MARGIN):
    """Returns (original, (left, right)), or (original, None) when the offset is too close to an edge."""
    target = topmost_at(clips, time)
    if target is None:
        raise NoActiveClipError(time)
    result = split(target, time - target.start_time, margin=margin)
    if result is None:
        return target, None
    return target, result

def move(clip, new_track_index, new_start_time):
    return clip.copy(track_index=new_track_index, start_time=max(0.0, new_start_time))

def fit_to_source(clip, source, min_duration=constants.MIN_CLIP_DURATION):
    """Pulls a clip back inside a source whose reported duration shrank below its extent."""
    intrinsic = source.intrinsic_duration
    if clip.source_trim_start + clip.trimmed_duration <= intrinsic:
        return clip
    duration = intrinsic - clip.source_trim_start
    trim_start = clip.source_trim_start
    if duration < min_duration:
        duration = min(min_duration, intrinsic)
        trim_start = intrinsic - duration
    return clip.copy(source_trim_start=trim_start, trimmed_duration=duration)
