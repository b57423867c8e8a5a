import math
import logging
from PyQt5.QtCore import QObject, pyqtSignal
import clip_ops
from model import SourceClip, TimelineClip
from tracks import TrackList
from duration import compute_total_duration
from resolver import resolve
import constants

class TimelineModel(QObject):
    """
    Owns the source pool, the ordered clip collection and the track list.
    Each mutation builds the next clip list and swaps it in through _commit,
    so observers never see a half-applied change.
    """
    data_changed = pyqtSignal()
    duration_changed = pyqtSignal(float)

    def __init__(self, num_tracks=1, min_clip_duration=constants.MIN_CLIP_DURATION,
                 min_split_margin=constants.MIN_SPLIT_MARGIN,
                 min_timeline_duration=constants.MIN_TIMELINE_DURATION,
                 placeholder_duration=constants.PLACEHOLDER_DURATION):
        super().__init__()
        self.logger = logging.getLogger(constants.LOGGER_NAME)
        self.min_clip_duration = min_clip_duration
        self.min_split_margin = min_split_margin
        self.min_timeline_duration = min_timeline_duration
        self.placeholder_duration = placeholder_duration
        self.sources = {}
        self.clips = []
        self.tracks = TrackList(num_tracks)
        self.total_duration = float(min_timeline_duration)

    @property
    def num_tracks(self):
        return self.tracks.num_tracks

    def _commit(self, clips):
        self.clips = clips
        total = compute_total_duration(clips, self.min_timeline_duration)
        changed = total != self.total_duration
        self.total_duration = total
        self.data_changed.emit()
        if changed:
            self.duration_changed.emit(total)

    def _index_of(self, timeline_id):
        for i, clip in enumerate(self.clips):
            if clip.timeline_id == timeline_id:
                return i
        return -1

    def get_clip(self, timeline_id):
        idx = self._index_of(timeline_id)
        return self.clips[idx] if idx >= 0 else None

    def get_source(self, source_id):
        return self.sources.get(source_id)

    def clips_on_track(self, track_index):
        return [c for c in self.clips if c.track_index == track_index]

    def add_source_clip(self, name, media_ref, duration=None):
        source = SourceClip(name=name, media_ref=media_ref, intrinsic_duration=self.placeholder_duration)
        if is_known_duration(duration):
            source.intrinsic_duration = float(duration)
            source.duration_known = True
        self.sources[source.id] = source
        self.logger.info(f"[POOL] Added source {name} ({source.intrinsic_duration:.2f}s)")
        return source

    def place_on_track(self, source_id, track_index, start_time=0.0):
        source = self.sources.get(source_id)
        if source is None:
            self.logger.warning(f"[PLACE] Unknown source {source_id}")
            return None
        self.tracks.validate(track_index)
        clip = clip_ops.place_on_track(source, track_index, start_time)
        self._commit(self.clips + [clip])
        self.logger.info(f"[PLACE] {source.name} on V{track_index + 1} at {clip.start_time:.2f}s")
        return clip

    def trim(self, timeline_id, edge, delta, original=None):
        idx = self._index_of(timeline_id)
        if idx < 0:
            self.logger.warning(f"[TRIM] Unknown clip {timeline_id}")
            return False
        clip = self.clips[idx]
        source = self.sources.get(clip.source_id)
        if source is None:
            self.logger.warning(f"[TRIM] Clip {timeline_id} has no source in the pool")
            return False
        trimmed = clip_ops.trim(clip, edge, delta, source, original=original,
                                min_duration=self.min_clip_duration)
        if trimmed == clip:
            return False
        clips = list(self.clips)
        clips[idx] = trimmed
        self._commit(clips)
        return True

    def _replace_with_split(self, idx, halves):
        clips = self.clips[:idx] + list(halves) + self.clips[idx + 1:]
        self._commit(clips)

    def split(self, timeline_id, local_offset):
        idx = self._index_of(timeline_id)
        if idx < 0:
            self.logger.warning(f"[SPLIT] Unknown clip {timeline_id}")
            return None
        halves = clip_ops.split(self.clips[idx], local_offset, margin=self.min_split_margin)
        if halves is None:
            return None
        self._replace_with_split(idx, halves)
        self.logger.info(f"[SPLIT] {timeline_id} at +{local_offset:.2f}s")
        return halves

    def split_at_time(self, time):
        """Raises NoActiveClipError when no clip lies under `time`."""
        target, halves = clip_ops.split_at_time(self.clips, time, margin=self.min_split_margin)
        if halves is None:
            return None
        self._replace_with_split(self._index_of(target.timeline_id), halves)
        self.logger.info(f"[SPLIT] {target.name} on V{target.track_index + 1} at {time:.2f}s")
        return halves

    def move(self, timeline_id, track_index, start_time):
        idx = self._index_of(timeline_id)
        if idx < 0:
            self.logger.warning(f"[MOVE] Unknown clip {timeline_id}")
            return False
        self.tracks.validate(track_index)
        moved = clip_ops.move(self.clips[idx], track_index, start_time)
        if moved == self.clips[idx]:
            return False
        clips = list(self.clips)
        clips[idx] = moved
        self._commit(clips)
        return True

    def remove_clip(self, timeline_id):
        idx = self._index_of(timeline_id)
        if idx < 0:
            return False
        self._commit(self.clips[:idx] + self.clips[idx + 1:])
        return True

    def add_track(self):
        if not self.tracks.add_track():
            return False
        self.data_changed.emit()
        return True

    def remove_track(self, index):
        remaining = self.tracks.remove_track(index, self.clips)
        if remaining is None:
            return False
        self._commit(remaining)
        return True

    def apply_source_duration(self, source_id, duration):
        """
        Records a probed duration. Clips still spanning the whole old source
        follow the new value; trimmed or split clips keep their length.
        """
        source = self.sources.get(source_id)
        if source is None:
            self.logger.warning(f"[PROBE] Report for unknown source {source_id}")
            return False
        if not is_known_duration(duration):
            self.logger.debug(f"[PROBE] Ignoring unusable duration {duration!r} for {source.name}")
            return False
        previous = source.intrinsic_duration
        source.intrinsic_duration = float(duration)
        source.duration_known = True
        clips = []
        changed = False
        for clip in self.clips:
            if clip.source_id == source_id:
                untouched = clip.source_trim_start == 0 and clip.trimmed_duration == previous
                if untouched:
                    updated = clip.copy(trimmed_duration=source.intrinsic_duration)
                else:
                    updated = clip_ops.fit_to_source(clip, source, self.min_clip_duration)
                changed = changed or updated != clip
                clip = updated
            clips.append(clip)
        if changed:
            self._commit(clips)
        self.logger.info(f"[PROBE] {source.name}: {previous:.2f}s -> {source.intrinsic_duration:.2f}s")
        return True

    def active_clip(self, time):
        return resolve(self.clips, time)

    def get_state(self):
        return [clip.to_dict() for clip in self.clips]

    def load_state(self, state, num_tracks=None):
        clips = []
        for data in state or []:
            clip = TimelineClip.from_dict(data)
            if not clip.trimmed_duration > 0:
                self.logger.warning(f"[STATE] Dropped clip {clip.timeline_id} with duration {clip.trimmed_duration}")
                continue
            clip = clip.copy(start_time=max(0.0, clip.start_time), track_index=max(0, clip.track_index),
                             source_trim_start=max(0.0, clip.source_trim_start))
            source = self.sources.get(clip.source_id)
            if source is not None:
                clip = clip_ops.fit_to_source(clip, source, self.min_clip_duration)
            clips.append(clip)
        highest = max([c.track_index for c in clips], default=0)
        self.tracks = TrackList(max(num_tracks or 1, highest + 1))
        self._commit(clips)

def is_known_duration(duration):
    if duration is None:
        return False
    try:
        value = float(duration)
    except (TypeError, ValueError):
        return False
    return not math.isnan(value) and not math.isinf(value) and value > 0
