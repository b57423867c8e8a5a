import os
import time
import logging
from PyQt5.QtCore import QObject, QThreadPool, pyqtSignal
from timeline import TimelineModel
from clock import PlaybackClock
from coordinates import Viewport, format_time
from gestures import PointerType, open_session
from prober import ProbeWorker
from errors import InvalidTrackError, NoActiveClipError
from system import CONFIG_DEFAULTS
import constants

class EditorSession(QObject):
    """
    Command surface for the UI. Expected rejections (bad trim, split too close
    to an edge, removing the last track, wrong track) return None/False and
    never raise.
    """
    render_target_changed = pyqtSignal(object)
    time_changed = pyqtSignal(float, float)
    time_label_changed = pyqtSignal(str)
    placeholder_changed = pyqtSignal(object)
    media_pool_width_changed = pyqtSignal(int)
    status_message = pyqtSignal(str)
    source_probed = pyqtSignal(str)

    def __init__(self, config=None, base_dir=None, thread_pool=None, time_source=time.monotonic):
        super().__init__()
        self.logger = logging.getLogger(constants.LOGGER_NAME)
        self.config = config
        self.base_dir = base_dir
        self.timeline = TimelineModel(
            min_clip_duration=self._cfg('min_clip_duration'),
            min_split_margin=self._cfg('min_split_margin'),
            min_timeline_duration=self._cfg('min_timeline_duration'),
            placeholder_duration=self._cfg('placeholder_duration'),
        )
        self.clock = PlaybackClock(
            total_duration=self.timeline.total_duration,
            interval_ms=self._cfg('frame_interval_ms'),
            time_source=time_source,
        )
        self.viewport = Viewport()
        self.pause_on_scrub = self._cfg('pause_on_scrub')
        self.media_pool_width = self._cfg('media_pool_width')
        self.thread_pool = thread_pool
        self.session = None
        self.placeholder = None
        self.timeline.data_changed.connect(self._refresh_render)
        self.timeline.duration_changed.connect(self.clock.set_total_duration)
        self.timeline.duration_changed.connect(self._emit_time)
        self.clock.time_changed.connect(self._refresh_render)
        self.clock.time_changed.connect(self._emit_time)

    def _cfg(self, key):
        default = CONFIG_DEFAULTS[key]
        if self.config is None:
            return default
        return self.config.get(key, default)

    @property
    def current_time(self):
        return self.clock.current_time

    @property
    def total_duration(self):
        return self.timeline.total_duration

    def current_render_target(self):
        active = self.timeline.active_clip(self.clock.current_time)
        return active.render_target() if active else None

    def _refresh_render(self, *_):
        self.render_target_changed.emit(self.current_render_target())

    def _emit_time(self, *_):
        self.time_changed.emit(self.clock.current_time, self.timeline.total_duration)
        self.time_label_changed.emit(self.time_label())

    def time_label(self):
        return f"{format_time(self.clock.current_time)} / {format_time(self.timeline.total_duration)}"

    def add_source_clip(self, name, media_ref, duration=None, probe=True):
        source = self.timeline.add_source_clip(name, media_ref, duration)
        if probe and not source.duration_known:
            self.request_probe(source)
        return source

    def pool_menu_entries(self):
        return [
            (s.id, f"{s.name[:constants.POOL_LABEL_LENGTH]} ({format_time(s.intrinsic_duration)})")
            for s in self.timeline.sources.values()
        ]

    def _get_thread_pool(self):
        if self.thread_pool is None:
            self.thread_pool = QThreadPool()
            self.thread_pool.setMaxThreadCount(os.cpu_count() or 4)
        return self.thread_pool

    def request_probe(self, source):
        cache_dir = os.path.join(self.base_dir, "cache", "probes") if self.base_dir else None
        worker = ProbeWorker(source.id, source.media_ref, cache_dir=cache_dir)
        worker.signals.result.connect(self.on_probe_done)
        self._get_thread_pool().start(worker)
        self.logger.debug(f"[PROBE] Queued {source.media_ref}")

    def on_probe_done(self, info):
        source_id = info.get('source_id')
        if 'error' in info:
            self.logger.error(f"[PROBE] Failed to probe {info.get('media_ref')}: {info['error']}")
            self.status_message.emit(f"Could not read duration of {os.path.basename(str(info.get('media_ref', '')))}")
        else:
            self.apply_probe_result(source_id, info.get('duration'))
        self.source_probed.emit(source_id)

    def apply_probe_result(self, source_id, duration):
        return self.timeline.apply_source_duration(source_id, duration)

    def place_on_track(self, source_id, track_index, start_time=0.0):
        try:
            clip = self.timeline.place_on_track(source_id, track_index, start_time)
        except InvalidTrackError as e:
            self.logger.warning(f"[PLACE] {e}")
            self.status_message.emit(str(e))
            return None
        if clip:
            self.status_message.emit(f"{clip.name} added to V{track_index + 1}")
        return clip

    def trim(self, timeline_id, edge, delta, original=None):
        return self.timeline.trim(timeline_id, edge, delta, original=original)

    def split_clip(self, timeline_id, local_offset):
        return self.timeline.split(timeline_id, local_offset)

    def split_at_time(self, t):
        try:
            return self.timeline.split_at_time(t)
        except NoActiveClipError as e:
            self.logger.warning(f"[SPLIT] {e}")
            self.status_message.emit("Playhead is not over a clip to split.")
            return None

    def split_at_playhead(self):
        return self.split_at_time(self.clock.current_time)

    def move(self, timeline_id, track_index, start_time):
        try:
            return self.timeline.move(timeline_id, track_index, start_time)
        except InvalidTrackError as e:
            self.logger.debug(f"[MOVE] {e}")
            return False

    def remove_clip(self, timeline_id):
        return self.timeline.remove_clip(timeline_id)

    def add_track(self):
        return self.timeline.add_track()

    def remove_track(self, index):
        removed = self.timeline.remove_track(index)
        if not removed:
            self.status_message.emit("At least one track must remain.")
        return removed

    def play(self):
        self.clock.play()

    def pause(self):
        self.clock.pause()

    def toggle_play(self):
        self.clock.toggle()

    def seek(self, t):
        self.clock.seek(t)

    def set_viewport(self, left, width, header_width=constants.TRACK_HEADER_WIDTH):
        self.viewport = Viewport(left, width, header_width)

    def set_placeholder(self, placeholder):
        if placeholder == self.placeholder:
            return
        self.placeholder = placeholder
        self.placeholder_changed.emit(placeholder)

    def set_media_pool_width(self, width):
        if width == self.media_pool_width:
            return
        self.media_pool_width = width
        self.media_pool_width_changed.emit(width)

    def persist_media_pool_width(self):
        if self.config is not None:
            self.config.set('media_pool_width', self.media_pool_width)

    def handle_pointer(self, event):
        if event.type == PointerType.START:
            if self.session is not None:
                self._close_session(None)
            try:
                self.session = open_session(self, event)
            except LookupError as e:
                self.logger.warning(f"[GESTURE] No target for {event.target.value}: {e}")
                self.session = None
        elif event.type == PointerType.MOVE:
            if self.session is not None:
                self.session.update(event)
        elif event.type == PointerType.END:
            self._close_session(event)

    def _close_session(self, event):
        session, self.session = self.session, None
        try:
            if session is not None:
                session.end(event)
        finally:
            self.set_placeholder(None)

    def get_state(self):
        return self.timeline.get_state()

    def load_state(self, state, num_tracks=None):
        self.timeline.load_state(state, num_tracks=num_tracks)
