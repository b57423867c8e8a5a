import time
import logging
from PyQt5.QtCore import QObject, QTimer, pyqtSignal
import constants

class PlaybackClock(QObject):
    """Play-head position plus a Stopped/Playing state machine driven by a frame timer."""
    time_changed = pyqtSignal(float)
    state_changed = pyqtSignal(bool)

    def __init__(self, total_duration=constants.MIN_TIMELINE_DURATION,
                 interval_ms=constants.FRAME_INTERVAL_MS, time_source=time.monotonic):
        super().__init__()
        self.logger = logging.getLogger(constants.LOGGER_NAME)
        self.current_time = 0.0
        self.total_duration = float(total_duration)
        self.playing = False
        self._time_source = time_source
        self._last_timestamp = None
        self.timer = QTimer(self)
        self.timer.setInterval(interval_ms)
        self.timer.timeout.connect(self._on_frame)

    def is_playing(self):
        return self.playing

    def play(self):
        if self.playing:
            return
        if self.current_time >= self.total_duration:
            self._set_time(0.0)
        self.playing = True
        self._last_timestamp = self._time_source()
        self.timer.start()
        self.logger.debug(f"[CLOCK] Play from {self.current_time:.2f}s")
        self.state_changed.emit(True)

    def pause(self):
        if not self.playing:
            return
        self.playing = False
        self.timer.stop()
        self._last_timestamp = None
        self.logger.debug(f"[CLOCK] Paused at {self.current_time:.2f}s")
        self.state_changed.emit(False)

    def toggle(self):
        if self.playing:
            self.pause()
        else:
            self.play()

    def seek(self, t):
        self._set_time(t)

    def set_total_duration(self, total):
        self.total_duration = float(total)
        if self.current_time > self.total_duration:
            self._set_time(self.total_duration)

    def _on_frame(self):
        self.tick(self._time_source())

    def tick(self, now):
        if not self.playing:
            return
        elapsed = now - self._last_timestamp
        self._last_timestamp = now
        new_time = self.current_time + max(0.0, elapsed)
        if new_time >= self.total_duration:
            self._set_time(self.total_duration)
            self.pause()
            return
        self._set_time(new_time)

    def _set_time(self, t):
        t = max(0.0, min(self.total_duration, t))
        if t == self.current_time:
            return
        self.current_time = t
        self.time_changed.emit(t)
