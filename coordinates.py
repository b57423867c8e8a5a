import math
from dataclasses import dataclass
import constants

def clamp(value, low, high):
    return max(low, min(high, value))

def pixel_to_time(pixel_x, viewport_origin, viewport_width, total_duration):
    """Maps a pointer x position to seconds, pinned to the visible range."""
    if viewport_width <= 0:
        return 0.0
    fraction = clamp((pixel_x - viewport_origin) / viewport_width, 0.0, 1.0)
    return fraction * total_duration

def pixel_delta_to_time(dx, viewport_width, total_duration):
    if viewport_width <= 0:
        return 0.0
    return (dx / viewport_width) * total_duration

def time_to_percent(time, total_duration):
    if total_duration <= 0:
        return 0.0
    return (time / total_duration) * 100.0

def local_offset_from_click(click_x, clip_left, clip_width, trimmed_duration):
    """Converts a click inside a clip's rectangle into seconds from the clip start."""
    if clip_width <= 0:
        return 0.0
    return clamp((click_x - clip_left) / clip_width, 0.0, 1.0) * trimmed_duration

def format_time(seconds):
    if seconds is None or math.isnan(seconds) or seconds == 0:
        return "00:00"
    mins = int(abs(seconds) // 60)
    secs = int(abs(seconds) % 60)
    return f"{mins:02d}:{secs:02d}"

def ruler_interval(total_duration):
    for threshold, interval in constants.RULER_INTERVALS:
        if total_duration > threshold:
            return interval
    return 1

def ruler_ticks(total_duration):
    """Returns (seconds, percent, label) for each ruler tick below the total."""
    ticks = []
    if total_duration <= 0:
        return ticks
    interval = ruler_interval(total_duration)
    t = 0
    while t < total_duration:
        ticks.append((t, time_to_percent(t, total_duration), format_time(t)))
        t += interval
    return ticks
@dataclass

class Viewport:
    left: float = 0.0
    width: float = 0.0
    header_width: float = constants.TRACK_HEADER_WIDTH

    @property
    def origin(self):
        return self.left + self.header_width

    @property
    def usable_width(self):
        return self.width - self.header_width

    def to_time(self, client_x, total_duration):
        return pixel_to_time(client_x, self.origin, self.usable_width, total_duration)

    def delta_to_time(self, dx, total_duration):
        return pixel_delta_to_time(dx, self.usable_width, total_duration)
