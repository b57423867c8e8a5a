from dataclasses import dataclass
from model import TimelineClip
from clip_ops import topmost_at
@dataclass(frozen=True)

class RenderTarget:
    media_ref: str
    seek_position: float
@dataclass(frozen=True)

class ActiveClip:
    clip: TimelineClip
    seek_position: float

    def render_target(self):
        return RenderTarget(self.clip.media_ref, self.seek_position)

def resolve(clips, time):
    """
    Picks the clip visible at `time`: half-open containment, highest track on top.
    The seek position is source-local, ready for the renderer.
    """
    clip = topmost_at(clips, time)
    if clip is None:
        return None
    return ActiveClip(clip, time - clip.start_time + clip.source_trim_start)
