"""
Drag gesture sessions.

A session is created on pointer-down, fed every pointer-move, and torn down on
pointer-up. It holds the start snapshot and the live pointer position, so all
arithmetic is relative to the state at gesture start rather than accumulated
frame by frame.
"""
import logging
from dataclasses import dataclass
from enum import Enum
import constants

class PointerType(Enum):
    START = "start"
    MOVE = "move"
    END = "end"

class Affordance(Enum):
    CLIP_BODY = "clip_body"
    TRIM_START = "trim_start"
    TRIM_END = "trim_end"
    RULER = "ruler"
    POOL_ITEM = "pool_item"
    RESIZER = "resizer"
@dataclass

class PointerEvent:
    type: PointerType
    client_x: float
    target: Affordance
    timeline_id: str = None
    track_index: int = None
    source_id: str = None
@dataclass(frozen=True)

class DropPlaceholder:
    track_index: int
    start_time: float
    width_percent: float

class GestureSession:

    def __init__(self, editor, event):
        self.editor = editor
        self.logger = logging.getLogger(constants.LOGGER_NAME)
        self.start_x = event.client_x
        self.pointer_x = event.client_x
        self.total_duration = editor.timeline.total_duration

    def update(self, event):
        self.pointer_x = event.client_x
        self.apply(event)

    def apply(self, event):
        pass

    def end(self, event):
        if event is not None:
            self.update(event)

    def pointer_time(self):
        return self.editor.viewport.to_time(self.pointer_x, self.total_duration)

class MoveSession(GestureSession):
    """Keeps the grabbed point of the clip under the pointer."""

    def __init__(self, editor, event):
        super().__init__(editor, event)
        clip = editor.timeline.get_clip(event.timeline_id)
        if clip is None:
            raise LookupError(event.timeline_id)
        self.timeline_id = clip.timeline_id
        self.track_index = clip.track_index
        self.grab_offset = self.pointer_time() - clip.start_time

    def apply(self, event):
        if event.track_index is not None:
            self.track_index = event.track_index
        self.editor.move(self.timeline_id, self.track_index, self.pointer_time() - self.grab_offset)

class TrimSession(GestureSession):

    def __init__(self, editor, event, edge):
        super().__init__(editor, event)
        clip = editor.timeline.get_clip(event.timeline_id)
        if clip is None:
            raise LookupError(event.timeline_id)
        self.edge = edge
        self.original = clip

    def apply(self, event):
        delta = self.editor.viewport.delta_to_time(self.pointer_x - self.start_x, self.total_duration)
        self.editor.trim(self.original.timeline_id, self.edge, delta, original=self.original)

class SeekSession(GestureSession):

    def __init__(self, editor, event):
        super().__init__(editor, event)
        if editor.pause_on_scrub and editor.clock.is_playing():
            editor.pause()
        editor.seek(self.pointer_time())

    def pointer_time(self):
        return self.editor.viewport.to_time(self.pointer_x, self.editor.timeline.total_duration)

    def apply(self, event):
        self.editor.seek(self.pointer_time())

class PoolDropSession(GestureSession):
    """Dragging a media-pool entry over the tracks; places it on release."""

    def __init__(self, editor, event):
        super().__init__(editor, event)
        self.source = editor.timeline.get_source(event.source_id)
        if self.source is None:
            raise LookupError(event.source_id)
        self.track_index = event.track_index

    def apply(self, event):
        self.track_index = event.track_index
        if self.track_index is None:
            self.editor.set_placeholder(None)
            return
        width = self.source.intrinsic_duration / self.total_duration * 100.0
        self.editor.set_placeholder(DropPlaceholder(self.track_index, self.pointer_time(), width))

    def end(self, event):
        if event is not None:
            self.pointer_x = event.client_x
            self.track_index = event.track_index
        if self.track_index is None:
            return
        self.editor.place_on_track(self.source.id, self.track_index, self.pointer_time())

class ResizeSession(GestureSession):
    """Media-pool sidebar width; out-of-bounds widths are ignored, not clamped."""

    def __init__(self, editor, event):
        super().__init__(editor, event)
        self.start_width = editor.media_pool_width

    def apply(self, event):
        width = self.start_width + (self.pointer_x - self.start_x)
        if constants.MIN_MEDIA_POOL_WIDTH < width < constants.MAX_MEDIA_POOL_WIDTH:
            self.editor.set_media_pool_width(int(width))

    def end(self, event):
        super().end(event)
        self.editor.persist_media_pool_width()

def open_session(editor, event):
    if event.target == Affordance.CLIP_BODY:
        return MoveSession(editor, event)
    if event.target == Affordance.TRIM_START:
        return TrimSession(editor, event, "start")
    if event.target == Affordance.TRIM_END:
        return TrimSession(editor, event, "end")
    if event.target == Affordance.RULER:
        return SeekSession(editor, event)
    if event.target == Affordance.POOL_ITEM:
        return PoolDropSession(editor, event)
    if event.target == Affordance.RESIZER:
        return ResizeSession(editor, event)
    raise ValueError(f"Unknown gesture target: {event.target!r}")
