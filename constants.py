MIN_CLIP_DURATION = 1.0
MIN_SPLIT_MARGIN = 0.5
MIN_TIMELINE_DURATION = 30.0
PLACEHOLDER_DURATION = 15.0
TRACK_HEADER_WIDTH = 140
MAX_TRACKS = 50
FRAME_INTERVAL_MS = 16
DEFAULT_MEDIA_POOL_WIDTH = 240
MIN_MEDIA_POOL_WIDTH = 200
MAX_MEDIA_POOL_WIDTH = 800
POOL_LABEL_LENGTH = 30
RULER_INTERVALS = [
    (300, 30),
    (120, 10),
    (60, 5),
    (30, 2),
]
LOGGER_NAME = "Timeline_Editor"
