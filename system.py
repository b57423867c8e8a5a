import os
import logging
import json
import threading
from logging.handlers import RotatingFileHandler
import constants

class StreamToLogger:
    """Redirects stdout/stderr to the logger."""

    def __init__(self, logger, level):
        self.logger = logger
        self.level = level

    def write(self, buf):
        for line in buf.rstrip().splitlines():
            self.logger.log(self.level, line.rstrip())

    def flush(self): pass

def setup_system(base_dir):
    log_dir = os.path.abspath(os.path.join(base_dir, 'logs'))
    os.makedirs(log_dir, exist_ok=True)
    fmt = logging.Formatter('%(asctime)s | %(name)-10s | %(levelname)-8s | %(message)s')
    logger = logging.getLogger(constants.LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    f_path = os.path.join(log_dir, 'Timeline_Editor.log')
    if not any(isinstance(h, RotatingFileHandler) and h.baseFilename == f_path for h in logger.handlers):
        h = RotatingFileHandler(f_path, maxBytes=10*1024*1024, backupCount=5, encoding='utf-8')
        h.setFormatter(fmt)
        logger.addHandler(h)
    return logger

CONFIG_DEFAULTS = {
    'min_clip_duration': constants.MIN_CLIP_DURATION,
    'min_split_margin': constants.MIN_SPLIT_MARGIN,
    'min_timeline_duration': constants.MIN_TIMELINE_DURATION,
    'placeholder_duration': constants.PLACEHOLDER_DURATION,
    'frame_interval_ms': constants.FRAME_INTERVAL_MS,
    'pause_on_scrub': True,
    'media_pool_width': constants.DEFAULT_MEDIA_POOL_WIDTH,
}

class ConfigManager:
    """Editor settings in a JSON file. Keys missing from the file fall back to CONFIG_DEFAULTS."""

    def __init__(self, path):
        self.path = path
        self.data = {}
        self.lock = threading.Lock()
        self.load()

    def load(self):
        with self.lock:
            if os.path.exists(self.path):
                try:
                    with open(self.path, 'r') as f: self.data = json.load(f)
                except (OSError, ValueError):
                    logging.getLogger(constants.LOGGER_NAME).warning(f"[CONFIG] Unreadable config at {self.path}, using defaults.")
                    self.data = {}

    def save(self):
        with self.lock:
            folder = os.path.dirname(self.path)
            if folder:
                os.makedirs(folder, exist_ok=True)
            with open(self.path, 'w') as f: json.dump(self.data, f, indent=4)

    def get(self, k, default=None):
        if default is None:
            default = CONFIG_DEFAULTS.get(k)
        return self.data.get(k, default)

    def set(self, k, v):
        self.data[k] = v
        self.save()
