import subprocess
import json
import os
import traceback
import logging
import shutil
import hashlib
from PyQt5.QtCore import QRunnable, QObject, pyqtSignal
import constants

class ProbeSignals(QObject):
    result = pyqtSignal(dict)

class ProbeWorker(QRunnable):
    """Reports {'source_id', 'duration'} for one media reference, or an 'error'."""

    def __init__(self, source_id, media_ref, cache_dir=None):
        super().__init__()
        self.source_id = source_id
        self.media_ref = media_ref
        self.cache_dir = cache_dir
        self.signals = ProbeSignals()
        self.setAutoDelete(True)

    def _get_cache_path(self):
        """Cache key is the file path, size and mtime."""
        if not self.cache_dir:
            return None
        try:
            stat = os.stat(self.media_ref)
        except OSError:
            return None
        fingerprint = f"{self.media_ref}_{stat.st_mtime}_{stat.st_size}"
        h = hashlib.md5(fingerprint.encode('utf-8')).hexdigest()
        os.makedirs(self.cache_dir, exist_ok=True)
        return os.path.join(self.cache_dir, f"{h}.json")

    def _run_ffprobe(self):
        ffprobe_bin = shutil.which('ffprobe') or 'ffprobe'
        cmd = [
            ffprobe_bin,
            '-v', 'quiet',
            '-print_format', 'json',
            '-show_format',
            self.media_ref
        ]
        kwargs = {}
        if os.name == 'nt':
            si = subprocess.STARTUPINFO()
            si.dwFlags |= subprocess.STARTF_USESHOWWINDOW
            kwargs['startupinfo'] = si
        result = subprocess.run(cmd, capture_output=True, text=True, check=True, encoding='utf-8', **kwargs)
        return json.loads(result.stdout)

    def run(self):
        logger = logging.getLogger(constants.LOGGER_NAME)
        info = {'source_id': self.source_id, 'media_ref': self.media_ref}
        cache_file = self._get_cache_path()
        if cache_file and os.path.exists(cache_file):
            try:
                with open(cache_file, 'r') as f:
                    info.update(json.load(f))
                self.signals.result.emit(info)
                return
            except (OSError, ValueError):
                logger.warning(f"[PROBE-CACHE] Corrupt cache file, regenerating: {cache_file}")
        try:
            data = self._run_ffprobe()
            raw = data.get('format', {}).get('duration')
            try:
                duration = float(raw) if raw not in (None, 'N/A') else 0.0
            except ValueError:
                duration = 0.0
            if cache_file and duration > 0:
                try:
                    with open(cache_file, 'w') as f:
                        json.dump({'duration': duration}, f)
                except OSError as e:
                    logger.warning(f"[PROBE-CACHE] Failed to write cache: {e}")
            info['duration'] = duration
            self.signals.result.emit(info)
        except subprocess.CalledProcessError as e:
            logger.error(f"[BINARY FAILURE] Probe failed for {self.media_ref}. Exit code: {e.returncode}")
            info['error'] = str(e)
            self.signals.result.emit(info)
        except (OSError, ValueError) as e:
            logger.error(f"Probe Failed:\n{traceback.format_exc()}")
            info['error'] = str(e)
            self.signals.result.emit(info)
