import sys
import os
import logging
import traceback
from PyQt5.QtCore import QCoreApplication
from system import setup_system, StreamToLogger, ConfigManager
from editor import EditorSession
import constants

def exception_hook(exctype, value, tb):
    err_msg = "".join(traceback.format_exception(exctype, value, tb))
    logging.getLogger(constants.LOGGER_NAME).critical(f"CORE CRASH DETECTED:\n{err_msg}")
    sys.__excepthook__(exctype, value, tb)

class HeadlessPreview:
    """
    Imports the given files, lays them out back to back on V1 once every probe
    has reported, then plays the timeline and logs what the renderer would show.
    """

    def __init__(self, app, editor, paths):
        self.app = app
        self.editor = editor
        self.logger = logging.getLogger(constants.LOGGER_NAME)
        self.pending = set()
        self.order = []
        self._last_ref = None
        editor.source_probed.connect(self.on_source_probed)
        editor.render_target_changed.connect(self.on_render_target)
        editor.status_message.connect(lambda msg: self.logger.info(f"[STATUS] {msg}"))
        editor.clock.state_changed.connect(self.on_state_changed)
        for path in paths:
            source = editor.add_source_clip(os.path.basename(path), os.path.abspath(path), probe=False)
            self.order.append(source.id)
            self.pending.add(source.id)
        for source_id in list(self.order):
            editor.request_probe(editor.timeline.get_source(source_id))

    def on_source_probed(self, source_id):
        self.pending.discard(source_id)
        if self.pending:
            return
        cursor = 0.0
        for source_id in self.order:
            clip = self.editor.place_on_track(source_id, 0, cursor)
            if clip:
                cursor = clip.end_time
        self.logger.info(f"[PREVIEW] Timeline ready: {self.editor.time_label()}")
        self.editor.play()

    def on_render_target(self, target):
        ref = target.media_ref if target else None
        if ref != self._last_ref:
            self._last_ref = ref
            if target:
                self.logger.info(f"[PREVIEW] {self.editor.time_label()} -> {os.path.basename(ref)} @ {target.seek_position:.2f}s")
            else:
                self.logger.info(f"[PREVIEW] {self.editor.time_label()} -> blank")

    def on_state_changed(self, playing):
        if not playing:
            self.logger.info("[PREVIEW] Playback finished.")
            self.app.quit()

if __name__ == "__main__":
    sys.excepthook = exception_hook
    base_dir = os.path.dirname(os.path.abspath(__file__))
    logger = setup_system(base_dir)
    sys.stdout = StreamToLogger(logger, logging.INFO)
    sys.stderr = StreamToLogger(logger, logging.ERROR)
    logger.info("=== Booting Timeline Editor ===")
    paths = [p for p in sys.argv[1:] if os.path.isfile(p)]
    if not paths:
        logger.error("No media files given.")
        sys.exit(1)
    app = QCoreApplication(sys.argv)
    config = ConfigManager(os.path.join(base_dir, "config", "Timeline_Editor.conf"))
    try:
        editor = EditorSession(config=config, base_dir=base_dir)
        preview = HeadlessPreview(app, editor, paths)
        sys.exit(app.exec_())
    except Exception as e:
        logger.critical(f"FATAL CRASH during app execution: {e}", exc_info=True)
        sys.exit(1)
