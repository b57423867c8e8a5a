import logging
from errors import InvalidTrackError
import constants

class TrackList:
    """Tracks are implicit: a count plus each clip's track_index."""

    def __init__(self, num_tracks=1):
        self.logger = logging.getLogger(constants.LOGGER_NAME)
        self.num_tracks = max(1, num_tracks)

    def __len__(self):
        return self.num_tracks

    def is_valid(self, index):
        return isinstance(index, int) and 0 <= index < self.num_tracks

    def validate(self, index):
        if not self.is_valid(index):
            raise InvalidTrackError(index, self.num_tracks)

    def add_track(self):
        if self.num_tracks >= constants.MAX_TRACKS:
            self.logger.warning(f"[TRACKS] Track limit of {constants.MAX_TRACKS} reached.")
            return False
        self.num_tracks += 1
        self.logger.info(f"[TRACKS] Added track V{self.num_tracks}")
        return True

    def can_remove(self, index):
        return self.num_tracks > 1 and self.is_valid(index)

    def remove_track(self, index, clips):
        """
        Returns the clip list with track `index` removed: its clips are dropped
        and every clip above it shifts down one lane. Returns None when rejected.
        """
        if not self.can_remove(index):
            self.logger.debug(f"[TRACKS] Refused to remove track {index} of {self.num_tracks}")
            return None
        remaining = []
        for clip in clips:
            if clip.track_index == index:
                continue
            if clip.track_index > index:
                clip = clip.copy(track_index=clip.track_index - 1)
            remaining.append(clip)
        self.num_tracks -= 1
        self.logger.info(f"[TRACKS] Removed track {index}, dropped {len(clips) - len(remaining)} clips")
        return remaining
