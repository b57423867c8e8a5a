class TimelineError(ValueError):
    """Base for expected, non-fatal timeline failures."""

class InvalidTrackError(TimelineError):

    def __init__(self, track_index, num_tracks):
        super().__init__(f"Track {track_index} does not exist (timeline has {num_tracks} tracks)")
        self.track_index = track_index
        self.num_tracks = num_tracks

class NoActiveClipError(TimelineError):

    def __init__(self, time):
        super().__init__(f"No clip under the playhead at {time:.2f}s")
        self.time = time
