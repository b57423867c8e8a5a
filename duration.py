import constants

def compute_total_duration(clips, floor=constants.MIN_TIMELINE_DURATION):
    """The floor keeps an empty timeline non-degenerate for pixel mapping."""
    return max([floor] + [clip.end_time for clip in clips])
