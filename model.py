from dataclasses import dataclass, field, fields, asdict, replace
import uuid
import constants

def new_uid():
    return str(uuid.uuid4())
@dataclass

class SourceClip:
    name: str
    media_ref: str
    intrinsic_duration: float = constants.PLACEHOLDER_DURATION
    duration_known: bool = False
    id: str = field(default_factory=new_uid)

    def to_dict(self):
        return asdict(self)
@dataclass

class TimelineClip:
    source_id: str
    track_index: int
    start_time: float
    trimmed_duration: float
    source_trim_start: float = 0.0
    name: str = "Untitled"
    media_ref: str = ""
    timeline_id: str = field(default_factory=new_uid)

    @property
    def end_time(self):
        return self.start_time + self.trimmed_duration

    def contains(self, time):
        """Half-open: a clip owns its start instant but not its end instant."""
        return self.start_time <= time < self.end_time

    def copy(self, **changes):
        return replace(self, **changes)

    def with_new_id(self, **changes):
        changes['timeline_id'] = new_uid()
        return replace(self, **changes)
    @classmethod

    def from_dict(cls, data):
        valid_keys = {f.name for f in fields(cls)}
        filtered_args = {k: v for k, v in data.items() if k in valid_keys}
        required_defaults = {'source_id': "MISSING_SOURCE", 'track_index': 0, 'start_time': 0.0,
                             'trimmed_duration': constants.PLACEHOLDER_DURATION}
        for key, default in required_defaults.items():
            if key not in filtered_args:
                filtered_args[key] = default
        return cls(**filtered_args)

    def to_dict(self):
        data = asdict(self)
        data['end_time'] = self.end_time
        return data
