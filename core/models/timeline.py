"""Timeline models produced by timeline placement"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class TrackType(str, Enum):
    VIDEO = "video"
    AUDIO = "audio"
    SUBTITLE = "subtitle"


@dataclass
class TimelineClip:
    """A clip placed on a track"""
    id: str
    start_time: float               # position on the timeline (seconds)
    end_time: float
    source_start: float = 0.0       # trim points in the source
    source_end: float = 0.0
    source_id: str = ""
    script_segment_id: Optional[str] = None
    transition: Optional[str] = None

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time


@dataclass
class TimelineTrack:
    id: str
    type: TrackType
    clips: List[TimelineClip] = field(default_factory=list)


@dataclass
class TimelineData:
    """Ordered tracks of ordered clips"""
    duration: float
    tracks: List[TimelineTrack] = field(default_factory=list)

    def track(self, track_type: TrackType) -> Optional[TimelineTrack]:
        for track in self.tracks:
            if track.type == track_type:
                return track
        return None

    @property
    def total_clips(self) -> int:
        return sum(len(t.clips) for t in self.tracks)
