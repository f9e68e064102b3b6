"""AI clip planning models"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional


class PacingStyle(str, Enum):
    """Editing pace; sets the longest clip the planner keeps uncut"""
    FAST = "fast"
    NORMAL = "normal"
    SLOW = "slow"


PACING_MAX_CLIP_SECONDS = {
    PacingStyle.FAST: 3.0,
    PacingStyle.NORMAL: 6.0,
    PacingStyle.SLOW: 10.0,
}


@dataclass
class ClipConfig:
    """Detection and editing flags for the clip planner"""
    detect_scene_change: bool = True
    detect_silence: bool = True
    detect_keyframes: bool = True
    detect_emotion: bool = False
    remove_silence: bool = True
    trim_dead_time: bool = True
    auto_transition: bool = True
    transition_type: str = "fade"   # "fade", "cut", "dissolve"
    ai_optimize: bool = True
    target_duration: Optional[float] = None
    pacing_style: PacingStyle = PacingStyle.NORMAL
    scene_threshold: float = 0.3    # minimum scene confidence treated as a cut
    silence_threshold: float = -40.0  # dBFS below which audio counts as silent
    min_clip_duration: float = 0.5  # dead-time slivers shorter than this are dropped


@dataclass
class ClipSuggestion:
    """A read-only editing suggestion"""
    kind: str          # "scene_cut", "remove_silence", "keyframe", "emotion_peak"
    start_time: float
    end_time: float
    confidence: float = 0.0
    reason: str = ""


@dataclass
class ClipAnalysis:
    """Suggestions from analyzing a video without applying them"""
    video_id: str
    suggestions: List[ClipSuggestion] = field(default_factory=list)
    scene_changes: List[float] = field(default_factory=list)
    silence_sections: List[ClipSuggestion] = field(default_factory=list)
    keyframes: List[float] = field(default_factory=list)
    emotion_peaks: List[float] = field(default_factory=list)


@dataclass
class ClipSegment:
    """A kept span of the source, placed on the output timeline"""
    id: str
    start_time: float
    end_time: float
    source_start: float
    source_end: float
    source_id: str
    confidence: float = 0.8
    transition: Optional[str] = None

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time


@dataclass
class ClipPlan:
    """Cuts applied by smart clipping"""
    video_id: str
    segments: List[ClipSegment] = field(default_factory=list)
    total_duration: float = 0.0
    removed_duration: float = 0.0
    cut_points: int = 0
    pacing_style: PacingStyle = PacingStyle.NORMAL
    processed_at: str = field(default_factory=lambda: datetime.utcnow().isoformat())
