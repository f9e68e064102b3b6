"""SubRip (SRT) subtitle generation"""

from typing import List, Tuple

from core.models.script import ScriptData
from core.models.timeline import TimelineData, TrackType


def format_srt_time(seconds: float) -> str:
    """Format seconds as HH:MM:SS,mmm, truncating to the millisecond"""
    # epsilon absorbs float error on values that are exact in decimal
    total_ms = max(0, int(seconds * 1000 + 1e-6))
    hours, rest = divmod(total_ms, 3_600_000)
    minutes, rest = divmod(rest, 60_000)
    secs, millis = divmod(rest, 1000)
    return f"{hours:02d}:{minutes:02d}:{secs:02d},{millis:03d}"


def subtitle_cues(script: ScriptData, timeline: TimelineData) -> List[Tuple[float, float, str]]:
    """
    (start, end, text) per cue.

    Uses the subtitle track's clip bounds when the timeline has one with
    clips; otherwise splits the timeline duration evenly across segments.
    """
    track = timeline.track(TrackType.SUBTITLE)
    if track and track.clips:
        cues = []
        for clip in track.clips:
            segment = script.segment(clip.script_segment_id) if clip.script_segment_id else None
            cues.append((clip.start_time, clip.end_time, segment.content if segment else ""))
        return cues

    if not script.segments:
        return []
    share = timeline.duration / len(script.segments)
    return [
        (index * share, (index + 1) * share, segment.content)
        for index, segment in enumerate(script.segments)
    ]


def generate_srt(script: ScriptData, timeline: TimelineData) -> str:
    blocks = [
        f"{number}\n{format_srt_time(start)} --> {format_srt_time(end)}\n{text}\n"
        for number, (start, end, text) in enumerate(subtitle_cues(script, timeline), start=1)
    ]
    return "\n".join(blocks)
