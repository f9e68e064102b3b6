"""
Timeline placement.

Script segments are laid out back to back across the output duration. Each
segment gets a subtitle clip and a video clip sourced from the scene
nearest to the segment's relative position in the footage. When an
auto-clip plan exists, its segments form the video track instead.
"""

import logging
from dataclasses import replace
from typing import List, Optional

from core.errors import ValidationError
from core.models.clip import ClipPlan
from core.models.script import ScriptData
from core.models.timeline import TimelineClip, TimelineData, TimelineTrack, TrackType
from core.models.video import Scene, VideoAnalysis, VideoInfo

logger = logging.getLogger(__name__)

VIDEO_TRACK_ID = "video-track-1"
AUDIO_TRACK_ID = "audio-track-1"
SUBTITLE_TRACK_ID = "subtitle-track-1"

# Float slack when comparing clip boundaries
EPSILON = 1e-6


def empty_timeline(duration: float) -> TimelineData:
    return TimelineData(
        duration=duration,
        tracks=[
            TimelineTrack(id=VIDEO_TRACK_ID, type=TrackType.VIDEO),
            TimelineTrack(id=AUDIO_TRACK_ID, type=TrackType.AUDIO),
            TimelineTrack(id=SUBTITLE_TRACK_ID, type=TrackType.SUBTITLE),
        ],
    )


def find_nearest_scene(scenes: List[Scene], position: float) -> Optional[Scene]:
    """Scene whose midpoint is closest to `position` (0-1) of the footage"""
    if not scenes:
        return None
    target = position * max(s.end_time for s in scenes)
    best = None
    for scene in scenes:
        if best is None or abs(scene.midpoint - target) < abs(best.midpoint - target):
            best = scene
    return best


def build_timeline(
    video: VideoInfo,
    analysis: Optional[VideoAnalysis],
    script: ScriptData,
    clip_plan: Optional[ClipPlan] = None,
    auto_match: bool = True
) -> TimelineData:
    """Lay the script's segments onto video, audio and subtitle tracks"""
    use_plan = clip_plan is not None and bool(clip_plan.segments)
    duration = clip_plan.total_duration if use_plan else video.duration
    timeline = empty_timeline(duration)
    if not auto_match or not script.segments:
        return timeline

    video_track = timeline.track(TrackType.VIDEO)
    subtitle_track = timeline.track(TrackType.SUBTITLE)
    count = len(script.segments)
    share = duration / count
    scenes = analysis.scenes if analysis else []

    for index, segment in enumerate(script.segments):
        start = index * share
        end = duration if index == count - 1 else (index + 1) * share

        if not use_plan:
            scene = find_nearest_scene(scenes, (index + 0.5) / count)
            video_track.clips.append(TimelineClip(
                id=f"video-clip-{index}",
                start_time=start,
                end_time=end,
                source_start=scene.start_time if scene else 0.0,
                source_end=scene.end_time if scene else video.duration,
                source_id=video.id,
                script_segment_id=segment.id,
                transition="fade" if index > 0 else None,
            ))

        subtitle_track.clips.append(TimelineClip(
            id=f"subtitle-clip-{index}",
            start_time=start,
            end_time=end,
            source_start=0.0,
            source_end=float(len(segment.content)),
            source_id=segment.id,
            script_segment_id=segment.id,
        ))

    if use_plan:
        for index, planned in enumerate(clip_plan.segments):
            video_track.clips.append(TimelineClip(
                id=f"video-clip-{index}",
                start_time=planned.start_time,
                end_time=planned.end_time,
                source_start=planned.source_start,
                source_end=planned.source_end,
                source_id=planned.source_id or video.id,
                transition=planned.transition,
            ))
        logger.info(f"Video track built from clip plan ({len(clip_plan.segments)} clips)")

    validate_timeline(timeline)
    return timeline


def place_segments(script: ScriptData, timeline: TimelineData) -> ScriptData:
    """Copy subtitle clip times onto the script's segments"""
    track = timeline.track(TrackType.SUBTITLE)
    if not track or not track.clips:
        return script

    times = {c.script_segment_id: (c.start_time, c.end_time) for c in track.clips}
    segments = [
        replace(s, start_time=times[s.id][0], end_time=times[s.id][1]) if s.id in times else s
        for s in script.segments
    ]
    return replace(script, segments=segments)


def validate_timeline(timeline: TimelineData):
    """
    Raise ValidationError if any track has a reversed, overlapping or
    out-of-order clip.
    """
    for track in timeline.tracks:
        previous_end = 0.0
        for clip in track.clips:
            if clip.end_time < clip.start_time - EPSILON:
                raise ValidationError(f"Clip {clip.id} on {track.id} ends before it starts")
            if clip.start_time < previous_end - EPSILON:
                raise ValidationError(f"Clip {clip.id} on {track.id} overlaps the previous clip")
            previous_end = clip.end_time
