"""Clip Planner Agent - Suggests and applies cuts from scene and audio analysis"""

import logging
import math
from typing import List, Optional, Tuple

from strands import tool

from core.models.clip import (
    PACING_MAX_CLIP_SECONDS,
    ClipAnalysis,
    ClipConfig,
    ClipPlan,
    ClipSegment,
    ClipSuggestion,
    PacingStyle,
)
from core.models.video import VideoAnalysis, VideoInfo
from .base import StudioAgent

logger = logging.getLogger(__name__)

# Emotion intensity treated as a peak
EMOTION_PEAK_INTENSITY = 0.7

Span = Tuple[float, float, float]  # (source_start, source_end, confidence)


class ClipPlannerAgent(StudioAgent):
    """
    Plans automatic cuts for a video.

    analyze_video only suggests; smart_clip produces the plan that drives
    the timeline's video track.
    """

    def __init__(self, config: Optional[ClipConfig] = None):
        super().__init__()
        self.config = config or ClipConfig()

    @tool
    async def analyze_video(
        self,
        video: VideoInfo,
        config: Optional[ClipConfig] = None,
        analysis: Optional[VideoAnalysis] = None
    ) -> ClipAnalysis:
        """
        Suggest scene cuts, silence removal, keyframes and emotion peaks

        Args:
            video: Source video
            config: Detection flags (defaults to the agent's config)
            analysis: Scene/audio analysis of the video

        Returns:
            ClipAnalysis with read-only suggestions
        """
        config = config or self.config
        result = ClipAnalysis(video_id=video.id)
        if analysis is None:
            return result

        if config.detect_scene_change:
            for time, confidence in self._scene_changes(analysis, config):
                result.scene_changes.append(time)
                result.suggestions.append(ClipSuggestion(
                    kind="scene_cut",
                    start_time=time,
                    end_time=time,
                    confidence=confidence,
                    reason="Scene change",
                ))

        if config.detect_silence:
            for start, end in self._silent_sections(analysis, config):
                suggestion = ClipSuggestion(
                    kind="remove_silence",
                    start_time=start,
                    end_time=end,
                    confidence=0.9,
                    reason=f"Audio below {config.silence_threshold:g} dBFS",
                )
                result.silence_sections.append(suggestion)
                result.suggestions.append(suggestion)

        if config.detect_keyframes:
            for scene in analysis.scenes:
                result.keyframes.append(scene.midpoint)
                result.suggestions.append(ClipSuggestion(
                    kind="keyframe",
                    start_time=scene.midpoint,
                    end_time=scene.midpoint,
                    confidence=scene.confidence,
                    reason=f"Representative frame of {scene.id}",
                ))

        if config.detect_emotion:
            for sample in analysis.emotions:
                if sample.intensity >= EMOTION_PEAK_INTENSITY:
                    result.emotion_peaks.append(sample.timestamp)
                    result.suggestions.append(ClipSuggestion(
                        kind="emotion_peak",
                        start_time=sample.timestamp,
                        end_time=sample.timestamp,
                        confidence=sample.intensity,
                        reason=f"Strong {sample.emotion}",
                    ))

        logger.info(f"Clip analysis for {video.id}: {len(result.suggestions)} suggestions")
        return result

    @tool
    async def smart_clip(
        self,
        video: VideoInfo,
        analysis: VideoAnalysis,
        target_duration: Optional[float] = None,
        pacing_style: PacingStyle = PacingStyle.NORMAL,
        config: Optional[ClipConfig] = None
    ) -> ClipPlan:
        """
        Cut the video into clips and fit them to a target duration

        Args:
            video: Source video
            analysis: Scene/audio analysis of the video
            target_duration: Desired output length in seconds (None keeps everything)
            pacing_style: fast, normal or slow; sets the longest uncut clip
            config: Editing flags (defaults to the agent's config)

        Returns:
            ClipPlan with clips placed back to back on the output timeline
        """
        config = config or self.config
        duration = video.duration or analysis.duration
        target = target_duration if target_duration is not None else config.target_duration

        cut_times = [0.0]
        confidences = [1.0]
        if config.detect_scene_change:
            for time, confidence in self._scene_changes(analysis, config):
                if 0.0 < time < duration and time > cut_times[-1]:
                    cut_times.append(time)
                    confidences.append(confidence)
        cut_times.append(duration)

        spans: List[Span] = [
            (cut_times[i], cut_times[i + 1], confidences[i])
            for i in range(len(cut_times) - 1)
        ]

        if config.detect_silence and config.remove_silence:
            spans = _subtract(spans, self._silent_sections(analysis, config))

        spans = _split_long(spans, PACING_MAX_CLIP_SECONDS[pacing_style])

        if config.trim_dead_time:
            spans = [s for s in spans if s[1] - s[0] >= config.min_clip_duration]

        if target is not None:
            spans = _fit_duration(spans, target, config.ai_optimize)

        segments = []
        position = 0.0
        for index, (start, end, confidence) in enumerate(spans):
            length = end - start
            segments.append(ClipSegment(
                id=f"clip_{index + 1}",
                start_time=position,
                end_time=position + length,
                source_start=start,
                source_end=end,
                source_id=video.id,
                confidence=confidence,
                transition=config.transition_type if config.auto_transition and index > 0 else None,
            ))
            position += length

        plan = ClipPlan(
            video_id=video.id,
            segments=segments,
            total_duration=position,
            removed_duration=max(0.0, duration - position),
            cut_points=len(cut_times) - 2,
            pacing_style=pacing_style,
        )
        logger.info(
            f"Smart clip for {video.id}: {len(segments)} clips, "
            f"{self._format_duration(plan.total_duration)} kept, "
            f"{self._format_duration(plan.removed_duration)} removed"
        )
        return plan

    @staticmethod
    def _scene_changes(analysis: VideoAnalysis, config: ClipConfig) -> List[Tuple[float, float]]:
        """(time, confidence) of scene starts after the first frame"""
        return [
            (scene.start_time, scene.confidence)
            for scene in sorted(analysis.scenes, key=lambda s: s.start_time)
            if scene.start_time > 0 and scene.confidence >= config.scene_threshold
        ]

    @staticmethod
    def _silent_sections(analysis: VideoAnalysis, config: ClipConfig) -> List[Tuple[float, float]]:
        return [
            (seg.start_time, seg.end_time)
            for seg in analysis.audio_segments
            if seg.volume < config.silence_threshold and seg.end_time > seg.start_time
        ]


def _subtract(spans: List[Span], holes: List[Tuple[float, float]]) -> List[Span]:
    """Remove the hole intervals from each span"""
    result = []
    for start, end, confidence in spans:
        pieces = [(start, end)]
        for hole_start, hole_end in holes:
            next_pieces = []
            for piece_start, piece_end in pieces:
                if hole_end <= piece_start or hole_start >= piece_end:
                    next_pieces.append((piece_start, piece_end))
                    continue
                if hole_start > piece_start:
                    next_pieces.append((piece_start, hole_start))
                if hole_end < piece_end:
                    next_pieces.append((hole_end, piece_end))
            pieces = next_pieces
        result.extend((s, e, confidence) for s, e in pieces)
    return result


def _split_long(spans: List[Span], max_length: float) -> List[Span]:
    result = []
    for start, end, confidence in spans:
        parts = max(1, math.ceil((end - start) / max_length - 1e-9))
        step = (end - start) / parts
        for i in range(parts):
            result.append((start + i * step, end if i == parts - 1 else start + (i + 1) * step, confidence))
    return result


def _fit_duration(spans: List[Span], target: float, drop_low_confidence: bool) -> List[Span]:
    """
    Shorten the clip list to at most target seconds.

    Drops the lowest-confidence clips first (later clips first on ties)
    when drop_low_confidence is set, then trims the rest proportionally so
    the result lasts exactly target seconds.
    """
    total = sum(e - s for s, e, _ in spans)
    if total <= target or not spans:
        return spans

    kept = list(range(len(spans)))
    if drop_low_confidence:
        order = sorted(range(len(spans)), key=lambda i: (spans[i][2], -i))
        for i in order:
            if total <= target or len(kept) == 1:
                break
            length = spans[i][1] - spans[i][0]
            # only drop clips that do not take the total below target
            if total - length >= target:
                kept.remove(i)
                total -= length

    result = [spans[i] for i in kept]
    if total > target:
        ratio = target / total
        result = [(s, s + (e - s) * ratio, c) for s, e, c in result]
    return result
