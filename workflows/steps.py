"""
Workflow steps.

Each step wraps one component call with its timeout and progress band.
Steps never persist anything; the controller owns every write. Optional
steps return a StepOutcome instead of raising for expected failures.
"""

import logging
from typing import Optional, Tuple, Union

from agents.clip_planner import ClipPlannerAgent
from agents.script_writer import ScriptWriterAgent
from core.dedup import DedupEngine
from core.errors import ValidationError
from core.exporter import ExportOrchestrator
from core.models.clip import ClipAnalysis, ClipPlan
from core.models.export import ExportSettings
from core.models.originality import OriginalityReport, UniquenessResult
from core.models.script import AIModelRef, ScriptData, ScriptParams, ScriptTemplate
from core.models.timeline import TimelineData
from core.models.video import Scene, SceneDetectionOptions, VideoAnalysis, VideoInfo
from core.models.workflow import AIClipConfig, DedupConfig, StepOutcome, UniquenessConfig
from core.progress import ProgressBand
from core.providers.base import MediaProvider, VisionProvider
from core.templates import TemplateSelector
from core.timeline import build_timeline, place_segments
from core.timeouts import with_timeout
from core.uniqueness import Rewriter, UniquenessEnforcer

logger = logging.getLogger(__name__)


async def execute_upload_step(
    media: MediaProvider,
    video: Union[str, VideoInfo],
    timeout: Optional[float],
    progress: ProgressBand
) -> VideoInfo:
    """Import a video file, or accept an already imported VideoInfo"""
    if isinstance(video, VideoInfo):
        progress.complete()
        return video
    if not video:
        raise ValidationError("A video is required")

    progress(0.3)
    info = await with_timeout(media.import_video(video), "media-import", timeout)
    progress.complete()
    logger.info(f"Imported {info.name} ({info.duration:.1f}s)")
    return info


def fallback_analysis(video: VideoInfo) -> VideoAnalysis:
    """Single whole-video scene used when vision analysis is unavailable"""
    return VideoAnalysis(
        video_id=video.id,
        scenes=[Scene(
            id="scene_1",
            start_time=0.0,
            end_time=video.duration,
            tags=[],
            type="unknown",
            description=f"Full video: {video.name}",
            confidence=0.5,
        )],
        summary=f"{video.name} (scene analysis unavailable)",
    )


async def execute_analyze_step(
    vision: VisionProvider,
    video: VideoInfo,
    timeout: Optional[float],
    progress: ProgressBand
) -> StepOutcome[VideoAnalysis]:
    """Detect scenes and build the analysis, falling back to one whole-video scene"""
    try:
        detection = await with_timeout(
            vision.detect_scenes_advanced(
                video,
                SceneDetectionOptions(min_scene_duration=3, detect_objects=True, detect_emotions=True),
            ),
            "vision",
            timeout,
        )
        progress(0.6)
        analysis = await with_timeout(
            vision.generate_analysis_report(video, detection.scenes, detection.objects, detection.emotions),
            "vision",
            timeout,
        )
    except Exception as e:
        logger.warning(f"Vision analysis failed for {video.id}, using whole-video fallback: {e}")
        progress.complete()
        return StepOutcome.degrade(fallback_analysis(video), f"Vision analysis unavailable: {e}")

    if not analysis.audio_segments:
        analysis.audio_segments = list(detection.audio_segments)
    progress.complete()
    logger.info(f"Analyzed {video.id}: {len(analysis.scenes)} scenes")
    return StepOutcome.ok(analysis)


def execute_template_step(
    selector: TemplateSelector,
    analysis: VideoAnalysis,
    preferred_id: Optional[str],
    video_duration: float,
    progress: ProgressBand
) -> ScriptTemplate:
    template = selector.select_template(analysis, preferred_id, video_duration=video_duration)
    progress.complete()
    return template


async def execute_script_step(
    writer: ScriptWriterAgent,
    video: VideoInfo,
    analysis: VideoAnalysis,
    template: ScriptTemplate,
    model: AIModelRef,
    params: ScriptParams,
    progress: ProgressBand
) -> ScriptData:
    script = await writer.generate_script(
        video, analysis, template, model, params, on_progress=progress.report
    )
    progress.complete()
    return script


def execute_dedup_step(
    engine: DedupEngine,
    script: ScriptData,
    config: DedupConfig,
    progress: ProgressBand
) -> StepOutcome[Tuple[ScriptData, OriginalityReport]]:
    """
    Score originality and auto-fix when the score is below the configured bar.

    Returns the (possibly fixed) script and the report for its final content.
    """
    engine.update_config(config)
    report = engine.generate_originality_report(script)
    progress(0.5)
    if report.error:
        progress.complete()
        return StepOutcome.degrade((script, report), f"Originality check failed: {report.error}")

    if config.auto_fix and report.score < config.auto_fix_below:
        try:
            fixed = engine.auto_fix(script)
        except Exception as e:
            logger.warning(f"Auto-fix failed for script {script.id}: {e}")
            progress.complete()
            return StepOutcome.degrade((script, report), f"Auto-fix failed: {e}")
        if fixed is not script:
            logger.info(f"Originality score {report.score} below {config.auto_fix_below}, auto-fixed")
            script = fixed
            report = engine.generate_originality_report(script)

    progress.complete()
    return StepOutcome.ok((script, report))


async def execute_uniqueness_step(
    enforcer: UniquenessEnforcer,
    script: ScriptData,
    config: UniquenessConfig,
    rewrite: Optional[Rewriter],
    progress: ProgressBand
) -> StepOutcome[UniquenessResult]:
    if config.add_randomness:
        script = enforcer.add_randomness(script)
    progress(0.2)

    result = await enforcer.ensure_uniqueness(script, rewrite if config.auto_rewrite else None)
    progress.complete()

    if result.is_unique:
        return StepOutcome.ok(result)
    reason = result.error or (
        f"Still {result.similarity:.0%} similar to history after {result.attempts} check(s)"
    )
    return StepOutcome.degrade(result, reason)


async def execute_clip_step(
    planner: ClipPlannerAgent,
    video: VideoInfo,
    analysis: VideoAnalysis,
    config: AIClipConfig,
    timeout: Optional[float],
    progress: ProgressBand
) -> StepOutcome[Tuple[Optional[ClipAnalysis], Optional[ClipPlan]]]:
    """Suggest cuts and, with auto_clip, produce a clip plan. Never fatal."""
    if not config.enabled:
        return StepOutcome.skip((None, None))

    clip_config = config.to_clip_config()
    try:
        clip_analysis = await with_timeout(
            planner.analyze_video(video, clip_config, analysis), "clip", timeout
        )
        progress(0.4)
        plan = None
        if config.auto_clip:
            plan = await with_timeout(
                planner.smart_clip(video, analysis, config.target_duration, config.pacing_style, clip_config),
                "clip",
                timeout,
            )
    except Exception as e:
        logger.warning(f"Clip planning failed for {video.id}: {e}")
        progress.complete()
        return StepOutcome.degrade((None, None), f"Clip planning unavailable: {e}")

    progress.complete()
    return StepOutcome.ok((clip_analysis, plan))


def execute_timeline_step(
    video: VideoInfo,
    analysis: VideoAnalysis,
    script: ScriptData,
    clip_plan: Optional[ClipPlan],
    progress: ProgressBand
) -> Tuple[TimelineData, ScriptData]:
    """Build the timeline and return it with the script's segments time-placed"""
    timeline = build_timeline(video, analysis, script, clip_plan=clip_plan)
    progress(0.7)
    placed = place_segments(script, timeline)
    progress.complete()
    return timeline, placed


async def execute_export_step(
    exporter: ExportOrchestrator,
    project_id: str,
    video: VideoInfo,
    timeline: TimelineData,
    script: Optional[ScriptData],
    settings: ExportSettings,
    progress: ProgressBand
) -> str:
    path = await exporter.export_video(
        project_id, video, timeline, script, settings, on_progress=progress.report
    )
    progress.complete()
    return path
