"""Workflow run state, configuration and step outcome models"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

from core.errors import ValidationError

from .clip import ClipAnalysis, ClipConfig, ClipPlan, PacingStyle
from .export import ExportSettings
from .originality import DuplicateType, OriginalityReport, UniquenessReport, UniquenessResult
from .script import AIModelRef, ScriptData, ScriptLength, ScriptParams, ScriptTemplate
from .timeline import TimelineData
from .video import VideoAnalysis, VideoInfo

T = TypeVar("T")

DEFAULT_MODEL_ID = "claude-sonnet-4-20250514"


class WorkflowStep(str, Enum):
    """States of the workflow state machine, in execution order"""
    PROJECT_CREATE = "project-create"
    VIDEO_UPLOAD = "video-upload"
    AI_ANALYZE = "ai-analyze"
    SCRIPT_GENERATE = "script-generate"
    DEDUP = "dedup"
    UNIQUENESS = "uniqueness"
    AI_CLIP = "ai-clip"
    TIMELINE_EDIT = "timeline-edit"
    EXPORT = "export"
    DONE = "done"


class WorkflowStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass
class StageEvent:
    """Event in the run timeline"""
    step: WorkflowStep
    timestamp: datetime
    duration_ms: Optional[int] = None
    details: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None


@dataclass
class StepOutcome(Generic[T]):
    """
    Result of an optional step.

    Optional steps never raise for expected failures; they return a
    degraded outcome carrying a fallback value and the reason.
    """
    value: Optional[T] = None
    degraded: bool = False
    skipped: bool = False
    reason: Optional[str] = None

    @classmethod
    def ok(cls, value: T) -> 'StepOutcome[T]':
        return cls(value=value)

    @classmethod
    def degrade(cls, value: Optional[T], reason: str) -> 'StepOutcome[T]':
        return cls(value=value, degraded=True, reason=reason)

    @classmethod
    def skip(cls, value: Optional[T] = None) -> 'StepOutcome[T]':
        return cls(value=value, skipped=True)


# ============================================================
# Configuration
# ============================================================

@dataclass
class DedupConfig:
    enabled: bool = True
    auto_fix: bool = True
    threshold: float = 0.7          # semantic similarity that counts as a duplicate
    strategies: List[DuplicateType] = field(
        default_factory=lambda: [DuplicateType.EXACT, DuplicateType.SEMANTIC, DuplicateType.TEMPLATE]
    )
    auto_fix_below: int = 80        # auto-fix when the originality score is lower


@dataclass
class UniquenessConfig:
    enabled: bool = True
    auto_rewrite: bool = True
    similarity_threshold: float = 0.3
    add_randomness: bool = True
    max_rewrite_attempts: int = 3
    history_scope: str = "all"      # "project" or "all"
    seed: Optional[int] = None      # seeds add_randomness


@dataclass
class AIClipConfig:
    enabled: bool = False
    auto_clip: bool = False
    detect_scene_change: bool = True
    detect_silence: bool = True
    remove_silence: bool = True
    target_duration: Optional[float] = None
    pacing_style: PacingStyle = PacingStyle.NORMAL

    def to_clip_config(self) -> ClipConfig:
        return ClipConfig(
            detect_scene_change=self.detect_scene_change,
            detect_silence=self.detect_silence,
            remove_silence=self.remove_silence,
            target_duration=self.target_duration,
            pacing_style=self.pacing_style,
        )


@dataclass
class StepTimeouts:
    """Per-capability timeouts in seconds (None disables the timeout)"""
    media_import: Optional[float] = 60.0
    vision: Optional[float] = 120.0
    text_generation: Optional[float] = 60.0
    clip: Optional[float] = 60.0
    export: Optional[float] = 600.0


@dataclass
class WorkflowConfig:
    """Options for one workflow run"""
    model: AIModelRef = field(default_factory=lambda: AIModelRef(id=DEFAULT_MODEL_ID))
    script_params: ScriptParams = field(default_factory=ScriptParams)
    preferred_template: Optional[str] = None
    dedup: DedupConfig = field(default_factory=DedupConfig)
    uniqueness: UniquenessConfig = field(default_factory=UniquenessConfig)
    ai_clip: AIClipConfig = field(default_factory=AIClipConfig)
    export_settings: ExportSettings = field(default_factory=ExportSettings)
    auto_analyze: bool = True
    auto_generate_script: bool = True
    auto_export: bool = True
    timeouts: StepTimeouts = field(default_factory=StepTimeouts)

    def validate(self):
        """Raise ValidationError for settings that could never run"""
        if self.uniqueness.max_rewrite_attempts <= 0:
            raise ValidationError(
                f"max_rewrite_attempts must be positive, got {self.uniqueness.max_rewrite_attempts}"
            )
        if not 0.0 <= self.uniqueness.similarity_threshold <= 1.0:
            raise ValidationError("uniqueness similarity_threshold must be within [0, 1]")
        if not 0.0 <= self.dedup.threshold <= 1.0:
            raise ValidationError("dedup threshold must be within [0, 1]")
        if self.uniqueness.history_scope not in ("project", "all"):
            raise ValidationError(f"Unknown history_scope: {self.uniqueness.history_scope}")
        if self.ai_clip.target_duration is not None and self.ai_clip.target_duration <= 0:
            raise ValidationError("ai_clip target_duration must be positive")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'WorkflowConfig':
        """
        Build a config from a plain dict (e.g. a JSON config file).

        Accepts both camelCase (dedupConfig, maxRewriteAttempts, ...) and
        snake_case keys.
        """
        model = _pick(data, "model")
        if isinstance(model, str):
            model = AIModelRef(id=model)
        elif isinstance(model, dict):
            model = AIModelRef(
                id=model.get("id", DEFAULT_MODEL_ID),
                provider=model.get("provider", "anthropic"),
                name=model.get("name", ""),
            )
        else:
            model = AIModelRef(id=DEFAULT_MODEL_ID)

        sp = _pick(data, "scriptParams", "script_params", default={})
        params = ScriptParams(
            style=_pick(sp, "style", default="informative"),
            tone=_pick(sp, "tone", default="friendly"),
            length=ScriptLength(_pick(sp, "length", default="medium")),
            target_audience=_pick(sp, "targetAudience", "target_audience", default="general"),
            language=_pick(sp, "language", default="en"),
        )

        dc = _pick(data, "dedupConfig", "dedup_config", "dedup", default={})
        dedup = DedupConfig(
            enabled=_pick(dc, "enabled", default=True),
            auto_fix=_pick(dc, "autoFix", "auto_fix", default=True),
            threshold=float(_pick(dc, "threshold", default=0.7)),
            auto_fix_below=int(_pick(dc, "autoFixBelow", "auto_fix_below", default=80)),
        )
        strategies = _pick(dc, "strategies")
        if strategies is not None:
            dedup.strategies = [DuplicateType(s) for s in strategies]

        uc = _pick(data, "uniquenessConfig", "uniqueness_config", "uniqueness", default={})
        uniqueness = UniquenessConfig(
            enabled=_pick(uc, "enabled", default=True),
            auto_rewrite=_pick(uc, "autoRewrite", "auto_rewrite", default=True),
            similarity_threshold=float(_pick(uc, "similarityThreshold", "similarity_threshold", default=0.3)),
            add_randomness=_pick(uc, "addRandomness", "add_randomness", default=True),
            max_rewrite_attempts=int(_pick(uc, "maxRewriteAttempts", "max_rewrite_attempts", default=3)),
            history_scope=_pick(uc, "historyScope", "history_scope", default="all"),
            seed=_pick(uc, "seed"),
        )

        ac = _pick(data, "aiClipConfig", "ai_clip_config", "ai_clip", default={})
        target = _pick(ac, "targetDuration", "target_duration")
        ai_clip = AIClipConfig(
            enabled=_pick(ac, "enabled", default=False),
            auto_clip=_pick(ac, "autoClip", "auto_clip", default=False),
            detect_scene_change=_pick(ac, "detectSceneChange", "detect_scene_change", default=True),
            detect_silence=_pick(ac, "detectSilence", "detect_silence", default=True),
            remove_silence=_pick(ac, "removeSilence", "remove_silence", default=True),
            target_duration=float(target) if target is not None else None,
            pacing_style=PacingStyle(_pick(ac, "pacingStyle", "pacing_style", default="normal")),
        )

        es = _pick(data, "exportSettings", "export_settings", default={})
        export_settings = ExportSettings(
            format=_pick(es, "format", default="mp4"),
            quality=_pick(es, "quality", default="high"),
            resolution=_pick(es, "resolution", default="1080p"),
            include_subtitles=_pick(es, "includeSubtitles", "include_subtitles", default=True),
        )

        to = _pick(data, "timeouts", default={})
        defaults = StepTimeouts()
        timeouts = StepTimeouts(
            media_import=_pick(to, "mediaImport", "media_import", default=defaults.media_import),
            vision=_pick(to, "vision", default=defaults.vision),
            text_generation=_pick(to, "textGeneration", "text_generation", default=defaults.text_generation),
            clip=_pick(to, "clip", default=defaults.clip),
            export=_pick(to, "export", default=defaults.export),
        )

        return cls(
            model=model,
            script_params=params,
            preferred_template=_pick(data, "preferredTemplate", "preferred_template"),
            dedup=dedup,
            uniqueness=uniqueness,
            ai_clip=ai_clip,
            export_settings=export_settings,
            auto_analyze=_pick(data, "autoAnalyze", "auto_analyze", default=True),
            auto_generate_script=_pick(data, "autoGenerateScript", "auto_generate_script", default=True),
            auto_export=_pick(data, "autoExport", "auto_export", default=True),
            timeouts=timeouts,
        )


def _pick(data: Dict[str, Any], *names: str, default: Any = None) -> Any:
    for name in names:
        if name in data:
            return data[name]
    return default


# ============================================================
# Run state
# ============================================================

@dataclass
class WorkflowData:
    """Artifacts produced by one run"""
    project_id: Optional[str] = None
    video_info: Optional[VideoInfo] = None
    video_analysis: Optional[VideoAnalysis] = None
    selected_template: Optional[ScriptTemplate] = None
    generated_script: Optional[ScriptData] = None
    deduped_script: Optional[ScriptData] = None
    unique_script: Optional[ScriptData] = None
    edited_script: Optional[ScriptData] = None
    originality_report: Optional[OriginalityReport] = None
    uniqueness_result: Optional[UniquenessResult] = None
    uniqueness_report: Optional[UniquenessReport] = None
    clip_analysis: Optional[ClipAnalysis] = None
    clip_plan: Optional[ClipPlan] = None
    timeline: Optional[TimelineData] = None
    export_settings: Optional[ExportSettings] = None
    export_path: Optional[str] = None

    @property
    def current_script(self) -> Optional[ScriptData]:
        """The most refined script produced so far"""
        return (
            self.edited_script
            or self.unique_script
            or self.deduped_script
            or self.generated_script
        )


@dataclass
class WorkflowState:
    """What the UI layer sees: current step, status and progress"""
    step: WorkflowStep = WorkflowStep.PROJECT_CREATE
    progress: float = 0.0
    status: WorkflowStatus = WorkflowStatus.IDLE
    error: Optional[str] = None
    failed_step: Optional[WorkflowStep] = None
    data: WorkflowData = field(default_factory=WorkflowData)
    warnings: List[str] = field(default_factory=list)
    events: List[StageEvent] = field(default_factory=list)

    @property
    def status_message(self) -> str:
        if self.status == WorkflowStatus.FAILED:
            return f"Failed at step {self.failed_step.value if self.failed_step else '?'}: {self.error}"
        if self.status == WorkflowStatus.CANCELLED:
            return f"Cancelled at step {self.step.value}"
        return f"{self.status.value.capitalize()} - {self.step.value} ({self.progress:.0f}%)"


@dataclass
class WorkflowCallbacks:
    """Optional hooks the UI layer registers on the controller"""
    on_step_change: Optional[Callable[[WorkflowStep, WorkflowStep], None]] = None
    on_progress: Optional[Callable[[float], None]] = None
    on_status_change: Optional[Callable[[WorkflowStatus], None]] = None
    on_error: Optional[Callable[[str], None]] = None
    on_complete: Optional[Callable[[WorkflowData], None]] = None
