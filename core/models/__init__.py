"""Data models for ClipFlow Studio"""

from .video import (
    VideoInfo,
    Scene,
    DetectedObject,
    EmotionSample,
    AudioSegment,
    SceneDetectionOptions,
    SceneDetectionResult,
    VideoAnalysis,
)
from .script import (
    SectionType,
    SegmentType,
    ScriptLength,
    TemplateSection,
    ScriptTemplate,
    SectionPlan,
    AIModelRef,
    ScriptParams,
    ScriptSegment,
    ScriptMetadata,
    ScriptData,
)
from .originality import (
    DuplicateType,
    DuplicateFinding,
    OriginalityReport,
    UniquenessCheck,
    UniquenessResult,
    UniquenessReport,
    HistoryEntry,
)
from .timeline import (
    TrackType,
    TimelineClip,
    TimelineTrack,
    TimelineData,
)
from .export import (
    ExportSettings,
    ExportOptions,
    ExportRecord,
)
from .clip import (
    PacingStyle,
    PACING_MAX_CLIP_SECONDS,
    ClipConfig,
    ClipSuggestion,
    ClipAnalysis,
    ClipSegment,
    ClipPlan,
)
from .project import Project
from .workflow import (
    WorkflowStep,
    WorkflowStatus,
    StageEvent,
    StepOutcome,
    DedupConfig,
    UniquenessConfig,
    AIClipConfig,
    StepTimeouts,
    WorkflowConfig,
    WorkflowData,
    WorkflowState,
    WorkflowCallbacks,
)

__all__ = [
    # Video
    "VideoInfo",
    "Scene",
    "DetectedObject",
    "EmotionSample",
    "AudioSegment",
    "SceneDetectionOptions",
    "SceneDetectionResult",
    "VideoAnalysis",
    # Script
    "SectionType",
    "SegmentType",
    "ScriptLength",
    "TemplateSection",
    "ScriptTemplate",
    "SectionPlan",
    "AIModelRef",
    "ScriptParams",
    "ScriptSegment",
    "ScriptMetadata",
    "ScriptData",
    # Originality / uniqueness
    "DuplicateType",
    "DuplicateFinding",
    "OriginalityReport",
    "UniquenessCheck",
    "UniquenessResult",
    "UniquenessReport",
    "HistoryEntry",
    # Timeline
    "TrackType",
    "TimelineClip",
    "TimelineTrack",
    "TimelineData",
    # Export
    "ExportSettings",
    "ExportOptions",
    "ExportRecord",
    # Clip planning
    "PacingStyle",
    "PACING_MAX_CLIP_SECONDS",
    "ClipConfig",
    "ClipSuggestion",
    "ClipAnalysis",
    "ClipSegment",
    "ClipPlan",
    # Project
    "Project",
    # Workflow
    "WorkflowStep",
    "WorkflowStatus",
    "StageEvent",
    "StepOutcome",
    "DedupConfig",
    "UniquenessConfig",
    "AIClipConfig",
    "StepTimeouts",
    "WorkflowConfig",
    "WorkflowData",
    "WorkflowState",
    "WorkflowCallbacks",
]
