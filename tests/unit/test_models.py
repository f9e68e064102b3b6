"""Unit tests for data models and workflow config"""

import pytest

from core.errors import ValidationError
from core.models.clip import PacingStyle
from core.models.originality import DuplicateType
from core.models.script import ScriptLength
from core.models.video import VideoAnalysis
from core.models.workflow import (
    StepOutcome,
    WorkflowConfig,
    WorkflowData,
    WorkflowState,
    WorkflowStatus,
    WorkflowStep,
)
from tests.mocks.fixtures import make_analysis, make_script


class TestWorkflowConfig:

    def test_defaults(self):
        config = WorkflowConfig()
        assert config.dedup.enabled is True
        assert config.uniqueness.similarity_threshold == 0.3
        assert config.ai_clip.enabled is False
        assert config.auto_export is True
        assert config.auto_analyze is True
        assert config.auto_generate_script is True

    def test_from_dict_camel_case(self):
        config = WorkflowConfig.from_dict({
            "model": "claude-test",
            "preferredTemplate": "story-arc",
            "scriptParams": {"style": "humorous", "length": "short", "language": "zh"},
            "dedupConfig": {"enabled": False, "threshold": 0.8, "strategies": ["exact"]},
            "uniquenessConfig": {"maxRewriteAttempts": 5, "historyScope": "project", "seed": 7},
            "aiClipConfig": {"enabled": True, "autoClip": True, "targetDuration": 45, "pacingStyle": "fast"},
            "exportSettings": {"format": "mov", "includeSubtitles": False},
            "timeouts": {"textGeneration": 5},
            "autoAnalyze": False,
            "autoGenerateScript": False,
        })

        assert config.model.id == "claude-test"
        assert config.preferred_template == "story-arc"
        assert config.script_params.length == ScriptLength.SHORT
        assert config.dedup.enabled is False
        assert config.dedup.strategies == [DuplicateType.EXACT]
        assert config.uniqueness.max_rewrite_attempts == 5
        assert config.uniqueness.history_scope == "project"
        assert config.ai_clip.target_duration == 45.0
        assert config.ai_clip.pacing_style == PacingStyle.FAST
        assert config.export_settings.format == "mov"
        assert config.export_settings.include_subtitles is False
        assert config.timeouts.text_generation == 5
        assert config.timeouts.export == 600.0
        assert config.auto_analyze is False
        assert config.auto_generate_script is False

    def test_from_dict_snake_case(self):
        config = WorkflowConfig.from_dict({
            "uniqueness_config": {"similarity_threshold": 0.5},
            "auto_generate_script": False,
        })
        assert config.uniqueness.similarity_threshold == 0.5
        assert config.auto_analyze is True
        assert config.auto_generate_script is False

    @pytest.mark.parametrize("data", [
        {"uniquenessConfig": {"maxRewriteAttempts": 0}},
        {"uniquenessConfig": {"similarityThreshold": 1.5}},
        {"dedupConfig": {"threshold": -0.1}},
        {"uniquenessConfig": {"historyScope": "team"}},
        {"aiClipConfig": {"targetDuration": 0}},
    ])
    def test_validate_rejects(self, data):
        with pytest.raises(ValidationError):
            WorkflowConfig.from_dict(data).validate()

    def test_to_clip_config(self):
        config = WorkflowConfig.from_dict({"aiClipConfig": {"detectSilence": False, "targetDuration": 30}})
        clip = config.ai_clip.to_clip_config()
        assert clip.detect_silence is False
        assert clip.target_duration == 30.0


class TestWorkflowData:

    def test_current_script_prefers_latest_stage(self):
        data = WorkflowData()
        assert data.current_script is None

        data.generated_script = make_script(script_id="gen")
        assert data.current_script.id == "gen"
        data.unique_script = make_script(script_id="unique")
        assert data.current_script.id == "unique"
        data.edited_script = make_script(script_id="edited")
        assert data.current_script.id == "edited"

    def test_status_message(self):
        state = WorkflowState(status=WorkflowStatus.FAILED, failed_step=WorkflowStep.EXPORT, error="disk full")
        assert state.status_message == "Failed at step export: disk full"


class TestStepOutcome:

    def test_constructors(self):
        assert StepOutcome.ok(1).degraded is False
        degraded = StepOutcome.degrade(None, "vision down")
        assert degraded.degraded is True
        assert degraded.reason == "vision down"
        assert StepOutcome.skip().skipped is True


class TestSerialization:

    def test_analysis_round_trip(self):
        analysis = make_analysis(tags=["travel", "people"])
        restored = VideoAnalysis.from_dict(analysis.to_dict())
        assert restored == analysis

    def test_script_round_trip(self):
        script = make_script()
        restored = type(script).from_dict(script.to_dict())
        assert restored == script

    def test_analysis_vocabulary(self):
        analysis = make_analysis(tags=["Travel", "travel", "people"])
        assert analysis.vocabulary() == ["travel", "people", "landscape"]
