"""
Workflow Controller - Runs the video-to-export pipeline

Sequences the steps of one run:
1. project-create: ensure the project exists
2. video-upload: import the video
3. ai-analyze: scene analysis (cached per project and video)
4. script-generate: template selection, then per-section generation
5. dedup / uniqueness / ai-clip: optional, never fatal
6. timeline-edit: place segments on the timeline
7. export: subtitles, media export, export record

The controller owns all persistence, progress reporting and state. Steps
run one after another; the only fan-out is section generation inside
the script writer. A paused run waits at the next step boundary.
"""

import asyncio
import copy
import logging
from dataclasses import replace
from datetime import datetime
from typing import Awaitable, Callable, Optional, Union

from agents.clip_planner import ClipPlannerAgent
from agents.script_writer import ScriptWriterAgent
from core.dedup import DedupEngine
from core.errors import PersistenceError, ValidationError, WorkflowCancelled, WorkflowError
from core.exporter import ExportOrchestrator
from core.models.export import ExportSettings
from core.models.script import ScriptData
from core.models.video import VideoAnalysis, VideoInfo
from core.models.workflow import (
    StageEvent,
    StepOutcome,
    WorkflowCallbacks,
    WorkflowConfig,
    WorkflowData,
    WorkflowState,
    WorkflowStatus,
    WorkflowStep,
)
from core.progress import ProgressReporter
from core.projects import ProjectStore
from core.providers.base import MediaProvider, TextProvider, VisionProvider
from core.storage.memory import InMemoryStorage
from core.templates import TemplateSelector
from core.uniqueness import UniquenessEnforcer
from . import steps

logger = logging.getLogger(__name__)

# Progress band (start, end) per step
PROGRESS_BANDS = {
    WorkflowStep.VIDEO_UPLOAD: (0, 15),
    WorkflowStep.AI_ANALYZE: (15, 30),
    "template": (30, 40),
    WorkflowStep.SCRIPT_GENERATE: (40, 50),
    WorkflowStep.DEDUP: (50, 55),
    WorkflowStep.UNIQUENESS: (55, 60),
    WorkflowStep.AI_CLIP: (60, 68),
    WorkflowStep.TIMELINE_EDIT: (68, 75),
    WorkflowStep.EXPORT: (75, 100),
}


class WorkflowController:
    """
    Drives one workflow run at a time and exposes its state.

    Args:
        vision: Scene analysis capability
        text: Text generation capability
        media: Video import/export capability
        store: Project persistence (in-memory if not given)
        callbacks: UI hooks for step, progress, status, error and completion
        export_dir: Directory for exported files
    """

    def __init__(
        self,
        vision: VisionProvider,
        text: TextProvider,
        media: MediaProvider,
        store: Optional[ProjectStore] = None,
        callbacks: Optional[WorkflowCallbacks] = None,
        selector: Optional[TemplateSelector] = None,
        dedup_engine: Optional[DedupEngine] = None,
        script_writer: Optional[ScriptWriterAgent] = None,
        clip_planner: Optional[ClipPlannerAgent] = None,
        export_dir: str = "exports"
    ):
        self.vision = vision
        self.text = text
        self.media = media
        self.store = store or ProjectStore(InMemoryStorage())
        self.callbacks = callbacks or WorkflowCallbacks()
        self.selector = selector or TemplateSelector()
        self.dedup_engine = dedup_engine or DedupEngine()
        self.script_writer = script_writer if script_writer is not None else ScriptWriterAgent(text_provider=text)
        self._clip_planner = clip_planner
        self.export_dir = export_dir

        self._state = WorkflowState()
        self._config: Optional[WorkflowConfig] = None
        self._cancelled = False
        self._resume_gate: Optional[asyncio.Event] = None
        self._reporter = ProgressReporter(self._on_progress)

    @property
    def clip_planner(self) -> ClipPlannerAgent:
        if self._clip_planner is None:
            self._clip_planner = ClipPlannerAgent()
        return self._clip_planner

    # ============================================================
    # Public API
    # ============================================================

    async def run(
        self,
        project_id: str,
        video: Union[str, VideoInfo],
        config: Optional[WorkflowConfig] = None
    ) -> WorkflowData:
        """
        Execute the full pipeline for one video.

        Args:
            project_id: Project owning the run's artifacts
            video: Path to import, or an already imported VideoInfo
            config: Run options (defaults used if None)

        Returns:
            WorkflowData with every artifact produced. A cancelled run
            returns what it produced so far with status cancelled.

        Raises:
            ValidationError: Before starting, for a missing video or invalid config
            WorkflowError: Fatal step failures (the original exception is re-raised)
        """
        config = config or WorkflowConfig()
        if not video:
            raise ValidationError("A video is required")
        if not project_id:
            raise ValidationError("A project id is required")
        config.validate()
        if self.is_active:
            raise WorkflowError("A run is already in progress")

        self.reset()
        self._config = config
        self._resume_gate = asyncio.Event()
        self._resume_gate.set()
        data = self._state.data
        data.project_id = project_id
        self._set_status(WorkflowStatus.RUNNING)
        logger.info(f"Starting workflow for project {project_id}")

        try:
            await self._run_steps(project_id, video, config, data)
        except WorkflowCancelled:
            self._close_event()
            self._set_status(WorkflowStatus.CANCELLED)
            logger.info(f"Workflow for {project_id} cancelled at {self._state.step.value}")
            return data
        except Exception as e:
            self._fail(e)
            raise

        self._set_status(WorkflowStatus.COMPLETED)
        if self.callbacks.on_complete:
            self.callbacks.on_complete(data)
        logger.info(f"Workflow for {project_id} completed")
        return data

    @property
    def is_active(self) -> bool:
        return self._state.status in (WorkflowStatus.RUNNING, WorkflowStatus.PAUSED)

    @property
    def is_paused(self) -> bool:
        return self._state.status == WorkflowStatus.PAUSED

    def cancel(self):
        """Stop the run at the next step boundary or persistence write"""
        self._cancelled = True
        if self._resume_gate is not None:
            self._resume_gate.set()
        logger.info("Cancellation requested")

    def pause(self):
        """
        Hold the run at the next step boundary.

        The step in flight finishes first; the status becomes paused
        immediately.
        """
        if self._state.status != WorkflowStatus.RUNNING:
            raise WorkflowError(f"Cannot pause a run that is {self._state.status.value}")
        self._resume_gate.clear()
        self._set_status(WorkflowStatus.PAUSED)
        logger.info(f"Workflow paused during {self._state.step.value}")

    def resume(self):
        if self._state.status != WorkflowStatus.PAUSED:
            raise WorkflowError(f"Cannot resume a run that is {self._state.status.value}")
        self._set_status(WorkflowStatus.RUNNING)
        self._resume_gate.set()
        logger.info("Workflow resumed")

    def get_state(self) -> WorkflowState:
        """A copy of the current state"""
        return copy.deepcopy(self._state)

    def reset(self):
        if self.is_active:
            raise WorkflowError("Cannot reset while a run is in progress")
        self._state = WorkflowState()
        self._cancelled = False
        self._resume_gate = None
        self._reporter.reset()

    async def edit_script(self, script: ScriptData) -> ScriptData:
        """
        Replace the run's script with a user-edited version.

        The script is stamped with a new updated_at, then the project's
        script with the same id is replaced (or the script is appended if
        absent). A failed save is recorded as a warning.
        """
        data = self._state.data
        if not data.project_id:
            raise ValidationError("No project to edit; run the workflow first")

        script = replace(script, updated_at=datetime.utcnow().isoformat())
        data.edited_script = script
        await self._persist(
            lambda: self.store.replace_script(data.project_id, script),
            mandatory=False,
            what=f"save edited script {script.id}",
        )
        return script

    async def export(self, settings: Optional[ExportSettings] = None) -> str:
        """Export (again) the current run's timeline"""
        data = self._state.data
        if not data.project_id or data.video_info is None or data.timeline is None:
            raise ValidationError("Nothing to export: run the workflow up to the timeline first")

        settings = settings or data.export_settings or ExportSettings()
        timeout = self._config.timeouts.export if self._config else None
        exporter = ExportOrchestrator(self.media, self.store, self.export_dir, timeout)
        try:
            path = await exporter.export_video(
                data.project_id, data.video_info, data.timeline, data.current_script, settings
            )
        except Exception as e:
            self._state.failed_step = WorkflowStep.EXPORT
            self._state.error = str(e)
            if self.callbacks.on_error:
                self.callbacks.on_error(str(e))
            raise

        data.export_settings = settings
        data.export_path = path
        return path

    # ============================================================
    # Pipeline
    # ============================================================

    async def _run_steps(
        self,
        project_id: str,
        video: Union[str, VideoInfo],
        config: WorkflowConfig,
        data: WorkflowData
    ):
        # project-create
        await self._advance(WorkflowStep.PROJECT_CREATE)
        await self._persist(
            lambda: self.store.ensure_project(project_id),
            mandatory=True,
            what=f"create project {project_id}",
        )

        # video-upload
        await self._advance(WorkflowStep.VIDEO_UPLOAD)
        data.video_info = await steps.execute_upload_step(
            self.media, video, config.timeouts.media_import, self._band(WorkflowStep.VIDEO_UPLOAD)
        )
        await self._persist(
            lambda: self.store.add_video(project_id, data.video_info),
            mandatory=False,
            what=f"save video {data.video_info.id}",
        )
        if not config.auto_analyze:
            logger.info("Analysis is manual; stopping after upload")
            self._finish()
            return

        # ai-analyze
        await self._advance(WorkflowStep.AI_ANALYZE)
        band = self._band(WorkflowStep.AI_ANALYZE)
        cached = await self._cached_analysis(project_id, data.video_info)
        if cached:
            logger.info(f"Using cached analysis for {data.video_info.id}")
            data.video_analysis = cached
            band.complete()
        else:
            outcome = await steps.execute_analyze_step(
                self.vision, data.video_info, config.timeouts.vision, band
            )
            data.video_analysis = outcome.value
            self._record(outcome)
            if not outcome.degraded:
                await self._persist(
                    lambda: self.store.save_analysis(project_id, data.video_analysis),
                    mandatory=False,
                    what=f"cache analysis for {data.video_info.id}",
                )
        if not config.auto_generate_script:
            logger.info("Script generation is manual; stopping after analysis")
            self._finish()
            return

        # script-generate (template selection runs first, in its own band)
        await self._advance(WorkflowStep.SCRIPT_GENERATE)
        data.selected_template = steps.execute_template_step(
            self.selector,
            data.video_analysis,
            config.preferred_template,
            data.video_info.duration,
            self._band("template"),
        )
        self._current_event.details["template_id"] = data.selected_template.id
        self.script_writer.timeout = config.timeouts.text_generation
        data.generated_script = await steps.execute_script_step(
            self.script_writer,
            data.video_info,
            data.video_analysis,
            data.selected_template,
            config.model,
            config.script_params,
            self._band(WorkflowStep.SCRIPT_GENERATE),
        )
        await self._persist(
            lambda: self.store.append_script(project_id, data.generated_script),
            mandatory=True,
            what=f"save script {data.generated_script.id}",
        )

        # dedup
        if config.dedup.enabled:
            await self._advance(WorkflowStep.DEDUP)
            before = data.current_script
            outcome = steps.execute_dedup_step(
                self.dedup_engine, before, config.dedup, self._band(WorkflowStep.DEDUP)
            )
            data.deduped_script, data.originality_report = outcome.value
            self._current_event.details["score"] = data.originality_report.score
            self._record(outcome)
            await self._save_if_changed(project_id, before, data.deduped_script)

        # uniqueness
        if config.uniqueness.enabled:
            await self._advance(WorkflowStep.UNIQUENESS)
            before = data.current_script
            enforcer = UniquenessEnforcer(
                config.uniqueness,
                await self._history(project_id, config.uniqueness.history_scope, before.id),
            )
            outcome = await steps.execute_uniqueness_step(
                enforcer,
                before,
                config.uniqueness,
                self._rewriter(config),
                self._band(WorkflowStep.UNIQUENESS),
            )
            data.uniqueness_result = outcome.value
            data.unique_script = outcome.value.script
            data.uniqueness_report = enforcer.generate_uniqueness_report(data.unique_script)
            self._current_event.details["attempts"] = outcome.value.attempts
            self._record(outcome)
            await self._save_if_changed(project_id, before, data.unique_script)

        # ai-clip
        if config.ai_clip.enabled:
            await self._advance(WorkflowStep.AI_CLIP)
            outcome = await steps.execute_clip_step(
                self.clip_planner,
                data.video_info,
                data.video_analysis,
                config.ai_clip,
                config.timeouts.clip,
                self._band(WorkflowStep.AI_CLIP),
            )
            data.clip_analysis, data.clip_plan = outcome.value
            self._record(outcome)

        # timeline-edit
        await self._advance(WorkflowStep.TIMELINE_EDIT)
        before = data.current_script
        data.timeline, data.edited_script = steps.execute_timeline_step(
            data.video_info,
            data.video_analysis,
            before,
            data.clip_plan,
            self._band(WorkflowStep.TIMELINE_EDIT),
        )
        await self._save_if_changed(project_id, before, data.edited_script)

        # export
        if config.auto_export:
            await self._advance(WorkflowStep.EXPORT)
            data.export_settings = config.export_settings
            exporter = ExportOrchestrator(
                self.media,
                self.store,
                self.export_dir,
                config.timeouts.export,
                before_write=self._check_cancelled,
            )
            data.export_path = await steps.execute_export_step(
                exporter,
                project_id,
                data.video_info,
                data.timeline,
                data.current_script,
                config.export_settings,
                self._band(WorkflowStep.EXPORT),
            )

        # a recorded export stands even if cancel arrives afterwards
        self._finish(check_cancelled=data.export_path is None)

    def _rewriter(self, config: WorkflowConfig) -> Callable[[ScriptData], Awaitable[ScriptData]]:
        async def rewrite(script: ScriptData) -> ScriptData:
            return await self.script_writer.rewrite_script(script, config.model, config.script_params)
        return rewrite

    async def _cached_analysis(self, project_id: str, video: VideoInfo) -> Optional[VideoAnalysis]:
        try:
            return await self.store.get_cached_analysis(project_id, video.id)
        except PersistenceError as e:
            self._warn(f"Analysis cache unavailable: {e}")
            return None

    async def _history(self, project_id: str, scope: str, exclude_id: str):
        try:
            return await self.store.script_history(scope, project_id, exclude_id=exclude_id)
        except PersistenceError as e:
            self._warn(f"Script history unavailable, checking against an empty corpus: {e}")
            return []

    async def _save_if_changed(self, project_id: str, before: ScriptData, after: ScriptData):
        if after is before:
            return
        await self._persist(
            lambda: self.store.replace_script(project_id, after),
            mandatory=False,
            what=f"update script {after.id}",
        )

    async def _persist(self, write: Callable[[], Awaitable], mandatory: bool, what: str):
        """
        Run a store write after checking for cancellation.

        Mandatory writes raise PersistenceError; others are logged and
        recorded as warnings.
        """
        self._check_cancelled()
        try:
            return await write()
        except PersistenceError as e:
            if mandatory:
                raise
            self._warn(f"Failed to {what}: {e}")
            return None

    # ============================================================
    # State
    # ============================================================

    def _band(self, key):
        start, end = PROGRESS_BANDS[key]
        return self._reporter.band(start, end)

    @property
    def _current_event(self) -> StageEvent:
        return self._state.events[-1]

    async def _advance(self, step: WorkflowStep):
        """Enter the next step once the run is not paused"""
        if not self._resume_gate.is_set():
            logger.info(f"Paused before {step.value}")
            await self._resume_gate.wait()
        self._enter(step)

    def _finish(self, check_cancelled: bool = True):
        self._enter(WorkflowStep.DONE, check_cancelled)
        self._reporter.update(100)
        self._close_event()

    def _enter(self, step: WorkflowStep, check_cancelled: bool = True):
        if check_cancelled:
            self._check_cancelled()
        self._close_event()
        previous = self._state.step
        self._state.step = step
        self._state.events.append(StageEvent(step=step, timestamp=datetime.utcnow()))
        if self.callbacks.on_step_change and step != previous:
            self.callbacks.on_step_change(previous, step)
        logger.debug(f"Step {previous.value} -> {step.value}")

    def _close_event(self):
        if self._state.events and self._current_event.duration_ms is None:
            event = self._current_event
            event.duration_ms = int((datetime.utcnow() - event.timestamp).total_seconds() * 1000)

    def _check_cancelled(self):
        if self._cancelled:
            raise WorkflowCancelled(f"Cancelled at {self._state.step.value}")

    def _record(self, outcome: StepOutcome):
        if outcome.degraded:
            self._current_event.details["degraded"] = True
            self._warn(outcome.reason)

    def _warn(self, message: str):
        warning = f"{self._state.step.value}: {message}"
        self._state.warnings.append(warning)
        logger.warning(warning)

    def _set_status(self, status: WorkflowStatus):
        self._state.status = status
        if self.callbacks.on_status_change:
            self.callbacks.on_status_change(status)

    def _on_progress(self, value: float):
        self._state.progress = value
        if self.callbacks.on_progress:
            self.callbacks.on_progress(value)

    def _fail(self, error: Exception):
        message = str(error) or type(error).__name__
        self._state.error = message
        self._state.failed_step = self._state.step
        if self._state.events:
            self._current_event.error = message
        self._close_event()
        self._set_status(WorkflowStatus.FAILED)
        logger.error(f"Workflow failed at {self._state.step.value}: {message}")
        if self.callbacks.on_error:
            self.callbacks.on_error(message)
