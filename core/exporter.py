"""
Export orchestration.

Prepares the inputs for the media export capability (output path,
subtitle text, flags), calls it, and appends an ExportRecord to the
export history. Rendering itself is the media provider's job.
"""

import logging
import os
import time
import uuid
from typing import Callable, Optional

from core.models.export import ExportOptions, ExportRecord, ExportSettings
from core.models.script import ScriptData
from core.models.timeline import TimelineData
from core.models.video import VideoInfo
from core.projects import ProjectStore
from core.providers.base import MediaProvider
from core.subtitles import generate_srt
from core.timeouts import with_timeout

logger = logging.getLogger(__name__)


class ExportOrchestrator:
    """
    Renders a timeline to a file through a MediaProvider.

    Args:
        media: Media export capability
        store: Project store receiving subtitles and export records
        export_dir: Directory for output files
        timeout: Seconds allowed for the export call (None for no limit)
        before_write: Called before each store write; raising from it
            skips that write and every later one
    """

    def __init__(
        self,
        media: MediaProvider,
        store: ProjectStore,
        export_dir: str = "exports",
        timeout: Optional[float] = 600.0,
        before_write: Optional[Callable[[], None]] = None
    ):
        self.media = media
        self.store = store
        self.export_dir = export_dir
        self.timeout = timeout
        self.before_write = before_write or (lambda: None)
        self.last_record: Optional[ExportRecord] = None

    async def export_video(
        self,
        project_id: str,
        video: VideoInfo,
        timeline: TimelineData,
        script: Optional[ScriptData],
        settings: ExportSettings,
        on_progress: Optional[Callable[[float], None]] = None
    ) -> str:
        """
        Export the video and record it.

        Subtitles and the export record are only written after the media
        export succeeds, each behind the `before_write` check.

        Returns:
            Path of the exported file

        Raises:
            StepTimeoutError: If the media export exceeds the timeout
            Exception: Media provider errors and `before_write` errors propagate unchanged
        """
        report = on_progress or (lambda fraction: None)

        srt_content = None
        if settings.include_subtitles and script:
            srt_content = generate_srt(script, timeline)
        report(0.1)

        stamp = int(time.time() * 1000)
        fmt = settings.format or "mp4"
        output_path = f"{self.export_dir}/{project_id}_{stamp}.{fmt}"
        options = ExportOptions(
            format=fmt,
            quality=settings.quality or "high",
            resolution=settings.resolution or "1080p",
            include_subtitles=srt_content is not None,
            subtitle_content=srt_content,
        )

        exported_path = await with_timeout(
            self.media.export_video(video.path, output_path, options),
            "export",
            self.timeout,
        )
        report(0.9)

        if srt_content is not None:
            self.before_write()
            await self.store.save_subtitles(project_id, srt_content)
            logger.info(f"Saved subtitles for {project_id} ({len(script.segments)} cues)")

        record = ExportRecord(
            id=f"export_{stamp}_{uuid.uuid4().hex[:6]}",
            project_id=project_id,
            format=options.format,
            quality=options.quality,
            resolution=options.resolution,
            file_path=exported_path,
            file_size=os.path.getsize(exported_path) if os.path.isfile(exported_path) else 0,
            total_clips=timeline.total_clips,
            duration=timeline.duration,
            has_subtitles=srt_content is not None,
        )
        self.before_write()
        await self.store.add_export(record)
        self.last_record = record
        report(1.0)

        logger.info(f"Exported {project_id} to {exported_path}")
        return exported_path
