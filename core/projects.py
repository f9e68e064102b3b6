"""
Project persistence on top of a StorageBackend.

Layout:
    project-<id>        serialized Project
    export-history      append-only list of ExportRecord dicts
    srt-<project_id>    latest subtitle file content

A project's script list changes only by append or replace-by-id.
Backend failures surface as PersistenceError.
"""

import asyncio
import logging
from datetime import datetime
from typing import Any, Awaitable, Dict, List, Optional

from core.errors import PersistenceError
from core.models.export import ExportRecord
from core.models.originality import HistoryEntry
from core.models.project import Project
from core.models.script import ScriptData
from core.models.video import VideoAnalysis, VideoInfo
from core.storage.base import StorageBackend

logger = logging.getLogger(__name__)

PROJECT_PREFIX = "project-"
EXPORT_HISTORY_KEY = "export-history"


def project_key(project_id: str) -> str:
    return f"{PROJECT_PREFIX}{project_id}"


def subtitle_key(project_id: str) -> str:
    return f"srt-{project_id}"


class ProjectStore:
    """Reads and writes projects, scripts, analyses and export history"""

    def __init__(self, backend: StorageBackend):
        self.backend = backend
        self._locks: Dict[str, asyncio.Lock] = {}

    def _get_lock(self, project_id: str) -> asyncio.Lock:
        if project_id not in self._locks:
            self._locks[project_id] = asyncio.Lock()
        return self._locks[project_id]

    async def _call(self, action: str, awaitable: Awaitable) -> Any:
        try:
            return await awaitable
        except Exception as e:
            raise PersistenceError(f"Failed to {action}: {e}") from e

    # ============================================================
    # Projects
    # ============================================================

    async def get_project(self, project_id: str) -> Optional[Project]:
        data = await self._call(f"load project {project_id}", self.backend.get(project_key(project_id)))
        return Project.from_dict(data) if data else None

    async def save_project(self, project: Project):
        project.updated_at = datetime.utcnow().isoformat()
        await self._call(
            f"save project {project.id}",
            self.backend.save(project_key(project.id), project.to_dict()),
        )

    async def ensure_project(self, project_id: str, name: Optional[str] = None) -> Project:
        """Load the project, creating it if it does not exist yet"""
        async with self._get_lock(project_id):
            project = await self.get_project(project_id)
            if project is None:
                project = Project(id=project_id, name=name or project_id)
                await self.save_project(project)
                logger.info(f"Created project {project_id}")
            return project

    async def list_projects(self) -> List[str]:
        keys = await self._call("list projects", self.backend.keys(PROJECT_PREFIX))
        return [k[len(PROJECT_PREFIX):] for k in keys]

    async def _update(self, project_id: str, action: str, mutate) -> Project:
        async with self._get_lock(project_id):
            project = await self.get_project(project_id)
            if project is None:
                project = Project(id=project_id, name=project_id)
            mutate(project)
            await self.save_project(project)
            logger.debug(f"Project {project_id}: {action}")
            return project

    # ============================================================
    # Videos and analyses
    # ============================================================

    async def add_video(self, project_id: str, video: VideoInfo) -> Project:
        def mutate(project: Project):
            project.videos = [v for v in project.videos if v.id != video.id] + [video]
        return await self._update(project_id, f"add video {video.id}", mutate)

    async def save_analysis(self, project_id: str, analysis: VideoAnalysis) -> Project:
        def mutate(project: Project):
            project.analyses[analysis.video_id] = analysis
        return await self._update(project_id, f"cache analysis for {analysis.video_id}", mutate)

    async def get_cached_analysis(self, project_id: str, video_id: str) -> Optional[VideoAnalysis]:
        project = await self.get_project(project_id)
        return project.analyses.get(video_id) if project else None

    # ============================================================
    # Scripts
    # ============================================================

    async def append_script(self, project_id: str, script: ScriptData) -> Project:
        def mutate(project: Project):
            project.scripts.append(script)
        return await self._update(project_id, f"append script {script.id}", mutate)

    async def replace_script(self, project_id: str, script: ScriptData) -> Project:
        """Replace the script with the same id, appending it if absent"""
        def mutate(project: Project):
            for i, existing in enumerate(project.scripts):
                if existing.id == script.id:
                    project.scripts[i] = script
                    return
            project.scripts.append(script)
        return await self._update(project_id, f"replace script {script.id}", mutate)

    async def list_scripts(self, project_id: str) -> List[ScriptData]:
        project = await self.get_project(project_id)
        return list(project.scripts) if project else []

    async def script_history(
        self,
        scope: str,
        project_id: Optional[str] = None,
        exclude_id: Optional[str] = None
    ) -> List[HistoryEntry]:
        """
        Previously generated scripts as a uniqueness corpus.

        Args:
            scope: "project" for this project only, "all" for every project
            project_id: Project to use with scope="project"
            exclude_id: Script id to leave out (the one being checked)
        """
        if scope == "project":
            project_ids = [project_id] if project_id else []
        else:
            project_ids = await self.list_projects()

        entries = []
        for pid in project_ids:
            for script in await self.list_scripts(pid):
                if script.id == exclude_id:
                    continue
                entries.append(HistoryEntry(
                    script_id=script.id,
                    content=script.content,
                    created_at=script.created_at,
                    project_id=pid,
                ))
        return entries

    # ============================================================
    # Exports
    # ============================================================

    async def save_subtitles(self, project_id: str, content: str):
        await self._call(
            f"save subtitles for {project_id}",
            self.backend.save(subtitle_key(project_id), content),
        )

    async def get_subtitles(self, project_id: str) -> Optional[str]:
        return await self._call(
            f"load subtitles for {project_id}",
            self.backend.get(subtitle_key(project_id)),
        )

    async def add_export(self, record: ExportRecord):
        await self._call(
            f"record export {record.id}",
            self.backend.add(EXPORT_HISTORY_KEY, record.to_dict()),
        )

    async def list_exports(self, project_id: Optional[str] = None) -> List[ExportRecord]:
        items = await self._call("list exports", self.backend.list(EXPORT_HISTORY_KEY))
        records = [ExportRecord.from_dict(item) for item in items]
        if project_id:
            records = [r for r in records if r.project_id == project_id]
        return records
