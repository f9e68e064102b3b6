"""Persisted project record"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Dict, Any

from .script import ScriptData
from .video import VideoInfo, VideoAnalysis


@dataclass
class Project:
    """
    A project owns its uploaded videos, cached analyses and the list of
    scripts generated for it. The script list only grows by append or
    replace-by-id.
    """
    id: str
    name: str = ""
    videos: List[VideoInfo] = field(default_factory=list)
    scripts: List[ScriptData] = field(default_factory=list)
    analyses: Dict[str, VideoAnalysis] = field(default_factory=dict)
    created_at: str = field(default_factory=lambda: datetime.utcnow().isoformat())
    updated_at: str = field(default_factory=lambda: datetime.utcnow().isoformat())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "videos": [v.to_dict() for v in self.videos],
            "scripts": [s.to_dict() for s in self.scripts],
            "analyses": {vid: a.to_dict() for vid, a in self.analyses.items()},
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Project':
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            videos=[VideoInfo.from_dict(v) for v in data.get("videos", [])],
            scripts=[ScriptData.from_dict(s) for s in data.get("scripts", [])],
            analyses={
                vid: VideoAnalysis.from_dict(a)
                for vid, a in data.get("analyses", {}).items()
            },
            created_at=data.get("created_at", datetime.utcnow().isoformat()),
            updated_at=data.get("updated_at", datetime.utcnow().isoformat()),
        )
