"""Export settings and the append-only export history record"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Any, Optional


@dataclass
class ExportSettings:
    """User-facing export choices"""
    format: str = "mp4"
    quality: str = "high"          # "low", "medium", "high", "4k"
    resolution: str = "1080p"
    include_subtitles: bool = True


@dataclass
class ExportOptions:
    """Inputs prepared for the media export capability"""
    format: str
    quality: str
    resolution: str
    include_subtitles: bool = False
    subtitle_content: Optional[str] = None


@dataclass
class ExportRecord:
    """One finished export. Records are appended, never overwritten."""
    id: str
    project_id: str
    format: str
    quality: str
    resolution: str
    file_path: str
    file_size: int = 0
    total_clips: int = 0
    duration: float = 0.0
    has_subtitles: bool = False
    created_at: str = field(default_factory=lambda: datetime.utcnow().isoformat())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "project_id": self.project_id,
            "format": self.format,
            "quality": self.quality,
            "resolution": self.resolution,
            "file_path": self.file_path,
            "file_size": self.file_size,
            "timeline": {
                "total_clips": self.total_clips,
                "duration": self.duration,
            },
            "has_subtitles": self.has_subtitles,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ExportRecord':
        timeline = data.get("timeline", {})
        return cls(
            id=data["id"],
            project_id=data["project_id"],
            format=data.get("format", "mp4"),
            quality=data.get("quality", "high"),
            resolution=data.get("resolution", "1080p"),
            file_path=data.get("file_path", ""),
            file_size=int(data.get("file_size", 0)),
            total_clips=int(timeline.get("total_clips", 0)),
            duration=float(timeline.get("duration", 0.0)),
            has_subtitles=bool(data.get("has_subtitles", False)),
            created_at=data.get("created_at", datetime.utcnow().isoformat()),
        )
