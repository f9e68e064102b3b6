"""Video asset and vision analysis models"""

from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional


@dataclass(frozen=True)
class VideoInfo:
    """An uploaded source video. Immutable once uploaded."""
    id: str
    name: str
    path: str
    duration: float  # seconds
    width: int = 1920
    height: int = 1080
    format: str = "mp4"
    size: int = 0  # bytes
    thumbnail: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "path": self.path,
            "duration": self.duration,
            "width": self.width,
            "height": self.height,
            "format": self.format,
            "size": self.size,
            "thumbnail": self.thumbnail,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'VideoInfo':
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            path=data.get("path", ""),
            duration=float(data.get("duration", 0.0)),
            width=int(data.get("width", 1920)),
            height=int(data.get("height", 1080)),
            format=data.get("format", "mp4"),
            size=int(data.get("size", 0)),
            thumbnail=data.get("thumbnail"),
        )


@dataclass
class Scene:
    """A detected scene in the source video"""
    id: str
    start_time: float
    end_time: float
    tags: List[str] = field(default_factory=list)
    type: str = "unknown"        # "talking_head", "landscape", "product", ...
    description: str = ""
    confidence: float = 0.8

    @property
    def duration(self) -> float:
        return max(0.0, self.end_time - self.start_time)

    @property
    def midpoint(self) -> float:
        return (self.start_time + self.end_time) / 2


@dataclass
class DetectedObject:
    """An object label found by the vision capability"""
    label: str
    confidence: float = 0.0
    timestamp: Optional[float] = None
    scene_id: Optional[str] = None


@dataclass
class EmotionSample:
    """Emotion reading at a point in time"""
    timestamp: float
    emotion: str  # "joy", "surprise", "neutral", ...
    intensity: float = 0.0  # 0-1


@dataclass
class AudioSegment:
    """Loudness of a span of the audio track, used for silence detection"""
    start_time: float
    end_time: float
    volume: float  # dBFS, e.g. -60 (near silent) to 0


@dataclass
class SceneDetectionOptions:
    """Options passed to the vision capability"""
    min_scene_duration: float = 3.0
    detect_objects: bool = True
    detect_emotions: bool = True


@dataclass
class SceneDetectionResult:
    """Raw output of the vision capability's detection pass"""
    scenes: List[Scene] = field(default_factory=list)
    objects: List[DetectedObject] = field(default_factory=list)
    emotions: List[EmotionSample] = field(default_factory=list)
    audio_segments: List[AudioSegment] = field(default_factory=list)


@dataclass
class VideoAnalysis:
    """
    Result of analysing one video.

    Produced once per video by the vision capability and cached on the
    owning project, keyed by video id.
    """
    video_id: str
    scenes: List[Scene] = field(default_factory=list)
    objects: List[DetectedObject] = field(default_factory=list)
    emotions: List[EmotionSample] = field(default_factory=list)
    summary: str = ""
    audio_segments: List[AudioSegment] = field(default_factory=list)

    @property
    def duration(self) -> float:
        """Duration covered by the detected scenes"""
        if not self.scenes:
            return 0.0
        return max(s.end_time for s in self.scenes)

    def vocabulary(self) -> List[str]:
        """Lower-cased tags, scene types and object labels, in first-seen order"""
        words: List[str] = []
        for scene in self.scenes:
            words.extend(scene.tags)
            words.append(scene.type)
        words.extend(o.label for o in self.objects)
        seen = set()
        ordered = []
        for word in words:
            key = word.lower().strip()
            if key and key not in seen:
                seen.add(key)
                ordered.append(key)
        return ordered

    def to_dict(self) -> Dict[str, Any]:
        return {
            "video_id": self.video_id,
            "scenes": [
                {
                    "id": s.id,
                    "start_time": s.start_time,
                    "end_time": s.end_time,
                    "tags": list(s.tags),
                    "type": s.type,
                    "description": s.description,
                    "confidence": s.confidence,
                }
                for s in self.scenes
            ],
            "objects": [
                {
                    "label": o.label,
                    "confidence": o.confidence,
                    "timestamp": o.timestamp,
                    "scene_id": o.scene_id,
                }
                for o in self.objects
            ],
            "emotions": [
                {"timestamp": e.timestamp, "emotion": e.emotion, "intensity": e.intensity}
                for e in self.emotions
            ],
            "summary": self.summary,
            "audio_segments": [
                {"start_time": a.start_time, "end_time": a.end_time, "volume": a.volume}
                for a in self.audio_segments
            ],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'VideoAnalysis':
        return cls(
            video_id=data.get("video_id", ""),
            scenes=[
                Scene(
                    id=s["id"],
                    start_time=float(s["start_time"]),
                    end_time=float(s["end_time"]),
                    tags=list(s.get("tags", [])),
                    type=s.get("type", "unknown"),
                    description=s.get("description", ""),
                    confidence=float(s.get("confidence", 0.8)),
                )
                for s in data.get("scenes", [])
            ],
            objects=[
                DetectedObject(
                    label=o["label"],
                    confidence=float(o.get("confidence", 0.0)),
                    timestamp=o.get("timestamp"),
                    scene_id=o.get("scene_id"),
                )
                for o in data.get("objects", [])
            ],
            emotions=[
                EmotionSample(
                    timestamp=float(e["timestamp"]),
                    emotion=e["emotion"],
                    intensity=float(e.get("intensity", 0.0)),
                )
                for e in data.get("emotions", [])
            ],
            summary=data.get("summary", ""),
            audio_segments=[
                AudioSegment(
                    start_time=float(a["start_time"]),
                    end_time=float(a["end_time"]),
                    volume=float(a["volume"]),
                )
                for a in data.get("audio_segments", [])
            ],
        )
