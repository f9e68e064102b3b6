"""Script, template and generation parameter models"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import List, Dict, Any, Optional

from core.text import count_words, join_segments


class SectionType(str, Enum):
    """Semantic role of a template section"""
    HOOK = "hook"
    INTRO = "intro"
    BODY = "body"
    TRANSITION = "transition"
    CONCLUSION = "conclusion"
    CTA = "cta"


class SegmentType(str, Enum):
    """Kind of content in a script segment"""
    NARRATION = "narration"
    ACTION = "action"
    DIALOGUE = "dialogue"


class ScriptLength(str, Enum):
    """Length bucket requested for a script"""
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"


@dataclass
class TemplateSection:
    """A structural slot of a script template"""
    id: str
    name: str
    type: SectionType
    duration: float             # fraction of the video duration (0-1)
    target_word_count: int
    content: str = ""           # what this section should accomplish
    tips: List[str] = field(default_factory=list)


@dataclass
class ScriptTemplate:
    """Read-only reference structure for a script"""
    id: str
    name: str
    description: str
    tags: List[str] = field(default_factory=list)
    sections: List[TemplateSection] = field(default_factory=list)
    min_duration: Optional[float] = None  # seconds the template works best for
    max_duration: Optional[float] = None


@dataclass
class SectionPlan:
    """A template section resolved against a concrete video"""
    section: TemplateSection
    index: int
    target_seconds: float
    target_word_count: int


@dataclass(frozen=True)
class AIModelRef:
    """Reference to the text-generation model used for a run"""
    id: str
    provider: str = "anthropic"
    name: str = ""


@dataclass
class ScriptParams:
    """Style parameters for script generation"""
    style: str = "informative"
    tone: str = "friendly"
    length: ScriptLength = ScriptLength.MEDIUM
    target_audience: str = "general"
    language: str = "en"


@dataclass
class ScriptSegment:
    """A generated block of content, time-placed later on the timeline"""
    id: str
    content: str
    type: SegmentType = SegmentType.NARRATION
    start_time: float = 0.0
    end_time: float = 0.0
    notes: Optional[str] = None


@dataclass
class ScriptMetadata:
    """Generation metadata carried with every script"""
    style: str
    tone: str
    length: ScriptLength
    target_audience: str
    language: str
    word_count: int
    estimated_duration: float
    generated_by: str
    generated_at: str
    template_id: Optional[str] = None
    template_name: Optional[str] = None


@dataclass
class ScriptData:
    """
    A narration script.

    The id is stable for the lifetime of a run: rewrites only touch content,
    segment contents, metadata.word_count and updated_at.
    """
    id: str
    title: str
    content: str
    segments: List[ScriptSegment]
    metadata: ScriptMetadata
    created_at: str = field(default_factory=lambda: datetime.utcnow().isoformat())
    updated_at: str = field(default_factory=lambda: datetime.utcnow().isoformat())

    def segment(self, segment_id: str) -> Optional[ScriptSegment]:
        for seg in self.segments:
            if seg.id == segment_id:
                return seg
        return None

    def with_segment_contents(self, contents: Dict[str, str]) -> 'ScriptData':
        """
        Return a copy with the given segment contents replaced.

        Keeps the id, recomputes content and word count, bumps updated_at.
        Returns self when nothing actually changes.
        """
        changed = any(
            seg.id in contents and contents[seg.id] != seg.content
            for seg in self.segments
        )
        if not changed:
            return self

        segments = [
            replace(seg, content=contents.get(seg.id, seg.content))
            for seg in self.segments
        ]
        metadata = replace(
            self.metadata,
            word_count=sum(count_words(s.content) for s in segments),
        )
        return replace(
            self,
            content=join_segments(s.content for s in segments),
            segments=segments,
            metadata=metadata,
            updated_at=datetime.utcnow().isoformat(),
        )

    def to_dict(self) -> Dict[str, Any]:
        m = self.metadata
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "segments": [
                {
                    "id": s.id,
                    "start_time": s.start_time,
                    "end_time": s.end_time,
                    "content": s.content,
                    "type": s.type.value,
                    "notes": s.notes,
                }
                for s in self.segments
            ],
            "metadata": {
                "style": m.style,
                "tone": m.tone,
                "length": m.length.value,
                "target_audience": m.target_audience,
                "language": m.language,
                "word_count": m.word_count,
                "estimated_duration": m.estimated_duration,
                "generated_by": m.generated_by,
                "generated_at": m.generated_at,
                "template_id": m.template_id,
                "template_name": m.template_name,
            },
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ScriptData':
        meta = data.get("metadata", {})
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            content=data.get("content", ""),
            segments=[
                ScriptSegment(
                    id=s["id"],
                    content=s.get("content", ""),
                    type=SegmentType(s.get("type", "narration")),
                    start_time=float(s.get("start_time", 0.0)),
                    end_time=float(s.get("end_time", 0.0)),
                    notes=s.get("notes"),
                )
                for s in data.get("segments", [])
            ],
            metadata=ScriptMetadata(
                style=meta.get("style", ""),
                tone=meta.get("tone", ""),
                length=ScriptLength(meta.get("length", "medium")),
                target_audience=meta.get("target_audience", ""),
                language=meta.get("language", "en"),
                word_count=int(meta.get("word_count", 0)),
                estimated_duration=float(meta.get("estimated_duration", 0.0)),
                generated_by=meta.get("generated_by", ""),
                generated_at=meta.get("generated_at", ""),
                template_id=meta.get("template_id"),
                template_name=meta.get("template_name"),
            ),
            created_at=data.get("created_at", datetime.utcnow().isoformat()),
            updated_at=data.get("updated_at", datetime.utcnow().isoformat()),
        )
