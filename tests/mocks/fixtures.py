"""Test data factories for consistent test setup"""

from typing import List, Optional

from core.models.script import (
    ScriptData,
    ScriptLength,
    ScriptMetadata,
    ScriptSegment,
    ScriptTemplate,
    SectionType,
    TemplateSection,
)
from core.models.timeline import TimelineClip, TimelineData, TimelineTrack, TrackType
from core.models.video import AudioSegment, Scene, VideoAnalysis, VideoInfo
from core.text import join_segments


def make_video(
    video_id: str = "video_test",
    duration: float = 90.0,
    **kwargs
) -> VideoInfo:
    """Factory for VideoInfo objects"""
    defaults = {
        "id": video_id,
        "name": "test_video",
        "path": f"/videos/{video_id}.mp4",
        "duration": duration,
        "width": 1920,
        "height": 1080,
        "format": "mp4",
        "size": 1024,
    }
    defaults.update(kwargs)
    return VideoInfo(**defaults)


def make_scene(
    scene_id: str = "scene_1",
    start_time: float = 0.0,
    end_time: float = 10.0,
    **kwargs
) -> Scene:
    """Factory for Scene objects"""
    defaults = {
        "id": scene_id,
        "start_time": start_time,
        "end_time": end_time,
        "tags": ["travel", "outdoor"],
        "type": "landscape",
        "description": "Wide shot of a mountain road",
        "confidence": 0.8,
    }
    defaults.update(kwargs)
    return Scene(**defaults)


def make_analysis(
    video_id: str = "video_test",
    duration: float = 90.0,
    scene_count: int = 3,
    tags: Optional[List[str]] = None,
    audio_segments: Optional[List[AudioSegment]] = None
) -> VideoAnalysis:
    """Analysis with scene_count equal scenes covering duration"""
    step = duration / scene_count
    scenes = [
        make_scene(
            scene_id=f"scene_{i + 1}",
            start_time=i * step,
            end_time=(i + 1) * step,
            tags=list(tags) if tags is not None else ["travel", "outdoor"],
        )
        for i in range(scene_count)
    ]
    return VideoAnalysis(
        video_id=video_id,
        scenes=scenes,
        summary="Test footage",
        audio_segments=list(audio_segments or []),
    )


def make_template(
    template_id: str = "test-template",
    section_count: int = 3,
    tags: Optional[List[str]] = None,
    **kwargs
) -> ScriptTemplate:
    """Template with section_count equal sections"""
    sections = [
        TemplateSection(
            id=f"section_{i + 1}",
            name=f"Section {i + 1}",
            type=SectionType.HOOK if i == 0 else (
                SectionType.CONCLUSION if i == section_count - 1 else SectionType.BODY
            ),
            duration=1.0 / section_count,
            target_word_count=30,
            content=f"Cover part {i + 1} of the video",
            tips=[f"Tip for section {i + 1}"],
        )
        for i in range(section_count)
    ]
    defaults = {
        "id": template_id,
        "name": "Test Template",
        "description": "Template for tests",
        "tags": list(tags) if tags is not None else ["travel"],
        "sections": sections,
    }
    defaults.update(kwargs)
    return ScriptTemplate(**defaults)


def make_script(
    contents: Optional[List[str]] = None,
    script_id: str = "script_test",
    **kwargs
) -> ScriptData:
    """Script with one segment per content string"""
    if contents is None:
        contents = [
            "The road climbs into the mountains at first light.",
            "A small village appears between the pine trees.",
            "By evening the valley glows in warm orange tones.",
        ]
    segments = [
        ScriptSegment(id=f"section_{i + 1}", content=text)
        for i, text in enumerate(contents)
    ]
    defaults = {
        "id": script_id,
        "title": "Test script",
        "content": join_segments(contents),
        "segments": segments,
        "metadata": ScriptMetadata(
            style="informative",
            tone="friendly",
            length=ScriptLength.MEDIUM,
            target_audience="general",
            language="en",
            word_count=sum(len(c.split()) for c in contents),
            estimated_duration=90.0,
            generated_by="mock-model",
            generated_at="2024-01-01T00:00:00",
            template_id="test-template",
        ),
        "created_at": "2024-01-01T00:00:00",
        "updated_at": "2024-01-01T00:00:00",
    }
    defaults.update(kwargs)
    return ScriptData(**defaults)


def make_timeline(duration: float = 90.0, segment_ids: Optional[List[str]] = None) -> TimelineData:
    """Timeline with one video clip and evenly split subtitle clips"""
    segment_ids = segment_ids if segment_ids is not None else ["section_1", "section_2", "section_3"]
    step = duration / max(len(segment_ids), 1)
    subtitles = [
        TimelineClip(
            id=f"subtitle-clip-{i}",
            start_time=i * step,
            end_time=duration if i == len(segment_ids) - 1 else (i + 1) * step,
            script_segment_id=segment_id,
        )
        for i, segment_id in enumerate(segment_ids)
    ]
    return TimelineData(
        duration=duration,
        tracks=[
            TimelineTrack(
                id="video-track-1",
                type=TrackType.VIDEO,
                clips=[TimelineClip(id="video-clip-0", start_time=0.0, end_time=duration, source_end=duration)],
            ),
            TimelineTrack(id="audio-track-1", type=TrackType.AUDIO),
            TimelineTrack(id="subtitle-track-1", type=TrackType.SUBTITLE, clips=subtitles),
        ],
    )
