"""Mock providers for running the workflow without API keys or media tools"""

import asyncio
import hashlib
import logging
import os
import random
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

from core.models.export import ExportOptions
from core.models.script import AIModelRef
from core.models.video import (
    AudioSegment,
    DetectedObject,
    EmotionSample,
    Scene,
    SceneDetectionOptions,
    SceneDetectionResult,
    VideoAnalysis,
    VideoInfo,
)
from .base import MediaProvider, TextProvider, VisionProvider

logger = logging.getLogger(__name__)

_SCENE_TYPES = ["landscape", "closeup", "action", "dialogue", "overview"]
_SCENE_TAGS = [
    ["nature", "outdoor", "travel"],
    ["people", "emotion", "story"],
    ["action", "sports", "fast"],
    ["technology", "device", "product"],
    ["city", "vlog", "journey"],
]
_OBJECT_LABELS = ["person", "car", "tree", "phone", "building", "dog"]
_EMOTIONS = ["calm", "joy", "surprise", "tension"]

_WORDS = [
    "camera", "light", "river", "street", "morning", "crowd", "detail", "color",
    "motion", "silence", "window", "journey", "hands", "voice", "horizon", "market",
    "path", "signal", "rhythm", "shadow", "engine", "garden", "screen", "bridge",
    "reveals", "follows", "captures", "turns", "lingers", "returns", "frames", "tracks",
    "quietly", "slowly", "suddenly", "closely", "briefly", "finally", "gently", "boldly",
    "bright", "narrow", "distant", "familiar", "hidden", "steady", "warm", "sharp",
    "across", "beyond", "toward", "between", "under", "along",
]

_TARGET_WORDS_RE = re.compile(r"Target words:\s*(\d+)")


def _stable_seed(text: str) -> int:
    return int(hashlib.sha256(text.encode("utf-8")).hexdigest()[:16], 16)


class MockVisionProvider(VisionProvider):
    """
    Deterministic scene detection: cuts the video into equal scenes and
    cycles through a fixed set of scene types and tags.
    """

    def __init__(self, scene_length: float = 10.0, delay: float = 0.0):
        self.scene_length = scene_length
        self.delay = delay
        self.calls: List[str] = []

    async def detect_scenes_advanced(
        self,
        video: VideoInfo,
        options: SceneDetectionOptions
    ) -> SceneDetectionResult:
        self.calls.append(f"detect_scenes_advanced:{video.id}")
        if self.delay:
            await asyncio.sleep(self.delay)

        length = max(self.scene_length, options.min_scene_duration)
        count = max(1, int(video.duration // length))
        step = video.duration / count

        scenes, objects, emotions, audio = [], [], [], []
        for i in range(count):
            start, end = i * step, (i + 1) * step
            scene_id = f"scene_{i + 1}"
            scenes.append(Scene(
                id=scene_id,
                start_time=start,
                end_time=end,
                tags=list(_SCENE_TAGS[i % len(_SCENE_TAGS)]),
                type=_SCENE_TYPES[i % len(_SCENE_TYPES)],
                description=f"{_SCENE_TYPES[i % len(_SCENE_TYPES)].capitalize()} shot {i + 1} of {video.name}",
                confidence=0.6 + 0.1 * (i % 4),
            ))
            if options.detect_objects:
                objects.append(DetectedObject(
                    label=_OBJECT_LABELS[i % len(_OBJECT_LABELS)],
                    confidence=0.9,
                    timestamp=start + step / 2,
                    scene_id=scene_id,
                ))
            if options.detect_emotions:
                emotions.append(EmotionSample(
                    timestamp=start + step / 2,
                    emotion=_EMOTIONS[i % len(_EMOTIONS)],
                    intensity=0.3 + 0.15 * (i % 5),
                ))
            # every fourth scene has a quiet tail
            quiet = i % 4 == 3
            audio.append(AudioSegment(
                start_time=start,
                end_time=end - (step / 3 if quiet else 0),
                volume=-20.0,
            ))
            if quiet:
                audio.append(AudioSegment(start_time=end - step / 3, end_time=end, volume=-55.0))

        return SceneDetectionResult(
            scenes=scenes,
            objects=objects,
            emotions=emotions,
            audio_segments=audio,
        )

    async def generate_analysis_report(
        self,
        video: VideoInfo,
        scenes: List[Scene],
        objects: List[DetectedObject],
        emotions: List[EmotionSample]
    ) -> VideoAnalysis:
        self.calls.append(f"generate_analysis_report:{video.id}")
        tags: List[str] = []
        for scene in scenes:
            for tag in scene.tags:
                if tag not in tags:
                    tags.append(tag)
        summary = (
            f"{video.name}: {len(scenes)} scenes over {video.duration:.0f}s "
            f"featuring {', '.join(tags[:5]) or 'general footage'}"
        )
        return VideoAnalysis(
            video_id=video.id,
            scenes=scenes,
            objects=objects,
            emotions=emotions,
            summary=summary,
        )


class MockTextProvider(TextProvider):
    """
    Deterministic text generation.

    Output is seeded by the prompt, so the same prompt always yields the
    same text, and honors a "Target words: N" line when present.
    """

    def __init__(self, default_words: int = 40, delay: float = 0.0):
        self.default_words = default_words
        self.delay = delay
        self.calls: List[Dict[str, Any]] = []

    async def generate_text(self, model: AIModelRef, prompt: str) -> str:
        self.calls.append({"model": model.id, "prompt": prompt})
        if self.delay:
            await asyncio.sleep(self.delay)

        match = _TARGET_WORDS_RE.search(prompt)
        target = int(match.group(1)) if match else self.default_words
        rng = random.Random(_stable_seed(prompt))

        sentences = []
        written = 0
        while written < target:
            length = min(rng.randint(8, 14), max(target - written, 3))
            words = [rng.choice(_WORDS) for _ in range(length)]
            sentences.append(" ".join(words).capitalize() + ".")
            written += length
        return " ".join(sentences)


class MockMediaProvider(MediaProvider):
    """
    Import returns metadata without probing the file; export records the
    request and returns the output path without rendering anything.
    """

    def __init__(self, default_duration: float = 120.0, durations: Optional[Dict[str, float]] = None):
        self.default_duration = default_duration
        self.durations = durations or {}
        self.exports: List[Dict[str, Any]] = []

    async def import_video(self, path: str) -> VideoInfo:
        file_path = Path(path)
        size = os.path.getsize(path) if file_path.is_file() else 0
        return VideoInfo(
            id=f"video_{hashlib.sha256(path.encode('utf-8')).hexdigest()[:8]}",
            name=file_path.stem,
            path=path,
            duration=self.durations.get(path, self.default_duration),
            format=file_path.suffix.lstrip(".") or "mp4",
            size=size,
        )

    async def export_video(self, source_path: str, output_path: str, options: ExportOptions) -> str:
        logger.info(f"Mock export {source_path} -> {output_path}")
        self.exports.append({
            "source": source_path,
            "output": output_path,
            "options": options,
        })
        return output_path
