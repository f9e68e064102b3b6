"""Abstract base classes for the external capabilities the workflow consumes"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from core.models.export import ExportOptions
from core.models.script import AIModelRef
from core.models.video import (
    DetectedObject,
    EmotionSample,
    Scene,
    SceneDetectionOptions,
    SceneDetectionResult,
    VideoAnalysis,
    VideoInfo,
)


class ProviderType(Enum):
    """Available provider backends"""
    MOCK = "mock"
    ANTHROPIC = "anthropic"


def _mask_secret(value: Optional[str]) -> str:
    """Mask a secret value for safe display in logs/repr."""
    if value is None:
        return "None"
    if len(value) <= 8:
        return "'***'"
    return f"'{value[:4]}...{value[-4:]}'"


@dataclass
class ProviderConfig:
    """Configuration shared by provider implementations"""
    provider_type: ProviderType
    api_key: Optional[str] = None

    def __repr__(self) -> str:
        """Safe repr that masks API key to prevent accidental exposure in logs."""
        return (
            f"ProviderConfig(provider_type={self.provider_type}, "
            f"api_key={_mask_secret(self.api_key)})"
        )


class VisionProvider(ABC):
    """
    Scene detection and analysis of a video.

    Implementations may be slow; the workflow applies its own timeout.
    """

    @abstractmethod
    async def detect_scenes_advanced(
        self,
        video: VideoInfo,
        options: SceneDetectionOptions
    ) -> SceneDetectionResult:
        """
        Detect scenes, and optionally objects and emotions.

        Args:
            video: Uploaded video
            options: Minimum scene duration and detection flags

        Returns:
            Scenes ordered by start time plus detections
        """
        pass

    @abstractmethod
    async def generate_analysis_report(
        self,
        video: VideoInfo,
        scenes: List[Scene],
        objects: List[DetectedObject],
        emotions: List[EmotionSample]
    ) -> VideoAnalysis:
        """Combine detections into an analysis with a summary"""
        pass


class TextProvider(ABC):
    """Text generation by an AI model"""

    @abstractmethod
    async def generate_text(self, model: AIModelRef, prompt: str) -> str:
        """
        Generate text for a prompt.

        Args:
            model: Model to use
            prompt: Full prompt text

        Returns:
            Generated text
        """
        pass


class MediaProvider(ABC):
    """Video import and export (transcoding happens outside this package)"""

    @abstractmethod
    async def import_video(self, path: str) -> VideoInfo:
        """Probe and register a video file"""
        pass

    @abstractmethod
    async def export_video(self, source_path: str, output_path: str, options: ExportOptions) -> str:
        """
        Render the output file.

        Returns:
            Path of the exported file
        """
        pass
