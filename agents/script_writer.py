"""Script Writer Agent - Writes narration for each template section"""

import asyncio
import logging
import time
import uuid
from datetime import datetime
from typing import Callable, List, Optional

from strands import tool

from core.errors import GenerationError, ValidationError
from core.models.script import (
    AIModelRef,
    ScriptData,
    ScriptMetadata,
    ScriptParams,
    ScriptSegment,
    ScriptTemplate,
    SectionPlan,
    SectionType,
    SegmentType,
)
from core.models.video import Scene, VideoAnalysis, VideoInfo
from core.models.workflow import DEFAULT_MODEL_ID
from core.providers.base import TextProvider
from core.templates import apply_template
from core.text import count_words, join_segments
from core.timeouts import with_timeout
from .base import StudioAgent

logger = logging.getLogger(__name__)

LANGUAGE_NAMES = {
    "en": "English",
    "zh": "Chinese (中文)",
}


class ScriptWriterAgent(StudioAgent):
    """
    Generates a narration script from a template: one prompt per section,
    all sections generated concurrently.
    """

    def __init__(self, text_provider: Optional[TextProvider] = None, timeout: Optional[float] = 60.0):
        """
        Args:
            text_provider: Text capability (defaults to Claude)
            timeout: Seconds allowed per text-generation call
        """
        if text_provider is None:
            from core.providers.claude import ClaudeTextProvider
            text_provider = ClaudeTextProvider()
        super().__init__(text_provider=text_provider)
        self.timeout = timeout

    async def generate_script(
        self,
        video: VideoInfo,
        analysis: VideoAnalysis,
        template: ScriptTemplate,
        model: AIModelRef,
        params: ScriptParams,
        on_progress: Optional[Callable[[float], None]] = None
    ) -> ScriptData:
        """
        Generate every section of the template and join them into a script.

        Args:
            video: Source video
            analysis: Scene analysis of the video
            template: Section structure to fill
            model: Text model to use
            params: Style, tone, length, audience and language
            on_progress: Called with completed/total as each section resolves

        Returns:
            ScriptData with one segment per template section

        Raises:
            GenerationError: Naming the first section (in template order) that failed
        """
        plans = apply_template(template, video.duration, params.length)
        if not plans:
            raise ValidationError(f"Template {template.id} has no sections")

        total = len(plans)
        completed = 0

        async def generate_section(plan: SectionPlan) -> str:
            nonlocal completed
            prompt = self.build_section_prompt(plan, total, video, analysis, params)
            content = await with_timeout(
                self.text_provider.generate_text(model, prompt),
                "text-generation",
                self.timeout,
            )
            completed += 1
            if on_progress:
                on_progress(completed / total)
            return content.strip()

        logger.info(f"Generating {total} sections for {video.name} with template {template.id}")
        results = await asyncio.gather(
            *(generate_section(plan) for plan in plans),
            return_exceptions=True,
        )

        segments: List[ScriptSegment] = []
        for plan, result in zip(plans, results):
            if isinstance(result, Exception):
                raise GenerationError(plan.section.id, result) from result
            if isinstance(result, BaseException):
                raise result
            segments.append(ScriptSegment(
                id=plan.section.id,
                content=result,
                type=SegmentType.ACTION if plan.section.type == SectionType.TRANSITION else SegmentType.NARRATION,
                notes="\n".join(plan.section.tips) or None,
            ))

        now = datetime.utcnow().isoformat()
        script = ScriptData(
            id=f"script_{int(time.time() * 1000)}_{uuid.uuid4().hex[:6]}",
            title=f"{video.name} narration script",
            content=join_segments(s.content for s in segments),
            segments=segments,
            metadata=ScriptMetadata(
                style=params.style,
                tone=params.tone,
                length=params.length,
                target_audience=params.target_audience,
                language=params.language,
                word_count=sum(count_words(s.content) for s in segments),
                estimated_duration=video.duration,
                generated_by=model.id,
                generated_at=now,
                template_id=template.id,
                template_name=template.name,
            ),
            created_at=now,
            updated_at=now,
        )
        logger.info(f"Generated script {script.id} ({script.metadata.word_count} words)")
        return script

    def build_section_prompt(
        self,
        plan: SectionPlan,
        section_count: int,
        video: VideoInfo,
        analysis: VideoAnalysis,
        params: ScriptParams
    ) -> str:
        section = plan.section
        scene = self._representative_scene(analysis.scenes, plan.index, section_count)
        tips = "\n".join(f"- {tip}" for tip in section.tips) or "- None"
        language = LANGUAGE_NAMES.get(params.language, params.language)

        return f"""You are a professional video narration writer. Write the narration for one section of this video.

VIDEO:
- Name: {video.name}
- Duration: {self._format_duration(video.duration)}
- Resolution: {video.width}x{video.height}

SECTION:
- Section: {section.name} ({section.type.value})
- Target length: {round(plan.target_seconds)} seconds
- Target words: {plan.target_word_count}

SCENE:
- Type: {scene.type if scene else 'unknown'}
- Description: {scene.description if scene and scene.description else 'No description'}
- Detected elements: {', '.join(scene.tags) if scene and scene.tags else 'none'}

STYLE:
- Style: {params.style}
- Tone: {params.tone}
- Audience: {params.target_audience}
- Language: {language}

SECTION GOAL:
{section.content}

TIPS:
{tips}

Reply with the narration text only."""

    @staticmethod
    def _representative_scene(scenes: List[Scene], index: int, count: int) -> Optional[Scene]:
        """Scene at the same relative position as the section"""
        if not scenes:
            return None
        position = int(index / max(count, 1) * len(scenes))
        return scenes[min(position, len(scenes) - 1)]

    @tool
    async def rewrite_segment(
        self,
        segment_text: str,
        model_id: str = DEFAULT_MODEL_ID,
        style: str = "informative",
        tone: str = "friendly",
        language: str = "en"
    ) -> str:
        """
        Rewrite one narration segment in different words, keeping its meaning

        Args:
            segment_text: Narration to rewrite
            model_id: Text model to use
            style: Narration style
            tone: Narration tone
            language: Output language code

        Returns:
            The rewritten narration
        """
        prompt = f"""Rewrite this video narration so it says the same thing in clearly different words.
Vary sentence structure and vocabulary. Do not add new facts.

- Style: {style}
- Tone: {tone}
- Language: {LANGUAGE_NAMES.get(language, language)}
- Target words: {count_words(segment_text)}

NARRATION:
{segment_text}

Reply with the rewritten narration only."""
        text = await with_timeout(
            self.text_provider.generate_text(AIModelRef(id=model_id), prompt),
            "text-generation",
            self.timeout,
        )
        return text.strip()

    async def rewrite_script(self, script: ScriptData, model: AIModelRef, params: ScriptParams) -> ScriptData:
        """Rewrite every segment, one at a time; the script id is kept"""
        contents = {}
        for segment in script.segments:
            contents[segment.id] = await self.rewrite_segment(
                segment.content,
                model_id=model.id,
                style=params.style,
                tone=params.tone,
                language=params.language,
            )
        logger.info(f"Rewrote {len(contents)} segments of script {script.id}")
        return script.with_segment_contents(contents)
