"""
Script templates and template selection.

Templates are read-only reference data. The selector returns the preferred
template when it exists and otherwise ranks every registered template
against the video analysis, so selection never blocks the pipeline unless
the registry is empty.
"""

import logging
from typing import Dict, List, Optional, Tuple

from core.errors import NotFoundError
from core.models.script import (
    ScriptLength,
    ScriptTemplate,
    SectionPlan,
    SectionType,
    TemplateSection,
)
from core.models.video import VideoAnalysis
from core.text import tokenize

logger = logging.getLogger(__name__)

TAG_WEIGHT = 0.7
DURATION_WEIGHT = 0.3

LENGTH_MULTIPLIER = {
    ScriptLength.SHORT: 0.6,
    ScriptLength.MEDIUM: 1.0,
    ScriptLength.LONG: 1.5,
}


def _section(
    section_id: str,
    name: str,
    section_type: SectionType,
    duration: float,
    words: int,
    content: str,
    tips: List[str]
) -> TemplateSection:
    return TemplateSection(
        id=section_id,
        name=name,
        type=section_type,
        duration=duration,
        target_word_count=words,
        content=content,
        tips=tips,
    )


BUILTIN_TEMPLATES: List[ScriptTemplate] = [
    ScriptTemplate(
        id="narrative-explainer",
        name="Narrative Explainer",
        description="Explains what the footage shows, step by step, ending with a takeaway",
        tags=["explainer", "education", "tutorial", "science", "technology", "documentary", "nature"],
        min_duration=60,
        max_duration=600,
        sections=[
            _section("hook", "Hook", SectionType.HOOK, 0.10, 30,
                     "Open with a question or surprising fact drawn from the footage.",
                     ["Lead with the most striking visual", "Keep it under two sentences"]),
            _section("intro", "Introduction", SectionType.INTRO, 0.15, 45,
                     "Say what the viewer is about to learn.",
                     ["Name the subject plainly"]),
            _section("body", "Main Explanation", SectionType.BODY, 0.50, 150,
                     "Walk through the key points in the order they appear on screen.",
                     ["One idea per shot", "Refer to concrete details the viewer can see"]),
            _section("conclusion", "Takeaway", SectionType.CONCLUSION, 0.15, 45,
                     "Summarize the single most useful idea.",
                     ["Tie back to the opening question"]),
            _section("cta", "Call to Action", SectionType.CTA, 0.10, 30,
                     "Invite the viewer to try, ask or share something specific.",
                     ["Make the ask specific to this video"]),
        ],
    ),
    ScriptTemplate(
        id="quick-highlights",
        name="Quick Highlights",
        description="Fast-paced commentary over the best moments of short footage",
        tags=["highlights", "sports", "action", "travel", "vlog", "fast", "shorts"],
        max_duration=90,
        sections=[
            _section("hook", "Hook", SectionType.HOOK, 0.15, 20,
                     "Grab attention in the first three seconds.",
                     ["Start mid-action"]),
            _section("body", "Highlights", SectionType.BODY, 0.70, 90,
                     "Call out each highlight as it happens.",
                     ["Short punchy sentences", "Match the rhythm of the cuts"]),
            _section("cta", "Call to Action", SectionType.CTA, 0.15, 20,
                     "Close with a quick, specific prompt.",
                     ["One sentence"]),
        ],
    ),
    ScriptTemplate(
        id="story-arc",
        name="Story Arc",
        description="Tells the footage as a story with a turning point",
        tags=["story", "travel", "vlog", "people", "emotion", "journey", "family"],
        min_duration=90,
        max_duration=900,
        sections=[
            _section("hook", "Hook", SectionType.HOOK, 0.10, 30,
                     "Tease the moment everything changes.",
                     ["Hint, don't reveal"]),
            _section("intro", "Setup", SectionType.INTRO, 0.15, 45,
                     "Introduce the people and the place.",
                     ["Use names or roles consistently"]),
            _section("rising", "Rising Action", SectionType.BODY, 0.30, 90,
                     "Build toward the turning point.",
                     ["Escalate stakes scene by scene"]),
            _section("turn", "Turning Point", SectionType.TRANSITION, 0.10, 25,
                     "Mark the shift in one or two lines.",
                     ["Let the visuals breathe"]),
            _section("resolution", "Resolution", SectionType.BODY, 0.25, 75,
                     "Show how things settle after the turn.",
                     ["Pay off the opening tease"]),
            _section("conclusion", "Reflection", SectionType.CONCLUSION, 0.10, 30,
                     "End on what the story means.",
                     ["Keep it personal"]),
        ],
    ),
    ScriptTemplate(
        id="product-review",
        name="Product Review",
        description="Hands-on review: first impressions, details, verdict",
        tags=["product", "review", "unboxing", "tech", "gadget", "shopping", "device"],
        min_duration=60,
        max_duration=600,
        sections=[
            _section("hook", "Hook", SectionType.HOOK, 0.10, 25,
                     "State the one thing that surprised you about the product.",
                     ["Be concrete"]),
            _section("intro", "First Impressions", SectionType.INTRO, 0.10, 35,
                     "Describe what it is and who it is for.",
                     ["Mention price range only if visible"]),
            _section("details", "Details", SectionType.BODY, 0.50, 140,
                     "Cover design, features and how it performs on screen.",
                     ["Pair each claim with a shot", "Note one weakness"]),
            _section("verdict", "Verdict", SectionType.CONCLUSION, 0.15, 40,
                     "Give a clear recommendation.",
                     ["Say who should skip it"]),
            _section("cta", "Call to Action", SectionType.CTA, 0.15, 25,
                     "Point viewers to a specific comparison or question.",
                     ["Avoid generic sign-offs"]),
        ],
    ),
    ScriptTemplate(
        id="commentary-recap",
        name="Commentary Recap",
        description="Film or drama recap with narrator commentary",
        tags=["movie", "film", "drama", "commentary", "recap", "entertainment", "story"],
        min_duration=120,
        max_duration=1800,
        sections=[
            _section("hook", "Hook", SectionType.HOOK, 0.10, 35,
                     "Open on the most dramatic moment.",
                     ["Pose the central conflict as a question"]),
            _section("intro", "Premise", SectionType.INTRO, 0.15, 50,
                     "Set up the characters and premise.",
                     ["Introduce at most three characters"]),
            _section("plot", "Plot Recap", SectionType.BODY, 0.55, 170,
                     "Recap the plot in order, with commentary on key choices.",
                     ["Keep commentary brief between plot beats"]),
            _section("conclusion", "Commentary", SectionType.CONCLUSION, 0.10, 35,
                     "Offer an opinion on the ending.",
                     ["Take a clear position"]),
            _section("cta", "Call to Action", SectionType.CTA, 0.10, 25,
                     "Ask viewers for their take on one specific scene.",
                     ["Name the scene"]),
        ],
    ),
]


class TemplateRegistry:
    """Registry of script templates, keyed by id, in registration order"""

    def __init__(self, templates: Optional[List[ScriptTemplate]] = None):
        self._templates: Dict[str, ScriptTemplate] = {}
        for template in BUILTIN_TEMPLATES if templates is None else templates:
            self.register(template)

    def register(self, template: ScriptTemplate):
        total = sum(s.duration for s in template.sections)
        if template.sections and abs(total - 1.0) > 0.01:
            logger.warning(
                f"Template {template.id} section durations sum to {total:.2f}, expected 1.0"
            )
        self._templates[template.id] = template

    def get(self, template_id: str) -> Optional[ScriptTemplate]:
        return self._templates.get(template_id)

    def list(self) -> List[ScriptTemplate]:
        return list(self._templates.values())

    def __len__(self) -> int:
        return len(self._templates)


class TemplateSelector:
    """Picks the script template for a video"""

    def __init__(self, registry: Optional[TemplateRegistry] = None):
        self.registry = registry if registry is not None else TemplateRegistry()

    def select_template(
        self,
        analysis: VideoAnalysis,
        preferred_id: Optional[str] = None,
        video_duration: Optional[float] = None
    ) -> ScriptTemplate:
        """
        Return the preferred template or the best-ranked recommendation.

        Raises:
            NotFoundError: If the registry holds no templates
        """
        if len(self.registry) == 0:
            raise NotFoundError("Template registry is empty")

        if preferred_id:
            template = self.registry.get(preferred_id)
            if template:
                return template
            logger.info(f"Preferred template '{preferred_id}' not found, ranking instead")

        ranked = self.recommend(analysis, video_duration=video_duration)
        best, score = ranked[0]
        logger.info(f"Selected template {best.id} (score {score:.2f})")
        return best

    def recommend(
        self,
        analysis: VideoAnalysis,
        limit: Optional[int] = None,
        video_duration: Optional[float] = None
    ) -> List[Tuple[ScriptTemplate, float]]:
        """Rank all templates, best first; ties keep registry order"""
        vocabulary = set(analysis.vocabulary())
        vocabulary.update(tokenize(analysis.summary))
        duration = video_duration if video_duration is not None else analysis.duration

        scored = [
            (t, self.score_template(t, vocabulary, duration))
            for t in self.registry.list()
        ]
        # sorted() is stable, so equal scores keep registry order
        ranked = sorted(scored, key=lambda pair: pair[1], reverse=True)
        return ranked[:limit] if limit else ranked

    @staticmethod
    def score_template(template: ScriptTemplate, vocabulary: set, duration: float) -> float:
        tags = {t.lower() for t in template.tags}
        overlap = len(tags & vocabulary) / len(tags) if tags else 0.0
        return TAG_WEIGHT * overlap + DURATION_WEIGHT * _duration_fit(template, duration)


def _duration_fit(template: ScriptTemplate, duration: float) -> float:
    """1.0 inside the template's duration range, decaying outside it"""
    if duration <= 0 or (template.min_duration is None and template.max_duration is None):
        return 0.5
    low = template.min_duration or 0.0
    high = template.max_duration
    if duration < low:
        return max(0.0, 1.0 - (low - duration) / low)
    if high is not None and duration > high:
        return max(0.0, 1.0 - (duration - high) / high)
    return 1.0


def apply_template(
    template: ScriptTemplate,
    video_duration: float,
    length: ScriptLength = ScriptLength.MEDIUM
) -> List[SectionPlan]:
    """Resolve a template's sections against a video's duration and length bucket"""
    multiplier = LENGTH_MULTIPLIER.get(length, 1.0)
    return [
        SectionPlan(
            section=section,
            index=index,
            target_seconds=section.duration * video_duration,
            target_word_count=max(1, round(section.target_word_count * multiplier)),
        )
        for index, section in enumerate(template.sections)
    ]
