"""Two-stage prompt construction: scene reasoning, then deterministic assembly."""
from typing import Dict, List, Optional, Tuple

from ..config.localization import LocalizationManager, get_localization_manager
from ..config.templates import PromptTemplateEngine, get_template_engine
from ..core.config import settings
from ..core.exceptions import ThumbGenBaseException
from ..models.channel import StyleProfile
from ..models.generation import (
    CreatorType, GenerationOptions, GenerationTask, Participant, StyleVariation
)
from ..providers.base import ChatCompletionProvider
from ..utils.logging import CorrelatedLogger
from .style_profiler import get_style_description

SUBTLE_MAX = 3
BALANCED_MAX = 7

CREATOR_GUIDELINES: Dict[CreatorType, str] = {
    CreatorType.GAMING: (
        "Focus on high-energy, dynamic gaming scenes. Consider showing gameplay moments, reactions, "
        "or equipment. Use bold colors and strong contrast typical in gaming content."
    ),
    CreatorType.TUTORIAL: (
        "Emphasize clarity and information hierarchy. Show tools, processes, or before/after states. "
        "Create a professional, instructional visual that clearly communicates expertise."
    ),
    CreatorType.VLOG: (
        "Capture authentic, personal moments with emotional connection. Focus on the creator's "
        "personality and lifestyle. Create an inviting, relatable scene."
    ),
    CreatorType.ENTERTAINMENT: (
        "Design for maximum visual impact and emotional engagement. Use dramatic lighting, "
        "expressive poses, and bold composition to create intrigue."
    ),
    CreatorType.EDUCATION: (
        "Balance professionalism with accessibility. Use clean, organized visual presentation with "
        "clear subject focus. Incorporate educational motifs subtly."
    ),
    CreatorType.REVIEW: (
        "Show the product/subject in a detailed, well-lit presentation. Consider comparison elements "
        "or rating indicators. Create a trustworthy, analytical scene."
    ),
    CreatorType.BUSINESS: (
        "Project professionalism and authority. Use refined color palettes, balanced composition, "
        "and appropriate business setting or symbols."
    ),
    CreatorType.MUSIC: (
        "Capture the energy and emotion of musical performance. Use dynamic lighting, movement, "
        "and visual rhythm. Match the artist's genre aesthetic."
    ),
    CreatorType.NEWS: (
        "Create a timely, journalistic aesthetic. Use documentary-style photography cues with clear "
        "subject focus. Maintain credibility in visual presentation."
    ),
    CreatorType.OTHER: (
        "Balance visual impact with content relevance. Create a scene that effectively represents "
        "the specific topic while maintaining viewer engagement."
    ),
}

POSITION_TEXT = {
    "left": "on the left side of the frame",
    "right": "on the right side of the frame",
    "center": "in the center of the frame",
}

EMPHASIS_TEXT = {
    "primary": "as the main subject",
    "secondary": "as a supporting element",
    "background": "in the background",
}

COMPOSITION_GUIDES = {
    "subject_left_text_right": "Position main subject on left third, leave clean space on right for text overlay",
    "subject_right_text_left": "Position main subject on right third, leave clean space on left for text overlay",
    "subject_center": "Center the main subject with balanced negative space for text above/below",
    "split_vertical": "Create a clear vertical division with contrasting elements on each side",
    "full_bleed": "Use a full-frame subject with strategic areas of low detail for text",
}

FONT_GUIDES = {
    "bold_sans": "Strong, impactful sans-serif styling",
    "condensed_sans": "Space-efficient condensed typography",
    "clean_modern": "Contemporary, minimalist type treatment",
    "decorative": "Stylized, attention-grabbing fonts",
    "elegant_serif": "Sophisticated serif typography",
}

TECHNICAL_SPECIFICATIONS = [
    "Maintain 16:9 aspect ratio",
    "Professional production quality",
    "Cinematic lighting and composition",
    "Sharp focus on main subject",
    "High detail and clarity",
]

CRITICAL_CONSTRAINTS = [
    "NO text overlays or typography",
    "NO user interface elements",
    "NO watermarks or logos",
    "NO stock photo aesthetics",
    "NO AI-generated artifacts",
    "NO generic or cliché compositions",
]


def _bullets(lines: List[str]) -> str:
    return "\n".join(f"- {line}" for line in lines)


def intensity_band(intensity: int) -> str:
    """Three bands by threshold: subtle, balanced, maximum."""
    if intensity <= SUBTLE_MAX:
        return "subtle"
    if intensity <= BALANCED_MAX:
        return "balanced"
    return "maximum"


STYLE_REQUIREMENTS = {
    "subtle": [
        "Subtle and professional approach",
        "Natural lighting and composition",
        "Authentic emotional expression",
        "Clean, uncluttered scene",
        "Refined color palette",
    ],
    "balanced": [
        "Bold but balanced approach",
        "Dynamic lighting contrasts",
        "Engaging emotional impact",
        "Strategic visual hierarchy",
        "Vibrant color relationships",
    ],
    "maximum": [
        "Maximum visual impact",
        "Dramatic lighting effects",
        "Intense emotional energy",
        "Powerful focal points",
        "High-contrast color scheme",
    ],
}

COMPOSITION_GUIDELINES = {
    "subtle": [
        "Balanced, professional composition",
        "Clear subject placement",
        "Thoughtful negative space",
        "Subtle depth layers",
        "Natural perspective",
    ],
    "balanced": [
        "Dynamic asymmetric balance",
        "Strong focal hierarchy",
        "Strategic depth staging",
        "Engaging perspective",
        "Purposeful motion hints",
    ],
    "maximum": [
        "Dramatic composition with maximum impact",
        "Extreme foreground emphasis",
        "Bold perspective angles",
        "Minimal negative space",
        "Exaggerated depth cues",
    ],
}

LIGHTING_GUIDELINES = {
    "subtle": [
        "Professional, controlled lighting",
        "Natural color temperature",
        "Subtle highlights and shadows",
        "Balanced exposure",
        "Complementary color harmony",
    ],
    "balanced": [
        "Dynamic lighting contrasts",
        "Strategic highlights on key elements",
        "Atmospheric light effects",
        "Rich color relationships",
        "Mood-enhancing shadows",
    ],
    "maximum": [
        "Extreme contrast lighting",
        "Dramatic color intensity",
        "Bold light direction",
        "Eye-catching glow effects",
        "High-impact color combinations",
    ],
}


def get_style_requirements(style_directive: str, intensity: int) -> str:
    """First sentence of the directive followed by the band's requirements."""
    base = style_directive.split(".")[0].strip()
    return f"{base} with:\n{_bullets(STYLE_REQUIREMENTS[intensity_band(intensity)])}"


def get_composition_guidelines(intensity: int) -> str:
    return _bullets(COMPOSITION_GUIDELINES[intensity_band(intensity)])


def get_lighting_guidelines(intensity: int) -> str:
    return _bullets(LIGHTING_GUIDELINES[intensity_band(intensity)])


def get_creator_type_guidelines(creator_type: Optional[CreatorType]) -> str:
    if creator_type is None:
        return ""
    return CREATOR_GUIDELINES.get(creator_type, CREATOR_GUIDELINES[CreatorType.OTHER])


def get_participant_placement(participants: List[Participant]) -> str:
    if not participants:
        return ""

    lines = ["Include the following people in the thumbnail:"]
    for participant in participants:
        position = POSITION_TEXT.get(participant.position, "in an appropriate position")
        emphasis = EMPHASIS_TEXT.get(participant.emphasis, "with appropriate emphasis")
        lines.append(f"- {participant.name or 'Person'}: {position}, {emphasis}")
    return "\n".join(lines)


def get_typography_guide(font_hint: str, direction: str) -> str:
    lines = [
        "Clear hierarchy for different text elements",
        "Maintain legibility at thumbnail size",
        "Use contrast for text visibility",
        "Support right-to-left text layout" if direction == "rtl" else "Standard left-to-right text layout",
    ]
    if font_hint in FONT_GUIDES:
        lines.append(FONT_GUIDES[font_hint])
    return _bullets(lines)


def get_channel_style_block(profile: StyleProfile, direction: str) -> str:
    """Layout, colour, typography and tone guidance from a channel style profile."""
    primary, secondary, accent = profile.palette[:3]
    color_guide = _bullets([
        f"Primary: {primary} for main elements",
        f"Secondary: {secondary} for supporting elements",
        f"Accent: {accent} for highlights and emphasis",
        "Ensure strong contrast for visual hierarchy",
        "Maintain color harmony throughout",
    ])
    layout_guide = COMPOSITION_GUIDES.get(profile.layout, COMPOSITION_GUIDES["subject_center"])

    return "\n".join([
        "Channel Style Profile:",
        get_style_description(profile),
        "",
        "Layout Guide:",
        f"- {layout_guide}",
        "",
        "Color Treatment:",
        color_guide,
        "",
        "Typography Considerations:",
        get_typography_guide(profile.font_hint, direction),
    ])


def assemble_prompt(
    scene: str,
    variation: StyleVariation,
    options: GenerationOptions,
    direction: str = "ltr",
    style_profile: Optional[StyleProfile] = None
) -> str:
    """
    Build the final image-generation prompt.

    Pure string composition: the same inputs always give the same prompt.
    """
    intensity = options.clickbait_intensity
    creator_type = options.creator_type

    sections = [
        "Create a professional video thumbnail:",
        f"Scene: {scene.strip()}",
        f"Style Requirements:\n{get_style_requirements(variation.style_directive, intensity)}",
    ]

    if creator_type is not None:
        sections.append(f"Creator Type: {creator_type.value}\n{get_creator_type_guidelines(creator_type)}")

    placement = get_participant_placement(options.participants)
    if placement:
        sections.append(placement)

    technical = list(TECHNICAL_SPECIFICATIONS)
    if style_profile is not None:
        technical.append(f"Match channel style: {style_profile.tone}")
    sections.append(f"Technical Specifications:\n{_bullets(technical)}")

    if style_profile is not None:
        sections.append(get_channel_style_block(style_profile, direction))

    sections.append(f"Critical Constraints:\n{_bullets(CRITICAL_CONSTRAINTS)}")
    sections.append(f"Composition Guidelines:\n{get_composition_guidelines(intensity)}")
    sections.append(f"Lighting and Color:\n{get_lighting_guidelines(intensity)}")

    return "\n\n".join(sections)


def limit_words(text: str, max_words: int) -> str:
    words = text.split()
    return " ".join(words[:max_words])


class SceneReasoner:
    """Asks the chat provider for a concrete scene; falls back to the summary."""

    def __init__(
        self,
        chat_provider: ChatCompletionProvider,
        template_engine: Optional[PromptTemplateEngine] = None,
        localization: Optional[LocalizationManager] = None
    ):
        self.chat_provider = chat_provider
        self.template_engine = template_engine or get_template_engine()
        self.localization = localization or get_localization_manager()
        self.logger = CorrelatedLogger(__name__)

    async def describe_scene(
        self,
        context_summary: str,
        variation: StyleVariation,
        options: GenerationOptions,
        language: str,
        request_id: Optional[str] = None
    ) -> Tuple[str, bool]:
        """Return (scene, refined). ``refined`` is False when the summary was used instead."""
        logger = self.logger.bind(request_id)
        creator_type = options.creator_type
        branding_hint = None
        if options.style_profile is not None:
            branding_hint = get_style_description(options.style_profile).replace("\n", "; ")

        try:
            prompt = self.template_engine.render(
                "scene_reasoning",
                language="en",
                context_summary=context_summary,
                style_directive=variation.style_directive,
                emphasis=variation.emphasis,
                style_weight=options.style_consistency,
                cultural_context=self.localization.get_cultural_context(language),
                creator_type=creator_type.value if creator_type else None,
                creator_guidelines=get_creator_type_guidelines(creator_type),
                participant_placement=get_participant_placement(options.participants),
                branding_hint=branding_hint,
                max_words=settings.scene_max_words
            )
            completion = await self.chat_provider.complete(
                prompt.system,
                prompt.user,
                max_tokens=settings.scene_max_tokens,
                temperature=settings.scene_temperature
            )
        except ThumbGenBaseException as e:
            logger.warning(f"Scene reasoning failed for {variation.label}, using summary: {e.message}")
            return context_summary, False
        except Exception as e:
            logger.warning(f"Scene reasoning failed for {variation.label}, using summary: {str(e)}")
            return context_summary, False

        if completion.truncated or not completion.text.strip():
            logger.warning(f"Scene reasoning returned incomplete text for {variation.label}, using summary")
            return context_summary, False

        return limit_words(completion.text, settings.scene_max_words), True


class PromptComposer:
    """Runs scene reasoning and prompt assembly for one generation task."""

    def __init__(
        self,
        scene_reasoner: SceneReasoner,
        localization: Optional[LocalizationManager] = None
    ):
        self.scene_reasoner = scene_reasoner
        self.localization = localization or get_localization_manager()

    async def compose(
        self,
        task: GenerationTask,
        context_summary: str,
        options: GenerationOptions,
        request_id: Optional[str] = None
    ) -> GenerationTask:
        scene, refined = await self.scene_reasoner.describe_scene(
            context_summary, task.variation, options, task.language, request_id
        )
        task.prompt = assemble_prompt(
            scene,
            task.variation,
            options,
            direction=self.localization.get_direction(task.language),
            style_profile=options.style_profile
        )
        task.scene_refined = refined
        return task
