"""Unit tests for scene reasoning and prompt assembly."""
import pytest

from conftest import FakeChatProvider
from thumbgen.config.templates import PromptTemplateEngine
from thumbgen.core.exceptions import ProviderTimeoutError, ProviderUnavailableError
from thumbgen.models.channel import StyleProfile
from thumbgen.models.generation import (
    CreativeDirection, CreatorType, GenerationOptions, GenerationTask, Participant
)
from thumbgen.services.prompt_composer import (
    PromptComposer, SceneReasoner, assemble_prompt, intensity_band, limit_words
)
from thumbgen.services.style_selector import STYLE_CATALOG

SUMMARY = "Beating the final boss. Speedrun attempt on hard mode."


@pytest.fixture
def variation():
    return STYLE_CATALOG[CreativeDirection.GAMING]


@pytest.fixture
def profile():
    return StyleProfile(
        style_id="subject_left_text_right_tech_neon",
        palette=["#0a0a0a", "#00ffcc", "#ff00aa"],
        layout="subject_left_text_right",
        font_hint="bold_sans",
        tone="tech_neon"
    )


class TestIntensityBands:
    @pytest.mark.parametrize("intensity,band", [
        (1, "subtle"), (3, "subtle"), (4, "balanced"), (7, "balanced"), (8, "maximum"), (10, "maximum")
    ])
    def test_band_thresholds(self, intensity, band):
        assert intensity_band(intensity) == band


class TestAssemblePrompt:
    """Prompt assembly is pure string composition."""

    def test_same_inputs_same_prompt(self, variation):
        options = GenerationOptions(clickbait_intensity=6, creator_type="gaming")

        first = assemble_prompt("A boss fight", variation, options)
        second = assemble_prompt("A boss fight", variation, options)

        assert first == second
        assert first.startswith("Create a professional video thumbnail:")
        assert "Scene: A boss fight" in first

    def test_intensity_changes_requirements(self, variation):
        subtle = assemble_prompt("scene", variation, GenerationOptions(clickbait_intensity=2))
        maximum = assemble_prompt("scene", variation, GenerationOptions(clickbait_intensity=9))

        assert "Subtle and professional approach" in subtle
        assert "Maximum visual impact" not in subtle
        assert "Maximum visual impact" in maximum
        assert "Extreme contrast lighting" in maximum

    def test_style_directive_first_sentence_used(self, variation):
        prompt = assemble_prompt("scene", variation, GenerationOptions())

        assert "Create a high-energy gaming scene with neon lighting" in prompt

    def test_creator_type_section(self, variation):
        prompt = assemble_prompt("scene", variation, GenerationOptions(creator_type=CreatorType.TUTORIAL))

        assert "Creator Type: tutorial" in prompt
        assert "information hierarchy" in prompt

    def test_no_creator_type_section_without_type(self, variation):
        prompt = assemble_prompt("scene", variation, GenerationOptions())

        assert "Creator Type:" not in prompt

    def test_participants_listed(self, variation):
        options = GenerationOptions(participants=[
            Participant(name="Alex", position="left", emphasis="primary"),
            Participant(name=None, position=None, emphasis=None),
        ])
        prompt = assemble_prompt("scene", variation, options)

        assert "- Alex: on the left side of the frame, as the main subject" in prompt
        assert "- Person: in an appropriate position, with appropriate emphasis" in prompt

    def test_constraints_always_present(self, variation):
        prompt = assemble_prompt("scene", variation, GenerationOptions())

        assert "Critical Constraints:" in prompt
        assert "NO text overlays or typography" in prompt
        assert "Maintain 16:9 aspect ratio" in prompt

    def test_channel_style_block(self, variation, profile):
        prompt = assemble_prompt("scene", variation, GenerationOptions(), style_profile=profile)

        assert "Match channel style: tech_neon" in prompt
        assert "Channel Style Profile:" in prompt
        assert "Primary: #0a0a0a for main elements" in prompt
        assert "Position main subject on left third" in prompt

    def test_rtl_typography(self, variation, profile):
        rtl = assemble_prompt("scene", variation, GenerationOptions(), direction="rtl", style_profile=profile)
        ltr = assemble_prompt("scene", variation, GenerationOptions(), direction="ltr", style_profile=profile)

        assert "Support right-to-left text layout" in rtl
        assert "Standard left-to-right text layout" in ltr


class TestSceneReasoner:
    """Scene reasoning falls back to the context summary on any failure."""

    @pytest.fixture
    def engine(self):
        return PromptTemplateEngine()

    @pytest.mark.asyncio
    async def test_refined_scene(self, engine, variation):
        chat = FakeChatProvider(text="  A knight raises a glowing sword over a fallen dragon  ")
        reasoner = SceneReasoner(chat, engine)

        scene, refined = await reasoner.describe_scene(SUMMARY, variation, GenerationOptions(), "en")

        assert refined is True
        assert scene == "A knight raises a glowing sword over a fallen dragon"
        assert SUMMARY in chat.calls[0]["user"]
        assert variation.style_directive in chat.calls[0]["user"]

    @pytest.mark.asyncio
    async def test_cultural_context_in_prompt(self, engine, variation):
        chat = FakeChatProvider()
        reasoner = SceneReasoner(chat, engine)

        await reasoner.describe_scene(SUMMARY, variation, GenerationOptions(), "ja")

        assert "Cultural Context:" in chat.calls[0]["user"]
        assert "Japanese design principles" in chat.calls[0]["user"]

    @pytest.mark.asyncio
    async def test_creator_guidelines_in_system_prompt(self, engine, variation):
        chat = FakeChatProvider()
        reasoner = SceneReasoner(chat, engine)

        await reasoner.describe_scene(SUMMARY, variation, GenerationOptions(creator_type="music"), "en")

        assert "This is for a music channel." in chat.calls[0]["system"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [
        ProviderUnavailableError("fake_chat", "HTTP 503"),
        ProviderTimeoutError("fake_chat chat completion"),
        RuntimeError("socket closed"),
    ])
    async def test_provider_failure_falls_back(self, engine, variation, error):
        reasoner = SceneReasoner(FakeChatProvider(error=error), engine)

        scene, refined = await reasoner.describe_scene(SUMMARY, variation, GenerationOptions(), "en")

        assert scene == SUMMARY
        assert refined is False

    @pytest.mark.asyncio
    async def test_truncated_answer_falls_back(self, engine, variation):
        reasoner = SceneReasoner(FakeChatProvider(finish_reason="length"), engine)

        scene, refined = await reasoner.describe_scene(SUMMARY, variation, GenerationOptions(), "en")

        assert scene == SUMMARY
        assert refined is False

    @pytest.mark.asyncio
    async def test_long_answer_is_cut(self, engine, variation):
        reasoner = SceneReasoner(FakeChatProvider(text=" ".join(["word"] * 80)), engine)

        scene, refined = await reasoner.describe_scene(SUMMARY, variation, GenerationOptions(), "en")

        assert refined is True
        assert len(scene.split()) == 50


class TestPromptComposer:
    @pytest.mark.asyncio
    async def test_compose_fills_task(self, variation):
        composer = PromptComposer(SceneReasoner(FakeChatProvider(text="A dragon roars"), PromptTemplateEngine()))
        task = GenerationTask(index=0, variation=variation, language="en")

        result = await composer.compose(task, SUMMARY, GenerationOptions())

        assert result is task
        assert task.scene_refined is True
        assert "Scene: A dragon roars" in task.prompt

    @pytest.mark.asyncio
    async def test_compose_with_fallback_scene(self, variation):
        reasoner = SceneReasoner(FakeChatProvider(error=RuntimeError("down")), PromptTemplateEngine())
        task = GenerationTask(index=0, variation=variation, language="en")

        await PromptComposer(reasoner).compose(task, SUMMARY, GenerationOptions())

        assert task.scene_refined is False
        assert f"Scene: {SUMMARY}" in task.prompt


def test_limit_words():
    assert limit_words("one two  three\nfour", 3) == "one two three"
    assert limit_words("short", 10) == "short"
