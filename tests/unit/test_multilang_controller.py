"""End-to-end tests of the generation flow over fake providers."""
import pytest

from conftest import FakeChatProvider, FakeFaceProvider, FakeImageProvider
from thumbgen.config.templates import PromptTemplateEngine
from thumbgen.core.exceptions import AllVariationsFailedError, ProviderUnavailableError
from thumbgen.models.channel import StyleProfile
from thumbgen.models.generation import GenerationOptions, Language, VideoContext
from thumbgen.services.face_swap import FaceSwapProcessor
from thumbgen.services.generation_executor import GenerationExecutor
from thumbgen.services.generation_pipeline import GenerationPipeline, calculate_confidence
from thumbgen.services.multilang_controller import MultiLanguageController
from thumbgen.services.prompt_composer import PromptComposer, SceneReasoner
from thumbgen.services.style_selector import StyleSelector

REFERENCE = "https://images.example.com/creator.jpg"


def build_controller(image_provider=None, chat_provider=None, face_provider=None, max_concurrency=None):
    face_swap = FaceSwapProcessor(face_provider or FakeFaceProvider(), detection_timeout=1, swap_timeout=1)
    pipeline = GenerationPipeline(
        style_selector=StyleSelector(),
        prompt_composer=PromptComposer(SceneReasoner(chat_provider or FakeChatProvider(), PromptTemplateEngine())),
        executor=GenerationExecutor(image_provider or FakeImageProvider(), max_concurrency=max_concurrency),
        face_swap=face_swap
    )
    return MultiLanguageController(pipeline, face_swap)


@pytest.fixture
def video():
    return VideoContext(title="10 Tips for Faster Cooking")


class TestConfidence:
    def test_confidence_formula(self):
        assert calculate_confidence(1.0, True, False) == 0.8
        assert calculate_confidence(1.0, False, False) == 0.7
        assert calculate_confidence(1.0, True, True) == 0.85
        assert calculate_confidence(0.9, True, False) == 0.72

    def test_confidence_is_clamped(self):
        assert 0.0 <= calculate_confidence(2.0, True, True) <= 1.0
        assert calculate_confidence(0.0, False, False) == 0.0


class TestGenerationFlow:
    """Generation across styles, languages and face swap."""

    @pytest.mark.asyncio
    async def test_single_direction_repeated_per_variation(self, video):
        controller = build_controller()
        options = GenerationOptions(variation_count=2, creative_direction="dynamic")

        batch = await controller.generate(video, options)

        assert len(batch.results) == 2
        assert [r.label for r in batch.results] == ["Dynamic", "Dynamic"]
        assert all(r.face_swap_applied is False for r in batch.results)
        assert all(r.language == "en" for r in batch.results)
        assert batch.failures == []

    @pytest.mark.asyncio
    async def test_default_order_without_direction(self, video):
        controller = build_controller()

        batch = await controller.generate(video, GenerationOptions(variation_count=3))

        assert sorted(r.label for r in batch.results) == sorted(["Original Style", "Dynamic", "Artistic"])

    @pytest.mark.asyncio
    async def test_two_languages_sorted_by_confidence(self, video):
        controller = build_controller()
        options = GenerationOptions(variation_count=2, creative_direction="dynamic", target_languages=["es", "en"])

        batch = await controller.generate(video, options)

        assert len(batch.results) == 4
        assert [r.language for r in batch.results] == ["en", "en", "es", "es"]
        assert all(r.label == "Dynamic" for r in batch.results)
        confidences = [r.confidence for r in batch.results]
        assert confidences == sorted(confidences, reverse=True)
        assert batch.results[-1].language_name == "Spanish"
        assert len({r.id for r in batch.results}) == 4

    @pytest.mark.asyncio
    async def test_face_swap_failure_keeps_results(self):
        faces = FakeFaceProvider(swap_error=ProviderUnavailableError("fake_faces", "HTTP 503"))
        controller = build_controller(face_provider=faces)
        video = VideoContext(title="10 Tips for Faster Cooking", reference_image_url=REFERENCE)

        batch = await controller.generate(video, GenerationOptions(face_swap_enabled=True))

        assert len(batch.results) == 1
        result = batch.results[0]
        assert result.face_swap_applied is False
        assert result.label == "Original Style"
        assert result.image_ref.startswith("https://images.example.com/")
        assert result.image_ref != faces.swap_result

    @pytest.mark.asyncio
    async def test_face_swap_success_labels_result(self):
        faces = FakeFaceProvider()
        controller = build_controller(face_provider=faces)
        video = VideoContext(title="10 Tips for Faster Cooking", reference_image_url=REFERENCE)
        options = GenerationOptions(face_swap_enabled=True, creative_direction="vlog")

        batch = await controller.generate(video, options)

        result = batch.results[0]
        assert result.face_swap_applied is True
        assert result.label == "Vlog (with face swap)"
        assert result.image_ref == faces.swap_result
        assert result.confidence == 0.85

    @pytest.mark.asyncio
    async def test_face_swap_disabled_skips_provider(self):
        faces = FakeFaceProvider()
        controller = build_controller(face_provider=faces)
        video = VideoContext(title="Cooking", reference_image_url=REFERENCE)

        await controller.generate(video, GenerationOptions(face_swap_enabled=False))

        assert faces.detect_calls == []

    @pytest.mark.asyncio
    async def test_scene_fallback_lowers_confidence(self, video):
        controller = build_controller(chat_provider=FakeChatProvider(error=RuntimeError("down")))

        batch = await controller.generate(video, GenerationOptions())

        result = batch.results[0]
        assert result.scene_refined is False
        assert result.confidence == 0.7
        assert "10 Tips for Faster Cooking" in result.prompt_used

    @pytest.mark.asyncio
    async def test_failed_language_does_not_block_others(self, video):
        profile = StyleProfile(
            style_id="subject_center_soft_modern",
            palette=["#336699", "#6699cc", "#ffcc00"],
            layout="subject_center",
            font_hint="clean_modern",
            tone="soft_modern"
        )
        images = FakeImageProvider(fail_when=lambda prompt: "right-to-left" in prompt)
        controller = build_controller(image_provider=images)
        options = GenerationOptions(target_languages=["en", "ar"], style_profile=profile)

        batch = await controller.generate(video, options)

        assert [r.language for r in batch.results] == ["en"]
        assert [(f.language, f.error_code) for f in batch.failures] == [("ar", "PROVIDER_UNAVAILABLE")]

    @pytest.mark.asyncio
    async def test_all_languages_failed_raises(self, video):
        controller = build_controller(image_provider=FakeImageProvider(fail_when=lambda prompt: True))
        options = GenerationOptions(target_languages=["en", "fr"])

        with pytest.raises(AllVariationsFailedError) as exc_info:
            await controller.generate(video, options)

        error = exc_info.value
        assert error.details["attempted"] == 2
        assert {f.language for f in error.failures} == {"en", "fr"}
        assert error.cause.error_code == "PROVIDER_UNAVAILABLE"

    @pytest.mark.asyncio
    async def test_screenshot_faces_join_participants(self, video):
        images = FakeImageProvider()
        controller = build_controller(image_provider=images)
        options = GenerationOptions(video_screenshots=["https://images.example.com/frame1.jpg"])

        await controller.generate(video, options)

        assert "- Face 1: in an appropriate position, as a supporting element" in images.calls[0]["prompt"]

    @pytest.mark.asyncio
    async def test_economy_tier_cost(self, video):
        controller = build_controller()

        batch = await controller.generate(video, GenerationOptions(cost_tier="economy"))

        assert batch.results[0].quality == "low"
        assert batch.results[0].estimated_cost == 0.08

    @pytest.mark.asyncio
    async def test_languages_share_concurrency_limit(self, video):
        images = FakeImageProvider(max_delay=0.02)
        controller = build_controller(image_provider=images, max_concurrency=1)
        options = GenerationOptions(variation_count=3, target_languages=["en", "es", "fr"])

        batch = await controller.generate(video, options)

        assert len(batch.results) == 9
        assert len(images.calls) == 9
        assert images.peak == 1

    @pytest.mark.asyncio
    async def test_region_suffixed_language_is_own_language(self):
        images = FakeImageProvider()
        controller = build_controller(image_provider=images)
        video = VideoContext(title="10 Tips for Faster Cooking", language=Language(code="en"))
        options = GenerationOptions(target_languages=["en-US", "en"])

        batch = await controller.generate(video, options)

        assert len(images.calls) == 1
        assert [r.language for r in batch.results] == ["en"]
        assert batch.results[0].language_name == "English"
        assert batch.results[0].confidence == 0.8


class TestLanguageResolution:
    def test_explicit_language_wins(self):
        controller = build_controller()
        video = VideoContext(title="Hello", language=Language(code="pt-BR"))

        assert controller.resolve_video_language(video) == "pt"

    def test_detected_language(self):
        controller = build_controller()
        video = VideoContext(title="El secreto de la cocina que nadie te cuenta", description="y no es lo que piensas")

        assert controller.resolve_video_language(video) == "es"

    def test_language_factors(self):
        controller = build_controller()

        assert controller.language_factor("en", "en") == 1.0
        assert controller.language_factor("es", "en") == 0.9
        assert controller.language_factor("xx", "en") == 0.75
        assert controller.language_factor("en-US", "en") == 1.0

    def test_target_languages_normalized_and_deduplicated(self):
        controller = build_controller()
        options = GenerationOptions(target_languages=["pt-BR", "PT", "es_MX"])

        assert controller.resolve_target_languages(options, "en") == ["pt", "es"]
        assert controller.resolve_target_languages(GenerationOptions(), "ja") == ["ja"]
