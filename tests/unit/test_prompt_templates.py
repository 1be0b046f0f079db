"""Unit tests for the prompt template engine."""
import pytest

from thumbgen.config.templates import PromptTemplateEngine
from thumbgen.core.exceptions import ConfigurationError


class TestPromptTemplateEngine:
    """Test PromptTemplateEngine."""

    @pytest.fixture
    def engine(self):
        return PromptTemplateEngine()

    def test_available_prompt_types(self, engine):
        assert "scene_reasoning" in engine.get_available_prompt_types()
        assert "en" in engine.get_available_languages("scene_reasoning")

    def test_validate_configuration(self, engine):
        assert engine.validate_configuration("scene_reasoning", "en") is True

    def test_missing_language_falls_back_to_english(self, engine):
        assert engine.load_prompt_config("scene_reasoning", "xx") is engine.load_prompt_config("scene_reasoning", "en")

    def test_unknown_prompt_type(self, engine):
        with pytest.raises(ConfigurationError):
            engine.load_prompt_config("does_not_exist", "en")

    def test_render_optional_blocks(self, engine):
        minimal = engine.render(
            "scene_reasoning",
            context_summary="Boss fight",
            style_directive="Be bold",
            emphasis="energy",
            style_weight=80
        )

        assert 'Context: "Boss fight"' in minimal.user
        assert "style weight: 80%" in minimal.system
        assert "Cultural Context" not in minimal.user
        assert "Channel Branding Context" not in minimal.user
        assert "(50 words max)" in minimal.user
        assert "\n\n\n" not in minimal.user

        full = engine.render(
            "scene_reasoning",
            context_summary="Boss fight",
            style_directive="Be bold",
            emphasis="energy",
            style_weight=80,
            cultural_context="Use calligraphy",
            branding_hint="Layout: centered",
            creator_type="gaming",
            creator_guidelines="Use neon.",
            max_words=30
        )

        assert "Cultural Context: Use calligraphy" in full.user
        assert "Channel Branding Context: Layout: centered" in full.user
        assert "This is for a gaming channel. Use neon." in full.system
        assert "(30 words max)" in full.user

    def test_custom_config_dir(self, tmp_path):
        prompt_dir = tmp_path / "prompts" / "greeting"
        prompt_dir.mkdir(parents=True)
        (prompt_dir / "en.yaml").write_text(
            "max_words: 5\nsystem: 'Hi {{ name }}'\nuser: 'Bye {{ name }}'\n", encoding="utf-8"
        )
        engine = PromptTemplateEngine(str(tmp_path))

        rendered = engine.render("greeting", name="Sam")

        assert rendered.system == "Hi Sam"
        assert rendered.user == "Bye Sam"
