"""
Prompt Template Engine for chat prompt generation.
Handles template loading, rendering, and validation.
"""
import yaml
from typing import Dict, Any, Optional, List
from pathlib import Path
from jinja2 import Environment, TemplateError
from dataclasses import dataclass

from ...core.exceptions import ConfigurationError
from ...utils.logging import CorrelatedLogger

DEFAULT_PROMPT_LANGUAGE = "en"


@dataclass
class PromptConfig:
    """Configuration for a system/user prompt pair."""
    system_template: str
    user_template: str
    max_words: int


@dataclass
class RenderedPrompt:
    """A rendered system/user prompt pair."""
    system: str
    user: str


class PromptTemplateEngine:
    """
    Template engine for managing and rendering chat prompts.

    Prompts live in ``prompts/<prompt_type>/<language>.yaml`` with a
    ``system`` and a ``user`` Jinja2 template. A language without its own
    file falls back to English.
    """

    def __init__(self, config_dir: Optional[str] = None):
        """
        Initialize the template engine.

        Args:
            config_dir: Path to configuration directory. Defaults to thumbgen/config/
        """
        self.logger = CorrelatedLogger(__name__)

        if config_dir is None:
            config_dir = Path(__file__).parent.parent

        self.config_dir = Path(config_dir)
        self.prompts_dir = self.config_dir / "prompts"

        self.jinja_env = Environment(
            trim_blocks=True,
            lstrip_blocks=True,
            autoescape=False,
            keep_trailing_newline=False
        )

        self._config_cache: Dict[str, PromptConfig] = {}

        self.logger.info(f"PromptTemplateEngine initialized with config_dir: {config_dir}")

    def load_prompt_config(self, prompt_type: str, language: str = DEFAULT_PROMPT_LANGUAGE) -> PromptConfig:
        """
        Load prompt configuration for a prompt type and language.

        Args:
            prompt_type: Type of prompt (e.g., 'scene_reasoning')
            language: Language code (e.g., 'en', 'es')

        Returns:
            PromptConfig object with loaded configuration

        Raises:
            ConfigurationError: If no configuration exists for the type
        """
        if language not in self._get_available_languages(prompt_type):
            language = DEFAULT_PROMPT_LANGUAGE

        cache_key = f"{prompt_type}_{language}"
        if cache_key in self._config_cache:
            return self._config_cache[cache_key]

        config_path = self.prompts_dir / prompt_type / f"{language}.yaml"
        if not config_path.exists():
            raise ConfigurationError(
                f"prompts/{prompt_type}/{language}.yaml",
                f"Available languages for {prompt_type}: {self._get_available_languages(prompt_type)}"
            )

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config_data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"prompts/{prompt_type}/{language}.yaml", str(e))

        config = self._build_prompt_config(config_data)
        self._config_cache[cache_key] = config

        self.logger.info(f"Loaded prompt configuration: {prompt_type}/{language}")
        return config

    def render(
        self,
        prompt_type: str,
        language: str = DEFAULT_PROMPT_LANGUAGE,
        **template_vars
    ) -> RenderedPrompt:
        """
        Render the system and user prompts with template variables.

        Args:
            prompt_type: Type of prompt (e.g., 'scene_reasoning')
            language: Language code
            **template_vars: Variables to pass to the templates

        Returns:
            RenderedPrompt with both messages
        """
        config = self.load_prompt_config(prompt_type, language)
        template_vars.setdefault("max_words", config.max_words)

        try:
            system = self.jinja_env.from_string(config.system_template).render(**template_vars)
            user = self.jinja_env.from_string(config.user_template).render(**template_vars)
        except TemplateError as e:
            self.logger.error(f"Failed to render prompt: {prompt_type}/{language} - {str(e)}")
            raise ConfigurationError(f"Prompt rendering failed: {prompt_type}/{language}", str(e))

        rendered = RenderedPrompt(system=_squeeze_blank_lines(system), user=_squeeze_blank_lines(user))
        self.logger.debug(
            f"Rendered prompt for {prompt_type}/{language} "
            f"({len(rendered.system) + len(rendered.user)} chars)"
        )
        return rendered

    def get_available_languages(self, prompt_type: str) -> List[str]:
        """Get list of available languages for a prompt type."""
        return self._get_available_languages(prompt_type)

    def get_available_prompt_types(self) -> List[str]:
        """Get list of available prompt types."""
        if not self.prompts_dir.exists():
            return []

        return sorted(
            item.name for item in self.prompts_dir.iterdir()
            if item.is_dir() and not item.name.startswith('.')
        )

    def validate_configuration(self, prompt_type: str, language: str) -> bool:
        """
        Validate that a configuration is properly formatted.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        config = self.load_prompt_config(prompt_type, language)

        if not config.system_template.strip():
            raise ConfigurationError(f"{prompt_type}/{language}", "system template cannot be empty")
        if not config.user_template.strip():
            raise ConfigurationError(f"{prompt_type}/{language}", "user template cannot be empty")
        if config.max_words <= 0:
            raise ConfigurationError(f"{prompt_type}/{language}", "max_words must be positive")

        try:
            self.jinja_env.parse(config.system_template)
            self.jinja_env.parse(config.user_template)
        except TemplateError as e:
            raise ConfigurationError(f"{prompt_type}/{language}", str(e))

        self.logger.info(f"Configuration validation passed: {prompt_type}/{language}")
        return True

    def _build_prompt_config(self, config_data: Dict[str, Any]) -> PromptConfig:
        """Build PromptConfig object from raw configuration data."""
        return PromptConfig(
            system_template=config_data.get('system', ''),
            user_template=config_data.get('user', ''),
            max_words=int(config_data.get('max_words', 50))
        )

    def _get_available_languages(self, prompt_type: str) -> List[str]:
        """Get available language codes for a prompt type."""
        prompt_dir = self.prompts_dir / prompt_type

        if not prompt_dir.exists():
            return []

        return sorted(
            item.stem for item in prompt_dir.iterdir()
            if item.is_file() and item.suffix == '.yaml'
        )


def _squeeze_blank_lines(text: str) -> str:
    """Collapse runs of blank lines left by empty template blocks."""
    lines = []
    for line in text.strip().splitlines():
        if not line.strip() and lines and not lines[-1].strip():
            continue
        lines.append(line.rstrip())
    return "\n".join(lines)


# Global template engine instance
_template_engine = None

def get_template_engine() -> PromptTemplateEngine:
    """Get global template engine instance (singleton pattern)."""
    global _template_engine
    if _template_engine is None:
        _template_engine = PromptTemplateEngine()
    return _template_engine
