"""
Localization support for thumbnail generation.
Holds the supported-language table, cultural context hints and a
common-word language detector for briefs that arrive without a language.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional
import re

from ..utils.logging import CorrelatedLogger


@dataclass(frozen=True)
class LanguageConfig:
    """Language-specific generation settings."""
    code: str
    name: str
    direction: str = "ltr"
    cultural_context: str = ""
    common_words: List[str] = field(default_factory=list)


SUPPORTED_LANGUAGES: Dict[str, LanguageConfig] = {
    "en": LanguageConfig(
        code="en", name="English",
        common_words=["the", "and", "to", "of", "a", "in", "is", "it", "you", "that"],
    ),
    "es": LanguageConfig(
        code="es", name="Spanish",
        common_words=["el", "la", "de", "que", "y", "en", "un", "es", "se", "no"],
    ),
    "fr": LanguageConfig(
        code="fr", name="French",
        common_words=["le", "la", "et", "de", "des", "les", "du", "est", "un", "à"],
    ),
    "de": LanguageConfig(
        code="de", name="German",
        common_words=["der", "die", "und", "in", "den", "von", "zu", "das", "mit", "sich"],
    ),
    "it": LanguageConfig(
        code="it", name="Italian",
        common_words=["il", "la", "di", "che", "e", "in", "un", "per", "con", "non"],
    ),
    "pt": LanguageConfig(
        code="pt", name="Portuguese",
        common_words=["o", "a", "de", "e", "do", "da", "em", "um", "para", "é"],
    ),
    "ru": LanguageConfig(
        code="ru", name="Russian",
        cultural_context=(
            "Incorporate Slavic visual elements and aesthetics. Use rich, deep colors "
            "and traditional Russian artistic motifs where appropriate."
        ),
        common_words=["в", "и", "не", "на", "я", "быть", "тот", "а", "весь", "он"],
    ),
    "ar": LanguageConfig(
        code="ar", name="Arabic", direction="rtl",
        cultural_context=(
            "Incorporate Arabic calligraphic influences and geometric patterns. "
            "Use traditional Middle Eastern color palettes."
        ),
        common_words=["في", "من", "على", "إلى", "أن", "هذا", "هذه", "كان", "التي"],
    ),
    "zh": LanguageConfig(
        code="zh", name="Chinese",
        cultural_context=(
            "Include Chinese artistic elements: balance of space, traditional motifs, "
            "and cultural symbols where appropriate."
        ),
        common_words=["的", "一", "是", "在", "不", "了", "有", "和", "人", "这"],
    ),
    "ja": LanguageConfig(
        code="ja", name="Japanese",
        cultural_context=(
            "Include Japanese design principles: minimalism, asymmetry, and natural "
            "elements. Consider manga/anime influence if relevant."
        ),
        common_words=["の", "に", "は", "を", "た", "が", "で", "て", "と", "し"],
    ),
    "ko": LanguageConfig(
        code="ko", name="Korean",
        cultural_context=(
            "Reflect Korean aesthetic sensibilities: modern minimalism with traditional "
            "elements. Consider K-pop/K-drama visual style if relevant."
        ),
        common_words=["의", "가", "이", "은", "들", "는", "와", "도", "를", "으로"],
    ),
    "hi": LanguageConfig(
        code="hi", name="Hindi",
        cultural_context=(
            "Use vibrant Indian color palettes and cultural motifs. "
            "Incorporate Bollywood visual style if relevant."
        ),
        common_words=["के", "में", "की", "और", "को", "है", "से", "का", "एक", "पर"],
    ),
    "he": LanguageConfig(code="he", name="Hebrew", direction="rtl"),
    "fa": LanguageConfig(code="fa", name="Persian", direction="rtl"),
    "ur": LanguageConfig(code="ur", name="Urdu", direction="rtl"),
}

DEFAULT_LANGUAGE = "en"

# Scripts without word separators are matched per character
_UNSEGMENTED = {"zh", "ja"}


class LanguageDetector:
    """
    Language detection from video title and description.

    Scores each supported language by how many of its most common words
    appear in the text and returns the best match above a small threshold.
    """

    def __init__(self, min_matches: int = 2):
        self.logger = CorrelatedLogger(__name__)
        self.min_matches = min_matches

    def detect_language(self, text: Optional[str]) -> Optional[str]:
        """Return the best matching language code, or None when undecided."""
        if not text or not text.strip():
            return None

        text_lower = text.lower()
        tokens = re.findall(r"\w+", text_lower)
        token_counts: Dict[str, int] = {}
        for token in tokens:
            token_counts[token] = token_counts.get(token, 0) + 1

        scores: Dict[str, int] = {}
        for code, config in SUPPORTED_LANGUAGES.items():
            if code in _UNSEGMENTED:
                score = sum(text_lower.count(word) for word in config.common_words)
            else:
                score = sum(token_counts.get(word, 0) for word in config.common_words)
            scores[code] = score

        best_code = max(scores, key=lambda c: (scores[c], c == DEFAULT_LANGUAGE))
        if scores[best_code] >= self.min_matches:
            self.logger.debug(f"Detected language {best_code} (score {scores[best_code]})")
            return best_code

        return None


class LocalizationManager:
    """
    Resolves language codes to their generation settings.

    Unknown codes fall back to English settings while keeping the
    requested code, so results stay tagged with what the caller asked for.
    """

    def __init__(self):
        self.logger = CorrelatedLogger(__name__)
        self.detector = LanguageDetector()

    def normalize_code(self, language_code: Optional[str]) -> str:
        """Lower-case and strip region suffixes ("pt-BR" -> "pt")."""
        if not language_code:
            return DEFAULT_LANGUAGE
        return language_code.strip().lower().replace("_", "-").split("-")[0] or DEFAULT_LANGUAGE

    def is_supported(self, language_code: str) -> bool:
        """Check whether a language code has its own settings."""
        return self.normalize_code(language_code) in SUPPORTED_LANGUAGES

    def get_language_config(self, language_code: str) -> LanguageConfig:
        """Get settings for a language, falling back to English."""
        code = self.normalize_code(language_code)
        config = SUPPORTED_LANGUAGES.get(code)
        if config is None:
            self.logger.debug(f"No settings for language '{code}', using {DEFAULT_LANGUAGE}")
            return SUPPORTED_LANGUAGES[DEFAULT_LANGUAGE]
        return config

    def get_cultural_context(self, language_code: str) -> str:
        """Cultural styling hint for a language; empty when none applies."""
        code = self.normalize_code(language_code)
        config = SUPPORTED_LANGUAGES.get(code)
        return config.cultural_context if config else ""

    def get_language_name(self, language_code: str) -> str:
        code = self.normalize_code(language_code)
        config = SUPPORTED_LANGUAGES.get(code)
        return config.name if config else code

    def get_direction(self, language_code: str) -> str:
        return self.get_language_config(language_code).direction

    def determine_language(self, title: Optional[str], description: Optional[str]) -> str:
        """Detect a language code from video text, defaulting to English."""
        text = " ".join(part for part in (title, description) if part)
        detected = self.detector.detect_language(text)
        if detected:
            self.logger.info(f"Detected language from content: {detected}")
            return detected

        self.logger.info(f"No language detected, using default: {DEFAULT_LANGUAGE}")
        return DEFAULT_LANGUAGE


# Global localization manager instance
_localization_manager = None

def get_localization_manager() -> LocalizationManager:
    """Get global localization manager instance (singleton pattern)."""
    global _localization_manager
    if _localization_manager is None:
        _localization_manager = LocalizationManager()
    return _localization_manager
