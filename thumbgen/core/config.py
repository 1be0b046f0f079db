"""
Configuration management for the Thumbnail Generation Service.
Centralizes environment variable handling and application settings.
"""
import os
from typing import Dict, List
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        # API Configuration
        self.api_title = "Thumbnail Generation Service"
        self.api_description = "Generates video preview images from a short brief using image, chat and face-swap providers"
        self.api_version = "1.0.0"
        self.debug_mode = os.getenv("DEBUG_MODE", "false").lower() == "true"

        # Security
        self.api_key = os.getenv("API_KEY", "your-default-api-key-here")
        self.allowed_origins = ["*"]

        # Provider credentials
        self.openai_api_key = os.getenv("OPENAI_API_KEY", "")
        self.replicate_api_token = os.getenv("REPLICATE_API_TOKEN", "")
        self.replicate_base_url = os.getenv("REPLICATE_BASE_URL", "https://api.replicate.com/v1")

        # Image generation
        self.image_model = os.getenv("IMAGE_MODEL", "dall-e-3")
        self.image_size = os.getenv("IMAGE_SIZE", "1792x1024")
        self.image_style = os.getenv("IMAGE_STYLE", "vivid")
        self.max_concurrent_generations = int(os.getenv("MAX_CONCURRENT_GENERATIONS", "3"))

        # Scene reasoning
        self.chat_model = os.getenv("CHAT_MODEL", "gpt-4")
        self.scene_max_tokens = int(os.getenv("SCENE_MAX_TOKENS", "100"))
        self.scene_temperature = float(os.getenv("SCENE_TEMPERATURE", "0.7"))
        self.scene_max_words = int(os.getenv("SCENE_MAX_WORDS", "50"))

        # Face detection / swap
        self.face_detection_model_version = os.getenv(
            "FACE_DETECTION_MODEL_VERSION", "a4a8ba50b4a4a7dd1e0f8b0a3b3b3b3b"
        )
        self.face_swap_model = os.getenv("FACE_SWAP_MODEL", "fofr/face-to-many")
        self.face_confidence_threshold = float(os.getenv("FACE_CONFIDENCE_THRESHOLD", "0.5"))
        self.face_nms_threshold = float(os.getenv("FACE_NMS_THRESHOLD", "0.4"))
        self.face_detection_timeout = float(os.getenv("FACE_DETECTION_TIMEOUT", "60"))  # seconds
        self.face_swap_timeout = float(os.getenv("FACE_SWAP_TIMEOUT", "120"))  # seconds
        self.replicate_poll_interval = float(os.getenv("REPLICATE_POLL_INTERVAL", "2"))

        # Channel analysis
        self.pattern_cache_ttl_hours = int(os.getenv("PATTERN_CACHE_TTL_HOURS", "24"))
        self.min_pattern_samples = int(os.getenv("MIN_PATTERN_SAMPLES", "3"))
        self.image_load_timeout = int(os.getenv("IMAGE_LOAD_TIMEOUT", "30"))  # seconds
        self.max_image_bytes = int(os.getenv("MAX_IMAGE_BYTES", str(10 * 1024 * 1024)))
        self.max_keywords = int(os.getenv("MAX_KEYWORDS", "100"))

        # Logging
        self.log_level = os.getenv("LOG_LEVEL", "INFO")
        self.log_format = os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")

class ProviderConfig:
    """Provider-side quality and cost tables."""

    # cost tier -> provider-neutral quality level
    QUALITY_BY_TIER: Dict[str, str] = {
        "economy": "low",
        "standard": "high",
        "premium": "high",
    }

    # provider-neutral quality level -> OpenAI images quality flag
    OPENAI_QUALITY: Dict[str, str] = {
        "low": "standard",
        "high": "hd",
    }

    # USD per 1792x1024 image, by OpenAI quality flag
    IMAGE_COST: Dict[str, float] = {
        "standard": 0.08,
        "hd": 0.12,
    }

    SUPPORTED_SIZES: List[str] = ["1024x1024", "1792x1024", "1024x1792"]

    @classmethod
    def quality_for_tier(cls, cost_tier: str) -> str:
        """Map a cost tier to a quality level, defaulting to high."""
        return cls.QUALITY_BY_TIER.get(cost_tier, "high")

    @classmethod
    def openai_quality(cls, quality: str) -> str:
        """Map a quality level to the OpenAI images quality flag."""
        return cls.OPENAI_QUALITY.get(quality, "hd")

    @classmethod
    def estimated_cost(cls, quality: str) -> float:
        """Estimated USD cost of one image at the given quality level."""
        return cls.IMAGE_COST.get(cls.openai_quality(quality), 0.0)

# Create global settings instance
settings = Settings()
