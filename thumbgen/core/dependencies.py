"""Dependency injection setup for FastAPI."""
from functools import lru_cache
from typing import Optional

from fastapi import Security
from fastapi.security import APIKeyHeader
from openai import OpenAI

from .config import settings
from .exceptions import APIKeyInvalidError
from ..config.localization import get_localization_manager
from ..providers import (
    HTTPImageLoader, OpenAIChatProvider, OpenAIImageProvider,
    ReplicateFaceProvider, create_openai_client
)
from ..services import (
    ChannelDictionaryBuilder, ChannelPatternAnalyzer, FaceSwapProcessor,
    GenerationExecutor, GenerationPipeline, MultiLanguageController,
    PromptComposer, SceneReasoner, StyleProfiler, StyleSelector, TTLCache
)
from ..utils.logging import CorrelatedLogger

# Security dependency
api_key_header = APIKeyHeader(name="x-api-key", auto_error=False)

# Provider clients
@lru_cache()
def get_openai_client() -> Optional[OpenAI]:
    """Get the shared OpenAI client, or None without an API key."""
    return create_openai_client()

@lru_cache()
def get_image_provider() -> OpenAIImageProvider:
    """Get image generation provider."""
    return OpenAIImageProvider(get_openai_client())

@lru_cache()
def get_chat_provider() -> OpenAIChatProvider:
    """Get chat completion provider."""
    return OpenAIChatProvider(get_openai_client())

@lru_cache()
def get_face_provider() -> ReplicateFaceProvider:
    """Get face detection / swap provider."""
    return ReplicateFaceProvider()

@lru_cache()
def get_image_loader() -> HTTPImageLoader:
    """Get reference image loader."""
    return HTTPImageLoader()

# Service instances cache
@lru_cache()
def get_pattern_cache() -> TTLCache:
    """Get the process-wide channel pattern cache."""
    return TTLCache(settings.pattern_cache_ttl_hours)

@lru_cache()
def get_style_selector() -> StyleSelector:
    """Get StyleSelector instance."""
    return StyleSelector()

@lru_cache()
def get_face_swap_processor() -> FaceSwapProcessor:
    """Get FaceSwapProcessor instance."""
    return FaceSwapProcessor(get_face_provider())

@lru_cache()
def get_generation_controller() -> MultiLanguageController:
    """Get MultiLanguageController wired to the configured providers."""
    localization = get_localization_manager()
    pipeline = GenerationPipeline(
        style_selector=get_style_selector(),
        prompt_composer=PromptComposer(SceneReasoner(get_chat_provider()), localization),
        executor=GenerationExecutor(get_image_provider()),
        face_swap=get_face_swap_processor(),
        localization=localization
    )
    return MultiLanguageController(pipeline, get_face_swap_processor(), localization)

@lru_cache()
def get_dictionary_builder() -> ChannelDictionaryBuilder:
    """Get ChannelDictionaryBuilder instance."""
    return ChannelDictionaryBuilder()

@lru_cache()
def get_pattern_analyzer() -> ChannelPatternAnalyzer:
    """Get ChannelPatternAnalyzer instance."""
    return ChannelPatternAnalyzer(get_image_loader(), get_pattern_cache())

@lru_cache()
def get_style_profiler() -> StyleProfiler:
    """Get StyleProfiler instance."""
    return StyleProfiler()

@lru_cache()
def get_logger() -> CorrelatedLogger:
    """Get logger instance."""
    return CorrelatedLogger(__name__)

# Authentication dependency
async def verify_api_key(api_key: Optional[str] = Security(api_key_header)) -> str:
    """Verify API key from request header."""
    if not api_key or api_key != settings.api_key:
        raise APIKeyInvalidError()
    return api_key
