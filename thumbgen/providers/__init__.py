"""External inference providers."""

from .base import (
    ChatCompletion, ChatCompletionProvider, FaceProvider,
    ImageGenerationProvider, ImageLoader
)
from .image_loader import HTTPImageLoader
from .openai_provider import OpenAIChatProvider, OpenAIImageProvider, create_openai_client
from .replicate_provider import ReplicateFaceProvider

__all__ = [
    'ChatCompletion', 'ChatCompletionProvider', 'FaceProvider',
    'ImageGenerationProvider', 'ImageLoader', 'HTTPImageLoader',
    'OpenAIChatProvider', 'OpenAIImageProvider', 'create_openai_client',
    'ReplicateFaceProvider'
]
