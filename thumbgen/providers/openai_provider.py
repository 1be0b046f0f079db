"""OpenAI image generation and chat completion providers."""
import asyncio
from typing import Optional

import openai
from openai import OpenAI

from ..core.config import settings, ProviderConfig
from ..core.exceptions import (
    ConfigurationError, EmptyResponseError, ProviderRejectedError,
    ProviderTimeoutError, ProviderUnavailableError
)
from ..utils.logging import CorrelatedLogger
from .base import ChatCompletion, ChatCompletionProvider, ImageGenerationProvider


def create_openai_client(api_key: Optional[str] = None) -> Optional[OpenAI]:
    """Create an OpenAI client if an API key is configured."""
    api_key = api_key if api_key is not None else settings.openai_api_key
    if not api_key:
        return None

    try:
        return OpenAI(api_key=api_key)
    except Exception as e:
        raise ConfigurationError("OpenAI client", str(e))


def translate_openai_error(
    provider: str,
    operation: str,
    error: Exception,
    timeout_seconds: Optional[float] = None
) -> Exception:
    """Map an OpenAI SDK error onto the service's provider error taxonomy."""
    if isinstance(error, openai.APITimeoutError):
        return ProviderTimeoutError(f"{provider} {operation}", timeout_seconds)
    if isinstance(error, openai.APIConnectionError):
        return ProviderUnavailableError(provider, str(error))
    if isinstance(error, openai.RateLimitError):
        return ProviderUnavailableError(provider, f"rate limited: {error}")
    if isinstance(error, openai.APIStatusError):
        if error.status_code >= 500:
            return ProviderUnavailableError(provider, f"HTTP {error.status_code}: {error}")
        return ProviderRejectedError(provider, str(error), error.status_code)
    return ProviderUnavailableError(provider, str(error))


class OpenAIImageProvider(ImageGenerationProvider):
    """Image generation through the OpenAI images API."""

    name = "openai_images"

    def __init__(
        self,
        client: Optional[OpenAI],
        model: Optional[str] = None,
        size: Optional[str] = None,
        style: Optional[str] = None
    ):
        self.client = client
        self.model = model or settings.image_model
        self.size = size or settings.image_size
        self.style = style or settings.image_style
        self.logger = CorrelatedLogger(__name__)

        if self.size not in ProviderConfig.SUPPORTED_SIZES:
            raise ConfigurationError("IMAGE_SIZE", f"unsupported size {self.size}")

    async def generate_image(self, prompt: str, quality: str) -> str:
        """Generate one image and return its URL or a base64 data URI."""
        if self.client is None:
            raise ProviderUnavailableError(self.name, "OpenAI API key not configured")

        try:
            response = await asyncio.to_thread(
                self.client.images.generate,
                model=self.model,
                prompt=prompt,
                n=1,
                size=self.size,
                quality=ProviderConfig.openai_quality(quality),
                style=self.style
            )
        except openai.OpenAIError as e:
            raise translate_openai_error(self.name, "image generation", e)

        data = getattr(response, "data", None) or []
        if not data:
            raise EmptyResponseError(self.name, "image generation")

        image = data[0]
        if getattr(image, "url", None):
            return image.url
        if getattr(image, "b64_json", None):
            return f"data:image/png;base64,{image.b64_json}"

        raise EmptyResponseError(self.name, "image generation")


class OpenAIChatProvider(ChatCompletionProvider):
    """Chat completions through the OpenAI chat API."""

    name = "openai_chat"

    def __init__(self, client: Optional[OpenAI], model: Optional[str] = None):
        self.client = client
        self.model = model or settings.chat_model

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int = 100,
        temperature: float = 0.7
    ) -> ChatCompletion:
        """Run one system/user exchange."""
        if self.client is None:
            raise ProviderUnavailableError(self.name, "OpenAI API key not configured")

        try:
            response = await asyncio.to_thread(
                self.client.chat.completions.create,
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt}
                ],
                max_tokens=max_tokens,
                temperature=temperature
            )
        except openai.OpenAIError as e:
            raise translate_openai_error(self.name, "chat completion", e)

        choices = getattr(response, "choices", None) or []
        if not choices:
            raise EmptyResponseError(self.name, "chat completion")

        choice = choices[0]
        content = choice.message.content if choice.message else None
        if not content or not content.strip():
            raise EmptyResponseError(self.name, "chat completion")

        return ChatCompletion(text=content.strip(), finish_reason=choice.finish_reason)
