"""Shared fakes for provider-facing tests."""
import asyncio
import random
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional

import pytest
from PIL import Image

from thumbgen.core.exceptions import ImageAnalysisError, ProviderUnavailableError
from thumbgen.models.channel import FaceDetection
from thumbgen.providers.base import (
    ChatCompletion, ChatCompletionProvider, FaceProvider,
    ImageGenerationProvider, ImageLoader
)


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start: Optional[datetime] = None):
        self.now = start or datetime(2024, 1, 1, 12, 0, 0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, hours: float) -> None:
        self.now += timedelta(hours=hours)


class FakeImageProvider(ImageGenerationProvider):
    """Returns one URL per prompt after a random delay; fails prompts matching ``fail_when``."""

    name = "fake_images"

    def __init__(self, fail_when: Optional[Callable[[str], bool]] = None, max_delay: float = 0.02):
        self.fail_when = fail_when or (lambda prompt: False)
        self.max_delay = max_delay
        self.calls: List[Dict[str, str]] = []
        self.active = 0
        self.peak = 0

    async def generate_image(self, prompt: str, quality: str) -> str:
        call_number = len(self.calls) + 1
        url = f"https://images.example.com/{call_number}.png"
        self.calls.append({"prompt": prompt, "quality": quality, "url": url})
        self.active += 1
        self.peak = max(self.peak, self.active)
        try:
            await asyncio.sleep(random.uniform(0, self.max_delay))
            if self.fail_when(prompt):
                raise ProviderUnavailableError(self.name, "simulated outage")
            return url
        finally:
            self.active -= 1


class FakeChatProvider(ChatCompletionProvider):
    """Answers every exchange with a fixed completion, or raises ``error``."""

    name = "fake_chat"

    def __init__(
        self,
        text: str = "A streamer leaps out of a neon-lit gaming chair, controller raised in triumph",
        finish_reason: Optional[str] = "stop",
        error: Optional[Exception] = None
    ):
        self.text = text
        self.finish_reason = finish_reason
        self.error = error
        self.calls: List[Dict[str, str]] = []

    async def complete(self, system_prompt, user_prompt, max_tokens=100, temperature=0.7) -> ChatCompletion:
        self.calls.append({"system": system_prompt, "user": user_prompt})
        if self.error is not None:
            raise self.error
        return ChatCompletion(text=self.text, finish_reason=self.finish_reason)


class FakeFaceProvider(FaceProvider):
    """Scripted face detection and swap."""

    name = "fake_faces"

    def __init__(
        self,
        faces: Optional[List[FaceDetection]] = None,
        swap_result: str = "https://images.example.com/swapped.png",
        detect_error: Optional[Exception] = None,
        swap_error: Optional[Exception] = None,
        detect_delay: float = 0.0,
        swap_delay: float = 0.0,
        configured: bool = True
    ):
        self.faces = faces if faces is not None else [FaceDetection(bbox=[0, 0, 10, 10], confidence=0.9)]
        self.swap_result = swap_result
        self.detect_error = detect_error
        self.swap_error = swap_error
        self.detect_delay = detect_delay
        self.swap_delay = swap_delay
        self.configured = configured
        self.detect_calls: List[str] = []
        self.swap_calls: List[Dict] = []

    @property
    def is_configured(self) -> bool:
        return self.configured

    async def detect_faces(self, image_url, confidence_threshold=0.5):
        self.detect_calls.append(image_url)
        if self.detect_delay:
            await asyncio.sleep(self.detect_delay)
        if self.detect_error is not None:
            raise self.detect_error
        return list(self.faces)

    async def swap_face(self, source_image, target_image, face_index=0):
        self.swap_calls.append({"source": source_image, "target": target_image, "face_index": face_index})
        if self.swap_delay:
            await asyncio.sleep(self.swap_delay)
        if self.swap_error is not None:
            raise self.swap_error
        return self.swap_result


class FakeImageLoader(ImageLoader):
    """Serves in-memory Pillow images by URL; unknown URLs fail to load."""

    def __init__(self, images: Optional[Dict[str, Image.Image]] = None, max_delay: float = 0.01):
        self.images = images or {}
        self.max_delay = max_delay
        self.loads: List[str] = []

    async def load(self, url: str) -> Image.Image:
        self.loads.append(url)
        await asyncio.sleep(random.uniform(0, self.max_delay))
        if url not in self.images:
            raise ImageAnalysisError(url, "Download failed: 404")
        return self.images[url].copy()


def solid_image(color, size=(320, 180)) -> Image.Image:
    return Image.new("RGB", size, color)


def split_image(left, right, size=(320, 180)) -> Image.Image:
    image = Image.new("RGB", size, left)
    image.paste(Image.new("RGB", (size[0] // 2, size[1]), right), (size[0] // 2, 0))
    return image


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def image_provider():
    return FakeImageProvider()


@pytest.fixture
def chat_provider():
    return FakeChatProvider()


@pytest.fixture
def face_provider():
    return FakeFaceProvider()
