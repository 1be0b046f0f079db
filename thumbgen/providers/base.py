"""Provider interfaces the generation pipeline depends on."""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

from PIL import Image

from ..models.channel import FaceDetection


@dataclass
class ChatCompletion:
    """Text answer of a chat/completion provider."""
    text: str
    finish_reason: Optional[str] = None

    @property
    def truncated(self) -> bool:
        return self.finish_reason == "length"


class ImageGenerationProvider(ABC):
    """Turns a prompt into an image reference (URL or data URI)."""

    name = "image_generation"

    @abstractmethod
    async def generate_image(self, prompt: str, quality: str) -> str:
        """Generate one image at a provider-neutral quality level (low/high)."""


class ChatCompletionProvider(ABC):
    """Free-text completion used for scene reasoning."""

    name = "chat_completion"

    @abstractmethod
    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int = 100,
        temperature: float = 0.7
    ) -> ChatCompletion:
        """Return the model's answer to one system/user exchange."""


class FaceProvider(ABC):
    """Face detection and face swap."""

    name = "face_swap"

    @property
    def is_configured(self) -> bool:
        return True

    @abstractmethod
    async def detect_faces(self, image_url: str, confidence_threshold: float = 0.5) -> List[FaceDetection]:
        """Detect faces in an image."""

    @abstractmethod
    async def swap_face(self, source_image: str, target_image: str, face_index: int = 0) -> str:
        """Swap a face of the source image into the target image."""


class ImageLoader(ABC):
    """Fetches and decodes reference images."""

    @abstractmethod
    async def load(self, url: str) -> Image.Image:
        """Load an image from a URL or data URI."""
