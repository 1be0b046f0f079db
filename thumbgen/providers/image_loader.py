"""Reference image loading for channel pattern analysis."""
import asyncio
import base64
import binascii
from io import BytesIO
from typing import Optional

import requests
from PIL import Image, UnidentifiedImageError

from ..core.config import settings
from ..core.exceptions import ImageAnalysisError
from .base import ImageLoader


class HTTPImageLoader(ImageLoader):
    """Loads images from HTTP(S) URLs or base64 data URIs, up to a size limit."""

    CHUNK_SIZE = 64 * 1024

    def __init__(self, timeout: Optional[int] = None, max_bytes: Optional[int] = None):
        self.timeout = timeout or settings.image_load_timeout
        self.max_bytes = max_bytes or settings.max_image_bytes

    async def load(self, url: str) -> Image.Image:
        if url.startswith("data:"):
            content = self._decode_data_uri(url)
        elif url.startswith(("http://", "https://")):
            content = await asyncio.to_thread(self._download, url)
        else:
            raise ImageAnalysisError(url, "Unsupported image URL scheme")

        try:
            image = Image.open(BytesIO(content))
            image.load()
        except (UnidentifiedImageError, OSError) as e:
            raise ImageAnalysisError(url, f"Image could not be decoded: {e}")

        return image.convert("RGB")

    def _download(self, url: str) -> bytes:
        """Stream the body, giving up as soon as it passes ``max_bytes``."""
        try:
            with requests.get(url, timeout=self.timeout, stream=True) as response:
                response.raise_for_status()

                declared = response.headers.get("Content-Length", "")
                if declared.isdigit() and int(declared) > self.max_bytes:
                    raise ImageAnalysisError(url, f"Image larger than {self.max_bytes} bytes")

                content = bytearray()
                for chunk in response.iter_content(chunk_size=self.CHUNK_SIZE):
                    content.extend(chunk)
                    if len(content) > self.max_bytes:
                        raise ImageAnalysisError(url, f"Image larger than {self.max_bytes} bytes")
        except requests.RequestException as e:
            raise ImageAnalysisError(url, f"Download failed: {e}")

        if not content:
            raise ImageAnalysisError(url, "Empty image body")
        return bytes(content)

    def _decode_data_uri(self, url: str) -> bytes:
        header, _, data = url.partition(",")
        if ";base64" not in header or not data:
            raise ImageAnalysisError(url[:64], "Only base64 data URIs are supported")
        # base64 expands by 4/3
        if len(data) * 3 // 4 > self.max_bytes:
            raise ImageAnalysisError(url[:64], f"Image larger than {self.max_bytes} bytes")
        try:
            return base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ImageAnalysisError(url[:64], f"Invalid base64 payload: {e}")
