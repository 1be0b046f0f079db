"""Request validation utilities."""
import re
from urllib.parse import urlparse
from typing import List, Optional

from ..core.exceptions import ValidationError

CHANNEL_ID_PATTERN = re.compile(r"^[\w@.\-]{1,128}$")


class ImageURLValidator:
    """Validation for image references passed to providers."""

    @staticmethod
    def is_image_reference(url: Optional[str]) -> bool:
        """Accept http(s) URLs with a host and base64 image data URIs."""
        if not url or not isinstance(url, str):
            return False

        if url.startswith("data:"):
            header = url.split(",", 1)[0]
            return header.startswith("data:image/") and header.endswith(";base64") and "," in url

        try:
            parsed = urlparse(url)
        except ValueError:
            return False
        return parsed.scheme in ("http", "https") and bool(parsed.netloc)

    @staticmethod
    def validate_image_reference(url: str, field: str) -> str:
        """Return the URL or raise ValidationError naming the field."""
        if not ImageURLValidator.is_image_reference(url):
            raise ValidationError(
                f"Invalid image reference for {field}",
                {"field": field, "value": (url or "")[:100]}
            )
        return url

    @staticmethod
    def validate_image_references(urls: List[str], field: str) -> List[str]:
        """Validate every entry of a list of image references."""
        for index, url in enumerate(urls):
            ImageURLValidator.validate_image_reference(url, f"{field}[{index}]")
        return urls


class ChannelValidator:
    """Channel identifier validation."""

    @staticmethod
    def is_valid_channel_id(channel_id: Optional[str]) -> bool:
        return bool(channel_id) and bool(CHANNEL_ID_PATTERN.match(channel_id))

    @staticmethod
    def validate_channel_id(channel_id: str) -> str:
        if not ChannelValidator.is_valid_channel_id(channel_id):
            raise ValidationError("Invalid channel id", {"field": "channel_id", "value": (channel_id or "")[:128]})
        return channel_id
