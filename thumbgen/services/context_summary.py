"""Contextual summary text fed to scene reasoning."""
from typing import Optional

from ..models.channel import ChannelDictionary
from ..models.generation import VideoContext

MAX_DESCRIPTION_CHARS = 300
TOP_KEYWORDS = 5
TOP_CATEGORIES = 3


def build_context_summary(video: VideoContext, dictionary: Optional[ChannelDictionary] = None) -> str:
    """
    Summarize a video brief in one paragraph.

    The summary doubles as the scene description when scene reasoning
    fails, so it is deterministic and never empty.
    """
    parts = [video.title.strip() or "Untitled video"]

    description = " ".join(video.description.split())
    if description:
        if len(description) > MAX_DESCRIPTION_CHARS:
            description = description[:MAX_DESCRIPTION_CHARS].rsplit(" ", 1)[0]
        parts.append(description)

    if video.tags:
        parts.append("Tags: " + ", ".join(tag for tag in video.tags[:TOP_KEYWORDS] if tag))

    if dictionary is not None:
        keywords = [k.word for k in dictionary.keywords[:TOP_KEYWORDS]]
        if keywords:
            parts.append("Channel keywords: " + ", ".join(keywords))
        if dictionary.niche and dictionary.niche != "general":
            parts.append(f"Channel niche: {dictionary.niche}")
        categories = sorted(
            (item for item in dictionary.categories.items() if item[1] > 0),
            key=lambda item: (-item[1], item[0])
        )[:TOP_CATEGORIES]
        if categories:
            parts.append("Content categories: " + ", ".join(name for name, _ in categories))

    return ". ".join(part.rstrip(".") for part in parts if part) + "."
