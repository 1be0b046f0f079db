"""Request models for the Thumbnail Generation Service."""
from typing import List, Optional
from pydantic import BaseModel, Field

from .channel import ChannelDocument
from .generation import GenerationOptions, VideoContext

class GenerateRequest(BaseModel):
    """Request model for preview image generation."""
    video: VideoContext
    options: GenerationOptions = Field(default_factory=GenerationOptions)

class ChannelDictionaryRequest(BaseModel):
    """Request model for building a channel keyword dictionary."""
    channel_id: str
    documents: List[ChannelDocument]

class ChannelPatternRequest(BaseModel):
    """Request model for channel pattern analysis."""
    channel_id: Optional[str] = None
    thumbnails: List[str]
    titles: List[str] = Field(default_factory=list)
    force_refresh: Optional[bool] = False
