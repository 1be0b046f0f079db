"""Channel style and dictionary data models."""
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class ChannelDocument(BaseModel):
    """One historical video of a channel, as seen by the dictionary builder."""
    title: str = ""
    description: str = ""


class Keyword(BaseModel):
    """Weighted dictionary term."""
    word: str
    weight: float = Field(..., ge=0.0)


class ChannelDictionary(BaseModel):
    """Keyword dictionary and niche classification of a channel."""
    channel_id: str
    niche: str = "general"
    primary_category: str = "other"
    keywords: List[Keyword] = Field(default_factory=list)
    categories: Dict[str, float] = Field(default_factory=dict)
    last_updated: datetime


class TextEffect(BaseModel):
    """Visual treatment applied to caption text."""
    type: str  # shadow, outline, glow, gradient
    value: str


class TextPosition(BaseModel):
    """Where caption text sits, in percent of the frame."""
    x: float
    y: float
    alignment: str = "center"  # left, center, right


class TextStyle(BaseModel):
    """Recurring caption treatment detected across a channel's thumbnails."""
    id: str
    role: str  # title, subtitle, accent, episode, series
    size: int
    color: str
    effects: List[TextEffect] = Field(default_factory=list)
    position: TextPosition
    frequency: float = Field(..., ge=0.0, le=1.0)


class ColorPalette(BaseModel):
    """Group of thumbnails sharing a dominant colour."""
    id: str
    primary: List[str] = Field(default_factory=list)
    secondary: List[str] = Field(default_factory=list)
    accent: List[str] = Field(default_factory=list)
    frequency: float = Field(..., ge=0.0, le=1.0)


class LayoutPattern(BaseModel):
    """Recurring subject/text arrangement."""
    id: str
    type: str  # face-left, face-right, centered, split, overlay
    frequency: float = Field(..., ge=0.0, le=1.0)


class SeriesPattern(BaseModel):
    """Recurring title format, e.g. numbered episodes."""
    id: str
    name: str
    frequency: float = Field(..., ge=0.0, le=1.0)


class TemporalTrend(BaseModel):
    """Change in a channel's look between its older and newer thumbnails."""
    id: str
    description: str
    color_palettes: List[ColorPalette] = Field(default_factory=list)
    confidence: float = Field(..., ge=0.0, le=1.0)


class ChannelPattern(BaseModel):
    """Aggregated visual pattern of a channel."""
    id: str
    text_styles: List[TextStyle] = Field(default_factory=list)
    color_palettes: List[ColorPalette] = Field(default_factory=list)
    layouts: List[LayoutPattern] = Field(default_factory=list)
    series_patterns: List[SeriesPattern] = Field(default_factory=list)
    temporal_trends: List[TemporalTrend] = Field(default_factory=list)
    confidence: float = Field(..., ge=0.0, le=1.0)
    sample_size: int = 0

    model_config = {"frozen": True}


class StyleProfile(BaseModel):
    """Compact summary of a channel's visual identity used to bias prompts."""
    style_id: str
    palette: List[str] = Field(..., min_length=3, max_length=3)
    layout: str
    font_hint: str
    tone: str


class FaceDetection(BaseModel):
    """One face found by the detection provider."""
    bbox: List[float] = Field(default_factory=list)
    confidence: float = 0.0
    landmarks: Optional[List[List[float]]] = None
