"""Generation-related data models."""
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .channel import StyleProfile


class CreativeDirection(str, Enum):
    """Named creative treatments a caller can ask for explicitly."""
    ORIGINAL = "original"
    DYNAMIC = "dynamic"
    ARTISTIC = "artistic"
    GAMING = "gaming"
    TUTORIAL = "tutorial"
    VLOG = "vlog"
    BUSINESS = "business"
    ENTERTAINMENT = "entertainment"


class CostTier(str, Enum):
    """Coarse quality/cost dial."""
    ECONOMY = "economy"
    STANDARD = "standard"
    PREMIUM = "premium"


class CreatorType(str, Enum):
    """Kind of channel the preview image is made for."""
    GAMING = "gaming"
    TUTORIAL = "tutorial"
    VLOG = "vlog"
    ENTERTAINMENT = "entertainment"
    EDUCATION = "education"
    REVIEW = "review"
    BUSINESS = "business"
    MUSIC = "music"
    NEWS = "news"
    OTHER = "other"


class Language(BaseModel):
    """Detected language of a video."""
    code: str = "en"
    name: Optional[str] = None
    direction: str = "ltr"

    model_config = {"frozen": True}

    @field_validator("direction")
    @classmethod
    def validate_direction(cls, v):
        return "rtl" if str(v).lower() == "rtl" else "ltr"


class VideoContext(BaseModel):
    """Immutable brief describing the video a preview image is made for."""
    title: str
    description: str = ""
    language: Optional[Language] = None
    tags: List[str] = Field(default_factory=list)
    channel_id: Optional[str] = None
    reference_image_url: Optional[str] = None

    model_config = {"frozen": True}


class Participant(BaseModel):
    """A person to place in the generated scene."""
    name: Optional[str] = None
    position: Optional[str] = None  # left, center, right
    emphasis: Optional[str] = None  # primary, secondary, background

    @field_validator("position")
    @classmethod
    def validate_position(cls, v):
        if v is None:
            return None
        v = str(v).lower()
        return v if v in ("left", "center", "right") else None

    @field_validator("emphasis")
    @classmethod
    def validate_emphasis(cls, v):
        if v is None:
            return None
        v = str(v).lower()
        return v if v in ("primary", "secondary", "background") else None


def _clamp(value: Any, low: int, high: int, default: int) -> int:
    """Clamp a loosely typed number into [low, high]."""
    try:
        number = int(round(float(value)))
    except (TypeError, ValueError):
        return default
    return max(low, min(high, number))


class GenerationOptions(BaseModel):
    """
    Validated generation options.

    Numbers outside their range are clamped and unknown enum values are
    replaced with defaults so a sloppy request still produces images.
    """
    clickbait_intensity: int = 5
    variation_count: int = 1
    creative_direction: Optional[CreativeDirection] = None
    cost_tier: CostTier = CostTier.STANDARD
    style_consistency: int = 100
    target_languages: List[str] = Field(default_factory=list)
    face_swap_enabled: bool = False
    creator_type: Optional[CreatorType] = None
    participants: List[Participant] = Field(default_factory=list)
    video_screenshots: List[str] = Field(default_factory=list)
    style_profile: Optional[StyleProfile] = None

    @field_validator("clickbait_intensity", mode="before")
    @classmethod
    def clamp_intensity(cls, v):
        return _clamp(v, 1, 10, 5)

    @field_validator("variation_count", mode="before")
    @classmethod
    def clamp_variation_count(cls, v):
        return _clamp(v, 1, 3, 1)

    @field_validator("style_consistency", mode="before")
    @classmethod
    def clamp_style_consistency(cls, v):
        return _clamp(v, 0, 100, 100)

    @field_validator("creative_direction", mode="before")
    @classmethod
    def coerce_direction(cls, v):
        if v is None or isinstance(v, CreativeDirection):
            return v
        value = str(v).strip().lower()
        return value if value in {d.value for d in CreativeDirection} else None

    @field_validator("cost_tier", mode="before")
    @classmethod
    def coerce_cost_tier(cls, v):
        if isinstance(v, CostTier):
            return v
        value = str(v or "").strip().lower()
        return value if value in {t.value for t in CostTier} else CostTier.STANDARD

    @field_validator("creator_type", mode="before")
    @classmethod
    def coerce_creator_type(cls, v):
        if v is None or isinstance(v, CreatorType):
            return v
        value = str(v).strip().lower()
        return value if value in {c.value for c in CreatorType} else CreatorType.OTHER

    @field_validator("target_languages", mode="before")
    @classmethod
    def normalize_languages(cls, v):
        if not v:
            return []
        if isinstance(v, str):
            v = [v]
        seen = []
        for code in v:
            code = str(code).strip().lower()
            if code and code not in seen:
                seen.append(code)
        return seen

    @model_validator(mode="after")
    def drop_empty_screenshots(self):
        self.video_screenshots = [s for s in self.video_screenshots if s]
        return self


class StyleVariation(BaseModel):
    """A named creative treatment from the fixed style catalog."""
    key: str
    label: str
    emphasis: str
    style_directive: str

    model_config = {"frozen": True}


@dataclass
class GenerationTask:
    """One (style variation, language) render owned by the fan-out executor."""
    index: int
    variation: StyleVariation
    language: str
    prompt: str = ""
    scene_refined: bool = False


@dataclass
class TaskOutcome:
    """Per-index record produced by the fan-out executor."""
    task: GenerationTask
    image_ref: Optional[str] = None
    quality: str = "high"
    error: Optional[Exception] = None
    processing_time_ms: int = 0

    @property
    def succeeded(self) -> bool:
        return self.error is None and bool(self.image_ref)


class FaceSwapOutcome(BaseModel):
    """Result of the face swap post-processor for one generated image."""
    image_ref: str
    applied: bool = False
    faces_detected: int = 0
    error_code: Optional[str] = None


class GenerationResult(BaseModel):
    """A finished preview image."""
    id: str
    image_ref: str
    label: str
    language: str
    language_name: Optional[str] = None
    prompt_used: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    face_swap_applied: bool = False
    scene_refined: bool = True
    quality: str = "high"
    estimated_cost: float = 0.0
    faces_detected: int = 0

    model_config = {"frozen": True}


class GenerationFailure(BaseModel):
    """Recorded failure of one generation task."""
    index: int
    label: str
    language: str
    error_code: str
    message: str


class GenerationBatch(BaseModel):
    """Everything a generation request produced."""
    results: List[GenerationResult] = Field(default_factory=list)
    failures: List[GenerationFailure] = Field(default_factory=list)
