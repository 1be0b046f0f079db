"""Response models for the Thumbnail Generation Service."""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel

from .channel import ChannelPattern, StyleProfile
from .generation import GenerationFailure, GenerationResult

class ResponseMetadata(BaseModel):
    """Standard response metadata."""
    request_id: str
    api_version: str = "1.0.0"
    timestamp: Optional[str] = None
    processing_time_ms: Optional[int] = None

class ErrorInfo(BaseModel):
    """Error information structure."""
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None

class SuccessResponse(BaseModel):
    """Standard success response."""
    success: bool = True
    data: Any
    metadata: ResponseMetadata

class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    error: ErrorInfo
    metadata: ResponseMetadata

class GenerationSummary(BaseModel):
    """Summary of a generation request."""
    total_requested: int
    successful: int
    failed: int
    languages: List[str]
    processing_time_ms: int

class GenerationData(BaseModel):
    """Generation response data."""
    results: List[GenerationResult]
    failures: List[GenerationFailure]
    summary: GenerationSummary

class ChannelPatternData(BaseModel):
    """Pattern analysis response data."""
    pattern: ChannelPattern
    style_profile: StyleProfile
    cache_hit: bool = False

class ProviderStatus(BaseModel):
    """Provider configuration status."""
    image_generation: str
    scene_reasoning: str
    face_swap: str

class HealthMetrics(BaseModel):
    """Service health metrics."""
    uptime_seconds: int
    cached_patterns: int

class HealthData(BaseModel):
    """Complete health check response."""
    status: str
    timestamp: str
    version: str
    providers: ProviderStatus
    metrics: HealthMetrics
