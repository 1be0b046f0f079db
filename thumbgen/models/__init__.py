"""Data models for the Thumbnail Generation Service."""
from .channel import (
    ChannelDocument, Keyword, ChannelDictionary, TextEffect, TextPosition, TextStyle,
    ColorPalette, LayoutPattern, SeriesPattern, TemporalTrend, ChannelPattern,
    StyleProfile, FaceDetection
)
from .generation import (
    CreativeDirection, CostTier, CreatorType, Language, VideoContext, Participant,
    GenerationOptions, StyleVariation, GenerationTask, TaskOutcome, FaceSwapOutcome,
    GenerationResult, GenerationFailure, GenerationBatch
)
from .requests import GenerateRequest, ChannelDictionaryRequest, ChannelPatternRequest
from .responses import (
    ResponseMetadata, ErrorInfo, SuccessResponse, ErrorResponse,
    GenerationSummary, GenerationData, ChannelPatternData,
    ProviderStatus, HealthMetrics, HealthData
)

__all__ = [
    "ChannelDocument", "Keyword", "ChannelDictionary", "TextEffect", "TextPosition", "TextStyle",
    "ColorPalette", "LayoutPattern", "SeriesPattern", "TemporalTrend", "ChannelPattern",
    "StyleProfile", "FaceDetection",
    "CreativeDirection", "CostTier", "CreatorType", "Language", "VideoContext", "Participant",
    "GenerationOptions", "StyleVariation", "GenerationTask", "TaskOutcome", "FaceSwapOutcome",
    "GenerationResult", "GenerationFailure", "GenerationBatch",
    "GenerateRequest", "ChannelDictionaryRequest", "ChannelPatternRequest",
    "ResponseMetadata", "ErrorInfo", "SuccessResponse", "ErrorResponse",
    "GenerationSummary", "GenerationData", "ChannelPatternData",
    "ProviderStatus", "HealthMetrics", "HealthData"
]
