"""Utility modules for the Thumbnail Generation Service."""
from .validators import ImageURLValidator, ChannelValidator
from .response_helpers import ResponseHelper
from .logging import LoggerSetup, CorrelatedLogger, MetricsLogger

__all__ = [
    "ImageURLValidator", "ChannelValidator", "ResponseHelper",
    "LoggerSetup", "CorrelatedLogger", "MetricsLogger"
]
