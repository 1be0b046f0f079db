"""Custom exceptions for the Thumbnail Generation Service."""
from typing import Optional

class ThumbGenBaseException(Exception):
    """Base exception for the thumbnail generation service."""

    def __init__(self, message: str, error_code: str, details: Optional[dict] = None):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

class ValidationError(ThumbGenBaseException):
    """Exception raised for input validation errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message, "VALIDATION_ERROR", details)

class ProviderUnavailableError(ThumbGenBaseException):
    """Exception raised when a provider cannot be reached or answers with a 5xx."""

    def __init__(self, provider: str, reason: str = "Provider temporarily unavailable"):
        message = f"Provider unavailable: {provider} - {reason}"
        details = {"provider": provider, "reason": reason}
        super().__init__(message, "PROVIDER_UNAVAILABLE", details)

class ProviderRejectedError(ThumbGenBaseException):
    """Exception raised when a provider rejects the request (4xx)."""

    def __init__(self, provider: str, reason: str = "Request rejected", status_code: Optional[int] = None):
        message = f"Provider rejected request: {provider} - {reason}"
        details = {"provider": provider, "reason": reason, "status_code": status_code}
        super().__init__(message, "PROVIDER_REJECTED", details)

class ProviderTimeoutError(ThumbGenBaseException):
    """Exception raised when a provider call misses its deadline."""

    def __init__(self, operation: str, timeout_seconds: Optional[float] = None):
        message = f"Operation timed out: {operation}"
        if timeout_seconds is not None:
            message += f" (timeout: {timeout_seconds}s)"
        details = {"operation": operation, "timeout_seconds": timeout_seconds}
        super().__init__(message, "PROVIDER_TIMEOUT", details)

class EmptyResponseError(ThumbGenBaseException):
    """Exception raised when a provider answers without usable output."""

    def __init__(self, provider: str, operation: str):
        message = f"Empty response from {provider} during {operation}"
        details = {"provider": provider, "operation": operation}
        super().__init__(message, "EMPTY_RESPONSE", details)

class InsufficientSampleSizeError(ThumbGenBaseException):
    """Exception raised when too few reference images are available for pattern analysis."""

    def __init__(self, required: int, received: int):
        message = (
            f"Not enough valid thumbnails to analyze pattern: "
            f"{received} received, at least {required} required"
        )
        details = {"required": required, "received": received}
        super().__init__(message, "INSUFFICIENT_SAMPLE_SIZE", details)

class AllVariationsFailedError(ThumbGenBaseException):
    """Exception raised when every task of a generation batch failed."""

    def __init__(self, attempted: int, cause: Optional[Exception] = None, failures: Optional[list] = None):
        self.cause = cause
        self.failures = failures or []
        cause_message = getattr(cause, "message", None) or (str(cause) if cause else "unknown error")
        cause_code = getattr(cause, "error_code", None) or (type(cause).__name__ if cause else None)
        message = f"All {attempted} generation task(s) failed. First failure: {cause_message}"
        details = {"attempted": attempted, "reason": cause_message, "cause_code": cause_code}
        super().__init__(message, "ALL_VARIATIONS_FAILED", details)

class ImageAnalysisError(ThumbGenBaseException):
    """Exception raised when a reference image cannot be loaded or analyzed."""

    def __init__(self, image_url: str, reason: str = "Image could not be decoded"):
        message = f"Failed to analyze image: {reason}"
        details = {"image_url": image_url, "reason": reason}
        super().__init__(message, "IMAGE_ANALYSIS_FAILED", details)

class APIKeyInvalidError(ThumbGenBaseException):
    """Exception raised for invalid API key."""

    def __init__(self):
        message = "Invalid or missing API key"
        super().__init__(message, "API_KEY_INVALID")

class ConfigurationError(ThumbGenBaseException):
    """Exception raised for configuration errors."""

    def __init__(self, setting: str, reason: str = ""):
        message = f"Configuration error for {setting}: {reason}" if reason else f"Configuration error: {setting}"
        details = {"setting": setting, "reason": reason}
        super().__init__(message, "CONFIGURATION_ERROR", details)
