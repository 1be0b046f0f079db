"""Logging configuration and utilities."""
import logging
import sys
from typing import Optional
from ..core.config import settings

class LoggerSetup:
    """Centralized logging configuration."""

    @staticmethod
    def setup_logging(
        level: Optional[str] = None,
        format_string: Optional[str] = None
    ) -> None:
        """Setup application logging."""
        log_level = level or settings.log_level
        log_format = format_string or settings.log_format

        # Configure root logger
        logging.basicConfig(
            level=getattr(logging, log_level.upper(), logging.INFO),
            format=log_format,
            handlers=[
                logging.StreamHandler(sys.stdout)
            ]
        )

        # Set specific logger levels
        logging.getLogger("uvicorn").setLevel(logging.INFO)
        logging.getLogger("fastapi").setLevel(logging.INFO)
        logging.getLogger("openai").setLevel(logging.WARNING)
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("aiohttp").setLevel(logging.WARNING)
        logging.getLogger("PIL").setLevel(logging.WARNING)

class CorrelatedLogger:
    """Logger with correlation ID support for request tracking."""

    def __init__(self, name: str, request_id: Optional[str] = None):
        self.name = name
        self.logger = logging.getLogger(name)
        self.request_id = request_id

    def bind(self, request_id: Optional[str]) -> "CorrelatedLogger":
        """Return a logger for the same name tagged with another request ID."""
        return CorrelatedLogger(self.name, request_id)

    def _format_message(self, message: str) -> str:
        """Format message with request ID if available."""
        if self.request_id:
            return f"[{self.request_id}] {message}"
        return message

    def debug(self, message: str, **kwargs) -> None:
        """Log debug message with correlation ID."""
        self.logger.debug(self._format_message(message), **kwargs)

    def info(self, message: str, **kwargs) -> None:
        """Log info message with correlation ID."""
        self.logger.info(self._format_message(message), **kwargs)

    def warning(self, message: str, **kwargs) -> None:
        """Log warning message with correlation ID."""
        self.logger.warning(self._format_message(message), **kwargs)

    def error(self, message: str, **kwargs) -> None:
        """Log error message with correlation ID."""
        self.logger.error(self._format_message(message), **kwargs)

    def exception(self, message: str, **kwargs) -> None:
        """Log exception message with correlation ID."""
        self.logger.exception(self._format_message(message), **kwargs)

class MetricsLogger:
    """Logger for performance metrics and monitoring."""

    def __init__(self):
        self.logger = logging.getLogger("metrics")

    def log_request_metrics(
        self,
        request_id: str,
        endpoint: str,
        method: str,
        processing_time_ms: int,
        status_code: int
    ) -> None:
        """Log request processing metrics."""
        self.logger.info(
            f"REQUEST_METRICS request_id={request_id} "
            f"endpoint={endpoint} method={method} "
            f"processing_time_ms={processing_time_ms} "
            f"status_code={status_code}"
        )

    def log_generation_metrics(
        self,
        request_id: Optional[str],
        label: str,
        language: str,
        success: bool,
        processing_time_ms: int,
        quality: str,
        error_code: Optional[str] = None
    ) -> None:
        """Log a single image generation task."""
        status = "success" if success else "failed"

        log_msg = (
            f"GENERATION_METRICS request_id={request_id} "
            f"label={label!r} language={language} status={status} "
            f"quality={quality} processing_time_ms={processing_time_ms}"
        )

        if error_code:
            log_msg += f" error_code={error_code}"

        self.logger.info(log_msg)

    def log_face_swap_metrics(
        self,
        request_id: Optional[str],
        applied: bool,
        faces_detected: int,
        processing_time_ms: int,
        error_code: Optional[str] = None
    ) -> None:
        """Log a face swap attempt."""
        status = "applied" if applied else "skipped"

        log_msg = (
            f"FACE_SWAP_METRICS request_id={request_id} status={status} "
            f"faces_detected={faces_detected} processing_time_ms={processing_time_ms}"
        )

        if error_code:
            log_msg += f" error_code={error_code}"

        self.logger.info(log_msg)

    def log_pattern_analysis_metrics(
        self,
        channel_id: Optional[str],
        images_requested: int,
        images_analyzed: int,
        processing_time_ms: int,
        cache_hit: bool = False,
        confidence: Optional[float] = None
    ) -> None:
        """Log channel pattern analysis metrics."""
        cache_status = "hit" if cache_hit else "miss"

        log_msg = (
            f"PATTERN_ANALYSIS_METRICS channel_id={channel_id} "
            f"images_requested={images_requested} images_analyzed={images_analyzed} "
            f"processing_time_ms={processing_time_ms} cache={cache_status}"
        )

        if confidence is not None:
            log_msg += f" confidence={confidence:.2f}"

        self.logger.info(log_msg)
