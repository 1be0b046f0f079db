"""Response creation utilities."""
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from fastapi import status
from fastapi.responses import JSONResponse

from ..core.config import settings
from ..models.responses import SuccessResponse, ErrorResponse, ResponseMetadata, ErrorInfo
from ..core.exceptions import ThumbGenBaseException

# Map error codes to HTTP status codes
STATUS_MAPPING: Dict[str, int] = {
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "API_KEY_INVALID": status.HTTP_401_UNAUTHORIZED,
    "PROVIDER_REJECTED": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "INSUFFICIENT_SAMPLE_SIZE": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "IMAGE_ANALYSIS_FAILED": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "EMPTY_RESPONSE": status.HTTP_502_BAD_GATEWAY,
    "ALL_VARIATIONS_FAILED": status.HTTP_502_BAD_GATEWAY,
    "PROVIDER_UNAVAILABLE": status.HTTP_503_SERVICE_UNAVAILABLE,
    "PROVIDER_TIMEOUT": status.HTTP_504_GATEWAY_TIMEOUT,
    "CONFIGURATION_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class ResponseHelper:
    """Utilities for creating standardized API responses."""

    @staticmethod
    def generate_request_id() -> str:
        """Generate unique request ID."""
        return f"req_{uuid.uuid4().hex[:8]}"

    @staticmethod
    def create_response_metadata(request_id: str, processing_time_ms: Optional[int] = None) -> ResponseMetadata:
        """Create standardized response metadata."""
        return ResponseMetadata(
            request_id=request_id,
            api_version=settings.api_version,
            timestamp=datetime.now(timezone.utc).isoformat(),
            processing_time_ms=processing_time_ms
        )

    @staticmethod
    def create_success_response(
        data: Any,
        request_id: Optional[str] = None,
        processing_time_ms: Optional[int] = None
    ) -> JSONResponse:
        """Create standardized success response."""
        if not request_id:
            request_id = ResponseHelper.generate_request_id()

        response = SuccessResponse(
            data=data,
            metadata=ResponseHelper.create_response_metadata(request_id, processing_time_ms)
        )
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content=response.model_dump(mode="json")
        )

    @staticmethod
    def create_error_response(
        error_code: str,
        message: str,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        request_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> JSONResponse:
        """Create standardized error response."""
        if not request_id:
            request_id = ResponseHelper.generate_request_id()

        response = ErrorResponse(
            error=ErrorInfo(
                code=error_code,
                message=message,
                details=details
            ),
            metadata=ResponseHelper.create_response_metadata(request_id)
        )
        return JSONResponse(
            status_code=status_code,
            content=response.model_dump(mode="json")
        )

    @staticmethod
    def status_for(error_code: str) -> int:
        return STATUS_MAPPING.get(error_code, status.HTTP_500_INTERNAL_SERVER_ERROR)

    @staticmethod
    def create_error_from_exception(
        exc: ThumbGenBaseException,
        request_id: Optional[str] = None
    ) -> JSONResponse:
        """Create error response from custom exception."""
        details = dict(exc.details) if exc.details else {}

        failures = getattr(exc, "failures", None)
        if failures:
            details["failures"] = [failure.model_dump() for failure in failures]

        return ResponseHelper.create_error_response(
            error_code=exc.error_code,
            message=exc.message,
            status_code=ResponseHelper.status_for(exc.error_code),
            request_id=request_id,
            details=details or None
        )
