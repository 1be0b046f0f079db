"""Health check and catalog endpoints."""
from datetime import datetime, timezone
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..core.config import settings
from ..core.dependencies import get_face_provider, get_pattern_cache, get_style_selector
from ..models.responses import HealthData, HealthMetrics, ProviderStatus
from ..providers import ReplicateFaceProvider
from ..services import StyleSelector, TTLCache
from ..utils.response_helpers import ResponseHelper

router = APIRouter(tags=["health"])

service_start_time = datetime.now()


@router.get("/")
async def root():
    """Root endpoint."""
    return {"message": f"{settings.api_title} is running"}


@router.get("/health")
async def health_check(
    cache: TTLCache = Depends(get_pattern_cache),
    face_provider: ReplicateFaceProvider = Depends(get_face_provider)
):
    """
    Health check endpoint with provider status and metrics
    """
    uptime = int((datetime.now() - service_start_time).total_seconds())
    openai_status = "configured" if settings.openai_api_key else "not_configured"

    health_data = HealthData(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=settings.api_version,
        providers=ProviderStatus(
            image_generation=openai_status,
            scene_reasoning=openai_status,
            face_swap="configured" if face_provider.is_configured else "not_configured"
        ),
        metrics=HealthMetrics(
            uptime_seconds=uptime,
            cached_patterns=cache.get_stats()["fresh_items"]
        )
    )

    return JSONResponse(
        status_code=200,
        content=health_data.model_dump()
    )


@router.get("/styles")
async def list_styles(selector: StyleSelector = Depends(get_style_selector)):
    """
    List the style variations in default selection order
    """
    styles = [variation.model_dump() for variation in selector.get_catalog()]
    return ResponseHelper.create_success_response({"styles": styles})
