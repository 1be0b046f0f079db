"""Preview image generation endpoint."""
from datetime import datetime

from fastapi import APIRouter, Depends, Security

from ..core.dependencies import (
    get_dictionary_builder, get_generation_controller, get_pattern_analyzer, get_style_profiler, verify_api_key
)
from ..core.exceptions import ThumbGenBaseException
from ..models.requests import GenerateRequest
from ..models.responses import GenerationData, GenerationSummary
from ..services import (
    ChannelDictionaryBuilder, ChannelPatternAnalyzer, MultiLanguageController, StyleProfiler
)
from ..utils.logging import CorrelatedLogger, MetricsLogger
from ..utils.response_helpers import ResponseHelper
from ..utils.validators import ImageURLValidator

router = APIRouter(tags=["generation"])

logger = CorrelatedLogger(__name__)
metrics = MetricsLogger()


@router.post("/generate")
async def generate_previews(
    request: GenerateRequest,
    api_key: str = Security(verify_api_key),
    controller: MultiLanguageController = Depends(get_generation_controller),
    dictionary_builder: ChannelDictionaryBuilder = Depends(get_dictionary_builder),
    pattern_analyzer: ChannelPatternAnalyzer = Depends(get_pattern_analyzer),
    profiler: StyleProfiler = Depends(get_style_profiler)
):
    """
    Generate preview images for a video brief.

    Returns every image that could be produced, each flagged with the
    fallbacks applied to it, plus the tasks that failed. The request
    only fails when no image at all could be generated.
    """
    request_id = ResponseHelper.generate_request_id()
    start_time = datetime.now()
    status_code = 200

    try:
        video = request.video
        options = request.options

        if video.reference_image_url:
            ImageURLValidator.validate_image_reference(video.reference_image_url, "video.reference_image_url")
        ImageURLValidator.validate_image_references(options.video_screenshots, "options.video_screenshots")

        dictionary = dictionary_builder.get_dictionary(video.channel_id) if video.channel_id else None
        if video.channel_id and options.style_profile is None:
            pattern = pattern_analyzer.get_cached_pattern(video.channel_id)
            if pattern is not None:
                options = options.model_copy(update={"style_profile": profiler.build_profile(pattern)})

        batch = await controller.generate(video, options, dictionary=dictionary, request_id=request_id)
        processing_time = int((datetime.now() - start_time).total_seconds() * 1000)

        data = GenerationData(
            results=batch.results,
            failures=batch.failures,
            summary=GenerationSummary(
                total_requested=len(batch.results) + len(batch.failures),
                successful=len(batch.results),
                failed=len(batch.failures),
                languages=list(dict.fromkeys(r.language for r in batch.results)),
                processing_time_ms=processing_time
            )
        )
        return ResponseHelper.create_success_response(
            data=data.model_dump(mode="json"),
            request_id=request_id,
            processing_time_ms=processing_time
        )

    except ThumbGenBaseException as e:
        logger.bind(request_id).warning(f"Generation request failed: {e.error_code} - {e.message}")
        status_code = ResponseHelper.status_for(e.error_code)
        return ResponseHelper.create_error_from_exception(e, request_id)
    finally:
        metrics.log_request_metrics(
            request_id, "/generate", "POST",
            int((datetime.now() - start_time).total_seconds() * 1000),
            status_code
        )
