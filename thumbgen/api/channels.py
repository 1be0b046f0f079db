"""Channel dictionary and pattern analysis endpoints."""
import asyncio
from datetime import datetime

from fastapi import APIRouter, Depends, Security

from ..core.dependencies import (
    get_dictionary_builder, get_pattern_analyzer, get_style_profiler, verify_api_key
)
from ..core.exceptions import ThumbGenBaseException
from ..models.requests import ChannelDictionaryRequest, ChannelPatternRequest
from ..models.responses import ChannelPatternData
from ..services import ChannelDictionaryBuilder, ChannelPatternAnalyzer, StyleProfiler
from ..utils.response_helpers import ResponseHelper
from ..utils.validators import ChannelValidator, ImageURLValidator

router = APIRouter(prefix="/channels", tags=["channels"])


@router.post("/dictionary")
async def build_channel_dictionary(
    request: ChannelDictionaryRequest,
    api_key: str = Security(verify_api_key),
    builder: ChannelDictionaryBuilder = Depends(get_dictionary_builder)
):
    """Build and store a channel's keyword dictionary from its video titles and descriptions."""
    request_id = ResponseHelper.generate_request_id()
    start_time = datetime.now()

    try:
        ChannelValidator.validate_channel_id(request.channel_id)
        dictionary = await asyncio.to_thread(builder.build_and_store, request.channel_id, request.documents)
        processing_time = int((datetime.now() - start_time).total_seconds() * 1000)

        return ResponseHelper.create_success_response(
            data=dictionary.model_dump(mode="json"),
            request_id=request_id,
            processing_time_ms=processing_time
        )
    except ThumbGenBaseException as e:
        return ResponseHelper.create_error_from_exception(e, request_id)


@router.post("/pattern")
async def analyze_channel_pattern(
    request: ChannelPatternRequest,
    api_key: str = Security(verify_api_key),
    analyzer: ChannelPatternAnalyzer = Depends(get_pattern_analyzer),
    profiler: StyleProfiler = Depends(get_style_profiler)
):
    """Analyze reference thumbnails into a channel pattern and style profile."""
    request_id = ResponseHelper.generate_request_id()
    start_time = datetime.now()

    try:
        if request.channel_id:
            ChannelValidator.validate_channel_id(request.channel_id)
        ImageURLValidator.validate_image_references(request.thumbnails, "thumbnails")

        result = await analyzer.analyze(
            request.thumbnails,
            channel_id=request.channel_id,
            titles=request.titles,
            force_refresh=bool(request.force_refresh),
            request_id=request_id
        )
        data = ChannelPatternData(
            pattern=result.pattern,
            style_profile=profiler.build_profile(result.pattern),
            cache_hit=result.cache_hit
        )
        processing_time = int((datetime.now() - start_time).total_seconds() * 1000)

        return ResponseHelper.create_success_response(
            data=data.model_dump(mode="json"),
            request_id=request_id,
            processing_time_ms=processing_time
        )
    except ThumbGenBaseException as e:
        return ResponseHelper.create_error_from_exception(e, request_id)
