"""Multi-language fan-out over the single-language pipeline."""
import asyncio
from typing import List, Optional, Tuple

from ..config.localization import LocalizationManager, get_localization_manager
from ..core.exceptions import AllVariationsFailedError
from ..models.channel import ChannelDictionary
from ..models.generation import GenerationBatch, GenerationOptions, VideoContext
from ..utils.logging import CorrelatedLogger
from .context_summary import build_context_summary
from .face_swap import FaceSwapProcessor
from .generation_pipeline import GenerationPipeline

OWN_LANGUAGE_FACTOR = 1.0
SUPPORTED_LANGUAGE_FACTOR = 0.9
UNSUPPORTED_LANGUAGE_FACTOR = 0.75


class MultiLanguageController:
    """
    Repeats generation for every target language and merges the results.

    Languages run concurrently and fail independently; the request only
    fails when no language produced a single image.
    """

    def __init__(
        self,
        pipeline: GenerationPipeline,
        face_swap: FaceSwapProcessor,
        localization: Optional[LocalizationManager] = None
    ):
        self.pipeline = pipeline
        self.face_swap = face_swap
        self.localization = localization or get_localization_manager()
        self.logger = CorrelatedLogger(__name__)

    def resolve_video_language(self, video: VideoContext) -> str:
        if video.language is not None and video.language.code:
            return self.localization.normalize_code(video.language.code)
        return self.localization.determine_language(video.title, video.description)

    def resolve_target_languages(self, options: GenerationOptions, video_language: str) -> List[str]:
        """Normalized, de-duplicated target languages; the video language when none given."""
        languages = [self.localization.normalize_code(code) for code in options.target_languages]
        return list(dict.fromkeys(languages)) or [video_language]

    def language_factor(self, language: str, video_language: str) -> float:
        if self.localization.normalize_code(language) == self.localization.normalize_code(video_language):
            return OWN_LANGUAGE_FACTOR
        if self.localization.is_supported(language):
            return SUPPORTED_LANGUAGE_FACTOR
        return UNSUPPORTED_LANGUAGE_FACTOR

    async def generate(
        self,
        video: VideoContext,
        options: GenerationOptions,
        dictionary: Optional[ChannelDictionary] = None,
        request_id: Optional[str] = None
    ) -> GenerationBatch:
        """
        Generate preview images for every target language.

        Raises:
            AllVariationsFailedError: every language failed completely
        """
        logger = self.logger.bind(request_id)
        video_language = self.resolve_video_language(video)
        languages = self.resolve_target_languages(options, video_language)

        if options.video_screenshots:
            extra = await self.face_swap.analyze_screenshots(options.video_screenshots, request_id)
            if extra:
                options = options.model_copy(update={"participants": list(options.participants) + extra})

        context_summary = build_context_summary(video, dictionary)
        logger.info(f"Generating for languages {languages} (video language: {video_language})")

        outcomes = await asyncio.gather(*(
            self._run_language(video, options, language, video_language, context_summary, request_id)
            for language in languages
        ))

        results = []
        failures = []
        first_cause: Optional[Exception] = None
        attempted = 0
        for batch, error in outcomes:
            if batch is not None:
                results.extend(batch.results)
                failures.extend(batch.failures)
                attempted += len(batch.results) + len(batch.failures)
            else:
                failures.extend(error.failures)
                attempted += error.details.get("attempted", 0)
                if first_cause is None:
                    first_cause = error.cause or error

        if not results:
            raise AllVariationsFailedError(attempted, first_cause, failures=failures)

        # sorted() is stable, so equal confidences keep language order
        results = sorted(results, key=lambda result: -result.confidence)
        logger.info(f"Generated {len(results)} image(s), {len(failures)} failure(s)")
        return GenerationBatch(results=results, failures=failures)

    async def _run_language(
        self,
        video: VideoContext,
        options: GenerationOptions,
        language: str,
        video_language: str,
        context_summary: str,
        request_id: Optional[str]
    ) -> Tuple[Optional[GenerationBatch], Optional[AllVariationsFailedError]]:
        try:
            batch = await self.pipeline.run(
                video,
                options,
                language,
                context_summary,
                language_factor=self.language_factor(language, video_language),
                request_id=request_id
            )
            return batch, None
        except AllVariationsFailedError as e:
            self.logger.bind(request_id).warning(f"All variations failed for language {language}: {e.message}")
            return None, e
