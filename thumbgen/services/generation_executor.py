"""Concurrent fan-out of image generation tasks."""
import asyncio
from datetime import datetime
from typing import List, Optional, Union

from ..core.config import settings, ProviderConfig
from ..core.exceptions import AllVariationsFailedError, EmptyResponseError, ThumbGenBaseException
from ..models.generation import CostTier, GenerationFailure, GenerationTask, TaskOutcome
from ..providers.base import ImageGenerationProvider
from ..utils.logging import CorrelatedLogger, MetricsLogger


def to_failure(outcome: TaskOutcome) -> GenerationFailure:
    """Recorded failure entry for a failed task outcome."""
    error = outcome.error
    if error is None:
        error_code, message = "EMPTY_RESPONSE", "No image returned"
    else:
        error_code = getattr(error, "error_code", None) or "GENERATION_FAILED"
        message = getattr(error, "message", None) or str(error) or type(error).__name__

    return GenerationFailure(
        index=outcome.task.index,
        label=outcome.task.variation.label,
        language=outcome.task.language,
        error_code=error_code,
        message=message
    )


class GenerationExecutor:
    """
    Runs generation tasks concurrently against the image provider.

    Outcomes are written into a pre-sized list by task index, so the
    returned order is the input order whatever order tasks finish in.
    Single task failures are recorded on their outcome; only a batch in
    which every task failed raises.
    """

    def __init__(
        self,
        image_provider: ImageGenerationProvider,
        max_concurrency: Optional[int] = None
    ):
        self.image_provider = image_provider
        self.max_concurrency = max_concurrency or settings.max_concurrent_generations
        self._semaphore: Optional[asyncio.Semaphore] = None
        self._semaphore_loop = None
        self.logger = CorrelatedLogger(__name__)
        self.metrics = MetricsLogger()

    async def execute(
        self,
        tasks: List[GenerationTask],
        cost_tier: Union[CostTier, str] = CostTier.STANDARD,
        request_id: Optional[str] = None
    ) -> List[TaskOutcome]:
        """
        Generate one image per task.

        Raises:
            AllVariationsFailedError: every task failed; carries the first
                failure (by task index) as its cause
        """
        if not tasks:
            return []

        tier = cost_tier.value if isinstance(cost_tier, CostTier) else str(cost_tier)
        quality = ProviderConfig.quality_for_tier(tier)
        logger = self.logger.bind(request_id)
        logger.info(f"Generating {len(tasks)} image(s) at {quality} quality (tier: {tier})")

        semaphore = self._limiter()
        outcomes: List[Optional[TaskOutcome]] = [None] * len(tasks)

        async def run_one(position: int, task: GenerationTask) -> None:
            async with semaphore:
                outcomes[position] = await self._generate_single(task, quality, request_id, logger)

        await asyncio.gather(*(run_one(i, task) for i, task in enumerate(tasks)))

        results = [outcome for outcome in outcomes if outcome is not None]
        if not any(outcome.succeeded for outcome in results):
            first_error = next((o.error for o in results if o.error is not None), None)
            raise AllVariationsFailedError(
                len(tasks), first_error, failures=[to_failure(o) for o in results]
            )

        return results

    def _limiter(self) -> asyncio.Semaphore:
        """Provider-wide limiter shared by every batch running on this loop."""
        loop = asyncio.get_running_loop()
        if self._semaphore is None or self._semaphore_loop is not loop:
            self._semaphore = asyncio.Semaphore(self.max_concurrency)
            self._semaphore_loop = loop
        return self._semaphore

    async def _generate_single(
        self,
        task: GenerationTask,
        quality: str,
        request_id: Optional[str],
        logger: CorrelatedLogger
    ) -> TaskOutcome:
        """Generate one image, turning any failure into a failed outcome."""
        start_time = datetime.now()
        outcome = TaskOutcome(task=task, quality=quality)

        try:
            image_ref = await self.image_provider.generate_image(task.prompt, quality)
            if not image_ref:
                raise EmptyResponseError(self.image_provider.name, "image generation")
            outcome.image_ref = image_ref
        except ThumbGenBaseException as e:
            logger.warning(f"Generation failed for {task.variation.label} ({task.language}): {e.message}")
            outcome.error = e
        except Exception as e:
            logger.warning(f"Generation failed for {task.variation.label} ({task.language}): {str(e)}")
            outcome.error = e

        outcome.processing_time_ms = int((datetime.now() - start_time).total_seconds() * 1000)
        self.metrics.log_generation_metrics(
            request_id,
            task.variation.label,
            task.language,
            outcome.succeeded,
            outcome.processing_time_ms,
            quality,
            error_code=getattr(outcome.error, "error_code", None) if outcome.error else None
        )
        return outcome
