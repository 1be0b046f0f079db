"""Single-language generation: select, compose, generate, face swap."""
import asyncio
import uuid
from typing import List, Optional

from ..config.localization import LocalizationManager, get_localization_manager
from ..core.config import ProviderConfig
from ..models.generation import (
    FaceSwapOutcome, GenerationBatch, GenerationOptions, GenerationResult,
    GenerationTask, TaskOutcome, VideoContext
)
from ..utils.logging import CorrelatedLogger
from .face_swap import FaceSwapProcessor
from .generation_executor import GenerationExecutor, to_failure
from .prompt_composer import PromptComposer
from .style_selector import StyleSelector

BASE_CONFIDENCE = 0.8
SCENE_FALLBACK_PENALTY = 0.1
FACE_SWAP_BONUS = 0.05
FACE_SWAP_SUFFIX = " (with face swap)"


def calculate_confidence(language_factor: float, scene_refined: bool, face_swap_applied: bool) -> float:
    """Result confidence from the language fit and the fallbacks that were applied."""
    confidence = BASE_CONFIDENCE * language_factor
    if not scene_refined:
        confidence -= SCENE_FALLBACK_PENALTY
    if face_swap_applied:
        confidence += FACE_SWAP_BONUS
    return round(max(0.0, min(1.0, confidence)), 4)


class GenerationPipeline:
    """Runs the whole generation flow for one language."""

    def __init__(
        self,
        style_selector: StyleSelector,
        prompt_composer: PromptComposer,
        executor: GenerationExecutor,
        face_swap: FaceSwapProcessor,
        localization: Optional[LocalizationManager] = None
    ):
        self.style_selector = style_selector
        self.prompt_composer = prompt_composer
        self.executor = executor
        self.face_swap = face_swap
        self.localization = localization or get_localization_manager()
        self.logger = CorrelatedLogger(__name__)

    def build_tasks(self, options: GenerationOptions, language: str) -> List[GenerationTask]:
        """One task per requested render, cycling through the selected styles."""
        styles = self.style_selector.select(options.creative_direction, options.variation_count)
        variations = self.style_selector.expand(styles, options.variation_count)
        return [
            GenerationTask(index=i, variation=variation, language=language)
            for i, variation in enumerate(variations)
        ]

    async def run(
        self,
        video: VideoContext,
        options: GenerationOptions,
        language: str,
        context_summary: str,
        language_factor: float = 1.0,
        request_id: Optional[str] = None
    ) -> GenerationBatch:
        """
        Generate all variations for one language.

        Raises:
            AllVariationsFailedError: no variation produced an image
        """
        logger = self.logger.bind(request_id)
        tasks = self.build_tasks(options, language)
        logger.info(
            f"Language {language}: {len(tasks)} task(s) "
            f"[{', '.join(task.variation.label for task in tasks)}]"
        )

        await asyncio.gather(*(
            self.prompt_composer.compose(task, context_summary, options, request_id)
            for task in tasks
        ))

        outcomes = await self.executor.execute(tasks, options.cost_tier, request_id)

        succeeded = [outcome for outcome in outcomes if outcome.succeeded]
        swaps = await self._apply_face_swap(succeeded, video, options, request_id)

        language_name = self.localization.get_language_name(language)
        results = [
            self._build_result(outcome, swap, language_name, language_factor)
            for outcome, swap in zip(succeeded, swaps)
        ]
        failures = [to_failure(outcome) for outcome in outcomes if not outcome.succeeded]

        logger.info(f"Language {language}: {len(results)} succeeded, {len(failures)} failed")
        return GenerationBatch(results=results, failures=failures)

    async def _apply_face_swap(
        self,
        outcomes: List[TaskOutcome],
        video: VideoContext,
        options: GenerationOptions,
        request_id: Optional[str]
    ) -> List[FaceSwapOutcome]:
        if not (options.face_swap_enabled and video.reference_image_url and self.face_swap.is_available):
            return [FaceSwapOutcome(image_ref=outcome.image_ref) for outcome in outcomes]

        return list(await asyncio.gather(*(
            self.face_swap.apply(outcome.image_ref, video.reference_image_url, request_id)
            for outcome in outcomes
        )))

    @staticmethod
    def _build_result(
        outcome: TaskOutcome,
        swap: FaceSwapOutcome,
        language_name: str,
        language_factor: float
    ) -> GenerationResult:
        task = outcome.task
        label = task.variation.label + (FACE_SWAP_SUFFIX if swap.applied else "")

        return GenerationResult(
            id=f"{task.language}-{task.index}-{uuid.uuid4().hex[:8]}",
            image_ref=swap.image_ref,
            label=label,
            language=task.language,
            language_name=language_name,
            prompt_used=task.prompt,
            confidence=calculate_confidence(language_factor, task.scene_refined, swap.applied),
            face_swap_applied=swap.applied,
            scene_refined=task.scene_refined,
            quality=outcome.quality,
            estimated_cost=ProviderConfig.estimated_cost(outcome.quality),
            faces_detected=swap.faces_detected
        )
