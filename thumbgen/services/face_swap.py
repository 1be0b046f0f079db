"""Best-effort face swap post-processing and screenshot face analysis."""
import asyncio
from datetime import datetime
from typing import List, Optional

from ..core.config import settings
from ..core.exceptions import ProviderTimeoutError, ThumbGenBaseException
from ..models.channel import FaceDetection
from ..models.generation import FaceSwapOutcome, Participant
from ..providers.base import FaceProvider
from ..utils.logging import CorrelatedLogger, MetricsLogger

MAX_SCREENSHOT_FACES = 3


def best_face_index(faces: List[FaceDetection]) -> int:
    """Index of the highest-confidence face; the earliest wins a tie."""
    return max(range(len(faces)), key=lambda i: (faces[i].confidence, -i))


class FaceSwapProcessor:
    """
    Swaps the best reference face into generated images.

    Face swap is an enhancement: every failure, including a missed
    deadline, returns the generated image unchanged.
    """

    def __init__(
        self,
        face_provider: Optional[FaceProvider],
        detection_timeout: Optional[float] = None,
        swap_timeout: Optional[float] = None,
        confidence_threshold: Optional[float] = None
    ):
        self.face_provider = face_provider
        self.detection_timeout = detection_timeout or settings.face_detection_timeout
        self.swap_timeout = swap_timeout or settings.face_swap_timeout
        self.confidence_threshold = (
            confidence_threshold if confidence_threshold is not None else settings.face_confidence_threshold
        )
        self.logger = CorrelatedLogger(__name__)
        self.metrics = MetricsLogger()

    @property
    def is_available(self) -> bool:
        return self.face_provider is not None and self.face_provider.is_configured

    async def detect_faces(self, image_url: str) -> List[FaceDetection]:
        """
        Detect faces within the detection deadline.

        Raises:
            ProviderTimeoutError: detection missed its deadline
        """
        try:
            return await asyncio.wait_for(
                self.face_provider.detect_faces(image_url, self.confidence_threshold),
                timeout=self.detection_timeout
            )
        except asyncio.TimeoutError:
            raise ProviderTimeoutError("face detection", self.detection_timeout)

    async def swap(self, reference_image: str, generated_image: str, face_index: int) -> str:
        """
        Swap a reference face into the generated image within the swap deadline.

        Raises:
            ProviderTimeoutError: swap missed its deadline
        """
        try:
            return await asyncio.wait_for(
                self.face_provider.swap_face(reference_image, generated_image, face_index),
                timeout=self.swap_timeout
            )
        except asyncio.TimeoutError:
            raise ProviderTimeoutError("face swap", self.swap_timeout)

    async def apply(
        self,
        generated_image: str,
        reference_image: Optional[str],
        request_id: Optional[str] = None
    ) -> FaceSwapOutcome:
        """Detect faces in the reference and swap the best one into the generated image."""
        if not self.is_available or not reference_image:
            return FaceSwapOutcome(image_ref=generated_image)

        logger = self.logger.bind(request_id)
        start_time = datetime.now()
        outcome = FaceSwapOutcome(image_ref=generated_image)

        try:
            faces = await self.detect_faces(reference_image)
            outcome.faces_detected = len(faces)

            if not faces:
                logger.info("No faces detected in reference image, keeping generated image")
            else:
                swapped = await self.swap(reference_image, generated_image, best_face_index(faces))
                if swapped:
                    outcome.image_ref = swapped
                    outcome.applied = True
                else:
                    logger.warning("Face swap returned no image, keeping generated image")
        except ThumbGenBaseException as e:
            logger.warning(f"Face swap failed, keeping generated image: {e.message}")
            outcome.error_code = e.error_code
        except Exception as e:
            logger.warning(f"Face swap failed, keeping generated image: {str(e)}")
            outcome.error_code = type(e).__name__

        self.metrics.log_face_swap_metrics(
            request_id,
            outcome.applied,
            outcome.faces_detected,
            int((datetime.now() - start_time).total_seconds() * 1000),
            outcome.error_code
        )
        return outcome

    async def analyze_screenshots(
        self,
        screenshots: List[str],
        request_id: Optional[str] = None
    ) -> List[Participant]:
        """
        Detect faces in video screenshots, one screenshot at a time.

        The most confident faces become extra participants. A screenshot
        whose detection fails contributes nothing.
        """
        if not self.is_available or not screenshots:
            return []

        logger = self.logger.bind(request_id)
        found: List[FaceDetection] = []
        for index, screenshot in enumerate(screenshots):
            try:
                found.extend(await self.detect_faces(screenshot))
            except ThumbGenBaseException as e:
                logger.warning(f"Screenshot {index} face detection failed: {e.message}")
            except Exception as e:
                logger.warning(f"Screenshot {index} face detection failed: {str(e)}")

        # stable sort keeps screenshot order among equal confidences
        ranked = sorted(found, key=lambda face: -face.confidence)[:MAX_SCREENSHOT_FACES]
        logger.info(f"Screenshot analysis found {len(found)} face(s), using {len(ranked)}")

        return [
            Participant(name=f"Face {i}", emphasis="secondary")
            for i in range(1, len(ranked) + 1)
        ]
