"""Face detection and face swap through the Replicate predictions API."""
import asyncio
from typing import Any, Dict, List, Optional

import aiohttp

from ..core.config import settings
from ..core.exceptions import (
    EmptyResponseError, ProviderRejectedError, ProviderUnavailableError
)
from ..models.channel import FaceDetection
from ..utils.logging import CorrelatedLogger
from .base import FaceProvider

TERMINAL_STATUSES = ("succeeded", "failed", "canceled")


def parse_face_detections(output: Any) -> List[FaceDetection]:
    """
    Normalize detection model output into FaceDetection objects.

    Detection models disagree on shape: some return a bare list of faces,
    some a {"faces": [...]} object, and boxes appear as "bbox" or "box"
    with "confidence" or "score". Entries without a usable box are dropped.
    """
    if isinstance(output, dict):
        output = output.get("faces") or output.get("detections") or []
    if not isinstance(output, list):
        return []

    faces = []
    for item in output:
        if not isinstance(item, dict):
            continue

        bbox = item.get("bbox") or item.get("box")
        if isinstance(bbox, dict):
            bbox = [bbox.get("x1", 0), bbox.get("y1", 0), bbox.get("x2", 0), bbox.get("y2", 0)]
        if not isinstance(bbox, (list, tuple)) or len(bbox) != 4:
            continue

        confidence = item.get("confidence", item.get("score", 0.0))
        try:
            faces.append(FaceDetection(
                bbox=[float(v) for v in bbox],
                confidence=float(confidence or 0.0),
                landmarks=item.get("landmarks")
            ))
        except (TypeError, ValueError):
            continue

    return faces


def first_output_url(output: Any) -> Optional[str]:
    """Return the first image reference of a prediction output."""
    if isinstance(output, list):
        output = output[0] if output else None
    if isinstance(output, str) and output:
        return output
    return None


class ReplicateFaceProvider(FaceProvider):
    """Runs face detection and face swap models as Replicate predictions."""

    name = "replicate"

    def __init__(
        self,
        api_token: Optional[str] = None,
        base_url: Optional[str] = None,
        detection_version: Optional[str] = None,
        swap_model: Optional[str] = None,
        poll_interval: Optional[float] = None,
        nms_threshold: Optional[float] = None
    ):
        self.api_token = api_token if api_token is not None else settings.replicate_api_token
        self.base_url = (base_url or settings.replicate_base_url).rstrip("/")
        self.detection_version = detection_version or settings.face_detection_model_version
        self.swap_model = swap_model or settings.face_swap_model
        self.poll_interval = poll_interval if poll_interval is not None else settings.replicate_poll_interval
        self.nms_threshold = nms_threshold if nms_threshold is not None else settings.face_nms_threshold
        self.logger = CorrelatedLogger(__name__)

    @property
    def is_configured(self) -> bool:
        return bool(self.api_token)

    async def detect_faces(self, image_url: str, confidence_threshold: float = 0.5) -> List[FaceDetection]:
        """Detect faces in an image. An empty list means no faces were found."""
        output = await self.run_prediction(
            {
                "version": self.detection_version,
                "input": {
                    "image": image_url,
                    "confidence_threshold": confidence_threshold,
                    "nms_threshold": self.nms_threshold
                }
            },
            operation="face detection"
        )
        faces = parse_face_detections(output)
        self.logger.debug(f"Detected {len(faces)} face(s)")
        return faces

    async def swap_face(self, source_image: str, target_image: str, face_index: int = 0) -> str:
        """Swap a face of the source image into the target image and return the result URL."""
        payload: Dict[str, Any] = {
            "input": {
                "image": source_image,
                "target_image": target_image,
                "face_index": face_index
            }
        }
        # "owner/name:version" pins a version, bare "owner/name" runs the latest
        if ":" in self.swap_model:
            payload["version"] = self.swap_model.split(":", 1)[1]
        else:
            payload["model"] = self.swap_model

        output = await self.run_prediction(payload, operation="face swap")
        image_url = first_output_url(output)
        if not image_url:
            raise EmptyResponseError(self.name, "face swap")
        return image_url

    async def run_prediction(self, payload: Dict[str, Any], operation: str) -> Any:
        """Create a prediction and poll it until it reaches a terminal status."""
        if not self.is_configured:
            raise ProviderUnavailableError(self.name, "Replicate API token not configured")

        headers = {
            "Authorization": f"Token {self.api_token}",
            "Content-Type": "application/json"
        }
        timeout = aiohttp.ClientTimeout(total=settings.face_swap_timeout)

        try:
            async with aiohttp.ClientSession(headers=headers, timeout=timeout) as session:
                prediction = await self._send(session, "POST", f"{self.base_url}/predictions", payload)
                prediction_id = prediction.get("id")
                if not prediction_id:
                    raise EmptyResponseError(self.name, operation)

                while prediction.get("status") not in TERMINAL_STATUSES:
                    await asyncio.sleep(self.poll_interval)
                    prediction = await self._send(
                        session, "GET", f"{self.base_url}/predictions/{prediction_id}"
                    )
        except aiohttp.ClientError as e:
            raise ProviderUnavailableError(self.name, f"{operation}: {e}")

        status = prediction.get("status")
        if status != "succeeded":
            reason = prediction.get("error") or f"prediction {status}"
            raise ProviderRejectedError(self.name, f"{operation} {status}: {reason}")

        output = prediction.get("output")
        if output is None:
            raise EmptyResponseError(self.name, operation)
        return output

    async def _send(
        self,
        session: aiohttp.ClientSession,
        method: str,
        url: str,
        payload: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Send one API request and map HTTP failures onto provider errors."""
        async with session.request(method, url, json=payload) as response:
            if response.status == 429 or response.status >= 500:
                raise ProviderUnavailableError(self.name, f"HTTP {response.status}")
            if response.status >= 400:
                body = await response.text()
                raise ProviderRejectedError(self.name, body[:200] or f"HTTP {response.status}", response.status)
            return await response.json()
