"""
Video synthesis with fixed-interval polling of the long-running job.

Uses the google-genai SDK directly; LangChain has no video generation surface.
"""
import asyncio
import logging
from typing import Optional

from google import genai
from google.genai import types

from study_copilot.config import settings as config
from study_copilot.core.errors import (
    ErrorKind,
    GenerationError,
    VideoJobTimeoutError,
    classify_error,
)
from study_copilot.core.schemas import LongRunningOperation, Part

logger = logging.getLogger(__name__)

VIDEO_UNAVAILABLE_MESSAGE = (
    "Veo model not available with current API Key. "
    "This feature requires a specific paid tier or region."
)


class VideoGenerator:
    """Starts a video job and polls it until it yields a video URI."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        client: Optional[genai.Client] = None,
        model: str = config.VIDEO_MODEL,
        poll_interval: float = config.VIDEO_POLL_INTERVAL_SECONDS,
        resolution: str = config.VIDEO_RESOLUTION
    ):
        """
        Initialize the generator.

        Args:
            api_key: Google API key (ignored when a client is given)
            client: Pre-built google-genai client (e.g. a test double)
            model: Video model identifier
            poll_interval: Seconds to wait between status checks
            resolution: Output resolution
        """
        if client is None:
            if not api_key:
                raise ValueError("GOOGLE_API_KEY is required for video generation")
            client = genai.Client(api_key=api_key)
        self.client = client
        self.model = model
        self.poll_interval = poll_interval
        self.resolution = resolution

    async def start_video_job(
        self,
        prompt: str,
        image: Optional[Part] = None,
        aspect_ratio: str = "16:9",
        timeout: Optional[float] = None
    ) -> str:
        """
        Submit a video job and wait for its result.

        Args:
            prompt: Text description of the video
            image: Optional starting frame (inline image part)
            aspect_ratio: "16:9" or "9:16"
            timeout: Seconds to wait for completion; None waits indefinitely

        Returns:
            URI of the generated video

        Raises:
            GenerationError: CAPABILITY_UNAVAILABLE if the model is not
                available for the key, GENERATION_FAILED if the job reports an
                error, UNUSABLE_CONTENT if it completes without a video URI
            VideoJobTimeoutError: If the deadline passes first
        """
        kwargs = {}
        if image is not None:
            kwargs["image"] = types.Image(image_bytes=image.data, mime_type=image.mime_type)

        try:
            operation = await self.client.aio.models.generate_videos(
                model=self.model,
                prompt=prompt,
                config=types.GenerateVideosConfig(
                    number_of_videos=1,
                    resolution=self.resolution,
                    aspect_ratio=aspect_ratio,
                ),
                **kwargs
            )
        except Exception as e:
            if classify_error(e) == ErrorKind.CAPABILITY_UNAVAILABLE:
                raise GenerationError(
                    VIDEO_UNAVAILABLE_MESSAGE,
                    kind=ErrorKind.CAPABILITY_UNAVAILABLE
                ) from e
            raise

        job = LongRunningOperation(id=getattr(operation, "name", None) or "video-job")
        logger.info(f"Video job {job.id} submitted to {self.model}")

        if timeout is None:
            operation = await self._poll(operation, job)
        else:
            try:
                operation = await asyncio.wait_for(self._poll(operation, job), timeout=timeout)
            except asyncio.TimeoutError as e:
                raise VideoJobTimeoutError(
                    f"Video job {job.id} did not finish within {timeout} seconds",
                    operation_id=job.id
                ) from e

        if getattr(operation, "error", None):
            raise GenerationError(f"Video job {job.id} failed: {operation.error}")

        if not job.result_locator:
            raise GenerationError(
                "operation completed without a usable result",
                kind=ErrorKind.UNUSABLE_CONTENT
            )
        logger.info(f"Video job {job.id} completed")
        return job.result_locator

    async def _poll(self, operation, job: LongRunningOperation):
        polls = 0
        job.advance(bool(operation.done), _video_uri(operation))
        while not job.is_done:
            await asyncio.sleep(self.poll_interval)
            operation = await self.client.aio.operations.get(operation)
            polls += 1
            job.advance(bool(operation.done), _video_uri(operation))
            logger.info(f"Video job {job.id}: poll {polls}, done={bool(operation.done)}")
        return operation


def _video_uri(operation) -> Optional[str]:
    response = getattr(operation, "response", None)
    videos = getattr(response, "generated_videos", None) or []
    if not videos:
        return None
    video = getattr(videos[0], "video", None)
    return getattr(video, "uri", None)


def create_video_generator(api_key: Optional[str] = None) -> VideoGenerator:
    """Create a VideoGenerator from configured model and credentials."""
    return VideoGenerator(api_key=api_key or config.GOOGLE_API_KEY)
