"""
Image generation and editing through the google-genai SDK.

Results are returned as data URLs so callers can embed them directly.
"""
import logging
from typing import Optional

from google import genai
from google.genai import types

from study_copilot.config import settings as config
from study_copilot.core.errors import ErrorKind, GenerationError
from study_copilot.core.fallback import run_with_fallback
from study_copilot.core.schemas import Part

logger = logging.getLogger(__name__)

IMAGE_SIZES = ("1K", "2K", "4K")
ASPECT_RATIOS = ("1:1", "3:4", "4:3", "9:16", "16:9")


class ImageStudio:
    """Generates and edits illustrations for study material."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        client: Optional[genai.Client] = None,
        pro_model: str = config.IMAGE_MODEL_PRO,
        fast_model: str = config.IMAGE_MODEL_FAST
    ):
        if client is None:
            if not api_key:
                raise ValueError("GOOGLE_API_KEY is required for image generation")
            client = genai.Client(api_key=api_key)
        self.client = client
        self.pro_model = pro_model
        self.fast_model = fast_model

    async def generate_image(self, prompt: str, size: str = "1K", aspect_ratio: str = "1:1") -> str:
        """
        Generate an image from a prompt.

        1K uses the fast model; 2K and 4K use the pro model with an explicit
        image size and fall back to the fast model if the pro model is
        unavailable for the key.

        Returns:
            data URL of the generated image
        """
        if size not in IMAGE_SIZES:
            raise ValueError(f"Unsupported image size {size!r}; expected one of {IMAGE_SIZES}")
        if aspect_ratio not in ASPECT_RATIOS:
            raise ValueError(f"Unsupported aspect ratio {aspect_ratio!r}; expected one of {ASPECT_RATIOS}")

        fast_config = types.GenerateContentConfig(
            image_config=types.ImageConfig(aspect_ratio=aspect_ratio)
        )
        if size == "1K":
            response = await self._generate(self.fast_model, [prompt], fast_config)
        else:
            pro_config = types.GenerateContentConfig(
                image_config=types.ImageConfig(aspect_ratio=aspect_ratio, image_size=size)
            )
            response = await run_with_fallback(
                lambda: self._generate(self.pro_model, [prompt], pro_config),
                lambda: self._generate(self.fast_model, [prompt], fast_config),
                label=self.pro_model
            )
        return _first_image_url(response, "No image generated")

    async def edit_image(self, image: Part, prompt: str) -> str:
        """
        Edit an image according to a text instruction.

        Returns:
            data URL of the edited image
        """
        contents = [
            types.Part.from_bytes(data=image.data, mime_type=image.mime_type),
            prompt,
        ]
        response = await self._generate(self.fast_model, contents)
        return _first_image_url(response, "No edited image generated")

    async def _generate(self, model: str, contents: list, generate_config=None):
        logger.info(f"Requesting image from {model}")
        return await self.client.aio.models.generate_content(
            model=model,
            contents=contents,
            config=generate_config
        )


def _first_image_url(response, error_message: str) -> str:
    candidates = getattr(response, "candidates", None) or []
    content = getattr(candidates[0], "content", None) if candidates else None
    for part in getattr(content, "parts", None) or []:
        inline = getattr(part, "inline_data", None)
        if inline is not None and inline.data:
            return Part.from_bytes(inline.data, inline.mime_type or "image/png").to_data_url()
    raise GenerationError(error_message, kind=ErrorKind.UNUSABLE_CONTENT)


def create_image_studio(api_key: Optional[str] = None) -> ImageStudio:
    """Create an ImageStudio from configured models and credentials."""
    return ImageStudio(api_key=api_key or config.GOOGLE_API_KEY)
