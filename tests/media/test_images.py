"""
Tests for image generation and editing.
"""
from types import SimpleNamespace

import pytest
from unittest.mock import AsyncMock, MagicMock

from study_copilot.core.errors import ErrorKind, GenerationError
from study_copilot.core.schemas import Part
from study_copilot.media.images import ImageStudio


def image_response(data=b"\x89PNG", mime_type="image/png"):
    parts = [SimpleNamespace(inline_data=None, text="Here is your image")]
    if data is not None:
        parts.append(SimpleNamespace(inline_data=SimpleNamespace(data=data, mime_type=mime_type)))
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=parts))])


@pytest.fixture
def genai_client():
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(return_value=image_response())
    return client


@pytest.fixture
def studio(genai_client):
    return ImageStudio(client=genai_client, pro_model="image-pro", fast_model="image-fast")


def models_called(genai_client):
    return [c.kwargs["model"] for c in genai_client.aio.models.generate_content.call_args_list]


class TestGenerateImage:
    """Test size-based model selection and fallback"""

    @pytest.mark.asyncio
    async def test_1k_uses_fast_model(self, studio, genai_client):
        url = await studio.generate_image("A chloroplast", size="1K", aspect_ratio="16:9")

        assert url == "data:image/png;base64,iVBORw=="
        assert models_called(genai_client) == ["image-fast"]
        image_config = genai_client.aio.models.generate_content.call_args.kwargs["config"].image_config
        assert image_config.aspect_ratio == "16:9"
        assert image_config.image_size is None

    @pytest.mark.asyncio
    async def test_4k_uses_pro_model_with_size(self, studio, genai_client):
        await studio.generate_image("A chloroplast", size="4K")

        assert models_called(genai_client) == ["image-pro"]
        image_config = genai_client.aio.models.generate_content.call_args.kwargs["config"].image_config
        assert image_config.image_size == "4K"

    @pytest.mark.asyncio
    async def test_unavailable_pro_falls_back(self, studio, genai_client):
        genai_client.aio.models.generate_content = AsyncMock(side_effect=[
            Exception("404 NOT_FOUND"),
            image_response(),
        ])

        url = await studio.generate_image("A chloroplast", size="2K")

        assert url.startswith("data:image/png;base64,")
        assert models_called(genai_client) == ["image-pro", "image-fast"]
        fallback_config = genai_client.aio.models.generate_content.call_args.kwargs["config"]
        assert fallback_config.image_config.image_size is None

    @pytest.mark.asyncio
    async def test_no_image_is_unusable(self, studio, genai_client):
        genai_client.aio.models.generate_content = AsyncMock(return_value=image_response(data=None))

        with pytest.raises(GenerationError) as exc_info:
            await studio.generate_image("Nothing")
        assert exc_info.value.kind == ErrorKind.UNUSABLE_CONTENT

    @pytest.mark.asyncio
    async def test_invalid_size(self, studio):
        with pytest.raises(ValueError):
            await studio.generate_image("x", size="8K")


class TestEditImage:
    @pytest.mark.asyncio
    async def test_edit_uses_fast_model(self, studio, genai_client):
        source = Part.from_bytes(b"jpeg-bytes", "image/jpeg")

        url = await studio.edit_image(source, "Add a retro filter")

        assert url == "data:image/png;base64,iVBORw=="
        assert models_called(genai_client) == ["image-fast"]
        contents = genai_client.aio.models.generate_content.call_args.kwargs["contents"]
        assert contents[0].inline_data.data == b"jpeg-bytes"
        assert contents[1] == "Add a retro filter"
