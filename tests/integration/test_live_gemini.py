"""
Integration tests against the live Gemini API.

These tests require an API key and will make real API calls.
Run with: pytest tests/integration -v -m integration

Set GOOGLE_API_KEY as an environment variable or in a .env file.
"""
import os

import pytest

from study_copilot.agents import QuizAgent
from study_copilot.core.fallback import create_invoker
from study_copilot.core.schemas import GenerationRequest, ModelTier, Part
from study_copilot.pipeline import PipelineStage, StudyPipeline

pytestmark = pytest.mark.skipif(
    not os.getenv("GOOGLE_API_KEY"),
    reason="GOOGLE_API_KEY not set"
)


@pytest.mark.integration
@pytest.mark.asyncio
async def test_secondary_tier_roundtrip():
    """A short secondary-tier call returns text."""
    invoker = create_invoker()
    response = await invoker.invoke(GenerationRequest(
        model_tier=ModelTier.SECONDARY,
        input=(Part.from_text("Reply with the single word: ready"),),
    ))
    assert response.text.strip()


@pytest.mark.integration
@pytest.mark.asyncio
async def test_photosynthesis_pipeline():
    """Full run on a real model; the primary tier may fall back silently."""
    pipeline = StudyPipeline(create_invoker(), "Photosynthesis")

    package = await pipeline.run()

    assert pipeline.stage == PipelineStage.READY
    assert pipeline.topic_context is not None
    assert package.notes_markdown.strip()

    quiz = await QuizAgent(pipeline.invoker).generate(package.notes_markdown)
    assert len(quiz) in (0, 5)
