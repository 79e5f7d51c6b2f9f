"""
Study Copilot - A Multimodal Study Package Generator

This package turns a topic (optionally with an image or video) into a
learning package by driving Google Gemini through dependent phases:
- Fact and context retrieval with Google Search grounding
- Study plan analysis with a deep reasoning budget
- Smart notes authoring
- On-demand interactive simulator synthesis

Main Modules:
- core: Error taxonomy, data model, structured extraction, fallback invoker
- pipeline: LangGraph-based study pipeline state machine
- agents: Quiz, deep-dive tutoring and transcription generators
- media: Video (polled long-running jobs) and image generation
- config: Settings from environment, .env or GCP Secret Manager

Usage:
    from study_copilot.core.fallback import create_invoker
    from study_copilot.pipeline import StudyPipeline

    pipeline = StudyPipeline(create_invoker(), "Photosynthesis")
    package = await pipeline.run()
    simulator = await pipeline.synthesize_simulator()
"""

__version__ = "0.1.0"
__author__ = "Study Copilot Team"

__all__ = ["__version__", "__author__"]
