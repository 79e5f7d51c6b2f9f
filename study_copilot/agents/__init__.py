"""
Study Copilot Agents Module

Single-shot generators layered on the FallbackInvoker: quiz synthesis,
deep-dive tutoring and audio transcription.
"""

from .base_agent import BaseAgent
from .quiz_agent import QuizAgent
from .deep_dive_agent import DeepDiveAgent, DeepDiveSession
from .transcription_agent import TranscriptionAgent

# Import prompts module for easy access
from . import prompts

__all__ = [
    "BaseAgent",
    "QuizAgent",
    "DeepDiveAgent",
    "DeepDiveSession",
    "TranscriptionAgent",
    "prompts",
]
