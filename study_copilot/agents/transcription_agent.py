from study_copilot.core.schemas import Part

from .base_agent import BaseAgent
from .prompts import TRANSCRIPTION_INSTRUCTION


class TranscriptionAgent(BaseAgent):
    """Speech-to-text for recorded topic prompts."""

    def get_system_prompt(self) -> str:
        return ""

    async def transcribe(self, audio: Part) -> str:
        """Transcribe an inline audio part. Returns "" when the model says nothing."""
        if audio.mime_type is None or not audio.mime_type.startswith("audio/"):
            raise ValueError(f"Expected an audio part, got {audio.mime_type!r}")
        response = await self._generate([audio, Part.from_text(TRANSCRIPTION_INSTRUCTION)])
        return response.text
