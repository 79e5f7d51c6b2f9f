import logging
from typing import List

from pydantic import ValidationError

from study_copilot.config import settings as config
from study_copilot.core.extraction import extract_json
from study_copilot.core.schemas import Part, QuizItem

from .base_agent import BaseAgent
from .prompts import QUIZ_RESPONSE_SCHEMA, get_quiz_prompt

logger = logging.getLogger(__name__)


class QuizAgent(BaseAgent):
    """
    Generates a multiple-choice quiz from study notes.

    Output is best-effort: the result is either exactly QUIZ_QUESTION_COUNT
    valid items or an empty list.
    """

    def __init__(
        self,
        invoker,
        question_count: int = config.QUIZ_QUESTION_COUNT,
        context_chars: int = config.QUIZ_CONTEXT_CHARS
    ):
        super().__init__(invoker)
        self.question_count = question_count
        self.context_chars = context_chars

    def get_system_prompt(self) -> str:
        return ""

    async def generate(self, notes: str) -> List[QuizItem]:
        """
        Generate quiz questions for the notes.

        Args:
            notes: Study notes markdown (truncated to context_chars)

        Returns:
            Validated quiz items, or [] on any failure
        """
        prompt = get_quiz_prompt((notes or "")[:self.context_chars], self.question_count)
        try:
            response = await self._generate(
                [Part.from_text(prompt)],
                structured_output_schema=QUIZ_RESPONSE_SCHEMA,
            )
            payload = extract_json(response.text)
        except Exception as e:
            logger.warning(f"Quiz generation failed: {e}")
            return []

        if not isinstance(payload, list):
            logger.warning("Quiz payload is not a JSON array, discarding")
            return []

        items = self._validate_items(payload)
        if len(items) != self.question_count:
            logger.warning(
                f"Quiz rejected: {len(items)} valid questions, expected {self.question_count}"
            )
            return []
        return items

    def _validate_items(self, payload: list) -> List[QuizItem]:
        """Keep items that validate as QuizItem; never coerce invalid ones."""
        items = []
        for raw_item in payload:
            if not isinstance(raw_item, dict):
                logger.warning(f"Dropping non-object quiz item: {raw_item!r}")
                continue
            try:
                items.append(QuizItem.model_validate(raw_item))
            except ValidationError as e:
                logger.warning(f"Dropping invalid quiz item {raw_item.get('id')!r}: {e.error_count()} error(s)")
        return items
